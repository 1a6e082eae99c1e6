"""HTTP API for fbscore (FastAPI)."""
