"""
fbscore - Grassroots Football League Backend

REST API for a grassroots football league platform. Manages user, team,
match official and admin accounts, team rosters, live match scoring with
per-player statistics, and a simple social feed.

Main components:
- accounts: Password hashing, signed access tokens, one-time codes
- db: SQLAlchemy models and session management
- services: Business rules (matches, registrations, rosters, stats, feed, admin)
- notifications: Transactional email
- web: FastAPI application, routers and response serializers
"""

__version__ = "1.0.0"
