import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from fbscore import __version__
from fbscore.config import settings
from fbscore.errors import FbscoreError
from fbscore.web.routes import admin, matches, players, posts, teams, users

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="fbscore", version=__version__)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Uploaded pictures, logos and post images (disk storage mode)
upload_path = Path(settings.upload_dir)
upload_path.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=upload_path), name="uploads")


def _field_errors(errors: list[dict]) -> list[dict]:
    formatted = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        formatted.append({"field": ".".join(location), "message": error.get("msg", "Invalid value")})
    return formatted


@app.exception_handler(FbscoreError)
async def fbscore_error_handler(request: Request, exc: FbscoreError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request", "errors": _field_errors(exc.errors())},
    )


@app.exception_handler(ValidationError)
async def form_validation_handler(request: Request, exc: ValidationError):
    """Multipart forms are validated inside the route, outside FastAPI's own checks."""
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request", "errors": _field_errors(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


app.include_router(users.router, prefix="/api/auth", tags=["users"])
app.include_router(teams.router, prefix="/api/team", tags=["teams"])
app.include_router(players.router, prefix="/api/player", tags=["players"])
app.include_router(matches.router, prefix="/api/match", tags=["matches"])
app.include_router(posts.router, prefix="/api/posts", tags=["posts"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])


@app.get("/health")
async def health():
    return {"status": "ok", "version": __version__}


# Only for debugging
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "fbscore.web.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
