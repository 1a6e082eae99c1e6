"""One APIRouter per area, mounted under /api by web/main.py."""
