import os

DATABASE_URL = os.getenv("DATABASE_URL", "postgresql+psycopg2://postgres:postgres@db:5432/dashboard")

ADMIN_TOKEN = os.getenv("ADMIN_TOKEN", "")
JWT_SECRET = os.getenv("JWT_SECRET", "")
DEV_MODE = os.getenv("DEV_MODE", "false").lower() == "true"

METRICS_MAX_WORKERS = int(os.getenv("METRICS_MAX_WORKERS", "8"))
GHOST_AFTER_DAYS = int(os.getenv("GHOST_AFTER_DAYS", "7"))
COHORT_LOOKBACK_WEEKS = int(os.getenv("COHORT_LOOKBACK_WEEKS", "12"))
COHORT_DISPLAY_LIMIT = int(os.getenv("COHORT_DISPLAY_LIMIT", "8"))
FUNNEL_TRENDS_DEFAULT_DAYS = int(os.getenv("FUNNEL_TRENDS_DEFAULT_DAYS", "30"))
FUNNEL_TRENDS_ALL_DAYS = int(os.getenv("FUNNEL_TRENDS_ALL_DAYS", "90"))

QUALITY_PROFILE_STATUSES = tuple(
    s.strip()
    for s in os.getenv("QUALITY_PROFILE_STATUSES", "live,waitlisted").split(",")
    if s.strip()
)

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if o.strip()
]
