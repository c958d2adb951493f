from fastapi import FastAPI

from guck.apps.api import router
from guck.config.settings import get_settings

settings = get_settings()

app = FastAPI(
    title="guck",
    version="0.1.0",
    description="Local code review: serves the diff of a git repository to the review UI",
)

if settings.DEBUG:
    print(f"🔧 DEBUG mode: reviewing {settings.REPO_PATH} ({settings.DIFF_MODE} mode)")

app.include_router(router.router, prefix="/api")


@app.get("/health")
@app.get("/api/health")
async def health_check():
    """
    Simple health check endpoint to confirm the API is running.
    """
    return {"status": "ok"}
