# buildtrack/main.py

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from datetime import datetime, timezone
import os
import logging

from buildtrack.api.auth import router as auth_router
from buildtrack.api.dashboard import router as dashboard_router, widgets_router
from buildtrack.api.i18n import router as i18n_router
from buildtrack.api.profile import router as profile_router, language_router
from buildtrack.api.project import router as project_router, suggestions_router
from buildtrack.api.report import router as report_router
from buildtrack.api.task import router as task_router

from buildtrack.core.settings import settings
from buildtrack.core.exceptions import ApiError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("BuildTrack")

app = FastAPI(
    title="BuildTrack Pro API",
    version="1.0.0",
    description="Construction project management backend",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(language_router)
app.include_router(dashboard_router)
app.include_router(widgets_router)
app.include_router(i18n_router)
app.include_router(suggestions_router)
app.include_router(project_router)
app.include_router(task_router)
app.include_router(report_router)

def _health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENV,
    }

@app.get("/", tags=["Health"])
def root():
    return _health()

@app.get("/api/health", tags=["Health"])
def health():
    return _health()

@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting BuildTrack Pro API ({settings.ENV})")

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Stopping BuildTrack Pro API")

@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_content(),
        headers=exc.headers,
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "buildtrack.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=settings.DEBUG
    )
