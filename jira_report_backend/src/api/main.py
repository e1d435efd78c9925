from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..core.config import get_settings
from ..core.errors import install_exception_handlers
from ..core.logging import configure_logging, install_request_logging
from ..core.urls import validate_issue_management
from ..models.common import HealthResponse
from .routes.issues import router as issues_router

API_VERSION = "1.0.0"

settings = get_settings()
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Checked once at import; the issues route re-checks per request.
tracker_problem = validate_issue_management(settings.JIRA_SYSTEM, settings.JIRA_BROWSE_URL)
if tracker_problem is not None:
    logger.warning("Issue downloads are disabled: %s", tracker_problem)

app = FastAPI(
    title=settings.APP_NAME,
    description="Downloads the JIRA issues of one project and returns them normalized for release reports",
    version=API_VERSION,
    openapi_tags=[
        {"name": "JIRA", "description": "Report issues downloaded from JIRA"},
        {"name": "Health", "description": "Service and tracker configuration status"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS or ["*"],
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)
install_request_logging(app)
install_exception_handlers(app)


# PUBLIC_INTERFACE
@app.get("/", tags=["Health"], summary="Health Check", response_model=HealthResponse)
def health_check():
    """Report liveness and whether a JIRA project is configured."""
    return HealthResponse(
        status="ok",
        app=settings.APP_NAME,
        environment=settings.APP_ENV,
        jira_configured=tracker_problem is None,
    )


api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(issues_router)
app.include_router(api_v1)
