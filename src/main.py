from __future__ import annotations

from fastapi import FastAPI

from src.application.dtos.common_dto import HealthResponse, RootResponse
from src.infrastructure.api.middlewares import add_default_middlewares
from src.infrastructure.api.routes.auth_routes import router as auth_router
from src.infrastructure.api.routes.navigation_routes import router as navigation_router
from src.infrastructure.api.routes.profile_routes import router as profile_router
from src.infrastructure.logging_config import configure_logging


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Job Board Backend",
        version="0.1.0",
        description="""
        ## Job Board Backend API

        FastAPI backend for the Home Jobs for Women job board, using Supabase
        for auth and the profile store and a hosted endpoint for subscriptions.

        ### Features
        - **Navigation**: Link set for the site header, depending on whether the caller is signed in
        - **Authentication**: Session lookup and sign-out through Supabase
        - **Profile**: Tabbed profile form (personal, billing, preferences) with whole-draft saves
        - **Billing**: Current subscription summary and a checkout trigger to extend it

        ### Authentication
        Endpoints other than root, health and navigation require a Bearer token
        in the Authorization header:
        ```
        Authorization: Bearer your-jwt-token
        ```

        ### Notifications
        Actions answer with `notifications` (success or error toasts) and, where
        the user should move on, a `redirect_to` route.

        ### Error Responses
        - **401 Unauthorized**: Missing or invalid authentication token
        - **409 Conflict**: Action not available in the current state
        - **422 Unprocessable Entity**: Validation error in request body or path
        - **502 Bad Gateway**: The profile store or subscription endpoint failed
        """,
        contact={
            "name": "Home Jobs for Women",
            "email": "support@homejobsforwomen.com",
        },
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )
    add_default_middlewares(app)

    @app.get(
        "/",
        response_model=RootResponse,
        summary="API Root",
        description="Get basic information about the Job Board API",
        response_description="API information including status and version",
    )
    def root():
        """Get API root information."""
        return {"status": "ok", "service": "jobboard-backend", "version": app.version}

    @app.get(
        "/health",
        response_model=HealthResponse,
        summary="Health Check",
        description="Check if the API service is running and healthy",
        response_description="Health status of the API service",
    )
    def health():
        """Check API health status."""
        return {"status": "healthy"}

    app.include_router(auth_router)
    app.include_router(navigation_router)
    app.include_router(profile_router)
    return app


app = create_app()
