"""FastAPI application factory."""

from fastapi import FastAPI

from session_costs.api.admin import router as admin_router
from session_costs.api.webhooks import router as webhook_router
from session_costs.app_logging import configure_logging
from session_costs.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    app = FastAPI(title="Session Costs")
    app.state.container = container

    app.include_router(admin_router)
    app.include_router(webhook_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
