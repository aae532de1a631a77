"""Quart app factory and entry point."""

import asyncio
import structlog
from quart import Quart
from config.settings import settings
from config.logging_config import setup_logging
from storage.database import close_pool

log = structlog.get_logger(__name__)


def create_app() -> Quart:
    """Create and configure the Quart web application."""
    app = Quart(__name__)

    if not settings.database_dsn:
        log.error("missing_database_url", checked=["POSTGRES_URL", "DATABASE_URL"])

    # Register blueprints
    from web.routes.profile import profile_bp

    app.register_blueprint(profile_bp, url_prefix="/api")

    @app.route("/health")
    async def health():
        return {"status": "ok"}, 200

    @app.after_serving
    async def shutdown() -> None:
        await close_pool()

    return app


async def start_web() -> None:
    """Start the web server."""
    app = create_app()
    log.info("starting_profile_api", host=settings.web_host, port=settings.web_port)
    await app.run_task(host=settings.web_host, port=settings.web_port)


def main() -> None:
    """Run the server."""
    setup_logging()
    asyncio.run(start_web())


if __name__ == "__main__":
    main()
