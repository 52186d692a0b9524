import logging
from typing import Optional

from flask import Flask, jsonify

from zoo_registry.controllers.registration_controller import (
    SERVICE_EXTENSION_KEY,
    registration_bp,
)
from zoo_registry.core.config import BACKEND_SQL, Settings, get_settings, log_settings
from zoo_registry.core.logging_config import setup_logging
from zoo_registry.db.seed import seed_demo_population
from zoo_registry.db.session import SessionLocal, create_tables, get_engine
from zoo_registry.repositories import create_repositories
from zoo_registry.services.registration_service import RegistrationService

logger = logging.getLogger(__name__)


def build_service(settings: Settings) -> RegistrationService:
    """Wire repositories for the configured backend into a service."""
    db_session = None
    if settings.repository_backend == BACKEND_SQL:
        create_tables(get_engine(settings.database_url))
        db_session = SessionLocal(settings.database_url)
    repos = create_repositories(settings.repository_backend, db_session)
    return RegistrationService(repos.attractions, repos.guests, repos.instructors)


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[RegistrationService] = None,
) -> Flask:
    settings = settings or get_settings()

    app = Flask(__name__)
    setup_logging(
        app=app,
        log_level=settings.log_level,
        log_to_file=settings.log_to_file,
        use_json_format=settings.log_json,
    )
    log_settings(settings)

    if service is None:
        service = build_service(settings)
        if settings.seed_demo_data:
            seed_demo_population(service)

    app.extensions[SERVICE_EXTENSION_KEY] = service
    app.register_blueprint(registration_bp)

    @app.route("/health")
    def health_check():
        """Liveness plus a quick look at what is loaded."""
        return jsonify(
            {
                "status": "healthy",
                "backend": settings.repository_backend,
                "attractions": len(service.list_attractions()),
                "guests": len(service.list_guests()),
                "instructors": len(service.list_instructors()),
            }
        )

    @app.cli.command("seed-demo")
    def seed_demo_command():
        """Populate the configured store with the demo data."""
        if seed_demo_population(app.extensions[SERVICE_EXTENSION_KEY]):
            print("Demo data seeded.")
        else:
            print("Demo data already present, nothing to do.")

    logger.info(
        "Application created",
        extra={"context": {"backend": settings.repository_backend}},
    )
    return app


if __name__ == "__main__":
    create_app().run()
