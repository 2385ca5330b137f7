import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from Security.activity_logging import configure_security_logging
from Security.error_handling import register_error_handlers
from Security.field_level_encryption import validate_encryption_setup
from Security.metrics import init_metrics
from Security.security_config import security_settings

from .database import Base, engine
from .farming_routes import router as farming_router

logger = logging.getLogger("security.startup")


def startup_event():
    configure_security_logging()
    settings = security_settings()
    logger.info("Encryption write policy: %s", settings["ENCRYPTION_MODE"])
    # New secrets must never be accepted without a working key
    if settings["VALIDATE_ENCRYPTION_ON_STARTUP"]:
        validate_encryption_setup()
    init_metrics()
    Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    startup_event()
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Farming Accounts", lifespan=lifespan)
    register_error_handlers(app)
    app.include_router(farming_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000)
