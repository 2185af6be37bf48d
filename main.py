from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import logging

from auth import get_password_hash
from config import settings
from database import Database
from exceptions import DonationHubError, InternalError
from logging_config import setup_logging
from models import Account, Role
from routers import auth, donations, inventory, users
from security_middleware import limiter, setup_security

logger = logging.getLogger(__name__)


def seed_default_admin(database: Database) -> None:
    """Create the default admin account when it does not exist yet."""
    db = database.SessionLocal()
    try:
        admin = db.query(Account).filter(Account.username == settings.DEFAULT_ADMIN_USERNAME).first()
        if not admin:
            db.add(Account(
                username=settings.DEFAULT_ADMIN_USERNAME,
                email=settings.DEFAULT_ADMIN_EMAIL,
                password=get_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
                role=Role.ADMIN,
            ))
            db.commit()
            logger.info(f"Default admin user created: {settings.DEFAULT_ADMIN_USERNAME}")
        else:
            logger.info("Admin user already exists")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    database: Database = app.state.database
    logger.info(f"Starting up {settings.APP_NAME} ({settings.ENVIRONMENT})...")

    if settings.uses_insecure_secret:
        logger.warning("JWT_SECRET is not set; using the built-in insecure secret. Set it in production!")

    database.init()
    seed_default_admin(database)
    logger.info("Server ready to accept connections!")

    yield

    logger.info("Shutting down server...")
    database.shutdown()


# ============================================
# Error responses: every failure is {"error": message}
# ============================================

async def donation_hub_error_handler(request: Request, exc: DonationHubError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return JSONResponse(status_code=400, content={"error": "Invalid input"})

    error = errors[0]
    field = str(error["loc"][-1]) if error.get("loc") else "body"
    error_type = error.get("type")
    msg = error.get("msg", "Invalid input")
    if error_type == "missing":
        message = f"{field} is required"
    elif error_type == "value_error":
        # Schema validators already phrase these per field
        message = msg.removeprefix("Value error, ")
    else:
        message = f"{field}: {msg}"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    body = InternalError().to_dict()
    if settings.is_development:
        body["message"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Build the API around a Database; one is created from settings if not given."""
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=f"{settings.APP_NAME} - Donation Management API",
        description="Donations, donation requests, inventory and account administration",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.database = database or Database(settings.DATABASE_URL, echo=settings.SQL_ECHO)

    setup_security(app)

    app.add_exception_handler(DonationHubError, donation_hub_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, unhandled_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(donations.router)
    app.include_router(inventory.router)

    # Health check endpoint
    @app.get("/api/health")
    @limiter.exempt
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok", "message": "Server is running"}

    # Serve the static frontend on every other path
    if settings.FRONTEND_DIR and Path(settings.FRONTEND_DIR).is_dir():
        app.mount("/", StaticFiles(directory=settings.FRONTEND_DIR, html=True), name="frontend")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
