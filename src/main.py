from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from .config import Settings
from .db.core import Base, build_engine, build_session_factory
from .logging_config import setup_logging, get_logger
from .routers.auth import router as auth_router
from .routers.transactions import router as transactions_router
from .routers.sales import router as sales_router
from .routers.metrics import router as metrics_router
from .routers.frontend import router as frontend_router

logger = get_logger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    return f"Invalid {field}: {first.get('msg')}" if field else f"Invalid request: {first.get('msg')}"


def register_exception_handlers(app: FastAPI) -> None:
    """Every failure leaves the API as {"error": "<message>"}"""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging()
    if settings.is_production and settings.session_secret == Settings.session_secret:
        logger.warning("SESSION_SECRET is not set; sessions are signed with the development default")

    engine = build_engine(settings)
    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)

    app = FastAPI(title="Business Dashboard API")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    # Sliding expiry: the cookie is re-signed with a fresh max_age on every
    # response while the session holds data
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age,
        same_site="strict" if settings.is_production else "lax",
        https_only=settings.is_production,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(sales_router)
    app.include_router(metrics_router)
    app.include_router(transactions_router)
    # Catch-all routes, must stay last
    app.include_router(frontend_router)

    logger.info(
        f"Dashboard API configured: environment={settings.environment}, "
        f"database={engine.url.render_as_string(hide_password=True)}, "
        f"cors_origins={settings.cors_origins}"
    )
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host="0.0.0.0", port=app.state.settings.port)
