import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel

from .error import ClientError, ServerError
from .middleware import RequestLoggingMiddleware

logger = logging.getLogger(__name__)

# Server errors whose code may be shown with a fixed public message
PUBLIC_SERVER_MESSAGES = {"SESSION_ERROR": "Authentication error"}


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    if exc.base_error.details:
        error_dict["details"] = exc.base_error.details
    logger.warning(f"Client error on {request.url.path}: {exc.base_error.code}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    code = exc.base_error.code
    error_dict = {
        "code": code,
        "message": PUBLIC_SERVER_MESSAGES.get(code, "Internal server error"),
    }
    logger.error(f"Server error on {request.url.path}: {code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    # Field names and messages only; submitted values are never echoed back
    details = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body") or "body"
        details.setdefault(field, err.get("msg", "Invalid value"))
    error_dict = {"code": "VALIDATION_ERROR", "message": "Invalid input", "details": details}
    logger.warning(f"Request validation failed on {request.url.path}: {sorted(details)}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": error_dict})


def create_app(ApplicationConfig) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from recovery_register.depends import engine, get_auth_settings

        # Refuse to start on an unusable auth policy
        get_auth_settings()
        if ApplicationConfig.AUTO_CREATE_SCHEMA:
            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
        yield

    app = FastAPI(title="Recovery Register Auth", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if ApplicationConfig.ENABLE_LOGGING_MIDDLEWARE:
        app.add_middleware(RequestLoggingMiddleware)

    from recovery_register.api.routes import account, admin, audit, auth, health_check

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, prefix=prefix, tags=["Authentication"])
    app.include_router(account.router, prefix=prefix, tags=["Account"])
    app.include_router(admin.router, prefix=prefix, tags=["Admin"])
    app.include_router(audit.router, prefix=prefix, tags=["Audit"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

    return app
