"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agency.api.v1 import account, accounts, auth, claims, persons, policies, reports
from agency.core.config import settings
from agency.core.errors import AgencyError, ConflictError, NotFoundError, ValidationError
from agency.core.logging import get_logger, setup_logging
from agency.services.password_reset import InMemoryResetTokenStore

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging("DEBUG" if settings.APP_ENV == "development" else "INFO")
    startup_logger = get_logger("startup")
    startup_logger.info("Application starting", env=settings.APP_ENV)
    yield
    swept = app.state.reset_tokens.sweep()
    startup_logger.info("Application shutting down", reset_tokens_swept=swept)


app = FastAPI(
    title="Insurance Agency API",
    description="Persons, policies and claims with ownership-scoped access",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.reset_tokens = InMemoryResetTokenStore()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_STATUS_BY_ERROR: dict[type[AgencyError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


@app.exception_handler(AgencyError)
async def agency_error_handler(request: Request, exc: AgencyError) -> JSONResponse:
    """Translate domain errors into HTTP responses."""
    status_code = next(
        (code for error_type, code in _STATUS_BY_ERROR.items() if isinstance(exc, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )
    logger.info(
        "Request rejected",
        path=request.url.path,
        error=type(exc).__name__,
        detail=exc.message,
        status=status_code,
    )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


API_PREFIX = "/api/v1"
app.include_router(auth.router, prefix=API_PREFIX)
app.include_router(account.router, prefix=API_PREFIX)
app.include_router(accounts.router, prefix=API_PREFIX)
app.include_router(persons.router, prefix=API_PREFIX)
app.include_router(policies.router, prefix=API_PREFIX)
app.include_router(claims.router, prefix=API_PREFIX)
app.include_router(reports.router, prefix=API_PREFIX)


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Public health-check endpoint."""
    return {"status": "ok", "env": settings.APP_ENV}
