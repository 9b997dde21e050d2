from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from neoflix.base_microservice import Base, BaseMicroservice, create_session_factory
from neoflix.config import Settings, get_settings
from neoflix.auth.errors import ValidationError
from neoflix.auth.passwords import PasswordHasher
from neoflix.auth.router import router as auth_router
from neoflix.auth.store import InMemoryUserStore, SQLAlchemyUserStore
from neoflix.auth.users import AuthService

# Create shared base microservice instance
base_service = BaseMicroservice("main")


def build_auth_service(settings: Settings, store) -> AuthService:
    return AuthService(
        store,
        settings.jwt_secret_key,
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes)
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI.
    Builds the auth service on startup and releases the engine on shutdown.
    """
    settings = get_settings()
    if not settings.jwt_secret_key:
        raise RuntimeError("JWT_SECRET_KEY must be set")

    engine = None
    try:
        if settings.user_store == "memory":
            store = InMemoryUserStore()
        else:
            engine, session_factory = create_session_factory(settings.database_url)
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            store = SQLAlchemyUserStore(session_factory)

        app.state.auth_service = build_auth_service(settings, store)
        base_service.log_event("service.startup", {"service": "main", "user_store": settings.user_store})
        yield
    finally:
        if engine is not None:
            await engine.dispose()
        base_service.log_event("service.shutdown", {"service": "main"})


# Create main FastAPI app with lifespan
app = FastAPI(
    title="Neoflix Auth API",
    description="User registration and authentication",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, replace with specific origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return base_service.mcp_response(
        data={"details": exc.details},
        message=exc.message,
        status="error",
        status_code=422
    )


# Include routers with prefixes
app.include_router(auth_router, prefix="/auth", tags=["auth"])


@app.get("/", tags=["root"])
async def root():
    """Root endpoint returning API information."""
    settings = get_settings()
    return {
        "name": settings.app_name,
        "version": settings.version,
        "services": ["auth"]
    }


@app.get("/health", tags=["health"])
async def health_check():
    """Overall system health check."""
    return {
        "status": "ok",
        "services": {
            "auth": "online"
        }
    }


# For running directly with uvicorn
if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run("neoflix.main:app", host=settings.host, port=settings.port, log_level="info")
