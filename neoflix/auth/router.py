"""
Authentication router.

This module provides FastAPI router for authentication endpoints:
- User registration
- User login
- Current user lookup from a bearer token
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from neoflix.base_microservice import BaseMicroservice
from neoflix.auth.errors import ValidationError
from neoflix.auth.jwt import InvalidToken
from neoflix.auth.users import AuthService, UserCreate, UserLogin

# Create router
router = APIRouter(tags=["auth"])

# Create service instance
base_service = BaseMicroservice("auth")

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    """Dependency returning the AuthService built at startup."""
    return request.app.state.auth_service


@router.post("/register")
async def register_user(
    user_data: UserCreate,
    auth: AuthService = Depends(get_auth_service)
):
    """
    Register a new user.

    Returns:
        MCP response with the user and their token
    """
    try:
        user = await auth.register(user_data.email, user_data.password, user_data.name)
    except ValidationError as e:
        base_service.log_event("user.register.failed", {
            "email": user_data.email,
            "reason": e.message
        })
        raise
    except Exception as e:
        base_service.log_error(e, context="User registration")
        raise

    base_service.log_event("user.registered", {
        "userId": user["userId"],
        "email": user["email"]
    })
    return base_service.mcp_response(data=user, message="User registered successfully")


@router.post("/login")
async def login(
    login_data: UserLogin,
    auth: AuthService = Depends(get_auth_service)
):
    """
    Authenticate a user and return a token.

    Returns:
        MCP response with the user and their token
    """
    try:
        user = await auth.authenticate(login_data.email, login_data.password)
    except ValidationError as e:
        # Log failed login attempt
        base_service.log_event("user.login.failed", {
            "email": login_data.email,
            "reason": e.message
        })
        raise
    except Exception as e:
        base_service.log_error(e, context="User login")
        raise

    base_service.log_event("user.login", {"userId": user["userId"]})
    return base_service.mcp_response(data=user, message="Login successful")


@router.get("/me")
async def get_current_user_info(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth: AuthService = Depends(get_auth_service)
):
    """
    Get the identity carried by the bearer token.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    try:
        user = auth.current_user(credentials.credentials)
    except InvalidToken:
        raise credentials_exception

    return base_service.mcp_response(data=user, message="User information retrieved successfully")
