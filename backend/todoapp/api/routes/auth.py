from fastapi import APIRouter, Depends, status
from todoapp.api.dependencies import (
    get_auth_service,
    get_bearer_token,
    get_current_identity,
)
from todoapp.core.security import Identity
from todoapp.schemas.auth import LoginBody, RegisterBody
from todoapp.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(body: RegisterBody, service: AuthService = Depends(get_auth_service)):
    """Register a new user"""
    result = service.register(body.email, body.password, body.name)
    return {
        "message": "User registered successfully",
        "user": result.user.model_dump(),
        "token": result.token,
    }


@router.post("/login")
def login(body: LoginBody, service: AuthService = Depends(get_auth_service)):
    """Login and get a token"""
    result = service.login(body.email, body.password)
    return {
        "message": "Login successful",
        "user": result.user.model_dump(),
        "token": result.token,
    }


@router.get("/profile")
def profile(
    identity: Identity = Depends(get_current_identity),
    service: AuthService = Depends(get_auth_service),
):
    """Get the authenticated user's profile"""
    return {"user": service.get_profile(identity.user_id).model_dump()}


@router.post("/refresh")
def refresh(
    token: str = Depends(get_bearer_token),
    service: AuthService = Depends(get_auth_service),
):
    """Exchange a still-valid token for one with a fresh expiry"""
    return {"message": "Token refreshed successfully", "token": service.refresh(token)}
