"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from fupisha.dependencies import get_auth_resource, get_current_user
from fupisha.errors import AuthenticationError
from fupisha.models import User
from fupisha.schemas.auth import AuthResponse, PasswordChange, UserLogin, UserRegister, UserResponse
from fupisha.services.auth import AuthResource

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    auth: AuthResource = Depends(get_auth_resource)
):
    """Register a new user. A taken email answers 409."""
    user, access_token = auth.register(user_data.email, user_data.password, user_data.name)
    return AuthResponse(access_token=access_token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    auth: AuthResource = Depends(get_auth_resource)
):
    """Login with email and password."""
    try:
        user, access_token = auth.login(credentials.email, credentials.password)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    return AuthResponse(access_token=access_token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return current_user


@router.post("/password", response_model=UserResponse)
def change_password(
    body: PasswordChange,
    current_user: User = Depends(get_current_user),
    auth: AuthResource = Depends(get_auth_resource)
):
    try:
        return auth.change_password(current_user.id, body.old_password, body.new_password)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
