import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Response, status

from carwash.core.config import settings
from carwash.core.dependencies import optional_admin, require_admin
from carwash.core.security import create_access_token, get_password_hash, verify_password
from carwash.schemas.auth import LoginRequest, PasswordHashRequest, PasswordHashResponse, SessionResponse

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("", response_model=SessionResponse)
def login(credentials: LoginRequest, response: Response):
    """Admin login; issues the session cookie"""
    if not credentials.username or not credentials.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username and password are required"
        )

    if credentials.username != settings.ADMIN_USERNAME or not verify_password(
        credentials.password, settings.ADMIN_PASSWORD_HASH
    ):
        logger.warning(f"Failed admin login for '{credentials.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    token = create_access_token(
        data={"username": credentials.username},
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.IS_PRODUCTION,
        samesite="strict",
        path="/",
    )
    logger.info(f"Admin '{credentials.username}' logged in")
    return {"authenticated": True, "username": credentials.username}

@router.get("", response_model=SessionResponse)
def get_session(admin_username: str = Depends(optional_admin)):
    return {"authenticated": admin_username is not None, "username": admin_username}

@router.delete("", response_model=SessionResponse)
def logout(response: Response):
    response.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.IS_PRODUCTION,
        samesite="strict",
    )
    return {"authenticated": False, "username": None}

@router.post("/password-hash", response_model=PasswordHashResponse)
def generate_password_hash(
    body: PasswordHashRequest,
    admin_username: str = Depends(require_admin)
):
    """bcrypt hash for provisioning ADMIN_PASSWORD_HASH"""
    if not body.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Password is required"
        )
    return {"hash": get_password_hash(body.password)}
