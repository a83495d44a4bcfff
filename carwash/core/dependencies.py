from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from carwash.core.config import settings
from carwash.core.security import verify_token

security = HTTPBearer(auto_error=False)

def _session_payload(request: Request, credentials: Optional[HTTPAuthorizationCredentials]):
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token and credentials:
        token = credentials.credentials
    if not token:
        return None
    payload = verify_token(token)
    if not payload or payload.get("username") != settings.ADMIN_USERNAME:
        return None
    return payload

async def require_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Reject the request unless it carries a valid admin session"""
    payload = _session_payload(request, credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized"
        )
    return payload["username"]

async def optional_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """Admin username when the caller has a valid session, otherwise None"""
    payload = _session_payload(request, credentials)
    return payload["username"] if payload else None
