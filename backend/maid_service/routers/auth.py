from fastapi import APIRouter, Depends, HTTPException

from maid_service.auth import TokenClaims, create_access_token, require_authenticated_user
from maid_service.models import AuthLoginRequest, AuthMeResponse, AuthRegisterRequest, AuthSession, User
from maid_service.routers.errors import raise_marketplace_http_error
from maid_service.services.errors import MarketplaceError, MarketplaceNotFoundError
from maid_service.services.marketplace import Marketplace, get_marketplace

router = APIRouter(prefix="/auth", tags=["auth"])


def _session_for(user: User) -> AuthSession:
    token, expires_at = create_access_token(user)
    return AuthSession(user=user, token=token, expires_at=expires_at)


@router.post("/register", response_model=AuthSession)
def register(payload: AuthRegisterRequest, market: Marketplace = Depends(get_marketplace)):
    try:
        user = market.users.register(name=payload.name, phone=payload.phone, role=payload.role)
    except MarketplaceError as exc:
        raise_marketplace_http_error(exc)
    return _session_for(user)


@router.post("/login", response_model=AuthSession)
def login(payload: AuthLoginRequest, market: Marketplace = Depends(get_marketplace)):
    try:
        user = market.users.login(phone=payload.phone)
    except MarketplaceError as exc:
        raise_marketplace_http_error(exc)
    return _session_for(user)


@router.get("/me", response_model=AuthMeResponse)
def me(
    claims: TokenClaims = Depends(require_authenticated_user),
    market: Marketplace = Depends(get_marketplace),
):
    try:
        user = market.users.get(claims.user_id)
    except MarketplaceNotFoundError:
        raise HTTPException(status_code=401, detail="Token user no longer exists")
    if user.role is not claims.role:
        raise HTTPException(status_code=401, detail="Token role does not match user")
    return AuthMeResponse(user=user)
