import base64
import hashlib
import hmac
import logging
import os
from datetime import datetime, timedelta, timezone
from typing import NamedTuple, Optional

from fastapi import Header, HTTPException, status

from maid_service.models import User, UserRole

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL_HOURS = 24


def _read_ttl_hours() -> int:
    raw = os.getenv("AUTH_TOKEN_TTL_HOURS", str(DEFAULT_TOKEN_TTL_HOURS))
    try:
        value = int(raw)
    except ValueError:
        logger.warning("AUTH_TOKEN_TTL_HOURS=%r is not an integer; using %s", raw, DEFAULT_TOKEN_TTL_HOURS)
        return DEFAULT_TOKEN_TTL_HOURS
    if value <= 0:
        logger.warning("AUTH_TOKEN_TTL_HOURS=%r is not positive; using %s", raw, DEFAULT_TOKEN_TTL_HOURS)
        return DEFAULT_TOKEN_TTL_HOURS
    return value


TOKEN_TTL_HOURS = _read_ttl_hours()
_AUTH_SECRET = os.getenv("AUTH_SECRET", "dev-insecure-secret-change-me")


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("utf-8").rstrip("=")


def _b64urldecode(value: str) -> bytes:
    padding = "=" * ((4 - len(value) % 4) % 4)
    return base64.urlsafe_b64decode((value + padding).encode("utf-8"))


class TokenClaims(NamedTuple):
    user_id: str
    role: UserRole


def create_access_token(user: User) -> tuple[str, str]:
    expiry = datetime.now(timezone.utc) + timedelta(hours=TOKEN_TTL_HOURS)
    payload = f"{user.id}|{user.role.value}|{int(expiry.timestamp())}".encode("utf-8")
    sig = hmac.new(_AUTH_SECRET.encode("utf-8"), payload, hashlib.sha256).digest()
    token = f"{_b64url(payload)}.{_b64url(sig)}"
    return token, expiry.isoformat()


def verify_access_token(token: str) -> Optional[TokenClaims]:
    try:
        payload_part, sig_part = token.split(".", 1)
        payload = _b64urldecode(payload_part)
        sent_sig = _b64urldecode(sig_part)
        user_id, role, expiry_ts = payload.decode("utf-8").rsplit("|", 2)
        claims = TokenClaims(user_id=user_id, role=UserRole(role))
        expires_at = int(expiry_ts)
    except (ValueError, UnicodeDecodeError):
        return None
    expected_sig = hmac.new(_AUTH_SECRET.encode("utf-8"), payload, hashlib.sha256).digest()
    if not hmac.compare_digest(sent_sig, expected_sig):
        return None
    if datetime.now(timezone.utc).timestamp() > expires_at:
        return None
    return claims


def parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def resolve_request_user(authorization: Optional[str]) -> Optional[TokenClaims]:
    token = parse_bearer_token(authorization)
    if not token:
        return None
    return verify_access_token(token)


def require_authenticated_user(authorization: Optional[str] = Header(default=None)) -> TokenClaims:
    claims = resolve_request_user(authorization)
    if not claims:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or missing bearer token")
    return claims
