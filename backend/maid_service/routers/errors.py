import logging
from typing import NoReturn

from fastapi import HTTPException

from maid_service.services.errors import (
    MarketplaceConflictError,
    MarketplaceError,
    MarketplaceNotFoundError,
)

logger = logging.getLogger(__name__)


def raise_marketplace_http_error(exc: MarketplaceError) -> NoReturn:
    if isinstance(exc, MarketplaceNotFoundError):
        status_code = 404
    elif isinstance(exc, MarketplaceConflictError):
        status_code = 409
    else:
        status_code = 400
    logger.warning("request_rejected status=%s error=%s detail=%s", status_code, type(exc).__name__, exc)
    raise HTTPException(status_code=status_code, detail=str(exc)) from exc
