import math
from typing import Any, Optional

from maid_service.services.errors import MarketplaceValidationError


def require_text(value: Optional[str], message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise MarketplaceValidationError(message)
    return value.strip()


def is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def require_amount(value: Any, message: str, *, allow_zero: bool = True) -> float:
    if not is_number(value) or value < 0 or (value == 0 and not allow_zero):
        raise MarketplaceValidationError(message)
    return float(value)


def format_amount(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:.2f}"
