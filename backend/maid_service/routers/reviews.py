from fastapi import APIRouter, Depends

from maid_service.models import Review, ReviewCreateRequest
from maid_service.routers.errors import raise_marketplace_http_error
from maid_service.services.errors import MarketplaceError
from maid_service.services.marketplace import Marketplace, get_marketplace

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=Review)
def record_review(request: ReviewCreateRequest, market: Marketplace = Depends(get_marketplace)):
    try:
        return market.ratings.record_review(
            booking_id=request.booking_id,
            customer_id=request.customer_id,
            provider_id=request.provider_id,
            rating=request.rating,
            text=request.text,
        )
    except MarketplaceError as exc:
        raise_marketplace_http_error(exc)


@router.get("/{provider_id}", response_model=list[Review])
def list_provider_reviews(provider_id: str, market: Marketplace = Depends(get_marketplace)):
    return market.ratings.list_reviews(provider_id)
