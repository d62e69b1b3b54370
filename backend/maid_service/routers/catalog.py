from fastapi import APIRouter, Depends

from maid_service.models import Listing, ListingCreateRequest, Provider, Service
from maid_service.routers.errors import raise_marketplace_http_error
from maid_service.services.errors import MarketplaceError
from maid_service.services.marketplace import Marketplace, get_marketplace

router = APIRouter(tags=["catalog"])


@router.get("/services", response_model=list[Service])
def list_services(market: Marketplace = Depends(get_marketplace)):
    return market.catalog.list_services()


@router.get("/providers", response_model=list[Provider])
def list_providers(market: Marketplace = Depends(get_marketplace)):
    return market.catalog.list_providers()


@router.get("/listings", response_model=list[Listing])
def list_listings(market: Marketplace = Depends(get_marketplace)):
    return market.catalog.list_listings()


@router.post("/listings", response_model=Listing)
def create_listing(request: ListingCreateRequest, market: Marketplace = Depends(get_marketplace)):
    try:
        return market.catalog.create_listing(
            provider_id=request.provider_id,
            service_id=request.service_id,
            title=request.title,
            base_price=request.base_price,
            details=request.details,
        )
    except MarketplaceError as exc:
        raise_marketplace_http_error(exc)
