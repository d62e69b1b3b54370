from fastapi import APIRouter, Depends

from maid_service.models import (
    Booking,
    Offer,
    OfferAcceptance,
    OfferCreateRequest,
    OfferMessageRequest,
)
from maid_service.routers.errors import raise_marketplace_http_error
from maid_service.services.errors import MarketplaceError
from maid_service.services.marketplace import Marketplace, get_marketplace

router = APIRouter(tags=["offers"])


@router.get("/offers", response_model=list[Offer])
def list_offers(market: Marketplace = Depends(get_marketplace)):
    return market.negotiation.list_offers()


@router.post("/offers", response_model=Offer)
def create_offer(request: OfferCreateRequest, market: Marketplace = Depends(get_marketplace)):
    try:
        return market.negotiation.create_offer(
            listing_id=request.listing_id,
            customer_id=request.customer_id,
            scope=request.scope,
            price=request.price,
        )
    except MarketplaceError as exc:
        raise_marketplace_http_error(exc)


@router.post("/offers/{offer_id}/message", response_model=Offer)
def add_offer_message(
    offer_id: str,
    request: OfferMessageRequest,
    market: Marketplace = Depends(get_marketplace),
):
    try:
        return market.negotiation.add_message(offer_id, by=request.by, text=request.text, price=request.price)
    except MarketplaceError as exc:
        raise_marketplace_http_error(exc)


@router.post("/offers/{offer_id}/accept", response_model=OfferAcceptance)
def accept_offer(offer_id: str, market: Marketplace = Depends(get_marketplace)):
    try:
        offer, booking = market.negotiation.accept(offer_id)
        return OfferAcceptance(offer=offer, booking=booking)
    except MarketplaceError as exc:
        raise_marketplace_http_error(exc)


@router.post("/offers/{offer_id}/decline", response_model=Offer)
def decline_offer(offer_id: str, market: Marketplace = Depends(get_marketplace)):
    try:
        return market.negotiation.decline(offer_id)
    except MarketplaceError as exc:
        raise_marketplace_http_error(exc)


@router.get("/bookings", response_model=list[Booking])
def list_bookings(market: Marketplace = Depends(get_marketplace)):
    return market.bookings.list_bookings()
