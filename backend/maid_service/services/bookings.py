from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List
from uuid import uuid4

from maid_service.models import Booking, BookingStatus, Offer, OfferStatus
from maid_service.services.errors import MarketplaceConflictError
from maid_service.services.repository import MarketplaceRepository


@dataclass
class BookingFactory:
    repository: MarketplaceRepository

    def create(self, offer: Offer) -> Booking:
        """Derive a confirmed booking from an accepted offer.

        The booking is built but not stored; the caller persists it together
        with the offer's status change.
        """
        if offer.status is not OfferStatus.ACCEPTED:
            raise MarketplaceConflictError("Booking requires an accepted offer")
        return Booking(
            id=f"bkg_{uuid4().hex[:8]}",
            listing_id=offer.listing_id,
            offer_id=offer.id,
            customer_id=offer.customer_id,
            provider_id=offer.provider_id,
            created_at=datetime.now(timezone.utc).isoformat(),
            price=offer.price,
            status=BookingStatus.CONFIRMED,
        )

    def list_bookings(self) -> List[Booking]:
        return self.repository.list_bookings()
