"""Offer lifecycle: open a bargaining thread, trade counters, settle it.

An offer starts ``open`` and ends either ``accepted`` (which books the job)
or ``declined``. Once settled, the thread is frozen: no messages, no price
changes, no second settlement.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set, Tuple
from uuid import uuid4

from maid_service.models import Booking, MessageAuthor, Offer, OfferMessage, OfferStatus
from maid_service.services.bookings import BookingFactory
from maid_service.services.errors import (
    MarketplaceConflictError,
    MarketplaceNotFoundError,
    MarketplaceValidationError,
)
from maid_service.services.repository import MarketplaceRepository
from maid_service.services.validation import format_amount, require_amount, require_text

logger = logging.getLogger(__name__)


OFFER_TRANSITIONS: Dict[OfferStatus, Set[OfferStatus]] = {
    OfferStatus.OPEN: {OfferStatus.ACCEPTED, OfferStatus.DECLINED},
    OfferStatus.ACCEPTED: set(),
    OfferStatus.DECLINED: set(),
}

COUNTER_AUTHORS = {MessageAuthor.CUSTOMER, MessageAuthor.PROVIDER, MessageAuthor.HELPER}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class NegotiationEngine:
    repository: MarketplaceRepository
    bookings: BookingFactory

    def list_offers(self) -> List[Offer]:
        return self.repository.list_offers()

    def create_offer(
        self,
        *,
        listing_id: Optional[str],
        customer_id: Optional[str],
        scope: Optional[str],
        price: Any,
    ) -> Offer:
        with self.repository.transaction():
            listing = self.repository.get_listing(listing_id) if listing_id else None
            if not listing:
                raise MarketplaceNotFoundError("Listing not found")
            message = "customerId, scope and a non-negative price are required"
            customer_id = require_text(customer_id, message)
            scope = require_text(scope, message)
            amount = require_amount(price, message)

            offer = Offer(
                id=f"ofr_{uuid4().hex[:8]}",
                listing_id=listing.id,
                customer_id=customer_id,
                provider_id=listing.provider_id,
                scope=scope,
                price=amount,
                status=OfferStatus.OPEN,
                messages=[
                    OfferMessage(
                        by=MessageAuthor.SYSTEM,
                        text=f"Proposed: ₹{format_amount(amount)} — {scope}",
                        at=_now(),
                    )
                ],
            )
            self.repository.add_offer(offer)

        logger.info("offer_opened id=%s listing=%s customer=%s price=%s", offer.id, offer.listing_id, customer_id, amount)
        return offer

    def add_message(
        self,
        offer_id: str,
        *,
        by: Optional[str],
        text: Optional[str],
        price: Any = None,
    ) -> Offer:
        with self.repository.transaction():
            offer = self._load_open_offer(offer_id)
            author = self._parse_author(by)
            body = require_text(text, "by, text required")
            new_price = None
            if price is not None:
                new_price = require_amount(price, "price must be a non-negative number")

            offer.messages.append(OfferMessage(by=author, text=body, at=_now()))
            if new_price is not None:
                offer.price = new_price
            self.repository.save_offer(offer)

        logger.info("offer_countered id=%s by=%s price=%s", offer.id, author.value, offer.price)
        return offer

    def accept(self, offer_id: str) -> Tuple[Offer, Booking]:
        with self.repository.transaction():
            offer = self._load_open_offer(offer_id)
            self._transition(offer, OfferStatus.ACCEPTED)
            booking = self.bookings.create(offer)
            self.repository.save_offer(offer)
            self.repository.add_booking(booking)

        logger.info("offer_accepted id=%s booking=%s price=%s", offer.id, booking.id, booking.price)
        return offer, booking

    def decline(self, offer_id: str) -> Offer:
        with self.repository.transaction():
            offer = self._load_open_offer(offer_id)
            self._transition(offer, OfferStatus.DECLINED)
            self.repository.save_offer(offer)

        logger.info("offer_declined id=%s", offer.id)
        return offer

    def _load_open_offer(self, offer_id: str) -> Offer:
        offer = self.repository.get_offer(offer_id)
        if not offer:
            raise MarketplaceNotFoundError("Offer not found")
        if offer.status.is_terminal:
            raise MarketplaceConflictError(f"Offer closed ({offer.status.value})")
        return offer

    def _transition(self, offer: Offer, target: OfferStatus) -> None:
        if target not in OFFER_TRANSITIONS[offer.status]:
            raise MarketplaceConflictError(f"Invalid offer transition: {offer.status.value} -> {target.value}")
        offer.status = target

    def _parse_author(self, by: Optional[str]) -> MessageAuthor:
        if not isinstance(by, str) or not by.strip():
            raise MarketplaceValidationError("by, text required")
        try:
            author = MessageAuthor(by.strip().lower())
        except ValueError as exc:
            raise MarketplaceValidationError("by must be one of: customer, provider, helper") from exc
        if author not in COUNTER_AUTHORS:
            raise MarketplaceValidationError("by must be one of: customer, provider, helper")
        return author
