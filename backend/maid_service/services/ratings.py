import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, List, Optional
from uuid import uuid4

from maid_service.models import Review
from maid_service.services.errors import MarketplaceValidationError
from maid_service.services.repository import MarketplaceRepository
from maid_service.services.validation import is_number, require_text

logger = logging.getLogger(__name__)


@dataclass
class RatingAggregator:
    repository: MarketplaceRepository

    def list_reviews(self, provider_id: str) -> List[Review]:
        return self.repository.list_reviews_for_provider(provider_id)

    def record_review(
        self,
        *,
        booking_id: Optional[str],
        customer_id: Optional[str],
        provider_id: Optional[str],
        rating: Any,
        text: Optional[str] = None,
    ) -> Review:
        message = "bookingId, customerId, providerId and rating are required"
        booking_id = require_text(booking_id, message)
        customer_id = require_text(customer_id, message)
        provider_id = require_text(provider_id, message)
        if not is_number(rating):
            raise MarketplaceValidationError(message)
        if not float(rating).is_integer() or not 1 <= rating <= 5:
            raise MarketplaceValidationError("rating must be an integer between 1 and 5")

        review = Review(
            id=f"rev_{uuid4().hex[:8]}",
            booking_id=booking_id,
            customer_id=customer_id,
            provider_id=provider_id,
            rating=int(rating),
            text=text or "",
        )
        with self.repository.transaction():
            self.repository.add_review(review)
            self.recompute_provider_rating(provider_id)

        logger.info("review_recorded id=%s provider=%s rating=%s", review.id, provider_id, review.rating)
        return review

    def recompute_provider_rating(self, provider_id: str) -> None:
        with self.repository.transaction():
            reviews = self.repository.list_reviews_for_provider(provider_id)
            if not reviews:
                return
            provider = self.repository.get_provider(provider_id)
            if not provider:
                return
            mean = Decimal(sum(review.rating for review in reviews)) / Decimal(len(reviews))
            # Halves round up: 4.125 is stored as 4.13.
            provider.rating_avg = float(mean.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
            provider.rating_count = len(reviews)
            self.repository.save_provider(provider)

        logger.info(
            "provider_rating_recomputed provider=%s avg=%.2f count=%s",
            provider_id,
            provider.rating_avg,
            provider.rating_count,
        )
