import logging
from dataclasses import dataclass
from typing import List, Optional
from uuid import uuid4

from maid_service.models import Listing, Provider, Service
from maid_service.services.repository import MarketplaceRepository
from maid_service.services.validation import require_amount, require_text

logger = logging.getLogger(__name__)


@dataclass
class CatalogService:
    """Read side of the reference data plus listing creation."""

    repository: MarketplaceRepository

    def list_services(self) -> List[Service]:
        return self.repository.list_services()

    def list_providers(self) -> List[Provider]:
        return self.repository.list_providers()

    def list_listings(self) -> List[Listing]:
        return self.repository.list_listings()

    def create_listing(
        self,
        *,
        provider_id: Optional[str],
        service_id: Optional[str],
        title: Optional[str],
        base_price: Optional[float],
        details: Optional[str] = None,
    ) -> Listing:
        message = "providerId, serviceId, title and basePrice are required"
        listing = Listing(
            id=f"lst_{uuid4().hex[:8]}",
            provider_id=require_text(provider_id, message),
            service_id=require_text(service_id, message),
            title=require_text(title, message),
            base_price=require_amount(base_price, message, allow_zero=False),
            details=details or "",
        )
        self.repository.add_listing(listing)
        logger.info("listing_created id=%s provider=%s service=%s", listing.id, listing.provider_id, listing.service_id)
        return listing
