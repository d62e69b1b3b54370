import os
from dataclasses import dataclass, field
from typing import Optional

from maid_service.services.bookings import BookingFactory
from maid_service.services.catalog import CatalogService
from maid_service.services.negotiation import NegotiationEngine
from maid_service.services.ratings import RatingAggregator
from maid_service.services.repository import InMemoryRepository, MarketplaceRepository, seed_demo_data
from maid_service.services.users import UserDirectory


@dataclass
class Marketplace:
    """The services the API layer talks to, wired onto one repository."""

    repository: MarketplaceRepository
    catalog: CatalogService = field(init=False)
    bookings: BookingFactory = field(init=False)
    negotiation: NegotiationEngine = field(init=False)
    ratings: RatingAggregator = field(init=False)
    users: UserDirectory = field(init=False)

    def __post_init__(self) -> None:
        self.catalog = CatalogService(self.repository)
        self.bookings = BookingFactory(self.repository)
        self.negotiation = NegotiationEngine(self.repository, self.bookings)
        self.ratings = RatingAggregator(self.repository)
        self.users = UserDirectory(self.repository)


def build_marketplace(repository: Optional[MarketplaceRepository] = None, seed: bool = True) -> Marketplace:
    repository = repository or InMemoryRepository()
    if seed:
        seed_demo_data(repository)
    return Marketplace(repository=repository)


SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "true").lower() in {"1", "true", "yes"}
marketplace = build_marketplace(seed=SEED_DEMO_DATA)


def get_marketplace() -> Marketplace:
    return marketplace
