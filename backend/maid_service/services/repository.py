"""Storage for marketplace entities.

``MarketplaceRepository`` is the seam between the negotiation/rating logic
and wherever the data lives. ``InMemoryRepository`` keeps every table in a
dict and hands out copies, so nothing outside the repository can mutate a
stored entity without going through ``save_*``.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from threading import RLock
from typing import Dict, Iterator, List, Optional, Set

from maid_service.models import Booking, Listing, Offer, Provider, Review, Service, User, UserRole


class MarketplaceRepository(ABC):
    @abstractmethod
    def transaction(self):
        """Context manager that serializes a read-validate-write sequence."""

    @abstractmethod
    def list_services(self) -> List[Service]: ...

    @abstractmethod
    def add_service(self, service: Service) -> None: ...

    @abstractmethod
    def get_provider(self, provider_id: str) -> Optional[Provider]: ...

    @abstractmethod
    def list_providers(self) -> List[Provider]: ...

    @abstractmethod
    def add_provider(self, provider: Provider) -> None: ...

    @abstractmethod
    def save_provider(self, provider: Provider) -> None: ...

    @abstractmethod
    def get_listing(self, listing_id: str) -> Optional[Listing]: ...

    @abstractmethod
    def list_listings(self) -> List[Listing]: ...

    @abstractmethod
    def add_listing(self, listing: Listing) -> None: ...

    @abstractmethod
    def get_offer(self, offer_id: str) -> Optional[Offer]: ...

    @abstractmethod
    def list_offers(self) -> List[Offer]: ...

    @abstractmethod
    def add_offer(self, offer: Offer) -> None: ...

    @abstractmethod
    def save_offer(self, offer: Offer) -> None: ...

    @abstractmethod
    def list_bookings(self) -> List[Booking]: ...

    @abstractmethod
    def add_booking(self, booking: Booking) -> None: ...

    @abstractmethod
    def booking_for_offer(self, offer_id: str) -> Optional[Booking]: ...

    @abstractmethod
    def add_review(self, review: Review) -> None: ...

    @abstractmethod
    def list_reviews_for_provider(self, provider_id: str) -> List[Review]: ...

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    def find_user_by_phone(self, phone: str) -> Optional[User]: ...

    @abstractmethod
    def add_user(self, user: User) -> None: ...


class InMemoryRepository(MarketplaceRepository):
    def __init__(self) -> None:
        self._lock = RLock()
        self._users: Dict[str, User] = {}
        self._services: Dict[str, Service] = {}
        self._providers: Dict[str, Provider] = {}
        self._listings: Dict[str, Listing] = {}
        self._offers: Dict[str, Offer] = {}
        self._bookings: Dict[str, Booking] = {}
        self._reviews: Dict[str, Review] = {}
        self._reviews_by_provider: Dict[str, Set[str]] = {}

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            yield

    def list_services(self) -> List[Service]:
        with self._lock:
            return [row.model_copy(deep=True) for row in self._services.values()]

    def add_service(self, service: Service) -> None:
        with self._lock:
            self._services[service.id] = service.model_copy(deep=True)

    def get_provider(self, provider_id: str) -> Optional[Provider]:
        with self._lock:
            row = self._providers.get(provider_id)
            return row.model_copy(deep=True) if row else None

    def list_providers(self) -> List[Provider]:
        with self._lock:
            return [row.model_copy(deep=True) for row in self._providers.values()]

    def add_provider(self, provider: Provider) -> None:
        with self._lock:
            self._providers[provider.id] = provider.model_copy(deep=True)

    def save_provider(self, provider: Provider) -> None:
        with self._lock:
            self._providers[provider.id] = provider.model_copy(deep=True)

    def get_listing(self, listing_id: str) -> Optional[Listing]:
        with self._lock:
            row = self._listings.get(listing_id)
            return row.model_copy(deep=True) if row else None

    def list_listings(self) -> List[Listing]:
        with self._lock:
            return [row.model_copy(deep=True) for row in self._listings.values()]

    def add_listing(self, listing: Listing) -> None:
        with self._lock:
            self._listings[listing.id] = listing.model_copy(deep=True)

    def get_offer(self, offer_id: str) -> Optional[Offer]:
        with self._lock:
            row = self._offers.get(offer_id)
            return row.model_copy(deep=True) if row else None

    def list_offers(self) -> List[Offer]:
        with self._lock:
            return [row.model_copy(deep=True) for row in self._offers.values()]

    def add_offer(self, offer: Offer) -> None:
        with self._lock:
            self._offers[offer.id] = offer.model_copy(deep=True)

    def save_offer(self, offer: Offer) -> None:
        with self._lock:
            self._offers[offer.id] = offer.model_copy(deep=True)

    def list_bookings(self) -> List[Booking]:
        with self._lock:
            return [row.model_copy(deep=True) for row in self._bookings.values()]

    def add_booking(self, booking: Booking) -> None:
        with self._lock:
            self._bookings[booking.id] = booking.model_copy(deep=True)

    def booking_for_offer(self, offer_id: str) -> Optional[Booking]:
        with self._lock:
            for row in self._bookings.values():
                if row.offer_id == offer_id:
                    return row.model_copy(deep=True)
        return None

    def add_review(self, review: Review) -> None:
        with self._lock:
            self._reviews[review.id] = review.model_copy(deep=True)
            self._reviews_by_provider.setdefault(review.provider_id, set()).add(review.id)

    def list_reviews_for_provider(self, provider_id: str) -> List[Review]:
        with self._lock:
            review_ids = self._reviews_by_provider.get(provider_id, set())
            # Insertion order, not set order.
            return [row.model_copy(deep=True) for row in self._reviews.values() if row.id in review_ids]

    def get_user(self, user_id: str) -> Optional[User]:
        with self._lock:
            row = self._users.get(user_id)
            return row.model_copy(deep=True) if row else None

    def find_user_by_phone(self, phone: str) -> Optional[User]:
        with self._lock:
            for row in self._users.values():
                if row.phone == phone:
                    return row.model_copy(deep=True)
        return None

    def add_user(self, user: User) -> None:
        with self._lock:
            self._users[user.id] = user.model_copy(deep=True)


def seed_demo_data(repository: MarketplaceRepository) -> None:
    repository.add_user(User(id="u-cust-1", name="Rahul Customer", phone="9000000001", role=UserRole.CUSTOMER))
    repository.add_user(User(id="u-help-1", name="Asha Helper", phone="9000000002", role=UserRole.HELPER))

    for service_id, name, category in [
        ("svc-clean", "House Cleaning", "Home"),
        ("svc-cook", "Cooking", "Home"),
        ("svc-baby", "Babysitting", "Care"),
        ("svc-elder", "Elderly Care", "Care"),
        ("svc-patient", "Patient Care", "Care"),
    ]:
        repository.add_service(Service(id=service_id, name=name, categories=[category]))

    repository.add_provider(
        Provider(
            id="p-1",
            user_id="u-help-1",
            full_name="Asha Devi",
            skills=["House Cleaning", "Cooking"],
            locations=["Bengaluru", "Whitefield"],
            base_rate=350,
            rating_avg=4.7,
            rating_count=12,
        )
    )
    repository.add_listing(
        Listing(
            id="l-1",
            provider_id="p-1",
            service_id="svc-clean",
            title="Deep Cleaning (2BHK)",
            base_price=1500,
            details="All rooms, bathrooms, kitchen. Supplies included.",
        )
    )
