from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OfferStatus(str, Enum):
    OPEN = "open"
    ACCEPTED = "accepted"
    DECLINED = "declined"

    @property
    def is_terminal(self) -> bool:
        return self is not OfferStatus.OPEN


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"


class MessageAuthor(str, Enum):
    CUSTOMER = "customer"
    PROVIDER = "provider"
    HELPER = "helper"
    SYSTEM = "system"


class UserRole(str, Enum):
    CUSTOMER = "customer"
    HELPER = "helper"


class User(CamelModel):
    id: str
    name: str
    phone: str
    role: UserRole


class Service(CamelModel):
    id: str
    name: str
    categories: list[str] = Field(default_factory=list)


class Provider(CamelModel):
    id: str
    user_id: str
    full_name: str
    skills: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    base_rate: float
    rating_avg: float = 0.0
    rating_count: int = 0


class Listing(CamelModel):
    id: str
    provider_id: str
    service_id: str
    title: str
    base_price: float
    details: str = ""


class OfferMessage(CamelModel):
    by: MessageAuthor
    text: str
    at: str


class Offer(CamelModel):
    id: str
    listing_id: str
    customer_id: str
    provider_id: str
    scope: str
    price: float
    status: OfferStatus = OfferStatus.OPEN
    messages: list[OfferMessage] = Field(default_factory=list)


class Booking(CamelModel):
    id: str
    listing_id: str
    offer_id: str
    customer_id: str
    provider_id: str
    created_at: str
    price: float
    status: BookingStatus = BookingStatus.CONFIRMED


class Review(CamelModel):
    id: str
    booking_id: str
    customer_id: str
    provider_id: str
    rating: int = Field(ge=1, le=5)
    text: str = ""


class OfferAcceptance(CamelModel):
    offer: Offer
    booking: Booking


# Request bodies keep presence-checked fields optional; the service layer
# reports missing values as validation errors. Numbers are strict: JSON
# strings and booleans are rejected, not coerced.
StrictNumber = Union[StrictInt, StrictFloat]


class ListingCreateRequest(CamelModel):
    provider_id: Optional[str] = None
    service_id: Optional[str] = None
    title: Optional[str] = None
    base_price: Optional[StrictNumber] = None
    details: Optional[str] = None


class OfferCreateRequest(CamelModel):
    listing_id: Optional[str] = None
    customer_id: Optional[str] = None
    scope: Optional[str] = None
    price: Optional[StrictNumber] = None


class OfferMessageRequest(CamelModel):
    by: Optional[str] = None
    text: Optional[str] = None
    price: Optional[StrictNumber] = None


class ReviewCreateRequest(CamelModel):
    booking_id: Optional[str] = None
    customer_id: Optional[str] = None
    provider_id: Optional[str] = None
    rating: Optional[StrictNumber] = None
    text: Optional[str] = None


class AuthRegisterRequest(CamelModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None


class AuthLoginRequest(CamelModel):
    phone: Optional[str] = None


class AuthSession(CamelModel):
    user: User
    token: str
    expires_at: str


class AuthMeResponse(CamelModel):
    user: User
