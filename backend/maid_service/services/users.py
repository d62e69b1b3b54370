import logging
from dataclasses import dataclass
from typing import Optional
from uuid import uuid4

from maid_service.models import User, UserRole
from maid_service.services.errors import (
    MarketplaceConflictError,
    MarketplaceNotFoundError,
    MarketplaceValidationError,
)
from maid_service.services.repository import MarketplaceRepository
from maid_service.services.validation import require_text

logger = logging.getLogger(__name__)


@dataclass
class UserDirectory:
    repository: MarketplaceRepository

    def register(self, *, name: Optional[str], phone: Optional[str], role: Optional[str]) -> User:
        message = "name, phone, role required"
        name = require_text(name, message)
        phone = require_text(phone, message)
        role = require_text(role, message)
        try:
            user_role = UserRole(role.lower())
        except ValueError as exc:
            raise MarketplaceValidationError("role must be one of: customer, helper") from exc

        with self.repository.transaction():
            if self.repository.find_user_by_phone(phone):
                raise MarketplaceConflictError("Phone already registered")
            user = User(id=f"usr_{uuid4().hex[:8]}", name=name, phone=phone, role=user_role)
            self.repository.add_user(user)

        logger.info("user_registered id=%s role=%s", user.id, user.role.value)
        return user

    def login(self, *, phone: Optional[str]) -> User:
        phone = require_text(phone, "phone required")
        user = self.repository.find_user_by_phone(phone)
        if not user:
            raise MarketplaceNotFoundError("User not found")
        return user

    def get(self, user_id: str) -> User:
        user = self.repository.get_user(user_id)
        if not user:
            raise MarketplaceNotFoundError("User not found")
        return user
