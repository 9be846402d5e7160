# backend/agora/services/contact_service.py
"""Contact list management. Contacts are directional: A adding B does not add A to B."""

import logging
from typing import List

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException, RepositoryException, ValidationException
from ..core.ulid_helper import canonical_ulid
from ..models.contact import Contact
from ..models.user import User
from ..repositories.contact_repository import ContactRepository
from ..repositories.user_repository import UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)


def _require_contact_id(contact_id: object) -> str:
    if not contact_id or not isinstance(contact_id, str):
        raise ValidationException(
            "Contact ID is required and must be a string.", code="INVALID_CONTACT_ID"
        )
    canonical = canonical_ulid(contact_id)
    if canonical is None:
        raise ValidationException("Invalid Contact ID format.", code="INVALID_CONTACT_ID")
    return canonical


class ContactService(BaseService):
    def __init__(
        self,
        db: Session,
        contact_repository: ContactRepository | None = None,
        user_repository: UserRepository | None = None,
    ) -> None:
        super().__init__(db)
        self.contact_repository = contact_repository or ContactRepository(db)
        self.user_repository = user_repository or UserRepository(db)

    @BaseService.measure_operation("add_contact")
    def add_contact(self, user_id: str, contact_id: str) -> Contact:
        contact_id = _require_contact_id(contact_id)
        if contact_id == user_id:
            raise ValidationException("Cannot add yourself as a contact.", code="SELF_CONTACT")
        if self.user_repository.get_by_id(contact_id) is None:
            raise NotFoundException("User to add as contact not found.", code="USER_NOT_FOUND")
        if self.contact_repository.find_contact(user_id, contact_id) is not None:
            raise ValidationException("Contact already exists.", code="CONTACT_EXISTS")

        try:
            with self.transaction():
                contact = self.contact_repository.create(user_id=user_id, contact_id=contact_id)
        except RepositoryException:
            raise ValidationException("Contact already exists.", code="CONTACT_EXISTS")

        self.logger.info(f"User {user_id} added contact {contact_id}")
        created = self.contact_repository.find_contact(user_id, contact_id)
        return created if created is not None else contact

    @BaseService.measure_operation("list_contacts")
    def list_contacts(self, user_id: str) -> List[User]:
        return [row.contact for row in self.contact_repository.list_for_user(user_id)]

    @BaseService.measure_operation("remove_contact")
    def remove_contact(self, user_id: str, contact_id: str) -> None:
        contact_id = _require_contact_id(contact_id)
        with self.transaction():
            removed = self.contact_repository.delete_contact(user_id, contact_id)
        if removed == 0:
            raise NotFoundException(
                "Contact not found or you are not authorized to remove this contact.",
                code="CONTACT_NOT_FOUND",
            )
        self.logger.info(f"User {user_id} removed contact {contact_id}")
