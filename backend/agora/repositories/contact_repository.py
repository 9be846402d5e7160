# backend/agora/repositories/contact_repository.py
"""Contact Repository: directional contact list per user."""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.contact import Contact
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ContactRepository(BaseRepository[Contact]):
    def __init__(self, db: Session):
        super().__init__(db, Contact)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(joinedload(Contact.contact))

    def find_contact(self, user_id: str, contact_id: str) -> Optional[Contact]:
        try:
            return (
                self._apply_eager_loading(self.db.query(Contact))
                .filter(Contact.user_id == user_id, Contact.contact_id == contact_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error fetching contact: {str(e)}")
            raise RepositoryException(f"Failed to fetch contact: {str(e)}")

    def list_for_user(self, user_id: str) -> List[Contact]:
        try:
            return (
                self._apply_eager_loading(self.db.query(Contact))
                .filter(Contact.user_id == user_id)
                .order_by(Contact.created_at)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing contacts for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to list contacts: {str(e)}")

    def delete_contact(self, user_id: str, contact_id: str) -> int:
        """Returns the number of rows removed. Does NOT commit."""
        try:
            return int(
                self.db.query(Contact)
                .filter(Contact.user_id == user_id, Contact.contact_id == contact_id)
                .delete(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error removing contact: {str(e)}")
            raise RepositoryException(f"Failed to remove contact: {str(e)}")
