# backend/agora/models/contact.py
"""Directional contact relationship: ``user_id`` keeps ``contact_id`` in their list."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.ulid_helper import generate_ulid
from ..database import Base


class Contact(Base):
    __tablename__ = "contacts"
    __table_args__ = (UniqueConstraint("user_id", "contact_id", name="uq_contacts_user_contact"),)

    id = Column(String(26), primary_key=True, default=generate_ulid)
    user_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    contact_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    contact = relationship("User", foreign_keys=[contact_id])
