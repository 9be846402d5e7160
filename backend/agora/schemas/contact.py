# backend/agora/schemas/contact.py
from datetime import datetime

from ._strict_base import StrictModel, StrictRequestModel
from .user import UserDetail


class AddContactRequest(StrictRequestModel):
    contact_id: str


class ContactOut(StrictModel):
    id: str
    contact: UserDetail
    created_at: datetime
