# backend/agora/routes/contacts.py
"""
Contact routes

Endpoints:
    POST   /add                  → Add a user to my contacts
    GET    /                     → My contacts as profiles
    DELETE /remove/{contact_id}  → Remove a contact
"""

import asyncio
from typing import List

from fastapi import APIRouter, Depends, status

from ..api.dependencies.auth import get_current_user
from ..api.dependencies.services import get_contact_service
from ..models.user import User
from ..schemas.auth import MessageResponse
from ..schemas.contact import AddContactRequest, ContactOut
from ..schemas.user import UserDetail
from ..services.contact_service import ContactService

router = APIRouter(tags=["contacts"])


@router.post("/add", response_model=ContactOut, status_code=status.HTTP_201_CREATED)
async def add_contact(
    payload: AddContactRequest,
    current_user: User = Depends(get_current_user),
    contact_service: ContactService = Depends(get_contact_service),
) -> ContactOut:
    contact = await asyncio.to_thread(
        contact_service.add_contact, current_user.id, payload.contact_id
    )
    return ContactOut(
        id=contact.id,
        contact=UserDetail.model_validate(contact.contact),
        created_at=contact.created_at,
    )


@router.get("", response_model=List[UserDetail])
async def list_contacts(
    current_user: User = Depends(get_current_user),
    contact_service: ContactService = Depends(get_contact_service),
) -> List[UserDetail]:
    users = await asyncio.to_thread(contact_service.list_contacts, current_user.id)
    return [UserDetail.model_validate(user) for user in users]


@router.delete("/remove/{contact_id}", response_model=MessageResponse)
async def remove_contact(
    contact_id: str,
    current_user: User = Depends(get_current_user),
    contact_service: ContactService = Depends(get_contact_service),
) -> MessageResponse:
    await asyncio.to_thread(contact_service.remove_contact, current_user.id, contact_id)
    return MessageResponse(message="Contact removed successfully.")
