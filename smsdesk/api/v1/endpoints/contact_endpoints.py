"""Contact book endpoints"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from smsdesk.core.dependencies import get_db
from smsdesk.errors.exceptions import NotFoundException
from smsdesk.middleware.auth import require_user
from smsdesk.models.user import User
from smsdesk.schemas.base import MessageResponse
from smsdesk.schemas.contact_schemas import ContactCreate, ContactResponse
from smsdesk.services import contact_service

router = APIRouter()


@router.get("", response_model=List[ContactResponse])
async def list_contacts(
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Caller's saved contacts, newest first."""
    return contact_service.list_contacts(db, current_user.id)


@router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
async def create_contact(
    body: ContactCreate,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return contact_service.create_contact(db, current_user.id, body.name, body.phone)


@router.delete("/{contact_id}", response_model=MessageResponse)
async def delete_contact(
    contact_id: int,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Only the owner can delete a contact; anyone else gets a 404."""
    if not contact_service.delete_contact(db, current_user.id, contact_id):
        raise NotFoundException(detail="Contact not found")
    return MessageResponse(message="Contact deleted")
