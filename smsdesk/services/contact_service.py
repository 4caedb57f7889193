"""Per-user contact book"""
from typing import List

from sqlalchemy.orm import Session

from smsdesk.models.contact import Contact


def list_contacts(db: Session, user_id: int) -> List[Contact]:
    return (
        db.query(Contact)
        .filter(Contact.user_id == user_id)
        .order_by(Contact.created_at.desc(), Contact.id.desc())
        .all()
    )


def create_contact(db: Session, user_id: int, name: str, phone: str) -> Contact:
    contact = Contact(user_id=user_id, name=name, phone=phone)
    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact


def delete_contact(db: Session, user_id: int, contact_id: int) -> bool:
    """
    Delete one of *user_id*'s contacts. Returns False when it does not exist
    or belongs to someone else.
    """
    contact = (
        db.query(Contact)
        .filter(Contact.id == contact_id, Contact.user_id == user_id)
        .first()
    )
    if contact is None:
        return False
    db.delete(contact)
    db.commit()
    return True
