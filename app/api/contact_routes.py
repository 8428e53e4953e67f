"""Daily Numbers — Contacts API Routes."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from pydantic import BaseModel
from sqlmodel import Session, select

from app.database import get_session
from app.contacts.csv_import import ImportResult, import_contacts_csv
from app.contacts.metrics_sync import contribution_for, sync_contact_metrics
from app.models.contact_models import (
    Contact,
    ContactCreate,
    ContactInteraction,
    ContactStatus,
    ContactType,
)
from app.core.logging import get_logger

logger = get_logger("api.contacts")

router = APIRouter(prefix="/contacts", tags=["Contacts"])


class InteractionRequest(BaseModel):
    """Request body for POST /contacts/{id}/interactions."""

    interaction_type: str
    subject: Optional[str] = None
    notes: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    follow_up_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


def _get_owned(session: Session, contact_id: int, user_id: str) -> Contact:
    contact = session.get(Contact, contact_id)
    if not contact or contact.user_id != user_id:
        raise HTTPException(status_code=404, detail="Contact not found")
    return contact


@router.get("")
async def list_contacts(
    user_id: str = Query(...),
    contact_type: Optional[ContactType] = Query(None),
    status: Optional[ContactStatus] = Query(None),
    session: Session = Depends(get_session),
):
    query = select(Contact).where(Contact.user_id == user_id)
    if contact_type:
        query = query.where(Contact.contact_type == contact_type)
    if status:
        query = query.where(Contact.status == status)
    contacts = session.exec(query.order_by(Contact.created_at.desc())).all()  # type: ignore
    return {"status": "success", "count": len(contacts), "contacts": contacts}


@router.post("", response_model=Contact, status_code=201)
async def create_contact(
    payload: ContactCreate,
    user_id: str = Query(...),
    session: Session = Depends(get_session),
):
    contact = Contact(user_id=user_id, **payload.model_dump())
    session.add(contact)
    session.commit()
    session.refresh(contact)

    sync_contact_metrics(session, user_id, None, contribution_for(contact))
    session.refresh(contact)
    return contact


@router.put("/{contact_id}", response_model=Contact)
async def update_contact(
    contact_id: int,
    payload: ContactCreate,
    user_id: str = Query(...),
    session: Session = Depends(get_session),
):
    """Replace a contact; its daily-metric contribution follows the edit."""
    contact = _get_owned(session, contact_id, user_id)
    before = contribution_for(contact)

    for field, value in payload.model_dump().items():
        setattr(contact, field, value)
    contact.updated_at = datetime.now(timezone.utc)
    session.add(contact)
    session.commit()
    session.refresh(contact)

    sync_contact_metrics(session, user_id, before, contribution_for(contact))
    session.refresh(contact)
    return contact


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: int,
    user_id: str = Query(...),
    session: Session = Depends(get_session),
):
    """Delete a contact and back its contribution out of the daily numbers."""
    contact = _get_owned(session, contact_id, user_id)
    before = contribution_for(contact)

    for interaction in session.exec(
        select(ContactInteraction).where(ContactInteraction.contact_id == contact_id)
    ).all():
        session.delete(interaction)
    session.delete(contact)
    session.commit()

    metrics_adjusted = sync_contact_metrics(session, user_id, before, None)
    return {"status": "success", "deleted": contact_id, "metrics_adjusted": metrics_adjusted}


@router.post("/import", response_model=ImportResult)
async def import_contacts(
    file: UploadFile = File(...),
    user_id: str = Query(...),
    session: Session = Depends(get_session),
):
    """Bulk-create contacts from a CSV upload."""
    raw = await file.read()
    try:
        content = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV must be UTF-8 encoded")
    return import_contacts_csv(session, user_id, content)


@router.post("/{contact_id}/interactions", response_model=ContactInteraction, status_code=201)
async def add_interaction(
    contact_id: int,
    request: InteractionRequest,
    user_id: str = Query(...),
    session: Session = Depends(get_session),
):
    _get_owned(session, contact_id, user_id)
    interaction = ContactInteraction(
        contact_id=contact_id, user_id=user_id, **request.model_dump()
    )
    session.add(interaction)
    session.commit()
    session.refresh(interaction)
    return interaction


@router.get("/{contact_id}/interactions")
async def list_interactions(
    contact_id: int,
    user_id: str = Query(...),
    session: Session = Depends(get_session),
):
    _get_owned(session, contact_id, user_id)
    interactions = session.exec(
        select(ContactInteraction)
        .where(ContactInteraction.contact_id == contact_id)
        .order_by(ContactInteraction.created_at.desc())  # type: ignore
    ).all()
    return {"status": "success", "count": len(interactions), "interactions": interactions}
