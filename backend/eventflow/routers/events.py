"""Event API routes. Lifecycle rules are enforced in event_service."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from eventflow.auth.dependencies import get_current_user, get_current_user_optional, require_admin, require_not_banned
from eventflow.database import get_db
from eventflow.models.event import Event, EventState, EventVisibility
from eventflow.models.guest import Guest
from eventflow.models.user import User
from eventflow.schemas.event import EventCreate, EventDetailOut, EventOut, EventUpdate, InviteOut
from eventflow.services import archiver, event_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=list[EventOut])
def list_public_events(db: Session = Depends(get_db)):
    """Published public events that moderation has not hidden."""
    return (
        db.query(Event)
        .filter(
            Event.visibility == EventVisibility.public,
            Event.state == EventState.published,
            Event.is_hidden.is_(False),
        )
        .order_by(Event.date)
        .all()
    )


@router.get("/my-events", response_model=list[EventOut])
def list_my_events(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return db.query(Event).filter(Event.owner_id == user.id).order_by(Event.date).all()


@router.get("/my-invites", response_model=list[InviteOut])
def list_my_invites(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    rows = (
        db.query(Event, Guest)
        .join(Guest, Guest.event_id == Event.id)
        .filter(Guest.email == user.email, Event.is_hidden.is_(False))
        .order_by(Event.date)
        .all()
    )
    return [
        InviteOut(
            **EventOut.model_validate(event).model_dump(),
            my_guest_status=guest.status.value,
            my_guest_id=guest.id,
        )
        for event, guest in rows
    ]


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, user: User = Depends(require_not_banned), db: Session = Depends(get_db)):
    return event_service.create_event(db, user, payload.model_dump())


@router.post("/archiver/run")
def run_archiver_now(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Run the daily completion sweep immediately."""
    archived = archiver.archive_past_events(db)
    logger.info("Admin %s ran the archiver manually: %d event(s)", admin.id, archived)
    return {"archived": archived}


@router.get("/{event_id}", response_model=EventDetailOut)
def get_event(
    event_id: str,
    user: Optional[User] = Depends(get_current_user_optional),
    db: Session = Depends(get_db),
):
    """Fetch one event. Guests are listed for the owner, or for everyone when
    the owner made the guest list visible."""
    event = event_service.get_event_or_404(db, event_id)
    if not event_service.can_view(db, event, user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Você não tem acesso a este evento")

    detail = EventDetailOut.model_validate(event)
    is_owner = user is not None and event.owner_id == user.id
    if not is_owner and not event.show_guest_list:
        detail.guests = []
    return detail


@router.patch("/{event_id}", response_model=EventOut)
def update_event(
    event_id: str,
    payload: EventUpdate,
    user: User = Depends(require_not_banned),
    db: Session = Depends(get_db),
):
    """Partial update by the owner. Fields left out of the body are untouched."""
    event = event_service.get_event_or_404(db, event_id)
    event_service.check_owner(event, user)
    return event_service.update_event(db, event, payload.changes(), notify_guests=payload.notify_guests)


@router.delete("/{event_id}")
def delete_event(event_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    event = event_service.get_event_or_404(db, event_id)
    event_service.check_owner(event, user)
    event_service.delete_event(db, event)
    return {"message": "Evento excluído com sucesso"}
