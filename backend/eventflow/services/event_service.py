"""Core event service: ownership checks, lifecycle-guarded writes and deletion.

Responsibilities:
- Authorization hook: only the owner may update/delete an event
- Visibility: private events are readable by owner and guests only
- Update path: runs the lifecycle rules, then exactly one event write
- Deletion: guests are removed first, then the event and its dependents
- Guest notifications for cancellations and owner-requested update notices
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from eventflow.models.announcement import Announcement
from eventflow.models.event import Event, EventState, EventVisibility
from eventflow.models.guest import Guest
from eventflow.models.message import Message
from eventflow.models.notification import Notification
from eventflow.models.report import Report
from eventflow.models.user import User
from eventflow.services import notification_service
from eventflow.services.event_lifecycle import as_utc, plan_event_update

logger = logging.getLogger(__name__)

FIELD_LABELS = {
    "title": "título",
    "description": "descrição",
    "date": "data",
    "time": "horário",
    "end_date": "data de término",
    "end_time": "horário de término",
    "location": "local",
    "rsvp_deadline": "prazo de confirmação",
    "capacity": "capacidade",
}


def get_event_or_404(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise HTTPException(status_code=404, detail="Evento não encontrado")
    return event


def check_owner(event: Event, user: User) -> None:
    """Only the owner may modify this event."""
    if event.owner_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Proibido")


def find_guest(db: Session, event_id: str, email: str) -> Optional[Guest]:
    return db.query(Guest).filter(Guest.event_id == event_id, Guest.email == email).first()


def can_view(db: Session, event: Event, user: Optional[User]) -> bool:
    """Owner always; hidden events owner only; private events owner or guests."""
    is_owner = user is not None and event.owner_id == user.id
    if is_owner:
        return True
    if event.is_hidden:
        return False
    if event.visibility == EventVisibility.public:
        return True
    return user is not None and find_guest(db, event.id, user.email) is not None


def linked_guest_user_ids(event: Event) -> list[str]:
    return [g.user_id for g in event.guests if g.user_id]


def create_event(db: Session, owner: User, fields: dict[str, Any]) -> Event:
    """Create an event owned by ``owner``. Publishing on create needs a future date."""
    if fields.get("state") == EventState.published and as_utc(fields["date"]) <= datetime.now(timezone.utc):
        raise HTTPException(status_code=400, detail="Só é possível publicar eventos com data futura")

    event = Event(owner_id=owner.id, **fields)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created event '%s' (%s) in state %s by owner %s", event.title, event.id, event.state.value, owner.id)
    return event


def update_event(
    db: Session,
    event: Event,
    changes: dict[str, Any],
    notify_guests: bool = False,
    now: Optional[datetime] = None,
) -> Event:
    """Apply an owner's partial update after the lifecycle rules accept it."""
    previous_state = event.state
    payload = plan_event_update(event, changes, now=now)

    for field, value in payload.items():
        setattr(event, field, value)
    db.commit()
    db.refresh(event)
    logger.info("Updated event %s (%s) fields: %s", event.id, event.state.value, ", ".join(sorted(payload)) or "-")

    recipients = linked_guest_user_ids(event)
    if event.state == EventState.cancelled and previous_state != EventState.cancelled:
        for user_id in recipients:
            notification_service.notify_event_cancelled(db, user_id, event.id, event.title)
    elif notify_guests and payload:
        labels = [FIELD_LABELS[f] for f in sorted(payload) if f in FIELD_LABELS]
        summary = ", ".join(labels) if labels else "detalhes"
        for user_id in recipients:
            notification_service.notify_event_update(db, user_id, event.id, event.title, summary)
    return event


def delete_event(db: Session, event: Event) -> None:
    """Remove guests first, then the event together with its dependent rows."""
    event_id = event.id
    db.query(Guest).filter(Guest.event_id == event_id).delete(synchronize_session=False)
    for model in (Announcement, Message, Report, Notification):
        db.query(model).filter(model.event_id == event_id).delete(synchronize_session=False)
    db.expire(event, ["guests"])
    db.delete(event)
    db.commit()
    logger.info("Deleted event %s", event_id)
