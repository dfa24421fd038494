"""Guest invitations, self-registration and RSVP changes.

Capacity counts only YES guests. When an event is full a self-registration or
a YES answer lands on the waitlist if the owner enabled it, and is refused
otherwise.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from eventflow.models.event import Event, EventState, EventVisibility
from eventflow.models.guest import Guest, RSVPStatus
from eventflow.models.user import User
from eventflow.services import notification_service
from eventflow.services.event_lifecycle import confirmed_guest_count

logger = logging.getLogger(__name__)


def is_full(event: Event, exclude: Optional[Guest] = None) -> bool:
    if not event.capacity:
        return False
    confirmed = confirmed_guest_count(event)
    if exclude is not None and exclude.status == RSVPStatus.yes:
        confirmed -= 1
    return confirmed >= event.capacity


def _status_when_full(event: Event) -> RSVPStatus:
    if not event.waitlist_enabled:
        raise HTTPException(status_code=400, detail="Evento lotado")
    return RSVPStatus.waitlisted


def get_guest_or_404(db: Session, event_id: str, guest_id: str) -> Guest:
    guest = db.query(Guest).filter(Guest.id == guest_id).first()
    if not guest:
        raise HTTPException(status_code=404, detail="Convite não encontrado")
    if guest.event_id != event_id:
        raise HTTPException(status_code=400, detail="Convite não pertence a este evento")
    return guest


def add_guests(db: Session, event: Event, actor: User, emails: list[str]) -> list[Guest]:
    """Owner invites any emails; anyone else may only sign themselves up to a
    public, published event. Emails already on the list are skipped."""
    is_owner = event.owner_id == actor.id
    initial_status = RSVPStatus.pending
    existing = {g.email for g in event.guests}

    if not is_owner:
        if event.visibility != EventVisibility.public or event.state != EventState.published or event.is_hidden:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Apenas eventos públicos e publicados permitem auto-inscrição",
            )
        if len(emails) != 1 or emails[0].lower() != actor.email:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Você só pode se inscrever em eventos públicos. Apenas o criador pode adicionar outros convidados.",
            )
        if actor.email not in existing and is_full(event):
            initial_status = _status_when_full(event)

    created: list[Guest] = []
    for email in dict.fromkeys(e.lower() for e in emails):
        if email in existing:
            continue
        user = db.query(User).filter(User.email == email).first()
        guest = Guest(
            email=email,
            name=email.split("@")[0],
            status=initial_status,
            event_id=event.id,
            user_id=user.id if user else None,
        )
        db.add(guest)
        created.append(guest)
    db.commit()
    for guest in created:
        db.refresh(guest)
    logger.info("Added %d guest(s) to event %s (%s)", len(created), event.id, initial_status.value)

    if is_owner:
        for guest in created:
            if guest.user_id and guest.user_id != actor.id:
                notification_service.notify_event_invite(db, guest.user_id, event.id, event.title, actor.name)
    return created


def update_guest(
    db: Session,
    event: Event,
    guest: Guest,
    actor: User,
    new_status: Optional[RSVPStatus] = None,
    name: Optional[str] = None,
    decline_reason: Optional[str] = None,
) -> Guest:
    """Status and decline reason belong to the guest; the name belongs to the owner."""
    is_owner = event.owner_id == actor.id
    is_self = guest.email == actor.email

    if not is_owner and not is_self:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Você não pode atualizar este convidado")
    if (new_status is not None or decline_reason is not None) and not is_self:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Apenas o convidado pode atualizar seu próprio status",
        )
    if name is not None and not is_owner:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Apenas o organizador pode editar o nome do convidado",
        )

    if new_status is not None:
        if new_status == RSVPStatus.yes and is_full(event, exclude=guest):
            new_status = _status_when_full(event)
        guest.status = new_status
        guest.responded_at = datetime.now(timezone.utc)
        guest.decline_reason = decline_reason if new_status == RSVPStatus.no else None
        if guest.user_id is None:
            guest.user_id = actor.id
    elif decline_reason is not None:
        guest.decline_reason = decline_reason
    if name is not None:
        guest.name = name

    db.commit()
    db.refresh(guest)
    logger.info("Updated guest %s of event %s (status %s)", guest.id, event.id, guest.status.value)

    if new_status is not None and event.owner_id != actor.id:
        notification_service.notify_rsvp_response(db, event.owner_id, event.id, event.title, guest.name, guest.status)
    return guest


def remove_guest(db: Session, guest: Guest) -> None:
    guest_id, event_id = guest.id, guest.event_id
    db.delete(guest)
    db.commit()
    logger.info("Removed guest %s from event %s", guest_id, event_id)
