"""Guest list routes, nested under an event."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from eventflow.auth.dependencies import get_current_user, require_not_banned
from eventflow.database import get_db
from eventflow.models.event import EventVisibility
from eventflow.models.guest import Guest
from eventflow.models.user import User
from eventflow.schemas.guest import GuestOut, GuestsAdd, GuestsAdded, GuestUpdate
from eventflow.services import event_service, guest_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/{event_id}/guests", response_model=list[GuestOut])
def list_guests(event_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    event = event_service.get_event_or_404(db, event_id)
    is_owner = event.owner_id == user.id
    is_public = event.visibility == EventVisibility.public
    if not is_owner and not is_public and event_service.find_guest(db, event.id, user.email) is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Você não tem permissão para ver os convidados deste evento",
        )
    return db.query(Guest).filter(Guest.event_id == event.id).order_by(Guest.created_at).all()


@router.post("/{event_id}/guests", response_model=GuestsAdded, status_code=status.HTTP_201_CREATED)
def add_guests(
    event_id: str,
    payload: GuestsAdd,
    user: User = Depends(require_not_banned),
    db: Session = Depends(get_db),
):
    event = event_service.get_event_or_404(db, event_id)
    created = guest_service.add_guests(db, event, user, [str(e) for e in payload.emails])
    return GuestsAdded(
        message=f"{len(created)} convidados adicionados",
        guests=[GuestOut.model_validate(g) for g in created],
    )


@router.patch("/{event_id}/guests/{guest_id}", response_model=GuestOut)
def update_guest(
    event_id: str,
    guest_id: str,
    payload: GuestUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    event = event_service.get_event_or_404(db, event_id)
    guest = guest_service.get_guest_or_404(db, event.id, guest_id)
    return guest_service.update_guest(
        db, event, guest, user,
        new_status=payload.status,
        name=payload.name,
        decline_reason=payload.decline_reason,
    )


@router.delete("/{event_id}/guests/{guest_id}")
def delete_guest(event_id: str, guest_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    event = event_service.get_event_or_404(db, event_id)
    guest = guest_service.get_guest_or_404(db, event.id, guest_id)
    if event.owner_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Apenas o organizador pode remover convidados")
    guest_service.remove_guest(db, guest)
    return {"message": "Convidado removido com sucesso"}
