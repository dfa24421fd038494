"""Owner announcements broadcast to an event's guests."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from eventflow.auth.dependencies import get_current_user
from eventflow.database import get_db
from eventflow.models.announcement import Announcement
from eventflow.models.event import EventVisibility
from eventflow.models.user import User
from eventflow.schemas.announcement import AnnouncementIn, AnnouncementOut
from eventflow.services import event_service, notification_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_announcement(db: Session, event_id: str, announcement_id: str) -> Announcement:
    announcement = db.query(Announcement).filter(Announcement.id == announcement_id).first()
    if not announcement:
        raise HTTPException(status_code=404, detail="Anúncio não encontrado")
    if announcement.event_id != event_id:
        raise HTTPException(status_code=400, detail="Anúncio não pertence a este evento")
    return announcement


@router.get("/{event_id}/announcements", response_model=list[AnnouncementOut])
def list_announcements(event_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    event = event_service.get_event_or_404(db, event_id)
    if event.visibility == EventVisibility.private and event.owner_id != user.id:
        if event_service.find_guest(db, event.id, user.email) is None:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Não autorizado")
    return (
        db.query(Announcement)
        .filter(Announcement.event_id == event.id)
        .order_by(Announcement.created_at.desc())
        .all()
    )


@router.post("/{event_id}/announcements", response_model=AnnouncementOut, status_code=status.HTTP_201_CREATED)
def create_announcement(
    event_id: str,
    payload: AnnouncementIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    event = event_service.get_event_or_404(db, event_id)
    if event.owner_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Apenas o criador pode adicionar anúncios")

    announcement = Announcement(message=payload.message, event_id=event.id, created_by=user.id)
    db.add(announcement)
    db.commit()
    db.refresh(announcement)
    logger.info("Announcement %s posted on event %s", announcement.id, event.id)

    for user_id in event_service.linked_guest_user_ids(event):
        notification_service.notify_announcement(db, user_id, event.id, event.title)
    return announcement


@router.patch("/{event_id}/announcements/{announcement_id}", response_model=AnnouncementOut)
def update_announcement(
    event_id: str,
    announcement_id: str,
    payload: AnnouncementIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    announcement = _get_announcement(db, event_id, announcement_id)
    if announcement.event.owner_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Apenas o criador do evento pode editar anúncios",
        )
    announcement.message = payload.message
    db.commit()
    db.refresh(announcement)
    logger.info("Announcement %s edited", announcement.id)
    return announcement


@router.delete("/{event_id}/announcements/{announcement_id}")
def delete_announcement(
    event_id: str,
    announcement_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    announcement = _get_announcement(db, event_id, announcement_id)
    if announcement.event.owner_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Apenas o criador do evento pode deletar anúncios",
        )
    db.delete(announcement)
    db.commit()
    logger.info("Announcement %s deleted from event %s", announcement_id, event_id)
    return {"message": "Anúncio removido com sucesso"}
