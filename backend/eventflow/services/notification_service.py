"""In-app notifications with optional push delivery."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from firebase_admin.exceptions import FirebaseError
from sqlalchemy.orm import Session

from eventflow.config import settings
from eventflow.models.guest import RSVPStatus
from eventflow.models.notification import Notification, NotificationType, PushSubscription
from eventflow.services import push

logger = logging.getLogger(__name__)

RSVP_PHRASES = {
    RSVPStatus.yes: "confirmou presença",
    RSVPStatus.no: "recusou o convite",
    RSVPStatus.maybe: 'respondeu "talvez"',
    RSVPStatus.waitlisted: "entrou na lista de espera",
}


def notify(
    db: Session,
    user_id: str,
    type_: NotificationType,
    title: str,
    message: str,
    event_id: Optional[str] = None,
    data: Optional[dict[str, Any]] = None,
    action_url: Optional[str] = None,
    send_push: bool = True,
) -> Notification:
    """Store a notification for ``user_id`` and push it to their devices."""
    notification = Notification(
        user_id=user_id,
        type=type_,
        title=title,
        message=message,
        event_id=event_id,
        data=data,
        action_url=action_url,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    logger.info("Notification %s (%s) created for user %s", notification.id, type_.value, user_id)

    if send_push:
        _push(db, notification)
    return notification


def _push(db: Session, notification: Notification) -> None:
    """Deliver to active subscriptions. Delivery failures never fail the caller."""
    subscriptions = (
        db.query(PushSubscription)
        .filter(PushSubscription.user_id == notification.user_id, PushSubscription.is_active.is_(True))
        .all()
    )
    if not subscriptions:
        return

    tokens = [s.fcm_token for s in subscriptions]
    data = {"notification_id": notification.id}
    if notification.action_url:
        data["action_url"] = notification.action_url
    try:
        result = push.send_to_tokens(tokens, notification.title, notification.message, data=data)
    except (FirebaseError, ValueError):
        logger.warning("Push delivery failed for notification %s", notification.id, exc_info=True)
        return

    now = datetime.now(timezone.utc)
    for subscription in subscriptions:
        if subscription.fcm_token in result.unregistered_tokens:
            subscription.is_active = False
        else:
            subscription.last_used = now
    if result.success:
        notification.push_sent = True
        notification.push_sent_at = now
    db.commit()


def purge_old_notifications(db: Session, now: Optional[datetime] = None) -> int:
    """Delete read notifications older than the retention window."""
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=settings.NOTIFICATION_RETENTION_DAYS)
    deleted = (
        db.query(Notification)
        .filter(Notification.read.is_(True), Notification.created_at < cutoff)
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info("Purged %d read notifications older than %s", deleted, cutoff.date())
    return deleted


# ---------------------------------------------------------------------------
# Domain shortcuts
# ---------------------------------------------------------------------------
def notify_event_invite(db: Session, user_id: str, event_id: str, event_title: str, organizer_name: str):
    return notify(
        db, user_id, NotificationType.event_invite,
        "Novo convite de evento",
        f'{organizer_name} convidou você para "{event_title}"',
        event_id=event_id, action_url=f"/events/{event_id}",
    )


def notify_event_update(db: Session, user_id: str, event_id: str, event_title: str, changes: str):
    return notify(
        db, user_id, NotificationType.event_update,
        "Evento atualizado",
        f'"{event_title}" foi atualizado: {changes}',
        event_id=event_id, action_url=f"/events/{event_id}",
    )


def notify_event_cancelled(db: Session, user_id: str, event_id: str, event_title: str):
    return notify(
        db, user_id, NotificationType.event_cancelled,
        "Evento cancelado",
        f'O evento "{event_title}" foi cancelado',
        event_id=event_id,
    )


def notify_rsvp_response(db: Session, user_id: str, event_id: str, event_title: str, guest_name: str, rsvp: RSVPStatus):
    phrase = RSVP_PHRASES.get(rsvp, "respondeu ao convite")
    return notify(
        db, user_id, NotificationType.rsvp_response,
        "Resposta de convidado",
        f'{guest_name} {phrase} em "{event_title}"',
        event_id=event_id, action_url=f"/events/{event_id}/guests",
    )


def notify_new_message(db: Session, user_id: str, event_id: str, sender_name: str):
    return notify(
        db, user_id, NotificationType.new_message,
        "Nova mensagem",
        f"{sender_name} enviou uma mensagem",
        event_id=event_id, action_url=f"/events/{event_id}",
    )


def notify_announcement(db: Session, user_id: str, event_id: str, event_title: str):
    return notify(
        db, user_id, NotificationType.announcement,
        "Novo comunicado",
        f'Novo comunicado em "{event_title}"',
        event_id=event_id, action_url=f"/events/{event_id}",
    )
