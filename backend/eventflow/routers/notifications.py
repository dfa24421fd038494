"""In-app notification inbox and FCM device subscriptions."""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from eventflow.auth.dependencies import get_current_user
from eventflow.database import get_db
from eventflow.models.notification import Notification, PushSubscription
from eventflow.models.user import User
from eventflow.schemas.notification import (
    NotificationOut,
    NotificationPage,
    SubscribeRequest,
    SubscriptionOut,
    UnsubscribeRequest,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _unread_count(db: Session, user_id: str) -> int:
    return db.query(Notification).filter(Notification.user_id == user_id, Notification.read.is_(False)).count()


def _get_own_notification(db: Session, notification_id: str, user: User) -> Notification:
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user.id)
        .first()
    )
    if not notification:
        raise HTTPException(status_code=404, detail="Notificação não encontrada")
    return notification


@router.get("", response_model=NotificationPage)
def list_notifications(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    unread_only: bool = Query(False),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = db.query(Notification).filter(Notification.user_id == user.id)
    if unread_only:
        query = query.filter(Notification.read.is_(False))
    total = query.count()
    notifications = query.order_by(Notification.created_at.desc()).offset(offset).limit(limit).all()
    return NotificationPage(
        notifications=[NotificationOut.model_validate(n) for n in notifications],
        total=total,
        unread_count=_unread_count(db, user.id),
    )


@router.get("/unread-count")
def unread_count(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"count": _unread_count(db, user.id)}


@router.patch("/{notification_id}/read", response_model=NotificationOut)
def mark_read(notification_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    notification = _get_own_notification(db, notification_id, user)
    if not notification.read:
        notification.read = True
        notification.read_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(notification)
    return notification


@router.post("/mark-all-read")
def mark_all_read(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user.id, Notification.read.is_(False))
        .update({Notification.read: True, Notification.read_at: datetime.now(timezone.utc)}, synchronize_session=False)
    )
    db.commit()
    logger.info("Marked %d notification(s) read for user %s", updated, user.id)
    return {"updated": updated}


@router.delete("/{notification_id}")
def delete_notification(notification_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    notification = _get_own_notification(db, notification_id, user)
    db.delete(notification)
    db.commit()
    logger.info("Deleted notification %s of user %s", notification_id, user.id)
    return {"message": "Notificação removida"}


@router.post("/subscribe", response_model=SubscriptionOut)
def subscribe(payload: SubscribeRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Register a device token. A token seen before is reactivated and moved
    to the calling user."""
    subscription = db.query(PushSubscription).filter(PushSubscription.fcm_token == payload.fcm_token).first()
    if subscription is None:
        subscription = PushSubscription(fcm_token=payload.fcm_token, user_id=user.id)
        db.add(subscription)
    subscription.user_id = user.id
    subscription.device_type = payload.device_type
    subscription.device_name = payload.device_name
    subscription.is_active = True
    subscription.last_used = datetime.now(timezone.utc)
    db.commit()
    db.refresh(subscription)
    logger.info("Push subscription %s active for user %s", subscription.id, user.id)
    return subscription


@router.post("/unsubscribe")
def unsubscribe(payload: UnsubscribeRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    updated = (
        db.query(PushSubscription)
        .filter(PushSubscription.fcm_token == payload.fcm_token, PushSubscription.user_id == user.id)
        .update({PushSubscription.is_active: False}, synchronize_session=False)
    )
    db.commit()
    logger.info("Deactivated %d push subscription(s) for user %s", updated, user.id)
    return {"message": "Inscrição removida", "updated": updated}


@router.get("/subscriptions", response_model=list[SubscriptionOut])
def list_subscriptions(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return (
        db.query(PushSubscription)
        .filter(PushSubscription.user_id == user.id, PushSubscription.is_active.is_(True))
        .order_by(PushSubscription.created_at.desc())
        .all()
    )
