"""Account removal: a user's events and every row that points at the user."""
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from eventflow.models.event import Event
from eventflow.models.guest import Guest
from eventflow.models.message import Message
from eventflow.models.notification import Notification, PushSubscription
from eventflow.models.penalty import Penalty
from eventflow.models.report import Report
from eventflow.models.user import User
from eventflow.services import event_service

logger = logging.getLogger(__name__)


def delete_account(db: Session, user: User) -> None:
    user_id = user.id
    owned = db.query(Event).filter(Event.owner_id == user_id).all()
    for event in owned:
        event_service.delete_event(db, event)

    db.query(Guest).filter(
        or_(Guest.email == user.email, Guest.user_id == user_id)
    ).delete(synchronize_session=False)
    db.query(Message).filter(
        or_(Message.sender_id == user_id, Message.receiver_id == user_id)
    ).delete(synchronize_session=False)
    db.query(Report).filter(Report.reported_by == user_id).delete(synchronize_session=False)
    db.query(Report).filter(Report.reviewed_by == user_id).update({Report.reviewed_by: None}, synchronize_session=False)
    db.query(Notification).filter(Notification.user_id == user_id).delete(synchronize_session=False)
    db.query(PushSubscription).filter(PushSubscription.user_id == user_id).delete(synchronize_session=False)
    db.query(Penalty).filter(Penalty.user_id == user_id).delete(synchronize_session=False)
    # moderation history outlives the admin who wrote it
    db.query(Penalty).filter(Penalty.created_by == user_id).update({Penalty.created_by: None}, synchronize_session=False)
    db.delete(user)
    db.commit()
    logger.info("Deleted account %s with %d owned event(s)", user_id, len(owned))
