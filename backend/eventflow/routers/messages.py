"""Direct messages between an event's organizer and its guests.

A guest always writes to the organizer; the organizer picks the recipient.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from eventflow.auth.dependencies import get_current_user
from eventflow.database import get_db
from eventflow.models.message import Message
from eventflow.models.user import User
from eventflow.schemas.message import ConversationOut, MessageCreate, MessageOut
from eventflow.services import event_service, notification_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/{event_id}/messages", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
def send_message(
    event_id: str,
    payload: MessageCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    event = event_service.get_event_or_404(db, event_id)
    is_owner = event.owner_id == user.id
    if not is_owner and event_service.find_guest(db, event.id, user.email) is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Você deve ser um convidado ou organizador para enviar mensagens",
        )

    if is_owner:
        if not payload.receiver_id:
            raise HTTPException(status_code=400, detail="receiver_id é obrigatório ao responder como organizador")
        if not db.query(User).filter(User.id == payload.receiver_id).first():
            raise HTTPException(status_code=404, detail="Destinatário não encontrado")
        receiver_id = payload.receiver_id
    else:
        receiver_id = event.owner_id

    message = Message(content=payload.content, sender_id=user.id, receiver_id=receiver_id, event_id=event.id)
    db.add(message)
    db.commit()
    db.refresh(message)
    logger.info("Message %s sent on event %s", message.id, event.id)

    notification_service.notify_new_message(db, receiver_id, event.id, user.name)
    return message


@router.get("/{event_id}/messages/conversations", response_model=list[ConversationOut])
def list_conversations(event_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """One entry per participant, most recent conversation first."""
    event = event_service.get_event_or_404(db, event_id)
    if event.owner_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Apenas o organizador pode ver todas as conversas",
        )

    messages = (
        db.query(Message)
        .filter(Message.event_id == event.id, or_(Message.sender_id == user.id, Message.receiver_id == user.id))
        .order_by(Message.created_at.desc())
        .all()
    )

    conversations: dict[str, ConversationOut] = {}
    for message in messages:
        other = message.receiver if message.sender_id == user.id else message.sender
        if other.id not in conversations:
            conversations[other.id] = ConversationOut(
                user_id=other.id,
                user_name=other.name,
                user_email=other.email,
                last_message=message.content,
                last_message_at=message.created_at,
                unread_count=0,
            )
        if message.receiver_id == user.id and not message.read:
            conversations[other.id].unread_count += 1
    return list(conversations.values())


@router.get("/{event_id}/messages/{other_user_id}", response_model=list[MessageOut])
def get_thread(
    event_id: str,
    other_user_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Messages between the caller and ``other_user_id``, oldest first.
    Opening the thread marks the caller's received messages as read."""
    event = event_service.get_event_or_404(db, event_id)
    if user.id != event.owner_id and other_user_id != event.owner_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Você não tem permissão para ver esta conversa")

    messages = (
        db.query(Message)
        .filter(
            Message.event_id == event.id,
            or_(
                and_(Message.sender_id == user.id, Message.receiver_id == other_user_id),
                and_(Message.sender_id == other_user_id, Message.receiver_id == user.id),
            ),
        )
        .order_by(Message.created_at)
        .all()
    )
    thread = [MessageOut.model_validate(m) for m in messages]

    marked = (
        db.query(Message)
        .filter(
            Message.event_id == event.id,
            Message.receiver_id == user.id,
            Message.sender_id == other_user_id,
            Message.read.is_(False),
        )
        .update({Message.read: True}, synchronize_session=False)
    )
    db.commit()
    if marked:
        logger.info("Marked %d message(s) read for user %s on event %s", marked, user.id, event.id)
    return thread


@router.patch("/{event_id}/messages/{message_id}/read", response_model=MessageOut)
def mark_read(event_id: str, message_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    message = db.query(Message).filter(Message.id == message_id).first()
    if not message:
        raise HTTPException(status_code=404, detail="Mensagem não encontrada")
    if message.event_id != event_id:
        raise HTTPException(status_code=400, detail="Mensagem não pertence a este evento")
    if message.receiver_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Você só pode marcar suas próprias mensagens como lidas",
        )
    message.read = True
    db.commit()
    db.refresh(message)
    return message
