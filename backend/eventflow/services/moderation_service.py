"""Reports, automatic hiding and penalties.

An event is hidden automatically once its PENDING reports reach
``REPORT_AUTO_HIDE_THRESHOLD``. Rejecting reports restores an automatically
hidden event when the pending count drops back below the threshold; events
hidden for any other reason stay hidden.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from eventflow.config import settings
from eventflow.models.event import Event
from eventflow.models.penalty import Penalty, PenaltyType
from eventflow.models.report import Report, ReportReason, ReportStatus
from eventflow.models.user import User, UserRole

logger = logging.getLogger(__name__)

AUTO_HIDE_REASON = "Múltiplas denúncias (oculto automaticamente)"
BANNED_OWNER_REASON = "Organizador banido"


def pending_report_count(db: Session, event_id: str) -> int:
    return db.query(Report).filter(Report.event_id == event_id, Report.status == ReportStatus.pending).count()


def create_report(
    db: Session,
    reporter: User,
    event_id: str,
    reason: ReportReason,
    details: Optional[str] = None,
) -> tuple[Report, bool]:
    """Record a report; returns it with whether the event is now auto-hidden."""
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise HTTPException(status_code=404, detail="Evento não encontrado")
    if event.owner_id == reporter.id:
        raise HTTPException(status_code=400, detail="Você não pode denunciar seu próprio evento")

    existing = (
        db.query(Report)
        .filter(Report.event_id == event_id, Report.reported_by == reporter.id)
        .first()
    )
    if existing:
        raise HTTPException(status_code=400, detail="Você já denunciou este evento")

    report = Report(event_id=event_id, reported_by=reporter.id, reason=reason, details=details or None)
    db.add(report)
    event.report_count = (event.report_count or 0) + 1
    db.flush()

    auto_hidden = pending_report_count(db, event_id) >= settings.REPORT_AUTO_HIDE_THRESHOLD
    if auto_hidden and not event.is_hidden:
        event.is_hidden = True
        event.hidden_reason = AUTO_HIDE_REASON
        event.hidden_at = datetime.now(timezone.utc)
        logger.warning("Event %s hidden automatically after %d reports", event_id, event.report_count)

    db.commit()
    db.refresh(report)
    logger.info("Report %s filed against event %s by user %s (%s)", report.id, event_id, reporter.id, reason.value)
    return report, auto_hidden


def review_report(
    db: Session,
    report_id: str,
    reviewer: User,
    new_status: ReportStatus,
    review_notes: Optional[str] = None,
) -> Report:
    report = db.query(Report).filter(Report.id == report_id).first()
    if not report:
        raise HTTPException(status_code=404, detail="Denúncia não encontrada")
    if report.status != ReportStatus.pending:
        raise HTTPException(status_code=400, detail="Esta denúncia já foi revisada")

    report.status = new_status
    report.reviewed_by = reviewer.id
    report.reviewed_at = datetime.now(timezone.utc)
    report.review_notes = review_notes or None
    db.flush()

    event = report.event
    if (
        new_status == ReportStatus.rejected
        and event.is_hidden
        and event.hidden_reason == AUTO_HIDE_REASON
        and pending_report_count(db, event.id) < settings.REPORT_AUTO_HIDE_THRESHOLD
    ):
        event.is_hidden = False
        event.hidden_reason = None
        event.hidden_at = None
        logger.info("Event %s restored after report %s was rejected", event.id, report.id)

    db.commit()
    db.refresh(report)
    logger.info("Report %s reviewed by admin %s: %s", report.id, reviewer.id, new_status.value)
    return report


def apply_penalty(
    db: Session,
    admin: User,
    user_id: str,
    type_: PenaltyType,
    reason: str,
    details: Optional[str] = None,
    duration: Optional[int] = None,
) -> Penalty:
    """SUSPENSION and BAN block the account; BAN also hides all of its events."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="Usuário não encontrado")
    if user.role == UserRole.admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Não é possível penalizar administradores")

    if type_ == PenaltyType.suspension and not duration:
        raise HTTPException(status_code=400, detail="Suspensão requer duração em dias")
    if type_ == PenaltyType.warning and duration:
        raise HTTPException(status_code=400, detail="Advertência não aceita duração")
    if type_ == PenaltyType.ban and duration:
        raise HTTPException(status_code=400, detail="Ban permanente não aceita duração")

    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(days=duration) if type_ == PenaltyType.suspension else None

    penalty = Penalty(
        user_id=user_id,
        type=type_,
        reason=reason,
        details=details or None,
        duration=duration,
        expires_at=expires_at,
        created_by=admin.id,
    )
    db.add(penalty)

    if type_ in (PenaltyType.suspension, PenaltyType.ban):
        user.is_banned = True
        user.banned_at = now
        user.banned_until = expires_at
        user.ban_reason = reason
        if type_ == PenaltyType.ban:
            hidden = (
                db.query(Event)
                .filter(Event.owner_id == user_id)
                .update(
                    {Event.is_hidden: True, Event.hidden_reason: BANNED_OWNER_REASON, Event.hidden_at: now},
                    synchronize_session=False,
                )
            )
            logger.info("Hid %d event(s) of banned user %s", hidden, user_id)

    db.commit()
    db.refresh(penalty)
    logger.info("Admin %s applied %s to user %s", admin.id, type_.value, user_id)
    return penalty


def unban_user(db: Session, user_id: str) -> User:
    """Lift the ban and deactivate every active penalty. Hidden events stay hidden."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="Usuário não encontrado")
    if not user.is_banned:
        raise HTTPException(status_code=400, detail="Usuário não está banido")

    user.is_banned = False
    user.banned_at = None
    user.banned_until = None
    user.ban_reason = None
    db.query(Penalty).filter(Penalty.user_id == user_id, Penalty.is_active.is_(True)).update(
        {Penalty.is_active: False}, synchronize_session=False
    )
    db.commit()
    logger.info("User %s unbanned", user_id)
    return user
