"""Event reports and account penalties. Everything but filing and listing
one's own reports is admin-only."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eventflow.auth.dependencies import get_current_user, require_admin, require_not_banned
from eventflow.database import get_db
from eventflow.models.event import Event
from eventflow.models.penalty import Penalty
from eventflow.models.report import Report, ReportStatus
from eventflow.models.user import User
from eventflow.schemas.moderation import (
    BannedUserOut,
    ModerationStats,
    PenaltyCreate,
    PenaltyOut,
    ReportCreate,
    ReportCreated,
    ReportOut,
    ReportReview,
)
from eventflow.services import moderation_service

router = APIRouter()


@router.post("/reports", response_model=ReportCreated, status_code=status.HTTP_201_CREATED)
def create_report(payload: ReportCreate, user: User = Depends(require_not_banned), db: Session = Depends(get_db)):
    report, auto_hidden = moderation_service.create_report(db, user, payload.event_id, payload.reason, payload.details)
    return ReportCreated(
        message="Denúncia registrada com sucesso",
        report=ReportOut.model_validate(report),
        auto_hidden=auto_hidden,
    )


@router.get("/reports/my", response_model=list[ReportOut])
def list_my_reports(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return db.query(Report).filter(Report.reported_by == user.id).order_by(Report.created_at.desc()).all()


@router.get("/reports/pending", response_model=list[ReportOut])
def list_pending_reports(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return (
        db.query(Report)
        .filter(Report.status == ReportStatus.pending)
        .order_by(Report.created_at.desc())
        .all()
    )


@router.get("/reports/all", response_model=list[ReportOut])
def list_all_reports(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return db.query(Report).order_by(Report.created_at.desc()).all()


@router.patch("/reports/{report_id}/review", response_model=ReportOut)
def review_report(
    report_id: str,
    payload: ReportReview,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return moderation_service.review_report(db, report_id, admin, ReportStatus(payload.status), payload.review_notes)


@router.post("/penalties", response_model=PenaltyOut, status_code=status.HTTP_201_CREATED)
def create_penalty(payload: PenaltyCreate, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return moderation_service.apply_penalty(
        db, admin,
        user_id=payload.user_id,
        type_=payload.type,
        reason=payload.reason,
        details=payload.details,
        duration=payload.duration,
    )


@router.get("/penalties/user/{user_id}", response_model=list[PenaltyOut])
def list_user_penalties(user_id: str, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return db.query(Penalty).filter(Penalty.user_id == user_id).order_by(Penalty.created_at.desc()).all()


@router.get("/banned-users", response_model=list[BannedUserOut])
def list_banned_users(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    users = db.query(User).filter(User.is_banned.is_(True)).order_by(User.banned_at.desc()).all()
    return [
        BannedUserOut(
            id=u.id,
            name=u.name,
            email=u.email,
            is_banned=u.is_banned,
            banned_at=u.banned_at,
            banned_until=u.banned_until,
            ban_reason=u.ban_reason,
            latest_penalty=PenaltyOut.model_validate(u.penalties[0]) if u.penalties else None,
        )
        for u in users
    ]


@router.post("/unban/{user_id}")
def unban_user(user_id: str, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    moderation_service.unban_user(db, user_id)
    return {"message": "Usuário desbanido com sucesso"}


@router.get("/stats", response_model=ModerationStats)
def get_stats(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return ModerationStats(
        pending_reports=db.query(Report).filter(Report.status == ReportStatus.pending).count(),
        total_reports=db.query(Report).count(),
        banned_users=db.query(User).filter(User.is_banned.is_(True)).count(),
        hidden_events=db.query(Event).filter(Event.is_hidden.is_(True)).count(),
        active_penalties=db.query(Penalty).filter(Penalty.is_active.is_(True)).count(),
    )
