from sqlalchemy import or_
from sqlalchemy.orm import Session

from bingo.models.coach_match import CoachMatch, STATUS_MATCHED, STATUS_PENDING
from bingo.core.security import generate_id


def create(
    db: Session,
    coach_id: str,
    seeker_id: str,
    match_score: float = 0,
    match_reason: str | None = None,
    *,
    commit: bool = True,
) -> CoachMatch:
    match = CoachMatch(
        id=generate_id(),
        coach_id=coach_id,
        seeker_id=seeker_id,
        status=STATUS_PENDING,
        match_score=match_score,
        match_reason=match_reason,
    )
    db.add(match)
    if commit:
        db.commit()
        db.refresh(match)
    else:
        db.flush()
    return match


def get_by_id(db: Session, match_id: str) -> CoachMatch | None:
    return db.query(CoachMatch).filter(CoachMatch.id == match_id).first()


def get_for_coach(db: Session, coach_id: str, status: str | None = None) -> list[CoachMatch]:
    q = db.query(CoachMatch).filter(CoachMatch.coach_id == coach_id)
    if status is not None:
        q = q.filter(CoachMatch.status == status)
    return q.order_by(CoachMatch.created_at.desc()).all()


def get_for_seeker(db: Session, seeker_id: str, status: str | None = None) -> list[CoachMatch]:
    q = db.query(CoachMatch).filter(CoachMatch.seeker_id == seeker_id)
    if status is not None:
        q = q.filter(CoachMatch.status == status)
    return q.order_by(CoachMatch.created_at.desc()).all()


def get_for_user(db: Session, user_id: str, status: str | None = None) -> list[CoachMatch]:
    q = db.query(CoachMatch).filter(or_(CoachMatch.coach_id == user_id, CoachMatch.seeker_id == user_id))
    if status is not None:
        q = q.filter(CoachMatch.status == status)
    return q.order_by(CoachMatch.created_at.desc()).all()


def has_matched_pair(db: Session, coach_id: str, seeker_id: str) -> bool:
    return (
        db.query(CoachMatch)
        .filter(
            CoachMatch.coach_id == coach_id,
            CoachMatch.seeker_id == seeker_id,
            CoachMatch.status == STATUS_MATCHED,
        )
        .first()
        is not None
    )


def update_status(db: Session, match: CoachMatch, status: str, *, commit: bool = True) -> CoachMatch:
    match.status = status
    if commit:
        db.commit()
        db.refresh(match)
    else:
        db.flush()
    return match
