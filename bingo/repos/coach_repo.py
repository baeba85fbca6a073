from sqlalchemy.orm import Session, joinedload

from bingo.models.coach import Coach
from bingo.models.user import User
from bingo.core.security import generate_id

LIST_FIELDS = ("expertise", "specialties", "industries", "availability", "languages", "certifications")
SCALAR_FIELDS = ("bio", "years_experience", "coaching_style", "hourly_rate")


def _clean_list(values) -> list[str]:
    """De-duplicate while keeping first-seen order; drop blanks."""
    seen: list[str] = []
    for v in values or []:
        v = str(v).strip()
        if v and v not in seen:
            seen.append(v)
    return seen


def create(db: Session, user: User, *, commit: bool = True, **profile) -> Coach:
    coach = Coach(
        id=generate_id(),
        user_id=user.id,
        name=user.name,
        email=user.email,
        bio=profile.get("bio") or user.bio,
        years_experience=profile.get("years_experience"),
        coaching_style=profile.get("coaching_style"),
        hourly_rate=profile.get("hourly_rate"),
        **{f: _clean_list(profile.get(f)) for f in LIST_FIELDS},
    )
    db.add(coach)
    if commit:
        db.commit()
        db.refresh(coach)
    else:
        db.flush()
    return coach


def get_by_user_id(db: Session, user_id: str) -> Coach | None:
    return db.query(Coach).filter(Coach.user_id == user_id).first()


def get_all(db: Session) -> list[Coach]:
    return (
        db.query(Coach)
        .options(joinedload(Coach.user))
        .join(User, Coach.user_id == User.id)
        .filter(User.is_active.is_(True))
        .order_by(Coach.created_at.desc())
        .all()
    )


def update(db: Session, user_id: str, **profile) -> Coach | None:
    coach = get_by_user_id(db, user_id)
    if not coach:
        return None
    for field in LIST_FIELDS:
        if profile.get(field) is not None:
            setattr(coach, field, _clean_list(profile[field]))
    for field in SCALAR_FIELDS:
        if profile.get(field) is not None:
            setattr(coach, field, profile[field])
    db.commit()
    db.refresh(coach)
    return coach
