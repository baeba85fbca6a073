from sqlalchemy.orm import Session

from bingo.models.user import User, ROLE_COACH, ROLE_SEEKER
from bingo.core.security import hash_password, generate_id

PROFILE_FIELDS = ("first_name", "last_name", "bio", "location", "phone")


def get_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def get_by_id(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def create(
    db: Session,
    email: str,
    password: str,
    *,
    role: str = ROLE_SEEKER,
    first_name: str | None = None,
    last_name: str | None = None,
    bio: str | None = None,
    location: str | None = None,
    phone: str | None = None,
    commit: bool = True,
) -> User:
    name = " ".join(p for p in (first_name, last_name) if p) or None
    user = User(
        id=generate_id(),
        email=email,
        password_hash=hash_password(password),
        name=name,
        first_name=first_name,
        last_name=last_name,
        role=role,
        is_coach=role == ROLE_COACH,
        bio=bio,
        location=location,
        phone=phone,
        assessment_completed=False,
    )
    db.add(user)
    if commit:
        db.commit()
        db.refresh(user)
    else:
        db.flush()
    return user


def update(db: Session, user_id: str, *, commit: bool = True, **fields) -> User | None:
    """Apply profile edits. Keys outside PROFILE_FIELDS (plus password_hash, assessment_completed) are ignored."""
    user = get_by_id(db, user_id)
    if not user:
        return None
    allowed = set(PROFILE_FIELDS) | {"password_hash", "assessment_completed"}
    for key, value in fields.items():
        if key in allowed and value is not None:
            setattr(user, key, value)
    if "first_name" in fields or "last_name" in fields:
        user.name = " ".join(p for p in (user.first_name, user.last_name) if p) or user.name
    if commit:
        db.commit()
        db.refresh(user)
    else:
        db.flush()
    return user


def list_seekers(db: Session, assessment_completed: bool | None = None) -> list[User]:
    q = db.query(User).filter(User.is_coach.is_(False), User.is_active.is_(True))
    if assessment_completed is not None:
        q = q.filter(User.assessment_completed.is_(assessment_completed))
    return q.order_by(User.created_at.desc()).all()
