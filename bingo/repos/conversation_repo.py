import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bingo.models.conversation import Conversation
from bingo.core.security import generate_id

logger = logging.getLogger(__name__)


def create(
    db: Session,
    coach_id: str,
    seeker_id: str,
    match_id: str | None = None,
    *,
    commit: bool = True,
) -> Conversation:
    conversation = Conversation(
        id=generate_id(),
        coach_id=coach_id,
        seeker_id=seeker_id,
        match_id=match_id,
    )
    db.add(conversation)
    if commit:
        db.commit()
        db.refresh(conversation)
    else:
        db.flush()
    return conversation


def get_by_id(db: Session, conversation_id: str) -> Conversation | None:
    return db.query(Conversation).filter(Conversation.id == conversation_id).first()


def get_by_match_id(db: Session, match_id: str) -> Conversation | None:
    return db.query(Conversation).filter(Conversation.match_id == match_id).first()


def get_or_create_for_match(db: Session, coach_id: str, seeker_id: str, match_id: str) -> tuple[Conversation, bool]:
    """
    Return (conversation, created). Commits on create.
    Must be called with no other pending changes: a lost insert race rolls the session back.
    """
    existing = get_by_match_id(db, match_id)
    if existing:
        return existing, False
    try:
        return create(db, coach_id, seeker_id, match_id), True
    except IntegrityError:
        db.rollback()
        logger.info("Conversation for match=%s created concurrently; using existing", match_id)
        existing = get_by_match_id(db, match_id)
        if existing is None:
            raise
        return existing, False


def get_for_user(db: Session, user_id: str) -> list[Conversation]:
    return (
        db.query(Conversation)
        .filter(or_(Conversation.coach_id == user_id, Conversation.seeker_id == user_id))
        .order_by(Conversation.created_at.desc())
        .all()
    )

