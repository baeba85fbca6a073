from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import Session

from bingo.models.conversation import Conversation
from bingo.models.message import Message
from bingo.core.security import generate_id


def create(
    db: Session,
    conversation_id: str,
    sender_id: str,
    receiver_id: str,
    message_type: str,
    content: str,
    *,
    document_id: str | None = None,
    assessment_id: str | None = None,
    commit: bool = True,
) -> Message:
    """Persist a message. `content` must already be encrypted."""
    message = Message(
        id=generate_id(),
        conversation_id=conversation_id,
        sender_id=sender_id,
        receiver_id=receiver_id,
        type=message_type,
        content=content,
        document_id=document_id,
        assessment_id=assessment_id,
    )
    db.add(message)
    if commit:
        db.commit()
        db.refresh(message)
    else:
        db.flush()
    return message


def get_by_conversation(db: Session, conversation_id: str) -> list[Message]:
    return (
        db.query(Message)
        .filter(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.asc())
        .all()
    )


def count_by_conversation(db: Session, conversation_id: str) -> int:
    return db.query(Message).filter(Message.conversation_id == conversation_id).count()


def get_last(db: Session, conversation_id: str) -> Message | None:
    return (
        db.query(Message)
        .filter(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.desc())
        .first()
    )


def get_recent_received(db: Session, user_id: str, since: datetime) -> list[Message]:
    """Messages in the user's conversations, sent by someone else, created at or after `since`."""
    return (
        db.query(Message)
        .join(Conversation, Message.conversation_id == Conversation.id)
        .filter(
            or_(Conversation.coach_id == user_id, Conversation.seeker_id == user_id),
            Message.sender_id != user_id,
            Message.created_at >= since,
        )
        .order_by(Message.created_at.asc())
        .all()
    )
