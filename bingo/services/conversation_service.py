import logging

from sqlalchemy.orm import Session

from bingo.core.encryption import MessageCipher, get_message_cipher
from bingo.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from bingo.models.coach_match import STATUS_MATCHED
from bingo.models.conversation import Conversation
from bingo.models.message import (
    Message,
    MESSAGE_TYPES,
    TYPE_ASSESSMENT_REF,
    TYPE_DOCUMENT_REF,
    TYPE_TEXT,
)
from bingo.repos import assessment_repo, conversation_repo, document_repo, message_repo
from bingo.schemas.message import ConversationDetail, ConversationSummary, MessageResponse
from bingo.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)


def message_to_response(message: Message, content: str) -> MessageResponse:
    return MessageResponse(
        id=message.id,
        conversation_id=message.conversation_id,
        sender_id=message.sender_id,
        receiver_id=message.receiver_id,
        type=message.type,
        content=content,
        document_id=message.document_id,
        assessment_id=message.assessment_id,
        created_at=message.created_at,
    )


def create_conversation(
    db: Session,
    coach_id: str,
    seeker_id: str,
    match_id: str | None = None,
    *,
    commit: bool = True,
) -> Conversation:
    """Always inserts. Use conversation_repo.get_or_create_for_match when a match is known."""
    conversation = conversation_repo.create(db, coach_id, seeker_id, match_id, commit=commit)
    logger.info("Conversation created: id=%s match=%s", conversation.id, match_id)
    return conversation


def get_conversation(db: Session, conversation_id: str, user_id: str) -> Conversation:
    conversation = conversation_repo.get_by_id(db, conversation_id)
    if not conversation:
        raise NotFoundError("Conversation not found")
    if not conversation.has_participant(user_id):
        logger.info("Conversation access denied: conversation=%s user=%s", conversation_id, user_id)
        raise AuthorizationError("Access denied")
    return conversation


def append_message(
    db: Session,
    conversation: Conversation,
    sender_id: str,
    message_type: str,
    content: str,
    *,
    document_id: str | None = None,
    assessment_id: str | None = None,
    cipher: MessageCipher | None = None,
    commit: bool = True,
) -> Message:
    """Encrypt and store a message with no policy checks. Callers own validation."""
    cipher = cipher or get_message_cipher()
    return message_repo.create(
        db,
        conversation.id,
        sender_id,
        conversation.other_participant(sender_id),
        message_type,
        cipher.encrypt(content),
        document_id=document_id,
        assessment_id=assessment_id,
        commit=commit,
    )


def _validate_message(
    db: Session,
    conversation: Conversation,
    sender_id: str,
    message_type: str,
    content: str,
    document_id: str | None,
    assessment_id: str | None,
) -> None:
    if message_type not in MESSAGE_TYPES:
        raise ValidationError("Invalid message type")

    match = conversation.match
    if match is not None and match.status != STATUS_MATCHED:
        raise ValidationError("Messaging is available once the match is accepted")

    if message_type == TYPE_TEXT and not content.strip():
        raise ValidationError("Message content is required")

    if message_type == TYPE_DOCUMENT_REF:
        if not document_id:
            raise ValidationError("Document ID is required")
        document = document_repo.get_by_id(db, document_id)
        if not document or document.user_id != sender_id:
            raise ValidationError("Invalid document reference")

    if message_type == TYPE_ASSESSMENT_REF:
        if not assessment_id:
            raise ValidationError("Assessment ID is required")
        assessment = assessment_repo.get_by_id(db, assessment_id)
        if not assessment or assessment.user_id != sender_id:
            raise ValidationError("Invalid assessment reference")


def post_message(
    db: Session,
    conversation_id: str,
    sender_id: str,
    message_type: str,
    content: str | None,
    document_id: str | None = None,
    assessment_id: str | None = None,
    dispatcher: NotificationDispatcher | None = None,
) -> MessageResponse:
    """
    Post a participant's message to a conversation.

    Raises NotFoundError for an unknown conversation, AuthorizationError when the sender is
    not a participant and ValidationError for a bad type, an unaccepted match or a
    reference the sender does not own. The returned content is plaintext.
    """
    cipher = get_message_cipher()
    conversation = get_conversation(db, conversation_id, sender_id)
    content = content or ""
    _validate_message(db, conversation, sender_id, message_type, content, document_id, assessment_id)

    message = append_message(
        db,
        conversation,
        sender_id,
        message_type,
        content,
        document_id=document_id if message_type == TYPE_DOCUMENT_REF else None,
        assessment_id=assessment_id if message_type == TYPE_ASSESSMENT_REF else None,
        cipher=cipher,
    )
    logger.info("Message posted: id=%s conversation=%s type=%s", message.id, conversation.id, message_type)

    if dispatcher is not None:
        recipient_id = message.receiver_id
        dispatcher.check_for_new_notifications(db, recipient_id, is_coach=recipient_id == conversation.coach_id)
    return message_to_response(message, content)


def list_messages(db: Session, conversation_id: str) -> list[MessageResponse]:
    """All messages, oldest first, decrypted. Undecryptable rows carry a placeholder."""
    cipher = get_message_cipher()
    return [
        message_to_response(m, cipher.decrypt_or_placeholder(m.content, m.id))
        for m in message_repo.get_by_conversation(db, conversation_id)
    ]


def get_conversation_detail(db: Session, conversation_id: str, user_id: str) -> ConversationDetail:
    conversation = get_conversation(db, conversation_id, user_id)
    return ConversationDetail(
        id=conversation.id,
        coach_id=conversation.coach_id,
        seeker_id=conversation.seeker_id,
        match_id=conversation.match_id,
        created_at=conversation.created_at,
        updated_at=conversation.updated_at,
        match_status=conversation.match.status if conversation.match else None,
        messages=list_messages(db, conversation.id),
    )


def list_conversations(db: Session, user_id: str) -> list[ConversationSummary]:
    """The user's conversations, most recent activity first."""
    summaries = []
    for conversation in conversation_repo.get_for_user(db, user_id):
        last = message_repo.get_last(db, conversation.id)
        summaries.append(
            ConversationSummary(
                id=conversation.id,
                coach_id=conversation.coach_id,
                seeker_id=conversation.seeker_id,
                match_id=conversation.match_id,
                created_at=conversation.created_at,
                updated_at=conversation.updated_at,
                other_user_id=conversation.other_participant(user_id),
                match_status=conversation.match.status if conversation.match else None,
                last_message_at=last.created_at if last else None,
            )
        )
    summaries.sort(key=_activity_key, reverse=True)
    return summaries


def _activity_key(summary: ConversationSummary) -> str:
    stamp = summary.last_message_at or summary.created_at
    # Naive (SQLite) and aware datetimes cannot be compared directly
    return stamp.replace(tzinfo=None).isoformat() if stamp else ""
