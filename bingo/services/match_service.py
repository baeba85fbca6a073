"""
Coach/seeker match lifecycle.

A match starts `pending` when either party requests it and moves once to
`matched` or `declined`. Requesting also opens the bound conversation with a
greeting from the requester; accepting adds an acceptance message and a system
notice. Each operation commits its writes together and notifies the other party
only after the commit.
"""
import logging

from sqlalchemy.orm import Session

from bingo.core.encryption import get_message_cipher
from bingo.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from bingo.models.coach_match import CoachMatch, STATUS_DECLINED, STATUS_MATCHED, STATUS_PENDING
from bingo.models.conversation import Conversation
from bingo.models.message import TYPE_SYSTEM, TYPE_TEXT
from bingo.repos import conversation_repo, match_repo, user_repo
from bingo.services.conversation_service import append_message, create_conversation
from bingo.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)

DEFAULT_MATCH_REASON = "Manual match request"

OPENING_FROM_SEEKER = (
    "Hi! I'm interested in working with you as my career coach. "
    "Would you be available to discuss how we could work together?"
)
OPENING_FROM_COACH = (
    "Hi! I'd be happy to work with you as your career coach. "
    "When would be a good time to discuss your goals and how I can help?"
)
ACCEPTED_BY_COACH = (
    "I'm excited to work with you as your career coach! "
    "Let's start by discussing your career goals and how I can help you achieve them."
)
ACCEPTED_BY_SEEKER = (
    "Thank you for accepting! I'm looking forward to working with you. "
    "I'd love to share my career goals and hear how you can help me achieve them."
)
CONNECTED_NOTICE = "\U0001f389 You're now connected! You can freely message each other and schedule coaching sessions."

RESPONSE_STATUSES = (STATUS_MATCHED, STATUS_DECLINED)


def _notify_counterparty(dispatcher: NotificationDispatcher | None, db: Session, match: CoachMatch, actor_id: str) -> None:
    if dispatcher is None:
        return
    other_id = match.other_party(actor_id)
    dispatcher.check_for_new_notifications(db, other_id, is_coach=other_id == match.coach_id)


def request_match(
    db: Session,
    actor_id: str,
    coach_id: str,
    seeker_id: str,
    match_score: float = 0,
    match_reason: str | None = None,
    dispatcher: NotificationDispatcher | None = None,
) -> tuple[CoachMatch, Conversation]:
    """Create a pending match, its conversation and the requester's opening message."""
    coach = user_repo.get_by_id(db, coach_id)
    if not coach or not coach.is_coach:
        raise NotFoundError("Coach not found")
    seeker = user_repo.get_by_id(db, seeker_id)
    if not seeker or seeker.is_coach:
        raise NotFoundError("Seeker not found")
    if actor_id not in (coach_id, seeker_id):
        raise AuthorizationError("You can only request matches you are part of")

    cipher = get_message_cipher()
    try:
        match = match_repo.create(
            db,
            coach.id,
            seeker.id,
            match_score=match_score or 0,
            match_reason=match_reason or DEFAULT_MATCH_REASON,
            commit=False,
        )
        conversation = create_conversation(db, coach.id, seeker.id, match.id, commit=False)
        opening = OPENING_FROM_SEEKER if actor_id == seeker.id else OPENING_FROM_COACH
        append_message(db, conversation, actor_id, TYPE_TEXT, opening, cipher=cipher, commit=False)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(match)
    db.refresh(conversation)
    logger.info("Match requested: id=%s coach=%s seeker=%s by=%s", match.id, coach.id, seeker.id, actor_id)

    _notify_counterparty(dispatcher, db, match, actor_id)
    return match, conversation


def respond_to_match(
    db: Session,
    match_id: str,
    actor_id: str,
    new_status: str,
    dispatcher: NotificationDispatcher | None = None,
) -> CoachMatch:
    """
    Accept or decline a pending match. Repeating the current status is a no-op; changing an
    already resolved match is a ValidationError.
    """
    if new_status not in RESPONSE_STATUSES:
        raise ValidationError("Status must be matched or declined")
    match = match_repo.get_by_id(db, match_id)
    if not match:
        raise NotFoundError("Match not found")
    if actor_id not in (match.coach_id, match.seeker_id):
        raise AuthorizationError("Unauthorized")

    if match.status == new_status:
        logger.info("Match %s already %s; nothing to do", match.id, new_status)
        return match
    if match.status != STATUS_PENDING:
        raise ValidationError(f"Match is already {match.status}")

    if new_status == STATUS_DECLINED:
        match_repo.update_status(db, match, STATUS_DECLINED)
        logger.info("Match declined: id=%s by=%s", match.id, actor_id)
        return match

    cipher = get_message_cipher()
    # Commits on its own so a lost creation race can be rolled back safely.
    conversation, created = conversation_repo.get_or_create_for_match(db, match.coach_id, match.seeker_id, match.id)
    if created:
        logger.warning("Match %s had no conversation; created %s", match.id, conversation.id)
    try:
        match_repo.update_status(db, match, STATUS_MATCHED, commit=False)
        acceptance = ACCEPTED_BY_COACH if actor_id == match.coach_id else ACCEPTED_BY_SEEKER
        append_message(db, conversation, actor_id, TYPE_TEXT, acceptance, cipher=cipher, commit=False)
        append_message(db, conversation, actor_id, TYPE_SYSTEM, CONNECTED_NOTICE, cipher=cipher, commit=False)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(match)
    logger.info("Match accepted: id=%s by=%s conversation=%s", match.id, actor_id, conversation.id)

    _notify_counterparty(dispatcher, db, match, actor_id)
    return match


def list_matches(db: Session, user_id: str, status: str | None = None) -> list[CoachMatch]:
    return match_repo.get_for_user(db, user_id, status=status)
