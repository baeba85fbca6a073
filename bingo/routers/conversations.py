import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from bingo.database import get_db
from bingo.dependencies import get_current_user, get_notification_dispatcher
from bingo.core.exceptions import DependencyError
from bingo.models.user import User
from bingo.schemas.message import (
    ConversationDetail,
    ConversationSummary,
    DirectMessageCreate,
    MessageCreate,
    MessageResponse,
)
from bingo.services import conversation_service
from bingo.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)
router = APIRouter(tags=["conversations"])


@router.get("/conversations", response_model=list[ConversationSummary])
def list_conversations(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        return conversation_service.list_conversations(db, user.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Listing conversations failed for user=%s: %s", user.id, e)
        raise DependencyError("Failed to fetch conversations") from e


@router.get("/conversations/{conversation_id}", response_model=ConversationDetail)
def get_conversation(
    conversation_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        return conversation_service.get_conversation_detail(db, conversation_id, user.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Fetching conversation=%s failed for user=%s: %s", conversation_id, user.id, e)
        raise DependencyError("Failed to fetch conversation") from e


@router.get("/conversations/{conversation_id}/messages", response_model=list[MessageResponse])
def get_messages(
    conversation_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        conversation = conversation_service.get_conversation(db, conversation_id, user.id)
        return conversation_service.list_messages(db, conversation.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Fetching messages for conversation=%s failed: %s", conversation_id, e)
        raise DependencyError("Failed to fetch messages") from e


def _post(db, conversation_id, user, body: MessageCreate, dispatcher) -> MessageResponse:
    try:
        return conversation_service.post_message(
            db,
            conversation_id,
            user.id,
            body.type,
            body.content,
            document_id=body.document_id,
            assessment_id=body.assessment_id,
            dispatcher=dispatcher,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Posting message to conversation=%s failed for user=%s: %s", conversation_id, user.id, e)
        raise DependencyError("Failed to create message") from e


@router.post("/conversations/{conversation_id}/messages", response_model=MessageResponse)
def post_conversation_message(
    conversation_id: str,
    body: MessageCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    return _post(db, conversation_id, user, body, dispatcher)


@router.post("/messages", response_model=MessageResponse)
def post_message(
    body: DirectMessageCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    return _post(db, body.conversation_id, user, body, dispatcher)
