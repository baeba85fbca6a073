import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from bingo.database import get_db
from bingo.dependencies import get_current_user, get_notification_dispatcher
from bingo.core.exceptions import DependencyError, ValidationError
from bingo.models.coach_match import MATCH_STATUSES, STATUS_MATCHED
from bingo.models.user import User
from bingo.schemas.match import (
    ConversationResponse,
    MatchCreatedResponse,
    MatchRequestCreate,
    MatchRespond,
    MatchResponse,
    MatchUpdatedResponse,
)
from bingo.services import match_service
from bingo.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)
router = APIRouter(tags=["matches"])


@router.post("/match-request", response_model=MatchCreatedResponse)
def create_match_request(
    body: MatchRequestCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    """Request a coaching match. Either the coach or the seeker may ask."""
    try:
        match, conversation = match_service.request_match(
            db,
            user.id,
            body.coach_id,
            body.seeker_id,
            match_score=body.match_score,
            match_reason=body.match_reason,
            dispatcher=dispatcher,
        )
        return MatchCreatedResponse(
            match=MatchResponse.model_validate(match),
            conversation=ConversationResponse.model_validate(conversation),
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Match request failed for user=%s: %s", user.id, e)
        raise DependencyError("Failed to create match") from e


@router.put("/match-request", response_model=MatchUpdatedResponse)
def respond_to_match_request(
    body: MatchRespond,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    """Accept (`matched`) or decline a pending match."""
    try:
        match = match_service.respond_to_match(db, body.match_id, user.id, body.status, dispatcher=dispatcher)
        message = (
            "Match accepted! You can now start messaging each other."
            if match.status == STATUS_MATCHED
            else "Match status updated successfully."
        )
        return MatchUpdatedResponse(match=MatchResponse.model_validate(match), message=message)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Match update failed for match=%s user=%s: %s", body.match_id, user.id, e)
        raise DependencyError("Failed to update match") from e


@router.get("/matches", response_model=list[MatchResponse])
def list_my_matches(
    status: str | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Matches where the caller is the coach or the seeker. status: pending, matched or declined."""
    if status is not None and status not in MATCH_STATUSES:
        raise ValidationError("status must be pending, matched or declined")
    return match_service.list_matches(db, user.id, status=status)
