import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from bingo.database import get_db
from bingo.dependencies import get_current_coach, get_current_user
from bingo.core.exceptions import DependencyError, NotFoundError
from bingo.models.coach import Coach
from bingo.models.user import User
from bingo.repos import coach_repo
from bingo.repos.user_repo import get_by_id as get_user_by_id
from bingo.schemas.coach import CoachProfileResponse, CoachProfileUpdate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/coaches", tags=["coaches"])


def _coach_to_response(coach: Coach) -> CoachProfileResponse:
    result = CoachProfileResponse.model_validate(coach)
    if coach.user is not None:
        result.name = coach.user.name or coach.name
        result.location = coach.user.location
    return result


@router.get("", response_model=list[CoachProfileResponse])
def list_coaches(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return [_coach_to_response(c) for c in coach_repo.get_all(db)]


@router.put("/me", response_model=CoachProfileResponse)
def update_my_profile(
    data: CoachProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_coach),
):
    try:
        coach = coach_repo.update(db, user.id, **data.model_dump(exclude_none=True))
        if coach is None:
            # Coach users created before profiles existed
            coach = coach_repo.create(db, user, **data.model_dump(exclude_none=True))
        logger.info("Coach profile updated: user=%s", user.id)
        return _coach_to_response(coach)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Coach profile update failed for user=%s: %s", user.id, e)
        raise DependencyError("Failed to update coach profile") from e


@router.get("/{user_id}", response_model=CoachProfileResponse)
def get_coach(
    user_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    coach_user = get_user_by_id(db, user_id)
    if not coach_user or not coach_user.is_coach:
        raise NotFoundError("Coach not found")
    coach = coach_repo.get_by_user_id(db, user_id)
    if coach is None:
        raise NotFoundError("Coach not found")
    return _coach_to_response(coach)
