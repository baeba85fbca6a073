import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bingo.database import get_db
from bingo.dependencies import get_current_coach
from bingo.core.exceptions import NotFoundError
from bingo.models.user import User
from bingo.repos import assessment_repo, user_repo
from bingo.schemas.assessment import AssessmentResponse
from bingo.schemas.coach import SeekerDetailResponse, SeekerResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/seekers", tags=["seekers"])


@router.get("", response_model=list[SeekerResponse])
def list_seekers(
    assessment_completed: bool | None = None,
    db: Session = Depends(get_db),
    coach: User = Depends(get_current_coach),
):
    """Seekers visible to coaches. Filter on whether the assessment was submitted."""
    seekers = user_repo.list_seekers(db, assessment_completed=assessment_completed)
    logger.debug("GET /seekers coach=%s count=%d", coach.id, len(seekers))
    return seekers


@router.get("/{user_id}", response_model=SeekerDetailResponse)
def get_seeker(
    user_id: str,
    db: Session = Depends(get_db),
    coach: User = Depends(get_current_coach),
):
    seeker = user_repo.get_by_id(db, user_id)
    if not seeker or seeker.is_coach:
        raise NotFoundError("Seeker not found")
    assessment = assessment_repo.get_latest_by_user(db, seeker.id)
    result = SeekerDetailResponse.model_validate(seeker)
    if assessment is not None:
        result.assessment = AssessmentResponse.model_validate(assessment)
    return result
