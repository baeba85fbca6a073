import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from bingo.database import get_db
from bingo.dependencies import get_current_user
from bingo.core.exceptions import AuthorizationError, DependencyError, NotFoundError
from bingo.models.user import User
from bingo.repos import assessment_repo, match_repo, user_repo
from bingo.schemas.assessment import AssessmentCreate, AssessmentResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/assessments", tags=["assessments"])


@router.post("", response_model=AssessmentResponse, status_code=status.HTTP_201_CREATED)
def submit_assessment(
    data: AssessmentCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        assessment = assessment_repo.create(db, user.id, data.model_dump(), commit=False)
        user_repo.update(db, user.id, assessment_completed=True, commit=False)
        db.commit()
        db.refresh(assessment)
        logger.info("Assessment submitted: id=%s user=%s", assessment.id, user.id)
        return assessment
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Assessment submission failed for user=%s: %s", user.id, e)
        raise DependencyError("Failed to process assessment submission") from e


@router.get("/me", response_model=AssessmentResponse)
def get_my_assessment(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    assessment = assessment_repo.get_latest_by_user(db, user.id)
    if not assessment:
        raise NotFoundError("Assessment not found")
    return assessment


@router.get("/{assessment_id}", response_model=AssessmentResponse)
def get_assessment(
    assessment_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Owners see their own; coaches see assessments of seekers they are matched with."""
    assessment = assessment_repo.get_by_id(db, assessment_id)
    if not assessment:
        raise NotFoundError("Assessment not found")
    if assessment.user_id != user.id and not (
        user.is_coach and match_repo.has_matched_pair(db, user.id, assessment.user_id)
    ):
        raise AuthorizationError("Access denied")
    return assessment
