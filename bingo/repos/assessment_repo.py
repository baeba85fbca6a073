from sqlalchemy.orm import Session

from bingo.models.assessment import Assessment
from bingo.core.security import generate_id

FIELDS = (
    "disabilities",
    "disability_details",
    "job_preferences",
    "job_types",
    "job_industry",
    "timeframe",
    "learning_styles",
    "communication_styles",
    "assistance_needed",
    "additional_info",
    "sections",
)


def create(db: Session, user_id: str, data: dict, *, commit: bool = True) -> Assessment:
    assessment = Assessment(
        id=generate_id(),
        user_id=user_id,
        **{k: data[k] for k in FIELDS if data.get(k) is not None},
    )
    db.add(assessment)
    if commit:
        db.commit()
        db.refresh(assessment)
    else:
        db.flush()
    return assessment


def get_by_id(db: Session, assessment_id: str) -> Assessment | None:
    return db.query(Assessment).filter(Assessment.id == assessment_id).first()


def get_latest_by_user(db: Session, user_id: str) -> Assessment | None:
    return (
        db.query(Assessment)
        .filter(Assessment.user_id == user_id)
        .order_by(Assessment.created_at.desc())
        .first()
    )
