"""
Seed demo accounts: two seekers and one coach. Existing emails are left alone.
Usage: python -m bingo.scripts.seed_demo
"""
import logging

from bingo.database import SessionLocal, ensure_tables_exist
from bingo.logging_config import setup_logging
from bingo.models.user import ROLE_COACH, ROLE_SEEKER
from bingo.repos import coach_repo, user_repo

logger = logging.getLogger(__name__)

DEMO_SEEKERS = [
    {
        "email": "test@example.com",
        "password": "Password123!",
        "first_name": "Test",
        "last_name": "User",
        "location": "New York, NY",
        "phone": "555-123-4567",
    },
    {
        "email": "jane@example.com",
        "password": "Password456!",
        "first_name": "Jane",
        "last_name": "Smith",
        "location": "San Francisco, CA",
        "phone": "555-987-6543",
    },
]

DEMO_COACH = {
    "email": "coach@example.com",
    "password": "CoachPassword123!",
    "first_name": "Career",
    "last_name": "Coach",
    "bio": "Experienced career coach with 10+ years helping job seekers find their dream positions.",
}

DEMO_COACH_PROFILE = {
    "expertise": ["Resume Writing", "Interview Preparation", "Career Transition"],
    "specialties": ["Career Growth", "Leadership Development"],
    "industries": ["Technology", "Finance"],
    "languages": ["English", "Spanish"],
    "certifications": ["Certified Career Coach (CCC)"],
    "availability": ["Mon-Fri, 9am-5pm ET"],
    "hourly_rate": 75,
}


def seed(db) -> int:
    """Insert missing demo users. Returns how many were created."""
    created = 0
    for data in DEMO_SEEKERS:
        if user_repo.get_by_email(db, data["email"]):
            continue
        user_repo.create(db, role=ROLE_SEEKER, **data)
        created += 1

    if not user_repo.get_by_email(db, DEMO_COACH["email"]):
        coach = user_repo.create(db, role=ROLE_COACH, commit=False, **DEMO_COACH)
        coach_repo.create(db, coach, commit=False, bio=DEMO_COACH["bio"], **DEMO_COACH_PROFILE)
        db.commit()
        created += 1
    return created


def main():
    setup_logging()
    ensure_tables_exist()
    db = SessionLocal()
    try:
        created = seed(db)
        logger.info("Demo seed complete: %d users created", created)
    finally:
        db.close()


if __name__ == "__main__":
    main()
