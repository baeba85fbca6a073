from datetime import datetime, timedelta, timezone

from bingo.models.message import TYPE_TEXT
from bingo.repos import coach_repo, conversation_repo, match_repo, message_repo, user_repo


def test_user_create_sets_role_and_name(db_session, make_user):
    user = make_user("coach", "Casey", "Coach", email="casey@example.com")
    assert user.is_coach is True
    assert user.name == "Casey Coach"
    assert user_repo.get_by_email(db_session, "casey@example.com").id == user.id


def test_user_update_ignores_unknown_fields(db_session, seeker):
    user_repo.update(db_session, seeker.id, first_name="Samantha", is_coach=True, role="coach")
    fresh = user_repo.get_by_id(db_session, seeker.id)
    assert fresh.first_name == "Samantha"
    assert fresh.name == "Samantha Seeker"
    assert fresh.is_coach is False


def test_list_seekers_filter(db_session, coach, seeker, make_user):
    done = make_user(first_name="Done", last_name="Assessed")
    user_repo.update(db_session, done.id, assessment_completed=True)

    assert {u.id for u in user_repo.list_seekers(db_session)} == {seeker.id, done.id}
    assert [u.id for u in user_repo.list_seekers(db_session, assessment_completed=True)] == [done.id]


def test_coach_profile_lists_are_cleaned(db_session, make_user):
    user = make_user("coach", "Casey", "Coach")
    coach_repo.update(db_session, user.id, specialties=["  Resumes ", "", "Interviews"])
    assert coach_repo.get_by_user_id(db_session, user.id).specialties == ["Resumes", "Interviews"]
    assert [c.user_id for c in coach_repo.get_all(db_session)] == [user.id]


def test_get_or_create_for_match_is_unique(db_session, coach, seeker):
    match = match_repo.create(db_session, coach.id, seeker.id)
    first, created = conversation_repo.get_or_create_for_match(db_session, coach.id, seeker.id, match.id)
    second, created_again = conversation_repo.get_or_create_for_match(db_session, coach.id, seeker.id, match.id)
    assert created is True
    assert created_again is False
    assert first.id == second.id


def test_get_or_create_recovers_from_lost_race(db_session, coach, seeker, monkeypatch):
    match = match_repo.create(db_session, coach.id, seeker.id)
    winner = conversation_repo.create(db_session, coach.id, seeker.id, match.id)

    # simulate the existence check running before the other writer committed
    real = conversation_repo.get_by_match_id
    calls = {"n": 0}

    def _stale_then_real(db, match_id):
        calls["n"] += 1
        return None if calls["n"] == 1 else real(db, match_id)

    monkeypatch.setattr(conversation_repo, "get_by_match_id", _stale_then_real)
    got, created = conversation_repo.get_or_create_for_match(db_session, coach.id, seeker.id, match.id)
    assert created is False
    assert got.id == winner.id


def test_has_matched_pair(db_session, coach, seeker):
    match = match_repo.create(db_session, coach.id, seeker.id)
    assert match_repo.has_matched_pair(db_session, coach.id, seeker.id) is False
    match_repo.update_status(db_session, match, "matched")
    assert match_repo.has_matched_pair(db_session, coach.id, seeker.id) is True


def test_recent_received_excludes_own_and_old(db_session, coach, seeker):
    conversation = conversation_repo.create(db_session, coach.id, seeker.id)
    old = message_repo.create(db_session, conversation.id, coach.id, seeker.id, TYPE_TEXT, "old")
    old.created_at = datetime.now(timezone.utc) - timedelta(minutes=10)
    db_session.commit()
    fresh = message_repo.create(db_session, conversation.id, coach.id, seeker.id, TYPE_TEXT, "fresh")
    message_repo.create(db_session, conversation.id, seeker.id, coach.id, TYPE_TEXT, "mine")

    since = datetime.now(timezone.utc) - timedelta(seconds=5)
    assert [m.id for m in message_repo.get_recent_received(db_session, seeker.id, since)] == [fresh.id]
    assert message_repo.count_by_conversation(db_session, conversation.id) == 3
