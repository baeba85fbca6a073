from bingo.models.coach_match import STATUS_MATCHED
from bingo.repos import conversation_repo, message_repo
from bingo.services import match_service


def test_match_request_requires_auth(client, coach, seeker):
    resp = client.post("/match-request", json={"coach_id": coach.id, "seeker_id": seeker.id})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Authentication required"}


def test_seeker_requests_and_coach_accepts(client, auth, db_session, coach, seeker, dispatcher):
    auth.user = seeker
    resp = client.post(
        "/match-request",
        json={"coach_id": coach.id, "seeker_id": seeker.id, "match_score": 92, "match_reason": "Interview prep"},
    )
    assert resp.status_code == 200
    body = resp.json()
    match_id = body["match"]["id"]
    assert body["match"]["status"] == "pending"
    assert body["match"]["match_reason"] == "Interview prep"
    assert body["conversation"]["match_id"] == match_id
    assert dispatcher.sweeps == [(coach.id, True)]

    auth.user = coach
    resp = client.put("/match-request", json={"match_id": match_id, "status": "matched"})
    assert resp.status_code == 200
    assert resp.json()["match"]["status"] == STATUS_MATCHED
    assert resp.json()["message"].startswith("Match accepted")
    assert dispatcher.sweeps[-1] == (seeker.id, False)

    conversation = conversation_repo.get_by_match_id(db_session, match_id)
    assert message_repo.count_by_conversation(db_session, conversation.id) == 3


def test_match_request_validation_errors(client, auth, coach, seeker):
    auth.user = seeker
    resp = client.post("/match-request", json={"coach_id": coach.id, "seeker_id": seeker.id, "match_score": 150})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request"

    resp = client.post("/match-request", json={"coach_id": "", "seeker_id": seeker.id})
    assert resp.status_code == 400

    resp = client.put("/match-request", json={"match_id": "m1", "status": "pending"})
    assert resp.status_code == 400


def test_match_request_unknown_coach_and_outsider(client, auth, make_user, coach, seeker):
    auth.user = seeker
    resp = client.post("/match-request", json={"coach_id": "nope", "seeker_id": seeker.id})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Coach not found"}

    auth.user = make_user(first_name="Olly", last_name="Outsider")
    resp = client.post("/match-request", json={"coach_id": coach.id, "seeker_id": seeker.id})
    assert resp.status_code == 403


def test_respond_errors(client, auth, db_session, make_user, coach, seeker):
    match, _ = match_service.request_match(db_session, seeker.id, coach.id, seeker.id)

    auth.user = coach
    assert client.put("/match-request", json={"match_id": "missing", "status": "matched"}).status_code == 404

    auth.user = make_user(first_name="Olly", last_name="Outsider")
    resp = client.put("/match-request", json={"match_id": match.id, "status": "matched"})
    assert resp.status_code == 403
    assert resp.json() == {"error": "Unauthorized"}

    auth.user = coach
    assert client.put("/match-request", json={"match_id": match.id, "status": "declined"}).status_code == 200
    assert client.put("/match-request", json={"match_id": match.id, "status": "matched"}).status_code == 400


def test_unexpected_failure_is_generic_500(client, auth, monkeypatch, coach, seeker):
    def _boom(*args, **kwargs):
        raise RuntimeError("connection reset by peer")

    monkeypatch.setattr(match_service, "request_match", _boom)
    auth.user = seeker
    resp = client.post("/match-request", json={"coach_id": coach.id, "seeker_id": seeker.id})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to create match"}


def test_list_matches(client, auth, db_session, coach, seeker):
    match, _ = match_service.request_match(db_session, seeker.id, coach.id, seeker.id)

    auth.user = coach
    resp = client.get("/matches")
    assert resp.status_code == 200
    assert [m["id"] for m in resp.json()] == [match.id]
    assert client.get("/matches", params={"status": "matched"}).json() == []
    assert client.get("/matches", params={"status": "bogus"}).status_code == 400
