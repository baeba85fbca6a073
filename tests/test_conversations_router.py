from bingo.core.encryption import DECRYPTION_FAILED_TEXT
from bingo.database import get_db
from bingo.main import app
from bingo.models.coach_match import STATUS_MATCHED
from bingo.repos import document_repo, message_repo
from bingo.services import match_service


def _matched(db, coach, seeker):
    match, conversation = match_service.request_match(db, seeker.id, coach.id, seeker.id)
    match_service.respond_to_match(db, match.id, coach.id, STATUS_MATCHED)
    return conversation


def test_unauthenticated_requests_never_touch_the_store(client):
    class _ExplodingDB:
        def __getattr__(self, name):
            raise AssertionError(f"store accessed: {name}")

    def _db():
        yield _ExplodingDB()

    app.dependency_overrides[get_db] = _db
    for method, path, body in (
        ("get", "/conversations", None),
        ("get", "/conversations/c1", None),
        ("get", "/conversations/c1/messages", None),
        ("post", "/conversations/c1/messages", {"content": "hi"}),
        ("post", "/messages", {"conversation_id": "c1", "content": "hi"}),
    ):
        resp = client.request(method.upper(), path, json=body)
        assert resp.status_code == 401, path
        assert resp.json() == {"error": "Authentication required"}


def test_post_and_read_messages(client, auth, db_session, coach, seeker, dispatcher):
    conversation = _matched(db_session, coach, seeker)

    auth.user = seeker
    resp = client.post(f"/conversations/{conversation.id}/messages", json={"content": "Hello coach"})
    assert resp.status_code == 200
    sent = resp.json()
    assert sent["content"] == "Hello coach"
    assert sent["receiver_id"] == coach.id
    assert dispatcher.sweeps[-1] == (coach.id, True)

    resp = client.post("/messages", json={"conversation_id": conversation.id, "content": "Second"})
    assert resp.status_code == 200

    auth.user = coach
    resp = client.get(f"/conversations/{conversation.id}/messages")
    assert resp.status_code == 200
    contents = [m["content"] for m in resp.json()]
    assert contents[-2:] == ["Hello coach", "Second"]
    assert len(contents) == 5


def test_system_type_is_rejected_from_clients(client, auth, db_session, coach, seeker):
    conversation = _matched(db_session, coach, seeker)
    auth.user = seeker
    resp = client.post(f"/conversations/{conversation.id}/messages", json={"type": "system", "content": "fake"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request"


def test_pending_match_and_bad_reference(client, auth, db_session, coach, seeker):
    match, pending = match_service.request_match(db_session, seeker.id, coach.id, seeker.id)
    auth.user = seeker
    resp = client.post(f"/conversations/{pending.id}/messages", json={"content": "hi"})
    assert resp.status_code == 400

    match_service.respond_to_match(db_session, match.id, coach.id, STATUS_MATCHED)
    foreign = document_repo.create(db_session, coach.id, "Notes", "notes.txt", "/tmp/notes.txt", "text/plain", 3)
    resp = client.post(
        f"/conversations/{pending.id}/messages",
        json={"type": "document_ref", "document_id": foreign.id},
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid document reference"}


def test_outsider_and_missing_conversation(client, auth, db_session, make_user, coach, seeker):
    conversation = _matched(db_session, coach, seeker)
    auth.user = make_user(first_name="Olly", last_name="Outsider")

    assert client.get(f"/conversations/{conversation.id}").status_code == 403
    assert client.get(f"/conversations/{conversation.id}/messages").status_code == 403
    assert client.post("/messages", json={"conversation_id": conversation.id, "content": "x"}).status_code == 403
    assert client.get("/conversations/missing").status_code == 404


def test_conversation_list_and_detail(client, auth, db_session, coach, seeker):
    conversation = _matched(db_session, coach, seeker)
    message_repo.create(db_session, conversation.id, coach.id, seeker.id, "text", "corrupted")

    auth.user = seeker
    listing = client.get("/conversations").json()
    assert [c["id"] for c in listing] == [conversation.id]
    assert listing[0]["other_user_id"] == coach.id
    assert listing[0]["match_status"] == "matched"

    detail = client.get(f"/conversations/{conversation.id}").json()
    assert detail["match_status"] == "matched"
    assert detail["messages"][-1]["content"] == DECRYPTION_FAILED_TEXT
    assert detail["messages"][-2]["type"] == "system"


def test_missing_encryption_key_is_generic_500(client, auth, db_session, coach, seeker, monkeypatch):
    import bingo.core.encryption as enc

    conversation = _matched(db_session, coach, seeker)
    monkeypatch.setattr(enc.settings, "message_encryption_key", None)
    enc.reset_message_cipher()

    auth.user = seeker
    resp = client.post(f"/conversations/{conversation.id}/messages", json={"content": "hi"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to create message"}
