from bingo.repos import coach_repo, user_repo


def test_list_and_get_coaches(client, auth, db_session, coach, seeker):
    auth.user = seeker
    resp = client.get("/coaches")
    assert resp.status_code == 200
    listing = resp.json()
    assert [c["user_id"] for c in listing] == [coach.id]
    assert listing[0]["name"] == "Casey Coach"
    assert listing[0]["expertise"] == ["Interviewing"]

    assert client.get(f"/coaches/{coach.id}").json()["user_id"] == coach.id
    assert client.get(f"/coaches/{seeker.id}").status_code == 404
    assert client.get("/coaches/missing").status_code == 404


def test_coach_updates_own_profile(client, auth, db_session, coach, seeker):
    auth.user = coach
    resp = client.put("/coaches/me", json={"specialties": ["Leadership"], "hourly_rate": 120})
    assert resp.status_code == 200
    assert resp.json()["specialties"] == ["Leadership"]
    assert coach_repo.get_by_user_id(db_session, coach.id).hourly_rate == 120

    auth.user = seeker
    resp = client.put("/coaches/me", json={"hourly_rate": 1})
    assert resp.status_code == 403
    assert resp.json() == {"error": "Coach access required"}


def test_seekers_are_coach_only(client, auth, db_session, coach, seeker, make_user):
    done = make_user(first_name="Done", last_name="Assessed")
    user_repo.update(db_session, done.id, assessment_completed=True)

    auth.user = seeker
    assert client.get("/seekers").status_code == 403

    auth.user = coach
    assert {s["id"] for s in client.get("/seekers").json()} == {seeker.id, done.id}
    resp = client.get("/seekers", params={"assessment_completed": "true"})
    assert [s["id"] for s in resp.json()] == [done.id]

    assert client.get(f"/seekers/{seeker.id}").json()["email"] == seeker.email
    assert client.get(f"/seekers/{coach.id}").status_code == 404


def test_seeker_detail_includes_latest_assessment(client, auth, db_session, coach, seeker):
    from bingo.repos import assessment_repo

    auth.user = coach
    assert client.get(f"/seekers/{seeker.id}").json()["assessment"] is None

    assessment = assessment_repo.create(db_session, seeker.id, {"disabilities": ["Dyslexia"], "job_types": ["Remote"]})
    detail = client.get(f"/seekers/{seeker.id}").json()
    assert detail["assessment"]["id"] == assessment.id
    assert detail["assessment"]["disabilities"] == ["Dyslexia"]
