"""HTTP tests for the FastAPI surface."""

import api.routes as routes
from conftest import login
from talentflow.services.runner_service import AssessmentRunner


def test_root(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json().get("ok") is True


def test_requires_sign_in(client):
    assert client.get("/api/builder").status_code == 401
    assert client.get("/api/my/assessments").status_code == 401


def test_wrong_role_is_forbidden(client):
    login(client, "candidate_1", "candidate")
    assert client.get("/api/builder").status_code == 403


def test_session_status(client):
    login(client, "recruiter_2", "recruiter")
    body = client.get("/api/session-status").json()
    assert body["user_id"] == "recruiter_2"
    assert body["role"] == "recruiter"
    assert body["running"] is False


def test_builder_flow(client):
    login(client, "recruiter_2", "recruiter")

    r = client.post("/api/builder/job", json={"job_id": "job_1"})
    assert r.status_code == 200
    assert r.json()["form"]["title"] == "Senior Frontend Developer Assessment"

    r = client.post("/api/builder/questions", json={
        "type": "multiple-choice",
        "prompt": "Pick B",
        "options": ["A", "B"],
        "correct_answer_index": None,
    })
    assert r.status_code == 422
    assert r.json()["detail"]["code"] == "correct_answer_required"

    r = client.post("/api/builder/questions", json={
        "type": "multiple-choice",
        "prompt": "Pick B",
        "options": ["A", "B"],
        "correct_answer_index": 1,
        "points": 10,
    })
    assert r.status_code == 200
    assert r.json()["max_points"] == 10

    r = client.patch("/api/builder/details", json={"passing_score_percent": 60})
    assert r.status_code == 200
    assert r.json()["form"]["passing_score_percent"] == 60

    r = client.post("/api/builder/save", json={"status": "active"})
    assert r.status_code == 200, r.text
    saved = r.json()["assessment"]
    assert saved["status"] == "active"
    assert r.json()["form"]["questions"] == []

    mine = client.get("/api/assessments", params={"owner_id": "recruiter_2"}).json()
    assert saved["id"] in [a["id"] for a in mine]


def test_builder_rejects_empty_save(client):
    login(client, "recruiter_2", "recruiter")
    r = client.post("/api/builder/save", json={"status": "draft"})
    assert r.status_code == 422
    assert r.json()["detail"]["code"] == "title_required"


def test_publish_requires_author(client):
    login(client, "recruiter_9", "recruiter")
    assert client.post("/api/assessments/assessment_2/publish").status_code == 403

    login(client, "recruiter_2", "recruiter")
    r = client.post("/api/assessments/assessment_2/publish")
    assert r.status_code == 200
    assert r.json()["status"] == "active"


def test_candidate_cannot_see_answers(client):
    login(client, "candidate_1", "candidate")
    r = client.get("/api/assessments/assessment_1")
    assert r.status_code == 200
    assert all("correct_answer_index" not in q for q in r.json()["questions"])

    assert client.get("/api/assessments/assessment_2").status_code == 404
    assert client.get("/api/assessments/missing").status_code == 404

    listed = client.get("/api/assessments").json()
    assert [a["id"] for a in listed] == ["assessment_1"]
    assert all("correct_answer_index" not in q for q in listed[0]["questions"])


def test_candidate_without_applications_lists_nothing(client):
    login(client, "candidate_nobody", "candidate")
    r = client.get("/api/assessments")
    assert r.status_code == 200
    assert r.json() == []
    assert client.get("/api/applications").json() == []
    assert client.get("/api/applications", params={"candidate_id": "candidate_1"}).json() == []


def test_listing_requires_sign_in(client):
    assert client.get("/api/assessments").status_code == 401
    assert client.get("/api/assessments/assessment_1").status_code == 401
    assert client.get("/api/applications").status_code == 401


def test_runner_flow(client):
    login(client, "candidate_1", "candidate")

    r = client.post("/api/runner/start", json={"assessment_id": "assessment_1"})
    assert r.status_code == 200, r.text
    state = r.json()
    assert state["phase"] == "in_progress"
    assert state["current_index"] == 0
    assert state["remaining_seconds"] == 90 * 60

    q = client.get("/api/runner/question/0").json()
    assert "correct_answer_index" not in q
    assert q["total"] == 5

    answers = [
        ("q1", {"kind": "multiple-choice", "index": 1}),
        ("q2", {"kind": "multiple-choice", "index": 2}),
        ("q3", {"kind": "text", "text": "Controlled components keep state in React"}),
        ("q4", {"kind": "rating", "value": 4}),
    ]
    for qid, answer in answers:
        r = client.post("/api/runner/answer", json={"question_id": qid, "answer": answer})
        assert r.status_code == 200, r.text

    r = client.post("/api/runner/answer", json={
        "question_id": "q1", "answer": {"kind": "text", "text": "wrong kind"},
    })
    assert r.status_code == 422

    assert client.post("/api/runner/navigate", json={"action": "previous"}).json()["index"] == 0
    assert client.post("/api/runner/navigate", json={"action": "goto", "index": 99}).json()["index"] == 4

    r = client.post("/api/runner/submit")
    assert r.status_code == 200
    body = r.json()
    # 10 + 10 + 12 + 4 = 36 / 50
    assert body["score"] == 72
    assert body["passed"] is True
    assert body["result_saved"] is True
    assert body["incorrect_question_ids"] == []

    # submitting again returns the stored result
    assert client.post("/api/runner/submit").json()["score"] == 72

    mine = client.get("/api/my/assessments").json()
    assert mine[0]["completed"] is True
    assert mine[0]["score"] == 72

    r = client.post("/api/runner/start", json={"assessment_id": "assessment_1"})
    assert r.status_code == 409
    assert "72%" in r.json()["detail"]


def test_runner_start_guards(client):
    login(client, "candidate_1", "candidate")
    assert client.post("/api/runner/start", json={"assessment_id": "missing"}).status_code == 404
    assert client.post("/api/runner/start", json={"assessment_id": "assessment_2"}).status_code == 409
    assert client.get("/api/runner/state").status_code == 404


def test_apply_and_results(client):
    login(client, "candidate_7", "candidate")
    r = client.post("/api/applications", json={"job_id": "job_1"})
    assert r.status_code == 200
    assert r.json()["status"] == "Applied"
    assert client.post("/api/applications", json={"job_id": "nope"}).status_code == 404

    client.post("/api/runner/start", json={"assessment_id": "assessment_1"})
    client.post("/api/runner/answer", json={
        "question_id": "q1", "answer": {"kind": "multiple-choice", "index": 1},
    })
    assert client.post("/api/runner/submit").json()["score"] == 20

    login(client, "recruiter_2", "recruiter")
    body = client.get("/api/assessments/assessment_1/results").json()
    assert body["summary"]["total"] == 1
    assert body["summary"]["failed"] == 1
    assert body["results"][0]["candidate_id"] == "candidate_7"
    assert body["results"][0]["status"] == "Assessment Failed"


def test_runner_not_started_when_session_is_gone(client, monkeypatch):
    login(client, "candidate_1", "candidate")
    started = []
    monkeypatch.setattr(routes.session, "put", lambda sid, key, value: False)
    monkeypatch.setattr(AssessmentRunner, "start", lambda self, with_timer=True: started.append(self))

    r = client.post("/api/runner/start", json={"assessment_id": "assessment_1"})
    assert r.status_code == 401
    assert started == []
