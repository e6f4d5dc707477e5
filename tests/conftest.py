# tests/conftest.py
import os
import pathlib
import sys

import pytest
from fastapi.testclient import TestClient

# -------------------------------------------------------------------------------------------------
# Path & environment setup (must happen BEFORE importing the app)
# -------------------------------------------------------------------------------------------------
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("TALENTFLOW_STORAGE", "memory")
os.environ.setdefault("TALENTFLOW_SEED", "0")

from api.app import create_app
from api.sample_data import SAMPLE_CANDIDATE_ID, SAMPLE_RECRUITER_ID, seed_sample_data
from talentflow.models.assessment_model import Assessment
from talentflow.models.question_model import Question, QuestionType
from talentflow.services.repository import Repositories
from talentflow.services.storage import InMemoryStore


# -------------------------------------------------------------------------------------------------
# Storage / repositories
# -------------------------------------------------------------------------------------------------
@pytest.fixture()
def store():
    return InMemoryStore()


@pytest.fixture()
def repos(store):
    """Repositories over an empty in-memory store."""
    return Repositories(store)


@pytest.fixture()
def seeded_repos(store):
    """Repositories with the sample jobs, assessments and applications."""
    seed_sample_data(store)
    return Repositories(store)


@pytest.fixture()
def recruiter_id():
    return SAMPLE_RECRUITER_ID


@pytest.fixture()
def candidate_id():
    return SAMPLE_CANDIDATE_ID


# -------------------------------------------------------------------------------------------------
# Assessments
# -------------------------------------------------------------------------------------------------
def make_mc(qid: str, points: int = 10, correct: int = 1) -> Question:
    return Question(
        id=qid,
        type=QuestionType.MULTIPLE_CHOICE,
        prompt=f"Question {qid}",
        options=["A", "B", "C", "D"],
        correct_answer_index=correct,
        points=points,
    )


def make_assessment(questions, passing: int = 70, duration: int = 30, **extra) -> Assessment:
    data = {
        "id": "assessment_test",
        "title": "Test Assessment",
        "job_id": "job_1",
        "owner_id": SAMPLE_RECRUITER_ID,
        "status": "active",
        "duration_minutes": duration,
        "passing_score_percent": passing,
        "questions": questions,
    }
    data.update(extra)
    return Assessment.model_validate(data)


@pytest.fixture()
def mixed_assessment():
    """Two MC (10 pts each), one text (10 pts), one rating (10 pts); 40 points total."""
    return make_assessment([
        make_mc("q1", correct=1),
        make_mc("q2", correct=2),
        Question(id="q3", type=QuestionType.TEXT, prompt="Explain", points=10),
        Question(id="q4", type=QuestionType.RATING, prompt="Rate", points=10),
    ])


# -------------------------------------------------------------------------------------------------
# API
# -------------------------------------------------------------------------------------------------
@pytest.fixture()
def client():
    app = create_app(store=InMemoryStore(), seed=True, run_timers=False)
    return TestClient(app)


def login(client: TestClient, user_id: str, role: str) -> None:
    r = client.post("/api/login", json={"user_id": user_id, "role": role})
    assert r.status_code == 200, r.text
