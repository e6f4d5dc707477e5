"""Tests for the candidate portal services."""

import pytest

from talentflow.services.candidate_service import (
    apply_to_job,
    can_view_assessment,
    list_candidate_assessments,
)
from talentflow.services.errors import NotFoundError


def test_list_only_published_assessments_for_applied_jobs(seeded_repos, candidate_id):
    items = list_candidate_assessments(seeded_repos.assessments, seeded_repos.applications, candidate_id)
    assert [i.id for i in items] == ["assessment_1"]
    item = items[0]
    assert item.status == "pending"
    assert item.completed is False
    assert item.question_count == 5
    assert item.max_points == 50


def test_completed_assessment_shows_score(seeded_repos, candidate_id):
    app = seeded_repos.applications.find_for(candidate_id, "job_1")
    seeded_repos.applications.update(app.id, {"assessment_completed": True, "assessment_score": 72})

    item = list_candidate_assessments(seeded_repos.assessments, seeded_repos.applications, candidate_id)[0]
    assert item.status == "completed"
    assert item.score == 72


def test_apply_to_job_is_idempotent(seeded_repos):
    first = apply_to_job(seeded_repos.jobs, seeded_repos.applications, "candidate_2", "job_1")
    second = apply_to_job(seeded_repos.jobs, seeded_repos.applications, "candidate_2", "job_1")
    assert first.id == second.id
    assert len(seeded_repos.applications.list(candidate_id="candidate_2")) == 1


def test_apply_to_missing_job(seeded_repos):
    with pytest.raises(NotFoundError):
        apply_to_job(seeded_repos.jobs, seeded_repos.applications, "candidate_2", "job_missing")


def test_new_applicant_sees_assessment(seeded_repos):
    apply_to_job(seeded_repos.jobs, seeded_repos.applications, "candidate_2", "job_1")
    items = list_candidate_assessments(seeded_repos.assessments, seeded_repos.applications, "candidate_2")
    assert [i.id for i in items] == ["assessment_1"]


def test_can_view_assessment(seeded_repos, candidate_id):
    args = (seeded_repos.assessments, seeded_repos.applications)
    assert can_view_assessment(*args, candidate_id, "assessment_1") is True
    assert can_view_assessment(*args, candidate_id, "assessment_2") is False
    assert can_view_assessment(*args, "stranger", "assessment_1") is False
