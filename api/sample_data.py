"""
api/sample_data.py — 최초 실행용 샘플 데이터

채용 담당자(recruiter_2)의 공고 3건, 게시된 평가 1건, 임시 저장 평가 1건,
지원자(candidate_1)의 지원서 2건.
컬렉션이 비어 있을 때만 채운다 (사용자 데이터를 덮어쓰지 않음).
"""

import logging

from talentflow.services.storage import KeyValueStore

logger = logging.getLogger(__name__)

SAMPLE_RECRUITER_ID = "recruiter_2"
SAMPLE_CANDIDATE_ID = "candidate_1"

SAMPLE_JOBS = [
    {
        "id": "job_1",
        "title": "Senior Frontend Developer",
        "company": "TechCorp",
        "location": "San Francisco, CA",
        "description": "Lead frontend development using React, TypeScript, and modern web technologies.",
        "status": "active",
        "owner_id": SAMPLE_RECRUITER_ID,
        "tags": ["react", "typescript"],
        "posted_at": "2024-01-15",
    },
    {
        "id": "job_2",
        "title": "React Developer",
        "company": "InnovateTech",
        "location": "Remote",
        "description": "Build user-facing features for a growing SaaS product.",
        "status": "active",
        "owner_id": SAMPLE_RECRUITER_ID,
        "tags": ["react"],
        "posted_at": "2024-01-18",
    },
    {
        "id": "job_3",
        "title": "Backend Engineer",
        "company": "DataWorks",
        "location": "New York, NY",
        "description": "Design APIs and data pipelines.",
        "status": "archived",
        "owner_id": SAMPLE_RECRUITER_ID,
        "tags": ["python", "sql"],
        "posted_at": "2023-11-02",
    },
]

SAMPLE_ASSESSMENTS = [
    {
        "id": "assessment_1",
        "title": "Senior Frontend Developer Assessment",
        "description": "Assessment covering React, TypeScript, and modern web technologies.",
        "category": "technical",
        "duration_minutes": 90,
        "passing_score_percent": 70,
        "job_id": "job_1",
        "job_title": "Senior Frontend Developer",
        "company": "TechCorp",
        "owner_id": SAMPLE_RECRUITER_ID,
        "status": "active",
        "created_at": "2024-01-20T09:00:00+00:00",
        "questions": [
            {
                "id": "q1",
                "type": "multiple-choice",
                "prompt": "What is the primary purpose of React hooks?",
                "options": [
                    "To replace class components",
                    "To manage state and side effects in functional components",
                    "To improve performance",
                    "To simplify JSX syntax",
                ],
                "correct_answer_index": 1,
                "points": 10,
                "time_limit_seconds": 60,
            },
            {
                "id": "q2",
                "type": "multiple-choice",
                "prompt": "Which TypeScript feature helps ensure type safety at compile time?",
                "options": ["Dynamic typing", "Type inference", "Static typing", "Runtime type checking"],
                "correct_answer_index": 2,
                "points": 10,
                "time_limit_seconds": 60,
            },
            {
                "id": "q3",
                "type": "text",
                "prompt": "Explain the difference between controlled and uncontrolled components in React.",
                "points": 15,
                "time_limit_seconds": 120,
            },
            {
                "id": "q4",
                "type": "rating",
                "prompt": "Rate your experience with automated frontend testing (1-5).",
                "points": 5,
                "time_limit_seconds": 30,
            },
            {
                "id": "q5",
                "type": "integer",
                "prompt": "How many times will useEffect run if the dependency array is empty?",
                "points": 10,
                "time_limit_seconds": 60,
            },
        ],
    },
    {
        "id": "assessment_2",
        "title": "React Developer Assessment",
        "description": "Technical assessment for React Developer position at InnovateTech",
        "category": "technical",
        "duration_minutes": 45,
        "passing_score_percent": 60,
        "job_id": "job_2",
        "job_title": "React Developer",
        "company": "InnovateTech",
        "owner_id": SAMPLE_RECRUITER_ID,
        "status": "draft",
        "created_at": "2024-01-22T09:00:00+00:00",
        "questions": [
            {
                "id": "q1",
                "type": "multiple-choice",
                "prompt": "Which hook memoizes a computed value?",
                "options": ["useMemo", "useRef", "useEffect", "useId"],
                "correct_answer_index": 0,
                "points": 5,
                "time_limit_seconds": 60,
            },
        ],
    },
]

SAMPLE_APPLICATIONS = [
    {
        "id": "app_1",
        "candidate_id": SAMPLE_CANDIDATE_ID,
        "job_id": "job_1",
        "status": "Assessment Required",
        "assessment_completed": False,
        "assessment_score": None,
        "applied_at": "2024-01-21T10:30:00+00:00",
    },
    {
        "id": "app_2",
        "candidate_id": SAMPLE_CANDIDATE_ID,
        "job_id": "job_2",
        "status": "Applied",
        "assessment_completed": False,
        "assessment_score": None,
        "applied_at": "2024-01-23T14:00:00+00:00",
    },
]

_SEED = {
    "jobs": SAMPLE_JOBS,
    "assessments": SAMPLE_ASSESSMENTS,
    "applications": SAMPLE_APPLICATIONS,
}


def seed_sample_data(store: KeyValueStore) -> int:
    """비어 있는 컬렉션에만 샘플 데이터를 넣는다. 추가된 문서 수 반환."""
    added = 0
    for collection, docs in _SEED.items():
        if not store.is_empty(collection):
            continue
        for doc in docs:
            store.put(collection, doc)
            added += 1
    if added:
        logger.info(f"샘플 데이터 {added}건 추가")
    return added
