"""
services/repository.py

저장소(KeyValueStore) 위의 문서 타입별 저장소 계층.
Public API:
  - JobRepository:         list_owned_by / list_active / get / create
  - AssessmentRepository:  create / get / list / update / publish   (삭제 없음)
  - ApplicationRepository: create / get / list / update / find_for

update 는 패치를 기존 문서에 병합한다 (마지막 쓰기 우선, 낙관적 잠금 없음).
"""

import logging
import uuid
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

from talentflow.models.application_model import Application, ApplicationStatus
from talentflow.models.assessment_model import Assessment, AssessmentStatus, utc_now_iso
from talentflow.models.job_model import Job
from talentflow.services.errors import InvalidTransitionError, NotFoundError
from talentflow.services.storage import KeyValueStore

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class _Repository(Generic[ModelT]):
    collection: str = ""
    id_prefix: str = ""
    model: Type[ModelT]
    immutable_fields: tuple = ("id",)

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def _new_id(self) -> str:
        return f"{self.id_prefix}_{uuid.uuid4().hex[:12]}"

    def _save(self, obj: ModelT) -> ModelT:
        self.store.put(self.collection, obj.model_dump(mode="json"))
        return obj

    def _all(self) -> List[ModelT]:
        return [self.model.model_validate(d) for d in self.store.list(self.collection)]

    def get(self, doc_id: str) -> ModelT:
        doc = self.store.get(self.collection, doc_id)
        if doc is None:
            raise NotFoundError(f"{self.collection}/{doc_id} not found")
        return self.model.model_validate(doc)

    def exists(self, doc_id: str) -> bool:
        return self.store.get(self.collection, doc_id) is not None

    def create(self, data: Dict[str, Any]) -> ModelT:
        data = {**data, "id": data.get("id") or self._new_id()}
        obj = self.model.model_validate(data)
        self._save(obj)
        logger.info(f"{self.collection} 생성: {obj.id}")
        return obj

    def update(self, doc_id: str, patch: Dict[str, Any]) -> ModelT:
        current = self.get(doc_id)
        patch = {k: v for k, v in patch.items() if k not in self.immutable_fields}
        merged = {**current.model_dump(mode="json"), **patch}
        obj = self.model.model_validate(merged)
        self._save(obj)
        logger.info(f"{self.collection} 수정: {doc_id} ({', '.join(sorted(patch)) or '변경 없음'})")
        return obj


class JobRepository(_Repository[Job]):
    collection = "jobs"
    id_prefix = "job"
    model = Job

    def list_active(self) -> List[Job]:
        return [j for j in self._all() if j.is_open]

    def list_owned_by(self, recruiter_id: str) -> List[Job]:
        """채용 담당자가 등록한 진행 중 공고 (빌더의 공고 선택 목록)."""
        return [j for j in self.list_active() if j.owner_id == recruiter_id]


class AssessmentRepository(_Repository[Assessment]):
    collection = "assessments"
    id_prefix = "assessment"
    model = Assessment
    immutable_fields = ("id", "created_at")

    def create(self, data: Dict[str, Any]) -> Assessment:
        return super().create({**data, "created_at": utc_now_iso()})

    def list(
        self,
        owner_id: Optional[str] = None,
        job_id: Optional[str] = None,
    ) -> List[Assessment]:
        items = self._all()
        if owner_id:
            items = [a for a in items if a.owner_id == owner_id]
        if job_id:
            items = [a for a in items if a.job_id == job_id]
        return sorted(items, key=lambda a: a.created_at)

    def update(self, doc_id: str, patch: Dict[str, Any]) -> Assessment:
        current = self.get(doc_id)
        if (
            current.status == AssessmentStatus.ACTIVE
            and patch.get("status") == AssessmentStatus.DRAFT.value
        ):
            raise InvalidTransitionError("Published assessments cannot return to draft.")
        return super().update(doc_id, patch)

    def publish(self, doc_id: str) -> Assessment:
        return self.update(doc_id, {"status": AssessmentStatus.ACTIVE.value})


class ApplicationRepository(_Repository[Application]):
    collection = "applications"
    id_prefix = "app"
    model = Application

    def create(self, data: Dict[str, Any]) -> Application:
        return super().create({
            **data,
            "status": ApplicationStatus.APPLIED.value,
            "assessment_completed": False,
            "assessment_score": None,
            "applied_at": utc_now_iso(),
        })

    def list(
        self,
        candidate_id: Optional[str] = None,
        job_id: Optional[str] = None,
    ) -> List[Application]:
        items = self._all()
        if candidate_id:
            items = [a for a in items if a.candidate_id == candidate_id]
        if job_id:
            items = [a for a in items if a.job_id == job_id]
        return items

    def find_for(self, candidate_id: str, job_id: str) -> Optional[Application]:
        """응시자와 공고에 해당하는 지원서. 없으면 None."""
        matches = self.list(candidate_id=candidate_id, job_id=job_id)
        return matches[0] if matches else None


class Repositories:
    """하나의 저장소를 공유하는 저장소 계층 묶음 (앱 단위로 주입)."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self.jobs = JobRepository(store)
        self.assessments = AssessmentRepository(store)
        self.applications = ApplicationRepository(store)
