"""
services/storage.py

컬렉션 단위 키-값 저장소.
Public API:
  - KeyValueStore.get(collection, doc_id) -> dict | None
  - KeyValueStore.list(collection)        -> list[dict]
  - KeyValueStore.put(collection, doc)    -> dict

문서는 자신의 "id" 필드로 저장된다. 외래 키 검증은 하지 않으며,
같은 ID에 대한 동시 쓰기는 마지막 쓰기가 이긴다 (트랜잭션 없음).
"""

import copy
import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from talentflow.services.errors import PersistenceError

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


class KeyValueStore(ABC):
    """저장 매체와 무관한 저장소 인터페이스."""

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        ...

    @abstractmethod
    def list(self, collection: str) -> List[Document]:
        ...

    @abstractmethod
    def put(self, collection: str, doc: Document) -> Document:
        ...

    def is_empty(self, collection: str) -> bool:
        return not self.list(collection)


class InMemoryStore(KeyValueStore):
    """프로세스 메모리 저장소 (테스트 및 임시 실행용)."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data: Dict[str, Dict[str, Document]] = {}

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with self._lock:
            doc = self._data.get(collection, {}).get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    def list(self, collection: str) -> List[Document]:
        with self._lock:
            return [copy.deepcopy(d) for d in self._data.get(collection, {}).values()]

    def put(self, collection: str, doc: Document) -> Document:
        doc_id = doc.get("id")
        if not doc_id:
            raise PersistenceError(f"'{collection}' 문서에 id가 없습니다.")
        with self._lock:
            self._data.setdefault(collection, {})[doc_id] = copy.deepcopy(doc)
        return copy.deepcopy(doc)


class JsonFileStore(InMemoryStore):
    """
    전체 저장소를 JSON 파일 하나로 유지하는 저장소.
    쓰기마다 파일 전체를 다시 기록한다 (브라우저 localStorage 와 같은 방식).
    """

    def __init__(self, path: str) -> None:
        super().__init__()
        self.path = path
        self._load()

    def _load(self) -> None:
        if not os.path.exists(self.path):
            logger.info(f"저장소 파일 없음, 새로 시작: {self.path}")
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"저장소 파일을 읽을 수 없습니다: {self.path}") from e

        for collection, docs in raw.items():
            self._data[collection] = {d["id"]: d for d in docs if d.get("id")}
        logger.info(f"저장소 로드 완료: {self.path} ({', '.join(raw) or '비어 있음'})")

    def _flush(self) -> None:
        snapshot = {name: list(docs.values()) for name, docs in self._data.items()}
        tmp_path = f"{self.path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(snapshot, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"저장소 파일 기록 실패: {e}")
            raise PersistenceError(f"저장소 파일에 기록할 수 없습니다: {self.path}") from e

    def put(self, collection: str, doc: Document) -> Document:
        doc_id = doc.get("id")
        if not doc_id:
            raise PersistenceError(f"'{collection}' 문서에 id가 없습니다.")
        with self._lock:
            docs = self._data.setdefault(collection, {})
            previous = docs.get(doc_id)
            docs[doc_id] = copy.deepcopy(doc)
            try:
                self._flush()
            except PersistenceError:
                # 기록 실패 시 메모리도 이전 상태로 되돌린다
                if previous is None:
                    del docs[doc_id]
                else:
                    docs[doc_id] = previous
                raise
        return copy.deepcopy(doc)


def create_store(backend: str, path: str = "") -> KeyValueStore:
    """설정값에 따라 저장소 생성."""
    if backend == "memory":
        return InMemoryStore()
    if backend == "file":
        return JsonFileStore(path)
    raise ValueError(f"알 수 없는 저장소 종류입니다: {backend}")
