"""
In-memory registry of assessments.

Each assessment id maps to its own WorkflowEngine and lock; assessments share
only the read-only reference data in the context. Nothing is persisted.
"""

import threading
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from app.core.logging import get_logger
from app.services.change_risk.context import Ctx, build_context
from app.services.change_risk.engine import WorkflowEngine

logger = get_logger(__name__)


class AssessmentNotFoundError(KeyError):
    """No assessment with the given id."""


class AssessmentRegistry:
    """Thread-safe map of assessment id -> WorkflowEngine."""

    def __init__(self, ctx: Optional[Ctx] = None):
        self.ctx = ctx or build_context()
        self._engines: Dict[str, WorkflowEngine] = {}
        self._engine_locks: Dict[str, threading.Lock] = {}
        self._lock = threading.Lock()

    def create(self) -> tuple[str, WorkflowEngine]:
        """Open a new assessment with its own engine."""
        assessment_id = str(uuid.uuid4())
        engine = WorkflowEngine(self.ctx)
        with self._lock:
            self._engines[assessment_id] = engine
            self._engine_locks[assessment_id] = threading.Lock()
        logger.debug("Opened assessment %s", assessment_id)
        return assessment_id, engine

    def get(self, assessment_id: str) -> WorkflowEngine:
        with self._lock:
            try:
                return self._engines[assessment_id]
            except KeyError:
                raise AssessmentNotFoundError(assessment_id) from None

    @contextmanager
    def locked(self, assessment_id: str) -> Iterator[WorkflowEngine]:
        """
        Hold the assessment's lock and yield its engine.

        Submit and advance on one assessment run one at a time.
        """
        with self._lock:
            try:
                engine = self._engines[assessment_id]
                engine_lock = self._engine_locks[assessment_id]
            except KeyError:
                raise AssessmentNotFoundError(assessment_id) from None
        with engine_lock:
            yield engine

    def discard(self, assessment_id: str) -> None:
        """Reset and forget an assessment."""
        with self._lock:
            engine = self._engines.pop(assessment_id, None)
            engine_lock = self._engine_locks.pop(assessment_id, None)
        if engine is None:
            raise AssessmentNotFoundError(assessment_id)
        with engine_lock:
            engine.reset()
        logger.debug("Closed assessment %s", assessment_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._engines)


# Global singleton
_registry: Optional[AssessmentRegistry] = None


def get_assessment_registry() -> AssessmentRegistry:
    """Get the global assessment registry instance."""
    global _registry
    if _registry is None:
        _registry = AssessmentRegistry()
    return _registry
