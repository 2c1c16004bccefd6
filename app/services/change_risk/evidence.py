"""
Test evidence sources for the testing validation stage.

Whether a change has verifiable test-completion evidence, and whether those
tests passed, is supplied by an evidence source injected into the engine.
StaticEvidenceSource gives fixed answers; SimulatedEvidenceSource draws them
from a seeded random generator for demos.
"""

import random
from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from app.core.logging import get_logger
from app.schemas.change_request import ChangeRequest

logger = get_logger(__name__)

TEST_PORTAL_URL = "https://testing-portal.example.com/test-results"
DEFAULT_CHANGE_NUMBER = "CHG0010234"


class TestEvidence(BaseModel):
    """Pre-implementation test evidence for one change."""

    model_config = ConfigDict(frozen=True)

    completion_link: Optional[str] = Field(
        default=None, description="Link to the test completion record, if any."
    )
    passed: bool = Field(default=False, description="Whether the tests passed.")

    @property
    def has_evidence(self) -> bool:
        return bool(self.completion_link)


@runtime_checkable
class TestEvidenceSource(Protocol):
    def collect(self, request: ChangeRequest) -> TestEvidence:
        """Return the test evidence on file for *request*."""
        ...


def completion_link_for(request: ChangeRequest) -> str:
    return f"{TEST_PORTAL_URL}/{request.id or DEFAULT_CHANGE_NUMBER}"


class StaticEvidenceSource:
    """Deterministic evidence source returning the same answer for every change."""

    def __init__(
        self,
        has_evidence: bool = True,
        passed: bool = True,
        link: Optional[str] = None,
    ):
        self.has_evidence = has_evidence
        self.passed = passed
        self.link = link

    def collect(self, request: ChangeRequest) -> TestEvidence:
        if not self.has_evidence:
            return TestEvidence(completion_link=None, passed=self.passed)
        return TestEvidence(
            completion_link=self.link or completion_link_for(request),
            passed=self.passed,
        )


class SimulatedEvidenceSource:
    """
    Random evidence source for demonstrations.

    Tests pass with probability *pass_probability* and a completion link
    exists with probability *evidence_probability*. Pass a seed to make a run
    reproducible.
    """

    def __init__(
        self,
        pass_probability: float = 0.7,
        evidence_probability: float = 0.5,
        seed: Optional[int] = None,
    ):
        for name, p in (
            ("pass_probability", pass_probability),
            ("evidence_probability", evidence_probability),
        ):
            if not 0.0 <= p <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {p}")
        self.pass_probability = pass_probability
        self.evidence_probability = evidence_probability
        self._rng = random.Random(seed)

    def collect(self, request: ChangeRequest) -> TestEvidence:
        passed = self._rng.random() < self.pass_probability
        has_link = self._rng.random() < self.evidence_probability
        logger.debug(
            "Simulated test evidence for %r: passed=%s link=%s",
            request.title,
            passed,
            has_link,
        )
        return TestEvidence(
            completion_link=completion_link_for(request) if has_link else None,
            passed=passed,
        )
