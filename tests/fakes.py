# tests/fakes.py

from __future__ import annotations

from taskcoach.errors import AnnotationUnavailable
from taskcoach.models.enums import AIPotential
from taskcoach.services.annotation_service import (
    AnnotationClient,
    PotentialAnalysis,
    TimeEstimate,
    parse_time_estimate,
)


class FakeAnnotator(AnnotationClient):
    """
    Deterministic annotation client for unit tests.

    - Captures calls for assertions
    - Fails for any description listed in ``fail_on``
    - Runs the response parser on any raw payload listed in ``raw_estimates``
    """

    def __init__(self) -> None:
        self.estimate = TimeEstimate(manual_minutes=30, ai_minutes=10)
        self.analysis = PotentialAnalysis(
            potential=AIPotential.SOME,
            coaching_tips="Break the work into two focused sessions.",
            motivational_score=70,
        )
        self.details = "1. Draft with an assistant. 2. Review by hand."
        self.fail_on: set[str] = set()
        self.raw_estimates: dict[str, dict] = {}
        self.calls: list[tuple[str, str]] = []

    def _record(self, kind: str, description: str) -> None:
        self.calls.append((kind, description))
        if description in self.fail_on:
            raise AnnotationUnavailable(f"fake failure for {description!r}")

    def estimate_time(self, description: str) -> TimeEstimate:
        self._record("estimate", description)
        if description in self.raw_estimates:
            return parse_time_estimate(self.raw_estimates[description])
        return self.estimate

    def analyze_potential(self, description: str) -> PotentialAnalysis:
        self._record("analyze", description)
        return self.analysis

    def explain_implementation(self, description: str) -> str:
        self._record("explain", description)
        return self.details
