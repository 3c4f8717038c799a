# taskcoach/services/annotation_service.py
from __future__ import annotations
import json
import logging
import math
from dataclasses import dataclass

import requests
from flask import current_app

from ..errors import AnnotationUnavailable
from ..models.enums import AIPotential, ANALYZED_POTENTIALS

log = logging.getLogger(__name__)

ESTIMATE_PROMPT = (
    "You are an expert at estimating task completion times. For the given task, provide two estimates: "
    "1) how many minutes it would take an average person to complete manually, and 2) how many minutes it "
    "would take with AI assistance (if applicable). Respond with JSON containing 'manualMinutes' and "
    "'aiAssistedMinutes' fields. If AI cannot help with the task, set aiAssistedMinutes to null. Consider "
    "task complexity, required focus, and typical execution time. Round to the nearest 5 minutes."
)

POTENTIAL_PROMPT = (
    "You are an expert AI productivity coach. Analyze the task and provide: 1) AI automation potential "
    "('none', 'some', or 'advanced'), 2) personalized coaching tips to help the user approach the task "
    "effectively, and 3) a motivation score (1-100) based on task complexity and impact. Respond in JSON "
    "format with 'potential', 'coachingTips', and 'motivationalScore' fields. Make the coaching tips "
    "encouraging and actionable, focusing on both personal growth and efficiency."
)

EXPLAIN_PROMPT = (
    "You are an AI implementation expert. For the given task, provide detailed suggestions on how to "
    "incorporate AI tools and techniques to save time. Focus on practical, actionable steps using currently "
    "available AI technologies. Include specific tools, APIs, or services when relevant. Structure your "
    "response with clear steps and expected benefits."
)

NO_TIPS = "No coaching tips available."
NO_DETAILS = "No implementation details available."


@dataclass(frozen=True)
class TimeEstimate:
    manual_minutes: int
    ai_minutes: int | None


@dataclass(frozen=True)
class PotentialAnalysis:
    potential: AIPotential
    coaching_tips: str
    motivational_score: int


def _as_number(value):
    # bool is an int subclass but never a valid number; json.loads also yields NaN and Infinity
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


class AnnotationClient:
    """Capability interface for task annotation.

    Each method is a single round trip with no retries or caching. Any failure
    surfaces as ``AnnotationUnavailable``.
    """

    def estimate_time(self, description: str) -> TimeEstimate:
        raise NotImplementedError

    def analyze_potential(self, description: str) -> PotentialAnalysis:
        raise NotImplementedError

    def explain_implementation(self, description: str) -> str:
        raise NotImplementedError


class ChatCompletionsAnnotator(AnnotationClient):
    """Annotator backed by an OpenAI-compatible ``/chat/completions`` endpoint."""

    def __init__(self, *, api_key: str | None, base_url: str, model: str, timeout: float = 30):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> "ChatCompletionsAnnotator":
        return cls(
            api_key=config.get("ANNOTATION_API_KEY"),
            base_url=config.get("ANNOTATION_BASE_URL", "https://api.openai.com/v1"),
            model=config.get("ANNOTATION_MODEL", "gpt-4o"),
            timeout=config.get("ANNOTATION_TIMEOUT", 30),
        )

    # --- transport ---

    def _complete(self, system: str, user: str, *, json_mode: bool) -> str | None:
        if not self.api_key:
            raise AnnotationUnavailable("annotation API key is not configured")

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        try:
            r = requests.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
            if r.status_code >= 400:
                log.error("Annotation API error %s | body=%s", r.status_code, r.text[:500])
            r.raise_for_status()
            data = r.json()
            return data["choices"][0]["message"].get("content")
        except requests.RequestException as e:
            raise AnnotationUnavailable(f"annotation request failed: {e}", e) from e
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise AnnotationUnavailable(f"malformed annotation response: {e}", e) from e

    def _complete_json(self, system: str, user: str) -> dict:
        content = self._complete(system, user, json_mode=True)
        if not content:
            raise AnnotationUnavailable("empty annotation response")
        try:
            result = json.loads(content)
        except ValueError as e:
            raise AnnotationUnavailable("annotation response is not JSON", e) from e
        if not isinstance(result, dict):
            raise AnnotationUnavailable("annotation response is not a JSON object")
        return result

    # --- operations ---

    def estimate_time(self, description: str) -> TimeEstimate:
        result = self._complete_json(
            ESTIMATE_PROMPT,
            f'Please estimate completion times for this task and respond with JSON: "{description}"',
        )
        return parse_time_estimate(result)

    def analyze_potential(self, description: str) -> PotentialAnalysis:
        result = self._complete_json(
            POTENTIAL_PROMPT,
            f'Please analyze this task and provide coaching insights: "{description}"',
        )
        return parse_potential(result)

    def explain_implementation(self, description: str) -> str:
        content = self._complete(
            EXPLAIN_PROMPT,
            f'Please suggest specific AI tools and techniques to optimize this task: "{description}"',
            json_mode=False,
        )
        return content or NO_DETAILS


def parse_time_estimate(result: dict) -> TimeEstimate:
    manual = _as_number(result.get("manualMinutes"))
    if manual is None or manual < 0:
        raise AnnotationUnavailable("invalid manualMinutes in annotation response")

    raw_ai = result.get("aiAssistedMinutes")
    ai = _as_number(raw_ai)
    if (raw_ai is not None and ai is None) or (ai is not None and ai < 0):
        raise AnnotationUnavailable("invalid aiAssistedMinutes in annotation response")
    return TimeEstimate(
        manual_minutes=int(round(manual)),
        ai_minutes=None if ai is None else int(round(ai)),
    )


def parse_potential(result: dict) -> PotentialAnalysis:
    try:
        potential = AIPotential(result.get("potential"))
    except ValueError:
        potential = None
    if potential not in ANALYZED_POTENTIALS:
        raise AnnotationUnavailable("invalid potential in annotation response")

    # range is checked on the number as sent, before rounding
    score = _as_number(result.get("motivationalScore"))
    if score is None or not 1 <= score <= 100:
        raise AnnotationUnavailable("invalid motivationalScore in annotation response")

    tips = result.get("coachingTips")
    return PotentialAnalysis(
        potential=potential,
        coaching_tips=tips if isinstance(tips, str) and tips.strip() else NO_TIPS,
        motivational_score=int(round(score)),
    )


def init_annotator(app, annotator: AnnotationClient | None = None) -> None:
    app.extensions["annotator"] = annotator or ChatCompletionsAnnotator.from_config(app.config)


def get_annotator() -> AnnotationClient:
    return current_app.extensions["annotator"]
