"""
Course load advisory (external text generation service).

The scheduling engine does not generate advice. This module only:
- builds a plain-data summary of the selected courses
- sends it to a generateContent-style HTTP API
- returns the markdown text of the answer

Network calls are wrapped in call_with_retry(), which retries transient
failures with exponential backoff (1s, 2s, 4s, ... by default).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from coursegrid.config import CourseGridConfig, get_config
from coursegrid.errors import PermanentAdvisorError, TransientAdvisorError
from coursegrid.model import Course


logger = logging.getLogger(__name__)

T = TypeVar("T")


SYSTEM_PROMPT = """You are an expert University Academic Advisor and Time Management Specialist. \
Your task is to analyze a student's selected course load and provide specific, actionable advice.
The response MUST be structured using Markdown headings (e.g., ## Assessment) into three sections:
1. Overall Load Assessment (2-3 sentences on credit level and perceived difficulty).
2. Scheduling Hotspots (Identify 1-2 specific days or time blocks with heavy class schedules \
and suggest time-saving strategies for those days).
3. Interdisciplinary Study Strategy (Suggest a unique study or time management tip that connects \
two or more of the selected courses based on their content or schedule).
The response must be in Markdown format, highly encouraging, and professional."""


# ---------------------------------------------------------------------------
# Payload
# ---------------------------------------------------------------------------


def build_course_summary(courses: Iterable[Course]) -> List[Dict[str, Any]]:
    return [
        {
            "code": c.code,
            "name": c.name,
            "credits": c.credits,
            "lecture": c.lecture_schedule,
            "tutorial": c.tutorial_schedule,
            "practical": c.practical_schedule,
            "instructor": c.instructor,
        }
        for c in courses
    ]


def build_prompt(summary: List[Dict[str, Any]]) -> str:
    return "Analyze this student's course load and schedule:\n\n" + json.dumps(summary, indent=2)


def build_payload(summary: List[Dict[str, Any]], temperature: float) -> Dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": build_prompt(summary)}]}],
        "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
        "generationConfig": {"temperature": temperature},
    }


# ---------------------------------------------------------------------------
# Retry
# ---------------------------------------------------------------------------


def call_with_retry(func: Callable[[], T], max_attempts: int = 3, backoff_seconds: float = 1.0) -> T:
    """
    Call `func`, retrying TransientAdvisorError up to `max_attempts` calls in total.
    The last error is re-raised once attempts run out.
    """
    retryer = Retrying(
        retry=retry_if_exception_type(TransientAdvisorError),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=backoff_seconds),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    return retryer(func)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


def _extract_text(result: Any) -> str:
    try:
        text = result["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        text = None
    if not isinstance(text, str) or not text.strip():
        raise PermanentAdvisorError("The advisory response was empty.")
    return text


class AdvisorClient:
    def __init__(
        self,
        config: Optional[CourseGridConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config or get_config()
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        base = self.config.advisor_base_url.rstrip("/")
        return f"{base}/models/{self.config.advisor_model}:generateContent"

    def _post(self, payload: Dict[str, Any]) -> Any:
        try:
            resp = self.session.post(
                self.endpoint,
                params={"key": self.config.advisor_api_key},
                json=payload,
                timeout=self.config.advisor_timeout,
            )
        except requests.RequestException as e:
            raise TransientAdvisorError(f"Advisory request failed: {e}") from e

        if resp.status_code == 429 or resp.status_code >= 500:
            raise TransientAdvisorError(f"Advisory API call failed with status: {resp.status_code}")
        if resp.status_code >= 400:
            raise PermanentAdvisorError(f"Advisory API call failed with status: {resp.status_code}")

        try:
            return resp.json()
        except ValueError as e:
            raise PermanentAdvisorError("Advisory API returned invalid JSON.") from e

    def analyze(self, courses: List[Course]) -> str:
        """
        Ask the service to assess the course load. Returns markdown text.
        """
        if not courses:
            raise PermanentAdvisorError("No courses selected.")
        if not self.config.advisor_api_key:
            raise PermanentAdvisorError("No API key configured (set COURSEGRID_ADVISOR_API_KEY).")

        payload = build_payload(build_course_summary(courses), self.config.advisor_temperature)
        logger.info("Requesting course load analysis for %d courses", len(courses))

        result = call_with_retry(
            lambda: self._post(payload),
            max_attempts=self.config.advisor_max_attempts,
            backoff_seconds=self.config.advisor_backoff_seconds,
        )
        return _extract_text(result)
