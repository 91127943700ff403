from __future__ import annotations

import json
import logging
from typing import Protocol

from google import genai

from termplan.core.config import Settings, get_settings
from termplan.core.exceptions import AssistantUnavailableError
from termplan.schemas.request import FacultyRequest
from termplan.schemas.section import ClassSection

logger = logging.getLogger(__name__)

FALLBACK_ANSWER = "Sorry, I encountered an error checking the schedule. Please check your API key."
EMPTY_ANSWER = "I couldn't generate a response."


class CompletionClient(Protocol):
    def complete(self, context: str, question: str) -> str: ...


def serialize_state(sections: list[ClassSection], requests: list[FacultyRequest]) -> tuple[str, str]:
    schedule_json = json.dumps([section.to_document() for section in sections])
    requests_json = json.dumps([request.to_document() for request in requests])
    return schedule_json, requests_json


def build_assistant_context(sections: list[ClassSection], requests: list[FacultyRequest]) -> str:
    schedule_json, requests_json = serialize_state(sections, requests)
    return (
        "You are an expert Academic Scheduler Assistant helping a college professor.\n\n"
        "Here is the current Department Schedule (JSON format):\n"
        f"{schedule_json}\n\n"
        "Here are the Faculty Requests (JSON format):\n"
        f"{requests_json}\n\n"
        "Answer the user's question based on this data.\n"
        "If they ask about conflicts, look for overlapping times in the same room or same professor.\n"
        "If they ask for recommendations, suggest assignments based on faculty preferences matching the course title.\n\n"
        "Keep answers concise and helpful. Format lists clearly."
    )


class GeminiCompletionClient:
    def __init__(self, settings: Settings) -> None:
        if not settings.assistant_api_key:
            raise AssistantUnavailableError("Assistant API key is not configured")
        self._model = settings.assistant_model
        self._client = genai.Client(api_key=settings.assistant_api_key)

    def complete(self, context: str, question: str) -> str:
        response = self._client.models.generate_content(model=self._model, contents=[context, question])
        return getattr(response, "text", None) or ""


class ScheduleAssistant:
    """Answers free-text questions about the department's state; the reply is display-only."""

    def __init__(self, client: CompletionClient | None = None, settings: Settings | None = None) -> None:
        self._client = client
        self._settings = settings or get_settings()

    def _resolve_client(self) -> CompletionClient:
        if self._client is None:
            self._client = GeminiCompletionClient(self._settings)
        return self._client

    def ask(self, question: str, sections: list[ClassSection], requests: list[FacultyRequest]) -> str:
        context = build_assistant_context(sections, requests)
        try:
            answer = self._resolve_client().complete(context, question)
        except Exception:  # collaborator/network dependent
            logger.warning("Schedule assistant request failed", exc_info=True)
            return FALLBACK_ANSWER
        return answer or EMPTY_ANSWER
