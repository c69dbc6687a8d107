"""Client for generating narration scripts with the Gemini API."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from .exceptions import GenerationError, MissingFieldError

logger = logging.getLogger(__name__)

API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
DEFAULT_MODEL = "gemini-1.5-flash-latest"
DEFAULT_PROMPT = "Write a story about a magic backpack."

@dataclass
class ResponsePart:
    text: Optional[str] = None

@dataclass
class ResponseContent:
    parts: Optional[List[ResponsePart]] = None

@dataclass
class ResponseCandidate:
    content: Optional[ResponseContent] = None

@dataclass
class GenerationResponse:
    """
    The subset of a generateContent response that carries the script.

    Every level is optional so that a partial payload can be parsed; asking
    for the text then names the first field that was absent.
    """
    candidates: Optional[List[ResponseCandidate]] = field(default=None)

    @classmethod
    def from_json(cls, payload: Any) -> "GenerationResponse":
        if not isinstance(payload, dict):
            return cls()
        raw_candidates = payload.get("candidates")
        if not isinstance(raw_candidates, list):
            return cls()

        candidates = []
        for raw_candidate in raw_candidates:
            raw_content = raw_candidate.get("content") if isinstance(raw_candidate, dict) else None
            content = None
            if isinstance(raw_content, dict):
                raw_parts = raw_content.get("parts")
                parts = None
                if isinstance(raw_parts, list):
                    parts = [
                        ResponsePart(text=p.get("text") if isinstance(p, dict) and isinstance(p.get("text"), str) else None)
                        for p in raw_parts
                    ]
                content = ResponseContent(parts=parts)
            candidates.append(ResponseCandidate(content=content))
        return cls(candidates=candidates)

    def text(self) -> str:
        """
        Returns the text of the first part of the first candidate.

        Raises:
            MissingFieldError: Naming the first absent field.
        """
        if not self.candidates:
            raise MissingFieldError("candidates")
        content = self.candidates[0].content
        if content is None:
            raise MissingFieldError("content")
        if not content.parts:
            raise MissingFieldError("parts")
        text = content.parts[0].text
        if text is None:
            raise MissingFieldError("text")
        return text

class ScriptClient:
    """Requests a narration script from the generation service."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, timeout: float = 60.0):
        if not api_key:
            raise GenerationError("An API key is required for script generation")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    def generate(self, prompt: str = DEFAULT_PROMPT) -> str:
        """
        Generates a script for the prompt.

        Args:
            prompt: Instruction for the text-generation model.

        Returns:
            The generated script text.

        Raises:
            GenerationError: On transport failure, a non-2xx status, or a
                             response without script text.
        """
        url = API_URL.format(model=self.model)
        body: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        logger.info(f"Requesting script from model '{self.model}'")

        try:
            response = requests.post(url, params={"key": self.api_key}, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Script generation request failed: {e}")
            raise GenerationError(f"Script generation request failed: {e}") from e

        if not response.ok:
            raise GenerationError(f"Script generation returned HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise GenerationError(f"Script generation returned malformed JSON: {e}") from e

        text = GenerationResponse.from_json(payload).text()
        logger.info(f"Received script of {len(text)} characters.")
        return text
