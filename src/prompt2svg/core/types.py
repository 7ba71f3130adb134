from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
DETAILS_LIMIT = 500


@dataclass(frozen=True)
class StyleParameters:
    primary_color: str  # "#RRGGBB"
    outline_width: float


@dataclass(frozen=True)
class GenerationInput:
    source_svg_code: str
    source_icon_name: str
    user_instructions: str
    model_id: str
    style_parameters: StyleParameters
    explicit_system_prompt: str | None = None
    style_preset: str | None = None


@dataclass(frozen=True)
class PromptPair:
    system_prompt: str
    user_prompt: str


@dataclass
class ExtractedPayload:
    svg: str | None = None
    explanation: str | None = None


@dataclass(frozen=True)
class GenerationResult:
    svg: str
    explanation: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"svg": self.svg, "explanation": self.explanation}


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    UPSTREAM_ERROR = "upstream_error"
    NO_EXTRACTABLE_SVG = "no_extractable_svg"
    MISSING_CONFIGURATION = "missing_configuration"


_HTTP_STATUS = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.UPSTREAM_ERROR: 502,
    ErrorKind.NO_EXTRACTABLE_SVG: 422,
    ErrorKind.MISSING_CONFIGURATION: 500,
}


@dataclass
class ValidationIssue:
    path: str
    message: str


class GenerationFailure(Exception):
    """A failed generation attempt, tagged with the kind of failure.

    ``details`` holds diagnostic text (a truncated completion or upstream body),
    ``status_code`` the upstream HTTP status when one is known, and ``issues``
    the validation problems for rejected input.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: str | None = None,
        status_code: int | None = None,
        issues: list[ValidationIssue] | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details
        self.status_code = status_code
        self.issues = issues or []

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self.kind]

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload

