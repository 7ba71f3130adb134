"""Boundary validation for generation requests.

The request body uses the camelCase shape the web client sends. Everything
downstream of :func:`validate_generation_request` works with a frozen
:class:`~prompt2svg.core.types.GenerationInput` and does not re-check it.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from prompt2svg.core.types import (
    ErrorKind,
    GenerationFailure,
    GenerationInput,
    StyleParameters,
    ValidationIssue,
)


class SVGParameters(BaseModel):
    primaryColor: str = Field(pattern=r"^#[0-9A-Fa-f]{6}$")
    outlineWidth: float = Field(ge=0, le=10)


class GenerationRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    iconSVGCode: str = Field(min_length=1)
    sourceIconName: str = Field(min_length=1)
    stylePreset: Optional[str] = None
    userPrompt: str
    systemPrompt: Optional[str] = None
    selectedModel: str = Field(min_length=1)
    parameters: SVGParameters

    def to_input(self) -> GenerationInput:
        return GenerationInput(
            source_svg_code=self.iconSVGCode,
            source_icon_name=self.sourceIconName,
            user_instructions=self.userPrompt,
            model_id=self.selectedModel,
            style_parameters=StyleParameters(
                primary_color=self.parameters.primaryColor,
                outline_width=self.parameters.outlineWidth,
            ),
            explicit_system_prompt=self.systemPrompt,
            style_preset=self.stylePreset,
        )


def _issues_from(error: ValidationError) -> list[ValidationIssue]:
    return [
        ValidationIssue(
            path=".".join(str(part) for part in err["loc"]),
            message=err["msg"],
        )
        for err in error.errors()
    ]


def format_validation_errors(issues: list[ValidationIssue]) -> str:
    lines = ["Validation failed"]
    for issue in issues:
        prefix = f"{issue.path}: " if issue.path else ""
        lines.append(f"  - {prefix}{issue.message}")
    return "\n".join(lines)


def validate_generation_request(data: Any) -> GenerationInput:
    """Validate a raw request body and convert it to a ``GenerationInput``.

    Raises ``GenerationFailure`` with ``ErrorKind.INVALID_INPUT`` listing every
    issue found.
    """
    if not isinstance(data, dict):
        issues = [ValidationIssue(path="", message="Request body must be a JSON object")]
    else:
        try:
            return GenerationRequest.model_validate(data).to_input()
        except ValidationError as e:
            issues = _issues_from(e)

    raise GenerationFailure(
        ErrorKind.INVALID_INPUT,
        "Invalid request body",
        details=format_validation_errors(issues),
        issues=issues,
    )
