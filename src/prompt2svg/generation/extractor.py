"""Recover ``{svg, explanation}`` from a raw model completion.

The completion is untrusted. It may be clean JSON, JSON inside a markdown
fence, JSON wrapped in conversational text, bare ``<svg>`` markup, or nothing
usable at all. The probes below are tried in order and the first one that
yields usable markup wins; a probe that cannot parse its candidate simply
contributes nothing. Only total exhaustion is an error.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Callable, Optional

from prompt2svg.core.types import (
    DETAILS_LIMIT,
    SVG_NAMESPACE,
    ErrorKind,
    ExtractedPayload,
    GenerationFailure,
    GenerationResult,
)

logger = logging.getLogger(__name__)

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*(.*?)```", re.IGNORECASE | re.DOTALL)
_SVG_REGION_PATTERN = re.compile(r"<svg(?=[\s/>]).*?</svg>", re.IGNORECASE | re.DOTALL)
_SVG_OPEN_TAG_PATTERN = re.compile(r"<svg(?=[\s/>])[^>]*>", re.IGNORECASE)
_XMLNS_ATTR_PATTERN = re.compile(r"""\sxmlns\s*=\s*(["'])(.*?)\1""", re.DOTALL)


def _payload_from_json(candidate: str) -> ExtractedPayload | None:
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None

    svg = data.get("svg")
    explanation = data.get("explanation")
    return ExtractedPayload(
        svg=svg.strip() if isinstance(svg, str) else None,
        explanation=explanation.strip() if isinstance(explanation, str) else None,
    )


def _parse_direct(text: str) -> ExtractedPayload | None:
    if not text.startswith("{"):
        return None
    return _payload_from_json(text)


def _parse_fenced(text: str) -> ExtractedPayload | None:
    match = _FENCE_PATTERN.search(text)
    if not match or not match.group(1).strip():
        return None
    return _payload_from_json(match.group(1).strip())


def _parse_brace_span(text: str) -> ExtractedPayload | None:
    # Outermost span on purpose: braces inside the markup are not balanced.
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last <= first:
        return None
    return _payload_from_json(text[first : last + 1])


PROBES: list[tuple[str, Callable[[str], Optional[ExtractedPayload]]]] = [
    ("direct_json", _parse_direct),
    ("markdown_fence", _parse_fenced),
    ("brace_span", _parse_brace_span),
]


def _has_svg_region(svg: str | None) -> bool:
    return bool(svg) and _SVG_REGION_PATTERN.search(svg) is not None


def ensure_svg_namespace(svg: str) -> str:
    """Make sure the root ``<svg>`` tag declares the SVG namespace.

    Safe to apply repeatedly: a root that already declares a default namespace
    never gets a second ``xmlns`` attribute.
    """
    tag_match = _SVG_OPEN_TAG_PATTERN.search(svg)
    if not tag_match:
        return svg

    tag = tag_match.group(0)
    xmlns = _XMLNS_ATTR_PATTERN.search(tag)
    if xmlns is None:
        new_tag = f'{tag[:4]} xmlns="{SVG_NAMESPACE}"{tag[4:]}'
    elif xmlns.group(2) != SVG_NAMESPACE:
        new_tag = tag[: xmlns.start(2)] + SVG_NAMESPACE + tag[xmlns.end(2) :]
    else:
        return svg

    return svg[: tag_match.start()] + new_tag + svg[tag_match.end() :]


def extract_payload(raw: str) -> ExtractedPayload:
    """Run the extraction cascade without validating the outcome."""
    trimmed = raw.strip()
    svg: str | None = None
    explanation: str | None = None

    for name, probe in PROBES:
        payload = probe(trimmed)
        if payload is None:
            logger.debug("Extraction probe %s: nothing parsed", name)
            continue
        if payload.explanation and not explanation:
            explanation = payload.explanation
        if _has_svg_region(payload.svg):
            logger.debug("Extraction probe %s: found svg", name)
            svg = payload.svg
            break
        logger.debug("Extraction probe %s: parsed JSON without usable svg", name)

    if svg is None:
        match = _SVG_REGION_PATTERN.search(raw)
        if match:
            logger.debug("Extraction fallback: bare <svg> markup")
            svg = match.group(0).strip()
            if not explanation:
                explanation = raw.replace(match.group(0), "", 1).strip()

    return ExtractedPayload(
        svg=svg.strip() if svg else None,
        explanation=explanation.strip() if explanation else None,
    )


def extract(raw: str) -> GenerationResult:
    """Extract a validated ``GenerationResult`` from a raw completion.

    Raises ``GenerationFailure`` with ``ErrorKind.NO_EXTRACTABLE_SVG`` when no
    strategy recovers any SVG markup.
    """
    payload = extract_payload(raw)

    if not payload.svg:
        logger.warning("No extractable SVG in completion (%d chars)", len(raw))
        raise GenerationFailure(
            ErrorKind.NO_EXTRACTABLE_SVG,
            "Failed to generate valid SVG",
            details=raw[:DETAILS_LIMIT],
        )

    return GenerationResult(
        svg=ensure_svg_namespace(payload.svg),
        explanation=payload.explanation or "",
    )
