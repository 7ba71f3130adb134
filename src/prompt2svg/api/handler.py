"""Request handling for SVG generation.

Maps a JSON request body to an HTTP-style ``(status, payload)`` pair so any
web framework, or the CLI, can serve it:

* ``200`` ``{"svg", "explanation"}`` on success
* ``400`` invalid request body
* ``422`` the model answered but no SVG could be recovered
* ``500`` missing upstream configuration
* ``502`` the upstream call failed
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from prompt2svg.config.loader import UpstreamConfig, build_upstream_config
from prompt2svg.core.types import GenerationFailure
from prompt2svg.core.validation import validate_generation_request
from prompt2svg.generation.generator import SVGGenerator
from prompt2svg.llm.client import LLMClient

if TYPE_CHECKING:
    from prompt2svg.core.protocols import CompletionClient
    from prompt2svg.logging.run_tracker import RunTracker

logger = logging.getLogger(__name__)


async def handle_generate_request(
    body: Any,
    client: CompletionClient | None = None,
    config: UpstreamConfig | None = None,
    tracker: RunTracker | None = None,
) -> tuple[int, dict[str, Any]]:
    try:
        if client is None:
            client = LLMClient(config or build_upstream_config())
        generation_input = validate_generation_request(body)
        result = await SVGGenerator(client, tracker).generate(generation_input)
    except GenerationFailure as e:
        logger.info("Generation failed: %s (%s)", e.message, e.kind.value)
        return e.http_status, e.to_payload()

    return 200, result.to_dict()
