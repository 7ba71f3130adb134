from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prompt2svg.core.types import GenerationFailure, GenerationInput, GenerationResult
from prompt2svg.generation.extractor import extract
from prompt2svg.generation.prompts import build_prompts

if TYPE_CHECKING:
    from prompt2svg.core.protocols import CompletionClient
    from prompt2svg.logging.run_tracker import RunTracker

logger = logging.getLogger(__name__)


class SVGGenerator:
    def __init__(self, llm: CompletionClient, tracker: RunTracker | None = None) -> None:
        self.llm = llm
        self.tracker = tracker

    async def generate(self, generation_input: GenerationInput) -> GenerationResult:
        """Run one generation attempt: build prompts, call the model, extract.

        Failures are raised as ``GenerationFailure`` and never retried here.
        """
        prompts = build_prompts(generation_input)

        logger.debug("=== GENERATION (%s, model %s) ===",
                     generation_input.source_icon_name, generation_input.model_id)
        logger.debug("SYSTEM PROMPT:\n%s", prompts.system_prompt)
        logger.debug("USER PROMPT:\n%s", prompts.user_prompt)

        if self.tracker is not None:
            self.tracker.save_request(generation_input)
            self.tracker.save_prompts(prompts)

        try:
            response = await self.llm.complete(generation_input.model_id, prompts)
            logger.debug("RESPONSE:\n%s", response)
            if self.tracker is not None:
                self.tracker.save_raw_response(response)
            result = extract(response)
        except GenerationFailure as e:
            if self.tracker is not None:
                self.tracker.save_failure(e)
            raise

        if self.tracker is not None:
            await self.tracker.save_result(result)
        return result
