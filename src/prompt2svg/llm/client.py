from __future__ import annotations

import logging

import litellm
import openai

from prompt2svg.config.loader import UpstreamConfig
from prompt2svg.core.types import DETAILS_LIMIT, ErrorKind, GenerationFailure, PromptPair

litellm.drop_params = True

logger = logging.getLogger(__name__)


class LLMClient:
    def __init__(self, config: UpstreamConfig) -> None:
        self.config = config

    async def complete(self, model: str, prompts: PromptPair) -> str:
        """Send one chat completion and return the text content.

        Any upstream failure, including a response without string content, is
        raised as ``GenerationFailure`` with ``ErrorKind.UPSTREAM_ERROR``.
        """
        try:
            response = await litellm.acompletion(
                model=model,
                custom_llm_provider=self.config.provider,
                api_base=self.config.base_url,
                api_key=self.config.api_key,
                extra_headers=self.config.headers,
                messages=[
                    {"role": "system", "content": prompts.system_prompt},
                    {"role": "user", "content": prompts.user_prompt},
                ],
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
                timeout=self.config.timeout,
            )
        except openai.APIError as e:
            status = getattr(e, "status_code", None)
            body = str(getattr(e, "message", None) or e)
            logger.warning("Upstream call to %s failed (%s): %s", model, status, body[:200])
            # Connection errors and timeouts carry no HTTP status.
            if status is None:
                message = "OpenRouter request failed"
            else:
                message = f"OpenRouter error ({status})"
            raise GenerationFailure(
                ErrorKind.UPSTREAM_ERROR,
                message,
                details=body[:DETAILS_LIMIT],
                status_code=status,
            ) from e

        content = _first_message_content(response)
        if not content:
            logger.warning("Upstream response from %s had no content", model)
            raise GenerationFailure(
                ErrorKind.UPSTREAM_ERROR,
                "No response content from OpenRouter",
                details=str(response)[:DETAILS_LIMIT],
            )
        return content


def _first_message_content(response) -> str | None:
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) else None
