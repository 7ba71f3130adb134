from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from prompt2svg.core.types import PromptPair


@runtime_checkable
class CompletionClient(Protocol):
    async def complete(self, model: str, prompts: PromptPair) -> str: ...


@runtime_checkable
class ArtifactRenderer(Protocol):
    artifact_media_type: str  # e.g. "image/png"
    artifact_extension: str  # e.g. "png"

    async def render_artifact(self, svg_code: str) -> bytes | None: ...
