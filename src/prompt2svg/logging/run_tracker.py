from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from prompt2svg.core.types import (
    GenerationFailure,
    GenerationInput,
    GenerationResult,
    PromptPair,
)

if TYPE_CHECKING:
    from prompt2svg.core.protocols import ArtifactRenderer


class RunTracker:
    """Writes everything about one generation attempt into its own run directory."""

    def __init__(
        self, output_dir: Path, artifact_renderer: ArtifactRenderer | None = None
    ) -> None:
        self.artifact_renderer = artifact_renderer

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        self.run_dir = Path(output_dir) / f"run_{timestamp}"
        self.run_dir.mkdir(parents=True, exist_ok=True)

    def _write_json(self, name: str, data: dict) -> Path:
        path = self.run_dir / name
        path.write_text(json.dumps(data, indent=2))
        return path

    def save_request(self, generation_input: GenerationInput) -> None:
        self._write_json("request.json", {
            "timestamp": datetime.now().isoformat(),
            "model": generation_input.model_id,
            "source_icon_name": generation_input.source_icon_name,
            "style_preset": generation_input.style_preset,
            "user_instructions": generation_input.user_instructions,
            "explicit_system_prompt": generation_input.explicit_system_prompt is not None,
            "style_parameters": asdict(generation_input.style_parameters),
            "source_svg_length": len(generation_input.source_svg_code),
        })

    def save_prompts(self, prompts: PromptPair) -> None:
        self._write_json("prompts.json", asdict(prompts))

    def save_raw_response(self, raw: str) -> None:
        (self.run_dir / "raw_response.txt").write_text(raw)

    async def save_result(self, result: GenerationResult) -> None:
        (self.run_dir / "result.svg").write_text(result.svg)
        self._write_json("result.json", result.to_dict())

        if self.artifact_renderer is not None:
            data = await self.artifact_renderer.render_artifact(result.svg)
            if data is not None:
                ext = self.artifact_renderer.artifact_extension
                (self.run_dir / f"result.{ext}").write_bytes(data)

    def save_failure(self, failure: GenerationFailure) -> None:
        self._write_json("error.json", {
            "kind": failure.kind.value,
            "status": failure.http_status,
            "upstream_status": failure.status_code,
            **failure.to_payload(),
        })
