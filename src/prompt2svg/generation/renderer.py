from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class ResvgRenderer:
    """Renders a generated icon to PNG so a run can be checked at a glance."""

    artifact_media_type = "image/png"
    artifact_extension = "png"

    def __init__(self, size: int = 256, color: str = "#000000") -> None:
        self.size = size
        self.color = color

    async def render_artifact(self, svg_code: str) -> bytes | None:
        from resvg_py import svg_to_bytes

        # currentColor falls back to black in resvg; paint with the chosen color instead.
        svg_code = svg_code.replace("currentColor", self.color)
        try:
            data = svg_to_bytes(
                svg_string=svg_code,
                width=self.size,
                height=self.size,
                background="white",
            )
        except ValueError as e:
            # Extraction only guarantees an <svg> region, not parseable XML.
            logger.warning("Skipping PNG preview, resvg could not parse the SVG: %s", e)
            return None
        return bytes(data)
