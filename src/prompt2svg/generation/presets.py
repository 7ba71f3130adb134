from __future__ import annotations

import re
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

PRESETS_DIR = Path(__file__).parent.parent / "configs" / "presets"

DEFAULT_PRESET_INSTRUCTIONS = "Enhance and modify this icon"

_PLACEHOLDER_PATTERN = re.compile(r"\{(source_svg|user_instructions)\}")


class StylePreset(BaseModel):
    name: str = Field(min_length=1)
    display_name: str = ""
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    system_prompt: str = Field(min_length=1)


def list_presets() -> list[str]:
    if not PRESETS_DIR.exists():
        return []
    return sorted(p.stem for p in PRESETS_DIR.glob("*.yaml"))


def load_preset(name: str) -> StylePreset:
    path = PRESETS_DIR / f"{name}.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Preset {name!r} not found. Available: {list_presets()}")
    data = yaml.safe_load(path.read_text())
    data.setdefault("name", name)
    return StylePreset.model_validate(data)


def render_system_prompt(preset: StylePreset, source_svg: str, user_instructions: str) -> str:
    """Fill a preset's system prompt with the source icon and instructions."""
    instructions = user_instructions.strip() or DEFAULT_PRESET_INSTRUCTIONS
    values = {"source_svg": source_svg, "user_instructions": instructions}
    # Single pass, so placeholder text inside the source itself is left alone.
    return _PLACEHOLDER_PATTERN.sub(lambda m: values[m.group(1)], preset.system_prompt)
