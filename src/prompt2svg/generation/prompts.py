from __future__ import annotations

from prompt2svg.core.types import GenerationInput, PromptPair

DEFAULT_SYSTEM_PROMPT = (
    "You are an expert SVG designer. Produce clean, valid SVG markup based on a "
    "source icon and style constraints.\n\n"
    "Core Principles:\n"
    "- Declarative Graphics: Describe shapes using XML tags.\n"
    "- Infinite Canvas: Use viewBox to define the visible window.\n"
    '- Portability: Use SVG attributes (fill="...", stroke="...") instead of CSS.\n\n'
    "Technical Standards:\n"
    '- ALWAYS include a viewBox (e.g., "0 0 24 24").\n'
    "- Use <path> for complex shapes, but <rect>/<circle> for primitives.\n"
    '- Use stroke-linecap="round" and stroke-linejoin="round" for smoother lines.\n'
    "- Include a <title> tag for accessibility.\n"
    "- Use 'currentColor' for strokes/fills to allow client-side styling."
)

DEFAULT_USER_INSTRUCTIONS = "Enhance the icon based on parameters."


def build_prompts(generation_input: GenerationInput) -> PromptPair:
    """Build system and user prompts for one generation attempt.

    When the caller supplies its own system prompt the source markup is left
    out of the user prompt, since the caller's prompt already embeds it.
    """
    explicit = generation_input.explicit_system_prompt
    system = explicit if explicit else DEFAULT_SYSTEM_PROMPT

    lines = [
        "TASK: Generate a valid SVG icon based on the source and parameters below.",
        "OUTPUT FORMAT: JSON object with keys 'svg' (string) and 'explanation' (string).",
        "",
        "INPUTS:",
        f"1. Source Icon Name: {generation_input.source_icon_name}",
    ]

    if not explicit:
        lines.append(f"2. Source SVG Code: {generation_input.source_svg_code}")

    instructions = generation_input.user_instructions
    if not instructions or not instructions.strip():
        instructions = DEFAULT_USER_INSTRUCTIONS

    lines += [
        "",
        "PARAMETERS:",
        "- Use 'currentColor' for all stroke/fill colors.",
        '- Use standard stroke-width="2" (will be adjusted by client).',
        "",
        f"USER INSTRUCTIONS: {instructions}",
        "",
        "CONSTRAINTS:",
        "- Return ONLY valid SVG code in the 'svg' field.",
        "- Do not use <style> tags or external CSS.",
        "- Ensure the SVG scales correctly (viewBox='0 0 24 24').",
        "- NO markdown formatting in the JSON response.",
        "- JSON ONLY. Do not include any conversational text before or after the JSON object.",
    ]

    return PromptPair(system_prompt=system, user_prompt="\n".join(lines))
