from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from prompt2svg.api.handler import handle_generate_request
from prompt2svg.core.types import GenerationFailure
from prompt2svg.core.validation import validate_generation_request
from prompt2svg.generation.extractor import extract
from prompt2svg.generation.presets import list_presets, load_preset, render_system_prompt
from prompt2svg.generation.prompts import build_prompts
from prompt2svg.generation.renderer import ResvgRenderer
from prompt2svg.logging.run_tracker import RunTracker

console = Console()

DEFAULT_MODEL = "anthropic/claude-sonnet-4"


@click.group()
def cli() -> None:
    """prompt2svg: restyle SVG icons with a language model."""
    load_dotenv()


def _build_request_body(
    source: Path,
    name: str | None,
    model: str,
    instructions: str,
    preset: str | None,
    system_prompt_file: Path | None,
    color: str,
    outline_width: float,
) -> dict:
    if preset and system_prompt_file:
        raise click.UsageError("--preset and --system-prompt-file are mutually exclusive")

    source_svg = source.read_text()
    system_prompt = None
    if preset:
        try:
            system_prompt = render_system_prompt(load_preset(preset), source_svg, instructions)
        except FileNotFoundError as e:
            raise click.BadParameter(str(e), param_hint="--preset") from e
    elif system_prompt_file:
        system_prompt = system_prompt_file.read_text()

    return {
        "iconSVGCode": source_svg,
        "sourceIconName": name or source.stem,
        "stylePreset": preset,
        "userPrompt": instructions,
        "systemPrompt": system_prompt,
        "selectedModel": model,
        "parameters": {"primaryColor": color, "outlineWidth": outline_width},
    }


def _request_options(func):
    options = [
        click.option("--source", required=True,
                     type=click.Path(exists=True, dir_okay=False, path_type=Path),
                     help="Source SVG file"),
        click.option("--name", default=None, help="Source icon name (defaults to file name)"),
        click.option("--model", default=DEFAULT_MODEL, help="OpenRouter model id"),
        click.option("--instructions", "-i", default="", help="Free-text styling instructions"),
        click.option("--preset", default=None, help="Style preset name (see list-presets)"),
        click.option("--system-prompt-file", default=None,
                     type=click.Path(exists=True, dir_okay=False, path_type=Path),
                     help="Use this file as the system prompt"),
        click.option("--color", default="#374d68", help="Primary color (#RRGGBB)"),
        click.option("--outline-width", default=2.0, type=float, help="Outline width (0-10)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@cli.command("generate")
@_request_options
@click.option("--output-dir", default="./runs", help="Output directory for runs")
@click.option("--render/--no-render", default=False, help="Also save a PNG preview of the result")
@click.option("--verbose", "-v", is_flag=True, help="Log full prompts and responses to debug.log in run dir")
def generate_cmd(
    source: Path,
    name: str | None,
    model: str,
    instructions: str,
    preset: str | None,
    system_prompt_file: Path | None,
    color: str,
    outline_width: float,
    output_dir: str,
    render: bool,
    verbose: bool,
) -> None:
    """Generate a restyled SVG from a source icon."""
    body = _build_request_body(
        source, name, model, instructions, preset, system_prompt_file, color, outline_width
    )

    renderer = ResvgRenderer(color=color) if render else None
    tracker = RunTracker(Path(output_dir), renderer)

    if verbose:
        log_path = tracker.run_dir / "debug.log"
        p2s_logger = logging.getLogger("prompt2svg")
        p2s_logger.setLevel(logging.DEBUG)
        fh = logging.FileHandler(log_path)
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter("%(asctime)s [%(name)s]\n%(message)s\n"))
        p2s_logger.addHandler(fh)

    console.print(f"[bold]Source:[/bold] {body['sourceIconName']}")
    console.print(f"[bold]Model:[/bold] {model}")
    console.print(f"[bold]Preset:[/bold] {preset or 'none'}")
    console.print(f"[dim]Run directory: {tracker.run_dir}[/dim]\n")

    status, payload = asyncio.run(handle_generate_request(body, tracker=tracker))

    console.print_json(data=payload)
    if status != 200:
        console.print(f"[red]Generation failed ({status}).[/red]")
        sys.exit(1)
    console.print(f"\n[bold green]SVG saved:[/bold green] {tracker.run_dir / 'result.svg'}")


@cli.command("extract")
@click.argument("completion", type=click.File("r"), default="-")
def extract_cmd(completion) -> None:
    """Extract {svg, explanation} from a saved model completion (file or stdin)."""
    try:
        result = extract(completion.read())
    except GenerationFailure as e:
        console.print_json(data=e.to_payload())
        sys.exit(1)
    console.print_json(data=result.to_dict())


@cli.command("prompts")
@_request_options
def prompts_cmd(
    source: Path,
    name: str | None,
    model: str,
    instructions: str,
    preset: str | None,
    system_prompt_file: Path | None,
    color: str,
    outline_width: float,
) -> None:
    """Print the prompts a generation would send, without calling the model."""
    body = _build_request_body(
        source, name, model, instructions, preset, system_prompt_file, color, outline_width
    )
    try:
        prompts = build_prompts(validate_generation_request(body))
    except GenerationFailure as e:
        console.print(f"[red]{e.message}[/red]\n{escape(e.details or '')}")
        sys.exit(1)

    console.rule("System prompt")
    console.print(prompts.system_prompt, markup=False)
    console.rule("User prompt")
    console.print(prompts.user_prompt, markup=False)


@cli.command("list-presets")
def list_presets_cmd() -> None:
    """List available style presets."""
    table = Table(title="Available Presets")
    table.add_column("Name", style="cyan")
    table.add_column("Display Name")
    table.add_column("Tags")
    table.add_column("Description")

    for name in list_presets():
        preset = load_preset(name)
        table.add_row(
            name,
            preset.display_name or name,
            ", ".join(preset.tags),
            preset.description.strip()[:80],
        )

    console.print(table)


if __name__ == "__main__":
    cli()
