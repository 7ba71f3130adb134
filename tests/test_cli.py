import json
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from prompt2svg.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "heart.svg"
    path.write_text('<svg viewBox="0 0 24 24"><path d="M12 21l-8-8"/></svg>')
    return path


def test_extract_from_stdin(runner):
    result = runner.invoke(cli, ["extract"], input="Here: <svg><rect/></svg>")
    assert result.exit_code == 0
    assert json.loads(result.output) == {
        "svg": '<svg xmlns="http://www.w3.org/2000/svg"><rect/></svg>',
        "explanation": "Here:",
    }


def test_extract_failure_exits_nonzero(runner, tmp_path):
    completion = tmp_path / "completion.txt"
    completion.write_text("nothing to see")
    result = runner.invoke(cli, ["extract", str(completion)])
    assert result.exit_code == 1
    assert json.loads(result.output)["error"] == "Failed to generate valid SVG"


def test_list_presets(runner):
    result = runner.invoke(cli, ["list-presets"])
    assert result.exit_code == 0
    assert "icon_designer" in result.output


def test_prompts_default(runner, source_file):
    result = runner.invoke(cli, ["prompts", "--source", str(source_file), "-i", "fill it"])
    assert result.exit_code == 0
    assert "1. Source Icon Name: heart" in result.output
    assert "2. Source SVG Code:" in result.output
    assert "USER INSTRUCTIONS: fill it" in result.output


def test_prompts_with_preset_omits_source_from_user_prompt(runner, source_file):
    result = runner.invoke(cli, ["prompts", "--source", str(source_file), "--preset", "solid"])
    assert result.exit_code == 0
    assert "2. Source SVG Code:" not in result.output
    assert "solid glyph" in result.output


def test_prompts_invalid_color(runner, source_file):
    result = runner.invoke(cli, ["prompts", "--source", str(source_file), "--color", "blue"])
    assert result.exit_code == 1
    assert "Invalid request body" in result.output


def test_preset_and_system_prompt_file_conflict(runner, source_file):
    result = runner.invoke(cli, [
        "prompts", "--source", str(source_file),
        "--preset", "solid", "--system-prompt-file", str(source_file),
    ])
    assert result.exit_code == 2


def test_generate_success(runner, source_file, tmp_path):
    handler = AsyncMock(return_value=(200, {"svg": "<svg/>", "explanation": "ok"}))
    with patch("prompt2svg.cli.main.handle_generate_request", new=handler):
        result = runner.invoke(cli, [
            "generate", "--source", str(source_file), "--output-dir", str(tmp_path / "runs"),
        ])

    assert result.exit_code == 0
    body = handler.call_args.args[0]
    assert body["sourceIconName"] == "heart"
    assert body["systemPrompt"] is None
    assert body["parameters"] == {"primaryColor": "#374d68", "outlineWidth": 2.0}
    assert "SVG saved" in result.output


def test_generate_failure_exits_nonzero(runner, source_file, tmp_path):
    handler = AsyncMock(return_value=(502, {"error": "OpenRouter error (500)", "details": "boom"}))
    with patch("prompt2svg.cli.main.handle_generate_request", new=handler):
        result = runner.invoke(cli, [
            "generate", "--source", str(source_file), "--output-dir", str(tmp_path / "runs"),
        ])

    assert result.exit_code == 1
    assert "Generation failed (502)" in result.output
