import json

import pytest

from prompt2svg.core.types import ErrorKind, GenerationFailure
from prompt2svg.generation.extractor import ensure_svg_namespace, extract, extract_payload

NS = 'xmlns="http://www.w3.org/2000/svg"'
ICON = f'<svg {NS} viewBox="0 0 24 24"><path d="M12 2v20"/></svg>'


class TestExtractDirectJson:
    def test_round_trip(self):
        raw = json.dumps({"svg": f"  {ICON}\n", "explanation": "  Added a stem.  "})
        result = extract(raw)
        assert result.svg == ICON
        assert result.explanation == "Added a stem."

    def test_leading_whitespace_still_direct(self):
        raw = "\n\n  " + json.dumps({"svg": ICON, "explanation": "ok"})
        assert extract(raw).svg == ICON

    def test_missing_explanation_is_empty(self):
        result = extract(json.dumps({"svg": ICON}))
        assert result.explanation == ""

    def test_non_string_fields_are_ignored(self):
        raw = json.dumps({"svg": ICON, "explanation": 42})
        assert extract(raw).explanation == ""


class TestExtractFenced:
    def test_json_fence_with_prose(self):
        body = json.dumps({"svg": ICON, "explanation": "ok"})
        raw = f"Sure! Here it is:\n```json\n{body}\n```\nLet me know if you need changes."
        result = extract(raw)
        assert result.svg == ICON
        assert result.explanation == "ok"

    def test_uppercase_tag(self):
        body = json.dumps({"svg": ICON, "explanation": "ok"})
        assert extract(f"```JSON\n{body}\n```").svg == ICON

    def test_untagged_fence(self):
        body = json.dumps({"svg": ICON, "explanation": "ok"})
        assert extract(f"```\n{body}\n```").svg == ICON

    def test_example_scenario(self):
        raw = 'Sure! ```json\n{"svg":"<svg><circle r=\\"1\\"/></svg>","explanation":"ok"}\n```'
        result = extract(raw)
        assert result.svg == '<svg xmlns="http://www.w3.org/2000/svg"><circle r="1"/></svg>'
        assert result.explanation == "ok"


class TestExtractBraceSpan:
    def test_preamble_and_postamble(self):
        body = json.dumps({"svg": ICON, "explanation": "ok"})
        raw = f"Of course. {body} Enjoy!"
        result = extract(raw)
        assert result.svg == ICON
        assert result.explanation == "ok"

    def test_outermost_span_misfires_on_trailing_brace(self):
        # A stray brace after the object widens the span; the cascade then
        # falls back to the bare markup inside the JSON string.
        body = json.dumps({"svg": "<svg><rect/></svg>", "explanation": "ok"})
        payload = extract_payload(f"Result: {body} (see {{notes}})")
        assert payload.svg == "<svg><rect/></svg>"
        assert payload.explanation != "ok"


class TestExtractBareMarkup:
    def test_example_scenario(self):
        result = extract("Here you go: <svg><rect/></svg> Hope that helps!")
        assert result.svg == f"<svg {NS}><rect/></svg>"
        assert result.explanation == "Here you go:  Hope that helps!"

    def test_case_insensitive(self):
        result = extract("<SVG viewBox='0 0 24 24'><rect/></SVG>")
        assert result.svg.startswith(f"<SVG {NS}")
        assert result.explanation == ""

    def test_json_explanation_kept_when_svg_field_empty(self):
        raw = 'Note {"svg": "", "explanation": "drew a box"} <svg><rect/></svg>'
        result = extract(raw)
        assert result.svg == f"<svg {NS}><rect/></svg>"
        assert result.explanation == "drew a box"

    def test_svg_field_without_markup_falls_through(self):
        raw = '{"svg": "I could not draw that", "explanation": "sorry"}'
        with pytest.raises(GenerationFailure) as exc_info:
            extract(raw)
        assert exc_info.value.kind == ErrorKind.NO_EXTRACTABLE_SVG

    def test_truncated_json_recovers_markup(self):
        raw = '{"svg": "<svg viewBox=\'0 0 24 24\'><circle r=\'4\'/></svg>", "explanation": "cut o'
        result = extract(raw)
        assert result.svg == f"<svg {NS} viewBox='0 0 24 24'><circle r='4'/></svg>"


class TestExtractExhaustion:
    def test_plain_refusal(self):
        raw = "I cannot comply with this request."
        with pytest.raises(GenerationFailure) as exc_info:
            extract(raw)
        failure = exc_info.value
        assert failure.kind == ErrorKind.NO_EXTRACTABLE_SVG
        assert failure.details == raw
        assert failure.http_status == 422

    def test_details_bounded(self):
        raw = "no markup here " * 100
        with pytest.raises(GenerationFailure) as exc_info:
            extract(raw)
        assert exc_info.value.details == raw[:500]

    def test_invalid_json_everywhere(self):
        with pytest.raises(GenerationFailure):
            extract("{not json} ```json\n{also: not json}\n```")

    def test_empty_string(self):
        with pytest.raises(GenerationFailure):
            extract("")

    def test_json_array(self):
        with pytest.raises(GenerationFailure):
            extract('["<svg>", "</svg"]')

    def test_hyphenated_tag_is_not_svg(self):
        with pytest.raises(GenerationFailure) as exc_info:
            extract("<svg-icon>x</svg>")
        assert exc_info.value.kind == ErrorKind.NO_EXTRACTABLE_SVG


class TestEnsureSvgNamespace:
    def test_injects_after_svg(self):
        assert ensure_svg_namespace('<svg viewBox="0 0 24 24"/>') == f'<svg {NS} viewBox="0 0 24 24"/>'

    def test_idempotent(self):
        once = ensure_svg_namespace("<svg><g/></svg>")
        twice = ensure_svg_namespace(once)
        assert once == twice
        assert twice.count("xmlns=") == 1

    def test_single_quoted_namespace_left_alone(self):
        svg = "<svg xmlns='http://www.w3.org/2000/svg'><g/></svg>"
        assert ensure_svg_namespace(svg) == svg

    def test_xlink_namespace_is_not_default(self):
        svg = '<svg xmlns:xlink="http://www.w3.org/1999/xlink"><g/></svg>'
        assert ensure_svg_namespace(svg) == f'<svg {NS} xmlns:xlink="http://www.w3.org/1999/xlink"><g/></svg>'

    def test_wrong_namespace_replaced(self):
        svg = '<svg xmlns="http://example.com/ns"><g/></svg>'
        assert ensure_svg_namespace(svg) == f"<svg {NS}><g/></svg>"

    def test_only_root_tag_checked(self):
        svg = '<svg><svg xmlns="http://www.w3.org/2000/svg"/></svg>'
        result = ensure_svg_namespace(svg)
        assert result.startswith(f"<svg {NS}>")
        assert result.count("xmlns=") == 2

    def test_hyphenated_tag_left_alone(self):
        assert ensure_svg_namespace("<svg-icon/>") == "<svg-icon/>"

    def test_self_closing_root(self):
        assert ensure_svg_namespace("<svg/>") == f"<svg {NS}/>"
