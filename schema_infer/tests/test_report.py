"""
Tests for markdown report rendering.
"""

from __future__ import annotations

from schema_infer.report import ReportRenderer, render_report
from schema_infer.schema_ast.nodes import NumberNode, ObjectNode, RefNode, StringNode
from schema_infer.unification.occurrence import FieldOccurrenceAnalyzer


def test_header_only():
    text = render_report(command_line="schema_infer merge a.json")
    assert text.startswith("# Schema inference report\n")
    assert "Generated by: `schema_infer merge a.json`" in text
    assert "## Merged" not in text
    assert "## Field occurrence" not in text


def test_merged_sections():
    merged = {
        "request": ObjectNode(properties={"name": StringNode()}, required=["name"]),
        "response": None,
    }
    text = render_report(merged=merged)
    assert "## Merged request schema" in text
    assert "## Merged response schema" not in text
    assert '"required": [\n    "name"\n  ]' in text
    assert "```json" in text


def test_ref_prefix():
    text = ReportRenderer("#/definitions/").render(merged={"sample": RefNode(name="User")})
    assert '"$ref": "#/definitions/User"' in text


def test_occurrence_table_and_enum_candidates():
    samples = [
        ObjectNode(properties={"id": NumberNode(), "status": StringNode(example="open")}),
        ObjectNode(properties={"id": NumberNode(), "status": StringNode(example="closed")}),
        ObjectNode(properties={"id": NumberNode()}),
    ]
    report = FieldOccurrenceAnalyzer().analyze(samples)
    text = render_report(report=report)

    assert "## Field occurrence (3 samples)" in text
    assert "| `id` | 3/3 | 100% | required |" in text
    assert "| `status` | 2/3 | 67% | optional |" in text
    assert "### Enum candidates" in text
    assert '- `status`: "open", "closed"' in text


def test_no_fields():
    report = FieldOccurrenceAnalyzer().analyze([StringNode()])
    text = render_report(report=report)
    assert "No fields found." in text
    assert "### Enum candidates" not in text
