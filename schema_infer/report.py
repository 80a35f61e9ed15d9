"""
Markdown reports of merge and occurrence analysis results.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jinja2

from .schema_ast.nodes import DEFAULT_REF_PREFIX, SchemaNode
from .unification.occurrence import OccurrenceReport


class ReportRenderer:
    """Renders inference results with the bundled Jinja2 templates."""

    TEMPLATE_NAME = "report.md.jinja2"

    def __init__(self, ref_prefix: str = DEFAULT_REF_PREFIX):
        self.ref_prefix = ref_prefix
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent / "templates"
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        self.jinja_env.filters["pretty_json"] = _pretty_json
        self.report_template = self.jinja_env.get_template(self.TEMPLATE_NAME)

    def render(
        self,
        merged: dict[str, SchemaNode | None] | None = None,
        report: OccurrenceReport | None = None,
        command_line: str = "schema_infer",
    ) -> str:
        """
        Render a report.

        Args:
            merged: Merged schemas by section title (e.g. "request", "response")
            report: Field occurrence analysis
            command_line: Command shown in the report header

        Returns:
            The markdown report
        """
        sections = {
            title: schema.to_dict(self.ref_prefix) for title, schema in (merged or {}).items() if schema is not None
        }
        return self.report_template.render(
            command_line=command_line,
            merged=sections,
            report=report,
        )


def render_report(
    merged: dict[str, SchemaNode | None] | None = None,
    report: OccurrenceReport | None = None,
    command_line: str = "schema_infer",
    ref_prefix: str = DEFAULT_REF_PREFIX,
) -> str:
    """Render a report with a fresh ReportRenderer."""
    return ReportRenderer(ref_prefix).render(merged, report, command_line)


def _pretty_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)
