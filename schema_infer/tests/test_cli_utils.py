#!/usr/bin/env python3

import click
import pytest

from schema_infer.cli_utils import reconstruct_command_line
from schema_infer.schema_infer import analyze, merge, schema_infer


class TestCliUtils:
    """Test cases for CLI utilities"""

    def test_reconstruct_command_line_without_context(self):
        """Test command reconstruction without active Click context (fallback)"""
        result = reconstruct_command_line(merge)
        assert result == "schema_infer"

    def test_reconstruct_subcommand_with_arguments_and_flags(self):
        """Subcommand name, positional arguments and non-default flags are shown"""
        parent = click.Context(schema_infer, info_name="schema_infer")
        ctx = click.Context(merge, info_name="merge", parent=parent)
        ctx.params = {
            "config": None,
            "output": None,
            "report": True,
            "snapshots": False,
            "samples": ("missing_a.json", "missing_b.json"),
        }
        with ctx:
            result = reconstruct_command_line(merge)
        assert result == "schema_infer merge missing_a.json missing_b.json --report"

    def test_existing_paths_are_shortened(self, tmp_path):
        """Existing file paths are reduced to their file name"""
        sample = tmp_path / "sample.json"
        sample.write_text("{}")
        output = tmp_path / "out.json"

        parent = click.Context(schema_infer, info_name="schema_infer")
        ctx = click.Context(analyze, info_name="analyze", parent=parent)
        ctx.params = {"samples": (str(sample),), "output": str(output), "report": False}
        with ctx:
            result = reconstruct_command_line(analyze)
        assert result == f"schema_infer analyze sample.json --output {output}"


if __name__ == "__main__":
    pytest.main([__file__])
