import json

import click
from loguru import logger

from .cli_utils import reconstruct_command_line
from .config import InferenceConfig
from .errors import SchemaInferError
from .report import render_report
from .schema_ast.loader import SchemaLoader
from .type_expr.parser import TypeExpressionParser
from .unification.merger import SchemaMerger
from .unification.occurrence import FieldOccurrenceAnalyzer
from .unification.snapshot import Snapshot


def _load_config(path):
    if path is None:
        return InferenceConfig()
    with open(path) as f:
        return InferenceConfig.from_dict(json.load(f))


def _read_json(path):
    try:
        with open(path) as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        logger.warning(f"Cannot decode {path}: {e}")
        raise click.ClickException(f"{path}: invalid JSON ({e})")


def _load_samples(paths, config):
    """Each file holds one schema or a list of schemas."""
    loader = SchemaLoader(config.ref_prefix)
    samples = []
    for path in paths:
        data = _read_json(path)
        try:
            if isinstance(data, list):
                samples.extend(loader.load_many(data))
            else:
                samples.append(loader.load(data))
        except SchemaInferError as e:
            logger.warning(f"Cannot load samples from {path}: {e}")
            raise click.ClickException(f"{path}: {e}")
    return samples


def _load_snapshots(paths, config):
    """Each file holds one snapshot or a list of snapshots."""
    loader = SchemaLoader(config.ref_prefix)
    snapshots = []
    for path in paths:
        data = _read_json(path)
        items = data if isinstance(data, list) else [data]
        try:
            snapshots.extend(Snapshot.from_dict(item, loader, f"#/{i}") for i, item in enumerate(items))
        except SchemaInferError as e:
            logger.warning(f"Cannot load snapshots from {path}: {e}")
            raise click.ClickException(f"{path}: {e}")
    return snapshots


def _write(text, output):
    if output is None:
        click.echo(text, nl=not text.endswith("\n"))
    else:
        with open(output, "w") as f:
            f.write(text)


@click.group()
def schema_infer():
    """Infer OpenAPI schemas from type expressions and runtime samples."""


@schema_infer.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("expression", type=str)
def parse(config, expression):
    """Parse a type expression into a schema."""
    config = _load_config(config)
    try:
        parser = TypeExpressionParser(config)
    except SchemaInferError as e:
        raise click.ClickException(f"Invalid type override: {e}")
    result = parser.parse(expression)
    out = {
        "schema": result.schema.to_dict(config.ref_prefix),
        "confidence": result.confidence,
        "warnings": result.warnings,
    }
    click.echo(json.dumps(out, indent=2))


@schema_infer.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--output", "-o", default=None, type=click.Path(resolve_path=True))
@click.option("--report", is_flag=True, default=False, help="Write a markdown report instead of JSON")
@click.option(
    "--snapshots",
    is_flag=True,
    default=False,
    help="Inputs hold request/response snapshots instead of plain schemas",
)
@click.argument("samples", nargs=-1, required=True, type=click.Path(exists=True, resolve_path=True))
def merge(config, output, report, snapshots, samples):
    """Merge schema samples into one schema."""
    config = _load_config(config)
    merger = SchemaMerger(config)

    if snapshots:
        merged_snapshot = merger.merge_snapshots(_load_snapshots(samples, config))
        merged = {"request": merged_snapshot.request_schema, "response": merged_snapshot.response_schema}
    else:
        merged = {"sample": merger.merge(_load_samples(samples, config))}

    if report:
        text = render_report(merged=merged, command_line=reconstruct_command_line(merge), ref_prefix=config.ref_prefix)
    elif snapshots:
        text = json.dumps(
            {
                f"{title}Schema": schema.to_dict(config.ref_prefix) if schema is not None else None
                for title, schema in merged.items()
            },
            indent=2,
        )
    else:
        text = json.dumps(merged["sample"].to_dict(config.ref_prefix), indent=2)

    _write(text, output)


@schema_infer.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--output", "-o", default=None, type=click.Path(resolve_path=True))
@click.option("--report", is_flag=True, default=False, help="Write a markdown report instead of JSON")
@click.option(
    "--snapshots",
    is_flag=True,
    default=False,
    help="Inputs hold request/response snapshots instead of plain schemas",
)
@click.argument("samples", nargs=-1, required=True, type=click.Path(exists=True, resolve_path=True))
def analyze(config, output, report, snapshots, samples):
    """Report required/optional fields and enum candidates across samples."""
    config = _load_config(config)
    analyzer = FieldOccurrenceAnalyzer(config)

    if snapshots:
        result = analyzer.analyze_snapshots(_load_snapshots(samples, config))
    else:
        result = analyzer.analyze(_load_samples(samples, config))

    if report:
        text = render_report(report=result, command_line=reconstruct_command_line(analyze), ref_prefix=config.ref_prefix)
    else:
        text = json.dumps(
            {
                "totalSamples": result.total_samples,
                "requiredFields": result.required_fields,
                "optionalFields": result.optional_fields,
                "enumCandidates": result.enum_candidates,
            },
            indent=2,
        )

    _write(text, output)
