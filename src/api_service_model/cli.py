"""CLI entry point for api-service-model."""

import json
import logging
from pathlib import Path

import click
import yaml

from api_service_model.entities.errors import ServiceModelError
from api_service_model.entities.model import ServiceModel
from api_service_model.entities.override import ModelOverride, load_override
from api_service_model.model.create import create_service_model
from api_service_model.parser.swagger import parse_document


def _build_model(doc_path: Path, override_path: Path | None) -> ServiceModel:
    """Parse the document and build its normalized model."""
    override = load_override(override_path) if override_path else ModelOverride()
    document = parse_document(doc_path)
    return create_service_model(document, override)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log each registered type and skipped operation.")
def main(verbose: bool):
    """API Service Model: normalize Swagger/OpenAPI documents for code generators."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.option("--override", "override_path", default=None, type=click.Path(exists=True, path_type=Path), help="Model override file (YAML or JSON).")
@click.option("--output-format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="Output format.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write the model to this file instead of stdout.")
def inspect(doc_path: Path, override_path: Path | None, fmt: str, output: Path | None):
    """Print the normalized service model of an API document."""
    try:
        model = _build_model(doc_path, override_path)
    except ServiceModelError as e:
        raise click.ClickException(str(e)) from e

    data = model.model_dump(mode="json")
    if fmt == "yaml":
        text = yaml.safe_dump(data, sort_keys=False)
    else:
        text = json.dumps(data, indent=2)

    if output is None:
        click.echo(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(
        f"Wrote {len(model.structure_descriptions)} structures, {len(model.field_descriptions)} fields "
        f"and {len(model.operation_descriptions)} operations to {output}",
        err=True,
    )
