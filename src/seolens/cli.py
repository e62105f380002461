"""Command-line interface for SeoLens."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
import structlog
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from seolens import __version__
from seolens.config.config import Config, find_config_file
from seolens.exceptions import SeoLensError
from seolens.extraction.aggregator import SeoExtractor
from seolens.extraction.document import PageDocument
from seolens.extraction.highlighting import inject_highlight_styles, toggle_link_highlight
from seolens.extraction.models import SeoSnapshot
from seolens.observability.logging import configure_logging
from seolens.protocols import LinkType

console = Console(stderr=True)
logger = structlog.get_logger(__name__)


def _load_config(config_path: Optional[Path]) -> Config:
    path = config_path or find_config_file()
    try:
        if path is None:
            return Config()
        return Config.from_yaml(path)
    except (yaml.YAMLError, ValidationError) as e:
        raise click.ClickException(f"Invalid configuration in {path or 'environment'}: {e}") from e


def _read_html(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8", errors="replace")


def _summary_table(snapshot: SeoSnapshot) -> Table:
    table = Table(title=snapshot.title or snapshot.url, show_header=True, header_style="bold cyan")
    table.add_column("Field")
    table.add_column("Value", overflow="fold")
    table.add_row("URL", snapshot.url)
    table.add_row("Description", snapshot.description or "-")
    table.add_row("Canonical", snapshot.canonical or "-")
    table.add_row("Robots", snapshot.robots or "-")
    table.add_row("Headings", str(len(snapshot.headings)))
    table.add_row("Images", str(len(snapshot.images)))
    table.add_row("Internal links", str(len(snapshot.links.internal)))
    table.add_row("External links", str(len(snapshot.links.external)))
    table.add_row("Emails", ", ".join(snapshot.emails) or "-")
    table.add_row("Phones", ", ".join(phone.display_text for phone in snapshot.phones) or "-")
    valid = sum(1 for record in snapshot.schema if record.is_valid)
    table.add_row("Structured data", f"{len(snapshot.schema)} items ({valid} valid)")
    table.add_row("SEO plugins", ", ".join(snapshot.plugins) or "-")
    return table


@click.group()
@click.version_option(__version__, prog_name="seolens")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a YAML configuration file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path]) -> None:
    """Extract SEO page data from HTML documents."""
    config = _load_config(config_path)
    configure_logging(config.monitoring)
    ctx.obj = config


@cli.command()
@click.argument("source", default="-")
@click.option("--url", required=True, help="URL the document was loaded from.")
@click.option("--pretty", is_flag=True, help="Indent the JSON output.")
@click.option("--summary", is_flag=True, help="Print a summary table instead of JSON.")
@click.pass_obj
def extract(config: Config, source: str, url: str, pretty: bool, summary: bool) -> None:
    """Extract a snapshot from SOURCE (a file path, or - for stdin)."""
    try:
        extractor = SeoExtractor.from_html(_read_html(source), url, config.extraction)
        snapshot = extractor.extract()
    except (OSError, SeoLensError) as e:
        logger.error("Extraction failed", source=source, error=str(e))
        raise click.ClickException(str(e)) from e

    if summary:
        Console().print(_summary_table(snapshot))
    else:
        click.echo(snapshot.to_json(indent=2 if pretty else None))


@cli.command()
@click.argument("source", default="-")
@click.option("--url", required=True, help="URL the document was loaded from.")
@click.option(
    "--type",
    "link_type",
    type=click.Choice([link_type.value for link_type in LinkType]),
    required=True,
    help="Link category to highlight.",
)
@click.option("--disable", is_flag=True, help="Remove the highlight instead of adding it.")
@click.pass_obj
def highlight(config: Config, source: str, url: str, link_type: str, disable: bool) -> None:
    """Print SOURCE with links of the given type highlighted."""
    try:
        document = PageDocument.from_html(_read_html(source), url, parser=config.extraction.parser)
    except (OSError, SeoLensError) as e:
        raise click.ClickException(str(e)) from e

    inject_highlight_styles(document)
    count = toggle_link_highlight(document, link_type, not disable)
    console.print(f"[green]{'Cleared' if disable else 'Highlighted'} {count} {link_type} link(s)[/green]")
    click.echo(str(document.soup))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
