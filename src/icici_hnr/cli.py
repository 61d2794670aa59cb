"""Command-line interface for ICICI to HNR converter.

Copyright (C) 2025 Tim Waugh

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program. If not, see <https://www.gnu.org/licenses/>.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import DEFAULT_CONFIG_PATH, Config, create_sample_config
from .converter import SKIPPED_ROWS_LOGGER, IciciConverter

console = Console()
error_console = Console(stderr=True)


class RowLineHandler(logging.Handler):
    """Print each log record as a single unwrapped console line."""

    def __init__(self, console: Console):
        super().__init__()
        self.console = console

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.console.print(
                self.format(record), soft_wrap=True, markup=False, highlight=False
            )
        except Exception:
            self.handleError(record)


def setup_logging(verbose: bool = False) -> None:
    """Set up rich logging.

    Skipped rows bypass the RichHandler, which would wrap the raw row text
    across several lines.
    """
    level = logging.DEBUG if verbose else logging.INFO

    rich_handler = RichHandler(console=console, rich_tracebacks=True)
    rich_handler.addFilter(lambda record: record.name != SKIPPED_ROWS_LOGGER)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[rich_handler],
        force=True,
    )

    skipped_logger = logging.getLogger(SKIPPED_ROWS_LOGGER)
    for handler in list(skipped_logger.handlers):
        if isinstance(handler, RowLineHandler):
            skipped_logger.removeHandler(handler)

    row_handler = RowLineHandler(console)
    row_handler.setFormatter(logging.Formatter("%(levelname)-8s %(message)s"))
    skipped_logger.addHandler(row_handler)


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version and exit")
@click.pass_context
def cli(ctx: click.Context, version: bool) -> None:
    """ICICI to HNR capital gains converter.

    Convert an ICICI Direct capital gains CSV export into the XML file
    accepted by H&R Block for capital gains upload.
    """
    if version:
        click.echo(f"icici-hnr {__version__}")
        ctx.exit()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument(
    "input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.argument("pan")
@click.argument("assessment_year")
@click.argument("output_file", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Configuration file path",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.option(
    "--validate-only", is_flag=True, help="Only validate the input file, don't convert"
)
def convert(
    input_file: Path,
    pan: str,
    assessment_year: str,
    output_file: Path,
    config: Optional[Path],
    verbose: bool,
    validate_only: bool,
) -> None:
    """Convert ICICI capital gains CSV file to HNR XML.

    INPUT_FILE: Path to the ICICI capital gains CSV export
    PAN: Permanent account number written to the PAN element
    ASSESSMENT_YEAR: Assessment year written to the AY element (e.g. 2017-18)
    OUTPUT_FILE: Path for the HNR XML output
    """
    setup_logging(verbose)
    logger = logging.getLogger(__name__)

    try:
        if config:
            app_config = Config.load_from_file(config)
            logger.info(f"Loaded configuration from {config}")
        else:
            app_config = Config.load_from_file()
            logger.info("Using default configuration")

        converter = IciciConverter(app_config)

        console.print(f"[blue]Validating input file:[/blue] {input_file}")

        if not converter.validate_csv_file(input_file):
            console.print("[red]❌ Input file validation failed[/red]")
            sys.exit(1)

        if validate_only:
            console.print("[green]✅ Input file is valid[/green]")
            return

        console.print(f"[blue]Converting to:[/blue] {output_file}")

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Converting capital gains...", total=None)

            result = converter.convert_file(
                input_file, pan, assessment_year, output_file
            )

            progress.update(task, description="✅ Conversion completed")

        if result.skipped:
            console.print(
                f"[yellow]Skipped {len(result.skipped)} malformed rows[/yellow]"
            )
        console.print(
            f"[green]✅ Wrote {result.record_count} CG entries[/green]"
        )
        console.print(
            f"File saved: {result.output_path}",
            soft_wrap=True,
            markup=False,
            highlight=False,
        )

    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        error_console.print_exception()
        sys.exit(1)


@cli.command()
@click.option(
    "-c",
    "--config",
    type=click.Path(path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    help="Configuration file path to create",
)
@click.option("--force", is_flag=True, help="Overwrite existing configuration file")
def init_config(config: Path, force: bool) -> None:
    """Create a sample configuration file.

    This creates a YAML configuration file with default settings that you can
    customize for your needs.
    """
    setup_logging()

    if config.exists() and not force:
        console.print(f"[yellow]Configuration file already exists: {config}[/yellow]")
        console.print("Use --force to overwrite")
        return

    try:
        create_sample_config(config)
        console.print(f"[green]✅ Sample configuration created: {config}[/green]")
        console.print("\n[blue]Next steps:[/blue]")
        console.print("1. Edit the configuration file if HNR expects other values")
        if config == DEFAULT_CONFIG_PATH:
            console.print(
                "2. Run: [bold]icici-hnr convert input.csv PAN 2017-18 output.xml[/bold]"
            )
            console.print("   (Configuration will be loaded automatically)")
        else:
            console.print(
                f"2. Run: [bold]icici-hnr convert input.csv PAN 2017-18 output.xml -c {config}[/bold]"
            )

    except Exception as e:
        console.print(f"[red]❌ Error creating configuration: {e}[/red]")
        sys.exit(1)


@cli.command()
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Configuration file to validate",
)
def validate_config(config: Optional[Path]) -> None:
    """Validate configuration file.

    Check that the configuration file is valid and display current settings.
    """
    setup_logging()

    try:
        if config:
            app_config = Config.load_from_file(config)
            console.print(f"[green]✅ Configuration file is valid: {config}[/green]")
        else:
            app_config = Config.load_from_file()
            console.print("[green]✅ Default configuration loaded[/green]")

        table = Table(title="Configuration Summary")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Transaction Type", app_config.transaction_type)
        table.add_row("STT Paid", app_config.stt_paid)
        table.add_row("Source Date Format", app_config.source_date_format)
        table.add_row("Output Date Format", app_config.output_date_format)
        table.add_row("Header Token", app_config.header_token)
        table.add_row("DateOfSale Source", app_config.date_of_sale_source)

        console.print(table)

    except Exception as e:
        console.print(f"[red]❌ Configuration error: {e}[/red]")
        sys.exit(1)


@cli.command()
@click.argument(
    "input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
def info(input_file: Path) -> None:
    """Display information about an ICICI capital gains CSV file.

    INPUT_FILE: Path to the ICICI capital gains CSV export
    """
    setup_logging()

    try:
        converter = IciciConverter()

        if not converter.validate_csv_file(input_file):
            console.print("[red]❌ Invalid CSV file[/red]")
            sys.exit(1)

        console.print(f"[blue]Analyzing:[/blue] {input_file}")

        parsed = converter.parse_file(input_file)
        records = parsed.records

        if not records:
            console.print("[yellow]No records found[/yellow]")
            return

        sale_dates = [record.sale_date for record in records]
        date_fmt = converter.config.output_date_format

        summary_table = Table(title="File Summary")
        summary_table.add_column("Metric", style="cyan")
        summary_table.add_column("Value", style="green")

        summary_table.add_row("Total Records", str(len(records)))
        summary_table.add_row("Skipped Rows", str(len(parsed.skipped)))
        summary_table.add_row(
            "Unique Securities", str(len({record.security for record in records}))
        )
        summary_table.add_row(
            "Sale Date Range",
            f"{min(sale_dates).strftime(date_fmt)} to "
            f"{max(sale_dates).strftime(date_fmt)}",
        )
        summary_table.add_row(
            "Total Sale Value", str(sum(record.sale_value for record in records))
        )
        summary_table.add_row(
            "Total Indexed Cost",
            str(sum(record.purchase_indexed_cost for record in records)),
        )

        console.print(summary_table)

        if parsed.skipped:
            skipped_table = Table(title="Skipped Rows")
            skipped_table.add_column("Line", style="yellow")
            skipped_table.add_column("Reason", style="red")

            for row in parsed.skipped:
                skipped_table.add_row(str(row.line_number), row.reason)

            console.print(skipped_table)

    except Exception as e:
        console.print(f"[red]❌ Error analyzing file: {e}[/red]")
        sys.exit(1)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
