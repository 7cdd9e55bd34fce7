"""CLI for the archive continuity auditor.

Commands:
    check-rollback  Verify parent hash continuity of the stored blocks

Connection settings come from --database-url or the DATABASE_URL
environment variable (a .env file in the working directory is loaded
first). Nothing is written to the archive.

Exit codes:
    0  Scan completed (breaks found or not, unless --fail-on-break)
    1  Store error or invalid configuration
    2  Continuity breaks found with --fail-on-break (missing blocks alone
       do not count)
    130  Interrupted
"""

import asyncio
import json
import os
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from archive_audit import __version__
from archive_audit.application.ports.block_store import BlockStorePort
from archive_audit.application.services.continuity_scan_service import (
    ContinuityScanService,
)
from archive_audit.config import BlockStoreConfig
from archive_audit.domain.exceptions import ArchiveAuditError
from archive_audit.domain.models import GapPolicy, ScanResult
from archive_audit.infrastructure.adapters.persistence import PostgresBlockStore
from archive_audit.infrastructure.console import ConsoleScanReporter
from archive_audit.infrastructure.observability import (
    bind_scan_id,
    configure_structlog,
)
from archive_audit.infrastructure.stubs import BlockStoreStub

ENVIRONMENT_ENV = "ARCHIVE_AUDIT_ENV"

EXIT_STORE_ERROR = 1
EXIT_FINDINGS = 2
EXIT_INTERRUPTED = 130


class OutputFormat(str, Enum):
    """Output format options."""

    text = "text"
    json = "json"


app = typer.Typer(
    name="archive-audit",
    help="Read-only continuity auditor for stored block archives",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True, soft_wrap=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"archive-audit version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Archive Audit.

    Detect rollbacks, forks and corruption in a stored block archive.
    """
    pass


@app.command()
def check_rollback(
    database_url: Optional[str] = typer.Option(
        None,
        "--database-url",
        "-d",
        help="PostgreSQL URL (default: DATABASE_URL)",
    ),
    table: Optional[str] = typer.Option(
        None,
        "--table",
        "-t",
        help="Table holding the blocks (default: ARCHIVE_AUDIT_TABLE or 'block')",
    ),
    file: Optional[Path] = typer.Option(
        None,
        "--file",
        "-F",
        help="Exported blocks (JSON list) for offline verification",
    ),
    gaps: GapPolicy = typer.Option(
        GapPolicy.REPORT,
        "--gaps",
        help="Report missing blocks or skip them silently",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.text,
        "--format",
        "-o",
        help="Output format: text or json",
    ),
    fail_on_break: bool = typer.Option(
        False,
        "--fail-on-break",
        help="Exit with code 2 when continuity breaks are found",
    ),
) -> None:
    """Verify that every stored block links to its predecessor.

    Walks the stored range from the newest block down and checks that each
    block's parent hash equals the hash stored for the block below it.

    Example:
        archive-audit check-rollback --database-url postgresql://user:pw@host/archive
        archive-audit check-rollback --file blocks.json --format json
    """
    load_dotenv()
    configure_structlog(environment=os.getenv(ENVIRONMENT_ENV, "production"))
    bind_scan_id()

    try:
        result = asyncio.run(
            _check_rollback_async(
                database_url, table, file, gaps, output_format.value
            )
        )
    except ArchiveAuditError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", style="bold")
        raise typer.Exit(code=EXIT_STORE_ERROR)
    except KeyboardInterrupt:
        err_console.print("[yellow]Interrupted[/yellow]")
        raise typer.Exit(code=EXIT_INTERRUPTED)

    if output_format == OutputFormat.json:
        console.print_json(json.dumps(result.to_dict()))

    if fail_on_break and result.breaks:
        raise typer.Exit(code=EXIT_FINDINGS)


async def _check_rollback_async(
    database_url: Optional[str],
    table: Optional[str],
    file: Optional[Path],
    gaps: GapPolicy,
    output_format: str = "text",
) -> ScanResult:
    """Async implementation of the rollback check."""
    quiet = output_format == "json"
    reporter = None if quiet else ConsoleScanReporter(console)

    if file:
        # Offline mode: scan an exported list of blocks
        store = _load_export(file)
        return await _scan(store, reporter, gaps)

    config = BlockStoreConfig.from_env().with_overrides(
        database_url=database_url, table_name=table
    )
    async with PostgresBlockStore(config) as pg_store:
        return await _scan(pg_store, reporter, gaps)


async def _scan(
    store: BlockStorePort,
    reporter: Optional[ConsoleScanReporter],
    gaps: GapPolicy,
) -> ScanResult:
    service = ContinuityScanService(
        block_store=store,
        observer=reporter,
        gap_policy=gaps,
    )
    return await service.scan()


def _load_export(file: Path) -> BlockStoreStub:
    try:
        with open(file) as f:
            records = json.load(f)
    except FileNotFoundError:
        err_console.print(
            f"[red]Error:[/red] File not found: {escape(str(file))}", style="bold"
        )
        raise typer.Exit(code=EXIT_STORE_ERROR)
    except json.JSONDecodeError as e:
        err_console.print(
            f"[red]Error:[/red] Invalid JSON in {file}: {e.msg}", style="bold"
        )
        raise typer.Exit(code=EXIT_STORE_ERROR)

    try:
        return BlockStoreStub.from_records(records)
    except (KeyError, TypeError, ValueError) as e:
        err_console.print(
            f"[red]Error:[/red] Invalid block record in {file}: {escape(str(e))}",
            style="bold",
        )
        raise typer.Exit(code=EXIT_STORE_ERROR)


if __name__ == "__main__":
    app()
