# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging
from pathlib import Path
from typing import Optional

import typer

from ..adapters.filesystem.local_fs import LocalFS
from ..adapters.hashing.sha256 import DEFAULT_CHUNK_SIZE, SHA256Hasher
from ..domain.errors import DupescanError
from ..domain.models import DuplicateGroup, ScanResult
from ..services import ReportService, ResolveService, ScanService
from ..services.report_service import SUPPORTED_FORMATS, printable_path

from ..logging_config import setup_logging

setup_logging()

app = typer.Typer(help="dupescan CLI - parallel duplicate file detection")

logger = logging.getLogger(__name__)


# ------------------------------
# Wiring
# ------------------------------


def _wire(workers: int, chunk_size: int = DEFAULT_CHUNK_SIZE) -> ScanService:
    """
    Minimal composition root:
      LocalFS + SHA256Hasher + N worker processes
    """
    if workers < 1:
        raise typer.BadParameter("--workers must be >= 1")
    if chunk_size < 1:
        raise typer.BadParameter("--chunk-size must be >= 1")
    return ScanService(LocalFS(), SHA256Hasher(chunk_size), workers=workers)


def _run_scan(service: ScanService, root: Path, dest: str = "") -> ScanResult:
    try:
        return service.run(root, dest)
    except DupescanError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def _prompt_choice(group: DuplicateGroup) -> int:
    typer.echo("\nFound the following duplicate files:")
    for i, path in enumerate(group, start=1):
        typer.echo(f"{i}: {printable_path(path)}")
    typer.echo("0: To Skip the current file group")

    choice = typer.prompt(
        f"Enter the number of the file you want to keep (1-{len(group)})", type=int
    )
    while not 0 <= choice <= len(group):
        choice = typer.prompt(
            f"Invalid choice. Please enter a number between 0 and {len(group)}",
            type=int,
        )
    return choice


# ------------------------------
# CLI Commands
# ------------------------------


@app.command()
def scan(
    path: Path = typer.Option(
        ...,
        "--path",
        prompt="Enter the root directory to search for duplicate files",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        help="Directory to scan",
    ),
    dest: Path = typer.Option(
        ...,
        "--dest",
        prompt="Enter the destination directory for duplicate files",
        file_okay=False,
        resolve_path=True,
        help="Directory that receives the copies you do not keep",
    ),
    workers: int = typer.Option(
        1,
        "--workers",
        "-w",
        envvar="DUPESCAN_WORKERS",
        help="Number of worker processes (rank 0 is this process).",
    ),
    chunk_size: int = typer.Option(
        DEFAULT_CHUNK_SIZE, "--chunk-size", help="Read size in bytes while hashing."
    ),
    skip_all: bool = typer.Option(
        False,
        "--skip-all",
        help="List duplicate groups without prompting or moving anything.",
    ),
    report: Optional[Path] = typer.Option(
        None,
        "--report",
        help="Also write a JSON duplicate report to this file.",
        resolve_path=True,
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Suppress the timing line.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """
    Scan a directory in parallel, then pick which copy of each duplicate to keep.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")

    service = _wire(workers, chunk_size)
    typer.echo(f"Scanning for duplicate files with {workers} processes...")
    result = _run_scan(service, path, str(dest))

    if not quiet:
        typer.echo(f"Time taken: {result.elapsed:.4f} seconds")

    if report is not None:
        ReportService().write_duplicates(result.groups, report, fmt="json")
        typer.echo(f"Wrote json report to {printable_path(str(report))}")

    if not result.groups:
        typer.echo("No duplicate files found.")
        return

    typer.echo(f"Found {len(result.groups)} groups of duplicate files.")
    if skip_all:
        for group in result.groups:
            typer.echo("")
            for i, p in enumerate(group, start=1):
                typer.echo(f"{i}: {printable_path(p)}")
        return

    resolver = ResolveService(dest)
    summary = resolver.resolve(result.groups, _prompt_choice)
    for src, target in summary.moved:
        typer.echo(f"Moved {printable_path(src)} to {printable_path(target)}")
    for src, reason in summary.failed:
        typer.echo(f"Could not move file {printable_path(src)}: {reason}", err=True)
    typer.echo("\nDuplicate files have been processed.")


@app.command()
def report(
    path: Path = typer.Option(
        ...,
        "--path",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        help="Directory to scan",
    ),
    workers: int = typer.Option(
        1,
        "--workers",
        "-w",
        envvar="DUPESCAN_WORKERS",
        help="Number of worker processes (rank 0 is this process).",
    ),
    fmt: str = typer.Option(
        "json",
        "--fmt",
        help="Output format: " + ", ".join(SUPPORTED_FORMATS),
        case_sensitive=False,
    ),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "--output",
        help="Write report to this path. If a directory is provided, the file will be named 'duplicates.<fmt>' inside it. "
        "If omitted entirely, defaults to './duplicates.<fmt>'.",
        resolve_path=True,
    ),
):
    """
    Scan a directory and write a duplicate report. Nothing is moved.
    """
    fmt = fmt.lower()
    if fmt not in SUPPORTED_FORMATS:
        raise typer.BadParameter(
            f"Unsupported format: {fmt}. Valid options: {', '.join(SUPPORTED_FORMATS)}",
            param_hint="--fmt",
        )

    service = _wire(workers)
    result = _run_scan(service, path)

    # - no --out  -> ./duplicates.<fmt>
    # - --out DIR -> DIR/duplicates.<fmt>
    # - --out FILE -> FILE
    if out is None:
        target = Path(f"duplicates.{fmt}")
    elif out.exists() and out.is_dir():
        target = out / f"duplicates.{fmt}"
    else:
        target = out

    written = ReportService().write_duplicates(result.groups, target, fmt=fmt)
    typer.echo(
        f"Scanned {printable_path(str(path))}; {result.files_hashed} files, "
        f"{len(result.groups)} duplicate groups in {result.elapsed:.4f}s"
    )
    typer.echo(f"Wrote {fmt} report to {printable_path(str(written))}")
