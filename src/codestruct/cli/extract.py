"""codestruct extract command - print definitions found in source files."""

import json
from collections.abc import Iterator
from pathlib import Path

import click
import structlog
from rich.console import Console
from rich.table import Table

from codestruct.config.models import CodeStructConfig
from codestruct.core.logging import set_request_id
from codestruct.structure.batch import FileResult, extract_files
from codestruct.structure.registry import LanguageRegistry, build_registry

log = structlog.get_logger(__name__)


def _iter_sources(paths: tuple[Path, ...], registry: LanguageRegistry) -> Iterator[Path]:
    """Expand directories to the supported files beneath them; files pass through."""
    for path in paths:
        if path.is_dir():
            for child in sorted(path.rglob("*")):
                if child.is_file() and registry.supports(child):
                    yield child
        else:
            yield path


def _format_range(rng: tuple[int, int, int, int]) -> str:
    return f"{rng[0]}:{rng[1]}-{rng[2]}:{rng[3]}"


def _render_result(console: Console, result: FileResult, show_scopes: bool) -> None:
    if result.error is not None:
        console.print(f"[red]✗[/red] {result.file_path}: {result.error['message']}")
        return
    structure = result.structure
    if structure is None:
        return
    console.print(
        f"[bold]{structure.file_path}[/bold] [dim]({structure.language}, "
        f"{len(structure.definitions)} definitions)[/dim]"
    )
    if not structure.definitions:
        return

    table = Table(show_header=False, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("kind", style="cyan")
    table.add_column("name", style="white")
    table.add_column("range", style="dim")
    if show_scopes:
        table.add_column("scope", style="green")
    for d in structure.definitions:
        row = [d.definition_kind, d.name, _format_range(d.range)]
        if show_scopes:
            row.append(".".join(s for s in (d.enclosing_type, d.enclosing_function) if s))
        table.add_row(*row)
    console.print(table)


@click.command()
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--include-content", is_flag=True, help="Include definition source")
@click.option("--scopes", is_flag=True, help="Resolve enclosing type/function")
@click.option("--workers", "-j", type=int, default=None, help="Worker processes")
@click.pass_context
def extract_command(
    ctx: click.Context,
    paths: tuple[Path, ...],
    as_json: bool,
    include_content: bool,
    scopes: bool,
    workers: int | None,
) -> None:
    """Extract definitions from source files.

    PATHS are files or directories (searched recursively for supported files).
    """
    config: CodeStructConfig = ctx.obj["config"]
    overrides = {
        key: value
        for key, value in (
            ("include_content", include_content or None),
            ("resolve_scopes", scopes or None),
            ("max_workers", workers),
        )
        if value is not None
    }
    extraction = config.extraction.model_copy(update=overrides)
    if extraction.max_workers < 1:
        raise click.BadParameter("must be >= 1", param_hint="--workers")

    set_request_id()
    registry = build_registry(strict=extraction.strict_queries, languages=extraction.languages)
    sources = list(_iter_sources(paths, registry))
    log.debug("extract_start", files=len(sources), workers=extraction.max_workers)

    results = extract_files(
        sources, config=extraction, registry=registry, logging_config=config.logging
    )

    if as_json:
        payload = [
            {
                "file_path": r.file_path,
                "structure": r.structure.to_dict() if r.structure is not None else None,
                "error": r.error,
                "duration_ms": r.duration_ms,
            }
            for r in results
        ]
        click.echo(json.dumps(payload, indent=2))
    else:
        console = Console()
        for result in results:
            _render_result(console, result, extraction.resolve_scopes)

    failed = sum(1 for r in results if not r.ok)
    log.debug("extract_done", files=len(results), failed=failed)
    if failed:
        ctx.exit(1)
