"""codestruct languages command - list registered languages."""

import json
from collections import defaultdict

import click
from rich.console import Console
from rich.table import Table

from codestruct.config.models import CodeStructConfig
from codestruct.structure.registry import build_registry


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def languages_command(ctx: click.Context, as_json: bool) -> None:
    """List supported languages and their file extensions."""
    config: CodeStructConfig = ctx.obj["config"]
    registry = build_registry(
        strict=config.extraction.strict_queries,
        languages=config.extraction.languages,
    )

    by_language: dict[str, list[str]] = defaultdict(list)
    for ext, language in sorted(registry.extensions.items()):
        by_language[language].append(ext)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "languages": {lang: by_language[lang] for lang in registry.languages},
                    "unavailable": {lang: err.message for lang, err in registry.failures.items()},
                },
                indent=2,
            )
        )
        return

    table = Table(show_header=True, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("language", style="cyan")
    table.add_column("extensions", style="white")
    for language in registry.languages:
        table.add_row(language, " ".join(f".{e}" for e in by_language[language]))
    for language, err in registry.failures.items():
        table.add_row(language, f"[red]unavailable[/red] [dim]{err.message}[/dim]")
    Console().print(table)
