"""pandopub CLI - Main commands."""
import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="pandopub",
    help="Publish files to the Pando content API under deterministic names",
    add_completion=False
)
console = Console(stderr=True)

TRUE_VALUES = ('true', 'True', 'TRUE')
FALSE_VALUES = ('false', 'False', 'FALSE')


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def parse_action_boolean(value: Optional[str], name: str = "published") -> bool:
    """
    Parse a boolean the way workflow inputs spell them.

    Empty or missing means False.
    """
    if value is None or value == '':
        return False
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise typer.BadParameter(
        f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}. "
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
    )


def parse_limit(value: Optional[str]) -> int:
    """Parse the item limit; empty means no limit."""
    if value is None or value.strip() == '':
        return -1
    try:
        return int(value)
    except ValueError:
        raise typer.BadParameter(f"limit must be an integer, got {value!r}")


def write_github_output(name: str, value: Any) -> None:
    """Append an output to $GITHUB_OUTPUT when running as an action."""
    output_path = os.environ.get('GITHUB_OUTPUT')
    if not output_path:
        return
    with open(output_path, 'a', encoding='utf-8') as f:
        f.write(f"{name}={json.dumps(value)}\n")


def print_summary(results: List[Any]) -> None:
    table = Table()
    table.add_column("Path")
    table.add_column("As", style="cyan")
    table.add_column("Address", style="dim")
    table.add_column("Status")

    for result in results:
        status = "[green]ok[/green]" if result.ok else f"[red]{type(result.error).__name__}[/red]"
        mode = result.mode.value if result.mode else "-"
        table.add_row(result.path, mode, result.content_address or "-", status)

    console.print(table)


@app.command()
def publish(
    secret: str = typer.Option(..., "--secret", "-s", envvar="INPUT_SECRET", help="Base64 protobuf private key"),
    glob_pattern: str = typer.Option(..., "--glob", "-g", envvar="INPUT_GLOB", help="Files or directories to publish"),
    mode: str = typer.Option("dag", "--as", "-a", envvar="INPUT_AS", help="Packaging mode: dag, file, dir or wrap"),
    published: str = typer.Option("", "--published", envvar="INPUT_PUBLISHED", help="Mark content as published"),
    limit: str = typer.Option("", "--limit", "-n", envvar="INPUT_LIMIT", help="Publish at most N entries"),
    endpoint: str = typer.Option(None, "--endpoint", "-e", envvar="INPUT_ENDPOINT", help="API base URL"),
    namespec: str = typer.Option("path", "--namespec", envvar="INPUT_NAMESPEC", help="How human names are derived"),
    archiver: str = typer.Option(None, "--archiver", envvar="PANDOPUB_ARCHIVER", help="Directory archiver command"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Publish matching files and print the acknowledgments as JSON."""
    from pandopub import PublisherConfig, ArchiverConfig, run, PublishError

    logging.basicConfig(format="%(asctime)s %(name)s %(levelname)s %(message)s")

    is_published = parse_action_boolean(published)
    max_items = parse_limit(limit)

    config = PublisherConfig.default()
    config.log_level = logging.DEBUG if verbose else logging.INFO
    if archiver:
        config.archiver = ArchiverConfig(command=tuple(archiver.split()))

    try:
        results = run_async(run(
            secret, glob_pattern,
            namespec=namespec,
            published=is_published,
            mode=mode,
            limit=max_items,
            endpoint=endpoint,
            config=config
        ))
    except PublishError as e:
        console.print(f"[red]Publish failed: {e}[/red]")
        raise typer.Exit(1)

    roots = [result.to_dict() for result in results]
    print_summary(results)
    typer.echo(json.dumps(roots, indent=2))
    write_github_output('roots', roots)

    if any(not result.ok for result in results):
        raise typer.Exit(1)


@app.command()
def address(
    path: Path = typer.Argument(..., help="Path whose human name is derived"),
    secret: str = typer.Option(..., "--secret", "-s", envvar="INPUT_SECRET", help="Base64 protobuf private key"),
    namespec: str = typer.Option("path", "--namespec", envvar="INPUT_NAMESPEC", help="How human names are derived"),
):
    """Show the content address a path would be published under."""
    from pandopub import derive_publishing_key, content_address, human_name_from_path, PublishError

    try:
        name = human_name_from_path(namespec, path)
        keypair = derive_publishing_key(secret, name)
    except PublishError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"Human name: {name}")
    typer.echo(content_address(keypair))


if __name__ == "__main__":
    app()
