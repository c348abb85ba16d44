"""CLI entry point for whenkit."""

from __future__ import annotations

import asyncio
import json
import logging
import sys

import click

from whenkit.completion import complete
from whenkit.config import EditorConfig
from whenkit.editor import parse_editor_text
from whenkit.templating import SimpleTemplateResolver, substitute
from whenkit.validation import StatusKind, ValidationCoordinator
from whenkit.values import ConditionValue, dumps
from whenkit_client import ClientError, ConfigurationError, DatasourceClient


def _read(path: str) -> str:
    with open(path) as f:
        return f.read()


def _parse_vars(pairs: tuple[str, ...]) -> dict[str, str]:
    variables: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected name=value, got '{pair}'", param_hint="--var")
        variables[name.lstrip("$")] = value
    return variables


def _client() -> DatasourceClient:
    try:
        return DatasourceClient.from_env()
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """whenkit: condition editor tooling."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command("complete")
@click.argument("condition_file", type=click.Path(exists=True))
@click.option("--line", "line_number", default=1, type=int, help="1-based caret line")
@click.option("--column", default=1, type=int, help="1-based caret column")
@click.option("--json", "as_json", is_flag=True, help="Print host-shaped JSON items")
def complete_cmd(condition_file: str, line_number: int, column: int, as_json: bool):
    """Suggest completions for a caret position in a condition file."""
    document = _read(condition_file)
    lines = document.splitlines()
    line_text = lines[line_number - 1] if 0 < line_number <= len(lines) else ""
    items = complete(line_text, column, line_number=line_number, document=document)

    if as_json:
        click.echo(json.dumps([item.to_host() for item in items], indent=2))
        return
    if not items:
        click.echo("No suggestions")
        return
    for item in sorted(items, key=lambda i: i.sort_text):
        click.echo(f"{item.sort_text}  {item.kind.value:<8}  {item.label}  - {item.detail}")


@main.command("substitute")
@click.argument("condition_file", type=click.Path(exists=True))
@click.option("--var", "variables", multiple=True, help="Template variable as name=value")
def substitute_cmd(condition_file: str, variables: tuple[str, ...]):
    """Print a condition with template variables resolved."""
    resolver = SimpleTemplateResolver(_parse_vars(variables))
    result = substitute(_read(condition_file), None, resolver)
    if isinstance(result, ConditionValue):
        click.echo(dumps(result, indent=2))
    else:
        click.echo(result)


@main.command("validate")
@click.argument("condition_file", type=click.Path(exists=True))
@click.option("--bucket", default="", help="Bucket name")
@click.option("--entry", default="", help="Entry name")
def validate_cmd(condition_file: str, bucket: str, entry: str):
    """Validate a condition against the configured datasource."""
    condition = parse_editor_text(_read(condition_file))
    client = _client()

    async def run():
        coordinator = ValidationCoordinator(
            client,
            bucket=bucket or None,
            entry=entry or None,
            condition=condition,
            config=EditorConfig.from_env(),
        )
        try:
            return await coordinator.validate_now()
        finally:
            await coordinator.close()
            await client.close()

    status = asyncio.run(run())
    if status.kind == StatusKind.VALID:
        click.echo(status.message)
        return
    click.echo(status.message, err=True)
    sys.exit(1)


def _list_names(fetch) -> None:
    client = _client()

    async def run():
        try:
            return await fetch(client)
        finally:
            await client.close()

    try:
        names = asyncio.run(run())
    except ClientError as e:
        click.echo(f"Request failed: {e}", err=True)
        sys.exit(1)
    for name in names:
        click.echo(name)


@main.command("buckets")
def buckets_cmd():
    """List buckets of the configured datasource."""
    _list_names(lambda client: client.list_buckets())


@main.command("entries")
@click.argument("bucket")
def entries_cmd(bucket: str):
    """List entries of a bucket."""
    _list_names(lambda client: client.list_entries(bucket))


if __name__ == "__main__":
    main()
