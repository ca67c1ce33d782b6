"""
s3select CLI - query object storage with SQL through SELECT pushdown

Usage:
    s3select query "<sql>" --schema "<columns>" [options]
"""

import logging
import sys
import time
from dataclasses import asdict
from itertools import islice
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler

from s3select import __version__
from s3select.cli.formatters import FORMATTERS, get_formatter
from s3select.core.errors import S3SelectError
from s3select.core.relation import Relation
from s3select.core.result import RowCollection
from s3select.select.serialization import FORMATS
from s3select.sql.parser import SQLParseError, parse
from s3select.storage.config import StorageConfig


def _parse_pairs(pairs: Tuple[str, ...], option: str) -> dict:
    """Turn repeated key=value options into a dict"""
    result = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got '{pair}'", param_hint=option)
        result[key.strip()] = value.strip()
    return result


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="s3select")
def cli():
    """
    s3select - Query S3 objects with SQL

    Projection and filters run inside the storage service's SELECT API;
    only matching rows and columns come back.
    """


@cli.command()
@click.argument("sql", type=str)
@click.option(
    "--schema",
    "-s",
    required=True,
    help='Column definitions, e.g. "id INTEGER NOT NULL, name STRING"',
)
@click.option(
    "--input-format",
    "-i",
    type=click.Choice(FORMATS, case_sensitive=False),
    default=None,
    help="Format of the stored objects (default: parquet)",
)
@click.option(
    "--option",
    "-O",
    "options",
    multiple=True,
    help="Scan param as key=value (compression, header, delimiter, ...)",
)
@click.option(
    "--conf",
    "-c",
    "confs",
    multiple=True,
    help="Storage setting as key=value (fs.s3a.endpoint, fs.s3a.region, ...)",
)
@click.option("--endpoint", default=None, help="Storage endpoint URL")
@click.option("--region", default=None, help="Storage region")
@click.option("--path-style", is_flag=True, help="Use path-style bucket addressing")
@click.option("--workers", "-w", type=int, default=1, help="Objects fetched concurrently")
@click.option(
    "--format",
    "-f",
    type=click.Choice(list(FORMATTERS), case_sensitive=False),
    default="table",
    help="Output format (default: table)",
)
@click.option("--limit", "-l", type=int, default=None, help="Limit number of rows displayed")
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Write output to file instead of stdout",
)
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--no-header", is_flag=True, help="Omit the header line from CSV output")
@click.option("--explain", is_flag=True, help="Show the pushed-down SELECT instead of results")
@click.option("--time", "-t", "show_time", is_flag=True, help="Show execution time")
@click.option("--verbose", "-v", is_flag=True, help="Log listing and request details")
@click.option("--debug", is_flag=True, help="Show full tracebacks on error")
def query(
    sql: str,
    schema: str,
    input_format: Optional[str],
    options: Tuple[str, ...],
    confs: Tuple[str, ...],
    endpoint: Optional[str],
    region: Optional[str],
    path_style: bool,
    workers: int,
    format: str,
    limit: Optional[int],
    output: Optional[str],
    no_color: bool,
    no_header: bool,
    explain: bool,
    show_time: bool,
    verbose: bool,
    debug: bool,
):
    """
    Run a SELECT against every object under a location

    Examples:

        \b
        # Parquet objects under a prefix
        $ s3select query "SELECT * FROM 's3://bucket/events/*'" -s "id LONG, kind STRING"

        \b
        # Headered CSV on a local MinIO, JSON output
        $ s3select query "SELECT name FROM 's3://data/users/' WHERE age > 30" \\
            -s "name STRING, age INT" -i csv \\
            --endpoint http://localhost:9000 --path-style -f json

        \b
        # Show the expression sent to the service
        $ s3select query "SELECT id FROM 's3://bucket/t/*' WHERE id IN (1, 2)" -s "id INT" --explain
    """
    fmt = format.lower()
    del format
    _configure_logging(verbose)

    params = _parse_pairs(options, "--option")
    if input_format:
        params["format"] = input_format.lower()

    try:
        start_time = time.time()

        statement = parse(sql)
        columns = None if statement.columns == ["*"] else statement.columns

        settings = _parse_pairs(confs, "--conf")
        if endpoint:
            settings["endpoint"] = endpoint
        if region:
            settings["region"] = region
        if path_style:
            settings["path_style_access"] = True
        base = asdict(StorageConfig.from_env())
        config = StorageConfig.from_mapping({**base, **settings})

        relation = Relation(
            statement.source, params, schema, config=config, max_workers=workers
        )

        if explain:
            click.echo(relation.explain(columns, statement.where))
            return

        row_iter = relation.scan_lazy(columns, statement.where)
        try:
            if statement.limit is not None:
                rows = list(islice(row_iter, statement.limit))
            else:
                rows = list(row_iter)
        finally:
            row_iter.close()

        result = RowCollection(relation.effective_schema(columns), rows)
        results_list = result.to_dicts()

        # Apply display limit if specified (doesn't affect query LIMIT)
        if limit is not None:
            results_list = results_list[:limit]

        # Infer format from the output file extension when -f wasn't given
        output_format = fmt
        if output and fmt == "table":
            if output.endswith(".json"):
                output_format = "json"
            elif output.endswith(".csv"):
                output_format = "csv"
            elif output.endswith(".md"):
                output_format = "markdown"

        formatter = get_formatter(output_format)
        output_text = formatter.format(
            results_list,
            columns=result.schema.get_column_names(),
            no_color=no_color or (not sys.stdout.isatty()),
            show_footer=not output,
            header=not no_header,
        )

        if show_time:
            elapsed = time.time() - start_time
            output_text += f"\nProcessed {len(results_list)} rows in {elapsed:.3f}s"

        if output:
            with open(output, "w") as f:
                f.write(output_text)
            click.echo(f"Results written to {output} ({output_format} format)", err=True)
        else:
            click.echo(output_text)

    except (S3SelectError, SQLParseError) as e:
        click.echo(f"Error: {e}", err=True)
        if debug:
            raise
        sys.exit(1)


@cli.command()
@click.option("--schema", "-s", required=True, help="Column definitions to validate")
def schema(schema: str):
    """
    Validate column definitions and print the parsed schema

    \b
    $ s3select schema -s "id INTEGER NOT NULL, price DECIMAL(10,2), ts TIMESTAMP"
    """
    from s3select.core.types import resolve_schema

    try:
        parsed = resolve_schema(schema)
    except S3SelectError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for field in parsed:
        nullability = "NULL" if field.nullable else "NOT NULL"
        click.echo(f"{field.name}\t{field.dtype}\t{nullability}")


if __name__ == "__main__":
    cli()
