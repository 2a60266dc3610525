"""graphql-client CLI entry point: Click group with subcommands."""

import click

from graphql_client import __version__


@click.group()
@click.version_option(version=__version__, prog_name="graphql-client")
def cli() -> None:
    """graphql-client - send GraphQL queries with retries."""


# Import and register subcommands
from graphql_client.cli.run import run  # noqa: E402

cli.add_command(run)
