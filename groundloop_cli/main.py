"""groundloop CLI entry point - assembles all commands."""
import logging

import click

from . import __version__
from .basis_cmd import basis
from .collapse_cmd import collapse
from .run_cmd import run


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log diagnostics to stderr")
def cli(verbose: bool):
    """groundloop: grounded selection and learning."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


cli.add_command(basis)
cli.add_command(collapse)
cli.add_command(run)


if __name__ == "__main__":
    cli()
