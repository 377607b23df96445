import logging

import click

from tacpy import TAC, session


@click.group()
@click.option("--verbose", is_flag=True, help="Log recurrence and cache statistics.")
def cli(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )


@cli.command()
@click.option(
    "--config",
    required=True,
    type=str,
    help="Specify the path to the config file to be used.",
)
@click.option(
    "--cluster",
    type=str,
    default="",
    help="File path for particle positions. Overrides the provided path in the config.",
)
def compute(config: str, cluster: str) -> None:
    session.init()
    try:
        handler = TAC(config, path_cluster=cluster)
        filename = handler.save(handler.run())
    finally:
        session.finalize()
    click.echo(filename)
