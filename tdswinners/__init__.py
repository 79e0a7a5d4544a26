from logging import DEBUG, INFO, WARNING, basicConfig, getLogger

import click

from tdswinners.cli.winners import winners_cmd
from tdswinners.utils.settings import get_settings

logger = getLogger(__name__)


@click.group(name="tdsw")
@click.option(
    "-v",
    "--verbosity",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG)",
)
def cli(verbosity: int):
    """Ledger exercise category winners"""
    settings = get_settings()
    # logs go to stderr; stdout carries the `winners --json` document
    basicConfig(
        level=DEBUG if verbosity >= 2 else INFO if verbosity == 1 else WARNING,
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    logger.debug(f"tdswinners started (version={settings.TDS_VERSION})")


cli.add_command(winners_cmd)
