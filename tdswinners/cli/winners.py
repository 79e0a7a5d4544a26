import sys
from json import dumps
from logging import getLogger
from pathlib import Path

import click

from tdswinners.cli.console import error, info, print_report
from tdswinners.cli.errors import CLIError, ConfigError
from tdswinners.ledger import FileBlockStore, LedgerOpenError, ReplayError, load_genesis
from tdswinners.utils.economics import sol_to_lamports
from tdswinners.utils.identity import ValidatorIdentity
from tdswinners.utils.prometheus import _start_metrics
from tdswinners.utils.settings import get_settings
from tdswinners.validator.winner import compute_all_winners

logger = getLogger(__name__)


def parse_identity(value: str | None, option: str) -> ValidatorIdentity:
    if not value:
        raise ConfigError(f"{option} is required")
    try:
        return ValidatorIdentity.from_string(value)
    except ValueError as e:
        raise ConfigError(f"Failed to create a valid pubkey from {value}: {e}") from e


def _run(
    ledger: Path | None,
    starting_balance: float | None,
    baseline_validator: str | None,
    bootstrap_leader: str | None,
    final_slot: int | None,
    top: int | None,
    as_json: bool,
) -> None:
    settings = get_settings()
    ledger = ledger or settings.TDS_LEDGER_PATH
    if ledger is None:
        raise ConfigError("--ledger is required")
    if starting_balance is None:
        starting_balance = settings.TDS_STARTING_BALANCE_SOL
    if final_slot is None:
        final_slot = settings.TDS_FINAL_SLOT
    if top is None:
        top = settings.TDS_REPORT_TOP_N

    baseline_id = parse_identity(
        baseline_validator or settings.TDS_BASELINE_VALIDATOR, "--baseline-validator"
    )
    bootstrap_id = parse_identity(
        bootstrap_leader or settings.TDS_BOOTSTRAP_LEADER, "--bootstrap-leader"
    )

    try:
        genesis = load_genesis(ledger)
    except LedgerOpenError as e:
        raise ConfigError(f"Failed to open ledger genesis at {ledger}: {e}") from e
    if genesis.bootstrap_leader != bootstrap_id:
        logger.warning(
            "[winners] Genesis bootstrap leader %s differs from --bootstrap-leader %s",
            genesis.bootstrap_leader,
            bootstrap_id,
        )
    try:
        block_store = FileBlockStore.open(ledger)
    except LedgerOpenError as e:
        raise ConfigError(f"Failed to open ledger at {ledger}: {e}") from e

    if not as_json:
        info("Processing ledger...")
    try:
        result = compute_all_winners(
            genesis,
            block_store,
            baseline=baseline_id,
            bootstrap_leader=bootstrap_id,
            starting_balance=sol_to_lamports(starting_balance),
            final_slot=final_slot,
        )
    except (ReplayError, LedgerOpenError) as e:
        raise CLIError(f"Failed to process ledger: {e}") from e

    reports = [report.top(top) for report in result.reports]
    if as_json:
        click.echo(dumps([r.to_dict() for r in reports], indent=2))
        return
    for report in reports:
        print_report(report)


@click.command("winners")
@click.option(
    "-l",
    "--ledger",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Use directory for ledger location [env: TDS_LEDGER_PATH]",
)
@click.option(
    "--starting-balance",
    type=float,
    default=None,
    metavar="SOL",
    help="Starting balance of validators at the beginning of the exercise [default: 1000]",
)
@click.option(
    "--baseline-validator",
    default=None,
    metavar="PUBKEY",
    help="Public key of the baseline validator",
)
@click.option(
    "--bootstrap-leader",
    default=None,
    metavar="PUBKEY",
    help="Public key of the bootstrap leader",
)
@click.option(
    "--final-slot",
    type=click.IntRange(min=0),
    default=None,
    metavar="SLOT",
    help="Final slot of the exercise ledger",
)
@click.option("--top", type=click.IntRange(min=0), default=None, help="Show only the top N per category (0 = all).")
@click.option("--json", "as_json", is_flag=True, help="Print the reports as JSON.")
def winners_cmd(
    ledger: Path | None,
    starting_balance: float | None,
    baseline_validator: str | None,
    bootstrap_leader: str | None,
    final_slot: int | None,
    top: int | None,
    as_json: bool,
):
    """Replay the ledger and print the winners of every category."""
    _start_metrics()
    try:
        _run(
            ledger,
            starting_balance,
            baseline_validator,
            bootstrap_leader,
            final_slot,
            top,
            as_json,
        )
    except CLIError as e:
        error(str(e))
        sys.exit(1)
