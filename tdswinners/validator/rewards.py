from logging import getLogger

from tdswinners.ledger.interface import AccountSnapshot
from tdswinners.utils.economics import lamports_to_sol
from tdswinners.validator.exclusion import ExclusionPolicy
from tdswinners.validator.models import WinnerReport
from tdswinners.validator.scoring import build_report

logger = getLogger(__name__)

CATEGORY = "Rewards Earned"


def _describe(net: int) -> str:
    verb = "Earned" if net >= 0 else "Lost"
    return f"{verb} {abs(lamports_to_sol(net)):.9f} SOL"


def compute_winners(
    snapshot: AccountSnapshot,
    excluded: ExclusionPolicy,
    starting_balance: int,
) -> WinnerReport:
    """
    Rank validators by net balance change in lamports, largest gain first.

    Every identity with a vote account in the snapshot is a candidate. An
    identity without a balance entry is taken to still hold the starting
    balance. Losses are valid and simply rank low.
    """
    if snapshot.slot is None:
        logger.info("[rewards] No entries replayed; nothing earned")
        return WinnerReport(category=CATEGORY)

    net_by_identity: dict = {}
    for identity in excluded.candidates(snapshot.vote_accounts):
        final_balance = snapshot.balances.get(identity, starting_balance)
        net_by_identity[identity] = int(final_balance) - int(starting_balance)

    return build_report(
        CATEGORY,
        net_by_identity,
        descending=True,
        describe=lambda _identity, net: _describe(net),
    )
