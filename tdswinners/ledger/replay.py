from contextlib import closing
from logging import getLogger
from types import MappingProxyType

from tdswinners.ledger.interface import (
    AccountSnapshot,
    BlockStore,
    Genesis,
    ProcessOptions,
    ReplayError,
    ReplayResult,
)
from tdswinners.ledger.schemas import parse_balances, parse_vote_accounts
from tdswinners.utils.prometheus import REPLAY_LAST_SLOT

logger = getLogger(__name__)


def process_ledger(
    genesis: Genesis,
    block_store: BlockStore,
    opts: ProcessOptions | None = None,
) -> ReplayResult:
    """
    Replay every entry of the block store once, in order, on the calling thread.

    Balance and vote-account updates carried by an entry are applied before the
    entry callback sees the vote-accounts view for that entry. The callback
    receives a read-only view that is only valid for the duration of the call.

    Raises:
        ReplayError: on malformed entries, a slot regression when
            ``verify_ledger`` is set, a failing callback, or a thread count
            other than one.
    """
    opts = opts or ProcessOptions()
    if opts.override_num_threads not in (None, 1):
        raise ReplayError(
            f"entry callbacks require a single replay thread, got {opts.override_num_threads}"
        )

    balances = dict(genesis.balances)
    vote_accounts = dict(genesis.vote_accounts)
    last_slot: int | None = None
    n_entries = 0

    with closing(block_store.iter_entries()) as entries:
        for entry in entries:
            if opts.halt_at_slot is not None and entry.slot > opts.halt_at_slot:
                logger.info("[replay] Halting before slot %d", entry.slot)
                break
            if last_slot is not None and entry.slot < last_slot:
                if opts.verify_ledger:
                    raise ReplayError(
                        f"slot went backwards: {entry.slot} after {last_slot}"
                    )
                logger.warning(
                    "[replay] Slot went backwards: %d after %d", entry.slot, last_slot
                )

            try:
                balances.update(parse_balances(entry.balances))
                vote_accounts.update(parse_vote_accounts(entry.vote_accounts))
            except ValueError as e:
                raise ReplayError(f"bad entry at slot {entry.slot}: {e}") from e

            if opts.entry_callback is not None:
                try:
                    opts.entry_callback(entry.slot, MappingProxyType(vote_accounts))
                except Exception as e:
                    raise ReplayError(
                        f"entry callback failed at slot {entry.slot}: {e}"
                    ) from e

            last_slot = entry.slot if last_slot is None else max(last_slot, entry.slot)
            n_entries += 1

    logger.info("[replay] Replayed %d entries, last slot=%s", n_entries, last_slot)
    if last_slot is not None:
        REPLAY_LAST_SLOT.set(last_slot)

    schedule = block_store.load_leader_schedule()
    if not opts.full_leader_cache:
        schedule = schedule.truncated(last_slot)

    snapshot = AccountSnapshot(
        slot=last_slot,
        balances=balances,
        vote_accounts=vote_accounts,
    )
    return ReplayResult(snapshot=snapshot, leader_schedule=schedule)
