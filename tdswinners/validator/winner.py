from dataclasses import dataclass
from logging import getLogger

from tdswinners.ledger.interface import BlockStore, Genesis, ProcessOptions
from tdswinners.ledger.replay import process_ledger
from tdswinners.utils.identity import ValidatorIdentity
from tdswinners.validator import availability, latency, rewards
from tdswinners.validator.exclusion import ExclusionPolicy
from tdswinners.validator.models import VoteTrace, WinnerReport
from tdswinners.validator.observer import VoteObserver

logger = getLogger(__name__)


@dataclass(frozen=True)
class CategoryWinners:
    rewards: WinnerReport
    availability: WinnerReport
    latency: WinnerReport
    trace: VoteTrace

    @property
    def reports(self) -> tuple[WinnerReport, WinnerReport, WinnerReport]:
        return (self.rewards, self.availability, self.latency)


def compute_all_winners(
    genesis: Genesis,
    block_store: BlockStore,
    *,
    baseline: ValidatorIdentity,
    bootstrap_leader: ValidatorIdentity,
    starting_balance: int,
    final_slot: int | None = None,
) -> CategoryWinners:
    """
    Replay the ledger once with a vote observer attached, then rank all three
    categories against the frozen vote trace and the final account snapshot.

    Raises:
        ReplayError: when the replay fails; nothing is ranked in that case.
    """
    excluded = ExclusionPolicy.from_reference_validators(baseline, bootstrap_leader)
    observer = VoteObserver()
    opts = ProcessOptions(
        verify_ledger=False,
        halt_at_slot=final_slot,
        full_leader_cache=True,
        entry_callback=observer,
        override_num_threads=1,
    )

    logger.info("[winner] Processing ledger (final_slot=%s)...", final_slot)
    snapshot, leader_schedule = process_ledger(genesis, block_store, opts)
    trace = observer.freeze()

    rewards_winners = rewards.compute_winners(snapshot, excluded, starting_balance)
    availability_winners = availability.compute_winners(
        snapshot,
        block_store,
        baseline,
        excluded,
        leader_schedule,
    )
    latency_winners = latency.compute_winners(
        trace.voter_record,
        trace.slot_voter_segments,
        baseline,
        excluded,
    )
    return CategoryWinners(
        rewards=rewards_winners,
        availability=availability_winners,
        latency=latency_winners,
        trace=trace,
    )
