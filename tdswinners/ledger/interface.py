"""Types exchanged with the ledger replay engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Generator, Mapping, NamedTuple, Protocol

from tdswinners.utils.identity import ValidatorIdentity


class LedgerOpenError(Exception):
    """The ledger directory or one of its files could not be opened."""


class ReplayError(Exception):
    """The replay engine failed; no ranking may be derived from its state."""


@dataclass(frozen=True)
class VoteAccount:
    node_identity: ValidatorIdentity
    confirmed_slot: int | None
    stake: int = 0


VoteAccountsView = Mapping[ValidatorIdentity, VoteAccount]
EntryCallback = Callable[[int, VoteAccountsView], None]


@dataclass(frozen=True)
class Genesis:
    bootstrap_leader: ValidatorIdentity
    balances: Mapping[ValidatorIdentity, int] = field(default_factory=dict)
    vote_accounts: Mapping[ValidatorIdentity, VoteAccount] = field(default_factory=dict)


@dataclass(frozen=True)
class AccountSnapshot:
    """Final balances and vote accounts at the last replayed slot.

    ``slot`` is None when the replay delivered no entry at all.
    """

    slot: int | None
    balances: Mapping[ValidatorIdentity, int] = field(default_factory=dict)
    vote_accounts: Mapping[ValidatorIdentity, VoteAccount] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "balances", MappingProxyType(dict(self.balances)))
        object.__setattr__(
            self, "vote_accounts", MappingProxyType(dict(self.vote_accounts))
        )


@dataclass(frozen=True)
class LeaderScheduleCache:
    first_slot: int
    leaders: tuple[ValidatorIdentity, ...] = ()

    @property
    def last_slot(self) -> int | None:
        if not self.leaders:
            return None
        return self.first_slot + len(self.leaders) - 1

    def slot_leader_at(self, slot: int) -> ValidatorIdentity | None:
        idx = slot - self.first_slot
        if idx < 0 or idx >= len(self.leaders):
            return None
        return self.leaders[idx]

    def truncated(self, last_slot: int | None) -> LeaderScheduleCache:
        if last_slot is None or last_slot < self.first_slot:
            return LeaderScheduleCache(first_slot=self.first_slot)
        return LeaderScheduleCache(
            first_slot=self.first_slot,
            leaders=self.leaders[: last_slot - self.first_slot + 1],
        )


class BlockStore(Protocol):
    def is_full(self, slot: int) -> bool: ...

    def iter_entries(self) -> Generator: ...

    def load_leader_schedule(self) -> LeaderScheduleCache: ...


@dataclass
class ProcessOptions:
    verify_ledger: bool = False
    halt_at_slot: int | None = None
    full_leader_cache: bool = True
    entry_callback: EntryCallback | None = None
    override_num_threads: int | None = None


class ReplayResult(NamedTuple):
    snapshot: AccountSnapshot
    leader_schedule: LeaderScheduleCache
