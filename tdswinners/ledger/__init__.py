"""Ledger replay collaborator.

Loads an exported ledger directory and replays it entry by entry, invoking a
registered callback per entry and returning the final account snapshot plus the
leader schedule.
"""

from .interface import (
    AccountSnapshot,
    BlockStore,
    EntryCallback,
    Genesis,
    LeaderScheduleCache,
    LedgerOpenError,
    ProcessOptions,
    ReplayError,
    ReplayResult,
    VoteAccount,
    VoteAccountsView,
)
from .replay import process_ledger
from .store import FileBlockStore, load_genesis

__all__ = [
    "AccountSnapshot",
    "BlockStore",
    "EntryCallback",
    "FileBlockStore",
    "Genesis",
    "LeaderScheduleCache",
    "LedgerOpenError",
    "ProcessOptions",
    "ReplayError",
    "ReplayResult",
    "VoteAccount",
    "VoteAccountsView",
    "load_genesis",
    "process_ledger",
]
