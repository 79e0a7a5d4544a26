"""
File-backed ledger store
------------------------

A ledger directory exported from a cluster, laid out as:

    {ledger}/genesis.json
    {ledger}/leader_schedule.json
    {ledger}/entries.jsonl

entries.jsonl row schema (one row per replayed entry):
{
    "slot": 12,
    "balances": {"<pubkey>": 1000000000},
    "vote_accounts": [{"node_pubkey": "<pubkey>", "root_slot": 10, "stake": 42}]
}

Both update fields are optional; a row without them is a plain tick entry.
A slot counts as produced once at least one entry was written for it.
"""

import json
from logging import getLogger
from pathlib import Path
from typing import Iterator

from pydantic import ValidationError

from tdswinners.ledger.interface import (
    Genesis,
    LeaderScheduleCache,
    LedgerOpenError,
    ReplayError,
)
from tdswinners.ledger.schemas import (
    EntryRecord,
    GenesisRecord,
    LeaderScheduleRecord,
    parse_balances,
    parse_vote_accounts,
)
from tdswinners.utils.identity import ValidatorIdentity

logger = getLogger(__name__)

GENESIS_FILENAME = "genesis.json"
LEADER_SCHEDULE_FILENAME = "leader_schedule.json"
ENTRIES_FILENAME = "entries.jsonl"


def _read_json(path: Path) -> dict:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise LedgerOpenError(f"{path} not found") from e
    except (OSError, json.JSONDecodeError) as e:
        raise LedgerOpenError(f"Failed to read {path}: {e}") from e


def load_genesis(ledger_path: Path) -> Genesis:
    path = Path(ledger_path) / GENESIS_FILENAME
    try:
        record = GenesisRecord.model_validate(_read_json(path))
        return Genesis(
            bootstrap_leader=ValidatorIdentity.from_string(record.bootstrap_leader),
            balances=parse_balances(record.balances),
            vote_accounts=parse_vote_accounts(record.vote_accounts),
        )
    except ValueError as e:
        raise LedgerOpenError(f"Invalid genesis at {path}: {e}") from e


class FileBlockStore:
    def __init__(self, ledger_path: Path, full_slots: frozenset[int]):
        self.ledger_path = Path(ledger_path)
        self._full_slots = full_slots

    @classmethod
    def open(cls, ledger_path: Path) -> "FileBlockStore":
        ledger_path = Path(ledger_path)
        entries_path = ledger_path / ENTRIES_FILENAME
        if not entries_path.is_file():
            raise LedgerOpenError(f"{entries_path} not found")
        full: set[int] = set()
        try:
            with entries_path.open("rb") as f:
                for lineno, raw in enumerate(f, start=1):
                    try:
                        line = raw.decode("utf-8").strip()
                    except UnicodeDecodeError as e:
                        raise LedgerOpenError(
                            f"{entries_path}:{lineno}: not valid UTF-8: {e}"
                        ) from e
                    if not line:
                        continue
                    try:
                        slot = json.loads(line).get("slot")
                    except (json.JSONDecodeError, AttributeError):
                        continue
                    if isinstance(slot, int) and slot >= 0:
                        full.add(slot)
        except OSError as e:
            raise LedgerOpenError(f"Failed to read {entries_path}: {e}") from e
        logger.info(
            "[ledger] Opened %s (%d produced slots)", ledger_path, len(full)
        )
        return cls(ledger_path, frozenset(full))

    def is_full(self, slot: int) -> bool:
        return slot in self._full_slots

    def iter_entries(self) -> Iterator[EntryRecord]:
        path = self.ledger_path / ENTRIES_FILENAME
        with path.open("rb") as f:
            for lineno, raw in enumerate(f, start=1):
                try:
                    line = raw.decode("utf-8").strip()
                except UnicodeDecodeError as e:
                    raise ReplayError(f"{path}:{lineno}: not valid UTF-8: {e}") from e
                if not line:
                    continue
                try:
                    yield EntryRecord.model_validate_json(line)
                except ValidationError as e:
                    raise ReplayError(f"{path}:{lineno}: malformed entry: {e}") from e

    def load_leader_schedule(self) -> LeaderScheduleCache:
        path = self.ledger_path / LEADER_SCHEDULE_FILENAME
        try:
            record = LeaderScheduleRecord.model_validate(_read_json(path))
            leaders = tuple(ValidatorIdentity.from_string(s) for s in record.leaders)
        except ValueError as e:
            raise LedgerOpenError(f"Invalid leader schedule at {path}: {e}") from e
        return LeaderScheduleCache(first_slot=record.first_slot, leaders=leaders)
