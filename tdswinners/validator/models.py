from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping

from tdswinners.utils.identity import ValidatorIdentity


@dataclass(frozen=True)
class VoteRecordEntry:
    identity: ValidatorIdentity
    slot_confirmed: int
    observed_at_entry_index: int
    observed_at_slot: int


@dataclass(frozen=True)
class SegmentEntry:
    identity: ValidatorIdentity
    observed_at_entry_index: int


# Write-phase containers, owned by a single VoteObserver while the ledger replays.
VoterRecord = dict[ValidatorIdentity, list[VoteRecordEntry]]
SlotVoterSegments = dict[int, list[SegmentEntry]]


@dataclass(frozen=True)
class VoteTrace:
    """Read-only view of the vote history once replay has returned."""

    voter_record: Mapping[ValidatorIdentity, tuple[VoteRecordEntry, ...]]
    slot_voter_segments: Mapping[int, tuple[SegmentEntry, ...]]
    entries_observed: int

    @classmethod
    def from_containers(
        cls,
        voter_record: VoterRecord,
        slot_voter_segments: SlotVoterSegments,
        entries_observed: int,
    ) -> "VoteTrace":
        return cls(
            voter_record=MappingProxyType(
                {k: tuple(v) for k, v in voter_record.items()}
            ),
            slot_voter_segments=MappingProxyType(
                {k: tuple(v) for k, v in slot_voter_segments.items()}
            ),
            entries_observed=entries_observed,
        )


@dataclass(frozen=True)
class WinnerEntry:
    identity: ValidatorIdentity
    metric_value: int | float
    details: str = field(default="", compare=False)

    def to_dict(self) -> dict[str, str | int | float]:
        return {
            "identity": str(self.identity),
            "metric_value": self.metric_value,
            "details": self.details,
        }


@dataclass(frozen=True)
class WinnerReport:
    """Ranked identities for one category, best first."""

    category: str
    winners: tuple[WinnerEntry, ...] = ()

    def __iter__(self) -> Iterator[WinnerEntry]:
        return iter(self.winners)

    def __len__(self) -> int:
        return len(self.winners)

    @property
    def identities(self) -> list[ValidatorIdentity]:
        return [w.identity for w in self.winners]

    def top(self, n: int | None) -> "WinnerReport":
        if not n or n <= 0:
            return self
        return WinnerReport(category=self.category, winners=self.winners[:n])

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "winners": [w.to_dict() for w in self.winners],
        }
