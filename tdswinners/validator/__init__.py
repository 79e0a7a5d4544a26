from tdswinners.validator.models import (
    SegmentEntry,
    SlotVoterSegments,
    VoteRecordEntry,
    VoterRecord,
    VoteTrace,
    WinnerEntry,
    WinnerReport,
)
from tdswinners.validator.exclusion import ExclusionPolicy
from tdswinners.validator.observer import VoteObserver, on_entry
from tdswinners.validator.scoring import build_report, median_offset, rank_by_metric

__all__ = [
    "SegmentEntry",
    "SlotVoterSegments",
    "VoteRecordEntry",
    "VoterRecord",
    "VoteTrace",
    "WinnerEntry",
    "WinnerReport",
    "ExclusionPolicy",
    "VoteObserver",
    "on_entry",
    "build_report",
    "median_offset",
    "rank_by_metric",
]
