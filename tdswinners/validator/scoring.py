from logging import getLogger
from statistics import median
from typing import Callable

from tdswinners.utils.identity import ValidatorIdentity
from tdswinners.utils.prometheus import CATEGORY_LEADER_METRIC, CATEGORY_RANKED
from tdswinners.validator.models import WinnerEntry, WinnerReport

logger = getLogger(__name__)


def rank_by_metric(
    metrics: dict[ValidatorIdentity, int | float],
    *,
    descending: bool,
) -> list[tuple[ValidatorIdentity, int | float]]:
    """
    Order identities by metric, breaking ties by identity byte value ascending.

    Insertion order of ``metrics`` never affects the result.
    """
    if descending:
        key = lambda item: (-item[1], item[0].raw)
    else:
        key = lambda item: (item[1], item[0].raw)
    return sorted(metrics.items(), key=key)


def build_report(
    category: str,
    metrics: dict[ValidatorIdentity, int | float],
    *,
    descending: bool,
    describe: Callable[[ValidatorIdentity, int | float], str] | None = None,
) -> WinnerReport:
    ranked = rank_by_metric(metrics, descending=descending)
    winners = tuple(
        WinnerEntry(
            identity=identity,
            metric_value=value,
            details=describe(identity, value) if describe else "",
        )
        for identity, value in ranked
    )
    CATEGORY_RANKED.labels(category=category).set(len(winners))
    if winners:
        CATEGORY_LEADER_METRIC.labels(category=category).set(float(winners[0].metric_value))
        logger.info(
            "[%s] %d ranked, leader=%s metric=%s",
            category,
            len(winners),
            winners[0].identity,
            winners[0].metric_value,
        )
    else:
        logger.info("[%s] Nothing to rank", category)
    return WinnerReport(category=category, winners=winners)


def median_offset(offsets: list[int]) -> float:
    """Median of per-slot entry offsets; the mean of the middle pair when even."""
    return float(median(offsets))


def fraction(numerator: int, denominator: int) -> float | None:
    if denominator <= 0:
        return None
    return numerator / denominator
