# ---- Prometheus ----
from logging import getLogger

from prometheus_client import Counter, Gauge, CollectorRegistry, start_http_server

from tdswinners.utils.settings import get_settings

logger = getLogger(__name__)

PROM_REG = CollectorRegistry(auto_describe=True)

ENTRIES_OBSERVED_TOTAL = Counter(
    "entries_observed_total", "Replayed entries seen by the vote observer", registry=PROM_REG
)
VOTES_RECORDED_TOTAL = Counter(
    "votes_recorded_total", "New vote confirmations recorded", registry=PROM_REG
)
REPLAY_LAST_SLOT = Gauge(
    "replay_last_slot", "Last slot delivered by the ledger replay", registry=PROM_REG
)
CATEGORY_RANKED = Gauge(
    "category_ranked", "Identities ranked per category", ["category"], registry=PROM_REG
)
CATEGORY_LEADER_METRIC = Gauge(
    "category_leader_metric",
    "Metric value of the top ranked identity per category",
    ["category"],
    registry=PROM_REG,
)


def _start_metrics() -> bool:
    settings = get_settings()
    if not settings.TDS_METRICS_PORT:
        return False
    try:
        start_http_server(
            settings.TDS_METRICS_PORT, settings.TDS_METRICS_ADDR, registry=PROM_REG
        )
    except OSError as e:
        logger.warning("[metrics] Could not start exporter: %s", e)
        return False
    return True
