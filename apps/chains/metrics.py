from __future__ import annotations

import logging
import time

from prometheus_client import CollectorRegistry, Counter, Gauge, push_to_gateway

LOGGER = logging.getLogger('chains.metrics')

REGISTRY = CollectorRegistry()

NETWORKS_PUBLISHED_TOTAL = Counter(
    'chain_cache_networks_published_total',
    'Chain records kept for publication',
    ['environment'],
    registry=REGISTRY
)
NETWORKS_SKIPPED_TOTAL = Counter(
    'chain_cache_networks_skipped_total',
    'Directory networks dropped during transformation',
    ['environment', 'reason'],
    registry=REGISTRY
)
LAST_SUCCESS_UNIXTIME = Gauge(
    'chain_cache_last_success_unixtime',
    'Unix time of the last successful publication',
    registry=REGISTRY
)


def record_published(environment: str) -> None:
    NETWORKS_PUBLISHED_TOTAL.labels(environment=environment).inc()


def record_skipped(environment: str, reason: str) -> None:
    NETWORKS_SKIPPED_TOTAL.labels(environment=environment, reason=reason).inc()


def mark_success() -> None:
    LAST_SUCCESS_UNIXTIME.set(time.time())


def push_metrics(gateway_url: str | None, job: str = 'chain-cache-publish') -> None:
    if not gateway_url:
        return
    push_to_gateway(gateway_url, job=job, registry=REGISTRY)
    LOGGER.info('metrics pushed gateway=%s job=%s', gateway_url, job)
