from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from . import metrics
from .models import ChainRecord, NetworkDescriptor, ResultEnvelope
from .transform import TransformOutcome, transform_network

LOGGER = logging.getLogger('chains.aggregator')

DEFAULT_CONCURRENCY = 4


class NetworkSource(Protocol):
    async def list_networks(self) -> list[str]: ...

    async def fetch_network(self, path: str) -> NetworkDescriptor: ...


def parse_filter(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(',') if part.strip()]


async def fetch_descriptors(
    client: NetworkSource,
    paths: list[str],
    concurrency: int = DEFAULT_CONCURRENCY
) -> list[NetworkDescriptor]:
    semaphore = asyncio.Semaphore(concurrency)

    async def fetch_one(path: str) -> NetworkDescriptor:
        async with semaphore:
            return await client.fetch_network(path)

    # A single failed fetch aborts the whole batch.
    return list(await asyncio.gather(*(fetch_one(path) for path in paths)))


def merge_outcomes(outcomes: list[TransformOutcome], environment: str) -> dict[str, ChainRecord]:
    record: dict[str, ChainRecord] = {}
    for outcome in outcomes:
        if outcome.record is None:
            LOGGER.warning('%s environment=%s', outcome.detail, environment)
            metrics.record_skipped(environment, outcome.reason or 'unknown')
            continue
        record[outcome.path] = outcome.record
        metrics.record_published(environment)
    return record


async def make_record(
    client: NetworkSource,
    network_filter: str = '',
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
    environment: str = 'mainnet'
) -> dict[str, ChainRecord]:
    paths = parse_filter(network_filter)
    if not paths:
        paths = await client.list_networks()

    LOGGER.info('fetching networks environment=%s count=%s concurrency=%s', environment, len(paths), concurrency)
    descriptors = await fetch_descriptors(client, paths, concurrency=concurrency)
    outcomes = [transform_network(descriptor) for descriptor in descriptors]
    record = merge_outcomes(outcomes, environment)
    LOGGER.info(
        'built chain records environment=%s kept=%s skipped=%s',
        environment,
        len(record),
        len(outcomes) - len(record)
    )
    return record


async def generate(
    mainnet_client: NetworkSource,
    testnet_client: NetworkSource,
    *,
    mainnet_filter: str = '',
    testnet_filter: str = '',
    concurrency: int = DEFAULT_CONCURRENCY
) -> ResultEnvelope:
    LOGGER.info('generating chain list from cosmos.directory')
    mainnet, testnet = await asyncio.gather(
        make_record(mainnet_client, mainnet_filter, concurrency=concurrency, environment='mainnet'),
        make_record(testnet_client, testnet_filter, concurrency=concurrency, environment='testnet')
    )
    return ResultEnvelope(mainnet=mainnet, testnet=testnet)
