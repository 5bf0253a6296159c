from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path

from . import metrics
from .aggregator import generate
from .config import Settings, load_known_env_files, settings_from_env
from .directory_client import create_client, create_testnet_client
from .errors import ConfigError
from .models import ResultEnvelope
from .publisher import Publisher

LOGGER = logging.getLogger('chains.main')
LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Publish the cosmos.directory chain cache to S3 + CloudFront')
    parser.add_argument('--mainnet-filter', default=None, help='Comma-separated mainnet network paths')
    parser.add_argument('--testnet-filter', default=None, help='Comma-separated testnet network paths')
    parser.add_argument('--output', type=Path, default=None, help='Also write the generated json to this path')
    parser.add_argument('--skip-publish', action='store_true', help='Build the cache without uploading it')
    return parser.parse_args(argv)


def _write_output(path: Path, envelope: ResultEnvelope) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(envelope.to_json() + '\n', encoding='utf-8')
    LOGGER.info('generated %s', path)


async def run(
    settings: Settings,
    *,
    publisher: Publisher | None = None,
    output: Path | None = None,
    skip_publish: bool = False
) -> ResultEnvelope:
    async with create_client() as mainnet_client, create_testnet_client() as testnet_client:
        envelope = await generate(
            mainnet_client,
            testnet_client,
            mainnet_filter=settings.mainnet_filter,
            testnet_filter=settings.testnet_filter,
            concurrency=settings.directory_concurrency
        )

    LOGGER.info(
        'generate complete mainnet=%s testnet=%s',
        len(envelope.mainnet),
        len(envelope.testnet)
    )
    if output is not None:
        _write_output(output, envelope)

    if skip_publish:
        LOGGER.info('publish skipped')
        return envelope

    await (publisher or Publisher(settings)).publish(envelope)
    metrics.mark_success()
    return envelope


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    load_known_env_files()

    try:
        settings = settings_from_env(require_publish=not args.skip_publish)
    except ConfigError:
        logging.basicConfig(format=LOG_FORMAT)
        LOGGER.exception('cron job failed: invalid configuration')
        return 1

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    overrides: dict[str, str] = {}
    if args.mainnet_filter is not None:
        overrides['mainnet_filter'] = args.mainnet_filter
    if args.testnet_filter is not None:
        overrides['testnet_filter'] = args.testnet_filter
    if overrides:
        settings = replace(settings, **overrides)

    try:
        asyncio.run(run(settings, output=args.output, skip_publish=args.skip_publish))
    except Exception:  # noqa: BLE001
        LOGGER.exception('cron job failed')
        return 1

    try:
        metrics.push_metrics(settings.pushgateway_url)
    except OSError as exc:
        LOGGER.warning('metrics push failed; job result unaffected: %s', exc)

    LOGGER.info('cron job completed successfully')
    return 0


if __name__ == '__main__':
    sys.exit(main())
