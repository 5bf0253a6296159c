from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigError

REPO_ROOT = Path(__file__).resolve().parents[2]
ENV_CANDIDATES = [REPO_ROOT / '.env']

REQUIRED_PUBLISH_ENV = (
    'AWS_ACCESS_KEY_ID',
    'AWS_SECRET_ACCESS_KEY',
    'AWS_REGION',
    'S3_BUCKET_NAME',
    'CLOUDFRONT_DISTRIBUTION_ID'
)
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass(frozen=True)
class Settings:
    aws_access_key_id: str
    aws_secret_access_key: str
    aws_region: str
    s3_bucket_name: str
    cloudfront_distribution_id: str
    s3_region: str
    s3_endpoint_url: str | None
    mainnet_filter: str
    testnet_filter: str
    directory_concurrency: int
    pushgateway_url: str | None
    log_level: str


def load_env_file(path: Path, environ: dict[str, str] | None = None) -> None:
    target = os.environ if environ is None else environ
    if not path.exists():
        return

    try:
        lines = path.read_text(encoding='utf-8').splitlines()
    except OSError:
        return

    for raw in lines:
        line = raw.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        if line.startswith('export '):
            line = line[len('export '):]
        key, value = line.split('=', 1)
        key = key.strip()
        if not key:
            continue
        cleaned = value.strip().strip("'").strip('"')
        # Real environment wins over the file.
        if target.get(key, '').strip():
            continue
        target[key] = cleaned


def load_known_env_files() -> None:
    for path in ENV_CANDIDATES:
        load_env_file(path)


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, '').strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f'{name} must be an integer, got {raw!r}') from exc
    if value <= 0:
        raise ConfigError(f'{name} must be positive, got {value}')
    return value


def _env_optional(env: Mapping[str, str], name: str) -> str | None:
    value = env.get(name, '').strip()
    return value or None


def settings_from_env(environ: Mapping[str, str] | None = None, *, require_publish: bool = True) -> Settings:
    env = os.environ if environ is None else environ

    if require_publish:
        missing = [name for name in REQUIRED_PUBLISH_ENV if not env.get(name, '').strip()]
        if missing:
            raise ConfigError(f"{', '.join(missing)} missing in environment")

    log_level = env.get('LOG_LEVEL', '').strip().upper() or 'INFO'
    if log_level not in LOG_LEVELS:
        raise ConfigError(f'LOG_LEVEL must be one of {", ".join(LOG_LEVELS)}, got {log_level!r}')

    aws_region = env.get('AWS_REGION', '').strip()
    return Settings(
        aws_access_key_id=env.get('AWS_ACCESS_KEY_ID', '').strip(),
        aws_secret_access_key=env.get('AWS_SECRET_ACCESS_KEY', '').strip(),
        aws_region=aws_region,
        s3_bucket_name=env.get('S3_BUCKET_NAME', '').strip(),
        cloudfront_distribution_id=env.get('CLOUDFRONT_DISTRIBUTION_ID', '').strip(),
        s3_region=env.get('S3_REGION', '').strip() or aws_region,
        s3_endpoint_url=_env_optional(env, 'S3_ENDPOINT_URL'),
        mainnet_filter=env.get('CHAIN_FILTER_MAINNET', '').strip(),
        testnet_filter=env.get('CHAIN_FILTER_TESTNET', '').strip(),
        directory_concurrency=_env_int(env, 'DIRECTORY_CONCURRENCY', 4),
        pushgateway_url=_env_optional(env, 'PROMETHEUS_PUSHGATEWAY_URL'),
        log_level=log_level
    )
