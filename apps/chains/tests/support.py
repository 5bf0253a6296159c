from __future__ import annotations

import asyncio
from typing import Any

from apps.chains.config import Settings, settings_from_env
from apps.chains.errors import DirectoryError
from apps.chains.models import NetworkDescriptor

PUBLISH_ENV = {
    'AWS_ACCESS_KEY_ID': 'AKIATEST',
    'AWS_SECRET_ACCESS_KEY': 'secret',
    'AWS_REGION': 'us-east-1',
    'S3_BUCKET_NAME': 'graz-cache',
    'CLOUDFRONT_DISTRIBUTION_ID': 'E2EXAMPLE'
}


def publish_settings(**extra: str) -> Settings:
    return settings_from_env({**PUBLISH_ENV, **extra})


def atom_asset() -> dict[str, Any]:
    return {
        'denom': 'uatom',
        'denom_units': [
            {'denom': 'uatom', 'exponent': 0},
            {'denom': 'atom', 'exponent': 6}
        ],
        'coingecko_id': 'cosmos',
        'decimals': 6
    }


def chain_payload(path: str = 'cosmoshub', **overrides: Any) -> dict[str, Any]:
    chain = {
        'path': path,
        'name': path,
        'chain_name': path,
        'pretty_name': path.title(),
        'chain_id': f'{path}-4',
        'bech32_prefix': 'cosmos',
        'slip44': 118,
        'assets': [atom_asset()],
        'fees': {
            'fee_tokens': [
                {
                    'denom': 'uatom',
                    'low_gas_price': 0.01,
                    'average_gas_price': 0.025,
                    'high_gas_price': 0.04
                }
            ]
        },
        'apis': {
            'rest': [{'address': f'https://rest.cosmos.directory/{path}', 'provider': 'cosmos.directory'}],
            'rpc': [{'address': f'https://rpc.cosmos.directory/{path}', 'provider': 'cosmos.directory'}]
        }
    }
    chain.update(overrides)
    return chain


def descriptor(path: str = 'cosmoshub', **overrides: Any) -> NetworkDescriptor:
    return NetworkDescriptor.model_validate(chain_payload(path, **overrides))


class FakeDirectory:
    def __init__(
        self,
        chains: dict[str, dict[str, Any]],
        listing: list[str] | None = None,
        failing: set[str] | None = None,
        delay: float = 0.01
    ) -> None:
        self.chains = chains
        self.listing = list(chains) if listing is None else listing
        self.failing = failing or set()
        self.delay = delay
        self.list_calls = 0
        self.fetched: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def __aenter__(self) -> FakeDirectory:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        return None

    async def list_networks(self) -> list[str]:
        self.list_calls += 1
        return list(self.listing)

    async def fetch_network(self, path: str) -> NetworkDescriptor:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if path in self.failing:
                raise DirectoryError(503, f'https://chains.example/{path}')
            self.fetched.append(path)
            return NetworkDescriptor.model_validate(self.chains[path])
        finally:
            self.in_flight -= 1
