from __future__ import annotations

import logging
from typing import Any

import aiohttp

from .errors import DirectoryError
from .models import NetworkDescriptor, NetworkSummary

LOGGER = logging.getLogger('chains.directory')

MAINNET_DIRECTORY_URL = 'https://chains.cosmos.directory'
TESTNET_DIRECTORY_URL = 'https://chains.testcosmos.directory'


class DirectoryClient:
    def __init__(self, base_url: str, session: aiohttp.ClientSession | None = None) -> None:
        self.base_url = base_url.rstrip('/')
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> DirectoryClient:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def _get_json(self, url: str) -> dict[str, Any]:
        if self._session is None:
            raise RuntimeError('DirectoryClient used outside of its async context')

        async with self._session.get(url) as resp:
            if resp.status >= 400:
                detail = (await resp.text())[:200]
                raise DirectoryError(resp.status, url, detail)
            payload = await resp.json(content_type=None)

        if not isinstance(payload, dict):
            raise DirectoryError(resp.status, url, 'response is not a json object')
        return payload

    async def list_networks(self) -> list[str]:
        payload = await self._get_json(f'{self.base_url}/')
        raw_chains = payload.get('chains')
        if not isinstance(raw_chains, list):
            raise DirectoryError(200, self.base_url, 'missing chains list')

        summaries = [NetworkSummary.model_validate(chain) for chain in raw_chains if isinstance(chain, dict)]
        LOGGER.info('directory listed networks base_url=%s count=%s', self.base_url, len(summaries))
        return [summary.path for summary in summaries if summary.path]

    async def fetch_network(self, path: str) -> NetworkDescriptor:
        url = f'{self.base_url}/{path}'
        payload = await self._get_json(url)
        chain = payload.get('chain')
        if not isinstance(chain, dict):
            raise DirectoryError(200, url, 'missing chain object')

        LOGGER.debug('directory fetched network path=%s', path)
        return NetworkDescriptor.model_validate({**chain, 'path': chain.get('path') or path})


def create_client(session: aiohttp.ClientSession | None = None) -> DirectoryClient:
    return DirectoryClient(MAINNET_DIRECTORY_URL, session=session)


def create_testnet_client(session: aiohttp.ClientSession | None = None) -> DirectoryClient:
    return DirectoryClient(TESTNET_DIRECTORY_URL, session=session)
