from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

import boto3

from .config import Settings
from .models import ResultEnvelope

LOGGER = logging.getLogger('chains.publisher')

CACHE_KEY = 'cosmos-directory-cache/graz-chains.json'
INVALIDATION_PATH = '/cosmos-directory-cache/*'


def _s3_client(settings: Settings) -> Any:
    return boto3.client(
        's3',
        region_name=settings.s3_region,
        endpoint_url=settings.s3_endpoint_url,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key
    )


def _cloudfront_client(settings: Settings) -> Any:
    return boto3.client(
        'cloudfront',
        region_name=settings.aws_region,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key
    )


class Publisher:
    def __init__(self, settings: Settings, s3_client: Any = None, cloudfront_client: Any = None) -> None:
        self.settings = settings
        self.s3 = s3_client if s3_client is not None else _s3_client(settings)
        self.cloudfront = cloudfront_client if cloudfront_client is not None else _cloudfront_client(settings)

    def upload(self, key: str, body: str) -> None:
        self.s3.put_object(
            ACL='public-read',
            Bucket=self.settings.s3_bucket_name,
            Key=key,
            Body=body.encode('utf-8'),
            ContentType='application/json'
        )
        LOGGER.info('uploaded key=%s bucket=%s bytes=%s', key, self.settings.s3_bucket_name, len(body))

    def invalidate(self, paths: list[str] | None = None) -> str:
        items = paths or [INVALIDATION_PATH]
        response = self.cloudfront.create_invalidation(
            DistributionId=self.settings.cloudfront_distribution_id,
            InvalidationBatch={
                'CallerReference': datetime.now(timezone.utc).isoformat(),
                'Paths': {
                    'Quantity': len(items),
                    'Items': items
                }
            }
        )
        invalidation_id = str(response.get('Invalidation', {}).get('Id', ''))
        LOGGER.info(
            'cloudfront invalidation created distribution=%s invalidation_id=%s',
            self.settings.cloudfront_distribution_id,
            invalidation_id
        )
        return invalidation_id

    async def publish(self, envelope: ResultEnvelope) -> None:
        body = envelope.to_json()
        # boto3 is blocking; invalidation only after the upload is acknowledged.
        await asyncio.to_thread(self.upload, CACHE_KEY, body)
        await asyncio.to_thread(self.invalidate)
