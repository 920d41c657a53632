# asset_deploy/storage/s3.py
"""AWS S3 storage backend with optional CloudFront invalidation"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

import boto3

from .base import StorageBackend

logger = logging.getLogger(__name__)


class S3Storage(StorageBackend):
    """AWS S3 storage implementation"""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize S3 storage

        Args:
            config: S3 configuration including:
                - bucket: S3 bucket name
                - cloudfront: CloudFront distribution id (optional)
                - region: AWS region (optional)
                - endpoint_url: Custom endpoint (for S3-compatible services)
                - acl: Canned ACL applied to uploads (optional)
        """
        super().__init__(config)
        self.bucket = self.config.get('bucket')
        self.distribution_id = self.config.get('cloudfront')
        self.session = None
        self.client = None
        self.cdn_client = None

        if not self.bucket:
            raise ValueError("S3 storage requires a bucket")

    @property
    def name(self) -> str:
        return f"s3://{self.bucket}"

    @property
    def can_invalidate(self) -> bool:
        return bool(self.distribution_id)

    async def _do_initialize(self) -> None:
        """Create boto3 clients; credentials come from the ambient AWS chain"""
        self.session = boto3.Session(region_name=self.config.get('region'))
        self.client = self.session.client('s3', endpoint_url=self.config.get('endpoint_url'))
        if self.distribution_id:
            self.cdn_client = self.session.client('cloudfront')

    async def put_object(self,
                         key: str,
                         body: bytes,
                         content_type: Optional[str] = None) -> None:
        """Upload bytes to S3"""
        await self.initialize()

        params = {
            'Bucket': self.bucket,
            'Key': key,
            'Body': body,
        }
        if content_type:
            params['ContentType'] = content_type
        if self.config.get('acl'):
            params['ACL'] = self.config['acl']

        # boto3 is synchronous, run in executor
        await asyncio.get_running_loop().run_in_executor(
            None, lambda: self.client.put_object(**params)
        )
        logger.debug(f"Uploaded s3://{self.bucket}/{key} ({len(body)} bytes)")

    async def invalidate(self, keys: List[str]) -> Optional[str]:
        """Invalidate published keys in one CloudFront batch"""
        if not self.distribution_id or not keys:
            return None

        await self.initialize()

        paths = sorted({'/' + key.lstrip('/') for key in keys})
        batch = {
            'Paths': {'Quantity': len(paths), 'Items': paths},
            'CallerReference': f"asset-deploy-{time.time_ns()}",
        }

        def _invalidate():
            response = self.cdn_client.create_invalidation(
                DistributionId=self.distribution_id,
                InvalidationBatch=batch,
            )
            return response['Invalidation']['Id']

        invalidation_id = await asyncio.get_running_loop().run_in_executor(None, _invalidate)
        logger.info(f"Created CloudFront invalidation {invalidation_id} for {len(paths)} path(s)")
        return invalidation_id

    async def _do_close(self) -> None:
        """Drop clients"""
        self.client = None
        self.cdn_client = None
        self.session = None
