"""DynamoDB cache backend for serverless deployments.

Table layout: partition key ``cache_key`` (string), ``value`` holding the JSON payload,
and ``expires_at`` (epoch seconds) configured as the table's TTL attribute. DynamoDB
deletes expired items lazily, so reads compare ``expires_at`` themselves.
"""

import json
import logging
import time
from collections.abc import Callable
from typing import Any

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from menu_catalog_service.cache.base_cache import CacheProvider
from menu_catalog_service.errors import CacheProviderError

logger = logging.getLogger(__name__)

KEY_ATTRIBUTE = "cache_key"
VALUE_ATTRIBUTE = "value"
EXPIRY_ATTRIBUTE = "expires_at"


class DynamoDBCacheProvider(CacheProvider):
    """Cache stored in a DynamoDB table shared by every Lambda container."""

    backend_name = "dynamodb"

    def __init__(
        self,
        dynamodb_resource: DynamoDBServiceResource,
        table_name: str,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the DynamoDB cache.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the cache table
            clock: Wall-clock time source in epoch seconds (injectable for tests)
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)
        self._clock = clock

    def _is_live(self, item: dict[str, Any]) -> bool:
        return int(item.get(EXPIRY_ATTRIBUTE, 0)) > self._clock()

    def _get_live_item(self, key: str) -> dict[str, Any] | None:
        try:
            response = self.table.get_item(Key={KEY_ATTRIBUTE: key}, ConsistentRead=True)
        except ClientError as e:
            logger.error(f"Failed to read cache key {key}: {e}")
            raise CacheProviderError(f"DynamoDB get failed: {e}") from e

        item = response.get("Item")
        if item is None or not self._is_live(item):
            return None
        return item

    async def get(self, key: str) -> Any | None:
        item = self._get_live_item(key)
        if item is None:
            return None
        return json.loads(str(item[VALUE_ATTRIBUTE]))

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        item = {
            KEY_ATTRIBUTE: key,
            VALUE_ATTRIBUTE: json.dumps(value),
            EXPIRY_ATTRIBUTE: int(self._clock()) + ttl_seconds,
        }
        try:
            self.table.put_item(Item=item)
        except ClientError as e:
            logger.error(f"Failed to write cache key {key}: {e}")
            raise CacheProviderError(f"DynamoDB set failed: {e}") from e

    async def delete(self, key: str) -> bool:
        try:
            response = self.table.delete_item(Key={KEY_ATTRIBUTE: key}, ReturnValues="ALL_OLD")
        except ClientError as e:
            logger.error(f"Failed to delete cache key {key}: {e}")
            raise CacheProviderError(f"DynamoDB delete failed: {e}") from e

        old_item = response.get("Attributes")
        return old_item is not None and self._is_live(old_item)

    async def has(self, key: str) -> bool:
        return self._get_live_item(key) is not None

    async def clear(self, prefix: str | None = None) -> None:
        """Delete matching items one scan page at a time."""
        scan_kwargs: dict[str, Any] = {"ProjectionExpression": KEY_ATTRIBUTE}
        if prefix:
            scan_kwargs["FilterExpression"] = Attr(KEY_ATTRIBUTE).begins_with(prefix)

        removed = 0
        try:
            while True:
                response = self.table.scan(**scan_kwargs)
                items = response.get("Items", [])
                if items:
                    with self.table.batch_writer() as batch:
                        for item in items:
                            batch.delete_item(Key={KEY_ATTRIBUTE: item[KEY_ATTRIBUTE]})
                    removed += len(items)

                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key

        except ClientError as e:
            logger.error(f"Failed to clear cache prefix {prefix}: {e}")
            raise CacheProviderError(f"DynamoDB clear failed: {e}") from e

        logger.debug(f"Cleared {removed} DynamoDB cache items with prefix {prefix}")
