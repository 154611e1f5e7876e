"""
Module: dynamodb.py
Description: DynamoDB-backed event store.

Stores undelivered events in a DynamoDB table keyed by event_id, so
pending deliveries survive restarts and host replacement.

Key Components:
- DynamoDBStore: EventStore implementation over a boto3 Table resource
- Payloads are stored as JSON strings to preserve types
- Datetimes are stored as ISO 8601 strings

Dependencies: boto3, botocore, json
"""

import json
from datetime import datetime
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import ClientError

from hookme.models.event import WebhookEvent
from hookme.storage.base import EventStore
from hookme.utils.logger import get_logger

logger = get_logger(__name__)


class DynamoDBStore(EventStore):
    """
    DynamoDB store for undelivered events.

    The table must use 'event_id' (string) as its hash key.

    Attributes:
        table_name: Name of the DynamoDB table
        dynamodb: boto3 DynamoDB resource
        table: boto3 DynamoDB table resource

    Example:
        >>> store = DynamoDBStore(table_name="hookme-pending-events")
        >>> store.set(event.id, event)
    """

    def __init__(self, table_name: str, region_name: Optional[str] = None):
        """
        Initialize DynamoDB store.

        Args:
            table_name: Name of the DynamoDB table
            region_name: AWS region; boto3 default resolution when None

        Raises:
            ValueError: If table_name is empty or invalid
        """
        if not table_name or not isinstance(table_name, str):
            raise ValueError("table_name must be a non-empty string")

        self.table_name = table_name
        self.dynamodb = boto3.resource('dynamodb', region_name=region_name)
        self.table = self.dynamodb.Table(table_name)

        logger.info(
            "DynamoDB store initialized",
            table_name=table_name
        )

    @staticmethod
    def _to_item(event_id: str, event: WebhookEvent) -> Dict[str, Any]:
        item = {
            'event_id': event_id,
            'provider': event.provider,
            # JSON string keeps floats and nested lists intact
            'payload': json.dumps(event.payload),
        }
        if event.created_at is not None:
            item['created_at'] = event.created_at.isoformat()
        return item

    @staticmethod
    def _from_item(item: Dict[str, Any]) -> WebhookEvent:
        payload = item.get('payload')
        if isinstance(payload, str):
            payload = json.loads(payload)

        created_at = item.get('created_at')
        return WebhookEvent(
            id=item['event_id'],
            provider=item.get('provider', ''),
            payload=payload,
            created_at=datetime.fromisoformat(created_at) if created_at else None
        )

    def _log_client_error(self, message: str, e: ClientError, **context) -> None:
        logger.error(
            message,
            table_name=self.table_name,
            error_code=e.response['Error']['Code'],
            error_message=e.response['Error']['Message'],
            **context
        )

    def set(self, event_id: str, event: WebhookEvent) -> None:
        try:
            self.table.put_item(Item=self._to_item(event_id, event))
        except ClientError as e:
            self._log_client_error("Failed to store event in DynamoDB", e, event_id=event_id)
            raise

    def get(self, event_id: str) -> Optional[WebhookEvent]:
        try:
            response = self.table.get_item(Key={'event_id': event_id})
        except ClientError as e:
            self._log_client_error("Failed to retrieve event from DynamoDB", e, event_id=event_id)
            raise

        if 'Item' not in response:
            return None
        return self._from_item(response['Item'])

    def delete(self, event_id: str) -> None:
        try:
            self.table.delete_item(Key={'event_id': event_id})
        except ClientError as e:
            self._log_client_error("Failed to delete event from DynamoDB", e, event_id=event_id)
            raise

    def has(self, event_id: str) -> bool:
        try:
            response = self.table.get_item(
                Key={'event_id': event_id},
                ProjectionExpression='event_id'
            )
        except ClientError as e:
            self._log_client_error("Failed to check event in DynamoDB", e, event_id=event_id)
            raise
        return 'Item' in response

    def _scan(self, **kwargs) -> list:
        items = []
        try:
            response = self.table.scan(**kwargs)
            items.extend(response.get('Items', []))
            while 'LastEvaluatedKey' in response:
                response = self.table.scan(
                    ExclusiveStartKey=response['LastEvaluatedKey'],
                    **kwargs
                )
                items.extend(response.get('Items', []))
        except ClientError as e:
            self._log_client_error("Failed to scan DynamoDB table", e)
            raise
        return items

    def get_all(self) -> Dict[str, WebhookEvent]:
        # Scans have no guaranteed order; creation time approximates insertion order
        items = sorted(self._scan(), key=lambda item: item.get('created_at', ''))
        return {item['event_id']: self._from_item(item) for item in items}

    def clear(self) -> None:
        items = self._scan(ProjectionExpression='event_id')
        try:
            with self.table.batch_writer() as batch:
                for item in items:
                    batch.delete_item(Key={'event_id': item['event_id']})
        except ClientError as e:
            self._log_client_error("Failed to clear DynamoDB table", e)
            raise

        logger.info(
            "DynamoDB store cleared",
            deleted=len(items),
            table_name=self.table_name
        )
