"""SNS transport.

Manifesto:
    Publishing is a single fire-and-forget call.  The transport owns the
    boto3 client and translates AWS failures into ``TransportError`` so the
    Dispatcher only has one failure type to care about at this stage.

Tags:
    snsreport, framework, transport, sns, boto3, aws

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from snsreport.core.errors import TransportError
from snsreport.core.logging import get_logger
from snsreport.framework.params import ParameterStore

DEFAULT_REGION = "us-east-1"

# SNS subjects: one line, at most 100 characters.
MAX_SUBJECT_LENGTH = 100


def clean_subject(subject: str) -> str:
    """Single line, at most ``MAX_SUBJECT_LENGTH`` characters."""
    subject = " ".join(subject.splitlines()).strip()
    return subject[:MAX_SUBJECT_LENGTH]


@dataclass(frozen=True)
class Credentials:
    """AWS credentials and region for one publish call."""

    access_key: str
    secret_key: str = field(repr=False)
    token: str | None = field(default=None, repr=False)
    region: str | None = None

    @classmethod
    def from_store(cls, store: ParameterStore) -> Credentials:
        return cls(
            access_key=store.get("access_key"),
            secret_key=store.get("secret_key"),
            token=store.get("token"),
            region=store.get("region"),
        )

    def cache_key(self) -> tuple[str | None, ...]:
        return (self.region, self.access_key, self.secret_key, self.token)


@runtime_checkable
class Transport(Protocol):
    """Delivers one message to a topic."""

    def publish(self, topic_arn: str, subject: str, body: str, credentials: Credentials) -> str | None:
        """Publish and return the service message id, if any."""
        ...


ClientFactory = Callable[[Credentials], Any]


def _default_client_factory(credentials: Credentials) -> Any:
    session = boto3.Session(
        aws_access_key_id=credentials.access_key,
        aws_secret_access_key=credentials.secret_key,
        aws_session_token=credentials.token,
        region_name=credentials.region or DEFAULT_REGION,
    )
    return session.client("sns")


class SnsTransport:
    """
    Amazon SNS transport over boto3.

    Clients are cached per (region, credentials) so a long-lived transport
    never publishes with another run's credentials.
    """

    def __init__(self, client_factory: ClientFactory | None = None, *, logger: Any = None):
        self._client_factory = client_factory or _default_client_factory
        self._clients: dict[tuple[str | None, ...], Any] = {}
        self._logger = logger or get_logger(__name__)

    def _client(self, credentials: Credentials) -> Any:
        key = credentials.cache_key()
        client = self._clients.get(key)
        if client is None:
            client = self._client_factory(credentials)
            self._clients[key] = client
        return client

    def publish(self, topic_arn: str, subject: str, body: str, credentials: Credentials) -> str | None:
        try:
            client = self._client(credentials)
            response = client.publish(TopicArn=topic_arn, Subject=clean_subject(subject), Message=body)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            raise TransportError(f"SNS publish failed ({code}): {e}", cause=e).with_context(
                stage="publish", topic_arn=topic_arn, error_code=code
            ) from e
        except BotoCoreError as e:
            raise TransportError(f"SNS publish failed: {e}", cause=e).with_context(
                stage="publish", topic_arn=topic_arn
            ) from e

        message_id = response.get("MessageId") if isinstance(response, dict) else None
        self._logger.info("sns_message_published", topic_arn=topic_arn, message_id=message_id)
        return message_id


__all__ = [
    "Credentials",
    "DEFAULT_REGION",
    "MAX_SUBJECT_LENGTH",
    "SnsTransport",
    "Transport",
    "clean_subject",
]
