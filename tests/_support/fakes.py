"""Recording fakes for the transport and environment probe."""

from typing import Any

from snsreport.framework.transport import Credentials


class RecordingTransport:
    """Transport that records publish calls instead of sending them."""

    def __init__(self, message_id: str = "msg-0001", error: Exception | None = None):
        self.calls: list[dict[str, Any]] = []
        self._message_id = message_id
        self._error = error

    def publish(self, topic_arn: str, subject: str, body: str, credentials: Credentials) -> str | None:
        self.calls.append(
            {
                "topic_arn": topic_arn,
                "subject": subject,
                "body": body,
                "credentials": credentials,
            }
        )
        if self._error is not None:
            raise self._error
        return self._message_id


class RecordingProbe:
    """Environment probe returning canned values and counting lookups."""

    def __init__(self, values: dict[str, str] | None = None):
        self.values = values or {}
        self.calls: list[str] = []

    def resolve(self, field_name: str) -> str | None:
        self.calls.append(field_name)
        return self.values.get(field_name)
