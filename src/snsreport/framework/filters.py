"""OpsWorks activity filter."""

from __future__ import annotations

from collections.abc import Sequence

from snsreport.core.context import ExecutionContext

ACTIVITY_ATTRIBUTE = "opsworks.activity"


class ActivityFilter:
    """
    Closed allow-list on the run's workflow activity.

    With no allow-list every run dispatches.  With one, a run dispatches
    only when its activity attribute is present and listed; a missing
    attribute never matches.
    """

    def __init__(self, attribute: str = ACTIVITY_ATTRIBUTE):
        self._attribute = attribute

    def should_dispatch(
        self,
        context: ExecutionContext,
        allow_list: Sequence[str] | None,
    ) -> bool:
        if not allow_list:
            return True
        activity = context.attribute(self._attribute)
        if activity is None:
            return False
        return activity in allow_list


__all__ = ["ACTIVITY_ATTRIBUTE", "ActivityFilter"]
