"""Call record entity for the recording directory double."""

from typing import Any

from pydantic import Field

from idbridge.domain.model.common import DomainModel


class CallRecord(DomainModel):
    """One logged directory invocation.

    ``ordinal`` increases by one per call, giving chronological order.
    """

    method: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    ordinal: int
