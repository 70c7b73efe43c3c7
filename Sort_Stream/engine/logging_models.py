import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


def new_log_id() -> str:
    """Return a unique identifier for a log entry."""
    return f"log_{uuid.uuid4()}"


class BaseLogEntry(BaseModel):
    """Common metadata for all log entries."""

    log_id: str = Field(default_factory=new_log_id)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    correlation_id: Optional[str] = None


class RunSummaryPayload(BaseModel):
    algorithm: str
    length: int
    seed: Optional[int] = None
    emitted: int
    dropped: int
    applied: int
    by_kind: Dict[str, int]
    elapsed_s: float
    cancelled: bool = False
    verified: bool
    failed_checks: List[str] = Field(default_factory=list)


class RunSummaryLog(BaseLogEntry):
    event_type: str = "SortRunSummary"
    payload: RunSummaryPayload
