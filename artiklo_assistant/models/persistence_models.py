# artiklo_assistant/models/persistence_models.py
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class PersistedDocument(BaseModel):
    """One row of the ``documents`` table. Written once, never updated."""

    user_id: str
    original_text: str
    simplified_text: str
    summary: str = ""
    action_plan: str = ""
    entities: Optional[Any] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_row(self) -> dict:
        # created_at is assigned by the table default
        return self.model_dump(mode="json", exclude={"created_at"})


class PersistenceReport(BaseModel):
    saved: bool = False
    credit_decremented: bool = False
    warnings: List[str] = Field(default_factory=list)
