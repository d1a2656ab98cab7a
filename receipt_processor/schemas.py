from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from typing import Dict, List, Optional, Tuple
from datetime import datetime, timezone

# Request bodies use the camelCase keys of the public API. A missing or
# null field decodes to its empty value; a value of the wrong JSON type
# is still a malformed body.
class ItemIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    short_description: StrictStr = Field(default="", alias="shortDescription")
    price: StrictStr = ""

    @field_validator("short_description", "price", mode="before")
    @classmethod
    def null_to_empty(cls, value):
        return "" if value is None else value

class ReceiptIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    retailer: StrictStr = ""
    purchase_date: StrictStr = Field(default="", alias="purchaseDate")
    purchase_time: StrictStr = Field(default="", alias="purchaseTime")
    items: List[ItemIn] = Field(default_factory=list)
    total: StrictStr = ""

    @field_validator("retailer", "purchase_date", "purchase_time", "total", mode="before")
    @classmethod
    def null_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("items", mode="before")
    @classmethod
    def null_items(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            return [{} if i is None else i for i in value]
        return value

class IdResponse(BaseModel):
    id: str

class PointsResponse(BaseModel):
    points: str

class EvidenceResponse(BaseModel):
    id: str
    points: int
    rules: Dict[str, int]
    skipped: Dict[str, str]
    created_at: datetime

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class ScoredReceipt(BaseModel):
    """
    A receipt after ingestion: the submitted fields plus its id and score.
    Frozen; points are computed once and never recomputed.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    retailer: str
    purchase_date: str
    purchase_time: str
    items: Tuple[ItemIn, ...]
    total: str
    points: int
    rules: Dict[str, int] = Field(default_factory=dict)
    skipped: Dict[str, str] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)

    def evidence(self) -> EvidenceResponse:
        return EvidenceResponse(id=self.id, points=self.points, rules=dict(self.rules),
                                skipped=dict(self.skipped), created_at=self.created_at)

class ErrorResponse(BaseModel):
    detail: str
    errors: Optional[list] = None
