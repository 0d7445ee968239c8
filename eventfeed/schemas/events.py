"""Raw and canonical event schemas."""

from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RawRecord(BaseModel):
    """Fields produced by a collector for one listing.

    Every field is optional here; whether a record is usable is the
    validator's decision, not the type system's.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: Optional[str] = None
    date: Union[dt.datetime, dt.date, str, None] = None
    source: Optional[str] = None
    source_url: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    cost: Optional[str] = None
    access: Optional[str] = None
    time: Optional[str] = None
    image_url: Optional[str] = None
    end_date: Union[dt.datetime, dt.date, str, None] = None
    categories: Optional[List[str]] = None


class CanonicalEvent(BaseModel):
    """Normalized event, ready to be upserted by ``hash``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    description: str = ""
    date: dt.date
    end_date: Optional[dt.date] = None
    source: str
    source_url: Optional[str] = None
    location: str = ""
    categories: List[str] = Field(default_factory=list, max_length=2)
    cost: Optional[str] = None
    access: Optional[str] = None
    time: Optional[str] = None
    image_url: Optional[str] = None
    scraped_at: dt.datetime
    hash: str = Field(min_length=16, max_length=16)
    content_hash: str = Field(min_length=16, max_length=16)

    def to_row(self) -> Dict[str, Any]:
        """Column values for the ``events`` table."""
        return self.model_dump(by_alias=False)
