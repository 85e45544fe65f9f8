from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class PageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    slug: str
    title: str
    content: str
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    published_at: Optional[datetime] = None
    updated_at: datetime


class PageEnvelope(BaseModel):
    page: PageResponse
