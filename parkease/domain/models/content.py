"""Content pages managed through the CMS."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class PageStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


@dataclass(slots=True)
class ContentPage:
    id: int
    slug: str
    title: str
    content: str
    meta_title: Optional[str]
    meta_description: Optional[str]
    status: PageStatus
    published_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime
