"""Service for published CMS pages."""

from parkease.domain.errors import NotFound
from parkease.domain.models.content import ContentPage
from parkease.domain.ports.persistence import ContentRepository


class ContentService:
    def __init__(self, content_repository: ContentRepository):
        self.content_repository = content_repository

    def get_published_page(self, slug: str) -> ContentPage:
        page = self.content_repository.get_page_by_slug(slug.strip())
        if not page:
            raise NotFound("Page not found.")
        return page
