from fastapi import APIRouter, Depends

from ....core.dependencies import get_content_service
from ....services.content_service import ContentService
from ...api.schemas.content_schemas import PageEnvelope, PageResponse

router = APIRouter(prefix="/api/cms", tags=["Content"])


@router.get("/{slug}", response_model=PageEnvelope)
async def get_page(
    slug: str,
    content_service: ContentService = Depends(get_content_service),
) -> PageEnvelope:
    page = content_service.get_published_page(slug)
    return PageEnvelope(page=PageResponse.model_validate(page))
