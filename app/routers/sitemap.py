# app/routers/sitemap.py
import logging

from fastapi import APIRouter, Depends, Response
from fastapi.responses import PlainTextResponse
from sqlmodel import Session

from app.core.config import get_settings
from app.core.errors import SitemapGenerationError
from app.database import get_session
from app.repositories.collection_repo import CollectionRepository
from app.repositories.product_repo import ProductRepository
from app.services.sitemap_service import SitemapService

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(tags=["SEO"])

service = SitemapService(
    ProductRepository(),
    CollectionRepository(),
    base_url=settings.SITE_URL,
)


@router.get("/sitemap.xml", response_class=Response)
def get_sitemap(session: Session = Depends(get_session)):
    """
    XML sitemap of the storefront for crawlers.

    500 with a plain-text body if the catalog cannot be read.
    """
    try:
        body = service.generate(session)
    except SitemapGenerationError as e:
        logger.exception(f"Sitemap generation error: {e.__cause__!r}")
        return PlainTextResponse(e.message, status_code=e.status_code)

    return Response(content=body, media_type="text/xml")
