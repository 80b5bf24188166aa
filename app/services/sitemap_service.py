# app/services/sitemap_service.py
import re
import xml.etree.ElementTree as ET
from datetime import date, datetime, timezone

from sqlmodel import Session

from app.core.errors import SitemapGenerationError
from app.models.product import Collection
from app.repositories.collection_repo import CollectionRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.sitemap import ChangeFrequency, SitemapEntry

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

# Marketing pages listed right after the homepage, in this order.
STATIC_PAGES: tuple[str, ...] = (
    "/products",
    "/about",
    "/contact",
    "/sell",
    "/repair",
    "/recycle",
    "/business",
)

HOMEPAGE_PRIORITY = 1.0
STATIC_PRIORITY = 0.8
COLLECTION_PRIORITY = 0.8
PRODUCT_PRIORITY = 0.7


def collection_slug(collection: Collection) -> str:
    """
    Stored slug, or the lowercased name with whitespace runs turned into '-'.
    """
    if collection.slug:
        return collection.slug
    return re.sub(r"\s+", "-", collection.name.lower())


def to_utc_date(value: datetime | None, fallback: date) -> date:
    if value is None:
        return fallback
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


class SitemapService:
    """
    Builds the sitemap feed from current catalog state.

    Entry order is fixed: homepage, static pages, active collections,
    in-stock products. The document is either complete or not produced at
    all; a database error surfaces as SitemapGenerationError.
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        collection_repo: CollectionRepository,
        base_url: str,
    ):
        self.product_repo = product_repo
        self.collection_repo = collection_repo
        self.base_url = base_url.rstrip("/")

    def build_entries(self, session: Session, today: date | None = None) -> list[SitemapEntry]:
        today = today or datetime.now(timezone.utc).date()

        try:
            products = self.product_repo.list_in_stock(session)
            collections = self.collection_repo.list_active(session)
        except Exception as e:
            raise SitemapGenerationError() from e

        entries = [
            SitemapEntry(
                url=f"{self.base_url}/",
                last_modified=today,
                change_frequency=ChangeFrequency.DAILY,
                priority=HOMEPAGE_PRIORITY,
            )
        ]

        for path in STATIC_PAGES:
            entries.append(
                SitemapEntry(
                    url=f"{self.base_url}{path}",
                    last_modified=today,
                    change_frequency=ChangeFrequency.WEEKLY,
                    priority=STATIC_PRIORITY,
                )
            )

        for collection in collections:
            entries.append(
                SitemapEntry(
                    url=f"{self.base_url}/products/{collection_slug(collection)}",
                    last_modified=to_utc_date(collection.updated_at, today),
                    change_frequency=ChangeFrequency.WEEKLY,
                    priority=COLLECTION_PRIORITY,
                )
            )

        for product in products:
            entries.append(
                SitemapEntry(
                    url=f"{self.base_url}/product/{product.id}",
                    last_modified=to_utc_date(product.updated_at, today),
                    change_frequency=ChangeFrequency.WEEKLY,
                    priority=PRODUCT_PRIORITY,
                )
            )

        return entries

    @staticmethod
    def render(entries: list[SitemapEntry]) -> bytes:
        """
        Serialize entries to a UTF-8 <urlset> document.
        """
        urlset = ET.Element("urlset", xmlns=SITEMAP_NS)
        for entry in entries:
            url = ET.SubElement(urlset, "url")
            ET.SubElement(url, "loc").text = entry.url
            ET.SubElement(url, "lastmod").text = entry.last_modified.isoformat()
            ET.SubElement(url, "changefreq").text = entry.change_frequency.value
            ET.SubElement(url, "priority").text = f"{entry.priority:.1f}"

        ET.indent(urlset, space="  ")
        return ET.tostring(urlset, encoding="utf-8", xml_declaration=True)

    def generate(self, session: Session, today: date | None = None) -> bytes:
        return self.render(self.build_entries(session, today=today))
