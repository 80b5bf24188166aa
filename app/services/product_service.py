# app/services/product_service.py
import re
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.product import Collection, Product, utcnow
from app.repositories.collection_repo import CollectionRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.product import (
    CollectionCreate,
    CollectionUpdate,
    ProductCreate,
    ProductUpdate,
)


class ProductService:
    """
    Business logic for the catalog (products and collections).

    Responsibilities:
      - collection slug generation & uniqueness
      - existence checks for referenced collections
      - bumping updated_at on every change (drives sitemap lastmod)
      - admin-only operations (enforced at router via require_admin)
    """

    def __init__(self, repo: ProductRepository, collection_repo: CollectionRepository):
        self.repo = repo
        self.collection_repo = collection_repo

    # ----- Helpers -----

    @staticmethod
    def _slugify(raw: str) -> str:
        """
        Basic slugification:
          - lowercase
          - non-alphanumeric -> '-'
          - collapse multiple '-'
          - strip leading/trailing '-'
        """
        value = raw.strip().lower()
        value = re.sub(r"[^a-z0-9]+", "-", value)
        value = re.sub(r"-+", "-", value)
        value = value.strip("-")
        return value or "collection"

    def _ensure_unique_slug(
        self,
        session: Session,
        base_slug: str,
        exclude_id: uuid.UUID | None = None,
    ) -> str:
        """
        Ensure slug is unique by appending -2, -3, ... if needed.
        """
        slug = base_slug
        i = 2
        while True:
            existing = self.collection_repo.get_by_slug(session, slug)
            if existing is None or existing.id == exclude_id:
                return slug
            slug = f"{base_slug}-{i}"
            i += 1

    def _ensure_collection(self, session: Session, collection_id: uuid.UUID | None) -> None:
        if collection_id is None:
            return
        if self.collection_repo.get_by_id(session, collection_id) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Collection not found",
            )

    # ----- Products -----

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        only_active: bool = True,
        in_stock: bool = False,
    ) -> list[Product]:
        return self.repo.list_products(
            session, skip=skip, limit=limit, only_active=only_active, in_stock=in_stock
        )

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def create_product(self, session: Session, payload: ProductCreate) -> Product:
        self._ensure_collection(session, payload.collection_id)
        product = Product(**payload.model_dump())
        return self.repo.create(session, product)

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        product = self.get_product(session, product_id)
        data = payload.model_dump(exclude_unset=True)

        if "collection_id" in data:
            self._ensure_collection(session, data["collection_id"])

        for key, value in data.items():
            setattr(product, key, value)
        product.updated_at = utcnow()

        return self.repo.update(session, product)

    # ----- Collections -----

    def list_collections(self, session: Session, only_active: bool = True) -> list[Collection]:
        return self.collection_repo.list_collections(session, only_active=only_active)

    def create_collection(self, session: Session, payload: CollectionCreate) -> Collection:
        base_slug = self._slugify(payload.slug or payload.name)
        slug = self._ensure_unique_slug(session, base_slug)

        collection = Collection(
            name=payload.name,
            slug=slug,
            description=payload.description,
            is_active=payload.is_active,
        )
        return self.collection_repo.create(session, collection)

    def update_collection(
        self,
        session: Session,
        collection_id: uuid.UUID,
        payload: CollectionUpdate,
    ) -> Collection:
        collection = self.collection_repo.get_by_id(session, collection_id)
        if not collection:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Collection not found",
            )

        data = payload.model_dump(exclude_unset=True)
        if data.get("slug") is not None:
            data["slug"] = self._ensure_unique_slug(
                session, self._slugify(data["slug"]), exclude_id=collection.id
            )

        for key, value in data.items():
            setattr(collection, key, value)
        collection.updated_at = utcnow()

        return self.collection_repo.update(session, collection)
