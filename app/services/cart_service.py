# app/services/cart_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.product import Product
from app.models.user import User
from app.repositories.collection_repo import CollectionRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import ProductSnapshot
from app.services.cart_store import CartStorage, CartStore


class CartService:
    """
    Glue between the HTTP layer and CartStore.

    Responsibilities:
      - open the CartStore for a cart session, wired to the caller's auth
      - validate product existence and active flag
      - snapshot the product (with its collection name) for the cart line
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        collection_repo: CollectionRepository,
    ):
        self.product_repo = product_repo
        self.collection_repo = collection_repo

    def open_store(
        self,
        storage: CartStorage,
        session_key: str,
        user: User | None,
    ) -> CartStore:
        return CartStore(storage, session_key, is_authenticated=lambda: user is not None)

    def _get_valid_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product or not product.is_active:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def snapshot_product(self, session: Session, product_id: uuid.UUID) -> ProductSnapshot:
        product = self._get_valid_product(session, product_id)

        collection_name = None
        if product.collection_id is not None:
            collection = self.collection_repo.get_by_id(session, product.collection_id)
            if collection is not None:
                collection_name = collection.name

        return ProductSnapshot(
            id=str(product.id),
            name=product.name,
            price=product.price,
            discount_price=product.discount_price,
            image=product.image,
            stock=product.stock,
            type=product.type,
            collection=collection_name,
        )
