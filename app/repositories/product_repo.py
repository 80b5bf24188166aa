# app/repositories/product_repo.py
import uuid

from sqlmodel import Session, select

from app.models.product import Product


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        only_active: bool = True,
        in_stock: bool = False,
    ) -> list[Product]:
        stmt = select(Product)
        if only_active:
            stmt = stmt.where(Product.is_active == True)  # noqa: E712
        if in_stock:
            stmt = stmt.where(Product.stock > 0)
        stmt = stmt.order_by(Product.created_at, Product.id).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def list_in_stock(self, session: Session) -> list[Product]:
        """
        Every product with stock > 0, oldest first (sitemap feed).
        """
        stmt = (
            select(Product)
            .where(Product.stock > 0)
            .order_by(Product.created_at, Product.id)
        )
        return list(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product
