# app/routers/products.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.collection_repo import CollectionRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.product import (
    CollectionCreate,
    CollectionRead,
    CollectionUpdate,
    ProductCreate,
    ProductRead,
    ProductUpdate,
)
from app.services.product_service import ProductService

router = APIRouter(tags=["Catalog"])

repo = ProductRepository()
collection_repo = CollectionRepository()
service = ProductService(repo, collection_repo)


# -------- Public endpoints --------


@router.get("/products", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
    only_active: bool = True,
    in_stock: bool = False,
):
    """
    List products.

    - `only_active=True` hides inactive products by default.
    - `in_stock=True` hides sold-out products.
    """
    return service.list_products(
        session, skip=skip, limit=limit, only_active=only_active, in_stock=in_stock
    )


@router.get("/products/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_product(session, product_id)


@router.get("/collections", response_model=list[CollectionRead])
def list_collections(
    session: Session = Depends(get_session),
    only_active: bool = True,
):
    return service.list_collections(session, only_active=only_active)


# -------- Admin endpoints --------


@router.post(
    "/products",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    List a new product (admin only).
    """
    return service.create_product(session, payload)


@router.patch(
    "/products/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an existing product (admin only). Bumps `updated_at`.
    """
    return service.update_product(session, product_id, payload)


@router.post(
    "/collections",
    response_model=CollectionRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_collection(
    payload: CollectionCreate,
    session: Session = Depends(get_session),
):
    return service.create_collection(session, payload)


@router.patch(
    "/collections/{collection_id}",
    response_model=CollectionRead,
    dependencies=[Depends(require_admin)],
)
def update_collection(
    collection_id: uuid.UUID,
    payload: CollectionUpdate,
    session: Session = Depends(get_session),
):
    return service.update_collection(session, collection_id, payload)
