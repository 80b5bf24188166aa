# app/routers/cart.py
import uuid

from fastapi import APIRouter, Depends, Request, Response
from sqlmodel import Session

from app.core.auth import get_current_user
from app.core.cart_cookie import set_cart_cookie
from app.core.config import get_settings
from app.database import get_session
from app.models.user import User
from app.repositories.cart_repo import CartRepository, is_valid_session_key
from app.repositories.collection_repo import CollectionRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import CartItemCreate, CartItemUpdate, CartSummary
from app.services.cart_service import CartService
from app.services.cart_store import CartStore

settings = get_settings()

router = APIRouter(prefix="/cart", tags=["Cart"])

product_repo = ProductRepository()
collection_repo = CollectionRepository()
service = CartService(product_repo, collection_repo)


def get_cart_storage(session: Session = Depends(get_session)) -> CartRepository:
    return CartRepository(session, ttl_seconds=settings.CART_TTL_SECONDS)


def get_cart_store(
    request: Request,
    response: Response,
    storage: CartRepository = Depends(get_cart_storage),
    current_user: User | None = Depends(get_current_user),
) -> CartStore:
    """
    Open the cart for the caller's cart session.

    The session key lives in a cookie; a missing or malformed key starts
    a fresh (empty) cart session.
    """
    key = request.cookies.get(settings.CART_SESSION_COOKIE)
    if not is_valid_session_key(key):
        key = uuid.uuid4().hex

    request.state.cart_session_key = key
    set_cart_cookie(response, key)
    return service.open_store(storage, key, current_user)


@router.get("", response_model=CartSummary)
def get_my_cart(store: CartStore = Depends(get_cart_store)):
    """
    Get the cart summary for the current cart session. Guests allowed.
    """
    return store.summary()


@router.post("", response_model=CartSummary)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    store: CartStore = Depends(get_cart_store),
):
    """
    Add a product to the cart.

    Auth:
      - Requires a logged-in user (401 "Please login to add items to cart").
    """
    store.check_can_add()
    product = service.snapshot_product(session, payload.product_id)
    store.add_to_cart(product, payload.quantity)
    return store.summary()


@router.patch("/{product_id}", response_model=CartSummary)
def update_cart_item(
    product_id: str,
    payload: CartItemUpdate,
    store: CartStore = Depends(get_cart_store),
):
    """
    Set the quantity of a line. 0 removes it; unknown ids are ignored.
    """
    store.update_quantity(product_id, payload.quantity)
    return store.summary()


@router.delete("/{product_id}", response_model=CartSummary)
def remove_cart_item(
    product_id: str,
    store: CartStore = Depends(get_cart_store),
):
    store.remove_from_cart(product_id)
    return store.summary()


@router.delete("", response_model=CartSummary)
def clear_cart(store: CartStore = Depends(get_cart_store)):
    store.clear_cart()
    return store.summary()
