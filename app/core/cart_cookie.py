# app/core/cart_cookie.py
from fastapi import Request, Response

from app.core.config import get_settings

settings = get_settings()


def set_cart_cookie(response: Response, key: str) -> None:
    response.set_cookie(
        settings.CART_SESSION_COOKIE,
        key,
        max_age=settings.CART_TTL_SECONDS,
        httponly=True,
        samesite="lax",
    )


def attach_cart_cookie(request: Request, response: Response) -> Response:
    """
    Re-send the cart session cookie on an error response.

    The cart dependency records the key on `request.state`; without this,
    a shopper whose very first cart request fails would get a new cart
    session on every retry.
    """
    key = getattr(request.state, "cart_session_key", None)
    if key:
        set_cart_cookie(response, key)
    return response
