# app/core/errors.py
"""
Domain errors raised by services.

Each error carries the HTTP status it maps to and a short message that
the storefront shows to the shopper as a toast.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from app.core.cart_cookie import attach_cart_cookie


class StorefrontError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request could not be completed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class CartValidationError(StorefrontError):
    """Invalid quantity or product for a cart mutation."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Invalid cart quantity"


class AuthRequiredError(StorefrontError):
    """Caller must log in before the operation is allowed."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Please login to add items to cart"


class SitemapGenerationError(StorefrontError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Error generating sitemap"


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    response = JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
    return attach_cart_cookie(request, response)
