# app/repositories/cart_repo.py
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Callable

from pydantic import ValidationError
from sqlmodel import Session, select

from app.models.cart import CartSession
from app.schemas.cart import CartLineItem

logger = logging.getLogger(__name__)

SESSION_KEY_RE = re.compile(r"^[0-9a-f]{32}$")


def is_valid_session_key(key: str | None) -> bool:
    return bool(key) and SESSION_KEY_RE.match(key) is not None


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CartRepository:
    """
    Data access for saved cart sessions (`cart_sessions` table).

    - load/save one session's line items
    - carts untouched for longer than `ttl_seconds` are abandoned:
      they load as empty and are purged on every save
    """

    def __init__(
        self,
        session: Session,
        ttl_seconds: int = 86400,
        clock: Callable[[], datetime] | None = None,
    ):
        self.session = session
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _get(self, key: str) -> CartSession | None:
        if not is_valid_session_key(key):
            raise ValueError(f"Invalid cart session key: {key!r}")
        return self.session.get(CartSession, key)

    def load(self, key: str) -> list[CartLineItem]:
        row = self._get(key)
        if row is None:
            return []

        if self._clock() - _as_utc(row.saved_at) > self.ttl:
            logger.info(f"Cart {key} expired (saved at {row.saved_at.isoformat()})")
            self.session.delete(row)
            self.session.commit()
            return []

        try:
            return [CartLineItem.model_validate(data) for data in row.items]
        except ValidationError as e:
            logger.warning(f"Discarding corrupt cart {key}: {e.error_count()} error(s)")
            return []

    def save(self, key: str, items: list[CartLineItem]) -> None:
        row = self._get(key)

        if not items:
            if row is not None:
                self.session.delete(row)
        else:
            if row is None:
                row = CartSession(key=key)
            row.items = [item.model_dump(mode="json") for item in items]
            row.saved_at = self._clock()
            self.session.add(row)

        self._delete_expired(exclude_key=key)
        self.session.commit()

    def delete(self, key: str) -> None:
        row = self._get(key)
        if row is not None:
            self.session.delete(row)
            self.session.commit()

    def purge_expired(self) -> int:
        count = self._delete_expired()
        self.session.commit()
        return count

    def _delete_expired(self, exclude_key: str | None = None) -> int:
        cutoff = self._clock() - self.ttl
        stmt = select(CartSession).where(CartSession.saved_at < cutoff)
        if exclude_key is not None:
            stmt = stmt.where(CartSession.key != exclude_key)

        rows = self.session.exec(stmt).all()
        for row in rows:
            self.session.delete(row)
        if rows:
            logger.info(f"Purged {len(rows)} abandoned cart(s)")
        return len(rows)
