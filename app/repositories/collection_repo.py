# app/repositories/collection_repo.py
import uuid

from sqlmodel import Session, select

from app.models.product import Collection


class CollectionRepository:

    def get_by_id(self, session: Session, collection_id: uuid.UUID) -> Collection | None:
        return session.get(Collection, collection_id)

    def get_by_slug(self, session: Session, slug: str) -> Collection | None:
        stmt = select(Collection).where(Collection.slug == slug)
        return session.exec(stmt).first()

    def list_collections(self, session: Session, only_active: bool = True) -> list[Collection]:
        stmt = select(Collection)
        if only_active:
            stmt = stmt.where(Collection.is_active == True)  # noqa: E712
        stmt = stmt.order_by(Collection.name, Collection.id)
        return list(session.exec(stmt).all())

    def list_active(self, session: Session) -> list[Collection]:
        return self.list_collections(session, only_active=True)

    def create(self, session: Session, collection: Collection) -> Collection:
        session.add(collection)
        session.commit()
        session.refresh(collection)
        return collection

    def update(self, session: Session, collection: Collection) -> Collection:
        session.add(collection)
        session.commit()
        session.refresh(collection)
        return collection
