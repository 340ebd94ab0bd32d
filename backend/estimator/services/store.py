from __future__ import annotations

import logging
from typing import Any, List, Optional, Type, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, selectinload, sessionmaker
from sqlalchemy.orm.attributes import InstrumentedAttribute

from ..models import Base, Client, Estimate, Invoice, utcnow

M = TypeVar("M", bound=Base)

logger = logging.getLogger(__name__)


class EstimationStore:
    """CRUD and filtered listing for clients, estimates and invoices.

    Every call runs in its own session and commits before returning, so
    returned objects are detached; only the relationships a method eagerly
    loads are safe to touch afterwards. Referential integrity is the
    caller's job: the store persists whatever ids it is given.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    # Clients

    def list_clients(self, *, newest_first: bool = False) -> List[Client]:
        order = Client.created_at.desc() if newest_first else Client.name.asc()
        return self._all(select(Client).order_by(order))

    def get_client(self, client_id: str, *, with_records: bool = False) -> Optional[Client]:
        stmt = select(Client).where(Client.id == client_id)
        if with_records:
            stmt = stmt.options(selectinload(Client.estimates), selectinload(Client.invoices))
        return self._first(stmt)

    def client_exists(self, client_id: str) -> bool:
        return self._exists(Client.id, client_id)

    def has_clients(self) -> bool:
        return self._first(select(Client.id).limit(1)) is not None

    def create_client(self, **fields: Any) -> Client:
        return self._create(Client(**fields))

    def update_client(self, client_id: str, **changes: Any) -> Optional[Client]:
        return self._update(Client, client_id, changes)

    def delete_client(self, client_id: str) -> bool:
        return self._delete(Client, client_id)

    # Estimates

    def list_estimates(self, client_id: Optional[str] = None) -> List[Estimate]:
        stmt = select(Estimate)
        if client_id is not None:
            stmt = stmt.where(Estimate.client_id == client_id)
        return self._all(stmt.order_by(Estimate.created_at.desc()))

    def get_estimate(self, estimate_id: str, *, with_related: bool = False) -> Optional[Estimate]:
        stmt = select(Estimate).where(Estimate.id == estimate_id)
        if with_related:
            stmt = stmt.options(selectinload(Estimate.client), selectinload(Estimate.invoices))
        return self._first(stmt)

    def estimate_exists(self, estimate_id: str) -> bool:
        return self._exists(Estimate.id, estimate_id)

    def latest_estimate_number(self, prefix: str) -> Optional[str]:
        return self._latest_number(Estimate.estimate_number, prefix)

    def create_estimate(self, **fields: Any) -> Estimate:
        return self._create(Estimate(**fields))

    def update_estimate(self, estimate_id: str, **changes: Any) -> Optional[Estimate]:
        return self._update(Estimate, estimate_id, changes)

    def delete_estimate(self, estimate_id: str) -> bool:
        return self._delete(Estimate, estimate_id)

    # Invoices

    def list_invoices(
        self,
        client_id: Optional[str] = None,
        estimate_id: Optional[str] = None,
    ) -> List[Invoice]:
        stmt = select(Invoice)
        if client_id is not None:
            stmt = stmt.where(Invoice.client_id == client_id)
        if estimate_id is not None:
            stmt = stmt.where(Invoice.estimate_id == estimate_id)
        return self._all(stmt.order_by(Invoice.created_at.desc()))

    def get_invoice(self, invoice_id: str) -> Optional[Invoice]:
        return self._first(select(Invoice).where(Invoice.id == invoice_id))

    def latest_invoice_number(self, prefix: str) -> Optional[str]:
        return self._latest_number(Invoice.invoice_number, prefix)

    def create_invoice(self, **fields: Any) -> Invoice:
        return self._create(Invoice(**fields))

    def update_invoice(self, invoice_id: str, **changes: Any) -> Optional[Invoice]:
        return self._update(Invoice, invoice_id, changes)

    def delete_invoice(self, invoice_id: str) -> bool:
        return self._delete(Invoice, invoice_id)

    # Internals

    def _all(self, stmt: Select) -> List[Any]:
        with self._session_factory() as session:
            return list(session.scalars(stmt).all())

    def _first(self, stmt: Select) -> Any:
        with self._session_factory() as session:
            return session.scalars(stmt).first()

    def _exists(self, column: InstrumentedAttribute, value: str) -> bool:
        return self._first(select(column).where(column == value).limit(1)) is not None

    def _latest_number(self, column: InstrumentedAttribute, prefix: str) -> Optional[str]:
        # Lexicographic maximum; numbers are zero-padded so this is also the numeric one.
        stmt = (
            select(column)
            .where(column.startswith(prefix, autoescape=True))
            .order_by(column.desc())
            .limit(1)
        )
        return self._first(stmt)

    def _create(self, instance: M) -> M:
        now = utcnow()
        if getattr(instance, "created_at", None) is None:
            instance.created_at = now
        if getattr(instance, "updated_at", None) is None:
            instance.updated_at = now
        with self._session_factory() as session:
            session.add(instance)
            session.commit()
            logger.debug("Created %s %s", type(instance).__name__, instance.id)
            return instance

    def _update(self, model: Type[M], record_id: str, changes: dict) -> Optional[M]:
        with self._session_factory() as session:
            instance = session.get(model, record_id)
            if instance is None:
                return None
            for field, value in changes.items():
                if not hasattr(model, field):
                    raise ValueError(f"{model.__name__} has no field '{field}'")
                setattr(instance, field, value)
            instance.updated_at = utcnow()
            session.commit()
            logger.debug("Updated %s %s fields=%s", model.__name__, record_id, sorted(changes))
            return instance

    def _delete(self, model: Type[M], record_id: str) -> bool:
        with self._session_factory() as session:
            instance = session.get(model, record_id)
            if instance is None:
                return False
            session.delete(instance)
            session.commit()
            logger.debug("Deleted %s %s", model.__name__, record_id)
            return True
