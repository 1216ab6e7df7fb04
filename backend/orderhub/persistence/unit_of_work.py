# Overview: Unit of work owning one connection, at most one transaction, and the repositories bound to them.

"""
Unit of Work

    with UnitOfWork() as uow:
        uow.begin_transaction()
        result = uow.orders.create(dto, identity.id)
        if result.ok:
            uow.commit()
        else:
            uow.rollback()

Lifecycle:
- The connection is opened lazily on first use and released by dispose().
- At most one transaction is open at a time. begin_transaction() while
  one is open raises TransactionError (no silent nesting).
- commit()/complete() with nothing open is a no-op. A failed commit rolls
  back, releases the connection and re-raises; the next call on this unit
  of work opens a fresh connection.
- rollback() is idempotent.
- dispose() runs once, rolls back whatever is still open and never
  commits. Leaving the with-block always disposes, even on error.

Repositories are created on first access and cached for the lifetime of
the unit of work. They reach the connection through the gateway, never
directly, so they stay valid across a connection release.
"""

from __future__ import annotations

import logging

from ..extensions import db
from .gateway import StoredProcedureGateway

log = logging.getLogger(__name__)


class TransactionError(RuntimeError):
    """Transaction lifecycle misuse (e.g., nested begin, use after dispose)."""


class UnitOfWork:
    def __init__(self, engine=None, mode: str | None = None):
        self._engine = engine
        self._connection = None
        self._transaction = None
        self._disposed = False

        self.gateway = StoredProcedureGateway(self, mode=mode)

        self._orders = None
        self._inventory = None
        self._accounts = None

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    @property
    def orders(self):
        if self._orders is None:
            from .repositories.orders import OrderRepository
            self._orders = OrderRepository(self.gateway)
        return self._orders

    @property
    def inventory(self):
        if self._inventory is None:
            from .repositories.inventory import InventoryRepository
            self._inventory = InventoryRepository(self.gateway)
        return self._inventory

    @property
    def accounts(self):
        if self._accounts is None:
            from .repositories.accounts import AccountRepository
            self._accounts = AccountRepository(self.gateway)
        return self._accounts

    # ------------------------------------------------------------------
    # Connection / transaction
    # ------------------------------------------------------------------

    @property
    def connection(self):
        if self._disposed:
            raise TransactionError("Unit of work has been disposed")
        if self._connection is None or self._connection.closed:
            self._connection = (self._engine or db.engine).connect()
        return self._connection

    @property
    def in_transaction(self) -> bool:
        return self._transaction is not None and self._transaction.is_active

    def begin_transaction(self) -> "UnitOfWork":
        if self.in_transaction:
            raise TransactionError("A transaction is already open on this unit of work")
        self._transaction = self.connection.begin()
        log.debug("Transaction started")
        return self

    def commit(self) -> None:
        if self._transaction is None:
            return
        try:
            self._transaction.commit()
        except Exception:
            log.exception("Failed to commit transaction")
            self._release()
            raise
        self._transaction = None
        log.debug("Transaction committed")

    # Alias kept for callers that think in "complete the unit of work" terms
    complete = commit

    def rollback(self) -> None:
        transaction, self._transaction = self._transaction, None
        if transaction is not None and transaction.is_active:
            transaction.rollback()
            log.debug("Transaction rolled back")

    def _release(self) -> None:
        """Roll back and close the connection. Closing returns it to the pool, which resets it."""
        try:
            self.rollback()
            if self._connection is not None:
                # A failed commit leaves its inactive transaction attached to the
                # connection; detach it so the pool's reset-on-return rolls back
                self._connection.rollback()
        except Exception:
            log.exception("Failed to roll back transaction")
        finally:
            if self._connection is not None:
                self._connection.close()
                self._connection = None

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._release()

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()
