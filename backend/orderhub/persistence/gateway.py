# Overview: Executes named stored procedures and normalizes their {errorCode, data} envelopes.

"""
Stored Procedure Gateway

Every read and write in the system goes through call():

    result = gateway.call("sp_get_order_by_id", {"p_order_id": 5}, decoder=OrderDto.from_payload)
    if result.ok:
        result.data  # -> OrderDto

Contract:
- Never raises. Driver errors, missing envelopes and undecodable payloads
  all become ProcedureResult(error_code=500). The failure is logged with
  the procedure name and parameter NAMES only (values may carry
  credentials or personal data).
- The error code is read through one accessor, read_error_code(), which
  accepts any casing of "errorCode" ("errorCode", "error_code",
  "errorcode", ...). A row without one is a 500.
- Data is decoded into the caller's type only when the error code is 0.

TRANSACTIONS:
- Inside an open unit-of-work transaction, the call joins it. Whether its
  effects persist is decided by the unit of work's commit/rollback.
- Outside one, the call is wrapped in its own transaction: committed on
  errorCode 0, rolled back on any non-zero code or exception. A procedure
  that reports failure therefore never leaves partial writes.

MODES (Config.STORED_PROCEDURE_MODE):
- "embedded": run the Python implementation from orderhub.procedures
- "database": SELECT * FROM sp_name(:p_a, :p_b) against the database;
  list/dict parameters are sent as JSON.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from flask import current_app, has_app_context
from sqlalchemy import text
from sqlalchemy.orm import Session

from ..procedures import PROCEDURES
from ..responses import ErrorCode

T = TypeVar("T")

log = logging.getLogger(__name__)


@dataclass
class ProcedureResult(Generic[T]):
    error_code: int
    data: T | None = None

    @property
    def ok(self) -> bool:
        return self.error_code == ErrorCode.OK


def read_error_code(envelope: Mapping) -> int | None:
    """The envelope's error code, whatever the key's casing. None if absent or not an integer."""
    for key, value in envelope.items():
        if str(key).replace("_", "").lower() == "errorcode":
            if isinstance(value, bool):
                return None
            try:
                return int(value)
            except (TypeError, ValueError):
                return None
    return None


def _as_envelope(row: Any) -> Mapping | None:
    """
    Normalize the three shapes a procedure row can take:
    - a JSON string scalar: '{"errorCode": 0, "data": {...}}'
    - a single-column row whose value is that JSON (or an already-parsed dict)
    - a composite row: {"error_code": 0, "data": "<json>" | {...}}
    """
    if row is None:
        return None
    if isinstance(row, (str, bytes)):
        return json.loads(row)
    if hasattr(row, "_mapping"):
        row = dict(row._mapping)
    if not isinstance(row, Mapping):
        return None

    if read_error_code(row) is None and len(row) == 1:
        (only,) = row.values()
        return _as_envelope(only)

    envelope = dict(row)
    data = envelope.get("data")
    if isinstance(data, (str, bytes)):
        envelope["data"] = json.loads(data)
    return envelope


class StoredProcedureGateway:
    """
    Bound to one unit of work. The connection is looked up on every call,
    so a gateway stays usable after the unit of work releases and reopens
    its connection.
    """

    def __init__(self, uow, mode: str | None = None):
        self._uow = uow
        self._mode = mode

    @property
    def mode(self) -> str:
        if self._mode:
            return self._mode
        if has_app_context():
            return current_app.config.get("STORED_PROCEDURE_MODE", "embedded")
        return "embedded"

    def call(
        self,
        name: str,
        params: Mapping[str, Any] | None = None,
        *,
        decoder: Callable[[Any], T] | None = None,
        many: bool = False,
        on_empty: int = ErrorCode.INTERNAL,
    ) -> ProcedureResult[T]:
        params = dict(params or {})
        try:
            if self._uow.in_transaction:
                envelope = _as_envelope(self._execute(self._uow.connection, name, params))
            else:
                connection = self._uow.connection
                with connection.begin() as trans:
                    envelope = _as_envelope(self._execute(connection, name, params))
                    if envelope is None or read_error_code(envelope) != ErrorCode.OK:
                        trans.rollback()
        except Exception:
            log.exception("Failed to execute %s (params: %s)", name, ", ".join(sorted(params)))
            return ProcedureResult(ErrorCode.INTERNAL)

        return self._decode(name, envelope, decoder, many, on_empty)

    def _execute(self, connection, name: str, params: dict) -> Any:
        if self.mode == "database":
            return self._execute_sql(connection, name, params)
        return self._execute_embedded(connection, name, params)

    def _execute_embedded(self, connection, name: str, params: dict) -> Any:
        fn = PROCEDURES.get(name)
        if fn is None:
            raise LookupError(f"Unknown procedure {name}")
        session = Session(bind=connection, join_transaction_mode="rollback_only", expire_on_commit=False)
        try:
            row = fn(session, **params)
            session.flush()
            return row
        finally:
            session.close()

    def _execute_sql(self, connection, name: str, params: dict) -> Any:
        placeholders = []
        bound = {}
        for key, value in params.items():
            if isinstance(value, (list, dict)):
                placeholders.append(f"CAST(:{key} AS JSON)")
                bound[key] = json.dumps(value, default=str)
            else:
                placeholders.append(f":{key}")
                bound[key] = value
        statement = text(f"SELECT * FROM {name}({', '.join(placeholders)})")
        return connection.execute(statement, bound).first()

    def _decode(self, name, envelope, decoder, many, on_empty) -> ProcedureResult:
        if envelope is None:
            code = int(on_empty)
            return ProcedureResult(code, [] if many and code == ErrorCode.OK else None)

        code = read_error_code(envelope)
        if code is None:
            log.error("Procedure %s returned no error code", name)
            return ProcedureResult(ErrorCode.INTERNAL)
        if code != ErrorCode.OK:
            return ProcedureResult(code)

        data = envelope.get("data")
        if data is None:
            return ProcedureResult(ErrorCode.OK, [] if many else None)
        if decoder is None:
            return ProcedureResult(ErrorCode.OK, data)
        try:
            return ProcedureResult(ErrorCode.OK, decoder(data))
        except (TypeError, ValueError, KeyError):
            log.exception("Failed to decode %s payload", name)
            return ProcedureResult(ErrorCode.INTERNAL)
