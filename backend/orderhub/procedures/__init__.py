# Overview: In-process implementations of the stored-procedure contract.

"""
Embedded Stored Procedures

The persistence contract is "call a named procedure with named parameters,
get back one row carrying an error code and a JSON payload". In production
the procedures can live in the database (STORED_PROCEDURE_MODE="database");
this package provides the same contract in-process so the services run on
any SQLAlchemy backend, SQLite included.

Each procedure:
- receives an ORM session bound to the caller's connection/transaction
- never commits or rolls back (the gateway and unit of work own that)
- returns either a JSON scalar ('{"errorCode": 0, "data": ...}') or a
  composite row ({"error_code": 0, "data": "<json>"}), or None for "no row"

The row shapes deliberately match what the database functions return, so
the gateway's decoding is exercised identically in both modes.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from typing import Any

from orderhub.time_utils import to_utc_z


PROCEDURES: dict[str, Callable[..., Any]] = {}


def procedure(name: str):
    """Register a function in the embedded catalog under `name`."""
    def decorator(fn):
        if name in PROCEDURES:
            raise ValueError(f"Procedure {name} registered twice")
        PROCEDURES[name] = fn
        return fn
    return decorator


def _json_default(value: Any):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return to_utc_z(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(data: Any) -> str:
    return json.dumps(data, default=_json_default)


def envelope_json(error_code: int, data: Any = None) -> str:
    """Scalar JSON envelope, as returned by the order procedures."""
    return to_json({"errorCode": error_code, "data": data})


def envelope_row(error_code: int, data: Any = None, code_field: str = "error_code") -> dict:
    """Composite (error code, json data) row, as returned by the inventory procedures."""
    return {code_field: error_code, "data": to_json(data) if data is not None else None}


def parse_json_param(value: Any) -> Any:
    """Structured parameters arrive as JSON text (database mode) or as Python objects."""
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return value


# Import procedure modules so they register themselves
from . import accounts, orders, inventory  # noqa: E402,F401
