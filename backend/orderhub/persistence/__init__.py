from .gateway import ProcedureResult, StoredProcedureGateway, read_error_code
from .unit_of_work import TransactionError, UnitOfWork

__all__ = [
    "ProcedureResult",
    "StoredProcedureGateway",
    "TransactionError",
    "UnitOfWork",
    "read_error_code",
]
