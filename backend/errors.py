from enum import Enum
from typing import Any

from web3.exceptions import ContractLogicError


class ErrorCode(str, Enum):
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_FIELD = "INVALID_FIELD"
    INVALID_ADDRESS = "INVALID_ADDRESS"
    VOTER_NOT_AUTHORIZED = "VOTER_NOT_AUTHORIZED"
    ALREADY_VOTED = "ALREADY_VOTED"
    ELECTION_ENDED = "ELECTION_ENDED"
    ELECTION_ALREADY_ENDED = "ELECTION_ALREADY_ENDED"
    ALREADY_AUTHORIZED = "ALREADY_AUTHORIZED"
    INVALID_CANDIDATE = "INVALID_CANDIDATE"
    CANDIDATE_EXISTS = "CANDIDATE_EXISTS"
    RESTART_REJECTED = "RESTART_REJECTED"
    CONTRACT_REVERTED = "CONTRACT_REVERTED"
    TRANSACTION_FAILED = "TRANSACTION_FAILED"
    CHAIN_ERROR = "CHAIN_ERROR"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    INTERNAL = "INTERNAL"


class ApiError(Exception):
    def __init__(self, message: str, status: int = 500, code: ErrorCode = ErrorCode.INTERNAL) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "code": self.code.value}


class InvalidAddress(ValueError):
    """An address that cannot be converted to checksum form."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Invalid address: {address}")
        self.address = address


class TransactionFailed(RuntimeError):
    """A transaction was mined but its receipt reports failure."""

    def __init__(self, tx_hash: str, receipt: dict[str, Any]) -> None:
        super().__init__(f"Transaction {tx_hash} reverted")
        self.tx_hash = tx_hash
        self.receipt = receipt


def missing_field(message: str) -> ApiError:
    return ApiError(message, 400, ErrorCode.MISSING_FIELD)


def invalid_field(message: str) -> ApiError:
    return ApiError(message, 400, ErrorCode.INVALID_FIELD)


def forbidden(message: str, code: ErrorCode) -> ApiError:
    return ApiError(message, 403, code)


# Ordered: more specific phrases first.
_REVERT_PATTERNS: tuple[tuple[str, ErrorCode], ...] = (
    ("already authorized", ErrorCode.ALREADY_AUTHORIZED),
    ("not authorized", ErrorCode.VOTER_NOT_AUTHORIZED),
    ("already voted", ErrorCode.ALREADY_VOTED),
    ("already ended", ErrorCode.ELECTION_ALREADY_ENDED),
    ("election ended", ErrorCode.ELECTION_ENDED),
    ("election has ended", ErrorCode.ELECTION_ENDED),
    ("invalid candidate", ErrorCode.INVALID_CANDIDATE),
    ("already exists", ErrorCode.CANDIDATE_EXISTS),
    ("password", ErrorCode.RESTART_REJECTED),
)


def classify_revert(reason: str) -> ErrorCode:
    lowered = (reason or "").lower()
    for pattern, code in _REVERT_PATTERNS:
        if pattern in lowered:
            return code
    return ErrorCode.CONTRACT_REVERTED


def error_message(exc: BaseException) -> str:
    if isinstance(exc, ContractLogicError) and getattr(exc, "message", None):
        return str(exc.message)
    return str(exc) or exc.__class__.__name__


def from_exception(exc: BaseException) -> ApiError:
    """Map a gateway failure to an ApiError with a structured code.

    Unconvertible addresses are client errors (400); everything else is 500.
    """
    message = error_message(exc)
    if isinstance(exc, InvalidAddress):
        return ApiError(message, 400, ErrorCode.INVALID_ADDRESS)
    if isinstance(exc, ContractLogicError):
        return ApiError(message, 500, classify_revert(message))
    if isinstance(exc, TransactionFailed):
        return ApiError(message, 500, ErrorCode.TRANSACTION_FAILED)
    return ApiError(message, 500, ErrorCode.CHAIN_ERROR)
