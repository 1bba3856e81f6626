from __future__ import annotations


INVALID_RECEIPT_MESSAGE = "The receipt is invalid."
RECEIPT_NOT_FOUND_MESSAGE = "No receipt found for that id."


class ReceiptPointsError(Exception):
    """Base class for errors raised or returned by the points service."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ReceiptValidationError(ReceiptPointsError):
    def __init__(self, message: str = INVALID_RECEIPT_MESSAGE, *, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = list(details or [])


class ReceiptNotFoundError(ReceiptPointsError):
    def __init__(self, receipt_id: str, message: str = RECEIPT_NOT_FOUND_MESSAGE) -> None:
        super().__init__(message)
        self.receipt_id = receipt_id


class InvalidReceiptError(ReceiptPointsError):
    """Scoring was handed data that never went through validation."""


class ScoreConflictError(ReceiptPointsError):
    def __init__(self, receipt_id: str) -> None:
        super().__init__(f"Points for receipt {receipt_id} are already stored.")
        self.receipt_id = receipt_id


class ConfigError(ReceiptPointsError):
    pass
