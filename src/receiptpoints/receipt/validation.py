from __future__ import annotations

from pydantic import ValidationError

from ..errors import INVALID_RECEIPT_MESSAGE, ReceiptValidationError
from ..models import Receipt
from ..result import Err, Ok, Result


def validate_receipt(document: object) -> Result[Receipt, ReceiptValidationError]:
    """Check a decoded JSON document against the receipt schema.

    The whole document is accepted or rejected; failures come back as an
    ``Err`` carrying one detail line per offending field.
    """
    try:
        receipt = Receipt.model_validate(document)
    except ValidationError as exc:
        return Err(ReceiptValidationError(INVALID_RECEIPT_MESSAGE, details=describe_errors(exc)))
    return Ok(receipt)


def describe_errors(exc: ValidationError) -> list[str]:
    out = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error["loc"]) or "receipt"
        out.append(f"{loc}: {error['msg']}")
    return out
