from __future__ import annotations

import re
import uuid


_RECEIPT_ID = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


def new_receipt_id() -> str:
    return str(uuid.uuid4())


def is_receipt_id(value: str) -> bool:
    return _RECEIPT_ID.match(value) is not None
