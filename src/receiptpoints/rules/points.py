"""Point rules for accepted receipts.

Every rule is an independent function of the receipt; the score is the sum
of all of them. Money is handled as ``Decimal`` so that quarter multiples
and the 20 % item bonus are exact.
"""

from __future__ import annotations

import re
from datetime import time
from decimal import ROUND_CEILING, Decimal, InvalidOperation
from typing import Callable

from ..errors import InvalidReceiptError
from ..models import Receipt


_ALNUM = re.compile(r"[A-Za-z0-9]")

ROUND_TOTAL_POINTS = 50
QUARTER_TOTAL_POINTS = 25
ITEM_PAIR_POINTS = 5
ODD_DAY_POINTS = 6
AFTERNOON_POINTS = 10

_QUARTER = Decimal("0.25")
_ITEM_PRICE_MULTIPLIER = Decimal("0.2")
_AFTERNOON_START = time(14, 0)
_AFTERNOON_END = time(16, 0)


def retailer_points(receipt: Receipt) -> int:
    return len(_ALNUM.findall(receipt.retailer))


def round_total_points(receipt: Receipt) -> int:
    total = _to_decimal(receipt.total)
    return ROUND_TOTAL_POINTS if total % 1 == 0 else 0


def quarter_total_points(receipt: Receipt) -> int:
    total = _to_decimal(receipt.total)
    return QUARTER_TOTAL_POINTS if total % _QUARTER == 0 else 0


def item_pair_points(receipt: Receipt) -> int:
    return (len(receipt.items) // 2) * ITEM_PAIR_POINTS


def item_description_points(receipt: Receipt) -> int:
    points = 0
    for item in receipt.items:
        # An empty description after trimming has length 0 and still qualifies.
        if len(item.shortDescription.strip()) % 3 != 0:
            continue
        bonus = _to_decimal(item.price) * _ITEM_PRICE_MULTIPLIER
        points += int(bonus.to_integral_value(rounding=ROUND_CEILING))
    return points


def odd_day_points(receipt: Receipt) -> int:
    day = int(receipt.purchaseDate[-2:])
    return ODD_DAY_POINTS if day % 2 == 1 else 0


def afternoon_points(receipt: Receipt) -> int:
    hour, minute = (int(part) for part in receipt.purchaseTime.split(":"))
    purchased_at = time(hour, minute)
    return AFTERNOON_POINTS if _AFTERNOON_START < purchased_at < _AFTERNOON_END else 0


RULES: dict[str, Callable[[Receipt], int]] = {
    "retailer": retailer_points,
    "round_total": round_total_points,
    "quarter_total": quarter_total_points,
    "item_pairs": item_pair_points,
    "item_descriptions": item_description_points,
    "odd_day": odd_day_points,
    "afternoon": afternoon_points,
}


def points_breakdown(receipt: Receipt) -> dict[str, int]:
    try:
        return {name: rule(receipt) for name, rule in RULES.items()}
    except (AttributeError, TypeError, ValueError, InvalidOperation) as exc:
        raise InvalidReceiptError(f"Cannot score unvalidated receipt data: {exc}") from exc


def score_receipt(receipt: Receipt) -> int:
    return sum(points_breakdown(receipt).values())


def _to_decimal(value: str) -> Decimal:
    amount = Decimal(value)
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"Not a non-negative amount: {value!r}")
    return amount
