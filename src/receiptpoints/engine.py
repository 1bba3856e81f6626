from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .errors import ReceiptNotFoundError, ReceiptValidationError
from .ids import new_receipt_id
from .models import ScoredReceipt
from .receipt.validation import validate_receipt
from .result import Err, Ok, Result
from .rules.points import points_breakdown
from .storage import ScoreStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PointsEngine:
    store: ScoreStore
    id_factory: Callable[[], str] = new_receipt_id

    def process_receipt(self, document: object) -> Result[ScoredReceipt, ReceiptValidationError]:
        validated = validate_receipt(document)
        if isinstance(validated, Err):
            logger.info("Rejected receipt: %s", "; ".join(validated.error.details))
            return validated

        receipt = validated.value
        breakdown = points_breakdown(receipt)
        scored = ScoredReceipt(id=self.id_factory(), points=sum(breakdown.values()))
        self.store.put(scored.id, scored.points)

        logger.debug("Points breakdown for %s: %s", scored.id, breakdown)
        logger.info("Scored receipt %s from %r: %d points", scored.id, receipt.retailer, scored.points)
        return Ok(scored)

    def lookup_points(self, receipt_id: str) -> Result[int, ReceiptNotFoundError]:
        points = self.store.get(receipt_id)
        if points is None:
            logger.info("No points stored for receipt id %r", receipt_id)
            return Err(ReceiptNotFoundError(receipt_id))
        return Ok(points)
