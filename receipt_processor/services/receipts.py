# receipt_processor/services/receipts.py
import threading
import uuid
from typing import Callable, Optional

from ..config import settings
from ..schemas import ReceiptIn, ScoredReceipt
from ..store.repository import InMemoryReceiptStore, ReceiptStore, SqlReceiptStore
from ..utils.logging import logger
from .scoring import GENERATED_BY_LLM, score_receipt

def new_receipt_id() -> str:
    return str(uuid.uuid4())

class ReceiptService:
    """
    Ingests receipts (assign id, score, store) and looks their points up.
    Ingestion never rejects a receipt over a bad date, time or amount;
    the affected rule scores 0 instead.
    """

    def __init__(self, store: ReceiptStore,
                 id_factory: Callable[[], str] = new_receipt_id,
                 generated_by_llm: bool = GENERATED_BY_LLM):
        self.store = store
        self._new_id = id_factory
        self._generated_by_llm = generated_by_llm

    def ingest(self, receipt: ReceiptIn) -> str:
        result = score_receipt(receipt, generated_by_llm=self._generated_by_llm)
        scored = ScoredReceipt(
            id=self._new_id(),
            retailer=receipt.retailer,
            purchase_date=receipt.purchase_date,
            purchase_time=receipt.purchase_time,
            items=tuple(receipt.items),
            total=receipt.total,
            points=result["points"],
            rules=result["rules"],
            skipped=result["skipped"],
        )
        self.store.put(scored)
        logger.info("Receipt %s from %r scored %s points", scored.id, scored.retailer, scored.points)
        return scored.id

    def get_receipt(self, receipt_id: str) -> Optional[ScoredReceipt]:
        return self.store.get(receipt_id)

    def get_points(self, receipt_id: str) -> Optional[int]:
        """Points for a stored receipt, None if the id was never issued."""
        receipt = self.store.get(receipt_id)
        return receipt.points if receipt else None

def build_store(backend: str) -> ReceiptStore:
    if backend == "memory":
        return InMemoryReceiptStore()
    if backend == "sql":
        return SqlReceiptStore()
    raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")

_service: Optional[ReceiptService] = None
_service_lock = threading.Lock()

def get_receipt_service() -> ReceiptService:
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                _service = ReceiptService(build_store(settings.STORE_BACKEND))
                logger.info("Receipt store backend: %s", settings.STORE_BACKEND)
    return _service
