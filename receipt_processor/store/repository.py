# receipt_processor/store/repository.py
import threading
from abc import ABC, abstractmethod
from datetime import timezone
from typing import Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from ..database import Base, get_engine, get_sessionmaker
from ..models import ReceiptRecord
from ..schemas import ItemIn, ScoredReceipt

class ReceiptStoreError(Exception):
    pass

class DuplicateReceiptError(ReceiptStoreError):
    def __init__(self, receipt_id: str):
        super().__init__(f"Receipt {receipt_id} is already stored")
        self.receipt_id = receipt_id

class ReceiptStore(ABC):
    """Key-value storage of scored receipts, keyed by receipt id."""

    @abstractmethod
    def put(self, receipt: ScoredReceipt) -> None:
        """Store a new receipt. Raises DuplicateReceiptError if the id is taken."""

    @abstractmethod
    def get(self, receipt_id: str) -> Optional[ScoredReceipt]:
        """Return the receipt, or None if the id was never stored."""

    @abstractmethod
    def __len__(self) -> int: ...

class InMemoryReceiptStore(ReceiptStore):
    """Process-local store; a lock guards the dict against concurrent requests."""

    def __init__(self):
        self._receipts: Dict[str, ScoredReceipt] = {}
        self._lock = threading.Lock()

    def put(self, receipt: ScoredReceipt) -> None:
        with self._lock:
            if receipt.id in self._receipts:
                raise DuplicateReceiptError(receipt.id)
            self._receipts[receipt.id] = receipt

    def get(self, receipt_id: str) -> Optional[ScoredReceipt]:
        with self._lock:
            return self._receipts.get(receipt_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._receipts)

def _to_record(receipt: ScoredReceipt) -> ReceiptRecord:
    return ReceiptRecord(
        id=receipt.id,
        retailer=receipt.retailer,
        purchase_date=receipt.purchase_date,
        purchase_time=receipt.purchase_time,
        items=[i.model_dump(by_alias=True) for i in receipt.items],
        total=receipt.total,
        points=receipt.points,
        rules=dict(receipt.rules),
        skipped=dict(receipt.skipped),
        created_at=receipt.created_at,
    )

def _from_record(row: ReceiptRecord) -> ScoredReceipt:
    created_at = row.created_at
    if created_at.tzinfo is None:
        # sqlite hands back naive datetimes
        created_at = created_at.replace(tzinfo=timezone.utc)
    return ScoredReceipt(
        id=row.id,
        retailer=row.retailer,
        purchase_date=row.purchase_date,
        purchase_time=row.purchase_time,
        items=tuple(ItemIn.model_validate(i) for i in row.items),
        total=row.total,
        points=row.points,
        rules=row.rules,
        skipped=row.skipped,
        created_at=created_at,
    )

class SqlReceiptStore(ReceiptStore):
    """
    SQLAlchemy-backed store over the receipts table.
    Access is serialised with a lock; the default in-memory SQLite
    database is a single shared connection.
    """

    def __init__(self, engine: Optional[Engine] = None):
        self._engine = engine or get_engine()
        self._sessions: sessionmaker = get_sessionmaker(engine)
        self._lock = threading.Lock()
        Base.metadata.create_all(bind=self._engine)

    def put(self, receipt: ScoredReceipt) -> None:
        with self._lock, self._sessions() as db:
            try:
                if db.get(ReceiptRecord, receipt.id) is not None:
                    raise DuplicateReceiptError(receipt.id)
                db.add(_to_record(receipt))
                db.commit()
            except Exception:
                db.rollback()
                raise

    def get(self, receipt_id: str) -> Optional[ScoredReceipt]:
        with self._lock, self._sessions() as db:
            row = db.get(ReceiptRecord, receipt_id)
            return _from_record(row) if row else None

    def __len__(self) -> int:
        with self._lock, self._sessions() as db:
            return db.execute(select(func.count()).select_from(ReceiptRecord)).scalar_one()
