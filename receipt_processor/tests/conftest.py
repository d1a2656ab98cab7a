# tests/conftest.py
import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from receipt_processor.main import app
from receipt_processor.schemas import ReceiptIn
from receipt_processor.services.receipts import ReceiptService, get_receipt_service
from receipt_processor.store.repository import InMemoryReceiptStore

FIXTURES = Path(__file__).parent / "fixtures"

def load_fixture(name: str) -> dict:
    return json.loads((FIXTURES / name).read_text())

@pytest.fixture
def receipt_json():
    return load_fixture

@pytest.fixture
def make_receipt():
    def _make(name: str) -> ReceiptIn:
        return ReceiptIn.model_validate(load_fixture(name))
    return _make

@pytest.fixture
def service():
    return ReceiptService(InMemoryReceiptStore())

@pytest.fixture
def client(service):
    app.dependency_overrides[get_receipt_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
