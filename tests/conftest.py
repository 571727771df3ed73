"""
Pytest configuration and shared snapshot fixtures.

src/ is put on sys.path so tests import packages the way the deployed
handlers do (`from services import ...`).
"""

import os
import sys
from datetime import date
from pathlib import Path

import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add src/ to sys.path if missing."""
    src_root = Path(__file__).resolve().parents[1] / "src"
    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

os.environ.setdefault("ENVIRONMENT", "dev")

# Every scenario is evaluated against a fixed calendar day.
TODAY = date(2024, 6, 20)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def config():
    from config.settings import default_config

    return default_config()


@pytest.fixture
def sample_snapshot():
    """Three customers covering debt, silence and a low-stock product."""
    from models.records import DataSnapshot

    return DataSnapshot.model_validate(
        {
            "customers": [
                {"id": "c1", "name": "Anka Gida"},
                {"id": "c2", "name": "Deniz Lojistik"},
                {"id": "c3", "name": "Yildiz Tekstil"},
                {"id": "c4", "name": "Deleted Ltd", "isDeleted": True},
            ],
            "orders": [
                {
                    "id": "o1",
                    "customerId": "c1",
                    "order_date": "2024-03-01",
                    "status": "Delivered",
                    "total_amount": 100000,
                    "currency": "TRY",
                    "items": [{"productId": "p1", "quantity": 10, "unitPrice": 10000}],
                },
                {
                    "id": "o2",
                    "customerId": "c2",
                    "order_date": "2024-04-16",
                    "status": "Delivered",
                    "total_amount": 1000,
                    "currency": "USD",
                },
                {
                    "id": "o3",
                    "customerId": "c2",
                    "order_date": "2024-05-16",
                    "status": "Delivered",
                    "total_amount": 1000,
                    "currency": "USD",
                },
                {
                    "id": "o4",
                    "customerId": "c3",
                    "order_date": "2024-06-10",
                    "status": "Confirmed",
                    "total_amount": 5000,
                },
                {
                    "id": "o5",
                    "customerId": "c3",
                    "order_date": "2024-06-12",
                    "status": "Cancelled",
                    "total_amount": 99999,
                },
            ],
            "payments": [
                {
                    "id": "pay1",
                    "customerId": "c2",
                    "amount": 70000,
                    "currency": "TRY",
                    "status": "Collected",
                    "paidDate": "2024-06-01",
                    "dueDate": "2024-05-30",
                },
                {
                    "id": "pay2",
                    "customerId": "c3",
                    "amount": 2000,
                    "status": "Pending",
                    "dueDate": "2024-06-19",
                },
                {
                    "id": "pay3",
                    "customerId": "c3",
                    "amount": 1500,
                    "status": "Pending",
                    "dueDate": "2024-06-23",
                },
            ],
            "meetings": [
                {"id": "m1", "customerId": "c3", "meeting_date": "2024-06-15", "status": "Done"},
            ],
            "quotes": [
                {
                    "id": "q1",
                    "customerId": "c3",
                    "quote_date": "2024-06-12",
                    "status": "Prepared",
                    "total_amount": 10000,
                },
            ],
            "products": [
                {"id": "p1", "name": "Flour 50kg", "stock_quantity": 3},
                {"id": "p2", "name": "Sugar 25kg", "stock_quantity": 0},
            ],
        }
    )
