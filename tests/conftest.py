from __future__ import annotations

import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest

# Ensure the src/ directory is importable when tests run without an install.
sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from sample_records import OperationData, OperationStatus  # noqa: E402


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 5, 6, 12, 30, tzinfo=UTC)


@pytest.fixture
def operation(now: datetime) -> OperationData:
    return OperationData(
        id="op-123",
        function="process",
        version="1.0.0",
        status=OperationStatus.RUNNING,
        progress=50,
        result=None,
        errors=[],
        started_at=now,
        completed_at=None,
        cancelled_at=None,
        metadata={"key": "value"},
    )
