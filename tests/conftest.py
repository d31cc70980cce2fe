# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests (mocked AsyncSession)
- Integration tests (SQLite database)
- API tests (TestClient)

The environment is switched to ``test`` before any application module is
imported, so module-level singletons (rate limiter, settings) see it.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-only")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

from typing import Any  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402

from src.models.learning_test import AnswerMatrix  # noqa: E402

# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (SQLite database)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def mock_db() -> AsyncMock:
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.add_all = MagicMock()
    db.delete = AsyncMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    db.scalar = AsyncMock()
    db.get = AsyncMock()
    return db


@pytest.fixture
def sample_user_id() -> str:
    """Provide a sample user ID for testing."""
    return str(uuid4())


@pytest.fixture
def sample_account_data() -> dict[str, Any]:
    """Provide sample account data for testing."""
    return {
        "firstName": "Ana María",
        "lastName": "Pérez",
        "email": "ana.perez@example.com",
        "documentType": "DNI",
        "documentNumber": "30123456",
    }


@pytest.fixture
def regression_matrix() -> AnswerMatrix:
    """Answer matrix with a single dominant profile (DIVERGENT).

    Ten rows [4, 2, 3, 1], row 9 = [3, 2, 4, 1], row 11 = [1, 2, 3, 4].
    Column sums: EC=44, OR=24, CA=37, EA=15.
    """
    rows = [[4, 2, 3, 1] for _ in range(12)]
    rows[8] = [3, 2, 4, 1]
    rows[10] = [1, 2, 3, 4]
    return AnswerMatrix(rows)


@pytest.fixture
def balanced_matrix() -> AnswerMatrix:
    """Answer matrix whose four column sums are equal (30 each)."""
    cycle = [[1, 2, 3, 4], [2, 3, 4, 1], [3, 4, 1, 2], [4, 1, 2, 3]]
    return AnswerMatrix(cycle * 3)

