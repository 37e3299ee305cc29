"""Fixtures for unit tests: sessions and session factories without a database."""

from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture
def transaction():
    """The context manager returned by ``session.begin()``.

    ``__aexit__`` receives the exception (if any); a non-None exception type
    means the transaction was rolled back.
    """
    tx = MagicMock()
    tx.__aenter__ = AsyncMock(return_value=tx)
    tx.__aexit__ = AsyncMock(return_value=False)
    return tx


@pytest.fixture
def mock_session(transaction):
    """Create a mock database session."""
    session = MagicMock()
    session.info = {}
    session.add = MagicMock()
    session.flush = AsyncMock()
    session.execute = AsyncMock()
    session.begin = MagicMock(return_value=transaction)
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    return session


@pytest.fixture
def session_factory(mock_session):
    """Session factory handing out ``mock_session``."""
    return MagicMock(return_value=mock_session)
