"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports and points the
application at an in-memory SQLite database before anything imports it.
"""

import os
import sys
from pathlib import Path

# Must be set before app.config builds the global settings
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["SWEEPER_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "testing"
os.environ.pop("ADMIN_API_KEY", None)

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pytest

from domain.models import Base, engine


@pytest.fixture(autouse=True)
def fresh_schema():
    """Every test starts from empty tables"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def anyio_backend():
    return "asyncio"
