"""
Pytest configuration and fixtures for policy store tests
"""
import sys
from pathlib import Path

import pytest

# Ensure the project root is available for imports when running from a checkout.
ROOT_DIR = Path(__file__).parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import casbin
from sqlalchemy import select
from sqlalchemy.orm import Session

from database.models import CasbinRule
from database.session import create_policy_engine
from policy_store.adapter import Adapter
from policy_store.codec import tuple_from_record

FIXTURES_DIR = Path(__file__).parent / "fixtures"
RBAC_MODEL = FIXTURES_DIR / "rbac_model.conf"
RBAC_POLICY = FIXTURES_DIR / "rbac_policy.csv"

INITIAL_POLICIES = [
    ["alice", "data1", "read"],
    ["bob", "data2", "write"],
    ["data2_admin", "data2", "read"],
    ["data2_admin", "data2", "write"],
]
INITIAL_GROUPINGS = [["alice", "data2_admin"]]


@pytest.fixture
def database_url(tmp_path):
    """File-backed SQLite database per test"""
    return f"sqlite:///{tmp_path / 'policy.db'}"


@pytest.fixture
def engine(database_url):
    engine = create_policy_engine(database_url)
    yield engine
    engine.dispose()


@pytest.fixture
def adapter(engine):
    """Adapter over an empty policy table"""
    return Adapter(engine)


@pytest.fixture
def file_enforcer():
    """Enforcer backed by the CSV policy file"""
    return casbin.Enforcer(str(RBAC_MODEL), str(RBAC_POLICY))


@pytest.fixture
def empty_enforcer(file_enforcer):
    """Enforcer whose in-memory policy has been cleared"""
    file_enforcer.clear_policy()
    return file_enforcer


@pytest.fixture
def seeded_adapter(adapter):
    """Adapter whose table holds the rules of rbac_policy.csv"""
    source = casbin.Enforcer(str(RBAC_MODEL), str(RBAC_POLICY))
    adapter.save_policy(source.get_model())
    return adapter


@pytest.fixture
def stored_rules(engine):
    """Read rule tuples straight from the table, in insertion order"""

    def _stored(ptype="p"):
        with Session(engine) as session:
            rows = session.scalars(
                select(CasbinRule).where(CasbinRule.ptype == ptype).order_by(CasbinRule.id)
            ).all()
        return [tuple_from_record(row) for row in rows]

    return _stored


# Test configuration
def pytest_configure(config):
    """Configure pytest"""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (uses the casbin enforcer)"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
