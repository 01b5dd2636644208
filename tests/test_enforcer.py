"""
Integration Tests for the adapter behind a casbin enforcer

Covers the auto-save flow (enforcer mutations persisted through the adapter)
and the lazily built enforcer over the packaged model.
"""

import casbin
import pytest

from config import Settings
from conftest import INITIAL_POLICIES, RBAC_MODEL
from policy_store.adapter import Filter
from policy_store.enforcer import build_enforcer, get_enforcer, reset_enforcer


@pytest.fixture
def enforcer(seeded_adapter):
    """Enforcer that loads its policy through the adapter"""
    return casbin.Enforcer(str(RBAC_MODEL), seeded_adapter)


@pytest.fixture
def settings(database_url):
    return Settings(DATABASE_URL=database_url)


@pytest.fixture(autouse=True)
def clean_global_enforcer():
    yield
    reset_enforcer()


# ============================================================================
# Auto-save flow
# ============================================================================

@pytest.mark.integration
class TestAutoSave:
    """Enforcer mutations reach the database only when auto-save is on"""

    def test_enforcer_loads_saved_policy(self, enforcer):
        assert enforcer.get_policy() == INITIAL_POLICIES
        assert enforcer.enforce("alice", "data2", "read") is True
        assert enforcer.enforce("bob", "data1", "read") is False

    def test_disabled_auto_save_does_not_persist(self, enforcer):
        enforcer.enable_auto_save(False)
        enforcer.add_policy("alice", "data1", "write")

        enforcer.load_policy()

        assert enforcer.get_policy() == INITIAL_POLICIES

    def test_auto_save_round_trip(self, enforcer):
        enforcer.enable_auto_save(True)

        enforcer.add_policy("alice", "data1", "write")
        enforcer.load_policy()
        assert enforcer.get_policy() == INITIAL_POLICIES + [["alice", "data1", "write"]]

        enforcer.remove_policy("alice", "data1", "write")
        enforcer.load_policy()
        assert enforcer.get_policy() == INITIAL_POLICIES

        enforcer.remove_filtered_policy(0, "data2_admin")
        enforcer.load_policy()
        assert enforcer.get_policy() == [["alice", "data1", "read"], ["bob", "data2", "write"]]

        enforcer.remove_policies([["alice", "data1", "read"], ["bob", "data2", "write"]])
        enforcer.load_policy()
        assert enforcer.get_policy() == []

    def test_update_policy_through_enforcer(self, enforcer):
        enforcer.update_policy(["alice", "data1", "read"], ["alice", "data1", "write"])

        enforcer.load_policy()

        assert enforcer.get_policy() == [["alice", "data1", "write"]] + INITIAL_POLICIES[1:]

    def test_filtered_load_through_enforcer(self, seeded_adapter):
        enforcer = casbin.Enforcer(str(RBAC_MODEL), seeded_adapter)

        enforcer.load_filtered_policy(Filter(v0=["bob"]))

        assert enforcer.get_policy() == [["bob", "data2", "write"]]
        assert enforcer.is_filtered() is True


# ============================================================================
# Enforcer construction
# ============================================================================

@pytest.mark.integration
class TestBuildEnforcer:
    """Enforcers built over the packaged model"""

    def test_build_enforcer_loads_stored_policy(self, seeded_adapter, settings):
        enforcer = build_enforcer(seeded_adapter, settings)

        assert enforcer.get_policy() == INITIAL_POLICIES
        assert enforcer.get_grouping_policy() == [["alice", "data2_admin"]]
        assert enforcer.enforce("alice", "data2", "write") is True

    def test_build_enforcer_honors_auto_save_setting(self, adapter, database_url, stored_rules):
        enforcer = build_enforcer(adapter, Settings(DATABASE_URL=database_url, CASBIN_AUTO_SAVE="false"))

        enforcer.add_policy("carol", "data3", "read")

        assert stored_rules("p") == []

    def test_get_enforcer_is_cached(self, settings):
        first = get_enforcer(settings)
        first.add_policy("carol", "data3", "read")

        assert get_enforcer(settings) is first
        reset_enforcer()
        second = get_enforcer(settings)
        assert second is not first
        assert second.get_policy() == [["carol", "data3", "read"]]
