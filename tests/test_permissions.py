from __future__ import annotations

import pytest

from cbt_app.core import permissions
from cbt_app.core.models import Role


def _menu_ids(role, override=None) -> list[str]:
    return [entry.id for entry in permissions.get_menu_items_for_user(role, override)]


def test_catalog_has_unique_ids():
    ids = [info.id for info in permissions.PERMISSION_CATALOG]
    assert len(ids) == 35
    assert len(set(ids)) == len(ids)


def test_role_defaults_reference_catalog_permissions():
    catalog = {info.id for info in permissions.PERMISSION_CATALOG}
    for granted in permissions.DEFAULT_ROLE_PERMISSIONS.values():
        assert granted <= catalog
    for entry in permissions.MENU_ENTRIES:
        assert entry.required_permissions <= catalog
    assert permissions.DEFAULT_ROLE_PERMISSIONS[Role.ADMIN] == catalog


def test_enumerator_menu():
    assert _menu_ids("enumerator") == ["dashboard", "my-tests", "my-results", "my-certificates"]


def test_admin_menu_follows_configuration_order():
    assert _menu_ids(Role.ADMIN) == [
        "dashboard",
        "users",
        "roles",
        "surveys",
        "questions",
        "test-management",
        "results",
        "certificates",
        "system",
        "audit",
    ]


def test_supervisor_menu():
    assert _menu_ids("supervisor") == ["dashboard", "results", "certificates", "team-results", "enumerators"]


@pytest.mark.parametrize("role", list(Role))
def test_menu_items_are_accessible(role):
    for entry in permissions.get_menu_items_for_user(role):
        assert permissions.can_access_menu(role, entry.id)


def test_empty_override_denies_everything():
    assert permissions.has_permission("admin", "dashboard.view", []) is False
    assert _menu_ids("enumerator", []) == []


def test_override_replaces_role_defaults():
    override = ["dashboard.view", "users.view"]

    assert permissions.has_permission("admin", "system.settings", override) is False
    assert permissions.has_permission("enumerator", "users.view", override) is True
    assert permissions.has_permission("enumerator", "tests.take", override) is False


def test_override_cannot_open_menus_outside_the_role():
    assert permissions.can_access_menu("enumerator", "users", ["users.view"]) is False
    assert permissions.can_access_menu("supervisor", "users", ["users.view"]) is False


def test_unknown_role_and_menu_fail_closed():
    assert permissions.has_permission("guest", "dashboard.view") is False
    assert permissions.has_permission(None, "dashboard.view") is False
    assert _menu_ids("guest") == []
    assert permissions.can_access_menu("admin", "no-such-menu") is False
    assert permissions.find_menu_entry("no-such-menu") is None


def test_role_tags_are_normalized():
    assert Role.parse(" ADMIN ") is Role.ADMIN
    assert Role.parse("zo") is Role.ZONAL_OFFICER
    assert permissions.can_perform_action("Enumerator", "tests.take") is True


def test_resolve_active_menu_falls_back_to_dashboard():
    assert permissions.resolve_active_menu("enumerator", "my-tests") == "my-tests"
    assert permissions.resolve_active_menu("enumerator", "users") == "dashboard"
    assert permissions.resolve_active_menu("enumerator", "no-such-menu") == "dashboard"


def test_permissions_grouped_by_category():
    grouped = permissions.permissions_by_category()

    assert [info.id for info in grouped["Role Management"]] == [
        "roles.view",
        "roles.create",
        "roles.edit",
        "roles.delete",
    ]
    assert sum(len(items) for items in grouped.values()) == 35
