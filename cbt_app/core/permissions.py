"""Role and permission resolution for dashboard menus and actions.

Access is decided from static configuration only:

* each role has a default permission set;
* a user may carry an explicit override list which, when present, replaces
  the role defaults outright (it is never merged with them);
* a menu entry is reachable when the role is listed on the entry AND every
  permission the entry requires resolves true.

Unknown roles and unknown menu ids resolve to "no access" rather than
raising, since these checks only gate what the UI shows.
"""

from __future__ import annotations

from collections.abc import Iterable

from cbt_app.constants.session_constants import DEFAULT_MENU_ID
from cbt_app.core.models import MenuEntry, PermissionInfo, Role

RoleLike = Role | str | None


def _info(permission_id: str, name: str, description: str, category: str) -> PermissionInfo:
    return PermissionInfo(id=permission_id, name=name, description=description, category=category)


PERMISSION_CATALOG: tuple[PermissionInfo, ...] = (
    _info("dashboard.view", "View Dashboard", "Access to dashboard overview", "Dashboard"),
    _info("dashboard.admin", "Admin Dashboard", "Access to administrative dashboard", "Dashboard"),
    _info("users.view", "View Users", "View user list and details", "User Management"),
    _info("users.create", "Create Users", "Create new user accounts", "User Management"),
    _info("users.edit", "Edit Users", "Modify user information", "User Management"),
    _info("users.delete", "Delete Users", "Remove user accounts", "User Management"),
    _info("users.manage_roles", "Manage User Roles", "Assign and modify user roles", "User Management"),
    _info("surveys.view", "View Surveys", "View survey list and details", "Survey Management"),
    _info("surveys.create", "Create Surveys", "Create new surveys", "Survey Management"),
    _info("surveys.edit", "Edit Surveys", "Modify survey configuration", "Survey Management"),
    _info("surveys.delete", "Delete Surveys", "Remove surveys", "Survey Management"),
    _info("surveys.publish", "Publish Surveys", "Activate and publish surveys", "Survey Management"),
    _info("questions.view", "View Questions", "View question bank", "Question Management"),
    _info("questions.create", "Create Questions", "Add new questions", "Question Management"),
    _info("questions.edit", "Edit Questions", "Modify existing questions", "Question Management"),
    _info("questions.delete", "Delete Questions", "Remove questions", "Question Management"),
    _info("questions.import", "Import Questions", "Bulk import questions", "Question Management"),
    _info("tests.take", "Take Tests", "Participate in assessments", "Test Management"),
    _info("tests.view_results", "View Test Results", "View own test results", "Test Management"),
    _info("tests.view_all_results", "View All Results", "View all user test results", "Test Management"),
    _info("tests.manage_sessions", "Manage Test Sessions", "Control test sessions", "Test Management"),
    _info("certificates.view", "View Certificates", "View own certificates", "Certificates"),
    _info("certificates.view_all", "View All Certificates", "View all user certificates", "Certificates"),
    _info("certificates.generate", "Generate Certificates", "Create and issue certificates", "Certificates"),
    _info("certificates.revoke", "Revoke Certificates", "Revoke issued certificates", "Certificates"),
    _info("reports.view", "View Reports", "Access reporting dashboard", "Reporting"),
    _info("reports.export", "Export Reports", "Export report data", "Reporting"),
    _info("reports.advanced", "Advanced Reports", "Access advanced reporting features", "Reporting"),
    _info("system.settings", "System Settings", "Manage system configuration", "System"),
    _info("system.audit", "Audit Logs", "View system audit logs", "System"),
    _info("system.backup", "Backup Management", "Manage system backups", "System"),
    _info("roles.view", "View Roles", "View role definitions", "Role Management"),
    _info("roles.create", "Create Roles", "Create new roles", "Role Management"),
    _info("roles.edit", "Edit Roles", "Modify role permissions", "Role Management"),
    _info("roles.delete", "Delete Roles", "Remove custom roles", "Role Management"),
)

_ALL_ROLES = frozenset(Role)
_OFFICERS = frozenset({Role.ADMIN, Role.ZONAL_OFFICER, Role.REGIONAL_OFFICER})
_STAFF = _OFFICERS | {Role.SUPERVISOR}
_FIELD_MANAGERS = frozenset({Role.ZONAL_OFFICER, Role.REGIONAL_OFFICER, Role.SUPERVISOR})
_ADMIN_ONLY = frozenset({Role.ADMIN})
_ENUMERATOR_ONLY = frozenset({Role.ENUMERATOR})


def _menu(menu_id: str, label: str, icon: str, permission: str, roles: frozenset[Role]) -> MenuEntry:
    return MenuEntry(
        id=menu_id,
        label=label,
        icon=icon,
        required_permissions=frozenset({permission}),
        roles=roles,
    )


MENU_ENTRIES: tuple[MenuEntry, ...] = (
    _menu("dashboard", "Dashboard", "Home", "dashboard.view", _ALL_ROLES),
    _menu("users", "User Management", "Users", "users.view", _OFFICERS),
    _menu("roles", "Role Management", "Shield", "roles.view", _ADMIN_ONLY),
    _menu("surveys", "Survey Management", "FileText", "surveys.view", _OFFICERS),
    _menu("questions", "Question Bank", "BookOpen", "questions.view", _OFFICERS),
    _menu("my-tests", "My Tests", "Clock", "tests.take", _ENUMERATOR_ONLY),
    _menu("test-management", "Test Management", "ClipboardList", "tests.manage_sessions", _STAFF),
    _menu("results", "Results & Reports", "BarChart3", "reports.view", _STAFF),
    _menu("my-results", "My Results", "BarChart3", "tests.view_results", _ENUMERATOR_ONLY),
    _menu("certificates", "Certificates", "Award", "certificates.view_all", _STAFF),
    _menu("my-certificates", "My Certificates", "Award", "certificates.view", _ENUMERATOR_ONLY),
    _menu("team-results", "Team Results", "BarChart3", "tests.view_all_results", _FIELD_MANAGERS),
    _menu("enumerators", "My Enumerators", "UserCheck", "users.view", _FIELD_MANAGERS),
    _menu("system", "System Settings", "Settings", "system.settings", _ADMIN_ONLY),
    _menu("audit", "Audit Logs", "FileSearch", "system.audit", _ADMIN_ONLY),
)

DEFAULT_ROLE_PERMISSIONS: dict[Role, frozenset[str]] = {
    Role.ADMIN: frozenset(info.id for info in PERMISSION_CATALOG),
    Role.ZONAL_OFFICER: frozenset({
        "dashboard.view", "dashboard.admin",
        "users.view", "users.create", "users.edit", "users.manage_roles",
        "surveys.view", "surveys.create", "surveys.edit", "surveys.publish",
        "questions.view", "questions.create", "questions.edit", "questions.import",
        "tests.view_all_results", "tests.manage_sessions",
        "certificates.view_all", "certificates.generate",
        "reports.view", "reports.export", "reports.advanced",
        "roles.view",
    }),
    Role.REGIONAL_OFFICER: frozenset({
        "dashboard.view",
        "users.view", "users.create", "users.edit",
        "surveys.view",
        "questions.view",
        "tests.view_all_results",
        "certificates.view_all",
        "reports.view", "reports.export",
    }),
    Role.SUPERVISOR: frozenset({
        "dashboard.view",
        "users.view",
        "surveys.view",
        "questions.view",
        "tests.view_all_results",
        "certificates.view_all",
        "reports.view",
    }),
    Role.ENUMERATOR: frozenset({
        "dashboard.view",
        "tests.take",
        "tests.view_results",
        "certificates.view",
    }),
}

_MENU_BY_ID = {entry.id: entry for entry in MENU_ENTRIES}


def get_role_permissions(role: RoleLike) -> frozenset[str]:
    """Return the default permissions of a role (empty for unknown roles)."""
    parsed = Role.parse(role)
    if parsed is None:
        return frozenset()
    return DEFAULT_ROLE_PERMISSIONS.get(parsed, frozenset())


def has_permission(
    role: RoleLike,
    permission_id: str,
    override_permissions: Iterable[str] | None = None,
) -> bool:
    """Check a single permission.

    A supplied override collection decides on its own, even when it is empty;
    role defaults are consulted only when no override is given.
    """
    if override_permissions is not None:
        return permission_id in set(override_permissions)
    return permission_id in get_role_permissions(role)


def can_perform_action(
    role: RoleLike,
    action: str,
    override_permissions: Iterable[str] | None = None,
) -> bool:
    return has_permission(role, action, override_permissions)


def find_menu_entry(menu_id: str) -> MenuEntry | None:
    return _MENU_BY_ID.get(menu_id)


def can_access_menu(
    role: RoleLike,
    menu_id: str,
    override_permissions: Iterable[str] | None = None,
) -> bool:
    """Return True when the role is allowed on the entry and holds every required permission."""
    entry = _MENU_BY_ID.get(menu_id)
    if entry is None:
        return False
    parsed = Role.parse(role)
    if parsed is None or parsed not in entry.roles:
        return False
    overrides = None if override_permissions is None else frozenset(override_permissions)
    return all(
        has_permission(parsed, permission, overrides)
        for permission in entry.required_permissions
    )


def get_menu_items_for_user(
    role: RoleLike,
    override_permissions: Iterable[str] | None = None,
) -> list[MenuEntry]:
    """Return reachable menu entries in configuration order."""
    overrides = None if override_permissions is None else frozenset(override_permissions)
    return [entry for entry in MENU_ENTRIES if can_access_menu(role, entry.id, overrides)]


def resolve_active_menu(
    role: RoleLike,
    requested_menu_id: str,
    override_permissions: Iterable[str] | None = None,
) -> str:
    """Return the requested menu id if reachable, otherwise fall back to the dashboard."""
    if can_access_menu(role, requested_menu_id, override_permissions):
        return requested_menu_id
    return DEFAULT_MENU_ID


def permissions_by_category() -> dict[str, list[PermissionInfo]]:
    grouped: dict[str, list[PermissionInfo]] = {}
    for info in PERMISSION_CATALOG:
        grouped.setdefault(info.category, []).append(info)
    return grouped
