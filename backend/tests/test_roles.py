"""Tests for role management and role assignment"""
from fastapi.testclient import TestClient

from app.models.account import Account
from app.stores.roles import RoleStore

ROLES = "/api/v1/superadmin/roles"
ASSIGN = "/api/v1/superadmin/assign-role"
AUDIT = "/api/v1/superadmin/audit-logs"


def test_list_roles(client: TestClient, admin_headers: dict, superadmin: Account, john: Account):
    """Test roles come back alphabetically with member counts"""
    response = client.get(ROLES, headers=admin_headers)
    assert response.status_code == 200

    roles = response.json()["roles"]
    assert [role["name"] for role in roles] == ["admin", "superadmin", "user"]

    by_name = {role["name"]: role for role in roles}
    assert by_name["admin"]["userCount"] == 1
    assert by_name["admin"]["users"] == [{"id": john.id, "name": "John Doe", "email": "john@example.com"}]
    assert by_name["user"]["userCount"] == 0
    assert by_name["user"]["users"] == []


def test_create_role(client: TestClient, admin_headers: dict):
    """Test creating a role stores permissions as given"""
    response = client.post(ROLES, json={"name": "auditor", "permissions": ["read", "export"]}, headers=admin_headers)
    assert response.status_code == 201

    data = response.json()
    assert data["name"] == "auditor"
    assert data["permissions"] == ["read", "export"]


def test_create_role_audited(client: TestClient, admin_headers: dict):
    """Test creation writes one CREATE/ROLE entry"""
    role_id = client.post(ROLES, json={"name": "auditor", "permissions": ["read"]}, headers=admin_headers).json()["id"]

    logs = client.get(AUDIT, params={"action": "CREATE"}, headers=admin_headers).json()["logs"]
    assert len(logs) == 1
    assert logs[0]["targetType"] == "ROLE"
    assert logs[0]["targetId"] == role_id
    assert logs[0]["details"] == {"roleName": "auditor", "permissions": ["read"]}


def test_create_role_duplicate_name(client: TestClient, admin_headers: dict):
    """Test duplicate role names are rejected"""
    response = client.post(ROLES, json={"name": "admin"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Role name already exists"


def test_create_role_requires_name(client: TestClient, admin_headers: dict):
    """Test a missing role name is a 400"""
    response = client.post(ROLES, json={"permissions": ["read"]}, headers=admin_headers)
    assert response.status_code == 400


def test_update_role(client: TestClient, admin_headers: dict, roles: dict):
    """Test renaming a role and replacing its permissions"""
    response = client.put(
        f"{ROLES}/{roles['user'].id}",
        json={"name": "member", "permissions": ["read", "comment"]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["name"] == "member"
    assert response.json()["permissions"] == ["read", "comment"]

    logs = client.get(AUDIT, params={"action": "UPDATE"}, headers=admin_headers).json()["logs"]
    assert logs[0]["targetType"] == "ROLE"
    assert logs[0]["details"]["updatedFields"] == ["name", "permissions"]


def test_update_superadmin_role_name_refused(client: TestClient, admin_headers: dict, roles: dict):
    """Test the superadmin role cannot be renamed, but its permissions can change"""
    superadmin_id = roles["superadmin"].id

    response = client.put(f"{ROLES}/{superadmin_id}", json={"name": "root"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot modify superadmin role name"

    response = client.put(f"{ROLES}/{superadmin_id}", json={"permissions": ["all"]}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["name"] == "superadmin"


def test_update_role_name_conflict(client: TestClient, admin_headers: dict, roles: dict):
    """Test renaming onto an existing role name is rejected"""
    response = client.put(f"{ROLES}/{roles['user'].id}", json={"name": "admin"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Role name already exists"


def test_update_role_not_found(client: TestClient, admin_headers: dict):
    """Test updating non-existent role"""
    response = client.put(f"{ROLES}/9999", json={"name": "ghost"}, headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Role not found"


def test_assign_role(client: TestClient, admin_headers: dict, john: Account, roles: dict):
    """Test assigning an extra role keeps the existing ones"""
    response = client.post(ASSIGN, json={"userId": john.id, "roleId": roles["user"].id}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Role assigned successfully"

    data = client.get(f"/api/v1/superadmin/users/{john.id}", headers=admin_headers).json()
    assert [role["name"] for role in data["roles"]] == ["admin", "user"]

    logs = client.get(AUDIT, params={"action": "ASSIGN_ROLE"}, headers=admin_headers).json()["logs"]
    assert len(logs) == 1
    assert logs[0]["targetId"] == john.id
    assert logs[0]["details"] == {"assignedRole": "user", "targetUserEmail": "john@example.com"}


def test_assign_role_twice_is_conflict(client: TestClient, db, admin_headers: dict, john: Account, roles: dict):
    """Test re-assigning a held role is rejected and leaves one membership"""
    payload = {"userId": john.id, "roleId": roles["user"].id}
    assert client.post(ASSIGN, json=payload, headers=admin_headers).status_code == 200

    response = client.post(ASSIGN, json=payload, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "User already has this role"

    assert RoleStore(db).count_memberships(john.id, roles["user"].id) == 1

    logs = client.get(AUDIT, params={"action": "ASSIGN_ROLE"}, headers=admin_headers).json()
    assert logs["pagination"]["total"] == 1


def test_assign_role_unknown_user_or_role(client: TestClient, admin_headers: dict, john: Account, roles: dict):
    """Test unknown user or role is a 404"""
    response = client.post(ASSIGN, json={"userId": 9999, "roleId": roles["user"].id}, headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "User not found"

    response = client.post(ASSIGN, json={"userId": john.id, "roleId": 9999}, headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Role not found"


def test_assign_role_missing_fields(client: TestClient, admin_headers: dict):
    """Test missing userId/roleId is a 400"""
    response = client.post(ASSIGN, json={"userId": 1}, headers=admin_headers)
    assert response.status_code == 400


def test_roles_forbidden_for_non_superadmin(client: TestClient, user_headers: dict, roles: dict):
    """Test role endpoints require the superadmin role"""
    assert client.get(ROLES, headers=user_headers).status_code == 403
    assert client.post(ROLES, json={"name": "x-role"}, headers=user_headers).status_code == 403
