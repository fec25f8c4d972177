"""Tests for user management endpoints"""
from fastapi.testclient import TestClient

from app.models.account import Account
from app.models.role import Membership
from conftest import bearer, make_account

USERS = "/api/v1/superadmin/users"
AUDIT = "/api/v1/superadmin/audit-logs"


def test_create_user(client: TestClient, admin_headers: dict, sample_user_data: dict):
    """Test creating a user"""
    response = client.post(USERS, json=sample_user_data, headers=admin_headers)
    assert response.status_code == 201

    data = response.json()
    assert data["name"] == sample_user_data["name"]
    assert data["email"] == sample_user_data["email"]
    assert [role["id"] for role in data["roles"]] == sample_user_data["roleIds"]
    assert data["lastLogin"] is None
    assert "password" not in data
    assert "passwordHash" not in data


def test_create_user_stores_hash_only(client: TestClient, db, admin_headers: dict, sample_user_data: dict):
    """Test the plaintext password is never persisted"""
    user_id = client.post(USERS, json=sample_user_data, headers=admin_headers).json()["id"]

    account = db.get(Account, user_id)
    assert account.password_hash != sample_user_data["password"]
    assert account.password_hash.startswith("$2")


def test_create_user_audited(client: TestClient, superadmin: Account, admin_headers: dict, sample_user_data: dict):
    """Test creation writes one CREATE/USER entry"""
    user_id = client.post(USERS, json=sample_user_data, headers=admin_headers).json()["id"]

    logs = client.get(AUDIT, params={"action": "CREATE"}, headers=admin_headers).json()["logs"]
    assert len(logs) == 1
    assert logs[0]["actorId"] == superadmin.id
    assert logs[0]["targetType"] == "USER"
    assert logs[0]["targetId"] == user_id
    assert logs[0]["details"]["email"] == sample_user_data["email"]
    assert logs[0]["details"]["assignedRoles"] == sample_user_data["roleIds"]


def test_create_user_duplicate_email(client: TestClient, admin_headers: dict, sample_user_data: dict):
    """Test duplicate email is rejected and nothing more is audited"""
    client.post(USERS, json=sample_user_data, headers=admin_headers)

    response = client.post(USERS, json=sample_user_data, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Email already exists"

    logs = client.get(AUDIT, params={"action": "CREATE"}, headers=admin_headers).json()
    assert logs["pagination"]["total"] == 1


def test_create_user_missing_fields(client: TestClient, admin_headers: dict):
    """Test missing name/email/password is a 400"""
    response = client.post(USERS, json={"email": "a@example.com"}, headers=admin_headers)
    assert response.status_code == 400

    response = client.post(
        USERS,
        json={"name": "Bad Email", "email": "not-an-email", "password": "x"},
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_create_user_ignores_unknown_role_ids(client: TestClient, admin_headers: dict, sample_user_data: dict):
    """Test unknown roleIds are dropped silently"""
    payload = {**sample_user_data, "roleIds": sample_user_data["roleIds"] + [9999]}
    response = client.post(USERS, json=payload, headers=admin_headers)
    assert response.status_code == 201
    assert [role["id"] for role in response.json()["roles"]] == sample_user_data["roleIds"]


def test_get_user(client: TestClient, admin_headers: dict, john: Account):
    """Test getting a user by ID"""
    response = client.get(f"{USERS}/{john.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["email"] == "john@example.com"
    assert response.json()["roles"][0]["name"] == "admin"


def test_get_user_not_found(client: TestClient, admin_headers: dict):
    """Test getting non-existent user"""
    response = client.get(f"{USERS}/9999", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


def test_list_users_newest_first(client: TestClient, db, admin_headers: dict, superadmin: Account, roles: dict):
    """Test listing users, newest first, with roles"""
    jane = make_account(db, "Jane Smith", "jane@example.com", roles=[roles["user"]])

    response = client.get(USERS, headers=admin_headers)
    assert response.status_code == 200

    data = response.json()
    assert [user["id"] for user in data["users"]] == [jane.id, superadmin.id]
    assert data["pagination"] == {"total": 2, "page": 1, "limit": 10, "totalPages": 1}


def test_list_users_pages_partition_the_result(client: TestClient, db, admin_headers: dict, superadmin: Account):
    """Test concatenating every page yields each user exactly once"""
    for i in range(24):
        make_account(db, f"User {i:02d}", f"user{i:02d}@example.com")

    first = client.get(USERS, params={"page": 1, "limit": 10}, headers=admin_headers).json()
    assert first["pagination"]["total"] == 25
    assert first["pagination"]["totalPages"] == 3

    seen = []
    for page in range(1, 4):
        data = client.get(USERS, params={"page": page, "limit": 10}, headers=admin_headers).json()
        seen.extend(user["id"] for user in data["users"])

    assert len(seen) == 25
    assert len(set(seen)) == 25


def test_list_users_page_past_end_is_empty(client: TestClient, admin_headers: dict, superadmin: Account):
    """Test a page beyond the last returns no users but the real total"""
    data = client.get(USERS, params={"page": 5}, headers=admin_headers).json()
    assert data["users"] == []
    assert data["pagination"]["total"] == 1


def test_list_users_search_is_case_insensitive(client: TestClient, admin_headers: dict, john: Account):
    """Test search matches name or email regardless of case"""
    by_name = client.get(USERS, params={"search": "JOHN"}, headers=admin_headers).json()
    assert [user["id"] for user in by_name["users"]] == [john.id]

    by_email = client.get(USERS, params={"search": "@EXAMPLE"}, headers=admin_headers).json()
    assert by_email["pagination"]["total"] == 2


def test_list_users_search_treats_wildcards_literally(client: TestClient, admin_headers: dict, john: Account):
    """Test % in the search term is not a LIKE wildcard"""
    data = client.get(USERS, params={"search": "%"}, headers=admin_headers).json()
    assert data["users"] == []


def test_list_users_role_filter(client: TestClient, admin_headers: dict, superadmin: Account, john: Account):
    """Test filtering by role name"""
    data = client.get(USERS, params={"role": "admin"}, headers=admin_headers).json()
    assert [user["id"] for user in data["users"]] == [john.id]

    data = client.get(USERS, params={"role": "nobody"}, headers=admin_headers).json()
    assert data["users"] == []


def test_update_user(client: TestClient, admin_headers: dict, john: Account):
    """Test partial update leaves omitted fields alone"""
    response = client.put(f"{USERS}/{john.id}", json={"name": "Johnny"}, headers=admin_headers)
    assert response.status_code == 200

    data = response.json()
    assert data["name"] == "Johnny"
    assert data["email"] == "john@example.com"
    assert data["roles"][0]["name"] == "admin"


def test_update_user_replaces_roles(client: TestClient, admin_headers: dict, john: Account, roles: dict):
    """Test roleIds replaces the whole role set; [] clears it"""
    response = client.put(
        f"{USERS}/{john.id}",
        json={"roleIds": [roles["admin"].id, roles["user"].id]},
        headers=admin_headers,
    )
    assert sorted(role["name"] for role in response.json()["roles"]) == ["admin", "user"]

    response = client.put(f"{USERS}/{john.id}", json={"roleIds": [roles["user"].id]}, headers=admin_headers)
    assert [role["name"] for role in response.json()["roles"]] == ["user"]

    response = client.put(f"{USERS}/{john.id}", json={"roleIds": []}, headers=admin_headers)
    assert response.json()["roles"] == []


def test_update_user_password_allows_new_login(client: TestClient, admin_headers: dict, john: Account):
    """Test a password change takes effect on the next login"""
    client.put(f"{USERS}/{john.id}", json={"password": "brand-new"}, headers=admin_headers)

    old = client.post("/api/v1/auth/login", json={"email": "john@example.com", "password": "password123"})
    new = client.post("/api/v1/auth/login", json={"email": "john@example.com", "password": "brand-new"})
    assert old.status_code == 401
    assert new.status_code == 200


def test_update_user_email_conflict(client: TestClient, admin_headers: dict, superadmin: Account, john: Account):
    """Test changing to another user's email is rejected and nothing changes"""
    response = client.put(
        f"{USERS}/{john.id}",
        json={"name": "Changed", "email": superadmin.email},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Email already exists"

    data = client.get(f"{USERS}/{john.id}", headers=admin_headers).json()
    assert data["name"] == "John Doe"


def test_update_user_keeps_own_email(client: TestClient, admin_headers: dict, john: Account):
    """Test resubmitting the current email is not a conflict"""
    response = client.put(f"{USERS}/{john.id}", json={"email": "john@example.com"}, headers=admin_headers)
    assert response.status_code == 200


def test_update_user_audited(client: TestClient, admin_headers: dict, john: Account):
    """Test update writes one UPDATE entry naming the changed fields"""
    client.put(f"{USERS}/{john.id}", json={"name": "Johnny", "password": "x1"}, headers=admin_headers)

    logs = client.get(AUDIT, params={"action": "UPDATE"}, headers=admin_headers).json()["logs"]
    assert len(logs) == 1
    assert logs[0]["targetId"] == john.id
    assert logs[0]["details"]["updatedFields"] == ["name", "password"]


def test_update_user_not_found(client: TestClient, admin_headers: dict):
    """Test updating non-existent user"""
    response = client.put(f"{USERS}/9999", json={"name": "Nobody"}, headers=admin_headers)
    assert response.status_code == 404


def test_delete_user(client: TestClient, db, admin_headers: dict, john: Account):
    """Test deleting a user removes their memberships and is audited"""
    john_id = john.id
    response = client.delete(f"{USERS}/{john_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "User deleted successfully"

    assert client.get(f"{USERS}/{john_id}", headers=admin_headers).status_code == 404
    assert db.query(Membership).filter(Membership.account_id == john_id).count() == 0

    logs = client.get(AUDIT, params={"action": "DELETE"}, headers=admin_headers).json()["logs"]
    assert logs[0]["targetId"] == john_id
    assert logs[0]["details"]["deletedEmail"] == "john@example.com"


def test_delete_user_audit_survives_actor_deletion(
    client: TestClient, db, admin_headers: dict, superadmin: Account, roles: dict
):
    """Test entries performed by a deleted account stay queryable"""
    other_admin = make_account(db, "Other Admin", "other@example.com", roles=[roles["superadmin"]])
    other_id = other_admin.id
    client.post(
        USERS,
        json={"name": "Made By Other", "email": "made@example.com", "password": "pw"},
        headers=bearer(other_admin),
    )
    # Demote, then delete the actor
    client.put(f"{USERS}/{other_id}", json={"roleIds": []}, headers=admin_headers)
    assert client.delete(f"{USERS}/{other_id}", headers=admin_headers).status_code == 200

    logs = client.get(AUDIT, params={"userId": other_id}, headers=admin_headers).json()["logs"]
    assert len(logs) == 1
    assert logs[0]["actorId"] == other_id
    assert logs[0]["actor"] is None


def test_delete_self_refused(client: TestClient, admin_headers: dict, superadmin: Account):
    """Test a superadmin cannot delete their own account"""
    response = client.delete(f"{USERS}/{superadmin.id}", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot delete your own account"


def test_delete_other_superadmin_refused(client: TestClient, db, admin_headers: dict, roles: dict):
    """Test superadmin accounts cannot be deleted"""
    other = make_account(db, "Second Admin", "second@example.com", roles=[roles["superadmin"]])

    response = client.delete(f"{USERS}/{other.id}", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot delete a superadmin account"


def test_delete_user_not_found(client: TestClient, admin_headers: dict):
    """Test deleting non-existent user"""
    response = client.delete(f"{USERS}/9999", headers=admin_headers)
    assert response.status_code == 404
