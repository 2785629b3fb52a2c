"""End-to-end API behaviour over HTTP."""
import uuid

import pytest
from httpx import AsyncClient


async def test_post_lifecycle(client: AsyncClient, students, login_as):
    headers = await login_as("23CAU001", "2005-03-07")

    me = (await client.get("/api/auth/me", headers=headers)).json()
    assert me["username"] == "23CAU001"
    assert me["student"]["name"] == "Meera Joshi"

    response = await client.post("/api/posts", json={"content": "Hello"}, headers=headers)
    assert response.status_code == 201
    post_id = response.json()["id"]

    feed = (await client.get("/api/posts", params={"page": 1}, headers=headers)).json()
    assert [p["id"] for p in feed["posts"]] == [post_id]
    assert feed["currentPage"] == 1
    assert feed["totalPages"] == 1
    assert feed["totalPosts"] == 1

    like = (await client.post(f"/api/posts/{post_id}/like", headers=headers)).json()
    assert like == {"likes": 1, "isLiked": True}
    like = (await client.post(f"/api/posts/{post_id}/like", headers=headers)).json()
    assert like == {"likes": 0, "isLiked": False}

    response = await client.post(f"/api/posts/{post_id}/comment", json={"content": "Nice!"}, headers=headers)
    assert response.status_code == 201
    comment = response.json()
    assert comment["content"] == "Nice!"
    assert comment["user"]["username"] == "23CAU001"

    post = (await client.get(f"/api/posts/{post_id}", headers=headers)).json()
    assert len(post["comments"]) == 1

    response = await client.delete(f"/api/posts/{post_id}/comment/{comment['id']}", headers=headers)
    assert response.json() == {"message": "Comment deleted successfully"}
    post = (await client.get(f"/api/posts/{post_id}", headers=headers)).json()
    assert post["comments"] == []

    response = await client.delete(f"/api/posts/{post_id}", headers=headers)
    assert response.json() == {"message": "Post deleted successfully"}

    response = await client.get(f"/api/posts/{post_id}", headers=headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Post not found"}


async def test_login_response_shape(client: AsyncClient, students):
    response = await client.post("/api/auth/login", json={"rollNumber": "23cau001", "dob": "2005-03-07"})

    assert response.status_code == 200
    body = response.json()
    assert body["tokenType"] == "bearer"
    assert body["user"]["username"] == "23CAU001"
    assert body["user"]["role"] == "student"
    assert body["user"]["bio"] == ""
    assert body["user"]["student"]["rollNumber"] == "23CAU001"
    assert "dob" not in body["user"]["student"]


async def test_login_failure(client: AsyncClient, students):
    response = await client.post("/api/auth/login", json={"rollNumber": "23CAU001", "dob": "2005-03-08"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}


async def test_protected_route_without_token(client: AsyncClient, students):
    response = await client.get("/api/posts")

    assert response.status_code == 401
    assert response.json() == {"error": "No token, authorization denied"}


async def test_protected_route_with_garbage_token(client: AsyncClient, students):
    response = await client.get("/api/auth/verify", headers={"Authorization": "Bearer not.a.token"})

    assert response.status_code == 401


async def test_verify_and_logout(client: AsyncClient, meera_headers):
    assert (await client.get("/api/auth/verify", headers=meera_headers)).json() == {"valid": True}
    response = await client.post("/api/auth/logout", headers=meera_headers)
    assert response.status_code == 200


async def test_user_posts_listing(client: AsyncClient, meera_headers, rahul_headers):
    meera = (await client.get("/api/auth/me", headers=meera_headers)).json()
    rahul = (await client.get("/api/auth/me", headers=rahul_headers)).json()
    post_id = (await client.post("/api/posts", json={"content": "mine"}, headers=meera_headers)).json()["id"]

    posts = (await client.get(f"/api/posts/user/{meera['id']}", headers=rahul_headers)).json()
    assert [p["id"] for p in posts] == [post_id]
    assert (await client.get(f"/api/posts/user/{rahul['id']}", headers=rahul_headers)).json() == []

    response = await client.get(f"/api/posts/user/{uuid.uuid4()}", headers=rahul_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


async def test_other_users_post_is_read_only(client: AsyncClient, meera_headers, rahul_headers):
    post_id = (await client.post("/api/posts", json={"content": "mine"}, headers=meera_headers)).json()["id"]

    response = await client.put(f"/api/posts/{post_id}", json={"content": "yours"}, headers=rahul_headers)
    assert response.status_code == 403
    assert response.json() == {"error": "Unauthorized"}

    response = await client.delete(f"/api/posts/{post_id}", headers=rahul_headers)
    assert response.status_code == 403


async def test_follow_and_profile(client: AsyncClient, meera_headers, rahul_headers):
    rahul = (await client.get("/api/auth/me", headers=rahul_headers)).json()
    meera = (await client.get("/api/auth/me", headers=meera_headers)).json()

    response = await client.post(f"/api/users/{rahul['id']}/follow", headers=meera_headers)
    assert response.json() == {"isFollowing": True, "followersCount": 1}

    profile = (await client.get(f"/api/users/{rahul['id']}", headers=meera_headers)).json()
    assert profile["followersCount"] == 1
    assert profile["isFollowing"] is True

    followers = (await client.get(f"/api/users/{rahul['id']}/followers", headers=meera_headers)).json()
    assert [u["id"] for u in followers] == [meera["id"]]
    following = (await client.get(f"/api/users/{meera['id']}/following", headers=meera_headers)).json()
    assert [u["id"] for u in following] == [rahul["id"]]

    response = await client.post(f"/api/users/{meera['id']}/follow", headers=meera_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Cannot follow yourself"}


async def test_search_and_profile_update(client: AsyncClient, meera_headers, rahul_headers):
    results = (await client.get("/api/users/search", params={"query": "meera"}, headers=rahul_headers)).json()
    assert [u["username"] for u in results] == ["23CAU001"]

    assert (await client.get("/api/users/search", headers=rahul_headers)).json() == []

    response = await client.put(
        "/api/users/profile",
        json={"bio": "Hi there", "profileImage": "http://img/meera.png"},
        headers=meera_headers,
    )
    assert response.status_code == 200
    assert response.json()["bio"] == "Hi there"
    assert response.json()["student"]["profileImage"] == "http://img/meera.png"


async def test_admin_routes_require_admin(client: AsyncClient, meera_headers):
    response = await client.get("/api/admin/stats", headers=meera_headers)

    assert response.status_code == 403
    assert response.json() == {"error": "Admin access required"}


async def test_admin_roster_flow(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/admin/students",
        json={"rollNumber": "24cau001", "dob": "2006-01-01", "name": "New Kid", "department": "Civil", "batch": "2024"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    student = response.json()
    assert student["rollNumber"] == "24CAU001"
    assert student["hasLoggedIn"] is False

    response = await client.post(
        "/api/admin/students",
        json={"rollNumber": "24CAU001", "dob": "2006-01-01", "name": "Again", "department": "Civil", "batch": "2024"},
        headers=admin_headers,
    )
    assert response.status_code == 409

    response = await client.put(
        f"/api/admin/students/{student['id']}", json={"department": "Architecture"}, headers=admin_headers
    )
    assert response.json()["department"] == "Architecture"
    assert response.json()["name"] == "New Kid"

    listing = (await client.get("/api/admin/students", params={"limit": 2}, headers=admin_headers)).json()
    assert listing["totalStudents"] == 6
    assert listing["totalPages"] == 3
    assert len(listing["students"]) == 2

    response = await client.get("/api/admin/students/export", headers=admin_headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "24CAU001" in response.text

    response = await client.delete(f"/api/admin/students/{student['id']}", headers=admin_headers)
    assert response.json()["message"] == "Student deleted successfully"
    response = await client.get(f"/api/admin/students/{student['id']}", headers=admin_headers)
    assert response.status_code == 404


async def test_admin_bulk_upload(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/admin/students/bulk",
        json={"students": [
            {"rollNumber": "24CAU100", "dob": "2006-01-01", "name": "A", "department": "Civil", "batch": "2024"},
            {"rollNumber": "24CAU101"},
        ]},
        headers=admin_headers,
    )
    body = response.json()
    assert body["successCount"] == 1
    assert body["errorCount"] == 1
    assert body["message"] == "1 students added successfully"
    assert body["results"]["success"][0]["rollNumber"] == "24CAU100"
    assert body["results"]["errors"][0]["index"] == 1

    response = await client.post(
        "/api/admin/students/bulk/csv",
        json={"data": "24CAU102,2006-02-02,B,Civil,2024\n24CAU100,2006-01-01,A,Civil,2024\n"},
        headers=admin_headers,
    )
    body = response.json()
    assert body["successCount"] == 1
    assert body["results"]["errors"][0]["index"] == 1


async def test_admin_bulk_upload_isolates_malformed_entries(client: AsyncClient, admin_headers):
    valid = {"rollNumber": "24CAU110", "dob": "2006-01-01", "name": "A", "department": "Civil", "batch": "2024"}

    response = await client.post(
        "/api/admin/students/bulk",
        json={"students": [valid, "garbage", {**valid, "rollNumber": "24CAU111", "dob": "2006-01-01T00:00:00"}]},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["successCount"] == 1
    assert body["results"]["success"][0]["rollNumber"] == "24CAU110"
    assert [e["index"] for e in body["results"]["errors"]] == [1, 2]
    assert body["results"]["errors"][0]["error"] == "Record must be an object"


async def test_student_deleted_token_stops_working(client: AsyncClient, admin_headers, meera_headers, students):
    response = await client.delete(f"/api/admin/students/{students['23CAU001'].id}", headers=admin_headers)
    assert response.json()["usersDeleted"] == 1

    response = await client.get("/api/auth/me", headers=meera_headers)
    assert response.status_code == 401


async def test_admin_stats_users_and_moderation(client: AsyncClient, admin_headers, meera_headers):
    post_id = (await client.post("/api/posts", json={"content": "spam"}, headers=meera_headers)).json()["id"]

    stats = (await client.get("/api/admin/stats", headers=admin_headers)).json()
    assert stats == {
        "totalStudents": 5,
        "totalUsers": 2,
        "totalPosts": 1,
        "studentsLoggedIn": 2,
        "studentsNotLoggedIn": 3,
    }

    users = (await client.get("/api/admin/users", headers=admin_headers)).json()
    assert {u["username"] for u in users} == {"ADMIN001", "23CAU001"}

    posts = (await client.get("/api/admin/posts", headers=admin_headers)).json()
    assert [p["id"] for p in posts] == [post_id]

    response = await client.delete(f"/api/admin/posts/{post_id}", headers=admin_headers)
    assert response.json() == {"message": "Post deleted successfully"}


async def test_made_by(client: AsyncClient, meera_headers, developer_info):
    response = await client.get("/api/made-by", headers=meera_headers)

    assert response.status_code == 200
    assert response.json()["developerName"] == "CampusCircle Team"


async def test_made_by_missing(client: AsyncClient, meera_headers):
    response = await client.get("/api/made-by", headers=meera_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Developer information not found"}


@pytest.mark.parametrize("path", ["/", "/api/health"])
async def test_health(client: AsyncClient, path):
    response = await client.get(path)

    assert response.status_code == 200
