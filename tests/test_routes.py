"""
HTTP tests for the portal routes.

Uses FastAPI's TestClient against an app built around a fresh store.
"""

import pytest


# --- POST /register ---

def test_register_json(client, ada):
    resp = client.post("/register", json=ada)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Student registered successfully!", "studentId": 1}


def test_register_form_encoded(client, ada, store):
    resp = client.post("/register", data=ada)
    assert resp.status_code == 200
    assert resp.json()["studentId"] == 1
    assert store.get_student(1).first_name == "Ada"


@pytest.mark.parametrize("field", ["firstName", "lastName", "email", "course"])
def test_register_missing_field(client, ada, field):
    del ada[field]
    resp = client.post("/register", json=ada)
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Please fill all required fields"}


def test_register_duplicate_email(client, ada, store):
    client.post("/register", json=ada)
    resp = client.post("/register", json=ada)
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Email already registered"}
    assert len(store.list_students()) == 1


def test_register_malformed_json(client, store):
    resp = client.post("/register", content="{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert store.list_students() == []


def test_register_json_array(client):
    resp = client.post("/register", json=["Ada", "Lovelace"])
    assert resp.status_code == 400
    assert resp.json()["message"] == "Please fill all required fields"


def test_register_unsupported_content_type(client):
    resp = client.post("/register", content="firstName=Ada", headers={"Content-Type": "text/plain"})
    assert resp.status_code == 400


def test_register_multipart_without_boundary(client, store):
    resp = client.post("/register", content=b"x", headers={"Content-Type": "multipart/form-data"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Please fill all required fields"}
    assert store.list_students() == []


def test_register_snake_case_keys_rejected(client, store):
    resp = client.post("/register", json={"first_name": "Ada", "last_name": "L", "email": "a@x.com", "course": "CS"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Please fill all required fields"}
    assert store.list_students() == []


def test_register_zero_first_name_rejected(client, ada):
    ada["firstName"] = 0
    resp = client.post("/register", json=ada)
    assert resp.status_code == 400
    assert resp.json()["success"] is False


# --- DELETE /student/{id} ---

def test_delete_student(client, ada, store):
    client.post("/register", json=ada)
    resp = client.delete("/student/1")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Student deleted successfully"}
    assert store.list_students() == []


def test_delete_unknown_student(client):
    resp = client.delete("/student/42")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Student not found"}


def test_delete_non_numeric_id(client, ada):
    client.post("/register", json=ada)
    resp = client.delete("/student/abc")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


# --- JSON reads ---

def test_api_students_empty(client):
    resp = client.get("/api/students")
    assert resp.status_code == 200
    assert resp.json() == []


def test_api_students_lists_in_order(client, make_student):
    for n in (3, 1, 2):
        client.post("/register", json=make_student(n))
    students = client.get("/api/students").json()
    assert [s["id"] for s in students] == [1, 2, 3]
    assert [s["email"] for s in students] == [
        "student3@example.com", "student1@example.com", "student2@example.com"
    ]
    assert set(students[0]) == {
        "id", "firstName", "lastName", "email", "phone", "dateOfBirth",
        "gender", "course", "address", "registeredAt",
    }


def test_api_stats(client, make_student):
    client.post("/register", json=make_student(1, course="CS"))
    client.post("/register", json=make_student(2, course="CS"))
    client.post("/register", json=make_student(3, course="Math"))
    resp = client.get("/api/stats")
    assert resp.status_code == 200
    assert resp.json() == {"totalStudents": 3, "courses": {"CS": 2, "Math": 1}}


def test_ada_scenario_over_http(client, ada):
    assert client.post("/register", json=ada).json()["studentId"] == 1
    assert client.post("/register", json=ada).status_code == 400
    assert len(client.get("/api/students").json()) == 1
    assert client.delete("/student/1").status_code == 200
    assert client.delete("/student/1").status_code == 404
    assert client.get("/api/stats").json() == {"totalStudents": 0, "courses": {}}


# --- HTML pages ---

def test_index_page(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    assert "Student Registration Portal" in resp.text
    assert 'id="statsContainer"' in resp.text


def test_register_page(client):
    resp = client.get("/register")
    assert resp.status_code == 200
    assert 'id="registrationForm"' in resp.text
    for name in ("firstName", "lastName", "email", "phone", "dateOfBirth", "gender", "course", "address"):
        assert f'name="{name}"' in resp.text


def test_students_page_lists_records(client, ada, make_student):
    client.post("/register", json=ada)
    client.post("/register", json=make_student(2))
    resp = client.get("/students")
    assert resp.status_code == 200
    assert "Ada Lovelace" in resp.text
    assert "student2@example.com" in resp.text
    assert "deleteStudent(2)" in resp.text


def test_students_page_empty(client):
    resp = client.get("/students")
    assert resp.status_code == 200
    assert "No students registered yet" in resp.text


def test_student_detail_page(client):
    client.post("/register", json={
        "firstName": "Ada", "lastName": "Lovelace", "email": "ada@x.com",
        "course": "CS", "address": "London",
    })
    resp = client.get("/student/1")
    assert resp.status_code == 200
    assert "Student Details" in resp.text
    assert "ada@x.com" in resp.text
    assert "London" in resp.text


def test_student_detail_escapes_html(client):
    client.post("/register", json={
        "firstName": "<script>alert(1)</script>", "lastName": "X", "email": "x@x.com", "course": "CS",
    })
    resp = client.get("/student/1")
    assert "<script>alert(1)</script>" not in resp.text
    assert "&lt;script&gt;" in resp.text


@pytest.mark.parametrize("path", ["/student/99", "/student/abc", "/student/1.0", "/student/99999999999999999999"])
def test_student_detail_not_found(client, path):
    resp = client.get(path)
    assert resp.status_code == 404
    assert "text/html" in resp.headers["content-type"]
    assert "Student Not Found" in resp.text


# --- fallbacks & ambient ---

def test_unmatched_path_renders_404(client):
    resp = client.get("/no/such/page")
    assert resp.status_code == 404
    assert "text/html" in resp.headers["content-type"]
    assert "Page Not Found" in resp.text


def test_unsupported_method_renders_404(client):
    resp = client.put("/student/1")
    assert resp.status_code == 404
    assert "Page Not Found" in resp.text


def test_static_assets_served(client):
    resp = client.get("/static/js/main.js")
    assert resp.status_code == 200
    assert "deleteStudent" in resp.text
    assert client.get("/static/css/style.css").status_code == 200


def test_missing_static_asset_renders_404(client):
    resp = client.get("/static/js/missing.js")
    assert resp.status_code == 404
    assert "Page Not Found" in resp.text


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_request_id_header(client):
    first = client.get("/health").headers["X-Request-ID"]
    second = client.get("/health").headers["X-Request-ID"]
    assert first and second and first != second


def test_apps_do_not_share_state(ada):
    from fastapi.testclient import TestClient
    from student_portal.main import create_app

    with TestClient(create_app()) as one, TestClient(create_app()) as two:
        one.post("/register", json=ada)
        assert two.get("/api/students").json() == []
