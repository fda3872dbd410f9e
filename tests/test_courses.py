from summerreg.extensions import db
from summerreg.models import Course


def test_admin_creates_course(client, admin_headers):
    resp = client.post("/api/admin/courses", json={"name": "TEST", "capacity": 1}, headers=admin_headers)
    body = resp.get_json()

    assert resp.status_code == 201
    assert body["name"] == "TEST"
    assert body["capacity"] == 1


def test_create_course_rejects_bad_capacity(client, admin_headers):
    for capacity in (0, -3, None, "abc", 2.9, 10**20):
        resp = client.post("/api/admin/courses", json={"name": "X", "capacity": capacity}, headers=admin_headers)
        assert resp.status_code == 400


def test_create_course_rejects_duplicate_name(client, admin_headers, courses):
    resp = client.post("/api/admin/courses", json={"name": "FÍSICA I", "capacity": 10}, headers=admin_headers)
    assert resp.status_code == 409


def test_course_names_are_case_sensitive(client, admin_headers, courses):
    resp = client.post("/api/admin/courses", json={"name": "física i", "capacity": 10}, headers=admin_headers)
    assert resp.status_code == 201


def test_capacity_cannot_drop_below_enrollment(client, admin_headers, make_course, enroll, courses):
    course_id = make_course("CUPO", capacity=30)
    enroll([course_id, courses["mat"]], 5)

    url = f"/api/admin/courses/{course_id}"
    resp = client.put(url, json={"name": "CUPO", "capacity": 4}, headers=admin_headers)
    assert resp.status_code == 400
    assert "5" in resp.get_json()["error"]

    resp = client.put(url, json={"name": "CUPO", "capacity": 5}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()["capacity"] == 5


def test_update_missing_course_is_not_found(client, admin_headers):
    resp = client.put("/api/admin/courses/999", json={"name": "X", "capacity": 3}, headers=admin_headers)
    assert resp.status_code == 404


def test_rename_to_other_course_name_conflicts(client, admin_headers, courses):
    resp = client.put(
        f"/api/admin/courses/{courses['mat']}",
        json={"name": "FÍSICA I", "capacity": 30},
        headers=admin_headers,
    )
    assert resp.status_code == 409


def test_keeping_own_name_is_allowed(client, admin_headers, courses):
    resp = client.put(
        f"/api/admin/courses/{courses['mat']}",
        json={"name": "MATEMÁTICA I", "capacity": 40},
        headers=admin_headers,
    )
    assert resp.status_code == 200


def test_delete_course_with_enrollment_conflicts(client, admin_headers, enroll, courses):
    enroll([courses["mat"], courses["fis"]], 1)

    resp = client.delete(f"/api/admin/courses/{courses['mat']}", headers=admin_headers)
    assert resp.status_code == 409
    assert db.session.get(Course, courses["mat"]) is not None


def test_delete_course_without_enrollment(client, admin_headers, courses):
    resp = client.delete(f"/api/admin/courses/{courses['alg']}", headers=admin_headers)
    assert resp.status_code == 200
    assert db.session.get(Course, courses["alg"]) is None

    resp = client.delete(f"/api/admin/courses/{courses['alg']}", headers=admin_headers)
    assert resp.status_code == 404


def test_admin_scenario_single_seat_course(client, admin_headers, student_headers, courses):
    resp = client.post("/api/admin/courses", json={"name": "TEST", "capacity": 1}, headers=admin_headers)
    test_id = resp.get_json()["id"]

    resp = client.post(
        "/api/preselection",
        json={"courseIds": [test_id, courses["mat"]]},
        headers=student_headers,
    )
    assert resp.status_code == 201

    resp = client.put(f"/api/admin/courses/{test_id}", json={"name": "TEST", "capacity": 0}, headers=admin_headers)
    assert resp.status_code == 400

    resp = client.delete(f"/api/admin/courses/{test_id}", headers=admin_headers)
    assert resp.status_code == 409


def test_admin_list_shows_enrollment_and_spots(client, admin_headers, enroll, courses):
    enroll([courses["mat"], courses["fis"]], 2)

    items = client.get("/api/admin/courses", headers=admin_headers).get_json()
    by_name = {c["name"]: c for c in items}

    assert by_name["MATEMÁTICA I"]["votes"] == 2
    assert by_name["MATEMÁTICA I"]["availableSpots"] == 28
    assert by_name["ALGORITMOS I"]["votes"] == 0


def test_public_course_list_is_name_ordered(client, courses):
    items = client.get("/api/courses").get_json()
    assert [c["name"] for c in items] == ["ALGORITMOS I", "FÍSICA I", "MATEMÁTICA I"]
    assert set(items[0]) == {"id", "name"}


def test_course_stats_rank_by_enrollment(client, enroll, make_course, courses):
    small = make_course("PEQUEÑO", capacity=4)
    enroll([small, courses["fis"]], 3)

    body = client.get("/api/courses/stats").get_json()

    assert body["top10"][0]["votes"] == 3
    assert {body["top10"][0]["name"], body["top10"][1]["name"]} == {"PEQUEÑO", "FÍSICA I"}
    popularity = {c["name"]: c["popularity"] for c in body["allCourses"]}
    assert popularity["PEQUEÑO"] == 75
    assert popularity["FÍSICA I"] == 10
    assert popularity["MATEMÁTICA I"] == 0
    assert body["stats"]["totalVotes"] == 6
    assert body["stats"]["totalCourses"] == 4


def test_course_name_longer_than_column_is_rejected(client, admin_headers, courses):
    long_name = "X" * 161

    assert client.post(
        "/api/admin/courses", json={"name": long_name, "capacity": 5}, headers=admin_headers
    ).status_code == 400
    resp = client.put(
        f"/api/admin/courses/{courses['mat']}", json={"name": long_name, "capacity": 5}, headers=admin_headers
    )
    assert resp.status_code == 400
    assert db.session.get(Course, courses["mat"]).name == "MATEMÁTICA I"


def test_out_of_range_course_id_is_not_found(client, admin_headers):
    url = f"/api/admin/courses/{10**20}"

    assert client.put(url, json={"name": "X", "capacity": 5}, headers=admin_headers).status_code == 404
    assert client.delete(url, headers=admin_headers).status_code == 404
