import pytest

from summerreg.errors import InvalidInput
from summerreg.extensions import db
from summerreg.models import CourseSelection, selection_courses
from summerreg.services.preselection import parse_course_ids


def _links(selection_id):
    rows = db.session.execute(
        selection_courses.select().where(selection_courses.c.selection_id == selection_id)
    ).all()
    return {row.course_id for row in rows}


def test_student_preselects_two_courses(client, student_headers, courses):
    resp = client.post(
        "/api/preselection",
        json={"courseIds": [courses["mat"], courses["fis"]]},
        headers=student_headers,
    )
    assert resp.status_code == 201

    resp = client.get("/api/preselection", headers=student_headers)
    body = resp.get_json()

    assert body["hasPreselection"] is True
    names = {c["name"] for c in body["currentSelection"]["selectedCourses"]}
    assert names == {"MATEMÁTICA I", "FÍSICA I"}
    assert body["currentSelection"]["student"] == {"name": "Ana", "lastName": "García"}


def test_get_without_selection_lists_courses_by_name(client, student_headers, courses):
    body = client.get("/api/preselection", headers=student_headers).get_json()

    assert body["hasPreselection"] is False
    assert body["currentSelection"] is None
    assert [c["name"] for c in body["courses"]] == ["ALGORITMOS I", "FÍSICA I", "MATEMÁTICA I"]


def test_replace_with_single_course_is_rejected(client, student_headers, courses):
    client.post(
        "/api/preselection",
        json={"courseIds": [courses["mat"], courses["fis"]]},
        headers=student_headers,
    )

    resp = client.put("/api/preselection", json={"courseIds": [courses["alg"]]}, headers=student_headers)

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Debe seleccionar exactamente 2 cursos"


@pytest.mark.parametrize("course_ids", [
    None, [], [1], [1, 2, 3], [1, 1], "1,2", ["a", 2], [True, 2], [1.5, 2], [10**20, 2],
])
def test_parse_course_ids_rejects_bad_input(course_ids):
    with pytest.raises(InvalidInput):
        parse_course_ids(course_ids)


def test_parse_course_ids_accepts_numeric_strings():
    assert parse_course_ids(["3", 7]) == [3, 7]


def test_duplicate_course_ids_are_rejected(client, student_headers, courses):
    resp = client.post(
        "/api/preselection",
        json={"courseIds": [courses["mat"], courses["mat"]]},
        headers=student_headers,
    )
    assert resp.status_code == 400
    assert CourseSelection.query.count() == 0


def test_unknown_course_is_not_found(client, student_headers, courses):
    resp = client.post(
        "/api/preselection",
        json={"courseIds": [courses["mat"], 9999]},
        headers=student_headers,
    )
    assert resp.status_code == 404


def test_second_create_conflicts(client, student_headers, courses):
    payload = {"courseIds": [courses["mat"], courses["fis"]]}
    assert client.post("/api/preselection", json=payload, headers=student_headers).status_code == 201

    resp = client.post("/api/preselection", json=payload, headers=student_headers)
    assert resp.status_code == 409
    assert CourseSelection.query.count() == 1


def test_replace_without_selection_is_not_found(client, student_headers, courses):
    resp = client.put(
        "/api/preselection",
        json={"courseIds": [courses["mat"], courses["fis"]]},
        headers=student_headers,
    )
    assert resp.status_code == 404


def test_replace_swaps_both_links(client, student_headers, courses):
    client.post(
        "/api/preselection",
        json={"courseIds": [courses["mat"], courses["fis"]]},
        headers=student_headers,
    )

    resp = client.put(
        "/api/preselection",
        json={"courseIds": [courses["alg"], courses["fis"]]},
        headers=student_headers,
    )
    selection = resp.get_json()["selection"]

    assert resp.status_code == 200
    assert _links(selection["id"]) == {courses["alg"], courses["fis"]}
    assert CourseSelection.query.count() == 1


def test_replace_is_idempotent(client, student_headers, courses):
    payload = {"courseIds": [courses["mat"], courses["alg"]]}
    client.post("/api/preselection", json={"courseIds": [courses["mat"], courses["fis"]]}, headers=student_headers)

    first = client.put("/api/preselection", json=payload, headers=student_headers).get_json()
    second = client.put("/api/preselection", json=payload, headers=student_headers).get_json()

    assert first["selection"]["id"] == second["selection"]["id"]
    assert _links(second["selection"]["id"]) == {courses["mat"], courses["alg"]}


def test_capacity_is_not_enforced_at_selection_time(client, register, make_course, courses):
    tiny = make_course("TEST", capacity=1)
    first = register()
    second = register(email="luis@x.com", idCard="555666777", name="Luis")

    for headers in (first, second):
        resp = client.post("/api/preselection", json={"courseIds": [tiny, courses["mat"]]}, headers=headers)
        assert resp.status_code == 201


def test_every_student_holds_at_most_one_selection_of_two(client, register, courses):
    headers = [
        register(),
        register(email="luis@x.com", idCard="555666777"),
        register(email="eva@x.com", idCard="111222333"),
    ]
    for h in headers:
        client.post("/api/preselection", json={"courseIds": [courses["mat"], courses["fis"]]}, headers=h)
        client.post("/api/preselection", json={"courseIds": [courses["alg"], courses["fis"]]}, headers=h)
        client.put("/api/preselection", json={"courseIds": [courses["alg"], courses["mat"]]}, headers=h)

    selections = CourseSelection.query.all()
    assert len(selections) == 3
    assert len({s.student_id for s in selections}) == 3
    for s in selections:
        assert len(_links(s.id)) == 2


def test_out_of_range_course_id_is_rejected(client, student_headers, courses):
    resp = client.post(
        "/api/preselection",
        json={"courseIds": [10**20, courses["mat"]]},
        headers=student_headers,
    )

    assert resp.status_code == 400
    assert CourseSelection.query.count() == 0
