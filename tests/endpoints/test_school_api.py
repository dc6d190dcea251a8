from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
import main
from school_directory.core.constants import MAX_IMAGE_SIZE_BYTES
from school_directory.core.exceptions import PayloadTooLargeError, StoreUnavailableError
from school_directory.utils import deps as deps_utils
from tests.helpers.asserts import api_call, assert_error
from tests.helpers.factories import create_schools
from tests.helpers.fakes import FakeImageStorage

ADD_URL = "/api/schools/add"
LIST_URL = "/api/schools"


def test_add_school_without_image(client: TestClient, school_form):
    response = api_call(client, "POST", ADD_URL, data=school_form, expected_min=201, expected_max=202)
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "School added successfully"
    assert isinstance(body["data"]["id"], int) and body["data"]["id"] > 0
    assert body["data"]["imageUrl"] is None


def test_add_school_with_image(client: TestClient, school_form, image_storage):
    files = {"image": ("crest.png", b"\x89PNG\r\n\x1a\n", "image/png")}
    response = api_call(client, "POST", ADD_URL, data=school_form, files=files, expected_min=201, expected_max=202)
    data = response.json()["data"]
    assert data["imageUrl"].endswith("crest.png")
    assert image_storage.uploads[0][1:] == ("crest.png", "image/png")

    detail = api_call(client, "GET", f"{LIST_URL}/{data['id']}").json()
    assert detail["data"]["school"]["image"] == data["imageUrl"]
    assert detail["data"]["school"]["name"] == school_form["name"]


def test_add_school_reports_every_invalid_field(client: TestClient, school_form):
    school_form.update(name="A", contact="5123456789", email="a@b", state="Atlantis")
    body = assert_error(client.post(ADD_URL, data=school_form), 400, "VALIDATION_ERROR")
    assert set(body["error"]["details"]["fields"]) == {"name", "contact", "email", "state"}


def test_add_school_missing_fields(client: TestClient):
    body = assert_error(client.post(ADD_URL, data={"name": "Modern School"}), 400, "VALIDATION_ERROR")
    assert set(body["error"]["details"]["fields"]) == {"address", "city", "state", "contact", "email"}


def test_add_school_rejects_oversized_image(client: TestClient, school_form, image_storage):
    files = {"image": ("big.jpg", b"\0" * (MAX_IMAGE_SIZE_BYTES + 1), "image/jpeg")}
    body = assert_error(client.post(ADD_URL, data=school_form, files=files), 400, "VALIDATION_ERROR")
    assert "image" in body["error"]["details"]["fields"]
    assert image_storage.uploads == []


def test_add_school_rejects_unsupported_image_type(client: TestClient, school_form):
    files = {"image": ("notes.pdf", b"%PDF-1.4", "application/pdf")}
    body = assert_error(client.post(ADD_URL, data=school_form, files=files), 400, "VALIDATION_ERROR")
    assert body["error"]["details"]["fields"]["image"] == "Only JPEG, JPG, PNG, and GIF files are allowed"


def test_add_school_storage_ceiling(client: TestClient, school_form, image_storage, db_session: Session):
    image_storage.error = PayloadTooLargeError("Image must be less than 4.0 MB")
    files = {"image": ("a.gif", b"GIF89a", "image/gif")}
    body = assert_error(client.post(ADD_URL, data=school_form, files=files), 413, "PAYLOAD_TOO_LARGE")
    assert body["error"]["message"] == "Image must be less than 4.0 MB"
    assert api_call(client, "GET", LIST_URL).json()["data"]["total"] == 0


def test_add_school_storage_unavailable(client: TestClient, school_form, image_storage):
    image_storage.error = StoreUnavailableError("Image storage is unavailable")
    files = {"image": ("a.gif", b"GIF89a", "image/gif")}
    body = assert_error(client.post(ADD_URL, data=school_form, files=files), 500, "INTERNAL_SERVER_ERROR")
    assert body["error"]["message"] == "Internal server error"
    assert body["error"]["details"] == {"retryable": True}


def test_list_schools_empty(client: TestClient):
    body = api_call(client, "GET", LIST_URL, params={"page": 1, "limit": 9}).json()
    assert body["message"] == "No schools found"
    assert body["data"]["schools"] == []
    assert body["data"]["total"] == 0
    assert body["data"]["pagination"] == {
        "currentPage": 1,
        "totalPages": 0,
        "limit": 9,
        "hasNextPage": False,
        "hasPreviousPage": False,
        "pageWindow": [],
    }


def test_list_schools_second_page(client: TestClient, db_session: Session):
    created = create_schools(db_session, 10)
    body = api_call(client, "GET", LIST_URL, params={"page": 2, "limit": 9}).json()
    data = body["data"]
    assert body["message"] == "Schools fetched successfully"
    assert len(data["schools"]) == 1
    assert data["schools"][0]["id"] == min(s.id for s in created)
    assert data["total"] == 10
    assert data["pagination"]["totalPages"] == 2
    assert data["pagination"]["hasNextPage"] is False
    assert data["pagination"]["hasPreviousPage"] is True
    assert data["pagination"]["pageWindow"] == [1, 2]


def test_list_schools_defaults(client: TestClient, db_session: Session):
    create_schools(db_session, 12)
    data = api_call(client, "GET", LIST_URL).json()["data"]
    assert len(data["schools"]) == 10
    assert data["pagination"]["currentPage"] == 1
    assert data["pagination"]["limit"] == 10
    ids = [s["id"] for s in data["schools"]]
    assert ids == sorted(ids, reverse=True)


def test_list_schools_beyond_last_page(client: TestClient, db_session: Session):
    create_schools(db_session, 3)
    data = api_call(client, "GET", LIST_URL, params={"page": 7, "limit": 2}).json()["data"]
    assert data["schools"] == []
    assert data["total"] == 3
    assert data["pagination"]["totalPages"] == 2


def test_list_schools_rejects_bad_pagination(client: TestClient):
    assert_error(client.get(LIST_URL, params={"page": 0}), 400, "BAD_REQUEST")
    body = assert_error(client.get(LIST_URL, params={"limit": 101}), 400, "BAD_REQUEST")
    assert body["error"]["message"] == "Limit must be between 1 and 100"
    assert_error(client.get(LIST_URL, params={"limit": -4}), 400, "BAD_REQUEST")


def test_list_schools_non_numeric_paging_uses_defaults(client: TestClient, db_session: Session):
    create_schools(db_session, 12)
    data = api_call(client, "GET", LIST_URL, params={"page": "abc", "limit": "lots"}).json()["data"]
    assert data["pagination"]["currentPage"] == 1
    assert data["pagination"]["limit"] == 10
    assert len(data["schools"]) == 10


def test_list_schools_huge_page_is_empty(client: TestClient, db_session: Session):
    create_schools(db_session, 2)
    data = api_call(client, "GET", LIST_URL, params={"page": 10**19}).json()["data"]
    assert data["schools"] == []
    assert data["total"] == 2
    assert data["pagination"]["hasNextPage"] is False


def test_list_schools_store_unavailable(client: TestClient, monkeypatch):
    def unavailable(db):
        raise StoreUnavailableError("Record store is unavailable")

    monkeypatch.setattr("school_directory.services.school.crud_school.count", unavailable)
    body = assert_error(client.get(LIST_URL), 500, "INTERNAL_SERVER_ERROR")
    assert body["error"]["message"] == "Internal server error"
    assert "unavailable" not in str(body)


def test_read_school(client: TestClient, db_session: Session):
    school = create_schools(db_session, 1)[0]
    body = api_call(client, "GET", f"{LIST_URL}/{school.id}").json()
    assert body["message"] == "School details fetched successfully"
    assert body["data"]["school"]["id"] == school.id
    assert body["data"]["school"]["email"] == school.email


def test_read_school_not_found(client: TestClient):
    body = assert_error(client.get(f"{LIST_URL}/999999"), 404, "NOT_FOUND")
    assert body["error"]["message"] == "School not found"


def test_read_school_invalid_id(client: TestClient):
    body = assert_error(client.get(f"{LIST_URL}/0"), 400, "BAD_REQUEST")
    assert body["error"]["message"] == "Invalid school ID"


def test_wrong_method(client: TestClient):
    assert_error(client.get(ADD_URL), 405, "METHOD_NOT_ALLOWED")
    assert_error(client.delete(f"{LIST_URL}/1"), 405, "METHOD_NOT_ALLOWED")
    assert_error(client.put(LIST_URL), 405, "METHOD_NOT_ALLOWED")


def test_validation_rules_endpoint(client: TestClient):
    data = api_call(client, "GET", f"{LIST_URL}/validation-rules").json()["data"]
    assert len(data["state"]["choices"]) == 29
    assert data["email"]["maxLength"] == 100


def test_responses_carry_request_id(client: TestClient):
    response = client.get(LIST_URL)
    assert response.headers.get("X-Request-ID")


def test_read_school_malformed_id(client: TestClient):
    for school_id in ("abc", "-3", "1.5"):
        body = assert_error(client.get(f"{LIST_URL}/{school_id}"), 400, "BAD_REQUEST")
        assert body["error"]["message"] == "Invalid school ID"


def test_read_school_id_beyond_column_range(client: TestClient):
    body = assert_error(client.get(f"{LIST_URL}/{10**20}"), 404, "NOT_FOUND")
    assert body["error"]["message"] == "School not found"


def test_caller_request_id_is_echoed(client: TestClient):
    response = client.get(LIST_URL, headers={"X-Request-ID": "trace-42"})
    assert response.headers["X-Request-ID"] == "trace-42"


def test_unexpected_error_hides_its_cause(app_settings, db_session: Session, monkeypatch):
    def broken(db):
        raise RuntimeError("connection string leaked")

    monkeypatch.setattr("school_directory.services.school.crud_school.count", broken)
    app = main.create_app(app_settings, image_storage=FakeImageStorage())
    app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    with TestClient(app, raise_server_exceptions=False) as test_client:
        response = test_client.get(LIST_URL)

    body = assert_error(response, 500, "INTERNAL_SERVER_ERROR")
    assert body["error"]["message"] == "An unexpected error occurred"
    assert body["error"]["details"] is None
    assert "RuntimeError" not in response.text
    assert "leaked" not in response.text
