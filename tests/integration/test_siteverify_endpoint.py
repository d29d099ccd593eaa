"""Integration tests for POST /recaptcha/api/siteverify via TestClient."""

import pytest
from fastapi.testclient import TestClient
from starlette.formparsers import MultiPartException
from starlette.requests import Request

from app import create_app
from config import StubServerSettings
from services.siteverify_service import SiteverifyService

VERIFY_PATH = "/recaptcha/api/siteverify"


@pytest.fixture
def service():
    return SiteverifyService()


@pytest.fixture
def client(service):
    with TestClient(create_app(service)) as c:
        yield c


class TestContentType:
    def test_json_body_rejected(self, client, service):
        site = service.register_site()
        resp = client.post(VERIFY_PATH, json={"secret": site.private_key, "response": "x"})
        assert resp.status_code == 400
        assert resp.json()["code"] == "unsupported_content_type"

    def test_missing_content_type_rejected(self, client):
        resp = client.post(VERIFY_PATH, content=b"secret=a&response=b")
        assert resp.status_code == 400

    def test_charset_parameter_accepted(self, client, service):
        site = service.register_site()
        token = site.issue_token()
        resp = client.post(
            VERIFY_PATH,
            content=f"secret={site.private_key}&response={token}".encode(),
            headers={"Content-Type": "application/x-www-form-urlencoded; charset=utf-8"},
        )
        assert resp.status_code == 200
        assert resp.json()["success"] is True


class TestStateMachine:
    def test_missing_secret(self, client):
        resp = client.post(VERIFY_PATH, data={"response": "tok"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is False
        assert body["error-codes"] == ["missing-input-secret"]
        assert "challenge_ts" in body

    def test_invalid_secret(self, client):
        resp = client.post(VERIFY_PATH, data={"secret": "nope", "response": "tok"})
        assert resp.status_code == 200
        assert resp.json()["error-codes"] == ["invalid-input-secret"]

    def test_missing_response(self, client, service):
        site = service.register_site()
        resp = client.post(VERIFY_PATH, data={"secret": site.private_key})
        assert resp.json()["error-codes"] == ["missing-input-response"]

    def test_invalid_response(self, client, service):
        site = service.register_site()
        resp = client.post(VERIFY_PATH, data={"secret": site.private_key, "response": "x"})
        assert resp.json()["error-codes"] == ["invalid-input-response"]

    def test_success_then_duplicate(self, client, service):
        site = service.register_site(hostname="shop.example")
        token = site.issue_token(action="checkout", score=0.8)
        form = {"secret": site.private_key, "response": token}

        first = client.post(VERIFY_PATH, data=form).json()
        assert first["success"] is True
        assert first["hostname"] == "shop.example"
        assert first["action"] == "checkout"
        assert first["score"] == 0.8
        assert first.get("error-codes", []) == []

        second = client.post(VERIFY_PATH, data=form).json()
        assert second["success"] is False
        assert second["error-codes"] == ["timeout-or-duplicate"]

    def test_ip_mismatch_has_no_error_code(self, client, service):
        site = service.register_site()
        token = site.issue_token("1.2.3.4")
        body = client.post(
            VERIFY_PATH,
            data={"secret": site.private_key, "response": token, "remoteip": "9.9.9.9"},
        ).json()
        assert body["success"] is False
        assert body.get("error-codes", []) == []


class TestCustomPath:
    def test_verify_path_from_settings(self):
        service = SiteverifyService()
        site = service.register_site()
        app = create_app(service, StubServerSettings(verify_path="/siteverify"))
        with TestClient(app) as c:
            resp = c.post(
                "/siteverify",
                data={"secret": site.private_key, "response": site.issue_token()},
            )
            assert resp.json()["success"] is True
            assert c.post(VERIFY_PATH, data={}).status_code == 404


class TestUnparsableForm:
    @pytest.mark.parametrize(
        "error",
        [MultiPartException("malformed body"), UnicodeDecodeError("utf-8", b"\xff", 0, 1, "bad")],
        ids=["multipart_exception", "decode_error"],
    )
    def test_parse_failure_is_bad_request(self, client, service, mocker, error):
        site = service.register_site()
        token = site.issue_token()
        mocker.patch.object(Request, "form", side_effect=error)

        resp = client.post(VERIFY_PATH, data={"secret": site.private_key, "response": token})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is False
        assert body["error-codes"] == ["bad-request"]
        # the token was never looked at, so it is still usable
        assert site.get_token(token).used is False
