from unittest.mock import MagicMock

import pytest
import requests

from b1_migration.auth.session_manager import login, logout, service_layer_session

BASE_URL = "https://sap.example.com:50000/b1s/v1"


@pytest.fixture(autouse=True)
def service_layer_env(monkeypatch):
    monkeypatch.setenv("SL_BASE_URL", BASE_URL + "/")
    monkeypatch.setenv("SL_USERNAME", "manager")
    monkeypatch.setenv("SL_PASSWORD", "secret")
    monkeypatch.setenv("SL_COMPANY_DB", "SBODEMOUS")
    monkeypatch.delenv("SL_VERIFY_SSL", raising=False)


def login_response(payload, status=200):
    resp = MagicMock(status_code=status)
    resp.json.return_value = payload
    return resp


def test_login_returns_session_id():
    http = MagicMock()
    http.post.return_value = login_response({"SessionId": "abc-123", "Version": "1000"})

    assert login(http=http) == "abc-123"
    args, kwargs = http.post.call_args
    assert args[0] == f"{BASE_URL}/Login"
    assert kwargs["json"] == {"UserName": "manager", "Password": "secret", "CompanyDB": "SBODEMOUS"}
    assert kwargs["verify"] is True


def test_login_missing_settings_skips_request(monkeypatch):
    monkeypatch.delenv("SL_PASSWORD")
    http = MagicMock()
    assert login(http=http) is None
    http.post.assert_not_called()


def test_login_http_error_returns_none():
    http = MagicMock()
    resp = login_response({})
    resp.raise_for_status.side_effect = requests.HTTPError("401 Client Error")
    http.post.return_value = resp
    assert login(http=http) is None


def test_login_without_session_id_returns_none():
    http = MagicMock()
    http.post.return_value = login_response({"error": {"code": 100000027}})
    assert login(http=http) is None


def test_login_non_json_body_returns_none():
    http = MagicMock()
    resp = MagicMock(status_code=200)
    resp.json.side_effect = ValueError("Expecting value")
    http.post.return_value = resp
    assert login(http=http) is None


@pytest.mark.parametrize("status, expected", [(200, True), (204, True), (401, False)])
def test_logout_status(status, expected):
    http = MagicMock()
    http.post.return_value = MagicMock(status_code=status)

    assert logout("abc-123", http=http) is expected
    args, kwargs = http.post.call_args
    assert args[0] == f"{BASE_URL}/Logout"
    assert kwargs["headers"]["Cookie"] == "B1SESSION=abc-123"


def test_logout_transport_error():
    http = MagicMock()
    http.post.side_effect = requests.ConnectionError("reset")
    assert logout("abc-123", http=http) is False


def test_session_context_logs_out_after_use():
    http = MagicMock()
    http.post.side_effect = [login_response({"SessionId": "s1"}), MagicMock(status_code=204)]

    with service_layer_session(http=http) as session_id:
        assert session_id == "s1"

    urls = [c.args[0] for c in http.post.call_args_list]
    assert urls == [f"{BASE_URL}/Login", f"{BASE_URL}/Logout"]


def test_session_context_logs_out_on_error():
    http = MagicMock()
    http.post.side_effect = [login_response({"SessionId": "s1"}), MagicMock(status_code=204)]

    with pytest.raises(RuntimeError):
        with service_layer_session(http=http):
            raise RuntimeError("boom")

    assert http.post.call_args_list[-1].args[0] == f"{BASE_URL}/Logout"


def test_session_context_skips_logout_when_login_failed(monkeypatch):
    monkeypatch.delenv("SL_USERNAME")
    http = MagicMock()

    with service_layer_session(http=http) as session_id:
        assert session_id is None

    http.post.assert_not_called()


def test_uses_shared_logger():
    from b1_migration.auth import session_manager
    from b1_migration.utils.logger_builder import global_logger

    assert session_manager.logger is global_logger
