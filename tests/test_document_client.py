from unittest.mock import MagicMock, patch

import pytest
import requests

from storefront.repos.document_client import DocumentClient


def make_response(status_code=200, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return resp


@pytest.fixture
def client():
    return DocumentClient(base_url="http://docs.test/", token="secret", timeout=1, session=requests.Session())


def test_token_sent_as_bearer_header(client):
    assert client.session.headers["Authorization"] == "Bearer secret"


def test_no_token_no_header():
    client = DocumentClient(base_url="http://docs.test", token="", session=requests.Session())

    assert "Authorization" not in client.session.headers


def test_get_document_returns_json(client):
    with patch.object(client.session, "get", return_value=make_response(200, {"cart": []})) as get:
        doc = client.get_document("u1")

    assert doc == {"cart": []}
    get.assert_called_once_with("http://docs.test/users/u1", timeout=1)


def test_get_document_missing_returns_none(client):
    with patch.object(client.session, "get", return_value=make_response(404)):
        assert client.get_document("u1") is None


def test_merge_document_sends_patch(client):
    fields = {"wishlist": [{"id": "w1"}]}

    with patch.object(client.session, "patch", return_value=make_response(200)) as patch_call:
        client.merge_document("u1", fields)

    patch_call.assert_called_once_with("http://docs.test/users/u1", json=fields, timeout=1)


def test_transport_errors_retried_then_raised(client):
    with patch.object(client.session, "get", side_effect=requests.ConnectionError("down")) as get:
        with pytest.raises(requests.ConnectionError):
            client.get_document("u1")

    assert get.call_count == 3


def test_server_error_raised(client):
    with patch.object(client.session, "patch", return_value=make_response(500)):
        with pytest.raises(requests.HTTPError):
            client.merge_document("u1", {"cart": []})


def test_user_id_is_escaped_in_url(client):
    with patch.object(client.session, "get", return_value=make_response(404)) as get:
        client.get_document("u1/../admin?x=1")

    get.assert_called_once_with("http://docs.test/users/u1%2F..%2Fadmin%3Fx%3D1", timeout=1)
