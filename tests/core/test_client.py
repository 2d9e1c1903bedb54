from __future__ import annotations

import pytest
import requests

from airgrab.core.client import CivitaiClient
from airgrab.core.errors import (
    ClientStatusError,
    FilesystemError,
    PayloadError,
    ServiceStatusError,
    TransportError,
    UnauthorizedError,
)

DL_URL = "https://dl.test/file"


@pytest.fixture
def client_for(api_host):
    def _make(session, api_key="secret", **kw):
        return CivitaiClient(api_key, host=api_host, session=session, **kw)

    return _make


def test_bearer_header_sent_when_key_present(civitai_routes, client_for, api_host):
    client_for(civitai_routes).get_model_version(5678)
    call = civitai_routes.calls[0]
    assert call["headers"]["Authorization"] == "Bearer secret"
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["url"] == f"{api_host}/model-versions/5678"


@pytest.mark.parametrize("key", [None, ""])
def test_no_header_without_key(civitai_routes, client_for, key):
    client = client_for(civitai_routes, api_key=key)
    assert not client.has_credentials
    client.get_model(1234)
    assert "Authorization" not in civitai_routes.calls[0]["headers"]


def test_timeout_is_forwarded(civitai_routes, client_for):
    client_for(civitai_routes, timeout=12.5).get_model(1234)
    assert civitai_routes.calls[0]["timeout"] == 12.5


def test_host_trailing_slash_is_dropped(civitai_routes, api_host):
    CivitaiClient(host=api_host + "/", session=civitai_routes).get_model(1234)
    assert civitai_routes.urls() == [f"{api_host}/models/1234"]


def test_metadata_is_not_cached(civitai_routes, client_for):
    client = client_for(civitai_routes)
    client.get_model(1234)
    client.get_model(1234)
    assert len(civitai_routes.calls) == 2


def test_head_sends_credentials_without_streaming(fake_session, client_for, make_response):
    resp = make_response(200)
    fake_session.routes[DL_URL] = resp
    assert client_for(fake_session).head(DL_URL, {"Accept": "*/*"}) is resp
    call = fake_session.calls[0]
    assert call["method"] == "HEAD"
    assert call["headers"] == {"Accept": "*/*", "Authorization": "Bearer secret"}
    assert call["stream"] is False


def test_head_maps_status_errors(fake_session, client_for, make_response):
    resp = make_response(404)
    fake_session.routes[DL_URL] = resp
    with pytest.raises(ClientStatusError):
        client_for(fake_session).head(DL_URL)
    assert resp.closed


def test_401_raises_unauthorized(fake_session, client_for, api_host, make_response):
    resp = make_response(401)
    fake_session.routes[f"{api_host}/models/1"] = resp
    with pytest.raises(UnauthorizedError) as ei:
        client_for(fake_session).get_model(1)
    assert ei.value.status_code == 401
    assert resp.closed


def test_404_raises_client_status(fake_session, client_for, api_host, make_response):
    fake_session.routes[f"{api_host}/model-versions/-1"] = make_response(404)
    with pytest.raises(ClientStatusError) as ei:
        client_for(fake_session).get_model_version(-1)
    assert not isinstance(ei.value, UnauthorizedError)


def test_503_raises_service_status(fake_session, client_for, api_host, make_response):
    fake_session.routes[f"{api_host}/models/1"] = make_response(503)
    with pytest.raises(ServiceStatusError):
        client_for(fake_session).get_model(1)


def test_non_200_success_codes_pass(fake_session, client_for, api_host, make_response):
    fake_session.routes[f"{api_host}/models/1"] = make_response(
        203, json_data={"id": 1, "name": "m", "type": "LORA"}
    )
    assert client_for(fake_session).get_model(1).name == "m"


def test_connection_error_is_transport_error(fake_session, client_for):
    with pytest.raises(TransportError):
        client_for(fake_session).get_model(99)


def test_timeout_is_transport_error(fake_session, client_for, api_host):
    fake_session.routes[f"{api_host}/models/1"] = requests.exceptions.Timeout("slow")
    with pytest.raises(TransportError):
        client_for(fake_session).get_model(1)


def test_invalid_json_is_payload_error(fake_session, client_for, api_host, make_response):
    fake_session.routes[f"{api_host}/models/1"] = make_response(200)
    with pytest.raises(PayloadError):
        client_for(fake_session).get_model(1)


def test_download_streams_and_reports_progress(fake_session, client_for, make_response, tmp_path):
    fake_session.routes[DL_URL] = make_response(chunks=[b"abc", b"", b"defg"])
    seen = []
    target = tmp_path / "out.bin"
    n = client_for(fake_session).download(DL_URL, target, seen.append)
    assert n == 7
    assert seen == [3, 4]
    assert target.read_bytes() == b"abcdefg"
    assert fake_session.calls[0]["stream"] is True


def test_download_truncates_existing_file(fake_session, client_for, make_response, tmp_path):
    fake_session.routes[DL_URL] = lambda: make_response(chunks=[b"new"])
    target = tmp_path / "out.bin"
    target.write_bytes(b"much longer old content")
    client_for(fake_session).download(DL_URL, target)
    assert target.read_bytes() == b"new"


def test_download_interrupted_keeps_partial_file(fake_session, client_for, make_response, tmp_path):
    fake_session.routes[DL_URL] = make_response(chunks=[b"abc", b"def"], fail_after=1)
    target = tmp_path / "out.bin"
    with pytest.raises(TransportError):
        client_for(fake_session).download(DL_URL, target)
    assert target.read_bytes() == b"abc"


def test_download_into_missing_directory(fake_session, client_for, make_response, tmp_path):
    fake_session.routes[DL_URL] = make_response(chunks=[b"abc"])
    with pytest.raises(FilesystemError):
        client_for(fake_session).download(DL_URL, tmp_path / "missing" / "out.bin")


def test_download_error_status_writes_nothing(fake_session, client_for, make_response, tmp_path):
    fake_session.routes[DL_URL] = make_response(401)
    target = tmp_path / "out.bin"
    with pytest.raises(UnauthorizedError):
        client_for(fake_session).download(DL_URL, target)
    assert not target.exists()


def test_context_manager_closes_session(fake_session, client_for):
    with client_for(fake_session):
        pass
    assert fake_session.closed
