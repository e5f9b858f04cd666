import pytest
import requests

from golf_admin import media_api as media_module
from golf_admin.backgrounds import FormSettingsManager
from golf_admin.errors import LoadError, MediaApiError
from golf_admin.media_api import MediaApiClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self.ok = status_code < 400
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


@pytest.fixture
def client():
    return MediaApiClient("http://admin.test/api/admin/", timeout=3)


def test_fetch_settings(monkeypatch, client):
    monkeypatch.setattr(
        media_module.requests,
        "request",
        lambda method, url, **kwargs: FakeResponse(payload={"settings": {"form_title": "T", "rules": None}}),
    )
    assert client.fetch_settings() == {"form_title": "T", "rules": ""}


def test_save_setting_posts_key_and_value(monkeypatch, client):
    seen = []

    def fake_request(method, url, **kwargs):
        seen.append((method, url, kwargs["json"], kwargs["timeout"]))
        return FakeResponse(payload={})

    monkeypatch.setattr(media_module.requests, "request", fake_request)
    client.save_setting("rules", "<p>x</p>")
    assert seen == [("POST", "http://admin.test/api/admin/settings", {"key": "rules", "value": "<p>x</p>"}, 3)]


def test_save_setting_error_uses_error_field(monkeypatch, client):
    monkeypatch.setattr(
        media_module.requests,
        "request",
        lambda method, url, **kwargs: FakeResponse(status_code=500, payload={"error": "db down"}),
    )
    with pytest.raises(MediaApiError, match="db down"):
        client.save_setting("rules", "")


def test_list_backgrounds_skips_malformed_entries(monkeypatch, client):
    payload = {"backgrounds": [{"key": "a", "publicUrl": "u1"}, {"key": "b"}, "junk"]}
    monkeypatch.setattr(
        media_module.requests, "request", lambda method, url, **kwargs: FakeResponse(payload=payload)
    )
    assert client.list_backgrounds() == [{"key": "a", "publicUrl": "u1"}]


def test_upload_sends_multipart_image_field(monkeypatch, client):
    seen = {}

    def fake_request(method, url, **kwargs):
        seen.update(method=method, url=url, files=kwargs["files"])
        return FakeResponse(payload={"key": "k1", "publicUrl": "https://cdn/k1"})

    monkeypatch.setattr(media_module.requests, "request", fake_request)
    entry = client.upload_background("pic.png", b"data", "image/png")
    assert entry == {"key": "k1", "publicUrl": "https://cdn/k1"}
    assert seen["url"] == "http://admin.test/api/admin/backgrounds/upload"
    assert seen["files"] == {"image": ("pic.png", b"data", "image/png")}


def test_delete_background_transport_error(monkeypatch, client):
    def fake_request(method, url, **kwargs):
        raise requests.Timeout("timed out")

    monkeypatch.setattr(media_module.requests, "request", fake_request)
    with pytest.raises(MediaApiError, match="timed out"):
        client.delete_background("k1")


def test_html_body_on_success_is_an_api_error(monkeypatch, client):
    monkeypatch.setattr(
        media_module.requests,
        "request",
        lambda method, url, **kwargs: FakeResponse(status_code=200, text="<html>gateway</html>"),
    )
    with pytest.raises(MediaApiError, match="non-JSON body: <html>gateway</html>"):
        client.fetch_settings()
    with pytest.raises(MediaApiError, match="non-JSON"):
        client.list_backgrounds()
    with pytest.raises(MediaApiError, match="non-JSON"):
        client.upload_background("pic.png", b"data", "image/png")


def test_html_body_surfaces_as_load_error(monkeypatch, client):
    monkeypatch.setattr(
        media_module.requests,
        "request",
        lambda method, url, **kwargs: FakeResponse(status_code=200, text="<html>gateway</html>"),
    )
    manager = FormSettingsManager(client)
    with pytest.raises(LoadError):
        manager.load_all()
    assert manager.loading is False
    assert [notice.message for notice in manager.notifier.drain()] == ["Failed to load admin data"]
