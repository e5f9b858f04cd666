from typing import Any

import requests

from golf_admin.errors import MediaApiError


class MediaApiClient:
    """Client for the settings and background-image endpoints."""

    def __init__(self, base_url: str, timeout: float = 15.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        try:
            response = requests.request(method, self._url(path), timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise MediaApiError(str(exc)) from exc
        if not response.ok:
            raise MediaApiError(_error_text(response))
        return response

    def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._send(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise MediaApiError(
                f"{method} {path} returned a non-JSON body: {response.text[:200]}"
            ) from exc

    def fetch_settings(self) -> dict[str, str]:
        payload = self._json("GET", "/settings")
        settings = payload.get("settings") if isinstance(payload, dict) else None
        if not isinstance(settings, dict):
            raise MediaApiError(f"Settings fetch returned unexpected payload: {payload!r}")
        return {str(key): "" if value is None else str(value) for key, value in settings.items()}

    def save_setting(self, key: str, value: str) -> None:
        self._send("POST", "/settings", json={"key": key, "value": value})

    def list_backgrounds(self) -> list[dict[str, str]]:
        payload = self._json("GET", "/backgrounds")
        backgrounds = payload.get("backgrounds") if isinstance(payload, dict) else None
        if not isinstance(backgrounds, list):
            raise MediaApiError(f"Background list returned unexpected payload: {payload!r}")
        return [
            {"key": item["key"], "publicUrl": item["publicUrl"]}
            for item in backgrounds
            if isinstance(item, dict) and "key" in item and "publicUrl" in item
        ]

    def upload_background(
        self, filename: str, content: bytes, content_type: str | None = None
    ) -> dict[str, str]:
        files = {"image": (filename, content, content_type or "application/octet-stream")}
        payload = self._json("POST", "/backgrounds/upload", files=files)
        if not isinstance(payload, dict) or "key" not in payload or "publicUrl" not in payload:
            raise MediaApiError(f"Upload returned unexpected payload: {payload!r}")
        return {"key": payload["key"], "publicUrl": payload["publicUrl"]}

    def delete_background(self, key: str) -> None:
        self._send("POST", "/backgrounds/delete", json={"key": key})


def _error_text(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return f"{response.status_code} {response.text}"
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return f"{response.status_code} {response.text}"
