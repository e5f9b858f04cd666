from __future__ import annotations

import logging
from typing import Optional

from golf_admin.errors import ControllerBusy, LoadError, MediaApiError, MutationError, ValidationSkip
from golf_admin.media_api import MediaApiClient
from golf_admin.notifications import Confirm, Notifier

logger = logging.getLogger(__name__)

BACKGROUND_SETTING = "background_image"
DELETE_PROMPT = "Really delete this image?"


def resolve_active_key(gallery: list[dict[str, str]], active_url: str | None) -> str:
    """Return the key of the gallery entry published at ``active_url``, or ``""``."""
    if not active_url:
        return ""
    for entry in gallery:
        if entry.get("publicUrl") == active_url:
            return entry["key"]
    return ""


class FormSettingsManager:
    """Form title, rules text and the background gallery of the admin page."""

    def __init__(self, api: MediaApiClient, notifier: Optional[Notifier] = None):
        self.api = api
        self.notifier = notifier or Notifier()
        self.settings: dict[str, str] = {}
        self.backgrounds: list[dict[str, str]] = []
        self.loading = False
        self.loaded = False
        self.uploading = False

    @property
    def form_title(self) -> str:
        return self.settings.get("form_title", "")

    @property
    def rules(self) -> str:
        return self.settings.get("rules", "")

    @property
    def active_url(self) -> str:
        return self.settings.get(BACKGROUND_SETTING, "")

    @property
    def active_key(self) -> str:
        return resolve_active_key(self.backgrounds, self.active_url)

    def load_all(self) -> None:
        self.loading = True
        try:
            settings = self.api.fetch_settings()
            backgrounds = self.api.list_backgrounds()
        except MediaApiError as exc:
            logger.warning("Failed to load admin data: %s", exc)
            self.notifier.error("Failed to load admin data")
            raise LoadError(str(exc)) from exc
        finally:
            self.loading = False
        self.settings = settings
        self.backgrounds = backgrounds
        self.loaded = True

    def save_setting(self, key: str, value: str) -> bool:
        try:
            self.api.save_setting(key, value)
        except MediaApiError as exc:
            logger.warning("Saving setting %s failed: %s", key, exc)
            self.notifier.error(f"Save failed: {exc}")
            return False
        self.settings[key] = value
        self.notifier.info("Saved!")
        return True

    def upload_image(
        self, filename: str | None, content: bytes | None, content_type: str | None = None
    ) -> dict[str, str]:
        if not filename or not content:
            self.notifier.error("Pick a file first")
            raise ValidationSkip("Pick a file first")
        if self.uploading:
            raise ControllerBusy("An upload is already in progress")
        self.uploading = True
        try:
            try:
                entry = self.api.upload_background(filename, content, content_type)
            except MediaApiError as exc:
                logger.warning("Background upload failed: %s", exc)
                self.notifier.error(f"Upload failed: {exc}")
                raise MutationError(str(exc)) from exc
            # The gallery has no server-side order; newest first until the next load.
            self.backgrounds = [entry, *self.backgrounds]
            self.save_setting(BACKGROUND_SETTING, entry["publicUrl"])
        finally:
            self.uploading = False
        return entry

    def set_background(self, key: str | None) -> bool:
        entry = next((item for item in self.backgrounds if key and item["key"] == key), None)
        if entry is None:
            self.notifier.error("Select one first")
            raise ValidationSkip("Select one first")
        return self.save_setting(BACKGROUND_SETTING, entry["publicUrl"])

    def delete_image(self, key: str | None, confirm: Confirm) -> bool:
        entry = next((item for item in self.backgrounds if key and item["key"] == key), None)
        if entry is None:
            self.notifier.error("Select one to delete")
            raise ValidationSkip("Select one to delete")
        if not confirm(DELETE_PROMPT):
            return False
        try:
            self.api.delete_background(entry["key"])
        except MediaApiError as exc:
            logger.warning("Deleting background %s failed: %s", entry["key"], exc)
            self.notifier.error(f"Delete failed: {exc}")
            raise MutationError(str(exc)) from exc
        self.backgrounds = [item for item in self.backgrounds if item["key"] != entry["key"]]
        if self.active_url == entry["publicUrl"]:
            self.save_setting(BACKGROUND_SETTING, "")
        self.notifier.info("Deleted!")
        return True
