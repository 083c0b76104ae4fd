"""Import settings loaded from YAML or JSON."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError

from .models import _load_text_payload


class ImportSettings(BaseModel):
    """Defaults for an import run. Command line options override them."""

    destination: str = Field(default="/public", min_length=1, description="Repository folder to import into")
    comment: str | None = Field(default=None, description="Version comment stored with every change")
    overwrite: bool = False
    store_url: str = Field(default="http://127.0.0.1:8000", description="Base URL of the REST store")
    user: str = "admin"
    password: str = "password"
    content_types: list[str] = Field(default_factory=list, description="Executable types provided by plugins")
    default_charset: str | None = "UTF-8"
    log_level: str = "INFO"
    logfile: str | None = None

    def merge(self, patch: Mapping[str, Any]) -> ImportSettings:
        """Return new settings with the non-None values of ``patch`` applied."""
        payload = self.model_dump(mode="python")
        payload.update({k: v for k, v in patch.items() if v is not None})
        return ImportSettings.model_validate(payload)


def load_settings(value: Any = None) -> ImportSettings:
    """Build settings from a mapping, YAML/JSON text or a settings file."""
    if value is None:
        return ImportSettings()
    if isinstance(value, ImportSettings):
        return value
    payload: Mapping[str, Any]
    if isinstance(value, Mapping):
        payload = value
    elif isinstance(value, Path):
        payload = _load_text_payload(value.read_text())
    elif isinstance(value, (str, bytes)):
        payload = _load_text_payload(value)
    else:
        raise TypeError("Unsupported value for import settings")
    try:
        return ImportSettings.model_validate(payload)
    except ValidationError as exc:
        raise ValueError("Invalid import settings") from exc


__all__ = ["ImportSettings", "load_settings"]
