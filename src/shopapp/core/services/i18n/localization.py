"""Localized messages loaded from YAML bundles."""

from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from src.shopapp.runtime.context import get_config

MESSAGES_DIR = Path(__file__).parent / "messages"


class MessageKeys:
    UPLOAD_IMAGES_MAX_5 = "product.upload_images.error_max_5_images"
    UPLOAD_IMAGES_FILE_LARGE = "product.upload_images.file_large"
    UPLOAD_IMAGES_FILE_MUST_BE_IMAGE = "product.upload_images.file_must_be_image"


def _flatten(data: dict[str, Any], prefix: str = "") -> dict[str, str]:
    flat: dict[str, str] = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            flat.update(_flatten(value, full_key))
        else:
            flat[full_key] = str(value)
    return flat


class Localizer:
    """Resolve message keys to text in the requested language.

    Bundles are ``messages_<lang>.yaml`` files with nested keys. Unknown
    languages fall back to the configured default, unknown keys to the key.
    """

    def __init__(
        self,
        messages_dir: Path = MESSAGES_DIR,
        default_language: str | None = None,
    ) -> None:
        self._default_language = default_language or get_config().i18n.default_language
        self._bundles: dict[str, dict[str, str]] = {}
        for path in sorted(messages_dir.glob("messages_*.yaml")):
            language = path.stem.removeprefix("messages_")
            with open(path, encoding="utf-8") as f:
                self._bundles[language] = _flatten(yaml.safe_load(f) or {})
        logger.debug("Loaded message bundles: {}", sorted(self._bundles))

    @property
    def languages(self) -> list[str]:
        return sorted(self._bundles)

    def resolve_language(self, accept_language: str | None) -> str:
        """Pick the first supported language from an Accept-Language header."""
        if accept_language:
            for part in accept_language.split(","):
                tag = part.split(";", 1)[0].strip().lower()
                language = tag.split("-", 1)[0]
                if language in self._bundles:
                    return language
        return self._default_language

    def get_localized_message(self, key: str, language: str | None = None) -> str:
        bundle = self._bundles.get(language or self._default_language)
        if bundle is None or key not in bundle:
            bundle = self._bundles.get(self._default_language, {})
        message = bundle.get(key)
        if message is None:
            logger.warning("Missing localized message for key {}", key)
            return key
        return message
