# orderdesk/images.py
"""
Image store gateway.

Product pictures live outside the database. Callers only ever ask for the
public URLs under a path key such as ``products/12``.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List

import structlog

logger = structlog.get_logger(__name__)

IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".webp", ".gif"}


def product_key(product_id: int) -> str:
    return f"products/{product_id}"


def _sanitize_key(raw: str) -> str:
    parts = [p for p in (raw or "").replace("\\", "/").split("/") if p and p not in {".", ".."}]
    return "/".join(parts)


class ImageStore(ABC):
    @abstractmethod
    def get_image_urls(self, path_key: str) -> List[str]:
        """Public URLs of the images stored under `path_key`, in a stable order."""


class LocalImageStore(ImageStore):
    """Files under ``root/<path_key>/`` served as ``base_url/<path_key>/<name>``."""

    def __init__(self, root: Path | str, base_url: str = "/public"):
        self.root = Path(root).resolve()
        self.base_url = base_url.rstrip("/")

    def get_image_urls(self, path_key: str) -> List[str]:
        key = _sanitize_key(path_key)
        folder = self.root / key
        if not folder.is_dir():
            return []

        names = sorted(
            p.name for p in folder.iterdir() if p.is_file() and p.suffix.lower() in IMAGE_SUFFIXES
        )
        logger.debug("Resolved images", path_key=key, count=len(names))
        return [f"{self.base_url}/{key}/{name}" for name in names]


class MemoryImageStore(ImageStore):
    """Fixed key -> URLs table, for wiring without a filesystem."""

    def __init__(self, urls: Dict[str, Iterable[str]] | None = None):
        self.urls: Dict[str, List[str]] = {k: list(v) for k, v in (urls or {}).items()}
        self.calls: List[str] = []

    def get_image_urls(self, path_key: str) -> List[str]:
        self.calls.append(path_key)
        return list(self.urls.get(path_key, []))
