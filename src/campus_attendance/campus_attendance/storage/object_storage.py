from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Protocol, Sequence
from urllib.parse import quote

from ..core.exceptions import NotFoundError, UnavailableError, ValidationError


@dataclass(frozen=True)
class StoredObject:
    name: str
    path: str
    size: int


class ObjectStorage(Protocol):
    """Path-addressed blob storage collaborator."""

    def upload_bytes(self, path: str, data: bytes) -> StoredObject:
        raise NotImplementedError

    def list_children(self, prefix: str) -> Sequence[StoredObject]:
        raise NotImplementedError

    def download_url(self, path: str) -> str:
        raise NotImplementedError


def _normalize(path: str) -> PurePosixPath:
    p = PurePosixPath(path.strip("/"))
    if not p.parts or any(part in {"..", "."} for part in p.parts):
        raise ValidationError("Invalid storage path")
    return p


class LocalObjectStorage(ObjectStorage):
    """Stores blobs under a root directory and serves them from ``base_url``."""

    def __init__(self, root: str | Path, *, base_url: str = "/files"):
        self._root = Path(root).absolute()
        self._base_url = base_url.rstrip("/")

    def resolve(self, path: str) -> Path:
        return self._root.joinpath(*_normalize(path).parts)

    def upload_bytes(self, path: str, data: bytes) -> StoredObject:
        target = self.resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise UnavailableError("Failed to store file") from e
        return StoredObject(name=target.name, path=str(_normalize(path)), size=len(data))

    def list_children(self, prefix: str) -> Sequence[StoredObject]:
        folder = self.resolve(prefix)
        if not folder.is_dir():
            return []
        out = []
        for child in sorted(folder.iterdir()):
            if child.is_file():
                rel = PurePosixPath(*child.relative_to(self._root).parts)
                out.append(StoredObject(name=child.name, path=str(rel), size=child.stat().st_size))
        return out

    def download_url(self, path: str) -> str:
        if not self.resolve(path).is_file():
            raise NotFoundError("File not found")
        return f"{self._base_url}/{quote(str(_normalize(path)))}"
