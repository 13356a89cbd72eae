from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Note:
    name: str
    path: str
    url: str
    size: int

    @property
    def extension(self) -> str:
        return self.name.rsplit(".", 1)[-1].lower() if "." in self.name else ""

    def to_dict(self) -> dict:
        return {"name": self.name, "path": self.path, "url": self.url, "size": self.size, "extension": self.extension}
