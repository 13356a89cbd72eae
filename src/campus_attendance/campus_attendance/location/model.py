from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Position:
    latitude: float
    longitude: float
    accuracy_m: Optional[float] = None
