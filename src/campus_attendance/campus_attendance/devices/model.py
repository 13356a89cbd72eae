from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import DenyReason


@dataclass(frozen=True)
class DeviceDecision:
    allowed: bool
    reason: Optional[DenyReason] = None
    message: Optional[str] = None

    @classmethod
    def allow(cls) -> "DeviceDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, message: str = "unauthorized device") -> "DeviceDecision":
        return cls(allowed=False, reason=DenyReason.UNAUTHORIZED_DEVICE, message=message)
