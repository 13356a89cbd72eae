from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import PermissionDeniedError
from ..principals.model import Principal
from .model import DeviceDecision

logger = logging.getLogger(__name__)


class DeviceBindingService:
    """Use case: tie Student accounts to the device they were created on."""

    def verify_device(self, principal: Principal, current_device_id: Optional[str]) -> DeviceDecision:
        if principal.role != Role.STUDENT:
            return DeviceDecision.allow()

        if current_device_id and principal.device_id == current_device_id:
            return DeviceDecision.allow()

        logger.warning("Device binding mismatch for principal %s", principal.principal_id)
        return DeviceDecision.deny()

    def require_device(self, principal: Principal, current_device_id: Optional[str]) -> None:
        """Raise PermissionDeniedError when the device is not the bound one.

        Callers must end the session on this error.
        """

        decision = self.verify_device(principal, current_device_id)
        if not decision.allowed:
            raise PermissionDeniedError(
                "Login failed: This device is not authorized for your account",
                reason=decision.reason,
            )
