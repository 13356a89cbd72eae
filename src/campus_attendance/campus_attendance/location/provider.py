from __future__ import annotations

from typing import Optional, Protocol

from ..common.validators import require_coordinate
from ..core.exceptions import PermissionDeniedError, UnavailableError, ValidationError
from .model import Position


class GeolocationProvider(Protocol):
    """Geolocation collaborator.

    ``request_permission`` raises PermissionDeniedError when the user refuses,
    ``current_position`` raises UnavailableError when no fix can be obtained.
    """

    def request_permission(self) -> None:
        raise NotImplementedError

    def current_position(self) -> Position:
        raise NotImplementedError


class ReportedPosition(GeolocationProvider):
    """Position reported by the device along with the request.

    A device that could not get a fix (or was refused permission) sends no
    coordinates, or sends ``permission: "denied"``.
    """

    def __init__(
        self,
        latitude: Optional[float],
        longitude: Optional[float],
        *,
        accuracy_m: Optional[float] = None,
        permission_granted: bool = True,
    ):
        self._latitude = latitude
        self._longitude = longitude
        self._accuracy_m = accuracy_m
        self._permission_granted = permission_granted

    @classmethod
    def from_payload(cls, payload: Optional[dict]) -> "ReportedPosition":
        payload = payload or {}
        granted = str(payload.get("permission", "granted")).lower() != "denied"
        lat = payload.get("latitude")
        lng = payload.get("longitude")
        try:
            latitude = require_coordinate(lat, "latitude", limit=90) if lat is not None else None
            longitude = require_coordinate(lng, "longitude", limit=180) if lng is not None else None
        except ValidationError:
            latitude = longitude = None
        accuracy = payload.get("accuracy")
        return cls(
            latitude,
            longitude,
            accuracy_m=float(accuracy) if isinstance(accuracy, (int, float)) else None,
            permission_granted=granted,
        )

    def request_permission(self) -> None:
        if not self._permission_granted:
            raise PermissionDeniedError("Location access was denied")

    def current_position(self) -> Position:
        if self._latitude is None or self._longitude is None:
            raise UnavailableError("Current location could not be determined")
        return Position(latitude=self._latitude, longitude=self._longitude, accuracy_m=self._accuracy_m)
