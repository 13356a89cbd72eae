from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.evaluator import EligibilityEvaluator
from .attendance.factory import EligibilityRuleFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.recorder import AttendanceRecorder
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .catalog.cache import CatalogCache
from .catalog.mysql_catalog_repository import MySQLCatalogRepository
from .catalog.repository import CatalogRepository
from .catalog.service import CatalogService
from .core.constants import DEFAULT_CACHE_TTL_HOURS, DEFAULT_GEOFENCE_RADIUS_METERS, DEFAULT_LOCAL_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .devices.identity import LocalDeviceIdentity
from .devices.service import DeviceBindingService
from .notes.service import NotesService
from .principals.mysql_principal_repository import MySQLPrincipalRepository
from .principals.repository import PrincipalRepository
from .principals.service import AuthService, EnrollmentService, PrincipalAdminService
from .storage.kv_store import JsonFileKeyValueStore, KeyValueStore
from .storage.object_storage import LocalObjectStorage


@dataclass(frozen=True)
class Container:
    principals_repo: PrincipalRepository
    catalog_repo: CatalogRepository
    attendance_repo: AttendanceRepository
    storage: LocalObjectStorage

    catalog_cache: CatalogCache
    device_identity: LocalDeviceIdentity

    device_service: DeviceBindingService
    auth_service: AuthService
    enrollment_service: EnrollmentService
    principal_admin_service: PrincipalAdminService
    catalog_service: CatalogService
    attendance_service: AttendanceService
    notes_service: NotesService

    conn: Optional[DatabaseConnection] = None


def assemble_container(
    *,
    principals_repo: PrincipalRepository,
    catalog_repo: CatalogRepository,
    attendance_repo: AttendanceRepository,
    local_store: KeyValueStore,
    device_fallback_store: Optional[KeyValueStore],
    storage: LocalObjectStorage,
    tz_name: str = DEFAULT_LOCAL_TIMEZONE,
    geofence_radius_m: float = DEFAULT_GEOFENCE_RADIUS_METERS,
    cache_ttl_hours: float = DEFAULT_CACHE_TTL_HOURS,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over the given repositories and stores."""

    catalog_cache = CatalogCache(catalog_repo, local_store, ttl_hours=cache_ttl_hours)
    device_service = DeviceBindingService()

    rules = EligibilityRuleFactory(attendance_repo, geofence_radius_m=geofence_radius_m)
    attendance_service = AttendanceService(
        attendance_repo,
        catalog_repo,
        evaluator=EligibilityEvaluator(rules.for_check_in()),
        listing_evaluator=EligibilityEvaluator(rules.for_listing()),
        recorder=AttendanceRecorder(attendance_repo),
        tz_name=tz_name,
    )

    return Container(
        principals_repo=principals_repo,
        catalog_repo=catalog_repo,
        attendance_repo=attendance_repo,
        storage=storage,
        catalog_cache=catalog_cache,
        device_identity=LocalDeviceIdentity(local_store, device_fallback_store),
        device_service=device_service,
        auth_service=AuthService(principals_repo, device_service),
        enrollment_service=EnrollmentService(principals_repo),
        principal_admin_service=PrincipalAdminService(principals_repo),
        catalog_service=CatalogService(catalog_repo, catalog_cache),
        attendance_service=attendance_service,
        notes_service=NotesService(storage),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    local_store_path: str,
    device_fallback_path: str,
    notes_root: str,
    tz_name: str = DEFAULT_LOCAL_TIMEZONE,
    geofence_radius_m: float = DEFAULT_GEOFENCE_RADIUS_METERS,
    cache_ttl_hours: float = DEFAULT_CACHE_TTL_HOURS,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        connection_timeout=int(db_config.get("connection_timeout", 10)),
    )
    conn = DatabaseConnection.get_instance(config)

    return assemble_container(
        principals_repo=MySQLPrincipalRepository(conn),
        catalog_repo=MySQLCatalogRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        local_store=JsonFileKeyValueStore(local_store_path),
        device_fallback_store=JsonFileKeyValueStore(device_fallback_path),
        storage=LocalObjectStorage(notes_root),
        tz_name=tz_name,
        geofence_radius_m=geofence_radius_m,
        cache_ttl_hours=cache_ttl_hours,
        conn=conn,
    )
