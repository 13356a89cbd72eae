"""Example: drive the service layer directly, without Flask.

Controllers stay thin; the catalog and attendance rules live in the services.
"""

import importlib

from config import get_settings_module

from src.campus_attendance.campus_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        local_store_path=settings.LOCAL_STORE_PATH,
        device_fallback_path=settings.DEVICE_FALLBACK_PATH,
        notes_root=settings.NOTES_STORAGE_ROOT,
        tz_name=settings.LOCAL_TIMEZONE,
    )

    # Clients running on this machine present this id in the X-Device-Id header.
    print(f"Device id: {container.device_identity.resolve()}")

    snapshot = container.catalog_service.get_years()
    for year in snapshot.years:
        print(f"{year.name}{' (offline copy)' if snapshot.stale else ''}")
        for semester in container.catalog_service.list_semesters(year.year_id):
            for course in container.catalog_service.list_courses(year.year_id, semester.semester_id):
                print(f"  {semester.name}: {course.code} {course.name} [{course.class_time}]")


if __name__ == "__main__":
    main()
