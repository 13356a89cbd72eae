from __future__ import annotations

from dataclasses import asdict

from flask import Flask, request

from ..common.http import Guards, current_role, json_body, ok
from ..core.enums import Role
from ..container import Container
from .model import Course


def course_dict(c: Course) -> dict:
    data = asdict(c)
    data["is_scheduled"] = c.is_scheduled
    data["has_location"] = c.has_location
    return data


def register(app: Flask, container: Container) -> None:
    guards = Guards(container)
    catalog = container.catalog_service

    @app.route("/catalog/years", endpoint="list_years")
    @guards.login_required
    def list_years():
        refresh = request.args.get("refresh", "").lower() in {"1", "true", "yes"}
        snapshot = catalog.get_years(force_refresh=refresh)
        return ok(
            {
                "years": [y.to_dict() for y in snapshot.years],
                "fetched_at": snapshot.fetched_at_ms,
                "stale": snapshot.stale,
            }
        )

    @app.route("/catalog/years/<year_id>/semesters", endpoint="list_semesters")
    @guards.login_required
    def list_semesters(year_id: str):
        return ok({"semesters": [asdict(s) for s in catalog.list_semesters(year_id)]})

    @app.route("/catalog/years/<year_id>/semesters/<semester_id>/courses", endpoint="list_courses")
    @guards.login_required
    def list_courses(year_id: str, semester_id: str):
        return ok({"courses": [course_dict(c) for c in catalog.list_courses(year_id, semester_id)]})

    @app.route("/catalog/years", methods=["POST"], endpoint="create_year")
    @guards.roles_required(Role.SUPER_ADMIN)
    def create_year():
        data = json_body()
        year_id = catalog.create_year(current_role=current_role(), name=data.get("name", ""), order=data.get("order"))
        return ok({"year_id": year_id}, 201)

    @app.route("/catalog/years/<year_id>/semesters", methods=["POST"], endpoint="create_semester")
    @guards.roles_required(Role.SUPER_ADMIN)
    def create_semester(year_id: str):
        data = json_body()
        semester_id = catalog.create_semester(
            current_role=current_role(),
            year_id=year_id,
            name=data.get("name", ""),
            order=data.get("order"),
        )
        return ok({"semester_id": semester_id}, 201)

    @app.route("/catalog/years/<year_id>/semesters/<semester_id>/courses", methods=["POST"], endpoint="create_course")
    @guards.roles_required(Role.SUPER_ADMIN)
    def create_course(year_id: str, semester_id: str):
        data = json_body()
        course_id = catalog.create_course(
            current_role=current_role(),
            year_id=year_id,
            semester_id=semester_id,
            name=data.get("name", ""),
            code=data.get("code", ""),
        )
        return ok({"course_id": course_id}, 201)

    @app.route("/catalog/years/<year_id>", methods=["PUT"], endpoint="update_year")
    @guards.roles_required(Role.SUPER_ADMIN)
    def update_year(year_id: str):
        data = json_body()
        catalog.update_year(current_role=current_role(), year_id=year_id, name=data.get("name", ""), order=data.get("order"))
        return ok({"message": "Year updated"})

    @app.route("/catalog/years/<year_id>/semesters/<semester_id>", methods=["PUT"], endpoint="update_semester")
    @guards.roles_required(Role.SUPER_ADMIN)
    def update_semester(year_id: str, semester_id: str):
        data = json_body()
        catalog.update_semester(
            current_role=current_role(),
            year_id=year_id,
            semester_id=semester_id,
            name=data.get("name", ""),
            order=data.get("order"),
        )
        return ok({"message": "Semester updated"})

    @app.route("/catalog/courses/<course_id>", methods=["PUT"], endpoint="update_course")
    @guards.roles_required(Role.SUPER_ADMIN)
    def update_course(course_id: str):
        data = json_body()
        course = catalog.update_course(
            current_role=current_role(),
            course_id=course_id,
            name=data.get("name", ""),
            code=data.get("code", ""),
        )
        return ok({"course": course_dict(course)})

    @app.route("/catalog/years/<year_id>", methods=["DELETE"], endpoint="delete_year")
    @guards.roles_required(Role.SUPER_ADMIN)
    def delete_year(year_id: str):
        catalog.delete_year(current_role=current_role(), year_id=year_id)
        return ok({"message": "Year deleted"})

    @app.route("/catalog/years/<year_id>/semesters/<semester_id>", methods=["DELETE"], endpoint="delete_semester")
    @guards.roles_required(Role.SUPER_ADMIN)
    def delete_semester(year_id: str, semester_id: str):
        catalog.delete_semester(current_role=current_role(), year_id=year_id, semester_id=semester_id)
        return ok({"message": "Semester deleted"})

    @app.route("/catalog/courses/<course_id>", methods=["DELETE"], endpoint="delete_course")
    @guards.roles_required(Role.SUPER_ADMIN)
    def delete_course(course_id: str):
        catalog.delete_course(current_role=current_role(), course_id=course_id)
        return ok({"message": "Course deleted"})

    @app.route("/catalog/courses/<course_id>/schedule", methods=["PUT"], endpoint="set_schedule")
    @guards.roles_required(Role.ADMIN, Role.SUPER_ADMIN)
    def set_schedule(course_id: str):
        data = json_body()
        course = catalog.set_schedule(
            current_role=current_role(),
            course_id=course_id,
            class_time=data.get("class_time", ""),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )
        return ok({"course": course_dict(course)})
