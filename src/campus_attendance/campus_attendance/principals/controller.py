from __future__ import annotations

from datetime import timedelta

from flask import Flask, g, session

from ..common.http import Guards, current_role, json_body, ok
from ..core.enums import Role
from ..container import Container
from .model import Principal
from .service import SessionPrincipal, home_route_for


def _principal_dict(p: Principal) -> dict:
    return {
        "principal_id": p.principal_id,
        "email": p.email,
        "full_name": p.full_name,
        "role": p.role.value,
        "year_id": p.year_id,
        "semester_id": p.semester_id,
        "course_names": sorted(p.enrolled_course_names),
    }


def register(app: Flask, container: Container) -> None:
    guards = Guards(container)

    def start_session(s: SessionPrincipal, *, remember: bool) -> None:
        session.clear()
        session.permanent = remember
        app.permanent_session_lifetime = timedelta(days=7)
        session["principal_id"] = s.principal_id
        session["name"] = s.full_name
        session["role"] = s.role.value

    def session_payload(s: SessionPrincipal) -> dict:
        return {
            "principal_id": s.principal_id,
            "full_name": s.full_name,
            "email": s.email,
            "role": s.role.value,
            "home": s.home,
        }

    @app.route("/auth/signup", methods=["POST"], endpoint="signup")
    def signup():
        data = json_body()
        s_principal = container.auth_service.sign_up(
            email=data.get("email", ""),
            password=data.get("password", ""),
            full_name=data.get("full_name", ""),
            role=data.get("role", ""),
            device_id=guards.device_id(),
            device_type=str(data.get("device_type") or "web"),
        )
        start_session(s_principal, remember=bool(data.get("remember_me")))
        return ok({"principal": session_payload(s_principal)}, 201)

    @app.route("/auth/signin", methods=["POST"], endpoint="signin")
    def signin():
        data = json_body()
        s_principal = container.auth_service.sign_in(
            data.get("email", ""),
            data.get("password", ""),
            device_id=guards.device_id(),
        )
        start_session(s_principal, remember=bool(data.get("remember_me")))
        return ok({"principal": session_payload(s_principal)})

    @app.route("/auth/signout", methods=["POST"], endpoint="signout")
    def signout():
        session.clear()
        return ok({"message": "Signed out"})

    @app.route("/auth/me", endpoint="me")
    @guards.login_required
    def me():
        payload = _principal_dict(g.principal)
        payload["home"] = home_route_for(g.principal.role)
        return ok({"principal": payload})

    @app.route("/me/term", methods=["PUT"], endpoint="select_term")
    @guards.roles_required(Role.STUDENT)
    def select_term():
        data = json_body()
        container.enrollment_service.select_term(
            g.principal.principal_id,
            year_id=data.get("year_id", ""),
            semester_id=data.get("semester_id"),
        )
        return ok({"year_id": data.get("year_id"), "semester_id": data.get("semester_id")})

    @app.route("/me/enrollments/toggle", methods=["POST"], endpoint="toggle_enrollment")
    @guards.roles_required(Role.STUDENT)
    def toggle_enrollment():
        result = container.enrollment_service.toggle_enrollment(
            g.principal.principal_id,
            json_body().get("course_name", ""),
        )
        return ok(
            {
                "course_name": result.course_name,
                "enrolled": result.enrolled,
                "course_names": sorted(result.course_names),
            }
        )

    @app.route("/superadmin/principals", endpoint="list_principals")
    @guards.roles_required(Role.SUPER_ADMIN)
    def list_principals():
        principals = container.principal_admin_service.list_principals(current_role=current_role())
        return ok({"principals": [_principal_dict(p) for p in principals]})

    @app.route("/superadmin/principals/<principal_id>", methods=["PUT"], endpoint="update_principal")
    @guards.roles_required(Role.SUPER_ADMIN)
    def update_principal(principal_id: str):
        data = json_body()
        principal = container.principal_admin_service.update_principal(
            current_role=current_role(),
            current_principal_id=g.principal.principal_id,
            principal_id=principal_id,
            full_name=data.get("full_name", ""),
            email=data.get("email", ""),
            role=data.get("role", ""),
        )
        return ok({"principal": _principal_dict(principal)})

    @app.route("/superadmin/principals/<principal_id>", methods=["DELETE"], endpoint="delete_principal")
    @guards.roles_required(Role.SUPER_ADMIN)
    def delete_principal(principal_id: str):
        container.principal_admin_service.delete_principal(
            current_role=current_role(),
            current_principal_id=g.principal.principal_id,
            principal_id=principal_id,
        )
        return ok({"message": "Account deleted"})
