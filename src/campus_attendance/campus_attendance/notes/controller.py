from __future__ import annotations

from flask import Flask, request, send_file

from ..common.http import Guards, current_role, ok
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = Guards(container)

    def course_name_for(course_id: str) -> str:
        return container.catalog_service.get_course(course_id).name

    @app.route("/courses/<course_id>/notes", endpoint="list_notes")
    @guards.login_required
    def list_notes(course_id: str):
        notes = container.notes_service.list_notes(course_name_for(course_id))
        return ok({"notes": [n.to_dict() for n in notes]})

    @app.route("/courses/<course_id>/notes", methods=["POST"], endpoint="upload_note")
    @guards.roles_required(Role.ADMIN, Role.SUPER_ADMIN)
    def upload_note(course_id: str):
        upload = request.files.get("file")
        if upload is None:
            raise ValidationError("Please choose a file to upload")

        note = container.notes_service.upload_note(
            current_role=current_role(),
            course_name=course_name_for(course_id),
            filename=upload.filename or "",
            data=upload.read(),
        )
        return ok({"note": note.to_dict()}, 201)

    @app.route("/files/<path:path>", endpoint="download_file")
    @guards.login_required
    def download_file(path: str):
        target = container.storage.resolve(path)
        if not target.is_file():
            raise NotFoundError("File not found")
        return send_file(target, as_attachment=True, download_name=target.name)
