from __future__ import annotations

import logging

from werkzeug.utils import secure_filename

from ..common.validators import require_non_empty
from ..core.constants import NOTE_EXTENSIONS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..storage.object_storage import ObjectStorage
from .model import Note

logger = logging.getLogger(__name__)

_UPLOADERS = {Role.ADMIN, Role.SUPER_ADMIN}


def _folder(course_name: str) -> str:
    # Course names may contain spaces; they stay readable, only separators are dropped.
    folder = require_non_empty(course_name, "Course name").replace("/", " ").replace("\\", " ").strip()
    if folder in {".", ".."}:
        raise ValidationError("Invalid course name")
    return folder


class NotesService:
    """Course notes stored as ``<course name>/<file name>`` in object storage."""

    def __init__(self, storage: ObjectStorage):
        self._storage = storage

    def upload_note(self, *, current_role: Role, course_name: str, filename: str, data: bytes) -> Note:
        if current_role not in _UPLOADERS:
            raise AuthorizationError("Only admins can upload notes")

        safe_name = secure_filename(filename or "")
        if not safe_name or "." not in safe_name:
            raise ValidationError("Please choose a file to upload")

        ext = safe_name.rsplit(".", 1)[1].lower()
        if ext not in NOTE_EXTENSIONS:
            raise ValidationError(f"Unsupported file type: .{ext}")
        if not data:
            raise ValidationError("The uploaded file is empty")

        stored = self._storage.upload_bytes(f"{_folder(course_name)}/{safe_name}", data)
        logger.info("Uploaded note %s (%d bytes)", stored.path, stored.size)
        return Note(name=stored.name, path=stored.path, url=self._storage.download_url(stored.path), size=stored.size)

    def list_notes(self, course_name: str) -> list[Note]:
        return [
            Note(name=o.name, path=o.path, url=self._storage.download_url(o.path), size=o.size)
            for o in self._storage.list_children(_folder(course_name))
        ]
