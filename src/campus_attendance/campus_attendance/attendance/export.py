from __future__ import annotations

import io

import pandas as pd

from .model import AttendanceSession

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def export_filename(session: AttendanceSession) -> str:
    return f"{session.session_date.strftime('%Y-%m-%d')}_attendance.xlsx"


def session_to_xlsx(session: AttendanceSession) -> bytes:
    """One sheet named "Attendance": Student Name, Status, In."""

    df = pd.DataFrame(
        [
            {
                "Student Name": s.student_name,
                "Status": s.status.value,
                "In": s.check_in_time.strftime("%H:%M:%S"),
            }
            for s in session.students
        ],
        columns=["Student Name", "Status", "In"],
    )

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Attendance")
    return out.getvalue()
