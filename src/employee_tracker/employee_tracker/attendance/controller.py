from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.web import login_required
from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/records", endpoint="records")
    @login_required
    def records():
        try:
            page = container.attendance_service.list_records(
                employee_id=request.args.get("employee_id"),
                start_date=request.args.get("start_date"),
                end_date=request.args.get("end_date"),
            )
            employees = container.employee_service.list_employees()
        except Exception:
            logger.exception("records list failed")
            return render_template("error.html", title="Error", message="Error loading attendance records"), 500

        if page.error:
            flash(page.error, "warning")
        return render_template("records/index.html", page=page, employees=employees, active_page="records")

    @app.route("/records/<int:attendance_id>/delete", methods=["POST"], endpoint="delete_record")
    @login_required
    def delete_record(attendance_id: int):
        try:
            container.attendance_service.delete_record(attendance_id)
            flash("Attendance record deleted", "success")
        except (ValidationError, NotFoundError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("record delete failed id=%s", attendance_id)
            flash("Error deleting record", "danger")
        return redirect(url_for("records", **request.args))
