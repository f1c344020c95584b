from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.web import login_required
from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _form_data() -> dict:
    return {
        "first_name": request.form.get("first_name", ""),
        "last_name": request.form.get("last_name", ""),
        "daily_wage": request.form.get("daily_wage", "0"),
        "active": request.form.get("active") in {"on", "1", "true"},
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/employees", endpoint="employees")
    @login_required
    def employees():
        try:
            rows = container.employee_service.list_employees()
        except Exception:
            logger.exception("employees list failed")
            return render_template("error.html", title="Error", message="Error loading employees"), 500
        return render_template("employees/index.html", employees=rows, active_page="employees")

    @app.route("/employees/new", methods=["GET", "POST"], endpoint="add_employee")
    @login_required
    def add_employee():
        form = _form_data()
        if request.method == "POST":
            try:
                container.employee_service.create_employee(
                    first_name=form["first_name"],
                    last_name=form["last_name"],
                    daily_wage=form["daily_wage"],
                )
                flash("Employee added successfully", "success")
                return redirect(url_for("employees"))
            except ValidationError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("employee create failed")
                flash("Error adding employee. Please try again.", "danger")

        return render_template("employees/form.html", employee=None, form=form, active_page="employees")

    @app.route("/employees/<int:employee_id>/edit", methods=["GET", "POST"], endpoint="edit_employee")
    @login_required
    def edit_employee(employee_id: int):
        try:
            employee = container.employee_service.get_employee(employee_id)
        except (ValidationError, NotFoundError) as e:
            return render_template("error.html", title="Not Found", message=str(e)), 404

        form = None
        if request.method == "POST":
            form = _form_data()
            try:
                container.employee_service.update_employee(
                    employee_id=employee_id,
                    first_name=form["first_name"],
                    last_name=form["last_name"],
                    daily_wage=form["daily_wage"],
                    active=form["active"],
                )
                flash("Employee updated successfully", "success")
                return redirect(url_for("employees"))
            except ValidationError as e:
                flash(str(e), "danger")
            except NotFoundError as e:
                return render_template("error.html", title="Not Found", message=str(e)), 404
            except Exception:
                logger.exception("employee update failed id=%s", employee_id)
                flash("Error updating employee. Please try again.", "danger")

        return render_template("employees/form.html", employee=employee, form=form, active_page="employees")

    @app.route("/employees/<int:employee_id>/deactivate", methods=["POST"], endpoint="deactivate_employee")
    @login_required
    def deactivate_employee(employee_id: int):
        try:
            employee = container.employee_service.deactivate_employee(employee_id)
            flash(f"{employee.name} has been deactivated", "success")
        except (ValidationError, NotFoundError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("employee deactivate failed id=%s", employee_id)
            flash("Error deactivating employee", "danger")
        return redirect(url_for("employees"))
