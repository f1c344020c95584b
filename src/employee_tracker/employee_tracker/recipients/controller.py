from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.web import login_required
from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/recipients", endpoint="recipients")
    @login_required
    def recipients():
        try:
            rows = container.recipient_service.list_recipients()
        except Exception:
            logger.exception("recipients list failed")
            return render_template("error.html", title="Error", message="Error loading recipients"), 500
        return render_template("recipients/index.html", recipients=rows, active_page="recipients")

    @app.route("/recipients", methods=["POST"], endpoint="add_recipient")
    @login_required
    def add_recipient():
        try:
            change = container.recipient_service.add_recipient(request.form.get("email", ""))
            flash(change.message, "success")
        except ValidationError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("recipient add failed")
            flash("Error adding recipient. Please try again.", "danger")
        return redirect(url_for("recipients"))

    @app.route("/recipients/<int:recipient_id>/toggle", methods=["POST"], endpoint="toggle_recipient")
    @login_required
    def toggle_recipient(recipient_id: int):
        try:
            change = container.recipient_service.toggle_recipient(recipient_id)
            flash(change.message, "success")
        except (ValidationError, NotFoundError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("recipient toggle failed id=%s", recipient_id)
            flash("Error updating recipient", "danger")
        return redirect(url_for("recipients"))

    @app.route("/recipients/<int:recipient_id>/delete", methods=["POST"], endpoint="delete_recipient")
    @login_required
    def delete_recipient(recipient_id: int):
        try:
            recipient = container.recipient_service.delete_recipient(recipient_id)
            flash(f"{recipient.email} has been removed", "success")
        except (ValidationError, NotFoundError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("recipient delete failed id=%s", recipient_id)
            flash("Error deleting recipient", "danger")
        return redirect(url_for("recipients"))
