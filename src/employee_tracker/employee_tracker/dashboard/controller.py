from __future__ import annotations

import logging

from flask import Flask, flash, jsonify, redirect, render_template, url_for

from ..common.datetime_utils import now_local, today_in
from ..common.web import login_required
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/health", endpoint="health")
    def health():
        return jsonify({"status": "ok", "timestamp": now_local(container.timezone).isoformat()})

    @app.route("/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        try:
            overview = container.dashboard_service.overview(today_in(container.timezone))
        except Exception:
            logger.exception("dashboard failed to load")
            flash("Error loading dashboard.", "danger")
            overview = None
        return render_template("dashboard.html", overview=overview, active_page="dashboard")

    @app.route("/send-test-email", methods=["POST"], endpoint="send_test_email")
    @login_required
    def send_test_email():
        # single attempt, no retry policy
        result = container.dispatch_service.send_daily()
        flash(result.detail, "success" if result.sent else "warning")
        return redirect(url_for("dashboard"))
