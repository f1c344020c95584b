from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.web import client_ip
from ..container import Container
from ..core.exceptions import AuthenticationError, RateLimitedError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/", methods=["GET", "POST"], endpoint="login")
    def login():
        if "user_id" in session:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            username = request.form.get("username", "")
            password = request.form.get("password", "")

            try:
                s_user = container.auth_service.authenticate(username, password, client_ip())

                # new session on login
                session.clear()
                session.permanent = True
                session["user_id"] = s_user.user_id
                session["username"] = s_user.username

                return redirect(url_for("dashboard"))
            except (AuthenticationError, RateLimitedError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("login failed unexpectedly")
                flash("An error occurred during login. Please try again.", "danger")

        return render_template("login.html")

    @app.route("/logout", methods=["GET", "POST"], endpoint="logout")
    def logout():
        session.clear()
        flash("You have been logged out.", "info")
        return redirect(url_for("login"))
