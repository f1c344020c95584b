from __future__ import annotations

from functools import wraps

from flask import flash, redirect, request, session, url_for


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            flash("Please log in to continue.", "warning")
            return redirect(url_for("login"))
        return view(*args, **kwargs)

    return wrapper


def client_ip() -> str:
    # ProxyFix rewrites remote_addr from X-Forwarded-For
    return request.remote_addr or "unknown"
