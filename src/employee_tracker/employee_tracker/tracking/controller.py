from __future__ import annotations

from flask import Flask, render_template

from ..common.web import client_ip
from ..container import Container
from ..core.enums import RedemptionFailure
from ..core.exceptions import RedemptionError

STATUS_BY_FAILURE = {
    RedemptionFailure.INVALID_LINK_FORMAT: 400,
    RedemptionFailure.INVALID_REFERENCE: 400,
    RedemptionFailure.LINK_NOT_FOUND: 404,
    RedemptionFailure.EMPLOYEE_NOT_FOUND: 404,
    RedemptionFailure.EMPLOYEE_INACTIVE: 410,
    RedemptionFailure.RATE_LIMITED: 429,
    RedemptionFailure.UNEXPECTED: 500,
}


def register(app: Flask, container: Container) -> None:
    @app.route("/track/<token>/<ref>", endpoint="track")
    def track(token: str, ref: str):
        try:
            result = container.redemption_service.redeem(token, ref, client_ip())
        except RedemptionError as e:
            return render_template("tracking/error.html", message=str(e)), STATUS_BY_FAILURE[e.reason]
        return render_template("tracking/success.html", result=result)
