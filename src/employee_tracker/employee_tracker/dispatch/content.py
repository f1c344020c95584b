from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..common.datetime_utils import format_long_date
from ..employees.model import Employee
from ..tracking.employee_ref import EmployeeRefSigner
from .mailer import MailMessage


@dataclass(frozen=True)
class EmployeeLink:
    name: str
    url: str


class DailyEmailBuilder:
    """Render the "who worked today" email from templates/email/."""

    def __init__(self, *, template_dir: str | Path, app_url: str, signer: EmployeeRefSigner):
        self._env = Environment(
            loader=FileSystemLoader(str(Path(template_dir) / "email")),
            autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=False),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._app_url = app_url.rstrip("/")
        self._signer = signer

    def link_for(self, token: str, employee_id: int) -> str:
        return f"{self._app_url}/track/{token}/{self._signer.sign(token, employee_id)}"

    def build(
        self,
        *,
        work_date: date,
        token: str,
        employees: Sequence[Employee],
        recipients: Sequence[str],
    ) -> MailMessage:
        long_date = format_long_date(work_date)
        links = [EmployeeLink(name=e.name, url=self.link_for(token, e.employee_id)) for e in employees]
        context = {"long_date": long_date, "links": links}
        return MailMessage(
            recipients=list(recipients),
            subject=f"Work Attendance - {long_date}",
            html=self._env.get_template("daily_dispatch.html").render(**context),
            text=self._env.get_template("daily_dispatch.txt").render(**context),
        )
