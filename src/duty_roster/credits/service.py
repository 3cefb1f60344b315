from __future__ import annotations

from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Optional

from ..common.datetime_utils import format_short_date, to_local
from ..common.validators import normalize_credits
from ..duties.checklist import credit_status
from ..duties.repository import DutyRepository

REPORT_FIELDS = ["date", "duty_id", "duty_name", "type", "netid", "name", "credits", "status"]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


class CreditReportService:
    """Credits earned per resident, one row per (duty, assignee)."""

    def __init__(self, duties: DutyRepository, *, tz: Optional[tzinfo] = None):
        self._duties = duties
        self._tz = tz

    def build_report(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        netid: Optional[str] = None,
    ) -> ReportData:
        duties = self._duties.list_for_user(netid) if netid else self._duties.list_all()

        summary_map: dict[str, dict] = {}
        out_rows: list[dict] = []

        for d in sorted(duties, key=lambda x: x.time):
            local_day = to_local(d.time, self._tz).date()
            if start and local_day < start:
                continue
            if end and local_day > end:
                continue

            for person in d.assigned:
                if netid and person != netid:
                    continue
                credits = d.credits_of(person)

                out_rows.append(
                    {
                        "date": format_short_date(d.time, self._tz),
                        "duty_id": d.duty_id,
                        "duty_name": d.name,
                        "type": d.type.value,
                        "netid": person,
                        "name": d.name_of(person),
                        "credits": "-" if credits is None else normalize_credits(credits),
                        "status": credit_status(credits).value,
                    }
                )

                s = summary_map.get(person)
                if not s:
                    s = {"netid": person, "name": d.name_of(person), "duties": 0, "total_credits": 0}
                    summary_map[person] = s
                s["duties"] += 1
                s["total_credits"] += credits or 0

        summary = []
        for s in summary_map.values():
            summary.append({**s, "total_credits": normalize_credits(s["total_credits"])})

        summary.sort(key=lambda x: (-x["total_credits"], x["name"].lower()))
        return ReportData(rows=out_rows, summary=summary)
