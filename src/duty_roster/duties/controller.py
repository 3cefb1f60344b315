from __future__ import annotations

import csv
import io
import logging
from datetime import datetime

from flask import Flask, abort, jsonify, render_template, request

from ..common.datetime_utils import format_short_date, parse_iso_date, parse_iso_datetime
from ..common.web import admin_required, current_user, login_required, render_forbidden
from ..core.enums import DutyType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..container import Container
from ..credits.service import REPORT_FIELDS
from .checklist import build_checklist, complete_prompt, missing_prompt
from .service import empty_groups

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    load_user = container.user_service.find_user
    policy = container.policy

    def _error(message: str, status: int, /, **extra):
        return jsonify({"success": False, "message": message, **extra}), status

    def _domain_error(e: Exception):
        if isinstance(e, AuthorizationError):
            return _error(str(e), 403)
        if isinstance(e, NotFoundError):
            return _error(str(e), 404)
        return _error(str(e), 400)

    def _parse_time(value) -> datetime:
        if not isinstance(value, str) or not value.strip():
            raise ValidationError("Duty time is required")
        try:
            return parse_iso_datetime(value, tz=container.tz)
        except ValueError:
            raise ValidationError("Duty time must be an ISO date and time")

    # ---------- pages ----------

    @app.route("/duties/<netid>", endpoint="view_duties")
    @login_required(load_user)
    def view_duties(netid: str):
        viewer = current_user(load_user)
        if not policy.can_view_user_duties(viewer, netid):
            return render_forbidden()

        try:
            user, duties = container.duty_service.get_duties_by_user(netid)
        except NotFoundError:
            abort(404)
        except Exception:
            logger.exception("Loading duties for %s failed", netid)
            return render_template("duties/user.html", error=True, user=None, duties=empty_groups(), columns=[])

        columns = [
            {
                "type": t,
                "title": t.value.capitalize(),
                "rows": [{"name": d.name, "date": format_short_date(d.time, container.tz)} for d in duties[t]],
            }
            for t in DutyType
        ]
        return render_template("duties/user.html", error=False, user=user, duties=duties, columns=columns)

    @app.route("/duties/check", endpoint="check_duties")
    @login_required(load_user)
    def check_duties():
        # invalid query string
        duty_type = DutyType.parse(request.args.get("type", ""))
        if duty_type is None:
            abort(404)

        viewer = current_user(load_user)
        if not policy.can_manage_type(viewer, duty_type):
            return render_forbidden()

        show_checked = request.args.get("show_checked") in {"1", "true", "on"}
        error = None
        items = []
        try:
            duties = container.duty_service.get_duties_by_type(duty_type)
            items = build_checklist(duties, show_checked=show_checked, tz=container.tz)
        except Exception:
            logger.exception("Loading %s duties failed", duty_type.value)
            error = "Error loading duties."

        return render_template(
            "duties/check.html",
            duty_type=duty_type,
            title=duty_type.value.capitalize(),
            items=items,
            show_checked=show_checked,
            error=error,
            complete_prompt=complete_prompt,
            missing_prompt=missing_prompt,
        )

    # ---------- JSON API ----------

    @app.route("/api/duties", methods=["POST"], endpoint="api_create_duty")
    @login_required(load_user)
    def api_create_duty():
        data = request.get_json(silent=True) or {}
        try:
            duty_id = container.duty_service.create_duty(
                current=current_user(load_user),
                name=data.get("name", ""),
                duty_type=data.get("type"),
                time=_parse_time(data.get("time")),
                assigned=data.get("assigned") or [],
                credits=data.get("credits"),
            )
        except (ValidationError, AuthorizationError, NotFoundError) as e:
            return _domain_error(e)
        except Exception:
            logger.exception("Creating duty failed")
            return _error("Error creating duty.", 500)
        return jsonify({"success": True, "duty_id": duty_id}), 201

    @app.route("/api/duties/<duty_id>", methods=["PUT"], endpoint="api_update_duty")
    @login_required(load_user)
    def api_update_duty(duty_id: str):
        data = request.get_json(silent=True) or {}
        try:
            duty = container.duty_service.update_duty(
                current=current_user(load_user),
                duty_id=duty_id,
                name=data.get("name"),
                time=_parse_time(data["time"]) if "time" in data else None,
                assigned=data.get("assigned"),
            )
        except (ValidationError, AuthorizationError, NotFoundError) as e:
            return _domain_error(e)
        except Exception:
            logger.exception("Updating duty %s failed", duty_id)
            return _error("Error updating duty.", 500)
        return jsonify({"success": True, "duty_id": duty.duty_id, "assigned": list(duty.assigned)})

    @app.route("/api/duties/<duty_id>", methods=["DELETE"], endpoint="api_delete_duty")
    @login_required(load_user)
    def api_delete_duty(duty_id: str):
        try:
            container.duty_service.delete_duty(current=current_user(load_user), duty_id=duty_id)
        except (ValidationError, AuthorizationError, NotFoundError) as e:
            return _domain_error(e)
        except Exception:
            logger.exception("Deleting duty %s failed", duty_id)
            return _error("Error deleting duty.", 500)
        return jsonify({"success": True})

    @app.route("/api/duties/<duty_id>/checked", methods=["POST"], endpoint="api_check_duty")
    @login_required(load_user)
    def api_check_duty(duty_id: str):
        data = request.get_json(silent=True) or {}
        checked = data.get("checked")
        if not isinstance(checked, bool):
            return _error("checked must be true or false", 400)
        previous = data.get("previous", not checked)
        if not isinstance(previous, bool):
            return _error("previous must be true or false", 400)
        try:
            result = container.duty_service.toggle_checked(
                current=current_user(load_user), duty_id=duty_id, checked=checked, previous=previous
            )
        except (ValidationError, AuthorizationError) as e:
            return _domain_error(e)

        if not result.success:
            return _error(result.message or "", 500, checked=result.value)
        return jsonify({"success": True, "checked": result.value})

    @app.route("/api/duties/<duty_id>/credits/<netid>", methods=["POST"], endpoint="api_update_credits")
    @login_required(load_user)
    def api_update_credits(duty_id: str, netid: str):
        data = request.get_json(silent=True) or {}
        previous = data.get("previous")
        try:
            result = container.duty_service.apply_credits(
                current=current_user(load_user),
                duty_id=duty_id,
                netid=netid,
                credits=data.get("credits"),
                previous=previous if isinstance(previous, (int, float)) and not isinstance(previous, bool) else None,
            )
        except (ValidationError, AuthorizationError) as e:
            return _domain_error(e)

        status = result.status.value if result.status else None
        if not result.success:
            return _error(result.message or "", 500, credits=result.value, status=status)
        return jsonify({"success": True, "credits": result.value, "status": status})

    # ---------- credit report ----------

    def _report_args():
        start_s = request.args.get("start")
        end_s = request.args.get("end")
        try:
            start = parse_iso_date(start_s) if start_s else None
            end = parse_iso_date(end_s) if end_s else None
        except ValueError:
            abort(400)
        return start, end, request.args.get("netid") or None

    @app.route("/admin/credits", endpoint="admin_credits")
    @admin_required(load_user)
    def admin_credits():
        start, end, netid = _report_args()
        data = container.credit_report_service.build_report(start=start, end=end, netid=netid)
        return render_template(
            "admin/credits.html",
            rows=data.rows,
            summary=data.summary,
            start=start.isoformat() if start else "",
            end=end.isoformat() if end else "",
            netid=netid or "",
        )

    @app.route("/admin/credits.csv", endpoint="admin_credits_csv")
    @admin_required(load_user)
    def admin_credits_csv():
        start, end, netid = _report_args()
        data = container.credit_report_service.build_report(start=start, end=end, netid=netid)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        filename = "duty_credits.csv"
        if start and end:
            filename = f"duty_credits_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"

        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
