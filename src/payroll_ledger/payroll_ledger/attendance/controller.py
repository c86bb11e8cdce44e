from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import month_range, today_local
from ..common.responses import domain_error, ok, server_error
from ..common.validators import optional_date, require_date, require_int
from ..container import Container
from ..core.exceptions import DomainError, ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/attendance", methods=["POST"], endpoint="mark_attendance")
    def mark_attendance():
        data = request.get_json(silent=True) or {}
        try:
            project = data.get("project")
            record, created = container.attendance_service.mark(
                worker_id=require_int(data.get("workerId"), "worker_id"),
                work_date=require_date(data.get("date"), "date"),
                status=data.get("status"),
                check_in=data.get("checkIn"),
                check_out=data.get("checkOut"),
                notes=data.get("notes"),
                project_id=require_int(project, "project") if project not in (None, "") else None,
            )
            return ok(record.to_dict(), 201 if created else 200)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("Failed to save attendance")

    @app.route("/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="delete_attendance")
    def delete_attendance(attendance_id: int):
        try:
            container.attendance_service.delete(attendance_id)
            return ok({"id": attendance_id})
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("Failed to delete attendance")

    @app.route(
        "/attendance/<int:attendance_id>/approve-overtime",
        methods=["POST"],
        endpoint="approve_overtime",
    )
    def approve_overtime(attendance_id: int):
        data = request.get_json(silent=True) or {}
        try:
            record = container.attendance_service.approve_overtime(
                attendance_id,
                approved=bool(data.get("approved", True)),
            )
            return ok(record.to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("Failed to update overtime approval")

    @app.route("/attendance/day", methods=["GET"], endpoint="attendance_day")
    def attendance_day():
        try:
            work_date = optional_date(request.args.get("date"), "date") or today_local()
            return ok(container.attendance_service.day_sheet(work_date).to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("Failed to load attendance")

    def _range_from_args():
        month, year = request.args.get("month"), request.args.get("year")
        if month and year:
            m = require_int(month, "month")
            if not 1 <= m <= 12:
                raise ValidationError("month must be between 1 and 12", field="month")
            return month_range(require_int(year, "year"), m)
        return require_date(request.args.get("start"), "start"), require_date(request.args.get("end"), "end")

    @app.route("/attendance", methods=["GET"], endpoint="list_attendance")
    def list_attendance():
        try:
            start, end = _range_from_args()
            records = container.attendance_service.list_for_worker(
                require_int(request.args.get("workerId"), "worker_id"),
                start=start,
                end=end,
                include_inactive=request.args.get("includeInactive") == "true",
            )
            return ok([r.to_dict() for r in records])
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("Failed to load attendance")

    @app.route("/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    def attendance_stats():
        try:
            start, end = _range_from_args()
            worker_id = request.args.get("workerId")
            stats = container.attendance_service.stats(
                start=start,
                end=end,
                worker_id=require_int(worker_id, "worker_id") if worker_id else None,
            )
            return ok(stats.to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("Failed to load attendance stats")
