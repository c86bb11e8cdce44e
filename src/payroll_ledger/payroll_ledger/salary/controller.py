from __future__ import annotations

from flask import Flask, request

from ..common.responses import domain_error, ok, server_error
from ..common.validators import optional_date, require_date, require_int
from ..container import Container
from ..core.exceptions import DomainError
from .model import PaymentRequest


def register(app: Flask, container: Container) -> None:
    @app.route("/salary/preview", methods=["POST"], endpoint="salary_preview")
    def salary_preview():
        try:
            payment = PaymentRequest.from_payload(request.get_json(silent=True) or {})
            return ok(container.salary_service.preview(payment).to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("Failed to calculate payment")

    @app.route("/salary/pay", methods=["POST"], endpoint="salary_pay")
    def salary_pay():
        try:
            payment = PaymentRequest.from_payload(request.get_json(silent=True) or {})
            return ok(container.salary_service.pay(payment).to_dict(), 201)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("Failed to record payment")

    @app.route("/salary/history/<int:worker_id>", methods=["GET"], endpoint="salary_history")
    def salary_history(worker_id: int):
        try:
            limit = request.args.get("limit")
            entries = container.salary_service.history(
                worker_id,
                limit=require_int(limit, "limit") if limit else None,
            )
            return ok([e.to_dict() for e in entries])
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("Failed to load payment history")

    @app.route("/salary/payments/<int:payment_id>", methods=["PUT"], endpoint="salary_edit_payment")
    def salary_edit_payment(payment_id: int):
        data = request.get_json(silent=True) or {}
        try:
            entry = container.salary_service.edit_metadata(
                payment_id,
                pay_date=optional_date(data.get("payDate"), "pay_date"),
                note=data.get("note"),
            )
            return ok(entry.to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("Failed to update payment")

    @app.route("/salary/payments/<int:payment_id>", methods=["DELETE"], endpoint="salary_void_payment")
    def salary_void_payment(payment_id: int):
        data = request.get_json(silent=True) or {}
        try:
            entry = container.salary_service.void(payment_id, reason=data.get("reason"))
            return ok(entry.to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("Failed to void payment")

    @app.route("/salary/verify/<int:worker_id>", methods=["GET"], endpoint="salary_verify")
    def salary_verify(worker_id: int):
        try:
            return ok(container.salary_service.verify(worker_id).to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("Failed to verify ledger")

    @app.route("/salary/payroll-view", methods=["GET"], endpoint="salary_payroll_view")
    def salary_payroll_view():
        try:
            worker_id = request.args.get("workerId")
            report = container.payroll_report_service.build_period_report(
                start=require_date(request.args.get("start"), "start"),
                end=require_date(request.args.get("end"), "end"),
                worker_id=require_int(worker_id, "worker_id") if worker_id else None,
            )
            return ok(report.to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("Failed to build payroll view")
