from __future__ import annotations

from flask import Flask

from ..common.responses import domain_error, ok, server_error
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/workers/<int:worker_id>/rates", methods=["GET"], endpoint="worker_rates")
    def worker_rates(worker_id: int):
        try:
            worker = container.worker_service.get_worker(worker_id)
            rates = container.worker_service.get_rates(worker_id)
            data = {
                "workerId": worker.worker_id,
                "paymentType": worker.pay.payment_type.value,
                "baseSalary": float(worker.pay.base_salary),
                "workingDaysPerMonth": worker.pay.working_days_per_month,
                "workingHoursPerDay": float(worker.pay.working_hours_per_day),
                **rates.to_dict(),
            }
            return ok(data)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("Failed to load worker rates")
