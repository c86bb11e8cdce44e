from __future__ import annotations

from flask import Flask, request

from ..common.responses import domain_error, ok, server_error
from ..common.validators import optional_date
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/projects/<int:project_id>/budget-summary", methods=["GET"], endpoint="budget_summary")
    def budget_summary(project_id: int):
        try:
            as_of = optional_date(request.args.get("asOf"), "as_of")
            return ok(container.budget_service.summary(project_id, as_of=as_of).to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("Failed to build budget summary")

    @app.route(
        "/projects/<int:project_id>/worker-salary-summary",
        methods=["GET"],
        endpoint="worker_salary_summary",
    )
    def worker_salary_summary(project_id: int):
        try:
            as_of = optional_date(request.args.get("asOf"), "as_of")
            return ok(container.budget_service.worker_salary_summary(project_id, as_of=as_of).to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("Failed to build worker salary summary")
