from __future__ import annotations

from typing import Optional, Sequence

from ..common.money import round2, to_decimal
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import MaterialCost, OtherCost, Project
from .repository import ProjectRepository


class MySQLProjectRepository(ProjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_project(self, project_id: int) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT project_id, name, budget, start_date, end_date
                FROM projects
                WHERE project_id=%s
                """,
                (int(project_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            cur.execute(
                "SELECT worker_id FROM project_workers WHERE project_id=%s ORDER BY worker_id ASC",
                (int(project_id),),
            )
            worker_ids = tuple(int(w["worker_id"]) for w in fetchall(cur))
            return Project(
                project_id=int(r["project_id"]),
                name=r["name"],
                total_budget=round2(r["budget"]),
                start_date=r["start_date"],
                end_date=r.get("end_date"),
                worker_ids=worker_ids,
            )

    def list_materials(self, project_id: int) -> Sequence[MaterialCost]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT material_id, project_id, name, quantity, unit_price, purchase_date
                FROM material_costs
                WHERE project_id=%s
                ORDER BY material_id ASC
                """,
                (int(project_id),),
            )
            return [
                MaterialCost(
                    material_id=int(r["material_id"]),
                    project_id=int(r["project_id"]),
                    name=r["name"],
                    quantity=to_decimal(r["quantity"]),
                    unit_price=round2(r["unit_price"]),
                    purchase_date=r.get("purchase_date"),
                )
                for r in fetchall(cur)
            ]

    def list_other_costs(self, project_id: int) -> Sequence[OtherCost]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT cost_id, project_id, description, amount, cost_date
                FROM other_costs
                WHERE project_id=%s
                ORDER BY cost_id ASC
                """,
                (int(project_id),),
            )
            return [
                OtherCost(
                    cost_id=int(r["cost_id"]),
                    project_id=int(r["project_id"]),
                    description=r["description"],
                    amount=round2(r["amount"]),
                    cost_date=r.get("cost_date"),
                )
                for r in fetchall(cur)
            ]
