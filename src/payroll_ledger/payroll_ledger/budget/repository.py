from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import MaterialCost, OtherCost, Project


class ProjectRepository(Protocol):
    def get_project(self, project_id: int) -> Optional[Project]:
        """Project with the ids of its assigned workers."""

        raise NotImplementedError

    def list_materials(self, project_id: int) -> Sequence[MaterialCost]:
        raise NotImplementedError

    def list_other_costs(self, project_id: int) -> Sequence[OtherCost]:
        raise NotImplementedError
