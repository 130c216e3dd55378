"""Core value types shared by the graph, plan and codec modules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True, order=True)
class DepNode:
    """A buildable package, namespaced by the project that declares it.

    The same package name in two projects gives two distinct nodes.
    Ordering is (package_name, project_name).
    """

    package_name: str
    project_name: str

    def __str__(self) -> str:
        return f"{self.package_name}@{self.project_name}"


class Project(BaseModel):
    """A loaded project description.

    Attributes:
        name: Project name, used to namespace every node created for it.
        dependencies: Package names the project declares.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    dependencies: List[str] = Field(default_factory=list)

    def nodes(self) -> List[DepNode]:
        """Return one node per declared dependency, labeled with this project."""
        return [DepNode(dep, self.name) for dep in self.dependencies]
