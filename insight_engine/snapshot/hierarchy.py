"""
ManagerForest - the self-referencing manager relation as an explicit forest.

Built once per snapshot. Cycle detection runs at construction, and the
direct-reports index and every employee's manager chain are precomputed,
so no query ever re-walks parent pointers.

Example:
    forest = ManagerForest({1: None, 3: 1, 7: 1, 8: 7})
    forest.direct_reports(1)   # (3, 7)
    forest.manager_chain(8)    # (7, 1)
    forest.all_reports(1)      # (3, 7, 8)
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from ..exceptions import ManagerCycleError, MissingEntityError

logger = logging.getLogger(__name__)

_UNVISITED, _IN_PROGRESS, _DONE = 0, 1, 2


class ManagerForest:
    """Immutable manager forest over employee ids.

    Args:
        parents: Map of employee_id to manager_id (None for a root).

    Raises:
        ManagerCycleError: If following manager ids ever revisits an employee.

    Manager ids that do not belong to any employee are kept as dangling
    references: the employee is treated as a root for traversal and the
    reference is reported through ``dangling_references``.
    """

    def __init__(self, parents: Mapping[int, Optional[int]]):
        self._parents: Mapping[int, Optional[int]] = MappingProxyType(dict(parents))
        self._dangling: Tuple[Tuple[int, int], ...] = tuple(
            sorted(
                (emp_id, manager_id)
                for emp_id, manager_id in self._parents.items()
                if manager_id is not None and manager_id not in self._parents
            )
        )
        self._detect_cycles()

        children: Dict[int, List[int]] = {}
        for emp_id in sorted(self._parents):
            manager_id = self._parents[emp_id]
            if manager_id is not None and manager_id in self._parents:
                children.setdefault(manager_id, []).append(emp_id)
        self._children: Mapping[int, Tuple[int, ...]] = MappingProxyType(
            {manager_id: tuple(reports) for manager_id, reports in children.items()}
        )
        self._chains: Mapping[int, Tuple[int, ...]] = MappingProxyType(self._build_chains())

        logger.debug(
            f"Manager forest built: {len(self._parents)} employees, "
            f"{len(self.roots())} roots, {len(self._dangling)} dangling references"
        )

    def _detect_cycles(self) -> None:
        state: Dict[int, int] = {emp_id: _UNVISITED for emp_id in self._parents}
        for start in sorted(self._parents):
            if state[start] != _UNVISITED:
                continue
            path: List[int] = []
            node: Optional[int] = start
            while node is not None and node in self._parents and state[node] == _UNVISITED:
                state[node] = _IN_PROGRESS
                path.append(node)
                node = self._parents[node]
            if node is not None and node in self._parents and state[node] == _IN_PROGRESS:
                cycle = path[path.index(node):] + [node]
                raise ManagerCycleError(cycle)
            for visited in path:
                state[visited] = _DONE

    def _build_chains(self) -> Dict[int, Tuple[int, ...]]:
        chains: Dict[int, Tuple[int, ...]] = {}
        for start in sorted(self._parents):
            pending: List[int] = []
            node: Optional[int] = start
            while node is not None and node not in chains:
                pending.append(node)
                manager_id = self._parents[node]
                node = manager_id if manager_id in self._parents else None
            # pending runs bottom-up; resolve top-down so each manager is chained first
            for emp_id in reversed(pending):
                manager_id = self._parents[emp_id]
                if manager_id is None or manager_id not in self._parents:
                    chains[emp_id] = ()
                else:
                    chains[emp_id] = (manager_id,) + chains[manager_id]
        return chains

    def __contains__(self, employee_id: object) -> bool:
        return employee_id in self._parents

    def __len__(self) -> int:
        return len(self._parents)

    def _require(self, employee_id: int) -> None:
        if employee_id not in self._parents:
            raise MissingEntityError("employee", employee_id, referenced_by="manager hierarchy")

    def manager_of(self, employee_id: int) -> Optional[int]:
        self._require(employee_id)
        return self._parents[employee_id]

    def direct_reports(self, manager_id: int) -> Tuple[int, ...]:
        self._require(manager_id)
        return self._children.get(manager_id, ())

    def manager_chain(self, employee_id: int) -> Tuple[int, ...]:
        """Managers above ``employee_id``, nearest first."""
        self._require(employee_id)
        return self._chains[employee_id]

    def all_reports(self, manager_id: int) -> Tuple[int, ...]:
        """Every employee below ``manager_id``, sorted by id."""
        self._require(manager_id)
        found: List[int] = []
        frontier = list(self._children.get(manager_id, ()))
        while frontier:
            emp_id = frontier.pop()
            found.append(emp_id)
            frontier.extend(self._children.get(emp_id, ()))
        return tuple(sorted(found))

    def managers(self) -> Tuple[int, ...]:
        """Employees with at least one direct report."""
        return tuple(sorted(self._children))

    def roots(self) -> Tuple[int, ...]:
        return tuple(
            sorted(
                emp_id
                for emp_id, manager_id in self._parents.items()
                if manager_id is None or manager_id not in self._parents
            )
        )

    @property
    def dangling_references(self) -> Tuple[Tuple[int, int], ...]:
        """(employee_id, manager_id) pairs whose manager is not in the snapshot."""
        return self._dangling
