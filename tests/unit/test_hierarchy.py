"""Unit tests for ManagerForest."""

from __future__ import annotations

import pytest

from insight_engine.exceptions import ManagerCycleError, MissingEntityError
from insight_engine.snapshot import ManagerForest


@pytest.fixture
def forest() -> ManagerForest:
    return ManagerForest({1: None, 3: 1, 7: 1, 8: 7, 9: 8, 20: None, 21: 99})


class TestManagerForest:
    def test_direct_reports(self, forest):
        assert forest.direct_reports(1) == (3, 7)
        assert forest.direct_reports(9) == ()

    def test_manager_chain_nearest_first(self, forest):
        assert forest.manager_chain(9) == (8, 7, 1)
        assert forest.manager_chain(1) == ()

    def test_all_reports_transitive(self, forest):
        assert forest.all_reports(1) == (3, 7, 8, 9)
        assert forest.all_reports(8) == (9,)

    def test_roots_and_managers(self, forest):
        assert forest.roots() == (1, 20, 21)
        assert forest.managers() == (1, 7, 8)

    def test_dangling_manager_reported(self, forest):
        assert forest.dangling_references == ((21, 99),)
        assert forest.manager_chain(21) == ()
        assert forest.manager_of(21) == 99

    def test_unknown_employee_raises(self, forest):
        with pytest.raises(MissingEntityError):
            forest.direct_reports(404)

    def test_self_manager_is_a_cycle(self):
        with pytest.raises(ManagerCycleError) as exc_info:
            ManagerForest({1: 1})
        assert exc_info.value.cycle == [1, 1]

    def test_long_cycle_reported_in_order(self):
        with pytest.raises(ManagerCycleError) as exc_info:
            ManagerForest({1: None, 2: 3, 3: 4, 4: 2})
        assert exc_info.value.cycle == [2, 3, 4, 2]

    def test_membership(self, forest):
        assert 7 in forest
        assert 404 not in forest
        assert len(forest) == 7
