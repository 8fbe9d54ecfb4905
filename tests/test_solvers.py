"""
Tests for the DP and greedy slot solvers and the policy choosing between them.
"""

from __future__ import annotations

from itertools import combinations

from slotplanner.application.use_cases.solvers import DpSolver, GreedySolver, Solution, choose_solution
from slotplanner.application.utils.time_grid import generate_slots
from slotplanner.domain.entities.recommendation import WeightedSlot
from slotplanner.domain.entities.time_slot import TimeSlot


def ws(start: int, end: int, weight: int) -> WeightedSlot:
    return WeightedSlot(slot=TimeSlot(start=start, end=end), weight=weight)


def _disjoint(picks: list[WeightedSlot]) -> bool:
    ordered = sorted(picks, key=lambda p: p.slot.start)
    return all(a.slot.end <= b.slot.start for a, b in zip(ordered, ordered[1:]))


def _brute_force(candidates: list[WeightedSlot], budget: int) -> int:
    best = 0
    for size in range(1, budget + 1):
        for combo in combinations(candidates, size):
            if _disjoint(list(combo)):
                best = max(best, sum(c.weight for c in combo))
    return best


def test_dp_beats_greedy_when_heaviest_slot_blocks_two_others():
    wide = ws(540, 660, 3)  # 09:00-11:00
    left = ws(480, 600, 2)  # 08:00-10:00
    right = ws(600, 720, 2)  # 10:00-12:00
    candidates = [wide, left, right]

    dp = DpSolver().solve(candidates, 2)
    greedy = GreedySolver().solve(candidates, 2)

    assert dp.picks == [left, right]
    assert dp.weight == 4
    assert greedy.picks == [wide]
    assert greedy.weight == 3
    assert choose_solution(dp, greedy) is dp


def test_dp_respects_pick_budget():
    candidates = [ws(480 + i * 60, 540 + i * 60, 1) for i in range(5)]
    solution = DpSolver().solve(candidates, 3)
    assert len(solution.picks) == 3
    assert solution.weight == 3
    assert _disjoint(solution.picks)


def test_dp_prefers_more_slots_on_equal_weight():
    long_slot = ws(480, 600, 2)
    first = ws(480, 540, 1)
    second = ws(540, 600, 1)

    solution = DpSolver().solve([long_slot, first, second], 2)
    assert solution.picks == [first, second]


def test_dp_matches_exhaustive_search():
    grid = generate_slots(60)
    candidates = [WeightedSlot(slot=slot, weight=(i * 7) % 3 + 1) for i, slot in enumerate(grid)]

    for budget in (1, 2, 3):
        dp = DpSolver().solve(candidates, budget)
        greedy = GreedySolver().solve(candidates, budget)
        assert _disjoint(dp.picks)
        assert len(dp.picks) <= budget
        assert dp.weight == _brute_force(candidates, budget)
        assert greedy.weight <= dp.weight


def test_greedy_breaks_ties_by_earliest_start():
    early = ws(480, 540, 2)
    later = ws(510, 570, 2)
    solution = GreedySolver().solve([later, early], 1)
    assert solution.picks == [early]


def test_solvers_return_chronological_picks():
    candidates = [ws(900, 960, 1), ws(480, 540, 3), ws(660, 720, 2)]
    for solver in (DpSolver(), GreedySolver()):
        picks = solver.solve(candidates, 3).picks
        assert [p.slot.start for p in picks] == [480, 660, 900]


def test_empty_inputs_give_empty_solutions():
    for solver in (DpSolver(), GreedySolver()):
        assert solver.solve([], 3).picks == []
        assert solver.solve([ws(480, 540, 1)], 0).weight == 0


def test_choose_solution_policy():
    one_heavy = Solution(solver="dp", picks=[ws(480, 600, 2)])
    two_light = Solution(solver="greedy", picks=[ws(480, 540, 1), ws(540, 600, 1)])
    heavier = Solution(solver="greedy", picks=[ws(480, 540, 4)])
    same = Solution(solver="greedy", picks=[ws(600, 720, 2)])

    assert choose_solution(one_heavy, two_light).solver == "greedy"
    assert choose_solution(one_heavy, heavier).solver == "greedy"
    assert choose_solution(one_heavy, same).solver == "dp"
    assert choose_solution(two_light, one_heavy) is two_light
