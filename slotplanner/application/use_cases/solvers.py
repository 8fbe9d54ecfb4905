from __future__ import annotations

from abc import ABC, abstractmethod
from bisect import bisect_right
from collections.abc import Sequence
from dataclasses import dataclass, field

from slotplanner.domain.entities.recommendation import WeightedSlot
from slotplanner.domain.entities.time_slot import TimeSlot


@dataclass(frozen=True)
class Solution:
    solver: str
    picks: list[WeightedSlot] = field(default_factory=list)

    @property
    def weight(self) -> int:
        return sum(pick.weight for pick in self.picks)

    @property
    def slots(self) -> list[TimeSlot]:
        return [pick.slot for pick in self.picks]


def _disjoint(slot: TimeSlot, taken: Sequence[WeightedSlot]) -> bool:
    return all(slot.end <= pick.slot.start or pick.slot.end <= slot.start for pick in taken)


def _chronological(picks: list[WeightedSlot]) -> list[WeightedSlot]:
    return sorted(picks, key=lambda pick: (pick.slot.start, pick.slot.end))


class Solver(ABC):
    name: str = ""

    @abstractmethod
    def solve(self, candidates: Sequence[WeightedSlot], budget: int) -> Solution:
        """Choose at most `budget` pairwise-disjoint candidates maximizing total weight."""
        raise NotImplementedError


class DpSolver(Solver):
    """Weighted interval scheduling with a bound on the number of picks.

    Candidates are ordered by end time. dp[i][j] is the best (weight, count)
    using the first i candidates and at most j picks; taking candidate i jumps
    back to the last candidate that ends no later than it starts.
    """

    name = "dp"

    def solve(self, candidates: Sequence[WeightedSlot], budget: int) -> Solution:
        if budget <= 0 or not candidates:
            return Solution(solver=self.name)

        ordered = sorted(candidates, key=lambda c: (c.slot.end, c.slot.start))
        n = len(ordered)
        ends = [c.slot.end for c in ordered]
        compatible = [bisect_right(ends, ordered[i].slot.start, 0, i) for i in range(n)]

        dp = [[(0, 0)] * (budget + 1) for _ in range(n + 1)]
        for i in range(1, n + 1):
            current = ordered[i - 1]
            p = compatible[i - 1]
            for j in range(1, budget + 1):
                skip = dp[i - 1][j]
                base_weight, base_count = dp[p][j - 1]
                take = (base_weight + current.weight, base_count + 1)
                dp[i][j] = take if take > skip else skip

        picks: list[WeightedSlot] = []
        i, j = n, budget
        while i > 0 and j > 0:
            if dp[i][j] == dp[i - 1][j]:
                i -= 1
                continue
            picks.append(ordered[i - 1])
            i = compatible[i - 1]
            j -= 1

        return Solution(solver=self.name, picks=_chronological(picks))


class GreedySolver(Solver):
    """Highest weight first, earliest start on ties; keep whatever still fits."""

    name = "greedy"

    def solve(self, candidates: Sequence[WeightedSlot], budget: int) -> Solution:
        if budget <= 0 or not candidates:
            return Solution(solver=self.name)

        ordered = sorted(candidates, key=lambda c: (-c.weight, c.slot.start, c.slot.end))
        picks: list[WeightedSlot] = []
        for candidate in ordered:
            if len(picks) >= budget:
                break
            if _disjoint(candidate.slot, picks):
                picks.append(candidate)

        return Solution(solver=self.name, picks=_chronological(picks))


def choose_solution(dp: Solution, greedy: Solution) -> Solution:
    """Keep the DP answer unless greedy is heavier, or equally heavy with more slots."""
    if greedy.weight > dp.weight:
        return greedy
    if greedy.weight == dp.weight and len(greedy.picks) > len(dp.picks):
        return greedy
    return dp
