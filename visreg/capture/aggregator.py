"""Comparison aggregator — ordered collector of per-image comparison results."""

from __future__ import annotations

from typing import Any, Iterable


class ComparisonAggregator:
    """Collects results in capture order.

    ``None`` (no comparison performed) is kept as a placeholder so the
    number of results always equals the number of images captured.
    """

    def __init__(self) -> None:
        self._results: list[Any] = []

    def add(self, result: Any) -> None:
        self._results.append(result)

    @property
    def results(self) -> list[Any]:
        return list(self._results)

    def __len__(self) -> int:
        return len(self._results)


def aggregate(results: Iterable[Any]) -> list[Any]:
    aggregator = ComparisonAggregator()
    for result in results:
        aggregator.add(result)
    return aggregator.results
