"""Ranking of times at a single control."""

from __future__ import annotations

from collections.abc import Sequence

from splits_analysis.model.util import is_not_null_nor_nan


def get_ranks(source_data: Sequence[float | None]) -> list[int | None]:
    """Return the rank of each time in *source_data*.

    Equal times share a rank, and the next distinct time takes the next
    rank: ``[197, 197, 209]`` ranks as ``[1, 1, 2]``.  Missing and NaN times
    get a ``None`` rank.
    """
    distinct = sorted({value for value in source_data if is_not_null_nor_nan(value)})
    rank_map = {value: index + 1 for index, value in enumerate(distinct)}
    return [rank_map[value] if is_not_null_nor_nan(value) else None for value in source_data]


def get_competition_ranks(source_data: Sequence[float | None]) -> list[int | None]:
    """Return standard competition ranks: ``[197, 197, 209]`` ranks as ``[1, 1, 3]``.

    Missing and NaN times get a ``None`` rank.
    """
    ordered = sorted(value for value in source_data if is_not_null_nor_nan(value))
    rank_map: dict[float, int] = {}
    for index, value in enumerate(ordered):
        rank_map.setdefault(value, index + 1)
    return [rank_map[value] if is_not_null_nor_nan(value) else None for value in source_data]
