"""Unit tests for predicate composition."""

from dataclasses import dataclass
from datetime import UTC, datetime

import pytest

from shared_kernel.exceptions import InvalidArgumentError
from shared_kernel.filtering import (
    RangeFilter,
    all_of,
    criteria_predicate,
    exact,
    filter_items,
    in_range,
    overlaps,
    read_field,
)


@dataclass
class Record:
    name: str
    count: int
    tags: list[str]
    deleted_at: datetime | None = None


RECORDS = [
    Record("a", 3, ["x"]),
    Record("b", 5, ["y", "z"]),
    Record("c", 10, []),
]


class TestReadField:
    """Tests for read_field()."""

    def test_reads_mappings_and_objects(self):
        assert read_field({"count": 3}, "count") == 3
        assert read_field(RECORDS[0], "count") == 3

    def test_missing_field_is_none(self):
        assert read_field({}, "count") is None
        assert read_field(RECORDS[0], "missing") is None


class TestRangePredicate:
    """Tests for in_range()."""

    def test_gte_keeps_relative_order(self):
        matched = filter_items(RECORDS, in_range("count", RangeFilter(gte=5)))
        assert [r.count for r in matched] == [5, 10]

    def test_gt_and_lt_combine(self):
        matched = filter_items(RECORDS, in_range("count", RangeFilter(gt=3, lt=10)))
        assert [r.count for r in matched] == [5]

    def test_lte(self):
        matched = filter_items(RECORDS, in_range("count", RangeFilter(lte=5)))
        assert [r.count for r in matched] == [3, 5]

    def test_eq_wins_over_other_bounds(self):
        bounds = RangeFilter(eq=3, gt=100)
        matched = filter_items(RECORDS, in_range("count", bounds))
        assert [r.count for r in matched] == [3]

    def test_eq_none_matches_null_fields(self):
        stamped = Record("d", 1, [], deleted_at=datetime.now(UTC))
        records = [*RECORDS, stamped]

        matched = filter_items(records, in_range("deleted_at", RangeFilter(eq=None)))
        assert stamped not in matched
        assert len(matched) == 3

    def test_null_never_satisfies_an_ordering_bound(self):
        since = datetime(2020, 1, 1, tzinfo=UTC)
        matched = filter_items(RECORDS, in_range("deleted_at", RangeFilter(gte=since)))
        assert matched == []

    def test_empty_range_matches_everything(self):
        assert filter_items(RECORDS, in_range("count", RangeFilter())) == RECORDS

    def test_rejects_two_lower_bounds(self):
        with pytest.raises(InvalidArgumentError):
            RangeFilter(gt=1, gte=2)

    def test_rejects_two_upper_bounds(self):
        with pytest.raises(InvalidArgumentError):
            RangeFilter(lt=1, lte=2)

    @pytest.mark.parametrize("bound", ["eq", "gt", "gte", "lt", "lte"])
    def test_rejects_naive_datetime_bounds(self, bound):
        with pytest.raises(InvalidArgumentError) as exc_info:
            RangeFilter(**{bound: datetime(2020, 1, 1)})

        assert exc_info.value.argument == bound

    def test_aware_datetime_bounds_compare_with_stored_timestamps(self):
        stored = {"created_at": datetime(2021, 6, 1, tzinfo=UTC)}

        cutoff = datetime(2020, 1, 1, tzinfo=UTC)
        after = in_range("created_at", RangeFilter(gte=cutoff))
        before = in_range("created_at", RangeFilter(lt=cutoff))

        assert after(stored) is True
        assert before(stored) is False


class TestOverlapPredicate:
    """Tests for overlaps()."""

    def test_matches_any_common_element(self):
        matched = filter_items(RECORDS, overlaps("tags", {"z", "q"}))
        assert [r.name for r in matched] == ["b"]

    def test_uses_whole_elements_not_substrings(self):
        records = [Record("long", 0, ["abc"])]
        assert filter_items(records, overlaps("tags", ["ab"])) == []

    def test_empty_filter_set_matches_nothing(self):
        assert filter_items(RECORDS, overlaps("tags", [])) == []

    def test_missing_array_matches_nothing(self):
        assert filter_items([{"tags": None}], overlaps("tags", ["x"])) == []


class TestComposition:
    """Tests for all_of() and criteria_predicate()."""

    def test_all_of_is_a_logical_and(self):
        predicate = all_of([exact("name", "b"), in_range("count", RangeFilter(gte=5))])
        assert [r.name for r in filter_items(RECORDS, predicate)] == ["b"]

    def test_all_of_without_parts_matches_everything(self):
        assert filter_items(RECORDS, all_of([])) == RECORDS

    def test_criteria_predicate_skips_unset_criteria(self):
        predicate = criteria_predicate(
            exact_fields={"name": None},
            ranges={"count": None},
            overlap_fields={"tags": None},
        )
        assert filter_items(RECORDS, predicate) == RECORDS

    def test_criteria_predicate_narrows_per_field(self):
        predicate = criteria_predicate(
            exact_fields={"name": "b"},
            ranges={"count": RangeFilter(lt=5)},
        )
        assert filter_items(RECORDS, predicate) == []

    def test_exact_false_is_a_real_criterion(self):
        docs = [{"deleted": False}, {"deleted": True}]
        predicate = criteria_predicate(exact_fields={"deleted": False})
        assert filter_items(docs, predicate) == [{"deleted": False}]
