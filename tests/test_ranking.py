from schemas.grading import StudentOverall
from services.grading.ranking import band_for, class_statistics, competition_ranks, distribution, median

BANDS = {"excellent": 16.0, "very_good": 14.0, "good": 12.0, "fair": 10.0, "insufficient": 0.0}


def overalls(*averages):
    return [
        StudentOverall(student_id=i, period_id=1, average=value, subject_count=2)
        for i, value in enumerate(averages, start=1)
    ]


def test_competition_ranking_skips_after_tie():
    ranking = competition_ranks(overalls(18.0, 16.0, 16.0, 14.0))
    assert [r.rank for r in ranking] == [1, 2, 2, 4]


def test_competition_ranking_scenario():
    ranking = competition_ranks(overalls(15.0, 18.0, 15.0))
    by_student = {r.student_id: r.rank for r in ranking}
    assert by_student == {2: 1, 1: 2, 3: 2}


def test_rank_is_one_plus_strictly_higher_count():
    values = [12.0, 17.5, 12.0, 9.0, 17.5, 11.0]
    ranking = competition_ranks(overalls(*values))
    for entry in ranking:
        assert entry.rank == 1 + sum(1 for v in values if v > entry.average)


def test_tie_key_orders_equal_averages():
    order = {1: 2, 2: 0, 3: 1}
    ranking = competition_ranks(overalls(15.0, 15.0, 15.0), tie_key=order.get)
    assert [r.student_id for r in ranking] == [2, 3, 1]
    assert all(r.rank == 1 for r in ranking)


def test_empty_ranking():
    assert competition_ranks([]) == []


def test_band_for_uses_lower_bounds():
    assert band_for(16.0, BANDS) == "excellent"
    assert band_for(15.99, BANDS) == "very_good"
    assert band_for(10.0, BANDS) == "fair"
    assert band_for(3.0, BANDS) == "insufficient"


def test_band_below_every_bound_falls_into_lowest():
    assert band_for(3.0, {"pass": 10.0, "fail": 5.0}) == "fail"


def test_distribution_lists_every_band():
    counts = distribution([18.0, 16.0, 9.0], BANDS)
    assert list(counts) == ["excellent", "very_good", "good", "fair", "insufficient"]
    assert counts == {"excellent": 2, "very_good": 0, "good": 0, "fair": 0, "insufficient": 1}


def test_median():
    assert median([14.0, 18.0, 16.0]) == 16.0
    assert median([10.0, 13.0]) == 11.5


def test_class_statistics():
    stats = class_statistics([18.0, 16.0, 16.0, 14.0], BANDS, pass_mark=15.0)

    assert stats.student_count == 4
    assert stats.mean == 16.0
    assert stats.median == 16.0
    assert stats.highest == 18.0
    assert stats.lowest == 14.0
    assert stats.pass_count == 3
    assert stats.distribution["excellent"] == 3
    assert stats.distribution["very_good"] == 1


def test_class_statistics_without_students():
    assert class_statistics([], BANDS, pass_mark=10.0) is None
