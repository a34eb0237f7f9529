from schemas.grading import SubjectAverage
from services.grading.aggregator import student_overall

MATH, FRENCH = 1, 2


def average(subject_id, value, coefficient_total=1):
    return SubjectAverage(
        student_id=7, subject_id=subject_id, period_id=3,
        average=value, coefficient_total=coefficient_total, entry_count=1,
    )


def test_overall_with_equal_subject_weights():
    averages = {MATH: average(MATH, 14.0, 3), FRENCH: average(FRENCH, 16.0, 1)}
    overall = student_overall(averages, {MATH: 1.0, FRENCH: 1.0})

    assert overall.average == 15.0
    assert overall.subject_count == 2
    assert overall.student_id == 7
    assert overall.period_id == 3


def test_overall_with_subject_weights():
    averages = {MATH: average(MATH, 14.0), FRENCH: average(FRENCH, 16.0)}
    overall = student_overall(averages, {MATH: 3.0, FRENCH: 1.0})
    assert overall.average == 14.5


def test_overall_with_coefficient_total_policy():
    averages = {MATH: average(MATH, 14.0, 3), FRENCH: average(FRENCH, 16.0, 1)}
    overall = student_overall(averages, {}, policy="coefficient_total")
    # (14*3 + 16*1) / 4
    assert overall.average == 14.5


def test_missing_subject_weight_defaults_to_one():
    averages = {MATH: average(MATH, 12.0), FRENCH: average(FRENCH, 18.0)}
    assert student_overall(averages, {}).average == 15.0


def test_zero_weight_subject_is_excluded():
    averages = {MATH: average(MATH, 14.0), FRENCH: average(FRENCH, 4.0)}
    overall = student_overall(averages, {MATH: 1.0, FRENCH: 0.0})
    assert overall.average == 14.0
    assert overall.subject_count == 1


def test_no_subjects_gives_no_overall():
    assert student_overall({}, {MATH: 1.0}) is None


def test_overall_is_rounded():
    averages = {MATH: average(MATH, 13.0), FRENCH: average(FRENCH, 14.0)}
    overall = student_overall(averages, {MATH: 2.0, FRENCH: 1.0}, precision=2)
    assert overall.average == 13.33
