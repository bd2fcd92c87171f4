"""Behavioural tests for the scoring engine (no database, no HTTP).

Covers section classification, the weighted/matrix/count analyzers, report
assembly, composite ranking and the error/warning policy.
"""

from __future__ import annotations

import random

import pytest

from assessment.config import ScoringConfig
from assessment.logic.count_analysis import analyze_count_section
from assessment.logic.errors import MissingDefinitionError, UnknownSectionTypeError
from assessment.logic.matrix_analysis import analyze_matrix_pair, pair_matrix_sections
from assessment.logic.report_builder import UNKNOWN_OPTION, build_report, composite_ranking
from assessment.logic.scoring import round_half_up, score_band
from assessment.logic.section_classifier import classify_section
from assessment.logic.weighted_analysis import analyze_weighted_section
from assessment.models.section_type import SectionType

from factories import definition, pick, question, response, section


# -----------------------------
# Classifier
# -----------------------------

def test_classifier_accepts_declared_types_case_insensitively():
    assert classify_section(section("s", "weighted", [question("q")])) == SectionType.WEIGHTED
    assert classify_section(section("s", " Matrix ", [question("q")])) == SectionType.MATRIX
    assert classify_section(section("s", "COUNT", [question("q")])) == SectionType.COUNT


def test_classifier_rejects_missing_and_unknown_types():
    with pytest.raises(UnknownSectionTypeError) as missing:
        classify_section(section("s1", None, [question("q")]), 0)
    assert missing.value.section_id == "s1"
    with pytest.raises(UnknownSectionTypeError):
        classify_section(section("s2", "radar", [question("q")]), 0)


def test_classifier_legacy_positional_fallback_only_when_enabled():
    settings = ScoringConfig(legacy_positional_types=True, legacy_weighted_sections=1, legacy_matrix_sections=2)
    untyped = section("s", None, [question("q")])
    assert classify_section(untyped, 0, settings=settings) == SectionType.WEIGHTED
    assert classify_section(untyped, 1, settings=settings) == SectionType.MATRIX
    assert classify_section(untyped, 2, settings=settings) == SectionType.MATRIX
    assert classify_section(untyped, 3, settings=settings) == SectionType.COUNT
    # Explicit types always win over position
    assert classify_section(section("s", "count", [question("q")]), 0, settings=settings) == SectionType.COUNT
    # An unknown declared type is never coerced, even in legacy mode
    with pytest.raises(UnknownSectionTypeError):
        classify_section(section("s", "radar", [question("q")]), 0, settings=settings)


# -----------------------------
# Weighted analyzer
# -----------------------------

def test_weighted_section_skips_unanswered_questions():
    q1, q2 = question("q1"), question("q2")
    sec = section("area", "weighted", [q1, q2], weight=0.4)

    score = analyze_weighted_section(sec, {"q1": pick(q1, 3)})

    assert score.achieved_score == 3
    assert score.average_score == 3.0
    assert score.weighted_average_score == 1.2
    assert score.answered_count == 1
    assert score.question_count == 2
    assert score.max_possible_score == 8
    assert score.highest_option_score == 4
    assert score.score_band == "yellow"


def test_weighted_section_with_no_answers_scores_zero():
    sec = section("area", "weighted", [question("q1"), question("q2")], weight=0.7)

    score = analyze_weighted_section(sec, {})

    assert score.achieved_score == 0
    assert score.average_score == 0
    assert score.weighted_average_score == 0
    assert score.answered_count == 0
    assert score.score_band == "red"


def test_weighted_average_rounds_half_up():
    qs = [question(f"q{i}") for i in range(8)]
    answers = {q.id: pick(q, 1) for q in qs[:7]}
    answers[qs[7].id] = pick(qs[7], 2)
    sec = section("area", "weighted", qs, weight=1)

    score = analyze_weighted_section(sec, answers)

    # 9 / 8 = 1.125 -> 1.13 (half-up, not banker's rounding)
    assert score.average_score == 1.13
    assert score.weighted_average_score == 1.13


def test_weighted_score_uses_unrounded_average():
    qs = [question("q1"), question("q2"), question("q3")]
    answers = {"q1": pick(qs[0], 1), "q2": pick(qs[1], 1), "q3": pick(qs[2], 2)}
    sec = section("area", "weighted", qs, weight=3)

    score = analyze_weighted_section(sec, answers)

    assert score.average_score == 1.33
    # (4 / 3) * 3 = 4.00; rounding the average first would give 3.99
    assert score.weighted_average_score == 4.0


def test_weighted_product_rounds_half_up():
    q1, q2 = question("q1"), question("q2")
    sec = section("area", "weighted", [q1, q2], weight=0.05)

    score = analyze_weighted_section(sec, {"q1": pick(q1, 2), "q2": pick(q2, 3)})

    # 2.5 * 0.05 = 0.125 -> 0.13
    assert score.weighted_average_score == 0.13


def test_weighted_fractional_scores_and_decimal_places_setting():
    q1 = question("q1", scores=(0.5, 1.25, 2.75))
    sec = section("area", "weighted", [q1], weight=0.333)

    score = analyze_weighted_section(sec, {"q1": pick(q1, 2.75)}, settings=ScoringConfig(decimal_places=3))

    assert score.achieved_score == 2.75
    assert score.average_score == 2.75
    assert score.weighted_average_score == 0.916  # 0.91575 -> 0.916


def test_round_half_up_and_score_bands():
    assert str(round_half_up(2.675)) == "2.68"
    assert str(round_half_up(0.005)) == "0.01"
    assert str(round_half_up(2.5, 0)) == "3"
    assert score_band(1.5) == "red"
    assert score_band(1.51) == "orange"
    assert score_band(2.5) == "orange"
    assert score_band(3.5) == "yellow"
    assert score_band(3.51) == "green"


# -----------------------------
# Matrix analyzer
# -----------------------------

def test_matrix_pair_uses_axis_tags():
    qy, qx = question("qy"), question("qx")
    y_sec = section("ambition", "matrix", [qy], matrix_axis="y", name="Ambition")
    x_sec = section("maturity", "matrix", [qx], matrix_axis="x", name="Maturity")

    analysis = analyze_matrix_pair([y_sec, x_sec], {"qx": pick(qx, 4), "qy": pick(qy, 2)})

    assert analysis is not None
    assert (analysis.point.x, analysis.point.y) == (4, 2)
    assert analysis.x_axis_label == "Maturity"
    assert analysis.y_axis_label == "Ambition"
    assert analysis.x_section_id == "maturity"
    assert analysis.y_section_id == "ambition"


def test_matrix_pair_falls_back_to_definition_order():
    qa, qb = question("qa"), question("qb")
    first = section("first", "matrix", [qa])
    second = section("second", "matrix", [qb])

    analysis = analyze_matrix_pair([first, second], {"qa": pick(qa, 1), "qb": pick(qb, 3)})

    assert analysis is not None
    assert analysis.x_section_id == "first"
    assert (analysis.point.x, analysis.point.y) == (1, 3)


def test_matrix_pair_with_duplicate_x_tags_prefers_untagged_partner():
    a = section("a", "matrix", [question("qa")], matrix_axis="x")
    b = section("b", "matrix", [question("qb")], matrix_axis="x")
    c = section("c", "matrix", [question("qc")])

    x_sec, y_sec = pair_matrix_sections([a, b, c])

    assert (x_sec.id, y_sec.id) == ("a", "c")


def test_matrix_single_x_tag_keeps_its_axis():
    qu, qx = question("qu"), question("qx")
    untagged = section("untagged", "matrix", [qu])
    tagged_x = section("tagged-x", "matrix", [qx], matrix_axis="x")

    analysis = analyze_matrix_pair([untagged, tagged_x], {"qu": pick(qu, 1), "qx": pick(qx, 4)})

    assert (analysis.x_section_id, analysis.y_section_id) == ("tagged-x", "untagged")
    assert (analysis.point.x, analysis.point.y) == (4, 1)


def test_matrix_single_y_tag_keeps_its_axis():
    tagged_y = section("tagged-y", "matrix", [question("qy")], matrix_axis="y")
    untagged = section("untagged", "matrix", [question("qu")])

    x_sec, y_sec = pair_matrix_sections([tagged_y, untagged])

    assert (x_sec.id, y_sec.id) == ("untagged", "tagged-y")


def test_matrix_lone_tagged_section_has_no_partner():
    assert pair_matrix_sections([section("x", "matrix", [question("qx")], matrix_axis="x")]) is None


@pytest.mark.parametrize(
    "answers",
    [
        {},
        {"qx": "d"},
        {"qy": "b"},
        {"qx": "zz", "qy": "b"},
    ],
)
def test_matrix_absent_when_an_axis_is_unanswered(answers):
    x_sec = section("x", "matrix", [question("qx")], matrix_axis="x")
    y_sec = section("y", "matrix", [question("qy")], matrix_axis="y")

    assert analyze_matrix_pair([x_sec, y_sec], answers) is None


def test_matrix_absent_with_fewer_than_two_sections():
    qx = question("qx")
    assert analyze_matrix_pair([], {}) is None
    assert analyze_matrix_pair([section("x", "matrix", [qx], matrix_axis="x")], {"qx": "a"}) is None


# -----------------------------
# Count analyzer
# -----------------------------

def test_count_section_reports_all_ties():
    qs = [question(f"h{i}") for i in range(4)]
    answers = {
        "h0": pick(qs[0], 3),
        "h1": pick(qs[1], 3),
        "h2": pick(qs[2], 4),
        "h3": pick(qs[3], 4),
    }

    analysis = analyze_count_section(section("habits", "count", qs), answers)

    assert analysis.score_counts == {3: 2, 4: 2}
    assert analysis.most_frequent_scores == [3, 4]


def test_count_section_single_most_frequent_and_skips_unanswered():
    qs = [question(f"h{i}") for i in range(4)]
    answers = {"h0": pick(qs[0], 1), "h1": pick(qs[1], 2), "h2": pick(qs[2], 2)}

    analysis = analyze_count_section(section("habits", "count", qs), answers)

    assert analysis.score_counts == {1: 1, 2: 2}
    assert analysis.most_frequent_scores == [2]


def test_count_section_without_answers_is_empty():
    analysis = analyze_count_section(section("habits", "count", [question("h0")]), {})

    assert analysis.score_counts == {}
    assert analysis.most_frequent_scores == []


# -----------------------------
# Report assembly and composite ranking
# -----------------------------

def _full_definition():
    s1 = section("s1", "weighted", [question("a1"), question("a2")], weight=0.4)
    s2 = section("s2", "weighted", [question("b1")], weight=0.6)
    s3 = section("s3", "weighted", [question("c1")], weight=0.0)
    mx = section("mx", "matrix", [question("m1")], matrix_axis="x")
    my = section("my", "matrix", [question("m2")], matrix_axis="y")
    ct = section("ct", "count", [question("k1"), question("k2")])
    return [s1, s2, s3, mx, my, ct]


_FULL_ANSWERS = {"a1": "c", "a2": "d", "b1": "b", "c1": "d", "m1": "d", "m2": "b", "k1": "c", "k2": "c"}


def test_build_report_produces_all_views():
    report = build_report(definition(_full_definition()), response(_FULL_ANSWERS))

    assert [s.section_id for s in report.section_scores] == ["s1", "s2", "s3"]
    assert report.section_scores[0].weighted_average_score == 1.4  # 3.5 * 0.4
    assert report.section_scores[1].weighted_average_score == 1.2  # 2 * 0.6
    assert report.section_scores[2].weighted_average_score == 0.0
    assert report.matrix_analysis is not None
    assert (report.matrix_analysis.point.x, report.matrix_analysis.point.y) == (4, 2)
    assert [c.section_id for c in report.count_analyses] == ["ct"]
    assert report.count_analyses[0].most_frequent_scores == [3]
    # matrix (4, 2) and count (3, 3) never contribute
    assert report.composite_ranking == 2.6
    assert report.warnings == []


def test_unanswered_weighted_section_still_listed():
    report = build_report(definition(_full_definition()), response({"a1": "a"}))

    ids = [s.section_id for s in report.section_scores]
    assert ids == ["s1", "s2", "s3"]
    assert report.section_scores[1].average_score == 0
    assert report.matrix_analysis is None


def test_composite_invariant_under_section_permutation():
    sections = _full_definition()
    baseline = build_report(definition(sections), response(_FULL_ANSWERS)).composite_ranking
    rng = random.Random(7)
    for _ in range(10):
        shuffled = list(sections)
        rng.shuffle(shuffled)
        assert build_report(definition(shuffled), response(_FULL_ANSWERS)).composite_ranking == baseline


def test_zero_weight_section_does_not_change_composite():
    sections = _full_definition()
    before = build_report(definition(sections), response(_FULL_ANSWERS)).composite_ranking
    extra = section("zero", "weighted", [question("z1")], weight=0)
    after = build_report(definition(sections + [extra]), response({**_FULL_ANSWERS, "z1": "d"})).composite_ranking
    assert after == before


def test_composite_ranking_sums_rounded_section_values():
    s1 = section("s1", "weighted", [question("q1")], weight=0.333)
    s2 = section("s2", "weighted", [question("q2")], weight=0.333)
    report = build_report(definition([s1, s2]), response({"q1": "a", "q2": "a"}))

    # each section rounds 0.333 -> 0.33; the headline is the sum of what is shown
    assert [s.weighted_average_score for s in report.section_scores] == [0.33, 0.33]
    assert report.composite_ranking == 0.66
    assert composite_ranking(report.section_scores) == 0.66


def test_build_report_is_deterministic():
    d = definition(_full_definition())
    r = response(_FULL_ANSWERS)

    first = build_report(d, r)
    second = build_report(d, r)

    assert first == second
    assert first.model_dump_json() == second.model_dump_json()


def test_build_report_does_not_mutate_inputs():
    d = definition(_full_definition())
    r = response(dict(_FULL_ANSWERS))
    before = (d.model_dump_json(), r.model_dump_json())

    build_report(d, r)

    assert (d.model_dump_json(), r.model_dump_json()) == before


def test_missing_definition_raises():
    with pytest.raises(MissingDefinitionError) as exc:
        build_report(None, response({}, vid="gone"))
    assert exc.value.questionnaire_version_id == "gone"
    assert exc.value.code == "REPORT_DEFINITION_MISSING"


def test_definition_for_another_version_raises():
    with pytest.raises(MissingDefinitionError):
        build_report(definition(_full_definition(), vid="v2"), response(_FULL_ANSWERS, vid="v1"))


def test_unknown_section_type_is_isolated_as_warning():
    sections = _full_definition()
    bad = section("bad", "radar", [question("x1")], weight=5)
    untyped = section("untyped", None, [question("x2")], weight=5)
    answers = {**_FULL_ANSWERS, "x1": "d", "x2": "d"}

    report = build_report(definition(sections + [bad, untyped]), response(answers))

    assert report.composite_ranking == 2.6
    assert "bad" not in [s.section_id for s in report.section_scores]
    assert [(w.section_id, w.code) for w in report.warnings] == [
        ("bad", "UNKNOWN_SECTION_TYPE"),
        ("untyped", "UNKNOWN_SECTION_TYPE"),
    ]


def test_unknown_option_is_skipped_with_warning():
    q1, q2 = question("q1"), question("q2")
    sec = section("s1", "weighted", [q1, q2], weight=1)

    report = build_report(definition([sec]), response({"q1": pick(q1, 4), "q2": "nope"}))

    assert report.section_scores[0].answered_count == 1
    assert report.section_scores[0].average_score == 4.0
    assert len(report.warnings) == 1
    assert report.warnings[0].code == UNKNOWN_OPTION
    assert report.warnings[0].section_id == "s1"


def test_legacy_positional_types_in_report():
    settings = ScoringConfig(legacy_positional_types=True, legacy_weighted_sections=1, legacy_matrix_sections=2)
    sections = [
        section("w", None, [question("w1")], weight=2),
        section("mx", None, [question("m1")]),
        section("my", None, [question("m2")]),
        section("c", None, [question("c1")]),
    ]
    answers = {"w1": "b", "m1": "c", "m2": "a", "c1": "d"}

    report = build_report(definition(sections), response(answers), settings=settings)

    assert report.composite_ranking == 4.0
    assert (report.matrix_analysis.point.x, report.matrix_analysis.point.y) == (3, 1)
    assert report.count_analyses[0].score_counts == {4: 1}
    assert report.warnings == []
