"""Tests for weighted rule evaluation."""

import pytest

from catrules.engine.evaluator import RuleEvaluator
from catrules.engine.features import extract_features
from catrules.models.features import ContentType, FeatureSet

from conftest import BREAD_BODY, make_rule


@pytest.fixture
def evaluator() -> RuleEvaluator:
    return RuleEvaluator()


@pytest.fixture
def bread_features() -> FeatureSet:
    return FeatureSet(
        title_keywords=["bake", "bread"],
        content_keywords=["flour", "water", "yeast", "oven"],
        content_type=ContentType.TUTORIAL,
        reading_time=2,
        word_count=250,
    )


def test_empty_condition_set_never_matches(evaluator: RuleEvaluator, bread_features: FeatureSet) -> None:
    rule = make_rule("rule_empty", {"confidence": 1.0, "clauses": []})

    result = evaluator.evaluate(rule, bread_features)

    assert result.matched is False
    assert result.confidence == 0.0
    assert result.matched_conditions == []


def test_single_keyword_clause_scores_base_confidence(evaluator: RuleEvaluator) -> None:
    features = extract_features("How to Bake Bread", BREAD_BODY)
    rule = make_rule("rule_bread", {"keywords": ["bread", "oven"], "minimumMatches": 1, "confidence": 0.9})

    result = evaluator.evaluate(rule, features)

    assert result.matched is True
    assert result.matched_conditions == ["keywords"]
    assert result.confidence == pytest.approx(0.9)
    assert result.details.keyword_matches == ["bread"]


def test_keyword_rule_matches_title_word_ending_in_ly(evaluator: RuleEvaluator) -> None:
    features = extract_features("Family Dinner Recipes", "Simple meals for busy weeknights.")
    rule = make_rule("rule_family", {"keywords": ["family"], "confidence": 0.9})

    result = evaluator.evaluate(rule, features)

    assert result.matched is True
    assert result.confidence == pytest.approx(0.9)
    assert result.details.keyword_matches == ["family"]


def test_confidence_is_average_of_weighted_clauses(evaluator: RuleEvaluator, bread_features: FeatureSet) -> None:
    rule = make_rule(
        "rule_avg",
        {"keywords": ["bread"], "contentType": ["tutorial"], "confidence": 1.0},
    )

    result = evaluator.evaluate(rule, bread_features)

    assert result.matched_conditions == ["keywords", "content_type"]
    assert result.confidence == pytest.approx((1.0 + 0.6) / 2)


def test_weak_clauses_do_not_outscore_strong_clause(evaluator: RuleEvaluator, bread_features: FeatureSet) -> None:
    strong = make_rule("rule_strong", {"keywords": ["bread"], "confidence": 0.9})
    weak = make_rule(
        "rule_weak",
        {
            "contentType": ["tutorial"],
            "readingTime": {"min": 1},
            "wordCount": {"max": 1000},
            "confidence": 0.9,
        },
    )

    assert evaluator.evaluate(weak, bread_features).confidence < evaluator.evaluate(
        strong, bread_features
    ).confidence


def test_keyword_clause_respects_minimum_matches(evaluator: RuleEvaluator, bread_features: FeatureSet) -> None:
    rule = make_rule(
        "rule_min",
        {"keywords": ["bread", "pasta", "rice"], "minimumMatches": 2, "confidence": 0.9},
    )

    result = evaluator.evaluate(rule, bread_features)

    assert result.matched is False
    assert result.details.keyword_matches is None


def test_keyword_match_is_case_insensitive_substring(evaluator: RuleEvaluator, bread_features: FeatureSet) -> None:
    rule = make_rule("rule_sub", {"keywords": ["BRE", "Yeas"], "minimumMatches": 2, "confidence": 0.5})

    result = evaluator.evaluate(rule, bread_features)

    assert result.matched is True
    assert result.details.keyword_matches == ["BRE", "Yeas"]


def test_title_patterns_only_look_at_title_keywords(evaluator: RuleEvaluator, bread_features: FeatureSet) -> None:
    title_rule = make_rule("rule_title", {"titlePatterns": ["brea"], "confidence": 1.0})
    body_rule = make_rule("rule_body", {"titlePatterns": ["yeast"], "confidence": 1.0})

    title_result = evaluator.evaluate(title_rule, bread_features)

    assert title_result.matched_conditions == ["title_patterns"]
    assert title_result.confidence == pytest.approx(0.8)
    assert title_result.details.pattern_matches == ["brea"]
    assert evaluator.evaluate(body_rule, bread_features).matched is False


def test_ranges_are_inclusive(evaluator: RuleEvaluator, bread_features: FeatureSet) -> None:
    rule = make_rule(
        "rule_range",
        {"readingTime": {"min": 2, "max": 2}, "wordCount": {"min": 250, "max": 250}, "confidence": 1.0},
    )

    result = evaluator.evaluate(rule, bread_features)

    assert result.matched_conditions == ["reading_time", "word_count"]
    assert result.details.reading_time_match is True
    assert result.details.word_count_match is True
    assert result.confidence == pytest.approx((0.4 + 0.3) / 2)


def test_range_outside_bounds_does_not_match(evaluator: RuleEvaluator, bread_features: FeatureSet) -> None:
    rule = make_rule("rule_long", {"wordCount": {"min": 1000}, "confidence": 1.0})

    assert evaluator.evaluate(rule, bread_features).matched is False


def test_content_type_outside_allowed_set(evaluator: RuleEvaluator, bread_features: FeatureSet) -> None:
    rule = make_rule("rule_news", {"contentType": ["news", "review"], "confidence": 1.0})

    assert evaluator.evaluate(rule, bread_features).matched is False


def test_all_clauses_matching_stays_within_unit_interval(
    evaluator: RuleEvaluator,
    bread_features: FeatureSet,
) -> None:
    rule = make_rule(
        "rule_all",
        {
            "clauses": [
                {"type": "word_count", "min": 1},
                {"type": "reading_time", "max": 10},
                {"type": "content_type", "content_types": ["tutorial"]},
                {"type": "title_patterns", "patterns": ["bake"]},
                {"type": "keywords", "keywords": ["flour"]},
            ],
            "confidence": 1.0,
        },
    )

    result = evaluator.evaluate(rule, bread_features)

    assert result.matched_conditions == [
        "keywords",
        "title_patterns",
        "content_type",
        "reading_time",
        "word_count",
    ]
    assert result.confidence == pytest.approx((1.0 + 0.8 + 0.6 + 0.4 + 0.3) / 5)
    assert 0.0 <= result.confidence <= 1.0
