"""Weighted multi-clause rule evaluation."""

from catrules.core.logging import get_logger
from catrules.models.execution import ExecutionResult, MatchDetails
from catrules.models.features import FeatureSet
from catrules.models.rule import (
    ContentTypeClause,
    KeywordsClause,
    ReadingTimeClause,
    Rule,
    TitlePatternsClause,
    WordCountClause,
)

logger = get_logger(__name__)

# Weight of each clause relative to the rule's base confidence
CLAUSE_WEIGHTS: dict[str, float] = {
    "keywords": 1.0,
    "title_patterns": 0.8,
    "content_type": 0.6,
    "reading_time": 0.4,
    "word_count": 0.3,
}


class RuleEvaluator:
    """Scores a rule's condition clauses against a feature set.

    Every matching clause contributes ``confidence * weight``; the final
    confidence is the average over contributing clauses, so many weak
    clauses do not outscore one strong clause.
    """

    def evaluate(self, rule: Rule, features: FeatureSet) -> ExecutionResult:
        """Evaluate a rule against extracted features.

        Args:
            rule: Rule to evaluate
            features: Features of the content item

        Returns:
            Execution result without content id or timing
        """
        base = rule.conditions.confidence
        details = MatchDetails()
        matched_conditions: list[str] = []
        total = 0.0

        for clause in rule.conditions.clauses:
            if not self._match_clause(clause, features, details):
                continue
            matched_conditions.append(clause.type)
            total += base * CLAUSE_WEIGHTS[clause.type]

        confidence = min(total / len(matched_conditions), 1.0) if matched_conditions else 0.0

        logger.debug(
            "Rule evaluated",
            rule_id=rule.rule_id,
            matched_conditions=matched_conditions,
            confidence=confidence,
        )

        return ExecutionResult(
            rule_id=rule.rule_id,
            matched=bool(matched_conditions),
            confidence=confidence,
            matched_conditions=matched_conditions,
            details=details,
        )

    def _match_clause(self, clause: object, features: FeatureSet, details: MatchDetails) -> bool:
        if isinstance(clause, KeywordsClause):
            return self._match_keywords(clause, features, details)
        if isinstance(clause, TitlePatternsClause):
            return self._match_title_patterns(clause, features, details)
        if isinstance(clause, ContentTypeClause):
            if features.content_type in clause.content_types:
                details.content_type_match = True
                return True
            return False
        if isinstance(clause, ReadingTimeClause):
            if clause.contains(features.reading_time):
                details.reading_time_match = True
                return True
            return False
        if isinstance(clause, WordCountClause):
            if clause.contains(features.word_count):
                details.word_count_match = True
                return True
            return False
        raise TypeError(f"Unsupported condition clause: {type(clause).__name__}")

    @staticmethod
    def _match_keywords(clause: KeywordsClause, features: FeatureSet, details: MatchDetails) -> bool:
        extracted = [keyword.lower() for keyword in features.all_keywords]
        matches = [
            keyword
            for keyword in clause.keywords
            if any(keyword.lower() in candidate for candidate in extracted)
        ]
        if len(matches) >= clause.minimum_matches:
            details.keyword_matches = matches
            return True
        return False

    @staticmethod
    def _match_title_patterns(
        clause: TitlePatternsClause,
        features: FeatureSet,
        details: MatchDetails,
    ) -> bool:
        title_keywords = [keyword.lower() for keyword in features.title_keywords]
        matches = [
            pattern
            for pattern in clause.patterns
            if any(pattern.lower() in keyword for keyword in title_keywords)
        ]
        if matches:
            details.pattern_matches = matches
            return True
        return False


# Singleton instance
_evaluator: RuleEvaluator | None = None


def get_rule_evaluator() -> RuleEvaluator:
    """Get rule evaluator singleton."""
    global _evaluator
    if _evaluator is None:
        _evaluator = RuleEvaluator()
    return _evaluator
