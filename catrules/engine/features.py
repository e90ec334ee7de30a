"""Lexical feature extraction for content categorization."""

import math
import re
from collections import Counter

from catrules.core.logging import get_logger
from catrules.engine.lexicon import (
    ADJECTIVE_SUFFIXES,
    ADVERBS,
    CLOSED_CLASS_WORDS,
    CONTENT_TYPE_PHRASES,
    ENGLISH_FUNCTION_WORDS,
    INDONESIAN_FUNCTION_WORDS,
    NEGATIVE_WORDS,
    POSITIVE_WORDS,
    STOPWORDS,
    VERB_SUFFIXES,
)
from catrules.models.features import ContentType, FeatureSet, Language, Sentiment

logger = get_logger(__name__)

WORDS_PER_MINUTE = 200
MAX_KEYWORDS = 20
MAX_TOPICS = 5

_TOKEN_RE = re.compile(r"[^\W\d_]+(?:['’-][^\W\d_]+)*")
_WORD_RE = re.compile(r"\w+")
_LETTERS_RE = re.compile(r"[^\W\d_]+")


class FeatureExtractor:
    """Turns a title and body into a FeatureSet.

    All methods are pure functions of their input.
    """

    def extract(self, title: str, body: str) -> FeatureSet:
        """Extract the full feature set of one content item.

        Args:
            title: Content title
            body: Content body text

        Returns:
            Extracted features
        """
        body_text = body or ""
        word_count = self.count_words(body_text)

        return FeatureSet(
            title_keywords=self.extract_keywords(title),
            content_keywords=self.extract_keywords(body),
            content_type=self.detect_content_type(title or "", body_text),
            reading_time=math.ceil(word_count / WORDS_PER_MINUTE),
            word_count=word_count,
            sentiment=self.analyze_sentiment(body_text),
            language=self.detect_language(body_text),
            topics=self.extract_topics(body_text),
        )

    def extract_keywords(self, text: str) -> list[str]:
        """Extract up to 20 lowercase keywords: nouns, then verbs, then adjectives.

        Never raises; a failure degrades to an empty list.
        """
        try:
            tagged = self.tag_words(text)
            words = [*tagged["noun"], *tagged["verb"], *tagged["adjective"]]

            keywords: list[str] = []
            seen: set[str] = set()
            for word in words:
                if len(word) <= 2:
                    continue
                lowered = word.lower()
                if lowered in STOPWORDS or lowered in seen:
                    continue
                seen.add(lowered)
                keywords.append(lowered)
            return keywords[:MAX_KEYWORDS]
        except Exception as e:
            logger.warning("Keyword extraction degraded", error=str(e), error_type=type(e).__name__)
            return []

    @staticmethod
    def tag_words(text: str) -> dict[str, list[str]]:
        """Group open-class words by a suffix-based part-of-speech guess.

        Closed-class words, listed adverbs and numbers are dropped.
        """
        tagged: dict[str, list[str]] = {"noun": [], "verb": [], "adjective": []}
        for token in _TOKEN_RE.findall(text):
            lowered = token.lower()
            if lowered in CLOSED_CLASS_WORDS:
                continue
            if lowered in ADVERBS:
                continue
            if _has_suffix(lowered, ADJECTIVE_SUFFIXES):
                tagged["adjective"].append(token)
            elif _has_suffix(lowered, VERB_SUFFIXES):
                tagged["verb"].append(token)
            else:
                tagged["noun"].append(token)
        return tagged

    @staticmethod
    def detect_content_type(title: str, body: str) -> ContentType:
        """Detect content type; the first matching group wins."""
        text = f"{title} {body}".lower()
        for label, phrases in CONTENT_TYPE_PHRASES:
            if any(phrase in text for phrase in phrases):
                return ContentType(label)
        return ContentType.ARTICLE

    @staticmethod
    def count_words(text: str) -> int:
        return len(text.split())

    @staticmethod
    def analyze_sentiment(text: str) -> Sentiment:
        words = _WORD_RE.findall(text.lower())
        positive = sum(1 for word in words if word in POSITIVE_WORDS)
        negative = sum(1 for word in words if word in NEGATIVE_WORDS)

        if positive > negative:
            return Sentiment.POSITIVE
        if negative > positive:
            return Sentiment.NEGATIVE
        return Sentiment.NEUTRAL

    @staticmethod
    def detect_language(text: str) -> Language:
        words = _WORD_RE.findall(text.lower())
        english = sum(1 for word in words if word in ENGLISH_FUNCTION_WORDS)
        indonesian = sum(1 for word in words if word in INDONESIAN_FUNCTION_WORDS)
        return Language.INDONESIAN if indonesian > english else Language.ENGLISH

    @staticmethod
    def extract_topics(text: str) -> list[str]:
        """Top five content words by frequency, ties in order of first occurrence."""
        frequencies = Counter(
            word
            for word in _LETTERS_RE.findall(text.lower())
            if len(word) > 3 and word not in STOPWORDS
        )
        # most_common keeps insertion order for equal counts
        return [word for word, _ in frequencies.most_common(MAX_TOPICS)]


def _has_suffix(word: str, suffixes: tuple[str, ...]) -> bool:
    return any(word.endswith(suffix) and len(word) > len(suffix) + 2 for suffix in suffixes)


# Singleton instance
_extractor: FeatureExtractor | None = None


def get_feature_extractor() -> FeatureExtractor:
    """Get feature extractor singleton."""
    global _extractor
    if _extractor is None:
        _extractor = FeatureExtractor()
    return _extractor


def extract_features(title: str, body: str) -> FeatureSet:
    """Extract features using the singleton extractor."""
    return get_feature_extractor().extract(title, body)
