"""Tests for keyword-gated sentiment and tag extraction."""

from brand_monitor.analysis.sentiment import (
    MIXED,
    NEGATIVE,
    NEUTRAL,
    POSITIVE,
    classify,
    extract_tags,
    score_sentiment,
)


class TestScoreSentiment:
    def test_positive(self):
        assert score_sentiment("Acme is great for pricing", "Acme") == POSITIVE

    def test_negative(self):
        assert score_sentiment("acme support is terrible and the app is broken", "Acme") == NEGATIVE

    def test_equal_nonzero_counts_are_mixed(self):
        assert score_sentiment("Acme has a great UI but terrible docs", "acme") == MIXED

    def test_no_sentiment_words_is_neutral(self):
        assert score_sentiment("Has anyone tried Acme yet?", "Acme") == NEUTRAL

    def test_keyword_missing_is_neutral_even_with_strong_words(self):
        assert score_sentiment("This is the best, most amazing thing ever", "Acme") == NEUTRAL
        assert score_sentiment("Worst, awful, horrible", "Acme") == NEUTRAL

    def test_case_insensitive_keyword_gate(self):
        assert score_sentiment("ACME IS AWESOME", "acme") == POSITIVE

    def test_substring_hits_count(self):
        # "greatest" contains "great"
        assert score_sentiment("Acme is the greatest", "Acme") == POSITIVE

    def test_each_word_counts_once(self):
        # one positive word repeated vs two distinct negatives
        assert score_sentiment("Acme good good good, bad and awful", "Acme") == NEGATIVE

    def test_majority_wins(self):
        assert score_sentiment("Acme: love it, best tool, but one bad bug", "Acme") == POSITIVE


class TestExtractTags:
    def test_keyword_always_first_tag(self):
        assert extract_tags("nothing relevant here", "Acme") == ["acme"]

    def test_topics_found(self):
        tags = extract_tags("Acme customer service and pricing were fine", "Acme")
        assert set(tags) == {"acme", "customer service", "pricing"}

    def test_no_duplicates(self):
        tags = extract_tags("pricing pricing PRICING", "pricing")
        assert tags == ["pricing"]


class TestClassify:
    def test_returns_sentiment_and_tags(self):
        result = classify("Acme is great for pricing", "Acme")
        assert result.sentiment == POSITIVE
        assert "acme" in result.tags
        assert "pricing" in result.tags

    def test_tags_extracted_even_without_keyword(self):
        result = classify("The performance is awful", "Acme")
        assert result.sentiment == NEUTRAL
        assert set(result.tags) == {"acme", "performance"}
