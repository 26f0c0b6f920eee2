"""Tests for the lexical rule classifier."""

import pytest
from safeguard.classify.lexical import (
    HARMFUL_GROUPS,
    SHORT_TEXT_REPORT,
    SUSPICIOUS_GROUPS,
    classify_lexical,
    matched_groups,
)
from safeguard.content.models import Tier


class TestHarmfulGroups:
    def test_insult_is_harmful(self):
        result = classify_lexical("you are an idiot")
        assert result.tier == Tier.HARMFUL
        assert result.confidence == 0.85
        assert "insults" in result.report

    def test_report_names_first_matching_category(self):
        result = classify_lexical("they want to attack and it is disgusting")
        assert "violence or threats" in result.report

    def test_case_insensitive(self):
        assert classify_lexical("I will KILL it").tier == Tier.HARMFUL

    @pytest.mark.parametrize(
        ("text", "category"),
        [
            ("que mierda es esto", "European languages"),
            ("tu chutiya hai kya", "South Asian languages"),
            ("这是傻逼的东西", "East Asian languages"),
            ("send nudes now please", "sexual solicitation"),
        ],
    )
    def test_multilingual_and_phrase_groups(self, text: str, category: str):
        result = classify_lexical(text)
        assert result.tier == Tier.HARMFUL
        assert category in result.report

    def test_word_boundaries_respected(self):
        # "ass" inside "class"/"assignment", "kill" inside "skill"
        result = classify_lexical("the class assignment needs skill")
        assert result.tier == Tier.SAFE


class TestSuspiciousGroups:
    def test_worry_is_suspicious(self):
        result = classify_lexical("I am so worried about tomorrow")
        assert result.tier == Tier.SUSPICIOUS
        assert result.confidence == 0.65
        assert "fear or anxiety" in result.report

    def test_romantic_solicitation(self):
        result = classify_lexical("would you date me sometime")
        assert result.tier == Tier.SUSPICIOUS
        assert "romantic solicitation" in result.report

    def test_harmful_beats_suspicious(self):
        result = classify_lexical("damn I am so angry")
        assert result.tier == Tier.HARMFUL


class TestFallbackPolicy:
    def test_short_text(self):
        result = classify_lexical("hi")
        assert result.tier == Tier.SUSPICIOUS
        assert result.confidence == 0.5
        assert result.report == SHORT_TEXT_REPORT
        assert result.source == "length"

    def test_empty_string_is_total(self):
        result = classify_lexical("")
        assert result.tier == Tier.SUSPICIOUS
        assert result.confidence == 0.5

    def test_plain_text_is_safe(self):
        result = classify_lexical("hello, nice weather today")
        assert result.tier == Tier.SAFE
        assert result.confidence == 0.9
        assert result.source == "default"

    def test_deterministic(self):
        assert classify_lexical("you are an idiot") == classify_lexical("you are an idiot")


class TestMatchedGroups:
    def test_lists_every_hit_in_table_order(self):
        groups = matched_groups("damn I am so angry")
        categories = [g.category for g in groups]
        assert categories == ["profanity", "frustration"]

    def test_no_hits(self):
        assert matched_groups("hello, nice weather today") == []

    def test_tables_are_tiered(self):
        assert all(g.tier == Tier.HARMFUL for g in HARMFUL_GROUPS)
        assert all(g.tier == Tier.SUSPICIOUS for g in SUSPICIOUS_GROUPS)
