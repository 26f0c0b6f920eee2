"""Tests for contextual override rules."""

import pytest
from safeguard.classify.contextual import (
    CONTEXT_RULES,
    RULES_BY_NAME,
    ContextVerdict,
    all_of,
    any_of,
    evaluate_context,
)
from safeguard.content.models import Tier


class TestRuleTable:
    def test_fixed_priority_order(self):
        assert [r.name for r in CONTEXT_RULES] == [
            "threat",
            "group_hate",
            "self_harm",
            "sexual_advance",
            "harmful_instructions",
            "sexualized_attention",
            "directed_insult",
            "persistent_advances",
            "distress",
            "indirect_threat",
            "sensitive_topic",
            "appearance_comment",
        ]

    def test_harmful_rules_precede_suspicious(self):
        tiers = [r.tier for r in CONTEXT_RULES]
        assert tiers == sorted(tiers, key=lambda t: t != Tier.HARMFUL)

    def test_lookup_by_name(self):
        assert RULES_BY_NAME["threat"].label == "threats of violence or harm"


class TestHarmfulRules:
    @pytest.mark.parametrize(
        ("text", "rule"),
        [
            ("I am going to kill you", "threat"),
            ("i will really hurt him", "threat"),
            ("tujhe maar dunga", "threat"),
            ("All immigrants should die", "group_hate"),
            ("sab log ko marna chahiye", "group_hate"),
            ("I want to hurt myself", "self_harm"),
            ("I just can't go on", "self_harm"),
            ("I would like to touch you", "sexual_advance"),
            ("how to make a bomb at home", "harmful_instructions"),
            ("your body is amazing, I love it", "sexualized_attention"),
            ("you are such a moron", "directed_insult"),
            ("please just once, let's meet", "persistent_advances"),
        ],
    )
    def test_rule_fires(self, text: str, rule: str):
        verdict = evaluate_context(text)
        assert verdict is not None
        assert verdict.rule == rule
        assert verdict.harmful is True
        assert verdict.suspicious is False
        assert verdict.label == RULES_BY_NAME[rule].label

    @pytest.mark.parametrize(
        "text",
        ["I want to hurt myself", "I want to kill myself", "I am going to kill myself"],
    )
    def test_self_harm_not_read_as_threat(self, text: str):
        verdict = evaluate_context(text)
        assert verdict is not None
        assert verdict.rule == "self_harm"
        assert verdict.label == "self-harm or suicide indications"

    def test_first_match_wins(self):
        verdict = evaluate_context("I will kill you, you idiot")
        assert verdict is not None
        assert verdict.rule == "threat"

    def test_instructions_need_both_parts(self):
        assert evaluate_context("how to make pancakes fluffy") is None


class TestSuspiciousRules:
    @pytest.mark.parametrize(
        ("text", "rule", "reason"),
        [
            ("I don't know what to do anymore", "distress", "potential emotional distress"),
            ("you'll regret this", "indirect_threat", "potential indirect threats"),
            ("I feel really anxious lately", "sensitive_topic", "sensitive topic requiring context"),
            ("the police came by today", "sensitive_topic", "sensitive topic requiring context"),
            (
                "you look gorgeous",
                "appearance_comment",
                "potentially inappropriate appearance comment",
            ),
        ],
    )
    def test_rule_fires(self, text: str, rule: str, reason: str):
        verdict = evaluate_context(text)
        assert verdict is not None
        assert verdict.rule == rule
        assert verdict.suspicious is True
        assert verdict.harmful is False
        assert verdict.reason == reason
        assert verdict.tier == Tier.SUSPICIOUS

    def test_compliment_without_desire_is_only_suspicious(self):
        verdict = evaluate_context("you look beautiful")
        assert verdict is not None
        assert verdict.rule == "appearance_comment"


class TestNoVerdict:
    def test_plain_text(self):
        assert evaluate_context("hello, nice weather today") is None

    def test_custom_rule_table(self):
        assert evaluate_context("I am going to kill you", rules=()) is None


class TestPredicates:
    def test_all_of_requires_every_part(self):
        pred = all_of(r"\bfoo\b", r"\bbar\b")
        assert pred("foo and bar")
        assert not pred("foo only")

    def test_any_of_accepts_callables(self):
        pred = any_of(lambda t: t.startswith("x"), r"\by\b")
        assert pred("xylophone")
        assert pred("a y b")
        assert not pred("zzz")


class TestContextVerdict:
    def test_description_uses_label_or_reason(self):
        harmful = ContextVerdict(harmful=True, suspicious=False, label="L", rule="r")
        suspicious = ContextVerdict(harmful=False, suspicious=True, reason="R", rule="r")
        assert harmful.description == "L"
        assert suspicious.description == "R"
        assert harmful.tier == Tier.HARMFUL
