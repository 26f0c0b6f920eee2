"""Contextual override rules for text.

Phrase-level rules that look at intent rather than single words: a
first-person threat, a generalization paired with an elimination verb, a
desire statement paired with a sexual term, and so on.  Rules are held in
one ordered table; evaluation stops at the first rule that fires.

Transliterated Hindi, Tamil, Marathi, Kannada and Telugu phrasings are
folded into the same rule as their English counterpart.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from safeguard.content.models import Tier

logger = logging.getLogger(__name__)

Predicate = Callable[[str], bool]


def _pattern(source: str) -> Predicate:
    compiled = re.compile(source, re.IGNORECASE)
    return lambda text: compiled.search(text) is not None


def any_of(*predicates: Predicate | str) -> Predicate:
    """Predicate that holds when any part holds.  Strings are compiled as regexes."""
    parts = [_pattern(p) if isinstance(p, str) else p for p in predicates]
    return lambda text: any(p(text) for p in parts)


def all_of(*predicates: Predicate | str) -> Predicate:
    """Predicate that holds when every part holds.  Strings are compiled as regexes."""
    parts = [_pattern(p) if isinstance(p, str) else p for p in predicates]
    return lambda text: all(p(text) for p in parts)


@dataclass(frozen=True)
class ContextRule:
    """One row of the override table."""

    name: str
    tier: Tier
    label: str
    predicate: Predicate

    def matches(self, text: str) -> bool:
        return self.predicate(text)


class ContextVerdict(BaseModel):
    """Verdict from the first contextual rule that fired."""

    model_config = ConfigDict(frozen=True)

    harmful: bool
    suspicious: bool
    label: str | None = None
    reason: str | None = None
    rule: str

    @property
    def tier(self) -> Tier:
        return Tier.HARMFUL if self.harmful else Tier.SUSPICIOUS

    @property
    def description(self) -> str:
        return (self.label if self.harmful else self.reason) or ""


# Up to two filler words between a pronoun and its verb: "I really want to ..."
_GAP2 = r"(?:\w+ )?(?:\w+ )?"
_GAP1 = r"(?:\w+ )?"

CONTEXT_RULES: tuple[ContextRule, ...] = (
    ContextRule(
        "threat",
        Tier.HARMFUL,
        "threats of violence or harm",
        any_of(
            rf"\bi {_GAP2}(?:kill(?! myself)|hurt(?! myself)|attack)",
            rf"\bgoing to {_GAP1}kill(?! myself)|\bplanning to {_GAP1}attack",
            r"main tumhe marunga|main tumhe khatam|tujhe khatm kar dunga"
            r"|tujhe maar dunga|tujhe jaan se",
            r"naan unnai kolluvene|naanum unnayum konnu|tula marein|tumala marin"
            r"|tumko mein marega",
        ),
    ),
    ContextRule(
        "group_hate",
        Tier.HARMFUL,
        "hate speech or discrimination",
        any_of(
            all_of(
                rf"\ball {_GAP1}(?:are|should)\b|\bthey deserve to\b|\bwe should {_GAP1}them\b",
                r"\b(?:hate|die|eliminate|get rid of|inferior|stupid|worthless)\b",
            ),
            rf"sab log {_GAP1}ko marna chahiye|har ek {_GAP1}ko {_GAP1}marna chahiye"
            rf"|sab {_GAP1}mar jaye",
            rf"avargal ellam marikka|yellaru {_GAP1}sakbeku|andaru {_GAP1}chavali",
        ),
    ),
    ContextRule(
        "self_harm",
        Tier.HARMFUL,
        "self-harm or suicide indications",
        any_of(
            rf"\bi {_GAP2}(?:want to die|end my life|hurt myself|can'?t go on)",
            r"\bkill myself\b",
            r"main marna chahta hu|mujhe jeena nahi|mein apne aap ko"
            r"|khudkhushi karna chahta|jeene ka mann nahi",
            r"naan saaga virumbugireen|naanum saaganum|enakku vaazhkai venda"
            r"|enakku endrum uyir venam",
        ),
    ),
    ContextRule(
        "sexual_advance",
        Tier.HARMFUL,
        "sexual harassment or unwanted advances",
        any_of(
            all_of(
                rf"\b(?:i|we) {_GAP2}(?:want|like) to {_GAP1}you",
                r"\b(?:sex|fuck|sexually|naked|body|nudes|touch|feel)\b",
            ),
            r"main tumhare saath sex|mujhe tumhare saath|tumhara badan"
            r"|tumhari photo bhejo|tumhe nangi",
            r"naan unnodu sex|unakku sexai|un udambai|nee mulai|un maarbagam"
            r"|thevadia magan|unnoda body",
        ),
    ),
    ContextRule(
        "harmful_instructions",
        Tier.HARMFUL,
        "instructions for harmful or illegal activities",
        all_of(
            rf"\bhow to {_GAP1}make|\bsteps to {_GAP1}create|\binstructions for\b",
            r"\b(?:bomb|explosive|weapon|poison|hack|steal)\b",
        ),
    ),
    ContextRule(
        "sexualized_attention",
        Tier.HARMFUL,
        "unwelcome sexualized attention",
        all_of(
            rf"\byour {_GAP2}(?:body|appearance|looks)|\byou {_GAP2}(?:hot|sexy|beautiful)",
            r"\b(?:want|like|love|desire|wish|hope|imagine)\b",
        ),
    ),
    ContextRule(
        "directed_insult",
        Tier.HARMFUL,
        "directed profanity and personal attacks",
        all_of(
            rf"\b(?:you are|you're|you) {_GAP2}a",
            r"\b(?:bitch|asshole|cunt|idiot|moron|stupid|retard|motherfucker)\b",
        ),
    ),
    ContextRule(
        "persistent_advances",
        Tier.HARMFUL,
        "persistent unwanted advances",
        all_of(
            rf"\b(?:please|come on|just) {_GAP2}(?:once|try|consider|think about)",
            r"\b(?:sex|date|meet|go out|hang out|see you|talk to you|message me)\b",
        ),
    ),
    ContextRule(
        "distress",
        Tier.SUSPICIOUS,
        "potential emotional distress",
        any_of(rf"feel like {_GAP2}end|don'?t know what to do|can'?t handle|need help with"),
    ),
    ContextRule(
        "indirect_threat",
        Tier.SUSPICIOUS,
        "potential indirect threats",
        any_of(
            rf"they will {_GAP2}pay|you'?ll {_GAP2}regret|wait until|what happens when"
            r"|wait and see"
        ),
    ),
    ContextRule(
        "sensitive_topic",
        Tier.SUSPICIOUS,
        "sensitive topic requiring context",
        any_of(
            r"\b(?:depression|depressed|anxiety|anxious|mental health|trauma|addiction"
            r"|gun|knife|police)\b"
        ),
    ),
    ContextRule(
        "appearance_comment",
        Tier.SUSPICIOUS,
        "potentially inappropriate appearance comment",
        all_of(
            r"\b(?:attractive|gorgeous|pretty|handsome|cute|beautiful|hot)\b",
            r"\b(?:you are|you look|you seem|you're)\b",
        ),
    ),
)

RULES_BY_NAME: dict[str, ContextRule] = {rule.name: rule for rule in CONTEXT_RULES}


def evaluate_context(text: str, rules: tuple[ContextRule, ...] = CONTEXT_RULES) -> ContextVerdict | None:
    """Return the verdict of the first rule that fires, or None."""
    for rule in rules:
        if not rule.matches(text):
            continue
        logger.debug("Contextual rule %s fired", rule.name)
        if rule.tier is Tier.HARMFUL:
            return ContextVerdict(harmful=True, suspicious=False, label=rule.label, rule=rule.name)
        return ContextVerdict(harmful=False, suspicious=True, reason=rule.label, rule=rule.name)
    return None
