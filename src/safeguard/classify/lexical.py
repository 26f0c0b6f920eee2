"""Lexical rule classifier for text.

Two ordered tables of topical word groups, harmful first, then
suspicious.  Any hit in a group qualifies the whole group; the first
harmful hit decides the tier, then the first suspicious hit.  Text with
no hits is judged on length alone.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from safeguard.content.models import Classification, Tier

logger = logging.getLogger(__name__)

HARMFUL_CONFIDENCE = 0.85
SUSPICIOUS_CONFIDENCE = 0.65
SHORT_TEXT_CONFIDENCE = 0.5
SAFE_CONFIDENCE = 0.9

MIN_TEXT_LENGTH = 5
SHORT_TEXT_REPORT = "insufficient content for reliable analysis"
SAFE_REPORT = "Content appears to be safe. No harmful patterns detected."


@dataclass(frozen=True)
class LexiconGroup:
    """A named set of terms matched as one case-insensitive alternation.

    Terms may contain regex fragments (``madar(?:chod)?``).  Scripts
    without word separators (CJK) are matched unbounded.
    """

    category: str
    tier: Tier
    terms: tuple[str, ...]
    bounded: bool = True
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        body = "|".join(self.terms)
        source = rf"\b(?:{body})\b" if self.bounded else f"(?:{body})"
        object.__setattr__(self, "pattern", re.compile(source, re.IGNORECASE))

    def search(self, text: str) -> str | None:
        """Return the first matching term, or None."""
        m = self.pattern.search(text)
        return m.group(0) if m else None


def _harmful(category: str, *terms: str, bounded: bool = True) -> LexiconGroup:
    return LexiconGroup(category, Tier.HARMFUL, terms, bounded)


def _suspicious(category: str, *terms: str) -> LexiconGroup:
    return LexiconGroup(category, Tier.SUSPICIOUS, terms)


HARMFUL_GROUPS: tuple[LexiconGroup, ...] = (
    _harmful(
        "violence or threats",
        "kill", "murder", "hurt", "harm", "attack", "beat", "assault", "threaten",
        "shoot", "stab", "punch", "violate", "torture",
    ),
    _harmful(
        "hate speech",
        "hate", "racist", "sexist", "homophobic", "transphobic", "nazi", "terrorism",
        "bigot", "disgusting",
    ),
    _harmful(
        "self-harm",
        "suicide", "self-harm", "cutting", "overdose", "self-injury", "end my life",
    ),
    _harmful(
        "sexual content",
        "porn", "explicit", "nude", "naked", "obscene", "lewd", "masturbate",
    ),
    _harmful(
        "illegal or dangerous activity",
        "steal", "robbery", "hack", "fraud", "illegal", "weapon", "bomb", "drugs",
        "cocaine", "heroin",
    ),
    _harmful(
        "harassment or bullying",
        "harass", "bully", "stalk", "dox", "expose", "humiliate",
    ),
    _harmful(
        "profanity",
        "fuck", "shit", "ass", "bitch", "cunt", "dick", "cock", "pussy", "whore",
        "bastard", "asshole", "motherfucker", "damn", "bullshit", "crap",
    ),
    _harmful(
        "insults",
        "jerk", "idiot", "stupid", "dumb", "moron", "retard", "imbecile", "fool",
        "loser", "slut", "wanker", "twat", "piss", "tits", "boobs",
    ),
    _harmful(
        "sexual violence",
        "rape", "molest", "grope", "fondle", "sexual assault", "inappropriately touch",
    ),
    _harmful(
        "sexual solicitation",
        "send nudes", "sexy pics", "sex chat", "sext", "cyber sex", "get naked",
        "show me your", "strip for me", "want to fuck", "want to bang",
        "sleep with me", "sleep together", "hook up", "get laid", "blow job",
        "go down on",
    ),
    _harmful(
        "sexualized comments",
        "nice body", "sexy body", "hot body", "beautiful body", "nice ass",
        "nice tits", "nice boobs", "sexy legs", "what are you wearing",
        "take off your", "remove your clothes", "are you naked", "are you horny",
        "turn me on",
    ),
    _harmful(
        "slurs",
        "nigger", "nigga", "kike", "chink", "spic", "wetback", "raghead",
        "towelhead", "fag", "faggot", "dyke", "tranny",
    ),
    _harmful(
        "child exploitation",
        "child porn", "kiddie porn", "underage sex", "minor sex", "pedo",
        "pedophile", "young girl", "young boy", "trafficking",
    ),
    # Transliterated Hindi, Punjabi, Bengali, Tamil, Telugu, Marathi,
    # Malayalam, Kannada, Gujarati, Urdu, Konkani, Assamese and Odia.
    _harmful(
        "profanity in South Asian languages",
        "bhenchod", "madar(?:chod)?", "behen ke laude", "bsdk", "chutiya", "lund",
        "lauda", "randi", "gandu", "behenchod", "chut", "lode", "jhatu",
        "panchod", "pencho", "gadha", "khotey", "kuttey", "khota", "harami",
        "kanjara", "tatti",
        "bokachoda", "khanki", "shala", "kutta", "sutki", "chudi", "voda",
        "otha", "baadu", "pundai", "sunni", "thevdiya", "myir", "naaye", "loosu",
        "koodhi", "ommala", "kaai", "thayoli",
        "dengey", "gudda", "modda", "lanja", "pookulu", "pooku", "sulli",
        "gadida", "erripook", "pichi", "puka", "dengu",
        "zhavadya", "bhikaar", "chinal", "zavadya", "radu", "bhosadya",
        "aayi(?:chi)?(?:zavli|gand)",
        "myru", "pundachi", "poori", "thendi", "maire", "poorr", "kundi",
        "thevidiya", "achante", "poore", "kunna",
        "keydimaga", "shata", "nayi", "mayamaga", "byavarsi",
        "chodu", "gaand", "bhosdina", "maa-bhen", "dhandho", "maari", "lulli",
        "goti", "bosadi",
        "kanjari", "kameena", "chussa", "gaandu", "kamina", "phudi", "choot",
        "chuss", "kutti",
        "fodri", "fodem", "rando", "chikli", "chood", "fodi", "zadap", "baylo",
        "bhikari", "ghand", "yedu", "futti", "zatalo",
        "bahenchod", "gahori", "lora", "kuttar", "bilai", "guu", "xuwali",
        "maghia", "chodri", "mogiare", "podi", "dhipa", "panji", "bedhya",
        "ghusi", "thuku", "chuda", "magi",
    ),
    _harmful(
        "profanity in European languages",
        "puta", "cojones", "coño", "follar", "joder", "mierda", "putain", "merde",
        "salope", "connard", "fick", "scheiße", "fotze", "cazzo", "stronzo",
        "puttana", "cyka", "blyat", "khuy", "pizda", "yebat",
    ),
    _harmful(
        "profanity in East Asian languages",
        "他妈的", "肏", "屁眼", "傻逼", "妓女", "屄", "くそ", "ファック", "淫売",
        "おしり", "씨발", "좆", "개자식", "지랄", "걸레",
        bounded=False,
    ),
)

SUSPICIOUS_GROUPS: tuple[LexiconGroup, ...] = (
    _suspicious(
        "unease", "suspicious", "weird", "strange", "odd", "creepy", "sketchy",
        "concerning",
    ),
    _suspicious("frustration", "angry", "upset", "annoyed", "frustrated", "mad", "pissed"),
    _suspicious("fear or anxiety", "scared", "afraid", "worried", "anxious", "nervous", "concerned"),
    _suspicious("pain or suffering", "pain", "hurt", "suffering", "misery", "agony", "anguish"),
    _suspicious("substances", "drug", "drink", "alcohol", "weed", "marijuana", "high", "drunk"),
    _suspicious("conflict", "fight", "argument", "conflict", "dispute", "disagree", "debate"),
    _suspicious(
        "mild language", "hell", "darn", "sucks", "freaking", "heck", "gosh",
        "shut up", "screw", "frickin",
    ),
    _suspicious(
        "romantic solicitation",
        "date me", "go out with me", "attracted to you", "find you attractive",
        "cute", "hot", "sexy", "dating", "relationship", "flirt", "love you",
        "miss you", "thinking about you", "dreaming of you", "fantasize",
        "crush on you",
    ),
    _suspicious(
        "contact solicitation",
        "can i have your", "give me your number", "meet up", "meet in person",
        "alone together", "private chat", "dm me",
    ),
    _suspicious(
        "innuendo",
        "that's what she said", "in bed", "between the sheets", "getting it on",
        "doing it", "netflix and chill",
    ),
)


def matched_groups(text: str) -> list[LexiconGroup]:
    """Return every group with at least one hit, harmful groups first."""
    return [g for g in (*HARMFUL_GROUPS, *SUSPICIOUS_GROUPS) if g.search(text)]


def harmful_report(category: str) -> str:
    return (
        f"Content contains potentially harmful language or themes related to {category}. "
        "This content violates our community guidelines."
    )


def suspicious_report(reason: str) -> str:
    return (
        "Content contains potentially concerning language or themes that require "
        f"further review by our moderation team: {reason}."
    )


def classify_lexical(text: str) -> Classification:
    """Classify text using the lexical tables only.

    Args:
        text: Any string, including the empty string.

    Returns:
        Harmful (0.85) on the first harmful group hit, suspicious (0.65)
        on the first suspicious hit, suspicious (0.5) for very short text,
        safe (0.9) otherwise.
    """
    for group in HARMFUL_GROUPS:
        term = group.search(text)
        if term:
            logger.debug("Harmful lexicon hit %r (%s)", term, group.category)
            return Classification(
                tier=Tier.HARMFUL,
                confidence=HARMFUL_CONFIDENCE,
                report=harmful_report(group.category),
                source="lexical",
            )

    for group in SUSPICIOUS_GROUPS:
        term = group.search(text)
        if term:
            logger.debug("Suspicious lexicon hit %r (%s)", term, group.category)
            return Classification(
                tier=Tier.SUSPICIOUS,
                confidence=SUSPICIOUS_CONFIDENCE,
                report=suspicious_report(group.category),
                source="lexical",
            )

    if len(text) < MIN_TEXT_LENGTH:
        return Classification(
            tier=Tier.SUSPICIOUS,
            confidence=SHORT_TEXT_CONFIDENCE,
            report=SHORT_TEXT_REPORT,
            source="length",
        )

    return Classification(
        tier=Tier.SAFE,
        confidence=SAFE_CONFIDENCE,
        report=SAFE_REPORT,
        source="default",
    )
