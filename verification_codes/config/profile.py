"""
ExtractionProfile — immutable bundle of patterns, keywords and limits.

Pattern tables and keyword lists are configuration data. A profile owns
compiled copies of them so several profiles (e.g. per locale) can coexist
in one process and be shared between threads.
"""
import re
from dataclasses import dataclass, field, replace
from typing import Dict, List, Tuple

from verification_codes.config import settings
from verification_codes.config.constants import (
    ALPHANUMERIC_BLACKLIST,
    ALPHANUMERIC_PATTERNS,
    DEDUP_MODES,
    HIGH_KEYWORDS,
    HIGH_PATTERNS,
    LOW_KEYWORDS,
    LOW_PATTERNS,
    MEDIUM_KEYWORDS,
    MEDIUM_PATTERNS,
    SCORE_TIE_TOLERANCE,
    TIER_HIGH,
    TIER_LOW,
    TIER_MEDIUM,
    TIERS,
)

# re.ASCII keeps \d to 0-9; fullwidth digits are folded by the normalizer.
DEFAULT_PATTERN_FLAGS: int = re.IGNORECASE | re.MULTILINE | re.ASCII


@dataclass(frozen=True)
class PatternRule:
    """A tier-tagged candidate regex. Group 1, when present, is the code."""

    tier: str
    pattern: str
    flags: int = DEFAULT_PATTERN_FLAGS
    compiled: "re.Pattern[str]" = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.tier not in TIERS:
            raise ValueError(f"Unknown tier '{self.tier}', expected one of {TIERS}")
        try:
            compiled = re.compile(self.pattern, self.flags)
        except re.error as e:
            raise ValueError(f"Invalid regex pattern '{self.pattern}': {e}") from e
        object.__setattr__(self, "compiled", compiled)


def _keyword_regex(keyword: str) -> "re.Pattern[str]":
    # ASCII keywords must start a word ("pin" is not a hit inside "shipping").
    escaped = re.escape(keyword.lower())
    if keyword.isascii():
        return re.compile(r"(?<![a-z0-9])" + escaped)
    return re.compile(escaped)


@dataclass(frozen=True)
class KeywordSet:
    """Keywords of one trust level, matched case-insensitively."""

    level: str
    keywords: Tuple[str, ...]
    compiled: Tuple["re.Pattern[str]", ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.level not in TIERS:
            raise ValueError(f"Unknown keyword level '{self.level}'")
        object.__setattr__(self, "compiled", tuple(_keyword_regex(k) for k in self.keywords))

    def find_in(self, text: str) -> List[str]:
        """Return the keywords present in *text*, each at most once."""
        lower = text.lower()
        return [kw for kw, rx in zip(self.keywords, self.compiled) if rx.search(lower)]

    def any_in(self, text: str) -> bool:
        lower = text.lower()
        return any(rx.search(lower) for rx in self.compiled)


@dataclass(frozen=True)
class ExtractionProfile:
    """Everything the matcher, scorer, filter and ranker need to know."""

    name: str
    pattern_rules: Tuple[PatternRule, ...]
    keyword_sets: Tuple[KeywordSet, ...]
    alphanumeric_rules: Tuple[PatternRule, ...] = ()
    alphanumeric_blacklist: Tuple[str, ...] = ALPHANUMERIC_BLACKLIST
    context_window: int = 100
    max_body_chars: int = 50_000
    year_min: int = 2015
    year_max: int = 2035
    reject_five_digit: bool = True
    dedup_mode: str = "code_sender"
    alphanumeric: bool = False
    tie_tolerance: float = SCORE_TIE_TOLERANCE

    def __post_init__(self) -> None:
        if self.dedup_mode not in DEDUP_MODES:
            raise ValueError(f"dedup_mode must be one of {DEDUP_MODES}, got '{self.dedup_mode}'")
        if self.context_window < 0:
            raise ValueError("context_window must be >= 0")
        if self.max_body_chars <= 0:
            raise ValueError("max_body_chars must be > 0")
        if self.year_min > self.year_max:
            raise ValueError("year_min must not exceed year_max")

    def active_rules(self) -> Tuple[PatternRule, ...]:
        """Rules in evaluation order (high -> medium -> low)."""
        rules = self.pattern_rules
        if self.alphanumeric:
            rules = rules + self.alphanumeric_rules
        order = {tier: i for i, tier in enumerate(TIERS)}
        return tuple(sorted(rules, key=lambda r: order[r.tier]))

    def keywords(self, level: str) -> KeywordSet:
        for kw_set in self.keyword_sets:
            if kw_set.level == level:
                return kw_set
        return KeywordSet(level=level, keywords=())

    def keyword_levels(self) -> Dict[str, KeywordSet]:
        return {level: self.keywords(level) for level in TIERS}


def build_pattern_rules() -> Tuple[PatternRule, ...]:
    return (
        tuple(PatternRule(TIER_HIGH, p) for p in HIGH_PATTERNS)
        + tuple(PatternRule(TIER_MEDIUM, p) for p in MEDIUM_PATTERNS)
        + tuple(PatternRule(TIER_LOW, p) for p in LOW_PATTERNS)
    )


def build_keyword_sets() -> Tuple[KeywordSet, ...]:
    return (
        KeywordSet(TIER_HIGH, HIGH_KEYWORDS),
        KeywordSet(TIER_MEDIUM, MEDIUM_KEYWORDS),
        KeywordSet(TIER_LOW, LOW_KEYWORDS),
    )


def default_profile(**overrides) -> ExtractionProfile:
    """
    Build the default bilingual profile from constants and environment settings.

    Any ExtractionProfile field can be overridden by keyword, e.g.
    ``default_profile(dedup_mode="code", reject_five_digit=False)``.
    """
    profile = ExtractionProfile(
        name="default",
        pattern_rules=build_pattern_rules(),
        keyword_sets=build_keyword_sets(),
        alphanumeric_rules=tuple(
            PatternRule(TIER_HIGH, p, flags=re.MULTILINE | re.ASCII) for p in ALPHANUMERIC_PATTERNS
        ),
        context_window=settings.CONTEXT_WINDOW_CHARS,
        max_body_chars=settings.MAX_BODY_CHARS,
        year_min=settings.YEAR_MIN,
        year_max=settings.YEAR_MAX,
        reject_five_digit=settings.REJECT_FIVE_DIGIT_CODES,
        dedup_mode=settings.DEDUP_MODE,
        alphanumeric=settings.ALPHANUMERIC_CODES,
    )
    if overrides:
        profile = replace(profile, **overrides)
    return profile
