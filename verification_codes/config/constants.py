"""
Constants used across the extraction engine.
Versioned and pinned for determinism.
"""
from typing import Dict, Tuple

# =============================================================================
# Versions
# =============================================================================
PATTERNSET_VERSION: str = "otp-patterns-2.3.0"
KEYWORDSET_VERSION: str = "otp-keywords-en-zh-1.4.0"
NORMALIZER_VERSION: str = "html-normalizer-1.1.0"

# =============================================================================
# Tiers
# =============================================================================
TIER_HIGH: str = "high"
TIER_MEDIUM: str = "medium"
TIER_LOW: str = "low"
TIERS: Tuple[str, ...] = (TIER_HIGH, TIER_MEDIUM, TIER_LOW)

# A 4-8 digit run that is not part of a longer number.
DIGIT_RUN: str = r"(?<!\d)(\d{4,8})(?!\d)"

# =============================================================================
# Candidate patterns, evaluated high -> medium -> low
# =============================================================================
HIGH_PATTERNS: Tuple[str, ...] = (
    r"(?:verification code|验证码|vertification code)[\s:：\-]*" + DIGIT_RUN,
    r"(?:code|码)[\s:：\-]*" + DIGIT_RUN,
    r"(?:code|码)(?:\s+for\s+[^\s:：]{1,30})?\s*(?:is|should\s+be|为|是)[\s:：]*" + DIGIT_RUN,
    r"(?:pin|密码)[\s:：\-]*" + DIGIT_RUN,
    r"(?:your code is|您的验证码是)[\s:：]*" + DIGIT_RUN,
    r"(?:enter|input|请输入)[\s:：]*" + DIGIT_RUN,
    r"^\[(\d{4,8})\]",
    r"^verification[:\s]*" + DIGIT_RUN,
)

MEDIUM_PATTERNS: Tuple[str, ...] = (
    r"(?:verify|confirm|activate|激活|确认)[\s\S]{0,50}?" + DIGIT_RUN,
    r"(?:secure|安全|access|登录)[\s\S]{0,30}?" + DIGIT_RUN,
    r"(?:otp|one time|一次性)[\s\S]{0,30}?" + DIGIT_RUN,
    r"(?:temporary|临时)[\s\S]{0,30}?" + DIGIT_RUN,
)

LOW_PATTERNS: Tuple[str, ...] = (
    r"(?<![0-9A-Za-z])(\d{4,8})(?![0-9A-Za-z])",
)

# Only compiled when alphanumeric codes are enabled.
ALPHANUMERIC_PATTERNS: Tuple[str, ...] = (
    r"(?i:验证码|校验码|动态码|verification\s*code|security\s*code)"
    r"[^0-9A-Za-z]{0,8}(?<![0-9A-Za-z])([A-Z0-9]{4,8})(?![0-9A-Za-z])",
)

ALPHANUMERIC_BLACKLIST: Tuple[str, ...] = (
    "directly", "click", "please", "link", "code", "verify", "login",
)

# =============================================================================
# Context keywords (English / Chinese)
# =============================================================================
HIGH_KEYWORDS: Tuple[str, ...] = (
    "verification code", "验证码", "your code is", "您的验证码是", "enter this code",
)

MEDIUM_KEYWORDS: Tuple[str, ...] = (
    "verify", "confirm", "activate", "security", "access", "login", "otp",
    "验证", "确认", "激活", "安全", "登录", "一次性",
)

LOW_KEYWORDS: Tuple[str, ...] = (
    "code", "pin", "number", "temporary",
    "码", "密码", "临时",
)

# =============================================================================
# Scoring weights
# =============================================================================
TIER_WEIGHTS: Dict[str, float] = {
    TIER_HIGH: 3.0,
    TIER_MEDIUM: 2.0,
    TIER_LOW: 1.0,
}

KEYWORD_WEIGHTS: Dict[str, float] = {
    TIER_HIGH: 3.0,
    TIER_MEDIUM: 2.0,
    TIER_LOW: 1.0,
}

FORMAT_WEIGHTS: Dict[str, float] = {
    "isolated": 2.0,
    "spaced": 1.5,
    "attached": 0.8,
}

EARLY_POSITION_RATIO: float = 0.3
EARLY_POSITION_WEIGHT: float = 1.5
SUBJECT_PRESENCE_WEIGHT: float = 2.0

# Scores closer than this are ranked as ties.
SCORE_TIE_TOLERANCE: float = 0.1

# =============================================================================
# Deny-list
# =============================================================================
ASCENDING_SEQUENCES: Tuple[str, ...] = (
    "1234", "12345", "123456", "1234567", "12345678",
)

SERVICE_NUMBER_PATTERN: str = r"^(?:800|888|900|555)\d{4}$"
REPEATED_CHAR_PATTERN: str = r"^(.)\1{3,7}$"

PHONE_PATTERNS: Tuple[str, ...] = (
    r"(?<!\d)\d{3}[-.\s]\d{3}[-.\s]\d{4}(?!\d)",
    r"\(\d{3}\)\s?\d{3}[-.\s]\d{4}(?!\d)",
)

# Tokens that mark the following number as an identifier, not a code.
REFERENCE_PREFIX_PATTERN: str = (
    r"(?:\b(?:ref|reference|order|invoice|ticket|id)|订单号?|发票号?|单号)"
    r"\s*(?:no\.?|number|num|#)?\s*[:：#.]?\s*$"
)

CURRENCY_PREFIX_PATTERN: str = r"[$€£¥]\s*$"
DECIMAL_SUFFIX_PATTERN: str = r"^[.,]\d{2}(?!\d)"
PERCENT_SUFFIX_PATTERN: str = r"^\s*%"

# =============================================================================
# Dedup modes
# =============================================================================
DEDUP_CODE_SENDER: str = "code_sender"
DEDUP_CODE: str = "code"
DEDUP_MODES: Tuple[str, ...] = (DEDUP_CODE_SENDER, DEDUP_CODE)

DEFAULT_SENDER: str = "unknown"
