"""
Context Scoring — additive plausibility score for a code candidate.

Formula:
    score =
        tier weight                          (high 3.0 / medium 2.0 / low 1.0)
      + Σ keyword weights in the ± window    (high 3.0 / medium 2.0 / low 1.0,
                                              each distinct keyword once)
      + format cue                           (isolated 2.0 / spaced 1.5 / attached 0.8)
      + early position                       (first 30% of the text: 1.5)
      + subject presence                     (code also in the subject: 2.0)

Weights are configurable and can be tuned per profile; the relative
ordering of the defaults is what ranking relies on.
"""
import re
from typing import Optional

from verification_codes.config.constants import (
    EARLY_POSITION_RATIO,
    EARLY_POSITION_WEIGHT,
    FORMAT_WEIGHTS,
    KEYWORD_WEIGHTS,
    SUBJECT_PRESENCE_WEIGHT,
    TIER_WEIGHTS,
    TIERS,
)
from verification_codes.config.profile import ExtractionProfile, default_profile
from verification_codes.extraction.pattern_matcher import context_window
from verification_codes.models.candidate import Candidate

DEFAULT_WEIGHTS: dict = {
    **{f"tier_{tier}": w for tier, w in TIER_WEIGHTS.items()},
    **{f"keyword_{level}": w for level, w in KEYWORD_WEIGHTS.items()},
    **{f"format_{cue}": w for cue, w in FORMAT_WEIGHTS.items()},
    "early_position": EARLY_POSITION_WEIGHT,
    "subject_presence": SUBJECT_PRESENCE_WEIGHT,
}


class ContextScorer:
    """
    Parametric context scorer with configurable weights.

    Format cues:
        newline (or text edge) on either side  → isolated
        whitespace on both sides               → spaced
        anything else                          → attached
    """

    def __init__(
        self,
        weights: Optional[dict] = None,
        profile: Optional[ExtractionProfile] = None,
        early_position_ratio: float = EARLY_POSITION_RATIO,
    ):
        self.weights = DEFAULT_WEIGHTS.copy()
        if weights is not None:
            self.weights.update(weights)
        self.profile = profile if profile is not None else default_profile()
        self.early_position_ratio = early_position_ratio

    def score(self, candidate: Candidate, full_content: str, subject: str = "") -> Candidate:
        """
        Populate ``candidate.score`` and ``candidate.factors``.

        Args:
            candidate: Unscored candidate from the pattern matcher.
            full_content: The text the candidate was found in.
            subject: Message subject, checked for the code itself.

        Returns:
            The same Candidate, scored.
        """
        candidate.score = 0.0
        candidate.factors = []

        # 1. Tier base weight
        candidate.add_factor("tier", candidate.tier, self.weights[f"tier_{candidate.tier}"])

        # 2. Keywords in the context window
        window = candidate.context_window or context_window(
            full_content, candidate.position, candidate.code, self.profile.context_window
        )
        for level in TIERS:
            for keyword in self.profile.keywords(level).find_in(window):
                candidate.add_factor("keyword", keyword, self.weights[f"keyword_{level}"])

        # 3. Format cue
        cue = self.format_cue(full_content, candidate)
        candidate.add_factor("format", cue, self.weights[f"format_{cue}"])

        # 4. Early position
        if candidate.position < len(full_content) * self.early_position_ratio:
            candidate.add_factor("position", "early", self.weights["early_position"])

        # 5. Code repeated in the subject
        if subject and self._in_subject(candidate.code, subject):
            candidate.add_factor("subject", "present", self.weights["subject_presence"])

        candidate.score = max(0.0, candidate.score)
        return candidate

    @staticmethod
    def format_cue(full_content: str, candidate: Candidate) -> str:
        before = full_content[candidate.position - 1] if candidate.position > 0 else "\n"
        after = full_content[candidate.end] if candidate.end < len(full_content) else "\n"

        if before == "\n" or after == "\n":
            return "isolated"
        if before.isspace() and after.isspace():
            return "spaced"
        return "attached"

    @staticmethod
    def _in_subject(code: str, subject: str) -> bool:
        return re.search(r"(?<![0-9A-Za-z])" + re.escape(code) + r"(?![0-9A-Za-z])", subject) is not None

