"""
EngineVersion — frozen dataclass for deterministic reproducibility.

Every batch report carries the full EngineVersion so a ranking can be
traced back to the pattern and keyword tables that produced it.
"""
from dataclasses import dataclass

from verification_codes.config.constants import (
    KEYWORDSET_VERSION,
    NORMALIZER_VERSION,
    PATTERNSET_VERSION,
)


@dataclass(frozen=True)
class EngineVersion:
    """Contract of version to guarantee repeatability."""

    profile_name: str = "default"
    patternsetversion: str = PATTERNSET_VERSION
    keywordsetversion: str = KEYWORDSET_VERSION
    normalizerversion: str = NORMALIZER_VERSION
    schemaversion: str = "extraction-output-v1"

    def to_dict(self) -> dict:
        return {
            "profile_name": self.profile_name,
            "patternsetversion": self.patternsetversion,
            "keywordsetversion": self.keywordsetversion,
            "normalizerversion": self.normalizerversion,
            "schemaversion": self.schemaversion,
        }

    def __repr__(self) -> str:
        return f"Engine-{self.profile_name}-{self.patternsetversion}"
