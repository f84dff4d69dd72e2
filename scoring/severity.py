"""
Severity classification of the effective screening score.

Bands (half-open, no gaps, no overlaps; the top band is closed at 100):

    [0, 25)    low       Very Low
    [25, 40)   mild      Low Indicators
    [40, 60)   moderate  Moderate Indicators
    [60, 75)   high      High Indicators
    [75, 100]  high      Very High Indicators

The top two bands share the coarse `high` severity (used for coloring) but
keep separate labels and recommendation sets.

IMPORTANT: screening output, not a diagnosis. Recommendation text always
points toward professional assessment.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from utils.numeric import clamp, is_finite_number

logger = logging.getLogger(__name__)


class Severity(Enum):
    """Coarse severity used for UI coloring."""
    LOW = "low"
    MILD = "mild"
    MODERATE = "moderate"
    HIGH = "high"


@dataclass(frozen=True)
class SeverityBand:
    """
    One classification band.

    Attributes:
        lower: Inclusive lower bound
        upper: Exclusive upper bound (inclusive for the last band)
        severity: Coarse severity
        label: Fine-grained label
        interpretation: One-line meaning of the band for reports
        recommendations: Recommended next steps, most urgent first
    """
    lower: float
    upper: float
    severity: Severity
    label: str
    interpretation: str
    recommendations: Tuple[str, ...]


SEVERITY_BANDS: Tuple[SeverityBand, ...] = (
    SeverityBand(
        lower=0.0,
        upper=25.0,
        severity=Severity.LOW,
        label="Very Low",
        interpretation="Score < 25: Very Low ASD Behavior (Normal Range)",
        recommendations=(
            "Continue monitoring development and behaviors regularly",
            "Maintain supportive environment and consistent routines",
            "Celebrate strengths and provide positive reinforcement",
        ),
    ),
    SeverityBand(
        lower=25.0,
        upper=40.0,
        severity=Severity.MILD,
        label="Low Indicators",
        interpretation="Score 25-40: Low ASD Indicators - Clinical Assessment Requested",
        recommendations=(
            "Schedule a screening with a healthcare provider",
            "Document behavioral patterns",
            "Explore early intervention resources",
            "Communicate regularly with caregivers or teachers",
        ),
    ),
    SeverityBand(
        lower=40.0,
        upper=60.0,
        severity=Severity.MODERATE,
        label="Moderate Indicators",
        interpretation="Score 40-60: Moderate ASD Indicators - Clinical Assessment Required",
        recommendations=(
            "Seek evaluation from a developmental specialist",
            "Consider early intervention services",
            "Connect with support networks",
            "Develop individualized support strategies",
        ),
    ),
    SeverityBand(
        lower=60.0,
        upper=75.0,
        severity=Severity.HIGH,
        label="High Indicators",
        interpretation="Score 60-75: High ASD Indicators - Clinical Assessment Mandatory",
        recommendations=(
            "IMPORTANT: Seek clinical assessment as soon as possible",
            "Contact a healthcare provider",
            "Connect with autism specialists",
            "Explore intervention programs",
            "Join caregiver support communities",
        ),
    ),
    SeverityBand(
        lower=75.0,
        upper=100.0,
        severity=Severity.HIGH,
        label="Very High Indicators",
        interpretation="Score > 75: Very High ASD Indicators - Regular Checkup Needed",
        recommendations=(
            "URGENT: Schedule immediate clinical assessment",
            "Contact specialized autism centers",
            "Begin intervention planning",
            "Set regular follow-up schedule",
            "Access intensive support services",
            "Connect with experienced support communities",
        ),
    ),
)


def classify_severity(score: float) -> SeverityBand:
    """
    Map a score to its band.

    Non-finite or non-numeric scores classify as 0; out-of-range scores are
    clamped to [0, 100] first, so every input maps to exactly one band.

    Args:
        score: Effective score (fused if present, else normalized)

    Returns:
        SeverityBand
    """
    if not is_finite_number(score):
        logger.warning(f"Non-finite score {score!r} classified as 0")
        score = 0.0
    score = clamp(float(score), 0.0, 100.0)

    for band in SEVERITY_BANDS[:-1]:
        if band.lower <= score < band.upper:
            return band
    return SEVERITY_BANDS[-1]


def interpretation_lines() -> List[str]:
    """Interpretation line for every band, lowest first."""
    return [band.interpretation for band in SEVERITY_BANDS]
