"""
Questionnaire / video prediction fusion module.

This package combines the questionnaire score with an optional video-derived
ML prediction:
- Validates untrusted prediction payloads before they reach any formula
- Fuses with a fixed 60/40 questionnaire/video split
- Provides the single deterministic fallback prediction generator

Rationale:
- The questionnaire is the primary, always-available signal
- The video score may be a fallback estimate, so it is down-weighted
- Malformed predictions degrade to questionnaire-only scoring, never to an error
"""

from .video_prediction import (
    VideoPrediction,
    validate_prediction,
    DEFAULT_CONFIDENCE,
)
from .score_fusion import fuse_scores, DEFAULT_QUESTIONNAIRE_WEIGHT
from .fallback import generate_fallback_prediction, fallback_from_config

__all__ = [
    'VideoPrediction',
    'validate_prediction',
    'DEFAULT_CONFIDENCE',
    'fuse_scores',
    'DEFAULT_QUESTIONNAIRE_WEIGHT',
    'generate_fallback_prediction',
    'fallback_from_config',
]
