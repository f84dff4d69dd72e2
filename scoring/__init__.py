"""
Screening questionnaire scoring module.

This package turns questionnaire answers into an interpretable screening result:
1. Normalized questionnaire score (0-100): weighted answer severity
2. Fused score (0-100): questionnaire combined with an optional video prediction
3. Severity band: coarse severity plus fine-grained label and recommendations
4. Top contributors: the answers that drove the score, with suggested actions

All scores are:
- Interpretable (0-100 scale, higher = more reported indicators)
- Explainable (transparent weighted sums, ranked contributors)
- Non-diagnostic (screening output, not a medical diagnosis)
"""

from .answers import Answer, AnswerValue, coerce_answers
from .question_bank import (
    QuestionWeight,
    QuestionBank,
    QuestionBankRegistry,
    RoleProfile,
    has_family_history,
    load_question_banks,
)
from .normalization import compute_contributions, compute_normalized_score
from .severity import Severity, SeverityBand, SEVERITY_BANDS, classify_severity
from .contributors import TopContributor, rank_top_contributors
from .engine import ScoringEngine, ScoringResult, calculate_score

__all__ = [
    'Answer',
    'AnswerValue',
    'coerce_answers',
    'QuestionWeight',
    'QuestionBank',
    'QuestionBankRegistry',
    'RoleProfile',
    'has_family_history',
    'load_question_banks',
    'compute_contributions',
    'compute_normalized_score',
    'Severity',
    'SeverityBand',
    'SEVERITY_BANDS',
    'classify_severity',
    'TopContributor',
    'rank_top_contributors',
    'ScoringEngine',
    'ScoringResult',
    'calculate_score',
]
