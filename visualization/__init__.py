"""
Reporting module.

This package prepares the downloadable screening report:
- Score statistics (questionnaire, ML, fused) and model confidence
- Top contributing factors with suggested actions
- Band interpretation and recommended next steps

Rationale:
- Reports read the scoring result; they never recompute scores
- Missing ML values come from the same fallback generator the service uses
- Non-diagnostic language throughout
"""

from .report_generator import (
    ScreeningReport,
    build_screening_report,
    export_json_report,
)

__all__ = [
    'ScreeningReport',
    'build_screening_report',
    'export_json_report',
]
