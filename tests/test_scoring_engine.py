"""
Unit tests for the scoring engine.

Tests cover:
- Answer coercion and ordinal severity
- Normalized score (partial questionnaires, rounding, family-history bonus)
- Severity band boundaries
- Top-contributor ranking and tie-breaking
- Engine-level properties (determinism, monotonicity, empty input)
"""

import pytest # pyright: ignore[reportMissingImports]
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from scoring import (
    Answer,
    AnswerValue,
    QuestionBank,
    QuestionWeight,
    ScoringEngine,
    Severity,
    calculate_score,
    classify_severity,
    coerce_answers,
    compute_contributions,
    compute_normalized_score,
    rank_top_contributors,
)
from scoring.severity import SEVERITY_BANDS


@pytest.fixture
def bank():
    return QuestionBank('synthetic', [
        QuestionWeight('q1', 'Question one', 2.0, 'social', 'Action one'),
        QuestionWeight('q2', 'Question two', 1.0, 'sensory', 'Action two'),
        QuestionWeight('q3', 'Question three', 1.0, 'routine', 'Action three'),
    ])


@pytest.fixture
def engine(bank):
    return ScoringEngine(bank)


SCALE = ['never', 'rarely', 'sometimes', 'often', 'always']


class TestAnswers:
    """Test answer parsing."""

    def test_severity_index_order(self):
        indices = [AnswerValue(v).severity_index for v in SCALE]
        assert indices == [0, 1, 2, 3, 4]

    def test_coerce_is_case_insensitive(self):
        assert AnswerValue.coerce(' Often ') is AnswerValue.OFTEN
        assert AnswerValue.coerce('maybe') is None
        assert AnswerValue.coerce(3) is None

    def test_mapping_and_pairs_are_equivalent(self):
        from_mapping = coerce_answers({'q1': 'often', 'q2': 'never'})
        from_pairs = coerce_answers([('q1', 'often'), ('q2', 'never')])
        assert from_mapping == from_pairs

    def test_form_dicts_accepted(self):
        answers = coerce_answers([{'questionId': 'q1', 'value': 'always'}])
        assert answers[0].question_id == 'q1'
        assert answers[0].value is AnswerValue.ALWAYS

    def test_null_question_id_key_falls_back_to_snake_case(self):
        answers = coerce_answers([{'questionId': None, 'question_id': 'q2', 'value': 'often'}])
        assert len(answers) == 1
        assert answers[0].question_id == 'q2'
        assert answers[0].value is AnswerValue.OFTEN

    def test_duplicate_keeps_last_value_first_position(self):
        answers = coerce_answers([('q1', 'never'), ('q2', 'rarely'), ('q1', 'always')])
        assert [a.question_id for a in answers] == ['q1', 'q2']
        assert answers[0].value is AnswerValue.ALWAYS

    def test_off_scale_answer_scores_zero(self):
        answer = Answer.from_raw('q1', 'maybe')
        assert answer.value is None
        assert answer.severity_index == 0

    def test_none_and_garbage_collections(self):
        assert coerce_answers(None) == []
        assert coerce_answers('often') == []
        assert coerce_answers(42) == []


class TestNormalization:
    """Test the normalized questionnaire score."""

    def test_weighted_score(self, bank):
        contributions = compute_contributions({'q1': 'often', 'q2': 'never', 'q3': 'always'}, bank)
        # (0.75*2 + 0 + 1*1) / 4 = 0.625
        assert compute_normalized_score(contributions) == 62.5

    def test_partial_questionnaire_uses_answered_weights(self, bank):
        contributions = compute_contributions({'q2': 'sometimes'}, bank)
        assert compute_normalized_score(contributions) == 50.0

    def test_rounds_half_up_to_one_decimal(self, bank):
        contributions = compute_contributions({'q1': 'often', 'q2': 'rarely', 'q3': 'never'}, bank)
        # 1.75 / 4 = 43.75
        assert compute_normalized_score(contributions) == 43.8

    def test_all_always_is_100(self, bank):
        contributions = compute_contributions({q.question_id: 'always' for q in bank}, bank)
        assert compute_normalized_score(contributions) == 100.0

    def test_family_history_bonus(self, bank):
        contributions = compute_contributions({'q2': 'sometimes'}, bank)
        assert compute_normalized_score(contributions, family_history=True) == 55.0

    def test_family_history_bonus_is_clamped(self, bank):
        contributions = compute_contributions({q.question_id: 'always' for q in bank}, bank)
        assert compute_normalized_score(contributions, family_history=True) == 100.0

    def test_non_finite_bonus_uses_default(self, bank):
        contributions = compute_contributions({'q2': 'never'}, bank)
        assert compute_normalized_score(contributions, True, float('nan')) == 5.0

    def test_unknown_questions_ignored(self, bank):
        contributions = compute_contributions({'zz': 'always', 'q2': 'never'}, bank)
        assert [c.question_id for c in contributions] == ['q2']
        assert compute_normalized_score(contributions) == 0.0

    def test_empty_is_zero(self):
        assert compute_normalized_score([]) == 0.0
        assert compute_normalized_score([], family_history=True) == 0.0


class TestSeverity:
    """Test severity band boundaries."""

    @pytest.mark.parametrize('score,severity,label', [
        (0.0, Severity.LOW, 'Very Low'),
        (24.9, Severity.LOW, 'Very Low'),
        (25.0, Severity.MILD, 'Low Indicators'),
        (39.9, Severity.MILD, 'Low Indicators'),
        (40.0, Severity.MODERATE, 'Moderate Indicators'),
        (59.9, Severity.MODERATE, 'Moderate Indicators'),
        (60.0, Severity.HIGH, 'High Indicators'),
        (74.9, Severity.HIGH, 'High Indicators'),
        (75.0, Severity.HIGH, 'Very High Indicators'),
        (100.0, Severity.HIGH, 'Very High Indicators'),
    ])
    def test_band_boundaries(self, score, severity, label):
        band = classify_severity(score)
        assert band.severity is severity
        assert band.label == label

    def test_out_of_range_and_non_finite(self):
        assert classify_severity(-10).label == 'Very Low'
        assert classify_severity(140).label == 'Very High Indicators'
        assert classify_severity(float('nan')).label == 'Very Low'
        assert classify_severity('high').label == 'Very Low'

    def test_bands_partition_range(self):
        for lower, upper in zip(SEVERITY_BANDS, SEVERITY_BANDS[1:]):
            assert lower.upper == upper.lower
        assert SEVERITY_BANDS[0].lower == 0.0
        assert SEVERITY_BANDS[-1].upper == 100.0

    def test_every_band_has_recommendations(self):
        for band in SEVERITY_BANDS:
            assert band.recommendations
            assert band.interpretation


class TestTopContributors:
    """Test contributor ranking."""

    def test_descending_order(self, bank):
        contributions = compute_contributions({'q1': 'often', 'q2': 'never', 'q3': 'always'}, bank)
        ranked = rank_top_contributors(contributions, bank)
        assert [c.question_id for c in ranked] == ['q1', 'q3', 'q2']
        assert ranked[0].question == 'Question one'
        assert ranked[0].action == 'Action one'
        assert ranked[0].contribution_weight == 1.5

    def test_ties_keep_bank_order(self, bank):
        # Answered in reverse bank order with identical contributions
        contributions = compute_contributions([('q3', 'often'), ('q2', 'often')], bank)
        ranked = rank_top_contributors(contributions, bank)
        assert [c.question_id for c in ranked] == ['q2', 'q3']

    def test_top_n_limit(self, bank):
        contributions = compute_contributions({q.question_id: 'always' for q in bank}, bank)
        ranked = rank_top_contributors(contributions, bank, top_n=2)
        assert [c.question_id for c in ranked] == ['q1', 'q2']

    def test_zero_contributions_still_listed(self, bank):
        contributions = compute_contributions({'q2': 'never'}, bank)
        ranked = rank_top_contributors(contributions, bank)
        assert len(ranked) == 1
        assert ranked[0].contribution_weight == 0.0

    def test_empty(self, bank):
        assert rank_top_contributors([], bank) == ()


class TestScoringEngine:
    """Test end-to-end engine behavior."""

    def test_basic_result(self, engine):
        result = engine.score({'q1': 'often', 'q2': 'never', 'q3': 'always'})
        assert result.normalized_score == 62.5
        assert result.fused_score is None
        assert result.effective_score == 62.5
        assert result.severity is Severity.HIGH
        assert result.severity_label == 'High Indicators'
        assert result.answered_count == 3
        assert len(result.top_contributors) == 3
        assert result.recommendations[0].startswith('IMPORTANT')

    def test_empty_answers_are_incomplete(self, engine):
        result = engine.score({})
        assert result.normalized_score == 0.0
        assert result.top_contributors == ()
        assert result.is_incomplete
        assert result.severity is Severity.LOW

    def test_family_history_not_applied_to_empty(self, engine):
        result = engine.score([], family_history=True)
        assert result.normalized_score == 0.0
        assert result.is_incomplete

    def test_deterministic(self, engine):
        answers = {'q1': 'sometimes', 'q2': 'often', 'q3': 'rarely'}
        prediction = {'prediction_score': 64.2, 'confidence': 0.8, 'features_detected': {'a': 2.0}}
        first = engine.score(answers, True, prediction)
        second = engine.score(answers, True, prediction)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_monotonic_in_each_answer(self):
        bank = QuestionBank('mono', [
            QuestionWeight('a', 'A', 1.7),
            QuestionWeight('b', 'B', 0.4),
            QuestionWeight('c', 'C', 2.3),
        ])
        engine = ScoringEngine(bank)
        base = {'a': 'rarely', 'b': 'often', 'c': 'sometimes'}

        for question_id in base:
            scores = []
            for value in SCALE:
                answers = dict(base, **{question_id: value})
                scores.append(engine.score(answers).normalized_score)
            assert scores == sorted(scores)

    def test_all_always_scores_100(self, engine, bank):
        result = engine.score({q.question_id: 'always' for q in bank})
        assert result.normalized_score == 100.0
        assert result.severity_label == 'Very High Indicators'

    def test_config_top_contributors(self, bank):
        engine = ScoringEngine(bank, {'scoring': {'top_contributors': 1}})
        result = engine.score({q.question_id: 'often' for q in bank})
        assert len(result.top_contributors) == 1

    def test_config_family_history_bonus(self, bank):
        engine = ScoringEngine(bank, {'scoring': {'family_history_bonus': 10.0}})
        result = engine.score({'q2': 'sometimes'}, family_history=True)
        assert result.normalized_score == 60.0

    def test_result_is_immutable(self, engine):
        result = engine.score({'q1': 'often'})
        with pytest.raises(Exception):
            result.normalized_score = 0.0

    def test_nested_prediction_is_immutable(self, engine):
        prediction = {'prediction_score': 60.0, 'confidence': 0.9, 'features_detected': {'a': 1.0}}
        result = engine.score({'q1': 'often'}, video_prediction=prediction)

        with pytest.raises(TypeError):
            result.video_prediction.features_detected['a'] = 99.0
        with pytest.raises(Exception):
            result.video_prediction.confidence = 0.1

        assert result.to_dict()['video_prediction']['features_detected'] == {'a': 1.0}
        assert hash(result) == hash(engine.score({'q1': 'often'}, video_prediction=prediction))

    def test_caller_dict_does_not_leak_into_result(self, engine):
        features = {'a': 1.0}
        result = engine.score(
            {'q1': 'often'},
            video_prediction={'prediction_score': 60.0, 'confidence': 0.9, 'features_detected': features},
        )
        features['a'] = 50.0
        assert result.video_prediction.features_detected['a'] == 1.0

    def test_calculate_score_matches_engine(self, bank, engine):
        answers = {'q1': 'rarely', 'q3': 'often'}
        assert calculate_score(answers, bank) == engine.score(answers)

    def test_to_dict_shape(self, engine):
        data = engine.score({'q1': 'often'}).to_dict()
        assert data['severity'] == 'high'
        assert data['video_prediction'] is None
        assert data['top_contributors'][0]['question'] == 'Question one'
        assert data['is_incomplete'] is False


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
