"""
Question banks: weights, domains and recommended actions per question.

Each respondent role is served one bank:
- individual: self-report items
- parent: caregiver-report items (also used for clinicians)

A bank is ordered. A question's position in its bank is the tie-breaker when
two questions contribute equally to a score, so reordering a bank changes
which actions are surfaced first.

Banks are configuration data. They are loaded once, never mutated, and passed
into the scoring engine explicitly so tests can inject synthetic banks.
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Tuple

from utils.config_loader import DEFAULT_QUESTION_BANKS, load_config
from utils.numeric import is_finite_number

from .answers import AnswerValue, coerce_answers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuestionWeight:
    """
    Static scoring data for one question.

    Attributes:
        question_id: Unique id within the bank (e.g. 'par_7')
        text: Question text shown to the respondent
        weight: Positive weight of the question in the normalized score
        domain: Behavioral domain label (e.g. 'social_communication')
        action: Recommended action shown when the question is a top contributor
    """
    question_id: str
    text: str
    weight: float
    domain: str = "general"
    action: str = ""


class QuestionBank:
    """
    Ordered, read-only collection of QuestionWeight.

    Usage:
        bank = QuestionBank('parent', [QuestionWeight('par_1', 'Text', 1.5)])
        bank.get('par_1').weight
        bank.position('par_1')
    """

    def __init__(self, name: str, questions: Sequence[QuestionWeight]):
        self.name = name
        self._questions: Tuple[QuestionWeight, ...] = tuple(questions)
        self._by_id = MappingProxyType({q.question_id: q for q in self._questions})
        self._positions = MappingProxyType(
            {q.question_id: i for i, q in enumerate(self._questions)}
        )

        if len(self._by_id) != len(self._questions):
            raise ValueError(f"Question bank '{name}' contains duplicate question ids")

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self) -> Iterator[QuestionWeight]:
        return iter(self._questions)

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._by_id

    def __repr__(self) -> str:
        return f"QuestionBank(name={self.name!r}, questions={len(self)})"

    @property
    def questions(self) -> Tuple[QuestionWeight, ...]:
        return self._questions

    def get(self, question_id: str) -> Optional[QuestionWeight]:
        return self._by_id.get(question_id)

    def position(self, question_id: str) -> int:
        """Index of the question in the bank; unknown ids sort last."""
        return self._positions.get(question_id, len(self._questions))

    @property
    def total_weight(self) -> float:
        return math.fsum(q.weight for q in self._questions)

    @classmethod
    def from_config(cls, name: str, entries: Sequence[Mapping[str, Any]]) -> 'QuestionBank':
        """
        Build a bank from a list of config mappings.

        Each entry needs 'id', 'text' and 'weight'; 'domain' and 'action' are
        optional.

        Raises:
            ValueError: If an entry is missing fields or has a non-positive weight
        """
        questions = []
        for i, entry in enumerate(entries or []):
            if not isinstance(entry, Mapping):
                raise ValueError(f"Bank '{name}' entry {i} is not a mapping")

            question_id = entry.get('id')
            if not question_id:
                raise ValueError(f"Bank '{name}' entry {i} has no id")

            weight = entry.get('weight')
            if not is_finite_number(weight) or weight <= 0:
                raise ValueError(
                    f"Bank '{name}' question {question_id} has invalid weight {weight!r}"
                )

            questions.append(QuestionWeight(
                question_id=str(question_id),
                text=str(entry.get('text', question_id)),
                weight=float(weight),
                domain=str(entry.get('domain', 'general')),
                action=str(entry.get('action', '')),
            ))

        return cls(name, questions)


@dataclass(frozen=True)
class FamilyHistoryRule:
    """Answer that signals hereditary risk for a role."""
    question_id: str
    trigger: AnswerValue = AnswerValue.ALWAYS


@dataclass(frozen=True)
class RoleProfile:
    """Question bank and family-history rule used for one respondent role."""
    role: str
    bank: QuestionBank
    family_history: Optional[FamilyHistoryRule] = None


class QuestionBankRegistry:
    """
    Role-indexed view over the loaded question banks.

    Usage:
        registry = load_question_banks()
        profile = registry.for_role('parent')
    """

    def __init__(self, banks: Dict[str, QuestionBank], roles: Dict[str, RoleProfile]):
        self.banks = MappingProxyType(dict(banks))
        self.roles = MappingProxyType(dict(roles))

    def for_role(self, role: str) -> RoleProfile:
        """
        Raises:
            KeyError: If the role is not configured
        """
        try:
            return self.roles[role]
        except KeyError:
            raise KeyError(
                f"Unknown role '{role}'. Configured roles: {sorted(self.roles)}"
            ) from None

    def bank_for_role(self, role: str) -> QuestionBank:
        return self.for_role(role).bank


def has_family_history(profile: RoleProfile, answers) -> bool:
    """
    Derive the family-history flag from a role's trigger answer.

    Args:
        profile: Role profile with an optional family-history rule
        answers: Any answer collection accepted by coerce_answers

    Returns:
        True only if the role has a rule and the trigger answer was given
    """
    rule = profile.family_history
    if rule is None:
        return False

    for answer in coerce_answers(answers):
        if answer.question_id == rule.question_id:
            return answer.value is rule.trigger

    return False


def build_registry(config: Mapping[str, Any]) -> QuestionBankRegistry:
    """
    Build the role registry from a parsed question-bank config.

    Expected shape:
        banks:
          parent:
            - {id: par_1, text: ..., weight: 1.5, domain: ..., action: ...}
        roles:
          parent: {bank: parent, family_history: {question_id: par_20, answer: always}}

    Raises:
        ValueError: On missing banks, unknown bank references or bad triggers
    """
    bank_entries = config.get('banks') or {}
    if not bank_entries:
        raise ValueError("Question bank config defines no banks")

    banks = {
        name: QuestionBank.from_config(name, entries)
        for name, entries in bank_entries.items()
    }

    role_entries = config.get('roles') or {name: {'bank': name} for name in banks}
    roles = {}
    for role, role_config in role_entries.items():
        role_config = role_config or {}
        bank_name = role_config.get('bank', role)
        if bank_name not in banks:
            raise ValueError(f"Role '{role}' references unknown bank '{bank_name}'")
        bank = banks[bank_name]

        rule = None
        fh_config = role_config.get('family_history')
        if fh_config:
            question_id = fh_config.get('question_id')
            if question_id not in bank:
                raise ValueError(
                    f"Role '{role}' family-history question {question_id!r} "
                    f"is not in bank '{bank_name}'"
                )
            trigger = AnswerValue.coerce(fh_config.get('answer', 'always'))
            if trigger is None:
                raise ValueError(
                    f"Role '{role}' family-history answer {fh_config.get('answer')!r} is not on the scale"
                )
            rule = FamilyHistoryRule(question_id=question_id, trigger=trigger)

        roles[role] = RoleProfile(role=role, bank=bank, family_history=rule)

    logger.info(
        f"Question banks loaded: "
        f"{', '.join(f'{name}={len(bank)}' for name, bank in banks.items())}; "
        f"roles={sorted(roles)}"
    )

    return QuestionBankRegistry(banks, roles)


def load_question_banks(config_path=None) -> QuestionBankRegistry:
    """
    Load question banks and the role mapping from YAML.

    Args:
        config_path: Path to the bank YAML (defaults to configs/question_banks.yaml)

    Returns:
        QuestionBankRegistry
    """
    path = Path(config_path) if config_path else DEFAULT_QUESTION_BANKS
    return build_registry(load_config(path))

