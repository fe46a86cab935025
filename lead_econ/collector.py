# lead_econ/collector.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .cpl import CPLInputs
from .currencies import CURRENCIES, DEFAULT_CURRENCY
from .dates import DateProvider, month_defaults
from .errors import InputValidationError
from .lvr import LVRInputs

logger = logging.getLogger(__name__)

NUMBERS_ONLY = "Please use numbers only."
WHOLE_NUMBER = "Please enter a whole number."
REQUIRED = "This value is required."


@dataclass(frozen=True)
class Question:
    key: str
    label: str
    optional: bool = False
    kind: str = "number"  # "number" | "integer" | "currency"


CPL_QUESTIONS: Tuple[Question, ...] = (
    Question("currency", "Please select your currency", kind="currency"),
    Question("average_revenue", "What is the average revenue per new customer?"),
    Question("gross_margin_percent", "What is the client gross profit margin (%)?"),
    Question("conversion_rate_percent", "What is the client lead to sale conversion rate (%)?"),
    Question(
        "target_profit_margin_percent",
        "What profit margin does the client want to keep from each sale? (%)",
        optional=True,
    ),
    Question("expected_cost_per_lead", "What is your (the agency) expected actual cost per lead?"),
)

LVR_QUESTIONS: Tuple[Question, ...] = (
    Question("currency", "Please select your currency", kind="currency"),
    Question("last_month_leads", "How many leads did you get last month?"),
    Question("this_month_leads", "How many leads have you gotten so far this month?"),
    Question("day_of_month", "What day of the month is it?", optional=True, kind="integer"),
    Question("total_days_in_month", "How many days are in this month?", optional=True, kind="integer"),
    Question("conversion_rate_percent", "What's your lead-to-sale conversion rate (%)?"),
    Question("ltv", "What's your average lifetime value (LTV) per customer?"),
    Question("monthly_lead_goal", "What's your monthly lead goal? (Optional)", optional=True),
)


# -----------------------
# Field parsers
# -----------------------
def _is_blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and raw.strip() == "")


def parse_number(raw: Any, field: str, optional: bool = False) -> Optional[float]:
    """
    Parse one numeric answer.

    - blank + optional -> None (caller applies its default)
    - blank + required -> InputValidationError
    - non-numeric, NaN/inf or negative -> InputValidationError("Please use numbers only.")
    """
    if _is_blank(raw):
        if optional:
            return None
        raise InputValidationError(field, REQUIRED)

    if isinstance(raw, bool):
        raise InputValidationError(field, NUMBERS_ONLY)

    try:
        value = float(str(raw).strip()) if isinstance(raw, str) else float(raw)
    except (TypeError, ValueError):
        raise InputValidationError(field, NUMBERS_ONLY) from None

    if not math.isfinite(value) or value < 0:
        raise InputValidationError(field, NUMBERS_ONLY)
    return value


def parse_integer(raw: Any, field: str, optional: bool = False) -> Optional[int]:
    value = parse_number(raw, field, optional=optional)
    if value is None:
        return None
    if not float(value).is_integer():
        raise InputValidationError(field, WHOLE_NUMBER)
    return int(value)


def parse_number_list(raws: Iterable[Any], field: str) -> List[float]:
    """Every item must be a finite number >= 0; the list may not be empty."""
    values = [parse_number(raw, field) for raw in raws]
    if not values:
        raise InputValidationError(field, REQUIRED)
    return values


def parse_currency(raw: Any, default: str = DEFAULT_CURRENCY) -> str:
    if _is_blank(raw):
        return default
    code = str(raw).strip().upper()
    if code not in CURRENCIES:
        raise InputValidationError("currency", f"Unknown currency '{raw}'. Use one of {sorted(CURRENCIES)}.")
    return code


def parse_answer(question: Question, raw: Any, default_currency: str = DEFAULT_CURRENCY) -> Any:
    if question.kind == "currency":
        return parse_currency(raw, default=default_currency)
    if question.kind == "integer":
        return parse_integer(raw, question.key, optional=question.optional)
    return parse_number(raw, question.key, optional=question.optional)


def _parse_all(
    questions: Tuple[Question, ...],
    answers: Mapping[str, Any],
    default_currency: str,
) -> Dict[str, Any]:
    return {q.key: parse_answer(q, answers.get(q.key), default_currency) for q in questions}


# -----------------------
# Validation -> inputs
# -----------------------
def collect_cpl_inputs(answers: Mapping[str, Any], default_currency: str = DEFAULT_CURRENCY) -> CPLInputs:
    """
    Validate raw CPL answers (strings or numbers keyed by field name) and build CPLInputs.
    An empty target profit margin means 0.
    """
    values = _parse_all(CPL_QUESTIONS, answers, default_currency)
    if values["target_profit_margin_percent"] is None:
        values["target_profit_margin_percent"] = 0.0
    return CPLInputs(**values)


def collect_lvr_inputs(
    answers: Mapping[str, Any],
    today: Optional[DateProvider] = None,
    default_currency: str = DEFAULT_CURRENCY,
) -> LVRInputs:
    """
    Validate raw LVR answers and build LVRInputs.

    day_of_month / total_days_in_month default to the provider's current date
    when left blank. An explicit 0 is kept, so compute_lvr reports it.
    A blank goal means no goal.
    """
    values = _parse_all(LVR_QUESTIONS, answers, default_currency)

    if values["day_of_month"] is None or values["total_days_in_month"] is None:
        day, total = month_defaults(today)
        if values["day_of_month"] is None:
            values["day_of_month"] = day
        if values["total_days_in_month"] is None:
            values["total_days_in_month"] = total

    if values["total_days_in_month"] < values["day_of_month"]:
        logger.debug(
            "total_days_in_month=%s is before day_of_month=%s; daily pace will be omitted",
            values["total_days_in_month"], values["day_of_month"],
        )
    return LVRInputs(**values)


# -----------------------
# Step-by-step session
# -----------------------
class CalculatorSession:
    """
    Walks a question list one answer at a time (the "press Enter to advance" flow).

    Each answer is validated when submitted; a rejected answer keeps the session
    on the same step and exposes the message via `error`. Once every question is
    answered, `inputs()` runs the full collect pipeline.
    """

    def __init__(
        self,
        questions: Tuple[Question, ...],
        collect: Callable[[Mapping[str, Any]], Any],
        defaults: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.questions = questions
        self._collect = collect
        self.defaults: Dict[str, Any] = dict(defaults or {})
        self.reset()

    def reset(self) -> None:
        self.step = 0
        self.answers: Dict[str, Any] = {}
        self.error: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.step >= len(self.questions)

    @property
    def current_question(self) -> Optional[Question]:
        if self.is_complete:
            return None
        return self.questions[self.step]

    def prompt(self) -> str:
        q = self.current_question
        if q is None:
            return ""
        default = self.defaults.get(q.key)
        if q.optional and default is not None:
            return f"{q.label} (Default is {default})"
        return q.label

    def submit(self, raw: Any) -> bool:
        """Validate and store one answer. Returns True when the session advanced."""
        q = self.current_question
        if q is None:
            return False
        try:
            parse_answer(q, raw)
        except InputValidationError as e:
            self.error = e.message
            return False

        self.answers[q.key] = raw
        self.step += 1
        self.error = None
        return True

    def inputs(self) -> Any:
        if not self.is_complete:
            raise RuntimeError(f"Session incomplete: {len(self.questions) - self.step} question(s) left")
        return self._collect(self.answers)


def cpl_session(default_currency: str = DEFAULT_CURRENCY) -> CalculatorSession:
    return CalculatorSession(
        CPL_QUESTIONS,
        lambda answers: collect_cpl_inputs(answers, default_currency=default_currency),
        defaults={"currency": default_currency},
    )


def lvr_session(today: Optional[DateProvider] = None, default_currency: str = DEFAULT_CURRENCY) -> CalculatorSession:
    day, total = month_defaults(today)
    return CalculatorSession(
        LVR_QUESTIONS,
        lambda answers: collect_lvr_inputs(answers, today=today, default_currency=default_currency),
        defaults={"currency": default_currency, "day_of_month": day, "total_days_in_month": total},
    )
