"""Score computation for survey responses.

Pure functions only: the caller supplies questions, options and answers and
receives totals, percentages, bands and quadrants.

Each question is worth at most ``MAX_MARKS_PER_QUESTION`` per dimension, so a
survey of N questions has a maximum of N * 5 for creativity and the same for
morality, independently for the present and future aspects.
"""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP
from decimal import Decimal
from typing import Any

MAX_MARKS_PER_QUESTION = 5

BAND_EARLY = "Early"
BAND_EMERGING = "Emerging"
BAND_LEADING = "Leading"

# (upper bound exclusive, label); the last label applies at or above 50.
SUBMISSION_BANDS: tuple[tuple[Decimal, str], ...] = (
    (Decimal("40"), BAND_EARLY),
    (Decimal("50"), BAND_EMERGING),
)
REPORT_BANDS: tuple[tuple[Decimal, str], ...] = (
    (Decimal("40"), BAND_EARLY),
    (Decimal("50"), BAND_EMERGING),
)

QUADRANT_HOPE_IN_ACTION = "Hope in Action (IGEN Zone)"
QUADRANT_UNBOUNDED_POWER = "Unbounded Power"
QUADRANT_SAFE_STAGNATION = "Safe Stagnation"
QUADRANT_EXTRACTION_ENGINE = "Extraction Engine"

QUADRANTS = (
    QUADRANT_HOPE_IN_ACTION,
    QUADRANT_UNBOUNDED_POWER,
    QUADRANT_SAFE_STAGNATION,
    QUADRANT_EXTRACTION_ENGINE,
)

_QUADRANT_THRESHOLD = Decimal("50")
_ONE_DECIMAL = Decimal("0.1")


def max_score(question_count: int) -> int:
    return max(int(question_count), 0) * MAX_MARKS_PER_QUESTION


def round_one_decimal(value: Decimal | float | int) -> Decimal:
    return Decimal(str(value)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)


def percentage(total: int, maximum: int) -> Decimal:
    """total / maximum as a percentage with one decimal, clamped to 0..100."""
    if maximum <= 0:
        return Decimal("0.0")
    raw = Decimal(total) / Decimal(maximum) * 100
    raw = min(max(raw, Decimal(0)), Decimal(100))
    return round_one_decimal(raw)


def completion_rate(completed: int, total: int) -> int:
    """Whole-number completion percentage, half-up."""
    if total <= 0:
        return 0
    raw = Decimal(completed) / Decimal(total) * 100
    return int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def classify_band(pct: Decimal | float, table=SUBMISSION_BANDS) -> str:
    value = Decimal(str(pct))
    for upper, label in table:
        if value < upper:
            return label
    return BAND_LEADING


def submission_band(pct: Decimal | float) -> str:
    return classify_band(pct, SUBMISSION_BANDS)


def report_band(pct: Decimal | float) -> str:
    return classify_band(pct, REPORT_BANDS)


def quadrant(creativity_pct: Decimal | float, morality_pct: Decimal | float) -> str:
    high_creativity = Decimal(str(creativity_pct)) >= _QUADRANT_THRESHOLD
    high_morality = Decimal(str(morality_pct)) >= _QUADRANT_THRESHOLD
    if high_creativity and high_morality:
        return QUADRANT_HOPE_IN_ACTION
    if high_creativity:
        return QUADRANT_UNBOUNDED_POWER
    if high_morality:
        return QUADRANT_SAFE_STAGNATION
    return QUADRANT_EXTRACTION_ENGINE


@dataclass(frozen=True)
class OptionMarks:
    creativity: int = 0
    morality: int = 0


@dataclass(frozen=True)
class ScoredAnswer:
    question_id: int
    question_number: str
    present_option_index: int | None
    present: OptionMarks
    future_option_index: int | None
    future: OptionMarks


@dataclass(frozen=True)
class AspectScore:
    creativity_total: int
    morality_total: int
    creativity_percentage: Decimal
    morality_percentage: Decimal
    creativity_band: str
    morality_band: str

    @property
    def quadrant(self) -> str:
        return quadrant(self.creativity_percentage, self.morality_percentage)

    def as_dict(self) -> dict[str, Any]:
        return {
            "creativity_total": self.creativity_total,
            "morality_total": self.morality_total,
            "creativity_percentage": float(self.creativity_percentage),
            "morality_percentage": float(self.morality_percentage),
            "creativity_band": self.creativity_band,
            "morality_band": self.morality_band,
            "quadrant": self.quadrant,
        }


@dataclass(frozen=True)
class ScoreCard:
    max_score: int
    present: AspectScore
    future: AspectScore
    answers: tuple[ScoredAnswer, ...] = ()

    def as_dict(self) -> dict[str, Any]:
        return {
            "max_score": self.max_score,
            "present": self.present.as_dict(),
            "future": self.future.as_dict(),
        }


def aspect_score(
    creativity_total: int,
    morality_total: int,
    maximum: int,
    band=submission_band,
) -> AspectScore:
    c_pct = percentage(creativity_total, maximum)
    m_pct = percentage(morality_total, maximum)
    return AspectScore(
        creativity_total=creativity_total,
        morality_total=morality_total,
        creativity_percentage=c_pct,
        morality_percentage=m_pct,
        creativity_band=band(c_pct),
        morality_band=band(m_pct),
    )


# question id -> {"number": str, "present": {index: OptionMarks}, "future": {...}}
OptionTable = Mapping[int, Mapping[str, Any]]


def _lookup(options: Mapping[int, OptionMarks], index: int | None) -> OptionMarks:
    if index is None:
        return OptionMarks()
    return options.get(index, OptionMarks())


def score_answers(
    option_table: OptionTable,
    answers: Iterable[Mapping[str, Any]],
) -> ScoreCard:
    """Score submitted option indexes against the survey's option marks.

    ``answers`` items carry ``question_id`` and optional
    ``present_option_index`` / ``future_option_index``. An index with no
    matching option contributes zero.
    """
    scored: list[ScoredAnswer] = []
    totals = {"pc": 0, "pm": 0, "fc": 0, "fm": 0}
    for answer in answers:
        question_id = int(answer["question_id"])
        entry = option_table.get(question_id) or {}
        p_idx = answer.get("present_option_index")
        f_idx = answer.get("future_option_index")
        present = _lookup(entry.get("present", {}), p_idx)
        future = _lookup(entry.get("future", {}), f_idx)
        totals["pc"] += present.creativity
        totals["pm"] += present.morality
        totals["fc"] += future.creativity
        totals["fm"] += future.morality
        scored.append(
            ScoredAnswer(
                question_id=question_id,
                question_number=str(entry.get("number", "")),
                present_option_index=p_idx,
                present=present,
                future_option_index=f_idx,
                future=future,
            )
        )

    maximum = max_score(len(option_table))
    return ScoreCard(
        max_score=maximum,
        present=aspect_score(totals["pc"], totals["pm"], maximum),
        future=aspect_score(totals["fc"], totals["fm"], maximum),
        answers=tuple(scored),
    )


def score_stored_marks(
    question_ids: Iterable[int],
    stored: Iterable[Mapping[str, Any]],
) -> ScoreCard:
    """Re-total stored per-answer marks for reporting.

    Answers whose question no longer belongs to the survey are ignored.
    """
    valid = set(question_ids)
    totals = {"pc": 0, "pm": 0, "fc": 0, "fm": 0}
    for row in stored:
        if row["question_id"] not in valid:
            continue
        totals["pc"] += int(row.get("present_creativity_marks") or 0)
        totals["pm"] += int(row.get("present_morality_marks") or 0)
        totals["fc"] += int(row.get("future_creativity_marks") or 0)
        totals["fm"] += int(row.get("future_morality_marks") or 0)

    maximum = max_score(len(valid))
    return ScoreCard(
        max_score=maximum,
        present=aspect_score(totals["pc"], totals["pm"], maximum, band=report_band),
        future=aspect_score(totals["fc"], totals["fm"], maximum, band=report_band),
    )
