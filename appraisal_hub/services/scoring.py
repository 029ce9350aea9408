"""
Scoring engine.

Pure functions that turn a template's weighted items plus a set of
responses into ``score`` / ``max_score``. Nothing here touches the
database.

Per-item rules:
- ``rating-1-5``: an integer rating r in [1, 5] adds ``r * weight`` to the
  score and ``5 * weight`` to the max score. Anything else is skipped on
  both sides (never counted as zero).
- ``text`` and ``multiple-choice``: a non-blank answer adds ``5 * weight``
  to both sides; a blank or missing answer adds nothing.
"""
from typing import Any, Dict, Iterable, List, Mapping, Optional

from appraisal_hub.core.config import settings
from appraisal_hub.core.exceptions import TemplateWeightError
from appraisal_hub.models.template import QuestionType
from appraisal_hub.schemas.appraisal import ScoreDetail, ScoreResult
from appraisal_hub.schemas.template import WeightCheck

MAX_RATING = settings.scoring.max_rating
EXPECTED_TOTAL_WEIGHT = 100.0


def _field(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _type_value(item_type: Any) -> str:
    return getattr(item_type, "value", item_type)


def parse_rating(value: Any) -> Optional[int]:
    """Integer rating in [1, MAX_RATING], or None when the value is not one."""
    if value is None or isinstance(value, bool):
        return None
    # "4", "4.0" and 4.0 all read as 4; fractions never do
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    elif not isinstance(value, int):
        return None
    return value if 1 <= value <= MAX_RATING else None


def is_answered(value: Any) -> bool:
    return value is not None and str(value).strip() != ""


def calculate_score(responses: Iterable[Any], items: Iterable[Any]) -> ScoreResult:
    """
    Score one submission.

    ``responses`` are ``{question_id, value}`` records, ``items`` are
    ``{id, type, weight}`` records (dicts or objects). When the same
    question is answered twice the first answer wins.
    """
    answers: Dict[str, Any] = {}
    for response in responses:
        answers.setdefault(_field(response, "question_id"), _field(response, "value"))

    score = 0.0
    max_score = 0.0
    details: List[ScoreDetail] = []

    for item in items:
        item_id = _field(item, "id")
        weight = float(_field(item, "weight", 0) or 0)
        item_type = _type_value(_field(item, "type"))
        if item_id not in answers:
            continue
        value = answers[item_id]

        if item_type == QuestionType.RATING.value:
            rating = parse_rating(value)
            if rating is None:
                continue
            weight_score = rating * weight
        elif item_type in (QuestionType.TEXT.value, QuestionType.MULTIPLE_CHOICE.value):
            if not is_answered(value):
                continue
            weight_score = MAX_RATING * weight
        else:
            continue

        score += weight_score
        max_score += MAX_RATING * weight
        details.append(ScoreDetail(
            question_id=item_id,
            weight_score=weight_score,
            percentage_score=weight_score / MAX_RATING,
        ))

    return ScoreResult(score=round(score, 2), max_score=round(max_score, 2), details=details)


def score_percentage(score: float, max_score: float) -> float:
    if max_score <= 0:
        return 0.0
    return (score / max_score) * 100


def flatten_items(categories: Iterable[Any]) -> List[Dict[str, Any]]:
    """Canonical category list -> ordered flat item dicts."""
    flat: List[Dict[str, Any]] = []
    ordered = sorted(categories or [], key=lambda c: _field(c, "order", 0) or 0)
    for category in ordered:
        items = sorted(_field(category, "items", []) or [], key=lambda i: _field(i, "order", 0) or 0)
        for item in items:
            flat.append({
                "id": _field(item, "id"),
                "text": _field(item, "text", ""),
                "type": _type_value(_field(item, "type")),
                "weight": float(_field(item, "weight", 0) or 0),
                "required": bool(_field(item, "required", False)),
                "options": _field(item, "options"),
                "category": _field(category, "category_name", ""),
                "category_name": _field(item, "category_name"),
            })
    return flat


def total_weight(categories: Iterable[Any]) -> float:
    return sum(item["weight"] for item in flatten_items(categories))


def check_template_weights(categories: Iterable[Any], tolerance: Optional[float] = None) -> WeightCheck:
    tolerance = settings.scoring.weight_tolerance if tolerance is None else tolerance
    total = round(total_weight(categories), 4)
    difference = round(total - EXPECTED_TOTAL_WEIGHT, 4)
    return WeightCheck(total_weight=total, valid=abs(difference) <= tolerance, difference=difference)


def validate_template_weights(categories: Iterable[Any], tolerance: Optional[float] = None) -> float:
    """Raise TemplateWeightError unless item weights sum to 100 within tolerance."""
    check = check_template_weights(categories, tolerance)
    if not check.valid:
        raise TemplateWeightError(check.total_weight, EXPECTED_TOTAL_WEIGHT)
    return check.total_weight
