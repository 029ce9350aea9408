"""
Narrative performance summaries.

Aggregates every completed appraisal of one employee (optionally within a
single review period) into per-question percentages, then picks strengths
(>= 75%, best three) and improvement areas (< 75%, weakest three) and
writes a short narrative. Phrases are chosen by position so the same data
always produces the same text.
"""
from collections import OrderedDict, defaultdict
from typing import Dict, List, Optional, Tuple

from appraisal_hub.core.config import settings
from appraisal_hub.core.exceptions import FeatureDisabledError, NotFoundError
from appraisal_hub.models.appraisal import Appraisal
from appraisal_hub.models.summary import PerformanceSummary
from appraisal_hub.models.template import QuestionType, Template
from appraisal_hub.services.appraisal_service import AppraisalService
from appraisal_hub.services.base import BaseService
from appraisal_hub.services.employee_service import EmployeeService
from appraisal_hub.services.scoring import MAX_RATING, flatten_items, is_answered, parse_rating, score_percentage

ALL_PERIODS = "all"
STRENGTH_THRESHOLD = 75.0
MAX_POINTS = 3
NAME_LIMIT = 60

STRENGTH_PHRASES = (
    "demonstrates exceptional",
    "shows strong",
    "excels in",
    "displays outstanding",
    "has excellent",
    "performs exceptionally well in",
)

IMPROVEMENT_PHRASES = (
    "shows room for improvement in",
    "would benefit from enhancing",
    "currently performing below benchmark in",
    "has opportunities to strengthen",
    "could improve",
)

# Highest matching threshold wins
PERFORMANCE_LEVELS = (
    (90, "excellent performance"),
    (75, "strong performance"),
    (60, "satisfactory performance"),
    (0, "performance that requires attention"),
)

NO_APPRAISALS = "No completed appraisals available for this employee."
NO_STRENGTHS = "No significant strengths identified"
NO_IMPROVEMENTS = "No specific improvement areas identified"


def performance_level(percentage: float) -> str:
    for lower, text in PERFORMANCE_LEVELS:
        if percentage >= lower:
            return text
    return PERFORMANCE_LEVELS[-1][1]


def _display_name(category: str, text: str) -> str:
    name = f"{category}: {text[:50]}" if category else text[:50]
    return name if len(name) <= NAME_LIMIT else name[:NAME_LIMIT] + "..."


def question_percentages(appraisals: List[Appraisal], templates: Dict[str, Template]) -> List[Tuple[str, float]]:
    """``(display name, percentage)`` per distinct question text, best first."""
    totals: "OrderedDict[str, Dict[str, float]]" = OrderedDict()
    names: Dict[str, str] = {}
    for appraisal in appraisals:
        template = templates.get(appraisal.template_id)
        if template is None:
            continue
        answers = {}
        for response in appraisal.responses or []:
            answers.setdefault(response.get("question_id"), response.get("value"))
        for item in flatten_items(template.categories):
            if item["id"] not in answers:
                continue
            value = answers[item["id"]]
            weight = item["weight"]
            if item["type"] == QuestionType.RATING.value:
                rating = parse_rating(value)
                if rating is None:
                    continue
                earned = rating / MAX_RATING * weight
            else:
                earned = weight if is_answered(value) else 0.0
            key = item["text"].lower()[:100]
            names.setdefault(key, _display_name(item.get("category_name") or item["category"], item["text"]))
            bucket = totals.setdefault(key, {"total": 0.0, "max": 0.0})
            bucket["total"] += earned
            bucket["max"] += weight

    scored = [(names[key], score_percentage(data["total"], data["max"])) for key, data in totals.items()]
    # Stable sort keeps first-seen order among ties
    return sorted(scored, key=lambda entry: -entry[1])


def describe_points(scored: List[Tuple[str, float]], phrases: Tuple[str, ...]) -> List[str]:
    return [
        f"{phrases[position % len(phrases)]} {name} ({round(percentage)}%)"
        for position, (name, percentage) in enumerate(scored)
    ]


def build_narrative(name: str, percentage: int, strengths: List[str], improvements: List[str]) -> str:
    parts = [
        f"{name} demonstrates {performance_level(percentage)}, achieving {percentage}% "
        f"of the total possible score across all appraisals."
    ]
    if strengths:
        parts.append(f"Key strengths include {' and '.join(strengths[:2])}.")
    if improvements:
        parts.append(f"Areas for development include {' and '.join(improvements[:2])}.")
    expectation = "meets" if percentage >= 75 else "is working towards"
    if percentage >= 90:
        standard = "exceeds"
    elif percentage >= 60:
        standard = "meets"
    else:
        standard = "would benefit from additional support to meet"
    parts.append(f"Overall, {name} {expectation} performance expectations and {standard} organizational standards.")
    return " ".join(parts)


class SummaryService(BaseService):
    def _require_enabled(self):
        if not settings.enable_summaries:
            raise FeatureDisabledError("Performance summaries")

    def generate(self, employee_id: str, review_period_id: Optional[str] = None) -> PerformanceSummary:
        """Compute the summary and store it, replacing any earlier one for the same key."""
        self._require_enabled()
        employee = EmployeeService(self.db).get(employee_id)
        appraisals = [
            a for a in AppraisalService(self.db).completed(review_period_id)
            if a.employee_id == employee_id
        ]
        period_key = review_period_id or ALL_PERIODS

        total_score = sum(a.score for a in appraisals)
        total_max = sum(a.max_score for a in appraisals)
        percentage = round(score_percentage(total_score, total_max))

        breakdown: Dict[str, Dict[str, float]] = defaultdict(lambda: {"score": 0.0, "max_score": 0.0})
        for appraisal in appraisals:
            entry = breakdown[appraisal.relationship_type or "custom"]
            entry["score"] += appraisal.score
            entry["max_score"] += appraisal.max_score

        if appraisals:
            template_ids = {a.template_id for a in appraisals}
            templates = {
                t.id: t for t in self.db.query(Template).filter(Template.id.in_(template_ids)).all()
            }
            scored = question_percentages(appraisals, templates)
            strong = [entry for entry in scored if entry[1] >= STRENGTH_THRESHOLD][:MAX_POINTS]
            weak = [entry for entry in scored if entry[1] < STRENGTH_THRESHOLD][-MAX_POINTS:][::-1]
            strengths = describe_points(strong, STRENGTH_PHRASES)
            improvements = describe_points(weak, IMPROVEMENT_PHRASES)
            narrative = build_narrative(employee.name, percentage, strengths, improvements)
        else:
            strengths, improvements, narrative = [], [], NO_APPRAISALS

        summary = self.db.get(PerformanceSummary, (employee_id, period_key))
        if summary is None:
            summary = PerformanceSummary(employee_id=employee_id, period=period_key)
            self.db.add(summary)
        summary.total_score = round(total_score, 2)
        summary.max_score = round(total_max, 2)
        summary.percentage = percentage
        summary.strengths = strengths or [NO_STRENGTHS]
        summary.improvements = improvements or [NO_IMPROVEMENTS]
        summary.narrative = narrative
        summary.breakdown = [
            {"type": kind, "score": round(v["score"], 2), "max_score": round(v["max_score"], 2)}
            for kind, v in sorted(breakdown.items())
        ]
        self.commit()
        self.db.refresh(summary)
        self.log_info(f"Generated summary for {employee_id}", period=period_key, percentage=percentage)
        return summary

    def get(self, employee_id: str, review_period_id: Optional[str] = None) -> PerformanceSummary:
        summary = self.db.get(PerformanceSummary, (employee_id, review_period_id or ALL_PERIODS))
        if summary is None:
            raise NotFoundError("Performance summary", employee_id)
        return summary
