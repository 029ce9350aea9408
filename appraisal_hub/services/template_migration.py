"""
Template schema migration.

Schema version 1 stored a flat ``questions`` list; version 2 stores
``categories`` each holding ordered ``items``. Payloads are upgraded once,
on the way in (create) or on first load of an old row, so the rest of the
code only ever sees the category shape.
"""
from collections import OrderedDict
from typing import Any, Dict, List

from appraisal_hub.core.ids import generate_id
from appraisal_hub.models.template import CURRENT_SCHEMA_VERSION, QuestionType

DEFAULT_CATEGORY_NAME = "Category"

# Retired question types and the type they map to
LEGACY_TYPE_MAP = {
    "rating-1-10": QuestionType.RATING.value,
}


def _plain(value: Any) -> Dict[str, Any]:
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    return dict(value)


def questions_to_categories(questions: List[Any]) -> List[Dict[str, Any]]:
    """Group legacy questions by ``category_name`` in first-appearance order."""
    grouped: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
    ordered = sorted((_plain(q) for q in questions), key=lambda q: q.get("order") or 0)
    for question in ordered:
        name = question.get("category_name") or DEFAULT_CATEGORY_NAME
        if name not in grouped:
            grouped[name] = {
                "id": generate_id(),
                "category_name": name,
                "items": [],
                "order": len(grouped),
            }
        category = grouped[name]
        item_type = question.get("type") or QuestionType.RATING.value
        category["items"].append({
            "id": question.get("id") or generate_id(),
            "text": question.get("text", ""),
            "category_name": None,
            "type": LEGACY_TYPE_MAP.get(item_type, item_type),
            "weight": float(question.get("weight") or 0),
            "required": bool(question.get("required", True)),
            "options": question.get("options"),
            "order": len(category["items"]),
        })
    return list(grouped.values())


def normalize_categories(categories: List[Any]) -> List[Dict[str, Any]]:
    """Fill missing ids and renumber ``order`` so stored categories are canonical."""
    normalized = []
    ordered = sorted((_plain(c) for c in categories), key=lambda c: c.get("order") or 0)
    for position, category in enumerate(ordered):
        items = sorted((_plain(i) for i in category.get("items") or []), key=lambda i: i.get("order") or 0)
        normalized.append({
            **category,
            "id": category.get("id") or generate_id(),
            "order": position,
            "items": [
                {
                    **item,
                    "id": item.get("id") or generate_id(),
                    "type": LEGACY_TYPE_MAP.get(item.get("type"), item.get("type")),
                    "order": index,
                }
                for index, item in enumerate(items)
            ],
        })
    return normalized


def migrate_template_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``payload`` in the current schema version."""
    migrated = dict(payload)
    categories = migrated.get("categories") or []
    questions = migrated.get("questions") or []
    if not categories and questions:
        categories = questions_to_categories(questions)
    migrated["categories"] = normalize_categories(categories)
    migrated["questions"] = None
    migrated["schema_version"] = CURRENT_SCHEMA_VERSION
    return migrated


def needs_migration(template: Any) -> bool:
    version = getattr(template, "schema_version", None) or 1
    return version < CURRENT_SCHEMA_VERSION or (not template.categories and bool(template.questions))
