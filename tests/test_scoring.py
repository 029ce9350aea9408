import pytest

from appraisal_hub.services.scoring import (
    calculate_score,
    check_template_weights,
    flatten_items,
    parse_rating,
    validate_template_weights,
)
from appraisal_hub.core.exceptions import TemplateWeightError

ITEMS = [
    {"id": "q1", "type": "rating-1-5", "weight": 60},
    {"id": "q2", "type": "text", "weight": 40},
]


def test_rating_and_text_scenario():
    result = calculate_score(
        [{"question_id": "q1", "value": 4}, {"question_id": "q2", "value": "good job"}],
        ITEMS,
    )
    assert result.score == 440
    assert result.max_score == 500
    assert result.percentage == pytest.approx(88.0)


@pytest.mark.parametrize("value", [0, 6, -1, "abc", None, 3.5, True])
def test_out_of_range_or_non_numeric_rating_is_ignored(value):
    result = calculate_score([{"question_id": "q1", "value": value}], ITEMS[:1])
    assert result.score == 0
    assert result.max_score == 0


@pytest.mark.parametrize("value,expected", [(1, 60), (5, 300), ("3", 180), (2.0, 120)])
def test_valid_ratings_contribute_rating_times_weight(value, expected):
    result = calculate_score([{"question_id": "q1", "value": value}], ITEMS[:1])
    assert result.score == expected
    assert result.max_score == 300


@pytest.mark.parametrize("value", ["", "   ", None])
def test_blank_text_contributes_nothing(value):
    result = calculate_score([{"question_id": "q2", "value": value}], ITEMS[1:])
    assert result.score == 0
    assert result.max_score == 0


def test_multiple_choice_answer_counts_as_full_marks():
    items = [{"id": "mc", "type": "multiple-choice", "weight": 25}]
    result = calculate_score([{"question_id": "mc", "value": "Often"}], items)
    assert result.score == 125
    assert result.max_score == 125


def test_first_answer_wins_for_duplicate_question():
    result = calculate_score(
        [{"question_id": "q1", "value": 2}, {"question_id": "q1", "value": 5}],
        ITEMS[:1],
    )
    assert result.score == 120


def test_unanswered_questions_are_left_out():
    result = calculate_score([], ITEMS)
    assert result.score == 0
    assert result.max_score == 0
    assert result.percentage == 0.0
    assert result.details == []


def test_parse_rating_rejects_fractional_values():
    assert parse_rating(4.5) is None
    assert parse_rating("4.5") is None
    assert parse_rating(" 4 ") == 4


@pytest.mark.parametrize("value", [4, 4.0, "4", "4.0", " 4.0 "])
def test_whole_ratings_read_the_same_as_number_or_text(value):
    assert parse_rating(value) == 4


@pytest.mark.parametrize("value", ["nan", "inf", "", "four", True, None, 0, "6.0"])
def test_non_ratings_are_ignored(value):
    assert parse_rating(value) is None


def test_flatten_items_follows_category_and_item_order():
    categories = [
        {"category_name": "B", "order": 1, "items": [{"id": "b1", "type": "text", "weight": 50, "order": 0}]},
        {"category_name": "A", "order": 0, "items": [
            {"id": "a2", "type": "text", "weight": 25, "order": 1},
            {"id": "a1", "type": "rating-1-5", "weight": 25, "order": 0},
        ]},
    ]
    assert [item["id"] for item in flatten_items(categories)] == ["a1", "a2", "b1"]


@pytest.mark.parametrize("weights,valid", [
    ([50, 50], True),
    ([33.33, 33.33, 33.34], True),
    ([99.995], True),
    ([99.99], True),
    ([100.01], True),
    ([60, 39.99], True),
    ([99.989], False),
    ([100.011], False),
    ([50, 49.98], False),
    ([60, 40.02], False),
])
def test_weight_rule(weights, valid):
    categories = [{
        "category_name": "All",
        "items": [{"id": f"i{n}", "type": "text", "weight": w} for n, w in enumerate(weights)],
    }]
    assert check_template_weights(categories).valid is valid


def test_weight_error_reports_shortfall():
    categories = [{"category_name": "All", "items": [{"id": "x", "type": "text", "weight": 90}]}]
    with pytest.raises(TemplateWeightError) as exc_info:
        validate_template_weights(categories)
    assert exc_info.value.details["difference"] == -10
    assert "short" in exc_info.value.message
