"""
Unit tests for the Riddle model validation rules
"""

import math

import pytest
from pydantic import ValidationError

from riddle_access.models import Riddle


def test_valid_riddle_keeps_fields():
    """Test valid riddle keeps fields"""
    riddle = Riddle(id=1, question="What has keys?", answer="A piano", category="object", popularity=42)

    assert riddle.id == 1
    assert riddle.question == "What has keys?"
    assert riddle.answer == "A piano"
    assert riddle.category == "object"
    assert riddle.popularity == 42


@pytest.mark.parametrize("question", ["", "   ", None, 123])
def test_invalid_question_rejected(question):
    """Test invalid question rejected"""
    with pytest.raises(ValidationError):
        Riddle(question=question, answer="a")


@pytest.mark.parametrize("answer", ["", "\n\t", None, ["a"]])
def test_invalid_answer_rejected(answer):
    """Test invalid answer rejected"""
    with pytest.raises(ValidationError):
        Riddle(question="q", answer=answer)


@pytest.mark.parametrize("value", [None, "12", True, math.nan, math.inf, {"n": 1}])
def test_non_numeric_popularity_defaults_to_zero(value):
    """Test non numeric popularity defaults to zero"""
    riddle = Riddle(question="q", answer="a", popularity=value)
    assert riddle.popularity == 0


def test_missing_optional_fields_use_defaults():
    """Test missing optional fields use defaults"""
    riddle = Riddle(question="q", answer="a")

    assert riddle.id is None
    assert riddle.category == ""
    assert riddle.popularity == 0


def test_non_string_category_becomes_empty():
    """Test non string category becomes empty"""
    assert Riddle(question="q", answer="a", category=7).category == ""


def test_extra_fields_ignored_and_model_frozen():
    """Test extra fields ignored and model frozen"""
    riddle = Riddle.model_validate({"question": "q", "answer": "a", "type": "legacy"})

    assert not hasattr(riddle, "type")
    with pytest.raises(ValidationError):
        riddle.question = "changed"


def test_popularity_beyond_float_range_defaults_to_zero():
    """Test that a JSON integer too large for a float scores 0"""
    riddle = Riddle(question="q", answer="a", popularity=10 ** 400)
    assert riddle.popularity == 0

    negative = Riddle(question="q", answer="a", popularity=-(10 ** 400))
    assert negative.popularity == 0


def test_to_dict_round_trips_fields():
    """Test that to_dict exposes every field"""
    riddle = Riddle(id="r1", question="q", answer="a", category="c", popularity=3)

    assert riddle.to_dict() == {"id": "r1", "question": "q", "answer": "a", "category": "c", "popularity": 3}
