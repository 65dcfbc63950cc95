"""
Unit tests for DedupRegistry
"""

from riddle_access.domain.services import DedupRegistry
from riddle_access.models import Riddle


def test_identity_prefers_id():
    """Test identity prefers id"""
    registry = DedupRegistry()
    a = Riddle(id=7, question="same text", answer="x")
    b = Riddle(id=8, question="same text", answer="x")

    registry.mark("animal", a)

    assert registry.seen("animal", a)
    assert not registry.seen("animal", b)


def test_identity_falls_back_to_stripped_question():
    """Test identity falls back to stripped question"""
    registry = DedupRegistry()
    registry.mark("k", Riddle(question="  Who am I?  ", answer="x"))

    assert registry.seen("k", Riddle(question="Who am I?", answer="different"))


def test_id_and_question_namespaces_do_not_collide():
    """Test id and question namespaces do not collide"""
    registry = DedupRegistry()
    registry.mark("k", Riddle(id="7", question="q", answer="a"))

    assert not registry.seen("k", Riddle(question="7", answer="a"))


def test_keys_are_isolated_and_forgettable():
    """Test keys are isolated and forgettable"""
    registry = DedupRegistry()
    riddle = Riddle(id=1, question="q", answer="a")
    registry.mark("animal", riddle)

    assert not registry.seen("plant", riddle)
    assert registry.count("animal") == 1

    registry.forget("animal")
    assert not registry.seen("animal", riddle)
    assert registry.count("animal") == 0


def test_clear_forgets_everything():
    """Test clear forgets everything"""
    registry = DedupRegistry()
    riddle = Riddle(id=1, question="q", answer="a")
    registry.mark("a", riddle)
    registry.mark("b", riddle)

    registry.clear()

    assert not registry.seen("a", riddle)
    assert not registry.seen("b", riddle)


def test_unhashable_id_still_identifies():
    """Test unhashable id still identifies"""
    registry = DedupRegistry()
    riddle = Riddle(id=[1, 2], question="q", answer="a")
    registry.mark("k", riddle)

    assert registry.seen("k", Riddle(id=[1, 2], question="other", answer="a"))
