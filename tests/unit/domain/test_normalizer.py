"""
Unit tests for PayloadNormalizer

Covers every supported payload shape and the validity filter.
"""

import json

import pytest

from riddle_access.domain.services import PayloadNormalizer, ExtractionStrategy, normalize


@pytest.fixture
def normalizer():
    return PayloadNormalizer()


class TestPayloadShapes:
    """Test extraction strategies in order"""

    def test_bare_list(self, normalizer, make_riddle):
        """Test that a bare list is accepted"""
        riddles = normalizer.normalize([make_riddle(1), make_riddle(2)])
        assert [r.id for r in riddles] == [1, 2]

    @pytest.mark.parametrize("key", ["riddles", "data", "items"])
    def test_wrapped_under_known_key(self, normalizer, make_riddle, key):
        """Test wrapped under known key"""
        riddles = normalizer.normalize({key: [make_riddle(1)], "meta": {"count": 1}})
        assert [r.id for r in riddles] == [1]

    def test_known_keys_checked_in_order(self, normalizer, make_riddle):
        """Test known keys checked in order"""
        payload = {"items": [make_riddle(3)], "riddles": [make_riddle(1)], "data": [make_riddle(2)]}
        assert [r.id for r in normalizer.normalize(payload)] == [1]

    def test_first_array_valued_property(self, normalizer, make_riddle):
        """Test first array valued property"""
        payload = {"version": 2, "entries": [make_riddle(5)], "other": [make_riddle(6)]}
        assert [r.id for r in normalizer.normalize(payload)] == [5]

    @pytest.mark.parametrize("payload", [None, {}, "riddles", 42, {"riddles": "nope"}, {"a": {"b": []}}])
    def test_unrecognized_shape_yields_empty(self, normalizer, payload):
        """Test unrecognized shape yields empty"""
        assert normalizer.normalize(payload) == []

    def test_custom_strategies(self, make_riddle):
        """Test that custom extraction strategies replace the defaults"""
        only_nested = ExtractionStrategy("nested", lambda p: p["payload"]["list"])
        normalizer = PayloadNormalizer(strategies=[only_nested])

        assert [r.id for r in normalizer.normalize({"payload": {"list": [make_riddle(9)]}})] == [9]
        # A strategy that raises counts as no match
        assert normalizer.normalize([make_riddle(1)]) == []


class TestValidityFilter:
    """Test that malformed entries never leave the normalizer"""

    def test_drops_invalid_entries_and_keeps_order(self, normalizer, make_riddle):
        """Test drops invalid entries and keeps order"""
        payload = [
            make_riddle(1),
            {"question": "   ", "answer": "x"},
            {"question": "q", "answer": ""},
            "not an object",
            None,
            {"question": 5, "answer": "x"},
            make_riddle(2),
        ]
        riddles = normalizer.normalize(payload)

        assert [r.id for r in riddles] == [1, 2]
        for riddle in riddles:
            assert riddle.question.strip() != ""
            assert riddle.answer.strip() != ""

    def test_module_level_normalize(self, make_riddle):
        """Test module level normalize"""
        assert len(normalize({"data": [make_riddle(1), {}]})) == 1

    def test_oversized_popularity_does_not_raise(self, normalizer):
        """Test that a popularity past the float range is kept as 0"""
        payload = json.loads('[{"question": "q", "answer": "a", "popularity": 1' + "0" * 400 + "}]")

        riddles = normalizer.normalize(payload)

        assert len(riddles) == 1
        assert riddles[0].popularity == 0
