"""Tests for the keyword tokenizer and matcher."""

import pytest

from graphmem.graph.models import Entity
from graphmem.graph.search import entity_matches, filter_entities, keyword_matches, tokenize


class TestTokenize:
    def test_lowercases(self):
        assert tokenize("Budget MANAGEMENT") == ["budget", "management"]

    def test_separator_runs(self):
        assert tokenize("  a,,b & c+d\te\n") == ["a", "b", "c", "d", "e"]

    def test_keeps_other_punctuation(self):
        assert tokenize("budget_management v3.1") == ["budget_management", "v3.1"]

    @pytest.mark.parametrize("query", ["", "   ", ",", " & + , "])
    def test_empty(self, query: str):
        assert tokenize(query) == []


class TestMatching:
    entity = Entity(
        name="BudgetCalculator",
        entity_type="CODE_COMPONENT",
        observations=["Handles Calculation of totals"],
        subdomain="budget_management",
    )

    @pytest.mark.parametrize("keyword", ["calc", "code_comp", "management", "totals"])
    def test_each_surface(self, keyword: str):
        assert keyword_matches(keyword, self.entity)

    def test_substring_not_word_boundary(self):
        assert keyword_matches("getcal", self.entity)

    def test_no_match(self):
        assert not keyword_matches("report", self.entity)

    def test_missing_subdomain_is_empty(self):
        entity = Entity("X", "T", [], None)
        assert not keyword_matches("none", entity)

    def test_any_keyword(self):
        assert entity_matches(["report", "totals"], self.entity)
        assert not entity_matches(["report", "plans"], self.entity)

    def test_filter_preserves_order(self):
        entities = [Entity("b-one", "T"), Entity("a-two", "T"), Entity("c", "T")]
        assert [e.name for e in filter_entities(entities, "one two")] == ["b-one", "a-two"]

    def test_filter_empty_query(self):
        assert filter_entities([Entity("a", "T")], "  ") == []
