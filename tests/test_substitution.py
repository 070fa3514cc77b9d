"""Tests for ${name} template substitution."""

import json

import pytest

from gqlflow.variables import TemplateSubstitutor
from gqlflow.workflow.pointers import UNDEFINED


@pytest.fixture
def substitutor():
    return TemplateSubstitutor()


class TestStringSubstitution:

    def test_replaces_each_placeholder(self, substitutor):
        assert substitutor.substitute("${a}-${b}", {"a": "x", "b": "y"}) == "x-y"

    def test_unresolved_placeholder_becomes_empty(self, substitutor):
        assert substitutor.substitute("${missing}", {}) == ""
        assert substitutor.substitute("id=${missing}!", {"other": 1}) == "id=!"

    def test_null_and_absent_values_become_empty(self, substitutor):
        context = {"nothing": None, "absent": UNDEFINED}
        assert substitutor.substitute("[${nothing}][${absent}]", context) == "[][]"

    def test_scalar_string_forms(self, substitutor):
        context = {"n": 42, "f": 1.5, "yes": True, "no": False}
        assert substitutor.substitute("${n} ${f} ${yes} ${no}", context) == "42 1.5 true false"

    def test_complex_values_render_as_json(self, substitutor):
        context = {"obj": {"a": 1}, "items": [1, 2]}
        assert substitutor.substitute("${obj}|${items}", context) == '{"a": 1}|[1, 2]'

    def test_only_word_characters_form_a_placeholder(self, substitutor):
        text = "${not-a-name} ${ spaced } $plain"
        assert substitutor.substitute(text, {"plain": "x"}) == text

    def test_same_placeholder_repeated(self, substitutor):
        assert substitutor.substitute("${id}/${id}", {"id": "7"}) == "7/7"


class TestStructuredSubstitution:

    def test_string_leaf_placeholder(self, substitutor):
        variables = {"input": {"id": "${id}", "tags": ["${tag}"]}}
        result = substitutor.substitute_structured(variables, {"id": "u1", "tag": "t"})
        assert result == {"input": {"id": "u1", "tags": ["t"]}}

    def test_unquoted_placeholder_for_number_stays_number(self, substitutor):
        # "${n}" inside a string leaf keeps its quotes; the number is spliced as text
        result = substitutor.substitute_structured({"limit": "${n}"}, {"n": 5})
        assert result == {"limit": "5"}

    def test_placeholder_in_key(self, substitutor):
        result = substitutor.substitute_structured({"${field}": 1}, {"field": "name"})
        assert result == {"name": 1}

    def test_none_passes_through(self, substitutor):
        assert substitutor.substitute_structured(None, {"a": 1}) is None

    def test_value_breaking_json_raises(self, substitutor):
        with pytest.raises(json.JSONDecodeError):
            substitutor.substitute_structured({"q": "${text}"}, {"text": 'say "hi"'})
