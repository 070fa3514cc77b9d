"""Tests for the definition store and definition validation."""

import json

import pytest

from gqlflow.exceptions import DefinitionValidationError, FlowExistsError, FlowNotFoundError
from gqlflow.loader import DEFAULT_BASE_URL, DefinitionStore, FlowDefinition, StepDefinition


@pytest.fixture
def store(tmp_path):
    return DefinitionStore(tmp_path / "sets")


class TestDefinitionStore:

    def test_create_empty_set(self, store):
        definition = store.create("users")
        assert definition.name == "users"
        assert definition.baseUrl == DEFAULT_BASE_URL
        assert definition.steps == []
        assert store.path_for("users").exists()

    def test_create_existing_set_fails(self, store):
        store.create("users")
        with pytest.raises(FlowExistsError):
            store.create("users")

    def test_load_missing_set(self, store):
        with pytest.raises(FlowNotFoundError, match="Set 'nope' not found"):
            store.load("nope")

    def test_save_and_load_preserves_step_order(self, store):
        flow = FlowDefinition(
            name="orders",
            baseUrl="http://api/graphql",
            headers={"Authorization": "Bearer ${token}"},
            steps=[StepDefinition(name=f"s{i}", query=f"query {{ q{i} }}") for i in range(5)],
        )
        store.save("orders", flow)

        loaded = store.load("orders")
        assert [s.name for s in loaded.steps] == ["s0", "s1", "s2", "s3", "s4"]
        assert loaded.headers == {"Authorization": "Bearer ${token}"}

    def test_optional_fields_omitted_when_unset(self, store):
        store.save("a", FlowDefinition(name="a", baseUrl="u", steps=[StepDefinition("s", "q")]))
        data = json.loads(store.path_for("a").read_text())
        assert data == {"name": "a", "baseUrl": "u", "steps": [{"name": "s", "query": "q"}]}

    def test_list_names(self, store):
        assert store.list_names() == []
        store.create("b")
        store.create("a")
        assert store.list_names() == ["a", "b"]

    def test_add_step_appends(self, store):
        store.create("users")
        assert store.add_step("users", {"name": "one", "query": "q1"}) == 0
        index = store.add_step("users", {
            "name": "two",
            "query": "q2",
            "variables": {"id": "${id}"},
            "extractToContext": {"id": "data.user.id"},
            "expected": {"data": {"user": {"ok": True}}},
        })
        assert index == 1
        loaded = store.load("users")
        assert loaded.steps[1].extractToContext == {"id": "data.user.id"}
        assert loaded.steps[1].expected == {"data": {"user": {"ok": True}}}

    def test_add_invalid_step_leaves_definition_untouched(self, store):
        store.create("users")
        before = store.path_for("users").read_text()
        with pytest.raises(DefinitionValidationError):
            store.add_step("users", {"name": "bad", "query": "q", "extractToContext": {"id": 5}})
        assert store.path_for("users").read_text() == before


class TestImport:

    def test_import_strips_legacy_execution_state(self, store, tmp_path):
        legacy = tmp_path / "flow.json"
        legacy.write_text(json.dumps({
            "name": "Legacy",
            "baseUrl": "http://api/graphql",
            "context": {"id": "old"},
            "steps": [
                {"name": "s", "query": "q", "status": "done", "result": {"data": 1}, "duration": 3},
            ],
        }))

        definition = store.create("legacy", legacy)
        assert definition.name == "Legacy"
        data = json.loads(store.path_for("legacy").read_text())
        assert "context" not in data
        assert data["steps"] == [{"name": "s", "query": "q"}]

    def test_import_yaml(self, store, tmp_path):
        source = tmp_path / "flow.yaml"
        source.write_text(
            "baseUrl: http://api/graphql\n"
            "headers:\n"
            "  Authorization: Bearer ${token}\n"
            "steps:\n"
            "  - name: create\n"
            "    query: mutation { create { id } }\n"
            "    extractToContext:\n"
            "      id: data.create.id\n"
        )

        definition = store.create("fromyaml", source)
        assert definition.name == "fromyaml"
        assert definition.headers == {"Authorization": "Bearer ${token}"}
        assert definition.steps[0].extractToContext == {"id": "data.create.id"}

    def test_import_missing_file(self, store, tmp_path):
        with pytest.raises(FileNotFoundError):
            store.create("x", tmp_path / "missing.json")
        assert not store.exists("x")

    def test_import_invalid_definition_collects_errors(self, store, tmp_path):
        source = tmp_path / "bad.json"
        source.write_text(json.dumps({"steps": [{"name": 1}, "nope"]}))

        with pytest.raises(DefinitionValidationError) as exc_info:
            store.create("bad", source)

        paths = [e.path for e in exc_info.value.errors]
        assert "baseUrl" in paths
        assert "steps[0].name" in paths
        assert "steps[0].query" in paths
        assert "steps[1]" in paths
        assert exc_info.value.exit_code == 2
        assert not store.exists("bad")

    def test_import_unparseable_file(self, store, tmp_path):
        source = tmp_path / "bad.json"
        source.write_text("{")
        with pytest.raises(DefinitionValidationError, match="Failed to parse"):
            store.create("bad", source)
