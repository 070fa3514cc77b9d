"""Tests for environment override loading."""

from gqlflow.environment import EnvironmentLoader, parse_env


class TestParseEnv:

    def test_basic_pairs_are_trimmed(self):
        assert parse_env("  TOKEN = abc  \nURL=http://x") == {"TOKEN": "abc", "URL": "http://x"}

    def test_comments_and_blank_lines_ignored(self):
        content = "# comment\n\n   \n  # indented comment\nA=1\n"
        assert parse_env(content) == {"A": "1"}

    def test_first_equals_is_split_point(self):
        assert parse_env("QUERY=a=b=c") == {"QUERY": "a=b=c"}

    def test_lines_without_key_or_equals_skipped(self):
        assert parse_env("=value\nNOEQUALS\nEMPTY=") == {"EMPTY": ""}


class TestEnvironmentLoader:

    def test_missing_file_is_empty(self, tmp_path):
        assert EnvironmentLoader(tmp_path / ".env").load() == {}

    def test_reads_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("API_TOKEN=secret\n")
        assert EnvironmentLoader(env_file).load() == {"API_TOKEN": "secret"}
