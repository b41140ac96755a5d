"""Tests for the command module (substitution followed by tokenizing)."""

import logging
import sys

import pytest

from promptshell.command import (
    DEFAULT_SUBSTITUTION_TIMEOUT,
    TIMEOUT_ENV_VAR,
    substitution_timeout,
    tokenize_command,
)
from promptshell.errors import (
    DanglingEscapeError,
    EnvVarNotFoundError,
    RoundBracketMismatchError,
    SubstitutionTimeoutError,
    UnterminatedQuoteError,
)
from promptshell.executor import ShellResult

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell")


def fake_runner(outputs):
    def runner(timeout, cwd, command):
        return ShellResult(returncode=0, stdout=outputs[command])

    return runner


class TestTokenizeCommand:
    def test_empty_string(self, tmp_path):
        assert tokenize_command("", str(tmp_path)) == []

    def test_parenthesis_issue(self, tmp_path):
        with pytest.raises(RoundBracketMismatchError):
            tokenize_command("abcd $(xyz", str(tmp_path))

    def test_parenthesis_without_dollar(self, tmp_path):
        assert tokenize_command("abcd (xyz", str(tmp_path)) == ["abcd", "(xyz"]

    def test_whitespace(self, tmp_path):
        assert tokenize_command("    a b  c  ", str(tmp_path)) == ["a", "b", "c"]

    def test_single_token(self, tmp_path):
        assert tokenize_command("()", str(tmp_path)) == ["()"]

    def test_special_characters(self, tmp_path):
        line = "() \t\n\t a $5^&*\v\a\n\uF0AC"
        assert tokenize_command(line, str(tmp_path)) == ["()", "a", "$5^&*", "\a", "\uF0AC"]

    def test_variable_then_quotes(self):
        env = {"NAME": "my file.txt"}
        assert tokenize_command('cp "${NAME}" dest', ".", env=env) == ["cp", "my file.txt", "dest"]

    def test_unquoted_value_is_split(self):
        env = {"NAME": "my file.txt"}
        assert tokenize_command("cp ${NAME}", ".", env=env) == ["cp", "my", "file.txt"]

    def test_substituted_quotes_are_tokenized(self):
        runner = fake_runner({"gen": "'a b' c\n"})
        assert tokenize_command("x $(gen)", ".", runner=runner) == ["x", "a b", "c"]

    def test_substituted_newline_separates_tokens(self):
        runner = fake_runner({"ls": "one\ntwo\n"})
        assert tokenize_command("rm $(ls)", ".", runner=runner) == ["rm", "one", "two"]

    def test_substitution_error_propagates(self):
        with pytest.raises(EnvVarNotFoundError):
            tokenize_command("echo ${UNSET_VAR} '", ".", env={})

    def test_tokenizer_error_after_substitution(self):
        runner = fake_runner({"gen": '"open'})
        with pytest.raises(UnterminatedQuoteError):
            tokenize_command("$(gen)", ".", runner=runner)

    def test_dangling_escape(self):
        with pytest.raises(DanglingEscapeError):
            tokenize_command("abc\\", ".")

    def test_explicit_timeout_passed_to_runner(self):
        seen = []

        def runner(timeout, cwd, command):
            seen.append(timeout)
            return ShellResult(returncode=0)

        tokenize_command("$(x)", ".", timeout=0.25, runner=runner)
        assert seen == [0.25]

    def test_default_timeout_from_environment(self, monkeypatch):
        monkeypatch.setenv(TIMEOUT_ENV_VAR, "3.5")
        seen = []

        def runner(timeout, cwd, command):
            seen.append(timeout)
            return ShellResult(returncode=0)

        tokenize_command("$(x)", ".", runner=runner)
        assert seen == [3.5]


class TestWhitespaceSplit:
    def test_quotes_left_in_place(self):
        assert tokenize_command('a "b c"', ".", quote_aware=False) == ["a", '"b', 'c"']

    def test_unbalanced_quote_is_not_an_error(self):
        assert tokenize_command('a "b', ".", quote_aware=False) == ["a", '"b']

    def test_substitution_still_applies(self):
        env = {"V": "x y"}
        assert tokenize_command("${V} z", ".", env=env, quote_aware=False) == ["x", "y", "z"]


@posix_only
class TestRealShell:
    def test_echo_substitution(self, tmp_path):
        assert tokenize_command("echo $(echo abc)", str(tmp_path)) == ["echo", "abc"]

    def test_timeout(self, tmp_path):
        with pytest.raises(SubstitutionTimeoutError):
            tokenize_command("echo $(sleep 2)", str(tmp_path), timeout=0.2)


class TestSubstitutionTimeout:
    def test_default(self, monkeypatch):
        monkeypatch.delenv(TIMEOUT_ENV_VAR, raising=False)
        assert substitution_timeout() == DEFAULT_SUBSTITUTION_TIMEOUT

    def test_override(self, monkeypatch):
        monkeypatch.setenv(TIMEOUT_ENV_VAR, "0.5")
        assert substitution_timeout() == 0.5

    @pytest.mark.parametrize("raw", ["abc", "0", "-1", "nan", ""])
    def test_invalid_falls_back(self, monkeypatch, caplog, raw):
        monkeypatch.setenv(TIMEOUT_ENV_VAR, raw)
        with caplog.at_level(logging.WARNING, logger="promptshell.command"):
            assert substitution_timeout() == DEFAULT_SUBSTITUTION_TIMEOUT
        assert TIMEOUT_ENV_VAR in caplog.text
