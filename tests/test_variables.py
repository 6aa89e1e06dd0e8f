import pytest

from tinyshell.env import Context, Environment
from tinyshell.variables import (
    expand_variable,
    expand_variable_heredoc,
    expand_variables,
    is_identifier,
    is_ifs,
    normalize_segments,
    split_by_ifs,
)


def make_ctx(*envp, exit_status=0):
    return Context(env=Environment.from_envp(envp), cwd="/", exit_status=exit_status)


@pytest.fixture
def alice():
    return make_ctx("USER=Alice")


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("USER", "USER"),
        ("$USER", "Alice"),
        ("$USERRRRR", ""),
        ("student$USER", "studentAlice"),
        ("$USERis$USER$USER$", "AliceAlice$"),
        ("$USER'$USER'", "Alice'Alice'"),
        ('$USER"$USER"', 'Alice"Alice"'),
        ("$USER,'$USER'", "Alice,'Alice'"),
        ('$USER,"$USER"', 'Alice,"Alice"'),
    ],
)
def test_expand_variable_heredoc(alice, text, expected):
    assert expand_variable_heredoc(text, alice) == expected


def test_expand_variable_heredoc_exit_status():
    assert expand_variable_heredoc("$?$?", make_ctx(exit_status=42)) == "4242"


def test_expand_variable_returns_position(alice):
    assert expand_variable("a$USER-b", 1, alice) == ("Alice", 6)


def test_expand_variable_lone_dollar(alice):
    assert expand_variable("$ x", 0, alice) == ("$", 1)


def test_expand_variable_digit_name_is_empty(alice):
    assert expand_variable("$1abc", 0, alice) == ("", 5)


def test_expand_variable_requires_dollar(alice):
    with pytest.raises(ValueError):
        expand_variable("USER", 0, alice)


@pytest.mark.parametrize(
    ("name", "expected"),
    [("USER", True), ("_x1", True), ("1x", False), ("", False), ("a-b", False)],
)
def test_is_identifier(name, expected):
    assert is_identifier(name) is expected


@pytest.mark.parametrize(("char", "expected"), [(" ", True), ("\t", True), ("\n", True), ("a", False), ("", False)])
def test_is_ifs(char, expected):
    assert is_ifs(char) is expected


def test_normalize_segments_combines_and_drops_empty():
    assert normalize_segments(["42", None, "", "hello", "world", None]) == ["42", "hello", "world"]
    assert normalize_segments([None, "a", "", None, ",b"]) == ["a", ",b"]
    assert normalize_segments([None, None]) == []


def test_space_inside_quotes_is_not_ifs():
    assert expand_variables(["'hello world'"], None) == ["'hello world'"]


def test_variable_with_ifs():
    assert split_by_ifs("$GREET", make_ctx("GREET=hello world")) == ["hello", "world"]


def test_variable_with_ifs_ahead():
    ctx = make_ctx("GREET=  hello world")
    assert split_by_ifs("42$GREET", ctx) == ["42", "hello", "world"]


def test_variable_with_ifs_after():
    ctx = make_ctx("GREET=hello world   ")
    assert split_by_ifs("$GREET,42", ctx) == ["hello", "world", ",42"]


def test_variable_with_ifs_and_variable():
    ctx = make_ctx("GREET=hello world   ")
    assert split_by_ifs("$GREET$GREET", ctx) == ["hello", "world", "hello", "world"]


def test_variable_with_ifs_surrounded_by_single_quotes():
    ctx = make_ctx("GREET=hello world   ")
    assert split_by_ifs("'paris'$GREET'tokyo'", ctx) == ["'paris'hello", "world", "'tokyo'"]


def test_apply_on_list():
    ctx = make_ctx("MULTIWORD=\tMultiple Words Here\t")
    assert expand_variables(["Hello", "$MULTIWORD", "World"], ctx) == [
        "Hello",
        "Multiple",
        "Words",
        "Here",
        "World",
    ]


def test_ifs_variable_inside_double_quote():
    assert split_by_ifs('"$GREET"', make_ctx("GREET=hello world")) == ['"hello world"']


def test_variable_inside_single_quote_inside_double_quote():
    assert split_by_ifs("\"'$GREET'\"", make_ctx("GREET=hello")) == ["\"'hello'\""]


def test_variable_inside_single_quotes_is_kept():
    assert split_by_ifs("'$USER'", make_ctx("USER=testuser")) == ["'$USER'"]


@pytest.mark.parametrize("word", ["$ USER", "$\tUSER", '"$"'])
def test_dollar_without_name(word):
    assert split_by_ifs(word, make_ctx("USER=testuser")) == [word]


def test_unset_variable_disappears():
    assert expand_variables(["echo", "$NOPE"], make_ctx()) == ["echo"]


def test_unset_variable_in_double_quotes_keeps_word():
    assert split_by_ifs('"$NOPE"', make_ctx()) == ['""']