"""Tests for parsing button block bodies."""

from buttons.arguments import parent_of, parse_arguments


def test_first_word_is_key_rest_is_value() -> None:
    args = parse_arguments("name Open daily note\ntype command\naction Daily notes: Open today")
    assert args == {
        "name": "Open daily note",
        "type": "command",
        "action": "Daily notes: Open today",
    }


def test_keys_are_lowercased_and_blank_lines_skipped() -> None:
    assert parse_arguments("\nName  Go \n\n  COLOR blue\n") == {"name": "Go", "color": "blue"}


def test_later_duplicate_key_wins() -> None:
    assert parse_arguments("color red\ncolor blue") == {"color": "blue"}


def test_key_without_value() -> None:
    assert parse_arguments("hidden") == {"hidden": ""}


def test_parent_of_strips_whitespace_and_handles_absence() -> None:
    assert parent_of({"id": "  base  "}) == "base"
    assert parent_of({"id": "   "}) == ""
    assert parent_of({"name": "Go"}) == ""
