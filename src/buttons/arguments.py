"""Parse the body of a button block into Arguments.

Each non-blank line is ``key value...``: the first word (lower-cased) is the
key, the remainder of the line is the value. A later line with the same key
replaces an earlier one.

    name Open daily note
    type command
    action Daily notes: Open today's daily note
    id base-style
"""

from __future__ import annotations

from buttons.models import Arguments


def parse_arguments(text: str) -> Arguments:
    args: Arguments = {}
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        key, _, value = stripped.partition(" ")
        args[key.lower()] = value.strip()
    return args


def parent_of(args: Arguments) -> str:
    """Bare id of the parent button, or "" when the block declares none."""
    parent = args.get("id")
    return parent.strip() if isinstance(parent, str) else ""
