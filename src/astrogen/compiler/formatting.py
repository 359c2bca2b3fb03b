"""Whitespace normalisation of generated `.astro` documents."""

import re

_BLANK_RUNS = re.compile(r"\n{3,}")
FENCE = "---"


def format_code(code: str) -> str:
    """
    Tidy a generated document.

    Trailing whitespace is removed from every line, runs of blank lines are
    collapsed to one and the document ends with exactly one newline.

    Raises:
        ValueError: the frontmatter fence is opened but never closed
    """
    lines = [line.rstrip() for line in code.strip("\n").split("\n")]
    if lines and lines[0] == FENCE and FENCE not in lines[1:]:
        raise ValueError("Unclosed frontmatter fence")

    text = "\n".join(lines)
    text = _BLANK_RUNS.sub("\n\n", text)
    return text + "\n"
