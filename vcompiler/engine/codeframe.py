"""
vcompiler Code Frames
=====================

Numbered source excerpts with a ``^`` underline, used when logging
compile errors that carry a source range.

Example:
    >>> print(generate_code_frame("<div>\\n  <p v-if=\\"a b\\"></p>\\n</div>", 11, 21))
    1  |  <div>
    2  |    <p v-if="a b"></p>
       |       ^^^^^^^^^^
    3  |  </div>
"""

from __future__ import annotations

import re
from typing import List, Optional

# Lines of context shown around the highlighted range.
CONTEXT_LINES = 2

_line_split_re = re.compile(r"\r?\n")


def generate_code_frame(source: str, start: int = 0, end: Optional[int] = None) -> str:
    """
    Render the lines around ``source[start:end]``.

    Args:
        source: Template source
        start: Range start offset
        end: Range end offset (defaults to the end of ``source``)

    Returns:
        The frame, one output line per source or underline line
    """
    if end is None:
        end = len(source)

    lines = _line_split_re.split(source)
    count = 0
    result: List[str] = []

    for i, line in enumerate(lines):
        count += len(line) + 1
        if count < start:
            continue

        j = i - CONTEXT_LINES
        while j <= i + CONTEXT_LINES or end > count:
            if j >= len(lines):
                break
            if j < 0:
                j += 1
                continue

            number = str(j + 1)
            result.append(f"{number}{' ' * (3 - len(number))}|  {lines[j]}")
            line_length = len(lines[j])
            if j == i:
                pad = start - (count - line_length) + 1
                length = line_length - pad if end > count else end - start
                result.append("   |  " + " " * max(pad, 0) + "^" * max(length, 0))
            elif j > i:
                if end > count:
                    length = min(end - count, line_length)
                    result.append("   |  " + "^" * max(length, 0))
                count += line_length + 1
            j += 1
        break

    return "\n".join(result)
