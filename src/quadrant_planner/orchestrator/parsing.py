from __future__ import annotations

import re

_FENCE = re.compile(r"```(?:json|JSON)?\s*([\[{][\s\S]*[\]}])\s*```")


def strip_code_fence(content: str) -> str:
    """Return the JSON inside a fenced block, or the trimmed content when there is none."""

    text = content.strip()
    match = _FENCE.search(text)
    return match.group(1) if match else text
