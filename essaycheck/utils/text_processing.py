import re
from typing import Optional

FENCED_JSON_PATTERN = r"```(?:json)?\s*(.*?)\s*```"


def count_words(text: Optional[str]) -> int:
    """
    Count whitespace-delimited words in text.

    Args:
        text: Input text to count words from

    Returns:
        int: Number of non-empty tokens after splitting on whitespace runs.
        Empty or whitespace-only text counts as 0.
    """
    if not text:
        return 0

    # str.split() with no separator never yields empty tokens
    return len(text.strip().split())


def strip_code_fences(content: str) -> str:
    """
    Return the JSON body of a markdown-fenced payload.

    Analysis services backed by a language model sometimes wrap the JSON in
    ```json ... ``` markers; content without fences is returned unchanged.
    """
    if "```" not in content:
        return content

    match = re.search(FENCED_JSON_PATTERN, content, re.DOTALL)
    if match:
        return match.group(1)
    return content
