"""
In-session memory of prompts, used as autocomplete suggestions
"""
from typing import Iterator, List
import logging

logger = logging.getLogger(__name__)


class PromptHistory:
    """Append-only, duplicate-free, insertion-ordered set of prompts"""

    def __init__(self):
        self._prompts: List[str] = []

    def append(self, prompt: str) -> bool:
        """Add a prompt at the end unless it is already present (exact match)"""
        if prompt in self._prompts:
            return False
        self._prompts.append(prompt)
        logger.info(f"Added prompt to history ({len(self._prompts)} total)")
        return True

    def list(self) -> List[str]:
        """Return a copy of the prompts in insertion order"""
        return list(self._prompts)

    def __contains__(self, prompt: object) -> bool:
        return prompt in self._prompts

    def __len__(self) -> int:
        return len(self._prompts)

    def __iter__(self) -> Iterator[str]:
        return iter(self.list())
