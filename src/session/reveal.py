"""Progressive reveal of an already-complete answer.

The answering service returns whole answers, so the "typing" effect is a
presentation policy: ``reveal_steps`` produces the cumulative prefixes and
``AnswerRevealer`` paces them for a renderer.
"""

import asyncio
import re
from collections.abc import AsyncGenerator, Iterator
from enum import Enum

_TOKEN_PATTERN = re.compile(r"\s*\S+")


class Granularity(str, Enum):
    """Unit added per reveal step."""

    CHARACTER = "character"
    WORD = "word"


DEFAULT_STEP_DELAYS = {
    Granularity.CHARACTER: 0.02,
    Granularity.WORD: 0.005,
}


def reveal_steps(full_text: str, granularity: Granularity = Granularity.CHARACTER) -> Iterator[str]:
    """Yield cumulative prefixes of ``full_text``.

    Character mode grows the prefix one character per step. Word mode grows it
    by one whitespace-delimited token together with the whitespace before it;
    trailing whitespace is folded into the final step. The last value yielded
    is always ``full_text`` itself, and empty text yields nothing.

    Args:
        full_text: The complete answer.
        granularity: Character or word steps.

    Yields:
        Successive prefixes of the answer.
    """
    if not full_text:
        return

    if granularity is Granularity.CHARACTER:
        for end in range(1, len(full_text) + 1):
            yield full_text[:end]
        return

    ends = [match.end() for match in _TOKEN_PATTERN.finditer(full_text)]
    if not ends:
        # whitespace only
        yield full_text
        return
    ends[-1] = len(full_text)
    for end in ends:
        yield full_text[:end]


class AnswerRevealer:
    """Paces reveal steps with a best-effort minimum delay between them."""

    def __init__(
        self,
        granularity: Granularity = Granularity.CHARACTER,
        min_step_delay: float | None = None,
    ) -> None:
        if min_step_delay is None:
            min_step_delay = DEFAULT_STEP_DELAYS[granularity]
        if min_step_delay < 0:
            raise ValueError("min_step_delay must be >= 0")
        self.granularity = granularity
        self.min_step_delay = min_step_delay

    async def reveal(self, full_text: str) -> AsyncGenerator[str, None]:
        """Yield reveal steps, sleeping between them.

        Abandoning the iterator stops the reveal; the answer itself is already
        committed by the time this runs.
        """
        first = True
        for partial in reveal_steps(full_text, self.granularity):
            if not first and self.min_step_delay:
                await asyncio.sleep(self.min_step_delay)
            first = False
            yield partial
