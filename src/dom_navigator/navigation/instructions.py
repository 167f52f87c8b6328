"""Instruction stream reader.

Instructions follow the markup block as whitespace-delimited tokens: a count K
followed by K direction keywords, repeated until a count of zero.
"""

from typing import Iterator, List, Optional, TextIO

from dom_navigator.shared import (
    MalformedInstructionError,
    get_logger,
)
from dom_navigator.tree.node import Direction


class InstructionReader:
    """Reads batches of navigation directions from a text stream.

    Tokens may be spread over lines arbitrarily; the stream is consumed lazily so
    that batches can be executed as soon as they are complete.
    """

    def __init__(self, stream: TextIO, correlation_id: Optional[str] = None) -> None:
        self.logger = get_logger(__name__, correlation_id, "instruction_reader")
        self._tokens = self._tokenize(stream)
        self.batches_read = 0

    @staticmethod
    def _tokenize(stream: TextIO) -> Iterator[str]:
        for line in iter(stream.readline, ""):
            yield from line.split()

    def _next_token(self) -> Optional[str]:
        return next(self._tokens, None)

    def _read_count(self) -> Optional[int]:
        token = self._next_token()
        if token is None:
            return None
        try:
            count = int(token)
        except ValueError:
            raise MalformedInstructionError(
                f"Instruction count must be an integer, got {token!r}"
            ) from None
        if count < 0:
            raise MalformedInstructionError(
                f"Instruction count must be >= 0, got {count}"
            )
        return count

    def next_batch(self) -> List[Direction]:
        """Read the next batch of directions.

        Returns:
            The batch, or an empty list once the terminating zero count is read

        Raises:
            MalformedInstructionError: On a bad count or a truncated batch
            UnknownInstructionError: On a token outside the direction vocabulary
        """
        count = self._read_count()
        if count is None:
            self.logger.warning(
                "Input ended without a terminating zero count",
                extra={"batches_read": self.batches_read}
            )
            return []

        directions: List[Direction] = []
        for index in range(count):
            token = self._next_token()
            if token is None:
                raise MalformedInstructionError(
                    f"Input ended after {index} of {count} instructions "
                    f"in batch {self.batches_read + 1}"
                )
            directions.append(Direction.from_keyword(token))

        if directions:
            self.batches_read += 1
        return directions

    def batches(self) -> Iterator[List[Direction]]:
        """Yield non-empty batches until the terminating batch."""
        while True:
            batch = self.next_batch()
            if not batch:
                return
            yield batch
