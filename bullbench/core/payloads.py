"""
Synthetic payload generation.
"""

from collections.abc import Iterator

from bullbench.constants import FILLER_CHAR, FILLER_LENGTH
from bullbench.types.job import FlowSpec, JobPayload


class PayloadGenerator:
    """
    Deterministic generator of job payloads and flows.

    Payloads for the same index are always identical, and two payloads only
    differ in their index.
    """

    def __init__(self, filler_length: int = FILLER_LENGTH):
        self._filler = FILLER_CHAR * filler_length

    def generate(self, index: int) -> JobPayload:
        """Build the payload for one index."""
        return JobPayload(index=index, data=self._filler)

    def generate_range(self, indices: range) -> Iterator[JobPayload]:
        """Build payloads for a range of indices, in order."""
        for index in indices:
            yield self.generate(index)

    def flow(self, index: int, parent_queue: str, child_queue: str) -> FlowSpec:
        """Build the parent + two children flow for one index."""
        return FlowSpec.build(index, parent_queue=parent_queue, child_queue=child_queue)
