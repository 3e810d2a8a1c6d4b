"""
Job-related type definitions for payloads, flows and handler context.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

from bullbench.constants import (
    CHILD_JOB_NAMES,
    FILLER_CHAR,
    FILLER_LENGTH,
    PARENT_JOB_NAME,
)


class JobPayload(BaseModel):
    """
    Synthetic job record.
    Carries its position in the run plus a fixed-size filler string.
    """

    model_config = ConfigDict(frozen=True)

    index: int
    data: str = FILLER_CHAR * FILLER_LENGTH

    def to_data(self, include_filler: bool = True) -> dict[str, Any]:
        """
        Render the job data handed to the queue.

        Args:
            include_filler: Whether to send the filler string along.

        Returns:
            The job data dict.
        """
        if include_filler:
            return {"index": self.index, "data": self.data}
        return {"index": self.index}


class FlowNode(BaseModel):
    """A single job inside a flow."""

    model_config = ConfigDict(frozen=True)

    name: str
    queue_name: str
    data: dict[str, Any]

    def to_job(self) -> dict[str, Any]:
        """Render the node in the shape FlowProducer.add expects."""
        return {"name": self.name, "queueName": self.queue_name, "data": self.data}


class FlowSpec(BaseModel):
    """
    A parent job with its two children.
    Submitted to the queue as one atomic unit.
    """

    model_config = ConfigDict(frozen=True)

    parent: FlowNode
    children: tuple[FlowNode, FlowNode]

    @property
    def unit_count(self) -> int:
        """Jobs created when the flow is submitted."""
        return 1 + len(self.children)

    def to_flow(self) -> dict[str, Any]:
        """Render the flow tree for FlowProducer.add."""
        flow = self.parent.to_job()
        flow["children"] = [child.to_job() for child in self.children]
        return flow

    @classmethod
    def build(cls, index: int, parent_queue: str, child_queue: str) -> "FlowSpec":
        """
        Create the flow for a given index.

        Args:
            index: Position of the flow in the run.
            parent_queue: Queue receiving the parent job.
            child_queue: Queue receiving both children.

        Returns:
            FlowSpec with one parent and two children.
        """
        parent = FlowNode(name=PARENT_JOB_NAME, queue_name=parent_queue, data={"index": index})
        first, second = (
            FlowNode(name=name, queue_name=child_queue, data={"parent": index})
            for name in CHILD_JOB_NAMES
        )
        return cls(parent=parent, children=(first, second))


@dataclass
class JobContext:
    """
    Context passed to workload handlers during processing.
    Decoupled from the BullMQ job object so handlers can be tested alone.
    """

    queue_name: str
    job_id: str | None
    name: str
    data: dict[str, Any]

    @property
    def index(self) -> int | None:
        """Index the job was generated with, if any."""
        return self.data.get("index")
