from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from gasnet.core.hydraulics.pipe_sizes import PipeSize


@dataclass(frozen=True, slots=True)
class Pipe:
    """
    Canonical gas pipe segment (core model).

    Notes:
    - node_from/node_to reference Node.uid; gas flows from -> to
    - size is a nominal diameter from the pipe size table
    - length_ft is the run length of this segment [ft]
    """
    uid: str

    node_from: str
    node_to: str

    size: PipeSize
    length_ft: float  # [ft]

    name: str = ""
    metadata: Dict[str, object] = field(default_factory=dict)

    @property
    def rank(self) -> int:
        return self.size.rank
