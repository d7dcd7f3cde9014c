from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .node import Node
from .pipe import Pipe

DEFAULT_PRESSURE_DROP_INWC = 0.5


@dataclass(frozen=True, slots=True)
class Network:
    """
    Canonical gas network container (core model).

    A forest of pipes rooted at meters; every node has at most one inbound pipe.
    """
    nodes: Dict[str, Node] = field(default_factory=dict)   # key: Node.uid
    pipes: Dict[str, Pipe] = field(default_factory=dict)   # key: Pipe.uid

    pressure_drop_inwc: float = DEFAULT_PRESSURE_DROP_INWC  # system drop [in. w.c.]

    def get_node(self, uid: str) -> Node:
        return self.nodes[uid]

    def get_pipe(self, uid: str) -> Pipe:
        return self.pipes[uid]

    def pipes_from(self, node_uid: str) -> List[Pipe]:
        return [p for p in self.pipes.values() if p.node_from == node_uid]

    def pipes_to(self, node_uid: str) -> List[Pipe]:
        return [p for p in self.pipes.values() if p.node_to == node_uid]

    def feeder_of(self, pipe: Pipe) -> Optional[Pipe]:
        """Upstream pipe supplying pipe.node_from, if any."""
        for p in self.pipes.values():
            if p.node_to == pipe.node_from:
                return p
        return None
