from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from gasnet.core.models.network import Network
from gasnet.core.models.node import Node
from gasnet.core.models.pipe import Pipe


@dataclass
class DemandIndex:
    """
    Per-pass lookup tables over a network snapshot.

    Built once per validation call; subtree sums are memoized per node so
    a full pass is O(V + E). Discard after the pass.
    """
    nodes_by_uid: Dict[str, Node]
    pipes_from_node: Dict[str, List[Pipe]]
    feeder_by_node: Dict[str, Pipe]

    _subtree_btuh: Dict[str, float] = field(default_factory=dict)
    _in_progress: Set[str] = field(default_factory=set)

    @staticmethod
    def build(network: Network) -> "DemandIndex":
        pipes_from_node: Dict[str, List[Pipe]] = {}
        feeder_by_node: Dict[str, Pipe] = {}
        for p in network.pipes.values():
            pipes_from_node.setdefault(p.node_from, []).append(p)
            # first inbound pipe wins, same as a linear scan
            feeder_by_node.setdefault(p.node_to, p)

        return DemandIndex(
            nodes_by_uid=dict(network.nodes),
            pipes_from_node=pipes_from_node,
            feeder_by_node=feeder_by_node,
        )

    def feeder_of(self, pipe: Pipe) -> Optional[Pipe]:
        return self.feeder_by_node.get(pipe.node_from)

    def subtree_demand(self, node_uid: str) -> float:
        """
        Total appliance load at node_uid and everything downstream of it.

        A node re-entered while its own sum is still open closes a cycle;
        that back-edge contributes 0 so the walk always terminates.
        """
        if node_uid in self._subtree_btuh:
            return self._subtree_btuh[node_uid]

        node = self.nodes_by_uid.get(node_uid)
        if node is None:
            return 0.0
        if node_uid in self._in_progress:
            return 0.0

        # iterative post-order walk, deep chains must not hit the recursion limit
        self._in_progress.add(node_uid)
        stack: List[tuple[str, int]] = [(node_uid, 0)]
        partial: Dict[str, float] = {node_uid: node.own_demand_btuh}

        while stack:
            cur, i = stack[-1]
            outs = self.pipes_from_node.get(cur, [])
            if i < len(outs):
                stack[-1] = (cur, i + 1)
                child = outs[i].node_to
                child_node = self.nodes_by_uid.get(child)
                if child_node is None or child in self._in_progress:
                    continue
                if child in self._subtree_btuh:
                    partial[cur] += self._subtree_btuh[child]
                    continue
                self._in_progress.add(child)
                partial[child] = child_node.own_demand_btuh
                stack.append((child, 0))
                continue

            stack.pop()
            self._in_progress.discard(cur)
            total = partial.pop(cur)
            self._subtree_btuh[cur] = total
            if stack:
                partial[stack[-1][0]] += total

        return self._subtree_btuh[node_uid]

    def pipe_demand(self, pipe: Pipe) -> float:
        return self.subtree_demand(pipe.node_to)


def downstream_demand(pipe: Pipe, network: Network, index: Optional[DemandIndex] = None) -> float:
    """
    Demand [BTU/h] carried by pipe: the destination node's own appliance
    load plus the demand of every pipe leaving it. Dangling destination -> 0.
    """
    if index is None:
        index = DemandIndex.build(network)
    return index.pipe_demand(pipe)
