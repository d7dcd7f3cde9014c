from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from gasnet.core.hydraulics.pipe_sizes import sizes_by_rank
from gasnet.core.models.network import Network
from gasnet.core.models.verdict import VerdictMap

NO_SUPPLY = "No Supply"


@dataclass(frozen=True)
class MaterialSummary:
    length_ft_by_size: Dict[str, float]     # every size label, 0.0 if unused
    junctions_by_inlet: Dict[str, int]      # inlet size label | "No Supply" -> count
    manifolds_by_inlet: Dict[str, int]
    connected_load_btuh: float              # appliance load reachable from meters
    total_load_btuh: float                  # all appliance load in the drawing
    n_violations: int


def summarize_materials(network: Network, verdicts: VerdictMap) -> MaterialSummary:
    """
    Bill of materials for a drawing: pipe footage per size and fittings
    categorised by the size of the pipe feeding them.
    """
    length_by_size: Dict[str, float] = {s.label: 0.0 for s in sizes_by_rank()}
    for p in network.pipes.values():
        label = str(p.size)
        length_by_size[label] = length_by_size.get(label, 0.0) + float(p.length_ft)

    inlet_by_node: Dict[str, str] = {}
    for p in network.pipes.values():
        inlet_by_node.setdefault(p.node_to, str(p.size))

    junctions: Dict[str, int] = {}
    manifolds: Dict[str, int] = {}
    for uid, n in network.nodes.items():
        if n.kind not in ("JUNCTION", "MANIFOLD"):
            continue
        inlet = inlet_by_node.get(uid, NO_SUPPLY)
        bucket = junctions if n.kind == "JUNCTION" else manifolds
        bucket[inlet] = bucket.get(inlet, 0) + 1

    # load seen by meter outlets
    connected = 0.0
    for p in network.pipes.values():
        src = network.nodes.get(p.node_from)
        if src is not None and src.kind == "METER" and p.uid in verdicts:
            connected += verdicts[p.uid].flow_btuh

    total = sum(n.own_demand_btuh for n in network.nodes.values())

    return MaterialSummary(
        length_ft_by_size=length_by_size,
        junctions_by_inlet=junctions,
        manifolds_by_inlet=manifolds,
        connected_load_btuh=connected,
        total_load_btuh=total,
        n_violations=sum(1 for v in verdicts.values() if not v.is_valid),
    )
