from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal

NodeKind = Literal["METER", "JUNCTION", "MANIFOLD", "APPLIANCE"]

NODE_KINDS = ("METER", "JUNCTION", "MANIFOLD", "APPLIANCE")


@dataclass(frozen=True, slots=True)
class Node:
    """
    Canonical gas network node (core model).

    Notes:
    - uid: stable id for the node's lifetime
    - kind: METER (source), JUNCTION (tee, max 2 outbound pipes),
      MANIFOLD (unrestricted outbound pipes), APPLIANCE (sink)
    - demand_btuh: appliance load [BTU/h]; ignored for any other kind
    - metadata: display attributes (x, y, supply pressure, gas type) kept for round-trips
    """
    uid: str
    name: str
    kind: NodeKind

    demand_btuh: float = 0.0  # [BTU/h]

    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_appliance(self) -> bool:
        return self.kind == "APPLIANCE"

    @property
    def own_demand_btuh(self) -> float:
        """Load this node adds to the pipe feeding it."""
        return float(self.demand_btuh) if self.kind == "APPLIANCE" else 0.0
