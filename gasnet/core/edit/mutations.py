from __future__ import annotations

import uuid
from dataclasses import replace
from typing import Any, Dict, Optional, Tuple

from gasnet.core.build.validate import JUNCTION_MAX_OUTLETS
from gasnet.core.hydraulics.pipe_sizes import PipeSize
from gasnet.core.models.network import Network
from gasnet.core.models.node import Node, NodeKind, NODE_KINDS
from gasnet.core.models.pipe import Pipe

DEFAULT_PIPE_LENGTH_FT = 10.0

DEFAULT_NAME_BY_KIND: Dict[str, str] = {
    "METER": "Gas Meter",
    "JUNCTION": "T-Junction",
    "MANIFOLD": "Distribution Manifold",
    "APPLIANCE": "Appliance",
}

# name -> load [BTU/h]
APPLIANCE_PRESETS: Dict[str, float] = {
    "Furnace": 100000.0,
    "Water Heater": 40000.0,
    "Cooktop": 65000.0,
    "Fireplace": 30000.0,
    "Dryer": 20000.0,
}


class NetworkEditError(ValueError):
    """Raised when an edit would break the supply-tree rules."""


def _new_uid() -> str:
    return uuid.uuid4().hex[:9]


def add_node(
    network: Network,
    kind: NodeKind,
    *,
    demand_btuh: float = 0.0,
    name: Optional[str] = None,
    uid: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Tuple[Network, Node]:
    """
    Returns (new Network, new Node). Meters get the standard supply
    pressure and gas type in metadata unless provided.
    """
    if kind not in NODE_KINDS:
        raise NetworkEditError(f"Unknown node kind {kind!r}. Allowed: {list(NODE_KINDS)}")
    if demand_btuh < 0:
        raise NetworkEditError(f"Demand must be >= 0 (got {demand_btuh})")

    uid = uid or _new_uid()
    if uid in network.nodes:
        raise NetworkEditError(f"Node uid {uid!r} already exists.")

    meta = dict(metadata or {})
    if kind == "METER":
        meta.setdefault("supply_pressure", "0.5 PSI (Standard)")
        meta.setdefault("gas_type", "Natural")

    node = Node(
        uid=uid,
        name=name or DEFAULT_NAME_BY_KIND[kind],
        kind=kind,
        demand_btuh=float(demand_btuh) if kind == "APPLIANCE" else 0.0,
        metadata=meta,
    )
    return replace(network, nodes={**network.nodes, uid: node}), node


def add_appliance(network: Network, preset: str, **kwargs: Any) -> Tuple[Network, Node]:
    if preset not in APPLIANCE_PRESETS:
        raise NetworkEditError(f"Unknown appliance preset {preset!r}. Allowed: {sorted(APPLIANCE_PRESETS)}")
    return add_node(network, "APPLIANCE", demand_btuh=APPLIANCE_PRESETS[preset], name=preset, **kwargs)


def add_pipe(
    network: Network,
    node_from: str,
    node_to: str,
    *,
    size: PipeSize = PipeSize.HALF,
    length_ft: float = DEFAULT_PIPE_LENGTH_FT,
    uid: Optional[str] = None,
) -> Tuple[Network, Pipe]:
    """
    Connects node_from -> node_to, enforcing the supply-tree rules:
    single inbound supply per node, at most two outlets per junction,
    appliances never supply other nodes.
    """
    if node_from == node_to:
        raise NetworkEditError("A pipe cannot connect a node to itself.")
    src = network.nodes.get(node_from)
    if src is None:
        raise NetworkEditError(f"Unknown node_from {node_from!r}")
    if node_to not in network.nodes:
        raise NetworkEditError(f"Unknown node_to {node_to!r}")

    if network.pipes_to(node_to):
        raise NetworkEditError("This point already has a gas supply line.")

    if src.kind == "JUNCTION" and len(network.pipes_from(node_from)) >= JUNCTION_MAX_OUTLETS:
        raise NetworkEditError("T-Junctions are limited to 2 outgoing pipes. Use a Manifold for more.")

    if src.kind == "APPLIANCE":
        raise NetworkEditError("Appliances cannot supply other nodes.")

    if _reaches(network, node_to, node_from):
        raise NetworkEditError("This pipe would close a loop back to its own supply.")

    uid = uid or _new_uid()
    if uid in network.pipes:
        raise NetworkEditError(f"Pipe uid {uid!r} already exists.")

    pipe = Pipe(
        uid=uid,
        node_from=node_from,
        node_to=node_to,
        size=PipeSize.parse(size),
        length_ft=float(length_ft),
    )
    return replace(network, pipes={**network.pipes, uid: pipe}), pipe


def _reaches(network: Network, start: str, target: str) -> bool:
    seen = set()
    stack = [start]
    while stack:
        cur = stack.pop()
        if cur == target:
            return True
        if cur in seen:
            continue
        seen.add(cur)
        stack.extend(p.node_to for p in network.pipes_from(cur))
    return False


def update_node(network: Network, uid: str, **changes: Any) -> Network:
    if uid not in network.nodes:
        raise NetworkEditError(f"Unknown node {uid!r}")
    if "uid" in changes:
        raise NetworkEditError("Node uid is immutable.")
    if "demand_btuh" in changes and float(changes["demand_btuh"]) < 0:
        raise NetworkEditError(f"Demand must be >= 0 (got {changes['demand_btuh']})")
    node = replace(network.nodes[uid], **changes)
    return replace(network, nodes={**network.nodes, uid: node})


def update_pipe(network: Network, uid: str, **changes: Any) -> Network:
    """Resize or re-length a pipe. Endpoints are changed by delete + add."""
    if uid not in network.pipes:
        raise NetworkEditError(f"Unknown pipe {uid!r}")
    bad = set(changes) - {"size", "length_ft", "name", "metadata"}
    if bad:
        raise NetworkEditError(f"Cannot update pipe fields {sorted(bad)}")
    if "size" in changes:
        changes["size"] = PipeSize.parse(changes["size"])
    if "length_ft" in changes:
        changes["length_ft"] = float(changes["length_ft"])
    pipe = replace(network.pipes[uid], **changes)
    return replace(network, pipes={**network.pipes, uid: pipe})


def set_pressure_drop(network: Network, pressure_drop_inwc: float) -> Network:
    if not (pressure_drop_inwc > 0):
        raise NetworkEditError(f"Pressure drop must be > 0 (got {pressure_drop_inwc})")
    return replace(network, pressure_drop_inwc=float(pressure_drop_inwc))


def delete_pipe(network: Network, uid: str) -> Network:
    if uid not in network.pipes:
        return network
    return replace(network, pipes={k: p for k, p in network.pipes.items() if k != uid})


def delete_node(network: Network, uid: str) -> Network:
    """Removes the node and every pipe touching it."""
    nodes = {k: n for k, n in network.nodes.items() if k != uid}
    pipes = {k: p for k, p in network.pipes.items() if p.node_from != uid and p.node_to != uid}
    return replace(network, nodes=nodes, pipes=pipes)
