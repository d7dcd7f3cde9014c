from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from gasnet.core.hydraulics.pipe_sizes import PipeSize
from gasnet.core.models.network import DEFAULT_PRESSURE_DROP_INWC, Network
from gasnet.core.models.node import Node, NODE_KINDS
from gasnet.core.models.pipe import Pipe

log = logging.getLogger(__name__)

# -----------------------------
# Snapshot contract
# -----------------------------
# {"nodes": [...], "edges": [...], "pressureDrop": 0.5}
REQ_NODE = {"id", "type"}
REQ_EDGE = {"id", "from", "to", "size", "length"}

# snapshot key -> Node.metadata key
NODE_META_KEYS = {
    "x": "x",
    "y": "y",
    "supplyPressure": "supply_pressure",
    "gasType": "gas_type",
}


class SnapshotError(ValueError):
    """Raised when a snapshot cannot be turned into a Network."""


def _require_keys(obj: Dict[str, Any], required: set[str], what: str) -> None:
    missing = sorted(required - set(obj))
    if missing:
        raise SnapshotError(f"{what} is missing required keys: {missing} ({obj!r})")


def _as_float(x: Any, field: str, hint: str) -> float:
    try:
        return float(x)
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"Invalid numeric value for '{field}' ({hint}): {x!r}") from e


def _node_from_dict(d: Dict[str, Any]) -> Node:
    _require_keys(d, REQ_NODE, "Node")
    uid = str(d["id"])
    kind = str(d["type"]).strip().upper()
    if kind not in NODE_KINDS:
        raise SnapshotError(f"Invalid node type for id={uid}: {d['type']!r}. Allowed: {list(NODE_KINDS)}")

    meta = {core: d[snap] for snap, core in NODE_META_KEYS.items() if d.get(snap) is not None}
    return Node(
        uid=uid,
        name=str(d.get("name") or uid),
        kind=kind,  # type: ignore[arg-type]
        demand_btuh=_as_float(d.get("btu", 0) or 0, "btu", f"node id={uid}"),
        metadata=meta,
    )


def _pipe_from_dict(d: Dict[str, Any]) -> Pipe:
    _require_keys(d, REQ_EDGE, "Edge")
    uid = str(d["id"])
    try:
        size = PipeSize.parse(d["size"])
    except ValueError as e:
        raise SnapshotError(f"Invalid size for edge id={uid}: {e}") from e

    return Pipe(
        uid=uid,
        node_from=str(d["from"]),
        node_to=str(d["to"]),
        size=size,
        length_ft=_as_float(d["length"], "length", f"edge id={uid}"),
        name=str(d.get("name") or ""),
    )


def network_from_dict(data: Dict[str, Any]) -> Network:
    """
    Builds a Network from a {nodes, edges, pressureDrop} snapshot.
    A missing or zero pressureDrop keeps the default.
    """
    if not isinstance(data, dict):
        raise SnapshotError(f"Snapshot must be a JSON object, got {type(data).__name__}")

    nodes: Dict[str, Node] = {}
    for raw in data.get("nodes") or []:
        n = _node_from_dict(raw)
        if n.uid in nodes:
            raise SnapshotError(f"Duplicate node id: {n.uid!r}")
        nodes[n.uid] = n

    pipes: Dict[str, Pipe] = {}
    for raw in data.get("edges") or []:
        p = _pipe_from_dict(raw)
        if p.uid in pipes:
            raise SnapshotError(f"Duplicate edge id: {p.uid!r}")
        pipes[p.uid] = p

    drop = data.get("pressureDrop")
    drop = _as_float(drop, "pressureDrop", "snapshot") if drop else DEFAULT_PRESSURE_DROP_INWC
    if not (drop > 0):
        raise SnapshotError(f"pressureDrop must be > 0 (got {drop})")

    return Network(nodes=nodes, pipes=pipes, pressure_drop_inwc=drop)


def network_to_dict(network: Network) -> Dict[str, Any]:
    nodes: List[Dict[str, Any]] = []
    for n in network.nodes.values():
        d: Dict[str, Any] = {"id": n.uid, "type": n.kind, "name": n.name, "btu": n.demand_btuh}
        for snap, core in NODE_META_KEYS.items():
            if core in n.metadata:
                d[snap] = n.metadata[core]
        nodes.append(d)

    edges: List[Dict[str, Any]] = []
    for p in network.pipes.values():
        e: Dict[str, Any] = {"id": p.uid, "from": p.node_from, "to": p.node_to,
                             "size": p.size.label, "length": p.length_ft}
        if p.name:
            e["name"] = p.name
        edges.append(e)
    return {"nodes": nodes, "edges": edges, "pressureDrop": network.pressure_drop_inwc}


def load_snapshot(path: Union[str, Path]) -> Network:
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Invalid JSON in snapshot {str(path)!r}: {e}") from e
    network = network_from_dict(data)
    log.info("loaded snapshot %s: %d nodes, %d pipes", path, len(network.nodes), len(network.pipes))
    return network


def save_snapshot(network: Network, path: Union[str, Path]) -> None:
    path = Path(path)
    path.write_text(json.dumps(network_to_dict(network), indent=2), encoding="utf-8")
    log.info("saved snapshot %s", path)
