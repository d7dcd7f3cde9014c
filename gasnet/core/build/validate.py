from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from gasnet.core.hydraulics.pipe_sizes import PipeSize
from gasnet.core.models.network import Network

JUNCTION_MAX_OUTLETS = 2


@dataclass(frozen=True)
class ValidationIssue:
    level: str              # "error" | "warning"
    message: str
    hint: Optional[str] = None


class NetworkCheckError(ValueError):
    """Raised when the structural check finds one or more errors."""
    def __init__(self, issues: List[ValidationIssue]):
        self.issues = issues
        lines = ["Network check failed with errors:"]
        for it in issues:
            if it.level == "error":
                lines.append(f"- {it.message}" + (f" | hint: {it.hint}" if it.hint else ""))
        super().__init__("\n".join(lines))


def _find_cycle_nodes(network: Network) -> List[str]:
    """Nodes lying on a directed cycle (white/grey/black DFS)."""
    outs: Dict[str, List[str]] = {}
    for p in network.pipes.values():
        outs.setdefault(p.node_from, []).append(p.node_to)

    color: Dict[str, int] = {}
    on_cycle: List[str] = []
    for start in outs:
        if color.get(start):
            continue
        path: List[str] = []
        stack = [(start, iter(outs.get(start, [])))]
        color[start] = 1
        path.append(start)
        while stack:
            cur, it = stack[-1]
            nxt = next(it, None)
            if nxt is None:
                stack.pop()
                path.pop()
                color[cur] = 2
                continue
            c = color.get(nxt, 0)
            if c == 1:
                for nid in path[path.index(nxt):]:
                    if nid not in on_cycle:
                        on_cycle.append(nid)
            elif c == 0:
                color[nxt] = 1
                path.append(nxt)
                stack.append((nxt, iter(outs.get(nxt, []))))
    return on_cycle


def check_network(network: Network) -> List[ValidationIssue]:
    """
    Structural consistency check of a gas network.
    Returns a list of issues (errors and warnings). If errors exist, caller may raise.

    The sizing validator does not need this to run; it tolerates every issue
    reported here. Edit tools and importers use it to reject broken graphs.
    """
    issues: List[ValidationIssue] = []

    # --- Nodes ---
    if not network.nodes:
        issues.append(ValidationIssue(
            level="error",
            message="Network has zero nodes.",
            hint="Add a meter and at least one appliance."
        ))

    for uid, n in network.nodes.items():
        if not uid or not isinstance(uid, str):
            issues.append(ValidationIssue("error", f"Node has invalid uid: {uid!r}"))
        if n.name is None or str(n.name).strip() == "":
            issues.append(ValidationIssue("warning", f"Node(uid={uid}) has empty name."))
        try:
            d = float(n.demand_btuh)
            if d != d:  # NaN check
                issues.append(ValidationIssue("error", f"Node(uid={uid}) demand is NaN."))
            elif d < 0:
                issues.append(ValidationIssue("error", f"Node(uid={uid}, name={n.name}) has negative demand: {d}"))
            elif d > 0 and n.kind != "APPLIANCE":
                issues.append(ValidationIssue(
                    "warning",
                    f"Node(uid={uid}, name={n.name}) of kind {n.kind} has demand {d}; it is ignored.",
                    "Only appliances carry a load."
                ))
        except (TypeError, ValueError):
            issues.append(ValidationIssue("error", f"Node(uid={uid}) demand is not numeric: {n.demand_btuh!r}."))

    if network.nodes and not any(n.kind == "METER" for n in network.nodes.values()):
        issues.append(ValidationIssue("warning", "Network has no meter.", "Add a gas meter as supply."))

    # --- Pipes ---
    inbound: Dict[str, List[str]] = {}
    outbound: Dict[str, List[str]] = {}

    for uid, p in network.pipes.items():
        if p.node_from not in network.nodes:
            issues.append(ValidationIssue(
                "error",
                f"Pipe(uid={uid}) references unknown node_from uid={p.node_from!r}.",
                "Delete the pipe or restore the node."
            ))
        if p.node_to not in network.nodes:
            issues.append(ValidationIssue(
                "error",
                f"Pipe(uid={uid}) references unknown node_to uid={p.node_to!r}.",
                "Delete the pipe or restore the node."
            ))
        if p.node_from == p.node_to:
            issues.append(ValidationIssue("error", f"Pipe(uid={uid}) connects node {p.node_from!r} to itself."))

        if not isinstance(p.size, PipeSize):
            issues.append(ValidationIssue("error", f"Pipe(uid={uid}) has unknown size {p.size!r}."))

        try:
            L = float(p.length_ft)
            if not (L > 0):
                issues.append(ValidationIssue(
                    "error",
                    f"Pipe(uid={uid}) length <= 0: {L}",
                    "A pipe without length has zero capacity."
                ))
        except (TypeError, ValueError):
            issues.append(ValidationIssue("error", f"Pipe(uid={uid}) length is not numeric: {p.length_ft!r}"))

        inbound.setdefault(p.node_to, []).append(uid)
        outbound.setdefault(p.node_from, []).append(uid)

    # --- Topology rules ---
    for nid, pipe_uids in inbound.items():
        if len(pipe_uids) > 1:
            issues.append(ValidationIssue(
                "error",
                f"Node(uid={nid}) has {len(pipe_uids)} inbound pipes: {pipe_uids}.",
                "Each point must have a single gas supply line."
            ))

    for nid, pipe_uids in outbound.items():
        n = network.nodes.get(nid)
        if n is None:
            continue
        if n.kind == "APPLIANCE":
            issues.append(ValidationIssue(
                "error",
                f"Appliance(uid={nid}, name={n.name}) supplies {len(pipe_uids)} pipe(s).",
                "Appliances cannot supply other nodes."
            ))
        elif n.kind == "JUNCTION" and len(pipe_uids) > JUNCTION_MAX_OUTLETS:
            issues.append(ValidationIssue(
                "error",
                f"Junction(uid={nid}, name={n.name}) has {len(pipe_uids)} outgoing pipes.",
                "T-Junctions are limited to 2 outgoing pipes. Use a Manifold for more."
            ))

    cyc = _find_cycle_nodes(network)
    if cyc:
        issues.append(ValidationIssue(
            "error",
            f"Network contains a cycle through nodes {cyc}.",
            "Gas piping must be a tree rooted at a meter."
        ))

    # --- Connectivity quick check ---
    # Every component of the forest needs its own meter; the "no meter"
    # warning above already covers a network without any.
    has_meter = any(n.kind == "METER" for n in network.nodes.values())
    if network.nodes and has_meter:
        adj = {nid: set() for nid in network.nodes.keys()}
        for p in network.pipes.values():
            if p.node_from in adj and p.node_to in adj:
                adj[p.node_from].add(p.node_to)
                adj[p.node_to].add(p.node_from)

        visited = set()
        unfed: List[List[str]] = []
        for nid in adj:
            if nid in visited:
                continue
            comp: List[str] = []
            stack = [nid]
            while stack:
                cur = stack.pop()
                if cur in visited:
                    continue
                visited.add(cur)
                comp.append(cur)
                stack.extend(list(adj[cur] - visited))
            if not any(network.nodes[c].kind == "METER" for c in comp):
                unfed.append(sorted(comp))

        if unfed:
            issues.append(ValidationIssue(
                "warning",
                f"Network has {len(unfed)} disconnected component(s) without a meter; "
                f"nodes {[n for part in unfed for n in part]} have no gas supply.",
                "Connect them to a meter or add a meter for them."
            ))

    return issues


def raise_on_errors(issues: List[ValidationIssue]) -> None:
    errors = [i for i in issues if i.level == "error"]
    if errors:
        raise NetworkCheckError(errors)
