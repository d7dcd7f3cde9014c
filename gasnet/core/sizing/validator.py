from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from gasnet.core.hydraulics.capacity import pipe_capacity_btuh
from gasnet.core.models.network import Network
from gasnet.core.models.node import Node
from gasnet.core.models.pipe import Pipe
from gasnet.core.models.verdict import Verdict, VerdictMap
from gasnet.core.sizing.demand import DemandIndex

log = logging.getLogger(__name__)


def _fmt_btu(x: float) -> str:
    x = float(x)
    if x.is_integer():
        return f"{int(x):,}"
    # at most 3 decimals, trailing zeros dropped
    return f"{x:,.3f}".rstrip("0").rstrip(".")


def capacity_message(flow_btuh: float, capacity_btuh: int) -> str:
    return (
        f"Capacity Exceeded: {_fmt_btu(flow_btuh)} > {_fmt_btu(capacity_btuh)} BTU. "
        f"Try shorter length or larger pipe."
    )


def sizing_message(pipe: Pipe, feeder: Pipe) -> str:
    return (
        f"Sizing violation: Branch pipe ({pipe.size!s}) cannot be larger "
        f"than feeder ({feeder.size!s})."
    )


def _rank(pipe: Pipe) -> Optional[int]:
    return getattr(pipe.size, "rank", None)


def _verdict_for(pipe: Pipe, index: DemandIndex, pressure_drop_inwc: float) -> Verdict:
    flow = index.pipe_demand(pipe)
    capacity = pipe_capacity_btuh(pipe.size, pipe.length_ft, pressure_drop_inwc)

    messages: List[str] = []
    if flow > capacity:
        messages.append(capacity_message(flow, capacity))

    # meter-fed pipes have no feeder and only get the capacity check
    feeder = index.feeder_of(pipe)
    if feeder is not None:
        r, r_up = _rank(pipe), _rank(feeder)
        if r is not None and r_up is not None and r > r_up:
            messages.append(sizing_message(pipe, feeder))

    return Verdict(
        flow_btuh=flow,
        capacity_btuh=capacity,
        is_valid=not messages,
        error=" ".join(messages) if messages else None,
    )


def validate_sizing(network: Network, pressure_drop_inwc: Optional[float] = None) -> VerdictMap:
    """
    Validate every pipe of a network snapshot against capacity and feeder sizing.

    Pure function: builds a fresh index, never mutates the network, never raises
    on malformed graphs, and always returns one Verdict per pipe.
    """
    drop = network.pressure_drop_inwc if pressure_drop_inwc is None else pressure_drop_inwc
    index = DemandIndex.build(network)

    verdicts: VerdictMap = {}
    for uid, pipe in network.pipes.items():
        verdicts[uid] = _verdict_for(pipe, index, drop)

    log.debug(
        "sizing pass: %d pipes, %d invalid, drop=%s in.w.c.",
        len(verdicts),
        sum(1 for v in verdicts.values() if not v.is_valid),
        drop,
    )
    return verdicts


def validate(
    nodes: Iterable[Node],
    pipes: Iterable[Pipe],
    pressure_drop_inwc: float = 0.5,
) -> VerdictMap:
    """Same as validate_sizing, over plain node and pipe sequences."""
    network = Network(
        nodes={n.uid: n for n in nodes},
        pipes={p.uid: p for p in pipes},
        pressure_drop_inwc=pressure_drop_inwc,
    )
    return validate_sizing(network)


def violations(verdicts: VerdictMap) -> List[Tuple[str, Verdict]]:
    return [(uid, v) for uid, v in verdicts.items() if not v.is_valid]
