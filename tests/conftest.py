from __future__ import annotations

import pytest

from gasnet.core.hydraulics.pipe_sizes import PipeSize
from gasnet.core.models.network import Network
from gasnet.core.models.node import Node
from gasnet.core.models.pipe import Pipe


def node(uid, kind="JUNCTION", demand=0.0):
    return Node(uid=uid, name=uid, kind=kind, demand_btuh=demand)


def pipe(uid, a, b, size=PipeSize.HALF, length=10.0):
    return Pipe(uid=uid, node_from=a, node_to=b, size=size, length_ft=length)


def network(nodes, pipes, drop=0.5):
    return Network(
        nodes={n.uid: n for n in nodes},
        pipes={p.uid: p for p in pipes},
        pressure_drop_inwc=drop,
    )


@pytest.fixture
def make_node():
    return node


@pytest.fixture
def make_pipe():
    return pipe


@pytest.fixture
def make_network():
    return network


@pytest.fixture
def house():
    """
    M -p1(1", 20ft)-> J1 -p2(3/4", 15ft)-> FURNACE (100k)
                        -p3(1/2", 10ft)-> MF -p4(1/2", 10ft)-> WH (40k)
                                            -p5(3/8", 10ft)-> DRYER (20k)
    """
    return network(
        [
            node("M", "METER"),
            node("J1", "JUNCTION"),
            node("MF", "MANIFOLD"),
            node("FURNACE", "APPLIANCE", 100000),
            node("WH", "APPLIANCE", 40000),
            node("DRYER", "APPLIANCE", 20000),
        ],
        [
            pipe("p1", "M", "J1", PipeSize.ONE, 20),
            pipe("p2", "J1", "FURNACE", PipeSize.THREE_QUARTERS, 15),
            pipe("p3", "J1", "MF", PipeSize.HALF, 10),
            pipe("p4", "MF", "WH", PipeSize.HALF, 10),
            pipe("p5", "MF", "DRYER", PipeSize.THREE_EIGHTHS, 10),
        ],
    )
