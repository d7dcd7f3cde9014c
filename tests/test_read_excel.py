from __future__ import annotations

import pandas as pd
import pytest

from gasnet.adapters.excel.read_excel import load_network_from_excel
from gasnet.core.hydraulics.pipe_sizes import PipeSize
from gasnet.core.sizing.validator import validate_sizing


def _write(path, nodes, pipes, config=None):
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(nodes).to_excel(writer, sheet_name="nodes", index=False)
        pd.DataFrame(pipes).to_excel(writer, sheet_name="pipes", index=False)
        if config is not None:
            pd.DataFrame(config).to_excel(writer, sheet_name="config", index=False)


NODES = [
    {"node_id": "M", "name": "Meter", "kind": "meter", "demand_btuh": None, "x": 0, "y": 0},
    {"node_id": "T", "name": "Tee", "kind": "tee", "demand_btuh": None, "x": 1, "y": 0},
    {"node_id": "WH", "name": "Water Heater", "kind": "appliance", "demand_btuh": 40000, "x": 2, "y": 0},
]
PIPES = [
    {"pipe_id": "p1", "node_from": "M", "node_to": "T", "size": '3/4"', "length_ft": 10},
    {"pipe_id": "p2", "node_from": "T", "node_to": "WH", "size": "1/2", "length_ft": 10},
]


def test_load_workbook(tmp_path) -> None:
    path = tmp_path / "net.xlsx"
    _write(path, NODES, PIPES, [{"key": "Pressure_Drop_InWC", "value": "1.0"}, {"key": "project", "value": "Casa"}])

    net, cfg, ids = load_network_from_excel(str(path))
    assert cfg == {"pressure_drop_inwc": 1.0, "project": "Casa"}
    assert net.pressure_drop_inwc == 1.0
    assert ids.node_ids == ("M", "T", "WH")
    assert net.nodes["T"].kind == "JUNCTION"
    assert net.nodes["M"].demand_btuh == 0.0
    assert net.pipes["p2"].size is PipeSize.HALF

    v = validate_sizing(net)["p2"]
    assert v.flow_btuh == 40000.0
    assert v.capacity_btuh == 107000


def test_missing_config_sheet_uses_default_drop(tmp_path) -> None:
    path = tmp_path / "net.xlsx"
    _write(path, NODES, PIPES)
    net, cfg, _ = load_network_from_excel(str(path))
    assert cfg == {}
    assert net.pressure_drop_inwc == 0.5


def test_unknown_node_reference(tmp_path) -> None:
    path = tmp_path / "net.xlsx"
    bad = PIPES + [{"pipe_id": "p3", "node_from": "T", "node_to": "NOPE", "size": '1/2"', "length_ft": 5}]
    _write(path, NODES, bad)
    with pytest.raises(ValueError, match="Unknown node_to"):
        load_network_from_excel(str(path))


def test_duplicate_ids(tmp_path) -> None:
    path = tmp_path / "net.xlsx"
    _write(path, NODES + [NODES[0]], PIPES)
    with pytest.raises(ValueError, match="Duplicate node_id"):
        load_network_from_excel(str(path))


def test_missing_columns(tmp_path) -> None:
    path = tmp_path / "net.xlsx"
    _write(path, [{"node_id": "M", "name": "M"}], PIPES)
    with pytest.raises(ValueError, match="missing required columns"):
        load_network_from_excel(str(path))


@pytest.mark.parametrize("key", ["pressureDrop", "drop_inwc", "pressure_drop"])
def test_pressure_drop_aliases(tmp_path, key) -> None:
    path = tmp_path / "net.xlsx"
    _write(path, NODES, PIPES, [{"key": key, "value": 1.0}])
    net, _, _ = load_network_from_excel(str(path))
    assert net.pressure_drop_inwc == 1.0
    assert validate_sizing(net)["p2"].capacity_btuh == 107000


def test_non_positive_pressure_drop_is_rejected(tmp_path) -> None:
    path = tmp_path / "net.xlsx"
    _write(path, NODES, PIPES, [{"key": "pressureDrop", "value": 0}])
    with pytest.raises(ValueError, match="pressure_drop_inwc must be > 0"):
        load_network_from_excel(str(path))
