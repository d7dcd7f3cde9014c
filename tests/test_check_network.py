from __future__ import annotations

import pytest

from gasnet.core.build.validate import NetworkCheckError, check_network, raise_on_errors


def _messages(issues, level):
    return [i.message for i in issues if i.level == level]


def test_clean_house_has_no_errors(house) -> None:
    issues = check_network(house)
    assert _messages(issues, "error") == []
    raise_on_errors(issues)


def test_empty_network(make_network) -> None:
    issues = check_network(make_network([], []))
    assert any("zero nodes" in m for m in _messages(issues, "error"))


def test_topology_violations(make_node, make_pipe, make_network) -> None:
    net = make_network(
        [
            make_node("M", "METER"),
            make_node("J", "JUNCTION"),
            make_node("A", "APPLIANCE", 1000),
            make_node("B", "APPLIANCE", 1000),
            make_node("C", "APPLIANCE", 1000),
            make_node("D", "APPLIANCE", 1000),
        ],
        [
            make_pipe("mj", "M", "J"),
            make_pipe("ja", "J", "A"),
            make_pipe("jb", "J", "B"),
            make_pipe("jc", "J", "C"),
            make_pipe("ad", "A", "D"),
            make_pipe("md", "M", "D"),
        ],
    )
    errors = _messages(check_network(net), "error")
    assert any("3 outgoing pipes" in m for m in errors)
    assert any(m.startswith("Appliance(uid=A") for m in errors)
    assert any("2 inbound pipes" in m for m in errors)


def test_dangling_and_bad_length(make_node, make_pipe, make_network) -> None:
    net = make_network(
        [make_node("M", "METER")],
        [make_pipe("x", "M", "GHOST", length=0)],
    )
    errors = _messages(check_network(net), "error")
    assert any("unknown node_to" in m for m in errors)
    assert any("length <= 0" in m for m in errors)


def test_cycle_is_reported(make_node, make_pipe, make_network) -> None:
    net = make_network(
        [make_node("M", "METER"), make_node("J1"), make_node("J2")],
        [make_pipe("a", "J1", "J2"), make_pipe("b", "J2", "J1")],
    )
    errors = _messages(check_network(net), "error")
    assert any("cycle" in m for m in errors)


def test_warnings(make_node, make_pipe, make_network) -> None:
    net = make_network(
        [make_node("J", "JUNCTION", 500), make_node("A", "APPLIANCE", 10), make_node("X", "MANIFOLD")],
        [make_pipe("ja", "J", "A")],
    )
    warnings = _messages(check_network(net), "warning")
    assert any("is ignored" in m for m in warnings)
    assert warnings == [warnings[0], "Network has no meter."]


def test_unfed_component_is_reported(make_node, make_pipe, make_network) -> None:
    net = make_network(
        [
            make_node("M", "METER"), make_node("A", "APPLIANCE", 1000),
            make_node("MF", "MANIFOLD"), make_node("B", "APPLIANCE", 1000),
        ],
        [make_pipe("ma", "M", "A"), make_pipe("mfb", "MF", "B")],
    )
    warnings = _messages(check_network(net), "warning")
    assert len(warnings) == 1
    assert "1 disconnected component(s) without a meter" in warnings[0]
    assert "['B', 'MF'] have no gas supply" in warnings[0]


def test_two_meter_forest_has_no_issues(make_node, make_pipe, make_network) -> None:
    net = make_network(
        [
            make_node("M1", "METER"), make_node("A1", "APPLIANCE", 30000),
            make_node("M2", "METER"), make_node("A2", "APPLIANCE", 20000),
        ],
        [make_pipe("x", "M1", "A1"), make_pipe("y", "M2", "A2")],
    )
    assert check_network(net) == []


def test_negative_demand_is_error(make_node, make_network) -> None:
    errors = _messages(check_network(make_network([make_node("A", "APPLIANCE", -1)], [])), "error")
    assert any("negative demand" in m for m in errors)


def test_raise_on_errors_lists_only_errors(make_network) -> None:
    issues = check_network(make_network([], []))
    with pytest.raises(NetworkCheckError) as exc:
        raise_on_errors(issues)
    assert "zero nodes" in str(exc.value)
    assert all(i.level == "error" for i in exc.value.issues)
