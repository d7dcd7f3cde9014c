from __future__ import annotations

import math

import pandas as pd

from gasnet.core.hydraulics.pipe_sizes import PipeSize
from gasnet.core.postprocess.export import (
    VERDICT_COLUMNS,
    export_summary_csv,
    export_verdicts_csv,
    export_verdicts_excel,
    summary_dataframe,
    verdicts_dataframe,
)
from gasnet.core.postprocess.plots import plot_capacity_curves, plot_flow_vs_capacity
from gasnet.core.postprocess.summary import NO_SUPPLY, summarize_materials
from gasnet.core.sizing.validator import validate_sizing


def test_material_summary(house, make_node, make_network) -> None:
    summary = summarize_materials(house, validate_sizing(house))
    assert summary.length_ft_by_size == {
        '3/8"': 10.0, '1/2"': 20.0, '3/4"': 15.0, '1"': 20.0, '1-1/4"': 0.0,
    }
    assert summary.junctions_by_inlet == {'1"': 1}
    assert summary.manifolds_by_inlet == {'1/2"': 1}
    assert summary.connected_load_btuh == 160000.0
    assert summary.total_load_btuh == 160000.0
    assert summary.n_violations == 0


def test_unfed_fittings_and_unconnected_load(house, make_node) -> None:
    nodes = dict(house.nodes)
    nodes["LOOSE_T"] = make_node("LOOSE_T", "JUNCTION")
    nodes["LOOSE_A"] = make_node("LOOSE_A", "APPLIANCE", 30000)
    net = type(house)(nodes=nodes, pipes=house.pipes)
    summary = summarize_materials(net, validate_sizing(net))
    assert summary.junctions_by_inlet == {'1"': 1, NO_SUPPLY: 1}
    assert summary.connected_load_btuh == 160000.0
    assert summary.total_load_btuh == 190000.0


def test_verdicts_dataframe(make_node, make_pipe, make_network) -> None:
    net = make_network(
        [make_node("M", "METER"), make_node("A", "APPLIANCE", 100000), make_node("B", "APPLIANCE", 0)],
        [make_pipe("over", "M", "A"), make_pipe("zero", "M", "B", PipeSize.HALF, 0)],
    )
    df = verdicts_dataframe(net, validate_sizing(net))
    assert list(df.columns) == VERDICT_COLUMNS
    assert list(df["pipe_uid"]) == ["over", "zero"]

    over = df.set_index("pipe_uid").loc["over"]
    assert over["capacity_btuh"] == 78000
    assert not over["is_valid"]
    assert math.isclose(over["utilization"], 100000 / 78000)
    assert over["error"].startswith("Capacity Exceeded")

    zero = df.set_index("pipe_uid").loc["zero"]
    assert zero["utilization"] == 0.0
    assert zero["error"] == ""


def test_exports(house, tmp_path) -> None:
    verdicts = validate_sizing(house)
    export_verdicts_csv(house, verdicts, str(tmp_path / "v.csv"))
    export_verdicts_excel(house, verdicts, str(tmp_path / "v.xlsx"))
    export_summary_csv(summarize_materials(house, verdicts), str(tmp_path / "s.csv"))

    csv = pd.read_csv(tmp_path / "v.csv")
    assert len(csv) == 5
    xlsx = pd.read_excel(tmp_path / "v.xlsx", sheet_name="verdicts", engine="openpyxl")
    assert list(xlsx["flow_btuh"]) == list(csv["flow_btuh"])

    s = pd.read_csv(tmp_path / "s.csv")
    assert set(s["category"]) == {"pipe_length_ft", "junctions", "manifolds", "load_btuh", "violations"}


def test_summary_dataframe_has_every_size(house) -> None:
    df = summary_dataframe(summarize_materials(house, validate_sizing(house)))
    assert len(df[df["category"] == "pipe_length_ft"]) == 5


def test_plots_write_png(house, tmp_path) -> None:
    out1 = tmp_path / "plots" / "flow.png"
    out2 = tmp_path / "plots" / "curves.png"
    plot_flow_vs_capacity(house, validate_sizing(house), out_png=str(out1))
    plot_capacity_curves(out_png=str(out2))
    assert out1.stat().st_size > 0
    assert out2.stat().st_size > 0
