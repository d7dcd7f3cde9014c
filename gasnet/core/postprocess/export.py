from __future__ import annotations

import pandas as pd

from gasnet.core.models.network import Network
from gasnet.core.models.verdict import VerdictMap
from gasnet.core.postprocess.summary import MaterialSummary

VERDICT_COLUMNS = [
    "pipe_uid", "node_from", "node_to", "size", "length_ft",
    "flow_btuh", "capacity_btuh", "utilization", "is_valid", "error",
]


def verdicts_dataframe(network: Network, verdicts: VerdictMap) -> pd.DataFrame:
    """
    One row per pipe, in network order.
    Columns:
      pipe_uid, node_from, node_to, size, length_ft,
      flow_btuh, capacity_btuh, utilization, is_valid, error
    utilization is flow/capacity (inf when capacity is 0 and flow > 0).
    """
    rows = []
    for uid, p in network.pipes.items():
        v = verdicts.get(uid)
        if v is None:
            continue
        if v.capacity_btuh > 0:
            util = v.flow_btuh / v.capacity_btuh
        else:
            util = float("inf") if v.flow_btuh > 0 else 0.0
        rows.append({
            "pipe_uid": uid,
            "node_from": p.node_from,
            "node_to": p.node_to,
            "size": str(p.size),
            "length_ft": float(p.length_ft),
            "flow_btuh": float(v.flow_btuh),
            "capacity_btuh": int(v.capacity_btuh),
            "utilization": util,
            "is_valid": bool(v.is_valid),
            "error": v.error or "",
        })
    return pd.DataFrame(rows, columns=VERDICT_COLUMNS)


def export_verdicts_csv(network: Network, verdicts: VerdictMap, path_csv: str) -> None:
    verdicts_dataframe(network, verdicts).to_csv(path_csv, index=False)


def export_verdicts_excel(
    network: Network,
    verdicts: VerdictMap,
    path_xlsx: str,
    sheet_name: str = "verdicts",
) -> None:
    """
    Export the verdict table to Excel.
    """
    df = verdicts_dataframe(network, verdicts)
    with pd.ExcelWriter(path_xlsx, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)


def summary_dataframe(summary: MaterialSummary) -> pd.DataFrame:
    """
    Long table:
      category, item, value
    """
    rows = []
    for size, length in summary.length_ft_by_size.items():
        rows.append({"category": "pipe_length_ft", "item": size, "value": float(length)})
    for inlet, count in summary.junctions_by_inlet.items():
        rows.append({"category": "junctions", "item": inlet, "value": float(count)})
    for inlet, count in summary.manifolds_by_inlet.items():
        rows.append({"category": "manifolds", "item": inlet, "value": float(count)})
    rows.append({"category": "load_btuh", "item": "connected", "value": float(summary.connected_load_btuh)})
    rows.append({"category": "load_btuh", "item": "total", "value": float(summary.total_load_btuh)})
    rows.append({"category": "violations", "item": "count", "value": float(summary.n_violations)})
    return pd.DataFrame(rows, columns=["category", "item", "value"])


def export_summary_csv(summary: MaterialSummary, path_csv: str) -> None:
    summary_dataframe(summary).to_csv(path_csv, index=False)
