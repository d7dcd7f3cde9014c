# run_sizing.py
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import pandas as pd

from gasnet.adapters.excel.read_excel import load_network_from_excel
from gasnet.adapters.snapshot.json_snapshot import load_snapshot
from gasnet.core.build.validate import check_network
from gasnet.core.sizing.validator import validate_sizing, violations
from gasnet.core.postprocess.summary import summarize_materials
from gasnet.core.postprocess.export import (
    verdicts_dataframe,
    export_verdicts_csv,
    export_verdicts_excel,
    export_summary_csv,
)
from gasnet.core.postprocess.plots import plot_flow_vs_capacity


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Validate gas pipe sizing of a network snapshot.")
    ap.add_argument("input", help="snapshot .json or workbook .xlsx")
    ap.add_argument("--drop", type=float, default=None, help="system pressure drop [in. w.c.]")
    ap.add_argument("--out", default=None, help="output folder for CSV/XLSX/PNG")
    ap.add_argument("--audit", action="store_true", help="also request the narrative audit")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    # ============================================================
    # CARGA
    # ============================================================

    if args.input.lower().endswith((".xlsx", ".xlsm")):
        network, _, _ = load_network_from_excel(args.input)
    else:
        network = load_snapshot(args.input)

    drop = args.drop if args.drop is not None else network.pressure_drop_inwc

    print("LOAD OK", f"| nodes={len(network.nodes)} pipes={len(network.pipes)} drop={drop}")

    # ============================================================
    # CHEQUEO + DIMENSIONAMIENTO
    # ============================================================

    for it in check_network(network):
        print(f"[{it.level.upper()}] {it.message}" + (f" | hint: {it.hint}" if it.hint else ""))

    verdicts = validate_sizing(network, drop)
    summary = summarize_materials(network, verdicts)

    df = verdicts_dataframe(network, verdicts)
    with pd.option_context("display.max_colwidth", 60, "display.width", 160):
        print(df.drop(columns=["error"]).to_string(index=False))

    for uid, v in violations(verdicts):
        print(f"  ! {uid}: {v.error}")

    print("SIZING OK", f"| violations={summary.n_violations}",
          f"| connected load={summary.connected_load_btuh:,.0f} BTU/h")
    for size, length in summary.length_ft_by_size.items():
        if length:
            print(f"  {size:>7} {length:8.1f} ft")

    # ============================================================
    # EXPORTS
    # ============================================================

    if args.out:
        out = Path(args.out)
        out.mkdir(parents=True, exist_ok=True)
        export_verdicts_csv(network, verdicts, str(out / "verdicts.csv"))
        export_verdicts_excel(network, verdicts, str(out / "verdicts.xlsx"))
        export_summary_csv(summary, str(out / "materials.csv"))
        plot_flow_vs_capacity(network, verdicts, out_png=str(out / "flow_vs_capacity.png"))
        print("EXPORT OK", out)

    if args.audit:
        from gasnet.integrations.audit import audit_system
        print(audit_system(network))

    return 1 if summary.n_violations else 0


if __name__ == "__main__":
    raise SystemExit(main())
