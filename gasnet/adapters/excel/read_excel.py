from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import pandas as pd

from gasnet.core.hydraulics.pipe_sizes import PipeSize
from gasnet.core.build.config import SizingConfig
from gasnet.core.models.network import Network
from gasnet.core.models.node import Node
from gasnet.core.models.pipe import Pipe


# -----------------------------
# Excel contract
# -----------------------------
SHEET_NODES = "nodes"
SHEET_PIPES = "pipes"
SHEET_CONFIG = "config"

# Required columns (snake_case)
REQ_NODES = {"node_id", "name", "kind", "demand_btuh"}
REQ_PIPES = {"pipe_id", "node_from", "node_to", "size", "length_ft"}
REQ_CONFIG = {"key", "value"}

# Mappings: workbook spelling -> core kind
KIND_MAP = {
    "meter": "METER",
    "medidor": "METER",
    "junction": "JUNCTION",
    "tee": "JUNCTION",
    "t-junction": "JUNCTION",
    "manifold": "MANIFOLD",
    "appliance": "APPLIANCE",
    "artefacto": "APPLIANCE",
}


@dataclass(frozen=True)
class ExcelIds:
    """Workbook row ids in sheet order, for traceability."""
    node_ids: Tuple[str, ...]
    pipe_ids: Tuple[str, ...]


def _norm_str(x: Any) -> str:
    if x is None or (isinstance(x, float) and pd.isna(x)):
        return ""
    return str(x).strip()


def _norm_lower(x: Any) -> str:
    return _norm_str(x).lower()


def _require_columns(df: pd.DataFrame, required: set[str], sheet: str) -> None:
    missing = sorted(list(required - set(df.columns)))
    if missing:
        raise ValueError(f"Sheet '{sheet}' is missing required columns: {missing}")


def _as_float(x: Any, field: str, sheet: str, row_hint: str) -> float:
    try:
        if x is None or (isinstance(x, float) and pd.isna(x)) or (isinstance(x, str) and x.strip() == ""):
            raise ValueError("empty")
        return float(x)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid numeric value for '{field}' in sheet '{sheet}' ({row_hint}): {x!r}") from e


def _maybe_float(x: Any) -> Optional[float]:
    try:
        if x is None or (isinstance(x, float) and pd.isna(x)) or (isinstance(x, str) and x.strip() == ""):
            return None
        return float(x)
    except (TypeError, ValueError):
        return None


def _read_config(df_config: pd.DataFrame) -> Dict[str, Any]:
    config: Dict[str, Any] = {}
    for _, r in df_config.iterrows():
        key = _norm_lower(r["key"])
        if not key:
            continue
        val = r["value"]

        # Try to coerce to float if looks numeric
        if isinstance(val, str):
            v = val.strip()
            if v == "":
                continue
            try:
                config[key] = float(v)
            except ValueError:
                config[key] = v
            continue

        if isinstance(val, float) and pd.isna(val):
            continue

        config[key] = val
    return config


def _check_duplicates(ids: list[str], what: str, sheet: str) -> None:
    dups = sorted({x for x in ids if ids.count(x) > 1})
    if dups:
        raise ValueError(f"Duplicate {what} in sheet '{sheet}': {dups}")


def load_network_from_excel(path: str) -> Tuple[Network, Dict[str, Any], ExcelIds]:
    """
    Reads 'nodes', 'pipes' and the optional 'config' sheet from a workbook
    and returns:
      - Network (canonical core model); workbook ids are used as uids
      - config dict from 'config' sheet (keys normalized)
      - ExcelIds (row ids in sheet order)
    """
    sheets = pd.read_excel(path, sheet_name=None, engine="openpyxl")
    if SHEET_NODES not in sheets or SHEET_PIPES not in sheets:
        raise ValueError(f"Workbook must contain sheets '{SHEET_NODES}' and '{SHEET_PIPES}' (found {sorted(sheets)})")

    df_nodes = sheets[SHEET_NODES]
    df_pipes = sheets[SHEET_PIPES]
    _require_columns(df_nodes, REQ_NODES, SHEET_NODES)
    _require_columns(df_pipes, REQ_PIPES, SHEET_PIPES)

    config: Dict[str, Any] = {}
    if SHEET_CONFIG in sheets:
        _require_columns(sheets[SHEET_CONFIG], REQ_CONFIG, SHEET_CONFIG)
        config = _read_config(sheets[SHEET_CONFIG])

    # -----------------------------
    # Nodes
    # -----------------------------
    node_ids = [_norm_str(x) for x in df_nodes["node_id"].tolist() if _norm_str(x)]
    _check_duplicates(node_ids, "node_id", SHEET_NODES)

    nodes: Dict[str, Node] = {}
    for _, r in df_nodes.iterrows():
        node_id = _norm_str(r["node_id"])
        if not node_id:
            continue  # allow blank rows

        kind_raw = _norm_lower(r["kind"])
        if kind_raw not in KIND_MAP and kind_raw.upper() not in KIND_MAP.values():
            raise ValueError(
                f"Invalid kind in '{SHEET_NODES}' (node_id={node_id}): "
                f"{kind_raw!r}. Allowed: {sorted(KIND_MAP.keys())}"
            )
        kind = KIND_MAP.get(kind_raw, kind_raw.upper())

        demand = _maybe_float(r["demand_btuh"]) or 0.0
        meta = {}
        for col in ("x", "y"):
            v = _maybe_float(r.get(col, None))
            if v is not None:
                meta[col] = v

        nodes[node_id] = Node(
            uid=node_id,
            name=_norm_str(r["name"]) or node_id,
            kind=kind,  # type: ignore[arg-type]
            demand_btuh=demand,
            metadata=meta,
        )

    # -----------------------------
    # Pipes
    # -----------------------------
    pipe_ids = [_norm_str(x) for x in df_pipes["pipe_id"].tolist() if _norm_str(x)]
    _check_duplicates(pipe_ids, "pipe_id", SHEET_PIPES)

    pipes: Dict[str, Pipe] = {}
    for _, r in df_pipes.iterrows():
        pipe_id = _norm_str(r["pipe_id"])
        if not pipe_id:
            continue

        n_from = _norm_str(r["node_from"])
        n_to = _norm_str(r["node_to"])
        if n_from not in nodes:
            raise ValueError(f"Unknown node_from '{n_from}' in '{SHEET_PIPES}' (pipe_id={pipe_id})")
        if n_to not in nodes:
            raise ValueError(f"Unknown node_to '{n_to}' in '{SHEET_PIPES}' (pipe_id={pipe_id})")

        try:
            size = PipeSize.parse(_norm_str(r["size"]))
        except ValueError as e:
            raise ValueError(f"Invalid size in '{SHEET_PIPES}' (pipe_id={pipe_id}): {e}") from e

        pipes[pipe_id] = Pipe(
            uid=pipe_id,
            node_from=n_from,
            node_to=n_to,
            size=size,
            length_ft=_as_float(r["length_ft"], "length_ft", SHEET_PIPES, f"pipe_id={pipe_id}"),
            name=_norm_str(r.get("name", "")),
        )

    drop = SizingConfig.from_dict(config).pressure_drop_inwc
    network = Network(nodes=nodes, pipes=pipes, pressure_drop_inwc=drop)

    return network, config, ExcelIds(node_ids=tuple(node_ids), pipe_ids=tuple(pipe_ids))
