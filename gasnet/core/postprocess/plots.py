from __future__ import annotations

import os
from typing import Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt

from gasnet.core.hydraulics.capacity import pipe_capacity_btuh_vec
from gasnet.core.hydraulics.pipe_sizes import PipeSize, sizes_by_rank
from gasnet.core.models.network import Network
from gasnet.core.models.verdict import VerdictMap


def plot_flow_vs_capacity(
    network: Network,
    verdicts: VerdictMap,
    *,
    out_png: str,
    title: str = "Flow vs capacity",
) -> None:
    """
    Barras por tubo: demanda vs capacidad; tubos inválidos en rojo.
    """
    os.makedirs(os.path.dirname(out_png) or ".", exist_ok=True)

    uids = [u for u in network.pipes if u in verdicts]
    labels = [network.pipes[u].name or u for u in uids]
    flow = np.array([verdicts[u].flow_btuh for u in uids], dtype=float)
    cap = np.array([verdicts[u].capacity_btuh for u in uids], dtype=float)
    colors = ["#ef4444" if not verdicts[u].is_valid else "#10b981" for u in uids]

    x = np.arange(len(uids))
    plt.figure(figsize=(max(6.0, 0.6 * len(uids)), 4.0))
    plt.bar(x - 0.2, cap, width=0.4, color="#64748b", label="capacity")
    plt.bar(x + 0.2, flow, width=0.4, color=colors, label="flow")
    plt.xticks(x, labels, rotation=45, ha="right")
    plt.ylabel("BTU/h")
    plt.title(title)
    plt.legend()
    plt.grid(True, axis="y")
    plt.tight_layout()
    plt.savefig(out_png, dpi=150)
    plt.close()


def plot_capacity_curves(
    *,
    out_png: str,
    pressure_drop_inwc: float = 0.5,
    max_length_ft: float = 100.0,
    sizes: Optional[Sequence[PipeSize]] = None,
) -> None:
    """
    Genera curvas capacidad vs longitud por diámetro.
    """
    os.makedirs(os.path.dirname(out_png) or ".", exist_ok=True)

    L = np.linspace(5.0, max_length_ft, 96)
    plt.figure()
    for size in sizes or sizes_by_rank():
        plt.plot(L, pipe_capacity_btuh_vec(size, L, pressure_drop_inwc), label=str(size))
    plt.xlabel("L [ft]")
    plt.ylabel("capacity [BTU/h]")
    plt.title(f"Capacity at {pressure_drop_inwc} in. w.c. drop")
    plt.legend()
    plt.grid(True)
    plt.tight_layout()
    plt.savefig(out_png, dpi=150)
    plt.close()
