# gasnet/core/hydraulics/capacity.py
from __future__ import annotations

import math
import sys
from typing import Optional

import numpy as np

from gasnet.core.hydraulics.pipe_sizes import PIPE_SPECS, PipeSize, PipeSpec

CFH_TO_BTUH = 1000  # 1 ft3 natural gas ~ 1000 BTU

# int64 ceiling of the vectorized form [CFH]; 2**53 * 1000 still fits
VEC_MAX_CFH = float(2 ** 53)


def _spec_for(size: object) -> Optional[PipeSpec]:
    if isinstance(size, PipeSize):
        return PIPE_SPECS.get(size)
    try:
        return PIPE_SPECS.get(PipeSize.parse(size))
    except ValueError:
        return None


def _cfh_log_space(drop: float, L: float, spec: PipeSpec) -> float:
    """Same relation through logs, for L so small that drop / L overflows."""
    try:
        cfh = math.exp((math.log(drop) - math.log(L) - math.log(spec.coeff)) / spec.exponent)
    except OverflowError:
        return sys.float_info.max
    return cfh if math.isfinite(cfh) else sys.float_info.max


def pipe_capacity_btuh(
    size: PipeSize,
    length_ft: float,
    pressure_drop_inwc: float = 0.5,
) -> int:
    """
    Escalar: capacidad máxima [BTU/h] de un tramo.

    capacity = floor(((drop / L) / coeff) ** (1 / exponent)) * 1000

    Returns 0 for a segment that cannot be evaluated yet
    (L <= 0, unknown size, drop <= 0). A positive L small enough to
    overflow drop / L still yields a (very large) finite capacity.
    """
    spec = _spec_for(size)
    if spec is None:
        return 0
    try:
        L = float(length_ft)
        drop = float(pressure_drop_inwc)
    except (TypeError, ValueError):
        return 0
    if not (L > 0) or not (drop > 0) or math.isinf(L):
        return 0

    # operation order matters: floor() is sensitive to the last ulp
    ratio = (drop / L) / spec.coeff
    if math.isfinite(ratio):
        try:
            cfh = ratio ** (1 / spec.exponent)
        except OverflowError:
            cfh = sys.float_info.max
    else:
        cfh = _cfh_log_space(drop, L, spec)
    return math.floor(cfh) * CFH_TO_BTUH


def pipe_capacity_btuh_vec(
    size: PipeSize,
    length_ft: np.ndarray,
    pressure_drop_inwc: float = 0.5,
) -> np.ndarray:
    """
    Vectorizado: lengths (n,) -> capacity (n,) [BTU/h], 0 where L <= 0.
    Capacities are capped at VEC_MAX_CFH * 1000 to stay in int64.
    """
    spec = _spec_for(size)
    L = np.asarray(length_ft, dtype=float)
    out = np.zeros(L.shape, dtype=np.int64)
    if spec is None or not (pressure_drop_inwc > 0):
        return out

    ok = np.isfinite(L) & (L > 0)
    with np.errstate(over="ignore", divide="ignore"):
        ratio = (pressure_drop_inwc / L[ok]) / spec.coeff
        cfh = np.where(
            np.isfinite(ratio),
            ratio ** (1 / spec.exponent),
            np.exp((np.log(pressure_drop_inwc) - np.log(L[ok]) - np.log(spec.coeff)) / spec.exponent),
        )
    cfh = np.minimum(np.nan_to_num(cfh, nan=VEC_MAX_CFH, posinf=VEC_MAX_CFH), VEC_MAX_CFH)
    out[ok] = np.floor(cfh).astype(np.int64) * CFH_TO_BTUH
    return out
