from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class PipeSize(Enum):
    """
    Nominal gas pipe diameters, ordered by an explicit rank (smallest first).
    """
    THREE_EIGHTHS = ('3/8"', 0)
    HALF = ('1/2"', 1)
    THREE_QUARTERS = ('3/4"', 2)
    ONE = ('1"', 3)
    ONE_AND_QUARTER = ('1-1/4"', 4)

    def __init__(self, label: str, rank: int):
        self.label = label
        self.rank = rank

    def __str__(self) -> str:
        return self.label

    @classmethod
    def parse(cls, value: object) -> "PipeSize":
        """
        Accepts a PipeSize, its nominal label ('1/2"'), its name ('HALF')
        or a loose spelling ('1/2', '1/2in', '1 1/4').
        """
        if isinstance(value, PipeSize):
            return value
        key = _norm_label(value)
        if key in PIPE_SIZE_ALIASES:
            return PIPE_SIZE_ALIASES[key]
        raise ValueError(
            f"Unknown pipe size {value!r}. Allowed: {[s.label for s in cls]}"
        )


def _norm_label(value: object) -> str:
    s = str(value).strip().lower()
    for token in ('"', "''", "inches", "inch", "in"):
        s = s.replace(token, "")
    return s.strip().replace(" ", "-")


# ============================================================
# Canonicalización de etiquetas de diámetro
# ============================================================
# Entrada (snapshot / Excel)  ->  PipeSize
#
# Regla:
#  - keys en lowercase, sin comillas ni unidades
#  - espacios internos -> "-"
# ============================================================

PIPE_SIZE_ALIASES: Mapping[str, PipeSize] = MappingProxyType({
    # 3/8"
    "3/8": PipeSize.THREE_EIGHTHS,
    "three_eighths": PipeSize.THREE_EIGHTHS,
    "0.375": PipeSize.THREE_EIGHTHS,
    # 1/2"
    "1/2": PipeSize.HALF,
    "half": PipeSize.HALF,
    "0.5": PipeSize.HALF,
    # 3/4"
    "3/4": PipeSize.THREE_QUARTERS,
    "three_quarters": PipeSize.THREE_QUARTERS,
    "0.75": PipeSize.THREE_QUARTERS,
    # 1"
    "1": PipeSize.ONE,
    "one": PipeSize.ONE,
    "1.0": PipeSize.ONE,
    # 1-1/4"
    "1-1/4": PipeSize.ONE_AND_QUARTER,
    "one_and_quarter": PipeSize.ONE_AND_QUARTER,
    "1.25": PipeSize.ONE_AND_QUARTER,
})


@dataclass(frozen=True)
class PipeSpec:
    """
    Calibration data of the power-law capacity relation for one size.

    capacity [CFH] = ((drop / length) / coeff) ** (1 / exponent)
    nominal_capacity_btuh is the display value at 10 ft / 0.5 in. w.c.
    """
    size: PipeSize
    coeff: float
    exponent: float
    nominal_capacity_btuh: int

    @property
    def rank(self) -> int:
        return self.size.rank


# Fitted constants, carried over unchanged.
PIPE_SPECS: Mapping[PipeSize, PipeSpec] = MappingProxyType({
    PipeSize.THREE_EIGHTHS: PipeSpec(
        size=PipeSize.THREE_EIGHTHS,
        coeff=0.00002158927,
        exponent=2.02558185,
        nominal_capacity_btuh=46000,
    ),
    PipeSize.HALF: PipeSpec(
        size=PipeSize.HALF,
        coeff=0.00000410606,
        exponent=2.1590935,
        nominal_capacity_btuh=77000,
    ),
    PipeSize.THREE_QUARTERS: PipeSpec(
        size=PipeSize.THREE_QUARTERS,
        coeff=0.00000123682,
        exponent=2.00156167,
        nominal_capacity_btuh=200000,
    ),
    PipeSize.ONE: PipeSpec(
        size=PipeSize.ONE,
        coeff=0.0000010746,
        exponent=1.77654817,
        nominal_capacity_btuh=423000,
    ),
    PipeSize.ONE_AND_QUARTER: PipeSpec(
        size=PipeSize.ONE_AND_QUARTER,
        coeff=1.1678553403503e-07,
        exponent=1.992081557687,
        nominal_capacity_btuh=662000,
    ),
})


def sizes_by_rank() -> list[PipeSize]:
    return sorted(PipeSize, key=lambda s: s.rank)
