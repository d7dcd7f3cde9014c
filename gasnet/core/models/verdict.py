from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True, slots=True)
class Verdict:
    """
    Sizing result for one pipe, produced fresh by every validation pass.
    """
    flow_btuh: float       # downstream demand [BTU/h]
    capacity_btuh: int     # formula capacity [BTU/h]
    is_valid: bool
    error: Optional[str] = None


# key: Pipe.uid
VerdictMap = Dict[str, Verdict]
