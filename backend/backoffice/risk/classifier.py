from __future__ import annotations

import math
from typing import Optional

from backoffice.risk.assessment import RiskTier

HIGH_RISK_BELOW = 50.0
LOW_RISK_FROM = 75.0


def classify(success_ratio: Optional[float]) -> RiskTier:
    """Map a 0-100 success ratio to a risk tier.

    Each band includes its lower bound: 50 is medium, 75 is low. A missing
    ratio counts as 0.
    """
    ratio = 0.0 if success_ratio is None or math.isnan(success_ratio) else float(success_ratio)
    if ratio < HIGH_RISK_BELOW:
        return RiskTier.HIGH
    if ratio < LOW_RISK_FROM:
        return RiskTier.MEDIUM
    return RiskTier.LOW
