"""Configuration values shared by the flow algorithms."""

import sys
from dataclasses import dataclass


@dataclass
class FlowConfig:
    """Numeric defaults for augmentation, balancing and matching."""

    # Capacity given to edges that must never limit the flow (balancing
    # terminals, default balancer capacities).
    unbounded_capacity: float = sys.float_info.max

    # Lower bound l(e) assumed on every original edge by the graph balancer.
    balancing_preflow: int = 1

    # Residual capacities at or below this value count as saturated.
    tolerance: float = 1e-10

    def is_saturated(self, residual: float) -> bool:
        """Return True if an edge with this residual capacity carries full flow."""
        return abs(residual) <= self.tolerance


# Global configuration instance
FLOW_CONFIG = FlowConfig()
