from typing import List, Sequence

from .allocator import round_half_up
from .models import AllocationEntry

FILLED = "█"
EMPTY = "░"
DEFAULT_WIDTH = 50


def render_chart(allocations: Sequence[AllocationEntry], width: int = DEFAULT_WIDTH) -> str:
    """Horizontal bar chart with bars scaled to the largest amount."""
    max_value = max(a.assigned_amount for a in allocations)
    lines: List[str] = ["", "=== Allocation Chart ==="]
    for a in allocations:
        ratio = a.assigned_amount / max_value if max_value > 0 else 0
        bar_length = min(width, max(0, round_half_up(ratio * width)))
        bar = FILLED * bar_length + EMPTY * (width - bar_length)
        lines.append(f"{a.id:<3}: {bar} {str(a.assigned_amount):>6}")
    lines.append(f"Max: {max_value}")
    return "\n".join(lines)
