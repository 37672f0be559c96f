"""Virtual data center hierarchy for a tenant.

The tree shape is declared as a ``NodeSpec`` layout and built by one
recursive function. Children split their parent's spend and resource count
by fixed fractions; the last child of every parent takes the remainder, so
child sums equal the parent exactly at every level.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from .models import VDCLevel, VDCNode
from .randomness import RandomSource, jitter, resolve, uniform

logger = logging.getLogger(__name__)

LEVELS = list(VDCLevel)

# Maximum trend magnitude in percent by depth; deeper nodes reuse the last band
TREND_BANDS = (15.0, 12.0, 10.0, 8.0)

ROOT_RESOURCES = 150
ROOT_SPEND_BAND = (0.7, 0.9)


@dataclass(frozen=True)
class NodeSpec:
    """Declarative node: a name and ``(fraction, child)`` pairs."""

    name: str
    children: tuple[tuple[float, "NodeSpec"], ...] = field(default_factory=tuple)

    def depth(self) -> int:
        if not self.children:
            return 1
        return 1 + max(child.depth() for _, child in self.children)


DEFAULT_LAYOUT = NodeSpec("Enterprise VDC", (
    (0.45, NodeSpec("IT Division", (
        (0.55, NodeSpec("Infrastructure", (
            (0.55, NodeSpec("Network Team")),
            (0.45, NodeSpec("Storage Team")),
        ))),
        (0.45, NodeSpec("Development")),
    ))),
    (0.35, NodeSpec("Operations")),
    (0.20, NodeSpec("Finance")),
))


def validate_layout(layout: NodeSpec) -> None:
    """Raise ``ValueError`` unless every split sums to 1 and depth fits the levels."""
    if layout.depth() > len(LEVELS):
        raise ValueError(f"Layout depth {layout.depth()} exceeds {len(LEVELS)} VDC levels")
    _validate_fractions(layout)


def _validate_fractions(node_spec: NodeSpec) -> None:
    if not node_spec.children:
        return
    fractions = [fraction for fraction, _ in node_spec.children]
    if any(fraction <= 0 for fraction in fractions):
        raise ValueError(f"Non-positive split under '{node_spec.name}': {fractions}")
    if not math.isclose(sum(fractions), 1.0, abs_tol=1e-9):
        raise ValueError(f"Splits under '{node_spec.name}' sum to {sum(fractions)}, expected 1")
    for _, child in node_spec.children:
        _validate_fractions(child)


def _trend(rng: RandomSource, depth: int) -> float:
    band = TREND_BANDS[min(depth, len(TREND_BANDS) - 1)]
    return round(jitter(rng, band), 2)


def build_hierarchy(
    tenant_id: str,
    tenant_budget: float,
    rng: Optional[RandomSource] = None,
    layout: NodeSpec = DEFAULT_LAYOUT,
    root_resources: int = ROOT_RESOURCES,
) -> VDCNode:
    """Build the VDC tree of a tenant.

    Args:
        tenant_id: Tenant id, used as the node id prefix
        tenant_budget: Root budget
        rng: Random source for root spend and trends
        layout: Tree shape and split fractions
        root_resources: Resource count at the root

    Returns:
        Root node; ``spend`` and ``resources`` of each parent equal the sums
        over its children
    """
    validate_layout(layout)
    rng = resolve(rng)
    counters: dict[VDCLevel, int] = {}

    def build(node_spec: NodeSpec, depth: int, spend: float, budget: float, resources: int) -> VDCNode:
        level = LEVELS[depth]
        counters[level] = counters.get(level, 0) + 1
        node_id = f"{tenant_id}-{level.value}" if depth == 0 else f"{tenant_id}-{level.value}-{counters[level]}"

        node = VDCNode(
            id=node_id,
            name=node_spec.name,
            level=level,
            spend=spend,
            budget=budget,
            resources=resources,
            trend=_trend(rng, depth),
        )
        if not node_spec.children:
            return node

        children = []
        spend_left = spend
        resources_left = resources
        last = len(node_spec.children) - 1
        for index, (fraction, child_spec) in enumerate(node_spec.children):
            if index == last:
                child_spend = spend_left
                child_resources = resources_left
            else:
                child_spend = spend * fraction
                child_resources = math.floor(resources * fraction)
                spend_left -= child_spend
                resources_left -= child_resources
            children.append(build(child_spec, depth + 1, child_spend, budget * fraction, child_resources))

        node.children = children
        return node

    root_spend = tenant_budget * uniform(rng, *ROOT_SPEND_BAND)
    root = build(layout, 0, root_spend, tenant_budget, root_resources)
    logger.debug(f"Built VDC hierarchy for {tenant_id} with {sum(counters.values())} nodes")
    return root


def flatten(node: VDCNode) -> list[VDCNode]:
    """Depth-first pre-order: every node precedes all of its descendants."""
    result = [node]
    for child in node.children or []:
        result.extend(flatten(child))
    return result


def level_label(level: VDCLevel) -> str:
    """``vdc3`` -> ``VDC L3``."""
    return level.value.upper().replace("VDC", "VDC L")


def spend_by_level(nodes: list[VDCNode]) -> dict[str, float]:
    """Leaf spend per level.

    Only leaves are counted since ancestor spend already includes their
    descendants.
    """
    totals: dict[str, float] = {}
    for node in nodes:
        if node.is_leaf:
            label = level_label(node.level)
            totals[label] = totals.get(label, 0.0) + node.spend
    return totals
