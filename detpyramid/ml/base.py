"""Feature map structures shared by the backbone and neck."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from detpyramid.core.constants import PYRAMID_LEVELS

Tensor = Any

# (c3, c4, c5): strides 2, 4, 8, shallow to deep
FeatureMaps = tuple[Tensor, Tensor, Tensor]


@dataclass(frozen=True)
class FpnOutput:
    """Fused pyramid levels sharing one channel width."""

    p3: Tensor  # stride 2
    p4: Tensor  # stride 4
    p5: Tensor  # stride 8

    def as_tuple(self) -> FeatureMaps:
        """Return levels shallow to deep."""
        return (self.p3, self.p4, self.p5)

    def as_dict(self) -> dict[str, Tensor]:
        """Return levels keyed by name."""
        return dict(zip(PYRAMID_LEVELS, self.as_tuple(), strict=True))

    def __iter__(self) -> Iterator[Tensor]:
        """Iterate levels shallow to deep."""
        return iter(self.as_tuple())
