from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Protocol, Tuple

import numpy as np
from matplotlib import image as mpimg

RGB = Tuple[int, int, int]


class DrawSurface(Protocol):
    def fill(self, rgb: RGB, alpha: float) -> None:  # pragma: no cover - interface
        ...

    def circle(self, x: float, y: float, r: float, rgb: RGB, alpha: float) -> None:  # pragma: no cover - interface
        ...

    def line(self, x0: float, y0: float, x1: float, y1: float, rgb: RGB, alpha: float) -> None:  # pragma: no cover - interface
        ...


@dataclass
class RecordingSurface:
    """Keeps every draw call as a tuple; nothing is rasterised."""

    calls: List[Tuple[Any, ...]] = field(default_factory=list)

    def fill(self, rgb: RGB, alpha: float) -> None:
        self.calls.append(("fill", rgb, alpha))

    def circle(self, x: float, y: float, r: float, rgb: RGB, alpha: float) -> None:
        self.calls.append(("circle", x, y, r, rgb, alpha))

    def line(self, x0: float, y0: float, x1: float, y1: float, rgb: RGB, alpha: float) -> None:
        self.calls.append(("line", x0, y0, x1, y1, rgb, alpha))

    def clear(self) -> None:
        self.calls.clear()

    def of_kind(self, kind: str) -> List[Tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == kind]


class RasterSurface:
    """
    RGB pixel buffer with source-over alpha blending.

    Pixel (col, row) covers [col, col+1) x [row, row+1); shapes are sampled
    at pixel centres. Anything outside the buffer is clipped.
    """

    def __init__(self, width: int, height: int, background: RGB = (3, 7, 18)):
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.empty((self.height, self.width, 3), dtype=np.float32)
        self.pixels[...] = np.asarray(background, dtype=np.float32)

    def _blend(self, region: np.ndarray, mask: np.ndarray, rgb: RGB, alpha: float) -> None:
        a = mask.astype(np.float32)[..., None] * float(alpha)
        region[...] = region * (1 - a) + np.asarray(rgb, dtype=np.float32) * a

    def fill(self, rgb: RGB, alpha: float) -> None:
        self.pixels[...] = self.pixels * (1 - alpha) + np.asarray(rgb, dtype=np.float32) * alpha

    def circle(self, x: float, y: float, r: float, rgb: RGB, alpha: float) -> None:
        x0, x1 = max(int(np.floor(x - r)), 0), min(int(np.ceil(x + r)) + 1, self.width)
        y0, y1 = max(int(np.floor(y - r)), 0), min(int(np.ceil(y + r)) + 1, self.height)
        if x0 >= x1 or y0 >= y1:
            return
        cols = np.arange(x0, x1) + 0.5
        rows = np.arange(y0, y1) + 0.5
        mask = (cols[None, :] - x) ** 2 + (rows[:, None] - y) ** 2 <= r * r
        self._blend(self.pixels[y0:y1, x0:x1], mask, rgb, alpha)

    def line(self, x0: float, y0: float, x1: float, y1: float, rgb: RGB, alpha: float) -> None:
        n = int(np.ceil(max(abs(x1 - x0), abs(y1 - y0)))) + 1
        xs = np.floor(np.linspace(x0, x1, n)).astype(int)
        ys = np.floor(np.linspace(y0, y1, n)).astype(int)
        inside = (xs >= 0) & (xs < self.width) & (ys >= 0) & (ys < self.height)
        if not inside.any():
            return
        # Each covered pixel is blended once even when sampled twice.
        flat = np.unique(ys[inside] * self.width + xs[inside])
        rr, cc = np.divmod(flat, self.width)
        px = self.pixels[rr, cc]
        self.pixels[rr, cc] = px * (1 - alpha) + np.asarray(rgb, dtype=np.float32) * alpha

    def to_image(self) -> np.ndarray:
        return np.clip(np.rint(self.pixels), 0, 255).astype(np.uint8)

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        mpimg.imsave(path, self.to_image())
