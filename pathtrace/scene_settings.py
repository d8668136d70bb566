from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class RenderSettings:
    width: int = 960
    height: int = 540
    samples_level: int = 1 # samples_level^2 samples per pixel
    max_depth: int = 8
    workers: int = 1
    seed: int | None = None
    max_leaf_size: int = 20
    chunk_rows: int = 8
    gamma: float = 2.2

    @property
    def aspect_ratio(self) -> float:
        return float(self.width) / float(self.height)

    @property
    def samples_per_pixel(self) -> int:
        return self.samples_level * self.samples_level

    def validate(self) -> None:
        for name in ("width", "height", "samples_level", "workers", "max_leaf_size", "chunk_rows"):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")
        if self.gamma <= 0.0:
            raise ValueError(f"gamma must be positive, got {self.gamma}")
