from dataclasses import dataclass

QUADRANT_COUNT = 4


@dataclass(frozen=True)
class QuadrantDimension:
    """원본의 절반 크기. 홀수 변의 마지막 행/열은 버린다."""

    width: int
    height: int

    @property
    def smallest(self) -> int:
        return min(self.width, self.height)

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0
