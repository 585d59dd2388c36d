"""사분면 단위 처리 러너.

사분면끼리는 의존성이 없으므로 스레드풀에서 병렬로 처리할 수 있다.
결과는 완료 순서가 아니라 입력 인덱스 순서로 모인다 (pool.map).

Pillow의 resize/crop/paste는 C 레벨에서 GIL을 놓기 때문에
GIL=1 환경에서도 어느 정도 병렬 이득이 있다.
"""

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

from PIL import Image

from model.slice import QUADRANT_COUNT

T = TypeVar("T")


def map_quadrants(
    func: Callable[[Image.Image], T],
    quadrants: list[Image.Image],
    workers: int = 4,
) -> list[T]:
    """4개 사분면에 func를 적용한다. workers <= 1이면 순차 실행."""
    if len(quadrants) != QUADRANT_COUNT:
        raise ValueError(f"사분면은 {QUADRANT_COUNT}개여야 합니다: {len(quadrants)}")

    if workers <= 1:
        return [func(q) for q in quadrants]

    with ThreadPoolExecutor(max_workers=min(workers, QUADRANT_COUNT)) as pool:
        return list(pool.map(func, quadrants))
