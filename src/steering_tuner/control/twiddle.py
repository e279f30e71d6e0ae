#!/usr/bin/env python3
"""
Twiddle 파라미터 탐색 모듈

좌표 하강(coordinate descent) 방식의 미분 불필요 최적화기입니다. 한 번에
한 단계씩만 진행하므로 호출 사이에 시뮬레이션 에피소드 한 번을 돌려
새 점수를 측정할 수 있습니다. 지역 최소값에 빠지기 쉽습니다.

상태:
    PROBE_UP: 수렴 확인 후 현재 좌표를 probe 크기만큼 증가
    PROBE_DOWN: 개선되었으면 다음 좌표로, 아니면 반대 방향(-2 * probe) 시도
    CONCLUDE: 개선되었으면 다음 좌표로, 아니면 원복 + probe 축소 후
              같은 호출 안에서 PROBE_UP 로직까지 수행

호출자에게 제어가 돌아갈 때는 항상 측정해야 할 섭동이 정확히 하나
적용되어 있습니다 (수렴 시 제외).

참고문헌:
    [1] Thrun, S. "Artificial Intelligence for Robotics", Lesson 5:
        PID Control (Twiddle).

Author: HYCU Autonomous Driving Team
"""
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

from steering_tuner.errors import ConfigError


GROWTH_RATE = 1.25
DECAY_RATE = 0.75
INITIAL_PROBE = 1.0


class TwiddleState(Enum):
    """Twiddle 상태 열거형."""
    PROBE_UP = 1
    PROBE_DOWN = 2
    CONCLUDE = 3


class Twiddle:
    """재개 가능한 단일 스텝 좌표 하강 탐색기."""

    def __init__(
        self,
        tolerance: float,
        probe_sizes: Optional[Sequence[float]] = None,
        growth: float = GROWTH_RATE,
        decay: float = DECAY_RATE,
        initial_probe: float = INITIAL_PROBE
    ):
        """Twiddle 초기화.

        Args:
            tolerance: probe 크기 합이 이 값보다 작아지면 수렴
            probe_sizes: 좌표별 초기 probe 크기 (None이면 첫 호출 시
                initial_probe로 채움)
            growth: 개선 시 probe 증가 배율 (>1)
            decay: 실패 시 probe 감소 배율 (0~1)
            initial_probe: probe_sizes 미지정 시 좌표별 기본값
        """
        if not tolerance > 0:
            raise ConfigError(f"tolerance must be positive, got {tolerance}")
        if not growth > 1.0:
            raise ConfigError(f"growth must be > 1, got {growth}")
        if not 0.0 < decay < 1.0:
            raise ConfigError(f"decay must be in (0, 1), got {decay}")
        if not initial_probe >= 0:
            raise ConfigError(f"initial_probe must be non-negative, got {initial_probe}")

        self.tolerance = tolerance
        self.growth = growth
        self.decay = decay
        self.initial_probe = initial_probe

        self._state = TwiddleState.PROBE_UP
        self._cursor = 0
        self._probes: List[float] = []
        self._best_score = float('inf')
        self._best_params: List[float] = []
        self._converged = False

        if probe_sizes is not None:
            self.probe_sizes = probe_sizes

    @property
    def state(self) -> TwiddleState:
        return self._state

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def probe_sizes(self) -> List[float]:
        return list(self._probes)

    @probe_sizes.setter
    def probe_sizes(self, sizes: Sequence[float]) -> None:
        sizes = [float(s) for s in sizes]
        if not sizes:
            raise ConfigError("probe_sizes must not be empty")
        if any(s < 0 for s in sizes):
            raise ConfigError(f"probe_sizes must be non-negative, got {sizes}")
        if self._best_params and len(sizes) != len(self._best_params):
            raise ConfigError(
                f"probe_sizes length {len(sizes)} does not match "
                f"parameter count {len(self._best_params)}"
            )
        self._probes = sizes

    @property
    def best_score(self) -> float:
        return self._best_score

    @property
    def best_params(self) -> List[float]:
        return list(self._best_params)

    @property
    def converged(self) -> bool:
        return self._converged

    def step(self, score: float, params: List[float]) -> bool:
        """파라미터를 한 단계 조정.

        Args:
            score: 직전 에피소드 점수 (낮을수록 좋음, 절대값으로 비교)
            params: 직전 에피소드에 사용한 파라미터 (제자리 수정됨)

        Returns:
            탐색 완료 시 True (params는 최적값으로 복원됨)
        """
        abs_score = abs(score)

        if not self._best_params:
            self._initialize(abs_score, params)

        if self._state == TwiddleState.PROBE_UP:
            return self._probe_up(params)

        if abs_score < self._best_score:
            self._accept(abs_score, params)
            return False

        if self._state == TwiddleState.PROBE_DOWN:
            params[self._cursor] -= 2.0 * self._probes[self._cursor]
            self._state = TwiddleState.CONCLUDE
            return False

        # CONCLUDE: both directions failed
        params[self._cursor] += self._probes[self._cursor]
        self._probes[self._cursor] *= self.decay
        self._advance()
        return self._probe_up(params)

    def _initialize(self, abs_score: float, params: List[float]) -> None:
        if not params:
            raise ConfigError("cannot twiddle an empty parameter vector")
        if not self._probes:
            self._probes = [self.initial_probe] * len(params)
        elif len(self._probes) != len(params):
            raise ConfigError(
                f"probe_sizes length {len(self._probes)} does not match "
                f"parameter count {len(params)}"
            )
        self._best_params = list(params)
        self._best_score = abs_score

    def _probe_up(self, params: List[float]) -> bool:
        if float(np.sum(self._probes)) < self.tolerance:
            params[:] = self._best_params
            self._converged = True
            return True

        params[self._cursor] += self._probes[self._cursor]
        self._state = TwiddleState.PROBE_DOWN
        return False

    def _accept(self, abs_score: float, params: List[float]) -> None:
        self._best_score = abs_score
        self._best_params = list(params)
        self._probes[self._cursor] *= self.growth
        self._advance()
        self._state = TwiddleState.PROBE_UP

    def _advance(self) -> None:
        self._cursor = (self._cursor + 1) % len(self._probes)
