#!/usr/bin/env python3
"""
튜닝 수퍼바이저 모듈

텔레메트리 한 틱마다 호출되어 PID 조향값을 계산하고, 에피소드 단위로
증거를 모아 점수를 매긴 뒤 Twiddle에 넘겨 게인을 조정합니다.

에피소드 흐름:
    1. 무시 구간 (ignore_ticks): 차량이 출발/안정화하는 동안 수집 안 함
    2. 수집 구간 (window_ticks): (CTE, speed) 누적
    3. 종료: 윈도우가 가득 차거나 유예 구간(grace_ticks) 이후 조기 종료
       조건 발생 -> 점수 계산 -> Twiddle.step -> 게인 적용 -> 리셋 요청

점수 정책 (평균 + 조기 종료 최악값):
    score = mean(|CTE|) / (mean(speed) + 0.01)
    CTE 초과 / 속도 미달로 조기 종료 시 score = float 최대값

Author: HYCU Autonomous Driving Team
"""
import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np

from steering_tuner.config import TuningConfig
from steering_tuner.control.pid import PIDController
from steering_tuner.control.twiddle import Twiddle


logger = logging.getLogger(__name__)

SPEED_EPSILON = 0.01
WORST_SCORE = sys.float_info.max


# =============================================================================
# Enums / Records
# =============================================================================

class TerminationReason(Enum):
    """에피소드 종료 사유."""
    WINDOW_FULL = 1
    MAX_ERROR = 2
    MIN_SPEED = 3
    MAX_TICKS = 4


@dataclass(frozen=True)
class TrialResult:
    """점수가 매겨진 에피소드 한 번의 결과."""
    episode: int
    score: float
    reason: TerminationReason
    params_before: List[float]
    params_after: List[float]
    converged: bool

    @property
    def gains_changed(self) -> bool:
        return self.params_before != self.params_after


@dataclass(frozen=True)
class TickResult:
    """틱 한 번의 출력."""
    steering: float
    throttle: float
    reset_requested: bool = False
    trial: Optional[TrialResult] = None


# =============================================================================
# Trial Window
# =============================================================================

class TrialWindow:
    """에피소드 한 번 동안의 (CTE, speed) 증거 버퍼."""

    def __init__(self, capacity: int, ignore_ticks: int):
        self.capacity = capacity
        self.ignore_ticks = ignore_ticks
        self.errors = np.zeros(capacity)
        self.speeds = np.zeros(capacity)
        self.count = 0
        self.tick = 0

    @property
    def full(self) -> bool:
        return self.count >= self.capacity

    @property
    def collecting(self) -> bool:
        """무시 구간이 지났는지 여부."""
        return self.tick > self.ignore_ticks

    def advance(self, cte: float, speed: float) -> None:
        """틱 카운터 증가 후, 무시 구간이 지났으면 증거 추가."""
        self.tick += 1
        if self.collecting and not self.full:
            self.errors[self.count] = cte
            self.speeds[self.count] = speed
            self.count += 1

    def score(self) -> float:
        """수집된 증거로 점수 계산. 증거가 없으면 최악값."""
        if self.count == 0:
            return WORST_SCORE
        mean_error = float(np.mean(np.abs(self.errors[:self.count])))
        mean_speed = float(np.mean(self.speeds[:self.count]))
        return mean_error / (mean_speed + SPEED_EPSILON)

    def clear(self) -> None:
        self.count = 0
        self.tick = 0


# =============================================================================
# Supervisor
# =============================================================================

class TuningSupervisor:
    """틱 단위 PID 제어 + 에피소드 단위 Twiddle 튜닝."""

    def __init__(self, config: Optional[TuningConfig] = None):
        self.config = (config or TuningConfig()).validate()

        self._params = list(self.config.gains)
        self.pid = PIDController(*self._params)
        self.twiddle = Twiddle(
            self.config.tolerance,
            probe_sizes=self.config.probe_sizes,
            growth=self.config.growth,
            decay=self.config.decay,
        )
        self.window = TrialWindow(self.config.window_ticks, self.config.ignore_ticks)

        self.tuning_enabled = self.config.tuning_enabled
        self.episodes_scored = 0
        self.last_result: Optional[TrialResult] = None

    @property
    def gains(self) -> List[float]:
        return list(self._params)

    def on_telemetry(self, cte: float, speed: float) -> TickResult:
        """텔레메트리 한 틱 처리.

        Args:
            cte: 횡방향 편차
            speed: 차량 속도

        Returns:
            조향/스로틀 및 리셋 요청 여부
        """
        trial = None
        if self.tuning_enabled:
            self.window.advance(cte, speed)
            reason = self._check_termination(cte, speed)
            if reason is not None:
                trial = self._finalize(reason)

        steering = self.pid.compute(cte)
        logger.debug("CTE: %.4f Steering: %.4f Speed: %.2f", cte, steering, speed)

        return TickResult(
            steering=steering,
            throttle=self.config.throttle,
            reset_requested=trial is not None,
            trial=trial,
        )

    def end_episode(self) -> None:
        """튜닝 없이 현재 에피소드 폐기 (연결 끊김 등)."""
        if self.window.tick:
            logger.info("Episode discarded after %d ticks", self.window.tick)
        self.window.clear()

    def _check_termination(self, cte: float, speed: float) -> Optional[TerminationReason]:
        cfg = self.config
        tick = self.window.tick

        if tick > cfg.grace_ticks:
            if abs(cte) > cfg.max_cte:
                return TerminationReason.MAX_ERROR
            if speed < cfg.min_speed:
                return TerminationReason.MIN_SPEED
            if cfg.max_episode_ticks is not None and tick > cfg.max_episode_ticks:
                return TerminationReason.MAX_TICKS

        if self.window.full:
            return TerminationReason.WINDOW_FULL
        return None

    def _score(self, reason: TerminationReason) -> float:
        if reason in (TerminationReason.MAX_ERROR, TerminationReason.MIN_SPEED):
            return WORST_SCORE
        return self.window.score()

    def _finalize(self, reason: TerminationReason) -> TrialResult:
        if reason != TerminationReason.WINDOW_FULL:
            logger.info("Terminating early (%s) at tick %d", reason.name, self.window.tick)

        score = self._score(reason)
        before = list(self._params)
        done = self.twiddle.step(score, self._params)
        self.pid.reconfigure(self._params)

        if before == self._params:
            logger.info("Kept PID params: %s (score %.6g)", _fmt(self._params), score)
        else:
            logger.info("Trying PID params: %s (score %.6g)", _fmt(self._params), score)
        logger.info("Twiddle probe sizes: %s", _fmt(self.twiddle.probe_sizes))

        self.episodes_scored += 1
        result = TrialResult(
            episode=self.episodes_scored,
            score=score,
            reason=reason,
            params_before=before,
            params_after=list(self._params),
            converged=done,
        )
        self.last_result = result

        if done:
            self.tuning_enabled = False
            logger.info("Twiddle complete. Final params: %s", _fmt(self._params))

        # Let longer runs accumulate before scoring
        cfg = self.config
        if cfg.widen_every and self.episodes_scored % cfg.widen_every == 0:
            self.window.ignore_ticks += cfg.ignore_increment
            logger.info("Ignore window widened to %d ticks", self.window.ignore_ticks)

        self.window.clear()
        return result


def _fmt(values: List[float]) -> str:
    return ", ".join(f"{v:.6g}" for v in values)
