#!/usr/bin/env python3
"""
PID 조향 제어 모듈

횡방향 편차(CTE)로부터 [-1, 1] 범위의 조향 보정값을 계산합니다.

알고리즘:
    u = -(Kp * e + Ki * Σe + Kd * (e - e_prev))

    여기서:
    - e: 현재 CTE
    - Σe: 생성 이후 모든 CTE의 누적합 (윈도우/감쇠 없음)
    - e_prev: 직전 CTE

게인을 바꿔도 누적합과 직전 오차는 유지됩니다. 다음 틱은 기존 적분/미분
기억에서 그대로 이어집니다.

Author: HYCU Autonomous Driving Team
"""
from typing import List, Sequence

import numpy as np


STEERING_LIMIT = 1.0


class PIDController:
    """CTE 기반 PID 조향 제어기."""

    def __init__(self, kp: float = 0.0, ki: float = 0.0, kd: float = 0.0):
        self.kp = float(kp)
        self.ki = float(ki)
        self.kd = float(kd)

        self._total_error = 0.0
        self._prev_error = 0.0

    @property
    def gains(self) -> List[float]:
        """현재 게인 [Kp, Ki, Kd] 복사본."""
        return [self.kp, self.ki, self.kd]

    @property
    def integral(self) -> float:
        return self._total_error

    @property
    def prev_error(self) -> float:
        return self._prev_error

    def reconfigure(self, gains: Sequence[float]) -> None:
        """게인 교체. 누적 오차와 직전 오차는 건드리지 않습니다.

        Args:
            gains: [Kp, Ki, Kd]
        """
        self.kp, self.ki, self.kd = (float(g) for g in gains)

    def compute(self, cte: float) -> float:
        """조향 보정값 계산.

        Args:
            cte: 현재 횡방향 편차

        Returns:
            조향 보정값, [-1.0, 1.0] 범위로 클리핑
        """
        self._total_error += cte
        value = (-self.kp * cte
                 - self.ki * self._total_error
                 - self.kd * (cte - self._prev_error))
        self._prev_error = cte

        return float(np.clip(value, -STEERING_LIMIT, STEERING_LIMIT))
