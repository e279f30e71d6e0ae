"""
튜닝 설정

운영자가 시작 시 지정하는 상수들. 기본값은 시뮬레이터 트랙에서 사용하던
값입니다.
"""
from dataclasses import dataclass, field, fields
from typing import List, Optional

from steering_tuner.errors import ConfigError


# Twiddle
TWIDDLE_TOLERANCE = 0.1
TWIDDLE_PROBE_SIZES = [0.1, 0.1, 0.1]
TWIDDLE_GROWTH_RATE = 1.25
TWIDDLE_DECAY_RATE = 0.75

# Episode timing (ticks)
IGNORE_FIRST_N_TICKS = 200
AVERAGE_ERROR_OVER_N_TICKS = 400
ALLOW_ALL_IN_FIRST_N_TICKS = 100
INCREASE_IGNORE_PERIOD_EVERY_N_EPISODES = 6  # 2 runs per parameter

# Early termination
MAX_ALLOWED_CTE = 4.0
MIN_ALLOWED_SPEED = 5.0

# Command
THROTTLE = 0.3

# Simulator server
HOST = '0.0.0.0'
PORT = 4567


@dataclass
class TuningConfig:
    """제어/튜닝 설정값.

    Attributes:
        gains: 초기 게인 [Kp, Ki, Kd]
        probe_sizes: Twiddle 초기 probe 크기
        tolerance: probe 합 수렴 임계값
        growth: probe 증가 배율
        decay: probe 감소 배율
        grace_ticks: 조기 종료 판정을 유예하는 에피소드 초기 틱 수
        ignore_ticks: 증거 수집 전 무시하는 틱 수
        ignore_increment: 무시 구간 확장량 (틱)
        widen_every: 몇 에피소드마다 무시 구간을 확장할지 (0이면 확장 안 함)
        window_ticks: 점수 계산에 사용하는 증거 윈도우 크기
        max_cte: 조기 종료 CTE 상한 (절대값)
        min_speed: 조기 종료 속도 하한
        max_episode_ticks: 에피소드 최대 틱, 이 값을 넘는 틱에서 종료 (None이면 제한 없음)
        throttle: 매 틱 전송하는 스로틀
        tuning_enabled: False면 고정 게인으로 주행만 수행
    """
    gains: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    probe_sizes: List[float] = field(default_factory=lambda: list(TWIDDLE_PROBE_SIZES))
    tolerance: float = TWIDDLE_TOLERANCE
    growth: float = TWIDDLE_GROWTH_RATE
    decay: float = TWIDDLE_DECAY_RATE
    grace_ticks: int = ALLOW_ALL_IN_FIRST_N_TICKS
    ignore_ticks: int = IGNORE_FIRST_N_TICKS
    ignore_increment: int = IGNORE_FIRST_N_TICKS
    widen_every: int = INCREASE_IGNORE_PERIOD_EVERY_N_EPISODES
    window_ticks: int = AVERAGE_ERROR_OVER_N_TICKS
    max_cte: float = MAX_ALLOWED_CTE
    min_speed: float = MIN_ALLOWED_SPEED
    max_episode_ticks: Optional[int] = None
    throttle: float = THROTTLE
    tuning_enabled: bool = True

    def validate(self) -> 'TuningConfig':
        """설정 검증. 잘못된 값이면 ConfigError.

        Returns:
            self (체이닝용)
        """
        if len(self.gains) != 3:
            raise ConfigError(f"gains must be [kp, ki, kd], got {self.gains}")
        if len(self.probe_sizes) != len(self.gains):
            raise ConfigError(
                f"probe_sizes must have {len(self.gains)} entries, got {self.probe_sizes}"
            )
        if any(p < 0 for p in self.probe_sizes):
            raise ConfigError(f"probe_sizes must be non-negative, got {self.probe_sizes}")
        if not self.tolerance > 0:
            raise ConfigError(f"tolerance must be positive, got {self.tolerance}")
        if not self.growth > 1.0:
            raise ConfigError(f"growth must be > 1, got {self.growth}")
        if not 0.0 < self.decay < 1.0:
            raise ConfigError(f"decay must be in (0, 1), got {self.decay}")
        if self.window_ticks < 1:
            raise ConfigError(f"window_ticks must be >= 1, got {self.window_ticks}")
        for name in ('grace_ticks', 'ignore_ticks', 'ignore_increment', 'widen_every'):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be non-negative, got {getattr(self, name)}")
        if self.max_episode_ticks is not None and self.max_episode_ticks < 1:
            raise ConfigError(
                f"max_episode_ticks must be >= 1 or None, got {self.max_episode_ticks}"
            )
        return self

    def summary(self) -> str:
        return ", ".join(f"{f.name}={getattr(self, f.name)}" for f in fields(self))
