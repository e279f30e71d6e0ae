"""드라이버 모듈 패키지.

틱 단위 튜닝 수퍼바이저를 제공합니다. 시뮬레이터 서버는
steering_tuner.drivers.server에서 가져옵니다.
"""
from .supervisor import (
    TerminationReason,
    TickResult,
    TrialResult,
    TrialWindow,
    TuningSupervisor,
)

__all__ = [
    "TerminationReason",
    "TickResult",
    "TrialResult",
    "TrialWindow",
    "TuningSupervisor",
]
