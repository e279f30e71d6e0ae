"""제어 모듈 패키지.

PID 조향 제어기와 Twiddle 게인 탐색 알고리즘을 제공합니다.
"""
from .pid import PIDController
from .twiddle import Twiddle, TwiddleState

__all__ = [
    "PIDController",
    "Twiddle",
    "TwiddleState",
]
