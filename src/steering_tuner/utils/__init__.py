"""유틸리티 모듈 패키지.

텔레메트리 코덱 및 로깅 설정을 제공합니다.
"""
from .log import setup_logging
from .telemetry import Telemetry, parse_telemetry, steer_payload

__all__ = [
    "setup_logging",
    "Telemetry",
    "parse_telemetry",
    "steer_payload",
]
