#!/usr/bin/env python3
"""
텔레메트리 코덱 모듈

시뮬레이터가 보내는 telemetry 이벤트 payload를 (CTE, speed) 샘플로
변환하고, 송신할 명령 payload를 만듭니다.

수신:
    telemetry: {"cte": "0.7598", "speed": "0.4380", "steering_angle": "0.0000", ...}
    (시뮬레이터는 숫자를 문자열로 보냄)

송신:
    steer: {"steering_angle": float, "throttle": float}
    reset: {}
    manual: {}

Author: HYCU Autonomous Driving Team
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import numpy as np

from steering_tuner.errors import TelemetryError


logger = logging.getLogger(__name__)

TELEMETRY_EVENT = 'telemetry'
STEER_EVENT = 'steer'
RESET_EVENT = 'reset'
MANUAL_EVENT = 'manual'


@dataclass(frozen=True)
class Telemetry:
    """틱 한 번의 텔레메트리 샘플."""
    cte: float
    speed: float
    steering_angle: Optional[float] = None


def _to_float(payload: Mapping[str, Any], key: str) -> float:
    if key not in payload:
        raise TelemetryError(f"telemetry missing '{key}'")
    raw = payload[key]
    if isinstance(raw, bool):
        raise TelemetryError(f"telemetry '{key}' is not numeric: {raw!r}")
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError) as e:
        raise TelemetryError(f"telemetry '{key}' is not numeric: {raw!r}") from e
    if not np.isfinite(value):
        raise TelemetryError(f"telemetry '{key}' is not finite: {raw!r}")
    return value


def parse_telemetry(payload: Any) -> Telemetry:
    """telemetry payload 파싱.

    Args:
        payload: 이벤트 데이터 (dict)

    Returns:
        Telemetry 샘플

    Raises:
        TelemetryError: 필수 필드 누락, 숫자 변환 실패, NaN/Inf
    """
    if not isinstance(payload, Mapping):
        raise TelemetryError(f"telemetry payload must be an object, got {type(payload).__name__}")

    cte = _to_float(payload, 'cte')
    speed = _to_float(payload, 'speed')

    steering_angle = None
    if 'steering_angle' in payload:
        try:
            steering_angle = _to_float(payload, 'steering_angle')
        except TelemetryError as e:
            logger.debug("Ignoring steering_angle: %s", e)
            steering_angle = None

    return Telemetry(cte=cte, speed=speed, steering_angle=steering_angle)


def steer_payload(steering: float, throttle: float) -> Dict[str, float]:
    return {'steering_angle': float(steering), 'throttle': float(throttle)}


def empty_payload() -> Dict[str, Any]:
    """reset / manual 명령용 빈 payload."""
    return {}
