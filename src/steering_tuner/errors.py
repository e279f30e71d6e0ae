"""steering_tuner 예외 정의."""


class SteeringTunerError(Exception):
    """패키지 공통 예외."""


class ConfigError(SteeringTunerError, ValueError):
    """잘못된 튜닝/탐색 설정 (시작 시점에 거부)."""


class TelemetryError(SteeringTunerError, ValueError):
    """필수 필드가 없거나 숫자로 해석할 수 없는 텔레메트리."""
