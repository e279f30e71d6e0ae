"""PID 조향 제어 + Twiddle 온라인 게인 튜닝 패키지."""
from steering_tuner.config import TuningConfig
from steering_tuner.control import PIDController, Twiddle, TwiddleState
from steering_tuner.drivers.supervisor import TuningSupervisor
from steering_tuner.errors import ConfigError, SteeringTunerError, TelemetryError

__version__ = "0.1.0"

__all__ = [
    "TuningConfig",
    "PIDController",
    "Twiddle",
    "TwiddleState",
    "TuningSupervisor",
    "ConfigError",
    "SteeringTunerError",
    "TelemetryError",
]
