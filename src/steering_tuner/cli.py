#!/usr/bin/env python3
"""
Steering Tuner 실행 스크립트
===========================
시뮬레이터에 PID 조향값을 보내면서 Twiddle로 게인을 온라인 튜닝합니다.

사용법:
    steering-tuner
    steering-tuner --gains 0.2 0.004 3.0 --no-tune
    steering-tuner --port 4567 --tolerance 0.05 -v

시뮬레이터 실행 후 이 스크립트를 실행하면 자동 연결됩니다.
"""
import argparse
import logging
import sys
from typing import List, Optional

from steering_tuner import config as defaults
from steering_tuner.config import TuningConfig
from steering_tuner.drivers.server import SimulatorServer
from steering_tuner.drivers.supervisor import TuningSupervisor
from steering_tuner.errors import ConfigError
from steering_tuner.utils.log import setup_logging


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='PID steering controller with online twiddle tuning')
    parser.add_argument('--host', type=str, default=defaults.HOST,
                        help=f'Listen address (default: {defaults.HOST})')
    parser.add_argument('--port', '-p', type=int, default=defaults.PORT,
                        help=f'Listen port (default: {defaults.PORT})')
    parser.add_argument('--gains', type=float, nargs=3, metavar=('KP', 'KI', 'KD'),
                        default=[0.0, 0.0, 0.0], help='Initial PID gains')
    parser.add_argument('--probe-sizes', type=float, nargs=3, metavar=('DP', 'DI', 'DD'),
                        default=list(defaults.TWIDDLE_PROBE_SIZES),
                        help='Initial twiddle probe sizes')
    parser.add_argument('--tolerance', type=float, default=defaults.TWIDDLE_TOLERANCE,
                        help='Stop tuning when the probe sizes sum below this')
    parser.add_argument('--growth', type=float, default=defaults.TWIDDLE_GROWTH_RATE)
    parser.add_argument('--decay', type=float, default=defaults.TWIDDLE_DECAY_RATE)
    parser.add_argument('--grace-ticks', type=int, default=defaults.ALLOW_ALL_IN_FIRST_N_TICKS,
                        help='Ticks before early termination is allowed')
    parser.add_argument('--ignore-ticks', type=int, default=defaults.IGNORE_FIRST_N_TICKS,
                        help='Ticks ignored before collecting evidence')
    parser.add_argument('--ignore-increment', type=int, default=defaults.IGNORE_FIRST_N_TICKS,
                        help='Ticks added to the ignore window when it widens')
    parser.add_argument('--widen-every', type=int,
                        default=defaults.INCREASE_IGNORE_PERIOD_EVERY_N_EPISODES,
                        help='Widen the ignore window every N scored episodes (0 = never)')
    parser.add_argument('--window-ticks', type=int, default=defaults.AVERAGE_ERROR_OVER_N_TICKS,
                        help='Ticks averaged into one score')
    parser.add_argument('--max-cte', type=float, default=defaults.MAX_ALLOWED_CTE)
    parser.add_argument('--min-speed', type=float, default=defaults.MIN_ALLOWED_SPEED)
    parser.add_argument('--max-episode-ticks', type=int, default=None)
    parser.add_argument('--throttle', type=float, default=defaults.THROTTLE)
    parser.add_argument('--no-tune', action='store_true',
                        help='Drive with fixed gains, no twiddle')
    parser.add_argument('--log-file', type=str, default=None)
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Log every tick')
    return parser


def config_from_args(args: argparse.Namespace) -> TuningConfig:
    return TuningConfig(
        gains=list(args.gains),
        probe_sizes=list(args.probe_sizes),
        tolerance=args.tolerance,
        growth=args.growth,
        decay=args.decay,
        grace_ticks=args.grace_ticks,
        ignore_ticks=args.ignore_ticks,
        ignore_increment=args.ignore_increment,
        widen_every=args.widen_every,
        window_ticks=args.window_ticks,
        max_cte=args.max_cte,
        min_speed=args.min_speed,
        max_episode_ticks=args.max_episode_ticks,
        throttle=args.throttle,
        tuning_enabled=not args.no_tune,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    config = config_from_args(args)
    logger.debug("Config: %s", config.summary())
    try:
        supervisor = TuningSupervisor(config)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    logger.info("=" * 50)
    logger.info("Steering Tuner")
    logger.info("Gains: %s | Tuning: %s", supervisor.gains,
                'on' if supervisor.tuning_enabled else 'off')
    logger.info("=" * 50)

    server = SimulatorServer(supervisor)
    try:
        server.run(args.host, args.port)
    except OSError as e:
        logger.error("Failed to listen to port %d: %s", args.port, e)
        return 1
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    return 0


if __name__ == '__main__':
    sys.exit(main())
