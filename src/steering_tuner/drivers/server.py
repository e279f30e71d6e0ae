#!/usr/bin/env python3
"""
시뮬레이터 서버 모듈

Socket.IO로 시뮬레이터와 통신합니다.

Subscribe:
    telemetry (dict)  - cte / speed / steering_angle

Publish:
    steer (dict)      - steering_angle / throttle (매 틱)
    reset (dict)      - 에피소드 종료 시 시뮬레이터 리셋
    manual (dict)     - payload 없는 이벤트 수신 시

이벤트는 하나씩 끝까지 처리됩니다 (틱 순서 보장). 리셋이 필요한 틱에서는
reset을 steer보다 먼저 보냅니다.

Author: HYCU Autonomous Driving Team
"""
import logging
from typing import Any, Optional

import eventlet
import eventlet.wsgi
import socketio

from steering_tuner.config import HOST, PORT
from steering_tuner.drivers.supervisor import TickResult, TuningSupervisor
from steering_tuner.errors import TelemetryError
from steering_tuner.utils.telemetry import (
    MANUAL_EVENT,
    RESET_EVENT,
    STEER_EVENT,
    TELEMETRY_EVENT,
    empty_payload,
    parse_telemetry,
    steer_payload,
)


logger = logging.getLogger(__name__)


class SimulatorServer:
    """시뮬레이터 <-> TuningSupervisor 브리지."""

    def __init__(self, supervisor: TuningSupervisor, sio: Optional[socketio.Server] = None):
        self.supervisor = supervisor
        self.sio = sio if sio is not None else socketio.Server(logger=False, engineio_logger=False)

        self.sio.on('connect', self.on_connect)
        self.sio.on('disconnect', self.on_disconnect)
        self.sio.on(TELEMETRY_EVENT, self.on_telemetry)

        self.ticks_handled = 0
        self.ticks_dropped = 0

    def on_connect(self, sid: str, environ: Any, auth: Any = None) -> None:
        logger.info("Connected: %s", sid)

    def on_disconnect(self, sid: str, *args: Any) -> None:
        logger.info("Disconnected: %s", sid)
        self.supervisor.end_episode()

    def on_telemetry(self, sid: str, data: Any = None) -> Optional[TickResult]:
        """telemetry 이벤트 처리.

        payload가 없으면 manual, 잘못된 payload는 버리고 아무것도 보내지
        않습니다.
        """
        if not data:
            self.sio.emit(MANUAL_EVENT, empty_payload(), to=sid)
            return None

        try:
            sample = parse_telemetry(data)
        except TelemetryError as e:
            self.ticks_dropped += 1
            logger.warning("Dropping malformed telemetry: %s", e)
            return None

        result = self.supervisor.on_telemetry(sample.cte, sample.speed)
        self.ticks_handled += 1

        if result.reset_requested:
            self.sio.emit(RESET_EVENT, empty_payload(), to=sid)
        self.sio.emit(STEER_EVENT, steer_payload(result.steering, result.throttle), to=sid)
        return result

    def wsgi_app(self) -> socketio.WSGIApp:
        return socketio.WSGIApp(self.sio)

    def run(self, host: str = HOST, port: int = PORT) -> None:
        """eventlet WSGI 서버 실행 (블로킹)."""
        listener = eventlet.listen((host, port))
        logger.info("Listening to port %d", port)
        eventlet.wsgi.server(listener, self.wsgi_app(), log_output=False)
