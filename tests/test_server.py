#!/usr/bin/env python3
"""
Unit tests for the simulator server and command-line entry point.

The Socket.IO server is replaced with a MagicMock so no socket is opened.

Run: python3 -m pytest tests/ -v
"""
import logging
import os
import tempfile
import unittest
from unittest.mock import MagicMock, call, patch

from steering_tuner.cli import build_parser, config_from_args, main
from steering_tuner.config import TuningConfig
from steering_tuner.drivers.server import SimulatorServer
from steering_tuner.drivers.supervisor import TuningSupervisor
from steering_tuner.errors import ConfigError
from steering_tuner.utils.log import setup_logging


SID = 'abc123'


class TestSimulatorServer(unittest.TestCase):

    def setUp(self):
        self.sio = MagicMock()
        config = TuningConfig(
            gains=[0.2, 0.0, 1.0],
            grace_ticks=5,
            ignore_ticks=0,
            window_ticks=10,
            widen_every=0,
        )
        self.supervisor = TuningSupervisor(config)
        self.server = SimulatorServer(self.supervisor, sio=self.sio)

    def test_registers_handlers(self):
        self.sio.on.assert_any_call('connect', self.server.on_connect)
        self.sio.on.assert_any_call('disconnect', self.server.on_disconnect)
        self.sio.on.assert_any_call('telemetry', self.server.on_telemetry)

    def test_empty_payload_sends_manual(self):
        self.server.on_telemetry(SID, None)
        self.sio.emit.assert_called_once_with('manual', {}, to=SID)
        self.assertEqual(self.supervisor.window.tick, 0)

    def test_malformed_payload_is_dropped(self):
        with self.assertLogs('steering_tuner.drivers.server', level='WARNING'):
            result = self.server.on_telemetry(SID, {'cte': 'oops', 'speed': '10'})
        self.assertIsNone(result)
        self.sio.emit.assert_not_called()
        self.assertEqual(self.server.ticks_dropped, 1)
        self.assertEqual(self.supervisor.window.tick, 0)

    def test_oversized_number_is_dropped(self):
        with self.assertLogs('steering_tuner.drivers.server', level='WARNING'):
            result = self.server.on_telemetry(SID, {'cte': 10 ** 400, 'speed': '10'})
        self.assertIsNone(result)
        self.sio.emit.assert_not_called()
        self.assertEqual(self.server.ticks_dropped, 1)

    def test_telemetry_sends_steer(self):
        result = self.server.on_telemetry(SID, {'cte': '0.5', 'speed': '20.0'})
        self.sio.emit.assert_called_once_with(
            'steer', {'steering_angle': result.steering, 'throttle': 0.3}, to=SID
        )
        self.assertAlmostEqual(result.steering, -0.6)
        self.assertEqual(self.server.ticks_handled, 1)

    def test_reset_sent_before_steer(self):
        for _ in range(9):
            self.server.on_telemetry(SID, {'cte': '0.1', 'speed': '20.0'})
        self.sio.emit.reset_mock()

        result = self.server.on_telemetry(SID, {'cte': '0.1', 'speed': '20.0'})
        self.assertTrue(result.reset_requested)
        self.assertEqual(self.sio.emit.call_args_list, [
            call('reset', {}, to=SID),
            call('steer', {'steering_angle': result.steering, 'throttle': 0.3}, to=SID),
        ])

    def test_disconnect_ends_episode(self):
        for _ in range(4):
            self.server.on_telemetry(SID, {'cte': '0.1', 'speed': '20.0'})
        self.server.on_disconnect(SID)
        self.assertEqual(self.supervisor.window.tick, 0)
        self.assertEqual(self.supervisor.episodes_scored, 0)

    def test_connect_is_logged(self):
        with self.assertLogs('steering_tuner.drivers.server', level='INFO') as logs:
            self.server.on_connect(SID, {})
        self.assertIn(SID, logs.output[0])


class TestCommandLine(unittest.TestCase):

    def test_defaults(self):
        config = config_from_args(build_parser().parse_args([]))
        self.assertEqual(config, TuningConfig().validate())

    def test_overrides(self):
        args = build_parser().parse_args([
            '--gains', '0.2', '0.004', '3.0',
            '--tolerance', '0.05',
            '--max-episode-ticks', '2000',
            '--no-tune',
        ])
        config = config_from_args(args)
        self.assertEqual(config.gains, [0.2, 0.004, 3.0])
        self.assertEqual(config.tolerance, 0.05)
        self.assertEqual(config.max_episode_ticks, 2000)
        self.assertFalse(config.tuning_enabled)

    def test_invalid_config_exits_nonzero(self):
        with patch('steering_tuner.cli.setup_logging'), \
                patch('steering_tuner.cli.SimulatorServer') as server_cls:
            self.assertEqual(main(['--tolerance', '0']), 2)
        server_cls.assert_not_called()

    def test_runs_server(self):
        with patch('steering_tuner.cli.setup_logging'), \
                patch('steering_tuner.cli.SimulatorServer') as server_cls:
            self.assertEqual(main(['--port', '4568']), 0)
        server_cls.return_value.run.assert_called_once_with('0.0.0.0', 4568)


class TestConfigValidation(unittest.TestCase):

    def test_rejects_degenerate_values(self):
        bad = [
            dict(tolerance=0.0),
            dict(tolerance=-0.1),
            dict(gains=[]),
            dict(probe_sizes=[0.1, 0.1]),
            dict(probe_sizes=[0.1, -0.1, 0.1]),
            dict(growth=0.9),
            dict(decay=1.5),
            dict(window_ticks=0),
            dict(ignore_ticks=-1),
            dict(max_episode_ticks=0),
        ]
        for overrides in bad:
            with self.subTest(**overrides):
                with self.assertRaises(ConfigError):
                    TuningConfig(**overrides).validate()

    def test_supervisor_validates_config(self):
        with self.assertRaises(ConfigError):
            TuningSupervisor(TuningConfig(tolerance=0.0))

    def test_summary_lists_fields(self):
        summary = TuningConfig().summary()
        self.assertIn('tolerance=0.1', summary)
        self.assertIn('max_episode_ticks=None', summary)


class TestLogging(unittest.TestCase):

    def tearDown(self):
        log = logging.getLogger('steering_tuner')
        for handler in list(log.handlers):
            log.removeHandler(handler)
            handler.close()
        log.setLevel(logging.NOTSET)

    def test_setup_is_idempotent(self):
        setup_logging(logging.DEBUG)
        log = setup_logging(logging.INFO)
        self.assertEqual(log.name, 'steering_tuner')
        self.assertEqual(log.level, logging.INFO)
        self.assertEqual(len(log.handlers), 1)

    def test_log_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'tuner.log')
            log = setup_logging(logging.INFO, path)
            logging.getLogger('steering_tuner.drivers.supervisor').info("Trying PID params")
            for handler in log.handlers:
                handler.flush()
            with open(path, encoding='utf-8') as f:
                self.assertIn("Trying PID params", f.read())
            self.tearDown()


if __name__ == '__main__':
    unittest.main()
