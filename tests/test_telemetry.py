#!/usr/bin/env python3
"""
Unit tests for the telemetry codec.

Run: python3 -m pytest tests/ -v
"""
import unittest

from steering_tuner.errors import TelemetryError
from steering_tuner.utils.telemetry import (
    Telemetry,
    empty_payload,
    parse_telemetry,
    steer_payload,
)


class TestParseTelemetry(unittest.TestCase):

    def test_simulator_strings(self):
        sample = parse_telemetry({
            'cte': '0.7598',
            'speed': '0.4380',
            'steering_angle': '0.0000',
            'throttle': '0.3000',
        })
        self.assertEqual(sample, Telemetry(cte=0.7598, speed=0.438, steering_angle=0.0))

    def test_numeric_values(self):
        sample = parse_telemetry({'cte': -1.5, 'speed': 22})
        self.assertEqual(sample.cte, -1.5)
        self.assertEqual(sample.speed, 22.0)
        self.assertIsNone(sample.steering_angle)

    def test_bad_optional_steering_is_ignored(self):
        with self.assertLogs('steering_tuner.utils.telemetry', level='DEBUG') as logs:
            sample = parse_telemetry({'cte': '0.1', 'speed': '10', 'steering_angle': 'n/a'})
        self.assertIsNone(sample.steering_angle)
        self.assertIn('steering_angle', logs.output[0])

    def test_missing_fields(self):
        with self.assertRaises(TelemetryError):
            parse_telemetry({'speed': '10'})
        with self.assertRaises(TelemetryError):
            parse_telemetry({'cte': '0.1'})

    def test_non_numeric(self):
        for bad in ('abc', '', None, [1.0], True, 10 ** 400):
            with self.subTest(value=bad):
                with self.assertRaises(TelemetryError):
                    parse_telemetry({'cte': bad, 'speed': '10'})

    def test_non_finite(self):
        for bad in ('nan', 'inf', float('-inf')):
            with self.subTest(value=bad):
                with self.assertRaises(TelemetryError):
                    parse_telemetry({'cte': '0.1', 'speed': bad})

    def test_non_mapping_payload(self):
        with self.assertRaises(TelemetryError):
            parse_telemetry(['telemetry', {'cte': '0.1'}])
        with self.assertRaises(TelemetryError):
            parse_telemetry('{"cte": "0.1"}')


class TestPayloads(unittest.TestCase):

    def test_steer_payload(self):
        self.assertEqual(steer_payload(-0.25, 0.3), {'steering_angle': -0.25, 'throttle': 0.3})

    def test_empty_payload_is_fresh(self):
        payload = empty_payload()
        payload['x'] = 1
        self.assertEqual(empty_payload(), {})


if __name__ == '__main__':
    unittest.main()
