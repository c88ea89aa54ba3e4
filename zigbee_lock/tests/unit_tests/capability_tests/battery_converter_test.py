# Copyright 2022 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Unit tests for the battery_converter module."""
from absl.testing import parameterized
from zigbee_lock import errors
from zigbee_lock.capabilities import battery_converter
from zigbee_lock.tests.unit_tests.utils import unit_test_case

_ALKALINE = (3.5, 6.0)


class BatteryConverterTest(unit_test_case.UnitTestCase):
  """Unit tests for battery_converter."""

  @parameterized.named_parameters(
      ("full", 6.0, 100),
      ("empty", 3.5, 0),
      ("half", 4.75, 50),
      ("rounds_up", 4.8, 52),
      ("above_max_clamped", 6.4, 100),
      ("below_min_clamped", 2.9, 0))
  def test_volts_to_percent_alkaline(self, volts, expected_percent):
    """Verifies the alkaline curve conversions."""
    self.assertEqual(
        battery_converter.volts_to_percent(volts, *_ALKALINE),
        expected_percent)

  def test_volts_to_percent_is_bounded_and_monotonic(self):
    """Verifies percentages stay in [0, 100] and never decrease with volts."""
    for min_volts, max_volts in ((3.5, 6.0), (4.4, 6.8), (4.0, 5.6),
                                 (2.0, 7.0)):
      previous = -1
      for tenth_volts in range(0, 90):
        volts = tenth_volts / 10
        percent = battery_converter.volts_to_percent(
            volts, min_volts, max_volts)
        self.assertBetween(percent, 0, 100)
        self.assertGreaterEqual(percent, previous)
        previous = percent

  @parameterized.named_parameters(
      ("equal", 5.0, 5.0),
      ("inverted", 6.0, 3.5))
  def test_volts_to_percent_invalid_thresholds(self, min_volts, max_volts):
    """Verifies no percentage is produced for an empty voltage range."""
    for volts in (0.0, 3.5, 5.0, 6.0, 9.9):
      with self.assertRaises(errors.InvalidThresholdsError):
        battery_converter.volts_to_percent(volts, min_volts, max_volts)

  def test_invalid_thresholds_error_is_config_error(self):
    """Verifies InvalidThresholdsError is reported as a ConfigError."""
    with self.assertRaisesRegex(errors.ConfigError, r"min 6.0 V >= max 3.5 V"):
      battery_converter.volts_to_percent(5.0, 6.0, 3.5)

  @parameterized.named_parameters(
      ("full_pack", 60, 6.0),
      ("empty_pack", 35, 3.5),
      ("one_step", 1, 0.1),
      ("typical", 57, 5.7))
  def test_raw_voltage_to_volts(self, raw, expected_volts):
    """Verifies 100 mV units are converted to volts."""
    self.assertEqual(battery_converter.raw_voltage_to_volts(raw),
                     expected_volts)

  @parameterized.named_parameters(
      ("full", 200, 100),
      ("empty", 0, 0),
      ("half", 100, 50),
      ("rounds_half_up", 101, 51),
      ("over_range_clamped", 254, 100))
  def test_half_percent_to_percent(self, raw, expected_percent):
    """Verifies 0.5 % units are converted to a percentage."""
    self.assertEqual(battery_converter.half_percent_to_percent(raw),
                     expected_percent)


if __name__ == "__main__":
  unit_test_case.main()
