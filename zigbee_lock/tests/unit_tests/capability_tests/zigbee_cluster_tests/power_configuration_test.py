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

"""Unit tests for the Power Configuration cluster translator."""
from unittest import mock

from zigbee_lock import data_types
from zigbee_lock import device_config
from zigbee_lock.capabilities import frame_decoder
from zigbee_lock.capabilities.zigbee_clusters import power_configuration
from zigbee_lock.tests.unit_tests.utils import lock_frames
from zigbee_lock.tests.unit_tests.utils import unit_test_case

EventName = data_types.EventName
BatteryChemistry = data_types.BatteryChemistry
_DEVICE_NAME = "front-door"


class PowerClusterTranslatorTest(unit_test_case.UnitTestCase):
  """Unit tests for PowerClusterTranslator."""

  def setUp(self):
    super().setUp()
    self.config = device_config.DeviceConfig()
    self.uut = power_configuration.PowerClusterTranslator(
        device_name=_DEVICE_NAME, get_config=lambda: self.config)

  def _translate(self, raw_frame):
    return self.uut.translate(frame_decoder.decode(raw_frame))

  def test_battery_voltage_full(self):
    """Verifies 6.0 V on alkaline batteries reports 100 %."""
    events = self._translate(lock_frames.battery_voltage(60))
    self.assert_event_names(events,
                            [EventName.BATTERY_VOLTAGE, EventName.BATTERY])
    self.assertEqual(events[0].value, 6.0)
    self.assertEqual(events[0].unit, "V")
    self.assertEqual(events[1].value, 100)
    self.assertEqual(events[1].unit, "%")

  def test_battery_voltage_empty(self):
    events = self._translate(lock_frames.battery_voltage(35))
    self.assertEqual(self.get_event(events, EventName.BATTERY).value, 0)
    self.assertEqual(
        self.get_event(events, EventName.BATTERY_VOLTAGE).value, 3.5)

  def test_battery_voltage_uses_current_chemistry(self):
    """Verifies the chemistry is read from the config on every report."""
    self.config = device_config.DeviceConfig(chemistry=BatteryChemistry.NIMH)
    events = self._translate(lock_frames.battery_voltage(48))
    self.assertEqual(self.get_event(events, EventName.BATTERY).value, 50)

  def test_battery_voltage_custom_range(self):
    self.config = device_config.DeviceConfig(
        chemistry=BatteryChemistry.CUSTOM,
        custom_min_volts=4.0,
        custom_max_volts=6.0)
    events = self._translate(lock_frames.battery_voltage(50))
    self.assertEqual(self.get_event(events, EventName.BATTERY).value, 50)

  def test_battery_voltage_invalid_value(self):
    """Verifies 0xFF (not reported) produces no events."""
    self.assertEmpty(self._translate(lock_frames.battery_voltage(0xFF)))

  def test_battery_voltage_invalid_thresholds(self):
    """Verifies inverted thresholds suppress events and warn once."""
    self.config = device_config.DeviceConfig(
        chemistry=BatteryChemistry.CUSTOM,
        custom_min_volts=6.0,
        custom_max_volts=3.5)
    with mock.patch.object(power_configuration.logger,
                           "warning") as mock_warning:
      self.assertEmpty(self._translate(lock_frames.battery_voltage(50)))
      self.assertEmpty(self._translate(lock_frames.battery_voltage(51)))
      mock_warning.assert_called_once()

      self.uut.reset_threshold_warning()
      self.assertEmpty(self._translate(lock_frames.battery_voltage(50)))
      self.assertEqual(mock_warning.call_count, 2)

  def test_battery_percentage(self):
    """Verifies BatteryPercentageRemaining is read in half percent units."""
    events = self._translate(lock_frames.battery_percentage(200))
    self.assert_event_names(events, [EventName.BATTERY])
    self.assertEqual(events[0].value, 100)
    self.assertEqual(
        self._translate(lock_frames.battery_percentage(101))[0].value, 51)

  def test_battery_percentage_invalid_value(self):
    self.assertEmpty(self._translate(lock_frames.battery_percentage(0xFF)))

  def test_unhandled_attribute(self):
    report = data_types.AttributeReport(cluster=0x0001, attr_id=0x0035,
                                        value=1)
    self.assertEmpty(self.uut.translate(report))


if __name__ == "__main__":
  unit_test_case.main()
