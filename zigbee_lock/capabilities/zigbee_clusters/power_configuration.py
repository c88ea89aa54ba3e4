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

"""Power Configuration cluster translator.

The lock only implements BatteryVoltage (0x0020). BatteryPercentageRemaining
(0x0021) is handled in case a firmware update adds it, but it is never
requested.
"""
from typing import Callable, List

from zigbee_lock import data_types
from zigbee_lock import device_config
from zigbee_lock import errors
from zigbee_lock import lock_logger
from zigbee_lock.capabilities import battery_converter
from zigbee_lock.capabilities import zigbee_enums
from zigbee_lock.capabilities.zigbee_clusters.interfaces import cluster_base

logger = lock_logger.get_logger("clusters")
PowerConfigurationCluster = zigbee_enums.PowerConfigurationCluster
EventName = data_types.EventName


class PowerClusterTranslator(cluster_base.ClusterBase):
  """Zigbee Power Configuration cluster translator."""

  CLUSTER_ID = PowerConfigurationCluster.ID

  def __init__(self,
               device_name: str,
               get_config: Callable[[], device_config.DeviceConfig]):
    """Initializes the translator.

    Args:
      device_name: Device name used for logging.
      get_config: returns the current device configuration.
    """
    super().__init__(device_name=device_name)
    self._get_config = get_config
    self._threshold_warning_logged = False

  def reset_threshold_warning(self) -> None:
    """Re-arms the invalid threshold warning after a configuration change."""
    self._threshold_warning_logged = False

  def handle_attribute(
      self,
      report: data_types.AttributeReport) -> List[data_types.DomainEvent]:
    if report.attr_id == PowerConfigurationCluster.ATTRIBUTE_BATTERY_VOLTAGE:
      return self._battery_voltage_events(report.value)
    if (report.attr_id ==
        PowerConfigurationCluster.ATTRIBUTE_BATTERY_PERCENTAGE_REMAINING):
      return self._battery_percentage_events(report.value)
    return super().handle_attribute(report)

  def _battery_voltage_events(self, raw: int) -> List[data_types.DomainEvent]:
    if raw == zigbee_enums.INVALID_BATTERY_VALUE:
      return []
    volts = battery_converter.raw_voltage_to_volts(raw)
    config = self._get_config()
    min_volts, max_volts = config.voltage_range
    try:
      percent = battery_converter.volts_to_percent(volts, min_volts, max_volts)
    except errors.InvalidThresholdsError as err:
      if not self._threshold_warning_logged:
        logger.warning(f"{self._device_name}: {err} Check preferences.")
        self._threshold_warning_logged = True
      return []

    chemistry = config.chemistry.value
    logger.debug(f"{self._device_name}: battery {volts} V -> {percent} % "
                 f"({chemistry}, range {min_volts}-{max_volts} V)")
    logger.info(
        f"{self._device_name}: battery is {percent} % ({volts} V, {chemistry})")
    return [
        data_types.DomainEvent(
            name=EventName.BATTERY_VOLTAGE,
            value=volts,
            unit="V",
            description=f"{self._device_name} battery voltage: {volts} V"),
        data_types.DomainEvent(
            name=EventName.BATTERY,
            value=percent,
            unit="%",
            description=f"{self._device_name} battery: {percent} %"),
    ]

  def _battery_percentage_events(
      self, raw: int) -> List[data_types.DomainEvent]:
    if raw == zigbee_enums.INVALID_BATTERY_VALUE:
      return []
    percent = battery_converter.half_percent_to_percent(raw)
    logger.info(f"{self._device_name}: battery is {percent} % "
                "(via percentage attribute)")
    return [
        data_types.DomainEvent(
            name=EventName.BATTERY,
            value=percent,
            unit="%",
            description=f"{self._device_name} battery: {percent} %"),
    ]
