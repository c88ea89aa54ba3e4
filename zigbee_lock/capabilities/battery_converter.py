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

"""Battery voltage and percentage conversions.

The lock reports BatteryVoltage (0x0001/0x0020) in 100 mV units. A percentage is
derived from it with a linear curve between the empty and full voltages of the
selected battery chemistry.
"""
import decimal

from zigbee_lock import errors

_VOLTAGE_UNIT = decimal.Decimal("0.1")  # Raw BatteryVoltage units, in volts.


def _round_half_up(value: float) -> int:
  """Rounds to the nearest integer with ties away from zero."""
  return int(decimal.Decimal(repr(value)).quantize(
      decimal.Decimal(1), rounding=decimal.ROUND_HALF_UP))


def _clamp_percent(percent):
  return max(0, min(100, percent))


def volts_to_percent(volts: float, min_volts: float, max_volts: float) -> int:
  """Converts a battery voltage to a percentage of the [min, max] range.

  Args:
    volts: measured battery voltage.
    min_volts: voltage reported as 0 %.
    max_volts: voltage reported as 100 %.

  Returns:
    Percentage in [0, 100].

  Raises:
    InvalidThresholdsError: min_volts is not below max_volts.
  """
  if min_volts >= max_volts:
    raise errors.InvalidThresholdsError(min_volts, max_volts)
  percent = (volts - min_volts) / (max_volts - min_volts) * 100
  return _round_half_up(_clamp_percent(percent))


def raw_voltage_to_volts(raw: int) -> float:
  """Converts a raw BatteryVoltage attribute value (100 mV units) to volts."""
  return float(raw * _VOLTAGE_UNIT)


def half_percent_to_percent(raw: int) -> int:
  """Converts BatteryPercentageRemaining (0.5 % units) to a percentage."""
  return _round_half_up(_clamp_percent(raw / 2))
