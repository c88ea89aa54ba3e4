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

"""Per-device configuration consumed by the lock session."""
import dataclasses
from typing import Any, Mapping, Tuple

from zigbee_lock import config
from zigbee_lock import data_types
from zigbee_lock import errors

BatteryChemistry = data_types.BatteryChemistry


@dataclasses.dataclass(frozen=True)
class DeviceConfig:
  """Battery chemistry selection and PIN slot capacity.

  Custom voltages are only used when chemistry is CUSTOM. An inverted custom
  range is accepted here: battery conversion is suspended until it is fixed.
  """
  chemistry: BatteryChemistry = config.DEFAULT_CHEMISTRY
  custom_min_volts: float = config.DEFAULT_CUSTOM_MIN_VOLTS
  custom_max_volts: float = config.DEFAULT_CUSTOM_MAX_VOLTS
  max_codes: int = config.DEFAULT_MAX_CODES

  def __post_init__(self):
    try:
      chemistry = BatteryChemistry(self.chemistry)
    except ValueError as err:
      raise errors.ConfigError(
          f"Unknown battery chemistry {self.chemistry!r}. Valid chemistries: "
          f"{[member.value for member in BatteryChemistry]}.") from err
    object.__setattr__(self, "chemistry", chemistry)

    min_codes, max_codes = config.MAX_CODES_RANGE
    if (isinstance(self.max_codes, bool) or
        not isinstance(self.max_codes, int) or
        not min_codes <= self.max_codes <= max_codes):
      raise errors.ConfigError(
          f"Maximum number of PIN slots must be in [{min_codes}, {max_codes}], "
          f"found {self.max_codes!r}.")

  @property
  def voltage_range(self) -> Tuple[float, float]:
    """(min, max) battery voltage of the selected chemistry."""
    if self.chemistry == BatteryChemistry.CUSTOM:
      return (float(self.custom_min_volts), float(self.custom_max_volts))
    return config.BATTERY_CHEMISTRIES[self.chemistry]

  @property
  def has_valid_thresholds(self) -> bool:
    min_volts, max_volts = self.voltage_range
    return min_volts < max_volts

  @classmethod
  def from_settings(cls, settings: Mapping[str, Any]) -> "DeviceConfig":
    """Creates a config from host preference values.

    Missing or empty values fall back to the defaults.

    Args:
      settings: host preferences keyed by config.SETTING_* names.

    Returns:
      The device configuration.

    Raises:
      ConfigError: a preference value has the wrong type or is out of range.
    """
    def _get(key, default):
      value = settings.get(key)
      return default if value in (None, "") else value

    try:
      return cls(
          chemistry=_get(config.SETTING_BATTERY_CHEMISTRY,
                         config.DEFAULT_CHEMISTRY),
          custom_min_volts=float(_get(config.SETTING_BATTERY_MIN_VOLTS,
                                      config.DEFAULT_CUSTOM_MIN_VOLTS)),
          custom_max_volts=float(_get(config.SETTING_BATTERY_MAX_VOLTS,
                                      config.DEFAULT_CUSTOM_MAX_VOLTS)),
          max_codes=int(_get(config.SETTING_MAX_CODES,
                             config.DEFAULT_MAX_CODES)))
    except (TypeError, ValueError) as err:
      raise errors.ConfigError(
          f"Invalid lock preferences {dict(settings)!r}: {err}") from err
