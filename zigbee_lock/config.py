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

"""CONFIG FILE."""
import os.path

import immutabledict
from zigbee_lock import data_types

PACKAGE_PATH = os.path.dirname(os.path.abspath(__file__))

INSTALL_DIRECTORY = os.path.join(os.path.expanduser("~"), "zigbee_lock")
DEFAULT_LOG_DIRECTORY = os.path.join(INSTALL_DIRECTORY, "log")
DEFAULT_LOG_FILE = os.path.join(DEFAULT_LOG_DIRECTORY, "zigbee_lock.txt")

# Voltage thresholds (volts) of a 4 x AA pack: (0 %, 100 %).
# Lithium and NiMH cells have a flat discharge curve, so the percentage derived
# from voltage is approximate for them.
BATTERY_CHEMISTRIES = immutabledict.immutabledict({
    data_types.BatteryChemistry.ALKALINE: (3.5, 6.0),
    data_types.BatteryChemistry.LITHIUM: (4.4, 6.8),
    data_types.BatteryChemistry.NIMH: (4.0, 5.6),
})
DEFAULT_CHEMISTRY = data_types.BatteryChemistry.ALKALINE
DEFAULT_CUSTOM_MIN_VOLTS = 3.5
DEFAULT_CUSTOM_MAX_VOLTS = 6.0

DEFAULT_MAX_CODES = 30
MAX_CODES_RANGE = (1, 250)
PIN_LENGTH_RANGE = (4, 8)
PIN_PATTERN = r"^\d{4,8}$"

# Attribute reporting configuration issued by configure().
BATTERY_VOLTAGE_REPORT_MIN_INTERVAL_S = 30
BATTERY_VOLTAGE_REPORT_MAX_INTERVAL_S = 3600
BATTERY_VOLTAGE_REPORTABLE_CHANGE = 1  # One raw unit (100 mV).
LOCK_STATE_REPORT_MIN_INTERVAL_S = 0
LOCK_STATE_REPORT_MAX_INTERVAL_S = 3600

# Pending set/clear PIN operations older than this are evicted.
PENDING_OPERATION_TIMEOUT_S = 60.0

# Host preference keys understood by DeviceConfig.from_settings().
SETTING_BATTERY_CHEMISTRY = "batteryChemistry"
SETTING_BATTERY_MIN_VOLTS = "batteryMinVolts"
SETTING_BATTERY_MAX_VOLTS = "batteryMaxVolts"
SETTING_MAX_CODES = "maxCodes"
