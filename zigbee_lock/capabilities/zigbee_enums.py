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

"""Zigbee Cluster Library enum module."""
import enum

import immutabledict

# The ZCL cluster enums definitions: (only enums used by the lock are defined)

INVALID_BATTERY_VALUE = 0xFF  # "Invalid or not reported" for battery attrs.


class PowerConfigurationCluster(enum.IntEnum):
  """Power configuration cluster ID and its attribute IDs.

  The enum values are defined in the ZCL spec.
  """
  ID = 0x0001

  # Attribute IDs
  ATTRIBUTE_BATTERY_VOLTAGE = 0x0020  # uint8, 100 mV units.
  ATTRIBUTE_BATTERY_PERCENTAGE_REMAINING = 0x0021  # uint8, 0.5 % units.


class AlarmsCluster(enum.IntEnum):
  """Alarms cluster ID and its client command IDs.

  The enum values are defined in the ZCL spec.
  """
  ID = 0x0009

  # Command IDs
  COMMAND_ALARM = 0x00


class DoorLockCluster(enum.IntEnum):
  """Door lock cluster ID and its attribute IDs.

  The enum values are defined in the ZCL spec.
  """
  ID = 0x0101

  # Attribute IDs
  ATTRIBUTE_LOCK_STATE = 0x0000


class DoorLockCommand(enum.IntEnum):
  """Door lock commands sent by the hub to the lock."""
  LOCK_DOOR = 0x00
  UNLOCK_DOOR = 0x01
  SET_PIN_CODE = 0x05
  CLEAR_PIN_CODE = 0x07
  CLEAR_ALL_PIN_CODES = 0x08


class DoorLockResponse(enum.IntEnum):
  """Door lock commands sent by the lock to the hub."""
  LOCK_DOOR_RESPONSE = 0x00
  UNLOCK_DOOR_RESPONSE = 0x01
  SET_PIN_CODE_RESPONSE = 0x05
  CLEAR_PIN_CODE_RESPONSE = 0x07
  OPERATING_EVENT_NOTIFICATION = 0x20
  PROGRAMMING_EVENT_NOTIFICATION = 0x21


class ZclDataType(enum.IntEnum):
  """ZCL attribute data types used in reporting configuration."""
  UINT8 = 0x20
  ENUM8 = 0x30


# Lock state attribute enums
class LockState(enum.IntEnum):
  """Lock state attribute values.
  """
  NOT_FULLY_LOCKED = 0
  LOCKED = 1
  UNLOCKED = 2


class AlarmCode(enum.IntEnum):
  """Door lock alarm codes carried by the Alarms cluster Alarm command."""
  DEADBOLT_JAMMED = 0x00
  FACTORY_RESET = 0x01
  RF_MODULE_POWER_CYCLED = 0x03
  WRONG_CODE_ENTRY_LIMIT = 0x04
  FRONT_ESCUTCHEON_REMOVED = 0x05
  FORCED_DOOR_OPEN = 0x06


ALARM_DESCRIPTIONS = immutabledict.immutabledict({
    AlarmCode.DEADBOLT_JAMMED: "Deadbolt jammed",
    AlarmCode.FACTORY_RESET: "Lock reset to factory defaults",
    AlarmCode.RF_MODULE_POWER_CYCLED: "RF module power cycled",
    AlarmCode.WRONG_CODE_ENTRY_LIMIT:
        "Tamper: wrong code entry limit exceeded",
    AlarmCode.FRONT_ESCUTCHEON_REMOVED: "Tamper: front escutcheon removed",
    AlarmCode.FORCED_DOOR_OPEN: "Forced door open under locked condition",
})

TAMPER_ALARMS = frozenset([
    AlarmCode.WRONG_CODE_ENTRY_LIMIT,
    AlarmCode.FRONT_ESCUTCHEON_REMOVED,
    AlarmCode.FORCED_DOOR_OPEN,
])


class OperationEventSource(enum.IntEnum):
  """Source of an Operating Event Notification."""
  KEYPAD = 0
  RF = 1
  MANUAL = 2
  RFID = 3
  AUTO = 5


OPERATION_SOURCE_NAMES = immutabledict.immutabledict({
    OperationEventSource.KEYPAD: "Keypad",
    OperationEventSource.RF: "RF",
    OperationEventSource.MANUAL: "Manual",
    OperationEventSource.RFID: "RFID",
    OperationEventSource.AUTO: "Auto",
})


class OperatingEventCode(enum.IntEnum):
  """Event codes of an Operating Event Notification."""
  UNKNOWN = 0
  LOCK = 1
  UNLOCK = 2
  LOCK_FAILED_INVALID_PIN = 3
  LOCK_FAILED_INVALID_SCHEDULE = 4
  UNLOCK_FAILED_INVALID_PIN = 5
  UNLOCK_FAILED_INVALID_SCHEDULE = 6
  ONE_TOUCH_LOCK = 7
  KEY_LOCK = 8
  KEY_UNLOCK = 9
  AUTO_LOCK = 10
  SCHEDULE_LOCK = 11
  SCHEDULE_UNLOCK = 12
  MANUAL_LOCK = 13
  MANUAL_UNLOCK = 14
  NON_ACCESS_USER_EVENT = 15


OPERATING_EVENT_NAMES = immutabledict.immutabledict({
    OperatingEventCode.UNKNOWN: "Unknown",
    OperatingEventCode.LOCK: "Lock",
    OperatingEventCode.UNLOCK: "Unlock",
    OperatingEventCode.LOCK_FAILED_INVALID_PIN: "Lock failed (invalid PIN)",
    OperatingEventCode.LOCK_FAILED_INVALID_SCHEDULE:
        "Lock failed (invalid schedule)",
    OperatingEventCode.UNLOCK_FAILED_INVALID_PIN: "Unlock failed (invalid PIN)",
    OperatingEventCode.UNLOCK_FAILED_INVALID_SCHEDULE:
        "Unlock failed (invalid schedule)",
    OperatingEventCode.ONE_TOUCH_LOCK: "One-touch lock",
    OperatingEventCode.KEY_LOCK: "Key lock",
    OperatingEventCode.KEY_UNLOCK: "Key unlock",
    OperatingEventCode.AUTO_LOCK: "Auto lock",
    OperatingEventCode.SCHEDULE_LOCK: "Schedule lock",
    OperatingEventCode.SCHEDULE_UNLOCK: "Schedule unlock",
    OperatingEventCode.MANUAL_LOCK: "Manual lock",
    OperatingEventCode.MANUAL_UNLOCK: "Manual unlock",
    OperatingEventCode.NON_ACCESS_USER_EVENT: "Non-access user event",
})

# Operating event code -> resulting lock state. Codes not listed here do not
# change the lock state.
OPERATING_EVENT_LOCK_STATES = immutabledict.immutabledict({
    OperatingEventCode.LOCK: LockState.LOCKED,
    OperatingEventCode.ONE_TOUCH_LOCK: LockState.LOCKED,
    OperatingEventCode.KEY_LOCK: LockState.LOCKED,
    OperatingEventCode.AUTO_LOCK: LockState.LOCKED,
    OperatingEventCode.SCHEDULE_LOCK: LockState.LOCKED,
    OperatingEventCode.MANUAL_LOCK: LockState.LOCKED,
    OperatingEventCode.UNLOCK: LockState.UNLOCKED,
    OperatingEventCode.KEY_UNLOCK: LockState.UNLOCKED,
    OperatingEventCode.SCHEDULE_UNLOCK: LockState.UNLOCKED,
    OperatingEventCode.MANUAL_UNLOCK: LockState.UNLOCKED,
})


class ProgrammingEventCode(enum.IntEnum):
  """Event codes of a Programming Event Notification."""
  UNKNOWN = 0
  MASTER_CODE_CHANGED = 1
  PIN_CODE_ADDED = 2
  PIN_CODE_DELETED = 3
  PIN_CODE_CHANGED = 4
  RFID_CODE_ADDED = 5
  RFID_CODE_DELETED = 6
  RFID_CODE_CHANGED = 7
  # Manufacturer-specific user code events sent by Kwikset firmware.
  USER_CODE_ADDED = 8
  USER_CODE_DELETED = 9
  USER_CODE_CHANGED = 10


PROGRAMMING_EVENTS_ADDED = frozenset([
    ProgrammingEventCode.PIN_CODE_ADDED,
    ProgrammingEventCode.RFID_CODE_ADDED,
    ProgrammingEventCode.USER_CODE_ADDED,
])
PROGRAMMING_EVENTS_DELETED = frozenset([
    ProgrammingEventCode.PIN_CODE_DELETED,
    ProgrammingEventCode.RFID_CODE_DELETED,
    ProgrammingEventCode.USER_CODE_DELETED,
])
PROGRAMMING_EVENTS_CHANGED = frozenset([
    ProgrammingEventCode.PIN_CODE_CHANGED,
    ProgrammingEventCode.RFID_CODE_CHANGED,
    ProgrammingEventCode.USER_CODE_CHANGED,
])


class PinStatus(enum.IntEnum):
  """Status byte of the Set PIN Code and Clear PIN Code responses."""
  SUCCESS = 0x00
  GENERAL_FAILURE = 0x01
  MEMORY_FULL = 0x02
  DUPLICATE_CODE = 0x03


PIN_STATUS_REASONS = immutabledict.immutabledict({
    PinStatus.SUCCESS: "success",
    PinStatus.GENERAL_FAILURE: "general failure",
    PinStatus.MEMORY_FULL: "memory full",
    PinStatus.DUPLICATE_CODE: "duplicate code",
})


class UserStatus(enum.IntEnum):
  AVAILABLE = 0x00
  ENABLED = 0x01
  DISABLED = 0x03


class UserType(enum.IntEnum):
  UNRESTRICTED = 0x00
  YEAR_DAY_SCHEDULE = 0x01
  WEEK_DAY_SCHEDULE = 0x02
  MASTER = 0x03
  NON_ACCESS = 0x04


def alarm_description(code: int) -> str:
  """Returns a human-readable description of a door lock alarm code."""
  if code in ALARM_DESCRIPTIONS:
    return ALARM_DESCRIPTIONS[code]
  return f"Unknown alarm 0x{code:02X}"


def operation_source_name(source: int) -> str:
  """Returns the display name of an operating event source."""
  return OPERATION_SOURCE_NAMES.get(source, f"Unknown({source})")


def operating_event_name(code: int) -> str:
  """Returns the display name of an operating event code."""
  return OPERATING_EVENT_NAMES.get(code, f"Unknown({code})")


def pin_status_reason(status: int) -> str:
  """Returns the failure reason of a PIN response status byte."""
  return PIN_STATUS_REASONS.get(status, PIN_STATUS_REASONS[
      PinStatus.GENERAL_FAILURE])
