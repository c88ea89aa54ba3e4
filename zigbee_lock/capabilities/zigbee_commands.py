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

"""Outbound command requests handed to the command transport.

Each request knows its cluster and command identifiers and can render its ZCL
payload (little-endian). Encoding the surrounding ZCL/APS frame is left to the
transport.
"""
import dataclasses
import struct
from typing import Optional

from zigbee_lock.capabilities import zigbee_enums

DoorLockCluster = zigbee_enums.DoorLockCluster
DoorLockCommand = zigbee_enums.DoorLockCommand


@dataclasses.dataclass(frozen=True)
class ZigbeeCommand:
  """A cluster-specific command sent to the lock."""
  cluster: int = dataclasses.field(init=False, default=DoorLockCluster.ID)
  command_id: int = dataclasses.field(init=False, default=0)

  def payload(self) -> bytes:
    """Returns the ZCL command payload."""
    return b""


@dataclasses.dataclass(frozen=True)
class LockCommand(ZigbeeCommand):
  command_id: int = dataclasses.field(
      init=False, default=DoorLockCommand.LOCK_DOOR)


@dataclasses.dataclass(frozen=True)
class UnlockCommand(ZigbeeCommand):
  command_id: int = dataclasses.field(
      init=False, default=DoorLockCommand.UNLOCK_DOOR)


@dataclasses.dataclass(frozen=True)
class SetPinCommand(ZigbeeCommand):
  """Set PIN Code request.

  Payload: UserID (uint16) | UserStatus (uint8) | UserType (uint8) |
  PIN (octstr)
  """
  command_id: int = dataclasses.field(
      init=False, default=DoorLockCommand.SET_PIN_CODE)
  slot: int = 0
  pin: str = dataclasses.field(default="", repr=False)
  user_status: zigbee_enums.UserStatus = zigbee_enums.UserStatus.ENABLED
  user_type: zigbee_enums.UserType = zigbee_enums.UserType.UNRESTRICTED

  def payload(self) -> bytes:
    pin_bytes = self.pin.encode("ascii")
    return (struct.pack("<HBBB", self.slot, self.user_status, self.user_type,
                        len(pin_bytes)) + pin_bytes)


@dataclasses.dataclass(frozen=True)
class ClearPinCommand(ZigbeeCommand):
  """Clear PIN Code request. Payload: UserID (uint16)."""
  command_id: int = dataclasses.field(
      init=False, default=DoorLockCommand.CLEAR_PIN_CODE)
  slot: int = 0

  def payload(self) -> bytes:
    return struct.pack("<H", self.slot)


@dataclasses.dataclass(frozen=True)
class ClearAllCommand(ZigbeeCommand):
  command_id: int = dataclasses.field(
      init=False, default=DoorLockCommand.CLEAR_ALL_PIN_CODES)


@dataclasses.dataclass(frozen=True)
class ReadAttributeCommand:
  """Global Read Attributes request for a single attribute."""
  cluster: int
  attr_id: int


@dataclasses.dataclass(frozen=True)
class ConfigureReportingCommand:
  """Global Configure Reporting request for a single attribute.

  reportable_change is None for discrete data types (report on any change).
  """
  cluster: int
  attr_id: int
  data_type: zigbee_enums.ZclDataType
  min_interval_s: int
  max_interval_s: int
  reportable_change: Optional[int] = None
