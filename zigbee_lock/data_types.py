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

"""Simple data types without dependencies on other zigbee_lock modules."""
import dataclasses
import enum
from typing import Any, Mapping, Optional, Union


@enum.unique
class BatteryChemistry(str, enum.Enum):
  ALKALINE = "alkaline"
  LITHIUM = "lithium"
  NIMH = "nimh"
  CUSTOM = "custom"


@enum.unique
class EventName(str, enum.Enum):
  """Names of the events published to the event sink."""
  LOCK = "lock"
  BATTERY = "battery"
  BATTERY_VOLTAGE = "batteryVoltage"
  LOCK_JAMMED = "lockJammed"
  TAMPER_ALERT = "tamperAlert"
  CODE_CHANGED = "codeChanged"
  LAST_CODE_NAME = "lastCodeName"
  LOCK_CODES = "lockCodes"
  CODE_LENGTH = "codeLength"


@enum.unique
class LockValue(str, enum.Enum):
  LOCKED = "locked"
  UNLOCKED = "unlocked"
  LOCKING = "locking"
  UNLOCKING = "unlocking"
  UNKNOWN = "unknown"


@enum.unique
class AlertValue(str, enum.Enum):
  """Values of the lockJammed and tamperAlert events."""
  DETECTED = "detected"
  CLEAR = "clear"


@enum.unique
class OperationKind(enum.Enum):
  SET = "set"
  DELETE = "delete"


@dataclasses.dataclass(frozen=True)
class CodeSlot:
  slot: int  # PIN code user ID on the device.
  name: str  # Display name known to the hub.


@dataclasses.dataclass(frozen=True)
class PendingOperation:
  kind: OperationKind
  slot: int
  created_at: float  # Monotonic clock reading at issue time.
  name: Optional[str] = None  # Code name to commit on success (set only).


@dataclasses.dataclass(frozen=True)
class RawFrame:
  """A framed message from the device, before decoding.

  Attribute reports carry attr_id and value (ZCL little-endian encoding).
  Commands carry command_id, cluster_specific and payload.
  """
  cluster: int
  attr_id: Optional[int] = None
  value: Optional[bytes] = None
  command_id: Optional[int] = None
  cluster_specific: bool = False
  payload: Optional[bytes] = None


@dataclasses.dataclass(frozen=True)
class AttributeReport:
  cluster: int
  attr_id: int
  value: int


@dataclasses.dataclass(frozen=True)
class ClusterCommand:
  cluster: int
  command_id: int
  cluster_specific: bool
  payload: bytes = b""


ParsedFrame = Union[AttributeReport, ClusterCommand]


@dataclasses.dataclass(frozen=True)
class DomainEvent:
  """A semantic event handed over to the external event sink."""
  name: EventName
  value: Any
  description: str = ""
  unit: Optional[str] = None
  data: Mapping[str, Any] = dataclasses.field(default_factory=dict)
