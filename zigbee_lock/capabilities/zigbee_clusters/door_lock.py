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

"""Door Lock cluster translator.

Handles the LockState attribute, the Operating and Programming Event
Notifications and the PIN code responses. PIN code state lives in the
PinCodeCoordinator; this module only routes responses to it.
"""
import dataclasses
import struct
from typing import List, Optional

from zigbee_lock import data_types
from zigbee_lock import errors
from zigbee_lock import lock_logger
from zigbee_lock.capabilities import pin_code_coordinator
from zigbee_lock.capabilities import zigbee_enums
from zigbee_lock.capabilities.zigbee_clusters.interfaces import cluster_base

logger = lock_logger.get_logger("clusters")
DoorLockCluster = zigbee_enums.DoorLockCluster
DoorLockResponse = zigbee_enums.DoorLockResponse
EventName = data_types.EventName
LockValue = data_types.LockValue

_LOCK_VALUES = {
    zigbee_enums.LockState.LOCKED: LockValue.LOCKED,
    zigbee_enums.LockState.UNLOCKED: LockValue.UNLOCKED,
}
_NOTIFICATION_HEADER = struct.Struct("<BBH")
_LOCAL_TIME = struct.Struct("<I")


@dataclasses.dataclass(frozen=True)
class EventNotification:
  """Operating or Programming Event Notification payload.

  Layout: source (enum8) | event code (enum8) | user ID (uint16) |
  PIN (octstr) | local time (uint32) | data (octstr). Fields after the user ID
  are optional and are None when the payload is cut short.
  """
  source: int
  event_code: int
  user_id: int
  pin: Optional[bytes] = dataclasses.field(default=None, repr=False)
  local_time: Optional[int] = None


def parse_event_notification(payload: bytes) -> EventNotification:
  """Parses an event notification payload.

  Raises:
    DecodeFailureError: the payload is shorter than the fixed header.
  """
  if len(payload) < _NOTIFICATION_HEADER.size:
    raise errors.DecodeFailureError(
        f"Event notification payload {payload.hex()!r} is shorter than "
        f"{_NOTIFICATION_HEADER.size} bytes.")
  source, event_code, user_id = _NOTIFICATION_HEADER.unpack_from(payload)

  pin = None
  local_time = None
  offset = _NOTIFICATION_HEADER.size
  if len(payload) > offset:
    pin_length = payload[offset]
    offset += 1
    if pin_length != 0xFF and len(payload) >= offset + pin_length:
      pin = payload[offset:offset + pin_length]
      offset += pin_length
      if len(payload) >= offset + _LOCAL_TIME.size:
        local_time, = _LOCAL_TIME.unpack_from(payload, offset)
  return EventNotification(
      source=source,
      event_code=event_code,
      user_id=user_id,
      pin=pin,
      local_time=local_time)


class DoorLockClusterTranslator(cluster_base.ClusterBase):
  """Zigbee Door Lock cluster translator."""

  CLUSTER_ID = DoorLockCluster.ID

  def __init__(self,
               device_name: str,
               coordinator: pin_code_coordinator.PinCodeCoordinator):
    """Initializes the translator.

    Args:
      device_name: Device name used for logging.
      coordinator: owner of the PIN code slots of the device.
    """
    super().__init__(device_name=device_name)
    self._coordinator = coordinator

  def handle_attribute(
      self,
      report: data_types.AttributeReport) -> List[data_types.DomainEvent]:
    if report.attr_id != DoorLockCluster.ATTRIBUTE_LOCK_STATE:
      return super().handle_attribute(report)

    value = _LOCK_VALUES.get(report.value, LockValue.UNKNOWN)
    logger.info(f"{self._device_name}: is {value.value}")
    events = [
        data_types.DomainEvent(
            name=EventName.LOCK,
            value=value,
            description=f"{self._device_name} is {value.value}"),
    ]
    if value != LockValue.UNKNOWN:
      events.append(self._jam_cleared_event())
    return events

  def handle_command(
      self, command: data_types.ClusterCommand) -> List[data_types.DomainEvent]:
    if not command.cluster_specific:
      return super().handle_command(command)

    command_id = command.command_id
    if command_id == DoorLockResponse.OPERATING_EVENT_NOTIFICATION:
      return self._operating_event(parse_event_notification(command.payload))
    if command_id == DoorLockResponse.PROGRAMMING_EVENT_NOTIFICATION:
      notification = parse_event_notification(command.payload)
      return self._coordinator.handle_programming_event(
          notification.event_code, notification.user_id)
    if command_id == DoorLockResponse.SET_PIN_CODE_RESPONSE:
      return self._coordinator.handle_set_pin_response(command.payload)
    if command_id == DoorLockResponse.CLEAR_PIN_CODE_RESPONSE:
      return self._coordinator.handle_clear_pin_response(command.payload)
    if command_id in (DoorLockResponse.LOCK_DOOR_RESPONSE,
                      DoorLockResponse.UNLOCK_DOOR_RESPONSE):
      logger.debug(f"{self._device_name}: lock/unlock response "
                   f"cmd={command_id:#04x}")
      return []
    return super().handle_command(command)

  def _operating_event(
      self,
      notification: EventNotification) -> List[data_types.DomainEvent]:
    source_name = zigbee_enums.operation_source_name(notification.source)
    logger.debug(
        f"{self._device_name}: operating event src={source_name} "
        f"evt={zigbee_enums.operating_event_name(notification.event_code)} "
        f"user={notification.user_id}")

    lock_state = zigbee_enums.OPERATING_EVENT_LOCK_STATES.get(
        notification.event_code)
    if lock_state is None:
      return []
    value = _LOCK_VALUES[lock_state]

    user_id = notification.user_id
    code_name = self._coordinator.get_code_name(user_id) if user_id else None
    description = f"{self._device_name} {value.value} by {source_name}"
    if code_name:
      description += f" ({code_name})"
    logger.info(description)

    # A zero user ID means a manual operation without a code.
    data = {"usedCode": user_id, "codeName": code_name or ""} if user_id else {}
    events = []
    if code_name:
      events.append(
          data_types.DomainEvent(
              name=EventName.LAST_CODE_NAME,
              value=code_name,
              description=f"{self._device_name} last code used: {code_name}"))
    events.append(
        data_types.DomainEvent(
            name=EventName.LOCK,
            value=value,
            description=description,
            data=data))
    events.append(self._jam_cleared_event())
    return events

  def _jam_cleared_event(self) -> data_types.DomainEvent:
    return data_types.DomainEvent(
        name=EventName.LOCK_JAMMED, value=data_types.AlertValue.CLEAR)
