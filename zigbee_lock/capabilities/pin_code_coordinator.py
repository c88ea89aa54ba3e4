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

"""PIN code coordinator: tracks PIN slots and sequences set/clear requests.

The Set PIN Code and Clear PIN Code responses carry only a status byte, not the
user ID they answer. Requests are therefore serialized: at most one set and one
clear are in flight at any time, and each response resolves the oldest pending
operation of its kind. A second request of the same kind is rejected with
OperationInProgressError until the first one is answered or expires.

Programming Event Notifications (codes added, deleted or changed at the keypad)
update the slot table directly and never touch the pending operations.
"""
import collections
import json
import re
import time
from typing import Callable, Deque, Dict, List, Mapping, Optional, Tuple

import immutabledict
from zigbee_lock import config
from zigbee_lock import data_types
from zigbee_lock import decorators
from zigbee_lock import errors
from zigbee_lock import lock_logger
from zigbee_lock.capabilities import zigbee_commands
from zigbee_lock.capabilities import zigbee_enums
from zigbee_lock.capabilities.interfaces import capability_base

logger = lock_logger.get_logger("pin_codes")
EventName = data_types.EventName
OperationKind = data_types.OperationKind
PinStatus = zigbee_enums.PinStatus

_PIN_REGEX = re.compile(config.PIN_PATTERN)
_MAX_USER_ID = 0xFFFF
_NO_RESPONSE_REASON = "no response from device"


def default_code_name(slot: int) -> str:
  return f"Code {slot}"


def _parse_slot(slot) -> int:
  """Returns the slot as an int or raises ValidationError."""
  if isinstance(slot, bool):
    raise errors.ValidationError(f"Code slot {slot!r} is not a number.")
  try:
    return int(slot)
  except (TypeError, ValueError) as err:
    raise errors.ValidationError(
        f"Code slot {slot!r} is not a number.") from err


def _check_pin_status(device_name: str, slot: int, status: int) -> None:
  """Raises DeviceRejectionError if a PIN response status is not success."""
  if status != PinStatus.SUCCESS:
    raise errors.DeviceRejectionError(
        device_name, slot, status, zigbee_enums.pin_status_reason(status))


class PinCodeCoordinator(capability_base.CapabilityBase):
  """Owns the PIN slot table and the pending set/clear PIN operations."""

  def __init__(self,
               device_name: str,
               get_max_codes: Callable[[], int],
               clock: Callable[[], float] = time.monotonic,
               pending_timeout_s: float = config.PENDING_OPERATION_TIMEOUT_S):
    """Initializes the coordinator.

    Args:
      device_name: Device name used for logging.
      get_max_codes: returns the number of PIN slots of the lock.
      clock: monotonic clock used to age pending operations.
      pending_timeout_s: pending operations older than this are evicted by
        expire_pending_operations().
    """
    super().__init__(device_name=device_name)
    self._get_max_codes = get_max_codes
    self._clock = clock
    self._pending_timeout_s = pending_timeout_s
    self._codes: Dict[int, data_types.CodeSlot] = {}
    self._pending: Dict[OperationKind,
                        Deque[data_types.PendingOperation]] = {
                            OperationKind.SET: collections.deque(),
                            OperationKind.DELETE: collections.deque(),
                        }

  @decorators.DynamicProperty
  def codes(self) -> Mapping[int, data_types.CodeSlot]:
    """Snapshot of the PIN slots known to the hub, keyed by slot."""
    return immutabledict.immutabledict(self._codes)

  @decorators.DynamicProperty
  def pending_operations(self) -> Tuple[data_types.PendingOperation, ...]:
    """Pending operations, sets first, oldest first within each kind."""
    return (tuple(self._pending[OperationKind.SET]) +
            tuple(self._pending[OperationKind.DELETE]))

  def get_code_name(self, slot: int) -> Optional[str]:
    """Returns the name of the code in the slot, None if unknown."""
    code = self._codes.get(slot)
    return code.name if code else None

  def reset(self) -> None:
    """Forgets all codes and pending operations."""
    self._codes.clear()
    for queue in self._pending.values():
      queue.clear()

  @decorators.CapabilityLogDecorator(
      logger, level=decorators.DEBUG, print_args=False)
  def set_code(self,
               slot,
               pin: str,
               name: Optional[str] = None) -> zigbee_commands.SetPinCommand:
    """Registers a pending set and returns the Set PIN Code request.

    Args:
      slot: PIN slot in [1, max codes].
      pin: 4 to 8 decimal digits.
      name: display name of the code. Defaults to "Code <slot>".

    Returns:
      The request to send to the lock.

    Raises:
      ValidationError: the slot or PIN is invalid.
      OperationInProgressError: another set is pending.
    """
    slot = _parse_slot(slot)
    max_codes = self._get_max_codes()
    if not 1 <= slot <= max_codes:
      raise errors.ValidationError(
          f"Code slot {slot} out of range [1, {max_codes}].")
    if not isinstance(pin, str) or not _PIN_REGEX.match(pin):
      raise errors.ValidationError("PIN must be 4-8 numeric digits.")
    self._check_not_in_flight(OperationKind.SET)

    code_name = name or default_code_name(slot)
    self._pending[OperationKind.SET].append(
        data_types.PendingOperation(
            kind=OperationKind.SET,
            slot=slot,
            created_at=self._clock(),
            name=code_name))
    return zigbee_commands.SetPinCommand(slot=slot, pin=pin)

  @decorators.CapabilityLogDecorator(logger, level=decorators.DEBUG)
  def delete_code(self, slot) -> zigbee_commands.ClearPinCommand:
    """Registers a pending clear and returns the Clear PIN Code request.

    The slot does not need to be known locally.

    Args:
      slot: PIN slot to clear.

    Returns:
      The request to send to the lock.

    Raises:
      ValidationError: the slot is not a valid user ID.
      OperationInProgressError: another clear is pending.
    """
    slot = _parse_slot(slot)
    if not 1 <= slot <= _MAX_USER_ID:
      raise errors.ValidationError(
          f"Code slot {slot} out of range [1, {_MAX_USER_ID}].")
    self._check_not_in_flight(OperationKind.DELETE)

    self._pending[OperationKind.DELETE].append(
        data_types.PendingOperation(
            kind=OperationKind.DELETE, slot=slot, created_at=self._clock()))
    return zigbee_commands.ClearPinCommand(slot=slot)

  def clear_codes(
      self
  ) -> Tuple[zigbee_commands.ClearAllCommand, List[data_types.DomainEvent]]:
    """Forgets all codes without waiting for the lock to confirm.

    Returns:
      The Clear All PIN Codes request and the events to publish.
    """
    logger.info(f"{self._device_name}: clearing ALL codes")
    self.reset()
    events = [
        self._lock_codes_event(),
        data_types.DomainEvent(
            name=EventName.CODE_CHANGED,
            value="all deleted",
            description=f"{self._device_name} all codes cleared"),
    ]
    return zigbee_commands.ClearAllCommand(), events

  def get_codes(self) -> List[data_types.DomainEvent]:
    """Returns the lockCodes snapshot event. The lock cannot enumerate codes."""
    return [self._lock_codes_event()]

  def expire_pending_operations(self) -> List[data_types.DomainEvent]:
    """Evicts pending operations the lock never answered.

    Returns:
      A failed codeChanged event for each evicted set. Evicted clears are
      only logged.
    """
    now = self._clock()
    events = []
    for kind, queue in self._pending.items():
      while queue and now - queue[0].created_at >= self._pending_timeout_s:
        operation = queue.popleft()
        logger.warning(
            f"{self._device_name}: {kind.value} code slot {operation.slot} "
            f"expired after {self._pending_timeout_s} s without a response")
        if kind == OperationKind.SET:
          events.append(
              self._set_failed_event(operation.slot, _NO_RESPONSE_REASON))
    return events

  def handle_set_pin_response(
      self, payload: bytes) -> List[data_types.DomainEvent]:
    """Resolves the oldest pending set with the response status.

    Args:
      payload: Set PIN Code Response payload (status byte).

    Returns:
      codeChanged "<slot> set" and lockCodes on success, codeChanged
      "<slot> failed" otherwise.

    Raises:
      ProtocolAnomalyError: no set is pending.
    """
    if not payload:
      logger.debug(f"{self._device_name}: empty set PIN response")
      return []
    status = payload[0]
    operation = self._pop_oldest(OperationKind.SET, "set PIN")
    slot = operation.slot

    try:
      _check_pin_status(self._device_name, slot, status)
    except errors.DeviceRejectionError as err:
      logger.warning(f"{self._device_name}: set code slot {slot} failed - "
                     f"{err.reason}")
      return [self._set_failed_event(slot, err.reason)]

    self._codes[slot] = data_types.CodeSlot(slot=slot, name=operation.name)
    logger.info(f"{self._device_name}: code slot {slot} ({operation.name}) "
                "set successfully")
    return [
        self._lock_codes_event(),
        self._code_changed_event(
            f"{slot} set", f"{self._device_name} code slot {slot} set"),
    ]

  def handle_clear_pin_response(
      self, payload: bytes) -> List[data_types.DomainEvent]:
    """Resolves the oldest pending clear with the response status.

    The slot is removed and reported right away: some firmware never sends a
    Programming Event Notification for clears issued by the hub.

    Args:
      payload: Clear PIN Code Response payload (status byte).

    Returns:
      lockCodes and codeChanged "<slot> deleted" on success, nothing otherwise.

    Raises:
      ProtocolAnomalyError: no clear is pending.
    """
    if not payload:
      logger.debug(f"{self._device_name}: empty clear PIN response")
      return []
    status = payload[0]
    operation = self._pop_oldest(OperationKind.DELETE, "clear PIN")
    slot = operation.slot

    try:
      _check_pin_status(self._device_name, slot, status)
    except errors.DeviceRejectionError as err:
      logger.warning(f"{self._device_name}: delete code slot {slot} failed, "
                     f"status={err.status}")
      return []

    self._codes.pop(slot, None)
    logger.info(f"{self._device_name}: code slot {slot} deleted")
    return [
        self._lock_codes_event(),
        self._code_changed_event(
            f"{slot} deleted", f"{self._device_name} code slot {slot} deleted"),
    ]

  def handle_programming_event(
      self, event_code: int, slot: int) -> List[data_types.DomainEvent]:
    """Applies a code change made at the lock itself.

    Changed codes are handled like added codes: the slot is created with a
    placeholder name if it is unknown. Adds and changes for user IDs outside
    [1, max codes] are ignored. Deleting an unknown slot is a no-op.

    Args:
      event_code: Programming Event Notification event code.
      slot: user ID the event applies to.

    Returns:
      lockCodes and codeChanged events, nothing for other event codes.
    """
    is_added = event_code in zigbee_enums.PROGRAMMING_EVENTS_ADDED
    is_changed = event_code in zigbee_enums.PROGRAMMING_EVENTS_CHANGED
    max_codes = self._get_max_codes()
    if (is_added or is_changed) and not 1 <= slot <= max_codes:
      logger.warning(f"{self._device_name}: ignoring keypad code for user "
                     f"{slot} outside slots [1, {max_codes}]")
      return []

    if event_code in zigbee_enums.PROGRAMMING_EVENTS_DELETED:
      self._codes.pop(slot, None)
      outcome, verb = "deleted", "deleted"
    elif is_added:
      self._ensure_slot(slot)
      outcome, verb = "set", "added"
    elif is_changed:
      self._ensure_slot(slot)
      outcome, verb = "set", "changed"
    else:
      logger.debug(f"{self._device_name}: ignoring programming event "
                   f"{event_code} for user {slot}")
      return []

    logger.info(
        f"{self._device_name}: code slot {slot} {verb} via lock keypad")
    return [
        self._lock_codes_event(),
        self._code_changed_event(
            f"{slot} {outcome}",
            f"{self._device_name} code {slot} {verb} via keypad"),
    ]

  def _check_not_in_flight(self, kind: OperationKind) -> None:
    queue = self._pending[kind]
    if queue:
      raise errors.OperationInProgressError(
          self._device_name, kind.value, queue[0].slot)

  def _ensure_slot(self, slot: int) -> None:
    if slot not in self._codes:
      self._codes[slot] = data_types.CodeSlot(
          slot=slot, name=default_code_name(slot))

  def _pop_oldest(self, kind: OperationKind,
                  response_name: str) -> data_types.PendingOperation:
    queue = self._pending[kind]
    if not queue:
      raise errors.ProtocolAnomalyError(
          f"{self._device_name} received a {response_name} response but no "
          f"{kind.value} operation is pending.")
    return queue.popleft()

  def _code_changed_event(
      self, value: str, description: str) -> data_types.DomainEvent:
    return data_types.DomainEvent(
        name=EventName.CODE_CHANGED, value=value, description=description)

  def _set_failed_event(self, slot: int,
                        reason: str) -> data_types.DomainEvent:
    return data_types.DomainEvent(
        name=EventName.CODE_CHANGED,
        value=f"{slot} failed",
        description=(
            f"{self._device_name} code slot {slot} set failed ({reason})"),
        data={"reason": reason})

  def _lock_codes_event(self) -> data_types.DomainEvent:
    codes = {
        str(slot): {"name": self._codes[slot].name}
        for slot in sorted(self._codes)
    }
    return data_types.DomainEvent(
        name=EventName.LOCK_CODES,
        value=json.dumps(codes),
        description=f"{self._device_name} lock codes updated")
