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

"""Unit tests for the pin_code_coordinator module."""
import json

from zigbee_lock import data_types
from zigbee_lock import errors
from zigbee_lock.capabilities import pin_code_coordinator
from zigbee_lock.capabilities import zigbee_commands
from zigbee_lock.tests.unit_tests.utils import unit_test_case

_DEVICE_NAME = "front-door"
_MAX_CODES = 30
_TIMEOUT_S = 60.0

EventName = data_types.EventName


class PinCodeCoordinatorTest(unit_test_case.UnitTestCase):
  """Unit tests for PinCodeCoordinator."""

  def setUp(self):
    super().setUp()
    self.uut = pin_code_coordinator.PinCodeCoordinator(
        device_name=_DEVICE_NAME,
        get_max_codes=lambda: _MAX_CODES,
        clock=self.clock,
        pending_timeout_s=_TIMEOUT_S)

  def _lock_codes(self, events):
    return json.loads(self.get_event(events, EventName.LOCK_CODES).value)

  def _add_code(self, slot, name=None):
    self.uut.set_code(slot, "1234", name)
    self.uut.handle_set_pin_response(b"\x00")

  def test_set_code_returns_set_pin_request(self):
    """Verifies set_code registers a pending set and returns the request."""
    command = self.uut.set_code(3, "1234", "Alice")
    self.assertEqual(command, zigbee_commands.SetPinCommand(slot=3, pin="1234"))
    self.assertEqual(
        self.uut.pending_operations,
        (data_types.PendingOperation(
            kind=data_types.OperationKind.SET,
            slot=3,
            created_at=self.clock(),
            name="Alice"),))
    self.assertEmpty(self.uut.codes)

  def test_set_code_accepts_numeric_string_slot(self):
    """Verifies a slot given as a decimal string is accepted."""
    command = self.uut.set_code("7", "87654321")
    self.assertEqual(command.slot, 7)

  def test_set_code_success(self):
    """Verifies a success response commits the slot."""
    self.uut.set_code(3, "1234", "Alice")
    events = self.uut.handle_set_pin_response(b"\x00")
    self.assert_event_names(events,
                            [EventName.LOCK_CODES, EventName.CODE_CHANGED])
    self.assertEqual(events[1].value, "3 set")
    self.assertEqual(self._lock_codes(events), {"3": {"name": "Alice"}})
    self.assertEqual(self.uut.codes,
                     {3: data_types.CodeSlot(slot=3, name="Alice")})
    self.assertEmpty(self.uut.pending_operations)

  def test_set_code_default_name(self):
    """Verifies codes set without a name are called "Code <slot>"."""
    self._add_code(4)
    self.assertEqual(self.uut.get_code_name(4), "Code 4")

  def test_set_code_rejected(self):
    """Verifies a non-success status fails the slot without committing it."""
    for status, reason in ((0x01, "general failure"), (0x02, "memory full"),
                           (0x03, "duplicate code"),
                           (0x7F, "general failure")):
      with self.subTest(status=status):
        self.uut.set_code(3, "1234", "Alice")
        events = self.uut.handle_set_pin_response(bytes([status]))
        event = self.get_event(events, EventName.CODE_CHANGED)
        self.assertLen(events, 1)
        self.assertEqual(event.value, "3 failed")
        self.assertEqual(event.data, {"reason": reason})
        self.assertIn(reason, event.description)
        self.assertEmpty(self.uut.codes)
        self.assertEmpty(self.uut.pending_operations)

  def test_set_code_slot_out_of_range(self):
    """Verifies slots outside [1, max codes] are rejected."""
    for slot in (0, 31, -1):
      with self.subTest(slot=slot):
        with self.assertRaisesRegex(errors.ValidationError,
                                    r"out of range \[1, 30\]"):
          self.uut.set_code(slot, "1234")
    self.assertEmpty(self.uut.pending_operations)

  def test_set_code_uses_current_max_codes(self):
    """Verifies the slot limit is read on each request."""
    max_codes = [30]
    uut = pin_code_coordinator.PinCodeCoordinator(
        device_name=_DEVICE_NAME,
        get_max_codes=lambda: max_codes[0],
        clock=self.clock)
    max_codes[0] = 50
    self.assertEqual(uut.set_code(31, "1234").slot, 31)

  def test_set_code_bad_slot_type(self):
    """Verifies non-numeric slots are rejected."""
    for slot in ("abc", None, True):
      with self.subTest(slot=slot):
        with self.assertRaisesRegex(errors.ValidationError, "not a number"):
          self.uut.set_code(slot, "1234")

  def test_set_code_bad_pin(self):
    """Verifies PINs must be 4-8 decimal digits."""
    for pin in ("12a4", "123", "123456789", "", " 1234", 1234, None):
      with self.subTest(pin=pin):
        with self.assertRaisesRegex(errors.ValidationError,
                                    "PIN must be 4-8 numeric digits"):
          self.uut.set_code(3, pin)
    self.assertEmpty(self.uut.pending_operations)

  def test_set_code_while_set_pending(self):
    """Verifies only one set may be in flight."""
    self.uut.set_code(3, "1234")
    with self.assertRaises(errors.OperationInProgressError) as context:
      self.uut.set_code(4, "5678")
    self.assertEqual(context.exception.slot, 3)
    self.assertIsInstance(context.exception, errors.ValidationError)
    self.assertLen(self.uut.pending_operations, 1)

  def test_set_and_delete_may_be_pending_together(self):
    """Verifies a set and a delete are tracked in separate queues."""
    self.uut.set_code(3, "1234")
    self.uut.delete_code(5)
    self.assertEqual(
        [(op.kind, op.slot) for op in self.uut.pending_operations],
        [(data_types.OperationKind.SET, 3),
         (data_types.OperationKind.DELETE, 5)])

  def test_delete_code_returns_clear_pin_request(self):
    """Verifies delete_code does not require a locally known slot."""
    command = self.uut.delete_code(5)
    self.assertEqual(command, zigbee_commands.ClearPinCommand(slot=5))

  def test_delete_code_success(self):
    """Verifies a success response removes the slot and reports it."""
    self._add_code(5, "Bob")
    self.uut.delete_code(5)
    events = self.uut.handle_clear_pin_response(b"\x00")
    self.assert_event_names(events,
                            [EventName.LOCK_CODES, EventName.CODE_CHANGED])
    self.assertEqual(events[1].value, "5 deleted")
    self.assertEqual(self._lock_codes(events), {})
    self.assertEmpty(self.uut.codes)

  def test_delete_unknown_code_success(self):
    """Verifies deleting a slot the hub never knew still reports it."""
    self.uut.delete_code(5)
    events = self.uut.handle_clear_pin_response(b"\x00")
    self.assertEqual(
        self.get_event(events, EventName.CODE_CHANGED).value, "5 deleted")

  def test_delete_code_rejected(self):
    """Verifies a failed clear keeps the slot and reports nothing."""
    self._add_code(5, "Bob")
    self.uut.delete_code(5)
    self.assertEmpty(self.uut.handle_clear_pin_response(b"\x01"))
    self.assertEqual(self.uut.get_code_name(5), "Bob")
    self.assertEmpty(self.uut.pending_operations)

  def test_delete_code_while_delete_pending(self):
    """Verifies only one delete may be in flight."""
    self.uut.delete_code(5)
    with self.assertRaises(errors.OperationInProgressError):
      self.uut.delete_code(6)

  def test_delete_code_bad_slot(self):
    """Verifies delete_code rejects invalid user IDs."""
    for slot in (0, 0x10000, "x"):
      with self.subTest(slot=slot):
        with self.assertRaises(errors.ValidationError):
          self.uut.delete_code(slot)

  def test_response_without_pending_operation(self):
    """Verifies unmatched responses are protocol anomalies."""
    with self.assertRaises(errors.ProtocolAnomalyError):
      self.uut.handle_set_pin_response(b"\x00")
    with self.assertRaises(errors.ProtocolAnomalyError):
      self.uut.handle_clear_pin_response(b"\x00")
    self.assertEmpty(self.uut.codes)

  def test_empty_response_payload(self):
    """Verifies responses without a status byte leave the pending operation."""
    self.uut.set_code(3, "1234")
    self.assertEmpty(self.uut.handle_set_pin_response(b""))
    self.assertLen(self.uut.pending_operations, 1)

  def test_expire_pending_operations(self):
    """Verifies unanswered operations are evicted after the timeout."""
    self.uut.set_code(3, "1234")
    self.uut.delete_code(5)
    self.clock.advance(_TIMEOUT_S - 1)
    self.assertEmpty(self.uut.expire_pending_operations())
    self.assertLen(self.uut.pending_operations, 2)

    self.clock.advance(1)
    events = self.uut.expire_pending_operations()
    self.assertLen(events, 1)
    self.assertEqual(events[0].name, EventName.CODE_CHANGED)
    self.assertEqual(events[0].value, "3 failed")
    self.assertEqual(events[0].data, {"reason": "no response from device"})
    self.assertEmpty(self.uut.pending_operations)
    self.assertEqual(self.uut.set_code(4, "1234").slot, 4)

  def test_late_response_matches_old_operation(self):
    """Verifies a response still resolves an aged but unexpired operation."""
    self.uut.set_code(3, "1234")
    self.clock.advance(_TIMEOUT_S * 2)
    events = self.uut.handle_set_pin_response(b"\x00")
    self.assertEqual(
        self.get_event(events, EventName.CODE_CHANGED).value, "3 set")

  def test_programming_event_added(self):
    """Verifies codes added at the keypad get a placeholder name."""
    events = self.uut.handle_programming_event(2, 9)
    self.assert_event_names(events,
                            [EventName.LOCK_CODES, EventName.CODE_CHANGED])
    self.assertEqual(events[1].value, "9 set")
    self.assertEqual(self._lock_codes(events), {"9": {"name": "Code 9"}})

  def test_programming_event_added_keeps_known_name(self):
    """Verifies an add notification for a hub-set code keeps its name."""
    self._add_code(3, "Alice")
    self.uut.handle_programming_event(2, 3)
    self.assertEqual(self.uut.get_code_name(3), "Alice")

  def test_programming_event_changed(self):
    """Verifies changed codes are handled like added codes."""
    events = self.uut.handle_programming_event(4, 6)
    self.assertEqual(
        self.get_event(events, EventName.CODE_CHANGED).value, "6 set")
    self.assertEqual(self.uut.get_code_name(6), "Code 6")

  def test_programming_event_deleted_is_idempotent(self):
    """Verifies deleting a slot twice leaves the same state."""
    self._add_code(5, "Bob")
    first = self.uut.handle_programming_event(3, 5)
    second = self.uut.handle_programming_event(3, 5)
    self.assertEqual(first, second)
    self.assertEqual(
        self.get_event(second, EventName.CODE_CHANGED).value, "5 deleted")
    self.assertEmpty(self.uut.codes)

  def test_programming_event_does_not_touch_pending(self):
    """Verifies keypad changes never resolve pending operations."""
    self.uut.delete_code(5)
    self.uut.handle_programming_event(3, 5)
    self.assertLen(self.uut.pending_operations, 1)

  def test_programming_event_outside_slot_range(self):
    """Verifies keypad adds and changes for invalid user IDs are ignored."""
    for event_code in (2, 4):
      for slot in (0, _MAX_CODES + 1, 0xFFFF):
        with self.subTest(event_code=event_code, slot=slot):
          self.assertEmpty(self.uut.handle_programming_event(event_code, slot))
    self.assertEmpty(self.uut.codes)

  def test_programming_event_deleted_outside_slot_range(self):
    """Verifies deleting an invalid user ID stays a harmless no-op."""
    events = self.uut.handle_programming_event(3, 0xFFFF)
    self.assertEqual(
        self.get_event(events, EventName.CODE_CHANGED).value, "65535 deleted")
    self.assertEmpty(self.uut.codes)

  def test_programming_event_ignored(self):
    """Verifies unrelated programming events produce no events."""
    self.assertEmpty(self.uut.handle_programming_event(1, 0))
    self.assertEmpty(self.uut.handle_programming_event(0, 3))

  def test_clear_codes(self):
    """Verifies clear_codes forgets everything without waiting."""
    self._add_code(3, "Alice")
    self.uut.delete_code(3)
    command, events = self.uut.clear_codes()
    self.assertEqual(command, zigbee_commands.ClearAllCommand())
    self.assert_event_names(events,
                            [EventName.LOCK_CODES, EventName.CODE_CHANGED])
    self.assertEqual(events[0].value, "{}")
    self.assertEqual(events[1].value, "all deleted")
    self.assertEmpty(self.uut.codes)
    self.assertEmpty(self.uut.pending_operations)

  def test_get_codes_sorted_by_slot(self):
    """Verifies the lockCodes snapshot lists slots in ascending order."""
    self._add_code(10, "Carol")
    self._add_code(2, "Alice")
    events = self.uut.get_codes()
    self.assertEqual(
        events[0].value,
        '{"2": {"name": "Alice"}, "10": {"name": "Carol"}}')

  def test_codes_snapshot_is_read_only(self):
    """Verifies the codes property cannot mutate coordinator state."""
    self._add_code(3)
    with self.assertRaises(TypeError):
      self.uut.codes[4] = data_types.CodeSlot(slot=4, name="x")


if __name__ == "__main__":
  unit_test_case.main()
