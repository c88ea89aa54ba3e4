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

"""Device session for a single Zigbee smart lock.

A LockSession is created when a lock is attached and closed when it is
detached. It owns the configuration, the PIN code slots and the pending PIN
operations of that lock, and it is not thread-safe: frames and commands for
one lock must be processed one at a time.

Inbound frames go through handle_frame() (or handle_description() for host
description maps). Resulting events are delivered to the event sink and
returned. Methods which talk to the lock return the command requests for the
transport to send; they never send anything themselves.
"""
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from zigbee_lock import config
from zigbee_lock import data_types
from zigbee_lock import decorators
from zigbee_lock import device_config
from zigbee_lock import errors
from zigbee_lock import lock_logger
from zigbee_lock.capabilities import frame_decoder
from zigbee_lock.capabilities import pin_code_coordinator
from zigbee_lock.capabilities import zigbee_commands
from zigbee_lock.capabilities import zigbee_enums
from zigbee_lock.capabilities.zigbee_clusters import alarms
from zigbee_lock.capabilities.zigbee_clusters import door_lock
from zigbee_lock.capabilities.zigbee_clusters import power_configuration
from zigbee_lock.capabilities.zigbee_clusters.interfaces import cluster_base

logger = lock_logger.get_logger()
EventName = data_types.EventName
EventSink = Callable[[data_types.DomainEvent], None]
DoorLockCluster = zigbee_enums.DoorLockCluster
PowerConfigurationCluster = zigbee_enums.PowerConfigurationCluster


class LockSession:
  """Protocol adapter between one lock's ZCL messages and lock semantics."""

  def __init__(self,
               name: str,
               lock_config: Optional[device_config.DeviceConfig] = None,
               event_sink: Optional[EventSink] = None,
               clock: Callable[[], float] = time.monotonic):
    """Initializes the session.

    Args:
      name: display name of the lock, used in logs and event descriptions.
      lock_config: initial configuration. Defaults to alkaline batteries and
        30 PIN slots.
      event_sink: receives every published event.
      clock: monotonic clock used to age pending PIN operations.
    """
    self.name = name
    self._config = lock_config or device_config.DeviceConfig()
    self._event_sink = event_sink
    self._coordinator = pin_code_coordinator.PinCodeCoordinator(
        device_name=name,
        get_max_codes=lambda: self._config.max_codes,
        clock=clock)
    self._power_cluster = power_configuration.PowerClusterTranslator(
        device_name=name, get_config=lambda: self._config)
    translators = [
        self._power_cluster,
        alarms.AlarmsClusterTranslator(device_name=name),
        door_lock.DoorLockClusterTranslator(
            device_name=name, coordinator=self._coordinator),
    ]
    self._clusters: Dict[int, cluster_base.ClusterBase] = {
        translator.CLUSTER_ID: translator for translator in translators
    }

  @decorators.DynamicProperty
  def config(self) -> device_config.DeviceConfig:
    """Current device configuration."""
    return self._config

  @decorators.DynamicProperty
  def codes(self) -> Mapping[int, data_types.CodeSlot]:
    """PIN code slots known to the hub, keyed by slot."""
    return self._coordinator.codes

  @decorators.DynamicProperty
  def pending_operations(self) -> Tuple[data_types.PendingOperation, ...]:
    """Set and clear PIN requests still waiting for a response."""
    return self._coordinator.pending_operations

  def close(self) -> None:
    """Releases session state when the lock is detached."""
    self._coordinator.reset()
    self._event_sink = None

  # Lifecycle and configuration

  def installed(self) -> List[Any]:
    """Initializes state for a newly joined lock.

    Returns:
      The configure() requests.
    """
    logger.info(f"{self.name}: lock installed")
    self._coordinator.reset()
    self._publish([
        data_types.DomainEvent(
            name=EventName.LOCK, value=data_types.LockValue.UNKNOWN),
        data_types.DomainEvent(
            name=EventName.LOCK_JAMMED, value=data_types.AlertValue.CLEAR),
        data_types.DomainEvent(
            name=EventName.TAMPER_ALERT, value=data_types.AlertValue.CLEAR),
    ])
    return self.configure()

  def update_config(self, lock_config: device_config.DeviceConfig) -> List[Any]:
    """Replaces the configuration and reconfigures reporting.

    Args:
      lock_config: new configuration, replacing the current one wholesale.

    Returns:
      The configure() requests.
    """
    logger.info(f"{self.name}: preferences updated")
    self._config = lock_config
    self._power_cluster.reset_threshold_warning()
    return self.configure()

  @decorators.LogDecorator(logger, level=decorators.DEBUG)
  def configure(self) -> List[Any]:
    """Returns the reporting configuration and initial read requests.

    Only BatteryVoltage is configured: this firmware answers
    UNSUPPORTED_ATTRIBUTE for BatteryPercentageRemaining.
    """
    return [
        zigbee_commands.ConfigureReportingCommand(
            cluster=PowerConfigurationCluster.ID,
            attr_id=PowerConfigurationCluster.ATTRIBUTE_BATTERY_VOLTAGE,
            data_type=zigbee_enums.ZclDataType.UINT8,
            min_interval_s=config.BATTERY_VOLTAGE_REPORT_MIN_INTERVAL_S,
            max_interval_s=config.BATTERY_VOLTAGE_REPORT_MAX_INTERVAL_S,
            reportable_change=config.BATTERY_VOLTAGE_REPORTABLE_CHANGE),
        zigbee_commands.ConfigureReportingCommand(
            cluster=DoorLockCluster.ID,
            attr_id=DoorLockCluster.ATTRIBUTE_LOCK_STATE,
            data_type=zigbee_enums.ZclDataType.ENUM8,
            min_interval_s=config.LOCK_STATE_REPORT_MIN_INTERVAL_S,
            max_interval_s=config.LOCK_STATE_REPORT_MAX_INTERVAL_S),
    ] + self.refresh()

  @decorators.LogDecorator(logger, level=decorators.DEBUG)
  def refresh(self) -> List[zigbee_commands.ReadAttributeCommand]:
    """Returns read requests for the lock state and the battery voltage."""
    return [
        zigbee_commands.ReadAttributeCommand(
            cluster=DoorLockCluster.ID,
            attr_id=DoorLockCluster.ATTRIBUTE_LOCK_STATE),
        zigbee_commands.ReadAttributeCommand(
            cluster=PowerConfigurationCluster.ID,
            attr_id=PowerConfigurationCluster.ATTRIBUTE_BATTERY_VOLTAGE),
    ]

  # Inbound frames

  def handle_frame(
      self, raw_frame: data_types.RawFrame) -> List[data_types.DomainEvent]:
    """Decodes and translates one frame from the lock.

    Malformed frames and unexpected responses are logged and dropped.

    Args:
      raw_frame: frame delivered by the transport.

    Returns:
      The published events, possibly none.
    """
    logger.debug(f"{self.name}: parse -> {raw_frame}")
    try:
      frame = frame_decoder.decode(raw_frame)
      translator = self._clusters.get(frame.cluster)
      if translator is None:
        logger.debug(f"{self.name}: unhandled cluster {frame.cluster:#06x}")
        return []
      events = translator.translate(frame)
    except errors.DecodeFailureError as err:
      logger.warning(f"{self.name}: dropping malformed frame. {err}")
      return []
    except errors.ProtocolAnomalyError as err:
      logger.warning(f"{self.name}: ignoring response. {err}")
      return []
    self._publish(events)
    return events

  def handle_description(
      self, description: Mapping[str, Any]) -> List[data_types.DomainEvent]:
    """Same as handle_frame() for a host description map of hex strings."""
    try:
      raw_frame = frame_decoder.raw_frame_from_description_map(description)
    except errors.DecodeFailureError as err:
      logger.warning(f"{self.name}: could not parse {description!r}. {err}")
      return []
    return self.handle_frame(raw_frame)

  # Lock commands

  @decorators.LogDecorator(logger, level=decorators.DEBUG)
  def lock(self) -> zigbee_commands.LockCommand:
    """Publishes "locking" and returns the Lock Door request."""
    self._publish([
        data_types.DomainEvent(
            name=EventName.LOCK,
            value=data_types.LockValue.LOCKING,
            description=f"{self.name} locking"),
    ])
    return zigbee_commands.LockCommand()

  @decorators.LogDecorator(logger, level=decorators.DEBUG)
  def unlock(self) -> zigbee_commands.UnlockCommand:
    """Publishes "unlocking" and returns the Unlock Door request."""
    self._publish([
        data_types.DomainEvent(
            name=EventName.LOCK,
            value=data_types.LockValue.UNLOCKING,
            description=f"{self.name} unlocking"),
    ])
    return zigbee_commands.UnlockCommand()

  # Lock code commands

  @decorators.LogDecorator(logger, level=decorators.DEBUG, print_args=False)
  def set_code(self,
               slot,
               pin: str,
               name: Optional[str] = None) -> zigbee_commands.SetPinCommand:
    """Returns the Set PIN Code request for the slot.

    The slot is committed once the lock confirms the request.

    Args:
      slot: PIN slot in [1, max codes].
      pin: 4 to 8 decimal digits.
      name: display name of the code. Defaults to "Code <slot>".

    Raises:
      ValidationError: invalid slot or PIN, or another set is pending.
    """
    self.expire_pending_operations()
    return self._coordinator.set_code(slot, pin, name)

  @decorators.LogDecorator(logger, level=decorators.DEBUG)
  def delete_code(self, slot) -> zigbee_commands.ClearPinCommand:
    """Returns the Clear PIN Code request for the slot.

    Raises:
      ValidationError: invalid slot, or another clear is pending.
    """
    self.expire_pending_operations()
    return self._coordinator.delete_code(slot)

  @decorators.LogDecorator(logger, level=decorators.DEBUG)
  def clear_codes(self) -> zigbee_commands.ClearAllCommand:
    """Forgets every code locally and returns the Clear All request."""
    command, events = self._coordinator.clear_codes()
    self._publish(events)
    return command

  def get_codes(self) -> List[data_types.DomainEvent]:
    """Publishes the lockCodes snapshot. Nothing is sent to the lock."""
    events = self._coordinator.get_codes()
    self._publish(events)
    return events

  @decorators.LogDecorator(logger, level=decorators.DEBUG)
  def set_code_length(self, length) -> None:
    """Publishes the PIN code length.

    Raises:
      ValidationError: length is not a number in [4, 8].
    """
    min_length, max_length = config.PIN_LENGTH_RANGE
    try:
      length = int(length)
    except (TypeError, ValueError) as err:
      raise errors.ValidationError(
          f"Code length {length!r} is not a number.") from err
    if not min_length <= length <= max_length:
      raise errors.ValidationError(
          f"Code length {length} out of range [{min_length}, {max_length}].")
    self._publish([
        data_types.DomainEvent(
            name=EventName.CODE_LENGTH,
            value=length,
            description=f"{self.name} code length set to {length}"),
    ])

  def expire_pending_operations(self) -> List[data_types.DomainEvent]:
    """Evicts unanswered PIN requests and publishes the failures."""
    events = self._coordinator.expire_pending_operations()
    self._publish(events)
    return events

  def _publish(self, events: List[data_types.DomainEvent]) -> None:
    if self._event_sink is None:
      return
    for event in events:
      self._event_sink(event)
