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

"""Alarms cluster translator."""
from typing import List

from zigbee_lock import data_types
from zigbee_lock import lock_logger
from zigbee_lock.capabilities import zigbee_enums
from zigbee_lock.capabilities.zigbee_clusters.interfaces import cluster_base

logger = lock_logger.get_logger("clusters")
AlarmCode = zigbee_enums.AlarmCode
AlarmsCluster = zigbee_enums.AlarmsCluster
EventName = data_types.EventName


class AlarmsClusterTranslator(cluster_base.ClusterBase):
  """Zigbee Alarms cluster translator.

  Only the Alarm command is handled. Its first payload byte is the door lock
  alarm code.
  """

  CLUSTER_ID = AlarmsCluster.ID

  def handle_command(
      self, command: data_types.ClusterCommand) -> List[data_types.DomainEvent]:
    if (not command.cluster_specific or
        command.command_id != AlarmsCluster.COMMAND_ALARM or
        not command.payload):
      return super().handle_command(command)

    alarm_code = command.payload[0]
    description = zigbee_enums.alarm_description(alarm_code)
    logger.warning(f"{self._device_name}: alarm - {description}")

    if alarm_code == AlarmCode.DEADBOLT_JAMMED:
      return [
          data_types.DomainEvent(
              name=EventName.LOCK_JAMMED,
              value=data_types.AlertValue.DETECTED,
              description=f"{self._device_name}: deadbolt jammed"),
          data_types.DomainEvent(
              name=EventName.LOCK,
              value=data_types.LockValue.UNKNOWN,
              description=(
                  f"{self._device_name}: lock state unknown (jammed)")),
      ]
    if alarm_code in zigbee_enums.TAMPER_ALARMS:
      return [
          data_types.DomainEvent(
              name=EventName.TAMPER_ALERT,
              value=data_types.AlertValue.DETECTED,
              description=f"{self._device_name}: {description}"),
      ]
    return []
