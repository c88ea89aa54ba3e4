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

"""Interface for the Zigbee cluster translator capability."""
from typing import List

from zigbee_lock import data_types
from zigbee_lock import lock_logger
from zigbee_lock.capabilities.interfaces import capability_base

logger = lock_logger.get_logger("clusters")


class ClusterBase(capability_base.CapabilityBase):
  """Translates decoded frames of one cluster into domain events."""

  # Cluster ID defined in the ZCL spec.
  CLUSTER_ID = None

  def translate(
      self, frame: data_types.ParsedFrame) -> List[data_types.DomainEvent]:
    """Returns the domain events carried by the frame (possibly none)."""
    if isinstance(frame, data_types.AttributeReport):
      return self.handle_attribute(frame)
    return self.handle_command(frame)

  def handle_attribute(
      self,
      report: data_types.AttributeReport) -> List[data_types.DomainEvent]:
    """Overridden by clusters which handle attribute reports."""
    logger.debug(f"{self._device_name}: unhandled attribute "
                 f"{report.cluster:#06x}/{report.attr_id:#06x}")
    return []

  def handle_command(
      self, command: data_types.ClusterCommand) -> List[data_types.DomainEvent]:
    """Overridden by clusters which handle commands."""
    logger.debug(f"{self._device_name}: unhandled command "
                 f"{command.cluster:#06x}/{command.command_id:#04x}")
    return []
