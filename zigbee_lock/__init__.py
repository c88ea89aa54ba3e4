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

"""Zigbee smart lock adapter.

Translates the Zigbee Cluster Library messages of a Kwikset 914 deadbolt
(Power Configuration, Alarms and Door Lock clusters) into smart lock events:
lock state, battery percentage, jam and tamper alerts, and PIN code changes.
It also builds the requests that lock, unlock and manage PIN codes.

The lock's firmware reports battery voltage only (attribute 0x0020, 100 mV
units). The percentage is derived from it with a per-chemistry linear curve.

Example:
  session = zigbee_lock.LockSession("front-door", event_sink=print)
  commands = session.installed()
  session.handle_frame(zigbee_lock.RawFrame(cluster=0x0001, attr_id=0x0020,
                                            value=bytes([60])))
"""
from zigbee_lock import _version
from zigbee_lock import data_types
from zigbee_lock import device_config
from zigbee_lock import lock_session

DeviceConfig = device_config.DeviceConfig
LockSession = lock_session.LockSession
RawFrame = data_types.RawFrame
version = _version.version
__version__ = _version.version
