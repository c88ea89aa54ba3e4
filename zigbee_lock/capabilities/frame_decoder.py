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

"""Decodes raw frames from the lock into attribute reports and commands."""
from typing import Any, Mapping, Optional, Sequence, Union

from zigbee_lock import data_types
from zigbee_lock import errors

_MAX_CLUSTER_ID = 0xFFFF
_MAX_ATTRIBUTE_ID = 0xFFFF
_MAX_COMMAND_ID = 0xFF
_MAX_ATTRIBUTE_VALUE_LENGTH = 8  # Longest fixed-size ZCL integer type.
_BYTES_TYPES = (bytes, bytearray, memoryview)


def _check_id(name: str, value: Any, max_value: int) -> int:
  if isinstance(value, bool) or not isinstance(value, int):
    raise errors.DecodeFailureError(
        f"{name} must be an integer, found {value!r}.")
  if not 0 <= value <= max_value:
    raise errors.DecodeFailureError(
        f"{name} {value:#x} is out of range [0, {max_value:#x}].")
  return value


def decode(raw_frame: data_types.RawFrame) -> data_types.ParsedFrame:
  """Decodes a raw frame.

  Args:
    raw_frame: frame delivered by the transport.

  Returns:
    AttributeReport if the frame carries an attribute value, ClusterCommand if
    it carries a command.

  Raises:
    DecodeFailureError: the frame is structurally malformed.
  """
  cluster = _check_id("Cluster ID", raw_frame.cluster, _MAX_CLUSTER_ID)
  is_attribute = raw_frame.attr_id is not None
  is_command = raw_frame.command_id is not None
  if is_attribute == is_command:
    raise errors.DecodeFailureError(
        f"Frame for cluster {cluster:#06x} must carry exactly one of an "
        "attribute ID or a command ID.")

  if is_attribute:
    attr_id = _check_id("Attribute ID", raw_frame.attr_id, _MAX_ATTRIBUTE_ID)
    value = raw_frame.value
    if value is not None and not isinstance(value, _BYTES_TYPES):
      raise errors.DecodeFailureError(
          f"Attribute {cluster:#06x}/{attr_id:#06x} value must be bytes, found "
          f"{type(value).__name__}.")
    if not value:
      raise errors.DecodeFailureError(
          f"Attribute {cluster:#06x}/{attr_id:#06x} report has no value.")
    if len(value) > _MAX_ATTRIBUTE_VALUE_LENGTH:
      raise errors.DecodeFailureError(
          f"Attribute {cluster:#06x}/{attr_id:#06x} value is too long "
          f"({len(value)} bytes).")
    return data_types.AttributeReport(
        cluster=cluster,
        attr_id=attr_id,
        value=int.from_bytes(value, "little"))

  command_id = _check_id("Command ID", raw_frame.command_id, _MAX_COMMAND_ID)
  payload = raw_frame.payload
  if payload is not None and not isinstance(payload, _BYTES_TYPES):
    raise errors.DecodeFailureError(
        f"Command {cluster:#06x}/{command_id:#04x} payload must be bytes, "
        f"found {type(payload).__name__}.")
  return data_types.ClusterCommand(
      cluster=cluster,
      command_id=command_id,
      cluster_specific=bool(raw_frame.cluster_specific),
      payload=bytes(payload or b""))


def _hex_to_int(name: str, hex_string: Optional[str]) -> Optional[int]:
  if hex_string is None:
    return None
  try:
    return int(hex_string, 16)
  except (TypeError, ValueError) as err:
    raise errors.DecodeFailureError(
        f"{name} {hex_string!r} is not a hex string.") from err


def _hex_bytes(name: str,
               hex_data: Union[str, Sequence[str], None]) -> Optional[bytes]:
  if hex_data is None:
    return None
  if not isinstance(hex_data, str):
    hex_data = "".join(hex_data)
  try:
    return bytes.fromhex(hex_data)
  except (TypeError, ValueError) as err:
    raise errors.DecodeFailureError(
        f"{name} {hex_data!r} is not a hex byte string.") from err


def raw_frame_from_description_map(
    description: Mapping[str, Any]) -> data_types.RawFrame:
  """Builds a RawFrame from a host description map of hex strings.

  The host delivers attribute values as big-endian hex numbers ("value": "3C")
  and command payloads as lists of hex bytes ("data": ["00", "01", "07"]).

  Args:
    description: mapping with "cluster" and either "attrId"/"value" or
      "command"/"isClusterSpecific"/"data" keys.

  Returns:
    The equivalent RawFrame.

  Raises:
    DecodeFailureError: the mapping is missing keys or holds invalid hex.
  """
  if not description or "cluster" not in description:
    raise errors.DecodeFailureError(
        f"Description map {description!r} has no cluster.")
  cluster = _hex_to_int("Cluster", description["cluster"])
  attr_id = _hex_to_int("Attribute ID", description.get("attrId"))
  command_id = _hex_to_int("Command", description.get("command"))
  if attr_id is not None:
    # Global Read Attributes Response / Report Attributes carry both.
    command_id = None

  value = None
  value_bytes = _hex_bytes("Value", description.get("value"))
  if value_bytes is not None:
    value = value_bytes[::-1]  # Big-endian display to ZCL little-endian.

  return data_types.RawFrame(
      cluster=cluster,
      attr_id=attr_id,
      value=value,
      command_id=command_id,
      cluster_specific=bool(description.get("isClusterSpecific", False)),
      payload=_hex_bytes("Data", description.get("data")))
