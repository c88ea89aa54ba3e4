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

"""This module defines errors raised by zigbee_lock.

The error subclasses are intended to make it easier to distinguish between and
handle different types of error exceptions.

error codes:
    1           Generic catch-all for DeviceError
    40 - 44     ValidationError exceptions
    45 - 49     ConfigError exceptions
    50 - 59     Inbound message exceptions
"""
from zigbee_lock import lock_logger

logger = lock_logger.get_logger()


class DeviceError(Exception):
  """Basic exception for errors raised by the lock adapter.

  Attributes:
      err_code (int): numeric code of the error.
  """
  err_code = 1

  def __init__(self, msg):
    """Inits DeviceError with 'msg' (an error message string).

    Args:
        msg (str or Exception): an error message string or an Exception
          instance.

    Note: Additionally, logs 'msg' to debug log level file.
    """
    super().__init__(msg)
    logger.debug(repr(self))


class ValidationError(DeviceError):
  """Raised when a request is rejected locally. No command is issued."""
  err_code = 40


class OperationInProgressError(ValidationError):
  """Raised when a PIN operation of the same kind is already in flight."""
  err_code = 41

  def __init__(self, device_name, kind, slot):
    """Inits an OperationInProgressError exception.

    Args:
        device_name (str): The name of the device.
        kind (str): The kind of the pending operation ("set" or "delete").
        slot (int): The code slot of the pending operation.
    """
    self.kind = kind
    self.slot = slot
    super().__init__(
        "{} cannot issue another {} PIN request while slot {} is pending."
        .format(device_name, kind, slot))


class ConfigError(DeviceError):
  """Raised when the device configuration is unusable."""
  err_code = 45


class InvalidThresholdsError(ConfigError):
  """Raised when the battery voltage range is empty or inverted."""
  err_code = 46

  def __init__(self, min_volts, max_volts):
    self.min_volts = min_volts
    self.max_volts = max_volts
    super().__init__(
        "Battery voltage thresholds invalid (min {} V >= max {} V)."
        .format(min_volts, max_volts))


class DecodeFailureError(DeviceError):
  """Raised when an inbound frame cannot be structurally parsed."""
  err_code = 50


class ProtocolAnomalyError(DeviceError):
  """Raised when a response does not match any pending operation."""
  err_code = 51


class DeviceRejectionError(DeviceError):
  """Raised when the device returns a non-success status for a PIN request."""
  err_code = 52

  def __init__(self, device_name, slot, status, reason):
    """Inits a DeviceRejectionError exception.

    Args:
        device_name (str): The name of the device.
        slot (int): The code slot of the rejected request.
        status (int): ZCL status byte returned by the device.
        reason (str): Human-readable meaning of the status.
    """
    self.slot = slot
    self.status = status
    self.reason = reason
    super().__init__(
        "{} rejected code slot {} request with status {}: {}."
        .format(device_name, slot, status, reason))
