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

"""Module for the zigbee_lock logger.

All zigbee_lock modules log through loggers returned by get_logger(). Nothing is
printed until the host calls initialize_logger() or attaches its own handlers
with add_handler().
"""
import atexit
import logging
import logging.handlers
import os
import sys
from typing import List, Optional

from zigbee_lock import config

# Making this global enables user control of stdout streaming (indirectly)
_stdout_handler = None

_LOGGER_NAME = 'zigbee_lock'

# Log formats for debug
FMT = ('%(asctime)s.%(msecs)03d %(levelname).1s %(process)5d '
       '%(filename)19.19s:%(lineno)d\t%(message)s')
DATEFMT = '%Y%m%d %X'


def add_handler(handler: logging.Handler) -> None:
  """Adds a logging handler to the top-level zigbee_lock logger.

  Along with remove_handler, allows library users to configure extra
  destinations and formats for log messages emitted from within zigbee_lock.

  Args:
      handler: A logging handler.
  """
  get_logger().addHandler(handler)


def get_handlers() -> List[logging.Handler]:
  """Returns the list of active logging handlers."""
  return get_logger().handlers


def get_logger(component_name: Optional[str] = None) -> logging.Logger:
  """Returns a Logger that inherits from (or is) the top-level Logger.

  Differs from usual getLogger in that the name given is appended to the name
  of the top-level logger (e.g. get_logger('door_lock') is equivalent
  to logging.getLogger('zigbee_lock.door_lock')).

  Args:
      component_name: name of a zigbee_lock component. Nests using '.' char.

  Returns:
      main logger or sub logger.
  """
  if component_name is not None:
    name = '.'.join([_LOGGER_NAME, component_name])
  else:
    name = _LOGGER_NAME

  return logging.getLogger(name)


def initialize_logger(log_file: str = config.DEFAULT_LOG_FILE) -> None:
  """Configures the top-level zigbee_lock Logger.

  Configures it to begin logging to stdout and to log_file.

  Args:
      log_file: path of the rotating debug log file.
  """
  dirname = os.path.dirname(log_file)
  if dirname and not os.path.isdir(dirname):
    os.makedirs(dirname)

  logger = get_logger()
  logger.setLevel(logging.DEBUG)

  # Logging during interpreter shutdown can crash some environments.
  atexit.register(logger.handlers.clear)

  # Configure a handler that writes to the log file
  args = dict(mode='a', maxBytes=10 * 1024 * 1024, backupCount=5)
  logfile_handler = logging.handlers.RotatingFileHandler(log_file, **args)
  logfile_handler.setLevel(logging.DEBUG)
  logfile_formatter = logging.Formatter(FMT, datefmt=DATEFMT)
  logfile_handler.setFormatter(logfile_formatter)
  logger.addHandler(logfile_handler)

  # Configure a handler that writes INFO logs to stdout
  stdout_handler = logging.StreamHandler(sys.stdout)
  stdout_handler.setLevel(logging.INFO)
  stdout_formatter = logging.Formatter('%(message)s')
  stdout_handler.setFormatter(stdout_formatter)
  logger.addHandler(stdout_handler)

  # Keep global copy of stdout_handler created and added above to allow for
  # changing the log level later for that handler.
  global _stdout_handler
  _stdout_handler = stdout_handler


def remove_handler(handler: logging.Handler) -> None:
  """Removes the given handler from the top-level zigbee_lock logger.

  Args:
      handler: A logging handler that was added earlier using add_handler.
  """
  get_logger().removeHandler(handler)


def set_component_log_level(component_name: str, log_level: int) -> None:
  """Sets the log level for the named component.

  Args:
      component_name: name of a zigbee_lock component.
      log_level: Integer log level, e.g. logging.DEBUG (value is 10).
  """
  logger = get_logger(component_name)
  logger.setLevel(log_level)


def reenable_progress_messages() -> None:
  """Reenables streaming zigbee_lock messages to stdout."""
  if _stdout_handler:
    add_handler(_stdout_handler)


def silence_progress_messages() -> None:
  """Stops streaming zigbee_lock messages to stdout."""
  if _stdout_handler:
    remove_handler(_stdout_handler)


def stream_debug() -> None:
  """Sets the log level for stdout streaming to DEBUG."""
  if _stdout_handler:
    fmt = logging.Formatter(FMT, datefmt=DATEFMT)
    _stdout_handler.setFormatter(fmt)
    _stdout_handler.setLevel(logging.DEBUG)
