"""Logging helpers.

The package only creates loggers; handlers and formatting are left to the
application (see :mod:`tacpy.cli`). An additional ``NUMERICS`` level sits
between ``DEBUG`` and ``INFO`` and is used for recurrence and cache statistics.
"""

import logging

NUMERICS = 15

logging.addLevelName(NUMERICS, "NUMERICS")


class ScatteringLogger(logging.LoggerAdapter):
    """Adapter adding a ``numerics`` method to a standard logger."""

    def numerics(self, msg, *args, **kwargs):
        self.log(NUMERICS, msg, *args, **kwargs)


def scattering_logger(name: str) -> ScatteringLogger:
    """Return the module logger, with the ``numerics`` method available.

    Args:
        name (str): Usually ``__name__`` of the calling module.

    Returns:
        (ScatteringLogger): Adapter around ``logging.getLogger(name)``.
    """
    return ScatteringLogger(logging.getLogger(name), {})
