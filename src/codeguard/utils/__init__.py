"""CodeGuard utility modules.

- logging: Standardized logging with human/verbose/JSON modes
"""

from codeguard.utils.logging import LogMode, configure_from_cli, setup_logging

__all__ = [
    "LogMode",
    "configure_from_cli",
    "setup_logging",
]
