"""
Passphrase Scope Module

Holds the batch passphrase for exactly the lifetime of a run and injects
it into the environment of each tool invocation. The process's own
environment is never modified.
"""

import os
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class PassphraseError(Exception):
    """Raised when the passphrase cannot be set or read."""
    pass


class PassphraseScope:
    """
    Context manager owning the passphrase for one batch run.

    Example:
        with PassphraseScope("PAPERAGE_PASSPHRASE", "hunter2") as scope:
            env = scope.environment()
    """

    def __init__(self, env_var: str, value: str):
        self.env_var = env_var
        self._value: Optional[str] = value
        self._active = False
        self.released = False

    def __enter__(self) -> "PassphraseScope":
        if self.released:
            raise PassphraseError("Passphrase scope cannot be re-entered")
        if not self._value:
            raise PassphraseError("Passphrase must not be empty")
        self._active = True
        logger.debug(f"Passphrase set for {self.env_var}")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    @property
    def active(self) -> bool:
        return self._active

    def release(self) -> None:
        """Clear the passphrase. Safe to call more than once."""
        if self.released:
            return
        self._value = None
        self._active = False
        self.released = True
        logger.debug(f"Passphrase for {self.env_var} cleared")

    def environment(self) -> Dict[str, str]:
        """
        Build the environment for one tool invocation.

        Returns:
            A copy of the current environment with the passphrase added
        """
        if not self._active or self._value is None:
            raise PassphraseError("Passphrase is not set")
        env = dict(os.environ)
        env[self.env_var] = self._value
        return env
