import os
import typing as t
from dataclasses import dataclass

__all__ = ('DEFAULT_URL', 'Settings')

DEFAULT_URL = 'http://localhost:8080'
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    """ Registry client settings.

    Attributes:
        url: Base URL of the registry.
        timeout: Request timeout in seconds.
        contributor_id: Default contributor recorded with submissions.
    """
    url: str = DEFAULT_URL
    timeout: float = DEFAULT_TIMEOUT
    contributor_id: str | None = None

    @classmethod
    def from_env(cls, environ: t.Mapping[str, str] | None = None) -> 'Settings':
        """ Reads settings from ``DISCDIR_URL``, ``DISCDIR_TIMEOUT`` and
        ``DISCDIR_CONTRIBUTOR``; unset variables keep their defaults.

        Raises:
            ValueError: If ``DISCDIR_TIMEOUT`` is not a positive number.
        """
        environ = os.environ if environ is None else environ
        timeout = float(environ.get('DISCDIR_TIMEOUT', DEFAULT_TIMEOUT))
        if timeout <= 0:
            raise ValueError(f"DISCDIR_TIMEOUT must be positive, got {timeout}")
        return cls(
            url=environ.get('DISCDIR_URL') or DEFAULT_URL,
            timeout=timeout,
            contributor_id=environ.get('DISCDIR_CONTRIBUTOR') or None,
        )
