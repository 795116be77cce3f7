"""Setup configuration and path resolution."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_KEY_NAME = 'github-actions'


def resolve_path(raw: str, home: Optional[Path] = None) -> Path:
    """Expand a leading ``~`` segment to the home directory.

    Only ``~`` and ``~/...`` are expanded; ``~user`` forms and every other
    path are returned unchanged. No filesystem access is performed.

    Args:
        raw: Path as written, e.g. '~/.ssh/authorized_keys'
        home: Home directory to substitute (defaults to Path.home())

    Returns:
        Path with the home segment expanded

    Example:
        >>> resolve_path('~/.ssh', home=Path('/home/ci'))
        PosixPath('/home/ci/.ssh')
    """
    if raw != '~' and not raw.startswith('~/'):
        return Path(raw)

    if home is None:
        home = Path.home()
    rest = raw[2:]
    return home / rest if rest else home


def resolve_key_name(raw: str, default: str = DEFAULT_KEY_NAME) -> str:
    """Trim user input, falling back to the default name when blank."""
    name = raw.strip()
    return name if name else default


@dataclass(frozen=True)
class SetupConfig:
    """Well-known locations and key parameters for a setup run."""
    ssh_dir: str = '~/.ssh'
    authorized_keys: str = '~/.ssh/authorized_keys'
    default_key_name: str = DEFAULT_KEY_NAME
    key_type: str = 'rsa'
    key_bits: int = 4096
    home: Optional[Path] = None

    def ssh_dir_path(self) -> Path:
        return resolve_path(self.ssh_dir, self.home)

    def authorized_keys_path(self) -> Path:
        return resolve_path(self.authorized_keys, self.home)

    def private_key_path(self, key_name: str) -> Path:
        """Private key file for a key name: <ssh_dir>/<key_name>."""
        return resolve_path(f'{self.ssh_dir}/{key_name}', self.home)
