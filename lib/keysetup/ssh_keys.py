"""SSH key pair generation, enrollment and disclosure."""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from keysetup.config import SetupConfig
from keysetup.pipeline import FailureKind, StepResult

PUBLIC_KEY_SUFFIX = '.pub'
STAGING_SUFFIX = '.new'


@dataclass(frozen=True)
class KeyPair:
    """Private and public key files for one key name."""
    name: str
    private_path: Path

    @classmethod
    def for_name(cls, config: SetupConfig, name: str) -> 'KeyPair':
        return cls(name=name, private_path=config.private_key_path(name))

    @property
    def public_path(self) -> Path:
        return Path(f"{self.private_path}{PUBLIC_KEY_SUFFIX}")

    def exists(self) -> bool:
        return self.private_path.exists() or self.public_path.exists()

    def staging(self) -> 'KeyPair':
        """Sibling pair a replacement key is generated into before it is moved."""
        return KeyPair(name=self.name, private_path=Path(f"{self.private_path}{STAGING_SUFFIX}"))

    def paths(self) -> tuple:
        return (self.private_path, self.public_path)


def ensure_directory(path: Path) -> StepResult:
    """Create a directory and its parents if it does not exist yet.

    Args:
        path: Resolved directory path

    Returns:
        Success with a 'Created directory' message when something was
        created, an empty message when it already existed
    """
    if path.is_dir():
        return StepResult.success(path)

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return StepResult.failure(
            FailureKind.DIRECTORY, f"Could not create directory {path}: {e}"
        )
    return StepResult.success(path, message=f"Created directory: {path}")


class KeyGenerator(Protocol):
    """Anything that can write a key pair for a name."""

    def generate(self, name: str, private_key_path: Path) -> StepResult:
        ...


class SshKeyGenerator:
    """Generates key pairs by running ssh-keygen."""

    def __init__(self, key_type: str = 'rsa', key_bits: int = 4096,
                 binary: str = 'ssh-keygen'):
        self.key_type = key_type
        self.key_bits = key_bits
        self.binary = binary

    def command(self, name: str, private_key_path: Path) -> list:
        return [
            self.binary,
            '-t', self.key_type,
            '-b', str(self.key_bits),
            '-C', name,
            '-f', str(private_key_path),
            '-N', '',  # No passphrase
        ]

    def generate(self, name: str, private_key_path: Path) -> StepResult:
        """Generate a key pair at private_key_path (public key gets .pub).

        Args:
            name: Key name, embedded as the key comment
            private_key_path: Where ssh-keygen writes the private key

        Returns:
            Success, or a LAUNCH/KEYGEN failure carrying ssh-keygen's stderr
        """
        try:
            result = subprocess.run(
                self.command(name, private_key_path),
                stdin=subprocess.DEVNULL,
                capture_output=True, text=True, check=False,
            )
        except OSError as e:
            return StepResult.failure(
                FailureKind.LAUNCH, f"Failed to run {self.binary}: {e}"
            )

        if result.returncode != 0:
            return StepResult.failure(
                FailureKind.KEYGEN,
                f"Error generating SSH key: {result.stderr.strip()}",
            )
        return StepResult.success(
            private_key_path, message='SSH key generated successfully.'
        )


def remove_key_pair(pair: KeyPair) -> StepResult:
    """Delete both files of an existing key pair."""
    for path in pair.paths():
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            return StepResult.failure(
                FailureKind.EXISTS, f"Could not remove existing key {path}: {e}"
            )
    return StepResult.success()


def replace_key_pair(source: KeyPair, target: KeyPair) -> StepResult:
    """Move a freshly generated pair over an existing one."""
    for src, dst in zip(source.paths(), target.paths()):
        try:
            src.replace(dst)
        except OSError as e:
            return StepResult.failure(
                FailureKind.EXISTS, f"Could not replace existing key {dst}: {e}"
            )
    return StepResult.success(target.private_path)


def enroll_public_key(public_key_path: Path, authorized_keys: Path) -> StepResult:
    """Append a public key to authorized_keys, creating the file if needed.

    The key text is written exactly as read; existing content is never
    rewritten.
    """
    try:
        with open(public_key_path, encoding='utf-8', newline='') as f:
            public_key = f.read()
    except (OSError, UnicodeDecodeError) as e:
        return StepResult.failure(
            FailureKind.READ, f"Could not read public key {public_key_path}: {e}"
        )

    try:
        with open(authorized_keys, 'a', encoding='utf-8', newline='') as f:
            f.write(public_key)
    except OSError as e:
        return StepResult.failure(
            FailureKind.APPEND,
            f"Could not append to {authorized_keys}: {e}",
        )
    return StepResult.success(
        public_key, message='Public key added to authorized_keys.'
    )


def read_private_key(private_key_path: Path) -> StepResult:
    """Read private key content for disclosure."""
    try:
        with open(private_key_path, encoding='utf-8', newline='') as f:
            return StepResult.success(f.read())
    except (OSError, UnicodeDecodeError) as e:
        return StepResult.failure(
            FailureKind.READ, f"Could not read private key {private_key_path}: {e}"
        )
