"""The key setup run: input, directory, generation, enrollment, disclosure."""

from typing import Callable, Optional

import click

from keysetup.config import SetupConfig, resolve_key_name
from keysetup.pipeline import FailureKind, StepResult, run_steps
from keysetup.ssh_keys import (
    KeyGenerator,
    KeyPair,
    SshKeyGenerator,
    enroll_public_key,
    ensure_directory,
    read_private_key,
    remove_key_pair,
    replace_key_pair,
)

PROMPT = 'Enter the name you want to use for the SSH key (default: {default}):'
DISCLOSURE_LABEL = 'Private key to add to GitHub Secrets:'


def prompt_key_name(default: str) -> str:
    """Ask for a key name on stdout and read one line from stdin."""
    return click.prompt(PROMPT.format(default=default), default='',
                        show_default=False, prompt_suffix='\n')


def confirm_overwrite(pair: KeyPair) -> bool:
    return click.confirm(
        f"SSH key {pair.private_path} already exists. Overwrite it?",
        default=False, err=True,
    )


class KeySetup:
    """Runs the setup steps in order and stops at the first failure.

    Example:
        config = SetupConfig()
        result = KeySetup(config).run()
        if not result.ok:
            ...
    """

    def __init__(
        self,
        config: SetupConfig,
        generator: Optional[KeyGenerator] = None,
        read_name: Optional[Callable[[str], str]] = None,
        confirm: Optional[Callable[[KeyPair], bool]] = None,
    ):
        self.config = config
        self.generator = generator or SshKeyGenerator(config.key_type, config.key_bits)
        self.read_name = read_name or prompt_key_name
        self.confirm = confirm or confirm_overwrite
        self.key_pair: Optional[KeyPair] = None
        self.replacing = False

    def run(self) -> StepResult:
        return run_steps([
            self.resolve_input,
            self.ensure_ssh_dir,
            self.check_existing,
            self.generate,
            self.enroll,
            self.disclose,
        ])

    def _report(self, result: StepResult) -> StepResult:
        if result.ok and result.message:
            click.echo(result.message)
        return result

    def resolve_input(self) -> StepResult:
        default = self.config.default_key_name
        try:
            raw = self.read_name(default)
        except (click.Abort, EOFError, OSError) as e:
            return StepResult.failure(
                FailureKind.INPUT, f"Could not read key name: {str(e) or 'input closed'}"
            )
        name = resolve_key_name(raw, default)
        self.key_pair = KeyPair.for_name(self.config, name)
        return StepResult.success(name)

    def ensure_ssh_dir(self) -> StepResult:
        return self._report(ensure_directory(self.config.ssh_dir_path()))

    def check_existing(self) -> StepResult:
        authorized_keys = self.config.authorized_keys_path()
        if authorized_keys in self.key_pair.paths():
            return StepResult.failure(
                FailureKind.EXISTS,
                f"Key name '{self.key_pair.name}' would overwrite {authorized_keys}",
            )

        if not self.key_pair.exists():
            return StepResult.success()

        click.secho(f"⚠️  Existing key found at {self.key_pair.private_path}",
                    fg='yellow', err=True)
        try:
            overwrite = self.confirm(self.key_pair)
        except click.Abort:
            overwrite = False
        if not overwrite:
            return StepResult.failure(
                FailureKind.EXISTS,
                f"SSH key {self.key_pair.private_path} already exists",
            )
        # The old pair stays in place until a new one has been generated
        self.replacing = True
        return remove_key_pair(self.key_pair.staging())

    def generate(self) -> StepResult:
        target = self.key_pair.staging() if self.replacing else self.key_pair
        result = self.generator.generate(self.key_pair.name, target.private_path)
        if not result.ok:
            if self.replacing:
                remove_key_pair(target)
            return result

        if self.replacing:
            replaced = replace_key_pair(target, self.key_pair)
            if not replaced.ok:
                return replaced
        return self._report(result)

    def enroll(self) -> StepResult:
        return self._report(enroll_public_key(
            self.key_pair.public_path, self.config.authorized_keys_path()
        ))

    def disclose(self) -> StepResult:
        result = read_private_key(self.key_pair.private_path)
        if result.ok:
            click.echo(f"{DISCLOSURE_LABEL}\n{result.value}")
        return result
