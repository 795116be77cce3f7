#!/usr/bin/env python3
"""keysetup CLI - generate a deploy key and enroll it for SSH access."""

import sys

import click

from keysetup.config import SetupConfig
from keysetup.runner import KeySetup
from keysetup.ssh_keys import SshKeyGenerator


@click.command()
@click.version_option(package_name='keysetup')
def main():
    """Generate an SSH key pair, authorize it and print the private key.

    The public key is appended to ~/.ssh/authorized_keys and the private key
    is printed so it can be stored as a CI secret.
    """
    config = SetupConfig()
    generator = SshKeyGenerator(config.key_type, config.key_bits)

    result = KeySetup(config, generator).run()
    if not result.ok:
        click.secho(f"❌ Error: {result.message}", fg='red', err=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
