"""Hazard Certifier CLI -- Hazard declaration compliance for device firmware.

Entry point for the ``hazard-certifier`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    analyze -- Check firmware device instances against device hazard contracts.

Usage::

    hazard-certifier analyze -d ./framework/src/devices -f ./firmware -m manifest.json
    hazard-certifier analyze -d ./devices -f ./firmware/src/main.rs -m out.json --quiet
"""

from __future__ import annotations

import click

from hazard_certifier import __version__
from hazard_certifier.cli.analyze_cmd import analyze_command


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Hazard Certifier: hazard declaration compliance for device firmware.

    Extracts the hazard contracts a device framework declares and checks
    that firmware built on it supplies every mandatory action with the
    required hazards, and no hazard its device does not allow.
    """


cli.add_command(analyze_command)
