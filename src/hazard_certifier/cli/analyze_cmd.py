"""``hazard-certifier analyze`` -- Certify firmware hazard declarations.

Extracts the hazard contract of every device type in the device framework
sources, scans the firmware for device instantiations, and writes a JSON
compliance manifest.

Exit Codes:
    0 -- Analysis completed.
    1 -- ``--fail-on-violations`` was given and a device instance is not
         compliant with its contract.
    2 -- The analysis could not be run (unreadable sources, bad manifest
         path, invalid settings, pipeline failure).
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from hazard_certifier.analyzer import analyze
from hazard_certifier.config import AnalyzerSettings, load_settings
from hazard_certifier.exceptions import HazardCertifierError
from hazard_certifier.manifest import (
    check_manifest_path,
    manifest_summary,
    manifest_to_json,
    write_manifest,
)


def _fail(message: str, output_format: str) -> None:
    if output_format == "json":
        click.echo(json.dumps({"error": message}))
    else:
        click.echo(f"Error: {message}")
    sys.exit(2)


@click.command("analyze")
@click.option(
    "--firmware-path", "-f",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Firmware source file or directory to analyze.",
)
@click.option(
    "--devices-path", "-d",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    required=True,
    help="Directory holding the device framework sources.",
)
@click.option(
    "--manifest-path", "-m",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Output JSON manifest path.",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    default=False,
    help="Do not print the analysis on the terminal.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Terminal output format (default: text).",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Worker threads per pipeline (default: CPU count - 1).",
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML settings file.",
)
@click.option(
    "--fail-on-violations",
    is_flag=True,
    default=False,
    help="Exit with code 1 if any device instance is not compliant.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Log analysis progress to stderr.",
)
def analyze_command(
    firmware_path: Path,
    devices_path: Path,
    manifest_path: Path,
    quiet: bool,
    output_format: str,
    workers: int | None,
    config_path: Path | None,
    fail_on_violations: bool,
    verbose: bool,
) -> None:
    """Certify that FIRMWARE declares the hazards its devices require.

    Every device instantiation in the firmware is compared against the
    hazard contract of its device type. The manifest lists, per device
    instance, the mandatory and optional actions, their hazards, missing
    hazards, hazards the device does not allow, and missing mandatory
    actions.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    try:
        check_manifest_path(manifest_path)
        settings = load_settings(config_path) if config_path else AnalyzerSettings()
        settings = settings.with_overrides(workers=workers)
        manifest = analyze(devices_path, firmware_path, settings)
        write_manifest(manifest, manifest_path)
    except HazardCertifierError as exc:
        _fail(str(exc), output_format)
        return

    if not quiet:
        if output_format == "json":
            click.echo(json.dumps(manifest_to_json(manifest), indent=2))
        else:
            from hazard_certifier.cli.output import print_manifest
            print_manifest(manifest)
            click.echo(f"\nManifest written to: {manifest_path}")

    if fail_on_violations and manifest_summary(manifest)["non_compliant"] > 0:
        sys.exit(1)
    sys.exit(0)
