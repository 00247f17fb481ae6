"""Rich output formatting for compliance manifests.

Color mapping:
    supplied mandatory hazards = green, optional action hazards = yellow,
    missing or not allowed hazards and missing actions = red.
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from hazard_certifier.firmware.models import ComplianceManifest, DeviceComplianceRecord
from hazard_certifier.hazards import sorted_hazards
from hazard_certifier.manifest import manifest_summary

console = Console()


def _hazard_line(label: str, hazards: Iterable[str], style: str, indent: int) -> Text:
    return Text.assemble(
        (" " * indent + f"{label}: ", ""),
        (", ".join(sorted_hazards(hazards)), style),
    )


def _print_device(device: DeviceComplianceRecord) -> None:
    row, column = device.position
    console.print(
        Text.assemble(("    ", ""), (device.name, "bold cyan"), (f" ({row}, {column})", ""))
    )

    console.print("        defined mandatory actions:")
    for action in device.mandatory_actions:
        console.print(f"            {escape(action.name)}")
        if action.supplied_hazards:
            console.print(_hazard_line("hazards", action.supplied_hazards, "green", 16))
        if action.disallowed_hazards:
            console.print(
                _hazard_line("not allowed hazards", action.disallowed_hazards, "red", 16)
            )
        if action.missing_hazards:
            console.print(_hazard_line("missing hazards", action.missing_hazards, "red", 16))

    if device.missing_mandatory_action_names:
        console.print(
            Text(
                "            missing mandatory actions: "
                + ", ".join(device.missing_mandatory_action_names),
                style="red",
            )
        )

    console.print("        optional actions:")
    for optional in device.optional_actions:
        console.print(f"            {escape(optional.name)}")
        if optional.supplied_hazards:
            console.print(_hazard_line("hazards", optional.supplied_hazards, "yellow", 16))
        if optional.disallowed_hazards:
            console.print(
                _hazard_line("not allowed hazards", optional.disallowed_hazards, "red", 16)
            )


def print_manifest(manifest: ComplianceManifest) -> None:
    """Print every file and device instance of the manifest.

    Args:
        manifest: Compliance manifest from the firmware scanner.
    """
    if not manifest:
        console.print("[dim]No device instances found in the firmware.[/dim]")
        return

    for report in manifest:
        if not report.devices:
            continue
        console.print()
        console.print(Text(report.file, style="bold blue"))
        for device in report.devices:
            _print_device(device)

    console.print()
    print_compliance_table(manifest)


def print_compliance_table(manifest: ComplianceManifest) -> None:
    """Print a one-row-per-instance compliance table and a summary line."""
    table = Table(title="Hazard Compliance", show_header=True, header_style="bold")
    table.add_column("File", style="dim")
    table.add_column("Device", style="bold")
    table.add_column("Position", justify="center")
    table.add_column("Status", justify="center")

    for report in manifest:
        for device in report.devices:
            if device.is_compliant:
                status = Text("COMPLIANT", style="bold green")
            else:
                status = Text("NON-COMPLIANT", style="bold red")
            row, column = device.position
            table.add_row(report.file, device.name, f"{row}:{column}", status)

    console.print(table)

    summary = manifest_summary(manifest)
    parts = [
        f"[bold]{summary['devices']}[/bold] device instances in "
        f"{summary['files']} files"
    ]
    compliant = summary["devices"] - summary["non_compliant"]
    if compliant > 0:
        parts.append(f"[green]{compliant} compliant[/green]")
    if summary["non_compliant"] > 0:
        parts.append(f"[red]{summary['non_compliant']} non-compliant[/red]")
    console.print(" | ".join(parts))
