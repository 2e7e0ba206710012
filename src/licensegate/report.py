# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""Rich rendering of gate results.

A failing Gate A lists every field of each broken license so the
maintainer can fix the manifest without opening it first; Gates B and C
list the offending coordinates::

    error[broken_license_details]: License details are not complete.
    ┃ Name        ┃ Primary link          ┃ Type        ┃ ... ┃ Missing
    │ Apache 2.0  │ https://apache.org/.. │ UNSPECIFIED │ ... │ primary_link_type is UNSPECIFIED
       = help: Provide all the details of the listed licenses manually ...
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.table import Table

from licensegate._types import Dependency, License
from licensegate.classify import missing_details
from licensegate.gates import Gate, GateReport, GateResult

SUCCESS_MESSAGE = 'Maven dependencies updated successfully.'


def _license_table(licenses: tuple[License, ...]) -> Table:
    table = Table(
        show_header=True,
        header_style='bold',
        show_edge=False,
        pad_edge=False,
        expand=True,
    )
    table.add_column('Name', ratio=2, style='bold')
    table.add_column('Primary link', ratio=3)
    table.add_column('Type', min_width=12)
    table.add_column('Secondary link', ratio=2)
    table.add_column('Secondary type', min_width=11)
    table.add_column('Secondary name', ratio=2)
    table.add_column('Missing', ratio=3, style='dim')
    for lic in licenses:
        table.add_row(
            lic.name,
            lic.primary_link,
            lic.primary_link_type.value,
            lic.secondary_link,
            lic.secondary_link_type.value,
            lic.secondary_license_name,
            '; '.join(missing_details(lic)),
        )
    return table


def _dependency_table(dependencies: tuple[Dependency, ...]) -> Table:
    table = Table(
        show_header=True,
        header_style='bold',
        show_edge=False,
        pad_edge=False,
        expand=True,
    )
    table.add_column('#', width=5, justify='right')
    table.add_column('Coordinate', ratio=3, style='bold')
    table.add_column('Licenses', ratio=3)
    for dep in dependencies:
        licenses = ', '.join(f'{lic.name} ({lic.primary_link_type.value})' for lic in dep.licenses) or '(none)'
        table.add_row(str(dep.index), dep.coordinate, licenses)
    return table


def _print_failure(result: GateResult, console: Console) -> None:
    console.print(f'[bold red]error\\[{result.gate.value}][/][bold]: {result.message}[/]')
    if result.gate is Gate.BROKEN_LICENSE_DETAILS:
        console.print(_license_table(result.violations))  # type: ignore[arg-type]
    else:
        console.print(_dependency_table(result.violations))  # type: ignore[arg-type]
    console.print(f'   [cyan]=[/] [green]help[/]: {result.hint}')


def print_gate_report(report: GateReport, console: Console | None = None) -> None:
    """Print gate results with Rich formatting.

    Args:
        report: Results from :func:`~licensegate.gates.run_gates`.
        console: Rich :class:`Console` to print to.  When ``None``,
            a default ``Console()`` is created (auto-detects TTY).
    """
    if console is None:
        console = Console()

    for result in report.results:
        if result.passed:
            console.print(f'[green]✅ {result.gate.value}[/]')
        else:
            console.print()
            _print_failure(result, console)

    if report.ok:
        console.print(f'\n[bold green]{SUCCESS_MESSAGE}[/]')
    elif report.failed is not None:
        count = len(report.failed.violations)
        console.print(f'\nFound [bold red]{count} violation(s)[/] in {report.failed.gate.value}.')


def format_gate_report(report: GateReport, *, color: bool = False) -> str:
    """Format gate results as a string.

    Thin wrapper around :func:`print_gate_report` that captures the Rich
    output.

    Args:
        report: Results from :func:`~licensegate.gates.run_gates`.
        color: If ``True``, include ANSI color codes in the output.

    Returns:
        Multi-line formatted string.
    """
    buf = StringIO()
    console = Console(file=buf, force_terminal=color, width=160)
    print_gate_report(report, console=console)
    return buf.getvalue().rstrip('\n')


__all__ = [
    'SUCCESS_MESSAGE',
    'format_gate_report',
    'print_gate_report',
]
