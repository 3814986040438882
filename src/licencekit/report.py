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

"""Render a :class:`DependencyList` for people and machines.

Three outputs:

- :func:`print_dependency_table`: Rich tables on the console, one per
  bucket (direct, indirect).
- :func:`dependencies_to_json`: the list as JSON for other tools.
- :func:`render_notice`: a ``NOTICE`` file listing every dependency
  with its licence text, for shipping alongside a binary.
"""

from __future__ import annotations

import json
from io import StringIO
from pathlib import Path

from rich.console import Console
from rich.table import Table

from licencekit._types import DependencyInfo, DependencyList
from licencekit.logging import get_logger

__all__ = [
    'dependencies_to_json',
    'format_dependency_table',
    'print_dependency_table',
    'render_notice',
]

logger = get_logger(__name__)

_RULE = '=' * 80
_SUBRULE = '-' * 80


def _bucket_table(title: str, deps: tuple[DependencyInfo, ...]) -> Table:
    table = Table(
        title=f'{title} ({len(deps)})',
        title_justify='left',
        show_header=True,
        header_style='bold',
        show_edge=False,
        pad_edge=False,
    )
    table.add_column('Name', style='bold', no_wrap=True)
    table.add_column('Version', no_wrap=True)
    table.add_column('Licence', style='green', no_wrap=True)
    table.add_column('URL', style='dim', overflow='fold')
    for dep in deps:
        table.add_row(dep.name, dep.version, dep.licence_type, dep.url)
    return table


def print_dependency_table(
    deps: DependencyList,
    *,
    console: Console | None = None,
    include_indirect: bool = True,
) -> None:
    """Print the dependency list as Rich tables.

    Args:
        deps: Detection result.
        console: Console to print to; a default ``Console()`` when
            ``None``.
        include_indirect: Also print the indirect bucket.
    """
    if console is None:
        console = Console()
    console.print(_bucket_table('Direct dependencies', deps.direct))
    if include_indirect:
        console.print()
        console.print(_bucket_table('Indirect dependencies', deps.indirect))


def format_dependency_table(
    deps: DependencyList,
    *,
    color: bool = False,
    include_indirect: bool = True,
) -> str:
    """Format the dependency tables as a string.

    Thin wrapper around :func:`print_dependency_table` that captures
    the Rich output, for tests and non-interactive callers.
    """
    buf = StringIO()
    console = Console(file=buf, force_terminal=color, width=160)
    print_dependency_table(deps, console=console, include_indirect=include_indirect)
    return buf.getvalue().rstrip('\n')


def dependencies_to_json(deps: DependencyList, *, indent: int = 2) -> str:
    """Serialize the dependency list to JSON.

    Args:
        deps: Detection result.
        indent: JSON indentation level.

    Returns:
        A JSON object with ``direct`` and ``indirect`` arrays.
    """
    return json.dumps(deps.to_dict(), indent=indent)


def _licence_text(dep: DependencyInfo) -> str:
    if not dep.licence_file:
        return ''
    try:
        return Path(dep.licence_file).read_text(encoding='utf-8', errors='replace').strip()
    except OSError as exc:
        logger.warning('notice_licence_unreadable', module=dep.name, path=dep.licence_file, error=str(exc))
        return ''


def render_notice(deps: DependencyList, *, product_name: str) -> str:
    """Render a NOTICE document.

    Args:
        deps: Detection result.
        product_name: Name of the product shipping these dependencies.

    Returns:
        The NOTICE text, ending with a newline.
    """
    lines = [
        product_name,
        f'Copyright {product_name} contributors.',
        '',
        'This product includes software developed by third parties.',
        'The licences of those components are reproduced below.',
        '',
    ]
    for title, bucket in (('Direct dependencies', deps.direct), ('Indirect dependencies', deps.indirect)):
        if not bucket:
            continue
        lines.extend([_RULE, f'{title} ({len(bucket)})', _RULE, ''])
        for dep in bucket:
            lines.extend([
                _SUBRULE,
                f'Dependency : {dep.name}',
                f'Version    : {dep.version}',
                f'Licence    : {dep.licence_type}',
                f'URL        : {dep.url}',
                _SUBRULE,
                '',
            ])
            text = _licence_text(dep)
            if text:
                lines.extend([text, ''])
    return '\n'.join(lines).rstrip('\n') + '\n'
