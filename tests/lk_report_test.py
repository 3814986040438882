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

"""Tests for licencekit.report module."""

from __future__ import annotations

import json
from io import StringIO
from pathlib import Path

from conftest import ISC_TEXT, MIT_TEXT
from licencekit._types import DependencyInfo, DependencyList
from licencekit.report import (
    dependencies_to_json,
    format_dependency_table,
    print_dependency_table,
    render_notice,
)
from rich.console import Console


def _dep(name: str, licence_type: str, licence_file: str = '') -> DependencyInfo:
    return DependencyInfo(
        name=name,
        version='v1.0.0',
        version_time='2020-01-01T00:00:00Z',
        dir='/mod/' + name,
        licence_type=licence_type,
        licence_file=licence_file,
        url='https://' + name,
    )


def _deps(tmp_path: Path) -> DependencyList:
    isc = tmp_path / 'ISC'
    isc.write_text(ISC_TEXT)
    mit = tmp_path / 'MIT'
    mit.write_text(MIT_TEXT)
    return DependencyList(
        direct=(_dep('github.com/ekzhu/minhash-lsh', 'MIT', str(mit)),),
        indirect=(
            _dep('github.com/davecgh/go-spew', 'ISC', str(isc)),
            _dep('github.com/gorhill/cronexpr', 'GPL-3.0'),
        ),
    )


class TestDependencyTable:
    """Tests for the Rich dependency tables."""

    def test_both_buckets(self, tmp_path: Path) -> None:
        """Both buckets are printed with their counts."""
        out = format_dependency_table(_deps(tmp_path))
        assert 'Direct dependencies (1)' in out
        assert 'Indirect dependencies (2)' in out
        assert 'github.com/davecgh/go-spew' in out
        assert 'https://github.com/ekzhu/minhash-lsh' in out

    def test_direct_only(self, tmp_path: Path) -> None:
        """The indirect bucket can be left out."""
        out = format_dependency_table(_deps(tmp_path), include_indirect=False)
        assert 'Indirect dependencies' not in out
        assert 'go-spew' not in out

    def test_print_to_console(self, tmp_path: Path) -> None:
        """print_dependency_table writes to the given console."""
        buf = StringIO()
        print_dependency_table(_deps(tmp_path), console=Console(file=buf, width=160))
        assert 'minhash-lsh' in buf.getvalue()

    def test_no_ansi_without_color(self, tmp_path: Path) -> None:
        """Uncoloured output has no escape codes."""
        assert '\x1b[' not in format_dependency_table(_deps(tmp_path))


class TestDependenciesToJson:
    """Tests for dependencies_to_json()."""

    def test_shape(self, tmp_path: Path) -> None:
        """The JSON has direct and indirect arrays of camelCase records."""
        data = json.loads(dependencies_to_json(_deps(tmp_path)))
        assert [d['name'] for d in data['indirect']] == ['github.com/davecgh/go-spew', 'github.com/gorhill/cronexpr']
        assert data['direct'][0]['licenceType'] == 'MIT'
        assert data['indirect'][1]['licenceFile'] == ''


class TestRenderNotice:
    """Tests for render_notice()."""

    def test_contents(self, tmp_path: Path) -> None:
        """Every dependency is listed with its licence text."""
        notice = render_notice(_deps(tmp_path), product_name='Elastic Agent')
        assert notice.startswith('Elastic Agent\n')
        assert 'Direct dependencies (1)' in notice
        assert 'Dependency : github.com/gorhill/cronexpr' in notice
        assert 'Licence    : GPL-3.0' in notice
        assert 'Permission to use, copy, modify, and/or distribute this software for any' in notice
        assert notice.index('minhash-lsh') < notice.index('go-spew')
        assert notice.endswith('\n')

    def test_empty_bucket_omitted(self, tmp_path: Path) -> None:
        """Empty buckets get no section."""
        deps = DependencyList(direct=_deps(tmp_path).direct)
        assert 'Indirect dependencies' not in render_notice(deps, product_name='p')

    def test_unreadable_licence_text(self, tmp_path: Path) -> None:
        """An unreadable licence file is skipped, not fatal."""
        deps = DependencyList(direct=(_dep('m', 'MIT', str(tmp_path)),))
        notice = render_notice(deps, product_name='p')
        assert 'Dependency : m' in notice
