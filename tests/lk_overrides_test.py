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

"""Tests for licencekit.overrides module."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from licencekit._types import Override
from licencekit.errors import OverridesDataError
from licencekit.overrides import load_overrides, parse_overrides


class TestParseOverrides:
    """Tests for parse_overrides()."""

    def test_keyed_by_name(self) -> None:
        """Overrides are keyed by module path."""
        stream = io.StringIO(
            '{"name": "github.com/gorhill/cronexpr", "licenceType": "GPL-3.0"}\n'
            '{"name": "github.com/davecgh/go-spew", "url": "https://example.com/go-spew"}\n'
        )
        overrides = parse_overrides(stream)
        assert set(overrides) == {'github.com/gorhill/cronexpr', 'github.com/davecgh/go-spew'}
        assert overrides['github.com/gorhill/cronexpr'].licence_type == 'GPL-3.0'
        assert overrides['github.com/davecgh/go-spew'].licence_type is None

    def test_empty_stream(self) -> None:
        """An empty file means no overrides."""
        assert parse_overrides(io.StringIO('')) == {}

    def test_collects_every_error(self) -> None:
        """Missing names, duplicates and bad fields are all reported."""
        stream = io.StringIO(
            '{"licenceType": "MIT"}\n'
            '{"name": "a", "licenceType": "MIT"}\n'
            '{"name": "a", "licenceType": "ISC"}\n'
            '{"name": "b", "licenseType": "MIT"}\n'
            '"c"\n'
        )
        with pytest.raises(OverridesDataError) as exc_info:
            parse_overrides(stream, source='overrides.json')
        errors = exc_info.value.errors
        assert len(errors) == 4
        assert errors[0] == 'line 1: override has no "name"'
        assert errors[1] == "line 3: duplicate override for 'a'"
        assert errors[2].startswith('line 4 (b): unknown override field(s): licenseType')

    def test_malformed_json(self) -> None:
        """Broken JSON is a data error."""
        with pytest.raises(OverridesDataError):
            parse_overrides(io.StringIO('{"name": '))


class TestLoadOverrides:
    """Tests for load_overrides()."""

    def test_load(self, tmp_path: Path) -> None:
        """Overrides load from a file."""
        path = tmp_path / 'overrides.json'
        path.write_text('{"name": "m", "licenceFile": "LICENSE.elastic"}\n')
        assert load_overrides(path) == {'m': Override(name='m', licence_file='LICENSE.elastic')}

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file is a data error naming the path."""
        path = tmp_path / 'nope.json'
        with pytest.raises(OverridesDataError) as exc_info:
            load_overrides(path)
        assert exc_info.value.source == str(path)
