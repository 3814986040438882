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

"""Load operator overrides for detected dependency metadata.

The overrides file holds one JSON object per module, keyed by the
``name`` field (the module path)::

    {"name": "github.com/gorhill/cronexpr", "licenceType": "GPL-3.0"}
    {"name": "github.com/davecgh/go-spew", "url": "https://example.com/go-spew"}
    {"name": "github.com/elastic/dep", "licenceFile": "LICENSE.elastic"}

Fields left out fall back to what detection finds. ``licenceFile`` is
relative to the module directory.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TextIO

from licencekit._types import Override
from licencekit.errors import OverridesDataError
from licencekit.logging import get_logger
from licencekit.modules import iter_json_objects

__all__ = [
    'load_overrides',
    'parse_overrides',
]

logger = get_logger(__name__)


def parse_overrides(stream: TextIO, *, source: str = '') -> dict[str, Override]:
    """Parse an overrides stream.

    Args:
        stream: Text stream of JSON objects.
        source: Name of the stream, for error messages.

    Returns:
        Mapping from module path to :class:`Override`.

    Raises:
        OverridesDataError: With every problem found.
    """
    try:
        objects = iter_json_objects(stream.read())
    except json.JSONDecodeError as exc:
        raise OverridesDataError([f'line {exc.lineno}: {exc.msg}'], source=source) from exc

    errors: list[str] = []
    overrides: dict[str, Override] = {}
    for line, obj in objects:
        if not isinstance(obj, dict):
            errors.append(f'line {line}: expected an object, got {type(obj).__name__}')
            continue
        key = obj.get('name')
        if not isinstance(key, str) or not key:
            errors.append(f'line {line}: override has no "name"')
            continue
        if key in overrides:
            errors.append(f'line {line}: duplicate override for {key!r}')
            continue
        try:
            overrides[key] = Override.from_dict(obj)
        except ValueError as exc:
            errors.append(f'line {line} ({key}): {exc}')

    if errors:
        raise OverridesDataError(errors, source=source)
    logger.debug('overrides_loaded', source=source, count=len(overrides))
    return overrides


def load_overrides(path: Path) -> dict[str, Override]:
    """Load an overrides file.

    Raises:
        OverridesDataError: If the file can't be read or is invalid.
    """
    try:
        with path.open(encoding='utf-8') as f:
            return parse_overrides(f, source=str(path))
    except OSError as exc:
        raise OverridesDataError([str(exc)], source=str(path)) from exc
