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

"""Read the module graph emitted by ``go list -m -json all``.

The output is a stream of JSON objects written back to back (not a JSON
array)::

    {
        "Path": "github.com/davecgh/go-spew",
        "Version": "v1.1.0",
        "Time": "2016-10-29T20:57:26Z",
        "Indirect": true,
        "Dir": "/go/pkg/mod/github.com/davecgh/go-spew@v1.1.0"
    }
    {
        "Path": "github.com/ekzhu/minhash-lsh",
        ...
    }

The main module (``"Main": true``) is skipped. For replaced modules the
replacement's version, time and directory are used, while the original
module path stays the record's identity.

Usage::

    from licencekit.modules import parse_module_list

    with open('deps.json', encoding='utf-8') as f:
        modules = parse_module_list(f)
"""

from __future__ import annotations

import json
from typing import Any, TextIO

from licencekit._types import ModuleRecord
from licencekit.errors import ModuleListError
from licencekit.logging import get_logger

__all__ = [
    'iter_json_objects',
    'parse_module_list',
]

logger = get_logger(__name__)


def iter_json_objects(text: str) -> list[tuple[int, Any]]:
    """Decode back-to-back JSON values from *text*.

    Args:
        text: Concatenated (whitespace- or newline-separated) JSON.

    Returns:
        ``(line_number, value)`` pairs in input order.

    Raises:
        json.JSONDecodeError: On malformed input.
    """
    decoder = json.JSONDecoder()
    values: list[tuple[int, Any]] = []
    pos = 0
    end = len(text)
    while True:
        while pos < end and text[pos].isspace():
            pos += 1
        if pos >= end:
            return values
        line = text.count('\n', 0, pos) + 1
        value, pos = decoder.raw_decode(text, pos)
        values.append((line, value))


def _str_field(obj: dict[str, Any], key: str) -> str:
    value = obj.get(key, '')
    return value if isinstance(value, str) else ''


def parse_module_list(stream: TextIO, *, source: str = '') -> list[ModuleRecord]:
    """Parse a ``go list -m -json`` stream into module records.

    Args:
        stream: Text stream holding the JSON objects.
        source: Name of the stream, for error messages.

    Returns:
        Module records in input order, main module excluded.

    Raises:
        ModuleListError: If the stream is not valid JSON or a record
            lacks a module path.
    """
    try:
        objects = iter_json_objects(stream.read())
    except json.JSONDecodeError as exc:
        raise ModuleListError([f'line {exc.lineno}: {exc.msg}'], source=source) from exc

    errors: list[str] = []
    records: list[ModuleRecord] = []
    for line, obj in objects:
        if not isinstance(obj, dict):
            errors.append(f'line {line}: expected an object, got {type(obj).__name__}')
            continue
        path = _str_field(obj, 'Path')
        if not path:
            errors.append(f'line {line}: module record has no "Path"')
            continue
        if obj.get('Main'):
            logger.debug('main_module_skipped', module=path)
            continue

        origin = obj
        replace = obj.get('Replace')
        if isinstance(replace, dict):
            logger.debug('module_replaced', module=path, replacement=_str_field(replace, 'Path'))
            origin = replace

        records.append(
            ModuleRecord(
                path=path,
                version=_str_field(origin, 'Version'),
                version_time=_str_field(origin, 'Time'),
                dir=_str_field(origin, 'Dir'),
                indirect=bool(obj.get('Indirect', False)),
            )
        )

    if errors:
        raise ModuleListError(errors, source=source)
    logger.debug('module_list_parsed', source=source, count=len(records))
    return records
