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

"""Configuration file support (``licencekit.toml``).

Example::

    [licencekit]
    in = "deps.json"
    rules = "rules.json"
    overrides = "overrides.json"
    include_indirect = true
    confidence_threshold = 0.8
    product_name = "My Product"
    notice_out = "NOTICE.txt"

Relative paths are resolved against the directory holding the config
file. Command-line flags take precedence over file values.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

import tomlkit

from licencekit.classifier import DEFAULT_THRESHOLD
from licencekit.errors import ConfigError
from licencekit.logging import get_logger

__all__ = [
    'CONFIG_FILENAME',
    'LicenceKitConfig',
    'load_config',
    'write_default_config',
]

logger = get_logger(__name__)

CONFIG_FILENAME: Final[str] = 'licencekit.toml'

_PATH_KEYS: Final[tuple[str, ...]] = ('in', 'rules', 'overrides', 'licence_data', 'json_out', 'notice_out')


@dataclass(frozen=True)
class LicenceKitConfig:
    """Settings for a detection run.

    Attributes:
        input: Module list file (``go list -m -json all`` output), or
            ``None`` to read stdin.
        rules: Rules JSON file.
        overrides: Overrides file, optional.
        licence_data: Extra licence identifier TOML, optional.
        include_indirect: Report indirect dependencies too.
        confidence_threshold: Minimum classifier confidence.
        product_name: Product name used in the NOTICE header.
        json_out: Where to write the JSON report, optional.
        notice_out: Where to write the NOTICE file, optional.
    """

    input: Path | None = None
    rules: Path | None = None
    overrides: Path | None = None
    licence_data: Path | None = None
    include_indirect: bool = False
    confidence_threshold: float = DEFAULT_THRESHOLD
    product_name: str = ''
    json_out: Path | None = None
    notice_out: Path | None = None


def _check_type(key: str, value: Any, expected: type | tuple[type, ...], errors: list[str]) -> bool:  # noqa: ANN401
    if isinstance(value, bool) and expected is not bool:
        ok = False
    else:
        ok = isinstance(value, expected)
    if not ok:
        name = expected.__name__ if isinstance(expected, type) else ' or '.join(t.__name__ for t in expected)
        errors.append(f'licencekit.{key}: expected {name}, got {type(value).__name__}')
    return ok


def load_config(path: Path) -> LicenceKitConfig:
    """Load and validate ``licencekit.toml``.

    Args:
        path: Config file path.

    Returns:
        A :class:`LicenceKitConfig`.

    Raises:
        ConfigError: If the file can't be parsed or has invalid keys.
    """
    try:
        with path.open('rb') as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError([str(exc)], source=str(path)) from exc

    section = data.get('licencekit', {})
    if not isinstance(section, dict):
        raise ConfigError(['[licencekit] must be a table'], source=str(path))

    errors: list[str] = []
    kwargs: dict[str, Any] = {}
    base = path.parent
    for key, value in section.items():
        if key in _PATH_KEYS:
            if _check_type(key, value, str, errors):
                kwargs['input' if key == 'in' else key] = base / value
        elif key == 'include_indirect':
            if _check_type(key, value, bool, errors):
                kwargs[key] = value
        elif key == 'confidence_threshold':
            if _check_type(key, value, (int, float), errors):
                if not 0.0 < value <= 1.0:
                    errors.append(f'licencekit.{key}: must be in (0, 1], got {value}')
                else:
                    kwargs[key] = float(value)
        elif key == 'product_name':
            if _check_type(key, value, str, errors):
                kwargs[key] = value
        else:
            errors.append(f'licencekit.{key}: unknown key')

    if errors:
        raise ConfigError(errors, source=str(path))
    logger.debug('config_loaded', path=str(path))
    return LicenceKitConfig(**kwargs)


def write_default_config(path: Path) -> None:
    """Write a commented starter ``licencekit.toml``.

    Raises:
        ConfigError: If *path* already exists.
    """
    if path.exists():
        raise ConfigError([f'{path} already exists'], source=str(path))

    doc = tomlkit.document()
    doc.add(tomlkit.comment('licencekit configuration. Paths are relative to this file.'))
    doc.add(tomlkit.nl())

    section = tomlkit.table()
    section.add('in', 'deps.json')
    section['in'].comment('output of: go list -m -json all')
    section.add('rules', 'rules.json')
    section.add(tomlkit.comment('overrides = "overrides.json"'))
    section.add('include_indirect', False)
    section.add('confidence_threshold', DEFAULT_THRESHOLD)
    section['confidence_threshold'].comment('minimum classifier confidence (0, 1]')
    section.add('product_name', path.resolve().parent.name)
    section.add('notice_out', 'NOTICE.txt')
    doc.add('licencekit', section)

    path.write_text(tomlkit.dumps(doc), encoding='utf-8')
    logger.info('config_written', path=str(path))
