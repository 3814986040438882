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

"""Shared leaf-level types used across licencekit.

This module must have **zero** imports from other ``licencekit``
modules to avoid circular-import chains.  It is safe to import
from any module in the project.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = [
    'UNKNOWN_LICENCE',
    'DependencyInfo',
    'DependencyList',
    'ModuleRecord',
    'Override',
]

#: Licence type recorded when neither an override nor the classifier
#: produced one. It is still subject to policy validation.
UNKNOWN_LICENCE = 'UNKNOWN'


@dataclass(frozen=True)
class ModuleRecord:
    """A raw module entry as emitted by the module graph.

    Attributes:
        path: Module path (e.g. ``"github.com/davecgh/go-spew"``).
        version: Resolved version, possibly a pseudo-version.
        version_time: Timestamp of the resolved version (advisory).
        dir: Directory holding the downloaded module source.
        indirect: ``True`` for transitively required modules.
    """

    path: str
    version: str = ''
    version_time: str = ''
    dir: str = ''
    indirect: bool = False


@dataclass(frozen=True)
class DependencyInfo:
    """A detected and validated dependency.

    Attributes:
        name: Module path, unique within a run.
        version: Resolved version string.
        version_time: Timestamp of the resolved version.
        dir: Module directory used to locate licence text.
        licence_type: Final licence identifier (never empty).
        licence_file: Licence file used as evidence, ``""`` if none.
        url: Canonical source URL.
    """

    name: str
    version: str
    version_time: str
    dir: str
    licence_type: str
    licence_file: str
    url: str

    def to_dict(self) -> dict[str, str]:
        """Return the record with the report's camelCase keys."""
        return {
            'name': self.name,
            'version': self.version,
            'versionTime': self.version_time,
            'dir': self.dir,
            'licenceType': self.licence_type,
            'licenceFile': self.licence_file,
            'url': self.url,
        }


# JSON key → Override attribute.
_OVERRIDE_KEYS: dict[str, str] = {
    'name': 'name',
    'version': 'version',
    'licenceType': 'licence_type',
    'licenceFile': 'licence_file',
    'url': 'url',
}


@dataclass(frozen=True)
class Override:
    """Operator-supplied corrections for a single module.

    Every field is optional. ``None`` means "use the detected value".
    An empty ``name``, ``licenceFile`` or ``url`` also counts as unset;
    an empty ``version`` or ``licenceType`` wins over detection.
    """

    name: str | None = None
    version: str | None = None
    licence_type: str | None = None
    licence_file: str | None = None
    url: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Override:
        """Build an override from a parsed JSON object.

        Raises:
            ValueError: On unknown keys or non-string values.
        """
        unknown = sorted(set(data) - set(_OVERRIDE_KEYS))
        if unknown:
            raise ValueError(f'unknown override field(s): {", ".join(unknown)}')
        kwargs: dict[str, str] = {}
        for key, attr in _OVERRIDE_KEYS.items():
            if key not in data:
                continue
            value = data[key]
            if not isinstance(value, str):
                raise ValueError(f'{key}: expected string, got {type(value).__name__}')
            kwargs[attr] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class DependencyList:
    """Final detection output.

    Attributes:
        direct: Direct dependencies sorted by name.
        indirect: Indirect dependencies sorted by name. Always empty
            when indirect dependencies were not requested.
    """

    direct: tuple[DependencyInfo, ...] = ()
    indirect: tuple[DependencyInfo, ...] = ()

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        """Return a JSON-serialisable mapping."""
        return {
            'direct': [d.to_dict() for d in self.direct],
            'indirect': [d.to_dict() for d in self.indirect],
        }
