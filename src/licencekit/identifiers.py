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

r"""Licence identifier canonicalisation.

Rules, overrides and the classifier all talk about licences with plain
strings, and people spell the same licence many ways (``GPL-3.0``,
``GPLv3``, ``GNU GPL v3``). Before the rule engine compares two
identifiers it maps both to a canonical SPDX ID using a 3-stage
pipeline:

    1. **Exact**: the string is a canonical ID.
    2. **Alias**: case-insensitive lookup against known aliases.
    3. **Normalized**: strip case, accents and punctuation, compare.

Anything else is **unresolved** and compared verbatim. There is no
fuzzy stage; trigram similarity is only used by :meth:`suggest` to
produce "did you mean" hints for error messages.

Usage::

    from licencekit.identifiers import LicenceIdentifiers

    ids = LicenceIdentifiers.load()
    ids.canonical('GNU GPL v3').spdx_id  # 'GPL-3.0-only'
    ids.same('Apache License 2.0', 'Apache-2.0')  # True
    ids.suggest('Apche-2.0')  # ('Apache-2.0',)
"""

from __future__ import annotations

import functools
import re
import tomllib
import unicodedata
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from licencekit.errors import RulesDataError

__all__ = [
    'CanonicalLicence',
    'LicenceIdentifiers',
]

_DATA_DIR = Path(__file__).resolve().parent / 'data'
_LICENCES_TOML = _DATA_DIR / 'licences.toml'

# Minimum Sørensen–Dice trigram similarity for a suggestion.
_MIN_SIMILARITY = 0.55

_NORMALIZE_RE = re.compile(r'[^a-z0-9]')


def _normalize(s: str) -> str:
    """Lowercase, strip accents and drop everything but ``[a-z0-9]``."""
    s = unicodedata.normalize('NFKD', s.lower().strip())
    s = ''.join(c for c in s if not unicodedata.combining(c))
    return _NORMALIZE_RE.sub('', s)


def _trigrams(s: str) -> frozenset[str]:
    if len(s) < 3:
        return frozenset({s}) if s else frozenset()
    return frozenset(s[i : i + 3] for i in range(len(s) - 2))


def _similarity(a: frozenset[str], b: frozenset[str]) -> float:
    """Sørensen–Dice coefficient over trigram sets."""
    if not a or not b:
        return 0.0
    return 2.0 * len(a & b) / (len(a) + len(b))


def _read_table(path: Path) -> dict[str, Any]:
    try:
        with path.open('rb') as f:
            return dict(tomllib.load(f))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise RulesDataError([str(exc)], source=str(path)) from exc


@dataclass(frozen=True)
class CanonicalLicence:
    """Result of canonicalising a licence string.

    Attributes:
        spdx_id: The canonical ID, or the stripped input when unresolved.
        method: ``"exact"``, ``"alias"``, ``"normalized"`` or
            ``"unresolved"``.
        original: The input string.
    """

    spdx_id: str
    method: str
    original: str

    @property
    def resolved(self) -> bool:
        """``True`` if the string mapped to a known licence."""
        return self.method != 'unresolved'


@dataclass
class LicenceIdentifiers:
    """Known licence IDs and their aliases.

    Attributes:
        names: Mapping from canonical ID → human-readable name.
        aliases: Mapping from lowercase alias (or ID) → canonical ID.
    """

    names: dict[str, str] = field(default_factory=dict)
    aliases: dict[str, str] = field(default_factory=dict)

    @classmethod
    def load(
        cls,
        data_toml: Path | None = None,
        *,
        user_toml: Path | None = None,
    ) -> LicenceIdentifiers:
        """Load identifiers from TOML data.

        Args:
            data_toml: Licence table to read. Defaults to the built-in
                ``data/licences.toml``.
            user_toml: Optional table in the same format merged on top:
                new IDs are added, aliases of existing IDs are extended
                and a new ``name`` replaces the built-in one.

        Returns:
            A validated :class:`LicenceIdentifiers`.

        Raises:
            RulesDataError: If the data is malformed or two licences
                claim the same alias.
        """
        path = data_toml or _LICENCES_TOML
        table = _read_table(path)
        source = str(path)
        if user_toml is not None:
            source = f'{path} + {user_toml}'
            for spdx_id, info in _read_table(user_toml).items():
                existing = table.get(spdx_id)
                if isinstance(existing, dict) and isinstance(info, dict):
                    merged = {**existing, **info}
                    user_aliases = info.get('aliases', [])
                    if isinstance(user_aliases, list):
                        merged['aliases'] = [*existing.get('aliases', []), *user_aliases]
                    table[spdx_id] = merged
                else:
                    table[spdx_id] = info

        ids = cls()
        errors = ids._populate(table)  # noqa: SLF001
        if errors:
            raise RulesDataError(errors, source=source)
        return ids

    def _populate(self, table: dict[str, Any]) -> list[str]:
        errors: list[str] = []
        for spdx_id, info in table.items():
            if not isinstance(info, dict):
                errors.append(f'[{spdx_id}]: expected a table, got {type(info).__name__}')
                continue
            name = info.get('name')
            if not isinstance(name, str):
                errors.append(f'[{spdx_id}]: missing or non-string "name"')
                continue
            aliases = info.get('aliases', [])
            if not isinstance(aliases, list) or not all(isinstance(a, str) for a in aliases):
                errors.append(f'[{spdx_id}].aliases: expected a list of strings')
                continue
            self.names[spdx_id] = name
            self.aliases[spdx_id.lower()] = spdx_id

        # Aliases in a second pass so an alias can never shadow an ID.
        for spdx_id in self.names:
            for alias in table[spdx_id].get('aliases', []):
                lower = alias.lower()
                owner = self.aliases.get(lower)
                if owner is not None and owner != spdx_id:
                    errors.append(f'Duplicate alias {alias!r} claimed by both {owner!r} and {spdx_id!r}')
                    continue
                self.aliases[lower] = spdx_id
        return errors

    def canonical(self, raw: str) -> CanonicalLicence:
        """Map *raw* to its canonical licence ID.

        Args:
            raw: A licence string as written by a person or tool.

        Returns:
            A :class:`CanonicalLicence`; unresolved inputs keep their
            (stripped) spelling.
        """
        return self._canonical_cached(raw)

    @functools.cached_property
    def _canonical_cached(self) -> Callable[[str], CanonicalLicence]:
        return functools.lru_cache(maxsize=512)(self._canonical_impl)

    @functools.cached_property
    def _normalized(self) -> dict[str, str]:
        table: dict[str, str] = {}
        for spdx_id in self.names:
            table[_normalize(spdx_id)] = spdx_id
        for alias, spdx_id in self.aliases.items():
            table.setdefault(_normalize(alias), spdx_id)
        return table

    def _canonical_impl(self, raw: str) -> CanonicalLicence:
        stripped = raw.strip()
        if stripped in self.names:
            return CanonicalLicence(spdx_id=stripped, method='exact', original=raw)
        lower = stripped.lower()
        if lower in self.aliases:
            return CanonicalLicence(spdx_id=self.aliases[lower], method='alias', original=raw)
        norm = _normalize(stripped)
        if norm and norm in self._normalized:
            return CanonicalLicence(spdx_id=self._normalized[norm], method='normalized', original=raw)
        return CanonicalLicence(spdx_id=stripped, method='unresolved', original=raw)

    def same(self, a: str, b: str) -> bool:
        """Return ``True`` if *a* and *b* name the same licence."""
        ca = self.canonical(a)
        cb = self.canonical(b)
        if ca.resolved and cb.resolved:
            return ca.spdx_id == cb.spdx_id
        return ca.spdx_id.lower() == cb.spdx_id.lower()

    def suggest(self, raw: str, limit: int = 3) -> tuple[str, ...]:
        """Return up to *limit* canonical IDs similar to *raw*.

        Only meant for error hints; never used to make a decision.
        """
        query = _trigrams(raw.strip().lower())
        scores: dict[str, float] = {}
        for alias, spdx_id in self.aliases.items():
            score = _similarity(query, _trigrams(alias))
            if score >= _MIN_SIMILARITY and score > scores.get(spdx_id, 0.0):
                scores[spdx_id] = score
        ranked = sorted(scores.items(), key=lambda x: (-x[1], x[0]))
        return tuple(spdx_id for spdx_id, _ in ranked[:limit])
