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

r"""Classify licence files into licence identifiers.

Two layers:

- A **backend** turns licence text into a ``(licence_type, confidence)``
  guess. Anything implementing :class:`ClassifierBackend` works; the
  built-in :class:`PhraseBackend` scores each known licence by the
  fraction of its characteristic phrases present in the text.
- :class:`LicenceClassifier` is what the detector talks to. It reads
  the file, applies a confidence threshold and separates the two ways
  classification can come up empty:

    ┌──────────────────────────────┬───────────────────────────────────┐
    │ Situation                    │ Outcome                           │
    ├──────────────────────────────┼───────────────────────────────────┤
    │ Empty path / file missing    │ ``ok=False`` (unknown licence)    │
    │ Low confidence / no match    │ ``ok=False`` (unknown licence)    │
    │ File exists, read fails      │ :class:`ClassificationIOError`    │
    └──────────────────────────────┴───────────────────────────────────┘

The classifier holds no mutable state, so one instance can be shared
freely between runs.

Usage::

    from licencekit.classifier import LicenceClassifier, find_licence_file

    classifier = LicenceClassifier(threshold=0.8)
    path = find_licence_file('vendor/github.com/davecgh/go-spew@v1.1.0')
    result = classifier.classify(path)
    if result.ok:
        print(result.licence_type, result.confidence)
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Protocol

from licencekit.errors import ClassificationIOError
from licencekit.logging import get_logger

__all__ = [
    'DEFAULT_THRESHOLD',
    'Classification',
    'ClassifierBackend',
    'LicenceClassifier',
    'PhraseBackend',
    'find_licence_file',
]

logger = get_logger(__name__)

#: Minimum backend confidence for a classification to count.
DEFAULT_THRESHOLD: Final[float] = 0.8

# Conventional licence file names, matched case-insensitively in the
# module root: LICENSE, LICENCE.txt, licence, COPYING, UNLICENSE.md, ...
_LICENCE_FILE_RE: Final[re.Pattern[str]] = re.compile(
    r'^(?:(?P<licence>licen[cs]e)|(?P<copying>copying)|(?P<unlicense>unlicen[cs]e))(?:[._-].*)?$',
    re.IGNORECASE,
)

_NON_WORD_RE: Final[re.Pattern[str]] = re.compile(r'[^a-z0-9]+')


def _normalize_text(text: str) -> str:
    return _NON_WORD_RE.sub(' ', text.lower()).strip()


_BSD_PHRASES = (
    'redistribution and use in source and binary forms with or without modification are permitted',
    'redistributions of source code must retain the above copyright notice',
    'redistributions in binary form must reproduce the above copyright notice',
    'in no event shall',
)

# Licence ID → characteristic phrases. Order breaks ties.
_PHRASES: Final[tuple[tuple[str, tuple[str, ...]], ...]] = (
    (
        'Apache-2.0',
        (
            'apache license',
            'version 2.0, january 2004',
            'terms and conditions for use, reproduction, and distribution',
        ),
    ),
    (
        'MIT',
        (
            'permission is hereby granted, free of charge, to any person obtaining a copy',
            'the above copyright notice and this permission notice shall be included',
            'the software is provided "as is", without warranty of any kind',
        ),
    ),
    (
        'ISC',
        (
            'permission to use, copy, modify, and',
            'distribute this software for any purpose with or without fee is hereby granted',
            'provided that the above copyright notice and this permission notice appear in all copies',
        ),
    ),
    ('BSD-2-Clause', _BSD_PHRASES),
    ('BSD-3-Clause', (*_BSD_PHRASES, 'neither the name of')),
    (
        'GPL-3.0-only',
        (
            'gnu general public license',
            'version 3, 29 june 2007',
            'the gnu general public license is a free, copyleft license',
        ),
    ),
    (
        'GPL-2.0-only',
        (
            'gnu general public license',
            'version 2, june 1991',
            'the licenses for most software are designed to take away your freedom',
        ),
    ),
    (
        'LGPL-3.0-only',
        (
            'gnu lesser general public license',
            'version 3, 29 june 2007',
            'incorporates the terms and conditions of version 3 of the gnu general public license',
        ),
    ),
    (
        'LGPL-2.1-only',
        (
            'gnu lesser general public license',
            'version 2.1, february 1999',
        ),
    ),
    (
        'AGPL-3.0-only',
        (
            'gnu affero general public license',
            'version 3, 19 november 2007',
        ),
    ),
    (
        'MPL-2.0',
        (
            'mozilla public license version 2.0',
            'covered software',
            'source code form',
        ),
    ),
    (
        'EPL-2.0',
        (
            'eclipse public license - v 2.0',
            'the program is made available under the terms of this agreement',
        ),
    ),
    (
        'BSL-1.0',
        (
            'boost software license - version 1.0',
            'permission is hereby granted, free of charge, to any person or organization',
        ),
    ),
    (
        'Zlib',
        (
            'the origin of this software must not be misrepresented',
            'altered source versions must be plainly marked as such',
        ),
    ),
    (
        'Unlicense',
        (
            'this is free and unencumbered software released into the public domain',
            'anyone is free to copy, modify, publish, use, compile, sell, or',
        ),
    ),
    (
        'CC0-1.0',
        (
            'cc0 1.0 universal',
            'creative commons',
        ),
    ),
)


class ClassifierBackend(Protocol):
    """Turns licence text into a best-guess licence identifier."""

    def match(self, text: str) -> tuple[str, float]:
        """Return ``(licence_type, confidence)``; ``('', 0.0)`` if nothing fits."""
        ...


class PhraseBackend:
    """Phrase-coverage licence matcher.

    Each known licence is described by a handful of phrases that appear
    in its canonical text. The confidence for a licence is the fraction
    of its phrases found in the (whitespace- and punctuation-normalized)
    input. The best score wins; when two licences tie, the one with
    more matching phrases is more specific (BSD-3-Clause over
    BSD-2-Clause), then table order decides.

    Args:
        phrases: Optional replacement phrase table.
    """

    def __init__(self, phrases: tuple[tuple[str, tuple[str, ...]], ...] | None = None) -> None:
        table = phrases if phrases is not None else _PHRASES
        self._table: list[tuple[str, tuple[str, ...]]] = [
            (licence, tuple(_normalize_text(p) for p in licence_phrases)) for licence, licence_phrases in table
        ]

    def match(self, text: str) -> tuple[str, float]:
        """Return the best-scoring licence for *text*."""
        haystack = _normalize_text(text)
        best: tuple[float, int, str] = (0.0, 0, '')
        for licence, phrases in self._table:
            if not phrases:
                continue
            hits = sum(1 for p in phrases if p in haystack)
            score = hits / len(phrases)
            if (score, hits) > best[:2]:
                best = (score, hits, licence)
        return best[2], best[0]


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one licence file.

    Attributes:
        licence_type: The matched identifier, ``""`` when not ``ok``.
        confidence: Backend confidence (0.0–1.0).
        ok: ``True`` if a licence was confidently identified.
    """

    licence_type: str = ''
    confidence: float = 0.0
    ok: bool = False


class LicenceClassifier:
    """Adapter between the detector and a classification backend.

    Args:
        backend: Backend to use. Defaults to :class:`PhraseBackend`.
        threshold: Minimum confidence for a result to be accepted.
    """

    def __init__(
        self,
        backend: ClassifierBackend | None = None,
        *,
        threshold: float = DEFAULT_THRESHOLD,
    ) -> None:
        if not 0.0 < threshold <= 1.0:
            raise ValueError(f'threshold must be in (0, 1], got {threshold}')
        self._backend = backend or PhraseBackend()
        self._threshold = threshold

    def classify(self, path: str, *, module: str = '') -> Classification:
        """Classify the licence file at *path*.

        Args:
            path: Licence file path, or ``""`` if none was found.
            module: Module path, used in error messages.

        Returns:
            A :class:`Classification`. ``ok`` is ``False`` when there is
            nothing to classify or the backend is not confident.

        Raises:
            ClassificationIOError: If the file exists but cannot be read.
        """
        if not path:
            return Classification()
        file_path = Path(path)
        if not file_path.exists():
            logger.debug('licence_file_missing', module=module, path=path)
            return Classification()
        try:
            text = file_path.read_text(encoding='utf-8', errors='replace')
        except OSError as exc:
            raise ClassificationIOError(module, path, exc.strerror or str(exc)) from exc

        licence_type, confidence = self._backend.match(text)
        if not licence_type or confidence < self._threshold:
            logger.debug(
                'licence_unclassified',
                module=module,
                path=path,
                best=licence_type,
                confidence=round(confidence, 3),
            )
            return Classification(confidence=confidence)
        logger.debug(
            'licence_classified',
            module=module,
            path=path,
            licence=licence_type,
            confidence=round(confidence, 3),
        )
        return Classification(licence_type=licence_type, confidence=confidence, ok=True)


def _name_priority(name: str) -> int:
    match = _LICENCE_FILE_RE.match(name)
    if match is None:
        return -1
    if match.group('licence'):
        return 0
    if match.group('copying'):
        return 1
    return 2


def find_licence_file(directory: str, *, module: str = '') -> str:
    """Find the conventional licence file in a module's root directory.

    ``LICENSE``/``LICENCE`` variants are preferred over ``COPYING``,
    which is preferred over ``UNLICENSE``; within a group the
    alphabetically first name wins so the choice is reproducible.

    Args:
        directory: Module root directory.
        module: Module path, used in log and error messages.

    Returns:
        Path to the licence file (joined onto *directory*), or ``""``
        if the directory is missing or holds no licence file.

    Raises:
        ClassificationIOError: If the directory exists but cannot be
            listed.
    """
    if not directory or not os.path.isdir(directory):
        logger.debug('module_dir_missing', module=module, dir=directory)
        return ''
    try:
        names = os.listdir(directory)
    except OSError as exc:
        raise ClassificationIOError(module, directory, exc.strerror or str(exc)) from exc

    candidates = sorted(
        (priority, name)
        for name in names
        if (priority := _name_priority(name)) >= 0 and os.path.isfile(os.path.join(directory, name))
    )
    if not candidates:
        logger.debug('licence_file_not_found', module=module, dir=directory)
        return ''
    path = str(Path(directory) / candidates[0][1])
    logger.debug('licence_file_found', module=module, path=path)
    return path
