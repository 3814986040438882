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

r"""Detect, classify and validate the licences of a module list.

Data Flow::

    ┌──────────────┐   ┌────────────────┐   ┌──────────────┐   ┌──────────┐
    │ ModuleRecord │──→│ licence file   │──→│ classifier / │──→│  rules   │
    │ + Override   │   │ (override or   │   │ override     │   │ (first   │
    │              │   │  dir search)   │   │ licenceType  │   │  match)  │
    └──────────────┘   └────────────────┘   └──────────────┘   └────┬─────┘
                                                                    │
                              ┌─────────────────┐                   │
                              │ Direct/Indirect │←── URL resolver ──┘
                              │ sorted by name  │
                              └─────────────────┘

Override fields win field by field over detected values. Any hard error
(unusable override licence file, unreadable licence file, disallowed
licence) aborts the whole run; there is no partial result.

Usage::

    from licencekit.classifier import LicenceClassifier
    from licencekit.detector import detect
    from licencekit.modules import parse_module_list
    from licencekit.rules import load_rules

    deps = detect(
        parse_module_list(stream),
        LicenceClassifier(),
        load_rules(Path('rules.json')),
        overrides={},
        include_indirect=True,
    )
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

from licencekit._types import UNKNOWN_LICENCE, DependencyInfo, DependencyList, ModuleRecord, Override
from licencekit.classifier import LicenceClassifier, find_licence_file
from licencekit.errors import LicencePolicyViolationError, UnreadableLicenceOverrideError
from licencekit.logging import get_logger
from licencekit.rules import RuleEngine
from licencekit.urls import determine_url

__all__ = [
    'detect',
]

logger = get_logger(__name__)

_NO_OVERRIDE = Override()


def _override_licence_file(module: ModuleRecord, licence_file: str) -> str:
    """Resolve and check a licence file named by an override.

    Relative paths are taken from the module directory. The file must
    exist, be readable and sit inside the module tree.
    """
    if not module.dir:
        raise UnreadableLicenceOverrideError(module.path, licence_file, 'module has no directory')
    module_dir = Path(module.dir)
    path = module_dir / licence_file
    if not path.is_file():
        raise UnreadableLicenceOverrideError(module.path, licence_file, 'no such file')
    try:
        inside = path.resolve().is_relative_to(module_dir.resolve())
    except OSError as exc:
        raise UnreadableLicenceOverrideError(module.path, licence_file, str(exc)) from exc
    if not inside:
        raise UnreadableLicenceOverrideError(module.path, licence_file, 'outside the module directory')
    try:
        with path.open('rb'):
            pass
    except OSError as exc:
        raise UnreadableLicenceOverrideError(module.path, licence_file, exc.strerror or str(exc)) from exc
    return str(path)


def _detect_one(
    module: ModuleRecord,
    override: Override,
    classifier: LicenceClassifier,
    rules: RuleEngine,
) -> DependencyInfo:
    if override.licence_file:
        licence_file = _override_licence_file(module, override.licence_file)
    else:
        licence_file = find_licence_file(module.dir, module=module.path)

    if override.licence_type is not None:
        licence_type = override.licence_type
        logger.debug('licence_overridden', module=module.path, licence=licence_type)
    else:
        licence_type = classifier.classify(licence_file, module=module.path).licence_type

    if not licence_type:
        licence_type = UNKNOWN_LICENCE

    decision = rules.evaluate(module.path, licence_type)
    if not decision.allowed:
        identifiers = rules.identifiers
        suggestions: tuple[str, ...] = ()
        if not identifiers.canonical(licence_type).resolved and licence_type != UNKNOWN_LICENCE:
            suggestions = identifiers.suggest(licence_type)
        logger.error('licence_not_allowed', module=module.path, licence=licence_type)
        raise LicencePolicyViolationError(module.path, licence_type, decision.rule, suggestions)
    if decision.needs_review:
        logger.warning('licence_needs_review', module=module.path, licence=licence_type)

    return DependencyInfo(
        name=override.name or module.path,
        version=override.version if override.version is not None else module.version,
        version_time=module.version_time,
        dir=module.dir,
        licence_type=licence_type,
        licence_file=licence_file,
        url=determine_url(override.url, module.path),
    )


def _sort_key(dep: DependencyInfo) -> str:
    return dep.name


def detect(
    modules: Iterable[ModuleRecord],
    classifier: LicenceClassifier,
    rules: RuleEngine,
    overrides: Mapping[str, Override] | None = None,
    include_indirect: bool = False,
) -> DependencyList:
    """Detect and validate the licence of every module.

    Modules are processed in input order; the output buckets are
    re-sorted by name so input order never leaks into the result.
    The sort key is the final name, so an override ``name`` also
    decides where the record lands.

    Args:
        modules: Raw module records.
        classifier: Licence classifier.
        rules: Policy rules.
        overrides: Operator overrides keyed by module path.
        include_indirect: Whether indirect modules are reported.

    Returns:
        A :class:`DependencyList`. ``indirect`` is empty unless
        *include_indirect* is set.

    Raises:
        UnreadableLicenceOverrideError: An override names a licence file
            that is missing, unreadable or outside the module.
        ClassificationIOError: A licence file exists but can't be read.
        LicencePolicyViolationError: A final licence is not allowed.
    """
    overrides = overrides or {}
    direct: list[DependencyInfo] = []
    indirect: list[DependencyInfo] = []
    skipped = 0

    for module in modules:
        if module.indirect and not include_indirect:
            skipped += 1
            continue
        info = _detect_one(module, overrides.get(module.path, _NO_OVERRIDE), classifier, rules)
        (indirect if module.indirect else direct).append(info)

    result = DependencyList(
        direct=tuple(sorted(direct, key=_sort_key)),
        indirect=tuple(sorted(indirect, key=_sort_key)) if include_indirect else (),
    )
    logger.info(
        'detection_complete',
        direct=len(result.direct),
        indirect=len(result.indirect),
        skipped_indirect=skipped,
    )
    return result
