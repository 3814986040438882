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

"""Exception hierarchy for licencekit.

Every error the CLI reports derives from :class:`LicenceKitError` and
carries a one-line ``message`` plus an optional ``hint`` telling the
operator how to fix the input.

Detection errors (all fatal to a run)::

    UnreadableLicenceOverrideError   override names a missing/unreadable file
    LicencePolicyViolationError      final licence rejected by the rules
    ClassificationIOError            licence file exists but can't be read

Data errors collect every problem found in an input file so the
operator can fix them in one pass.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from licencekit.rules import Rule

__all__ = [
    'ClassificationIOError',
    'ConfigError',
    'LicenceKitError',
    'LicencePolicyViolationError',
    'ModuleListError',
    'OverridesDataError',
    'RulesDataError',
    'UnreadableLicenceOverrideError',
]


class LicenceKitError(Exception):
    """Base class for all licencekit errors.

    Attributes:
        message: Human-readable description of the failure.
        hint: Optional remediation advice.
    """

    def __init__(self, message: str, *, hint: str = '') -> None:
        self.message = message
        self.hint = hint
        super().__init__(message)


class UnreadableLicenceOverrideError(LicenceKitError):
    """An override points at a licence file that cannot be used."""

    def __init__(self, module: str, path: str, reason: str) -> None:
        self.module = module
        self.path = path
        self.reason = reason
        super().__init__(
            f'{module}: licence file override {path!r} is not usable: {reason}',
            hint='Point licenceFile at a readable file inside the module directory.',
        )


class LicencePolicyViolationError(LicenceKitError):
    """A dependency's final licence is not allowed by the rules."""

    def __init__(
        self,
        module: str,
        licence_type: str,
        rule: Rule | None = None,
        suggestions: tuple[str, ...] = (),
    ) -> None:
        self.module = module
        self.licence_type = licence_type
        self.rule = rule
        self.suggestions = suggestions
        if rule is None:
            why = 'no rule allows it'
        else:
            why = f'denied by rule {rule.describe()}'
        hint = 'Add an allow rule for the licence or an override for the module.'
        if suggestions:
            hint = f'Did you mean {" or ".join(suggestions)}? {hint}'
        super().__init__(
            f'{module}: licence {licence_type!r} is not allowed ({why})',
            hint=hint,
        )


class ClassificationIOError(LicenceKitError):
    """A licence file exists but could not be read."""

    def __init__(self, module: str, path: str, reason: str) -> None:
        self.module = module
        self.path = path
        self.reason = reason
        super().__init__(
            f'{module}: failed to read licence file {path!r}: {reason}',
            hint='The module directory may be corrupt; re-download the module.',
        )


class _DataError(LicenceKitError):
    """An input file failed validation.

    Attributes:
        errors: List of human-readable error strings.
    """

    what = 'Input'

    def __init__(self, errors: list[str], *, source: str = '') -> None:
        self.errors = errors
        self.source = source
        where = f' {source}' if source else ''
        bullet_list = '\n'.join(f'  - {e}' for e in errors)
        super().__init__(f'{self.what}{where} has {len(errors)} error(s):\n{bullet_list}')


class ModuleListError(_DataError):
    """The module list could not be parsed."""

    what = 'Module list'


class RulesDataError(_DataError):
    """Rule or licence-identifier data failed validation."""

    what = 'Rules data'


class OverridesDataError(_DataError):
    """The overrides file failed validation."""

    what = 'Overrides'


class ConfigError(_DataError):
    """``licencekit.toml`` failed validation."""

    what = 'Config'
