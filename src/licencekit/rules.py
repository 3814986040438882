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

r"""Ordered allow/deny rules for dependency licences.

A rule pairs a module-path pattern with a licence pattern and an action.
Rules are scanned in order and the **first** rule matching both the
module and the licence decides. When nothing matches the licence is
rejected.

Key Concepts (ELI5)::

    ┌─────────────────────┬────────────────────────────────────────────────┐
    │ Concept             │ Plain-English                                  │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ allow               │ The licence is fine for matching modules.      │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ review              │ Allowed, but a human should look at it. A      │
    │                     │ warning is logged for every match.             │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ deny                │ The licence is rejected for matching modules.  │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Module pattern      │ ``*`` = any module; ``github.com/acme/*`` =   │
    │                     │ glob; ``github.com/acme`` = that module and    │
    │                     │ everything below it.                           │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Licence pattern     │ ``*`` = any licence; ``GPL-*`` = glob;        │
    │                     │ ``GPLv3`` = same licence as ``GPL-3.0-only``. │
    └─────────────────────┴────────────────────────────────────────────────┘

Rules file format (JSON)::

    {
      "rules": [
        {"module": "github.com/gorhill/cronexpr", "licence": "GPL-3.0", "action": "allow"},
        {"licence": "AGPL-*", "action": "deny"}
      ],
      "allowlist": ["Apache-2.0", "BSD-2-Clause", "BSD-3-Clause", "ISC", "MIT"],
      "maybelist": ["MPL-2.0"]
    }

``rules`` are evaluated first, then ``allowlist`` entries (allow for any
module), then ``maybelist`` entries (review for any module).

Usage::

    from licencekit.rules import load_rules

    engine = load_rules(Path('rules.json'))
    engine.is_allowed('github.com/davecgh/go-spew', 'ISC')  # True
"""

from __future__ import annotations

import enum
import fnmatch
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from licencekit.errors import RulesDataError
from licencekit.identifiers import LicenceIdentifiers
from licencekit.logging import get_logger

__all__ = [
    'ANY',
    'Action',
    'Rule',
    'RuleDecision',
    'RuleEngine',
    'load_rules',
    'parse_rules',
]

logger = get_logger(__name__)

#: Pattern matching any module or licence.
ANY = '*'

_GLOB_CHARS = frozenset('*?[')


class Action(str, enum.Enum):
    """What a matching rule does with the licence."""

    ALLOW = 'allow'
    REVIEW = 'review'
    DENY = 'deny'


def _is_glob(pattern: str) -> bool:
    return any(c in _GLOB_CHARS for c in pattern)


@dataclass(frozen=True)
class Rule:
    """A single policy entry.

    Attributes:
        module: Module-path pattern.
        licence: Licence pattern.
        action: :class:`Action` taken when both patterns match.
    """

    module: str = ANY
    licence: str = ANY
    action: Action = Action.ALLOW

    def matches_module(self, module: str) -> bool:
        """Return ``True`` if the module pattern covers *module*."""
        pattern = self.module
        if pattern == ANY:
            return True
        if _is_glob(pattern):
            return fnmatch.fnmatchcase(module, pattern)
        prefix = pattern.rstrip('/')
        return module == prefix or module.startswith(prefix + '/')

    def matches_licence(self, licence: str, identifiers: LicenceIdentifiers) -> bool:
        """Return ``True`` if the licence pattern covers *licence*."""
        pattern = self.licence
        if pattern == ANY:
            return True
        if _is_glob(pattern):
            candidate = identifiers.canonical(licence).spdx_id
            return fnmatch.fnmatch(candidate.lower(), pattern.lower()) or fnmatch.fnmatch(
                licence.strip().lower(), pattern.lower()
            )
        return identifiers.same(pattern, licence)

    def describe(self) -> str:
        """Short human-readable form used in messages."""
        return f'{self.action.value} module={self.module!r} licence={self.licence!r}'


@dataclass(frozen=True)
class RuleDecision:
    """Result of evaluating a module/licence pair.

    Attributes:
        allowed: ``True`` for allow and review outcomes.
        rule: The rule that decided, or ``None`` for the default deny.
    """

    allowed: bool
    rule: Rule | None = None

    @property
    def needs_review(self) -> bool:
        """``True`` if a review rule allowed the licence."""
        return self.rule is not None and self.rule.action is Action.REVIEW


class RuleEngine:
    """Evaluates licences against an ordered, immutable rule list.

    Args:
        rules: Rules in evaluation order.
        identifiers: Licence identifier table used to compare licence
            names. Defaults to the built-in table.
    """

    def __init__(
        self,
        rules: list[Rule] | tuple[Rule, ...],
        identifiers: LicenceIdentifiers | None = None,
    ) -> None:
        self._rules = tuple(rules)
        self._identifiers = identifiers or LicenceIdentifiers.load()

    @property
    def rules(self) -> tuple[Rule, ...]:
        """The rules in evaluation order."""
        return self._rules

    @property
    def identifiers(self) -> LicenceIdentifiers:
        """Identifier table used for licence comparison."""
        return self._identifiers

    def evaluate(self, module: str, licence: str) -> RuleDecision:
        """Find the first rule matching *module* and *licence*.

        Args:
            module: Module path.
            licence: Final licence type of the module.

        Returns:
            A :class:`RuleDecision`; ``allowed`` is ``False`` when a
            deny rule matched or no rule matched at all.
        """
        for rule in self._rules:
            if rule.matches_module(module) and rule.matches_licence(licence, self._identifiers):
                return RuleDecision(allowed=rule.action is not Action.DENY, rule=rule)
        return RuleDecision(allowed=False)

    def is_allowed(self, module: str, licence: str) -> bool:
        """Return ``True`` if *licence* is acceptable for *module*."""
        return self.evaluate(module, licence).allowed


def _parse_rule(index: int, raw: Any, errors: list[str]) -> Rule | None:  # noqa: ANN401
    where = f'rules[{index}]'
    if not isinstance(raw, dict):
        errors.append(f'{where}: expected an object, got {type(raw).__name__}')
        return None
    unknown = sorted(set(raw) - {'module', 'licence', 'action'})
    if unknown:
        errors.append(f'{where}: unknown field(s): {", ".join(unknown)}')
        return None
    values: dict[str, str] = {}
    for key in ('module', 'licence'):
        value = raw.get(key, ANY)
        if not isinstance(value, str) or not value.strip():
            errors.append(f'{where}.{key}: expected a non-empty string')
            return None
        values[key] = value.strip()
    action_raw = raw.get('action')
    if action_raw is None:
        errors.append(f'{where}: missing required field "action"')
        return None
    try:
        action = Action(action_raw)
    except ValueError:
        errors.append(f'{where}.action: {action_raw!r} is not one of: {", ".join(a.value for a in Action)}')
        return None
    return Rule(module=values['module'], licence=values['licence'], action=action)


def _parse_list(key: str, raw: Any, action: Action, errors: list[str]) -> list[Rule]:  # noqa: ANN401
    if not isinstance(raw, list):
        errors.append(f'{key}: expected a list, got {type(raw).__name__}')
        return []
    rules: list[Rule] = []
    for i, licence in enumerate(raw):
        if not isinstance(licence, str) or not licence.strip():
            errors.append(f'{key}[{i}]: expected a non-empty string')
            continue
        rules.append(Rule(licence=licence.strip(), action=action))
    return rules


def parse_rules(
    data: Any,  # noqa: ANN401
    *,
    identifiers: LicenceIdentifiers | None = None,
    source: str = '',
) -> RuleEngine:
    """Build a :class:`RuleEngine` from parsed rules JSON.

    Args:
        data: The decoded JSON document.
        identifiers: Identifier table; defaults to the built-in one.
        source: File name for error messages.

    Returns:
        A ready :class:`RuleEngine`.

    Raises:
        RulesDataError: With every problem found in *data*.
    """
    if not isinstance(data, dict):
        raise RulesDataError([f'expected a JSON object, got {type(data).__name__}'], source=source)
    errors: list[str] = []
    unknown = sorted(set(data) - {'rules', 'allowlist', 'maybelist'})
    if unknown:
        errors.append(f'unknown top-level field(s): {", ".join(unknown)}')

    rules: list[Rule] = []
    raw_rules = data.get('rules', [])
    if isinstance(raw_rules, list):
        for i, raw in enumerate(raw_rules):
            rule = _parse_rule(i, raw, errors)
            if rule is not None:
                rules.append(rule)
    else:
        errors.append(f'rules: expected a list, got {type(raw_rules).__name__}')
    rules.extend(_parse_list('allowlist', data.get('allowlist', []), Action.ALLOW, errors))
    rules.extend(_parse_list('maybelist', data.get('maybelist', []), Action.REVIEW, errors))

    if errors:
        raise RulesDataError(errors, source=source)
    logger.debug('rules_loaded', source=source, count=len(rules))
    return RuleEngine(rules, identifiers)


def load_rules(path: Path, *, identifiers: LicenceIdentifiers | None = None) -> RuleEngine:
    """Load a rules JSON file.

    Raises:
        RulesDataError: If the file can't be read, isn't JSON or fails
            validation.
    """
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except (OSError, json.JSONDecodeError) as exc:
        raise RulesDataError([str(exc)], source=str(path)) from exc
    return parse_rules(data, identifiers=identifiers, source=str(path))
