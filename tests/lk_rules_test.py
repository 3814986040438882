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

"""Tests for licencekit.rules module."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from licencekit.errors import RulesDataError
from licencekit.identifiers import LicenceIdentifiers
from licencekit.rules import Action, Rule, RuleEngine, load_rules, parse_rules


@pytest.fixture(scope='module')
def ids() -> LicenceIdentifiers:
    """Built-in identifier table."""
    return LicenceIdentifiers.load()


class TestRuleMatching:
    """Tests for Rule.matches_module() and Rule.matches_licence()."""

    @pytest.mark.parametrize(
        ('pattern', 'module', 'expected'),
        [
            ('*', 'github.com/a/b', True),
            ('github.com/a/b', 'github.com/a/b', True),
            ('github.com/a', 'github.com/a/b/v2', True),
            ('github.com/a/', 'github.com/a/b', True),
            ('github.com/a', 'github.com/ab', False),
            ('github.com/*/b', 'github.com/a/b', True),
            ('github.com/*/b', 'github.com/a/c', False),
        ],
    )
    def test_module_patterns(self, pattern: str, module: str, expected: bool) -> None:
        """Module patterns match by glob or path prefix."""
        assert Rule(module=pattern).matches_module(module) is expected

    @pytest.mark.parametrize(
        ('pattern', 'licence', 'expected'),
        [
            ('*', 'UNKNOWN', True),
            ('GPL-3.0', 'GPL-3.0-only', True),
            ('GPLv3', 'GPL-3.0', True),
            ('GPL-3.0', 'GPL-3.0-or-later', False),
            ('GPL-*', 'GPLv3', True),
            ('gpl-*', 'GPL-2.0-only', True),
            ('BSD-*', 'MIT', False),
            ('Custom-*', 'custom-licence', True),
        ],
    )
    def test_licence_patterns(self, ids: LicenceIdentifiers, pattern: str, licence: str, expected: bool) -> None:
        """Licence patterns compare canonical identifiers."""
        assert Rule(licence=pattern).matches_licence(licence, ids) is expected


class TestRuleEngine:
    """Tests for RuleEngine.evaluate()."""

    def test_first_match_wins(self, ids: LicenceIdentifiers) -> None:
        """An earlier rule shadows later ones."""
        engine = RuleEngine(
            [
                Rule(module='github.com/gorhill', licence='GPL-3.0', action=Action.ALLOW),
                Rule(licence='GPL-*', action=Action.DENY),
            ],
            ids,
        )
        assert engine.is_allowed('github.com/gorhill/cronexpr', 'GPL-3.0-only')
        assert not engine.is_allowed('github.com/other/mod', 'GPL-3.0-only')

    def test_default_deny(self, ids: LicenceIdentifiers) -> None:
        """With no matching rule the licence is rejected."""
        decision = RuleEngine([Rule(licence='MIT')], ids).evaluate('m', 'ISC')
        assert not decision.allowed
        assert decision.rule is None

    def test_unknown_needs_explicit_rule(self, ids: LicenceIdentifiers) -> None:
        """UNKNOWN is an ordinary licence name for matching."""
        engine = RuleEngine([Rule(module='example.com/m', licence='UNKNOWN')], ids)
        assert engine.is_allowed('example.com/m', 'UNKNOWN')
        assert not engine.is_allowed('example.com/n', 'UNKNOWN')

    def test_review(self, ids: LicenceIdentifiers) -> None:
        """A review rule allows but flags the licence."""
        decision = RuleEngine([Rule(licence='MPL-2.0', action=Action.REVIEW)], ids).evaluate('m', 'MPL-2.0')
        assert decision.allowed
        assert decision.needs_review

    def test_rules_are_immutable(self, ids: LicenceIdentifiers) -> None:
        """Mutating the source list does not change the engine."""
        source = [Rule(licence='MIT')]
        engine = RuleEngine(source, ids)
        source.clear()
        assert engine.rules == (Rule(licence='MIT'),)


class TestParseRules:
    """Tests for parse_rules() and load_rules()."""

    def test_sections_in_order(self) -> None:
        """rules come first, then allowlist, then maybelist."""
        engine = parse_rules({
            'maybelist': ['MPL-2.0'],
            'allowlist': ['MIT'],
            'rules': [{'licence': 'AGPL-*', 'action': 'deny'}],
        })
        assert [r.action for r in engine.rules] == [Action.DENY, Action.ALLOW, Action.REVIEW]
        assert engine.rules[1] == Rule(licence='MIT', action=Action.ALLOW)

    def test_collects_every_error(self) -> None:
        """All problems are reported together."""
        with pytest.raises(RulesDataError) as exc_info:
            parse_rules({
                'rules': [
                    {'licence': 'MIT'},
                    {'licence': 'MIT', 'action': 'permit'},
                    {'module': '', 'action': 'allow'},
                    'MIT',
                    {'licence': 'MIT', 'action': 'allow', 'note': 'x'},
                ],
                'allowlist': ['MIT', 3],
                'denylist': [],
            })
        assert len(exc_info.value.errors) == 7

    def test_not_an_object(self) -> None:
        """The document must be a JSON object."""
        with pytest.raises(RulesDataError, match='expected a JSON object'):
            parse_rules(['MIT'])

    def test_load_rules(self, tmp_path: Path) -> None:
        """Rules load from a JSON file."""
        path = tmp_path / 'rules.json'
        path.write_text(json.dumps({'allowlist': ['MIT', 'ISC']}))
        assert load_rules(path).is_allowed('m', 'ISC')

    def test_load_rules_bad_json(self, tmp_path: Path) -> None:
        """Malformed JSON is a data error naming the file."""
        path = tmp_path / 'rules.json'
        path.write_text('{"allowlist": [')
        with pytest.raises(RulesDataError) as exc_info:
            load_rules(path)
        assert exc_info.value.source == str(path)
