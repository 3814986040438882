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

"""Shared fixtures: a small vendored module tree with real-looking licences."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

import pytest
from licencekit.rules import RuleEngine, parse_rules

ISC_TEXT = """\
ISC License

Copyright (c) 2012-2016 Dave Collins <dave@davec.name>

Permission to use, copy, modify, and/or distribute this software for any
purpose with or without fee is hereby granted, provided that the above
copyright notice and this permission notice appear in all copies.

THE SOFTWARE IS PROVIDED "AS IS" AND THE AUTHOR DISCLAIMS ALL WARRANTIES
WITH REGARD TO THIS SOFTWARE INCLUDING ALL IMPLIED WARRANTIES OF
MERCHANTABILITY AND FITNESS.
"""

MIT_TEXT = """\
The MIT License (MIT)

Copyright (c) 2017 Damian Gryski

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction.

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED.
"""

BSD2_TEXT = """\
Blackfriday is distributed under the Simplified BSD License:

Copyright © 2011 Russ Ross
All rights reserved.

Redistribution and use in source and binary forms, with or without
modification, are permitted provided that the following conditions
are met:

1.  Redistributions of source code must retain the above copyright
    notice, this list of conditions and the following disclaimer.

2.  Redistributions in binary form must reproduce the above
    copyright notice, this list of conditions and the following
    disclaimer in the documentation and/or other materials provided with
    the distribution.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS
"AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES ARE DISCLAIMED. IN NO EVENT
SHALL THE COPYRIGHT HOLDER BE LIABLE FOR ANY DAMAGES.
"""

BSD3_TEXT = BSD2_TEXT.replace(
    'THIS SOFTWARE',
    '3.  Neither the name of the copyright holder nor the names of its\n'
    '    contributors may be used to endorse or promote products.\n\nTHIS SOFTWARE',
)

GPL3_TEXT = """\
                    GNU GENERAL PUBLIC LICENSE
                       Version 3, 29 June 2007

 Copyright (C) 2007 Free Software Foundation, Inc. <https://fsf.org/>

                            Preamble

  The GNU General Public License is a free, copyleft license for
software and other kinds of works.
"""

APACHE_TEXT = """\
                                 Apache License
                           Version 2.0, January 2004
                        http://www.apache.org/licenses/

   TERMS AND CONDITIONS FOR USE, REPRODUCTION, AND DISTRIBUTION
"""


@dataclass(frozen=True)
class VendoredModule:
    """A module written into the test tree."""

    path: str
    version: str
    time: str
    indirect: bool
    files: dict[str, str]


VENDORED_MODULES: tuple[VendoredModule, ...] = (
    VendoredModule(
        'github.com/davecgh/go-spew',
        'v1.1.0',
        '2016-10-29T20:57:26Z',
        True,
        {'LICENCE.txt': ISC_TEXT},
    ),
    VendoredModule(
        'github.com/dgryski/go-minhash',
        'v0.0.0-20170608043002-7fe510aff544',
        '2017-06-08T04:30:02Z',
        True,
        {'licence': MIT_TEXT},
    ),
    VendoredModule(
        'github.com/dgryski/go-spooky',
        'v0.0.0-20170606183049-ed3d087f40e2',
        '2017-06-06T18:30:49Z',
        True,
        {'COPYING': MIT_TEXT},
    ),
    VendoredModule(
        'github.com/ekzhu/minhash-lsh',
        'v0.0.0-20171225071031-5c06ee8586a1',
        '2017-12-25T07:10:31Z',
        False,
        {'licence.txt': MIT_TEXT},
    ),
    VendoredModule(
        'github.com/russross/blackfriday/v2',
        'v2.0.1',
        '2018-09-20T17:16:15Z',
        False,
        {'LICENSE.rst': BSD2_TEXT},
    ),
    # No conventional licence file: GPLv3 and APLv2 only.
    VendoredModule(
        'github.com/gorhill/cronexpr',
        'v0.0.0-20161205141322-d520615e531a',
        '2016-12-05T14:13:22Z',
        False,
        {'GPLv3': GPL3_TEXT, 'APLv2': APACHE_TEXT},
    ),
)

RULES_DATA = {
    'rules': [
        {'module': 'github.com/gorhill/cronexpr', 'licence': 'GPL-3.0', 'action': 'allow'},
    ],
    'allowlist': ['Apache-2.0', 'BSD-2-Clause', 'BSD-3-Clause', 'ISC', 'MIT'],
}


@dataclass(frozen=True)
class ModuleTree:
    """The written tree plus the module list describing it."""

    root: Path
    deps_json: str

    def module_dir(self, module_path: str) -> Path:
        """Return the directory a module was vendored into."""
        for mod in VENDORED_MODULES:
            if mod.path == module_path:
                return self.root / f'{mod.path}@{mod.version}'
        raise KeyError(module_path)


@pytest.fixture()
def module_tree(tmp_path: Path) -> ModuleTree:
    """Write the vendored modules and a matching ``go list`` stream."""
    root = tmp_path / 'mod'
    records = [{'Path': 'github.com/elastic/example', 'Main': True, 'Dir': str(tmp_path)}]
    for mod in VENDORED_MODULES:
        mod_dir = root / f'{mod.path}@{mod.version}'
        mod_dir.mkdir(parents=True)
        (mod_dir / 'doc.go').write_text('package x\n')
        for name, text in mod.files.items():
            (mod_dir / name).write_text(text, encoding='utf-8')
        record: dict[str, object] = {
            'Path': mod.path,
            'Version': mod.version,
            'Time': mod.time,
            'Dir': str(mod_dir),
        }
        if mod.indirect:
            record['Indirect'] = True
        records.append(record)
    deps_json = '\n'.join(json.dumps(r, indent='\t') for r in records) + '\n'
    return ModuleTree(root=root, deps_json=deps_json)


@pytest.fixture()
def rules() -> RuleEngine:
    """Rules allowing the common permissive licences plus GPL for cronexpr."""
    return parse_rules(RULES_DATA)
