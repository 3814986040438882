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

"""Derive a canonical source repository URL from a module path.

Resolution order:

1. An explicit override, returned verbatim.
2. Forge-hosted paths (``github.com/org/repo/sub/pkg``) collapse to the
   repository root: ``https://github.com/org/repo``.
3. Alias domains that mirror a forge are rewritten to the upstream
   repository (``k8s.io/apimachinery`` →
   ``https://github.com/kubernetes/apimachinery``).
4. Anything else is a vanity import path: ``https://`` + module path.

Pure string manipulation; nothing here touches the network.
"""

from __future__ import annotations

import re
from typing import Final

__all__ = [
    'determine_url',
]

#: Hosts whose paths are ``host/org/repo[/subpath...]``.
_FORGE_HOSTS: Final[frozenset[str]] = frozenset({
    'github.com',
    'gitlab.com',
    'bitbucket.org',
})

#: Alias domain → canonical upstream organisation URL. The first path
#: segment after the domain is the repository name.
_ALIAS_ORGS: Final[dict[str, str]] = {
    'k8s.io': 'https://github.com/kubernetes',
    'sigs.k8s.io': 'https://github.com/kubernetes-sigs',
    'golang.org/x': 'https://github.com/golang',
}

# gopkg.in/pkg.v3 → github.com/go-pkg/pkg; gopkg.in/user/pkg.v3 → github.com/user/pkg
_GOPKG_RE: Final[re.Pattern[str]] = re.compile(
    r'^gopkg\.in/(?:(?P<user>[^/.]+)/)?(?P<pkg>[^/]+?)\.v\d+(?:/.*)?$',
)


def _forge_url(module_path: str) -> str | None:
    parts = module_path.split('/')
    if parts[0] not in _FORGE_HOSTS or len(parts) < 3:
        return None
    return 'https://' + '/'.join(parts[:3])


def _alias_url(module_path: str) -> str | None:
    match = _GOPKG_RE.match(module_path)
    if match:
        pkg = match.group('pkg')
        user = match.group('user') or f'go-{pkg}'
        return f'https://github.com/{user}/{pkg}'
    for prefix, org_url in _ALIAS_ORGS.items():
        if module_path.startswith(prefix + '/'):
            repo = module_path[len(prefix) + 1 :].split('/', 1)[0]
            if repo:
                return f'{org_url}/{repo}'
    return None


def determine_url(override: str | None, module_path: str) -> str:
    """Return the source URL for *module_path*.

    Args:
        override: Operator-supplied URL. Any non-empty value wins.
        module_path: Module path from the module graph.

    Returns:
        An ``https://`` URL (or the override, unchanged).
    """
    if override:
        return override
    return _forge_url(module_path) or _alias_url(module_path) or f'https://{module_path}'
