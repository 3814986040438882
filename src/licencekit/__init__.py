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

"""Third-party licence detection and policy validation for build inventories."""

from licencekit._types import UNKNOWN_LICENCE, DependencyInfo, DependencyList, ModuleRecord, Override
from licencekit.classifier import LicenceClassifier
from licencekit.detector import detect
from licencekit.rules import Rule, RuleEngine
from licencekit.urls import determine_url

__all__ = [
    'UNKNOWN_LICENCE',
    'DependencyInfo',
    'DependencyList',
    'LicenceClassifier',
    'ModuleRecord',
    'Override',
    'Rule',
    'RuleEngine',
    'detect',
    'determine_url',
]
