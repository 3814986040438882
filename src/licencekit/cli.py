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

"""Command-line interface.

Usage::

    go list -m -json all | licencekit detect --rules rules.json --include-indirect
    licencekit detect --config licencekit.toml --notice-out NOTICE.txt
    licencekit detect --in deps.json --rules rules.json --validate
    licencekit init

Exit status is 0 on success and 1 on any error; on error nothing is
written except the message on stderr.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from licencekit.classifier import LicenceClassifier
from licencekit.config import CONFIG_FILENAME, LicenceKitConfig, load_config, write_default_config
from licencekit.detector import detect
from licencekit.errors import ConfigError, LicenceKitError, ModuleListError
from licencekit.identifiers import LicenceIdentifiers
from licencekit.logging import configure_logging, get_logger
from licencekit.modules import parse_module_list
from licencekit.overrides import load_overrides
from licencekit.report import dependencies_to_json, print_dependency_table, render_notice
from licencekit.rules import load_rules

__all__ = [
    'build_parser',
    'main',
]

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog='licencekit',
        description='Detect, validate and report the licences of third-party modules.',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging.')
    parser.add_argument('-q', '--quiet', action='store_true', help='Only log warnings and errors.')
    parser.add_argument('--json-log', action='store_true', help='Emit logs as JSON lines.')
    sub = parser.add_subparsers(dest='command', required=True)

    det = sub.add_parser('detect', help='Detect and validate dependency licences.')
    det.add_argument('--config', type=Path, help=f'Config file (default: ./{CONFIG_FILENAME} if present).')
    det.add_argument('--in', dest='input', help='Module list from "go list -m -json all"; "-" for stdin.')
    det.add_argument('--rules', type=Path, help='Rules JSON file.')
    det.add_argument('--overrides', type=Path, help='Overrides file.')
    det.add_argument('--licence-data', type=Path, help='Extra licence identifier TOML.')
    det.add_argument(
        '--include-indirect',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Report indirect dependencies too.',
    )
    det.add_argument('--threshold', type=float, help='Minimum classifier confidence (0, 1].')
    det.add_argument('--product-name', help='Product name for the NOTICE header.')
    det.add_argument('--json-out', help='Write the JSON report here; "-" for stdout.')
    det.add_argument('--notice-out', type=Path, help='Write a NOTICE file here.')
    det.add_argument('--validate', action='store_true', help='Only validate; write no report files.')

    init = sub.add_parser('init', help=f'Write a starter {CONFIG_FILENAME}.')
    init.add_argument('path', nargs='?', type=Path, default=Path(CONFIG_FILENAME))
    return parser


def _resolve_config(args: argparse.Namespace) -> LicenceKitConfig:
    """Merge the config file (if any) with command-line flags."""
    config_path: Path | None = args.config
    if config_path is None and Path(CONFIG_FILENAME).is_file():
        config_path = Path(CONFIG_FILENAME)
    config = load_config(config_path) if config_path else LicenceKitConfig()

    updates: dict[str, object] = {}
    if args.input is not None:
        updates['input'] = None if args.input == '-' else Path(args.input)
    for key in ('rules', 'overrides', 'licence_data', 'notice_out', 'product_name'):
        value = getattr(args, key)
        if value is not None:
            updates[key] = value
    if args.json_out is not None:
        updates['json_out'] = Path(args.json_out)
    if args.include_indirect is not None:
        updates['include_indirect'] = args.include_indirect
    if args.threshold is not None:
        updates['confidence_threshold'] = args.threshold
    config = replace(config, **updates)

    if config.notice_out is not None and not config.product_name:
        raise ConfigError(['--notice-out needs a product name (use --product-name)'])
    return config


def _run_detect(args: argparse.Namespace, console: Console) -> None:
    config = _resolve_config(args)
    if config.rules is None:
        raise ConfigError(['no rules file given (use --rules or licencekit.rules)'])

    identifiers = LicenceIdentifiers.load(user_toml=config.licence_data) if config.licence_data else None
    rules = load_rules(config.rules, identifiers=identifiers)
    overrides = load_overrides(config.overrides) if config.overrides else {}
    try:
        classifier = LicenceClassifier(threshold=config.confidence_threshold)
    except ValueError as exc:
        raise ConfigError([str(exc)]) from exc

    if config.input is None:
        modules = parse_module_list(sys.stdin, source='<stdin>')
    else:
        try:
            with config.input.open(encoding='utf-8') as f:
                modules = parse_module_list(f, source=str(config.input))
        except OSError as exc:
            raise ModuleListError([str(exc)], source=str(config.input)) from exc

    deps = detect(modules, classifier, rules, overrides, config.include_indirect)

    if args.validate:
        logger.info('validation_passed', direct=len(deps.direct), indirect=len(deps.indirect))
        return

    if config.json_out is not None and str(config.json_out) == '-':
        sys.stdout.write(dependencies_to_json(deps) + '\n')
    else:
        print_dependency_table(deps, console=console, include_indirect=config.include_indirect)
        if config.json_out is not None:
            config.json_out.write_text(dependencies_to_json(deps) + '\n', encoding='utf-8')
            logger.info('json_report_written', path=str(config.json_out))
    if config.notice_out is not None:
        config.notice_out.write_text(render_notice(deps, product_name=config.product_name), encoding='utf-8')
        logger.info('notice_written', path=str(config.notice_out))


def main(argv: list[str] | None = None, *, console: Console | None = None) -> int:
    """Entry point for the ``licencekit`` command.

    Args:
        argv: Arguments without the program name; ``sys.argv[1:]``
            when ``None``.
        console: Console for the report table.

    Returns:
        Process exit status.
    """
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet, json_log=args.json_log)
    err = Console(stderr=True)
    try:
        if args.command == 'init':
            write_default_config(args.path)
        else:
            _run_detect(args, console or Console())
    except LicenceKitError as exc:
        err.print(f'[bold red]error:[/] {escape(exc.message)}', markup=True, highlight=False)
        if exc.hint:
            err.print(f'  [dim]= hint: {escape(exc.hint)}[/]', markup=True, highlight=False)
        return 1
    return 0


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
