#!/usr/bin/env python3
"""
Lint committed feature files.

Checks that tags are lowerCamelCase and that every Scenario Outline
placeholder has an Examples column.

Exit status: 0 clean, 1 violations found, 2 features directory missing.

Usage:
    python scripts/lint_gherkin.py
    python scripts/lint_gherkin.py --features-dir src/features
"""
import sys
from typing import List, Optional

from _shared import create_base_parser, load_app_config

from core.services.linting import GherkinLinter


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_base_parser('Lint Gherkin feature files')
    parser.add_argument('--features-dir', default=None, help='Feature file directory (default: FEATURES_DIR)')
    args = parser.parse_args(argv)

    config = load_app_config(args)
    features_dir = args.features_dir or config.paths.features_dir

    try:
        report = GherkinLinter().lint_directory(features_dir)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    for violation in report.violations:
        print(violation)

    if report.ok:
        print(f"All {report.files_checked} feature files passed linting.")
    else:
        print(
            f"\nLinting failed: {report.violation_count} violations "
            f"in {report.files_checked} feature files.",
            file=sys.stderr
        )
    return report.exit_code


if __name__ == '__main__':
    sys.exit(main())
