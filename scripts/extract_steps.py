#!/usr/bin/env python3
"""
Extract existing step definitions into the knowledge base.

Scans the step-definition directory and records every Given/When/Then
pattern that is not in the knowledge base yet. Running it again over
unchanged files writes nothing.

Usage:
    python scripts/extract_steps.py
    python scripts/extract_steps.py --steps-dir src/steps --kb src/support/ai/knowledgeBase.json
"""
import sys
from typing import List, Optional

from _shared import create_base_parser, load_app_config

from core.domain.errors import KnowledgeBaseConflict
from core.services.knowledge_base import KnowledgeBase
from core.services.steps import StepExtractor
from infrastructure.storage import JsonKnowledgeBaseStore


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_base_parser('Extract existing step definitions into the knowledge base')
    parser.add_argument('--steps-dir', default=None, help='Step definition directory (default: STEPS_DIR)')
    parser.add_argument('--kb', default=None, help='Knowledge base JSON file (default: KNOWLEDGE_BASE_PATH)')
    args = parser.parse_args(argv)

    config = load_app_config(args)
    steps_dir = args.steps_dir or config.paths.steps_dir
    kb_path = args.kb or config.paths.knowledge_base_path

    knowledge_base = KnowledgeBase(JsonKnowledgeBaseStore(kb_path))
    extractor = StepExtractor(knowledge_base, file_glob=config.paths.step_file_glob)

    print(f"Scanning {steps_dir} ...")
    try:
        result = extractor.extract(steps_dir)
    except KnowledgeBaseConflict as e:
        print(f"Error: {e}")
        return 1

    if result.directory_missing:
        print(f"Steps directory not found: {steps_dir}. Nothing extracted.")
        return 0

    print(f"  Files scanned: {result.files_scanned}")
    print(f"  Steps found:   {len(result.declarations)}")
    print(f"  New steps:     {len(result.inserted)}")
    for pattern in result.inserted:
        print(f"    + {pattern}")
    if not result.inserted:
        print("Knowledge base already up to date.")
    else:
        print(f"Knowledge base updated: {kb_path}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
