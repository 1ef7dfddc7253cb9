#!/usr/bin/env python3
"""
Check that docs/test_scenarios_business_summary.md covers every scenario in
tests/test_integration_scenarios.py, and nothing more.

Run: python scripts/validate_test_docs_sync.py
"""

import re
import sys
from pathlib import Path


def extract_scenarios(test_file: Path) -> dict[str, list[str]]:
    """Test class name -> its test method names."""
    scenarios = {}
    current = None

    for line in test_file.read_text().splitlines():
        class_match = re.match(r'^class (Test\w+)', line)
        if class_match:
            current = class_match.group(1)
            scenarios[current] = []
        elif current:
            method_match = re.match(r'^\s+def (test_\w+)', line)
            if method_match:
                scenarios[current].append(method_match.group(1))

    return scenarios


def extract_documented(doc_file: Path) -> tuple[set[str], set[str]]:
    text = doc_file.read_text()
    classes = set(re.findall(r'\*\*Test Class\*\*:\s*`(Test\w+)`', text))
    methods = set(re.findall(r'\*\*Test Method\*\*:\s*`(test_\w+)`', text))
    return classes, methods


def main():
    project_root = Path(__file__).parent.parent
    test_file = project_root / 'tests' / 'test_integration_scenarios.py'
    doc_file = project_root / 'docs' / 'test_scenarios_business_summary.md'

    for path in (test_file, doc_file):
        if not path.exists():
            print(f"❌ Not found: {path}")
            sys.exit(1)

    scenarios = extract_scenarios(test_file)
    doc_classes, doc_methods = extract_documented(doc_file)
    methods = {m for names in scenarios.values() for m in names}

    errors = [f"Missing class documentation: {c}" for c in set(scenarios) - doc_classes]
    errors += [f"Missing method documentation: {m}" for m in methods - doc_methods]
    warnings = [f"Documented class no longer exists: {c}" for c in doc_classes - set(scenarios)]
    warnings += [f"Documented method no longer exists: {m}" for m in doc_methods - methods]

    print(f"Scenario classes: {len(scenarios)}  methods: {len(methods)}")
    print(f"Documented classes: {len(doc_classes)}  methods: {len(doc_methods)}")

    for error in sorted(errors):
        print(f"❌ {error}")
    for warning in sorted(warnings):
        print(f"⚠️  {warning}")

    if not errors and not warnings:
        print("✅ Scenario summary is in sync")

    sys.exit(1 if errors else 0)


if __name__ == '__main__':
    main()
