#!/usr/bin/env python3
"""Run a rule set against a dataset from the command line.

Usage:
    rules-engine --rules rules.json --dataset dataset.json --modify
    rules-engine --rules rules.json --dataset dataset.json --report --json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import config
from .compiler import load_rule_set
from .engine import RulesEngine
from .errors import ErrorConverter
from .types import EngineOptions


def load_dataset(path: Path) -> Dict[str, Any]:
    """Load dataset from JSON."""
    with open(path) as f:
        return json.load(f)


def build_parser() -> argparse.ArgumentParser:
    defaults = config.options_from_env()

    parser = argparse.ArgumentParser(
        prog="rules-engine",
        description="Evaluate a JSON rule set against a JSON dataset"
    )
    parser.add_argument(
        "--rules",
        type=Path,
        required=True,
        help="Path to rule set JSON file"
    )
    parser.add_argument(
        "--dataset",
        type=Path,
        required=True,
        help="Path to dataset JSON file"
    )
    parser.add_argument(
        "--modify",
        action="store_true",
        default=defaults.modify_dataset,
        help="Apply every rule's actions to the dataset and print it"
    )
    parser.add_argument(
        "--case-sensitive",
        action="store_true",
        default=defaults.case_sensitive,
        help="Compare plain values by exact type and value"
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="Print the outcome of every rule without modifying the dataset"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON format"
    )
    return parser


def _format_report(results: List[Dict[str, Any]]) -> str:
    lines = []
    for result in results:
        status = "MATCH" if result["matched"] else "NO MATCH"
        lines.append(f"[{status}] {result['rule_name']}")
        lines.append(f"  {result['explanation_text']}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        rules = load_rule_set(args.rules)
        dataset = load_dataset(args.dataset)
        engine = RulesEngine(
            rules,
            EngineOptions(case_sensitive=args.case_sensitive, modify_dataset=args.modify)
        )

        if args.report:
            output: Any = [result.model_dump() for result in engine.report(dataset)]
            text = _format_report(output)
        elif args.modify:
            engine.run(dataset)
            output = dataset
            text = json.dumps(dataset, indent=2)
        else:
            output = engine.run(dataset)
            text = json.dumps(output, indent=2)
    except Exception as e:
        error = ErrorConverter.from_exception(e)
        print(json.dumps(error.to_dict(), indent=2, default=repr), file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(output, indent=2))
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
