#!/usr/bin/env python3
"""
socgen - ChipFlow SoC design.py generator.

Usage:
    python scripts/socgen.py generate design.json > design/design.py
    python scripts/socgen.py generate design.json --output design/design.py --progress
    python scripts/socgen.py -v generate design.json -o design/design.py
    python scripts/socgen.py generate design.json -v
    python scripts/socgen.py generate design.json --settings soc.yml --json
    python scripts/socgen.py validate design.json
    python scripts/socgen.py classify design.json

Subcommands:
    generate    Generate design.py from a configurator JSON document
    validate    Report semantic issues in a configuration document
    classify    Show how each selected block is classified
"""
import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from socgen.generator.soc_generator import SoCDesignGenerator
from socgen.model import BlockCategory, GeneratorSettings
from socgen.model.design import group_blocks
from socgen.model.validators import DesignValidator
from socgen.parser import DesignConfigParser, ParseError, load_settings


def log(msg: str, use_progress: bool, use_json: bool):
    """Output progress message if enabled. Progress goes to stderr."""
    if use_progress and use_json:
        print(f"PROGRESS: {msg}", file=sys.stderr, flush=True)
    elif use_progress:
        print(msg, file=sys.stderr)


def fail(e: Exception, use_json: bool, verbose: bool = False):
    """Report an error and exit with status 1."""
    if use_json:
        result = {"success": False, "error": str(e)}
        if isinstance(e, ParseError):
            result.update(line=e.line, column=e.column)
        print(json.dumps(result))
    else:
        print(f"Error: {e}", file=sys.stderr)
        if verbose:
            import traceback

            traceback.print_exc()
    sys.exit(1)


def cmd_generate(args):
    """Generate design.py from a configuration document."""
    try:
        log("Parsing design configuration...", args.progress, args.json)
        design = DesignConfigParser().parse_file(args.input)

        settings = load_settings(args.settings) if args.settings else GeneratorSettings()

        log("Generating design.py...", args.progress, args.json)
        generator = SoCDesignGenerator(settings)
        if args.output:
            written = generator.write_file(design, args.output)
            log(f"  Written: {written}", args.progress, args.json)
        else:
            content = generator.generate(design)
            if not args.json:
                sys.stdout.write(content)

        log("Generation complete!", args.progress, args.json)

        if args.json:
            result = {"success": True, "blocks": len(design.selected_blocks)}
            if args.output:
                result["output"] = str(args.output)
            else:
                result["content"] = content
            print(json.dumps(result))

    except Exception as e:
        fail(e, args.json, args.verbose)


def cmd_validate(args):
    """Validate a configuration document and print findings."""
    try:
        design = DesignConfigParser().parse_file(args.input)
    except Exception as e:
        fail(e, args.json, args.verbose)
        return

    validator = DesignValidator(design)
    ok = validator.validate_all()

    if args.json:
        print(
            json.dumps(
                {
                    "success": ok,
                    "issues": [
                        {
                            "severity": issue.severity,
                            "message": issue.message,
                            "location": issue.location,
                            "suggestion": issue.suggestion,
                        }
                        for issue in validator.issues
                    ],
                }
            )
        )
    else:
        for issue in validator.issues:
            print(f"{issue.severity.upper():8} {issue.location:24} {issue.message}")
            if issue.suggestion:
                print(f"{'':8} {'':24} -> {issue.suggestion}")
        status = "OK" if ok else "FAILED"
        print(
            f"\n{status}: {len(validator.errors)} error(s), "
            f"{len(validator.warnings)} warning(s)"
        )

    if not ok:
        sys.exit(1)


def cmd_classify(args):
    """Print the kind and category of each selected block."""
    try:
        design = DesignConfigParser().parse_file(args.input)
    except Exception as e:
        fail(e, args.json, args.verbose)
        return

    groups = group_blocks(design.selected_blocks)
    rows = [
        {
            "id": block.id,
            "kind": block.kind.value,
            "category": block.category.value,
            "count": block.count,
            "active": block.category != BlockCategory.PROCESSOR or block is groups.cpu,
        }
        for block in design.selected_blocks
    ]

    if args.json:
        print(json.dumps({"success": True, "blocks": rows}))
        return

    if not rows:
        print("No blocks selected")
        return
    print(f"\n{'ID':24} {'KIND':10} {'CATEGORY':10} COUNT")
    for row in rows:
        marker = "" if row["active"] else "  (ignored)"
        print(f"{row['id']:24} {row['kind']:10} {row['category']:10} {row['count']}{marker}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="socgen", description="ChipFlow SoC design.py generator"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # -v is accepted after the subcommand too; SUPPRESS keeps a top-level -v
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--verbose", "-v", action="store_true", default=argparse.SUPPRESS,
        help="Enable debug logging",
    )

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate", help="Generate design.py from design JSON", parents=[common]
    )
    gen_parser.add_argument("input", help="Design configuration JSON (or YAML) file")
    gen_parser.add_argument("--output", "-o", help="Output file (default: stdout)")
    gen_parser.add_argument("--settings", "-s", help="Generator settings YAML file")
    gen_parser.add_argument(
        "--json", action="store_true", help="JSON output (for editor integration)"
    )
    gen_parser.add_argument("--progress", action="store_true", help="Enable progress output")
    gen_parser.set_defaults(func=cmd_generate)

    # validate subcommand
    val_parser = subparsers.add_parser(
        "validate", help="Validate a design configuration", parents=[common]
    )
    val_parser.add_argument("input", help="Design configuration JSON (or YAML) file")
    val_parser.add_argument("--json", action="store_true", help="JSON output")
    val_parser.set_defaults(func=cmd_validate)

    # classify subcommand
    cls_parser = subparsers.add_parser(
        "classify", help="Show block classification", parents=[common]
    )
    cls_parser.add_argument("input", help="Design configuration JSON (or YAML) file")
    cls_parser.add_argument("--json", action="store_true", help="JSON output")
    cls_parser.set_defaults(func=cmd_classify)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    args.func(args)


if __name__ == "__main__":
    main()
