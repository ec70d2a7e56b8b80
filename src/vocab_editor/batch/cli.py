"""
Command-line interface for viewing a vocabulary and applying batch changes.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from .. import __version__
from ..config import ClientConfig, load_config
from ..editor import VocabularyEditor
from ..exceptions import ConfigError
from ..models import Word
from .executor import execute_change_request
from .parser import ParseError, load_change_request
from .schema import BatchResult, ChangeRequest, ValidationResult
from .validator import validate_change_request


def main(argv: Optional[list] = None) -> int:
    """Main entry point for vocab-batch CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _config_from_args(args)
    except ConfigError as e:
        print(f"\n  [CONFIG ERROR] {e}")
        return 1

    return args.func(args, config)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="vocab-batch",
        description="View a vocabulary and apply batch change requests",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML client configuration file",
    )
    parser.add_argument(
        "--base-url",
        type=str,
        help="Service base URL (overrides config and VOCAB_API_URL)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(title="commands", dest="command")

    # show command
    show_parser = subparsers.add_parser(
        "show",
        help="Print the merged word list of a vocabulary",
    )
    show_parser.add_argument(
        "vocab_id",
        type=int,
        help="Vocabulary ID",
    )
    show_parser.set_defaults(func=cmd_show)

    # validate command
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a change request file",
    )
    validate_parser.add_argument(
        "file",
        type=Path,
        help="YAML file containing change request",
    )
    validate_parser.add_argument(
        "--check-refs",
        action="store_true",
        help="Load the vocabulary and check that referenced words exist",
    )
    validate_parser.set_defaults(func=cmd_validate)

    # apply command
    apply_parser = subparsers.add_parser(
        "apply",
        help="Apply changes from a request file",
    )
    apply_parser.add_argument(
        "file",
        type=Path,
        help="YAML file containing change request",
    )
    apply_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Resolve targets without making changes",
    )
    apply_parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Skip confirmation prompt",
    )
    apply_parser.add_argument(
        "--vocabulary",
        type=int,
        help="Override vocabulary from file",
    )
    apply_parser.set_defaults(func=cmd_apply)

    return parser


def _config_from_args(args: argparse.Namespace) -> ClientConfig:
    config = load_config(args.config)
    if args.base_url:
        config = replace(config, base_url=args.base_url)
    return config


def _load_request(path: Path) -> Optional[ChangeRequest]:
    try:
        return load_change_request(path)
    except ParseError as e:
        print(f"\n  [PARSE ERROR] {e}")
        if e.line:
            print(f"               Line: {e.line}")
    except FileNotFoundError as e:
        print(f"\n  [ERROR] {e}")
    return None


def cmd_show(args: argparse.Namespace, config: ClientConfig) -> int:
    """Handle show command."""

    async def load() -> VocabularyEditor:
        async with VocabularyEditor(args.vocab_id, config=config) as editor:
            await editor.refresh()
            return editor

    editor = asyncio.run(load())
    view = editor.view
    title = view.title or f"Vocabulary {view.vocab_id}"
    print(f"\n{title}")
    print("-" * 60)

    if not view.words:
        print("Could not load words.")
        return 1
    for word in view.words:
        print(format_word(word))
    return 0


def cmd_validate(args: argparse.Namespace, config: ClientConfig) -> int:
    """Handle validate command."""
    print(f"\nValidating {args.file}...")

    request = _load_request(args.file)
    if request is None:
        return 1

    print(f"  Vocabulary: {request.vocabulary}")
    print(f"  Changes: {len(request.changes)}")
    if request.name:
        print(f"  Name: {request.name}")

    words = None
    if args.check_refs:

        async def load() -> list:
            async with VocabularyEditor(request.vocabulary, config=config) as editor:
                return await editor.refresh()

        words = asyncio.run(load())

    result = validate_change_request(request, words=words)

    print("\nValidation Results:")
    _print_validation_result(result)

    if result.is_valid:
        print("\nValidation passed!")
        return 0
    print(f"\nFound {result.error_count} error(s), {result.warning_count} warning(s)")
    return 1


def cmd_apply(args: argparse.Namespace, config: ClientConfig) -> int:
    """Handle apply command."""
    print(f"\nLoading {args.file}...")

    request = _load_request(args.file)
    if request is None:
        return 1

    if args.vocabulary is not None:
        request.vocabulary = args.vocabulary

    print(f"  Vocabulary: {request.vocabulary}")
    print(f"  Changes: {len(request.changes)}")
    if request.name:
        print(f"  Name: \"{request.name}\"")

    print("\nValidating...")
    validation = validate_change_request(request)

    if not validation.is_valid:
        print("\nValidation failed:")
        _print_validation_result(validation)
        print(f"\nFound {validation.error_count} error(s). Fix errors before applying.")
        return 1

    if validation.warning_count > 0:
        print("\nWarnings:")
        _print_validation_result(validation, warnings_only=True)

    if args.dry_run:
        print("\n[DRY RUN] Resolving targets...")
    elif not args.yes:
        response = input(
            f"\nApply {len(request.changes)} changes to vocabulary {request.vocabulary}? [y/N] "
        )
        if response.lower() not in ("y", "yes"):
            print("Aborted.")
            return 1

    async def run() -> BatchResult:
        async with VocabularyEditor(request.vocabulary, config=config) as editor:
            return await execute_change_request(editor, request, dry_run=args.dry_run)

    print(f"\n{'Simulating' if args.dry_run else 'Applying'} changes...")
    result = asyncio.run(run())

    _print_batch_result(result)

    return 1 if result.failure_count > 0 else 0


def format_word(word: Word) -> str:
    """Render one word as a single line: expression, meanings, difficulty."""
    if word.is_placeholder:
        return "(empty vocabulary)"
    meanings = " ".join(
        f"{d.text} ({d.part_of_speech.label if d.part_of_speech else '?'});"
        for d in word.definitions
    )
    return f"{word.expression:<20} {meanings}  [{word.level.value}]"


def _print_validation_result(
    result: ValidationResult,
    warnings_only: bool = False,
) -> None:
    """Print validation errors and warnings."""
    if not warnings_only:
        for error in result.errors:
            print(f"  [ERROR] Change #{error.index + 1} ({error.operation}): {error.message}")
            if error.field:
                print(f"          Field: {error.field}")

    for warning in result.warnings:
        print(f"  [WARN]  Change #{warning.index + 1} ({warning.operation}): {warning.message}")


def _print_batch_result(result: BatchResult) -> None:
    """Print one line per change, then the totals for the vocabulary."""
    print()
    width = len(str(result.total_count))
    for change in result.changes:
        mark = "OK" if change.success else "FAILED"
        target = f" '{change.target}'" if change.target else ""
        print(f"  [{change.index + 1:>{width}}] {change.operation}{target}: {mark}")
        if change.created_id is not None:
            print(f"        created #{change.created_id}")
        if not change.success and change.message:
            print(f"        {change.message}")

    print(f"\nVocabulary {result.vocabulary}:")
    print(
        f"  {result.success_count} applied, {result.failure_count} failed, "
        f"{result.skipped_count} skipped of {result.total_count} "
        f"in {result.duration_seconds:.2f}s"
    )


if __name__ == "__main__":
    sys.exit(main())
