import argparse
import sys
from pathlib import Path
from typing import Optional

from docpatch.cli.rich_display import (
    configure_logging,
    console,
    print_document_panel,
    print_error_panel,
    print_result_panel,
    print_start_panel,
)
from docpatch.driver import PatchResult
from docpatch.errors import PatchError
from docpatch.io import patch_json_file, patch_xml_file
from docpatch.settings import get_settings


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="docpatch",
        description="Apply add/remove/replace patches to JSON and XML documents.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Apply a JSON patch with the default file names
  docpatch json

  # Apply an XML patch to explicit files
  docpatch xml --input user.xml --patch patch.xml --output user_patched.xml

  # Apply both default patches
  docpatch both
""",
    )

    parser.add_argument(
        "kind",
        choices=["json", "xml", "both"],
        help="Which patch to apply",
    )
    parser.add_argument(
        "--input", "-i", type=Path, help="Document to patch (json/xml only)"
    )
    parser.add_argument(
        "--patch", "-p", type=Path, help="Patch file (json/xml only)"
    )
    parser.add_argument(
        "--output", "-o", type=Path, help="Where to write the patched document"
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Print the patched document",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Silent mode (errors only)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every applied operation",
    )

    return parser


def _default_paths(kind: str) -> tuple[Path, Path, Path]:
    settings = get_settings()
    if kind == "json":
        return (
            Path(settings.JSON_INPUT_PATH),
            Path(settings.JSON_PATCH_PATH),
            Path(settings.JSON_OUTPUT_PATH),
        )
    return (
        Path(settings.XML_INPUT_PATH),
        Path(settings.XML_PATCH_PATH),
        Path(settings.XML_OUTPUT_PATH),
    )


def _run_one(kind: str, args: argparse.Namespace, use_overrides: bool) -> bool:
    """Run one patch and report it. Return True on success."""
    input_path, patch_path, output_path = _default_paths(kind)
    if use_overrides:
        input_path = args.input or input_path
        patch_path = args.patch or patch_path
        output_path = args.output or output_path

    for path in (input_path, patch_path):
        if not path.exists():
            print(f"Error: File not found: {path}", file=sys.stderr)
            return False

    if not args.quiet:
        print_start_panel(kind, str(input_path), str(patch_path))

    patch_file = patch_json_file if kind == "json" else patch_xml_file
    try:
        result: PatchResult = patch_file(input_path, patch_path, output_path)
    except PatchError as e:
        _report_error(args, str(e), e)
        return False
    except OSError as e:
        _report_error(args, f"Cannot access file: {e}", None)
        return False

    if not result.ok:
        _report_error(args, str(result.error), result.error)
        return False

    if not args.quiet:
        print_result_panel(kind, result.applied, str(output_path))
    if args.show:
        print_document_panel(output_path.read_bytes(), kind)
    return True


def _report_error(
    args: argparse.Namespace, message: str, error: Optional[PatchError]
) -> None:
    if args.quiet:
        print(f"Error: {message}", file=sys.stderr)
    else:
        print_error_panel(message, error)


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point of the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else get_settings().LOG_LEVEL)

    if args.kind == "both":
        if args.input or args.patch or args.output:
            parser.error("--input/--patch/--output only apply to json or xml")
        kinds = ["json", "xml"]
    else:
        kinds = [args.kind]

    for kind in kinds:
        if not _run_one(kind, args, use_overrides=args.kind != "both"):
            sys.exit(1)
    if not args.quiet:
        console.print("[dim]Done.[/dim]")
