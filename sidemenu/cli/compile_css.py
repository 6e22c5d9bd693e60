from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from ..config import get_settings
from ..exceptions import MalformedImportError
from ..renderer.markup import render_menu
from ..renderer.stylesheet import StyleCompiler
from ..schemas.settings_tree import SettingsTree
from ..services.transfer import import_payload


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compile a floating side menu export into CSS.")
    parser.add_argument("path", help="Path to an exported menu JSON file")
    parser.add_argument("--out", help="Write the stylesheet to this file instead of stdout")
    parser.add_argument(
        "--markup",
        action="store_true",
        help="Also emit the menu HTML after the stylesheet",
    )
    parser.add_argument("--site-url", help="Origin used to keep image icons (defaults to SITE_URL)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    source = Path(args.path)
    if not source.exists() or not source.is_file():
        raise SystemExit(f"File not found: {source}")

    try:
        result = import_payload(
            source.read_text(encoding="utf-8"),
            current_settings=SettingsTree.defaults(),
            current_items=[],
            site_url=args.site_url or get_settings().site_url,
        )
    except MalformedImportError as exc:
        print(f"error: {exc.with_trace()}", file=sys.stderr)
        return 1

    for warning in result.warnings:
        print(f"warning: {warning}", file=sys.stderr)

    output = StyleCompiler().compile(result.settings, result.items)
    if args.markup:
        output = f"{output}\n{render_menu(result.settings, result.items)}\n"

    if args.out:
        Path(args.out).write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
