"""Embed a binary file as a C byte array with accessor functions."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

_HEADER = (
    "#ifdef __cplusplus\n"
    'extern "C"\n'
    "{\n"
    "#endif\n"
    "static unsigned char logo_res[] = {\n"
    "    "
)

_FOOTER = (
    "\n};\n"
    "unsigned long getlogodatasize() {\n"
    "    return sizeof(logo_res);\n"
    "}\n"
    "\n"
    "char* getlogodata() {\n"
    "    return (char*)logo_res;\n"
    "}\n"
    "#ifdef __cplusplus\n"
    "}\n"
    "#endif\n"
    "\n"
)

_LINE_BREAK_COLUMN = 16


def render_c_array(data: bytes) -> str:
    """Render ``data`` as the text of a C source file defining ``logo_res``.

    The first line holds seventeen values and every later line sixteen.
    """
    parts = [_HEADER]
    column = 0
    for byte in data:
        parts.append(f"{byte},")
        if column == _LINE_BREAK_COLUMN:
            parts.append("\n    ")
            column = 0
        column += 1
    parts.append(_FOOTER)
    return "".join(parts)


def convert(source: str | Path = "logo.jpg", target: str | Path = "logo.cpp") -> None:
    """Read ``source`` as bytes and write its C rendering to ``target``."""
    data = Path(source).read_bytes()
    Path(target).write_text(render_c_array(data), encoding="ascii", newline="\n")


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Embed a file as a C byte array.")
    parser.add_argument("source", nargs="?", default="logo.jpg")
    parser.add_argument("target", nargs="?", default="logo.cpp")
    args = parser.parse_args(argv)
    try:
        convert(args.source, args.target)
    except OSError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    return 0