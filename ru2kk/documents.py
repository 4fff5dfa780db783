"""Document reading, line splitting and writing utilities."""

from __future__ import annotations

import pathlib
from typing import Iterable, List

from .errors import DocumentIOError, OverwriteRefusedError
from .structures import TextUnit, TranslationResult

LINE_SEPARATOR = "\n"
OUTPUT_LANGUAGE_TAG = "kk"


def split_document(content: str) -> List[TextUnit]:
    """Split content into ordered line units.

    Only ``\\n`` separates units, so a ``\\r`` from CRLF endings stays at the
    end of its line as trailing whitespace. A trailing newline produces a
    final empty unit, which keeps ``join_document`` an exact inverse.
    """

    return [
        TextUnit(index=index, text=line)
        for index, line in enumerate(content.split(LINE_SEPARATOR))
    ]


def join_document(results: Iterable[TranslationResult | str]) -> str:
    return LINE_SEPARATOR.join(
        item.text if isinstance(item, TranslationResult) else item
        for item in results
    )


def read_document(path: pathlib.Path) -> str:
    try:
        with path.open("r", encoding="utf-8", newline="") as handle:
            return handle.read()
    except UnicodeDecodeError as exc:
        raise DocumentIOError(f"Input file {path} is not valid UTF-8 text: {exc}") from exc
    except OSError as exc:
        raise DocumentIOError(f"Could not read input file {path}: {exc}") from exc


def write_document(path: pathlib.Path, content: str) -> None:
    try:
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as exc:
        raise DocumentIOError(f"Could not write output file {path}: {exc}") from exc


def derive_output_path(
    input_path: pathlib.Path,
    language: str = OUTPUT_LANGUAGE_TAG,
) -> pathlib.Path:
    """Insert the language tag before the suffix, e.g. index.html -> index.kk.html."""

    return input_path.with_name(f"{input_path.stem}.{language}{input_path.suffix}")


def validate_paths(input_path: pathlib.Path, output_path: pathlib.Path) -> None:
    """Validate the input/output path combination before any work starts."""

    if not input_path.exists():
        raise DocumentIOError(f"Input file not found: {input_path}")
    if not input_path.is_file():
        raise DocumentIOError(f"Input path must be a file: {input_path}")
    if input_path.resolve() == output_path.resolve():
        raise OverwriteRefusedError(
            "The output path matches the input document. Refusing to overwrite the source file."
        )
