"""Command line interface for the ru2kk translator."""

from __future__ import annotations

import argparse
import dataclasses
import pathlib
import sys
from typing import Iterable, Optional

from .configuration import Ru2kkConfig, get_settings
from .documents import derive_output_path, validate_paths
from .errors import Ru2kkError, TranslationProviderConfigurationError
from .translator import TranslationRunner, TranslationSummary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ru2kk",
        description=(
            "Translate the Russian text in a document into Kazakh, line by line, "
            "while preserving layout and whitespace."
        ),
    )
    parser.add_argument(
        "input_file",
        nargs="?",
        help="Document to translate (default: RU2KK_INPUT or index.html).",
    )
    parser.add_argument(
        "output_file",
        nargs="?",
        help="Where to write the result (default: input name with a .kk tag).",
    )
    parser.add_argument(
        "-c",
        "--concurrency",
        type=int,
        help="Maximum number of translation requests in flight (default: 4).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds to wait for each translation request (default: 20).",
    )
    parser.add_argument(
        "-p",
        "--provider",
        help="Translation provider identifier (default: google).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress information.",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a report of translated and untouched lines.",
    )
    parser.add_argument(
        "--debug-provider",
        action="store_true",
        help="Log provider requests and responses to stderr for troubleshooting.",
    )
    return parser


def execute_translation(
    *,
    settings: Ru2kkConfig,
    input_file: str | None,
    output_file: str | None,
    concurrency: int | None,
    timeout: float | None,
    provider: str | None,
    verbose: bool,
    provider_debug: bool,
) -> tuple[int, TranslationSummary | None, str | None]:
    """Execute a translation run and return the exit code, summary, and message."""

    options = settings.pipeline_options()
    if concurrency is not None:
        if concurrency < 1:
            return 1, None, "Concurrency must be at least 1."
        options = dataclasses.replace(options, concurrency=concurrency)
    if timeout is not None:
        if timeout <= 0:
            return 1, None, "Timeout must be a positive number of seconds."
        options = dataclasses.replace(options, timeout_seconds=timeout)

    input_path = pathlib.Path(input_file or settings.RU2KK_INPUT).expanduser().resolve()
    output_value = output_file or settings.RU2KK_OUTPUT
    output_path = (
        pathlib.Path(output_value).expanduser().resolve()
        if output_value
        else derive_output_path(input_path, options.target_language)
    )

    try:
        validate_paths(input_path, output_path)
    except Ru2kkError as exc:
        return 1, None, str(exc)

    runner = TranslationRunner(
        input_path=input_path,
        output_path=output_path,
        options=options,
        provider_name=provider or settings.RU2KK_PROVIDER,
        verbose=verbose,
        provider_debug=provider_debug,
    )

    try:
        summary = runner.run()
    except Ru2kkError as exc:
        return 1, None, str(exc)
    except KeyboardInterrupt:
        return 2, None, "Translation interrupted by user."
    except Exception as exc:  # pragma: no cover - unexpected failure
        return 1, None, f"{exc!r}"

    return 0, summary, None


def print_summary(summary: TranslationSummary) -> None:
    """Output a friendly report once processing completes."""

    print("\nTranslation complete.")
    print(f"  Input file:      {summary.input_path}")
    print(f"  Output file:     {summary.output_path}")
    print(
        "  Lines:           "
        f"{summary.translated_units} translated / {summary.total_units} total"
    )
    print(f"  Kept original:   {summary.fallback_units} (translation unavailable)")
    print(f"  Left untouched:  {summary.passthrough_units}")
    print(
        f"  Provider:        {summary.provider_name} "
        f"({summary.source_language} -> {summary.target_language}, "
        f"{summary.concurrency} concurrent)"
    )
    print(f"  Elapsed time:    {summary.elapsed_seconds:.2f} seconds")


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        settings = get_settings()
    except TranslationProviderConfigurationError as exc:
        print(f"Translation failed: {exc}", file=sys.stderr)
        return 1

    exit_code, summary, message = execute_translation(
        settings=settings,
        input_file=args.input_file,
        output_file=args.output_file,
        concurrency=args.concurrency,
        timeout=args.timeout,
        provider=args.provider,
        verbose=args.verbose,
        provider_debug=bool(args.debug_provider or settings.RU2KK_DEBUG_PROVIDER),
    )

    if message:
        print(f"Translation failed: {message}", file=sys.stderr)
    if summary:
        print(f"Translated file written to: {summary.output_path}")
        if args.summary or args.verbose:
            print_summary(summary)
    return exit_code


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
