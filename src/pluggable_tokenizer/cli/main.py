"""Main CLI entry point for the pluggable-tokenize command-line tool.

Splits files (or standard input) with any of the separators and prints the tokens
as JSON, CSV or plain text. A second command runs the separator benchmarks.
"""

import argparse
import csv
import io
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pluggable_tokenizer import __version__
from pluggable_tokenizer.shared.config import SeparatorKind, TokenizerConfig
from pluggable_tokenizer.shared.errors import ConfigError, ConfigValidationError
from pluggable_tokenizer.shared.logging import get_logger
from pluggable_tokenizer.tokenization import (
    EmptyTokenPolicy,
    SeparatorTokenizer,
    TokenizationResult,
)

STDIN_PATH = "-"

KIND_CHOICES = {
    "char": SeparatorKind.CHAR,
    "escaped-list": SeparatorKind.ESCAPED_LIST,
    "offset": SeparatorKind.OFFSET,
    "char-delimiters": SeparatorKind.CHAR_DELIMITERS,
}

BENCHMARK_SEPARATORS = ["char", "char_keep_empty", "escaped_list", "offset", "char_delimiters"]


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self):
        self.tokenizer_config = TokenizerConfig()
        self.output_format = "json"
        self.lines = False

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        The file holds an optional ``tokenizer`` object in ``TokenizerConfig.to_dict``
        form, plus ``output_format`` and ``lines``. A file that cannot be read or
        validated is reported on stderr and the defaults are kept.
        """
        config = cls()
        if not config_path.exists():
            print(f"Warning: Config file not found: {config_path}", file=sys.stderr)
            return config

        try:
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
            if "tokenizer" in data:
                config.tokenizer_config = TokenizerConfig.from_dict(data["tokenizer"])
            config.output_format = data.get("output_format", config.output_format)
            config.lines = bool(data.get("lines", config.lines))
        except (OSError, ValueError, ConfigError) as e:
            print(f"Warning: Could not load config file: {e}", file=sys.stderr)

        return config


def parse_offsets(value: str) -> List[int]:
    """Parse a comma separated list of field widths."""
    try:
        offsets = [int(part) for part in value.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid offset list: {value!r}")
    if not offsets or any(width < 1 for width in offsets):
        raise argparse.ArgumentTypeError("offsets must be positive integers")
    return offsets


def apply_split_arguments(base: TokenizerConfig, args: argparse.Namespace) -> TokenizerConfig:
    """Derive the tokenizer configuration for a ``split`` invocation.

    Args:
        base: Configuration loaded from file, or the defaults
        args: Parsed command-line arguments

    Returns:
        Configuration with the command-line options applied

    Raises:
        ConfigValidationError: If the combination of options is invalid
    """
    overrides: Dict[str, Any] = {}
    if args.kind:
        overrides["kind"] = KIND_CHOICES[args.kind]
    kind = overrides.get("kind", base.kind)

    # --kept/--dropped name the returnable/nonreturnable sets for char-delimiters.
    if kind is SeparatorKind.CHAR_DELIMITERS:
        kept_field, dropped_field = "char_delimiters__returnable", "char_delimiters__nonreturnable"
    else:
        kept_field, dropped_field = "char__kept_delims", "char__dropped_delims"
    if args.kept is not None:
        overrides[kept_field] = args.kept
    if args.dropped is not None:
        overrides[dropped_field] = args.dropped

    if args.keep_empty:
        overrides["char__empty_tokens"] = EmptyTokenPolicy.KEEP
    for name in ("escape", "separator", "quote"):
        value = getattr(args, name)
        if value is not None:
            overrides[f"escaped_list__{name}"] = value
    if args.offsets is not None:
        overrides["offset__offsets"] = args.offsets
    if args.no_wrap:
        overrides["offset__wrap_offsets"] = False
    if args.no_partial:
        overrides["offset__return_partial_last"] = False
    if args.return_delims:
        overrides["char_delimiters__return_delims"] = True
    if args.views:
        overrides["use_views"] = True

    return base.override(**overrides) if overrides else base


class TokenizationProcessor:
    """Core tokenization logic for CLI operations."""

    def __init__(self, config: CLIConfig):
        self.config = config
        self.tokenizer = SeparatorTokenizer(config.tokenizer_config)
        self.logger = get_logger(__name__, None, "cli_processor")

    def read_source(self, path: str) -> str:
        """Read the text of a file, or of standard input for ``-``."""
        if path == STDIN_PATH:
            return sys.stdin.read()
        return Path(path).read_text(encoding="utf-8")

    def result_to_dict(
        self,
        source: str,
        result: TokenizationResult,
        line: Optional[int] = None
    ) -> Dict[str, Any]:
        """Convert a tokenization result to a serializable record."""
        record: Dict[str, Any] = {"source": source}
        if line is not None:
            record["line"] = line
        record.update({
            "success": result.success,
            "token_count": result.token_count,
            "tokens": result.as_strings(),
            "processing_time_ms": result.performance.processing_time_ms,
            "diagnostics": [
                {
                    "severity": diag.severity.name,
                    "message": diag.message,
                    "component": diag.component,
                    "position": diag.position,
                } for diag in result.diagnostics
            ],
        })
        return record

    def process_source(self, path: str) -> List[Dict[str, Any]]:
        """Tokenize one input, as a whole or line by line."""
        try:
            text = self.read_source(path)
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error("Failed to read input", extra={"path": path}, exc_info=False)
            return [{"source": path, "success": False, "error": str(e), "tokens": []}]

        if not self.config.lines:
            return [self.result_to_dict(path, self.tokenizer.tokenize(text))]

        return [
            self.result_to_dict(path, self.tokenizer.tokenize(line_text), line=number)
            for number, line_text in enumerate(text.splitlines(), start=1)
        ]

    def process(self, paths: List[str]) -> List[Dict[str, Any]]:
        """Tokenize every input in turn."""
        results: List[Dict[str, Any]] = []
        for path in paths:
            results.extend(self.process_source(path))
        return results


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="pluggable-tokenize",
        description="Split text into tokens with configurable separator strategies"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Split command
    split_parser = subparsers.add_parser("split", help="Tokenize files or standard input")
    split_parser.add_argument(
        "paths",
        nargs="+",
        help="Input files, or - for standard input"
    )
    split_parser.add_argument(
        "--kind", "-k",
        choices=sorted(KIND_CHOICES),
        help="Separator strategy (default: char-delimiters or the config file)"
    )
    split_parser.add_argument(
        "--dropped",
        help="Delimiters that are skipped (nonreturnable for char-delimiters)"
    )
    split_parser.add_argument(
        "--kept",
        help="Delimiters returned as tokens (returnable for char-delimiters)"
    )
    split_parser.add_argument(
        "--keep-empty",
        action="store_true",
        help="Report empty tokens between adjacent delimiters"
    )
    split_parser.add_argument("--escape", help="Escape characters for escaped-list")
    split_parser.add_argument("--separator", help="Field separators for escaped-list")
    split_parser.add_argument("--quote", help="Quote characters for escaped-list")
    split_parser.add_argument(
        "--offsets",
        type=parse_offsets,
        help="Comma separated field widths for offset, e.g. 2,2,4"
    )
    split_parser.add_argument(
        "--no-wrap",
        action="store_true",
        help="Stop after the last offset instead of starting over"
    )
    split_parser.add_argument(
        "--no-partial",
        action="store_true",
        help="Drop a final field shorter than its width"
    )
    split_parser.add_argument(
        "--return-delims",
        action="store_true",
        help="Report returnable delimiters as tokens (char-delimiters)"
    )
    split_parser.add_argument(
        "--views",
        action="store_true",
        help="Build tokens as views into the input instead of copies"
    )
    split_parser.add_argument(
        "--lines", "-l",
        action="store_true",
        help="Tokenize each input line separately"
    )
    split_parser.add_argument(
        "--format", "-f",
        choices=["json", "csv", "text"],
        help="Output format (default: json)"
    )
    split_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    split_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )

    # Benchmark command
    benchmark_parser = subparsers.add_parser("benchmark", help="Benchmark the separators")
    benchmark_parser.add_argument(
        "--runs",
        type=int,
        default=10,
        help="Benchmark runs per test case (default: 10)"
    )
    benchmark_parser.add_argument(
        "--warmup",
        type=int,
        default=3,
        help="Warmup runs per test case (default: 3)"
    )
    benchmark_parser.add_argument(
        "--size",
        type=int,
        default=1000,
        help="Records in the generated inputs (default: 1000)"
    )
    benchmark_parser.add_argument(
        "--separators",
        nargs="+",
        choices=BENCHMARK_SEPARATORS,
        help="Separators to benchmark (default: all)"
    )
    benchmark_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def _location(result: Dict[str, Any]) -> str:
    if "line" in result:
        return f"{result['source']}:{result['line']}"
    return result["source"]


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format tokenization results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2, ensure_ascii=False)

    elif format_type == "csv":
        if not results:
            return ""

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(["source", "line", "index", "token"])
        for result in results:
            for index, token in enumerate(result.get("tokens", [])):
                writer.writerow([result["source"], result.get("line", ""), index, token])
        return buffer.getvalue().rstrip("\n")

    elif format_type == "text":
        if not results:
            return "No results to display."

        lines = []
        successful = sum(1 for r in results if r.get("success", False))

        lines.append(f"Tokenized {len(results)} inputs, {successful} successful")
        lines.append("-" * 60)

        for result in results:
            status = "✓" if result.get("success", False) else "✗"
            tokens = result.get("tokens", [])
            lines.append(f"{status} {_location(result)} ({len(tokens)} tokens)")
            for token in tokens:
                lines.append(f"   {token!r}")

            if "error" in result:
                lines.append(f"   Error: {result['error']}")
            errors = [
                d for d in result.get("diagnostics", [])
                if d.get("severity") in ["ERROR", "CRITICAL"]
            ]
            for error in errors:
                position = error.get("position")
                where = f" at {position}" if position is not None else ""
                lines.append(f"   Error{where}: {error.get('message', '')}")

            lines.append("")

        return "\n".join(lines)

    else:
        return json.dumps(results, indent=2, ensure_ascii=False)


def format_benchmark_report(report: Dict[str, Any], format_type: str) -> str:
    """Format a benchmark report for output."""
    if format_type == "json":
        return json.dumps(report, indent=2)

    lines = [f"{report['suite_name']}: {report['total_results']} results", "-" * 60]
    for test_case, by_separator in report["detailed_results"].items():
        lines.append(test_case)
        for separator, metrics in by_separator.items():
            if metrics["success"]:
                lines.append(
                    f"   {separator:<16} {metrics['processing_time_ms']:8.2f}ms "
                    f"{metrics['characters_per_second']:12.0f} chars/s"
                )
            else:
                lines.append(f"   {separator:<16} failed: {metrics['error']}")
    return "\n".join(lines)


def cmd_split(args: argparse.Namespace) -> int:
    """Handle split command."""
    config = CLIConfig.from_file(args.config) if args.config else CLIConfig()

    try:
        config.tokenizer_config = apply_split_arguments(config.tokenizer_config, args)
    except ConfigValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    if args.format:
        config.output_format = args.format
    if args.lines:
        config.lines = True

    processor = TokenizationProcessor(config)
    results = processor.process(args.paths)

    formatted_output = format_results(results, config.output_format)

    if args.output:
        try:
            args.output.write_text(formatted_output, encoding="utf-8")
            print(f"Results written to {args.output}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(formatted_output)

    if not results:
        return 1

    successful = sum(1 for r in results if r.get("success", False))
    return 0 if successful == len(results) else 1


def cmd_benchmark(args: argparse.Namespace) -> int:
    """Handle benchmark command."""
    # psutil is only needed here
    from pluggable_tokenizer.tokenization.benchmarks import SeparatorBenchmark

    try:
        benchmark = SeparatorBenchmark(
            warmup_runs=args.warmup,
            benchmark_runs=args.runs,
            size=args.size,
        )
        suite = benchmark.run_benchmark(args.separators)
    except ValueError as e:
        print(f"Invalid benchmark options: {e}", file=sys.stderr)
        return 1

    report = suite.generate_report()
    print(format_benchmark_report(report, args.format))
    return 0 if all(r.success for r in suite.results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    try:
        if args.command == "split":
            return cmd_split(args)
        elif args.command == "benchmark":
            return cmd_benchmark(args)
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
