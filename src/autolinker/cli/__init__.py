"""Command-line interface for the autolinker library.

This module provides a CLI tool that reads a document, runs the auto-link
normalization engine on it to convergence, and writes the result as native
JSON, Slate JSON, HTML or Markdown.

Configuration
-------------
Engine and rendering options are read from ``.autolinker.toml``,
``.autolinker.yaml``, ``.autolinker.yml``, ``.autolinker.json`` or a
``[tool.autolinker]`` table in pyproject.toml, searched from the working
directory upwards and then in the home directory. ``AUTOLINKER_CONFIG`` or
``--config`` name a file explicitly.

Exit codes
----------
0 success, 1 invariant violations, 2 validation or configuration error,
3 input or document error, 4 normalization did not converge.

Examples
--------
Linkify plain text to HTML::

    $ echo "Visit https://a.com for info" | autolinker --to html

Convert a Slate value and show what changed::

    $ autolinker value.json --from slate --to slate --report

Check a document without changing it::

    $ autolinker document.json --from json --check

"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional, TextIO

from autolinker import __version__
from autolinker.ast.builder import document_from_text
from autolinker.ast.nodes import Document
from autolinker.ast.serialization import ast_to_json, ast_to_slate, json_to_ast, slate_to_ast
from autolinker.ast.visitors import check_invariants
from autolinker.cli.config import load_config_with_priority, options_from_config
from autolinker.constants import (
    CONFIG_ENV_VAR,
    DEFAULT_JSON_INDENT,
    EXIT_CONVERGENCE_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_INVARIANT_VIOLATION,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
)
from autolinker.exceptions import ConvergenceError, DocumentError, TreeError, ValidationError
from autolinker.linkify.engine import Rewrite, linkify
from autolinker.logging_utils import configure_logging
from autolinker.options import HtmlRendererOptions, NormalizeOptions
from autolinker.renderers.html import HtmlRenderer
from autolinker.renderers.markdown import MarkdownRenderer

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``autolinker`` command."""
    parser = argparse.ArgumentParser(
        prog="autolinker",
        description="Detect URLs in rich-text documents and keep them wrapped in auto-links.",
    )
    parser.add_argument("input", nargs="?", default="-", help="Input file, or '-' for stdin (default)")
    parser.add_argument(
        "--from",
        dest="input_format",
        choices=["auto", "text", "json", "slate"],
        default="auto",
        help="Input format; 'auto' picks slate for a JSON list, json for a JSON object, text otherwise",
    )
    parser.add_argument(
        "--to",
        dest="output_format",
        choices=["json", "slate", "html", "markdown"],
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument("--out", "-o", help="Output file (default: stdout)")
    parser.add_argument("--config", help="Configuration file (overrides discovery and AUTOLINKER_CONFIG)")
    parser.add_argument("--no-config", action="store_true", help="Ignore configuration files")
    parser.add_argument(
        "--iteration-factor",
        type=int,
        help=NormalizeOptions.__dataclass_fields__["iteration_factor"].metadata["help"],
    )
    parser.add_argument("--check", action="store_true", help="Only report invariant violations in the input")
    parser.add_argument("--report", action="store_true", help="Print the applied rewrites as a table on stderr")
    parser.add_argument("--rich", action="store_true", help="Use rich formatting for log output")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Shortcut for --log-level DEBUG")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")
    parser.add_argument("--log-file", help="Also write log records to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Set up logging level based on command-line arguments.

    Parameters
    ----------
    parsed_args : argparse.Namespace
        Parsed command-line arguments

    """
    # --trace takes highest precedence, then --verbose, then --log-level
    if parsed_args.trace:
        log_level = logging.DEBUG
    elif parsed_args.verbose and parsed_args.log_level == "WARNING":
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, parsed_args.log_level.upper())

    configure_logging(
        log_level,
        log_file=parsed_args.log_file,
        trace_mode=parsed_args.trace,
        use_rich=parsed_args.rich,
    )


def _load_options(parsed_args: argparse.Namespace) -> tuple[NormalizeOptions, HtmlRendererOptions]:
    """Resolve engine and renderer options from config files and flags.

    Raises
    ------
    argparse.ArgumentTypeError
        If a configuration file cannot be loaded
    ValidationError
        If the configuration or a flag holds an invalid value

    """
    config: dict = {}
    if not parsed_args.no_config:
        config = load_config_with_priority(parsed_args.config, os.environ.get(CONFIG_ENV_VAR))
    normalize_options, html_options = options_from_config(config)
    if parsed_args.iteration_factor is not None:
        try:
            normalize_options = normalize_options.create_updated(iteration_factor=parsed_args.iteration_factor)
        except ValueError as e:
            raise ValidationError(
                str(e), parameter_name="iteration_factor", parameter_value=parsed_args.iteration_factor
            ) from e
    return normalize_options, html_options


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _parse_document(content: str, input_format: str, strict_mode: bool) -> Document:
    """Parse ``content`` in ``input_format`` into a Document.

    Raises
    ------
    DocumentError
        If the content is not a valid document
    json.JSONDecodeError
        If a JSON format is requested and the content is not JSON

    """
    if input_format == "auto":
        stripped = content.lstrip()
        if stripped.startswith("["):
            input_format = "slate"
        elif stripped.startswith("{"):
            input_format = "json"
        else:
            input_format = "text"
        logger.debug("Detected input format: %s", input_format)

    if input_format == "text":
        return document_from_text(content)
    if input_format == "slate":
        return slate_to_ast(json.loads(content), strict_mode=strict_mode)

    node = json_to_ast(content, strict_mode=strict_mode)
    if not isinstance(node, Document):
        raise DocumentError(f"Expected a Document at the top level, got {type(node).__name__}")
    return node


def _render(document: Document, output_format: str, html_options: HtmlRendererOptions) -> str:
    if output_format == "html":
        return HtmlRenderer(html_options).render_to_string(document)
    if output_format == "markdown":
        return MarkdownRenderer().render_to_string(document)
    if output_format == "slate":
        return json.dumps(ast_to_slate(document), indent=DEFAULT_JSON_INDENT, ensure_ascii=False) + "\n"
    return ast_to_json(document, indent=DEFAULT_JSON_INDENT) + "\n"


def _print_report(rewrites: list[Rewrite]) -> None:
    """Print the applied rewrites as a rich table on stderr."""
    from rich.console import Console
    from rich.table import Table

    console = Console(stderr=True)
    table = Table(title=f"Applied rewrites ({len(rewrites)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Kind", style="yellow")
    table.add_column("Rule", style="magenta")
    table.add_column("Path", style="cyan")
    table.add_column("Text", style="white", no_wrap=False)

    for index, rewrite in enumerate(rewrites, start=1):
        table.add_row(str(index), rewrite.kind.value, rewrite.rule, str(rewrite.path), repr(rewrite.text))

    console.print(table)


def _print_violations(violations: list[str], stream: Optional[TextIO] = None) -> None:
    for violation in violations:
        print(violation, file=stream or sys.stdout)


def main(args: list[str] | None = None) -> int:
    """Execute the CLI entry point and return the exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    _setup_logging_level(parsed_args)

    try:
        normalize_options, html_options = _load_options(parsed_args)
    except (argparse.ArgumentTypeError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    try:
        content = _read_input(parsed_args.input)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: cannot read input {parsed_args.input}: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    try:
        document = _parse_document(content, parsed_args.input_format, normalize_options.strict_mode)
    except json.JSONDecodeError as e:
        print(f"Error: invalid JSON input: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except DocumentError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    if parsed_args.check:
        violations = check_invariants(document)
        _print_violations(violations)
        if violations:
            logger.info("Found %d invariant violation(s)", len(violations))
            return EXIT_INVARIANT_VIOLATION
        return EXIT_SUCCESS

    try:
        linked, rewrites = linkify(document, normalize_options)
    except ConvergenceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONVERGENCE_ERROR
    except (DocumentError, TreeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    logger.info("Applied %d rewrite(s)", len(rewrites))

    if parsed_args.report:
        _print_report(rewrites)

    violations = check_invariants(linked)
    if violations:
        logger.error("Converged document still violates %d invariant(s)", len(violations))
        _print_violations(violations, sys.stderr)
        return EXIT_INVARIANT_VIOLATION

    output = _render(linked, parsed_args.output_format, html_options)
    try:
        if parsed_args.out:
            Path(parsed_args.out).write_text(output, encoding="utf-8")
        else:
            sys.stdout.write(output)
    except OSError as e:
        print(f"Error: cannot write output {parsed_args.out}: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
