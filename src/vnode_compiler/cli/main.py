"""Main CLI entry point for the vnode-compile command-line tool.

Compiles a template file (or stdin) and prints the generated render code,
the static map, or a JSON summary of the compilation.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from vnode_compiler import __version__
from vnode_compiler.api import CompiledTemplate, CompilerOptions, compile_template
from vnode_compiler.codegen import DirectiveRegistry, default_directives
from vnode_compiler.shared import (
    CompilerConfig,
    CompilerError,
    ConfigError,
    configure_logging,
    get_logger,
)
from vnode_compiler.tree import format_path

OUTPUT_FORMATS = ("code", "static", "json")


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self) -> None:
        self.compiler_config = CompilerConfig.default()
        self.output_format = "code"
        self.builtin_directives = False

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        The file may hold a ``compiler`` object with ``CompilerConfig`` fields
        alongside the ``output_format`` and ``builtin_directives`` keys.

        Raises:
            ConfigError: If the file cannot be read or holds invalid settings
        """
        config = cls()
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not load config file {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must contain a JSON object")

        if "compiler" in data:
            config.compiler_config = CompilerConfig.from_dict(data["compiler"])
        config.output_format = data.get("output_format", config.output_format)
        if config.output_format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"output_format must be one of {list(OUTPUT_FORMATS)}"
            )
        config.builtin_directives = bool(
            data.get("builtin_directives", config.builtin_directives)
        )
        return config

    def compiler_options(self) -> CompilerOptions:
        """Build compiler options from this configuration."""
        directives = default_directives() if self.builtin_directives else DirectiveRegistry()
        return CompilerOptions(directives=directives, config=self.compiler_config)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="vnode-compile",
        description="Compile a virtual node template and inspect the result"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "template",
        nargs="?",
        type=Path,
        help="Template file to compile (default: read stdin)"
    )
    parser.add_argument(
        "--format", "-f",
        choices=OUTPUT_FORMATS,
        help="Output format (default: code)"
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    parser.add_argument(
        "--builtin-directives",
        action="store_true",
        help="Enable the built-in 'for' and 'if' directives"
    )
    parser.add_argument(
        "--strict-directives",
        action="store_true",
        help="Fail on elements that use more than one directive"
    )
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


def format_results(template: CompiledTemplate, format_type: str) -> str:
    """Format a compiled template for output."""
    if format_type == "code":
        return template.code

    elif format_type == "static":
        lines: List[str] = []
        static_map = template.static_map
        for path in static_map:
            status = "static" if static_map.is_static(path) else "dynamic"
            lines.append(f"{format_path(path):<16} {status}")
        metrics = template.metrics
        lines.append("-" * 32)
        lines.append(
            f"{metrics.static_node_count}/{metrics.node_count} nodes static "
            f"({metrics.static_ratio:.0%})"
        )
        return "\n".join(lines)

    else:
        return json.dumps(template.to_dict(), indent=2)


def read_template(path: Optional[Path]) -> str:
    """Read template text from ``path``, or stdin when no path is given."""
    if path is None or str(path) == "-":
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")

    logger = get_logger(__name__, None, "cli")

    try:
        config = CLIConfig.from_file(args.config) if args.config else CLIConfig()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.builtin_directives:
        config.builtin_directives = True
    if args.strict_directives:
        config.compiler_config = config.compiler_config.override(multiple_directives="error")
    output_format = args.format or config.output_format

    if not args.verbose and not args.quiet:
        configure_logging(config.compiler_config.logging_level)

    try:
        text = read_template(args.template)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading template: {e}", file=sys.stderr)
        return 2

    try:
        compiled = compile_template(text, config.compiler_options())
    except CompilerError as e:
        logger.debug("Compilation failed", extra={"error_type": type(e).__name__})
        print(f"Compilation failed: {e}", file=sys.stderr)
        return 1

    formatted_output = format_results(compiled, output_format)

    if args.output:
        try:
            args.output.write_text(formatted_output + "\n", encoding="utf-8")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        print(f"Results written to {args.output}", file=sys.stderr)
    else:
        print(formatted_output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
