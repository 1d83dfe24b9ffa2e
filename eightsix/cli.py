"""Command line entry point: configuration -> dots -> SVG/PNG/EPS files.

Pipeline:
    1. Start from the shipped defaults or a YAML config (--config)
    2. Apply JSON overrides (--config-json), then individual flags
    3. Optionally draw a fresh seed (--randomize)
    4. Generate the 86 dots once
    5. Export every requested format from that one snapshot

Refactored architecture:
    - export_main(config, output_dir, formats, filename, size) -> dict
        * Callable function (used by tests and embedding scripts)
    - main(argv) -> exit code; console script ``eightsix``

CLI:
    eightsix --text "Hello" --seed 42 --output out/
    eightsix --config my_logo.yaml --format svg --format eps
    eightsix --config-json '{"text": "86", "padding": 0}' --format png --size 1024
    eightsix --text "Hello" --randomize --save-config out/hello.yaml --print-json
    eightsix --text "Hello" --log-file logs/eightsix.log --log-max-bytes 1000000

Exit codes:
    0: All requested files written
    1: Configuration or export failure
    2: Malformed --config-json
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from eightsix import __version__
from eightsix.configs.loader import (
    ConfigError,
    GeneratorConfig,
    apply_config_json,
    config_to_json,
    load_config,
    randomized,
    save_config,
)
from eightsix.export.bundle import FORMATS, default_filename, export_bundle
from eightsix.export.raster import DEFAULT_SIZE
from eightsix.export.surface import ExportError
from eightsix.pattern.generator import generate_from_config
from eightsix.utils.hashing import pattern_fingerprint
from eightsix.utils.logging_config import (
    install_excepthook,
    pop_context,
    push_context,
    setup_logging,
)
from eightsix.utils.text import utf16_length

logger = logging.getLogger(__name__)


def export_main(
    config: GeneratorConfig,
    output_dir: str | Path,
    formats: Sequence[str] = FORMATS,
    filename: str | None = None,
    size: int = DEFAULT_SIZE,
) -> dict[str, Any]:
    """Generate the pattern for *config* and export it.

    Parameters
    ----------
    config : GeneratorConfig
        Full configuration (padding is used for framing only).
    output_dir : str | Path
        Destination directory, created if missing.
    formats : Sequence[str]
        Formats to write; any of "svg", "png", "eps".
    filename : str | None
        File stem; defaults to ``eightsix-logo-<epoch ms>``.
    size : int
        PNG edge length in pixels.

    Returns
    -------
    dict[str, Any]
        Results dict with:
            - dots: list[Dot]
            - fingerprint: str (SHA-256 of the dot list)
            - files: dict[str, Path]
    """
    filename = filename or default_filename()
    dots = generate_from_config(config)
    fingerprint = pattern_fingerprint(dots)

    push_context(seed=config.seed)
    try:
        logger.info(
            "Generated %d dots (fingerprint %s) for %d text units",
            len(dots), fingerprint[:12], utf16_length(config.text),
        )
        files = export_bundle(dots, config, filename, output_dir, formats=formats, size=size)
    finally:
        pop_context(keys=["seed"])

    return {"dots": dots, "fingerprint": fingerprint, "files": files}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eightsix",
        description="Generate an 86-dot text pattern and export it as SVG, PNG or EPS",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML configuration (generator_config.v1); defaults to the shipped defaults",
    )
    parser.add_argument(
        "--config-json",
        type=str,
        default=None,
        help="JSON overrides, inline or a path to a .json file",
    )
    parser.add_argument("--text", type=str, default=None, help="Text to encode")
    parser.add_argument("--dot-size", type=float, default=None, help="Dot size, 20..80 (radius * 1000)")
    parser.add_argument("--spread", type=float, default=None, help="Outer ring radius, 0.5..1.2")
    parser.add_argument("--padding", type=float, default=None, help="Export border in percent, 0..100")
    parser.add_argument("--seed", type=int, default=None, help="PRNG seed (any integer)")
    parser.add_argument(
        "--randomize",
        action="store_true",
        help="Replace the seed with a random one in [0, 100000)",
    )
    parser.add_argument(
        "--format",
        dest="formats",
        action="append",
        choices=[*FORMATS, "all"],
        default=None,
        help="Output format; repeat for several (default: all)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=".",
        help="Output directory for exported files",
    )
    parser.add_argument(
        "--filename",
        type=str,
        default=None,
        help="File stem for exports (default: eightsix-logo-<epoch ms>)",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=DEFAULT_SIZE,
        help="PNG edge length in pixels",
    )
    parser.add_argument(
        "--save-config",
        type=str,
        default=None,
        help="Also write the effective configuration to this YAML path",
    )
    parser.add_argument(
        "--print-json",
        action="store_true",
        help="Print the effective configuration as JSON",
    )
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")
    parser.add_argument("--log-json", action="store_true", help="Emit JSON log lines")
    parser.add_argument("--log-file", type=str, default=None, help="Also write log lines to this file")
    parser.add_argument(
        "--log-max-bytes",
        type=int,
        default=None,
        help="Rotate --log-file once it reaches this size",
    )
    return parser


def _read_json_arg(value: str) -> str:
    path = Path(value)
    if value.lstrip().startswith(("{", "[")) or not path.is_file():
        return value
    return path.read_text(encoding="utf-8")


def resolve_config(args: argparse.Namespace) -> tuple[GeneratorConfig, bool]:
    """Build the effective configuration from parsed arguments.

    Returns
    -------
    tuple[GeneratorConfig, bool]
        Configuration and the JSON error flag.
    """
    config = load_config(args.config)

    json_error = False
    if args.config_json is not None:
        config, json_error = apply_config_json(config, _read_json_arg(args.config_json))

    overrides = {
        "text": args.text,
        "dot_size": args.dot_size,
        "spread": args.spread,
        "padding": args.padding,
        "seed": args.seed,
    }
    changes = {k: v for k, v in overrides.items() if v is not None}
    if changes:
        config = config.replace(**changes)

    if args.randomize:
        config = randomized(config)

    return config, json_error


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(
        log_level=args.log_level,
        log_file=args.log_file,
        json=args.log_json,
        max_bytes=args.log_max_bytes,
        quiet_libs=["PIL", "cairosvg"],
        context={"app": "eightsix"},
    )
    install_excepthook()

    try:
        config, json_error = resolve_config(args)
    except (ConfigError, FileNotFoundError) as e:
        logger.error("%s", e)
        return 1
    if json_error:
        logger.error("--config-json is not valid JSON; nothing exported")
        return 2

    formats = args.formats or ["all"]
    if "all" in formats:
        formats = list(FORMATS)

    if args.print_json:
        print(config_to_json(config))

    try:
        if args.save_config:
            save_config(config, args.save_config)
        result = export_main(
            config,
            output_dir=args.output,
            formats=formats,
            filename=args.filename,
            size=args.size,
        )
    except (ExportError, RuntimeError) as e:
        logger.error("Export failed: %s", e)
        return 1

    for fmt, path in result["files"].items():
        print(f"{fmt.upper()}: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
