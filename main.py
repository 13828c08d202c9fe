"""
Command-line entry point for the G-code toolpath preview.
Reads a G-code file, runs the pipeline and reports motions, a toolpath
summary or the flattened segments.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from config.preview_config import ConfigError, ConfigManager, PreviewConfig
from gcode_processor import GCodeProcessor
from utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

EXIT_GCODE_ERROR = 1
EXIT_USAGE_ERROR = 2


def build_argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toolpath-preview",
        description="Turn G-code into previewable toolpath segments.",
    )
    parser.add_argument("--config", help="Path to a JSON preview configuration.")
    parser.add_argument("--preset", default="default",
                        help="Configuration preset: default, fine or coarse.")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", help="Also write logs to this file.")

    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Parse and interpret a program.")
    check.add_argument("file", help="G-code file to check.")

    summary = sub.add_parser("summary", help="Print a JSON toolpath summary.")
    summary.add_argument("file", help="G-code file to summarize.")

    segments = sub.add_parser("segments", help="Write the flattened segments as JSON.")
    segments.add_argument("file", help="G-code file to flatten.")
    segments.add_argument("-o", "--output", help="Output path (stdout if omitted).")

    return parser


def load_config(args: argparse.Namespace) -> PreviewConfig:
    if args.config:
        return ConfigManager.load_config(args.config)
    return ConfigManager.get_config(args.preset)


def segments_to_json(processor: GCodeProcessor) -> List[dict]:
    return [
        {
            "line": segment.line_number,
            "color": segment.color.value,
            "start": segment.start.to_list(),
            "end": segment.end.to_list(),
        }
        for segment in processor.get_all_geometry()
    ]


def main(argv: Optional[List[str]] = None) -> int:
    args = build_argparser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)

    try:
        config = load_config(args)
        with open(args.file, "r", encoding="utf-8") as f:
            text = f.read()
    except (ConfigError, OSError, UnicodeDecodeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    processor = GCodeProcessor(config)
    if not processor.process_gcode(text):
        for error in processor.get_all_errors():
            print(f"{args.file}: {error}", file=sys.stderr)
        return EXIT_GCODE_ERROR

    if args.command == "check":
        print(f"OK: {len(processor.motions)} motions")
    elif args.command == "summary":
        print(json.dumps(processor.get_toolpath_summary(), indent=2))
    elif args.command == "segments":
        payload = json.dumps(segments_to_json(processor), indent=2)
        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(payload)
            logger.info("Wrote %d segments to %s", len(processor.get_all_geometry()), args.output)
        else:
            print(payload)

    return 0


if __name__ == '__main__':
    sys.exit(main())
