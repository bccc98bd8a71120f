"""Render navigational warnings from message JSON as S-124 GML.

CLI usage:
  navwarn-s124 messages.json --id DK-001-24 --lang da
  navwarn-s124 https://example.org/rest/public/v1/messages --id 123 -o out.gml
  python -m navwarn_s124.cli message.json --config s124.yml

Exit codes:
  0 success
  1 message not found
  2 invalid input, configuration or source
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import load_settings
from .errors import MessageNotFoundError, S124Error
from .loader import load_source
from .service import S124Service


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        description="Convert a navigational warning message to an S-124 GML dataset"
    )
    ap.add_argument("source", help="Message JSON file path or http(s) URL")
    ap.add_argument(
        "--id",
        dest="message_id",
        help="Numeric or short id of the message (default: the only/first message)",
    )
    ap.add_argument("--lang", help="Output language (default from settings)")
    ap.add_argument("--config", help="YAML settings file")
    ap.add_argument("-o", "--output", help="Write GML to this file instead of stdout")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        settings = load_settings(args.config)
        messages = load_source(args.source)
        service = S124Service(settings, messages)
        if args.message_id is not None:
            gml = service.generate_gml_for_id(args.message_id, args.lang)
        elif messages:
            gml = service.generate_gml(messages[0], args.lang)
        else:
            raise MessageNotFoundError(f"No messages in {args.source}")
    except MessageNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except S124Error as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.output:
        Path(args.output).write_text(gml, encoding="utf-8")
        logging.info("Wrote %s", args.output)
    else:
        sys.stdout.write(gml)
        sys.stdout.write("\n")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
