"""Entry point for the receiver package.

Usage::

    python -m otp_receiver event.json   # read the event from a file
    python -m otp_receiver < event.json # read the event from stdin
"""

from __future__ import annotations

import json
import sys


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) > 1 or (args and args[0] in ("-h", "--help")):
        print("Usage: python -m otp_receiver [EVENT_FILE]", file=sys.stderr)
        return 2

    if args and args[0] != "-":
        with open(args[0], encoding="utf-8") as fh:
            raw = fh.read()
    else:
        raw = sys.stdin.read()

    try:
        event = json.loads(raw) if raw.strip() else None
    except json.JSONDecodeError as exc:
        print(f"Invalid event JSON: {exc}", file=sys.stderr)
        return 2
    if event is not None and not isinstance(event, dict):
        print("Event must be a JSON object", file=sys.stderr)
        return 2

    from .handler import default_receiver

    otp = default_receiver().handle_request(event)
    print(otp)
    return 0 if otp else 1


if __name__ == "__main__":
    sys.exit(main())
