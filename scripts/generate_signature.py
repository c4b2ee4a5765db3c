#!/usr/bin/env python3
"""Print the Slack signature for a body, timestamp and signing secret.

Handy for crafting test requests with curl:

    python scripts/generate_signature.py --body test_body --secret test_secret
"""

import argparse
import sys
import time
from pathlib import Path

# Allow running from a checkout without installing the package
sys.path.insert(0, str(Path(__file__).parent.parent))

from slackgate.core.exceptions import SigningError
from slackgate.core.signature import DEFAULT_VERSION, generate_signature


def main():
    parser = argparse.ArgumentParser(description="Generate a Slack request signature")
    parser.add_argument(
        "--version", "-v",
        default=DEFAULT_VERSION,
        help="Signature version (default: v0)"
    )
    parser.add_argument(
        "--timestamp", "-t",
        default="1577836800",
        help="Request timestamp in Unix seconds (default: 1577836800)"
    )
    parser.add_argument(
        "--now",
        action="store_true",
        help="Use the current time as the timestamp"
    )
    parser.add_argument(
        "--body", "-b",
        default="test_body",
        help="Raw request body (default: test_body)"
    )
    parser.add_argument(
        "--body-file",
        help="Read the raw request body from a file instead of --body"
    )
    parser.add_argument(
        "--secret", "-s",
        default="test_secret",
        help="Slack signing secret (default: test_secret)"
    )

    args = parser.parse_args()

    timestamp = str(int(time.time())) if args.now else args.timestamp

    if args.body_file:
        body_path = Path(args.body_file)
        if not body_path.exists():
            print(f"Error: Body file not found: {body_path}", file=sys.stderr)
            sys.exit(1)
        body = body_path.read_bytes()
    else:
        body = args.body.encode("utf-8")

    try:
        signature = generate_signature(args.version, timestamp, body, args.secret)
    except SigningError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.now:
        print(f"X-Slack-Request-Timestamp: {timestamp}")
        print(f"X-Slack-Signature: {signature}")
    else:
        print(signature)


if __name__ == "__main__":
    main()
