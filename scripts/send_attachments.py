#!/usr/bin/env python3
"""
Dev helper: send attachment descriptors to the local normalize endpoint.

Builds a payload from the command-line flags (or a sample set covering each
content source when none are given) and POST-s it to
/api/attachments/normalize, then prints the normalized result.

Usage
-----
# Sample payload (path, URL, data URI and inline text), localhost:8000
python scripts/send_attachments.py

# Attach local paths / URLs / data URIs
python scripts/send_attachments.py --path exports/q1.xlsx --href https://example.com/LICENSE

# Inline image addressable by content-id, split into the related group
python scripts/send_attachments.py --data-url "data:image/png;base64,iVBORw0KGgo=" --cid logo --find-related

# Print the payload without sending it
python scripts/send_attachments.py --dry-run

Environment / .env
------------------
ATTACHMENTS_API_URL   Backend base URL (default: http://localhost:8000).
                      Overridden by --url.
"""

import argparse
import json
import os
import sys
import textwrap
from pathlib import Path

import httpx
from dotenv import load_dotenv


# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------

def _make_sample_attachments() -> list[dict]:
    """Return one descriptor per content source the normalizer understands."""
    return [
        {"path": "/tmp/report.pdf"},
        {"filename": "license.txt", "path": "https://example.com/LICENSE"},
        {"path": "data:text/plain;base64,aGVsbG8gd29ybGQ="},
        {"filename": "notes.txt", "content": "hello world!"},
        {"contentType": "message/rfc822", "path": "/tmp/forwarded.eml"},
    ]


def _build_payload(args: argparse.Namespace) -> dict:
    attachments: list[dict] = []
    for path in args.path:
        attachments.append({"path": path})
    for href in args.href:
        attachments.append({"href": href})
    for data_url in args.data_url:
        attachments.append({"path": data_url})

    if args.cid:
        for attachment in attachments:
            attachment["cid"] = args.cid

    payload: dict = {"attachments": attachments or _make_sample_attachments()}
    if args.find_related:
        payload["findRelated"] = True
    return payload


# ---------------------------------------------------------------------------
# Pretty printer
# ---------------------------------------------------------------------------

def _print_response(response: httpx.Response) -> None:
    status = response.status_code
    symbol = "OK" if status == 200 else "FAIL"
    print(f"\n[{symbol}] HTTP {status}")
    try:
        body = response.json()
        print(json.dumps(body, indent=2))
    except ValueError:
        print(response.text)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    # Locate project root (scripts/ lives one level below the root)
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    load_dotenv(project_root / "backend" / ".env")

    parser = argparse.ArgumentParser(
        prog="send_attachments.py",
        description="Send attachment descriptors to the normalize endpoint.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            Examples:
              python scripts/send_attachments.py
              python scripts/send_attachments.py --path exports/q1.xlsx
              python scripts/send_attachments.py --href https://example.com/a.pdf
              python scripts/send_attachments.py --data-url "data:,hello" --cid x --find-related
        """),
    )
    parser.add_argument(
        "--url",
        default=os.getenv("ATTACHMENTS_API_URL", "http://localhost:8000"),
        help="Backend base URL (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--path",
        action="append",
        default=[],
        metavar="PATH",
        help="Local path (or http URL) to attach. May be repeated.",
    )
    parser.add_argument(
        "--href",
        action="append",
        default=[],
        metavar="URL",
        help="Remote URL to attach. May be repeated.",
    )
    parser.add_argument(
        "--data-url",
        action="append",
        default=[],
        metavar="URI",
        help="data: URI to attach. May be repeated.",
    )
    parser.add_argument(
        "--cid",
        default=None,
        help="Content-id to set on every attachment given on the command line.",
    )
    parser.add_argument(
        "--find-related",
        action="store_true",
        help="Return cid attachments in the related group.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the payload JSON without sending it.",
    )

    args = parser.parse_args()

    payload = _build_payload(args)
    endpoint = f"{args.url.rstrip('/')}/api/attachments/normalize"

    print(f"Endpoint   : {endpoint}")
    print(f"Attachments: {len(payload['attachments'])}")

    if args.dry_run:
        print("\n[DRY RUN] Payload:")
        print(json.dumps(payload, indent=2))
        return 0

    try:
        response = httpx.post(endpoint, json=payload, timeout=30)
    except httpx.ConnectError:
        print(
            f"\nERROR: Could not connect to {endpoint}\n"
            "Is the backend running? Start it with:\n"
            "  cd backend && uvicorn mailattach.main:app --reload",
            file=sys.stderr,
        )
        return 1

    _print_response(response)
    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
