#!/usr/bin/env python3
"""
Dev helper: send a test upload to a running relay.

Posts a multipart form (``file`` + optional ``note``) to /api/send with an
Origin header, the same way the website's upload form does.

Usage
-----
# Basic: generated sample PDF, targeting localhost:8000
python scripts/send_test_upload.py

# Send a specific file with a note
python scripts/send_test_upload.py --file slides/deck.pptx --note "For Friday"

# Pretend to be a different site
python scripts/send_test_upload.py --origin https://site.example.com

# Target a deployed relay
python scripts/send_test_upload.py --url https://relay.example.com

Environment / .env
------------------
ALLOWED_ORIGINS   When --origin is omitted, the first entry is used as the
                  Origin header (falls back to http://localhost:8080).

The script reads .env files from the project root and backend/ if present.
"""

import argparse
import os
import sys
import textwrap
from pathlib import Path

import httpx
from dotenv import load_dotenv


# ---------------------------------------------------------------------------
# Sample file generator
# ---------------------------------------------------------------------------

def _make_sample_pdf() -> bytes:
    """Return a minimal one-page PDF as bytes."""
    return (
        b"%PDF-1.4\n"
        b"1 0 obj << /Type /Catalog /Pages 2 0 R >> endobj\n"
        b"2 0 obj << /Type /Pages /Kids [3 0 R] /Count 1 >> endobj\n"
        b"3 0 obj << /Type /Page /Parent 2 0 R /MediaBox [0 0 200 200] >> endobj\n"
        b"trailer << /Root 1 0 R >>\n"
        b"%%EOF\n"
    )


# ---------------------------------------------------------------------------
# Content-type detection
# ---------------------------------------------------------------------------

def _detect_content_type(filename: str) -> str:
    ext = Path(filename).suffix.lower()
    return {
        ".ppt": "application/vnd.ms-powerpoint",
        ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        ".pdf": "application/pdf",
    }.get(ext, "application/octet-stream")


def _default_origin() -> str:
    raw = os.getenv("ALLOWED_ORIGINS") or os.getenv("ALLOWED_ORIGIN") or ""
    for entry in raw.split(","):
        if entry.strip():
            return entry.strip()
    return "http://localhost:8080"


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    # Locate project root (scripts/ lives one level below the root)
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    load_dotenv(project_root / "backend" / ".env")

    parser = argparse.ArgumentParser(
        prog="send_test_upload.py",
        description="Send a test file upload to the relay's /api/send endpoint.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            Examples:
              python scripts/send_test_upload.py
              python scripts/send_test_upload.py --file deck.pptx --note "hello"
              python scripts/send_test_upload.py --origin https://site.example.com
              python scripts/send_test_upload.py --url http://localhost:8000
        """),
    )
    parser.add_argument(
        "--url",
        default="http://localhost:8000",
        help="Relay base URL (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--file",
        default=None,
        metavar="PATH",
        help="File to upload. A small sample PDF is used if omitted.",
    )
    parser.add_argument(
        "--note",
        default=None,
        help="Optional note included in the email body.",
    )
    parser.add_argument(
        "--origin",
        default=None,
        help="Origin header to send (default: first ALLOWED_ORIGINS entry).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print what would be sent without sending it.",
    )

    args = parser.parse_args()

    if args.file:
        file_path = Path(args.file)
        if not file_path.exists():
            print(f"ERROR: File not found: {file_path}", file=sys.stderr)
            return 1
        file_content = file_path.read_bytes()
        filename = file_path.name
        print(f"Uploading file: {file_path} ({len(file_content):,} bytes)")
    else:
        file_content = _make_sample_pdf()
        filename = "sample_upload.pdf"
        print(f"No --file specified; using generated sample PDF ({len(file_content)} bytes)")

    content_type = _detect_content_type(filename)
    origin = args.origin or _default_origin()
    endpoint = f"{args.url.rstrip('/')}/api/send"

    print(f"\nEndpoint    : {endpoint}")
    print(f"Origin      : {origin}")
    print(f"File        : {filename} ({content_type})")
    print(f"Note        : {args.note or '(none)'}")

    if args.dry_run:
        print("\n[DRY RUN] Nothing sent.")
        return 0

    data = {"note": args.note} if args.note is not None else None

    try:
        response = httpx.post(
            endpoint,
            files={"file": (filename, file_content, content_type)},
            data=data,
            headers={"Origin": origin},
            timeout=60,
        )
    except httpx.ConnectError:
        print(
            f"\nERROR: Could not connect to {endpoint}\n"
            "Is the relay running? Start it with:\n"
            "  uvicorn upload_relay.main:app --reload",
            file=sys.stderr,
        )
        return 1
    except httpx.HTTPError as exc:
        print(f"\nERROR: {exc}", file=sys.stderr)
        return 1

    symbol = "OK" if response.status_code == 200 else "FAIL"
    print(f"\n[{symbol}] HTTP {response.status_code}")
    print(response.text)
    allow_origin = response.headers.get("access-control-allow-origin")
    print(f"Access-Control-Allow-Origin: {allow_origin or '(not set)'}")
    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
