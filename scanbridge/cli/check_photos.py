"""
Student photo checker.

Calls the photo-check function, which looks for ``{StudentID}-photo.jpg`` in
storage and links found photos to student records, then prints a summary.

Usage:
    scanbridge-check-photos
    scanbridge-check-photos --details
"""
import argparse
import sys
from typing import Any, Dict, List, Optional

import requests

from scanbridge.core.config import settings

TIPS = [
    "Upload photos to storage with naming convention: {StudentID}-photo.jpg",
    "Photos are automatically linked to student records",
    "Use the admin portal filter to find students without photos",
    "Run this script again after uploading new photos",
]


class PhotoCheckError(Exception):
    pass


def fetch_photo_report(url: str, include_details: bool = False, timeout: int = 30) -> Dict[str, Any]:
    """GET the photo-check endpoint and return its decoded JSON body."""
    params = {"includeDetails": "true"} if include_details else None
    try:
        response = requests.get(url, params=params, timeout=timeout)
    except requests.Timeout:
        raise PhotoCheckError("Request timeout")
    except requests.RequestException as e:
        raise PhotoCheckError(str(e))

    try:
        return response.json()
    except ValueError as e:
        raise PhotoCheckError(f"Failed to parse response: {e}")


def format_report(result: Dict[str, Any], include_details: bool = False) -> List[str]:
    summary = result.get("summary") or {}
    lines = [
        "Photo check completed successfully!",
        "",
        "Summary:",
        f"   Total students: {summary.get('totalStudents')}",
        f"   Photos found: {summary.get('photosFound')}",
        f"   Photos not found: {summary.get('photosNotFound')}",
        f"   Records updated: {summary.get('recordsUpdated')}",
        f"   Timestamp: {summary.get('timestamp')}",
        "",
    ]

    if include_details and result.get("results"):
        students = result["results"]
        with_photos = [s for s in students if s.get("hasPhoto")]
        without_photos = [s for s in students if not s.get("hasPhoto")]

        lines += ["Detailed Results:", ""]
        if with_photos:
            lines.append(f"Students WITH photos ({len(with_photos)}):")
            lines += [f"   {s.get('studentId')} - {s.get('name')}" for s in with_photos]
            lines.append("")
        if without_photos:
            lines.append(f"Students WITHOUT photos ({len(without_photos)}):")
            lines += [
                f"   {s.get('studentId')} - {s.get('name')} (expected: {s.get('expectedFileName')})"
                for s in without_photos
            ]
            lines.append("")

    lines.append("Tips:")
    lines += [f"   - {tip}" for tip in TIPS]
    return lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scanbridge-check-photos",
        description=(
            "Check storage for student photos named {StudentID}-photo.jpg "
            "and update the student records."
        ),
    )
    parser.add_argument("--details", action="store_true", help="show results for each student")
    parser.add_argument("--url", default=settings.PHOTO_CHECK_URL, help="photo-check function URL")
    parser.add_argument(
        "--timeout",
        type=int,
        default=settings.PHOTO_CHECK_TIMEOUT,
        help="request timeout in seconds",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    print("Checking student photos in storage...\n")
    try:
        result = fetch_photo_report(args.url, include_details=args.details, timeout=args.timeout)
    except PhotoCheckError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not result.get("success"):
        print(f"Photo check failed: {result.get('error') or 'Unknown error'}", file=sys.stderr)
        return 1

    print("\n".join(format_report(result, include_details=args.details)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
