import argparse
import os
from pathlib import Path
from typing import Optional, Sequence

from .types import ImageUploadExpiration

EXPIRATIONS = {
    "1h": ImageUploadExpiration.ONE_HOUR,
    "6m": ImageUploadExpiration.SIX_MONTHS,
    "never": ImageUploadExpiration.NEVER,
}


def cli(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="imgbb-upload", description="ImgBB uploader using the website's JSON API")
    parser.add_argument(
        "-k",
        "--key",
        type=str,
        default=os.getenv("IMGBB_KEY"),
        help="""auth_token of your logged in session.
                You can also set the IMGBB_KEY environment variable for this""",
    )
    parser.add_argument(
        "--cookie",
        type=str,
        default=os.getenv("IMGBB_COOKIE"),
        help="Cookie header of your logged in session. You can also set the IMGBB_COOKIE environment variable for this",
    )
    parser.add_argument(
        "-u",
        "--username",
        type=str,
        default=os.getenv("IMGBB_USERNAME"),
        help="Account the cookie belongs to. You can also set the IMGBB_USERNAME environment variable for this",
    )
    parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        help="Don't upload or delete anything, only show what would be done",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    parser.add_argument("--log-file", type=Path, help="Also write the log to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    upload_parser = subparsers.add_parser("upload", help="Upload an image or the images of a directory")
    upload_parser.add_argument("file", type=Path, help="File or directory to look for images in to upload")
    upload_parser.add_argument("-a", "--album", type=str, help="Album id to upload the images to")
    upload_parser.add_argument(
        "-e",
        "--expiration",
        choices=list(EXPIRATIONS),
        default="6m",
        help="How long the images are kept before being deleted automatically",
    )
    upload_parser.add_argument("-c", "--connections", type=int, default=2, help="Maximum parallel uploads to do at once")
    upload_parser.add_argument(
        "--save",
        action=argparse.BooleanOptionalAction,
        default=True,
        help='Save uploaded image urls to a "imgbb_upload_<unixtime>.csv" file',
    )

    delete_parser = subparsers.add_parser("delete", help="Delete images by id or image url")
    delete_parser.add_argument("targets", nargs="+", help="Image ids or https://i.ibb.co/<id>/... urls")

    args = parser.parse_args(argv)

    if args.command == "upload":
        args.expiration = EXPIRATIONS[args.expiration]

    return args
