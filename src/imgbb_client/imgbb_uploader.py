import asyncio
import csv
import logging
import time
from pathlib import Path
from pprint import pformat
from typing import Any, List, Optional, Sequence

import aiohttp
from tqdm.asyncio import tqdm_asyncio

from .api import ImgbbAPI, get_image_id_by_url
from .cli import cli
from .errors import ApiError
from .logging_manager import setup_logger
from .types import DeleteResponse, ImageUploadExpiration, UploadRecord
from .util import format_size, guess_mime_type

logger = logging.getLogger(__name__)

# Largest file the website accepts
MAX_FILE_SIZE = 32 * 1024**2

CSV_FIELDNAMES = ["fileName", "filePath", "id", "url", "urlViewer", "deleteUrl", "uploadSuccess"]


class ImgbbUploader:
    def __init__(
        self,
        key: Optional[str],
        cookie: Optional[str],
        username: Optional[str],
        max_connections: int = 2,
        options: Optional[dict[str, Any]] = None,
    ):
        if options is None:
            options = {}
        self.options = options
        self.api = ImgbbAPI(key, cookie, username)
        self.sem = asyncio.Semaphore(max_connections)
        self.max_file_size = options.get("max_file_size") or MAX_FILE_SIZE

    def prepare_file_for_upload(self, file: Path) -> List[Path]:
        mimetype = guess_mime_type(file.name)
        if not mimetype or not mimetype.startswith("image/"):
            logger.error(f"File {file} is not an image ({mimetype or 'unknown type'})")
            return []

        file_size = file.stat().st_size
        if file_size > self.max_file_size:
            logger.error(f"File {file} is {format_size(file_size)}, bigger than max file size {format_size(self.max_file_size)}")
            return []

        return [file]

    async def upload(
        self,
        file: Path,
        album: Optional[str] = None,
        expiration: Optional[ImageUploadExpiration] = None,
    ) -> UploadRecord:
        record: UploadRecord = {
            "fileName": file.name,
            "filePath": str(file),
            "id": "",
            "url": "",
            "urlViewer": "",
            "deleteUrl": "",
            "uploadSuccess": False,
        }

        async with self.sem:
            try:
                response = await self.api.upload_image(
                    file.read_bytes(), expiration=expiration, album=album, name=file.name
                )
            except (ApiError, aiohttp.ClientError, asyncio.TimeoutError, ValueError, OSError):
                logger.exception(f"Upload failed for {file.name}")
                return record

        image = (response.get("image") if isinstance(response, dict) else None) or {}
        if not image.get("id_encoded"):
            logger.error(f"{file.name} was not uploaded: {pformat(response)}")
            return record

        record.update(
            id=image["id_encoded"],
            url=image.get("url", ""),
            urlViewer=image.get("url_viewer", ""),
            deleteUrl=image.get("delete_url", ""),
            uploadSuccess=True,
        )
        logger.debug(f"{file.name} uploaded to {record['url']}")
        return record

    async def upload_files(
        self,
        path: Path,
        album: Optional[str] = None,
        expiration: Optional[ImageUploadExpiration] = None,
    ) -> List[UploadRecord]:
        self.api._ensure_credentials()

        if path.is_file():
            paths = [path]
        else:
            logger.warning("only files at the root of the input folder will be uploaded (no recursion)")
            paths = sorted([x for x in path.iterdir() if x.is_file()], key=lambda p: str(p))

        filtered_paths = []
        for file_path in paths:
            filtered_paths.extend(self.prepare_file_for_upload(file_path))

        if len(filtered_paths) == 0:
            logger.error("No file paths left to upload")
            return []

        if self.options.get("dry_run"):
            for file_path in filtered_paths:
                logger.warning(f"Dry run, would upload {file_path}")
            return []

        tasks = [self.upload(file_path, album, expiration) for file_path in filtered_paths]
        records = await tqdm_asyncio.gather(*tasks, desc="Images uploaded")

        failed = [x["fileName"] for x in records if not x["uploadSuccess"]]
        if failed:
            logger.warning(f"{len(failed)}/{len(records)} uploads failed: {', '.join(failed)}")

        if self.options.get("save"):
            self.save_records(records)
        else:
            logger.info(pformat(records))

        return records

    def save_records(self, records: Sequence[UploadRecord], file_name: Optional[Path] = None) -> Path:
        file_name = Path(file_name or f"imgbb_upload_{int(time.time())}.csv")
        with open(file_name, "w", newline="") as csvfile:
            logger.info(f"Saving uploaded files to {file_name}")
            csv_writer = csv.DictWriter(csvfile, dialect="excel", fieldnames=CSV_FIELDNAMES)
            csv_writer.writeheader()
            csv_writer.writerows(records)
        return file_name

    async def remove(self, targets: Sequence[str]) -> Optional[DeleteResponse]:
        self.api._ensure_credentials()

        ids = []
        for target in targets:
            if "://" in target:
                image_id = get_image_id_by_url(target)
                if image_id is None:
                    logger.error(f"{target} is not an image url, skipping")
                    continue
            else:
                image_id = target
            ids.append(image_id)

        if len(ids) == 0:
            logger.error("No images left to delete")
            return None

        if self.options.get("dry_run"):
            logger.warning(f"Dry run, would delete {', '.join(ids)}")
            return None

        response = await self.api.remove_images(ids[0] if len(ids) == 1 else ids)
        logger.info(pformat(response))
        return response

    async def close(self) -> None:
        await self.api.close()


async def async_main(argv: Optional[Sequence[str]] = None) -> None:
    args = cli(argv)
    setup_logger(log_file=args.log_file, log_level=logging.DEBUG if args.verbose else logging.INFO)

    logger.debug({k: v for k, v in vars(args).items() if k not in ("key", "cookie")})

    options = {"dry_run": args.dry_run, "save": getattr(args, "save", False)}

    uploader = ImgbbUploader(
        args.key, args.cookie, args.username, max_connections=getattr(args, "connections", 2), options=options
    )
    try:
        if args.command == "upload":
            await uploader.upload_files(args.file, album=args.album, expiration=args.expiration)
        else:
            await uploader.remove(args.targets)
    finally:
        await uploader.close()


def main(argv: Optional[Sequence[str]] = None) -> None:
    asyncio.run(async_main(argv))
