import time
import asyncio
import pandas as pd
from io import StringIO
from typing import Tuple
from fastapi import UploadFile, File, HTTPException, Depends
from app.core.config import settings
import logging

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_MB = settings.MAX_SIZE_FILE_UPLOAD or 10
ALLOWED_CONTENT_TYPES = ["text/csv", "application/vnd.ms-excel"]


def validate_extension(file: UploadFile = File(...)) -> UploadFile:
    filename = (file.filename or "").lower()
    if file.content_type not in ALLOWED_CONTENT_TYPES or not filename.endswith(
        ".csv"
    ):
        raise HTTPException(
            status_code=400,
            detail="Invalid file type. Please upload a CSV file.",
        )
    return file


async def validate_file_size(file: UploadFile = Depends(validate_extension)) -> bytes:
    contents = await file.read()
    if len(contents) > MAX_FILE_SIZE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail=(
                f"File size exceeds maximum: {len(contents) / 1024 / 1024:.2f}MB. "
                f"Maximum is {MAX_FILE_SIZE_MB}MB."
            ),
        )
    return contents


async def parse_csv_rows(contents: bytes) -> pd.DataFrame:
    try:
        decoded = contents.decode("utf-8-sig")

        def parse_csv():
            # keep every cell as text; numeric columns are converted per field
            return pd.read_csv(
                StringIO(decoded),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
            )

        loop = asyncio.get_event_loop()
        df = await loop.run_in_executor(None, parse_csv)

    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Invalid CSV format: {str(e)}")

    if df.empty:
        raise HTTPException(
            status_code=400,
            detail="Empty CSV file. Please provide a CSV file with data.",
        )
    return df


def validate_csv():
    async def dependency(
        file: UploadFile = File(...),
    ) -> Tuple[bytes, pd.DataFrame]:
        start = time.time()

        file_checked = validate_extension(file)
        contents = await validate_file_size(file_checked)
        df = await parse_csv_rows(contents)

        logger.info(f"✅ Validate Middleware success in {time.time() - start:.2f}s")
        return contents, df

    return dependency
