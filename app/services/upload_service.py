from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.db.upload_record import UploadRecord

logger = logging.getLogger(__name__)


class UploadService:
    """Tracks CSV uploads through processing -> completed | failed."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def start(self, user_id: str, filename: str, file_size: int) -> str:
        upload_id = str(uuid4())
        async with self._session_factory() as db:
            db.add(
                UploadRecord(
                    id=upload_id,
                    user_id=user_id,
                    filename=filename,
                    file_size=file_size,
                    status="processing",
                )
            )
            await db.commit()
        logger.info(f"📥 Upload {upload_id} started ({filename}, {file_size} bytes)")
        return upload_id

    async def complete(self, upload_id: str, row_count: int) -> None:
        await self._finish(upload_id, "completed", row_count=row_count)

    async def fail(self, upload_id: str, error: str) -> None:
        await self._finish(upload_id, "failed", error_message=error)

    async def _finish(
        self,
        upload_id: str,
        status: str,
        row_count: Optional[int] = None,
        error_message: Optional[str] = None,
    ) -> None:
        values = {"status": status, "completed_at": datetime.now(timezone.utc)}
        if row_count is not None:
            values["row_count"] = row_count
        if error_message is not None:
            values["error_message"] = error_message

        async with self._session_factory() as db:
            await db.execute(
                update(UploadRecord).where(UploadRecord.id == upload_id).values(**values)
            )
            await db.commit()
        logger.info(f"📦 Upload {upload_id} -> {status}")
