from fastapi import APIRouter, Request, UploadFile, File, Depends
import pandas as pd
import logging

from app.api.analyze import run_quota_checked_batch
from app.api.deps import (
    get_batch_service,
    get_current_user_id,
    get_quota_service,
    get_upload_service,
)
from app.middlewares.file_validators import validate_csv
from app.schemas.upload import UploadData, UploadResponse
from app.services.batch_analysis_service import BatchAnalysisService
from app.services.csv_feedback import rows_to_feedback_items
from app.services.quota_service import QuotaService
from app.services.upload_service import UploadService
from app.utils.exceptions import APIException, BadRequestError, ServerError
from app.utils.response_builder import serialize_data, success_response
from app.messages.upload_messages import (
    NO_VALID_FEEDBACK,
    TEXT_COLUMN_NOT_FOUND,
    UPLOAD_FAILED,
    UPLOAD_SUCCESS,
)
from app.middlewares.security import limiter

from app.utils.telemetry import step
from opentelemetry import trace


router = APIRouter(prefix="/api/upload", tags=["Upload"])
logger = logging.getLogger(__name__)


@router.post("/", response_model=UploadResponse)
@limiter.limit("5/hour")
async def upload_csv(
    request: Request,
    file: UploadFile = File(...),
    validated: tuple[bytes, pd.DataFrame] = Depends(validate_csv()),
    user_id: str = Depends(get_current_user_id),
    service: BatchAnalysisService = Depends(get_batch_service),
    quota: QuotaService = Depends(get_quota_service),
    uploads: UploadService = Depends(get_upload_service),
):
    contents, df = validated
    filename = file.filename or "upload.csv"

    # Enrich the current request span (from FastAPI instrumentation)
    span = trace.get_current_span()
    if span is not None:
        span.set_attribute("app.upload.filename", filename)
        span.set_attribute("app.upload.size_bytes", len(contents))

    upload_id = None
    try:
        # 1) Rows -> feedback items
        with step("upload.parse_rows", rows=len(df), cols=len(df.columns)):
            try:
                items = rows_to_feedback_items(df)
            except ValueError:
                raise BadRequestError(
                    code="TEXT_COLUMN_NOT_FOUND", message=TEXT_COLUMN_NOT_FOUND
                )

        if not items:
            raise BadRequestError(code="NO_VALID_FEEDBACK", message=NO_VALID_FEEDBACK)

        logger.info(f"📄 Parsed {len(items)} feedback items from {filename}")

        # 2) Track the upload
        upload_id = await uploads.start(user_id, filename, len(contents))

        # 3) Analyze
        result = await run_quota_checked_batch(user_id, items, service, quota)

        await uploads.complete(upload_id, row_count=len(items))
        logger.info(f"✅ Upload {upload_id}: {result.message}")

        return success_response(
            message=UPLOAD_SUCCESS,
            data=UploadData(
                upload_id=upload_id,
                filename=filename,
                columns=[str(c) for c in df.columns],
                record_count=len(items),
                analyzed_count=result.succeeded,
                batch=serialize_data(result),
            ),
        )

    except APIException as e:
        if upload_id:
            await uploads.fail(upload_id, e.detail["message"])
        raise

    except Exception as e:
        logger.exception(f"❌ Unexpected upload error: {e}")
        if upload_id:
            await uploads.fail(upload_id, str(e) or UPLOAD_FAILED)
        raise ServerError(code="UPLOAD_FAILED", message=UPLOAD_FAILED)
