import html
import logging
import os
import tempfile
from fastapi import HTTPException, File, Form, UploadFile, BackgroundTasks, APIRouter, Depends
from pydantic import SecretStr
from starlette.responses import JSONResponse
from fastapi_mail import FastMail, MessageSchema, ConnectionConfig, MessageType

# external imports
from api.dependencies import get_history_store, get_settings
from config.report_html import HTML
from config.settings import Settings
from services.history_service import HistoryStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/api/report', tags=["report"])

HTML_TEMPLATE = HTML


def mail_config(settings: Settings) -> ConnectionConfig:
    return ConnectionConfig(
        MAIL_USERNAME=settings.mail_email,
        MAIL_PASSWORD=SecretStr(settings.mail_password),
        MAIL_FROM=settings.mail_email,
        MAIL_PORT=587,
        MAIL_SERVER="smtp.gmail.com",
        MAIL_FROM_NAME="MEDetech Report",
        MAIL_STARTTLS=True,
        MAIL_SSL_TLS=False,
        USE_CREDENTIALS=True,
        VALIDATE_CERTS=True,
    )


def render_report(values: dict) -> str:
    return HTML_TEMPLATE.format(**{key: html.escape(str(value or "N/A")) for key, value in values.items()})


@router.post("/")
async def send_report(
    background_tasks: BackgroundTasks,
    medicine_name: str = Form(...),
    reason: str = Form(...),
    history_id: str | None = Form(None),
    image: UploadFile | None = File(None),
    settings: Settings = Depends(get_settings),
    history: HistoryStore = Depends(get_history_store),
):
    """
    Reports an identification the user believes is wrong. The report is
    e-mailed to the review address in the background.

    Args:
        medicine_name: Name shown to the user
        reason: What the user says is wrong
        history_id: History entry of the identification (optional)
        image: The scanned photo (optional)
    """
    if not settings.review_email:
        raise HTTPException(
            status_code=500,
            detail="Review email not configured. Set REVIEW_EMAIL environment variable."
        )

    entry = await history.get(history_id) if history_id else None
    if history_id and entry is None:
        raise HTTPException(status_code=404, detail=f"History entry '{history_id}' not found.")

    html_body = render_report({
        "medicine_name": medicine_name,
        "generic_name": entry.generic_name if entry else None,
        "confidence": entry.confidence if entry else None,
        "analysis_notes": entry.analysis_notes if entry else None,
        "history_id": history_id,
        "reason": reason,
    })

    # fastapi-mail needs file paths for attachments
    temp_files = []
    if image is not None:
        image_bytes = await image.read()
        if image_bytes:
            try:
                image_temp = tempfile.NamedTemporaryFile(delete=False, suffix='.jpg', mode='wb')
                image_temp.write(image_bytes)
                image_temp.close()
                temp_files.append(image_temp.name)
            except OSError as e:
                raise HTTPException(status_code=500, detail=f"Error preparing attachment: {str(e)}")

    message = MessageSchema(
        subject=f"Incorrect identification report: {medicine_name}",
        recipients=[settings.review_email],
        body=html_body,
        subtype=MessageType.html,
        attachments=temp_files,
    )

    async def send_and_cleanup():
        try:
            if settings.dev_mode:
                logger.info(
                    "DEV MODE: report not sent. to=%s medicine=%s history_id=%s reason=%s attachments=%d",
                    settings.review_email, medicine_name, history_id, reason, len(temp_files),
                )
            else:
                await FastMail(mail_config(settings)).send_message(message)
                logger.info("Report sent to %s", settings.review_email)
        except Exception as e:
            logger.error("Error sending report: %s", e, exc_info=True)
        finally:
            for temp_file in temp_files:
                try:
                    os.unlink(temp_file)
                except OSError:
                    pass

    # send after the response so the user isn't waiting
    background_tasks.add_task(send_and_cleanup)

    return JSONResponse(status_code=200, content={"message": "Report has been queued for sending."})
