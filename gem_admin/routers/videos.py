import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile

from gem_admin.schemas.user import DashboardSession
from gem_admin.services.inflight import guard
from gem_admin.services.view_models import rows, video_row
from gem_admin.utils.api_client import ApiClient, RequestContext, get_api_client
from gem_admin.utils.security import get_current_session, get_request_context
from gem_admin.utils.storage import format_file_size, read_upload

logger = logging.getLogger(__name__)

router = APIRouter()


def _with_size_label(row: dict) -> dict:
    row["sizeLabel"] = format_file_size(row.get("size"))
    return row


@router.get("")
def list_videos(client: ApiClient = Depends(get_api_client), ctx: RequestContext = Depends(get_request_context)):
    body = client.videos.get_all(ctx)
    return {"data": [_with_size_label(r) for r in rows(body.get("data"), video_row)]}


@router.post("", status_code=201)
def upload_video(
    file: UploadFile = File(...),
    title: str = Form(""),
    client: ApiClient = Depends(get_api_client),
    ctx: RequestContext = Depends(get_request_context),
    session: DashboardSession = Depends(get_current_session),
):
    """Upload the file to the CDN, then save a video record pointing at it."""
    filename, content, content_type = read_upload(file, kind="video")
    with guard.hold("video-upload", session.jti):
        title = title.strip()
        if not title:
            existing = rows(client.videos.get_all(ctx).get("data"), video_row)
            title = f"Video {len(existing) + 1}"
        uploaded = client.media.upload(ctx, filename, content, content_type)
        record = {
            "video": uploaded["url"],
            "title": title,
            "duration": uploaded.get("duration"),
            "size": uploaded.get("bytes") or len(content),
            "format": uploaded.get("format") or content_type,
        }
        body = client.videos.create(ctx, record)
    logger.info("Saved video %r (%s)", title, format_file_size(record["size"]))
    saved = body.get("data") if isinstance(body.get("data"), dict) else record
    return {"message": "Video uploaded", "data": _with_size_label(video_row(saved))}


@router.delete("/{id}")
def delete_video(id: str, client: ApiClient = Depends(get_api_client), ctx: RequestContext = Depends(get_request_context)):
    with guard.hold("video-delete", id):
        client.videos.delete(ctx, id)
    logger.info("Deleted video %s", id)
    return {"message": "Video deleted", "id": id}
