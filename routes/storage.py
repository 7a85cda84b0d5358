from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from exceptions import AppError
from file_utils import resolve_object

router = APIRouter(prefix="/storage", tags=["storage"])


@router.get("/{bucket}/{path:path}")
def serve_object(bucket: str, path: str):
    """Serve a public object from the avatars or posts bucket"""
    try:
        file_path = resolve_object(bucket, path)
    except AppError:
        raise HTTPException(status_code=404, detail="File not found")
    if file_path is None:
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(file_path)
