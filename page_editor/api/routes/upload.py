"""
Upload d'images
Route :
  POST /api/upload-image   (multipart `file`) → {filePath}
"""
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from ...core.errors import ContentValidationError, NetworkError
from ...services.assets import LocalAssetStore, get_assets

log = logging.getLogger(__name__)

router = APIRouter(tags=["Upload"])


@router.post("/api/upload-image")
def upload_image(file: UploadFile = File(...), assets: LocalAssetStore = Depends(get_assets)):
    try:
        return assets.upload((file.filename or "", file.file.read()))
    except ContentValidationError as e:
        raise HTTPException(400, str(e))
    except NetworkError as e:
        log.error("Upload %s échoué : %s", file.filename, e)
        raise HTTPException(500, "L'upload a échoué.")
