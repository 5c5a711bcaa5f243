from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import Response

from pixelforge.api import deps
from pixelforge.services.conversion_service import ConversionService

router = APIRouter()


@router.post(
    "/convert",
    response_class=Response,
    responses={
        200: {
            "content": {"application/pdf": {}},
            "description": "The assembled PDF document",
        },
        400: {"description": "Bad Request - No images or an undecodable image"},
        413: {"description": "Payload Too Large - Upload size limit exceeded"},
        500: {"description": "Internal Server Error - Conversion failed"},
    },
)
async def convert_images(
    images: Optional[List[UploadFile]] = File(None),
    compression_level: Optional[str] = Form(None, alias="compressionLevel"),
    filename: Optional[str] = Form(None),
    service: ConversionService = Depends(deps.get_conversion_service),
):
    """
    Convert uploaded images into a single PDF.

    Images become pages in the order they were sent. ``compressionLevel``
    is one of ``normal``, ``compressed`` or ``ultra``; anything else is
    treated as ``normal``. ``filename`` only names the download.
    """
    result = await service.convert_endpoint(
        uploads=images, compression_level=compression_level, filename=filename
    )
    return Response(
        content=result.content,
        media_type=result.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{result.filename}"'
        },
    )
