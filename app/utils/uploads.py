from typing import List, Optional, Tuple

from fastapi import UploadFile


async def read_upload(file: Optional[UploadFile]) -> Optional[Tuple[str, bytes]]:
    """(filename, bytes) of an uploaded file, or None when nothing was sent"""
    if file is None or not file.filename:
        return None
    return file.filename, await file.read()


async def read_uploads(files: Optional[List[UploadFile]]) -> List[Tuple[str, bytes]]:
    uploads = []
    for file in files or []:
        upload = await read_upload(file)
        if upload:
            uploads.append(upload)
    return uploads
