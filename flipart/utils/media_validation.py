"""Validation helpers for uploaded audio files."""

from typing import Tuple

from fastapi import HTTPException, UploadFile

ALLOWED_AUDIO_TYPES = {
    "audio/wav",
    "audio/x-wav",
    "audio/wave",
    "audio/mpeg",
    "audio/mp3",
}

EXTENSION_TYPES = {
    ".wav": "audio/wav",
    ".mp3": "audio/mpeg",
}


def audio_content_type(audio_file: UploadFile) -> str:
    """Return the normalised content type of a supported upload.

    The analysis model accepts WAV and MP3 input. When the client omits the
    content type, the filename extension decides.
    """
    if not audio_file.filename:
        raise HTTPException(status_code=400, detail="Audio file must have a filename.")
    if audio_file.content_type and audio_file.content_type != "application/octet-stream":
        content_type = audio_file.content_type.lower().split(";", 1)[0].strip()
        if content_type not in ALLOWED_AUDIO_TYPES:
            raise HTTPException(status_code=415, detail=f"Unsupported audio content type: {audio_file.content_type}")
        return content_type
    for ext, content_type in EXTENSION_TYPES.items():
        if audio_file.filename.lower().endswith(ext):
            return content_type
    raise HTTPException(status_code=415, detail="Unsupported or missing audio content type.")


async def read_audio_upload(audio_file: UploadFile) -> Tuple[bytes, str]:
    """Read validated audio bytes and their content type, rejecting empty uploads."""
    content_type = audio_content_type(audio_file)
    audio_bytes = await audio_file.read()
    if not audio_bytes:
        raise HTTPException(status_code=400, detail="Uploaded audio file is empty.")
    return audio_bytes, content_type
