import asyncio
import base64

import pytest

from flipart.models.gateway_models import InlineBinaryPart, TextPart
from flipart.models.session_models import Outcome
from flipart.services.gateway.openai_gateway import GatewayError
from flipart.services.gateway.prompts import audio_instruction, audio_system_prompt
from flipart.services.workflows.audio import TRANSCRIPTION_FALLBACK

WAV = b"RIFF\x24\x00\x00\x00WAVEfmt "


def test_enhance_without_file_is_ignored(studio, gateway):
    assert asyncio.run(studio.audio.enhance()) is Outcome.EMPTY
    assert gateway.requests == []


def test_enhance_publishes_result(studio, gateway):
    gateway.text = "Clear speech. Transcript: hello world."
    studio.audio.stage(WAV, "audio/wav", "memo.wav")

    outcome = asyncio.run(studio.audio.enhance())

    expected_ref = "data:audio/wav;base64," + base64.b64encode(WAV).decode("ascii")
    result = studio.audio.result
    assert outcome is Outcome.COMPLETED
    assert result.original_ref == expected_ref
    assert result.enhanced_ref == expected_ref
    assert result.transcription == gateway.text

    request = gateway.requests[0]
    assert request.system_instruction == audio_system_prompt()
    assert len(request.entries) == 1
    assert request.entries[0].parts == (InlineBinaryPart(WAV, "audio/wav"), TextPart(audio_instruction()))


def test_empty_reply_uses_fallback(studio, gateway):
    gateway.text = ""
    studio.audio.stage(WAV, "audio/wav", "memo.wav")

    asyncio.run(studio.audio.enhance())

    assert studio.audio.result.transcription == TRANSCRIPTION_FALLBACK


def test_failure_records_prefixed_error(studio, gateway):
    gateway.error = GatewayError("unsupported format")
    studio.audio.stage(WAV, "audio/wav", "memo.wav")

    outcome = asyncio.run(studio.audio.enhance())

    assert outcome is Outcome.FAILED
    assert studio.audio.result is None
    assert studio.audio.state.last_error == "Audio processing failed: unsupported format"
    assert studio.audio.state.busy is False


def test_signed_out_enhance_needs_sign_in(studio, gateway):
    studio.session = None
    studio.audio.stage(WAV, "audio/wav", "memo.wav")

    assert asyncio.run(studio.audio.enhance()) is Outcome.NEEDS_SIGN_IN
    assert gateway.requests == []


def test_staging_clears_previous_result(studio):
    studio.audio.stage(WAV, "audio/wav", "memo.wav")
    asyncio.run(studio.audio.enhance())

    studio.audio.stage(WAV + b"more", "audio/mpeg", "other.mp3")

    assert studio.audio.result is None
    assert studio.audio.staged.filename == "other.mp3"


@pytest.mark.parametrize("data, mime", [(b"", "audio/wav"), (WAV, "text/plain")])
def test_stage_rejects_invalid_files(studio, data, mime):
    with pytest.raises(ValueError):
        studio.audio.stage(data, mime, "memo")


def test_busy_enhance_is_rejected(studio, gateway):
    studio.audio.stage(WAV, "audio/wav", "memo.wav")

    async def scenario():
        gateway.hold()
        first = asyncio.create_task(studio.audio.enhance())
        await gateway.entered.wait()
        second = await studio.audio.enhance()
        gateway.release()
        return second, await first

    second, first = asyncio.run(scenario())

    assert second is Outcome.BUSY
    assert first is Outcome.COMPLETED
    assert len(gateway.requests) == 1


def test_result_for_replaced_file_is_discarded(studio, gateway):
    studio.audio.stage(WAV, "audio/wav", "memo.wav")

    async def scenario():
        gateway.hold()
        pending = asyncio.create_task(studio.audio.enhance())
        await gateway.entered.wait()
        studio.audio.stage(b"ID3new", "audio/mpeg", "new.mp3")
        gateway.release()
        return await pending

    asyncio.run(scenario())

    assert studio.audio.result is None
    assert studio.audio.staged.filename == "new.mp3"


def test_unstage(studio):
    studio.audio.stage(WAV, "audio/wav", "memo.wav")
    studio.audio.unstage()

    assert studio.audio.staged is None


def test_enhance_does_not_hand_encoding_to_a_thread(studio, gateway, monkeypatch):
    async def no_threads(*args, **kwargs):
        raise AssertionError("audio encoding must not be offloaded")

    monkeypatch.setattr(asyncio, "to_thread", no_threads)
    studio.audio.stage(WAV, "audio/wav", "memo.wav")

    outcome = asyncio.run(studio.audio.enhance())

    assert outcome is Outcome.COMPLETED
    assert studio.audio.result.original_ref == "data:audio/wav;base64," + base64.b64encode(WAV).decode("ascii")
