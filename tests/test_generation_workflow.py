import asyncio

import pytest

from flipart.models.artifact import AspectRatio
from flipart.models.session_models import Outcome
from flipart.services.gateway.openai_gateway import GatewayError
from flipart.services.workflows.generation import GENERATION_FAILED


def test_submit_prepends_artifact(studio, gateway):
    outcome = asyncio.run(studio.generation.submit("a red fox", "1:1"))

    assert outcome is Outcome.COMPLETED
    front = studio.history[0]
    assert front.prompt == "a red fox"
    assert front.aspect_ratio is AspectRatio.SQUARE
    assert front.id
    assert front.url == gateway.image_ref
    assert gateway.image_calls == [("a red fox", AspectRatio.SQUARE)]
    assert studio.generation.prompt_text == ""
    assert studio.generation.state.busy is False


def test_n_generations_are_distinct_and_newest_first(studio, store):
    prompts = ["first", "second", "third"]

    async def scenario():
        for prompt in prompts:
            await studio.generation.submit(prompt, AspectRatio.WIDE)
        return await store.load_history()

    persisted = asyncio.run(scenario())

    assert [artifact.prompt for artifact in studio.history] == list(reversed(prompts))
    assert len({artifact.id for artifact in studio.history}) == len(prompts)
    assert persisted == studio.history


@pytest.mark.parametrize("prompt", ["", "   \n"])
def test_empty_prompt_is_ignored(studio, gateway, prompt):
    outcome = asyncio.run(studio.generation.submit(prompt, "1:1"))

    assert outcome is Outcome.EMPTY
    assert gateway.image_calls == []
    assert studio.history == []


def test_signed_out_submit_needs_sign_in(studio, gateway):
    studio.session = None

    outcome = asyncio.run(studio.generation.submit("a red fox", "1:1"))

    assert outcome is Outcome.NEEDS_SIGN_IN
    assert gateway.image_calls == []
    assert studio.generation.state.busy is False


def test_unknown_aspect_ratio_is_rejected(studio, gateway):
    with pytest.raises(ValueError):
        asyncio.run(studio.generation.submit("a red fox", "2:1"))
    assert gateway.image_calls == []


def test_busy_submit_changes_nothing(studio, gateway):

    async def scenario():
        gateway.hold()
        first = asyncio.create_task(studio.generation.submit("first", "1:1"))
        await gateway.entered.wait()
        assert studio.generation.state.busy is True
        second = await studio.generation.submit("second", "16:9")
        gateway.release()
        return second, await first

    second, first = asyncio.run(scenario())

    assert second is Outcome.BUSY
    assert first is Outcome.COMPLETED
    assert gateway.image_calls == [("first", AspectRatio.SQUARE)]
    assert [artifact.prompt for artifact in studio.history] == ["first"]


def test_failure_records_error_and_keeps_history(studio, gateway):
    gateway.error = GatewayError("quota exceeded")

    outcome = asyncio.run(studio.generation.submit("a red fox", "1:1"))

    assert outcome is Outcome.FAILED
    assert studio.history == []
    assert studio.generation.state.last_error == "quota exceeded"
    assert studio.generation.state.busy is False
    assert studio.generation.prompt_text == "a red fox"


def test_failure_without_message_uses_default(studio, gateway):
    gateway.error = RuntimeError()

    asyncio.run(studio.generation.submit("a red fox", "1:1"))

    assert studio.generation.state.last_error == GENERATION_FAILED


def test_next_submit_clears_previous_error(studio, gateway):
    gateway.error = GatewayError("quota exceeded")
    asyncio.run(studio.generation.submit("a red fox", "1:1"))

    gateway.error = None
    asyncio.run(studio.generation.submit("a red fox", "1:1"))

    assert studio.generation.state.last_error is None


def test_timeout_releases_guard(studio_factory, gateway):
    studio = studio_factory(timeout=0.05)

    async def scenario():
        gateway.hold()
        return await studio.generation.submit("slow", "1:1")

    outcome = asyncio.run(scenario())

    assert outcome is Outcome.FAILED
    assert studio.generation.state.last_error == "Request timed out"
    assert studio.generation.state.busy is False


def test_storage_failure_does_not_fail_generation(studio, monkeypatch):
    async def broken_save(history):
        raise OSError("disk full")

    monkeypatch.setattr(studio.store, "save_history", broken_save)

    outcome = asyncio.run(studio.generation.submit("a red fox", "1:1"))

    assert outcome is Outcome.COMPLETED
    assert len(studio.history) == 1
    assert studio.generation.state.last_error is None
