import asyncio
import base64
from types import SimpleNamespace

import pytest

from flipart.models.artifact import AspectRatio
from flipart.models.gateway_models import GatewayRequest, InlineBinaryPart, RequestEntry, TextPart
from flipart.models.session_models import ASSISTANT, USER
from flipart.services.gateway.openai_gateway import GatewayError, OpenAIGateway, build_inputs


class FakeResponses:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return self.response


class FakeImages:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def generate(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return self.response


def _client(responses=None, images=None):
    return SimpleNamespace(responses=responses or FakeResponses(), images=images or FakeImages())


def test_build_inputs_maps_roles_and_parts():
    entries = [
        RequestEntry(role=ASSISTANT, parts=(TextPart("Hello!"),)),
        RequestEntry(role=USER, parts=(InlineBinaryPart(b"png", "image/png"), TextPart("what is this?"))),
        RequestEntry(role=USER, parts=(InlineBinaryPart(b"wav", "audio/wav"),)),
    ]

    inputs = build_inputs(entries)

    assert inputs[0] == {"type": "message", "role": "assistant", "content": [{"type": "output_text", "text": "Hello!"}]}
    assert inputs[1]["content"] == [
        {"type": "input_image", "image_url": "data:image/png;base64," + base64.b64encode(b"png").decode()},
        {"type": "input_text", "text": "what is this?"},
    ]
    assert inputs[2]["content"] == [
        {"type": "input_audio", "input_audio": {"data": base64.b64encode(b"wav").decode(), "format": "wav"}},
    ]


@pytest.mark.parametrize("mime", ["audio/ogg", "application/pdf"])
def test_build_inputs_rejects_unsupported_binary(mime):
    with pytest.raises(ValueError):
        build_inputs([RequestEntry(role=USER, parts=(InlineBinaryPart(b"x", mime),))])


def test_generate_sends_instructions_and_returns_text():
    response = SimpleNamespace(output_text="Nice work", usage=SimpleNamespace(input_tokens=12, output_tokens=3))
    responses = FakeResponses(response=response)
    gateway = OpenAIGateway(_client(responses=responses))
    request = GatewayRequest(
        model="gpt-test",
        entries=(RequestEntry(role=USER, parts=(TextPart("hi"),)),),
        system_instruction="Be brief.",
    )

    result = asyncio.run(gateway.generate(request))

    assert result.text == "Nice work"
    assert (result.input_tokens, result.output_tokens) == (12, 3)
    call = responses.calls[0]
    assert call["model"] == "gpt-test"
    assert call["instructions"] == "Be brief."
    assert call["input"][0]["content"] == [{"type": "input_text", "text": "hi"}]


def test_generate_reads_message_content_when_output_text_missing():
    content = SimpleNamespace(type="output_text", text="From content")
    response = SimpleNamespace(output=[SimpleNamespace(type="message", content=[content])], usage=None)
    gateway = OpenAIGateway(_client(responses=FakeResponses(response=response)))

    result = asyncio.run(gateway.generate(GatewayRequest(model="m", entries=())))

    assert result.text == "From content"


def test_generate_wraps_client_errors():
    gateway = OpenAIGateway(_client(responses=FakeResponses(error=ConnectionError("network down"))))

    with pytest.raises(GatewayError, match="network down"):
        asyncio.run(gateway.generate(GatewayRequest(model="m", entries=())))


@pytest.mark.parametrize(
    "ratio, size",
    [
        (AspectRatio.SQUARE, "1024x1024"),
        (AspectRatio.WIDE, "1536x1024"),
        (AspectRatio.STORY, "1024x1536"),
    ],
)
def test_generate_image_returns_png_data_url(ratio, size):
    images = FakeImages(response=SimpleNamespace(data=[SimpleNamespace(b64_json="QUJD", url=None)]))
    gateway = OpenAIGateway(_client(images=images), image_model="img-test")

    ref = asyncio.run(gateway.generate_image("a red fox", ratio))

    assert ref == "data:image/png;base64,QUJD"
    assert images.calls[0] == {"model": "img-test", "prompt": "a red fox", "size": size, "n": 1}


def test_generate_image_without_data_fails():
    gateway = OpenAIGateway(_client(images=FakeImages(response=SimpleNamespace(data=[]))))

    with pytest.raises(GatewayError):
        asyncio.run(gateway.generate_image("a red fox", AspectRatio.SQUARE))


def test_generate_image_rejects_hosted_url_only_result():
    hosted = SimpleNamespace(data=[SimpleNamespace(b64_json=None, url="https://cdn.example.com/fox.png")])
    gateway = OpenAIGateway(_client(images=FakeImages(response=hosted)))

    with pytest.raises(GatewayError, match="hosted URL"):
        asyncio.run(gateway.generate_image("a red fox", AspectRatio.SQUARE))
