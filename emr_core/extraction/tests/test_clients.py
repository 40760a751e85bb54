import pytest
from django.core.exceptions import ImproperlyConfigured
from google.api_core import exceptions as google_exceptions

from emr_core.common.api.exceptions import UpstreamUnavailable
from emr_core.extraction.clients import ClientHandle, GeminiClient, ImagePart


class _Closable:
    def __init__(self):
        self.closed = False

    def generate(self, prompt, *, images=None):
        return "{}"

    def close(self):
        self.closed = True


def test_handle_builds_lazily_once():
    built = []

    def factory():
        built.append(_Closable())
        return built[-1]

    handle = ClientHandle(factory)
    assert built == []

    first = handle.get()
    assert handle.get() is first
    assert len(built) == 1


def test_handle_use_swaps_and_restores():
    original = _Closable()
    handle = ClientHandle(lambda: original)
    handle.get()

    replacement = _Closable()
    with handle.use(replacement):
        assert handle.get() is replacement
    assert handle.get() is original


def test_handle_close_releases_client():
    clients = []
    handle = ClientHandle(lambda: clients.append(_Closable()) or clients[-1])

    first = handle.get()
    handle.close()
    assert first.closed is True
    assert handle.get() is not first


def test_gemini_client_requires_api_key():
    with pytest.raises(ImproperlyConfigured):
        GeminiClient(api_key="", model_name="gemini-2.0-flash")


class _FakeResponse:
    def __init__(self, text=None, blocked=False):
        self._text = text
        self._blocked = blocked

    @property
    def text(self):
        if self._blocked:
            raise ValueError("no parts")
        return self._text


class _FakeModel:
    calls = []
    next_result = None

    def __init__(self, model_name, generation_config=None):
        self.model_name = model_name
        self.generation_config = generation_config

    def generate_content(self, contents, request_options=None):
        _FakeModel.calls.append({"contents": contents, "request_options": request_options, "model": self})
        if isinstance(_FakeModel.next_result, Exception):
            raise _FakeModel.next_result
        return _FakeModel.next_result


@pytest.fixture
def fake_genai(monkeypatch):
    import google.generativeai as genai

    _FakeModel.calls = []
    monkeypatch.setattr(genai, "configure", lambda **kwargs: None)
    monkeypatch.setattr(genai, "GenerativeModel", _FakeModel)
    return _FakeModel


def test_gemini_client_sends_prompt_images_and_timeout(fake_genai):
    fake_genai.next_result = _FakeResponse(text='  {"ok": true}  ')
    client = GeminiClient(api_key="k", model_name="gemini-2.0-flash", timeout=30, temperature=0.1)

    out = client.generate("hello", images=[ImagePart(mime_type="image/png", data=b"\x89PNG")])

    assert out == '{"ok": true}'
    call = fake_genai.calls[0]
    assert call["request_options"] == {"timeout": 30}
    assert call["contents"] == ["hello", {"mime_type": "image/png", "data": b"\x89PNG"}]
    assert call["model"].generation_config == {"temperature": 0.1}


def test_gemini_timeout_is_upstream_unavailable(fake_genai):
    fake_genai.next_result = google_exceptions.DeadlineExceeded("deadline")
    client = GeminiClient(api_key="k", model_name="gemini-2.0-flash")

    with pytest.raises(UpstreamUnavailable):
        client.generate("hello")
    assert len(fake_genai.calls) == 1


def test_gemini_blocked_response_is_empty_text(fake_genai):
    fake_genai.next_result = _FakeResponse(blocked=True)
    client = GeminiClient(api_key="k", model_name="gemini-2.0-flash")

    assert client.generate("hello") == ""
