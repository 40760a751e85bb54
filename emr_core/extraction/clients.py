# emr_core/extraction/clients.py
"""
Boundary to the generative model.

Services only see GenerativeClient.generate(); the Gemini implementation is
built lazily from settings and held by ClientHandle on the extraction AppConfig.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Protocol, Sequence

from django.apps import apps
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from emr_core.common.api.exceptions import UpstreamUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImagePart:
    mime_type: str
    data: bytes


class GenerativeClient(Protocol):
    def generate(self, prompt: str, *, images: Optional[Sequence[ImagePart]] = None) -> str:
        ...


class GeminiClient:
    """
    google-generativeai backed client. One attempt per call, no retry.
    """

    def __init__(self, *, api_key: str, model_name: str, timeout: float = 30, temperature: float = 0.1):
        if not api_key:
            raise ImproperlyConfigured("GOOGLE_GENERATIVE_AI_API_KEY is not set")

        import google.generativeai as genai

        genai.configure(api_key=api_key)
        self.model_name = model_name
        self.timeout = timeout
        self._model = genai.GenerativeModel(
            model_name,
            generation_config={"temperature": temperature},
        )

    def generate(self, prompt: str, *, images: Optional[Sequence[ImagePart]] = None) -> str:
        from google.api_core import exceptions as google_exceptions

        contents: list = [prompt]
        for image in images or ():
            contents.append({"mime_type": image.mime_type, "data": image.data})

        try:
            response = self._model.generate_content(contents, request_options={"timeout": self.timeout})
        except (google_exceptions.GoogleAPIError, TimeoutError, ConnectionError) as exc:
            logger.warning("Gemini call failed (%s): %s", self.model_name, exc.__class__.__name__)
            raise UpstreamUnavailable() from exc

        try:
            return (response.text or "").strip()
        except ValueError:
            # blocked or empty candidate: no text part to read
            logger.warning("Gemini returned no text (%s)", self.model_name)
            return ""

    def close(self) -> None:
        self._model = None


def build_default_client() -> GenerativeClient:
    return GeminiClient(
        api_key=settings.GOOGLE_GENERATIVE_AI_API_KEY,
        model_name=settings.EMR_LLM_MODEL,
        timeout=settings.EMR_LLM_TIMEOUT_SECONDS,
        temperature=settings.EMR_LLM_TEMPERATURE,
    )


class ClientHandle:
    """
    Process-lifetime holder for the generative client.
    Built on first use; tests swap it with use(); close() drops it.
    """

    def __init__(self, factory: Callable[[], GenerativeClient]):
        self._factory = factory
        self._client: Optional[GenerativeClient] = None
        self._lock = threading.Lock()

    def get(self) -> GenerativeClient:
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = self._factory()
        return self._client

    @contextmanager
    def use(self, client: GenerativeClient) -> Iterator[GenerativeClient]:
        with self._lock:
            previous = self._client
            self._client = client
        try:
            yield client
        finally:
            with self._lock:
                self._client = previous

    def close(self) -> None:
        with self._lock:
            client, self._client = self._client, None
        close = getattr(client, "close", None)
        if callable(close):
            close()


def get_client_handle() -> ClientHandle:
    return apps.get_app_config("extraction").client_handle


def get_generative_client() -> GenerativeClient:
    return get_client_handle().get()
