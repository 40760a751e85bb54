# emr_core/extraction/apps.py
from django.apps import AppConfig


class ExtractionConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "emr_core.extraction"
    label = "extraction"

    client_handle = None

    def ready(self):
        from emr_core.extraction.clients import ClientHandle, build_default_client

        self.client_handle = ClientHandle(build_default_client)
