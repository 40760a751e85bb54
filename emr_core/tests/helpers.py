# emr_core/tests/helpers.py

def on_tenant(tenant):
    """
    Host header addressing the tenant's subdomain.
    DRF test client requires HTTP_ prefix.
    """
    return {"HTTP_HOST": f"{tenant.subdomain}.localhost"}


class FakeGenerativeClient:
    """
    Stands in for GeminiClient: returns queued replies and records every call.
    """

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def queue(self, *replies):
        self.replies.extend(replies)

    def generate(self, prompt, *, images=None):
        self.calls.append({"prompt": prompt, "images": list(images or [])})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply
