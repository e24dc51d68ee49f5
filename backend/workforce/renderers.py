from rest_framework.renderers import JSONRenderer


class EnvelopeJSONRenderer(JSONRenderer):
    """
    Wraps successful payloads as ``{"success": true, "data": ...}``.

    Error responses are already shaped by ``api_exception_handler`` and are
    rendered untouched.
    """

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = (renderer_context or {}).get("response")

        if response is not None and response.status_code == 204:
            return b""

        if response is None or response.status_code < 400:
            data = {"success": True, "data": data}

        return super().render(data, accepted_media_type, renderer_context)
