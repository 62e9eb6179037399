"""Errors raised by the chat proxy and plugin services.

Every error carries the HTTP status the routes answer with; the message is the
text sent back as ``{"error": ...}``.
"""


class ChatProxyError(RuntimeError):
    status_code = 500


class BadRequestError(ChatProxyError):
    status_code = 400


class ForbiddenError(ChatProxyError):
    status_code = 403


class NotFoundError(ChatProxyError):
    status_code = 404


class MethodNotAllowedError(ChatProxyError):
    status_code = 405


class UpstreamError(ChatProxyError):
    status_code = 502


class ServiceUnavailableError(ChatProxyError):
    status_code = 503


class WidgetInjectionError(ChatProxyError):
    status_code = 500
