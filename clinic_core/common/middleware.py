from __future__ import annotations

import logging
import time

from django.utils.deprecation import MiddlewareMixin

from clinic_core.common.api.exceptions import ensure_request_id

logger = logging.getLogger(__name__)


class RequestLogMiddleware(MiddlewareMixin):
    """
    Tags every API request with a request_id and logs one line per call.

    Behavior:
      - request.request_id is set before views run, so error envelopes reuse it.
      - the id is echoed back as X-Request-Id.
      - only paths under ENFORCED_PREFIXES are logged; docs/schema are quiet.
      - headers (and so bearer tokens) are never logged.
    """

    ENFORCED_PREFIXES = ("/api/v1/",)
    REQUEST_ID_HEADER = "X-Request-Id"

    def _is_api_path(self, path: str) -> bool:
        return any(path.startswith(p) for p in self.ENFORCED_PREFIXES)

    def process_request(self, request):
        ensure_request_id(request)
        request._started_at = time.monotonic()
        return None

    def process_response(self, request, response):
        rid = ensure_request_id(request)
        response[self.REQUEST_ID_HEADER] = rid

        path = getattr(request, "path", "") or ""
        if self._is_api_path(path):
            started = getattr(request, "_started_at", None)
            elapsed_ms = (time.monotonic() - started) * 1000 if started is not None else 0.0
            logger.info(
                "%s %s -> %s (%.1fms) request_id=%s",
                request.method,
                path,
                response.status_code,
                elapsed_ms,
                rid,
            )
        return response
