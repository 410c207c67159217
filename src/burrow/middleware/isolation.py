"""Cross-origin isolation headers.

The served bundles run a network proxy inside the browser, which needs
``SharedArrayBuffer`` and friends. Browsers only expose those to pages
that are cross-origin isolated, so every response carries both headers,
error responses included.
"""

from dataclasses import dataclass

from burrow.errors import HTTPError
from burrow.http.request import Request
from burrow.http.response import Response
from burrow.middleware.protocol import AnyResponse, Next


@dataclass(frozen=True, slots=True)
class IsolationConfig:
    """Header values. Applied as-is."""

    opener_policy: str = "same-origin"
    embedder_policy: str = "require-corp"


class CrossOriginIsolation:
    """Add COOP/COEP to every response.

    ``HTTPError`` raised further down the chain becomes an empty-body
    response here, so 403 and 404 answers are isolated too.

    Usage::

        from burrow.middleware import CrossOriginIsolation, IsolationConfig

        isolation = CrossOriginIsolation(IsolationConfig(embedder_policy="credentialless"))
    """

    __slots__ = ("config",)

    def __init__(self, config: IsolationConfig | None = None) -> None:
        self.config = config or IsolationConfig()

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        try:
            response = await next(request)
        except HTTPError as exc:
            response = Response(status=exc.status)
        return self.apply(response)

    def apply(self, response: AnyResponse) -> AnyResponse:
        """Return *response* with both isolation headers added."""
        return response.with_header(
            "Cross-Origin-Opener-Policy", self.config.opener_policy
        ).with_header("Cross-Origin-Embedder-Policy", self.config.embedder_policy)
