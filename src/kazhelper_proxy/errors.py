from __future__ import annotations


class ProviderError(Exception):
    """Base error for provider failures."""


class InvalidRequestError(ProviderError):
    pass


class ProviderUnconfiguredError(ProviderError):
    def __init__(self, message: str = "not configured"):
        super().__init__(message)


class UpstreamNetworkError(ProviderError):
    """Connection, DNS or protocol failure before a response arrived."""


class UpstreamTimeoutError(ProviderError):
    """Per-attempt deadline exceeded; the in-flight request was cancelled."""


class UpstreamHTTPError(ProviderError):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class EmptyResponseError(ProviderError):
    """Upstream answered 2xx but carried no extractable completion text."""


class TotalFailureError(ProviderError):
    def __init__(self, failures):
        self.failures = list(failures)
        super().__init__("; ".join(f"{f.provider_name} failed: {f.message}" for f in self.failures))
