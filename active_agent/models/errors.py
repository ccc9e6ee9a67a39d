class ProviderError(RuntimeError):
    """Base class for failures raised by generation providers."""


class ProviderRequestError(ProviderError):
    """The remote endpoint could not be reached or returned an unusable body."""


class ProviderResponseError(ProviderError):
    """The remote payload decoded but lacked the field the provider reads."""
