class ScanError(Exception):
    pass


class InvalidAddressError(ScanError):
    """Owner identifier is not a well-formed Solana account address."""


class UpstreamUnavailableError(ScanError):
    """Chain RPC could not be reached or returned an error. The scan may be retried."""


class MetadataUnavailableError(ScanError):
    """A single metadata provider failed. Absorbed at the source boundary."""
