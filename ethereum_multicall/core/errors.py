"""
Error types raised by the multicall pipeline
"""


class MulticallError(Exception):
    """Base class for all multicall errors"""


class ConfigurationError(MulticallError):
    """No execution backend, or more than one, was configured"""


class EncodingError(MulticallError):
    """A method call could not be encoded against its contract ABI"""

    def __init__(self, message: str, contract_reference: str | None = None, method_name: str | None = None):
        super().__init__(message)
        self.contract_reference = contract_reference
        self.method_name = method_name


class UnsupportedNetworkError(MulticallError):
    """No aggregator address is known for the connected chain"""


class DecodingError(MulticallError):
    """Return data of a call could not be decoded against its output types"""

    def __init__(self, message: str, reference: str | None = None, method_name: str | None = None):
        super().__init__(message)
        self.reference = reference
        self.method_name = method_name
