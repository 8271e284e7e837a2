"""varnet package root."""

from varnet.exceptions import DocumentFormatError, NeverThrown, ProviderError
from varnet.invariants import never

__all__ = [
    "__version__",
    "DocumentFormatError",
    "NeverThrown",
    "ProviderError",
    "never",
]

__version__ = "0.1.0"
