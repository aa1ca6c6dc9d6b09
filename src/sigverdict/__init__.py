"""sigverdict: cached, relay-computed verdicts for aggregate signatures."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("sigverdict")
except PackageNotFoundError:
    __version__ = "dev"

from sigverdict.api import VerificationCache
from sigverdict.codes import AuthErrorCode, PutOutcome
from sigverdict.config import VerifierConfig
from sigverdict.contracts import CallContext, RelayRequest, VerificationNotice, VerificationRequest
from sigverdict.kernel.guard import AuthError, UntrustedProgram, UntrustedSource
from sigverdict.kernel.ingestor import StoreConflict
from sigverdict.kernel.query import NotAvailable, QueryResult

__all__ = [
    "__version__",
    "VerificationCache",
    "VerifierConfig",
    "VerificationRequest",
    "CallContext",
    "RelayRequest",
    "VerificationNotice",
    "QueryResult",
    "PutOutcome",
    "AuthErrorCode",
    "AuthError",
    "UntrustedSource",
    "UntrustedProgram",
    "StoreConflict",
    "NotAvailable",
]
