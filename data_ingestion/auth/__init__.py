from data_ingestion.auth.credential_cache import Credential, CredentialCache
from data_ingestion.auth.token_acquirer import BrowserTokenAcquirer
from data_ingestion.auth.token_provider import TokenProvider

__all__ = [
    "Credential",
    "CredentialCache",
    "BrowserTokenAcquirer",
    "TokenProvider",
]
