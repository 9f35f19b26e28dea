"""
Request signers.
"""
from .signer import (
    SignerProvider,
    NoopSigner,
    HeaderSigner,
    BasicAuthSigner,
    BearerSigner,
    HmacSha256Signer,
    basic_auth_value,
)

__all__ = [
    "SignerProvider",
    "NoopSigner",
    "HeaderSigner",
    "BasicAuthSigner",
    "BearerSigner",
    "HmacSha256Signer",
    "basic_auth_value",
]
