# execledger/crypto/keys.py
from typing import Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)


class IssuerKeyPair:
    """
    Ed25519 key pair wrapper.

    Holds the private key in memory only; nothing here serializes it.
    A verify-only instance (no private key) comes from the from_public_* helpers.
    """

    def __init__(self, public_key: Ed25519PublicKey, private_key: Optional[Ed25519PrivateKey] = None):
        self._private_key = private_key
        self.public_key = public_key

    @classmethod
    def generate(cls) -> "IssuerKeyPair":
        private_key = Ed25519PrivateKey.generate()
        return cls(private_key.public_key(), private_key)

    @classmethod
    def from_public_der_hex(cls, der_hex: str) -> "IssuerKeyPair":
        key = serialization.load_der_public_key(bytes.fromhex(der_hex.strip()))
        if not isinstance(key, Ed25519PublicKey):
            raise ValueError("Public key is not an Ed25519 key")
        return cls(key)

    @classmethod
    def from_public_pem(cls, pem: Union[str, bytes]) -> "IssuerKeyPair":
        if isinstance(pem, str):
            pem = pem.encode("ascii")
        key = serialization.load_pem_public_key(pem)
        if not isinstance(key, Ed25519PublicKey):
            raise ValueError("Public key is not an Ed25519 key")
        return cls(key)

    @classmethod
    def from_public_text(cls, text: str) -> "IssuerKeyPair":
        """PEM block or hex DER (SPKI), whichever the text looks like."""
        if not isinstance(text, str):
            raise ValueError(f"Public key must be text, got {type(text).__name__}")
        text = text.strip()
        if text.startswith("-----BEGIN"):
            return cls.from_public_pem(text)
        return cls.from_public_der_hex(text)

    @property
    def can_sign(self) -> bool:
        return self._private_key is not None

    def public_key_der_hex(self) -> str:
        der = self.public_key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        return der.hex()

    def public_key_pem(self) -> str:
        return self.public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode("ascii")

    def sign_bytes(self, data: bytes) -> bytes:
        if not self.can_sign:
            raise ValueError("Verify-only key pair cannot sign")
        return self._private_key.sign(data)

    def verify_bytes(self, signature: bytes, data: bytes) -> bool:
        try:
            self.public_key.verify(signature, data)
            return True
        except (InvalidSignature, ValueError):
            return False
