# src/hyperunit/helper/crypto.py
from __future__ import annotations

import base64
import binascii
import re
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, utils
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from hyperunit.core.enums import KeyScheme

_HEX_RE = re.compile(r"^(?:[0-9a-fA-F]{2})+$")


class MalformedSignature(ValueError):
    """The signature string cannot be decoded into signature material."""


class MalformedKey(ValueError):
    """Registry key material cannot be loaded for the declared scheme."""


def decode_bytes(encoded: str) -> bytes:
    """
    Decode a hex (optionally 0x-prefixed) or standard base64 string.

    The bridge returns base64; hex is accepted for keys and for callers
    that re-encode signatures. Anything else raises MalformedSignature.
    """
    if not isinstance(encoded, str):
        raise MalformedSignature(f"expected a string, got {type(encoded).__name__}")
    s = encoded.strip()
    if s.startswith(("0x", "0X")):
        s = s[2:]
        if not _HEX_RE.match(s):
            raise MalformedSignature("invalid hex encoding")
        return bytes.fromhex(s)
    if _HEX_RE.match(s):
        return bytes.fromhex(s)
    try:
        raw = base64.b64decode(s, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedSignature(f"neither hex nor base64: {exc}") from exc
    if not raw:
        raise MalformedSignature("empty signature")
    if base64.b64encode(raw).decode("ascii") != s:
        raise MalformedSignature("non-canonical base64 encoding")
    return raw


def _decode_key(public_key: str) -> bytes:
    try:
        return decode_bytes(public_key)
    except MalformedSignature as exc:
        raise MalformedKey(str(exc)) from exc


class SignatureVerifier(ABC):
    """
    Abstract interface for one guardian signature scheme.

    Given (public_key, signature, message), a verifier:

      * raises MalformedKey if the registry key cannot be loaded;
      * raises MalformedSignature if the signature cannot be decoded into
        material for this scheme;
      * otherwise returns True iff the signature is valid for `message`.

    `message` is the canonical proposal bytes, unhashed. Each scheme
    applies its own digest.
    """

    scheme: KeyScheme

    @abstractmethod
    def verify(self, public_key: str, signature: str, message: bytes) -> bool:
        raise NotImplementedError


class EcdsaVerifier(SignatureVerifier):
    """
    ECDSA over SHA-256 on a given curve.

    Assumptions:
      * public_key is a hex SEC1 point, compressed or uncompressed;
      * signature is either the 64-byte raw concatenation r||s (what
        WebCrypto produces) or a DER-encoded signature, in base64 or hex.
    """

    def __init__(self, scheme: KeyScheme, curve: ec.EllipticCurve) -> None:
        self.scheme = scheme
        self.curve = curve

    def _load_key(self, public_key: str) -> ec.EllipticCurvePublicKey:
        point = _decode_key(public_key)
        try:
            return ec.EllipticCurvePublicKey.from_encoded_point(self.curve, point)
        except ValueError as exc:
            raise MalformedKey(f"invalid {self.curve.name} point: {exc}") from exc

    def _to_der(self, raw: bytes) -> bytes:
        half = (self.curve.key_size + 7) // 8
        if len(raw) == 2 * half:
            r = int.from_bytes(raw[:half], "big")
            s = int.from_bytes(raw[half:], "big")
            return utils.encode_dss_signature(r, s)
        try:
            utils.decode_dss_signature(raw)
        except ValueError as exc:
            raise MalformedSignature(
                f"expected {2 * half}-byte r||s or DER, got {len(raw)} bytes"
            ) from exc
        return raw

    def verify(self, public_key: str, signature: str, message: bytes) -> bool:
        key = self._load_key(public_key)
        der = self._to_der(decode_bytes(signature))
        try:
            key.verify(der, message, ec.ECDSA(hashes.SHA256()))
        except InvalidSignature:
            return False
        return True


class Ed25519Verifier(SignatureVerifier):
    """
    Ed25519 over the raw canonical message.

    public_key is the 32-byte raw key (hex); signature is 64 bytes.
    """

    scheme = KeyScheme.ED25519

    def verify(self, public_key: str, signature: str, message: bytes) -> bool:
        key_bytes = _decode_key(public_key)
        try:
            key = Ed25519PublicKey.from_public_bytes(key_bytes)
        except ValueError as exc:
            raise MalformedKey(f"invalid ed25519 key: {exc}") from exc

        raw = decode_bytes(signature)
        if len(raw) != 64:
            raise MalformedSignature(f"expected 64-byte ed25519 signature, got {len(raw)} bytes")
        try:
            key.verify(raw, message)
        except InvalidSignature:
            return False
        return True


class SignatureVerifierRegistry:
    """
    Verifiers keyed by the scheme they implement.

    The guardian verifier looks up the scheme a node declares; a scheme
    with no registered verifier is reported as unsupported for that node
    rather than guessed at.

        registry = SignatureVerifierRegistry([Ed25519Verifier()])
        verifier = registry.get(KeyScheme.ED25519)
    """

    def __init__(self, verifiers: Iterable[SignatureVerifier] = ()) -> None:
        self._verifiers: Dict[KeyScheme, SignatureVerifier] = {}
        for verifier in verifiers:
            self.register(verifier)

    def register(self, verifier: SignatureVerifier) -> None:
        scheme = getattr(verifier, "scheme", None)
        if scheme is None:
            raise ValueError("Verifier must have a 'scheme' attribute.")
        self._verifiers[KeyScheme(scheme)] = verifier

    def get(self, scheme: KeyScheme) -> Optional[SignatureVerifier]:
        return self._verifiers.get(scheme)

    def schemes(self) -> frozenset:
        return frozenset(self._verifiers)


def default_signature_verifiers() -> SignatureVerifierRegistry:
    """
    Registry with every scheme this client supports.
    """
    return SignatureVerifierRegistry(
        [
            EcdsaVerifier(KeyScheme.ECDSA_P256, ec.SECP256R1()),
            EcdsaVerifier(KeyScheme.ECDSA_SECP256K1, ec.SECP256K1()),
            Ed25519Verifier(),
        ]
    )
