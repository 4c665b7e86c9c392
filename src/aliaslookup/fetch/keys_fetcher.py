# src/aliaslookup/fetch/keys_fetcher.py — v1
"""authorized_keys parser.

Each non-blank, non-comment line holds ``[options] <type> <base64> [comment]``.
The blob must decode and start with the declared key type; for algorithms
the cryptography package supports, the key material is loaded as well.
The first record returned bundles every key under the "All keys" label.
"""

from __future__ import annotations

import base64
import binascii
import struct

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.serialization import load_ssh_public_key

from aliaslookup.core.errors import RecordParseError
from aliaslookup.core.models import KeyRecord
from aliaslookup.fetch.base_fetcher import BaseFetcher

ALL_KEYS_COMMENT = "All keys"

KEY_TYPES = frozenset({
    "ssh-rsa",
    "ssh-dss",
    "ssh-ed25519",
    "ssh-ed448",
    "ecdsa-sha2-nistp256",
    "ecdsa-sha2-nistp384",
    "ecdsa-sha2-nistp521",
    "sk-ssh-ed25519@openssh.com",
    "sk-ecdsa-sha2-nistp256@openssh.com",
})
_CERT_SUFFIX = "-cert-v01@openssh.com"


def is_key_type(token: str) -> bool:
    if token in KEY_TYPES:
        return True
    return token.endswith(_CERT_SUFFIX) and (
        token[: -len(_CERT_SUFFIX)] in KEY_TYPES
        or f"{token[: -len(_CERT_SUFFIX)]}@openssh.com" in KEY_TYPES
    )


def parse_key_line(line: str, line_number: int = 1) -> KeyRecord:
    """Parse one authorized_keys line into its canonical form.

    Raises:
        RecordParseError: If the line holds no valid key.
    """
    tokens = line.split()
    index = next((i for i, tok in enumerate(tokens) if is_key_type(tok)), None)
    if index is None:
        raise RecordParseError(line_number, "no key type found")
    if index + 1 >= len(tokens):
        raise RecordParseError(line_number, "missing key data")

    key_type = tokens[index]
    blob = _decode_blob(tokens[index + 1], key_type, line_number)
    comment = " ".join(tokens[index + 2:])

    encoded = base64.b64encode(blob).decode("ascii")
    if not key_type.endswith(_CERT_SUFFIX):
        try:
            load_ssh_public_key(f"{key_type} {encoded}".encode("ascii"))
        except UnsupportedAlgorithm:
            pass
        except ValueError as e:
            raise RecordParseError(line_number, f"invalid {key_type} key: {e}") from e

    key_line = f"{key_type} {encoded}"
    if comment:
        key_line = f"{key_line} {comment}"
    return KeyRecord(key_line=key_line, comment=comment)


def _decode_blob(data: str, key_type: str, line_number: int) -> bytes:
    try:
        blob = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise RecordParseError(line_number, f"key data is not base64: {e}") from e

    # RFC 4253: the blob starts with the algorithm name as an SSH string
    if len(blob) < 4:
        raise RecordParseError(line_number, "key data too short")
    (length,) = struct.unpack(">I", blob[:4])
    embedded = blob[4:4 + length].decode("ascii", errors="replace")
    if embedded != key_type:
        raise RecordParseError(
            line_number, f"key data is {embedded!r}, declared {key_type!r}"
        )
    return blob


class KeysFetcher(BaseFetcher):
    """Fetches authorized SSH public keys."""

    model = KeyRecord

    def parse(self, text: str) -> list[KeyRecord]:
        keys: list[KeyRecord] = []
        for line_number, line in enumerate(text.splitlines(), start=1):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            keys.append(parse_key_line(stripped, line_number))

        if not keys:
            return keys

        bundle = KeyRecord(
            key_line="\n".join(k.key_line for k in keys),
            comment=ALL_KEYS_COMMENT,
        )
        return [bundle, *keys]
