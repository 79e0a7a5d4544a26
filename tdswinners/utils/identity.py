from dataclasses import dataclass

import base58

PUBKEY_BYTES = 32


@dataclass(frozen=True, order=True)
class ValidatorIdentity:
    """
    Fixed-size public key of a ledger participant.

    Equality, hashing and ordering all follow the raw byte value, which is what
    every ranking uses as its final tie-break.
    """

    raw: bytes

    def __post_init__(self):
        if not isinstance(self.raw, bytes) or len(self.raw) != PUBKEY_BYTES:
            raise ValueError(
                f"identity must be {PUBKEY_BYTES} bytes, got {len(self.raw)!r}"
            )

    @classmethod
    def from_string(cls, text: str) -> "ValidatorIdentity":
        s = (text or "").strip()
        if not s:
            raise ValueError("empty identity")
        try:
            raw = base58.b58decode(s)
        except ValueError as e:
            raise ValueError(f"invalid base58 identity {s!r}: {e}") from e
        return cls(raw)

    def __str__(self) -> str:
        return base58.b58encode(self.raw).decode("ascii")

    def __repr__(self) -> str:
        return f"ValidatorIdentity({str(self)})"
