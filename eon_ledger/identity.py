"""
Identity Module

Addresses identify token holders. The authorization predicate answering
"did address X authorize this invocation?" is supplied by the host
environment as a CallerContext and threaded into every mutating call.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Union
import hashlib

ADDRESS_LENGTH = 20


@dataclass(frozen=True)
class Address:
    """Opaque 20-byte account identifier"""
    value: bytes

    def __post_init__(self):
        if not isinstance(self.value, (bytes, bytearray)):
            raise ValueError(f"Address must be bytes, got {type(self.value).__name__}")
        if len(self.value) != ADDRESS_LENGTH:
            raise ValueError(f"Address must be {ADDRESS_LENGTH} bytes, got {len(self.value)}")
        object.__setattr__(self, 'value', bytes(self.value))

    @classmethod
    def from_hex(cls, text: str) -> 'Address':
        """Parse a 40-character hex string (optional 0x prefix)"""
        if text.startswith(("0x", "0X")):
            text = text[2:]
        try:
            raw = bytes.fromhex(text)
        except ValueError:
            raise ValueError(f"Invalid address hex: {text!r}")
        return cls(raw)

    @classmethod
    def from_label(cls, label: str) -> 'Address':
        """Deterministic address derived from a text label (fixtures, tooling)"""
        return cls(hashlib.sha256(label.encode('utf-8')).digest()[:ADDRESS_LENGTH])

    @property
    def hex(self) -> str:
        return self.value.hex()

    def __str__(self) -> str:
        return self.hex

    def __repr__(self) -> str:
        return f"Address('{self.hex}')"


AddressLike = Union[Address, str, bytes]


def as_address(value: AddressLike) -> Address:
    """Coerce hex strings and raw bytes to Address"""
    if isinstance(value, Address):
        return value
    if isinstance(value, str):
        return Address.from_hex(value)
    return Address(value)


class CallerContext(ABC):
    """Authenticated caller of one ledger invocation"""

    @property
    @abstractmethod
    def invoker(self) -> Address:
        """Address that submitted the invocation"""
        pass

    @abstractmethod
    def is_authorized_by(self, address: Address) -> bool:
        """Check whether `address` authorized this invocation"""
        pass


@dataclass(frozen=True)
class Invocation(CallerContext):
    """
    Caller context backed by a set of verified signers.
    The invoker is always a signer; `cosigners` lists any additional
    addresses whose witness accompanied the invocation.
    """
    sender: Address
    cosigners: FrozenSet[Address] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, 'sender', as_address(self.sender))
        object.__setattr__(self, 'cosigners', frozenset(as_address(a) for a in self.cosigners))

    @classmethod
    def signed_by(cls, sender: AddressLike, *cosigners: AddressLike) -> 'Invocation':
        return cls(as_address(sender), frozenset(as_address(a) for a in cosigners))

    @property
    def invoker(self) -> Address:
        return self.sender

    @property
    def signers(self) -> FrozenSet[Address]:
        return self.cosigners | {self.sender}

    def is_authorized_by(self, address: Address) -> bool:
        return address in self.signers

    def with_cosigners(self, addresses: Iterable[AddressLike]) -> 'Invocation':
        return Invocation(self.sender, self.cosigners | {as_address(a) for a in addresses})
