from identifier.codec import decode, encode, is_valid, validate
from identifier.counter import MonotonicCounter
from identifier.generator import Generator, get_generator, new_xid
from identifier.seed import IdentitySeed, get_identity_seed
from identifier.xid import XID

__all__ = [
    "XID",
    "Generator",
    "IdentitySeed",
    "MonotonicCounter",
    "decode",
    "encode",
    "get_generator",
    "get_identity_seed",
    "is_valid",
    "new_xid",
    "validate",
]
