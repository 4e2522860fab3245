"""Documentation records and the closed enumerations they carry.

Enumeration values double as the tags written to the cache file, so a
member's value must never change once released.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

PATH_SEPARATOR = "::"


class Unsafety(StrEnum):
    """Whether a function is declared ``unsafe``."""

    UNSAFE = "Unsafe"
    NORMAL = "Normal"


class Constness(StrEnum):
    """Whether a function is declared ``const``."""

    CONST = "Const"
    NOT_CONST = "NotConst"


class Visibility(StrEnum):
    """Whether a function is part of the package's public surface."""

    PUBLIC = "Public"
    PRIVATE = "Private"


class Abi(StrEnum):
    """Calling conventions named in ``extern "..."`` qualifiers."""

    RUST = "Rust"
    C = "C"
    C_UNWIND = "C-unwind"
    SYSTEM = "system"
    SYSTEM_UNWIND = "system-unwind"
    CDECL = "cdecl"
    CDECL_UNWIND = "cdecl-unwind"
    STDCALL = "stdcall"
    STDCALL_UNWIND = "stdcall-unwind"
    FASTCALL = "fastcall"
    FASTCALL_UNWIND = "fastcall-unwind"
    VECTORCALL = "vectorcall"
    VECTORCALL_UNWIND = "vectorcall-unwind"
    THISCALL = "thiscall"
    THISCALL_UNWIND = "thiscall-unwind"
    AAPCS = "aapcs"
    AAPCS_UNWIND = "aapcs-unwind"
    WIN64 = "win64"
    WIN64_UNWIND = "win64-unwind"
    SYSV64 = "sysv64"
    SYSV64_UNWIND = "sysv64-unwind"
    EFIAPI = "efiapi"
    PTX_KERNEL = "ptx-kernel"
    MSP430_INTERRUPT = "msp430-interrupt"
    X86_INTERRUPT = "x86-interrupt"
    RUST_INTRINSIC = "rust-intrinsic"
    RUST_CALL = "rust-call"
    PLATFORM_INTRINSIC = "platform-intrinsic"
    UNADJUSTED = "unadjusted"


class MatchPolicy(StrEnum):
    """How query terms select symbols by their final path segment."""

    EXACT_THEN_SUBSTRING = "exact_then_substring"
    EXACT = "exact"
    SUBSTRING = "substring"


class PackageIdentity(BaseModel):
    """Name and version of a package; keys one documentation cache."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name} {self.version}"


class FunctionDoc(BaseModel):
    """Documentation extracted for one free function.

    Field aliases are the cache file's keys: ``path`` and ``abi``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    symbol_path: tuple[str, ...] = Field(alias="path")
    signature: str
    unsafety: Unsafety
    constness: Constness
    visibility: Visibility
    calling_convention: Abi = Field(alias="abi")

    @property
    def name(self) -> str:
        """Declared identifier (final path segment)."""
        return self.symbol_path[-1] if self.symbol_path else ""

    @property
    def qualified_name(self) -> str:
        return PATH_SEPARATOR.join(self.symbol_path)
