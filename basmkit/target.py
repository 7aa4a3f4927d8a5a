"""Output targets of the assembler."""

from __future__ import annotations

from enum import Enum


class Target(Enum):
    BM = "bm"
    NASM_LINUX_X86_64 = "nasm-linux-x86-64"
    NASM_FREEBSD_X86_64 = "nasm-freebsd-x86-64"
    NASM_WINDOWS_X86_64 = "nasm-windows-x86-64"
    NASM_MACOS_X86_64 = "nasm-macos-x86-64"
    GAS_FREEBSD_ARM64 = "gas-freebsd-arm64"

    def file_ext(self) -> str:
        """The file extension of output produced for this target."""
        return _TARGET_EXTS[self]

    def __str__(self) -> str:
        return self.value


_TARGET_EXTS = {
    Target.BM: ".bm",
    Target.NASM_LINUX_X86_64: ".asm",
    Target.NASM_FREEBSD_X86_64: ".S",
    Target.NASM_WINDOWS_X86_64: ".asm",
    Target.NASM_MACOS_X86_64: ".asm",
    Target.GAS_FREEBSD_ARM64: ".S",
}


def target_by_name(name: str) -> Target | None:
    """Look a target up by its name; None if there is no such target."""
    for target in Target:
        if target.value == name:
            return target
    return None