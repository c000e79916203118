# Shared PrintAssembly samples and synthetic log builders.
#
# The fixed samples mirror real HotSpot output on AArch64, with and without
# the hsdis disassembler. The factory fixtures assemble logs around arbitrary
# instruction sequences so tests can vary one thing at a time.

from typing import Callable, List, Sequence, Tuple

import pytest

HEADER = (
    "# {method} {0x0000ffff6ac00370} 'test' '()V' in "
    "'compiler/onSpinWait/TestOnSpinWaitAArch64$Launcher'"
)
FRAME_TEST_0 = (
    "                      ; - compiler.onSpinWait.TestOnSpinWaitAArch64$Launcher::test@0 (line 161)"
)
FRAME_TEST_ENTRY = (
    "                      ; - compiler.onSpinWait.TestOnSpinWaitAArch64$Launcher::test@-1 (line 161)"
)
CALL_SITE_COMMENT = ";*invokestatic onSpinWait {reexecute=0 rethrow=0 return_oop=0}"

PRELUDE: Tuple[str, ...] = (
    "CompileCommand: compileonly compiler/onSpinWait/TestOnSpinWaitAArch64$Launcher.test bool compileonly = true",
    "openjdk version \"21\" 2023-09-19",
    "",
    "============================= C2-compiled nmethod ==============================",
    "----------------------------------- Assembly -----------------------------------",
    "",
    "Compiled method (c2)     283    1             compiler.onSpinWait.TestOnSpinWaitAArch64$Launcher::test (4 bytes)",
    " total in heap  [0x0000ffff9d557510,0x0000ffff9d5576b8] = 424",
    "",
    "[Disassembly]",
    "--------------------------------------------------------------------------------",
    "[Constant Pool (empty)]",
    "",
    "--------------------------------------------------------------------------------",
    "",
    "[Verified Entry Point]",
)

EPILOGUE: Tuple[str, ...] = (
    "--------------------------------------------------------------------------------",
    "[Exception Handler]",
    "  0x0000ffff9d5576c0: 0000 0014 | 0000 0014",
    "--------------------------------------------------------------------------------",
    "[/Disassembly]",
)


@pytest.fixture
def hex_nop_log() -> Tuple[str, ...]:
    """c2, -XX:OnSpinWaitInst=nop -XX:OnSpinWaitInstCount=3, no hsdis."""
    return PRELUDE + (
        "  " + HEADER,
        "  #           [sp+0x40]  (sp of caller)",
        "  0x0000ffff9d557680: 1f20 03d5 | e953 40d1 | 3f01 00f9 | ff03 01d1 | fd7b 03a9 | 1f20 03d5 | 1f20 03d5",
        "",
        "  0x0000ffff9d5576ac: " + CALL_SITE_COMMENT,
        FRAME_TEST_0,
        "  0x0000ffff9d5576ac: 1f20 03d5 | fd7b 43a9 | ff03 0191",
    ) + EPILOGUE


@pytest.fixture
def mnemonic_nop_log() -> Tuple[str, ...]:
    """c2, -XX:OnSpinWaitInst=nop -XX:OnSpinWaitInstCount=7, with hsdis."""
    return PRELUDE + (
        "  " + HEADER,
        "  #           [sp+0x20]  (sp of caller)",
        "  0x0000ffffa409da80:   nop",
        "  0x0000ffffa409da84:\tsub\tsp, sp, #0x20",
        "  0x0000ffffa409da88:   stp\tx29, x30, [sp, #16]         ;*synchronization entry",
        FRAME_TEST_ENTRY,
        "  0x0000ffffa409da8c:   nop",
        "  0x0000ffffa409da90:   nop",
        "  0x0000ffffa409da94:   nop",
        "  0x0000ffffa409da98:   nop",
        "  0x0000ffffa409da9c:   nop",
        "  0x0000ffffa409daa0:   nop",
        "  0x0000ffffa409daa4:   nop                                 " + CALL_SITE_COMMENT,
        FRAME_TEST_0,
        "  0x0000ffffa409daa8:   ldp\tx29, x30, [sp, #16]",
        "  0x0000ffffa409daac:   add\tsp, sp, #0x20",
        "  0x0000ffffa409dab0:   ret",
    ) + EPILOGUE


@pytest.fixture
def hex_counter_log() -> Tuple[str, ...]:
    """-XX:OnSpinWaitInst=counter -XX:OnSpinWaitCounterDelay=14, no hsdis."""
    return PRELUDE + (
        "  " + HEADER,
        "  #           [sp+0x20]  (sp of caller)",
        "  0x0000ffff9432c7e0: 1f20 03d5 | ff83 00d1 | fd7b 01a9",
        "  0x0000ffff9432c7ec: ;*synchronization entry",
        FRAME_TEST_ENTRY,
        "  0x0000ffff9432c7ec: 0001 3fd6 | 48e0 3bd5 | 0839 0091 | 3f20 03d5 | 49e0 3bd5 | 3f01 08eb",
        "  0x0000ffff9432c804: " + CALL_SITE_COMMENT,
        FRAME_TEST_0,
        "  0x0000ffff9432c804: abff ff54 | fd7b 41a9 | ff83 0091",
    ) + EPILOGUE


@pytest.fixture
def mnemonic_counter_log() -> Tuple[str, ...]:
    """-XX:OnSpinWaitInst=counter -XX:OnSpinWaitCounterDelay=14, with hsdis."""
    return PRELUDE + (
        "  " + HEADER,
        "  #           [sp+0x20]  (sp of caller)",
        "  0x0000ffff78e31be0:   nop",
        "  0x0000ffff78e31be4:   sub\tsp, sp, #0x20",
        "  0x0000ffff78e31be8:   stp\tx29, x30, [sp, #16]\t\t;*synchronization entry",
        FRAME_TEST_ENTRY,
        "  0x0000ffff78e31bf0:   mrs\tx8, cntvct_el0",
        "  0x0000ffff78e31bf4:   add\tx8, x8, #0xe",
        "  0x0000ffff78e31bf8:   yield",
        "  0x0000ffff78e31bfc:   mrs\tx9, cntvct_el0",
        "  0x0000ffff78e31c00:   cmp\tx9, x8",
        "  0x0000ffff78e31c04:   b.lt\t0x0000ffff78e31bf8          " + CALL_SITE_COMMENT,
        FRAME_TEST_0,
        "  0x0000ffff78e31c08:   ldp\tx29, x30, [sp, #16]",
        "  0x0000ffff78e31c0c:   add\tsp, sp, #0x20",
        "  0x0000ffff78e31c10:   ret",
    ) + EPILOGUE


@pytest.fixture
def make_hex_repeated_log() -> Callable[..., Tuple[str, ...]]:
    """
    Hex log whose body holds body_tokens on one line and whose line after
    the call site holds after_tokens.
    """
    def build(
        body_tokens:  Sequence[str],
        after_tokens: Sequence[str] = ("fd7b 43a9", "ff03 0191"),
    ) -> Tuple[str, ...]:
        lines: List[str] = list(PRELUDE)
        lines.append("  " + HEADER)
        lines.append("  #           [sp+0x40]  (sp of caller)")
        if body_tokens:
            lines.append("  0x0000ffff9d557680: " + " | ".join(body_tokens))
        lines.append("")
        lines.append("  0x0000ffff9d5576ac: " + CALL_SITE_COMMENT)
        lines.append(FRAME_TEST_0)
        lines.append("  0x0000ffff9d5576ac: " + " | ".join(after_tokens))
        lines.extend(EPILOGUE)
        return tuple(lines)

    return build


@pytest.fixture
def make_mnemonic_repeated_log() -> Callable[..., Tuple[str, ...]]:
    """Mnemonic log: one line per body instruction, then the call-site line."""
    def build(body: Sequence[str], call_instruction: str) -> Tuple[str, ...]:
        lines: List[str] = list(PRELUDE)
        lines.append("  " + HEADER)
        lines.append("  #           [sp+0x20]  (sp of caller)")
        address = 0xFFFFA409DA80
        for instruction in body:
            lines.append("  0x{:016x}:   {}".format(address, instruction))
            address += 4
        lines.append("  0x{:016x}:   {}\t\t{}".format(address, call_instruction, CALL_SITE_COMMENT))
        lines.append(FRAME_TEST_0)
        lines.append("  0x{:016x}:   ret".format(address + 4))
        lines.extend(EPILOGUE)
        return tuple(lines)

    return build


@pytest.fixture
def make_hex_idiom_log() -> Callable[..., Tuple[str, ...]]:
    """Hex counter log with words split after the fifth, across the call site."""
    def build(words: Sequence[str]) -> Tuple[str, ...]:
        first, second = list(words[:5]), list(words[5:])
        lines: List[str] = list(PRELUDE)
        lines.append("  " + HEADER)
        lines.append("  0x0000ffff9432c7ec: " + " | ".join(["0001 3fd6"] + first))
        lines.append("  0x0000ffff9432c804: " + CALL_SITE_COMMENT)
        lines.append(FRAME_TEST_0)
        lines.append("  0x0000ffff9432c804: " + " | ".join(second + ["fd7b 41a9", "ff83 0091"]))
        lines.extend(EPILOGUE)
        return tuple(lines)

    return build


@pytest.fixture
def make_mnemonic_idiom_log() -> Callable[..., Tuple[str, ...]]:
    def build(instructions: Sequence[str]) -> Tuple[str, ...]:
        lines: List[str] = list(PRELUDE)
        lines.append("  " + HEADER)
        address = 0xFFFF78E31BF0
        for instruction in instructions:
            lines.append("  0x{:016x}:   {}".format(address, instruction))
            address += 4
        lines.append("  0x{:016x}:   ret".format(address))
        lines.extend(EPILOGUE)
        return tuple(lines)

    return build
