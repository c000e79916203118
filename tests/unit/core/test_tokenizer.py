import pytest

from spincheck.core import LogFormat, detect_format, tokenize
from spincheck.core.tokenizer import (
    is_instruction_line,
    normalize_line,
    strip_address,
    tokenize_lines,
)


class TestNormalizeLine:

    def test_tabs_and_runs_collapsed(self):
        assert normalize_line("  MRS\t\tx8,   CNTVCT_EL0  ") == "mrs x8, cntvct_el0"

    def test_blank(self):
        assert normalize_line(" \t ") == ""


class TestStripAddress:

    def test_strips_prefix(self):
        assert strip_address("0x0000ffffa409da80: nop") == "nop"

    def test_address_only(self):
        assert strip_address("0x0000ffffa409da80:") == ""

    def test_no_prefix_unchanged(self):
        assert strip_address("b.lt 0x0000ffff78e31bf8") == "b.lt 0x0000ffff78e31bf8"


class TestDetectFormat:

    def test_pipe_means_hex(self):
        assert detect_format(["x", "0x1: 1f20 03d5 | e953 40d1"]) is LogFormat.HEX

    def test_no_pipe_means_mnemonic(self):
        assert detect_format(["0x1: nop", "0x2: yield"]) is LogFormat.MNEMONIC

    def test_empty_region_is_mnemonic(self):
        assert detect_format([]) is LogFormat.MNEMONIC


class TestTokenizeHex:

    def test_splits_and_trims(self):
        line = "  0x0000ffff9d5576ac: 1f20 03d5 | fd7b 43a9 | ff03 0191"
        assert tokenize(line, LogFormat.HEX) == ["1f20 03d5", "fd7b 43a9", "ff03 0191"]

    def test_drops_empty_pieces(self):
        assert tokenize("0x10: 1f20 03d5 || 3f20 03d5 |", LogFormat.HEX) == ["1f20 03d5", "3f20 03d5"]

    def test_case_normalised(self):
        assert tokenize("0x10: 1F20 03D5 | ABFF FF54", LogFormat.HEX) == ["1f20 03d5", "abff ff54"]

    def test_order_preserved(self):
        tokens = tokenize("0x10: 0001 3fd6 | 48e0 3bd5 | 0839 0091", LogFormat.HEX)
        assert tokens == ["0001 3fd6", "48e0 3bd5", "0839 0091"]


class TestTokenizeMnemonic:

    def test_single_instruction(self):
        assert tokenize("  0x0000ffffa409da84:\tsub\tsp, sp, #0x20", LogFormat.MNEMONIC) == ["sub sp, sp, #0x20"]

    def test_comment_cut(self):
        line = "  0x0000ffffa409daa4:   nop     ;*invokestatic onSpinWait {reexecute=0}"
        assert tokenize(line, LogFormat.MNEMONIC) == ["nop"]

    def test_branch_keeps_target(self):
        line = "0x0000ffff78e31c04:   b.lt\t0x0000ffff78e31bf8    ;*invokestatic onSpinWait"
        assert tokenize(line, LogFormat.MNEMONIC) == ["b.lt 0x0000ffff78e31bf8"]


class TestTokenizeEmpty:

    @pytest.mark.parametrize("line", [
        "",
        "    ",
        "0x0000ffff9d5576ac: ;*invokestatic onSpinWait {reexecute=0 rethrow=0 return_oop=0}",
        "                    ; - compiler.onSpinWait.TestOnSpinWaitAArch64$Launcher::test@0 (line 161)",
        "0x0000ffff9d5576ac:",
        "  #           [sp+0x40]  (sp of caller)",
    ])
    @pytest.mark.parametrize("fmt", list(LogFormat))
    def test_no_tokens(self, line, fmt):
        assert tokenize(line, fmt) == []


class TestInstructionLine:

    def test_address_without_comment(self):
        assert is_instruction_line("0x0000ffffa409da80:   nop")

    def test_comment_excluded(self):
        assert not is_instruction_line("0x0000ffffa409da88:   stp x29, x30, [sp, #16] ;*synchronization entry")

    def test_no_address(self):
        assert not is_instruction_line("[Verified Entry Point]")


class TestTokenizeLines:

    def test_concatenates_across_lines(self):
        lines = ["0x1: 48e0 3bd5 | 0839 0091", "0x2: ;*comment", "0x3: 3f20 03d5"]
        assert tokenize_lines(lines, LogFormat.HEX) == ["48e0 3bd5", "0839 0091", "3f20 03d5"]
