"""
Unit tests for blindfuzz.util.shell
"""
import unittest

from blindfuzz.util.shell import (command_exists, command_program, is_windows,
                                  resolve_invocation, shell_wrapper)


class TestShellSelection(unittest.TestCase):
    def test_windows(self):
        """Test cmd.exe wrapping on Windows"""
        self.assertTrue(is_windows("win32"))
        self.assertEqual(shell_wrapper("win32"), ("cmd.exe", "/c"))
        self.assertEqual(resolve_invocation("target.exe", "win32"), ["cmd.exe", "/c", "target.exe"])

    def test_posix(self):
        """Test sh -c wrapping everywhere else"""
        for platform in ("linux", "darwin", "freebsd13"):
            self.assertFalse(is_windows(platform))
            self.assertEqual(resolve_invocation("./t -x", platform), ["sh", "-c", "./t -x"])

    def test_command_program(self):
        """Test extracting the program from a command string"""
        self.assertEqual(command_program("./t --strict", "linux"), "./t")
        self.assertEqual(command_program("'./my target' -x", "linux"), "./my target")
        self.assertEqual(command_program("'unbalanced", "linux"), "'unbalanced")
        self.assertEqual(command_program("", "linux"), "")


def test_command_exists(tmp_path):
    (tmp_path / "prog").write_text("", encoding="utf-8")
    (tmp_path / "with space").write_text("", encoding="utf-8")
    assert command_exists("prog", str(tmp_path))
    assert command_exists("./prog -v", str(tmp_path))
    assert command_exists("with space", str(tmp_path))
    assert not command_exists("./missing", str(tmp_path))
    assert not command_exists("./missing prog", str(tmp_path))
