# SPDX-License-Identifier: LGPL-3.0-or-later
import os
import tempfile
import unittest
from pathlib import Path

from debian2pve.core.file_ops import atomic_write, atomic_write_text, backup_copy, safe_unlink


class TestAtomicWrite(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.dir = Path(self._td.name)

    def tearDown(self):
        self._td.cleanup()

    def test_creates_parent_dirs_and_file(self):
        target = self.dir / "etc" / "sysctl.d" / "99-test.conf"

        atomic_write_text(target, "net.ipv4.ip_forward=1\n")

        self.assertEqual(target.read_text(encoding="utf-8"), "net.ipv4.ip_forward=1\n")
        self.assertEqual(target.stat().st_mode & 0o777, 0o644)

    def test_explicit_mode_wins(self):
        target = self.dir / "f"
        target.write_text("old", encoding="utf-8")
        os.chmod(target, 0o600)

        atomic_write_text(target, "new", mode=0o640)

        self.assertEqual(target.stat().st_mode & 0o777, 0o640)

    def test_existing_mode_is_kept(self):
        target = self.dir / "f"
        target.write_text("old", encoding="utf-8")
        os.chmod(target, 0o600)

        atomic_write_text(target, "new")

        self.assertEqual(target.read_text(encoding="utf-8"), "new")
        self.assertEqual(target.stat().st_mode & 0o777, 0o600)

    def test_failure_keeps_target_and_removes_temp(self):
        target = self.dir / "f"
        target.write_text("old", encoding="utf-8")

        with self.assertRaises(RuntimeError):
            with atomic_write(target) as tmp:
                tmp.write_text("half", encoding="utf-8")
                raise RuntimeError("interrupted")

        self.assertEqual(target.read_text(encoding="utf-8"), "old")
        self.assertEqual(sorted(p.name for p in self.dir.iterdir()), ["f"])


class TestBackupAndUnlink(unittest.TestCase):
    def test_backup_copy(self):
        with tempfile.TemporaryDirectory() as td:
            src = Path(td) / "interfaces"
            src.write_text("auto lo\n", encoding="utf-8")

            dst = backup_copy(src, 1234)

            self.assertEqual(dst, Path(td) / "interfaces.bak.1234")
            self.assertEqual(dst.read_text(encoding="utf-8"), "auto lo\n")
            self.assertTrue(src.exists())

    def test_safe_unlink(self):
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "pve-enterprise.list"
            p.write_text("deb x", encoding="utf-8")

            self.assertTrue(safe_unlink(p))
            self.assertFalse(p.exists())
            self.assertFalse(safe_unlink(p))

    def test_safe_unlink_strict(self):
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(FileNotFoundError):
                safe_unlink(Path(td) / "missing", missing_ok=False)


if __name__ == "__main__":
    unittest.main()
