"""
Unit tests for the tiny-bloom command-line wrapper.
"""

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from tiny_bloom.__main__ import main


def run(argv):
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        code = main(argv)
    return code, out.getvalue(), err.getvalue()


class TestCommandLine(unittest.TestCase):
    """Test cases for tiny_bloom.__main__.main."""

    def test_reports_parameters(self):
        code, out, _ = run(["1000", "--error-rate", "0.01"])
        self.assertEqual(code, 0)
        self.assertIn("capacity: 1000", out)
        self.assertIn("address space size: 9586", out)
        self.assertIn("hash count: 7", out)

    def test_defaults(self):
        code, out, _ = run([])
        self.assertEqual(code, 0)
        self.assertIn("capacity: 1000", out)
        self.assertIn("false positive rate: 0.01", out)

    def test_insert_and_query(self):
        code, out, _ = run(["100", "--insert", "alice", "bob", "--query", "alice", "carol"])
        self.assertEqual(code, 0)
        self.assertIn("alice: maybe", out.splitlines())
        self.assertIn("carol: no", out.splitlines())

    def test_counting_remove(self):
        code, out, _ = run(
            ["100", "--counting", "--insert", "x", "y", "--remove", "x", "--query", "x", "y"]
        )
        self.assertEqual(code, 0)
        self.assertIn("x: no", out.splitlines())
        self.assertIn("y: maybe", out.splitlines())

    def test_stdin(self):
        with mock.patch("sys.stdin", io.StringIO("alpha\n\nbeta\n")):
            code, out, _ = run(["50", "--stdin", "--query", "alpha", "beta"])
        self.assertEqual(code, 0)
        self.assertIn("alpha: maybe", out.splitlines())
        self.assertIn("beta: maybe", out.splitlines())

    def test_hash_function_choice(self):
        code, out, _ = run(["100", "--hash-function", "murmur3", "--insert", "k", "--query", "k"])
        self.assertEqual(code, 0)
        self.assertIn("k: maybe", out.splitlines())

    def test_invalid_parameters(self):
        for argv in (["0"], ["-5"], ["100", "--error-rate", "1.5"], ["100", "--error-rate", "0"]):
            code, out, err = run(argv)
            self.assertEqual(code, 1, argv)
            self.assertIn("invalid argument", err)
            self.assertEqual(out, "")

    def test_unparseable_arguments(self):
        for argv in (["abc"], ["100", "--error-rate", "x"], ["100", "--remove", "x"]):
            with self.assertRaises(SystemExit) as ctx:
                run(argv)
            self.assertEqual(ctx.exception.code, 2, argv)


if __name__ == "__main__":
    unittest.main()
