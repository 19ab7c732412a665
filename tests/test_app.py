"""Tests for the command line and the benchmark helpers."""

import contextlib
import io
import unittest
from unittest import mock

from scryptpass import app, bench
from scryptpass.password import Password

FAST_COST = "400$8$1$"
LEGACY_HASH = "400$8$d$173a8189751c095a29b933789560b73bf17b2e01$9bf66d74bd6f3ebcf99da3b379b689b89db1cb07"


def _run(argv, secret=None):
    out = io.StringIO()
    with contextlib.redirect_stdout(out), mock.patch.object(app.getpass, "getpass", return_value=secret):
        code = app.main(argv)
    return code, out.getvalue()


class CliTests(unittest.TestCase):
    def test_memory_use(self):
        code, out = _run(["memory-use", FAST_COST])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), str(128 * 8 + 256 * 8 + 128 * 8 * 0x400))

    def test_bad_cost_fails(self):
        code, out = _run(["memory-use", "400$8$"])
        self.assertEqual(code, 1)
        self.assertTrue(out.startswith("FAIL:"))

    def test_hash_then_verify(self):
        code, out = _run(["hash", "--cost", FAST_COST, "--key-len", "16"], secret="pin")
        self.assertEqual(code, 0)
        stored = out.strip()
        password = Password.from_stored(stored)
        self.assertEqual(len(password.digest), 32)

        code, out = _run(["verify", stored], secret="pin")
        self.assertEqual(code, 0)
        self.assertIn("OK", out)

    def test_verify_legacy_hash(self):
        self.assertEqual(_run(["verify", LEGACY_HASH], secret="my secret")[0], 0)
        code, out = _run(["verify", LEGACY_HASH], secret="wrong")
        self.assertEqual(code, 1)
        self.assertIn("FAIL", out)

    def test_verify_invalid_hash(self):
        code, out = _run(["verify", "nope"], secret="x")
        self.assertEqual(code, 1)
        self.assertIn("invalid hash", out)

    def test_verify_oversized_cost_fails_cleanly(self):
        stored = "1" + "0" * 17 + "$8$1$" + "ab" * 16 + "$" + "cd" * 32
        code, out = _run(["verify", stored], secret="x")
        self.assertEqual(code, 1)
        self.assertIn("invalid hash", out)

    def test_bench_rejects_empty_cost_list(self):
        for costs in ("", ",", " , "):
            with self.subTest(costs=costs):
                with contextlib.redirect_stderr(io.StringIO()):
                    with self.assertRaises(SystemExit) as ctx:
                        app.main(["bench", "--costs", costs])
                self.assertEqual(ctx.exception.code, 2)

    def test_calibrate(self):
        code, out = _run(["calibrate", "--max-time", "0.01", "--max-mem", str(1024 * 1024)])
        self.assertEqual(code, 0)
        self.assertTrue(out.startswith("cost="))


class BenchTests(unittest.TestCase):
    def test_hash_costs(self):
        results = bench.bench_hash_costs("1234", [FAST_COST, "800$8$1$"], rounds=1)
        self.assertEqual([r["cost"] for r in results], [FAST_COST, "800$8$1$"])
        self.assertEqual(results[0]["memory_bytes"], 128 * 8 + 256 * 8 + 128 * 8 * 0x400)
        self.assertGreater(results[0]["value"], 0)

    def test_verify(self):
        password = Password.create("1234", cost=FAST_COST)
        result = bench.bench_verify(password, "1234", rounds=2)
        self.assertEqual(result["metric"], "verify_median_ms")
        self.assertEqual(result["cost"], FAST_COST)


if __name__ == "__main__":
    unittest.main()
