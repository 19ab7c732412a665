"""Tests for the cost string codec."""

import unittest

from scryptpass.cost import (
    CostParameters,
    autodetect_cost,
    decode_cost,
    encode_cost,
    memory_use,
    valid_cost,
)
from scryptpass.errors import InvalidCost


class CostCodecTests(unittest.TestCase):
    def test_encode_uses_lowercase_hex_with_trailing_delimiter(self):
        self.assertEqual(encode_cost(CostParameters(n=16384, r=8, p=26)), "4000$8$1a$")

    def test_decode(self):
        self.assertEqual(decode_cost("400$8$d$"), CostParameters(n=1024, r=8, p=13))

    def test_decode_rejects_malformed_strings(self):
        for text in ["", "400$8$1", "400$8$1$$", "4g0$8$1$", "400$8$$", "400$8$1$extra", "400$8$1$\n", "4A0$8$1$"]:
            with self.subTest(text=text):
                with self.assertRaises(InvalidCost):
                    decode_cost(text)

    def test_decode_rejects_zero_fields(self):
        for text in ["0$8$1$", "400$0$1$", "400$8$0$"]:
            with self.subTest(text=text):
                with self.assertRaises(InvalidCost):
                    decode_cost(text)

    def test_decode_rejects_fields_too_wide_for_scrypt(self):
        for text in ["1" + "0" * 17 + "$8$1$", "400$100000000$1$", "400$8$100000000$"]:
            with self.subTest(text=text):
                with self.assertRaises(InvalidCost):
                    decode_cost(text)
        self.assertEqual(decode_cost("f" * 16 + "$ffffffff$1$").n, 2 ** 64 - 1)

    def test_valid_cost(self):
        self.assertTrue(valid_cost("2a$08$c3$"))
        self.assertFalse(valid_cost("2a$08$c3"))
        self.assertFalse(valid_cost("2a$08$z3$"))
        self.assertFalse(valid_cost(None))

    def test_autodetect_cost(self):
        self.assertEqual(autodetect_cost("2a$08$c3$some_salt"), "2a$08$c3$")
        self.assertIsNone(autodetect_cost("nino"))

    def test_memory_use(self):
        n, r, p = 0x400, 8, 1
        expected = (128 * r * p) + (256 * r) + (128 * r * n)
        self.assertEqual(memory_use("400$8$1$"), expected)
        self.assertEqual(memory_use(CostParameters(n=n, r=r, p=p)), expected)

    def test_memory_use_rejects_bad_cost(self):
        with self.assertRaises(InvalidCost):
            memory_use("400$8$")


if __name__ == "__main__":
    unittest.main()
