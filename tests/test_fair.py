import hashlib
import random
import unittest

from errors import InvalidRoster
from rng.commit import roster_root
from rng.fair import combine, roll_from_digest, select_index, verify

SEED = "ABCDEF12"
BLOCK = "0000000000000000000000000000000000000001"
# sha256("ABCDEF12-0000000000000000000000000000000000000001")
DIGEST = "bd6e5048c66710dda7d2234bb7788c847c1d33c5a73440bd019adafff5f6ae5b"


class CombineTests(unittest.TestCase):
    def test_known_vector(self):
        self.assertEqual(combine(SEED, BLOCK), DIGEST)

    def test_matches_plain_sha256_of_seed_dash_block(self):
        expected = hashlib.sha256(b"SEED-abc").hexdigest()
        self.assertEqual(combine("SEED", "abc"), expected)
        self.assertEqual(expected, "b2007a8ec0ce65ca109a6bfed54e19030d93e994e794dc8ea5babd5a6ca86e7b")

    def test_utf8_seed(self):
        self.assertEqual(combine("żółw", "ff"), hashlib.sha256("żółw-ff".encode("utf-8")).hexdigest())

    def test_seed_and_block_both_matter(self):
        self.assertNotEqual(combine("A", "B"), combine("B", "A"))
        self.assertNotEqual(combine(SEED, BLOCK), combine(SEED + "X", BLOCK))


class SelectionTests(unittest.TestCase):
    def test_scenario_a(self):
        # 0xbd6e5048 / 0xffffffff = 0.7399... -> floor(5.91...) = 5
        self.assertEqual(select_index(DIGEST, 8), 5)
        self.assertEqual(select_index(combine(SEED, BLOCK), 8), 5)

    def test_roll_bounds(self):
        self.assertEqual(roll_from_digest("00000000" + "0" * 56), 0.0)
        self.assertEqual(roll_from_digest("ffffffff" + "0" * 56), 1.0)
        self.assertAlmostEqual(roll_from_digest(DIGEST), 0.7399645021045498)

    def test_max_roll_is_clamped(self):
        top = "ffffffff" + "a" * 56
        for n in (1, 2, 7, 1000):
            self.assertEqual(select_index(top, n), n - 1)

    def test_only_first_32_bits_used(self):
        self.assertEqual(select_index("80000000" + "0" * 56, 10), select_index("80000000" + "f" * 56, 10))

    def test_range_over_random_digests(self):
        rng = random.Random(7)
        for _ in range(500):
            digest = "%064x" % rng.getrandbits(256)
            n = rng.randint(1, 5000)
            idx = select_index(digest, n)
            self.assertTrue(0 <= idx < n)
            self.assertEqual(idx, select_index(digest, n))

    def test_single_entrant_always_wins(self):
        self.assertEqual(select_index(DIGEST, 1), 0)

    def test_zero_or_negative_size_is_contract_violation(self):
        with self.assertRaises(InvalidRoster):
            select_index(DIGEST, 0)
        with self.assertRaises(InvalidRoster):
            select_index(DIGEST, -3)

    def test_malformed_digest(self):
        with self.assertRaises(InvalidRoster):
            roll_from_digest("abc")
        with self.assertRaises(InvalidRoster):
            roll_from_digest("zzzzzzzz")
        for head in ("0x123456", "+1234567", "12_34_56", " 1234567", "-0000000"):
            with self.subTest(head=head):
                with self.assertRaises(InvalidRoster):
                    roll_from_digest(head + "ab" * 28)
        self.assertEqual(roll_from_digest("FFFFFFFF"), 1.0)


class VerifyTests(unittest.TestCase):
    def test_exposes_intermediate_values(self):
        v = verify(SEED, BLOCK, 8)
        self.assertEqual(v.input, f"{SEED}-{BLOCK}")
        self.assertEqual(v.digest, DIGEST)
        self.assertEqual(v.hex_slice, "bd6e5048")
        self.assertEqual(v.value, 0xBD6E5048)
        self.assertEqual(v.value, 3178123336)
        self.assertEqual(v.index, 5)
        self.assertAlmostEqual(v.roll, 3178123336 / 4294967295)

    def test_other_size(self):
        # 0xb2007a8e / 0xffffffff = 0.6953... -> 6 of 10
        self.assertEqual(verify("SEED", "abc", 10).index, 6)

    def test_rejects_empty_roster(self):
        with self.assertRaises(InvalidRoster):
            verify(SEED, BLOCK, 0)


class RosterRootTests(unittest.TestCase):
    def test_order_and_boundaries_matter(self):
        self.assertEqual(roster_root(["a", "b"]), roster_root(["a", "b"]))
        self.assertNotEqual(roster_root(["a", "b"]), roster_root(["b", "a"]))
        self.assertNotEqual(roster_root(["ab", "c"]), roster_root(["a", "bc"]))
        self.assertEqual(len(roster_root([])), 64)


if __name__ == "__main__":
    unittest.main()
