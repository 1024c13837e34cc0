from __future__ import annotations

import unittest

from stockvoice.services.normalizer import (
    compact_form,
    decode_quantity,
    is_quantity_token,
    normalize_text,
    words_to_number,
)


class NormalizeTextTest(unittest.TestCase):
    def test_lowercases_strips_punctuation_and_diacritics(self):
        self.assertEqual(normalize_text("Twenty-Five Jalapeños!"), "25 jalapenos")

    def test_collapses_whitespace(self):
        self.assertEqual(
            normalize_text("  Ten   AVOCADO,  three red-onion "),
            "10 avocado 3 red onion",
        )

    def test_keeps_decimal_points(self):
        self.assertEqual(normalize_text("2.5 kg of tofu."), "2.5 kg of tofu")

    def test_compound_number_words(self):
        self.assertEqual(normalize_text("one hundred twenty tofu"), "120 tofu")
        self.assertEqual(normalize_text("two thousand"), "2000")
        self.assertEqual(normalize_text("twenty five hundred"), "2500")
        self.assertEqual(normalize_text("Twelve eggs"), "12 eggs")

    def test_digit_followed_by_scale_word(self):
        self.assertEqual(normalize_text("5 hundred avocado"), "500 avocado")
        self.assertEqual(normalize_text("2 thousand"), "2000")
        self.assertEqual(normalize_text("3 hundred twenty tofu"), "320 tofu")
        self.assertEqual(normalize_text("5 avocado"), "5 avocado")

    def test_adjacent_numbers_stay_separate(self):
        self.assertEqual(normalize_text("five six"), "5 6")
        self.assertEqual(normalize_text("zero five"), "0 5")
        self.assertEqual(normalize_text("ten five"), "10 5")

    def test_number_words_only_on_word_boundaries(self):
        self.assertEqual(normalize_text("someone bought candy"), "someone bought candy")

    def test_apostrophes_are_removed(self):
        self.assertEqual(normalize_text("We're out!"), "were out")

    def test_empty_input(self):
        self.assertEqual(normalize_text(None), "")
        self.assertEqual(normalize_text("   "), "")

    def test_idempotent(self):
        samples = [
            "Ten avocado, three red onion, out of cucumber",
            "five avocado — wait, no, three avocado",
            "2.5 tofu 1.2.3 things 2..5",
            "Twenty-Five Jalapeños!!",
            "one hundred and five green-onions",
            "naïve café_crème",
            "\U0001d400vocado \u210cummus",
            "\u0130stanbul spice",
        ]
        for sample in samples:
            once = normalize_text(sample)
            self.assertEqual(normalize_text(once), once, sample)

    def test_styled_letters_fold_to_lowercase_ascii(self):
        self.assertEqual(normalize_text("\U0001d400vocado"), "avocado")
        self.assertEqual(normalize_text("\u210cummus"), "hummus")


class QuantityTokenTest(unittest.TestCase):
    def test_decode_digits(self):
        value = decode_quantity("3")
        self.assertEqual(value, 3)
        self.assertIsInstance(value, int)
        self.assertEqual(decode_quantity("2.5"), 2.5)

    def test_integral_decimal_decodes_to_int(self):
        value = decode_quantity("3.0")
        self.assertEqual(value, 3)
        self.assertIsInstance(value, int)

    def test_decode_number_word(self):
        self.assertEqual(decode_quantity("six"), 6)
        self.assertEqual(decode_quantity("zero"), 0)

    def test_rejects_malformed_and_out_of_range(self):
        self.assertIsNone(decode_quantity("1.2.3"))
        self.assertIsNone(decode_quantity("abc"))
        self.assertIsNone(decode_quantity(""))
        self.assertIsNone(decode_quantity("999999999"))

    def test_is_quantity_token(self):
        self.assertTrue(is_quantity_token("12"))
        self.assertTrue(is_quantity_token("1.2.3"))
        self.assertTrue(is_quantity_token("seven"))
        self.assertFalse(is_quantity_token("3kg"))
        self.assertFalse(is_quantity_token("tofu"))

    def test_words_to_number(self):
        self.assertEqual(words_to_number(["twenty", "five"]), 25)
        self.assertEqual(words_to_number(["One", "Hundred"]), 100)
        self.assertIsNone(words_to_number(["five", "six"]))
        self.assertIsNone(words_to_number([]))


class CompactFormTest(unittest.TestCase):
    def test_removes_spaces_hyphens_and_dots(self):
        self.assertEqual(compact_form("green-onion.x y"), "greenonionxy")
        self.assertEqual(compact_form(""), "")


if __name__ == "__main__":
    unittest.main()
