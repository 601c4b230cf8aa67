"""
Tests for config.py
"""

import unittest

from pydantic import ValidationError

from vaccine_slot_agent.config import DEFAULT_CATEGORIES, AppointmentCategory, Settings


class TestSettings(unittest.TestCase):
    """Tests for Settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)
        self.assertEqual(settings.graphql_url, "https://gql.medscheck.medmeapp.com")
        self.assertEqual(settings.booking_url, "https://shoppersdrugmart.medmeapp.com")
        self.assertEqual(settings.timeout_seconds, 10.0)
        self.assertEqual(settings.window_days, 10)
        self.assertFalse(settings.debug)
        self.assertEqual(set(settings.categories), {"moderna", "pfizer", "screening"})

    def test_settings_are_frozen(self):
        settings = Settings(_env_file=None)
        with self.assertRaises(ValidationError):
            settings.debug = True

    def test_categories_for_keeps_order_and_skips_unknown(self):
        settings = Settings(_env_file=None)
        selected = settings.categories_for(["Pfizer", "astrazeneca", "moderna", "pfizer"])
        self.assertEqual([category.key for category in selected], ["pfizer", "moderna"])

    def test_category_table_keys_must_match(self):
        misfiled = {"moderna": DEFAULT_CATEGORIES["pfizer"]}
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, categories=misfiled)

    def test_custom_category(self):
        flu = AppointmentCategory(key="flu", capability_name="Flu Shot", label="Influenza Vaccine")
        settings = Settings(_env_file=None, categories={"flu": flu})
        self.assertEqual(settings.categories_for(["flu", "pfizer"]), [flu])


if __name__ == "__main__":
    unittest.main()
