"""
Tests for locations.py

Covers the city allow-list and waitlist filtering of the store list.
"""

import unittest

from vaccine_slot_agent.locations import filter_locations

from tests.fakes import make_location


class TestFilterLocations(unittest.TestCase):
    """Tests for filter_locations."""

    def setUp(self):
        self.locations = [
            make_location("sdm-1", city="Toronto"),
            make_location("sdm-2", city="Ottawa"),
            make_location("sdm-3", city="Markham", waitlisted=True),
            make_location("sdm-4", city="Markham"),
            make_location("sdm-5", city="Toronto", waitlisted=None),
            make_location("sdm-6", city="Toronto", appointment_type_id=None),
        ]

    def test_keeps_allowed_non_waitlisted_in_order(self):
        kept = filter_locations(self.locations, ["Toronto", "Markham"])
        self.assertEqual([location.id for location in kept], ["sdm-1", "sdm-4", "sdm-5"])

    def test_city_match_is_exact(self):
        kept = filter_locations(self.locations, ["toronto", "Markham "])
        self.assertEqual(kept, [])

    def test_empty_allow_list_keeps_nothing(self):
        self.assertEqual(filter_locations(self.locations, []), [])

    def test_store_without_city_is_dropped(self):
        nameless = make_location("sdm-7", city=None)
        self.assertIsNone(nameless.city)
        kept = filter_locations([nameless, *self.locations], ["Toronto"])
        self.assertNotIn("sdm-7", [location.id for location in kept])
        self.assertEqual(kept[0].id, "sdm-1")

    def test_empty_input(self):
        self.assertEqual(filter_locations([], ["Toronto"]), [])

    def test_output_is_exactly_the_matching_subset(self):
        cities = {"Toronto", "Ottawa"}
        kept = filter_locations(self.locations, cities)
        expected = [
            location
            for location in self.locations
            if location.city in cities
            and location.primary_capability is not None
            and not location.primary_capability.waitlisted
        ]
        self.assertEqual(kept, expected)


if __name__ == "__main__":
    unittest.main()
