"""
Inkwell Backend - Configuration Tests
=====================================

What we test:
    ✅ FEATURED_BLOG_IDS keeps configured order and skips malformed entries
    ✅ The list is parsed once per value, so a bad entry warns once
    ✅ Changing the value is picked up
"""

import logging

from bson import ObjectId

from inkwell.config import Settings


class TestFeaturedIds:
    def test_order_and_malformed_entries(self):
        first, second = ObjectId(), ObjectId()
        config = Settings(featured_blog_ids=f" {second},, nope ,{first}")

        assert config.featured_ids_list == [second, first]

    def test_parsed_once_per_value(self, caplog):
        config = Settings(featured_blog_ids=f"{ObjectId()},nope")

        with caplog.at_level(logging.WARNING, logger="inkwell.config"):
            for _ in range(3):
                assert len(config.featured_ids_list) == 1

        warnings = [r for r in caplog.records if "malformed featured" in r.getMessage()]
        assert len(warnings) == 1

    def test_new_value_is_reparsed(self):
        oid = ObjectId()
        config = Settings(featured_blog_ids="")
        assert config.featured_ids_list == []

        config.featured_blog_ids = str(oid)

        assert config.featured_ids_list == [oid]

    def test_returned_list_is_a_copy(self):
        config = Settings(featured_blog_ids=str(ObjectId()))

        config.featured_ids_list.clear()

        assert len(config.featured_ids_list) == 1
