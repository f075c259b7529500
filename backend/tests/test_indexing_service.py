"""
Tests for catalogue indexing and CSV seed loading
"""

from pathlib import Path

import pytest

from genium.exceptions import UpstreamServiceError
from genium.services import UnitIndexer, build_unit_text, read_brokers_csv, read_units_csv

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def test_build_unit_text(make_unit):
    assert build_unit_text(make_unit()) == (
        "2BR unit with 2 bedrooms, 2 bathrooms, 1200 sqft. Price: $298000. "
        "Spacious 2-bedroom unit with city views."
    )


class TestUnitIndexer:
    """Tests for UnitIndexer.index_units"""

    def test_embeds_missing_vectors(self, fake_llm, unit_service, make_unit):
        indexer = UnitIndexer(llm=fake_llm, units=unit_service)

        result = indexer.index_units([make_unit(embedding=None), make_unit()])

        assert result == {"indexed": 2, "embedded": 1, "failed": 0}
        assert fake_llm.embed.call_count == 1
        assert unit_service.count() == 2

    def test_failed_embedding_is_skipped(self, fake_llm, unit_service, make_unit):
        fake_llm.embed.side_effect = [
            UpstreamServiceError("openai", "rate limited", retryable=True),
            [0.5, 0.5],
        ]
        indexer = UnitIndexer(llm=fake_llm, units=unit_service)

        result = indexer.index_units([make_unit(embedding=None), make_unit(embedding=None)])

        assert result == {"indexed": 1, "embedded": 1, "failed": 1}
        assert unit_service.count() == 1


class TestSeedFiles:
    """Tests for the shipped seed CSV files"""

    def test_read_units(self):
        units = read_units_csv(DATA_DIR / "units.csv")

        assert len(units) == 10
        assert sum(1 for u in units if u.status == "reserved") == 1
        assert min(u.price for u in units) == 185000
        assert all(u.embedding is None for u in units)

    def test_unit_ids_are_stable(self):
        first = read_units_csv(DATA_DIR / "units.csv")
        second = read_units_csv(DATA_DIR / "units.csv")

        assert [u.id for u in first] == [u.id for u in second]
        assert len({u.id for u in first}) == 10

    def test_read_brokers(self):
        brokers = read_brokers_csv(DATA_DIR / "brokers.csv")

        assert [b["phone_number"] for b in brokers] == ["+1234567890", "+0987654321", "+1122334455"]
        assert all(b["authorized"] is True for b in brokers)

    def test_read_brokers_parses_text_flags(self, tmp_path):
        path = tmp_path / "brokers.csv"
        path.write_text("phone_number,name,email,authorized\n+1555,Pending,,no\n")

        [broker] = read_brokers_csv(path)

        assert broker["authorized"] is False
        assert broker["email"] is None
