"""Unit tests for ComplementarySampler."""

from services.models import MatchReason, ProductSource


class TestComplementarySampler:

    def test_tags_products_as_complementary(self, sampler):
        products = sampler.sample(3)
        assert len(products) == 3
        for product in products:
            assert product.source == ProductSource.GENERAL.value
            assert product.privacy == "public"
            assert product.match_reason == MatchReason.COMPLEMENTARY.value

    def test_requests_exact_count(self, sampler, fake_catalog):
        sampler.sample(2)
        assert fake_catalog.sample_requests == [2]

    def test_non_positive_count_skips_catalog(self, sampler, fake_catalog):
        assert sampler.sample(0) == []
        assert sampler.sample(-4) == []
        assert fake_catalog.sessions_opened == 0

    def test_fewer_available_than_requested(self, sampler, fake_catalog):
        fake_catalog.sample_pool = fake_catalog.sample_pool[:2]
        assert len(sampler.sample(5)) == 2

    def test_untitled_records_never_sampled(self, sampler, fake_catalog):
        fake_catalog.sample_pool = [
            {"product_id": "a", "title": ""},
            {"product_id": "b", "title": None},
            {"product_id": "c", "title": "Canvas Tote"},
        ]
        assert [p.product_id for p in sampler.sample(3)] == ["c"]

    def test_connect_failure_returns_empty(self, sampler, fake_catalog):
        fake_catalog.fail_on_connect = True
        assert sampler.sample(3) == []

    def test_query_failure_returns_empty_and_releases(self, sampler, fake_catalog):
        fake_catalog.fail_on_query = True
        assert sampler.sample(3) == []
        assert fake_catalog.sessions_closed == fake_catalog.sessions_opened == 1

    def test_one_session_per_call(self, sampler, fake_catalog):
        sampler.sample(1)
        sampler.sample(1)
        assert fake_catalog.sessions_opened == 2

    def test_odd_display_values_do_not_fail(self, sampler, fake_catalog):
        fake_catalog.sample_pool = [
            {"product_id": "a", "title": "Striped Scarf", "color": ["red", "blue"], "price": "N/A"},
        ]
        product = sampler.sample(1)[0]
        assert product.product_id == "a"
        assert product.color is None
        assert product.price is None

    def test_rows_without_id_are_skipped(self, sampler, fake_catalog):
        fake_catalog.sample_pool = [
            {"product_id": None, "title": "Mystery Item"},
            {"product_id": "b", "title": "Canvas Tote"},
        ]
        assert [p.product_id for p in sampler.sample(2)] == ["b"]
