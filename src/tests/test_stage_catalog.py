"""Unit tests for the stage catalog and status normalizer.

Tests cover:
- Catalog construction and validation
- Exact-match normalization
- Legacy alias mapping
- Fallback to the first actionable stage
"""

import pytest

from src.models.enums import OrderType
from src.services.timeline import (
    DEFAULT_CATALOG,
    LEGACY_STATUS_ALIASES,
    Stage,
    StageCatalog,
    normalize_status,
)
from src.services.timeline.stage_catalog import (
    STAGE_CREATED,
    STAGE_DELIVERED,
    STAGE_FULFILLMENT,
    STAGE_HANDOVER,
    STAGE_VERIFICATION,
)


class TestCatalogConstruction:
    """Tests for StageCatalog validation."""

    def test_default_catalog_order(self):
        keys = [stage.key for stage in DEFAULT_CATALOG]
        assert keys == [
            STAGE_CREATED,
            STAGE_VERIFICATION,
            STAGE_FULFILLMENT,
            STAGE_HANDOVER,
            STAGE_DELIVERED,
        ]

    def test_creation_stage_is_first(self):
        assert DEFAULT_CATALOG.creation_stage.key == STAGE_CREATED
        assert DEFAULT_CATALOG.default_key == STAGE_VERIFICATION

    def test_requires_actionable_stage(self):
        with pytest.raises(ValueError):
            StageCatalog([Stage(key="created", title="Created")])

    def test_rejects_duplicate_keys(self):
        with pytest.raises(ValueError, match="unique"):
            StageCatalog(
                [
                    Stage(key="created", title="Created"),
                    Stage(key="A", title="A"),
                    Stage(key="A", title="A again"),
                ]
            )

    def test_rejects_alias_to_unknown_stage(self):
        with pytest.raises(ValueError, match="unknown"):
            StageCatalog(
                [Stage(key="created", title="Created"), Stage(key="A", title="A")],
                {"old": "Z"},
            )

    def test_alias_cannot_target_creation_stage(self):
        with pytest.raises(ValueError):
            StageCatalog(
                [Stage(key="created", title="Created"), Stage(key="A", title="A")],
                {"old": "created"},
            )

    def test_sample_orders_get_tpay_task(self):
        stage = DEFAULT_CATALOG.get(STAGE_VERIFICATION)
        assert stage.tasks_for(OrderType.SAMPLE) == ("Płatność Tpay potwierdzona",)
        assert stage.tasks_for(OrderType.PRODUCTION) == (
            "Proforma wystawiona i wysłana",
            "Proforma opłacona",
        )

    def test_task_ids_are_stable(self):
        stage = DEFAULT_CATALOG.get(STAGE_FULFILLMENT)
        assert stage.task_id("Wysłane zamówienie") == "kompletacja-zamowienia-wyslane-zamowienie"
        assert stage.task_id("Wysłane zamówienie") == stage.task_id("Wysłane zamówienie")

    def test_task_ids_unique_in_default_catalog(self):
        ids = DEFAULT_CATALOG.task_ids()
        assert len(ids) == len(set(ids))


class TestNormalize:
    """Tests for normalize()."""

    @pytest.mark.parametrize(
        "key", [STAGE_VERIFICATION, STAGE_FULFILLMENT, STAGE_HANDOVER, STAGE_DELIVERED]
    )
    def test_catalog_keys_map_to_themselves(self, key):
        assert normalize_status(key) == key

    def test_unknown_status_falls_back_to_default(self):
        assert normalize_status("totally-unknown-value") == STAGE_VERIFICATION

    def test_unknown_status_is_deterministic(self):
        results = {normalize_status("totally-unknown-value") for _ in range(5)}
        assert results == {STAGE_VERIFICATION}

    def test_creation_key_is_not_a_reachable_status(self):
        assert normalize_status(STAGE_CREATED) == STAGE_VERIFICATION

    def test_match_is_case_sensitive(self):
        assert normalize_status(STAGE_FULFILLMENT.upper()) == STAGE_VERIFICATION

    def test_match_is_whitespace_sensitive(self):
        assert normalize_status(f" {STAGE_FULFILLMENT} ") == STAGE_VERIFICATION

    @pytest.mark.parametrize("raw,expected", sorted(LEGACY_STATUS_ALIASES.items()))
    def test_legacy_aliases(self, raw, expected):
        assert normalize_status(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", 42])
    def test_non_string_and_empty_values(self, raw):
        assert normalize_status(raw) == STAGE_VERIFICATION

    def test_custom_catalog(self, abc_catalog):
        assert abc_catalog.normalize("B") == "B"
        assert abc_catalog.normalize("created") == "A"
        assert abc_catalog.normalize("nope") == "A"

    def test_index_of(self, abc_catalog):
        assert abc_catalog.index_of("B") == 2
        assert abc_catalog.index_of("unknown") == 1
