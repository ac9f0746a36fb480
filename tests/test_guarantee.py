from __future__ import annotations

import random
import unittest

from gachadraw.draw import (
    BehaviorDefinition,
    ConfigurationError,
    DrawConfiguration,
    DrawDetail,
    GuaranteeTier,
    Item,
    Plain,
    apply_guarantee,
    draw_batches,
    parse_behavior_kind,
    promote_tier_weights,
)
from gachadraw.draw.resolver import (
    ResolvedDetail,
    ResolvedDraw,
    build_item_weights,
    build_tier_weights,
    find_behavior,
)
from gachadraw.draw.errors import NotFound

ITEMS = {
    1: Item(id=101, tier=1, name="Common"),
    2: Item(id=201, tier=2, name="Uncommon"),
    3: Item(id=301, tier=3, name="Rare"),
    4: Item(id=401, tier=4, name="Legendary"),
}


def make_resolved(kind, *, spin_count=5, rates=None, items=None) -> ResolvedDraw:
    rates = rates or {1: 70, 2: 20, 3: 9, 4: 1}
    items = list(ITEMS.values()) if items is None else items
    behavior = BehaviorDefinition(id=1, kind=kind, spin_count=spin_count)
    configuration = DrawConfiguration(
        id=1,
        name="test",
        tier_rates=rates,
        details=tuple(DrawDetail(item_id=item.id, weight=1) for item in items),
        behaviors=(behavior,),
    )
    details = [
        ResolvedDetail(detail=detail, item=item)
        for detail, item in zip(configuration.details, items)
    ]
    return ResolvedDraw(
        configuration=configuration,
        behavior=behavior,
        details=tuple(details),
        tier_weights=build_tier_weights(configuration),
        item_weights=build_item_weights(details),
    )


class BehaviorKindTests(unittest.TestCase):
    def test_guarantee_patterns_decode_threshold(self) -> None:
        self.assertEqual(parse_behavior_kind("over_rarity_3_once"), GuaranteeTier(3))
        self.assertEqual(parse_behavior_kind("over_rarity_4_once"), GuaranteeTier(4))

    def test_other_values_are_plain(self) -> None:
        for raw in ("normal", "over_rarity_2_once", "over_rarity_3_twice", "", None):
            self.assertIsInstance(parse_behavior_kind(raw), Plain)

    def test_find_behavior_compares_ids_as_strings(self) -> None:
        resolved = make_resolved(Plain())
        self.assertIs(
            find_behavior(resolved.configuration, "1"), resolved.behavior
        )
        with self.assertRaises(NotFound):
            find_behavior(resolved.configuration, 2)


class TierWeightTableTests(unittest.TestCase):
    def test_table_follows_tier_order(self) -> None:
        resolved = make_resolved(Plain(), rates={4: 1, 3: 9, 2: 20, 1: 70})
        self.assertEqual(resolved.tier_weights, ((1, 70), (2, 20), (3, 9), (4, 1)))

    def test_missing_tier_rate_raises(self) -> None:
        configuration = DrawConfiguration(
            id=8,
            name="partial",
            tier_rates={1: 70, 2: 20, 4: 1},
            details=(),
            behaviors=(),
        )
        with self.assertRaises(ConfigurationError):
            build_tier_weights(configuration)


class PromotedTierTableTests(unittest.TestCase):
    def test_lower_tiers_are_retagged_without_merging(self) -> None:
        promoted = promote_tier_weights([(1, 70), (2, 20), (3, 9), (4, 1)], 3)
        self.assertEqual(promoted, [(3, 70), (3, 20), (3, 9), (4, 1)])

    def test_threshold_four_retags_everything(self) -> None:
        promoted = promote_tier_weights([(1, 70), (2, 20), (3, 9), (4, 1)], 4)
        self.assertEqual(promoted, [(4, 70), (4, 20), (4, 9), (4, 1)])


class GuaranteePolicyTests(unittest.TestCase):
    def test_unmet_guarantee_replaces_only_the_last_pick(self) -> None:
        resolved = make_resolved(GuaranteeTier(3))
        for seed in range(50):
            batch = [ITEMS[1], ITEMS[2], ITEMS[1], ITEMS[1], ITEMS[2]]
            original = list(batch)
            result = apply_guarantee(batch, resolved, random.Random(seed))
            self.assertEqual(len(result), len(original))
            self.assertEqual(result[:-1], original[:-1])
            self.assertGreaterEqual(result[-1].tier, 3)

    def test_threshold_four_always_yields_top_tier(self) -> None:
        resolved = make_resolved(GuaranteeTier(4))
        for seed in range(20):
            batch = [ITEMS[3], ITEMS[1]]
            result = apply_guarantee(batch, resolved, random.Random(seed))
            self.assertEqual(result[0], ITEMS[3])
            self.assertEqual(result[-1].tier, 4)

    def test_satisfied_guarantee_leaves_batch_untouched(self) -> None:
        resolved = make_resolved(GuaranteeTier(3))
        batch = [ITEMS[1], ITEMS[3], ITEMS[1]]
        original = list(batch)
        result = apply_guarantee(batch, resolved, random.Random(0))
        self.assertIs(result, batch)
        self.assertEqual(result, original)
        self.assertEqual([item.id for item in result], [101, 301, 101])

    def test_plain_behavior_never_rerolls(self) -> None:
        resolved = make_resolved(Plain())
        batch = [ITEMS[1], ITEMS[1]]
        result = apply_guarantee(batch, resolved, random.Random(0))
        self.assertEqual([item.id for item in result], [101, 101])

    def test_reroll_distribution_keeps_unmerged_weights(self) -> None:
        # Rates 1:3 for tiers 1 and 4; promoted to 3, tier 3 must win ~75%.
        resolved = make_resolved(GuaranteeTier(3), rates={1: 3, 2: 0, 3: 0, 4: 1})
        rng = random.Random(2024)
        hits = 0
        rounds = 8000
        for _ in range(rounds):
            batch = apply_guarantee([ITEMS[1]], resolved, rng)
            if batch[-1].tier == 3:
                hits += 1
        self.assertAlmostEqual(hits / rounds, 0.75, delta=0.03)

    def test_reroll_into_empty_tier_raises(self) -> None:
        resolved = make_resolved(
            GuaranteeTier(3), items=[ITEMS[1], ITEMS[2], ITEMS[4]]
        )
        with self.assertRaises(ConfigurationError):
            # Promoted tier 3 carries weight 70+20+9 but has no items.
            for seed in range(20):
                apply_guarantee([ITEMS[1]], resolved, random.Random(seed))


class DrawBatchesTests(unittest.TestCase):
    def test_batches_have_requested_shape(self) -> None:
        resolved = make_resolved(Plain(), spin_count=4)
        batches = draw_batches(resolved, 3, random.Random(1))
        self.assertEqual(len(batches), 3)
        self.assertTrue(all(len(batch) == 4 for batch in batches))

    def test_guarantee_applied_to_every_batch(self) -> None:
        resolved = make_resolved(GuaranteeTier(3), spin_count=10)
        batches = draw_batches(resolved, 200, random.Random(3))
        for batch in batches:
            self.assertTrue(any(item.tier >= 3 for item in batch))

    def test_count_must_be_positive(self) -> None:
        resolved = make_resolved(Plain())
        with self.assertRaises(ValueError):
            draw_batches(resolved, 0)


if __name__ == "__main__":
    unittest.main()
