"""Tests for district adjacency scoring."""
from __future__ import annotations

import math

import pytest

from civ_planner.adjacency.calculator import (
    SUGGESTED_DISTRICTS,
    adjacency_color_for_bonus,
    adjacency_rating,
    calculate_adjacency,
    calculate_all_adjacencies,
    with_policy_multiplier,
)
from civ_planner.map.coordinates import HexCoord, hex_neighbors
from civ_planner.map.tiles import DISTRICT_TYPES, Resource, Tile, tile_map

CENTER = HexCoord(0, 0)
E, NE, NW, W, SW, SE = hex_neighbors(CENTER)


def make_tile(coord: HexCoord, **kwargs) -> Tile:
    if "features" in kwargs:
        kwargs["features"] = tuple(kwargs["features"])
    return Tile(coord=coord, **kwargs)


def build(*tiles: Tile, center: Tile | None = None):
    return tile_map([center or make_tile(CENTER), *tiles])


def sources(result):
    return {s.source: s.total_bonus for s in result.breakdown}


def check_floor(result):
    assert result.bonus == math.floor(sum(s.total_bonus for s in result.breakdown))


@pytest.fixture
def campus_map():
    return build(
        make_tile(E, modifier="mountain"),
        make_tile(NE, modifier="mountain"),
        make_tile(NW, features=["rainforest"]),
        make_tile(W, district="city_center"),
        make_tile(SW, district="holy_site"),
    )


class TestPresentation:

    def test_boundaries(self):
        assert adjacency_color_for_bonus(0) == "#6b7280"
        assert adjacency_color_for_bonus(2) == "#eab308"
        assert adjacency_color_for_bonus(4) == "#f97316"
        assert adjacency_color_for_bonus(5) == "#22c55e"

        assert adjacency_rating(0) == "Poor"
        assert adjacency_rating(2) == "Decent"
        assert adjacency_rating(4) == "Good"
        assert adjacency_rating(5) == "Excellent"

    def test_tier_edges(self):
        assert adjacency_rating(-1) == "Poor"
        assert adjacency_rating(1) == "Decent"
        assert adjacency_rating(3) == "Good"
        assert adjacency_rating(12) == "Excellent"
        assert adjacency_color_for_bonus(3) == "#f97316"


class TestCampus:

    def test_reference_campus(self, campus_map):
        result = calculate_adjacency(CENTER, "campus", campus_map)

        # Mountain (2) + Rainforest (1) + District (2 * 0.5) = 4
        assert result.district == "campus"
        assert result.bonus == 4
        assert sources(result) == {"Mountain": 2, "Rainforest": 1, "District": 1}
        check_floor(result)

    def test_source_details(self, campus_map):
        result = calculate_adjacency(CENTER, "campus", campus_map)
        district = result.source("District")
        assert district.count == 2
        assert district.bonus_per_source == 0.5

    def test_reef_and_geothermal(self):
        tiles = build(
            make_tile(E, terrain="coast", features=["reef"]),
            make_tile(W, features=["geothermal"]),
        )
        result = calculate_adjacency(CENTER, "campus", tiles)
        assert sources(result) == {"Reef": 1, "Geothermal Fissure": 1}
        assert result.bonus == 2

    def test_zero_count_sources_are_omitted(self):
        tiles = build(make_tile(E, modifier="mountain"))
        result = calculate_adjacency(CENTER, "campus", tiles)
        assert [s.source for s in result.breakdown] == ["Mountain"]


class TestIndustrialZone:

    @pytest.fixture
    def iz_map(self):
        return build(
            make_tile(E, district="aqueduct"),
            make_tile(NE, district="dam"),
            make_tile(NW, district="canal"),
            make_tile(W, modifier="hills", improvement="quarry"),
            make_tile(SW, improvement="mine", resource=Resource("iron", "strategic")),
            make_tile(SE, features=["woods"], improvement="lumber_mill"),
        )

    def test_reference_industrial_zone(self, iz_map):
        result = calculate_adjacency(CENTER, "industrial_zone", iz_map)

        assert sources(result) == {
            "Aqueduct / Dam / Canal": 6,
            "Mine": 1,
            "Quarry": 1,
            "Strategic Resource (improved)": 2,
            "Lumber Mill": 0.5,
        }
        # 10.5 floors to 10
        assert result.bonus == 10
        check_floor(result)

    def test_infrastructure_does_not_count_as_district(self, iz_map):
        result = calculate_adjacency(CENTER, "industrial_zone", iz_map)
        assert result.source("District") is None

    def test_policy_multiplier_doubles(self, iz_map):
        base = calculate_adjacency(CENTER, "industrial_zone", iz_map)
        boosted = with_policy_multiplier(base, 2)

        assert boosted.bonus == 20
        assert boosted.source("Policy (x2)").total_bonus == 10
        check_floor(boosted)

    def test_unimproved_strategic_resource_gives_nothing(self):
        tiles = build(make_tile(E, resource=Resource("horses", "strategic")))
        result = calculate_adjacency(CENTER, "industrial_zone", tiles)
        assert result.bonus == 0
        assert result.breakdown == []


class TestHarbor:

    @pytest.fixture
    def harbor_map(self):
        return build(
            make_tile(E, district="city_center"),
            make_tile(NE, terrain="coast", resource=Resource("fish", "bonus")),
            make_tile(NW, terrain="ocean", resource=Resource("whales", "luxury")),
            make_tile(W, district="campus"),
            make_tile(SW, terrain="coast"),
            center=make_tile(CENTER, terrain="coast"),
        )

    def test_reference_harbor(self, harbor_map):
        result = calculate_adjacency(CENTER, "harbor", harbor_map)

        assert sources(result) == {"City Center": 2, "Sea Resource": 2, "District": 1}
        assert result.bonus == 5
        check_floor(result)

    def test_no_generic_district_bonus_on_top(self, harbor_map):
        result = calculate_adjacency(CENTER, "harbor", harbor_map, civ_id="japan")
        districts = [s for s in result.breakdown if s.source == "District"]
        assert len(districts) == 1
        assert districts[0].bonus_per_source == 1
        assert result.bonus == 5

    def test_government_plaza_counts_as_district_only(self, harbor_map):
        tiles = dict(harbor_map)
        tiles[SE.key] = make_tile(SE, district="government_plaza")
        result = calculate_adjacency(CENTER, "harbor", tiles)

        assert result.source("District").count == 2
        assert result.source("Government Plaza") is None
        assert result.bonus == 6

    def test_land_resource_is_not_a_sea_resource(self):
        tiles = build(make_tile(E, resource=Resource("wheat", "bonus")))
        assert calculate_adjacency(CENTER, "harbor", tiles).bonus == 0


class TestGovernmentPlaza:

    def test_always_zero(self, campus_map):
        result = calculate_adjacency(CENTER, "government_plaza", campus_map)
        assert result.bonus == 0
        assert result.breakdown == []

    def test_zero_for_every_civ(self, campus_map):
        for civ in (None, "japan", "brazil", "maya"):
            assert calculate_adjacency(CENTER, "government_plaza", campus_map, civ).breakdown == []

    def test_adjacent_plaza_stacks_with_district_bonus(self):
        tiles = build(make_tile(E, district="government_plaza"))
        result = calculate_adjacency(CENTER, "campus", tiles)

        assert sources(result) == {"District": 0.5, "Government Plaza": 1}
        assert result.bonus == 1


class TestCommercialHub:

    def test_harbors(self):
        tiles = build(
            make_tile(E, terrain="coast", district="harbor"),
            make_tile(W, terrain="coast", district="harbor"),
        )
        result = calculate_adjacency(CENTER, "commercial_hub", tiles)
        # Harbor 2 x 2 + District 2 x 0.5
        assert sources(result) == {"Harbor": 4, "District": 1}
        assert result.bonus == 5

    def test_river_bonus_reads_own_tile_once(self):
        # Deliberate: the river bonus comes from the hub's own tile, once,
        # not from counting neighbors.
        center = make_tile(CENTER, river_edges=(True, True, False, False, False, False))
        tiles = build(center=center)
        result = calculate_adjacency(CENTER, "commercial_hub", tiles)

        river = result.source("River")
        assert river.count == 1
        assert river.total_bonus == 2
        assert result.bonus == 2

    def test_river_on_neighbors_is_ignored(self):
        river_edges = (True,) * 6
        tiles = build(
            make_tile(E, river_edges=river_edges),
            make_tile(W, river_edges=river_edges),
        )
        result = calculate_adjacency(CENTER, "commercial_hub", tiles)
        assert result.source("River") is None
        assert result.bonus == 0

    def test_unknown_center_tile_has_no_river(self):
        tiles = tile_map([make_tile(E, district="harbor")])
        result = calculate_adjacency(CENTER, "commercial_hub", tiles)
        assert sources(result) == {"Harbor": 2, "District": 0.5}


class TestOtherDistricts:

    def test_holy_site(self):
        tiles = build(
            make_tile(E, modifier="mountain"),
            make_tile(W, features=["woods"]),
            make_tile(SW, features=["woods"]),
        )
        result = calculate_adjacency(CENTER, "holy_site", tiles)
        assert sources(result) == {"Mountain": 1, "Woods": 2}
        assert result.bonus == 3

    def test_theater_square(self):
        tiles = build(
            make_tile(E, wonder="pyramids"),
            make_tile(W, district="entertainment_complex"),
            make_tile(SW, terrain="coast", district="water_park"),
        )
        result = calculate_adjacency(CENTER, "theater_square", tiles)
        assert sources(result) == {
            "Wonder": 1,
            "Entertainment Complex / Water Park": 4,
            "District": 1,
        }
        assert result.bonus == 6

    def test_preserve_counts_unimproved_charming_tiles(self):
        tiles = build(
            make_tile(E, features=["woods"]),
            make_tile(NE, modifier="mountain"),
            make_tile(NW, terrain="coast"),
            make_tile(W, features=["oasis"], terrain="desert", improvement="farm"),
            make_tile(SW, features=["woods"], district="campus"),
        )
        result = calculate_adjacency(CENTER, "preserve", tiles)
        assert sources(result) == {"Unimproved Charming Tile": 3, "District": 0.5}
        assert result.bonus == 3

    def test_encampment_gets_generic_bonus_only(self, campus_map):
        result = calculate_adjacency(CENTER, "encampment", campus_map)
        assert sources(result) == {"District": 1}

    def test_unknown_district_gets_generic_bonus_only(self, campus_map):
        result = calculate_adjacency(CENTER, "space_elevator", campus_map)
        assert sources(result) == {"District": 1}
        assert result.bonus == 1

    @pytest.mark.parametrize("district", ["city_center", "aqueduct", "dam", "canal"])
    def test_no_generic_bonus_for_city_center_and_infrastructure(self, campus_map, district):
        result = calculate_adjacency(CENTER, district, campus_map)
        assert result.bonus == 0
        assert result.breakdown == []

    def test_infrastructure_still_sees_government_plaza(self):
        tiles = build(make_tile(E, district="government_plaza"))
        result = calculate_adjacency(CENTER, "aqueduct", tiles)
        assert sources(result) == {"Government Plaza": 1}


class TestCivilizations:

    def test_japan_full_district_bonus(self, campus_map):
        result = calculate_adjacency(CENTER, "campus", campus_map, civ_id="japan")
        assert result.source("District").bonus_per_source == 1.0
        assert result.bonus == 5

    def test_civ_id_is_case_insensitive(self, campus_map):
        assert calculate_adjacency(CENTER, "campus", campus_map, "JaPaN").bonus == 5

    def test_unknown_civ_uses_defaults(self, campus_map):
        default = calculate_adjacency(CENTER, "campus", campus_map)
        unknown = calculate_adjacency(CENTER, "campus", campus_map, civ_id="atlantis")
        assert unknown == default

    def test_brazil_rainforest_on_holy_site(self):
        tiles = build(
            make_tile(E, features=["rainforest"]),
            make_tile(W, features=["rainforest"]),
        )
        result = calculate_adjacency(CENTER, "holy_site", tiles, civ_id="brazil")
        assert sources(result) == {"Rainforest (Brazil)": 2}

    def test_brazil_campus_rainforest_counted_once(self):
        tiles = build(make_tile(E, features=["rainforest"]))
        result = calculate_adjacency(CENTER, "campus", tiles, civ_id="brazil")
        assert sources(result) == {"Rainforest": 1}

    def test_maya_observatory(self):
        tiles = build(
            make_tile(E, improvement="farm"),
            make_tile(NE, improvement="farm"),
            make_tile(W, improvement="plantation"),
        )
        result = calculate_adjacency(CENTER, "campus", tiles, civ_id="maya")
        assert sources(result) == {"Farm (Maya)": 1, "Plantation (Maya)": 2}
        assert result.bonus == 3

    def test_maya_extras_listed_after_base_sources(self):
        tiles = build(
            make_tile(E, modifier="mountain"),
            make_tile(W, improvement="farm"),
            make_tile(SW, district="city_center"),
        )
        result = calculate_adjacency(CENTER, "campus", tiles, civ_id="maya")
        assert [s.source for s in result.breakdown] == ["Mountain", "Farm (Maya)", "District"]

    def test_germany_hansa(self):
        tiles = build(
            make_tile(E, district="commercial_hub"),
            make_tile(W, resource=Resource("horses", "strategic")),
        )
        result = calculate_adjacency(CENTER, "industrial_zone", tiles, civ_id="germany")
        assert sources(result) == {
            "Commercial Hub (Germany)": 2,
            "Resource (Germany)": 1,
            "District": 0.5,
        }
        assert result.bonus == 3

    def test_australia_pastures_combine_before_flooring(self):
        tiles = build(
            make_tile(E, improvement="pasture"),
            make_tile(W, district="encampment"),
        )
        result = calculate_adjacency(CENTER, "campus", tiles, civ_id="australia")
        # 0.5 + 0.5 only reach a whole point once summed
        assert sources(result) == {"Pasture (Australia)": 0.5, "District": 0.5}
        assert result.bonus == 1

    def test_korea_has_no_extra_sources(self, campus_map):
        assert calculate_adjacency(CENTER, "campus", campus_map, "korea").bonus == 4


class TestAllAdjacencies:

    def test_sorted_descending(self, campus_map):
        results = calculate_all_adjacencies(CENTER, campus_map)
        assert len(results) == len(SUGGESTED_DISTRICTS)
        bonuses = [r.bonus for r in results]
        assert bonuses == sorted(bonuses, reverse=True)
        assert results[0].district == "campus"

    def test_ties_keep_district_order(self):
        results = calculate_all_adjacencies(CENTER, build())
        assert [r.district for r in results] == list(SUGGESTED_DISTRICTS)


class TestInvariants:

    @pytest.fixture
    def busy_map(self):
        return build(
            make_tile(E, modifier="mountain", features=["woods"]),
            make_tile(NE, district="government_plaza"),
            make_tile(NW, improvement="pasture", resource=Resource("sheep", "bonus")),
            make_tile(W, district="harbor", terrain="coast", resource=Resource("crabs", "bonus")),
            make_tile(SW, features=["rainforest"], improvement="farm"),
            make_tile(SE, wonder="colosseum"),
            center=make_tile(CENTER, river_edges=(False, False, True, False, False, False)),
        )

    @pytest.mark.parametrize("civ", [None, "japan", "germany", "brazil", "australia", "maya"])
    def test_floor_and_non_negative(self, busy_map, civ):
        for district in DISTRICT_TYPES:
            result = calculate_adjacency(CENTER, district, busy_map, civ)
            check_floor(result)
            assert result.bonus >= 0
            assert all(s.count > 0 for s in result.breakdown)

    def test_removing_a_neighbor_never_increases_bonus(self, busy_map):
        for district in DISTRICT_TYPES:
            full = calculate_adjacency(CENTER, district, busy_map).bonus
            for coord in hex_neighbors(CENTER):
                partial = dict(busy_map)
                partial.pop(coord.key, None)
                assert calculate_adjacency(CENTER, district, partial).bonus <= full

    def test_empty_map(self):
        result = calculate_adjacency(CENTER, "campus", {})
        assert result.bonus == 0
        assert result.breakdown == []

    def test_malformed_entries_are_treated_as_missing(self, campus_map):
        tiles = dict(campus_map)
        tiles[SE.key] = {"terrain": "grassland", "district": "campus"}
        tiles[NE.key] = None
        result = calculate_adjacency(CENTER, "campus", tiles)
        # NE mountain replaced by a malformed entry; SE ignored
        assert sources(result) == {"Mountain": 1, "Rainforest": 1, "District": 1}

    def test_repeatable(self, busy_map):
        first = calculate_all_adjacencies(CENTER, busy_map, "brazil")
        second = calculate_all_adjacencies(CENTER, busy_map, "brazil")
        assert first == second

    def test_result_serializes(self, campus_map):
        payload = calculate_adjacency(CENTER, "campus", campus_map).to_dict()
        assert payload["bonus"] == 4
        assert payload["breakdown"][0] == {
            "source": "Mountain",
            "count": 2,
            "bonus_per_source": 1,
            "total_bonus": 2,
        }
