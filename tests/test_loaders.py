import json

import pytest

from civ_planner.map.coordinates import HexCoord
from civ_planner.state.loaders import load_tile_map, tile_map_from_payload


def _campus_snapshot():
    return {
        "tiles": [
            {"coord": {"q": 0, "r": 0}, "terrain": "plains"},
            {"coord": {"q": 1, "r": 0}, "terrain": "grassland", "modifier": "mountain"},
            {
                "coord": {"q": 0, "r": -1},
                "features": ["rainforest"],
                "resource": {"name": "bananas", "type": "bonus"},
                "riverEdges": [True, False],
                "owningCityId": "kyoto",
            },
        ]
    }


def test_list_of_tiles():
    tiles = tile_map_from_payload(_campus_snapshot())
    assert set(tiles) == {"0,0", "1,0", "0,-1"}
    assert tiles["1,0"].is_mountain
    jungle = tiles["0,-1"]
    assert jungle.coord == HexCoord(0, -1)
    assert jungle.features == ("rainforest",)
    assert jungle.resource.type == "bonus"
    assert jungle.river_edges == (True, False, False, False, False, False)
    assert jungle.owning_city_id == "kyoto"


def test_mapping_and_pair_forms_agree():
    mapping = {"tiles": {"2,-1": {"district": "campus"}, "0,0": {}}}
    pairs = {"tiles": [["2,-1", {"district": "campus"}], ["0,0", {}]]}
    assert tile_map_from_payload(mapping) == tile_map_from_payload(pairs)
    assert tile_map_from_payload(mapping)["2,-1"].district == "campus"


def test_snake_case_fields_accepted():
    tiles = tile_map_from_payload({"tiles": {"0,0": {"river_edges": [False, True], "is_locked": True}}})
    assert tiles["0,0"].has_river()
    assert tiles["0,0"].is_locked


@pytest.mark.parametrize(
    "block",
    [
        {"terrain": "lava"},
        {"district": "spaceport_2"},
        {"features": ["woods", "crystal"]},
        {"resource": {"name": "iron", "type": "rare"}},
        {"riverEdges": [False] * 7},
    ],
)
def test_unknown_vocabulary_raises(block):
    with pytest.raises(ValueError, match="0,0"):
        tile_map_from_payload({"tiles": {"0,0": block}})


def test_key_and_coord_must_agree():
    with pytest.raises(ValueError, match="disagrees"):
        tile_map_from_payload({"tiles": {"1,1": {"coord": {"q": 0, "r": 1}}}})


def test_list_entry_needs_a_coordinate():
    with pytest.raises(ValueError, match="no coordinate"):
        tile_map_from_payload({"tiles": [{"terrain": "plains"}]})


@pytest.mark.parametrize("payload", [[], {"cells": []}, {"tiles": "0,0"}, None])
def test_bad_documents(payload):
    with pytest.raises(ValueError):
        tile_map_from_payload(payload)


def test_duplicate_tiles_keep_the_last():
    tiles = tile_map_from_payload(
        {"tiles": [["0,0", {"terrain": "plains"}], ["0,0", {"terrain": "desert"}]]}
    )
    assert tiles["0,0"].terrain == "desert"


def test_load_json_and_yaml(tmp_path):
    json_path = tmp_path / "map.json"
    json_path.write_text(json.dumps(_campus_snapshot()), encoding="utf-8")
    yaml_path = tmp_path / "map.yaml"
    yaml_path.write_text(
        "tiles:\n"
        "  '0,0': {terrain: plains}\n"
        "  '1,0': {modifier: mountain}\n"
        "  '0,-1':\n"
        "    features: [rainforest]\n"
        "    resource: {name: bananas, type: bonus}\n"
        "    riverEdges: [true, false]\n"
        "    owningCityId: kyoto\n",
        encoding="utf-8",
    )
    from_json = load_tile_map(json_path)
    from_yaml = load_tile_map(str(yaml_path))
    assert from_json == from_yaml


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_tile_map(tmp_path / "nope.json")


def test_unparseable_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{tiles: ", encoding="utf-8")
    with pytest.raises(ValueError, match="Could not parse"):
        load_tile_map(path)
