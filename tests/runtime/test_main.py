"""
Tests for the command line entry point.
"""

import pytest
import yaml
from builders import scene_document

from protoplay.__main__ import main, parse_args


@pytest.fixture
def scene_file(tmp_path):
    path = tmp_path / "scene.yaml"
    path.write_text(yaml.safe_dump(scene_document()), encoding="utf-8")
    return str(path)


def test_parse_args():
    args = parse_args(["scene.yaml", "--click", "1:1", "--click", "1:3", "--chain", "2:1,3:1"])

    assert args.scene == "scene.yaml"
    assert args.click == ["1:1", "1:3"]
    assert args.chain == "2:1,3:1"
    assert args.seconds == 5.0


@pytest.mark.asyncio
async def test_replay_with_valid_chain(scene_file, log_records):
    assert await main([scene_file, "--seconds", "0", "--chain", "2:1, 3:1"]) == 0

    messages = [r[2] for r in log_records]
    assert any(m.startswith("Animation chain valid") for m in messages)
    assert any(m.startswith("Replay finished") for m in messages)


@pytest.mark.asyncio
@pytest.mark.parametrize("chain", ["2:1,1:1", "2:1,9:9", "2:1"])
async def test_broken_chain_fails(scene_file, log_records, chain):
    assert await main([scene_file, "--seconds", "0", "--chain", chain]) == 1

    errors = [r for r in log_records if r[0] == "ERROR"]
    assert errors[-1][2].startswith("Invalid animation chain")


@pytest.mark.asyncio
async def test_missing_scene_fails(tmp_path, log_records):
    assert await main([str(tmp_path / "missing.yaml"), "--seconds", "0"]) == 1
    assert any(r[2].startswith("Cannot load scene") for r in log_records)
