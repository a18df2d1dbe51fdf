import argparse
import json

import pytest
from PIL import Image

from sprite_atlas import __version__
from sprite_atlas.cli import collect_sprite_paths, load_offsets, main, natural_key, parse_color

from .conftest import solid


def test_natural_key_orders_numbers_by_value():
    names = ["walk_10", "Walk_2", "walk_1"]

    assert sorted(names, key=natural_key) == ["walk_1", "Walk_2", "walk_10"]


def test_collect_sprite_paths(sprite_dir, tmp_path):
    (sprite_dir / "notes.txt").write_text("ignored")
    extra = tmp_path / "extra.png"
    solid(4, 4).save(extra)

    paths = collect_sprite_paths([str(sprite_dir), str(extra)])

    assert [p.name for p in paths] == ["walk_1.png", "walk_2.png", "walk_10.png", "extra.png"]


def test_load_offsets(tmp_path):
    path = tmp_path / "offsets.json"
    path.write_text(json.dumps({"walk_1": {"x": 3, "y": -2}, "walk_2": {"y": 5}}))

    assert load_offsets(str(path)) == {"walk_1": (3, -2), "walk_2": (0, 5)}
    assert load_offsets(None) == {}


def test_parse_color():
    assert parse_color("255,0,255") == {"r": 255, "g": 0, "b": 255, "tolerance": 10}
    assert parse_color("1, 2, 3, 40") == {"r": 1, "g": 2, "b": 3, "tolerance": 40}


@pytest.mark.parametrize("text", ["1,2", "a,b,c", "1,2,3,4,5"])
def test_parse_color_rejects(text):
    with pytest.raises(argparse.ArgumentTypeError):
        parse_color(text)


def test_pack(sprite_dir, tmp_path):
    out = tmp_path / "build"

    assert main(["pack", str(sprite_dir), "--out-dir", str(out), "--padding", "1"]) == 0

    manifest = json.loads((out / "atlas.json").read_text(encoding="utf-8"))
    assert set(manifest["frames"]) == {"walk_1", "walk_2", "walk_10"}
    assert manifest["meta"]["image"] == "atlas.png"
    assert manifest["frames"]["walk_10"]["sourceSize"] == {"w": 10, "h": 50}
    with Image.open(out / "atlas.png") as img:
        assert img.size == (manifest["meta"]["size"]["w"], manifest["meta"]["size"]["h"])


def test_pack_with_name_and_offsets(sprite_dir, tmp_path):
    offsets = tmp_path / "offsets.json"
    offsets.write_text(json.dumps({"walk_2": {"x": -6, "y": 9}}))
    out = tmp_path / "build"

    code = main([
        "pack", str(sprite_dir), "--out-dir", str(out), "--name", "hero",
        "--offsets", str(offsets), "--packer", "BINARY_TREE",
    ])

    assert code == 0
    manifest = json.loads((out / "hero.json").read_text(encoding="utf-8"))
    assert manifest["meta"]["image"] == "hero.png"
    assert manifest["frames"]["walk_2"]["offset"] == {"x": -6, "y": 9}
    assert manifest["frames"]["walk_1"]["offset"] == {"x": 0, "y": 0}
    assert (out / "hero.png").exists()


def test_pack_with_size_limits(sprite_dir, tmp_path):
    out = tmp_path / "build"

    code = main([
        "pack", str(sprite_dir), "--out-dir", str(out), "--padding", "0",
        "--max-size", "256", "--fallback-max-size", "256",
    ])

    assert code == 0
    assert json.loads((out / "atlas.json").read_text(encoding="utf-8"))["meta"]["scale"] == 1.0


def test_pack_reports_errors(tmp_path, capsys):
    code = main(["pack", str(tmp_path / "missing.png"), "--out-dir", str(tmp_path)])

    assert code == 1
    assert "Error:" in capsys.readouterr().out
    assert not (tmp_path / "atlas.json").exists()


def test_pack_reports_infeasible(tmp_path, capsys):
    solid(2000, 10).save(tmp_path / "wide.png")

    code = main([
        "pack", str(tmp_path / "wide.png"), "--out-dir", str(tmp_path / "out"),
        "--max-size", "256", "--fallback-max-size", "256",
    ])

    assert code == 1
    assert "too large" in capsys.readouterr().out


def test_remove_colors(tmp_path):
    src = tmp_path / "sheet.png"
    sheet = Image.new("RGBA", (2, 1))
    sheet.putpixel((0, 0), (255, 0, 255, 255))
    sheet.putpixel((1, 0), (255, 0, 0, 255))
    sheet.save(src)
    dst = tmp_path / "clean.png"

    assert main(["remove-colors", str(src), str(dst), "--color", "255,0,255,0"]) == 0

    with Image.open(dst) as img:
        cleaned = img.convert("RGBA")
    assert cleaned.getpixel((0, 0))[3] == 0
    assert cleaned.getpixel((1, 0)) == (255, 0, 0, 255)


def test_split(tmp_path):
    src = tmp_path / "sheet.png"
    solid(10, 10).save(src)
    out = tmp_path / "cells"

    assert main(["split", str(src), str(out), "--horizontal", "4", "--vertical", "6"]) == 0

    assert sorted(p.name for p in out.iterdir()) == [
        "sheet_0_0.png", "sheet_0_1.png", "sheet_1_0.png", "sheet_1_1.png",
    ]
    with Image.open(out / "sheet_1_1.png") as cell:
        assert cell.size == (4, 6)


def test_compress(tmp_path):
    src = tmp_path / "atlas.png"
    solid(20, 20).save(src)
    dst = tmp_path / "small.png"

    assert main(["compress", str(src), str(dst), "--quality", "50", "--scale", "50"]) == 0

    with Image.open(dst) as img:
        assert img.size == (10, 10)


def test_compress_rejects_bad_scale(tmp_path, capsys):
    src = tmp_path / "atlas.png"
    solid(4, 4).save(src)

    assert main(["compress", str(src), str(tmp_path / "out.png"), "--scale", "0"]) == 1
    assert "scale" in capsys.readouterr().out


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])

    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_subcommand_is_required():
    with pytest.raises(SystemExit) as exc:
        main([])

    assert exc.value.code == 2


@pytest.mark.parametrize("content", [{"walk_1": 3}, {"walk_1": {"x": "left"}}, [1, 2]])
def test_load_offsets_rejects_malformed_values(tmp_path, content):
    path = tmp_path / "offsets.json"
    path.write_text(json.dumps(content))

    with pytest.raises(ValueError):
        load_offsets(str(path))


def test_pack_with_malformed_offsets(sprite_dir, tmp_path, capsys):
    offsets = tmp_path / "offsets.json"
    offsets.write_text(json.dumps({"walk_1": 3}))

    code = main(["pack", str(sprite_dir), "-o", str(tmp_path / "out"), "--offsets", str(offsets)])

    assert code == 1
    assert "Invalid offsets" in capsys.readouterr().out
