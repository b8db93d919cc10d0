from pathlib import Path

import pytest
from PIL import Image

from mandelzoom.zoom import ZoomSettings, load_settings, main, run


def _small(**changes):
    values = dict(
        center_re="-0.5",
        center_im="0",
        min_span="0.6",
        start_span="2.0",
        factor=0.5,
        width=8,
        height=6,
    )
    values.update(changes)
    return ZoomSettings(**values)


def _write_ini(path: Path, lines):
    path.write_text("".join(line + "\n" for line in lines), encoding="ascii")
    return path


def test_load_settings_reads_fields(tmp_path):
    ini = _write_ini(tmp_path / "zoom.ini", ["-0.75", "0.1", "0.001", "0.5", "3"])
    settings = load_settings(ini)
    assert settings.center_re == "-0.75"
    assert settings.center_im == "0.1"
    assert settings.min_span == "0.001"
    assert settings.first == 3
    assert settings.large is True
    assert settings.factor == 0.5
    assert settings.start_span == "2.0"


def test_load_settings_without_first_line_defaults(tmp_path):
    ini = _write_ini(tmp_path / "zoom.ini", ["-0.75", "0.1", "0.001"])
    assert load_settings(ini).first == -1


def test_load_settings_ignores_non_numeric_first(tmp_path):
    ini = _write_ini(tmp_path / "zoom.ini", ["-0.75", "0.1", "0.001", "x", "abc"])
    assert load_settings(ini).first == -1


def test_load_settings_too_short(tmp_path):
    ini = _write_ini(tmp_path / "zoom.ini", ["-0.75", "0.1"])
    with pytest.raises(ValueError):
        load_settings(ini)


def test_load_settings_bad_number(tmp_path):
    ini = _write_ini(tmp_path / "zoom.ini", ["-0.75", "nonsense?", "0.001"])
    with pytest.raises(ValueError):
        load_settings(ini)


def test_load_settings_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "absent.ini")


@pytest.mark.parametrize("large", [False, True])
def test_run_writes_one_image_per_frame(tmp_path, large):
    written = run(_small(large=large), tmp_path)
    assert [path.name for path in written] == ["snap000000.bmp", "snap000001.bmp"]
    for path in written:
        with Image.open(path) as picture:
            assert picture.size == (8, 6)


def test_run_skips_existing_snapshots(tmp_path):
    first = run(_small(), tmp_path)
    assert len(first) == 2
    assert run(_small(), tmp_path) == []


def test_run_honours_first_frame(tmp_path):
    written = run(_small(first=1), tmp_path)
    assert [path.name for path in written] == ["snap000001.bmp"]
    assert not (tmp_path / "snap000000.bmp").exists()


def test_run_image_has_colour(tmp_path):
    (path,) = run(_small(min_span="1.5", width=12, height=9), tmp_path)
    with Image.open(path) as picture:
        colours = {colour for _, colour in picture.convert("RGB").getcolors(maxcolors=1000)}
    assert len(colours) > 1


def test_run_rejects_bad_factor(tmp_path):
    with pytest.raises(ValueError):
        run(_small(factor=1.5), tmp_path)


def test_main_with_ini(tmp_path, capsys):
    ini = _write_ini(tmp_path / "zoom.ini", ["-0.5", "0", "0.6", "", "-1"])
    out_dir = tmp_path / "frames"
    out_dir.mkdir()
    code = main(["--ini", str(ini), "--directory", str(out_dir), "--size", "8", "6"])
    assert code == 0
    assert sorted(p.name for p in out_dir.iterdir()) == ["snap000000.bmp", "snap000001.bmp"]
    assert "snap000001.bmp" in capsys.readouterr().out


def test_main_bad_ini(tmp_path):
    ini = _write_ini(tmp_path / "zoom.ini", ["1"])
    assert main(["--ini", str(ini), "--directory", str(tmp_path)]) == 1


def test_main_bad_size(tmp_path):
    ini = _write_ini(tmp_path / "zoom.ini", ["-0.5", "0", "0.6"])
    assert main(["--ini", str(ini), "--directory", str(tmp_path), "--size", "0", "6"]) == 2