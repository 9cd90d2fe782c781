import commands
from bmp_image import Bmp8Image, Bmp24Image


def test_open_image_detects_depth(bmp24_path, bmp8_path):
    assert isinstance(commands.open_image(bmp24_path), Bmp24Image)
    assert isinstance(commands.open_image(bmp8_path), Bmp8Image)


def test_open_image_missing(tmp_path):
    assert commands.open_image(tmp_path / "missing.bmp") is None


def test_save_image_round_trip(bmp8_path, tmp_path):
    img = commands.open_image(bmp8_path)
    out = tmp_path / "saved.bmp"
    assert commands.save_image(img, out)
    assert out.read_bytes() == bmp8_path.read_bytes()


def test_filter_menus_follow_depth(bmp24_path, bmp8_path):
    labels8 = [e.label for e in commands.filter_menu(commands.open_image(bmp8_path))]
    labels24 = [e.label for e in commands.filter_menu(commands.open_image(bmp24_path))]
    assert "Black and white (threshold)" in labels8 and "Grayscale" not in labels8
    assert "Grayscale" in labels24 and "Black and white (threshold)" not in labels24
    assert commands.filter_menu(None) == []


def test_apply_filter_by_index_negative(bmp24_path):
    img = commands.open_image(bmp24_path)
    assert commands.apply_filter_by_index(img, 1)
    assert img.data[0][0] == (245, 235, 225)


def test_apply_filter_by_index_with_value(bmp8_path):
    img = commands.open_image(bmp8_path)
    assert commands.apply_filter_by_index(img, 3, 128)
    assert set(img.data) <= {0, 255}


def test_apply_filter_by_index_rejects_bad_input(bmp24_path):
    img = commands.open_image(bmp24_path)
    before = [list(row) for row in img.data]
    assert not commands.apply_filter_by_index(img, 0)
    assert not commands.apply_filter_by_index(img, len(commands.FILTERS_24) + 1)
    assert not commands.apply_filter_by_index(img, 2)   # brightness without a value
    assert not commands.apply_filter_by_index(None, 1)
    assert img.data == before


def test_every_menu_entry_runs(bmp24_path, bmp8_path):
    for path, menu in ((bmp24_path, commands.FILTERS_24), (bmp8_path, commands.FILTERS_8)):
        for index, entry in enumerate(menu, start=1):
            img = commands.open_image(path)
            assert commands.apply_filter_by_index(img, index, 10 if entry.needs_value else None)


def test_image_info(bmp24_path, bmp8_path):
    assert commands.image_info(commands.open_image(bmp24_path)) == {
        "Width": 4, "Height": 3, "Color Depth": 24,
    }
    info8 = commands.image_info(commands.open_image(bmp8_path))
    assert info8["Data Size"] == 16
    assert commands.image_info(None) == {}


def test_print_info(bmp8_path, capsys):
    commands.print_info(commands.open_image(bmp8_path))
    out = capsys.readouterr().out
    assert "Width: 3" in out
    assert "Height: 4" in out
    assert "Color Depth: 8" in out
    commands.print_info(None)
    assert "invalid image" in capsys.readouterr().out
