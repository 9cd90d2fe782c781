from PIL import Image

from bmpdecoder import bmp8_load, bmp24_load
from conftest import bmp8_bytes
from preview import channel_histograms, plot_histogram_image, to_pil_image, to_rgb_rows


def test_rgb_rows_8bit_are_top_first_without_padding(bmp8_path, gray_rows):
    rows = to_rgb_rows(bmp8_load(bmp8_path))
    assert rows == [[(v, v, v) for v in row] for row in gray_rows]


def test_rgb_rows_24bit_copy(bmp24_path, rgb_rows):
    img = bmp24_load(bmp24_path)
    rows = to_rgb_rows(img)
    assert rows == rgb_rows
    rows[0][0] = (9, 9, 9)
    assert img.data[0][0] == (10, 20, 30)


def test_rgb_rows_of_missing_image():
    assert to_rgb_rows(None) == []


def test_to_pil_image(bmp24_path):
    pil = to_pil_image(bmp24_load(bmp24_path))
    assert pil.size == (4, 3)
    assert pil.getpixel((1, 0)) == (255, 0, 0)


def test_channel_histograms(bmp24_path):
    hists = channel_histograms(bmp24_load(bmp24_path))
    assert set(hists) == {"R", "G", "B", "Gray"}
    assert all(sum(h) == 12 for h in hists.values())
    assert hists["R"][255] == 2


def test_plot_histogram_image():
    hist = [0] * 256
    hist[100] = 5
    img = plot_histogram_image(hist, color="red", width=200, height=100)
    assert isinstance(img, Image.Image)
    assert img.width > 0 and img.height > 0
    assert plot_histogram_image([0] * 256).width > 0


def test_rgb_rows_8bit_top_down(write_file, gray_rows):
    img = bmp8_load(write_file("td8.bmp", bmp8_bytes(gray_rows, top_down=True)))
    assert to_rgb_rows(img) == [[(v, v, v) for v in row] for row in gray_rows]
