import io

import pytest
from PIL import Image as PILImage
from reportlab.lib import colors

from pageflow.errors import ImageError
from pageflow.fonts import FontData
from pageflow.geometry import Position, Size
from pageflow.render import TextOp
from pageflow.style import LineStyle
from pageflow.writer import ReportlabWriter, decode_image, load_image, rotated_bounding_box


def _png_bytes(size=(4, 2)):
    buffer = io.BytesIO()
    PILImage.new("RGB", size, "red").save(buffer, format="PNG")
    return buffer.getvalue()


class TestReportlabWriter:
    """PDF output through a reportlab canvas."""

    def test_produces_pdf_with_every_page(self):
        writer = ReportlabWriter()
        writer.set_title("Demo")
        writer.add_page(Size(200, 100))
        op = TextOp("demo", "Helvetica", 12, colors.black, Position(10, 20))
        writer.draw_text(op, op.position, op.color)
        writer.draw_line([Position(0, 0), Position(10, 10)], LineStyle().with_dash(2, 1))
        writer.draw_rect(Position(5, 5), Size(20, 10), colors.grey, LineStyle())
        writer.add_page(Size(300, 100))
        data = writer.serialize()
        assert data.startswith(b"%PDF")
        assert writer.page_count == 2
        assert b"/Count 2" in data

    def test_kerned_text_and_images(self):
        writer = ReportlabWriter()
        writer.add_page(Size(200, 100))
        op = TextOp("AV", "Helvetica", 12, colors.black, Position(0, 20), (0.0, 7.0))
        writer.draw_text(op, op.position, op.color)
        image = decode_image(_png_bytes())
        writer.draw_image(image, Position(10, 10), Size(40, 20), 30)
        assert writer.serialize().startswith(b"%PDF")

    def test_truetype_font_is_embedded(self, truetype_bytes):
        writer = ReportlabWriter()
        font = FontData.from_bytes("PageflowTestSans", truetype_bytes)
        handle = writer.embed_font(font)
        assert handle.startswith("PageflowTestSans-")
        assert writer.embed_font(font) == handle
        writer.add_page(Size(100, 100))
        op = TextOp("AV", handle, 10, colors.black, Position(0, 10))
        writer.draw_text(op, op.position, op.color)
        assert b"FontFile2" in writer.serialize()

    def test_fonts_sharing_a_name_get_separate_handles(
        self, truetype_bytes, other_truetype_bytes
    ):
        first = ReportlabWriter().embed_font(FontData.from_bytes("Shared", truetype_bytes))
        second = ReportlabWriter().embed_font(FontData.from_bytes("Shared", other_truetype_bytes))
        assert first != second
        assert ReportlabWriter().embed_font(FontData.from_bytes("Shared", truetype_bytes)) == first


class TestImages:
    @pytest.mark.parametrize(
        "rotation, expected",
        [(0, Size(10, 20)), (90, Size(20, 10)), (180, Size(10, 20)), (-90, Size(20, 10))],
    )
    def test_rotated_bounding_box(self, rotation, expected):
        assert rotated_bounding_box(Size(10, 20), rotation) == expected

    def test_diagonal_rotation_grows_box(self):
        box = rotated_bounding_box(Size(10, 10), 45)
        assert box.width == pytest.approx(14.142136)

    def test_decode_image(self):
        assert decode_image(_png_bytes()).size == (4, 2)

    def test_invalid_image_data_raises(self):
        with pytest.raises(ImageError):
            decode_image(b"definitely not an image")

    def test_missing_image_file_raises(self, tmp_path):
        with pytest.raises(ImageError):
            load_image(tmp_path / "missing.png")

    def test_load_image_from_disk(self, tmp_path):
        path = tmp_path / "pixel.png"
        path.write_bytes(_png_bytes((3, 3)))
        assert load_image(path).size == (3, 3)
