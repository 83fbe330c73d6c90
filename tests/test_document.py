import pytest

from pageflow.document import Document, PageDecorator, SimplePageDecorator
from pageflow.elements.base import Element
from pageflow.elements.layout import LinearLayout
from pageflow.elements.lists import UnorderedList
from pageflow.elements.table import FrameCellDecorator, TableLayout
from pageflow.elements.text import Break, PageBreak, Paragraph, Text
from pageflow.errors import (
    FontLoadFailure,
    InvalidStyleReference,
    LayoutOverflow,
    TextWidthExceeded,
)
from pageflow.fonts import Builtin, FontData, FontFamily, FontMetrics
from pageflow.geometry import Margins, Size
from pageflow.settings import PageSettings
from pageflow.style import Style

THIRTY_WORDS = " ".join(["WWWW"] * 30)


def _document(width=100, height=115, **settings):
    return Document(settings=PageSettings(page_width=width, page_height=height, **settings))


class TestPagination:
    """Distribution of elements over pages."""

    def test_long_paragraph_spans_three_pages(self, writer):
        document = _document(50, 115)
        document.push(Paragraph(THIRTY_WORDS))
        document.render(writer)
        assert writer.page_count() == 3
        assert writer.texts() == ["WWWW"] * 30

    def test_elements_share_a_page_when_they_fit(self, writer):
        document = _document(200, 200)
        document.push(Text("one")).push(Break()).push(Text("two"))
        document.render(writer)
        assert writer.page_count() == 1
        positions = [call[3] for call in writer.calls if call[0] == "draw_text"]
        assert positions[1].y - positions[0].y == pytest.approx(22.2)

    def test_page_break_starts_new_page(self, writer):
        document = _document(200, 200)
        document.push(Text("one")).push(PageBreak()).push(Text("two"))
        document.render(writer)
        assert writer.page_count() == 2
        pages = []
        for call in writer.calls:
            if call[0] == "add_page":
                pages.append([])
            elif call[0] == "draw_text":
                pages[-1].append(call[1])
        assert pages == [["one"], ["two"]]

    def test_empty_document_has_one_page(self, writer):
        _document().render(writer)
        assert writer.calls == [("add_page", Size(100, 115))]

    def test_margins_offset_the_body(self, writer):
        document = _document(200, 200, margins=Margins.all(20))
        document.push(Text("demo"))
        document.render(writer)
        (position,) = [call[3] for call in writer.calls if call[0] == "draw_text"]
        assert position.x == pytest.approx(20)
        assert position.y == pytest.approx(20 + 8.616)

    def test_nested_containers_continue_across_pages(self, writer):
        document = _document(60, 115)
        document.push(
            LinearLayout([Text("head"), UnorderedList([Paragraph(THIRTY_WORDS)], bullet="-")])
        )
        document.render(writer)
        assert writer.texts().count("WWWW") == 30
        assert writer.texts().count("-") == 1
        assert writer.page_count() == 4


class TestFailures:
    """Layout errors abort the render before anything is written."""

    def test_unregistered_family_fails_before_writing(self, writer):
        document = _document(200, 200)
        document.push(Text("ok")).push(Text("demo").styled(Style(font_family="Missing")))
        with pytest.raises(InvalidStyleReference):
            document.render(writer)
        assert writer.calls == []

    def test_too_wide_text_aborts_without_output(self, writer):
        document = _document(50, 115)
        document.push(Text("fits")).push(Text("This is a demo"))
        with pytest.raises(TextWidthExceeded):
            document.render(writer)
        assert writer.calls == []

    def test_element_taller_than_a_page_overflows(self, writer):
        document = _document(100, 5)
        document.push(Text("demo"))
        with pytest.raises(LayoutOverflow) as excinfo:
            document.render(writer)
        assert excinfo.value.element_name == "Text"
        assert excinfo.value.page_number == 1
        assert writer.calls == []

    @pytest.mark.parametrize("nested", [False, True])
    def test_padding_does_not_hide_a_stuck_element(self, writer, nested):
        """Padding around content that never fits is not mistaken for progress."""
        element = Paragraph("demo").padded(1)
        if nested:
            element = LinearLayout([element])
        document = _document(100, 10)
        document.push(element)
        with pytest.raises(LayoutOverflow):
            document.render(writer)
        assert writer.calls == []

    def test_metrics_only_font_cannot_be_embedded(self, writer):
        metrics = FontMetrics(
            font_name="Preset",
            units_per_em=1000.0,
            ascent=750.0,
            descent=250.0,
            line_gap=0.0,
            glyph_map={ord("A"): 1, ord("V"): 2},
            advances={1: 600.0, 2: 600.0},
        )
        fonts = [FontData("Preset", metrics=metrics) for _ in range(4)]
        document = Document(font_family=FontFamily("Preset", *fonts))
        document.push(Text("AV"))
        with pytest.raises(FontLoadFailure) as excinfo:
            document.render(writer)
        assert excinfo.value.font_name == "Preset"
        assert writer.calls == []
        with pytest.raises(FontLoadFailure):
            document.render_to_bytes()


class TestRendering:
    def test_renders_are_repeatable(self, writer):
        document = _document(50, 115)
        document.push(Paragraph(THIRTY_WORDS))
        document.render(writer)
        second = type(writer)()
        document.render(second)
        assert second.calls == writer.calls

    def test_header_is_rendered_on_every_page(self, writer):
        document = _document(50, 115)
        decorator = SimplePageDecorator(header=lambda page: Text(f"p{page}"))
        document.set_page_decorator(decorator)
        document.push(Paragraph(THIRTY_WORDS))
        document.render(writer)
        texts = writer.texts()
        assert [text for text in texts if text.startswith("p")] == ["p1", "p2", "p3", "p4"]
        assert texts.count("WWWW") == 30

    def test_title_and_settings(self, writer):
        document = _document()
        document.set_title("Report")
        document.set_paper_size((300, 400))
        document.set_font_size(10)
        document.push(Text("demo"))
        document.render(writer)
        assert writer.calls[0] == ("set_title", "Report")
        assert writer.calls[1] == ("add_page", Size(300, 400))
        assert document.default_style.size == 10

    def test_custom_font_family_is_embedded(self, writer, truetype_family):
        document = Document(font_family=truetype_family)
        document.push(Text("AV"))
        document.render(writer)
        assert ("embed_font", "TestSans-0") in writer.calls
        assert writer.calls[-1][2] == "embedded-TestSans-0"

    def test_additional_family_can_be_styled(self, writer):
        document = _document(200, 200)
        name = document.add_font_family(FontFamily.from_builtin(Builtin.TIMES))
        document.push(Text("demo").styled(Style(font_family=name)))
        document.render(writer)
        assert writer.calls[-1][2] == "Times-Roman"

    def test_documents_sharing_a_font_name_keep_their_own_font(
        self, truetype_bytes, other_truetype_bytes
    ):
        outputs = []
        for data in (truetype_bytes, other_truetype_bytes):
            fonts = [FontData.from_bytes("Shared", data) for _ in range(4)]
            document = Document(font_family=FontFamily("Shared", *fonts))
            document.push(Text("AV"))
            outputs.append(document.render_to_bytes())
        assert b"TestSans-Regular" in outputs[0]
        assert b"OtherSans-Regular" in outputs[1]
        assert b"TestSans-Regular" not in outputs[1]

    def test_framed_table_document_produces_pdf(self, tmp_path):
        document = Document()
        document.set_title("Demo")
        table = TableLayout([30, 70]).with_cell_decorator(FrameCellDecorator(True, True, False))
        table.row().element(Text("a")).element(Paragraph("This is a demo document.")).push()
        document.push(Paragraph("This is a demo document.").framed()).push(table)
        assert document.render_to_bytes().startswith(b"%PDF")
        path = document.render_to_file(tmp_path / "demo.pdf")
        assert path.read_bytes().startswith(b"%PDF")

    def test_progress_bar_does_not_change_output(self, writer):
        document = _document(50, 115, show_progress=True)
        document.push(Paragraph(THIRTY_WORDS))
        document.render(writer)
        assert writer.page_count() == 3

    def test_line_spacing_widens_lines(self, writer):
        document = _document(200, 200)
        document.set_line_spacing(2.0)
        document.push(Paragraph("one\ntwo"))
        document.render(writer)
        positions = [call[3] for call in writer.calls if call[0] == "draw_text"]
        assert positions[1].y - positions[0].y == pytest.approx(22.2)


class TestPublicApi:
    def test_exports_resolve(self):
        from pageflow import api

        assert all(hasattr(api, name) for name in api.__all__)
        assert api.Document is Document

    def test_base_classes_require_an_implementation(self):
        with pytest.raises(TypeError):
            Element()
        with pytest.raises(TypeError):
            PageDecorator()
