"""Test card rendering and HTML document assembly.

Tests cover:
1. Display reference padding (#0007, bare # for blank cards)
2. Image tag vs padding block
3. Header/footer handling and sealing rules
4. PDF rendering (skipped when PyMuPDF is not installed)
"""
from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

import pytest

from cardset_engine.config import ConfigurationError
from cardset_engine.document import HtmlDocument
from cardset_engine.layout import layout_accordion, layout_grid
from cardset_engine.renderer import PAGE1X2_IN, PAGE2X3_IN, TemplateRenderer, TemplateSet
from cardset_engine.types import (
    FlashcardRecord,
    HtmlType,
    ImageReference,
    PartOfSpeech,
    RenderedFragment,
)


# ═══════════════════════════════════════════════════════════════════════════════
# TEST FIXTURES
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def workspace_dir() -> Path:
    """Create temporary workspace."""
    tmp = tempfile.mkdtemp()
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def templates() -> TemplateSet:
    return TemplateSet()


def _record(uid: int = 7, img: ImageReference | None = None, **kw) -> FlashcardRecord:
    fields = dict(pos=PartOfSpeech.NOUN, english="dog", lwc="หมา", ipa="mǎː")
    fields.update(kw)
    return FlashcardRecord(uid=uid, img=img, **fields)


# ═══════════════════════════════════════════════════════════════════════════════
# TEMPLATE RENDERER
# ═══════════════════════════════════════════════════════════════════════════════

class TestTemplateRenderer:
    """Test TemplateRenderer.render()."""

    def test_reference_is_zero_padded(self, templates: TemplateSet):
        frag = TemplateRenderer(templates, (220, 180)).render(_record(7))

        assert frag.uid == 7
        assert '<div class="reference">#0007</div>' in frag.text

    def test_blank_card_has_bare_reference(self, templates: TemplateSet):
        frag = TemplateRenderer(templates, (220, 180)).render(FlashcardRecord.blank())
        assert '<div class="reference">#</div>' in frag.text

    def test_fields_substituted_and_escaped(self, templates: TemplateSet):
        frag = TemplateRenderer(templates, (220, 180)).render(_record(english="a <b> & c"))

        assert "noun" in frag.text
        assert "หมา" in frag.text
        assert "mǎː" in frag.text
        assert "a &lt;b&gt; &amp; c" in frag.text
        assert "${" not in frag.text

    def test_missing_image_renders_padding(self, templates: TemplateSet):
        frag = TemplateRenderer(templates, (220, 180)).render(_record(img=None))

        assert "<img" not in frag.text
        assert "width:220px; height:180px" in frag.text

    def test_image_width_overrides_padding_width(self, templates: TemplateSet):
        frag = TemplateRenderer(templates, (220, 180)).render(_record(img=None), image_width=150)
        assert "width:150px; height:180px" in frag.text

    def test_image_tag_uses_reference_size(self, templates: TemplateSet):
        img = ImageReference(uid=7, path="pics/c0007.png", width=200, height=120)
        frag = TemplateRenderer(templates, (220, 180)).render(_record(img=img))

        assert '<img src="pics/c0007.png"' in frag.text
        assert "max-width: 200px; max-height: 120px" in frag.text
        assert "img-padding" not in frag.text

    def test_images_suppressed(self, templates: TemplateSet):
        img = ImageReference(uid=7, path="pics/c0007.png", width=200, height=120)
        frag = TemplateRenderer(templates, (220, 180), include_images=False).render(_record(img=img))

        assert "<img" not in frag.text
        assert "width:220px; height:180px" in frag.text

    def test_image_src_relative_to_link_root(self, templates: TemplateSet, workspace_dir: Path):
        path = workspace_dir / "images" / "c0007.png"
        img = ImageReference(uid=7, path=str(path), width=200, height=120)
        renderer = TemplateRenderer(templates, (220, 180), link_root=workspace_dir / "out")

        assert 'src="../images/c0007.png"' in renderer.render(_record(img=img)).text

    def test_missing_template_folder(self, workspace_dir: Path):
        with pytest.raises(ConfigurationError, match="template"):
            TemplateRenderer(TemplateSet(root=workspace_dir), (220, 180))


# ═══════════════════════════════════════════════════════════════════════════════
# DOCUMENT ASSEMBLER
# ═══════════════════════════════════════════════════════════════════════════════

class TestHtmlDocument:
    """Test HtmlDocument."""

    def test_title_in_header(self, workspace_dir: Path):
        doc = HtmlDocument(workspace_dir / "a.html", "Thai", HtmlType.NO_IMAGE)

        assert doc.title == "Card sets (Thai) - NO IMAGE"
        assert "<title>Card sets (Thai) - NO IMAGE</title>" in doc.text
        assert "</html>" not in doc.text

    def test_title_is_escaped(self, workspace_dir: Path):
        doc = HtmlDocument(workspace_dir / "a.html", "Thai <b>&</b>", HtmlType.IMAGE)

        assert "<title>Card sets (Thai &lt;b&gt;&amp;&lt;/b&gt;) - IMAGE</title>" in doc.text
        assert "<h1>Card sets (Thai &lt;b&gt;&amp;&lt;/b&gt;) - IMAGE</h1>" in doc.text

    def test_write_seals_once(self, workspace_dir: Path):
        doc = HtmlDocument(workspace_dir / "a.html", "Thai", HtmlType.IMAGE)
        doc.append_fragments([RenderedFragment(uid=1, text="<p>one</p>")])
        doc.seal()
        doc.seal()
        out = doc.write_to_file()

        text = out.read_text(encoding="utf-8")
        assert text.count("</html>") == 1
        assert text.index("<p>one</p>") < text.index("</body>")

    def test_write_without_explicit_seal(self, workspace_dir: Path):
        doc = HtmlDocument(workspace_dir / "sub" / "a.html", "Thai", HtmlType.IMAGE)
        out = doc.write_to_file()

        assert doc.sealed
        assert out.read_text(encoding="utf-8").rstrip().endswith("</html>")

    def test_append_after_seal_fails(self, workspace_dir: Path):
        doc = HtmlDocument(workspace_dir / "a.html", "Thai", HtmlType.IMAGE)
        doc.seal()
        with pytest.raises(RuntimeError):
            doc.append_pages(["<table></table>"])

    def test_second_write_overwrites(self, workspace_dir: Path):
        path = workspace_dir / "a.html"
        path.write_text("STALE-CONTENT", encoding="utf-8")
        doc = HtmlDocument(path, "Thai", HtmlType.BLANK)
        doc.write_to_file()
        doc.write_to_file()

        text = path.read_text(encoding="utf-8")
        assert "STALE-CONTENT" not in text
        assert text.startswith("<!DOCTYPE html>")
        assert text.count("</html>") == 1

    def test_accordion_groups(self, workspace_dir: Path, templates: TemplateSet):
        renderer = TemplateRenderer(templates, (220, 180))
        frags = [renderer.render(_record(uid)) for uid in range(1, 6)]
        groups = layout_accordion(frags, templates.load(PAGE1X2_IN), 4)

        doc = HtmlDocument(workspace_dir / "a.html", "Thai", HtmlType.NO_IMAGE, templates)
        doc.append_groups(groups)
        text = doc.text

        assert 'id="collapse-0001"' in text
        assert "Cards 0001 - 0004" in text
        assert "Cards 0005 - 0005" in text
        assert text.count('class="page page1x2"') == 3

    def test_grid_pages(self, workspace_dir: Path, templates: TemplateSet):
        renderer = TemplateRenderer(templates, (220, 180), include_images=False)
        blanks = [renderer.render(FlashcardRecord.blank()) for _ in range(7)]

        doc = HtmlDocument(workspace_dir / "a.html", "Thai", HtmlType.BLANK, templates)
        doc.append_pages(layout_grid(blanks, templates.load(PAGE2X3_IN), 6))

        assert doc.text.count('class="page page2x3"') == 2
        assert doc.text.count('<div class="flash">') == 7


# ═══════════════════════════════════════════════════════════════════════════════
# PDF
# ═══════════════════════════════════════════════════════════════════════════════

class TestRenderPdf:
    """Test render_pdf() with PyMuPDF."""

    def test_renders_pdf(self, workspace_dir: Path):
        pytest.importorskip("fitz")
        from cardset_engine.pdf import render_pdf

        html_path = workspace_dir / "cards.html"
        html_path.write_text(
            "<html><body>" + "".join(f"<p>card {i}</p>" for i in range(200)) + "</body></html>",
            encoding="utf-8",
        )
        out = render_pdf(html_path, workspace_dir / "pdf" / "cards.pdf")

        assert out.exists()
        assert out.read_bytes().startswith(b"%PDF")
