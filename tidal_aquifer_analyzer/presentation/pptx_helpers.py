"""PPTX helper functions for the study report deck.

Built on the default python-pptx template (4:3, 10 x 7.5 in). Layout indices
match that template; geometry is computed from the presentation size so a
custom template with the same layout order also works.
"""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
from pptx.util import Emu, Inches, Pt
from pptx.enum.text import PP_ALIGN
from pptx.dml.color import RGBColor


# ── Default template layout indices ──────────────────────────────────
LY_TITLE      = 0   # "Title Slide"
LY_BULLET     = 1   # "Title and Content"
LY_CHAPTER    = 2   # "Section Header"
LY_TITLE_ONLY = 5   # "Title Only"

# ── Table / text colours ─────────────────────────────────────────────
OCEAN_BLUE = RGBColor(0x0B, 0x4F, 0x6C)
DARK_GREY  = RGBColor(0x33, 0x33, 0x33)
WHITE      = RGBColor(0xFF, 0xFF, 0xFF)
LIGHT_BG   = RGBColor(0xE6, 0xF0, 0xF4)

_FIG_DPI = 180


# =====================================================================
#  Low-level helpers
# =====================================================================

def _slide_inches(prs):
    return Emu(prs.slide_width).inches, Emu(prs.slide_height).inches


def add_picture_to_slide(prs, slide, img_path, top_in=1.5, margin_in=0.4):
    """Add a picture to *slide*, scaled to fit below the title, centered horizontally."""
    from PIL import Image
    sw, sh = _slide_inches(prs)
    max_w_in = sw - 2 * margin_in
    max_h_in = sh - top_in - margin_in
    with Image.open(img_path) as im:
        iw, ih = im.size
    w_in = iw / _FIG_DPI
    h_in = ih / _FIG_DPI
    scale = min(max_w_in / w_in, max_h_in / h_in, 1.5)
    w, h = w_in * scale, h_in * scale
    left = (sw - w) / 2
    top = top_in + (max_h_in - h) / 2
    slide.shapes.add_picture(str(img_path), Inches(left), Inches(top),
                             Inches(w), Inches(h))


# =====================================================================
#  Slide builders
# =====================================================================

def slide_title(prs, title_text, subtitle_text=""):
    """Opening slide (layout 0)."""
    slide = prs.slides.add_slide(prs.slide_layouts[LY_TITLE])
    slide.shapes.title.text = title_text
    if subtitle_text and len(slide.placeholders) > 1:
        slide.placeholders[1].text = subtitle_text
    return slide


def slide_title_only(prs, title_text, img_path=None, notes=""):
    """Slide with just a title (layout 5) and optional image."""
    slide = prs.slides.add_slide(prs.slide_layouts[LY_TITLE_ONLY])
    slide.shapes.title.text = title_text
    if img_path:
        add_picture_to_slide(prs, slide, img_path)
    if notes:
        slide.notes_slide.notes_text_frame.text = notes
    return slide


def slide_chapter(prs, title_text, subtitle_text=""):
    """Section divider slide (layout 2)."""
    slide = prs.slides.add_slide(prs.slide_layouts[LY_CHAPTER])
    slide.shapes.title.text = title_text
    if subtitle_text and len(slide.placeholders) > 1:
        slide.placeholders[1].text = subtitle_text
    return slide


def _format_paragraph(p, *, size_pt, bold=None, color=None, align=None):
    for r in p.runs:
        r.font.size = Pt(size_pt)
        if bold is not None:
            r.font.bold = bold
        if color is not None:
            r.font.color.rgb = color
    if align is not None:
        p.alignment = align


def slide_bullets(prs, title_text, bullets, size_pt=16):
    """Bulleted content slide (layout 1).

    ``"Key: text"`` renders the key in bold; a leading ``"- "`` indents the
    bullet one level.
    """
    slide = prs.slides.add_slide(prs.slide_layouts[LY_BULLET])
    slide.shapes.title.text = title_text
    body = slide.placeholders[1].text_frame
    body.clear()
    for n, text in enumerate(bullets):
        para = body.paragraphs[0] if n == 0 else body.add_paragraph()
        if text.startswith("- "):
            para.level = 1
            text = text[2:]
        key, sep, value = text.partition(": ")
        if sep:
            para.add_run().text = key + sep
            para.add_run().text = value
            _format_paragraph(para, size_pt=size_pt)
            para.runs[0].font.bold = True
        else:
            para.add_run().text = text
            _format_paragraph(para, size_pt=size_pt)
        para.space_after = Pt(6)
    return slide


def slide_table(prs, title_text, headers, rows, font_pt=10):
    """Title-only slide with a table below; header in ocean blue, every other row shaded."""
    slide = prs.slides.add_slide(prs.slide_layouts[LY_TITLE_ONLY])
    slide.shapes.title.text = title_text

    sw, sh = _slide_inches(prs)
    height_in = min(0.32 * (len(rows) + 1), sh - 2.0)
    table = slide.shapes.add_table(
        len(rows) + 1, len(headers), Inches(0.4), Inches(1.5), Inches(sw - 0.8), Inches(height_in)
    ).table

    grid = [list(headers)] + [list(r) for r in rows]
    for i, values in enumerate(grid):
        for j, val in enumerate(values):
            cell = table.cell(i, j)
            cell.text = str(val)
            header = i == 0
            for p in cell.text_frame.paragraphs:
                _format_paragraph(
                    p,
                    size_pt=font_pt,
                    bold=header,
                    color=WHITE if header else DARK_GREY,
                    align=PP_ALIGN.CENTER,
                )
            if header or i % 2 == 1:
                cell.fill.solid()
                cell.fill.fore_color.rgb = OCEAN_BLUE if header else LIGHT_BG
    return slide


def frame_rows(df, float_fmt="{:.4g}"):
    """DataFrame -> (headers, rows of display strings) for :func:`slide_table`."""
    headers = [str(c) for c in df.columns]
    rows = []
    for rec in df.itertuples(index=False):
        rows.append([float_fmt.format(v) if isinstance(v, float) else str(v) for v in rec])
    return headers, rows


# =====================================================================
#  Figure save helper
# =====================================================================

def savefig(fig, output_dir, name):
    """Save *fig* as a PNG and close it.

    Parameters
    ----------
    fig : matplotlib Figure
    output_dir : str or Path
        Directory to write the PNG into (created if missing).
    name : str
        Filename stem (without extension).

    Returns
    -------
    str
        Absolute path of the saved image.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    path = out / f"{name}.png"
    fig.savefig(str(path), bbox_inches="tight", dpi=_FIG_DPI, facecolor="white")
    plt.close(fig)
    return str(path.resolve())
