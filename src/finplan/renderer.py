"""Rasterizes an executed plan into a PNG solution sheet with Pillow."""

import io
import logging
from typing import Any, List, Optional, Sequence

from PIL import Image, ImageDraw, ImageFont

from finplan.plan import ExecutedStep
from finplan.templates import template_for
from finplan.utils import format_number

logger = logging.getLogger(__name__)

WIDTH = 800
PADDING = 40
LINE_HEIGHT = 35
STEP_SPACING = 25
HEADER_GAP = 20

TITLE_SIZE = 22
STEP_NAME_SIZE = 18
FORMULA_SIZE = 16
CALC_SIZE = 15

BACKGROUND = "#FFFFFF"
TITLE_COLOR = "#1E3A8A"
SEPARATOR_COLOR = "#E5E7EB"
STEP_NAME_COLOR = "#111827"
FORMULA_COLOR = "#6B7280"
CALC_COLOR = "#1E88E5"
ANSWER_COLOR = "#047857"

REGULAR_FONTS = ("DejaVuSans.ttf", "Arial.ttf")
BOLD_FONTS = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "DejaVuSans.ttf")
MONO_FONTS = ("DejaVuSansMono.ttf", "Courier New.ttf", "DejaVuSans.ttf")


def load_font(size: int, candidates: Sequence[str] = REGULAR_FONTS) -> ImageFont.ImageFont:
    for name in candidates:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    logger.debug(f"No TrueType font from {list(candidates)} found; using Pillow default.")
    return ImageFont.load_default(size=size)


def wrap_text_lines(draw: ImageDraw.ImageDraw, text: str, font: Any, max_width: int) -> List[str]:
    """Wrap text to fit within max_width, breaking words that are wider than a line."""
    lines: List[str] = []
    current_line = ""
    for word in text.split():
        test_line = (current_line + " " + word).strip()
        if draw.textlength(test_line, font=font) <= max_width:
            current_line = test_line
            continue
        if current_line:
            lines.append(current_line)
        # hard-break a single word that does not fit on its own
        while draw.textlength(word, font=font) > max_width and len(word) > 1:
            cut = len(word) - 1
            while cut > 1 and draw.textlength(word[:cut], font=font) > max_width:
                cut -= 1
            lines.append(word[:cut])
            word = word[cut:]
        current_line = word
    if current_line:
        lines.append(current_line)
    return lines if lines else [text]


def _step_blocks(steps: Sequence[ExecutedStep]) -> List[List[tuple]]:
    """Per step, the (text, font, color, indent) lines to draw before wrapping."""
    name_font = load_font(STEP_NAME_SIZE, BOLD_FONTS)
    formula_font = load_font(FORMULA_SIZE, MONO_FONTS)
    calc_font = load_font(CALC_SIZE, MONO_FONTS)
    blocks = []
    for index, step in enumerate(steps, start=1):
        template = template_for(step.formula_name)
        if step.generated_formula and step.formula_name == "formula_experimental":
            template = step.generated_formula
        blocks.append([
            (f"{index}. {step.step_name}", name_font, STEP_NAME_COLOR, 0),
            (f"Fórmula: {template}", formula_font, FORMULA_COLOR, 15),
            (f"Cálculo: {step.substituted_formula}", calc_font, CALC_COLOR, 15),
        ])
    return blocks


def render_solution(
    interpretation: str,
    steps: Sequence[ExecutedStep],
    final_variable: Optional[str] = None,
    final_value: Any = None,
) -> bytes:
    """
    Draw the interpretation as a title, then every executed step with its
    name, display formula and substituted calculation. When ``final_variable``
    is given a closing answer line is added. Returns PNG bytes.
    """
    title_font = load_font(TITLE_SIZE, BOLD_FONTS)
    answer_font = load_font(STEP_NAME_SIZE, BOLD_FONTS)
    usable_width = WIDTH - 2 * PADDING

    measure = ImageDraw.Draw(Image.new("RGB", (1, 1)))
    title_lines = wrap_text_lines(measure, interpretation or "", title_font, usable_width)

    wrapped_blocks = []
    for block in _step_blocks(steps):
        wrapped = []
        for text, font, color, indent in block:
            for line in wrap_text_lines(measure, text, font, usable_width - indent):
                wrapped.append((line, font, color, indent))
        wrapped_blocks.append(wrapped)

    answer_lines: List[str] = []
    if final_variable is not None and final_value is not None:
        answer_text = f"Respuesta: {final_variable} = {format_number(final_value)}"
        answer_lines = wrap_text_lines(measure, answer_text, answer_font, usable_width)

    header_height = PADDING + len(title_lines) * LINE_HEIGHT + HEADER_GAP
    total_height = header_height + PADDING
    for wrapped in wrapped_blocks:
        total_height += len(wrapped) * LINE_HEIGHT + STEP_SPACING
    total_height += len(answer_lines) * LINE_HEIGHT + PADDING

    canvas = Image.new("RGB", (WIDTH, total_height), BACKGROUND)
    draw = ImageDraw.Draw(canvas)

    y = PADDING
    for line in title_lines:
        line_width = draw.textlength(line, font=title_font)
        draw.text(((WIDTH - line_width) / 2, y), line, fill=TITLE_COLOR, font=title_font)
        y += LINE_HEIGHT
    draw.line([(PADDING, header_height), (WIDTH - PADDING, header_height)], fill=SEPARATOR_COLOR, width=1)

    y = header_height + PADDING
    for wrapped in wrapped_blocks:
        for line, font, color, indent in wrapped:
            draw.text((PADDING + indent, y), line, fill=color, font=font)
            y += LINE_HEIGHT
        y += STEP_SPACING

    for line in answer_lines:
        draw.text((PADDING, y), line, fill=ANSWER_COLOR, font=answer_font)
        y += LINE_HEIGHT

    out_buf = io.BytesIO()
    canvas.save(out_buf, format="PNG")
    logger.info(f"Rendered solution image {WIDTH}x{total_height} with {len(steps)} step(s).")
    return out_buf.getvalue()
