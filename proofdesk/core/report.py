"""
report.py - Standalone HTML report of a highlighted buffer

Shows the buffer with open correction spans marked, the analysis summary
and one card per correction, coloured by category.
"""

from datetime import datetime
from typing import Optional

from proofdesk.core.highlight import HIGHLIGHT_CLASS, AnnotatedText
from proofdesk.core.models import AnalysisResult, Category
from proofdesk.utils.text_processing import count_words, escape_markup

CATEGORY_COLORS = {
    Category.SPELLING: "#ef4444",
    Category.GRAMMAR: "#f97316",
    Category.STYLE: "#3b82f6",
}

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="km">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>
        body {{
            padding: 20px;
            max-width: 960px;
            margin: 0 auto;
            font-family: "Noto Sans Khmer", "Khmer OS", -apple-system, "Segoe UI", sans-serif;
            line-height: 1.8;
        }}
        .buffer {{
            white-space: pre-wrap;
            padding: 15px;
            border-radius: 5px;
            background-color: #f8f9fa;
        }}
        .{highlight} {{
            background-color: #fee2e2;
            border-bottom: 2px solid #ef4444;
        }}
        .summary {{
            background-color: #eef2ff;
            border-left: 4px solid #6366f1;
            padding: 15px;
            border-radius: 5px;
            margin: 20px 0;
        }}
        .summary.correct {{
            background-color: #f0fdf4;
            border-left-color: #22c55e;
        }}
        .card {{
            padding: 12px 15px;
            margin-bottom: 12px;
            border-left: 4px solid;
            border-radius: 5px;
            background-color: #fff;
            box-shadow: 0 2px 4px rgba(0, 0, 0, 0.08);
        }}
        .badge {{
            color: #fff;
            font-size: 12px;
            padding: 2px 8px;
            border-radius: 10px;
        }}
        .original {{ text-decoration: line-through; color: #94a3b8; }}
        .suggested {{ font-weight: bold; }}
        .meta {{ color: #64748b; font-size: 13px; }}
    </style>
</head>
<body>
    <h1>{title}</h1>
    <p class="meta">{meta}</p>
    <div class="buffer">{buffer}</div>
{summary}
{cards}
</body>
</html>
"""


def _summary_html(result: Optional[AnalysisResult]) -> str:
    if result is None:
        return ""
    css = "summary correct" if result.is_fully_correct else "summary"
    headline = "✨ Your text is correct!" if result.is_fully_correct else "📝 Found points to improve"
    return (f'    <div class="{css}"><strong>{headline}</strong>'
            f'<p>{escape_markup(result.summary)}</p></div>')


def _cards_html(result: Optional[AnalysisResult]) -> str:
    if result is None or not result.corrections:
        return ""
    cards = []
    for c in result.corrections:
        color = CATEGORY_COLORS[c.category]
        cards.append(
            f'    <div class="card" style="border-left-color: {color}">\n'
            f'        <span class="badge" style="background-color: {color}">'
            f'{c.category.value} · {c.category.khmer_label}</span>\n'
            f'        <p><span class="original">{escape_markup(c.original_span)}</span> → '
            f'<span class="suggested">{escape_markup(c.suggested_span)}</span></p>\n'
            f'        <p class="meta">{escape_markup(c.rationale)}</p>\n'
            f'    </div>'
        )
    return "\n".join(cards)


def render_html_page(annotated: AnnotatedText,
                     result: Optional[AnalysisResult],
                     title: str = "Proofreading report") -> str:
    """Build a complete HTML document for *annotated* and its *result*."""
    text = annotated.text
    meta = (f"Generated {datetime.now():%Y-%m-%d %H:%M} · "
            f"{len(text)} characters · {count_words(text)} words")
    return PAGE_TEMPLATE.format(
        title=escape_markup(title),
        meta=meta,
        highlight=HIGHLIGHT_CLASS,
        buffer=annotated.to_html(),
        summary=_summary_html(result),
        cards=_cards_html(result),
    )
