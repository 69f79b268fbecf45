"""Summary rendering: console tables and the HTML score-difference report."""

from pathlib import Path
from typing import Dict, List, Optional

from jinja2 import Environment, BaseLoader
from markupsafe import Markup

from utils.result_store import ResultStore
from utils.scoring import ScoreDifference, UrlScoreDifferences

TABLE_COLUMNS = ['Category', 'Previous Score', 'Current Score', 'Difference']


def format_score(value) -> str:
    """Two-decimal score for display."""
    return f"{float(value):.2f}"


def delta_class(value) -> Markup:
    """CSS class for a score difference."""
    value = float(value)
    if value > 0:
        return Markup("delta-up")
    if value < 0:
        return Markup("delta-down")
    return Markup("")


def get_template(name: str = "summary.html") -> str:
    """Load an HTML template shipped with the package."""
    template_path = Path(__file__).parent / "templates" / name
    return template_path.read_text(encoding='utf-8')


def _create_jinja_env():
    """Create a Jinja2 Environment with custom filters."""
    env = Environment(loader=BaseLoader(), autoescape=True)
    env.filters['score'] = format_score
    env.filters['delta_class'] = delta_class
    return env


def render_template(name: str, **template_context) -> str:
    env = _create_jinja_env()
    template = env.from_string(get_template(name))
    return template.render(**template_context)


def _regions_with_differences(
    all_differences: Dict[str, List[UrlScoreDifferences]]
) -> Dict[str, List[UrlScoreDifferences]]:
    return {region: entries for region, entries in all_differences.items() if entries}


def render_summary(all_differences: Dict[str, List[UrlScoreDifferences]], timestamp: str = "") -> Optional[str]:
    """
    Render the HTML summary of a run.

    Args:
        all_differences: Region -> differences per URL/device
        timestamp: Invocation timestamp shown in the document

    Returns:
        HTML document, or None when no region has anything to compare
    """
    regions = _regions_with_differences(all_differences)
    if not regions:
        return None
    return render_template("summary.html", regions=regions, timestamp=timestamp)


def generate_summary_report(
    all_differences: Dict[str, List[UrlScoreDifferences]],
    store: ResultStore,
    timestamp: str
) -> Optional[Path]:
    """
    Render the summary and save it as results/summary/summary-<timestamp>.html.

    Returns:
        Path to the saved summary, or None if there was nothing to compare
    """
    html = render_summary(all_differences, timestamp)
    if html is None:
        return None
    return store.save_summary(timestamp, html)


def format_score_table(differences: List[ScoreDifference]) -> str:
    """Plain-text table of score differences."""
    rows = [diff.as_row() for diff in differences]
    widths = {
        col: max([len(col)] + [len(row[col]) for row in rows])
        for col in TABLE_COLUMNS
    }

    def _line(values: Dict[str, str]) -> str:
        cells = []
        for col in TABLE_COLUMNS:
            if col == 'Category':
                cells.append(values[col].ljust(widths[col]))
            else:
                cells.append(values[col].rjust(widths[col]))
        return "| " + " | ".join(cells) + " |"

    separator = "|-" + "-|-".join("-" * widths[col] for col in TABLE_COLUMNS) + "-|"
    lines = [_line({col: col for col in TABLE_COLUMNS}), separator]
    lines.extend(_line(row) for row in rows)
    return "\n".join(lines)


def print_score_differences(all_differences: Dict[str, List[UrlScoreDifferences]]):
    """Print one table per URL/device, grouped by region."""
    for region, entries in _regions_with_differences(all_differences).items():
        print(f"\nScore differences for {region}:")
        for entry in entries:
            print(f"URL: {entry.url} on {entry.device}")
            print(format_score_table(entry.differences))
