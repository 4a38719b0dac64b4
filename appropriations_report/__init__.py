"""Top-level package for the appropriations report.

The report loads a spreadsheet of line-item appropriations, converts
amounts such as ``"$13.6 billion"`` into whole dollars, totals them by
title and renders charts and tables.  The primary modules are:

* ``amounts`` – parsing and formatting of free-text dollar amounts
* ``data_processing`` – reading, cleaning and aggregating the spreadsheet
* ``visualization`` – Plotly figures and styled tables
* ``report_html`` – the standalone HTML document
* ``report`` – a Streamlit page that ties everything together

To run the page from the command line you can execute:

```bash
streamlit run appropriations_report/report.py
```
"""

from . import amounts  # noqa: F401  # re-exported for convenience
from . import data_processing  # noqa: F401  # re-exported for convenience
from . import visualization  # noqa: F401  # re-exported for convenience
from . import report_html  # noqa: F401  # re-exported for convenience
from .amounts import InvalidAmountFormat, ScaleUnit, format_amount, parse_amount, try_parse_amount
from .data_processing import MissingColumnsError, MissingInputFile, aggregate_by_title, load_appropriations

# Streamlit may not be installed in all environments (e.g. during unit
# testing).  If the import fails, ``report`` is ``None``.
try:
    from . import report  # type: ignore  # noqa: F401
except ModuleNotFoundError:
    report = None  # type: ignore


__all__ = [
    "amounts",
    "data_processing",
    "visualization",
    "report_html",
    "report",
    "InvalidAmountFormat",
    "ScaleUnit",
    "format_amount",
    "parse_amount",
    "try_parse_amount",
    "MissingColumnsError",
    "MissingInputFile",
    "aggregate_by_title",
    "load_appropriations",
]
