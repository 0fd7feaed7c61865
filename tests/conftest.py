from __future__ import annotations

import io

import pandas as pd
import pytest


def workbook_bytes(sheets: dict[str, list[dict]]) -> bytes:
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as xw:
        for name, rows in sheets.items():
            pd.DataFrame(rows).to_excel(xw, sheet_name=name, index=False)
    return buf.getvalue()


@pytest.fixture
def make_workbook():
    return workbook_bytes


MEDAL_PAGE = """
<html><body>
<table class="wikitable sortable">
  <tr><th>Rank</th><th>NOC</th><th>Gold</th><th>Silver</th><th>Bronze</th><th>Total</th></tr>
  <tr><td>1</td><th scope="row"><a href="/wiki/Norway">Norway</a></th><td>12</td><td>7</td><td>7</td><td>26</td></tr>
  <tr><td rowspan="2">2</td><th scope="row"><a href="/wiki/Italy">Italy</a>*</th><td>5</td><td>5</td><td>4</td><td>14</td></tr>
  <tr><th scope="row">United States[a]</th><td>5</td><td>5</td><td>4</td><td>14</td></tr>
  <tr><td>4</td><th scope="row">People's&nbsp;Republic of China</th><td>1</td><td>2</td><td>0</td><td>3</td></tr>
  <tr><th colspan="2">Totals (4 entries)</th><th>23</th><th>19</th><th>15</th><th>57</th></tr>
</table>
</body></html>
"""


@pytest.fixture
def medal_page() -> str:
    return MEDAL_PAGE
