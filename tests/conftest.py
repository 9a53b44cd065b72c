import pytest


WIKI_PAGE = """
<html><body>
<h2>S&amp;P 500 component stocks</h2>
<table class="wikitable sortable" id="constituents">
<tbody>
<tr><th>Symbol</th><th>Security</th><th>GICS Sector</th></tr>
<tr><td><a href="#">MMM</a></td><td>3M</td><td>Industrials</td></tr>
<tr><td><a href="#">BRK.B</a></td><td>Berkshire Hathaway</td><td>Financials</td></tr>
<tr><td><a href="#">NVDA</a></td><td>Nvidia[4]</td><td>Information Technology</td></tr>
</tbody>
</table>
<h2>Selected changes to the list of S&amp;P 500 components</h2>
<table class="wikitable sortable" id="changes">
<tbody>
<tr><th rowspan="2">Effective Date</th><th colspan="2">Added</th><th colspan="2">Removed</th><th rowspan="2">Reason</th></tr>
<tr><th>Ticker</th><th>Security</th><th>Ticker</th><th>Security</th></tr>
<tr><td rowspan="2">June 24, 2024</td><td>KKR</td><td>KKR &amp; Co.</td><td>RHI</td><td>Robert Half</td><td>Market capitalization change.[5]</td></tr>
<tr><td>CRWD</td><td>CrowdStrike</td><td>CMA</td><td>Comerica</td><td>Market capitalization change.</td></tr>
<tr><td>December 18, 2023</td><td>BLDR</td><td>Builders FirstSource</td><td></td><td></td><td>S&amp;P 500 constituent expansion.</td></tr>
</tbody>
</table>
</body></html>
"""


@pytest.fixture()
def wiki_page() -> str:
    return WIKI_PAGE
