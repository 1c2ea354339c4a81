"""
Tests for the BDNS listing parser and ingestion.
"""

import asyncio
from datetime import datetime

import pytest
from aiohttp import web

from grantmatch import storage
from grantmatch.models import Grant
from grantmatch.parsers import bdns

LISTING_HTML = """
<html><body>
<table class="resultados">
  <tr>
    <th>Código BDNS</th><th>Órgano convocante</th><th>Título</th>
    <th>Fecha de registro</th><th>Importe total</th><th>Fecha fin</th>
  </tr>
  <tr>
    <td>712345</td><td>Red.es</td><td>Bono conectividad digital</td>
    <td>01/02/2024</td><td>1.234.567,89 €</td><td>31/12/2025</td>
  </tr>
  <tr>
    <td>712346</td><td>CDTI</td><td>Misiones Ciencia e Innovación</td>
    <td>05/02/2024</td><td>-</td><td></td>
  </tr>
  <tr>
    <td></td><td>Nadie</td><td>Fila sin identificador</td>
    <td></td><td></td><td></td>
  </tr>
</table>
</body></html>
"""


def test_parse_listing_with_header():
    rows = bdns.parse_convocatorias(LISTING_HTML)
    assert len(rows) == 2

    first = rows[0]
    assert first["bdns_id"] == "712345"
    assert first["organismo"] == "Red.es"
    assert first["titulo"] == "Bono conectividad digital"
    assert first["importe"] == 1234567.89
    assert first["fecha_fin"] == datetime(2025, 12, 31)
    # no description column: title doubles as body text
    assert first["descripcion"] == "Bono conectividad digital"

    second = rows[1]
    assert second["importe"] is None
    assert second["fecha_fin"] is None


def test_parse_listing_without_header_uses_default_columns():
    html = """
    <table>
      <tr><td>800001</td><td>Ayudas PERTE</td><td>Ministerio</td><td>50.000</td><td>2025-03-01</td></tr>
    </table>
    """
    rows = bdns.parse_convocatorias(html)
    assert rows == [{
        "bdns_id": "800001",
        "titulo": "Ayudas PERTE",
        "organismo": "Ministerio",
        "importe": 50000.0,
        "fecha_fin": datetime(2025, 3, 1),
        "descripcion": "Ayudas PERTE",
    }]


def test_parse_page_without_table():
    assert bdns.parse_convocatorias("<html><p>Sin resultados</p></html>") == []


def test_to_grant_defaults():
    grant = bdns.to_grant({
        "bdns_id": "1", "titulo": "T", "organismo": "", "importe": None,
        "fecha_fin": None, "descripcion": "T",
    })
    assert grant["scope"] == "Nacional"
    assert grant["tags"] == []
    assert grant["organismo"] == "Desconocido"


def test_purpose_column_is_not_the_closing_date():
    html = """
    <table>
      <tr><th>Código BDNS</th><th>Título</th><th>Finalidad</th><th>Fecha fin</th></tr>
      <tr><td>900001</td><td>Ayudas I+D</td><td>Investigación</td><td>31/12/2025</td></tr>
    </table>
    """
    rows = bdns.parse_convocatorias(html)
    assert len(rows) == 1
    assert rows[0]["fecha_fin"] == datetime(2025, 12, 31)


@pytest.mark.parametrize("header, column", [
    ("Finalidad", None),
    ("Fecha fin", "fecha_fin"),
    ("Fecha de finalización", "fecha_fin"),
    ("Fin de plazo", "fecha_fin"),
])
def test_column_for_header(header, column):
    assert bdns._column_for_header(header) == column


# ---------------------------------------------------------------------------
# fetch against a local aiohttp server
# ---------------------------------------------------------------------------

@pytest.fixture
async def listing_server():
    async def ok(request):
        return web.Response(text=LISTING_HTML, content_type="text/html")

    async def unavailable(request):
        return web.Response(status=503)

    async def slow(request):
        await asyncio.sleep(3)
        return web.Response(text=LISTING_HTML, content_type="text/html")

    app = web.Application()
    app.router.add_get("/ok", ok)
    app.router.add_get("/unavailable", unavailable)
    app.router.add_get("/slow", slow)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    port = runner.addresses[0][1]
    yield f"http://127.0.0.1:{port}"
    await runner.cleanup()


async def test_fetch_returns_listing_html(listing_server):
    html = await bdns.fetch_convocatorias(f"{listing_server}/ok", timeout=5)
    assert len(bdns.parse_convocatorias(html)) == 2


async def test_fetch_non_200_raises(listing_server):
    with pytest.raises(bdns.BDNSError, match="503"):
        await bdns.fetch_convocatorias(f"{listing_server}/unavailable", timeout=5)


async def test_fetch_timeout_raises(listing_server):
    with pytest.raises(bdns.BDNSError, match="timed out"):
        await bdns.fetch_convocatorias(f"{listing_server}/slow", timeout=1)


async def test_fetch_connection_error_raises():
    # nothing listens on port 9 (discard) locally
    with pytest.raises(bdns.BDNSError):
        await bdns.fetch_convocatorias("http://127.0.0.1:9/", timeout=5)


async def test_ingest_upserts_by_bdns_id(session, monkeypatch):
    async def fake_fetch(url=None, timeout=None):
        return LISTING_HTML

    monkeypatch.setattr(bdns, "fetch_convocatorias", fake_fetch)

    assert await bdns.ingest_bdns(session) == (2, 2)
    assert await bdns.ingest_bdns(session) == (2, 2)
    assert await storage.count_rows(session, Grant) == 2

    grants = {g.bdns_id: g for g in await storage.list_grants(session)}
    assert grants["712345"].budget == 1234567.89
    assert grants["712345"].scope == "Nacional"


async def test_admin_ingest_maps_errors_to_502(client, monkeypatch):
    async def failing_fetch(url=None, timeout=None):
        raise bdns.BDNSError("BDNS returned HTTP 503")

    monkeypatch.setattr(bdns, "fetch_convocatorias", failing_fetch)
    resp = await client.post("/admin/ingest/bdns")
    assert resp.status_code == 502
    assert "503" in resp.json()["detail"]


async def test_admin_ingest(client, monkeypatch):
    async def fake_fetch(url=None, timeout=None):
        return LISTING_HTML

    monkeypatch.setattr(bdns, "fetch_convocatorias", fake_fetch)
    resp = await client.post("/admin/ingest/bdns")
    assert resp.status_code == 200
    assert resp.json() == {"source": "bdns", "fetched": 2, "upserted": 2}
