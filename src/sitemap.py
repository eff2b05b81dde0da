"""
sitemap.xml / robots.txt generation.

Up to `chunk` URLs go into a single /sitemap.xml <urlset>.  Past that the
URLs are split into /sitemap-1.xml, /sitemap-2.xml, ... and /sitemap.xml
becomes a <sitemapindex> pointing at each chunk.
"""
from __future__ import annotations

from lxml import etree

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
SITEMAP_FILE = "sitemap.xml"


def _q(tag: str) -> str:
    return f"{{{SITEMAP_NS}}}{tag}"


def chunk_urls(urls: list[str], chunk: int) -> list[list[str]]:
    """Split urls into consecutive groups of at most `chunk`."""
    if chunk < 1:
        raise ValueError(f"chunk must be >= 1, got {chunk}")
    return [urls[i:i + chunk] for i in range(0, len(urls), chunk)]


def _serialize(root: etree._Element) -> str:
    return etree.tostring(
        root, xml_declaration=True, encoding="UTF-8", pretty_print=True
    ).decode("utf-8")


def render_urlset(urls: list[str]) -> str:
    root = etree.Element(_q("urlset"), nsmap={None: SITEMAP_NS})
    for u in urls:
        url_el = etree.SubElement(root, _q("url"))
        etree.SubElement(url_el, _q("loc")).text = u
    return _serialize(root)


def render_sitemap_index(locs: list[str]) -> str:
    root = etree.Element(_q("sitemapindex"), nsmap={None: SITEMAP_NS})
    for loc in locs:
        sm = etree.SubElement(root, _q("sitemap"))
        etree.SubElement(sm, _q("loc")).text = loc
    return _serialize(root)


def chunk_filename(n: int) -> str:
    return f"sitemap-{n}.xml"


def build_sitemaps(urls: list[str], site_base_url: str, chunk: int) -> dict[str, str]:
    """Return {relative file name: xml} for every sitemap file to write."""
    if len(urls) <= chunk:
        return {SITEMAP_FILE: render_urlset(urls)}

    files: dict[str, str] = {}
    locs: list[str] = []
    for n, group in enumerate(chunk_urls(urls, chunk), 1):
        fname = chunk_filename(n)
        files[fname] = render_urlset(group)
        locs.append(f"{site_base_url}/{fname}")
    files[SITEMAP_FILE] = render_sitemap_index(locs)
    return files


def render_robots(site_base_url: str) -> str:
    return (
        "User-agent: *\n"
        "Allow: /\n"
        f"Sitemap: {site_base_url}/{SITEMAP_FILE}\n"
    )
