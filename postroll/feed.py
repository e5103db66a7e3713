import html
import time
from datetime import datetime, time as dtime, timezone
from email.utils import formatdate
from pathlib import Path

from .render import markdown_to_html, post_url, site_path

RSS_FILENAME = "rss.xml"


def absolute_url(cfg: dict, path: str) -> str:
    site_url = (cfg.get("site_url") or "").rstrip("/")
    if site_url:
        return f"{site_url}{path}"
    return path


def generate_rss(posts: list, cfg: dict, output_dir: Path) -> Path:
    """
    Generate an RSS 2.0 feed of the given (already sorted) posts and
    write rss.xml. description contains rendered HTML wrapped in CDATA.
    """
    site_title = html.escape(cfg["site_title"])
    site_tagline = html.escape(cfg.get("site_tagline", ""))
    channel_link = html.escape(absolute_url(cfg, site_path(cfg)))

    now = formatdate(time.time())

    items_xml = []

    for p in posts:
        link = html.escape(absolute_url(cfg, post_url(cfg, p)))
        pub = datetime.combine(p["date"], dtime(0, 0), tzinfo=timezone.utc)

        post_html = markdown_to_html(p["content_md"])
        # "]]>" would end the CDATA section early
        description_cdata = "<![CDATA[" + post_html.replace("]]>", "]]]]><![CDATA[>") + "]]>"

        categories = "".join(
            f"\n    <category>{html.escape(t)}</category>" for t in p.get("tags") or []
        )

        items_xml.append(f"""  <item>
    <title>{html.escape(p["title"])}</title>
    <link>{link}</link>
    <guid>{link}</guid>
    <pubDate>{formatdate(pub.timestamp())}</pubDate>{categories}
    <description>{description_cdata}</description>
  </item>""")

    rss_xml = f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
<channel>
  <title>{site_title}</title>
  <link>{channel_link}</link>
  <description>{site_tagline}</description>
  <lastBuildDate>{now}</lastBuildDate>
{chr(10).join(items_xml)}
</channel>
</rss>
"""

    rss_path = output_dir / RSS_FILENAME
    rss_path.write_text(rss_xml, encoding="utf-8")
    print(f"Wrote {rss_path}")
    return rss_path
