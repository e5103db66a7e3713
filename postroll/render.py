import html
from datetime import date

import markdown       # pip install markdown
from bs4 import BeautifulSoup  # pip install beautifulsoup4

from .posts import slugify

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "toc", "sane_lists"]


# -----------------------
# Markdown / small helpers
# -----------------------

def wrap_images_with_figures(html_fragment: str) -> str:
    """
    Wrap <img> tags in <figure> with <figcaption> using the alt text.
    This exposes the Markdown alt text as a visible caption.
    """
    soup = BeautifulSoup(html_fragment, "html.parser")

    for img in soup.find_all("img"):
        alt = img.get("alt", "").strip()

        # Skip if already inside a figure
        if img.find_parent("figure"):
            continue

        # A lone image in a paragraph replaces the paragraph
        parent = img.parent
        target = img
        if parent is not None and parent.name == "p" and len(parent.contents) == 1:
            target = parent

        figure = soup.new_tag("figure")
        figure["class"] = "post-figure"

        target.replace_with(figure)
        figure.append(img.extract())

        if alt:
            caption = soup.new_tag("figcaption")
            caption.string = alt
            figure.append(caption)

    return str(soup)


def markdown_to_html(md: str) -> str:
    raw_html = markdown.markdown(md, extensions=MARKDOWN_EXTENSIONS)
    return wrap_images_with_figures(raw_html)


def format_date(d: date, fmt: str = "%B %d, %Y") -> str:
    """'%B %d, %Y' -> 'January 5, 2023' (no zero-padded day)."""
    return d.strftime(fmt.replace("%d", str(d.day)))


def site_path(cfg: dict, path: str = "") -> str:
    return cfg["base_path"] + path.lstrip("/")


def post_url(cfg: dict, post: dict) -> str:
    return site_path(cfg, f"{cfg['post_route']}/{post['slug']}/")


def tag_url(cfg: dict, slug: str) -> str:
    return site_path(cfg, f"tags/{slug}/")


def build_common_head_and_footer(cfg: dict):
    """Return extra_head_html, extra_footer_html strings."""
    extra_head_items = cfg.get("extra_head") or []
    extra_head_html = ""
    if extra_head_items:
        extra_head_html = "\n  " + "\n  ".join(extra_head_items)

    extra_footer_items = cfg.get("extra_footer") or []
    extra_footer_html = ""
    if extra_footer_items:
        extra_footer_html = "\n    " + "\n    ".join(extra_footer_items)

    return extra_head_html, extra_footer_html


# -----------------------
# Fragments
# -----------------------

def render_post_list(posts: list, cfg: dict) -> str:
    """<ul> of post titles linking to their routes, with readable dates."""
    if not posts:
        return '<p class="text-gray-500">No posts yet.</p>'

    items = []
    for p in posts:
        title = html.escape(p["title"])
        iso = p["date"].isoformat()
        label = html.escape(format_date(p["date"], cfg["date_format"]))
        items.append(
            f'<li class="py-2">'
            f'<a href="{post_url(cfg, p)}" class="text-lg hover:underline">{title}</a> '
            f'<time datetime="{iso}" class="text-sm text-gray-500">{label}</time>'
            f"</li>"
        )
    return '<ul class="post-list list-none">\n        ' + "\n        ".join(items) + "\n      </ul>"


def render_socials(socials: list) -> str:
    """Static list of social links; icon image when one is configured."""
    if not socials:
        return ""

    items = []
    for s in socials:
        name = html.escape(s["name"])
        url = html.escape(s["url"], quote=True)
        if s.get("icon"):
            icon = html.escape(s["icon"], quote=True)
            inner = f'<img src="{icon}" alt="{name}" class="w-6 h-6">'
        else:
            inner = name
        items.append(
            f'<li><a href="{url}" title="{name}" rel="me noopener">{inner}</a></li>'
        )
    return '<ul class="socials flex gap-4 list-none">\n        ' + "\n        ".join(items) + "\n      </ul>"


def render_tag_links(tags: list, cfg: dict) -> str:
    if not tags:
        return ""
    pills = []
    for tag in tags:
        label = html.escape(tag)
        pills.append(
            f'<li><a href="{tag_url(cfg, slugify(tag, fallback="tag"))}" class="post-tag text-sm hover:underline">#{label}</a></li>'
        )
    return f'<ul class="post-tags flex gap-4 list-none">{"".join(pills)}</ul>'


# -----------------------
# Pages
# -----------------------

def render_page(cfg: dict, *, page_title: str, body_html: str) -> str:
    """Wrap body_html in the shared document shell."""
    site_title = html.escape(cfg["site_title"])
    site_tagline = html.escape(cfg["site_tagline"])
    extra_head_html, extra_footer_html = build_common_head_and_footer(cfg)

    feed_link = ""
    if cfg.get("feed", True):
        feed_link = (
            f'\n  <link rel="alternate" type="application/rss+xml" '
            f'title="{site_title} – RSS" href="{site_path(cfg, "rss.xml")}">'
        )

    tagline_html = ""
    if site_tagline:
        tagline_html = f'\n    <p class="site-tagline text-gray-500">{site_tagline}</p>'

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{html.escape(page_title)}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link rel="stylesheet" href="{site_path(cfg, "style.css")}">{feed_link}{extra_head_html}
</head>
<body>
<div class="max-w-2xl mx-auto px-4 py-8">
  <header class="site-header mb-8">
    <h1 class="site-title font-handwriting text-4xl"><a href="{site_path(cfg)}">{site_title}</a></h1>{tagline_html}
  </header>

  <main class="content">
{body_html}
  </main>

  <footer class="site-footer mt-8 text-sm text-gray-500">
    <a href="{site_path(cfg, "tags/")}" class="hover:underline">Tags</a>{extra_footer_html}
  </footer>
</div>
</body>
</html>
"""


def render_index_page(posts: list, cfg: dict) -> str:
    body = f"""    <section class="posts mb-8">
      <h2 class="text-2xl mb-4">Posts</h2>
      {render_post_list(posts, cfg)}
    </section>

    <section class="socials-section">
      {render_socials(cfg.get("socials") or [])}
    </section>"""
    return render_page(cfg, page_title=cfg["site_title"], body_html=body)


def render_post_page(post: dict, cfg: dict) -> str:
    title = html.escape(post["title"])
    iso = post["date"].isoformat()
    label = html.escape(format_date(post["date"], cfg["date_format"]))
    content_html = markdown_to_html(post["content_md"])

    body = f"""    <article id="post-{post['id']}" class="prose">
      <header class="post-header">
        <h1>{title}</h1>
        <p class="text-sm text-gray-500"><time datetime="{iso}">{label}</time></p>
        {render_tag_links(post["tags"], cfg)}
      </header>
      {content_html}
    </article>"""
    return render_page(cfg, page_title=f"{post['title']} – {cfg['site_title']}", body_html=body)


def render_tag_page(tag_name: str, posts: list, cfg: dict) -> str:
    body = f"""    <section class="posts">
      <h2 class="text-2xl mb-4">Tagged #{html.escape(tag_name)}</h2>
      {render_post_list(posts, cfg)}
    </section>"""
    return render_page(cfg, page_title=f"#{tag_name} – {cfg['site_title']}", body_html=body)


def render_tags_index_page(tag_index: dict, cfg: dict) -> str:
    if tag_index:
        items = []
        for slug, data in sorted(tag_index.items(), key=lambda kv: kv[1]["name"].lower()):
            name = html.escape(data["name"])
            count = len(data["posts"])
            items.append(
                f'<li class="py-2"><a href="{tag_url(cfg, slug)}" class="hover:underline">#{name}</a> '
                f'<span class="text-sm text-gray-500">({count})</span></li>'
            )
        listing = '<ul class="tag-list list-none">\n        ' + "\n        ".join(items) + "\n      </ul>"
    else:
        listing = '<p class="text-gray-500">No tags yet.</p>'

    body = f"""    <section class="tags">
      <h2 class="text-2xl mb-4">Tags</h2>
      {listing}
    </section>"""
    return render_page(cfg, page_title=f"Tags – {cfg['site_title']}", body_html=body)


def render_not_found_page(cfg: dict) -> str:
    body = f"""    <section class="not-found">
      <h2 class="text-2xl mb-4">Page not found</h2>
      <p><a href="{site_path(cfg)}" class="hover:underline">Back to all posts</a></p>
    </section>"""
    return render_page(cfg, page_title=f"Not found – {cfg['site_title']}", body_html=body)
