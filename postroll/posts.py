import re
import sys
from pathlib import Path
from datetime import datetime, date

import yaml           # pip install pyyaml

REQUIRED_FIELDS = ("id", "title", "date")
KNOWN_FIELDS = ("id", "title", "date", "tags", "draft", "description")

DATE_FORMATS = ("%B %d, %Y", "%b %d, %Y", "%Y/%m/%d")


class PostError(ValueError):
    """A post file is missing frontmatter or has an invalid field."""


def slugify(text: str, fallback: str = "post") -> str:
    """
    Convert a name like 'Hosting Airflow_on GCP' into 'hosting-airflow-on-gcp'.
    """
    s = text.strip().lower()
    s = re.sub(r"[\s_]+", "-", s)
    s = re.sub(r"[^a-z0-9-]", "", s)
    s = re.sub(r"-{2,}", "-", s).strip("-")
    return s or fallback


def _norm_text(s: str) -> str:
    return s.replace("\r\n", "\n").replace("\r", "\n").lstrip("\ufeff")


def parse_frontmatter(text: str):
    """
    Split a leading '---' YAML block from the markdown body.

    Returns (frontmatter_dict, body). Without a frontmatter block the
    result is (None, text).
    """
    text = _norm_text(text)
    if not text.startswith("---\n"):
        return None, text

    lines = text.split("\n")
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            fm_text = "\n".join(lines[1:i])
            body = "\n".join(lines[i + 1:])
            fm = yaml.safe_load(fm_text) or {}
            return fm, body
    return None, text


def coerce_id(value) -> int:
    # bool is an int subclass; "id: true" is a typo, not an id
    if isinstance(value, bool):
        raise ValueError(f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and re.fullmatch(r"\s*-?\d+\s*", value):
        return int(value)
    raise ValueError(f"expected an integer, got {value!r}")


def coerce_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        s = value.strip().strip('"').strip("'")
        if s.endswith("Z"):
            # "2023-01-05Z" has no time part to carry an offset
            s = s[:-1] + ("+00:00" if "T" in s or " " in s else "")
        try:
            return datetime.fromisoformat(s).date()
        except ValueError:
            pass
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(s, fmt).date()
            except ValueError:
                continue
    raise ValueError(f"unrecognised date {value!r}")


def coerce_tags(value) -> list:
    """
    tags: [a, b]  or  tags: a, b  -> ["a", "b"]

    Blank and repeated tags (case-insensitive) are dropped.
    """
    if value is None:
        return []
    if isinstance(value, str):
        raw = value.split(",")
    elif isinstance(value, (list, tuple)):
        raw = value
    else:
        raise ValueError(f"expected a list of tags, got {value!r}")

    tags = []
    seen = set()
    for t in raw:
        if t is None:
            continue
        name = str(t).strip()
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        tags.append(name)
    return tags


def _coerce_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1", "y", "on")
    return bool(value)


def load_post(path: Path) -> dict:
    """Read one markdown file and validate its frontmatter."""
    try:
        fm, body = parse_frontmatter(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise PostError(f"{path}: frontmatter is not valid YAML: {exc}") from exc
    if fm is None:
        raise PostError(f"{path}: missing frontmatter block")
    if not isinstance(fm, dict):
        raise PostError(f"{path}: frontmatter must be a mapping")

    for field in REQUIRED_FIELDS:
        if fm.get(field) in (None, ""):
            raise PostError(f"{path}: missing required field '{field}'")

    try:
        post_id = coerce_id(fm["id"])
    except ValueError as exc:
        raise PostError(f"{path}: invalid 'id': {exc}") from exc
    try:
        post_date = coerce_date(fm["date"])
    except ValueError as exc:
        raise PostError(f"{path}: invalid 'date': {exc}") from exc
    try:
        tags = coerce_tags(fm.get("tags"))
    except ValueError as exc:
        raise PostError(f"{path}: invalid 'tags': {exc}") from exc

    if not isinstance(fm["title"], (str, int, float)):
        raise PostError(f"{path}: invalid 'title': expected text")

    return {
        "id": post_id,
        "title": str(fm["title"]).strip(),
        "date": post_date,
        "tags": tags,
        "draft": _coerce_bool(fm.get("draft", False)),
        "description": str(fm.get("description") or "").strip(),
        "content_md": body.strip(),
        "slug": slugify(path.stem),
        "source_file": path,
        "extra": {k: v for k, v in fm.items() if k not in KNOWN_FIELDS},
    }


def load_posts(content_root: Path, pattern: str = "*.md", include_drafts: bool = False) -> list:
    """
    Load every file under content_root matching pattern.

    Files are read in sorted path order. Raises PostError on duplicate
    ids or slugs.
    """
    if not content_root.is_dir():
        print(f"WARNING: posts directory not found at {content_root}", file=sys.stderr)
        return []

    posts = []
    ids = {}
    slugs = {}

    for md_file in sorted(content_root.glob(pattern)):
        if not md_file.is_file():
            continue
        post = load_post(md_file)
        if post["draft"] and not include_drafts:
            continue

        if post["id"] in ids:
            raise PostError(
                f"{md_file}: duplicate id {post['id']} (also used by {ids[post['id']]})"
            )
        if post["slug"] in slugs:
            raise PostError(
                f"{md_file}: duplicate slug '{post['slug']}' (also used by {slugs[post['slug']]})"
            )
        ids[post["id"]] = md_file
        slugs[post["slug"]] = md_file
        posts.append(post)

    return posts


def sort_posts(posts: list) -> list:
    """Newest-authored first: descending id, stable for equal ids."""
    return sorted(posts, key=lambda p: p["id"], reverse=True)


def build_tag_index(posts: list) -> dict:
    """
    Build a tag index:

      {
        "airflow": { "name": "Airflow", "posts": [post, ...] },
        ...
      }

    Keys are slugs; "name" is the first-seen display name. Posts keep
    the order they were passed in.
    """
    tag_map = {}

    for p in posts:
        for tag in p.get("tags") or []:
            slug = slugify(tag, fallback="tag")
            if slug not in tag_map:
                tag_map[slug] = {"name": tag, "posts": []}
            tagged = tag_map[slug]["posts"]
            # "CI CD" and "ci-cd" on one post share a slug
            if not tagged or tagged[-1] is not p:
                tagged.append(p)

    return tag_map
