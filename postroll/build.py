#!/usr/bin/env python3
import shutil
import sys
from pathlib import Path

from .config import get_config_path_from_args, load_config, resolve_paths
from .feed import generate_rss
from .posts import PostError, build_tag_index, load_posts, sort_posts
from .render import (
    render_index_page,
    render_not_found_page,
    render_post_page,
    render_tag_page,
    render_tags_index_page,
)
from .styles import write_stylesheet


# -----------------------
# Output helpers
# -----------------------

def write_page(path: Path, html_page: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html_page, encoding="utf-8")
    print(f"Wrote {path}")


def clean_output_dir(output_dir: Path, project_root: Path, content_root: Path, static_dir: Path = None):
    """
    Remove a previous build. Refuses when output_dir holds the project,
    the posts or the static files.
    """
    if not output_dir.exists():
        return
    protected_dirs = [project_root, content_root]
    if static_dir is not None and static_dir.exists():
        protected_dirs.append(static_dir)
    for protected in protected_dirs:
        if protected == output_dir or output_dir in protected.parents:
            print(
                f"WARNING: not cleaning {output_dir}: it contains {protected}",
                file=sys.stderr,
            )
            return
    shutil.rmtree(output_dir)
    print(f"Cleaned {output_dir}")


def copy_static(static_dir: Path, output_dir: Path):
    """Copy the static directory (icons, fonts, favicon...) into the output root."""
    if not static_dir.is_dir():
        return
    if static_dir == output_dir:
        return
    if static_dir in output_dir.parents:
        print(
            f"WARNING: not copying {static_dir}: it contains the output dir {output_dir}",
            file=sys.stderr,
        )
        return
    shutil.copytree(static_dir, output_dir, dirs_exist_ok=True)
    print(f"Copied static files from {static_dir} to {output_dir}")


def build_post_pages(posts: list, cfg: dict, output_dir: Path):
    route_dir = output_dir / cfg["post_route"]
    for p in posts:
        write_page(route_dir / p["slug"] / "index.html", render_post_page(p, cfg))


def build_tag_pages(tag_index: dict, cfg: dict, output_dir: Path):
    tag_dir = output_dir / "tags"
    for slug, data in tag_index.items():
        write_page(tag_dir / slug / "index.html", render_tag_page(data["name"], data["posts"], cfg))
    write_page(tag_dir / "index.html", render_tags_index_page(tag_index, cfg))


# -----------------------
# main()
# -----------------------

def build_site(config_path: Path) -> Path:
    """Build the whole site described by config_path; returns the output dir."""
    # 1. Load config, resolve paths relative to the config file
    project_root = config_path.resolve().parent
    cfg = load_config(config_path)
    paths = resolve_paths(cfg, project_root)
    content_root = paths["content_root"]
    output_dir = paths["output_dir"]

    # 2. Collect posts, newest-authored first
    posts = sort_posts(
        load_posts(
            content_root,
            pattern=cfg["posts_glob"],
            include_drafts=cfg["include_drafts"],
        )
    )
    if not posts:
        print("WARNING: no posts found.", file=sys.stderr)

    tag_index = build_tag_index(posts)

    # 3. Fresh output dir + static assets
    if cfg["clean_output"]:
        clean_output_dir(output_dir, project_root, content_root, paths["static_dir"])
    output_dir.mkdir(parents=True, exist_ok=True)
    copy_static(paths["static_dir"], output_dir)

    # 4. Pages
    write_page(output_dir / "index.html", render_index_page(posts, cfg))
    build_post_pages(posts, cfg, output_dir)
    build_tag_pages(tag_index, cfg, output_dir)
    write_page(output_dir / "404.html", render_not_found_page(cfg))

    # 5. Feed
    if cfg["feed"]:
        generate_rss(posts, cfg, output_dir)

    # 6. Stylesheet last, so every page is scanned for classes
    write_stylesheet(cfg, project_root, output_dir)

    return output_dir


def main(argv=None):
    config_path = get_config_path_from_args(argv)
    try:
        build_site(config_path)
    except PostError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
