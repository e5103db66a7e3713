import textwrap
from pathlib import Path

import pytest


def write_post(posts_dir: Path, name: str, frontmatter: str, body: str = "Body text.") -> Path:
    posts_dir.mkdir(parents=True, exist_ok=True)
    path = posts_dir / name
    path.write_text(
        "---\n" + textwrap.dedent(frontmatter).strip() + "\n---\n\n" + body + "\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def site(tmp_path):
    """A small project: config.yml, three posts, one icon."""
    (tmp_path / "config.yml").write_text(
        textwrap.dedent(
            """
            site_title: Test Blog
            site_url: https://blog.example.com/
            socials:
              - name: GitHub
                url: https://github.com/someone
                icon: /icons/github.svg
              - name: Mastodon
                url: https://mastodon.social/@someone
            """
        ),
        encoding="utf-8",
    )
    posts_dir = tmp_path / "src" / "posts"
    write_post(
        posts_dir,
        "airflow-on-gcp.md",
        """
        id: 1
        title: Airflow on GCP
        date: 2023-03-01
        tags: [airflow, gcp]
        """,
        "## Setup\n\n![The web UI](ui.png)\n",
    )
    write_post(
        posts_dir,
        "ci-matrix.md",
        """
        id: 2
        title: CI matrix
        date: 2022-01-05
        tags: [ci, Airflow]
        """,
    )
    write_post(
        posts_dir,
        "wip.md",
        """
        id: 3
        title: Work in progress
        date: 2023-06-01
        draft: true
        """,
    )
    icons = tmp_path / "public" / "icons"
    icons.mkdir(parents=True)
    (icons / "github.svg").write_text("<svg></svg>", encoding="utf-8")
    return tmp_path


@pytest.fixture
def cfg():
    from postroll.config import normalize_theme

    return {
        "site_title": "Test Blog",
        "site_tagline": "",
        "site_url": "",
        "base_path": "/",
        "post_route": "posts",
        "date_format": "%B %d, %Y",
        "extra_head": [],
        "extra_footer": [],
        "socials": [],
        "theme": normalize_theme(None),
        "plugins": ["typography"],
        "content": None,
        "feed": True,
    }
