import pytest
from bs4 import BeautifulSoup

from postroll.build import build_site, clean_output_dir, main

from conftest import write_post


def read_soup(path):
    return BeautifulSoup(path.read_text(encoding="utf-8"), "html.parser")


def test_build_writes_site(site, capsys):
    out = build_site(site / "config.yml")

    assert out == (site / "_site").resolve()
    for rel in (
        "index.html",
        "posts/airflow-on-gcp/index.html",
        "posts/ci-matrix/index.html",
        "tags/index.html",
        "tags/airflow/index.html",
        "tags/gcp/index.html",
        "404.html",
        "rss.xml",
        "style.css",
        "icons/github.svg",
    ):
        assert (out / rel).is_file(), rel

    # drafts are not published
    assert not (out / "posts" / "wip").exists()
    assert "Wrote" in capsys.readouterr().out


def test_index_lists_posts_by_descending_id(site):
    out = build_site(site / "config.yml")
    soup = read_soup(out / "index.html")

    links = soup.select("ul.post-list a")
    # id 2 has the older date but is listed first
    assert [a.get_text() for a in links] == ["CI matrix", "Airflow on GCP"]
    assert [a["href"] for a in links] == ["/posts/ci-matrix/", "/posts/airflow-on-gcp/"]
    assert [t.get_text() for t in soup.select("ul.post-list time")] == [
        "January 5, 2022",
        "March 1, 2023",
    ]
    assert [a["href"] for a in soup.select("ul.socials a")] == [
        "https://github.com/someone",
        "https://mastodon.social/@someone",
    ]


def test_tag_page_collects_case_variants(site):
    out = build_site(site / "config.yml")
    soup = read_soup(out / "tags" / "airflow" / "index.html")

    assert [a.get_text() for a in soup.select("ul.post-list a")] == ["CI matrix", "Airflow on GCP"]


def test_post_page_wraps_images(site):
    out = build_site(site / "config.yml")
    soup = read_soup(out / "posts" / "airflow-on-gcp" / "index.html")

    assert soup.select_one("article.prose figure figcaption").get_text() == "The web UI"


def test_stylesheet_matches_pages(site):
    out = build_site(site / "config.yml")
    css = (out / "style.css").read_text(encoding="utf-8")

    assert ".font-handwriting {" in css
    assert '"Dancing Script"' in css
    assert ".prose :where(p)" in css
    assert ".w-6 {" in css
    assert ".max-w-3xl" not in css


def test_rebuild_removes_stale_pages(site):
    out = build_site(site / "config.yml")
    (site / "src" / "posts" / "ci-matrix.md").unlink()

    build_site(site / "config.yml")

    assert not (out / "posts" / "ci-matrix").exists()


def test_clean_refuses_to_remove_project(tmp_path, capsys):
    (tmp_path / "keep.txt").write_text("x", encoding="utf-8")

    clean_output_dir(tmp_path, tmp_path, tmp_path / "src" / "posts")

    assert (tmp_path / "keep.txt").exists()
    assert "not cleaning" in capsys.readouterr().err


def test_empty_site_still_builds(tmp_path, capsys):
    (tmp_path / "config.yml").write_text("site_title: Empty\n", encoding="utf-8")

    out = build_site(tmp_path / "config.yml")

    assert "No posts yet" in (out / "index.html").read_text(encoding="utf-8")
    assert "no posts found" in capsys.readouterr().err


def test_main_exits_on_bad_post(site, capsys):
    write_post(site / "src" / "posts", "dup.md", "id: 1\ntitle: Dup\ndate: 2023-01-01")

    with pytest.raises(SystemExit) as exc:
        main([str(site / "config.yml")])

    assert exc.value.code == 1
    assert "duplicate id 1" in capsys.readouterr().err


def test_main_builds_from_argv(site):
    main([str(site / "config.yml")])
    assert (site / "_site" / "index.html").is_file()


def test_build_with_blank_tagline(site):
    (site / "config.yml").write_text("site_title: Blog\nsite_tagline:\n", encoding="utf-8")

    out = build_site(site / "config.yml")

    soup = read_soup(out / "index.html")
    assert soup.select_one("h1.site-title").get_text() == "Blog"
    assert soup.select_one(".site-tagline") is None


def test_static_dir_used_as_output_is_kept(site, capsys):
    (site / "public" / "logo.svg").write_text("<svg></svg>", encoding="utf-8")
    (site / "config.yml").write_text("output_dir: public\nstatic_dir: public\n", encoding="utf-8")

    out = build_site(site / "config.yml")

    assert out == (site / "public").resolve()
    assert (site / "public" / "logo.svg").exists()
    assert (site / "public" / "icons" / "github.svg").exists()
    assert (out / "index.html").is_file()
    assert "not cleaning" in capsys.readouterr().err


def test_clean_refuses_when_output_holds_static_dir(tmp_path, capsys):
    out = tmp_path / "dist"
    static = out / "assets"
    static.mkdir(parents=True)
    (static / "logo.svg").write_text("<svg></svg>", encoding="utf-8")

    clean_output_dir(out, tmp_path / "project", tmp_path / "posts", static)

    assert (static / "logo.svg").exists()
    assert "not cleaning" in capsys.readouterr().err


def test_clean_refuses_when_output_holds_posts(tmp_path, capsys):
    out = tmp_path / "dist"
    posts_dir = out / "posts"
    write_post(posts_dir, "a.md", "id: 1\ntitle: A\ndate: 2023-01-01")

    clean_output_dir(out, tmp_path / "project", posts_dir)

    assert (posts_dir / "a.md").exists()
    assert "not cleaning" in capsys.readouterr().err


def test_clean_removes_previous_build(tmp_path):
    out = tmp_path / "_site"
    (out / "old").mkdir(parents=True)

    clean_output_dir(out, tmp_path, tmp_path / "src" / "posts", tmp_path / "public")

    assert not out.exists()
