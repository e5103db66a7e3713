import textwrap

import pytest

from postroll.config import get_config_path_from_args, load_config, resolve_paths


def write_config(tmp_path, text):
    path = tmp_path / "config.yml"
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return path


def test_defaults_for_empty_config(tmp_path):
    cfg = load_config(write_config(tmp_path, ""))

    assert cfg["site_title"] == "Blog"
    assert cfg["content_root"] == "src/posts"
    assert cfg["posts_glob"] == "*.md"
    assert cfg["output_dir"] == "_site"
    assert cfg["base_path"] == "/"
    assert cfg["plugins"] == ["typography"]
    assert cfg["content"] is None
    assert cfg["theme"]["extend"]["fontFamily"] == {
        "handwriting": ["Dancing Script", "Allison", "cursive"]
    }


def test_extra_head_accepts_string_or_list(tmp_path):
    cfg = load_config(
        write_config(
            tmp_path,
            """
            extra_head: '<meta name="x">'
            extra_footer: [a, b]
            """,
        )
    )
    assert cfg["extra_head"] == ['<meta name="x">']
    assert cfg["extra_footer"] == ["a", "b"]


def test_socials_without_url_are_skipped(tmp_path, capsys):
    cfg = load_config(
        write_config(
            tmp_path,
            """
            socials:
              - name: GitHub
                url: https://github.com/x
                icon: /icons/github.svg
              - name: Broken
            """,
        )
    )
    assert cfg["socials"] == [
        {"name": "GitHub", "url": "https://github.com/x", "icon": "/icons/github.svg"}
    ]
    assert "WARNING" in capsys.readouterr().err


def test_theme_font_family_string_is_split(tmp_path):
    cfg = load_config(
        write_config(
            tmp_path,
            """
            theme:
              extend:
                fontFamily:
                  display: "Lobster, cursive"
            """,
        )
    )
    assert cfg["theme"]["extend"]["fontFamily"] == {"display": ["Lobster", "cursive"]}


def test_base_path_is_normalised(tmp_path):
    cfg = load_config(write_config(tmp_path, "base_path: blog"))
    assert cfg["base_path"] == "/blog/"


def test_missing_config_exits(tmp_path):
    with pytest.raises(SystemExit) as exc:
        load_config(tmp_path / "nope.yml")
    assert exc.value.code == 1


def test_invalid_yaml_exits(tmp_path):
    with pytest.raises(SystemExit):
        load_config(write_config(tmp_path, "site_title: [unclosed"))


def test_config_path_from_args(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert get_config_path_from_args([]) == (tmp_path / "config.yml").resolve()
    assert get_config_path_from_args(["other.yml"]) == (tmp_path / "other.yml").resolve()


def test_resolve_paths_relative_to_project(tmp_path):
    cfg = load_config(write_config(tmp_path, "output_dir: out"))
    paths = resolve_paths(cfg, tmp_path)
    assert paths["output_dir"] == (tmp_path / "out").resolve()
    assert paths["content_root"] == (tmp_path / "src" / "posts").resolve()


def test_blank_and_non_string_values_fall_back_or_stringify(tmp_path):
    cfg = load_config(
        write_config(
            tmp_path,
            """
            site_title: 2024
            site_tagline:
            content_root:
            output_dir:
            post_route:
            date_format:
            plugins:
            feed:
            """,
        )
    )
    assert cfg["site_title"] == "2024"
    assert cfg["site_tagline"] == ""
    assert cfg["content_root"] == "src/posts"
    assert cfg["output_dir"] == "_site"
    assert cfg["post_route"] == "posts"
    assert cfg["date_format"] == "%B %d, %Y"
    assert cfg["plugins"] == ["typography"]
    assert cfg["feed"] is True
