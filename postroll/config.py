import sys
from pathlib import Path

import yaml           # pip install pyyaml

DEFAULT_CONFIG_NAME = "config.yml"

DEFAULT_FONT_EXTEND = {
    "handwriting": ["Dancing Script", "Allison", "cursive"],
}


# -----------------------
# Config
# -----------------------

def get_config_path_from_args(argv=None) -> Path:
    """
    Determine which config file to use.

    - If a path is passed as first argument, use that.
    - Otherwise, assume ./config.yml in the working directory.
    """
    args = sys.argv[1:] if argv is None else list(argv)
    if args:
        return Path(args[0]).resolve()
    return (Path.cwd() / DEFAULT_CONFIG_NAME).resolve()


def _text(data: dict, key: str, default: str) -> str:
    # "site_tagline:" with no value loads as None
    value = data.get(key)
    if value is None or value == "":
        return default
    return str(value)


def _flag(data: dict, key: str, default: bool) -> bool:
    value = data.get(key)
    if value is None:
        return default
    return bool(value)


def _string_list(value) -> list:
    # extra_head / extra_footer can be a string or a list
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(x) for x in value]
    return []


def normalize_socials(raw) -> list:
    """
    Keep social entries that have at least a name and a url.

      socials:
        - name: GitHub
          url: https://github.com/someone
          icon: /icons/github.svg
    """
    if not isinstance(raw, list):
        return []

    socials = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict) or not item.get("name") or not item.get("url"):
            print(f"WARNING: skipping social link #{i + 1}: needs name and url", file=sys.stderr)
            continue
        socials.append(
            {
                "name": str(item["name"]),
                "url": str(item["url"]),
                "icon": str(item.get("icon") or ""),
            }
        )
    return socials


def normalize_theme(raw) -> dict:
    """
    Return {"fontFamily": {...}, "extend": {"fontFamily": {...}}}.

    A family value may be a list of names or one comma-separated string.
    """
    raw = raw if isinstance(raw, dict) else {}
    extend = raw.get("extend") if isinstance(raw.get("extend"), dict) else {}

    def _families(value):
        if not isinstance(value, dict):
            return {}
        out = {}
        for name, stack in value.items():
            if isinstance(stack, str):
                stack = [s.strip() for s in stack.split(",") if s.strip()]
            elif isinstance(stack, list):
                stack = [str(s) for s in stack]
            else:
                continue
            out[str(name)] = stack
        return out

    extend_fonts = _families(extend.get("fontFamily")) if "fontFamily" in extend else dict(DEFAULT_FONT_EXTEND)

    return {
        "fontFamily": _families(raw.get("fontFamily")),
        "extend": {"fontFamily": extend_fonts},
    }


def load_config(config_path: Path) -> dict:
    """Load YAML config and apply defaults."""
    if not config_path.exists():
        print(f"Config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        print(f"Invalid YAML in {config_path}: {exc}", file=sys.stderr)
        sys.exit(1)

    if not isinstance(data, dict):
        print(f"Config file must hold a mapping: {config_path}", file=sys.stderr)
        sys.exit(1)

    base_path = "/" + _text(data, "base_path", "/").strip("/")
    if not base_path.endswith("/"):
        base_path += "/"

    plugins = data.get("plugins")
    if plugins is None:
        plugins = ["typography"]
    content = data.get("content")

    cfg = {
        "site_title": _text(data, "site_title", "Blog"),
        "site_tagline": _text(data, "site_tagline", ""),
        "site_url": _text(data, "site_url", ""),          # optional, for RSS + absolute links
        "author": _text(data, "author", ""),
        "content_root": _text(data, "content_root", "src/posts"),
        "posts_glob": _text(data, "posts_glob", "*.md"),
        "output_dir": _text(data, "output_dir", "_site"),
        "static_dir": _text(data, "static_dir", "public"),
        "clean_output": _flag(data, "clean_output", True),
        "base_path": base_path,
        "post_route": _text(data, "post_route", "posts").strip("/") or "posts",
        "date_format": _text(data, "date_format", "%B %d, %Y"),
        "include_drafts": _flag(data, "include_drafts", False),
        "extra_head": _string_list(data.get("extra_head", [])),
        "extra_footer": _string_list(data.get("extra_footer", [])),
        "socials": normalize_socials(data.get("socials", [])),
        "theme": normalize_theme(data.get("theme")),
        "plugins": [str(p) for p in plugins] if isinstance(plugins, list) else [],
        # None -> scan the generated html
        "content": _string_list(content) if content is not None else None,
        "feed": _flag(data, "feed", True),
    }
    return cfg


def resolve_paths(cfg: dict, project_root: Path) -> dict:
    """Resolve content_root, output_dir and static_dir relative to the config file."""
    return {
        "content_root": (project_root / cfg["content_root"]).resolve(),
        "output_dir": (project_root / cfg["output_dir"]).resolve(),
        "static_dir": (project_root / cfg["static_dir"]).resolve(),
    }
