"""
Utility-first stylesheet generation.

Every class found in the scanned content files that names a known
utility gets one rule; everything else is left out. Font families come
from the theme config (defaults plus ``theme.extend.fontFamily``), and
the "typography" plugin contributes the ``.prose`` layer.
"""
import re
import sys
from pathlib import Path

from bs4 import BeautifulSoup  # pip install beautifulsoup4

STYLESHEET_FILENAME = "style.css"

DEFAULT_FONT_FAMILIES = {
    "sans": ["ui-sans-serif", "system-ui", "sans-serif"],
    "serif": ["ui-serif", "Georgia", "Cambria", "Times New Roman", "serif"],
    "mono": ["ui-monospace", "SFMono-Regular", "Menlo", "Consolas", "monospace"],
}

GENERIC_FAMILIES = {
    "serif", "sans-serif", "monospace", "cursive", "fantasy", "system-ui",
    "ui-serif", "ui-sans-serif", "ui-monospace", "ui-rounded", "math",
    "emoji", "fangsong", "inherit", "initial", "unset",
}

VARIANTS = {
    "hover": ":hover",
    "focus": ":focus",
}

UTILITIES = {
    "flex": "display: flex;",
    "block": "display: block;",
    "hidden": "display: none;",
    "list-none": "list-style-type: none; padding-left: 0;",
    "underline": "text-decoration-line: underline;",
    "no-underline": "text-decoration-line: none;",
    "mx-auto": "margin-left: auto; margin-right: auto;",
    "max-w-2xl": "max-width: 42rem;",
    "max-w-3xl": "max-width: 48rem;",
    "w-6": "width: 1.5rem;",
    "h-6": "height: 1.5rem;",
    "gap-2": "gap: 0.5rem;",
    "gap-4": "gap: 1rem;",
    "px-4": "padding-left: 1rem; padding-right: 1rem;",
    "py-2": "padding-top: 0.5rem; padding-bottom: 0.5rem;",
    "py-8": "padding-top: 2rem; padding-bottom: 2rem;",
    "mb-4": "margin-bottom: 1rem;",
    "mb-8": "margin-bottom: 2rem;",
    "mt-8": "margin-top: 2rem;",
    "text-sm": "font-size: 0.875rem; line-height: 1.25rem;",
    "text-lg": "font-size: 1.125rem; line-height: 1.75rem;",
    "text-2xl": "font-size: 1.5rem; line-height: 2rem;",
    "text-4xl": "font-size: 2.25rem; line-height: 2.5rem;",
    "text-gray-500": "color: #6b7280;",
    "font-bold": "font-weight: 700;",
}

BASE_CSS = """*, ::before, ::after { box-sizing: border-box; border: 0 solid #e5e7eb; }
html { line-height: 1.5; -webkit-text-size-adjust: 100%; font-family: {sans}; }
body { margin: 0; line-height: inherit; color: #111827; }
h1, h2, h3, h4, h5, h6 { font-size: inherit; font-weight: inherit; margin: 0; }
p, figure, blockquote, pre { margin: 0; }
a { color: inherit; text-decoration: inherit; }
img { display: block; max-width: 100%; height: auto; }
ul, ol { margin: 0; }"""

PROSE_CSS = """.prose { color: #374151; max-width: 65ch; line-height: 1.75; }
.prose :where(p) { margin-top: 1.25em; margin-bottom: 1.25em; }
.prose :where(a) { color: #111827; text-decoration: underline; font-weight: 500; }
.prose :where(h1) { font-size: 2.25em; font-weight: 800; margin-bottom: 0.8888889em; line-height: 1.1111111; color: #111827; }
.prose :where(h2) { font-size: 1.5em; font-weight: 700; margin-top: 2em; margin-bottom: 1em; line-height: 1.3333333; color: #111827; }
.prose :where(h3) { font-size: 1.25em; font-weight: 600; margin-top: 1.6em; margin-bottom: 0.6em; line-height: 1.6; color: #111827; }
.prose :where(strong) { font-weight: 600; color: #111827; }
.prose :where(ul) { list-style-type: disc; padding-left: 1.625em; margin-top: 1.25em; margin-bottom: 1.25em; }
.prose :where(ol) { list-style-type: decimal; padding-left: 1.625em; margin-top: 1.25em; margin-bottom: 1.25em; }
.prose :where(li) { margin-top: 0.5em; margin-bottom: 0.5em; }
.prose :where(blockquote) { font-style: italic; border-left: 0.25rem solid #e5e7eb; padding-left: 1em; margin: 1.6em 0; }
.prose :where(code) { font-family: {mono}; font-size: 0.875em; font-weight: 600; color: #111827; }
.prose :where(code)::before, .prose :where(code)::after { content: "`"; }
.prose :where(pre) { font-family: {mono}; background-color: #1f2937; color: #e5e7eb; overflow-x: auto; font-size: 0.875em; line-height: 1.7142857; margin: 1.7142857em 0; border-radius: 0.375rem; padding: 0.8571429em 1.1428571em; }
.prose :where(pre code) { background-color: transparent; color: inherit; font-weight: inherit; }
.prose :where(pre code)::before, .prose :where(pre code)::after { content: none; }
.prose :where(table) { width: 100%; table-layout: auto; text-align: left; margin: 2em 0; font-size: 0.875em; border-collapse: collapse; }
.prose :where(th, td) { padding: 0.5714286em; border-bottom: 1px solid #e5e7eb; }
.prose :where(figure) { margin: 2em 0; }
.prose :where(figcaption) { color: #6b7280; font-size: 0.875em; margin-top: 0.8571429em; }
.prose :where(hr) { border-top: 1px solid #e5e7eb; margin: 3em 0; }"""


def format_font_stack(names) -> str:
    """["Dancing Script", "cursive"] -> '"Dancing Script", cursive'"""
    out = []
    for name in names:
        name = str(name).strip().strip('"').strip("'")
        if not name:
            continue
        if name.lower() in GENERIC_FAMILIES or re.fullmatch(r"[A-Za-z][\w-]*", name):
            out.append(name)
        else:
            out.append(f'"{name}"')
    return ", ".join(out)


def font_families(theme: dict) -> dict:
    families = dict(DEFAULT_FONT_FAMILIES)
    if theme.get("fontFamily"):
        families = dict(theme["fontFamily"])
    families.update((theme.get("extend") or {}).get("fontFamily") or {})
    return families


def css_escape(class_name: str) -> str:
    return re.sub(r"([^\w-])", r"\\\1", class_name)


def utility_declarations(cfg: dict) -> dict:
    """All known utility classes -> their declarations, font-* included."""
    decls = dict(UTILITIES)
    for name, stack in font_families(cfg.get("theme") or {}).items():
        decls[f"font-{name}"] = f"font-family: {format_font_stack(stack)};"
    return decls


def collect_classes(paths) -> set:
    """Set of every class name used in the given HTML files."""
    classes = set()
    for path in paths:
        soup = BeautifulSoup(Path(path).read_text(encoding="utf-8"), "html.parser")
        for tag in soup.find_all(class_=True):
            value = tag.get("class")
            if isinstance(value, str):
                value = value.split()
            classes.update(value)
    return classes


def _rule_for(class_name: str, decls: dict):
    variant, _, base = class_name.rpartition(":")
    if variant and variant not in VARIANTS:
        return None
    if base not in decls:
        return None
    selector = "." + css_escape(class_name) + (VARIANTS[variant] if variant else "")
    return f"{selector} {{ {decls[base]} }}"


def build_stylesheet(cfg: dict, used_classes) -> str:
    decls = utility_declarations(cfg)
    families = font_families(cfg.get("theme") or {})
    sans = format_font_stack(families.get("sans") or DEFAULT_FONT_FAMILIES["sans"])
    mono = format_font_stack(families.get("mono") or DEFAULT_FONT_FAMILIES["mono"])

    parts = [BASE_CSS.replace("{sans}", sans)]

    if "typography" in (cfg.get("plugins") or []) and "prose" in used_classes:
        parts.append(PROSE_CSS.replace("{mono}", mono))

    # Plain utilities first, variants after so they win on equal specificity
    ordered = sorted(used_classes, key=lambda c: (":" in c, c))
    rules = [r for r in (_rule_for(c, decls) for c in ordered) if r]
    if rules:
        parts.append("\n".join(rules))

    return "\n\n".join(parts) + "\n"


def content_files(cfg: dict, project_root: Path, output_dir: Path) -> list:
    patterns = cfg.get("content")
    if not patterns:
        return sorted(output_dir.rglob("*.html"))

    files = set()
    for pattern in patterns:
        files.update(p for p in project_root.glob(pattern) if p.is_file())
    if not files:
        print(f"WARNING: no content files matched {patterns}", file=sys.stderr)
    return sorted(files)


def write_stylesheet(cfg: dict, project_root: Path, output_dir: Path) -> Path:
    used = collect_classes(content_files(cfg, project_root, output_dir))
    dest = output_dir / STYLESHEET_FILENAME
    dest.write_text(build_stylesheet(cfg, used), encoding="utf-8")
    print(f"Wrote {dest}")
    return dest
