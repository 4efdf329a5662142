"""Regex-based extraction of import/require specifiers from JavaScript source.

JavaScript cannot be parsed with Python's ``ast`` module, so this module uses
regular expressions over comment-stripped source. Only string-literal
specifiers are extracted; computed ones (``require(name)``) are invisible to
static traversal and are ignored. Keywords that appear inside string or
template literals (``"usage: import x"``) are not treated as code.

Extraction targets and the capabilities they set:

- ``require("x")`` -- require
- ``require.addon("x")`` / ``require.addon()`` -- addon, require
- ``require.asset("x")`` -- asset, require
- ``import ... from "x"`` / ``import "x"`` / ``export ... from "x"`` -- import
- ``import("x")`` -- import
- ``import ... from "x" with { type: "asset" }`` -- asset, import
"""

from __future__ import annotations

import re

from pearshaker.core.models import EntryDescriptor

# Extensions whose contents are lexed for further specifiers. Files with no
# extension are treated as source too (CLI scripts, ``bin`` entries).
SOURCE_EXTENSIONS: frozenset[str] = frozenset({".js", ".cjs", ".mjs"})

# ── Compiled patterns ──────────────────────────────────────────────────────

_COMMENT_OR_STRING = re.compile(
    r"""("(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*'|`(?:\\.|[^`\\])*`)"""
    r"""|(//[^\n]*|/\*.*?\*/)""",
    re.DOTALL,
)

_SPEC = r"""(?P<q>["'])(?P<spec>[^"'\n]+)(?P=q)"""
_ATTRS = r"""(?P<attrs>\s*(?:with|assert)\s*\{[^}]*\})?"""

_REQUIRE_ADDON = re.compile(
    r"""\brequire\.addon\s*\(\s*(?:(?P<q>["'])(?P<spec>[^"'\n]*)(?P=q))?\s*[,)]"""
)
_REQUIRE_ASSET = re.compile(r"\brequire\.asset\s*\(\s*" + _SPEC + r"\s*[,)]")
_REQUIRE = re.compile(r"(?<![.\w$])require\s*\(\s*" + _SPEC + r"\s*\)")
_STATIC_IMPORT = re.compile(
    r"(?<![.\w$])import\s*(?:[\w$*{}\s,]+?\s*from\s*)?" + _SPEC + _ATTRS
)
_EXPORT_FROM = re.compile(
    r"(?<![.\w$])export\s*[\w$*{}\s,]+?\s*from\s*" + _SPEC + _ATTRS
)
_DYNAMIC_IMPORT = re.compile(
    r"(?<![.\w$])import\s*\(\s*" + _SPEC
    + r"""\s*(?:,\s*(?P<attrs>\{[^)]*))?\)"""
)

_ASSET_TYPE = re.compile(r"""type\s*:\s*["']asset["']""")


def strip_comments(source: str) -> str:
    """Blank out ``//`` and ``/* */`` comments, leaving string literals intact.

    Newlines inside block comments are kept so match offsets still map to
    the same lines.
    """

    def _replace(match: re.Match[str]) -> str:
        if match.group(1) is not None:
            return match.group(1)
        return re.sub(r"[^\n]", " ", match.group(2))

    return _COMMENT_OR_STRING.sub(_replace, source)


def mask_strings(code: str) -> str:
    """Blank the contents of string and template literals, keeping delimiters.

    The result has the same length and line breaks as ``code``, so a match
    found in it can be read back from ``code`` by offset.
    """

    def _replace(match: re.Match[str]) -> str:
        literal = match.group(1)
        if literal is None:
            return match.group(2)
        return literal[0] + re.sub(r"[^\n]", " ", literal[1:-1]) + literal[-1]

    return _COMMENT_OR_STRING.sub(_replace, code)


def _group_text(code: str, match: re.Match[str], name: str) -> str | None:
    if match.group(name) is None:
        return None
    return code[match.start(name):match.end(name)]


def _is_asset(code: str, match: re.Match[str]) -> bool:
    attrs = _group_text(code, match, "attrs")
    return bool(attrs) and _ASSET_TYPE.search(attrs) is not None


def lex(source: str) -> list[EntryDescriptor]:
    """Extract every static specifier from JavaScript source.

    Args:
        source: JavaScript (CommonJS or ESM) source text.

    Returns:
        ``EntryDescriptor`` list in source order. A specifier appearing more
        than once with the same capabilities is reported once.
    """
    code = strip_comments(source)
    # scan with literal bodies blanked so keywords inside strings never match
    masked = mask_strings(code)
    found: list[tuple[int, EntryDescriptor]] = []

    for m in _REQUIRE_ADDON.finditer(masked):
        found.append((m.start(), EntryDescriptor(
            _group_text(code, m, "spec") or "", is_addon=True, is_require=True,
        )))
    for m in _REQUIRE_ASSET.finditer(masked):
        found.append((m.start(), EntryDescriptor(
            _group_text(code, m, "spec"), is_asset=True, is_require=True,
        )))
    for m in _REQUIRE.finditer(masked):
        found.append((m.start(), EntryDescriptor(_group_text(code, m, "spec"), is_require=True)))
    for pattern in (_STATIC_IMPORT, _EXPORT_FROM, _DYNAMIC_IMPORT):
        for m in pattern.finditer(masked):
            found.append((m.start(), EntryDescriptor(
                _group_text(code, m, "spec"), is_asset=_is_asset(code, m), is_import=True,
            )))

    found.sort(key=lambda item: item[0])
    return list(dict.fromkeys(entry for _, entry in found))
