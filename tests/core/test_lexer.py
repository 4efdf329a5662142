"""Tests for regex-based specifier extraction from JavaScript source."""

from __future__ import annotations

from pearshaker.core.lexer import lex, mask_strings, strip_comments
from pearshaker.core.models import EntryDescriptor


def _specifiers(source: str) -> list[str]:
    return [e.specifier for e in lex(source)]


class TestRequire:
    """CommonJS ``require`` forms."""

    def test_plain_require(self) -> None:
        assert lex('const dep = require("./dep.js")') == [
            EntryDescriptor("./dep.js", is_require=True)
        ]

    def test_single_quotes_and_spacing(self) -> None:
        assert _specifiers("require ( './a.js' )") == ["./a.js"]

    def test_member_require_ignored(self) -> None:
        assert lex('module.require("./a.js"); myrequire("./b.js")') == []

    def test_computed_require_ignored(self) -> None:
        assert lex("require(name); require(`./tpl-${x}.js`)") == []

    def test_addon_without_arguments(self) -> None:
        assert lex("module.exports = require.addon()") == [
            EntryDescriptor("", is_addon=True, is_require=True)
        ]

    def test_addon_with_specifier(self) -> None:
        assert lex("require.addon('./binding', __filename)") == [
            EntryDescriptor("./binding", is_addon=True, is_require=True)
        ]

    def test_asset(self) -> None:
        assert lex('const icon = require.asset("./icon.png")') == [
            EntryDescriptor("./icon.png", is_asset=True, is_require=True)
        ]


class TestImport:
    """ESM ``import``/``export`` forms."""

    def test_default_import(self) -> None:
        assert lex('import dep from "dep"') == [EntryDescriptor("dep", is_import=True)]

    def test_named_and_namespace_imports(self) -> None:
        source = (
            'import { a, b as c } from "./named.js"\n'
            "import * as ns from './ns.js'\n"
            'import def, { d } from "./mixed.js"\n'
        )
        assert _specifiers(source) == ["./named.js", "./ns.js", "./mixed.js"]

    def test_side_effect_import(self) -> None:
        assert _specifiers('import "./polyfill.js"') == ["./polyfill.js"]

    def test_export_from(self) -> None:
        source = 'export * from "./all.js"\nexport { x as default } from "./x.js"'
        entries = lex(source)
        assert [e.specifier for e in entries] == ["./all.js", "./x.js"]
        assert all(e.is_import for e in entries)

    def test_dynamic_import(self) -> None:
        assert lex('const lazy = await import("./lazy.js")') == [
            EntryDescriptor("./lazy.js", is_import=True)
        ]

    def test_asset_import_attribute(self) -> None:
        assert lex('import data from "./data.bin" with { type: "asset" }') == [
            EntryDescriptor("./data.bin", is_asset=True, is_import=True)
        ]

    def test_json_import_attribute_is_not_asset(self) -> None:
        assert lex('import cfg from "./cfg.json" with { type: "json" }') == [
            EntryDescriptor("./cfg.json", is_import=True)
        ]

    def test_dynamic_import_with_asset_option(self) -> None:
        entries = lex('import("./blob.bin", { with: { type: "asset" } })')
        assert entries == [EntryDescriptor("./blob.bin", is_asset=True, is_import=True)]

    def test_member_import_ignored(self) -> None:
        assert lex('loader.import("./x.js")') == []


class TestOrderingAndDedup:
    """Output order and duplicate handling."""

    def test_source_order_across_forms(self) -> None:
        source = (
            'import a from "a"\n'
            'const b = require("b")\n'
            'const c = require.addon("c")\n'
            'const d = await import("d")\n'
        )
        assert _specifiers(source) == ["a", "b", "c", "d"]

    def test_duplicates_collapsed(self) -> None:
        assert _specifiers('require("x"); require("x"); require(\'x\')') == ["x"]

    def test_same_specifier_different_kinds_kept(self) -> None:
        entries = lex('require("x")\nimport "x"')
        assert entries == [
            EntryDescriptor("x", is_require=True),
            EntryDescriptor("x", is_import=True),
        ]


class TestComments:
    """Comments are invisible to extraction; strings are not comments."""

    def test_line_and_block_comments(self) -> None:
        source = '// require("x")\n/* import "y" */\nrequire("z")'
        assert _specifiers(source) == ["z"]

    def test_url_in_string_is_not_a_comment(self) -> None:
        source = 'const url = "https://example.com"; require("./after.js")'
        assert _specifiers(source) == ["./after.js"]

    def test_apostrophe_in_comment(self) -> None:
        assert _specifiers("// don't load this\nrequire('./ok.js')") == ["./ok.js"]

    def test_strip_comments_keeps_newlines(self) -> None:
        stripped = strip_comments("a /* one\ntwo */ b")
        assert stripped.count("\n") == 1
        assert "one" not in stripped

    def test_empty_source(self) -> None:
        assert lex("") == []


class TestStringLiterals:
    """Keywords inside string and template literals are text, not code."""

    def test_import_inside_string(self) -> None:
        assert lex("const help = 'usage: import \"./cfg.js\"'") == []

    def test_require_inside_string(self) -> None:
        assert lex("const s = \"require('./x.js')\"") == []

    def test_import_inside_template(self) -> None:
        assert lex('const t = `import x from "./y.js"`') == []

    def test_real_specifier_after_string(self) -> None:
        source = "log(\"import './no.js'\"); require(\"./yes.js\")"
        assert _specifiers(source) == ["./yes.js"]

    def test_specifier_text_read_unmasked(self) -> None:
        assert _specifiers("require(\"./it's.js\")") == ["./it's.js"]

    def test_asset_attribute_read_unmasked(self) -> None:
        entries = lex('import img from "./a.png" with { type: "asset" }')
        assert entries == [EntryDescriptor("./a.png", is_asset=True, is_import=True)]

    def test_mask_keeps_length_and_newlines(self) -> None:
        code = 'x = `a\nb` + "cd"'
        masked = mask_strings(code)
        assert masked == 'x = ` \n ` + "  "'
        assert len(masked) == len(code)
