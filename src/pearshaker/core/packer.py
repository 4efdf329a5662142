"""Packer: walk an entrypoint's dependency graph in one pass.

Starting from the entrypoint, each source file is lexed and every specifier
is handed to the injected resolver. Resolved files are queued (breadth-first,
visited-set guarded so cycles terminate). The walk stops at the first
unresolved specifier that is not in ``defer`` and returns it, so the caller
can decide whether to defer it and try again.

The packer never raises for resolution failures. It raises ``ParseError`` for
a ``.js``/``.cjs``/``.mjs`` file that cannot be decoded; resolver exceptions
propagate unchanged. A file reached only as an addon or asset is never lexed,
even if it looks like source.
"""

from __future__ import annotations

import logging
import posixpath
from collections import deque
from collections.abc import Callable, Iterable, Sequence

from pearshaker.core.lexer import SOURCE_EXTENSIONS, lex
from pearshaker.core.models import (
    EntryDescriptor,
    ModuleURL,
    PackedFile,
    PackOutcome,
    PackResult,
    Resolution,
    Unresolved,
)
from pearshaker.exceptions import ParseError
from pearshaker.store.base import VirtualStore, normalize_path

logger = logging.getLogger(__name__)

Resolver = Callable[[EntryDescriptor, ModuleURL | None, Sequence[str]], Resolution]
Lexer = Callable[[str], list[EntryDescriptor]]


def is_source_path(path: str) -> bool:
    """Return True if the file at ``path`` should be lexed for specifiers."""
    ext = posixpath.splitext(path)[1]
    return ext == "" or ext in SOURCE_EXTENSIONS


def decode_source(path: str, data: bytes) -> str:
    """Decode source bytes as UTF-8 (a leading BOM is dropped).

    Raises:
        ParseError: If the bytes are not valid UTF-8.
    """
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ParseError(path, f"not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc


def pack(
    store: VirtualStore,
    entrypoint: str,
    *,
    resolve: Resolver,
    builtins: Iterable[str] = (),
    targets: Sequence[str] = (),
    defer: Iterable[str] = (),
    lexer: Lexer = lex,
) -> PackOutcome:
    """Collect every file reachable from ``entrypoint``.

    Args:
        store: Store to read from.
        entrypoint: Store path of the root file.
        resolve: ``resolve(entry, referrer, targets)`` callable.
        builtins: Specifiers that are never resolved.
        targets: ``<os>-<arch>`` targets passed through to ``resolve``.
        defer: Specifiers whose resolution failure is ignored.
        lexer: Source-to-entries function.

    Returns:
        A ``PackResult`` on success. ``Unresolved`` for the first specifier
        that failed and was not deferred; its ``referrer`` is None when the
        entrypoint itself is missing.

    Raises:
        ParseError: If a file with a source extension cannot be decoded.
    """
    root = normalize_path(entrypoint)
    content = store.read(root)
    if content is None:
        return Unresolved(entrypoint, None, (store.url_for(root).href,))

    builtin_names = frozenset(builtins)
    deferred = frozenset(defer)
    result = PackResult()
    result.files[root] = PackedFile(store.url_for(root), len(content))
    contents: dict[str, bytes] = {root: content}
    lexed: set[str] = set()
    queue: deque[str] = deque([root])

    while queue:
        path = queue.popleft()
        if path in lexed:
            continue
        lexed.add(path)
        source = _source_text(path, contents[path])
        if source is None:
            continue
        referrer = store.url_for(path)

        for entry in lexer(source):
            if entry.specifier in builtin_names:
                continue
            outcome = resolve(entry, referrer, targets)

            if isinstance(outcome, Unresolved):
                if outcome.specifier in deferred or entry.specifier in deferred:
                    logger.debug("Ignoring deferred %r in %s", entry.specifier, path)
                    continue
                return outcome

            url = outcome.url
            result.resolutions.setdefault(referrer.href, {})[entry.specifier] = url.href
            if url.pathname not in result.files:
                target = store.read(url.pathname)
                if target is None:
                    return Unresolved(entry.specifier, referrer, (url.href,))
                result.files[url.pathname] = PackedFile(url, len(target))
                contents[url.pathname] = target
            # addons and assets are leaves; a module load of the same file
            # still gets it lexed
            if not (entry.is_addon or entry.is_asset) and url.pathname not in lexed:
                queue.append(url.pathname)

    return result


def _source_text(path: str, data: bytes) -> str | None:
    """Return the text to lex for ``path``, or None if it is a leaf.

    Files with a source extension must decode. Extensionless files that are
    not UTF-8 (binaries reached through ``require("./data")``) are leaves.
    """
    if not is_source_path(path):
        return None
    try:
        return decode_source(path, data)
    except ParseError:
        if posixpath.splitext(path)[1]:
            raise
        logger.debug("Not lexing %s: extensionless file is not UTF-8 text", path)
        return None
