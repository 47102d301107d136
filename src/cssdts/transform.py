"""スタイルシート → 型定義テキストの変換。

CSS Modules が書き出すクラス名だけを拾う簡易抽出で、CSSパーサではない。

- セレクタ部分（`{` の直前）から `.name` を集める
- `@media` 等の at-rule 自体のプレリュードと `@keyframes` の中身は無視
- `:global(...)` / `:global .x` の中身は書き出さない
- `:export { key: value }` のキーもトークンにする
- 括弧の対応が取れない・コメントが閉じていない → TransformError
- TypeScript の識別子にできない名前は警告（diagnostics）にして飛ばす
"""

from __future__ import annotations

import hashlib
import logging
import re
from pathlib import Path
from typing import Protocol

from cssdts.artifacts import Artifact, output_path
from cssdts.config import Config
from cssdts.errors import TransformError

logger = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.S)
_STRING_RE = re.compile(r""""(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*'""")
_GLOBAL_CALL_RE = re.compile(r":global\([^)]*\)")
_GLOBAL_BARE_RE = re.compile(r":global(?!\()[^,]*")
_CLASS_RE = re.compile(r"\.(-?[_a-zA-Z][_a-zA-Z0-9-]*)")
_IDENT_RE = re.compile(r"^[$_a-zA-Z][$_a-zA-Z0-9]*$")
_CAMEL_RE = re.compile(r"[-_]+([^-_])")

# export const に使えない予約語
RESERVED_WORDS = frozenset(
    """
    break case catch class const continue debugger default delete do else enum
    export extends false finally for function if import in instanceof new null
    return super switch this throw true try typeof var void while with
    implements interface let package private protected public static yield
    """.split()
)


class Transformer(Protocol):
    def __call__(self, source_path: Path, config: Config) -> Artifact: ...


def camelize(token: str) -> str:
    s = _CAMEL_RE.sub(lambda m: m.group(1).upper(), token.strip("-_"))
    return s[:1].lower() + s[1:]


def is_valid_identifier(name: str) -> bool:
    return bool(_IDENT_RE.match(name)) and name not in RESERVED_WORDS


def _class_names(prelude: str) -> list[str]:
    sel = _GLOBAL_CALL_RE.sub("", prelude)
    sel = _GLOBAL_BARE_RE.sub("", sel)
    return _CLASS_RE.findall(sel)


def _export_keys(body: str) -> list[str]:
    keys: list[str] = []
    for decl in body.split(";"):
        key, sep, _value = decl.partition(":")
        key = key.strip()
        if sep and key:
            keys.append(key)
    return keys


def extract_tokens(css: str) -> list[str]:
    """css テキストから書き出すトークンを出現順（重複なし）で返す。

    壊れた入力は ValueError（呼び出し側で TransformError に包む）。
    """
    text = _COMMENT_RE.sub("", css)
    if "/*" in text:
        raise ValueError("unterminated comment")
    text = _STRING_RE.sub('""', text)

    found: list[str] = []
    # (prelude, body開始位置)
    stack: list[tuple[str, int]] = []
    start = 0
    for i, ch in enumerate(text):
        if ch == "{":
            prelude = text[start:i].strip()
            in_keyframes = any("keyframes" in p.split(" ", 1)[0] for p, _ in stack if p.startswith("@"))
            if prelude and not prelude.startswith("@") and prelude != ":export" and not in_keyframes:
                found.extend(_class_names(prelude))
            stack.append((prelude, i + 1))
            start = i + 1
        elif ch == "}":
            if not stack:
                line = text.count("\n", 0, i) + 1
                raise ValueError(f"unexpected '}}' at line {line}")
            prelude, body_start = stack.pop()
            if prelude == ":export":
                found.extend(_export_keys(text[body_start:i]))
            start = i + 1
        elif ch == ";":
            start = i + 1

    if stack:
        unclosed = stack[-1][0] or "{"
        raise ValueError(f"unclosed block: {unclosed}")
    return list(dict.fromkeys(found))


def render_declarations(tokens: list[str]) -> tuple[str, list[str]]:
    lines: list[str] = []
    messages: list[str] = []
    for t in tokens:
        if not is_valid_identifier(t):
            messages.append(f'"{t}" is not valid TypeScript variable name.')
            continue
        lines.append(f"export const {t}: string;")
    if not lines:
        return "", messages
    return "\n".join(lines) + "\n", messages


def transform(source_path: Path, config: Config) -> Artifact:
    try:
        css = Path(source_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TransformError(f"cannot read source ({type(e).__name__}: {e})", path=source_path) from e

    try:
        raw_tokens = extract_tokens(css)
    except ValueError as e:
        raise TransformError(str(e), path=source_path) from e

    tokens = [camelize(t) for t in raw_tokens] if config.camel_case else raw_tokens
    tokens = list(dict.fromkeys(tokens))
    text, messages = render_declarations(tokens)
    digest = hashlib.sha256(css.encode("utf-8")).hexdigest()
    logger.debug("transformed %s: %d tokens (sha256=%s)", source_path, len(tokens), digest[:12])

    return Artifact(
        source_path=Path(source_path),
        output_path=output_path(source_path, config),
        generated_text=text,
        diagnostics=tuple(f"{source_path}: {m}" for m in messages),
        source_digest=digest,
        tokens=tuple(tokens),
    )
