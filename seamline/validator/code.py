"""
Static plausibility check for generated pattern code.

The code targets an external JavaScript geometry engine and is never
executed here.  validate_pattern_code() only looks for obvious structural
omissions:

  1. MissingDesignDeclaration  — no ``Design``/``design`` identifier at all
  2. MissingGeometryPrimitives — ``Point`` or ``Path`` never referenced
  3. SyntaxError               — a lexical scan finds unbalanced brackets or
                                 an unterminated string, template, comment, or
                                 regular expression literal

A valid result does not mean the engine will accept the code.
"""

from __future__ import annotations

from dataclasses import dataclass

MISSING_DESIGN = "MissingDesignDeclaration"
MISSING_PRIMITIVES = "MissingGeometryPrimitives"
SYNTAX_ERROR = "SyntaxError"

_PAIRS = {")": "(", "]": "[", "}": "{"}

# A "/" following one of these (or nothing) starts a regular expression literal.
_REGEX_PRECEDERS = frozenset("(,=:[!&|?{};+-*%<>~^")
_REGEX_KEYWORDS = frozenset({"return", "typeof", "case", "do", "else", "in", "of", "new", "void"})


@dataclass(frozen=True)
class CodeValidationResult:
    """Outcome of validate_pattern_code().

    Attributes:
        valid: True when no structural omission was found.
        error: Human-readable reason, or None when valid.
        error_type: One of the module-level error type names, or None.
    """

    valid: bool
    error: str | None = None
    error_type: str | None = None


class _ScanError(Exception):
    def __init__(self, message: str, line: int) -> None:
        super().__init__(f"{message} (line {line})")


def _scan_quoted(code: str, i: int, line: int) -> int:
    """Skip a '…' or "…" literal starting at *i*; return index after the close."""
    quote = code[i]
    i += 1
    while i < len(code):
        ch = code[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n":
            break
        i += 1
    raise _ScanError("Unterminated string literal", line)


def _scan_template(code: str, i: int, line: int) -> tuple[int, int, bool]:
    """Scan template text from *i* (just inside a backtick).

    Returns ``(index, line, opened_substitution)``: the index after the
    closing backtick, or after ``${`` when a substitution starts.
    """
    start_line = line
    while i < len(code):
        ch = code[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "\n":
            line += 1
        elif ch == "`":
            return i + 1, line, False
        elif ch == "$" and code.startswith("${", i):
            return i + 2, line, True
        i += 1
    raise _ScanError("Unterminated template literal", start_line)


def _scan_regex(code: str, i: int, line: int) -> int:
    """Skip a regular expression literal starting at the opening '/'."""
    i += 1
    in_class = False
    while i < len(code):
        ch = code[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "\n":
            break
        if ch == "[":
            in_class = True
        elif ch == "]":
            in_class = False
        elif ch == "/" and not in_class:
            i += 1
            while i < len(code) and (code[i].isalnum() or code[i] == "_"):
                i += 1
            return i
        i += 1
    raise _ScanError("Unterminated regular expression", line)


def _check_syntax(code: str) -> None:
    """Raise _ScanError on the first lexical defect found in *code*."""
    stack: list[tuple[str, int]] = []
    line = 1
    prev = ""  # last significant character, or "++" / "--"
    word = ""  # last identifier-like token
    i = 0
    n = len(code)
    while i < n:
        ch = code[i]
        if ch == "\n":
            line += 1
            i += 1
            continue
        if ch.isspace():
            i += 1
            continue
        if code.startswith("//", i):
            end = code.find("\n", i)
            i = n if end == -1 else end
            continue
        if code.startswith("/*", i):
            end = code.find("*/", i + 2)
            if end == -1:
                raise _ScanError("Unterminated comment", line)
            line += code.count("\n", i, end)
            i = end + 2
            continue
        if ch in "'\"":
            i = _scan_quoted(code, i, line)
            prev, word = ch, ""
            continue
        if ch == "`":
            i, line, opened = _scan_template(code, i + 1, line)
            if opened:
                stack.append(("${", line))
                prev, word = "{", ""
            else:
                prev, word = "`", ""
            continue
        if code.startswith(("++", "--"), i):
            # Update operators end an operand, so a following "/" divides.
            prev, word = code[i : i + 2], ""
            i += 2
            continue
        if ch == "/":
            if prev == "" or prev in _REGEX_PRECEDERS or word in _REGEX_KEYWORDS:
                i = _scan_regex(code, i, line)
                prev, word = "/", ""
                continue
        if ch in "([{":
            stack.append((ch, line))
        elif ch in ")]}":
            if ch == "}" and stack and stack[-1][0] == "${":
                stack.pop()
                i, line, opened = _scan_template(code, i + 1, line)
                if opened:
                    stack.append(("${", line))
                    prev, word = "{", ""
                else:
                    prev, word = "`", ""
                continue
            if not stack or stack[-1][0] != _PAIRS[ch]:
                raise _ScanError(f"Unexpected token '{ch}'", line)
            stack.pop()
        if ch.isalnum() or ch in "_$":
            j = i
            while j < n and (code[j].isalnum() or code[j] in "_$"):
                j += 1
            word = code[i:j]
            prev = code[j - 1]
            i = j
            continue
        prev, word = ch, ""
        i += 1

    if stack:
        opener, opened_line = stack[-1]
        if opener == "${":
            raise _ScanError("Unterminated template literal", opened_line)
        raise _ScanError(f"Unexpected end of input: '{opener}' is never closed", opened_line)


def validate_pattern_code(code: str) -> CodeValidationResult:
    """Check generated pattern code for obvious structural omissions.

    Pure function; never raises.
    """
    if "Design" not in code and "design" not in code:
        return CodeValidationResult(
            valid=False,
            error="Pattern must include a Design definition",
            error_type=MISSING_DESIGN,
        )
    if "Point" not in code or "Path" not in code:
        return CodeValidationResult(
            valid=False,
            error="Pattern must use Point and Path for geometry",
            error_type=MISSING_PRIMITIVES,
        )
    try:
        _check_syntax(code)
    except _ScanError as exc:
        return CodeValidationResult(valid=False, error=str(exc), error_type=SYNTAX_ERROR)
    return CodeValidationResult(valid=True)
