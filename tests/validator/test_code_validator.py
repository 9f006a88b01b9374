"""Tests for validator.code — validate_pattern_code()."""

from __future__ import annotations

import pytest

from seamline.validator import (
    MISSING_DESIGN,
    MISSING_PRIMITIVES,
    SYNTAX_ERROR,
    validate_pattern_code,
)

_VALID = """
import { Design, Point, Path } from '@freesewing/core';

const front = {
  name: 'front',
  draft: ({ points, paths, measurements, part }) => {
    // quarter bust
    const w = measurements.bust / 4 + 10;
    points.a = new Point(0, 0);
    points.b = new Point(w, 0);
    paths.seam = new Path().move(points.a).line(points.b).close();
    const label = `width ${Math.round(w / 10)} cm (approx)`;
    const re = /[)(]+/g;
    /* block ) comment */
    return part;
  }
};

const design = new Design({ name: 'Test', parts: [front] });
export default design;
"""


class TestStructuralChecks:
    def test_valid_code_passes(self):
        result = validate_pattern_code(_VALID)
        assert result.valid is True
        assert result.error is None

    def test_missing_design(self):
        result = validate_pattern_code("const p = new Point(0, 0); new Path();")
        assert result.valid is False
        assert result.error_type == MISSING_DESIGN

    def test_lowercase_design_is_enough(self):
        code = "const design = {}; new Point(0, 0); new Path();"
        assert validate_pattern_code(code).valid is True

    @pytest.mark.parametrize(
        "code",
        ["const design = new Design({}); new Point(0, 0);", "const design = new Path();"],
    )
    def test_missing_primitive(self, code):
        result = validate_pattern_code(code)
        assert result.valid is False
        assert result.error_type == MISSING_PRIMITIVES

    def test_design_checked_before_primitives(self):
        assert validate_pattern_code("nothing here").error_type == MISSING_DESIGN


class TestSyntaxCheck:
    _PREFIX = "const design = new Design({}); new Point(0, 0); new Path();\n"

    def _check(self, body: str):
        return validate_pattern_code(self._PREFIX + body)

    def test_unclosed_brace(self):
        result = self._check("function f() {\n  return 1;\n")
        assert result.error_type == SYNTAX_ERROR
        assert "line 2" in result.error

    def test_mismatched_bracket(self):
        result = self._check("const a = [1, 2);")
        assert result.error_type == SYNTAX_ERROR
        assert "')'" in result.error

    def test_unterminated_string(self):
        result = self._check("const s = 'abc;\nconst t = 1;")
        assert result.error_type == SYNTAX_ERROR
        assert "string" in result.error

    def test_unterminated_template(self):
        result = self._check("const s = `abc ${1 + 2}")
        assert result.error_type == SYNTAX_ERROR

    def test_unterminated_comment(self):
        assert self._check("/* never closed").error_type == SYNTAX_ERROR

    def test_brackets_inside_strings_ignored(self):
        assert self._check("const s = '((('; const t = \"}}\";").valid is True

    def test_nested_template_substitution(self):
        assert self._check("const s = `a ${ {x: 1}.x } b ${`inner ${2}`}`;").valid is True

    def test_division_is_not_regex(self):
        assert self._check("const a = (4) / 2 / (1);").valid is True

    def test_regex_after_return(self):
        assert self._check("function f() { return /[{]/.test('x'); }").valid is True

    @pytest.mark.parametrize("expr", ["i++ / 2", "i-- / 2", "(i++) / 2 / 1"])
    def test_division_after_postfix_update(self, expr):
        assert self._check(f"let i = 4; const h = {expr};").valid is True

    def test_regex_after_plus_still_detected(self):
        assert self._check("const r = 'a' + /[)]/.source;").valid is True
