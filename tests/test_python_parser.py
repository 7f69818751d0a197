"""Tests for declaration collection, naming and parse errors."""

import textwrap

import pytest

from pydepth.analysis.runner import BAD_RECEIVER, build_stats, func_name
from pydepth.parsing.ir import Block, Span
from pydepth.parsing.python_parser import (
    SourceParseError,
    iter_children,
    module_name_for,
    parse_python,
    suite_span,
)


def _write(path, source):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(source).lstrip("\n"), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

def test_top_level_functions_in_order(tmp_path):
    f = _write(tmp_path / "mod.py", """
        import os

        def first():
            pass

        async def second():
            pass

        x = 1
    """)
    module = parse_python(f)
    assert [d.name for d in module.functions] == ["first", "second"]
    assert all(d.receiver is None for d in module.functions)


def test_positions_are_one_based(tmp_path):
    f = _write(tmp_path / "mod.py", """
        def first():
            pass

        class K:
            def meth(self):
                pass
    """)
    first, meth = parse_python(f).functions
    assert (first.position.line, first.position.column) == (1, 1)
    assert (meth.position.line, meth.position.column) == (5, 5)
    assert str(first.position) == f"{f}:1:1"


def test_decorated_function_position_points_at_def(tmp_path):
    f = _write(tmp_path / "mod.py", """
        @decorate
        def first():
            pass
    """)
    (decl,) = parse_python(f).functions
    assert decl.position.line == 2


def test_method_names(tmp_path):
    f = _write(tmp_path / "shapes.py", """
        class Shape:
            def area(self):
                return 0

            @staticmethod
            def unit():
                return Shape()

            @classmethod
            def build(cls):
                return cls()

            def broken():
                pass

            def varargs(*args):
                pass

            class Meta:
                def describe(self):
                    pass
    """)
    names = [func_name(d) for d in parse_python(f).functions]
    assert names == [
        "(*Shape).area",
        "(Shape).unit",
        "(Shape).build",
        f"({BAD_RECEIVER}).broken",
        "(*Shape).varargs",
        "(*Shape.Meta).describe",
    ]


def test_overload_stubs_are_skipped(tmp_path):
    f = _write(tmp_path / "mod.py", """
        import typing
        from typing import overload

        @overload
        def conv(x: int) -> int: ...
        @typing.overload
        def conv(x: str) -> str: ...
        def conv(x):
            return x
    """)
    functions = parse_python(f).functions
    assert len(functions) == 1
    assert functions[0].position.line == 8


def test_nested_functions_are_not_declarations(tmp_path):
    f = _write(tmp_path / "mod.py", """
        def outer():
            def inner():
                pass
            return inner
    """)
    assert [d.name for d in parse_python(f).functions] == ["outer"]


def test_build_stats_appends_in_discovery_order(tmp_path):
    f = _write(tmp_path / "mod.py", """
        def flat():
            return 1

        def deep(x):
            if x:
                for i in x:
                    pass
    """)
    stats = build_stats(parse_python(f), [])
    assert [(s.function, s.depth, s.module) for s in stats] == [
        ("flat", 0, "mod"),
        ("deep", 2, "mod"),
    ]
    assert str(stats[1]) == f"2 mod deep {f}:4:1"


# ---------------------------------------------------------------------------
# Module names
# ---------------------------------------------------------------------------

def test_module_name_for_package_file(tmp_path):
    _write(tmp_path / "pkg" / "__init__.py", "")
    _write(tmp_path / "pkg" / "sub" / "__init__.py", "")
    mod = _write(tmp_path / "pkg" / "sub" / "mod.py", "x = 1\n")
    assert module_name_for(mod) == "pkg.sub.mod"


def test_module_name_for_package_init(tmp_path):
    init = _write(tmp_path / "pkg" / "__init__.py", "")
    assert module_name_for(init) == "pkg"


def test_module_name_for_loose_script(tmp_path):
    script = _write(tmp_path / "tool.py", "x = 1\n")
    assert module_name_for(script) == "tool"


# ---------------------------------------------------------------------------
# Parse failures
# ---------------------------------------------------------------------------

def test_syntax_error_raises_with_location(tmp_path):
    f = _write(tmp_path / "bad.py", """
        def f(:
            pass
    """)
    with pytest.raises(SourceParseError) as exc:
        parse_python(f)
    assert exc.value.path == f
    assert exc.value.message.startswith(f"{f}:1:")


def test_missing_file_raises(tmp_path):
    with pytest.raises(SourceParseError):
        parse_python(tmp_path / "missing.py")


def test_null_bytes_raise(tmp_path):
    f = tmp_path / "nul.py"
    f.write_bytes(b"x = 1\x00\n")
    with pytest.raises(SourceParseError):
        parse_python(f)


# ---------------------------------------------------------------------------
# Block structure
# ---------------------------------------------------------------------------

def test_span_relations():
    outer = Span(start=(1, 4), end=(9, 10))
    inner = Span(start=(2, 8), end=(3, 5))
    later = Span(start=(10, 4), end=(12, 1))
    assert outer.contains(inner)
    assert not inner.contains(outer)
    assert later.follows(outer)
    assert not inner.follows(outer)


def test_iter_children_presents_suites_as_blocks():
    import ast

    stmt = ast.parse(textwrap.dedent("""
        if a:
            x()
        elif b:
            y()
        else:
            z()
    """)).body[0]
    body, chained = list(iter_children(stmt))
    assert isinstance(body, Block)
    assert isinstance(chained, ast.If)
    assert body.span == suite_span(stmt.body)
    chained_body, orelse = list(iter_children(chained))
    assert isinstance(chained_body, Block) and isinstance(orelse, Block)
    assert orelse.span.follows(chained_body.span)


def test_match_cases_are_yielded_as_is():
    import ast

    stmt = ast.parse(textwrap.dedent("""
        match v:
            case 1:
                x()
            case _:
                y()
    """)).body[0]
    cases = list(iter_children(stmt))
    assert all(isinstance(c, ast.match_case) for c in cases)
    first_body, second_body = (next(iter_children(c)) for c in cases)
    assert isinstance(first_body, Block) and isinstance(second_body, Block)
    assert second_body.span.follows(first_body.span)
