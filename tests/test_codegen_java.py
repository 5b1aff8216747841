import textwrap

import pytest

from javadesugar.anasin import parse, parse_expression, parse_statement
from javadesugar.ast1 import *
from javadesugar.codegen_java import generate_java
from javadesugar.desugar import desugar, desugar_for_each_loops, desugar_for_loops


def java(text):
    return textwrap.dedent(text).strip('\n')


def test_parentheses_follow_precedence():
    a, b, c = Name('a'), Name('b'), Name('c')
    assert generate_java(BinOp('*', BinOp('+', a, b), c)) == "(a + b) * c"
    assert generate_java(BinOp('-', a, BinOp('-', b, c))) == "a - (b - c)"
    assert generate_java(BinOp('-', BinOp('-', a, b), c)) == "a - b - c"
    assert generate_java(UnOp('-', UnOp('-', a))) == "- -a"
    assert generate_java(FieldAccess(BinOp('+', a, b), 'x')) == "(a + b).x"


@pytest.mark.parametrize("src", [
    'x = y += 2',
    'a ? b : c ? d : e',
    '(int) x / 2',
    '!(a && b)',
    'new int[3][]',
    'new int[] {1, 2}',
    'list.get(i).name',
    'o instanceof String',
    "c == '\\''",
    '"a\\"b\\n"',
    '10L + 1.5f + 2.0',
    'x >>>= 1',
    'i++ + ++j',
])
def test_expressions_round_trip(src):
    assert generate_java(parse_expression(src)) == src


@pytest.mark.parametrize("src", [
    """
    for (int x = 0; x < 10; x++) {
        work(x);
    }
    """,
    """
    for (;;) {
    }
    """,
    """
    if (a) {
        f();
    } else if (b) {
        g();
    } else {
        h();
    }
    """,
    """
    outer: while (true) {
        break outer;
    }
    """,
    """
    do {
        i++;
    } while (i < 3);
    """,
    """
    try {
        f();
    } catch (IOException | RuntimeException e) {
        g();
    } finally {
        h();
    }
    """,
    """
    for (String s : xs)
        System.out.println(s);
    """,
])
def test_statements_round_trip(src):
    assert generate_java(parse_statement(java(src))) == java(src)


def test_dangling_else_keeps_its_owner():
    stmt = If(Name('a'), If(Name('b'), ExprStmt(MethodCall(None, 'f'))), ExprStmt(MethodCall(None, 'g')))
    assert generate_java(stmt) == java("""
        if (a) {
            if (b)
                f();
        } else
            g();
    """)


def test_class_round_trip():
    src = java("""
        package demo;

        import java.util.*;
        import static java.lang.Math.max;

        public class Point<T> extends Base implements Comparable<Point<T>> {
            private int x, y = 2;

            static {
                count = 0;
            }

            Point(int x) {
                this(x, 0);
            }

            abstract void draw(String... parts);

            public int compareTo(Point<T> other) throws Exception {
                return x - other.x;
            }
        }
    """)
    assert generate_java(parse(src)) == src


FOO = java("""
    class Foo {
        void bar() {
            for (int x = 0; x < 100; x++) {
                System.out.println(x);
            }
        }
    }
""")


def test_desugared_for():
    assert generate_java(desugar_for_loops(parse(FOO))) == java("""
        class Foo {
            void bar() {
                {
                    int x = 0;
                    while (x < 100) {
                        System.out.println(x);
                        x++;
                    }
                }
            }
        }
    """)


def test_desugared_for_each():
    stmt = parse_statement('for (String s : List.of("fee", "fi")) { poem.append(s); }')
    assert generate_java(desugar_for_each_loops(stmt)) == java("""
        {
            java.util.Iterator<String> sIter = List.of("fee", "fi").iterator();
            while (sIter.hasNext()) {
                String s = sIter.next();
                poem.append(s);
            }
        }
    """)


def test_desugared_forever():
    assert generate_java(desugar(parse_statement('for (;;) print("x");'))) == java("""
        {
            while (true) {
                print("x");
            }
        }
    """)


def test_desugared_continue():
    stmt = parse_statement("for (int i = 0; i < 5; i++) { if (i % 2 == 0) continue; show(i); }")
    assert generate_java(desugar(stmt)) == java("""
        {
            int i = 0;
            while (i < 5) {
                forBody0: {
                    if (i % 2 == 0)
                        break forBody0;
                    show(i);
                }
                i++;
            }
        }
    """)


def test_desugared_labeled_loop():
    stmt = parse_statement("outer: for (int i = 0; i < 3; i++) f(i);")
    assert generate_java(desugar(stmt)) == java("""
        {
            int i = 0;
            outer: while (i < 3) {
                f(i);
                i++;
            }
        }
    """)
