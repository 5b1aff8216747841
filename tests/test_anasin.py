import pytest

from javadesugar.anasin import parse, parse_expression, parse_statement, parse_statements
from javadesugar.ast1 import *
from javadesugar.errors import ParseError


def test_compilation_unit(sample_source):
    cu = parse(sample_source)
    assert len(cu.imports) == 1
    imp = cu.imports[0]
    assert (imp.name, imp.static, imp.asterisk) == ('java.util', False, True)
    foo = cu.types[0]
    assert isinstance(foo, ClassDecl)
    assert foo.name == 'Foo'
    assert foo.modifiers == ['public']
    assert [m.name for m in foo.members] == ['bar', 'main']
    main = foo.members[1]
    assert main.params[0].type.name == 'String'
    assert main.params[0].type.dims == 1


def test_sample_loops(sample_source):
    bar = parse(sample_source).types[0].members[0]
    stmts = bar.body.statements
    first = stmts[0]
    assert isinstance(first, For)
    assert isinstance(first.init[0], LocalVarDecl)
    assert isinstance(first.cond, BinOp) and first.cond.op == '<'
    assert isinstance(first.update[0], UnOp) and first.update[0].postfix

    each = stmts[2]
    assert isinstance(each, ForEach)
    assert each.var.type.name == 'String'
    assert each.var.declarators[0].name == 's'
    assert isinstance(each.iterable, MethodCall)
    assert each.iterable.name == 'of'
    assert len(each.iterable.args) == 4

    multi = stmts[4]
    assert [d.name for d in multi.init[0].declarators] == ['x', 'y']
    assert isinstance(multi.update[0], UnOp)
    assert isinstance(multi.update[1], Assign) and multi.update[1].op == '*='
    assert isinstance(multi.body, For)

    forever = stmts[7]
    assert isinstance(forever, For)
    assert forever.init == [] and forever.cond is None and forever.update == []


def test_statement_lines(sample_source):
    bar = parse(sample_source).types[0].members[0]
    assert bar.body.statements[0].line == 5


def test_generic_types():
    stmt = parse_statement("Map<String, List<Integer>> m = new HashMap<>();")
    assert isinstance(stmt, LocalVarDecl)
    args = stmt.type.args
    assert [a.name for a in args] == ['String', 'List']
    assert args[1].args[0].name == 'Integer'
    init = stmt.declarators[0].init
    assert isinstance(init, ObjectCreation)
    assert init.type.args == []


def test_wildcards():
    stmt = parse_statement("List<? extends Number> xs = null;")
    wild = stmt.type.args[0]
    assert isinstance(wild, WildcardType)
    assert wild.bound_kind == 'extends'
    assert wild.bound.name == 'Number'


def test_declaration_or_expression():
    stmt = parse_statement("a[i] = b < c;")
    assert isinstance(stmt, ExprStmt)
    assert isinstance(stmt.expr, Assign)
    assert isinstance(stmt.expr.target, ArrayAccess)
    assert isinstance(stmt.expr.expr, BinOp) and stmt.expr.expr.op == '<'

    stmt = parse_statement("int[] xs = {1, 2, 3};")
    assert isinstance(stmt, LocalVarDecl)
    assert stmt.type.dims == 1
    assert isinstance(stmt.declarators[0].init, ArrayInit)

    stmt = parse_statement("final int y = 2;")
    assert stmt.modifiers == ['final']


def test_shift_operators():
    expr = parse_expression("a >> 2 >>> 1")
    assert expr.op == '>>>'
    assert expr.left.op == '>>'

    expr = parse_expression("x >>= 1")
    assert isinstance(expr, Assign) and expr.op == '>>='

    expr = parse_expression("x >>>= 1")
    assert isinstance(expr, Assign) and expr.op == '>>>='

    expr = parse_expression("a > b")
    assert expr.op == '>'


def test_spaced_greater_than_is_not_a_shift():
    with pytest.raises(ParseError):
        parse_expression("a > > b")


def test_nested_generic_closing():
    stmt = parse_statement("List<List<String>> xs;")
    assert stmt.type.args[0].args[0].name == 'String'


def test_casts_and_parentheses():
    expr = parse_expression("(String) o")
    assert isinstance(expr, Cast) and expr.type.name == 'String'

    expr = parse_expression("(a) + b")
    assert isinstance(expr, BinOp)
    assert isinstance(expr.left, Parens)

    expr = parse_expression("(int) x / 2")
    assert isinstance(expr, BinOp) and expr.op == '/'
    assert isinstance(expr.left, Cast)


def test_precedence():
    expr = parse_expression("a + b * c == d && !e")
    assert expr.op == '&&'
    assert expr.left.op == '=='
    assert expr.left.left.op == '+'
    assert expr.left.left.right.op == '*'
    assert isinstance(expr.right, UnOp) and expr.right.op == '!'


def test_conditional_is_right_associative():
    expr = parse_expression("a ? b : c ? d : e")
    assert isinstance(expr, Conditional)
    assert isinstance(expr.elseexpr, Conditional)


def test_instanceof():
    expr = parse_expression("o instanceof String && x")
    assert isinstance(expr.left, InstanceOf)


def test_labeled_statement():
    stmt = parse_statement("outer: for (;;) break outer;")
    assert isinstance(stmt, Labeled) and stmt.label == 'outer'
    assert isinstance(stmt.body, For)
    assert isinstance(stmt.body.body, Break)
    assert stmt.body.body.label == 'outer'


def test_for_each_with_qualified_generic_type():
    stmt = parse_statement("for (Map.Entry<String, Integer> e : m.entrySet()) f(e);")
    assert isinstance(stmt, ForEach)
    assert stmt.var.type.name == 'Map.Entry'
    assert len(stmt.var.type.args) == 2


def test_for_with_expression_init():
    stmt = parse_statement("for (i = 0, j = 1; i < j; i++) f();")
    assert isinstance(stmt, For)
    assert [type(e).__name__ for e in stmt.init] == ['Assign', 'Assign']


def test_try_catch_finally():
    stmt = parse_statement("try { f(); } catch (IOException | RuntimeException e) { g(); } finally { h(); }")
    assert isinstance(stmt, Try)
    assert [t.name for t in stmt.catches[0].types] == ['IOException', 'RuntimeException']
    assert stmt.finally_block is not None


def test_do_while_and_if_else():
    stmts = parse_statements("do { i++; } while (i < 3); if (a) f(); else if (b) g(); else h();")
    assert isinstance(stmts.statements[0], DoWhile)
    ifs = stmts.statements[1]
    assert isinstance(ifs, If)
    assert isinstance(ifs.elsestmt, If)
    assert isinstance(ifs.elsestmt.elsestmt, ExprStmt)


def test_members():
    cu = parse("""
        class Point<T extends Comparable<T>> extends Base implements A, B {
            private int x, y = 2;
            static { count = 0; }
            Point(int x) { this(x, 0); }
            abstract void draw(String... parts);
            @Override
            public String toString() { return "p"; }
        }
    """)
    cls = cu.types[0]
    assert cls.type_params == ['T extends Comparable<T>']
    assert [t.name for t in cls.implements] == ['A', 'B']
    kinds = [type(m).__name__ for m in cls.members]
    assert kinds == ['FieldDecl', 'Initializer', 'ConstructorDecl', 'MethodDecl', 'MethodDecl']
    assert cls.members[3].body is None
    assert cls.members[3].params[0].varargs
    assert cls.members[4].modifiers == ['@Override', 'public']


def test_syntax_errors():
    with pytest.raises(ParseError) as exc:
        parse("class A { void f() { int x = ; } }")
    assert exc.value.line == 1
    assert "esperava expressão" in exc.value.message

    with pytest.raises(ParseError) as exc:
        parse("class A {")
    assert "esperava '}'" in exc.value.message
    assert "fim do ficheiro" in exc.value.message


def test_unsupported_statements():
    with pytest.raises(ParseError):
        parse_statement("switch (x) {}")
    with pytest.raises(ParseError):
        parse_statement("try (Reader r = open()) { }")


def test_invalid_assignment_target():
    with pytest.raises(ParseError):
        parse_expression("f() = 1")
