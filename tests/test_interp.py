import pytest

from javadesugar.anasin import parse
from javadesugar.desugar import desugar
from javadesugar.errors import InterpreterError
from javadesugar.interp import JavaChar, run, to_string


def test_sample_program(sample_source):
    out = run(sample_source).splitlines()
    assert out[:4] == ['0', '1', '2', 'fee fi fo fum']
    assert out[-4:] == ['forever', 'and ever', 'and ever', 'and ever']


def test_sample_program_after_desugaring(sample_source):
    assert run(desugar(parse(sample_source))) == run(sample_source)


LOOPS = {
    'simple': (
        "for (int x = 0; x < 3; x++) System.out.println(x);",
        "0\n1\n2\n",
    ),
    'multiple': (
        'for (int x = 10, y = 1; x > 0 && y < 100; x--, y *= 2) System.out.println(x + "," + y);',
        "10,1\n9,2\n8,4\n7,8\n6,16\n5,32\n4,64\n",
    ),
    'poem': (
        """
        StringBuilder poem = new StringBuilder();
        for (String s : List.of("fee", "fi", "fo", "fum")) {
            if (poem.length() > 0) poem.append(" ");
            poem.append(s);
        }
        System.out.println(poem);
        """,
        "fee fi fo fum\n",
    ),
    'continue': (
        "for (int i = 0; i < 6; i++) { if (i % 2 == 0) continue; System.out.println(i); }",
        "1\n3\n5\n",
    ),
    'labeled continue': (
        """
        outer: for (int i = 0; i < 3; i++) {
            for (int j = 0; j < 3; j++) {
                if (j > i) continue outer;
                System.out.println(i + "" + j);
            }
        }
        """,
        "00\n10\n11\n20\n21\n22\n",
    ),
    'forever': (
        'int n = 0; for (;;) { if (n == 3) break; System.out.println("and ever"); n++; }',
        "and ever\nand ever\nand ever\n",
    ),
    'break and continue': (
        """
        for (String s : List.of("a", "b", "c", "d")) {
            if (s.equals("b")) continue;
            if (s.equals("d")) break;
            System.out.println(s);
        }
        """,
        "a\nc\n",
    ),
    'labeled for-each': (
        """
        L: for (String s : List.of("x", "y")) {
            for (int i = 0; i < 3; i++) {
                if (i == 1) continue L;
                System.out.println(s + i);
            }
        }
        """,
        "x0\ny0\n",
    ),
    'nested': (
        """
        int count = 0;
        for (int x = 10, y = 1; x > 0 && y < 100; x--, y *= 2)
            for (int z = x; z < y; z++)
                count++;
        System.out.println(count);
        """,
        "98\n",
    ),
}


@pytest.mark.parametrize("name", sorted(LOOPS))
def test_desugaring_keeps_behaviour(name, make_program):
    body, expected = LOOPS[name]
    src = make_program(body)
    assert run(src) == expected
    assert run(desugar(parse(src))) == expected


def test_outer_update_is_not_captured_by_inner_declaration():
    src = """
        public class Main {
            static int z = 100;

            public static void main(String[] args) {
                for (int i = 0; i < 2; i++, z++)
                    for (int z = 0; z < 1; z++)
                        System.out.println(z);
                System.out.println(z);
            }
        }
    """
    assert run(src) == "0\n0\n102\n"
    assert run(desugar(parse(src))) == "0\n0\n102\n"


def test_for_each_over_array(make_program):
    # arrays não têm iterator(): a forma reescrita não é Java válido
    src = make_program("int[] xs = {1, 2, 3}; int total = 0; for (int v : xs) total += v; System.out.println(total);")
    assert run(src) == "6\n"
    with pytest.raises(InterpreterError) as exc:
        run(desugar(parse(src)))
    assert "iterator" in str(exc.value)


def test_integer_arithmetic(make_program):
    src = make_program("System.out.println(-7 / 2); System.out.println(-7 % 2); System.out.println(7 / 2.0);")
    assert run(src) == "-3\n-1\n3.5\n"


def test_division_by_zero_is_an_exception(make_program):
    src = make_program("""
        try {
            int x = 1 / 0;
        } catch (ArithmeticException e) {
            System.out.println(e.getMessage());
        }
    """)
    assert run(src) == "/ by zero\n"


def test_try_catch_finally(make_program):
    src = make_program("""
        try {
            throw new IllegalStateException("boom");
        } catch (RuntimeException e) {
            System.out.println(e.getMessage());
        } finally {
            System.out.println("done");
        }
    """)
    assert run(src) == "boom\ndone\n"


def test_uncaught_exception(make_program):
    with pytest.raises(InterpreterError) as exc:
        run(make_program('throw new RuntimeException("x");'))
    assert "RuntimeException: x" in str(exc.value)


def test_objects_and_fields():
    src = """
        class Counter {
            private int n = 0;
            void inc() { n += 1; }
            int get() { return n; }
        }

        public class Main {
            public static void main(String[] args) {
                Counter c = new Counter();
                for (int i = 0; i < 4; i++) c.inc();
                System.out.println(c.get());
            }
        }
    """
    assert run(src) == "4\n"


def test_static_methods_and_recursion():
    src = """
        public class Main {
            static int calls;

            static int fact(int n) {
                calls++;
                return n <= 1 ? 1 : n * fact(n - 1);
            }

            public static void main(String[] args) {
                System.out.println(fact(5));
                System.out.println(calls);
            }
        }
    """
    assert run(src) == "120\n5\n"


def test_chars_and_strings(make_program):
    src = make_program("""
        String word = "abc";
        StringBuilder sb = new StringBuilder();
        for (int i = word.length() - 1; i >= 0; i--) sb.append(word.charAt(i));
        char c = 'a';
        c++;
        System.out.println(sb.toString() + c);
    """)
    assert run(src) == "cbab\n"


def test_lists(make_program):
    src = make_program("""
        List<Integer> xs = new ArrayList<>();
        for (int i = 0; i < 3; i++) xs.add(i * i);
        System.out.println(xs);
        System.out.println(xs.size() + " " + xs.get(2));
    """)
    assert run(src) == "[0, 1, 4]\n3 4\n"


def test_immutable_list(make_program):
    with pytest.raises(InterpreterError) as exc:
        run(make_program('List.of(1).add(2);'))
    assert "UnsupportedOperationException" in str(exc.value)


def test_step_limit(make_program):
    with pytest.raises(InterpreterError) as exc:
        run(make_program("for (;;) {}"), max_steps=1000)
    assert "1000" in str(exc.value)


def test_entry_point_selection():
    src = """
        class A { static void go() { System.out.println("A"); } }
        class B { static void go() { System.out.println("B"); } }
    """
    assert run(src, method='go') == "A\n"
    assert run(src, method='go', class_name='B') == "B\n"
    with pytest.raises(InterpreterError):
        run(src, method='missing')


def test_to_string():
    assert to_string(None) == 'null'
    assert to_string(True) == 'true'
    assert to_string(1.0) == '1.0'
    assert to_string(1e20) == '1.0E20'
    assert to_string(JavaChar('x')) == 'x'
