import io
import textwrap

import pytest

from javadesugar.main import SEPARATOR, main

FOO = textwrap.dedent("""\
    class Foo {
        static void bar() {
            for (int x = 0; x < 3; x++) {
                System.out.println(x);
            }
        }

        public static void main(String[] args) {
            bar();
        }
    }
""")

DESUGARED = textwrap.dedent("""\
    class Foo {
        static void bar() {
            {
                int x = 0;
                while (x < 3) {
                    System.out.println(x);
                    x++;
                }
            }
        }

        public static void main(String[] args) {
            bar();
        }
    }
""")


@pytest.fixture
def foo_file(tmp_path):
    path = tmp_path / "Foo.java"
    path.write_text(FOO, encoding="utf-8")
    return str(path)


def test_desugar_without_dump(foo_file, capsys):
    assert main(["desugar", "--no-dump", foo_file]) == 0
    assert capsys.readouterr().out == DESUGARED


def test_desugar_with_dump(foo_file, capsys):
    assert main(["desugar", foo_file]) == 0
    out = capsys.readouterr().out
    dump, java, rest = out.split(SEPARATOR + "\n")
    assert dump.startswith("CompilationUnit\n")
    assert '        For\n' in dump
    assert java == DESUGARED
    assert rest == ""


def test_desugar_only_for_each(foo_file, capsys):
    assert main(["desugar", "--no-dump", "--only", "foreach", foo_file]) == 0
    assert "for (int x = 0; x < 3; x++) {" in capsys.readouterr().out


def test_dump(foo_file, capsys):
    assert main(["dump", "--tab-size", "1", foo_file]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "CompilationUnit"
    assert lines[1] == ' ClassDecl kind="class" name="Foo"'


def test_run(foo_file, capsys):
    assert main(["run", foo_file]) == 0
    assert capsys.readouterr().out == "0\n1\n2\n"
    assert main(["run", "--desugar", "--method", "bar", foo_file]) == 0
    assert capsys.readouterr().out == "0\n1\n2\n"


def test_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(FOO))
    assert main(["desugar", "--no-dump"]) == 0
    assert capsys.readouterr().out == DESUGARED


def test_verbose(foo_file, capsys):
    assert main(["-v", "dump", foo_file]) == 0
    assert "análise sintática concluída com sucesso." in capsys.readouterr().err


def test_syntax_error(tmp_path, capsys):
    path = tmp_path / "Bad.java"
    path.write_text("class {", encoding="utf-8")
    assert main(["desugar", str(path)]) == 1
    err = capsys.readouterr().err
    assert err.startswith("erro: ")
    assert f"{path}:1:7:" in err


def test_missing_file(tmp_path, capsys):
    assert main(["dump", str(tmp_path / "nope.java")]) == 1
    assert "erro:" in capsys.readouterr().err


def test_runtime_error(tmp_path, capsys):
    path = tmp_path / "Loop.java"
    path.write_text("class L { static void main() { for (;;) {} } }", encoding="utf-8")
    assert main(["run", "--max-steps", "100", str(path)]) == 1
    assert "100" in capsys.readouterr().err


def test_bad_arguments():
    with pytest.raises(SystemExit) as exc:
        main(["desugar", "--only", "while"])
    assert exc.value.code == 2
