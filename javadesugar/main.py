import argparse
import sys

from .anasin import parse
from .codegen_java import generate_java
from .desugar import desugar, desugar_for_each_loops, desugar_for_loops
from .errors import CompilerError
from .interp import MAX_STEPS, run
from .printer import DEFAULT_TAB_SIZE, AstPrinter

SEPARATOR = "-" * 40


def _read_sources(files):
    if not files:
        yield "<stdin>", sys.stdin.read()
        return
    for path in files:
        with open(path, encoding="utf-8") as f:
            yield path, f.read()


def _parse(name, data, verbose=False):
    try:
        cu = parse(data)
    except CompilerError as e:
        e.file = name
        raise
    if verbose:
        print(f"{name}: análise sintática concluída com sucesso.", file=sys.stderr)
    return cu


def cmd_dump(args: argparse.Namespace) -> int:
    printer = AstPrinter(args.tab_size)
    for name, data in _read_sources(args.files):
        print(printer.dump(_parse(name, data, args.verbose)))
    return 0


def cmd_desugar(args: argparse.Namespace) -> int:
    printer = AstPrinter(args.tab_size)
    for name, data in _read_sources(args.files):
        cu = _parse(name, data, args.verbose)
        if not args.no_dump:
            print(printer.dump(cu))
            print(SEPARATOR)
        if args.only in (None, "for"):
            cu = desugar_for_loops(cu)
        if args.only in (None, "foreach"):
            cu = desugar_for_each_loops(cu)
        print(generate_java(cu))
        if not args.no_dump:
            print(SEPARATOR)
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    name, data = next(_read_sources([args.file] if args.file else []))
    cu = _parse(name, data, args.verbose)
    if args.desugar:
        cu = desugar(cu)
    sys.stdout.write(run(cu, args.method, args.class_name, args.max_steps))
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="javadesugar",
                                 description="Mostra e transforma a árvore sintática de programas Java")
    ap.add_argument("-v", "--verbose", action="store_true", help="Mensagens de progresso em stderr")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_dump = sub.add_parser("dump", help="Mostra a árvore sintática")
    p_dump.add_argument("files", nargs="*", help="Ficheiros .java (stdin se omitido)")
    p_dump.add_argument("--tab-size", type=int, default=DEFAULT_TAB_SIZE, help="Espaços por nível")
    p_dump.set_defaults(func=cmd_dump)

    p_des = sub.add_parser("desugar", help="Reescreve os ciclos for e for-each como while")
    p_des.add_argument("files", nargs="*", help="Ficheiros .java (stdin se omitido)")
    p_des.add_argument("--tab-size", type=int, default=4, help="Espaços por nível da árvore")
    p_des.add_argument("--no-dump", action="store_true", help="Mostra só o código transformado")
    p_des.add_argument("--only", choices=["for", "foreach"], default=None,
                       help="Aplica apenas uma das transformações")
    p_des.set_defaults(func=cmd_desugar)

    p_run = sub.add_parser("run", help="Interpreta o programa e mostra a saída")
    p_run.add_argument("file", nargs="?", help="Ficheiro .java (stdin se omitido)")
    p_run.add_argument("--method", default="main", help="Método de entrada")
    p_run.add_argument("--class", dest="class_name", default=None, help="Classe de entrada")
    p_run.add_argument("--desugar", action="store_true", help="Transforma os ciclos antes de executar")
    p_run.add_argument("--max-steps", type=int, default=MAX_STEPS, help="Limite de passos do interpretador")
    p_run.set_defaults(func=cmd_run)
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return int(args.func(args))
    except CompilerError as e:
        print(f"erro: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"erro: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
