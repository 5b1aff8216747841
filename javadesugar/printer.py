import sys

from .ast1 import Location, child_locations

DEFAULT_TAB_SIZE = 2


def format_value(value):
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, list):
        return '[' + ', '.join(str(v) for v in value) + ']'
    return str(value)


class AstPrinter:
    """Mostra a árvore com um nó por linha, indentado pela profundidade.

    Cada linha tem o nome da classe do nó seguido dos seus atributos
    escalares (`attrs`): `For`, `Name name="x"`, `Type name="int"`, ...
    """

    def __init__(self, tab_size=DEFAULT_TAB_SIZE):
        self.tab_size = tab_size

    def describe(self, node):
        desc = [type(node).__name__]
        for name, value in node.describe():
            if value is None or value == []:
                continue
            if name == 'dims' and value == 0:
                continue
            desc.append(f"{name}={format_value(value)}")
        return ' '.join(desc)

    def lines(self, node, indentation=0):
        yield ' ' * indentation + self.describe(node)
        for child in child_locations(Location(node)):
            yield from self.lines(child.node, indentation + self.tab_size)

    def dump(self, node, indentation=0):
        return '\n'.join(self.lines(node, indentation))


def print_tree(node, tab_size=DEFAULT_TAB_SIZE, out=None):
    out = out or sys.stdout
    print(AstPrinter(tab_size).dump(node), file=out)
