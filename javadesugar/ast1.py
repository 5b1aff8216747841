from .errors import TreeError


class Node:
    fields = ()     # filhos: nó, lista de nós ou None
    attrs = ()      # atributos escalares mostrados pelo printer
    line = None

    def describe(self):
        return [(name, getattr(self, name)) for name in self.attrs]

    def __repr__(self):
        desc = ", ".join(f"{name}={value!r}" for name, value in self.describe())
        return f"{type(self).__name__}({desc})"


#
# Unidade de compilação e declarações
#

class CompilationUnit(Node):
    fields = ('imports', 'types')
    attrs = ('package',)

    def __init__(self, package, imports, types):
        self.package = package    # nome qualificado ou None
        self.imports = imports or []
        self.types = types or []

class ImportDecl(Node):
    attrs = ('name', 'static', 'asterisk')

    def __init__(self, name, static=False, asterisk=False):
        self.name = name
        self.static = static
        self.asterisk = asterisk  # import java.util.*;

class ClassDecl(Node):
    fields = ('extends', 'implements', 'members')
    attrs = ('modifiers', 'kind', 'name', 'type_params')

    def __init__(self, modifiers, kind, name, type_params, extends, implements, members):
        self.modifiers = modifiers or []
        self.kind = kind          # 'class' ou 'interface'
        self.name = name
        self.type_params = type_params or []  # lista de strings
        self.extends = extends or []          # lista de Type
        self.implements = implements or []
        self.members = members or []

class FieldDecl(Node):
    fields = ('type', 'declarators')
    attrs = ('modifiers',)

    def __init__(self, modifiers, type_, declarators):
        self.modifiers = modifiers or []
        self.type = type_
        self.declarators = declarators

class MethodDecl(Node):
    fields = ('type', 'params', 'throws', 'body')
    attrs = ('modifiers', 'type_params', 'name')

    def __init__(self, modifiers, type_params, type_, name, params, throws, body):
        self.modifiers = modifiers or []
        self.type_params = type_params or []
        self.type = type_         # Type('void') para procedimentos
        self.name = name
        self.params = params or []
        self.throws = throws or []
        self.body = body          # Block ou None (métodos abstratos)

class ConstructorDecl(Node):
    fields = ('params', 'throws', 'body')
    attrs = ('modifiers', 'name')

    def __init__(self, modifiers, name, params, throws, body):
        self.modifiers = modifiers or []
        self.name = name
        self.params = params or []
        self.throws = throws or []
        self.body = body

class Initializer(Node):
    fields = ('body',)
    attrs = ('static',)

    def __init__(self, static, body):
        self.static = static
        self.body = body

class Parameter(Node):
    fields = ('type',)
    attrs = ('modifiers', 'name', 'varargs')

    def __init__(self, modifiers, type_, name, varargs=False):
        self.modifiers = modifiers or []
        self.type = type_
        self.name = name
        self.varargs = varargs

class VarDeclarator(Node):
    fields = ('init',)
    attrs = ('name', 'dims')

    def __init__(self, name, dims=0, init=None):
        self.name = name
        self.dims = dims          # int x[] -> 1
        self.init = init


#
# Tipos
#

class Type(Node):
    fields = ('args',)
    attrs = ('name', 'dims')

    def __init__(self, name, args=None, dims=0):
        self.name = name          # 'int', 'String', 'java.util.Iterator', ...
        self.args = args          # None: sem argumentos; []: diamante <>
        self.dims = dims

class WildcardType(Node):
    fields = ('bound',)
    attrs = ('bound_kind',)

    def __init__(self, bound_kind=None, bound=None):
        self.bound_kind = bound_kind  # None, 'extends' ou 'super'
        self.bound = bound


#
# Instruções
#

class Block(Node):
    fields = ('statements',)
    synthetic = False     # True nos blocos criados por uma reescrita de ciclo

    def __init__(self, statements=None):
        self.statements = statements if statements is not None else []

class LocalVarDecl(Node):
    fields = ('type', 'declarators')
    attrs = ('modifiers',)

    def __init__(self, modifiers, type_, declarators):
        self.modifiers = modifiers or []
        self.type = type_
        self.declarators = declarators  # lista de VarDeclarator

class ExprStmt(Node):
    fields = ('expr',)

    def __init__(self, expr):
        self.expr = expr

class If(Node):
    fields = ('cond', 'thenstmt', 'elsestmt')

    def __init__(self, cond, thenstmt, elsestmt=None):
        self.cond = cond
        self.thenstmt = thenstmt
        self.elsestmt = elsestmt

class While(Node):
    fields = ('cond', 'body')

    def __init__(self, cond, body):
        self.cond = cond
        self.body = body

class DoWhile(Node):
    fields = ('body', 'cond')

    def __init__(self, body, cond):
        self.body = body
        self.cond = cond

class For(Node):
    fields = ('init', 'cond', 'update', 'body')

    def __init__(self, init, cond, update, body):
        self.init = init or []    # expressões ou um único LocalVarDecl
        self.cond = cond          # None: for(;;)
        self.update = update or []
        self.body = body

class ForEach(Node):
    fields = ('var', 'iterable', 'body')

    def __init__(self, var, iterable, body):
        self.var = var            # LocalVarDecl com um só declarador, sem init
        self.iterable = iterable
        self.body = body

class Return(Node):
    fields = ('expr',)

    def __init__(self, expr=None):
        self.expr = expr

class Break(Node):
    attrs = ('label',)

    def __init__(self, label=None):
        self.label = label

class Continue(Node):
    attrs = ('label',)

    def __init__(self, label=None):
        self.label = label

class Throw(Node):
    fields = ('expr',)

    def __init__(self, expr):
        self.expr = expr

class Try(Node):
    fields = ('block', 'catches', 'finally_block')

    def __init__(self, block, catches, finally_block=None):
        self.block = block
        self.catches = catches or []
        self.finally_block = finally_block

class CatchClause(Node):
    fields = ('types', 'body')
    attrs = ('modifiers', 'name')

    def __init__(self, modifiers, types, name, body):
        self.modifiers = modifiers or []
        self.types = types        # multi-catch: catch (A | B e)
        self.name = name
        self.body = body

class Labeled(Node):
    fields = ('body',)
    attrs = ('label',)

    def __init__(self, label, body):
        self.label = label
        self.body = body

class EmptyStmt(Node):
    pass


#
# Expressões
#

class Literal(Node):
    attrs = ('value', 'kind')

    def __init__(self, value, kind):
        self.value = value
        self.kind = kind          # int, long, float, double, char, string, boolean, null

class Name(Node):
    attrs = ('name',)

    def __init__(self, name):
        self.name = name

class This(Node):
    pass

class Super(Node):
    pass

class Parens(Node):
    fields = ('expr',)

    def __init__(self, expr):
        self.expr = expr

class FieldAccess(Node):
    fields = ('target',)
    attrs = ('name',)

    def __init__(self, target, name):
        self.target = target
        self.name = name

class ArrayAccess(Node):
    fields = ('target', 'index')

    def __init__(self, target, index):
        self.target = target
        self.index = index

class MethodCall(Node):
    fields = ('target', 'args')
    attrs = ('name',)

    def __init__(self, target, name, args=None):
        self.target = target      # None: chamada sem qualificação
        self.name = name
        self.args = args or []

class ObjectCreation(Node):
    fields = ('type', 'args')

    def __init__(self, type_, args=None):
        self.type = type_
        self.args = args or []

class ArrayCreation(Node):
    fields = ('type', 'dim_exprs', 'init')
    attrs = ('extra_dims',)

    def __init__(self, type_, dim_exprs, extra_dims=0, init=None):
        self.type = type_         # tipo dos elementos
        self.dim_exprs = dim_exprs or []
        self.extra_dims = extra_dims  # new int[3][] -> 1
        self.init = init

class ArrayInit(Node):
    fields = ('values',)

    def __init__(self, values):
        self.values = values or []

class Assign(Node):
    fields = ('target', 'expr')
    attrs = ('op',)

    def __init__(self, op, target, expr):
        self.op = op              # '=', '+=', '>>>=', ...
        self.target = target
        self.expr = expr

class BinOp(Node):
    fields = ('left', 'right')
    attrs = ('op',)

    def __init__(self, op, left, right):
        self.op = op
        self.left = left
        self.right = right

class UnOp(Node):
    fields = ('expr',)
    attrs = ('op', 'postfix')

    def __init__(self, op, expr, postfix=False):
        self.op = op
        self.expr = expr
        self.postfix = postfix

class Conditional(Node):
    fields = ('cond', 'thenexpr', 'elseexpr')

    def __init__(self, cond, thenexpr, elseexpr):
        self.cond = cond
        self.thenexpr = thenexpr
        self.elseexpr = elseexpr

class Cast(Node):
    fields = ('type', 'expr')

    def __init__(self, type_, expr):
        self.type = type_
        self.expr = expr

class InstanceOf(Node):
    fields = ('expr', 'type')

    def __init__(self, expr, type_):
        self.expr = expr
        self.type = type_


LOOPS = (While, DoWhile, For, ForEach)


#
# Percurso da árvore
#

class Location:
    """Posição de um nó na árvore: o pai, o campo e o índice (se o campo for lista).

    `up` é a Location do pai; a raiz tem parent None.
    """

    def __init__(self, node, parent=None, field=None, index=None, up=None):
        self.node = node
        self.parent = parent
        self.field = field
        self.index = index
        self.up = up

    def current(self):
        slot = getattr(self.parent, self.field)
        if self.index is None:
            return slot
        return slot[self.index] if self.index < len(slot) else None

    def __repr__(self):
        where = f"{type(self.parent).__name__}.{self.field}" if self.parent is not None else "raiz"
        if self.index is not None:
            where += f"[{self.index}]"
        return f"<Location {type(self.node).__name__} em {where}>"


def child_locations(loc):
    node = loc.node
    for field in node.fields:
        value = getattr(node, field)
        if isinstance(value, list):
            for i, child in enumerate(value):
                if isinstance(child, Node):
                    yield Location(child, node, field, i, loc)
        elif isinstance(value, Node):
            yield Location(value, node, field, None, loc)


def walk(root):
    """Percorre a árvore em pré-ordem (pais antes dos filhos, irmãos da esquerda para a direita)."""
    stack = [Location(root)]
    while stack:
        loc = stack.pop()
        yield loc
        stack.extend(reversed(list(child_locations(loc))))


def find_all(root, *kinds):
    return [loc for loc in walk(root) if isinstance(loc.node, kinds)]


def replace_at(root, loc, new):
    """Substitui o nó em `loc` por `new` e devolve a raiz (que muda se `loc` for a raiz)."""
    if loc.parent is None:
        if loc.node is not root:
            raise TreeError(f"{loc!r} não é a raiz da árvore")
        return new
    if loc.current() is not loc.node:
        raise TreeError(f"posição desatualizada: {loc!r} já não contém {type(loc.node).__name__}")
    if loc.index is None:
        setattr(loc.parent, loc.field, new)
    else:
        getattr(loc.parent, loc.field)[loc.index] = new
    return root
