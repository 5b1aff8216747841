import copy

from .ast1 import *

ITER_SUFFIX = "Iter"                  # for (Foo foo : xs) -> fooIter
ITERATOR_TYPE = "java.util.Iterator"
BODY_LABEL = "forBody"                # rótulo do corpo quando há 'continue'


# Gera rótulos únicos dentro de uma passagem
class LabelGen:
    def __init__(self):
        self.counter = 0

    def new(self, base=BODY_LABEL):
        lbl = f"{base}{self.counter}"
        self.counter += 1
        return lbl


def convert_to_block(stmt):
    """Devolve `stmt` como Block.

    Um Block é devolvido tal como está (o mesmo objeto, para que as alterações
    feitas pelo chamador apareçam na árvore); qualquer outra instrução fica
    embrulhada num bloco de uma só instrução.
    """
    if isinstance(stmt, Block):
        return stmt
    return Block([stmt])


def _loop_body(stmt):
    """Bloco do corpo do ciclo gerado.

    Um corpo que já é o bloco de um ciclo reescrito fica embrulhado noutro:
    as suas declarações não partilham o âmbito com as atualizações nem com a
    variável do ciclo exterior.
    """
    if isinstance(stmt, Block) and stmt.synthetic:
        return Block([stmt])
    return convert_to_block(stmt)


def _statement_exprs(exprs):
    stmts = []
    for expr in exprs:
        if isinstance(expr, LocalVarDecl):
            # int x = 10, y = 1  ->  int x = 10; int y = 1;
            for i, declarator in enumerate(expr.declarators):
                vtype = expr.type if i == 0 else copy.deepcopy(expr.type)
                stmts.append(LocalVarDecl(list(expr.modifiers), vtype, [declarator]))
        else:
            stmts.append(ExprStmt(expr))
    return stmts


def _labels_of(loc):
    """Rótulos aplicados ao ciclo em `loc` (L: M: for ...) e a Location a substituir."""
    labels = []
    while loc.up is not None and isinstance(loc.up.node, Labeled):
        loc = loc.up
        labels.insert(0, loc.node.label)
    return labels, loc


def _relabel(labels, stmt):
    for label in reversed(labels):
        stmt = Labeled(label, stmt)
    return stmt


def _targeting_continues(body, labels):
    """Os 'continue' do corpo que saltam para o próprio ciclo."""
    found = []

    def visit(loc, nested):
        for child in child_locations(loc):
            node = child.node
            if isinstance(node, Continue):
                if (node.label is None and not nested) or node.label in labels:
                    found.append(child)
            else:
                visit(child, nested or isinstance(node, LOOPS))

    visit(Location(body), False)
    return found


def desugar_for_loops(tree):
    """Reescreve todos os ciclos for(init; cond; update) da árvore como ciclos while.

        for (int x = 0; x < 10; x++) {        {
            work(x);                              int x = 0;
        }                                 ->      while (x < 10) {
                                                      work(x);
                                                      x++;
                                                  }
                                              }

    Devolve a raiz, que só muda quando a própria raiz é um ciclo for.
    """
    labelgen = LabelGen()
    for loc in reversed(find_all(tree, For)):
        for_loop = loc.node
        labels, target = _labels_of(loc)

        loop_body = _loop_body(for_loop.body)
        if for_loop.update:
            continues = _targeting_continues(loop_body, labels)
            if continues:
                # 'continue' não pode saltar por cima das atualizações
                lbl = labelgen.new()
                for c in continues:
                    replace_at(loop_body, c, Break(lbl))
                loop_body = Block([Labeled(lbl, loop_body)])
        loop_body.statements.extend(_statement_exprs(for_loop.update))

        outer_block = Block(_statement_exprs(for_loop.init))
        cond = for_loop.cond if for_loop.cond is not None else Literal(True, 'boolean')
        outer_block.statements.append(_relabel(labels, While(cond, loop_body)))
        outer_block.line = for_loop.line
        outer_block.synthetic = True

        tree = replace_at(tree, target, outer_block)
    return tree


def desugar_for_each_loops(tree):
    """Reescreve todos os ciclos for (T x : xs) com um iterador explícito.

        for (Foo foo : items) {               {
            work(foo);                            java.util.Iterator<Foo> fooIter = items.iterator();
        }                                 ->      while (fooIter.hasNext()) {
                                                      Foo foo = fooIter.next();
                                                      work(foo);
                                                  }
                                              }
    """
    for loc in reversed(find_all(tree, ForEach)):
        for_each = loc.node
        labels, target = _labels_of(loc)
        loop_var = for_each.var
        var = loop_var.declarators[0]
        iter_name = var.name + ITER_SUFFIX

        loop_body = _loop_body(for_each.body)
        loop_body.statements.insert(0, LocalVarDecl(
            list(loop_var.modifiers),
            loop_var.type,
            [VarDeclarator(var.name, var.dims, MethodCall(Name(iter_name), 'next'))],
        ))

        elem_type = copy.deepcopy(loop_var.type)
        elem_type.dims += var.dims
        new_block = Block([
            LocalVarDecl([], Type(ITERATOR_TYPE, [elem_type]), [
                VarDeclarator(iter_name, 0, MethodCall(for_each.iterable, 'iterator')),
            ]),
            _relabel(labels, While(MethodCall(Name(iter_name), 'hasNext'), loop_body)),
        ])
        new_block.line = for_each.line
        new_block.synthetic = True

        tree = replace_at(tree, target, new_block)
    return tree


def desugar(tree):
    tree = desugar_for_loops(tree)
    return desugar_for_each_loops(tree)
