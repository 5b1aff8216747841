import ply.lex as lex

from .analex import tokenize, find_column
from .ast1 import *
from .errors import ParseError

PRIMITIVES = ('BOOLEAN', 'BYTE', 'CHAR', 'SHORT', 'INT', 'LONG', 'FLOAT', 'DOUBLE')

MODIFIERS = ('PUBLIC', 'PRIVATE', 'PROTECTED', 'STATIC', 'FINAL', 'ABSTRACT', 'NATIVE',
             'SYNCHRONIZED', 'TRANSIENT', 'VOLATILE', 'STRICTFP', 'DEFAULT')

ASSIGN_OPS = {
    '=': '=', 'PLUSEQ': '+=', 'MINUSEQ': '-=', 'TIMESEQ': '*=', 'DIVEQ': '/=', 'MODEQ': '%=',
    'ANDEQ': '&=', 'OREQ': '|=', 'XOREQ': '^=', 'LSHIFTEQ': '<<=',
}

LITERALS = {
    'INT_LIT': 'int', 'LONG_LIT': 'long', 'FLOAT_LIT': 'float', 'DOUBLE_LIT': 'double',
    'CHAR_LIT': 'char', 'STRING_LIT': 'string',
}

# Níveis de precedência dos operadores binários, do mais fraco para o mais forte
BINARY_LEVELS = (
    ('||',),
    ('&&',),
    ('|',),
    ('^',),
    ('&',),
    ('==', '!='),
    ('<', '>', '<=', '>=', 'instanceof'),
    ('<<', '>>', '>>>'),
    ('+', '-'),
    ('*', '/', '%'),
)

SIMPLE_BINOPS = {
    'OR': '||', 'AND': '&&', '|': '|', '^': '^', '&': '&', 'EQ': '==', 'NE': '!=',
    '<': '<', 'LE': '<=', 'GE': '>=', 'INSTANCEOF': 'instanceof', 'LSHIFT': '<<',
    '+': '+', '-': '-', '*': '*', '/': '/', '%': '%',
}

# Tokens que podem começar o operando de um cast: (Tipo) operando
CAST_FOLLOW = ('ID', '(', '!', '~', 'THIS', 'SUPER', 'NEW', 'TRUE', 'FALSE', 'NULL') + tuple(LITERALS)


class Parser:
    def __init__(self, data):
        self.data = data
        self.toks = tokenize(data)
        eof = lex.LexToken()
        eof.type = '$end'
        eof.value = None
        eof.lineno = self.toks[-1].lineno if self.toks else 1
        eof.lexpos = len(data)
        self.toks.append(eof)
        self.pos = 0

    #
    # Utilitários
    #

    @property
    def prox_simb(self):
        return self.toks[self.pos]

    def _look(self, k):
        return self.toks[min(self.pos + k, len(self.toks) - 1)]

    def _check(self, *tipos):
        return self.prox_simb.type in tipos

    def _advance(self):
        tok = self.prox_simb
        if tok.type != '$end':
            self.pos += 1
        return tok

    def _accept(self, tipo):
        if self._check(tipo):
            return self._advance()
        return None

    def rec_term(self, tipo):
        if self._check(tipo):
            return self._advance()
        self.parserError(f"esperava '{tipo}'")

    def parserError(self, msg, tok=None):
        tok = tok or self.prox_simb
        found = 'fim do ficheiro' if tok.type == '$end' else repr(tok.value)
        raise ParseError(f"Erro sintático: {msg}, encontrado {found}",
                         line=tok.lineno, column=find_column(self.data, tok.lexpos))

    def _adjacent(self, k):
        # os tokens k e k+1 estão encostados (sem espaços entre eles)
        a, b = self._look(k), self._look(k + 1)
        return b.lexpos == a.lexpos + len(str(a.value))

    def _gt_run(self):
        """Reconhece '>', '>>', '>>>', '>>=' e '>>>=' a partir de tokens '>' isolados.

        Devolve (operador, número de tokens) ou (None, 0).
        """
        if not self._check('>'):
            return None, 0
        n = 1
        while n < 3 and self._look(n).type == '>' and self._adjacent(n - 1):
            n += 1
        if n < 3 and self._look(n).type == 'GE' and self._adjacent(n - 1):
            # '>>=' chega como '>' '>=' e '>>>=' como '>' '>' '>='
            return '>' * (n + 1) + '=', n + 1
        return '>' * n, n

    #
    # Unidade de compilação
    #

    def rec_compilation_unit(self):
        package = None
        if self._accept('PACKAGE'):
            package = self.rec_qualified_name()
            self.rec_term(';')
        imports = []
        while self._check('IMPORT'):
            imports.append(self.rec_import())
        types = []
        while not self._check('$end'):
            if self._accept(';'):
                continue
            types.append(self.rec_type_decl(self.rec_modifiers()))
        return CompilationUnit(package, imports, types)

    def rec_qualified_name(self):
        parts = [self.rec_term('ID').value]
        while self._check('.') and self._look(1).type == 'ID':
            self._advance()
            parts.append(self._advance().value)
        return '.'.join(parts)

    def rec_import(self):
        self.rec_term('IMPORT')
        static = bool(self._accept('STATIC'))
        name = self.rec_qualified_name()
        asterisk = False
        if self._accept('.'):
            self.rec_term('*')
            asterisk = True
        self.rec_term(';')
        return ImportDecl(name, static, asterisk)

    def rec_modifiers(self):
        mods = []
        while True:
            if self._check(*MODIFIERS):
                mods.append(self._advance().value)
            elif self._check('@') and self._look(1).type != 'INTERFACE':
                mods.append(self.rec_annotation())
            else:
                return mods

    def rec_annotation(self):
        self.rec_term('@')
        name = '@' + self.rec_qualified_name()
        if self._check('('):
            # argumentos das anotações não são guardados
            depth = 0
            while True:
                tok = self._advance()
                if tok.type == '(':
                    depth += 1
                elif tok.type == ')':
                    depth -= 1
                    if depth == 0:
                        break
                elif tok.type == '$end':
                    self.parserError("anotação por fechar", tok)
        return name

    #
    # Classes e interfaces
    #

    def rec_type_decl(self, mods):
        if self._check('CLASS', 'INTERFACE'):
            kind = self._advance().value
        else:
            self.parserError("esperava declaração de classe ou interface")
        name = self.rec_term('ID').value
        type_params = self.rec_type_params() if self._check('<') else []
        extends = []
        implements = []
        if self._accept('EXTENDS'):
            extends = self.rec_type_list()
        if self._accept('IMPLEMENTS'):
            implements = self.rec_type_list()
        members = self.rec_class_body(name)
        return ClassDecl(mods, kind, name, type_params, extends, implements, members)

    def rec_type_params(self):
        self.rec_term('<')
        names = []
        while True:
            name = self.rec_term('ID').value
            if self._accept('EXTENDS'):
                bounds = [self.rec_type()]
                while self._accept('&'):
                    bounds.append(self.rec_type())
                name += ' extends ' + ' & '.join(_type_text(b) for b in bounds)
            names.append(name)
            if not self._accept(','):
                break
        self.rec_term('>')
        return names

    def rec_type_list(self):
        types = [self.rec_type()]
        while self._accept(','):
            types.append(self.rec_type())
        return types

    def rec_class_body(self, class_name):
        self.rec_term('{')
        members = []
        while not self._accept('}'):
            if self._check('$end'):
                self.parserError("esperava '}'")
            if self._accept(';'):
                continue
            members.append(self.rec_member(class_name))
        return members

    def rec_member(self, class_name):
        mods = self.rec_modifiers()
        if self._check('CLASS', 'INTERFACE'):
            return self.rec_type_decl(mods)
        if self._check('{'):
            return Initializer('static' in mods, self.rec_block())
        type_params = self.rec_type_params() if self._check('<') else []

        # construtor
        if self._check('ID') and self.prox_simb.value == class_name and self._look(1).type == '(':
            name = self._advance().value
            params = self.rec_params()
            throws = self.rec_throws()
            return ConstructorDecl(mods, name, params, throws, self.rec_block())

        if self._accept('VOID'):
            rtype = Type('void')
        else:
            rtype = self.rec_type()
        name_tok = self.rec_term('ID')

        if self._check('('):
            params = self.rec_params()
            rtype.dims += self.rec_dims()
            throws = self.rec_throws()
            body = None if self._accept(';') else self.rec_block()
            return MethodDecl(mods, type_params, rtype, name_tok.value, params, throws, body)

        declarators = self.rec_var_declarators(name_tok)
        self.rec_term(';')
        return FieldDecl(mods, rtype, declarators)

    def rec_params(self):
        self.rec_term('(')
        params = []
        if not self._check(')'):
            while True:
                mods = self.rec_modifiers()
                ptype = self.rec_type()
                varargs = bool(self._accept('ELLIPSIS'))
                name = self.rec_term('ID').value
                ptype.dims += self.rec_dims()
                params.append(Parameter(mods, ptype, name, varargs))
                if not self._accept(','):
                    break
        self.rec_term(')')
        return params

    def rec_throws(self):
        if self._accept('THROWS'):
            return self.rec_type_list()
        return []

    #
    # Tipos
    #

    def rec_dims(self):
        dims = 0
        while self._check('[') and self._look(1).type == ']':
            self._advance()
            self._advance()
            dims += 1
        return dims

    def rec_type(self, allow_dims=True):
        if self._check(*PRIMITIVES):
            t = Type(self._advance().value)
        else:
            t = Type(self.rec_qualified_name())
            if self._check('<'):
                t.args = self.rec_type_args()
        if allow_dims:
            t.dims = self.rec_dims()
        return t

    def rec_type_args(self):
        self.rec_term('<')
        args = []
        if self._accept('>'):
            return args           # diamante
        while True:
            if self._accept('?'):
                if self._check('EXTENDS', 'SUPER'):
                    kind = self._advance().value
                    args.append(WildcardType(kind, self.rec_type()))
                else:
                    args.append(WildcardType())
            else:
                args.append(self.rec_type())
            if not self._accept(','):
                break
        self.rec_term('>')
        return args

    #
    # Variáveis
    #

    def rec_var_declarators(self, name_tok=None):
        declarators = []
        while True:
            name = (name_tok or self.rec_term('ID')).value
            name_tok = None
            dims = self.rec_dims()
            init = None
            if self._accept('='):
                init = self.rec_var_init()
            declarators.append(VarDeclarator(name, dims, init))
            if not self._accept(','):
                return declarators

    def rec_var_init(self):
        if self._check('{'):
            return self.rec_array_init()
        return self.rec_expr()

    def rec_array_init(self):
        self.rec_term('{')
        values = []
        while not self._check('}'):
            values.append(self.rec_var_init())
            if not self._accept(','):
                break
        self.rec_term('}')
        return ArrayInit(values)

    def _local_modifiers(self):
        mods = []
        while self._check('FINAL', '@'):
            mods.append(self._advance().value if self._check('FINAL') else self.rec_annotation())
        return mods

    def _try_local_var_decl(self):
        """Tenta ler `Tipo nome ...`; se não for uma declaração, volta atrás e devolve None."""
        start = self.pos
        mods = self._local_modifiers()
        if self._check('ID', *PRIMITIVES):
            try:
                vtype = self.rec_type()
            except ParseError:
                if mods:
                    raise
                vtype = None
            if vtype is not None and self._check('ID'):
                return LocalVarDecl(mods, vtype, self.rec_var_declarators())
        if mods:
            self.parserError("esperava declaração de variável")
        self.pos = start
        return None

    #
    # Instruções
    #

    def rec_block(self):
        self.rec_term('{')
        statements = []
        while not self._accept('}'):
            if self._check('$end'):
                self.parserError("esperava '}'")
            statements.append(self.rec_statement())
        return Block(statements)

    def rec_statement(self):
        tok = self.prox_simb
        t = tok.type
        if t == '{':
            stmt = self.rec_block()
        elif t == ';':
            self._advance()
            stmt = EmptyStmt()
        elif t == 'IF':
            stmt = self.rec_if()
        elif t == 'WHILE':
            self._advance()
            cond = self.rec_par_expr()
            stmt = While(cond, self.rec_statement())
        elif t == 'DO':
            self._advance()
            body = self.rec_statement()
            self.rec_term('WHILE')
            cond = self.rec_par_expr()
            self.rec_term(';')
            stmt = DoWhile(body, cond)
        elif t == 'FOR':
            stmt = self.rec_for()
        elif t == 'RETURN':
            self._advance()
            expr = None if self._check(';') else self.rec_expr()
            self.rec_term(';')
            stmt = Return(expr)
        elif t in ('BREAK', 'CONTINUE'):
            self._advance()
            label = self._advance().value if self._check('ID') else None
            self.rec_term(';')
            stmt = Break(label) if t == 'BREAK' else Continue(label)
        elif t == 'THROW':
            self._advance()
            expr = self.rec_expr()
            self.rec_term(';')
            stmt = Throw(expr)
        elif t == 'TRY':
            stmt = self.rec_try()
        elif t == 'ID' and self._look(1).type == ':':
            label = self._advance().value
            self._advance()
            stmt = Labeled(label, self.rec_statement())
        elif t in ('SWITCH', 'ENUM', 'ASSERT', 'CASE', 'DEFAULT', 'CLASS'):
            self.parserError("instrução não suportada")
        else:
            stmt = self._try_local_var_decl()
            if stmt is None:
                stmt = ExprStmt(self.rec_expr())
            self.rec_term(';')
        stmt.line = tok.lineno
        return stmt

    def rec_par_expr(self):
        self.rec_term('(')
        expr = self.rec_expr()
        self.rec_term(')')
        return expr

    def rec_if(self):
        self.rec_term('IF')
        cond = self.rec_par_expr()
        thenstmt = self.rec_statement()
        elsestmt = None
        if self._accept('ELSE'):
            elsestmt = self.rec_statement()
        return If(cond, thenstmt, elsestmt)

    def rec_for(self):
        self.rec_term('FOR')
        self.rec_term('(')

        # for (Tipo nome : iterável)
        start = self.pos
        mods = self._local_modifiers()
        if self._check('ID', *PRIMITIVES):
            try:
                vtype = self.rec_type()
            except ParseError:
                vtype = None
            if vtype is not None and self._check('ID') and self._look(1).type == ':':
                name = self._advance().value
                self._advance()
                iterable = self.rec_expr()
                self.rec_term(')')
                var = LocalVarDecl(mods, vtype, [VarDeclarator(name)])
                return ForEach(var, iterable, self.rec_statement())
        self.pos = start

        init = []
        if not self._check(';'):
            decl = self._try_local_var_decl()
            init = [decl] if decl is not None else self.rec_expr_list()
        self.rec_term(';')
        cond = None if self._check(';') else self.rec_expr()
        self.rec_term(';')
        update = [] if self._check(')') else self.rec_expr_list()
        self.rec_term(')')
        return For(init, cond, update, self.rec_statement())

    def rec_try(self):
        self.rec_term('TRY')
        if self._check('('):
            self.parserError("try-with-resources não suportado")
        block = self.rec_block()
        catches = []
        while self._accept('CATCH'):
            self.rec_term('(')
            mods = self._local_modifiers()
            types = [self.rec_type()]
            while self._accept('|'):
                types.append(self.rec_type())
            name = self.rec_term('ID').value
            self.rec_term(')')
            catches.append(CatchClause(mods, types, name, self.rec_block()))
        finally_block = None
        if self._accept('FINALLY'):
            finally_block = self.rec_block()
        if not catches and finally_block is None:
            self.parserError("esperava 'catch' ou 'finally'")
        return Try(block, catches, finally_block)

    #
    # Expressões
    #

    def rec_expr_list(self):
        exprs = [self.rec_expr()]
        while self._accept(','):
            exprs.append(self.rec_expr())
        return exprs

    def rec_expr(self):
        lhs = self.rec_conditional()
        op, n = None, 0
        if self.prox_simb.type in ASSIGN_OPS:
            op, n = ASSIGN_OPS[self.prox_simb.type], 1
        else:
            gt, count = self._gt_run()
            if gt in ('>>=', '>>>='):
                op, n = gt, count
        if op is None:
            return lhs
        if not isinstance(lhs, (Name, FieldAccess, ArrayAccess)):
            self.parserError("destino de atribuição inválido")
        for _ in range(n):
            self._advance()
        return Assign(op, lhs, self.rec_expr())

    def rec_conditional(self):
        cond = self.rec_binary(0)
        if self._accept('?'):
            thenexpr = self.rec_expr()
            self.rec_term(':')
            return Conditional(cond, thenexpr, self.rec_conditional())
        return cond

    def _binop_here(self):
        t = self.prox_simb.type
        if t == '>':
            op, n = self._gt_run()
            return (op, n) if op in ('>', '>>', '>>>') else (None, 0)
        if t in SIMPLE_BINOPS:
            return SIMPLE_BINOPS[t], 1
        return None, 0

    def rec_binary(self, level):
        if level == len(BINARY_LEVELS):
            return self.rec_unary()
        left = self.rec_binary(level + 1)
        while True:
            op, n = self._binop_here()
            if op not in BINARY_LEVELS[level]:
                return left
            for _ in range(n):
                self._advance()
            if op == 'instanceof':
                left = InstanceOf(left, self.rec_type())
            else:
                left = BinOp(op, left, self.rec_binary(level + 1))

    def rec_unary(self):
        if self._check('INC', 'DEC'):
            op = self._advance().value
            return UnOp(op, self.rec_unary())
        if self._check('+', '-', '!', '~'):
            op = self._advance().value
            return UnOp(op, self.rec_unary())
        if self._check('('):
            cast = self._try_cast()
            if cast is not None:
                return cast
        return self.rec_postfix()

    def _try_cast(self):
        start = self.pos
        self._advance()
        if self._check(*PRIMITIVES):
            ctype = self.rec_type()
            self.rec_term(')')
            return Cast(ctype, self.rec_unary())
        if self._check('ID'):
            try:
                ctype = self.rec_type()
            except ParseError:
                ctype = None
            if ctype is not None and self._accept(')') and self._check(*CAST_FOLLOW):
                return Cast(ctype, self.rec_unary())
        self.pos = start
        return None

    def rec_postfix(self):
        expr = self.rec_primary()
        while True:
            if self._accept('.'):
                name = self.rec_term('ID').value
                if self._check('('):
                    expr = MethodCall(expr, name, self.rec_args())
                else:
                    expr = FieldAccess(expr, name)
            elif self._check('['):
                self._advance()
                index = self.rec_expr()
                self.rec_term(']')
                expr = ArrayAccess(expr, index)
            elif self._check('INC', 'DEC'):
                expr = UnOp(self._advance().value, expr, postfix=True)
            else:
                return expr

    def rec_args(self):
        self.rec_term('(')
        args = []
        if not self._check(')'):
            args = self.rec_expr_list()
        self.rec_term(')')
        return args

    def rec_primary(self):
        tok = self.prox_simb
        t = tok.type
        if t in LITERALS:
            self._advance()
            return Literal(tok.value, LITERALS[t])
        if t in ('TRUE', 'FALSE'):
            self._advance()
            return Literal(t == 'TRUE', 'boolean')
        if t == 'NULL':
            self._advance()
            return Literal(None, 'null')
        if t in ('THIS', 'SUPER'):
            self._advance()
            if self._check('('):
                # this(...) / super(...) dentro de um construtor
                return MethodCall(None, tok.value, self.rec_args())
            return This() if t == 'THIS' else Super()
        if t == '(':
            return Parens(self.rec_par_expr())
        if t == 'NEW':
            return self.rec_creation()
        if t == 'ID':
            self._advance()
            if self._check('('):
                return MethodCall(None, tok.value, self.rec_args())
            return Name(tok.value)
        self.parserError("esperava expressão")

    def rec_creation(self):
        self.rec_term('NEW')
        ctype = self.rec_type(allow_dims=False)
        if self._check('['):
            dim_exprs = []
            extra = 0
            while self._check('['):
                self._advance()
                if self._accept(']'):
                    extra += 1
                    continue
                if extra:
                    self.parserError("dimensão depois de '[]'")
                dim_exprs.append(self.rec_expr())
                self.rec_term(']')
            init = None
            if self._check('{'):
                if dim_exprs:
                    self.parserError("array com dimensão e inicializador")
                init = self.rec_array_init()
            elif not dim_exprs:
                self.parserError("esperava inicializador do array")
            return ArrayCreation(ctype, dim_exprs, extra, init)
        args = self.rec_args()
        if self._check('{'):
            self.parserError("classes anónimas não suportadas")
        return ObjectCreation(ctype, args)


def _type_text(t):
    # usado apenas para os limites dos parâmetros de tipo (<T extends Comparable<T>>)
    text = t.name
    if t.args is not None:
        text += '<' + ', '.join(_type_text(a) if isinstance(a, Type) else '?' for a in t.args) + '>'
    return text + '[]' * t.dims


def _expect_end(parser):
    if not parser._check('$end'):
        parser.parserError("esperava fim do ficheiro")


def parse(data):
    """Analisa uma unidade de compilação Java e devolve a CompilationUnit."""
    parser = Parser(data)
    cu = parser.rec_compilation_unit()
    _expect_end(parser)
    return cu


def parse_statement(data):
    parser = Parser(data)
    stmt = parser.rec_statement()
    _expect_end(parser)
    return stmt


def parse_statements(data):
    parser = Parser(data)
    stmts = []
    while not parser._check('$end'):
        stmts.append(parser.rec_statement())
    return Block(stmts)


def parse_expression(data):
    parser = Parser(data)
    expr = parser.rec_expr()
    _expect_end(parser)
    return expr
