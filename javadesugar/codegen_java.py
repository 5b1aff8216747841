# codegen_java.py

from typing import List

from .ast1 import *

INDENT = "    "

# Precedências: quanto maior, mais forte liga
BINARY_PREC = {
    '||': 3, '&&': 4, '|': 5, '^': 6, '&': 7,
    '==': 8, '!=': 8,
    '<': 9, '>': 9, '<=': 9, '>=': 9,
    '<<': 10, '>>': 10, '>>>': 10,
    '+': 11, '-': 11,
    '*': 12, '/': 12, '%': 12,
}
PREC_ASSIGN = 1
PREC_COND = 2
PREC_RELATIONAL = 9
PREC_UNARY = 13
PREC_POSTFIX = 14
PREC_PRIMARY = 15

STATEMENTS = (Block, LocalVarDecl, ExprStmt, If, While, DoWhile, For, ForEach, Return, Break,
              Continue, Throw, Try, Labeled, EmptyStmt)
MEMBERS = (ClassDecl, FieldDecl, MethodDecl, ConstructorDecl, Initializer)

CHAR_ESCAPES = {'\n': '\\n', '\t': '\\t', '\b': '\\b', '\r': '\\r', '\f': '\\f', '\\': '\\\\'}


def escape(s, quote):
    out = []
    for c in s:
        if c in CHAR_ESCAPES:
            out.append(CHAR_ESCAPES[c])
        elif c == quote:
            out.append('\\' + c)
        elif ord(c) < 0x20:
            out.append(f"\\u{ord(c):04x}")
        else:
            out.append(c)
    return ''.join(out)


def precedence(expr):
    t = type(expr).__name__
    if t == "Assign":
        return PREC_ASSIGN
    if t == "Conditional":
        return PREC_COND
    if t == "BinOp":
        return BINARY_PREC[expr.op]
    if t == "InstanceOf":
        return PREC_RELATIONAL
    if t == "Cast":
        return PREC_UNARY
    if t == "UnOp":
        return PREC_POSTFIX if expr.postfix else PREC_UNARY
    if t == "ArrayCreation":
        return PREC_POSTFIX
    return PREC_PRIMARY


class CodeGenerator:
    def __init__(self):
        self.code: List[str] = []
        self.level = 0

    # --- utilitários de emissão
    def emit(self, line: str):
        self.code.append(INDENT * self.level + line if line else "")

    def indented(self, fn, *args):
        self.level += 1
        fn(*args)
        self.level -= 1

    def _join_closing(self, header):
        # '}' seguido de else / catch / finally / while fica na mesma linha
        if self.code and self.code[-1] == INDENT * self.level + '}':
            self.code.pop()
            return '} ' + header
        return header

    def result(self) -> str:
        return "\n".join(self.code)

    # -------------
    # tipos
    # -------------
    def type_text(self, t) -> str:
        if isinstance(t, WildcardType):
            if t.bound is None:
                return '?'
            return f"? {t.bound_kind} {self.type_text(t.bound)}"
        text = t.name
        if t.args is not None:
            text += '<' + ', '.join(self.type_text(a) for a in t.args) + '>'
        return text + '[]' * t.dims

    def modifiers_text(self, mods) -> str:
        return ''.join(m + ' ' for m in mods)

    # -------------
    # declarações
    # -------------
    def generate_unit(self, cu: CompilationUnit):
        if cu.package:
            self.emit(f"package {cu.package};")
            self.emit("")
        for imp in cu.imports:
            static = "static " if imp.static else ""
            star = ".*" if imp.asterisk else ""
            self.emit(f"import {static}{imp.name}{star};")
        if cu.imports:
            self.emit("")
        for i, decl in enumerate(cu.types):
            if i:
                self.emit("")
            self.generate_member(decl)

    def generate_member(self, decl):
        t = type(decl).__name__
        mods = self.modifiers_text(decl.modifiers) if hasattr(decl, 'modifiers') else ''
        if t == "ClassDecl":
            header = f"{mods}{decl.kind} {decl.name}"
            if decl.type_params:
                header += '<' + ', '.join(decl.type_params) + '>'
            if decl.extends:
                header += ' extends ' + ', '.join(self.type_text(x) for x in decl.extends)
            if decl.implements:
                header += ' implements ' + ', '.join(self.type_text(x) for x in decl.implements)
            self.emit(header + ' {')
            self.level += 1
            for i, member in enumerate(decl.members):
                if i:
                    self.emit("")
                self.generate_member(member)
            self.level -= 1
            self.emit('}')
        elif t == "FieldDecl":
            self.emit(f"{mods}{self.type_text(decl.type)} {self.declarators_text(decl.declarators)};")
        elif t in ("MethodDecl", "ConstructorDecl"):
            header = mods
            if t == "MethodDecl":
                if decl.type_params:
                    header += '<' + ', '.join(decl.type_params) + '> '
                header += self.type_text(decl.type) + ' '
            header += f"{decl.name}({', '.join(self.param_text(p) for p in decl.params)})"
            if decl.throws:
                header += ' throws ' + ', '.join(self.type_text(x) for x in decl.throws)
            if decl.body is None:
                self.emit(header + ';')
            else:
                self.generate_body(header, decl.body)
        elif t == "Initializer":
            self.generate_body("static" if decl.static else "", decl.body)
        else:
            raise NotImplementedError(f"Declaração não suportada: {t}")

    def param_text(self, p: Parameter) -> str:
        ptype = self.type_text(p.type)
        if p.varargs:
            ptype += '...'
        return f"{self.modifiers_text(p.modifiers)}{ptype} {p.name}"

    def declarators_text(self, declarators) -> str:
        parts = []
        for d in declarators:
            text = d.name + '[]' * d.dims
            if d.init is not None:
                text += ' = ' + self.generate_expr(d.init)
            parts.append(text)
        return ', '.join(parts)

    def local_var_text(self, decl: LocalVarDecl) -> str:
        return (f"{self.modifiers_text(decl.modifiers)}{self.type_text(decl.type)} "
                f"{self.declarators_text(decl.declarators)}")

    # ---------------------
    # Instruções
    # ---------------------
    def generate_body(self, header, body):
        if isinstance(body, Block):
            self.emit((header + ' {').lstrip())
            self.generate_block_contents(body)
            self.emit('}')
        else:
            self.emit(header)
            self.indented(self.generate_statement, body)

    def generate_block_contents(self, block: Block):
        self.level += 1
        for s in block.statements:
            self.generate_statement(s)
        self.level -= 1

    def generate_statement(self, stmt):
        t = type(stmt).__name__
        if t == "Block":
            self.emit('{')
            self.generate_block_contents(stmt)
            self.emit('}')
        elif t == "LocalVarDecl":
            self.emit(self.local_var_text(stmt) + ';')
        elif t == "ExprStmt":
            self.emit(self.generate_expr(stmt.expr) + ';')
        elif t == "If":
            thenstmt = stmt.thenstmt
            if stmt.elsestmt is not None and isinstance(thenstmt, If):
                thenstmt = Block([thenstmt])    # o else não pode mudar de dono
            self.generate_body(f"if ({self.generate_expr(stmt.cond)})", thenstmt)
            els = stmt.elsestmt
            while isinstance(els, If):
                header = self._join_closing(f"else if ({self.generate_expr(els.cond)})")
                inner = els.thenstmt
                if els.elsestmt is not None and isinstance(inner, If):
                    inner = Block([inner])
                self.generate_body(header, inner)
                els = els.elsestmt
            if els is not None:
                self.generate_body(self._join_closing("else"), els)
        elif t == "While":
            self.generate_body(f"while ({self.generate_expr(stmt.cond)})", stmt.body)
        elif t == "DoWhile":
            self.generate_body("do", stmt.body)
            self.emit(self._join_closing(f"while ({self.generate_expr(stmt.cond)});"))
        elif t == "For":
            if len(stmt.init) == 1 and isinstance(stmt.init[0], LocalVarDecl):
                init = self.local_var_text(stmt.init[0])
            else:
                init = ', '.join(self.generate_expr(e) for e in stmt.init)
            cond = ' ' + self.generate_expr(stmt.cond) if stmt.cond is not None else ''
            update = ', '.join(self.generate_expr(e) for e in stmt.update)
            update = ' ' + update if update else ''
            self.generate_body(f"for ({init};{cond};{update})", stmt.body)
        elif t == "ForEach":
            var = self.local_var_text(stmt.var)
            self.generate_body(f"for ({var} : {self.generate_expr(stmt.iterable)})", stmt.body)
        elif t == "Return":
            if stmt.expr is None:
                self.emit("return;")
            else:
                self.emit(f"return {self.generate_expr(stmt.expr)};")
        elif t in ("Break", "Continue"):
            word = t.lower()
            self.emit(f"{word} {stmt.label};" if stmt.label else f"{word};")
        elif t == "Throw":
            self.emit(f"throw {self.generate_expr(stmt.expr)};")
        elif t == "Try":
            self.generate_body("try", stmt.block)
            for c in stmt.catches:
                types = ' | '.join(self.type_text(x) for x in c.types)
                header = f"catch ({self.modifiers_text(c.modifiers)}{types} {c.name})"
                self.generate_body(self._join_closing(header), c.body)
            if stmt.finally_block is not None:
                self.generate_body(self._join_closing("finally"), stmt.finally_block)
        elif t == "Labeled":
            start = len(self.code)
            self.generate_statement(stmt.body)
            prefix = INDENT * self.level
            self.code[start] = f"{prefix}{stmt.label}: {self.code[start][len(prefix):]}"
        elif t == "EmptyStmt":
            self.emit(';')
        else:
            raise NotImplementedError(f"Statement não suportado: {t}")

    # ---------------------
    # Expressões
    # ---------------------
    def sub(self, expr, min_prec) -> str:
        text = self.generate_expr(expr)
        return f"({text})" if precedence(expr) < min_prec else text

    def literal_text(self, lit: Literal) -> str:
        k, v = lit.kind, lit.value
        if k == 'boolean':
            return 'true' if v else 'false'
        if k == 'null':
            return 'null'
        if k == 'string':
            return '"' + escape(v, '"') + '"'
        if k == 'char':
            return "'" + escape(v, "'") + "'"
        if k == 'long':
            return f"{v}L"
        if k in ('float', 'double'):
            text = repr(float(v))
            return text + 'f' if k == 'float' else text
        return str(v)

    def generate_expr(self, expr) -> str:
        t = type(expr).__name__
        if t == "Literal":
            return self.literal_text(expr)
        if t == "Name":
            return expr.name
        if t == "This":
            return "this"
        if t == "Super":
            return "super"
        if t == "Parens":
            return f"({self.generate_expr(expr.expr)})"
        if t == "FieldAccess":
            return f"{self.sub(expr.target, PREC_PRIMARY)}.{expr.name}"
        if t == "ArrayAccess":
            return f"{self.sub(expr.target, PREC_PRIMARY)}[{self.generate_expr(expr.index)}]"
        if t == "MethodCall":
            args = ', '.join(self.generate_expr(a) for a in expr.args)
            if expr.target is None:
                return f"{expr.name}({args})"
            return f"{self.sub(expr.target, PREC_PRIMARY)}.{expr.name}({args})"
        if t == "ObjectCreation":
            args = ', '.join(self.generate_expr(a) for a in expr.args)
            return f"new {self.type_text(expr.type)}({args})"
        if t == "ArrayCreation":
            text = f"new {self.type_text(expr.type)}"
            text += ''.join(f"[{self.generate_expr(d)}]" for d in expr.dim_exprs)
            text += '[]' * expr.extra_dims
            if expr.init is not None:
                text += ' ' + self.generate_expr(expr.init)
            return text
        if t == "ArrayInit":
            return '{' + ', '.join(self.generate_expr(v) for v in expr.values) + '}'
        if t == "Assign":
            return f"{self.sub(expr.target, PREC_PRIMARY)} {expr.op} {self.sub(expr.expr, PREC_ASSIGN)}"
        if t == "BinOp":
            p = BINARY_PREC[expr.op]
            return f"{self.sub(expr.left, p)} {expr.op} {self.sub(expr.right, p + 1)}"
        if t == "UnOp":
            if expr.postfix:
                return self.sub(expr.expr, PREC_POSTFIX) + expr.op
            operand = self.sub(expr.expr, PREC_UNARY)
            if expr.op in ('+', '-', '++', '--') and operand[:1] in ('+', '-'):
                operand = ' ' + operand     # - -x, e não --x
            return expr.op + operand
        if t == "Conditional":
            return (f"{self.sub(expr.cond, PREC_COND + 1)} ? {self.sub(expr.thenexpr, PREC_ASSIGN)}"
                    f" : {self.sub(expr.elseexpr, PREC_COND)}")
        if t == "Cast":
            return f"({self.type_text(expr.type)}) {self.sub(expr.expr, PREC_UNARY)}"
        if t == "InstanceOf":
            return f"{self.sub(expr.expr, PREC_RELATIONAL)} instanceof {self.type_text(expr.type)}"
        raise NotImplementedError(f"Expressão não suportada: {t}")


def generate_java(node) -> str:
    """Converte qualquer nó (unidade, declaração, instrução ou expressão) em texto Java."""
    gen = CodeGenerator()
    if isinstance(node, CompilationUnit):
        gen.generate_unit(node)
    elif isinstance(node, MEMBERS):
        gen.generate_member(node)
    elif isinstance(node, STATEMENTS):
        gen.generate_statement(node)
    else:
        return gen.generate_expr(node)
    return gen.result()
