"""Interpretador para o subconjunto de Java reconhecido pelo parser.

Serve para comparar o comportamento de um programa antes e depois das
transformações: a saída de System.out é capturada e devolvida como texto.
Não modela o overflow de inteiros nem a semântica completa da JVM.
"""

import math

from .anasin import parse
from .ast1 import *
from .errors import InterpreterError

MAX_STEPS = 1_000_000

STATIC_CLASSES = ('System', 'Math', 'List', 'Arrays', 'Integer', 'Long', 'Double', 'String',
                  'Character', 'Boolean', 'Objects')

INT_TYPES = ('int', 'long', 'short', 'byte')
FLOAT_TYPES = ('double', 'float')

RUNTIME_EXCEPTIONS = ('RuntimeException', 'ArithmeticException', 'NullPointerException',
                      'IllegalArgumentException', 'IllegalStateException',
                      'IndexOutOfBoundsException', 'ArrayIndexOutOfBoundsException',
                      'NoSuchElementException', 'UnsupportedOperationException',
                      'NumberFormatException', 'StringIndexOutOfBoundsException')


#
# Sinais de controlo de fluxo
#

class _Signal(Exception):
    pass

class _Return(_Signal):
    def __init__(self, value):
        self.value = value

class _Break(_Signal):
    def __init__(self, label):
        self.label = label

class _Continue(_Signal):
    def __init__(self, label):
        self.label = label

class _Throw(_Signal):
    def __init__(self, value):
        self.value = value


#
# Valores
#

class JavaChar(str):
    pass

class ClassRef:
    def __init__(self, name):
        self.name = name

class PrintStream:
    def __init__(self, buffer):
        self.buffer = buffer

class JavaObject:
    def __init__(self, cls):
        self.cls = cls
        self.fields = {}

class JavaList:
    def __init__(self, items=None, immutable=False):
        self.items = list(items or [])
        self.immutable = immutable

class JavaIterator:
    def __init__(self, items):
        self.items = items
        self.pos = 0

class StringBuilder:
    def __init__(self, text=''):
        self.text = text

class JavaException:
    def __init__(self, name, message=None):
        self.name = name
        self.message = message


class ClassInfo:
    def __init__(self, decl):
        self.decl = decl
        self.name = decl.name
        self.methods = {}
        self.constructors = []
        self.statics = {}
        for m in decl.members:
            if isinstance(m, MethodDecl):
                self.methods.setdefault(m.name, []).append(m)
            elif isinstance(m, ConstructorDecl):
                self.constructors.append(m)

    def find_method(self, name, nargs):
        for m in self.methods.get(name, []):
            if len(m.params) == nargs:
                return m
        return None


class Frame:
    def __init__(self, cls, this=None):
        self.cls = cls
        self.this = this
        self.scopes = [{}]


def to_string(v):
    if v is None:
        return 'null'
    if isinstance(v, bool):
        return 'true' if v else 'false'
    if isinstance(v, float):
        if math.isinf(v):
            return 'Infinity' if v > 0 else '-Infinity'
        if math.isnan(v):
            return 'NaN'
        r = repr(v)
        if 'e' in r:
            mantissa, exp = r.split('e')
            if '.' not in mantissa:
                mantissa += '.0'
            return f"{mantissa}E{int(exp)}"
        return r
    if isinstance(v, str):
        return str.__str__(v)
    if isinstance(v, JavaList):
        return '[' + ', '.join(to_string(x) for x in v.items) + ']'
    if isinstance(v, StringBuilder):
        return v.text
    if isinstance(v, JavaException):
        return v.name if v.message is None else f"{v.name}: {v.message}"
    if isinstance(v, JavaObject):
        return f"{v.cls.name}@{id(v) & 0xffffff:x}"
    if isinstance(v, list):
        return f"[@{id(v) & 0xffffff:x}"
    return str(v)


def _num(v):
    if isinstance(v, JavaChar):
        return ord(v)
    return v


def _is_numeric(v):
    return isinstance(v, (int, float, JavaChar)) and not isinstance(v, bool)


def _default_value(t):
    if t is None or t.dims:
        return None
    if t.name in INT_TYPES:
        return 0
    if t.name in FLOAT_TYPES:
        return 0.0
    if t.name == 'boolean':
        return False
    if t.name == 'char':
        return JavaChar('\0')
    return None


class Interpreter:
    def __init__(self, cu, max_steps=MAX_STEPS):
        self.cu = cu
        self.max_steps = max_steps
        self.steps = 0
        self.output = []
        self.errors = []
        self.classes = {}
        for decl in self._class_decls(cu.types):
            self.classes[decl.name] = ClassInfo(decl)
        self.frame = None
        for cls in self.classes.values():
            self._init_statics(cls)

    def _class_decls(self, decls):
        for d in decls:
            if isinstance(d, ClassDecl):
                yield d
                yield from self._class_decls(d.members)

    # -------------
    # utilitários
    # -------------
    def _tick(self):
        self.steps += 1
        if self.steps > self.max_steps:
            raise InterpreterError(f"limite de {self.max_steps} passos excedido")

    def _throw(self, name, message=None):
        raise _Throw(JavaException(name, message))

    def _init_statics(self, cls):
        saved = self.frame
        self.frame = Frame(cls)
        for m in cls.decl.members:
            if isinstance(m, FieldDecl) and 'static' in m.modifiers:
                for d in m.declarators:
                    cls.statics[d.name] = self._initial_value(m.type, d)
            elif isinstance(m, Initializer) and m.static:
                self.exec_statement(m.body)
        self.frame = saved

    def _initial_value(self, t, d):
        if d.init is None:
            return _default_value(t)
        if isinstance(d.init, ArrayInit):
            return self.eval_expr(d.init)
        return self._coerce(t, self.eval_expr(d.init))

    def _coerce(self, t, v):
        # conversões implícitas na atribuição: int -> double, char -> int
        if t is None or t.dims:
            return v
        if t.name in FLOAT_TYPES and _is_numeric(v):
            return float(_num(v))
        if t.name in INT_TYPES and isinstance(v, JavaChar):
            return ord(v)
        return v

    # -------------
    # execução
    # -------------
    def run(self, method='main', class_name=None, args=None):
        cls = self.classes.get(class_name) if class_name else None
        if cls is None:
            for info in self.classes.values():
                if (class_name is None or info.name == class_name) and method in info.methods:
                    cls = info
                    break
        if cls is None or method not in cls.methods:
            raise InterpreterError(f"método '{method}' não encontrado")
        decl = cls.methods[method][0]
        if args is None:
            args = [[] for _ in decl.params]
        this = None if 'static' in decl.modifiers else self.instantiate(cls, [])
        try:
            self.invoke(cls, decl, this, args)
        except _Throw as t:
            raise InterpreterError(f"exceção não apanhada: {to_string(t.value)}")
        return ''.join(self.output)

    def invoke(self, cls, decl, this, args):
        self._tick()
        saved = self.frame
        self.frame = Frame(cls, this)
        scope = self.frame.scopes[0]
        for i, p in enumerate(decl.params):
            if p.varargs:
                rest = args[i:]
                scope[p.name] = rest[0] if len(rest) == 1 and isinstance(rest[0], list) else rest
                break
            scope[p.name] = self._coerce(p.type, args[i])
        try:
            if decl.body is not None:
                self.exec_statement(decl.body)
        except _Return as r:
            return r.value
        finally:
            self.frame = saved
        return None

    def instantiate(self, cls, args):
        obj = JavaObject(cls)
        saved = self.frame
        self.frame = Frame(cls, obj)
        for m in cls.decl.members:
            if isinstance(m, FieldDecl) and 'static' not in m.modifiers:
                for d in m.declarators:
                    obj.fields[d.name] = self._initial_value(m.type, d)
            elif isinstance(m, Initializer) and not m.static:
                self.exec_statement(m.body)
        self.frame = saved
        ctor = next((c for c in cls.constructors if len(c.params) == len(args)), None)
        if ctor is not None:
            self.invoke(cls, ctor, obj, args)
        elif args:
            raise InterpreterError(f"construtor de {cls.name} com {len(args)} argumento(s) não encontrado")
        return obj

    def declare(self, name, value):
        self.frame.scopes[-1][name] = value

    def lookup(self, name):
        for scope in reversed(self.frame.scopes):
            if name in scope:
                return scope[name]
        this = self.frame.this
        if this is not None and name in this.fields:
            return this.fields[name]
        if name in self.frame.cls.statics:
            return self.frame.cls.statics[name]
        if name in self.classes or name in STATIC_CLASSES:
            return ClassRef(name)
        raise InterpreterError(f"nome desconhecido '{name}'")

    def store(self, name, value):
        for scope in reversed(self.frame.scopes):
            if name in scope:
                scope[name] = value
                return
        this = self.frame.this
        if this is not None and name in this.fields:
            this.fields[name] = value
        elif name in self.frame.cls.statics:
            self.frame.cls.statics[name] = value
        else:
            raise InterpreterError(f"variável não declarada '{name}'")

    def truth(self, expr):
        v = self.eval_expr(expr)
        if not isinstance(v, bool):
            raise InterpreterError("condição não booleana")
        return v

    # ---------------------
    # Instruções
    # ---------------------
    def _run_body(self, body, labels):
        """Executa uma iteração; devolve True se o ciclo terminou com break."""
        try:
            self.exec_statement(body)
        except _Break as b:
            if b.label is None:
                return True
            raise
        except _Continue as c:
            if c.label is not None and c.label not in labels:
                raise
        return False

    def exec_statement(self, stmt, labels=()):
        self._tick()
        t = type(stmt).__name__
        if t == "Block":
            self.frame.scopes.append({})
            try:
                for s in stmt.statements:
                    self.exec_statement(s)
            finally:
                self.frame.scopes.pop()
        elif t == "LocalVarDecl":
            for d in stmt.declarators:
                vtype = stmt.type
                if d.dims:
                    vtype = Type(vtype.name, vtype.args, vtype.dims + d.dims)
                self.declare(d.name, self._initial_value(vtype, d))
        elif t == "ExprStmt":
            self.eval_expr(stmt.expr)
        elif t == "If":
            if self.truth(stmt.cond):
                self.exec_statement(stmt.thenstmt)
            elif stmt.elsestmt is not None:
                self.exec_statement(stmt.elsestmt)
        elif t == "While":
            while self.truth(stmt.cond):
                self._tick()
                if self._run_body(stmt.body, labels):
                    break
        elif t == "DoWhile":
            while True:
                self._tick()
                if self._run_body(stmt.body, labels) or not self.truth(stmt.cond):
                    break
        elif t == "For":
            self.frame.scopes.append({})
            try:
                for e in stmt.init:
                    if isinstance(e, LocalVarDecl):
                        self.exec_statement(e)
                    else:
                        self.eval_expr(e)
                while stmt.cond is None or self.truth(stmt.cond):
                    self._tick()
                    if self._run_body(stmt.body, labels):
                        break
                    for e in stmt.update:
                        self.eval_expr(e)
            finally:
                self.frame.scopes.pop()
        elif t == "ForEach":
            iterable = self.eval_expr(stmt.iterable)
            if isinstance(iterable, JavaList):
                items = iterable.items
            elif isinstance(iterable, list):
                items = iterable
            elif iterable is None:
                self._throw('NullPointerException')
            else:
                raise InterpreterError("for-each sobre valor não iterável")
            var = stmt.var.declarators[0]
            i = 0
            while i < len(items):
                self._tick()
                self.frame.scopes.append({var.name: self._coerce(stmt.var.type, items[i])})
                try:
                    stop = self._run_body(stmt.body, labels)
                finally:
                    self.frame.scopes.pop()
                if stop:
                    break
                i += 1
        elif t == "Return":
            raise _Return(None if stmt.expr is None else self.eval_expr(stmt.expr))
        elif t == "Break":
            raise _Break(stmt.label)
        elif t == "Continue":
            raise _Continue(stmt.label)
        elif t == "Throw":
            value = self.eval_expr(stmt.expr)
            if value is None:
                self._throw('NullPointerException')
            raise _Throw(value)
        elif t == "Try":
            self.exec_try(stmt)
        elif t == "Labeled":
            try:
                self.exec_statement(stmt.body, labels + (stmt.label,))
            except _Break as b:
                if b.label != stmt.label:
                    raise
        elif t == "EmptyStmt":
            pass
        elif t == "ClassDecl":
            raise InterpreterError("classes locais não suportadas")
        else:
            raise InterpreterError(f"Statement não suportado: {t}")

    def exec_try(self, stmt):
        try:
            try:
                self.exec_statement(stmt.block)
            except _Throw as exc:
                for c in stmt.catches:
                    if any(self._catches(t.name, exc.value) for t in c.types):
                        self.frame.scopes.append({c.name: exc.value})
                        try:
                            self.exec_statement(c.body)
                        finally:
                            self.frame.scopes.pop()
                        break
                else:
                    raise
        finally:
            if stmt.finally_block is not None:
                self.exec_statement(stmt.finally_block)

    def _catches(self, type_name, value):
        name = value.name if isinstance(value, JavaException) else getattr(getattr(value, 'cls', None), 'name', None)
        if type_name in ('Throwable', 'Exception') or type_name == name:
            return True
        return type_name == 'RuntimeException' and name in RUNTIME_EXCEPTIONS

    # ---------------------
    # Expressões
    # ---------------------
    def eval_expr(self, expr):
        t = type(expr).__name__
        if t == "Literal":
            return JavaChar(expr.value) if expr.kind == 'char' else expr.value
        if t == "Name":
            return self.lookup(expr.name)
        if t == "This":
            return self.frame.this
        if t == "Parens":
            return self.eval_expr(expr.expr)
        if t == "FieldAccess":
            return self.get_field(self.eval_expr(expr.target), expr.name)
        if t == "ArrayAccess":
            arr = self.eval_expr(expr.target)
            index = _num(self.eval_expr(expr.index))
            self._check_index(arr, index)
            return arr[index]
        if t == "MethodCall":
            return self.eval_call(expr)
        if t == "ObjectCreation":
            return self.create_object(expr.type, [self.eval_expr(a) for a in expr.args])
        if t == "ArrayCreation":
            if expr.init is not None:
                return self.eval_expr(expr.init)
            dims = [_num(self.eval_expr(d)) for d in expr.dim_exprs]
            elem = expr.type if expr.extra_dims == 0 else Type(expr.type.name, dims=expr.extra_dims)
            return self._new_array(dims, elem)
        if t == "ArrayInit":
            return [self.eval_expr(v) for v in expr.values]
        if t == "Assign":
            if expr.op == '=':
                value = self.eval_expr(expr.expr)
            else:
                current = self.eval_expr(expr.target)
                value = self.binop(expr.op[:-1], current, self.eval_expr(expr.expr))
                if isinstance(current, int) and not isinstance(current, bool) and isinstance(value, float):
                    value = int(value)
                elif isinstance(current, JavaChar) and isinstance(value, int):
                    value = JavaChar(chr(value))
            self.assign(expr.target, value)
            return value
        if t == "BinOp":
            if expr.op == '&&':
                return self.truth(expr.left) and self.truth(expr.right)
            if expr.op == '||':
                return self.truth(expr.left) or self.truth(expr.right)
            return self.binop(expr.op, self.eval_expr(expr.left), self.eval_expr(expr.right))
        if t == "UnOp":
            return self.eval_unop(expr)
        if t == "Conditional":
            return self.eval_expr(expr.thenexpr if self.truth(expr.cond) else expr.elseexpr)
        if t == "Cast":
            return self.cast(expr.type, self.eval_expr(expr.expr))
        if t == "InstanceOf":
            return self.instance_of(self.eval_expr(expr.expr), expr.type)
        raise InterpreterError(f"Expressão não suportada: {t}")

    def _check_index(self, arr, index):
        if arr is None:
            self._throw('NullPointerException')
        if not 0 <= index < len(arr):
            self._throw('ArrayIndexOutOfBoundsException', f"Index {index} out of bounds for length {len(arr)}")

    def _new_array(self, dims, elem):
        if len(dims) == 1:
            return [_default_value(elem) for _ in range(dims[0])]
        return [self._new_array(dims[1:], elem) for _ in range(dims[0])]

    def assign(self, target, value):
        t = type(target).__name__
        if t == "Name":
            self.store(target.name, value)
        elif t == "FieldAccess":
            obj = self.eval_expr(target.target)
            if isinstance(obj, ClassRef) and obj.name in self.classes:
                self.classes[obj.name].statics[target.name] = value
            elif isinstance(obj, JavaObject):
                obj.fields[target.name] = value
            else:
                raise InterpreterError(f"não é possível atribuir ao campo '{target.name}'")
        elif t == "ArrayAccess":
            arr = self.eval_expr(target.target)
            index = _num(self.eval_expr(target.index))
            self._check_index(arr, index)
            arr[index] = value
        elif t == "Parens":
            self.assign(target.expr, value)
        else:
            raise InterpreterError("destino de atribuição inválido")

    def eval_unop(self, expr):
        op = expr.op
        if op in ('++', '--'):
            old = self.eval_expr(expr.expr)
            new = _num(old) + (1 if op == '++' else -1)
            if isinstance(old, JavaChar):
                new = JavaChar(chr(new))
            self.assign(expr.expr, new)
            return old if expr.postfix else new
        v = self.eval_expr(expr.expr)
        if op == '!':
            return not v
        if op == '-':
            return -_num(v)
        if op == '+':
            return _num(v)
        if op == '~':
            return ~_num(v)
        raise InterpreterError(f"operador unário desconhecido {op}")

    def binop(self, op, a, b):
        if op == '+' and ((isinstance(a, str) and not isinstance(a, JavaChar))
                          or (isinstance(b, str) and not isinstance(b, JavaChar))):
            return to_string(a) + to_string(b)
        if op in ('==', '!='):
            if _is_numeric(a) and _is_numeric(b):
                eq = _num(a) == _num(b)
            elif isinstance(a, (bool, str)) or isinstance(b, (bool, str)):
                eq = a == b
            else:
                eq = a is b
            return eq if op == '==' else not eq
        if op in ('&', '|', '^') and isinstance(a, bool):
            return {'&': a and b, '|': a or b, '^': a != b}[op]
        a, b = _num(a), _num(b)
        if a is None or b is None:
            self._throw('NullPointerException')
        if op == '+':
            return a + b
        if op == '-':
            return a - b
        if op == '*':
            return a * b
        if op in ('/', '%'):
            if isinstance(a, int) and isinstance(b, int):
                if b == 0:
                    self._throw('ArithmeticException', '/ by zero')
                q = abs(a) // abs(b)
                if (a < 0) != (b < 0):
                    q = -q
                return q if op == '/' else a - b * q
            if op == '%':
                return math.fmod(a, b)
            if b == 0:
                return math.nan if a == 0 or a != a else math.copysign(math.inf, a) * math.copysign(1, b)
            return a / b
        if op == '<':
            return a < b
        if op == '>':
            return a > b
        if op == '<=':
            return a <= b
        if op == '>=':
            return a >= b
        if op == '&':
            return a & b
        if op == '|':
            return a | b
        if op == '^':
            return a ^ b
        if op == '<<':
            return a << (b & 63)
        if op == '>>':
            return a >> (b & 63)
        if op == '>>>':
            return (a % (1 << 32)) >> (b & 31) if a < 0 else a >> (b & 63)
        raise InterpreterError(f"operador desconhecido {op}")

    def cast(self, t, v):
        if t.dims:
            return v
        if t.name in INT_TYPES:
            return int(_num(v))
        if t.name in FLOAT_TYPES:
            return float(_num(v))
        if t.name == 'char':
            return v if isinstance(v, JavaChar) else JavaChar(chr(int(v)))
        return v

    def instance_of(self, v, t):
        name = t.name.split('.')[-1]
        if v is None:
            return False
        if name == 'Object':
            return True
        if name == 'String':
            return isinstance(v, str) and not isinstance(v, JavaChar)
        if name in ('Integer', 'Long'):
            return isinstance(v, int) and not isinstance(v, bool)
        if name == 'Double':
            return isinstance(v, float)
        if name == 'Boolean':
            return isinstance(v, bool)
        if name in ('List', 'ArrayList', 'Collection', 'Iterable'):
            return isinstance(v, JavaList)
        if isinstance(v, JavaObject):
            return v.cls.name == name
        if isinstance(v, JavaException):
            return self._catches(name, v)
        return False

    # -------------
    # objetos e chamadas
    # -------------
    def create_object(self, t, args):
        name = t.name.split('.')[-1]
        if name in self.classes:
            return self.instantiate(self.classes[name], args)
        if name in ('ArrayList', 'LinkedList'):
            items = args[0].items if args and isinstance(args[0], JavaList) else []
            return JavaList(items)
        if name == 'StringBuilder':
            return StringBuilder(to_string(args[0]) if args and isinstance(args[0], str) else '')
        if name == 'Object':
            return JavaObject(ClassInfo(ClassDecl([], 'class', 'Object', [], [], [], [])))
        if name.endswith('Exception') or name.endswith('Error'):
            return JavaException(name, to_string(args[0]) if args else None)
        raise InterpreterError(f"classe desconhecida '{t.name}'")

    def get_field(self, obj, name):
        if isinstance(obj, ClassRef):
            if obj.name in self.classes:
                statics = self.classes[obj.name].statics
                if name in statics:
                    return statics[name]
            if obj.name == 'System' and name == 'out':
                return PrintStream(self.output)
            if obj.name == 'System' and name == 'err':
                return PrintStream(self.errors)
            if obj.name == 'Integer' and name in ('MAX_VALUE', 'MIN_VALUE'):
                return 2**31 - 1 if name == 'MAX_VALUE' else -2**31
            if obj.name == 'Long' and name in ('MAX_VALUE', 'MIN_VALUE'):
                return 2**63 - 1 if name == 'MAX_VALUE' else -2**63
            raise InterpreterError(f"campo estático desconhecido {obj.name}.{name}")
        if obj is None:
            self._throw('NullPointerException')
        if isinstance(obj, list) and name == 'length':
            return len(obj)
        if isinstance(obj, JavaObject) and name in obj.fields:
            return obj.fields[name]
        raise InterpreterError(f"campo desconhecido '{name}'")

    def eval_call(self, expr):
        args = [self.eval_expr(a) for a in expr.args]
        if expr.target is None:
            if expr.name == 'super':
                return None
            cls = self.frame.cls
            if expr.name == 'this':
                ctor = next((c for c in cls.constructors if len(c.params) == len(args)), None)
                if ctor is None:
                    raise InterpreterError("construtor this(...) não encontrado")
                return self.invoke(cls, ctor, self.frame.this, args)
            decl = cls.find_method(expr.name, len(args))
            if decl is None:
                raise InterpreterError(f"método desconhecido '{expr.name}'")
            this = None if 'static' in decl.modifiers else self.frame.this
            return self.invoke(cls, decl, this, args)
        if isinstance(expr.target, Super):
            return None
        target = self.eval_expr(expr.target)
        if isinstance(target, ClassRef):
            return self.call_static(target.name, expr.name, args)
        if target is None:
            self._throw('NullPointerException')
        if isinstance(target, JavaObject) and target.cls.find_method(expr.name, len(args)):
            return self.invoke(target.cls, target.cls.find_method(expr.name, len(args)), target, args)
        return self.call_builtin(target, expr.name, args)

    def call_static(self, cls_name, name, args):
        if cls_name in self.classes:
            cls = self.classes[cls_name]
            decl = cls.find_method(name, len(args))
            if decl is None:
                raise InterpreterError(f"método desconhecido {cls_name}.{name}")
            return self.invoke(cls, decl, None, args)
        key = f"{cls_name}.{name}"
        if key in ('List.of', 'Arrays.asList'):
            items = args[0] if len(args) == 1 and isinstance(args[0], list) else args
            return JavaList(items, immutable=(key == 'List.of'))
        if key == 'Math.max':
            return max(args[0], args[1])
        if key == 'Math.min':
            return min(args[0], args[1])
        if key == 'Math.abs':
            return abs(args[0])
        if key == 'Math.pow':
            return float(_num(args[0])) ** _num(args[1])
        if key == 'Math.sqrt':
            return math.sqrt(_num(args[0]))
        if key in ('Integer.parseInt', 'Integer.valueOf', 'Long.parseLong'):
            try:
                return int(args[0])
            except ValueError:
                self._throw('NumberFormatException', f'For input string: "{args[0]}"')
        if key == 'Double.parseDouble':
            return float(args[0])
        if key in ('String.valueOf', 'Integer.toString', 'Objects.toString'):
            return to_string(args[0])
        if key == 'Objects.equals':
            return self.call_builtin(args[0], 'equals', [args[1]]) if args[0] is not None else args[1] is None
        if key == 'Character.isDigit':
            return args[0].isdigit()
        if key == 'Character.isLetter':
            return args[0].isalpha()
        raise InterpreterError(f"método desconhecido {key}")

    def call_builtin(self, obj, name, args):
        if isinstance(obj, PrintStream):
            if name in ('println', 'print'):
                text = to_string(args[0]) if args else ''
                obj.buffer.append(text + '\n' if name == 'println' else text)
                return None
        elif isinstance(obj, JavaList):
            return self._list_method(obj, name, args)
        elif isinstance(obj, JavaIterator):
            if name == 'hasNext':
                return obj.pos < len(obj.items)
            if name == 'next':
                if obj.pos >= len(obj.items):
                    self._throw('NoSuchElementException')
                obj.pos += 1
                return obj.items[obj.pos - 1]
        elif isinstance(obj, StringBuilder):
            if name == 'append':
                obj.text += to_string(args[0])
                return obj
            if name == 'length':
                return len(obj.text)
            if name == 'isEmpty':
                return not obj.text
            if name == 'reverse':
                obj.text = obj.text[::-1]
                return obj
            if name == 'charAt':
                return JavaChar(obj.text[args[0]])
        elif isinstance(obj, JavaException):
            if name == 'getMessage':
                return obj.message
        elif isinstance(obj, str) and not isinstance(obj, JavaChar):
            return self._string_method(obj, name, args)
        if name == 'toString':
            return to_string(obj)
        if name == 'equals':
            return self.binop('==', obj, args[0])
        if name == 'hashCode':
            return hash(obj) & 0x7fffffff
        if isinstance(obj, list):
            # um array Java não tem iterator(), nem os outros métodos de List
            raise InterpreterError(f"método '{name}' não existe em arrays")
        raise InterpreterError(f"método desconhecido '{name}'")

    def _list_method(self, lst, name, args):
        if name in ('add', 'set', 'remove', 'clear') and lst.immutable:
            self._throw('UnsupportedOperationException')
        if name == 'add':
            if len(args) == 2:
                lst.items.insert(args[0], args[1])
            else:
                lst.items.append(args[0])
            return True
        if name == 'get':
            if not 0 <= args[0] < len(lst.items):
                self._throw('IndexOutOfBoundsException', f"Index {args[0]} out of bounds for length {len(lst.items)}")
            return lst.items[args[0]]
        if name == 'set':
            old = lst.items[args[0]]
            lst.items[args[0]] = args[1]
            return old
        if name == 'size':
            return len(lst.items)
        if name == 'isEmpty':
            return not lst.items
        if name == 'contains':
            return any(self.binop('==', x, args[0]) for x in lst.items)
        if name == 'indexOf':
            for i, x in enumerate(lst.items):
                if self.binop('==', x, args[0]):
                    return i
            return -1
        if name == 'remove':
            if _is_numeric(args[0]) and not isinstance(args[0], JavaChar):
                return lst.items.pop(args[0])
            for i, x in enumerate(lst.items):
                if self.binop('==', x, args[0]):
                    del lst.items[i]
                    return True
            return False
        if name == 'clear':
            lst.items.clear()
            return None
        if name == 'iterator':
            return JavaIterator(lst.items)
        if name == 'toString':
            return to_string(lst)
        if name == 'equals':
            return isinstance(args[0], JavaList) and lst.items == args[0].items
        raise InterpreterError(f"método desconhecido List.{name}")

    def _string_method(self, s, name, args):
        if name == 'length':
            return len(s)
        if name == 'charAt':
            if not 0 <= args[0] < len(s):
                self._throw('StringIndexOutOfBoundsException')
            return JavaChar(s[args[0]])
        if name == 'equals':
            return isinstance(args[0], str) and str(s) == str(args[0])
        if name == 'equalsIgnoreCase':
            return isinstance(args[0], str) and s.lower() == args[0].lower()
        if name == 'isEmpty':
            return not s
        if name == 'substring':
            return s[args[0]:args[1]] if len(args) == 2 else s[args[0]:]
        if name == 'toUpperCase':
            return s.upper()
        if name == 'toLowerCase':
            return s.lower()
        if name == 'trim':
            return s.strip()
        if name == 'contains':
            return to_string(args[0]) in s
        if name == 'indexOf':
            return s.find(to_string(args[0]))
        if name == 'startsWith':
            return s.startswith(args[0])
        if name == 'endsWith':
            return s.endswith(args[0])
        if name == 'concat':
            return s + args[0]
        if name == 'repeat':
            return s * args[0]
        if name == 'compareTo':
            return (s > args[0]) - (s < args[0])
        if name == 'toString':
            return s
        if name == 'hashCode':
            h = 0
            for c in s:
                h = (31 * h + ord(c)) & 0xffffffff
            return h - (1 << 32) if h >= 1 << 31 else h
        raise InterpreterError(f"método desconhecido String.{name}")


def run(source, method='main', class_name=None, max_steps=MAX_STEPS):
    """Executa `source` (texto ou CompilationUnit) e devolve a saída de System.out."""
    cu = parse(source) if isinstance(source, str) else source
    return Interpreter(cu, max_steps).run(method, class_name)
