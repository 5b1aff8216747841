import re

import ply.lex as lex

from .errors import ParseError

# Palavras reservadas (Java distingue maiúsculas de minúsculas)
reserved = ['abstract', 'assert', 'boolean', 'break', 'byte', 'case', 'catch', 'char', 'class', 'const',
            'continue', 'default', 'do', 'double', 'else', 'enum', 'extends', 'false', 'final', 'finally',
            'float', 'for', 'goto', 'if', 'implements', 'import', 'instanceof', 'int', 'interface', 'long',
            'native', 'new', 'null', 'package', 'private', 'protected', 'public', 'return', 'short',
            'static', 'strictfp', 'super', 'switch', 'synchronized', 'this', 'throw', 'throws',
            'transient', 'true', 'try', 'void', 'volatile', 'while']

tokens = [
    'ID', 'INT_LIT', 'LONG_LIT', 'FLOAT_LIT', 'DOUBLE_LIT', 'CHAR_LIT', 'STRING_LIT',
    'EQ', 'NE', 'LE', 'GE', 'AND', 'OR', 'INC', 'DEC', 'LSHIFT',
    'PLUSEQ', 'MINUSEQ', 'TIMESEQ', 'DIVEQ', 'MODEQ', 'ANDEQ', 'OREQ', 'XOREQ', 'LSHIFTEQ',
    'ELLIPSIS',
] + [r.upper() for r in reserved]

# '>' nunca é agrupado: '>>', '>>>' e '>>=' são reconhecidos pelo parser,
# para que List<List<String>> feche os dois tipos genéricos
literals = ['+', '-', '*', '/', '%', '=', '<', '>', '!', '~', '?', ':', ';', ',', '.',
            '(', ')', '[', ']', '{', '}', '&', '|', '^', '@']

t_EQ       = r'=='
t_NE       = r'!='
t_LE       = r'<='
t_GE       = r'>='
t_AND      = r'&&'
t_OR       = r'\|\|'
t_INC      = r'\+\+'
t_DEC      = r'--'
t_LSHIFT   = r'<<'
t_PLUSEQ   = r'\+='
t_MINUSEQ  = r'-='
t_TIMESEQ  = r'\*='
t_DIVEQ    = r'/='
t_MODEQ    = r'%='
t_ANDEQ    = r'&='
t_OREQ     = r'\|='
t_XOREQ    = r'\^='
t_LSHIFTEQ = r'<<='
t_ELLIPSIS = r'\.\.\.'

t_ignore = ' \t\r\f'

ESCAPES = {'n': '\n', 't': '\t', 'b': '\b', 'r': '\r', 'f': '\f', 's': ' '}


def _unescape(s):
    def repl(m):
        esc = m.group(1)
        if esc[0] == 'u':
            return chr(int(esc.lstrip('u'), 16))
        if esc[0] in '01234567':
            return chr(int(esc, 8))
        return ESCAPES.get(esc, esc)
    return re.sub(r'\\(u+[0-9a-fA-F]{4}|[0-3][0-7]{0,2}|[4-7][0-7]?|.)', repl, s)


def _int_value(text):
    s = text.rstrip('lL').replace('_', '')
    if s[:2] in ('0x', '0X'):
        return int(s[2:], 16)
    if s[:2] in ('0b', '0B'):
        return int(s[2:], 2)
    if len(s) > 1 and s[0] == '0':
        return int(s[1:], 8)
    return int(s)


def t_COMMENT(t):
    r'//[^\n]*|/\*(?:.|\n)*?\*/'
    t.lexer.lineno += t.value.count('\n')


def t_DOUBLE_LIT(t):
    r'(?:\d[\d_]*\.\d*|\.\d+)(?:[eE][+-]?\d+)?[fFdD]?|\d[\d_]*(?:[eE][+-]?\d+[fFdD]?|[fFdD])'
    text = t.value
    if text[-1] in 'fF':
        t.type = 'FLOAT_LIT'
    t.value = float(text.rstrip('fFdD').replace('_', ''))
    return t


def t_INT_LIT(t):
    r'0[xX][0-9a-fA-F_]+[lL]?|0[bB][01_]+[lL]?|\d[\d_]*[lL]?'
    if t.value[-1] in 'lL':
        t.type = 'LONG_LIT'
    t.value = _int_value(t.value)
    return t


def t_CHAR_LIT(t):
    r"'(?:[^'\\\n]|\\(?:u+[0-9a-fA-F]{4}|[0-7]{1,3}|.))'"
    t.value = _unescape(t.value[1:-1])
    return t


def t_STRING_LIT(t):
    r'"(?:[^"\\\n]|\\.)*"'
    t.value = _unescape(t.value[1:-1])
    return t


def t_ID(t):
    r'[A-Za-z_$][A-Za-z0-9_$]*'
    t.type = t.value.upper() if t.value in reserved else 'ID'
    return t


def t_newline(t):
    r'\n+'
    t.lexer.lineno += len(t.value)


def t_error(t):
    t.lexer.errors.append((t.lineno, t.lexpos, f"caractere ilegal '{t.value[0]}'"))
    t.lexer.skip(1)


lexer = lex.lex()


def find_column(data, lexpos):
    line_start = data.rfind('\n', 0, lexpos) + 1
    return lexpos - line_start + 1


def tokenize(data):
    """Devolve a lista de tokens de `data`.

    Os caracteres ilegais são todos recolhidos; o erro aponta o primeiro e a
    pista diz quantos mais existem.
    """
    lx = lexer.clone()
    lx.lineno = 1
    lx.errors = []
    lx.input(data)
    toks = list(lx)
    if lx.errors:
        line, lexpos, msg = lx.errors[0]
        others = len(lx.errors) - 1
        hint = f"mais {others} erro(s) léxico(s)" if others else None
        raise ParseError(msg, line=line, column=find_column(data, lexpos), hint=hint)
    return toks
