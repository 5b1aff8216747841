from .anasin import parse, parse_expression, parse_statement, parse_statements
from .codegen_java import generate_java
from .desugar import convert_to_block, desugar, desugar_for_each_loops, desugar_for_loops
from .errors import CompilerError, InterpreterError, ParseError, TreeError
from .printer import AstPrinter, print_tree

__version__ = "0.1.0"
