"""Abstract syntax tree for the wagago language.

Nodes are immutable and compare/hash by identity (eq=False): the Resolver keys its binding-distance table on the
expression node itself, so two syntactically identical expressions at different source positions stay distinct.
"""

from dataclasses import dataclass, fields

from wagago.core.tokens import Token


class Expr:
    """Superclass of every expression node."""


class Stmt:
    """Superclass of every statement node."""


node = dataclass(frozen=True, eq=False)


# expressions

@node
class Literal(Expr):
    value: object


@node
class Grouping(Expr):
    expression: Expr


@node
class Unary(Expr):
    operator: Token
    right: Expr


@node
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@node
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@node
class Variable(Expr):
    name: Token


@node
class Assign(Expr):
    name: Token
    value: Expr


@node
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, locates call-site faults
    arguments: tuple


@node
class Get(Expr):
    owner: Expr
    name: Token


@node
class Set(Expr):
    owner: Expr
    name: Token
    value: Expr


@node
class This(Expr):
    keyword: Token


@node
class Super(Expr):
    keyword: Token
    method: Token


# statements

@node
class Block(Stmt):
    statements: tuple


@node
class Expression(Stmt):
    expression: Expr


@node
class Print(Stmt):
    expression: Expr


@node
class Var(Stmt):
    name: Token
    initializer: Expr = None


@node
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Stmt = None


@node
class While(Stmt):
    condition: Expr
    body: Stmt


@node
class Function(Stmt):
    name: Token
    params: tuple
    body: tuple


@node
class Return(Stmt):
    keyword: Token
    value: Expr = None


@node
class Class(Stmt):
    name: Token
    superclass: Variable
    methods: tuple


@node
class Module(Stmt):
    name: Token
    members: tuple


def display(tree, indents=0):
    """Recursively displays a node (or a list of statements) in a readable, indented format. Tokens show as their
    lexeme and literals as their repr. Diagnostic only: two trees of the same shape display identically.

    Format:
    <Node>(
        <field>=<Node>(...),
        <field>=[
            <Node>(...),
        ],
        <field>=<value>,
    )
    """
    pad = "    " * indents

    if isinstance(tree, (list, tuple)):
        if not tree:
            return "[]"
        items = "".join(f"{pad}    {display(item, indents + 1)},\n" for item in tree)
        return f"[\n{items}{pad}]"

    if isinstance(tree, Token):
        return tree.lexeme

    if not isinstance(tree, (Expr, Stmt)):
        return repr(tree)

    parts = [f"{pad}    {field.name}={display(getattr(tree, field.name), indents + 1)},\n" for field in fields(tree)]
    return f"{type(tree).__name__}(\n{''.join(parts)}{pad})"
