"""Static scope resolution. Walks the tree once, simulating the interpreter's scope nesting, and records for every
local variable reference how many scopes out its declaration lives. References left unrecorded are globals and
are looked up dynamically at run time.

Scopes are a stack of {name: ready} tables; the global scope is not on the stack. A name is declared (not ready)
before its initializer is resolved and defined (ready) after, which is how `var a = a;` is caught.
"""

from enum import Enum, auto

from wagago.core import ast


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    INITIALIZER = auto()
    METHOD = auto()


class ClassType(Enum):
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()


class Resolver:

    def __init__(self, interpreter, error_handler):
        self.interpreter = interpreter
        self.error_handler = error_handler

        self.scopes = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE

    def resolve(self, statements):
        for stmt in statements:
            self._resolve_stmt(stmt)

    # statements

    def _resolve_stmt(self, stmt):
        if isinstance(stmt, ast.Block):
            self._begin_scope()
            self.resolve(stmt.statements)
            self._end_scope()

        elif isinstance(stmt, ast.Var):
            self._declare(stmt.name)
            if stmt.initializer is not None:
                self._resolve_expr(stmt.initializer)
            self._define(stmt.name)

        elif isinstance(stmt, ast.Function):
            # defined before the body so the function can refer to itself recursively
            self._declare(stmt.name)
            self._define(stmt.name)
            self._resolve_function(stmt, FunctionType.FUNCTION)

        elif isinstance(stmt, ast.Class):
            self._resolve_class(stmt)

        elif isinstance(stmt, ast.Module):
            self._declare(stmt.name)
            self._define(stmt.name)
            for member in stmt.members:
                self._resolve_function(member, FunctionType.FUNCTION)

        elif isinstance(stmt, (ast.Expression, ast.Print)):
            self._resolve_expr(stmt.expression)

        elif isinstance(stmt, ast.If):
            self._resolve_expr(stmt.condition)
            self._resolve_stmt(stmt.then_branch)
            if stmt.else_branch is not None:
                self._resolve_stmt(stmt.else_branch)

        elif isinstance(stmt, ast.While):
            self._resolve_expr(stmt.condition)
            self._resolve_stmt(stmt.body)

        elif isinstance(stmt, ast.Return):
            if self.current_function is FunctionType.NONE:
                self.error_handler.token_error(stmt.keyword, "Can't return from top-level code.")

            if stmt.value is not None:
                if self.current_function is FunctionType.INITIALIZER:
                    self.error_handler.token_error(stmt.keyword, "Can't return a value from an initializer.")
                self._resolve_expr(stmt.value)

        else:
            raise TypeError(f"unknown statement type: {type(stmt).__name__}")

    def _resolve_class(self, stmt):
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self._declare(stmt.name)
        self._define(stmt.name)

        if stmt.superclass is not None:
            if stmt.superclass.name.lexeme == stmt.name.lexeme:
                self.error_handler.token_error(stmt.superclass.name, "A class can't inherit from itself.")

            self.current_class = ClassType.SUBCLASS
            self._resolve_expr(stmt.superclass)

            self._begin_scope()
            self.scopes[-1]["super"] = True

        self._begin_scope()
        self.scopes[-1]["this"] = True

        for method in stmt.methods:
            kind = FunctionType.INITIALIZER if method.name.lexeme == "init" else FunctionType.METHOD
            self._resolve_function(method, kind)

        self._end_scope()
        if stmt.superclass is not None:
            self._end_scope()

        self.current_class = enclosing_class

    def _resolve_function(self, function, kind):
        enclosing_function = self.current_function
        self.current_function = kind

        self._begin_scope()
        for param in function.params:
            self._declare(param)
            self._define(param)
        self.resolve(function.body)
        self._end_scope()

        self.current_function = enclosing_function

    # expressions

    def _resolve_expr(self, expr):
        if isinstance(expr, ast.Variable):
            if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False:
                self.error_handler.token_error(expr.name, "Can't read local variable in its own initializer.")
            self._resolve_local(expr, expr.name)

        elif isinstance(expr, ast.Assign):
            self._resolve_expr(expr.value)
            self._resolve_local(expr, expr.name)

        elif isinstance(expr, (ast.Binary, ast.Logical)):
            self._resolve_expr(expr.left)
            self._resolve_expr(expr.right)

        elif isinstance(expr, ast.Unary):
            self._resolve_expr(expr.right)

        elif isinstance(expr, ast.Grouping):
            self._resolve_expr(expr.expression)

        elif isinstance(expr, ast.Call):
            self._resolve_expr(expr.callee)
            for argument in expr.arguments:
                self._resolve_expr(argument)

        elif isinstance(expr, ast.Get):
            self._resolve_expr(expr.owner)

        elif isinstance(expr, ast.Set):
            self._resolve_expr(expr.value)
            self._resolve_expr(expr.owner)

        elif isinstance(expr, ast.This):
            if self.current_class is ClassType.NONE:
                self.error_handler.token_error(expr.keyword, "Can't use 'this' outside of a class.")
                return
            self._resolve_local(expr, expr.keyword)

        elif isinstance(expr, ast.Super):
            if self.current_class is ClassType.NONE:
                self.error_handler.token_error(expr.keyword, "Can't use 'super' outside of a class.")
            elif self.current_class is not ClassType.SUBCLASS:
                self.error_handler.token_error(expr.keyword, "Can't use 'super' in a class with no superclass.")
            self._resolve_local(expr, expr.keyword)

        elif isinstance(expr, ast.Literal):
            pass

        else:
            raise TypeError(f"unknown expression type: {type(expr).__name__}")

    # scopes

    def _begin_scope(self):
        self.scopes.append({})

    def _end_scope(self):
        self.scopes.pop()

    def _declare(self, name):
        if not self.scopes:
            return

        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.error_handler.token_error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def _define(self, name):
        if self.scopes:
            self.scopes[-1][name.lexeme] = True

    def _resolve_local(self, expr, name):
        """Records the distance from the innermost scope to the one declaring name; globals are left unrecorded."""
        for depth, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.interpreter.resolve(expr, depth)
                return
