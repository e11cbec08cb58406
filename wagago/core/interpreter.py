"""Tree-walking evaluator for the wagago language. Expressions evaluate to exactly one value, statements execute for
effect. Values are None (nil), bool, float, str and the objects in wagago.core.runtime.

Variable references use the distances recorded by the Resolver; anything it left unrecorded is a global. A return
statement unwinds as a ReturnSignal to the nearest call and a runtime error as a RuntimeFault to interpret().
"""

import math
import sys

from wagago.core import ast, runtime
from wagago.core.environment import Environment
from wagago.core.tokens import TokenType
from wagago.lang.error import RuntimeFault


class Interpreter:
    # operators whose operands must both be numbers
    ARITHMETIC = {
        TokenType.MINUS: lambda left, right: left - right,
        TokenType.STAR: lambda left, right: left * right,
        TokenType.SLASH: lambda left, right: Interpreter.divide(left, right),
        TokenType.GREATER: lambda left, right: left > right,
        TokenType.GREATER_EQUAL: lambda left, right: left >= right,
        TokenType.LESS: lambda left, right: left < right,
        TokenType.LESS_EQUAL: lambda left, right: left <= right,
    }

    def __init__(self, error_handler=None, out=None):
        self.error_handler = error_handler
        self.out = out

        self.globals = Environment()
        self.environment = self.globals
        self.locals = {}  # expr node (by identity): binding distance

        self.globals.define("clock", runtime.Clock())

    def resolve(self, expr, depth):
        """Called by the Resolver for every local reference."""
        self.locals[expr] = depth

    def interpret(self, statements):
        """Executes statements in order. The first uncaught RuntimeFault stops execution and is reported; effects of
        statements that already ran are kept.
        """
        try:
            for stmt in statements:
                self.execute(stmt)
        except RuntimeFault as fault:
            if self.error_handler is None:
                raise
            self.error_handler.runtime_error(fault)

    def execute(self, stmt):
        if isinstance(stmt, ast.Expression):
            self.evaluate(stmt.expression)

        elif isinstance(stmt, ast.Print):
            value = self.evaluate(stmt.expression)
            print(self.stringify(value), file=self.out if self.out is not None else sys.stdout)

        elif isinstance(stmt, ast.Var):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer)
            self.environment.define(stmt.name.lexeme, value)

        elif isinstance(stmt, ast.Block):
            self.execute_block(stmt.statements, Environment(self.environment))

        elif isinstance(stmt, ast.If):
            if self.is_truthy(self.evaluate(stmt.condition)):
                self.execute(stmt.then_branch)
            elif stmt.else_branch is not None:
                self.execute(stmt.else_branch)

        elif isinstance(stmt, ast.While):
            while self.is_truthy(self.evaluate(stmt.condition)):
                self.execute(stmt.body)

        elif isinstance(stmt, ast.Function):
            self.environment.define(stmt.name.lexeme, runtime.Function(stmt, self.environment))

        elif isinstance(stmt, ast.Return):
            value = None
            if stmt.value is not None:
                value = self.evaluate(stmt.value)
            raise runtime.ReturnSignal(value)

        elif isinstance(stmt, ast.Class):
            self._execute_class(stmt)

        elif isinstance(stmt, ast.Module):
            members = {member.name.lexeme: runtime.Function(member, self.environment) for member in stmt.members}
            self.environment.define(stmt.name.lexeme, runtime.Module(stmt.name.lexeme, members))

        else:
            raise TypeError(f"unknown statement type: {type(stmt).__name__}")

    def execute_block(self, statements, environment):
        """Runs statements in environment, restoring the previous environment on every exit path."""
        previous = self.environment
        try:
            self.environment = environment
            for stmt in statements:
                self.execute(stmt)
        finally:
            self.environment = previous

    def _execute_class(self, stmt):
        # declared first so methods can refer to the class by name
        self.environment.define(stmt.name.lexeme, None)

        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, runtime.Class):
                raise RuntimeFault(stmt.superclass.name, "Superclass must be a class.")

            self.environment = Environment(self.environment)
            self.environment.define("super", superclass)

        methods = {}
        for method in stmt.methods:
            is_initializer = method.name.lexeme == "init"
            methods[method.name.lexeme] = runtime.Function(method, self.environment, is_initializer)

        klass = runtime.Class(stmt.name.lexeme, superclass, methods)

        if superclass is not None:
            self.environment = self.environment.enclosing

        self.environment.assign(stmt.name, klass)

    def evaluate(self, expr):
        if isinstance(expr, ast.Literal):
            return expr.value

        elif isinstance(expr, ast.Grouping):
            return self.evaluate(expr.expression)

        elif isinstance(expr, ast.Variable):
            return self._look_up_variable(expr.name, expr)

        elif isinstance(expr, ast.Assign):
            value = self.evaluate(expr.value)
            if expr in self.locals:
                self.environment.assign_at(self.locals[expr], expr.name, value)
            else:
                self.globals.assign(expr.name, value)
            return value

        elif isinstance(expr, ast.Unary):
            return self._evaluate_unary(expr)

        elif isinstance(expr, ast.Binary):
            return self._evaluate_binary(expr)

        elif isinstance(expr, ast.Logical):
            left = self.evaluate(expr.left)
            if expr.operator.kind is TokenType.OR:
                if self.is_truthy(left):
                    return left
            elif not self.is_truthy(left):
                return left
            return self.evaluate(expr.right)

        elif isinstance(expr, ast.Call):
            return self._evaluate_call(expr)

        elif isinstance(expr, ast.Get):
            owner = self.evaluate(expr.owner)
            if isinstance(owner, (runtime.Instance, runtime.Module)):
                return owner.get(expr.name)
            raise RuntimeFault(expr.name, "Only instances have properties.")

        elif isinstance(expr, ast.Set):
            owner = self.evaluate(expr.owner)
            if not isinstance(owner, runtime.Instance):
                raise RuntimeFault(expr.name, "Only instances have fields.")

            value = self.evaluate(expr.value)
            owner.set(expr.name, value)
            return value

        elif isinstance(expr, ast.This):
            return self._look_up_variable(expr.keyword, expr)

        elif isinstance(expr, ast.Super):
            return self._evaluate_super(expr)

        else:
            raise TypeError(f"unknown expression type: {type(expr).__name__}")

    def _look_up_variable(self, name, expr):
        if expr in self.locals:
            return self.environment.get_at(self.locals[expr], name.lexeme)
        return self.globals.get(name)

    def _evaluate_unary(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.kind is TokenType.MINUS:
            if not self.is_number(right):
                raise RuntimeFault(expr.operator, "Operand must be a number.")
            return -right

        return not self.is_truthy(right)

    def _evaluate_binary(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        kind = expr.operator.kind

        if kind is TokenType.PLUS:
            if self.is_number(left) and self.is_number(right):
                return left + right
            if isinstance(left, str) or isinstance(right, str):
                return self.stringify(left) + self.stringify(right)
            raise RuntimeFault(expr.operator, "Operands must be two numbers or two strings.")

        if kind is TokenType.EQUAL_EQUAL:
            return self.is_equal(left, right)
        if kind is TokenType.BANG_EQUAL:
            return not self.is_equal(left, right)

        if not (self.is_number(left) and self.is_number(right)):
            raise RuntimeFault(expr.operator, "Operands must be numbers.")
        return Interpreter.ARITHMETIC[kind](left, right)

    def _evaluate_call(self, expr):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, runtime.Callable):
            raise RuntimeFault(expr.paren, "Can only call functions and classes.")

        if len(arguments) != callee.arity():
            raise RuntimeFault(expr.paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")

        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise RuntimeFault(expr.paren, "Stack overflow.") from None

    def _evaluate_super(self, expr):
        distance = self.locals[expr]
        superclass = self.environment.get_at(distance, "super")
        # the "this" scope is always directly inside the "super" scope
        instance = self.environment.get_at(distance - 1, "this")

        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise RuntimeFault(expr.method, f"Undefined property '{expr.method.lexeme}'.")
        return method.bind(instance)

    @staticmethod
    def divide(left, right):
        """IEEE-754 division: dividing by zero gives an infinity or nan instead of raising."""
        if right == 0:
            if left == 0 or math.isnan(left):
                return math.nan
            return math.copysign(math.inf, left) * math.copysign(1.0, right)
        return left / right

    @staticmethod
    def is_number(value):
        # bool is an int subclass, but wagago numbers are always floats
        return isinstance(value, float)

    @staticmethod
    def is_truthy(value):
        """nil and false are falsy, everything else (including 0 and "") is truthy."""
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        return True

    @staticmethod
    def is_equal(left, right):
        """Value equality without coercion: values of different types are never equal."""
        return type(left) is type(right) and left == right

    @staticmethod
    def stringify(value):
        if value is None:
            return "nil"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float):
            text = str(value)
            return text[:-2] if text.endswith(".0") else text
        return str(value)
