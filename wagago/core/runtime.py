"""Runtime object model: the values a wagago program manipulates besides nil, booleans, numbers and strings."""

import time
from abc import ABC, abstractmethod

from wagago.core.environment import Environment
from wagago.lang.error import RuntimeFault


class ReturnSignal(Exception):
    """Non-local exit raised by a return statement and caught by the nearest enclosing call."""

    def __init__(self, value):
        super().__init__()
        self.value = value


class Callable(ABC):
    """Anything that can be invoked with an argument list: native functions, user functions and classes."""

    @abstractmethod
    def arity(self):
        """Number of arguments a call must supply."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Invokes self with already-evaluated arguments (len(arguments) == arity()) and returns the result."""


class Clock(Callable):
    """Native clock(): wall-clock time in seconds."""

    def arity(self):
        return 0

    def call(self, interpreter, arguments):
        return time.time()

    def __str__(self):
        return "<native fn>"


class Function(Callable):
    """User function or method: a declaration closed over the environment it was defined in."""

    def __init__(self, declaration, closure, is_initializer=False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    def bind(self, instance):
        """Returns this method with `this` bound to instance, one scope out from the call environment."""
        env = Environment(self.closure)
        env.define("this", instance)
        return Function(self.declaration, env, self.is_initializer)

    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, arguments):
        env = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            env.define(param.lexeme, argument)

        try:
            interpreter.execute_block(self.declaration.body, env)
        except ReturnSignal as signal:
            if self.is_initializer:
                return self.closure.get_at(0, "this")
            return signal.value

        if self.is_initializer:
            return self.closure.get_at(0, "this")
        return None

    def __str__(self):
        return f"<fn {self.declaration.name.lexeme}>"


class Class(Callable):
    """Single-inheritance class. Calling it constructs an Instance and runs its init method, if any."""

    def __init__(self, name, superclass, methods):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name):
        """Looks name up in this class, then along the superclass chain. Returns None if no class defines it."""
        klass = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def arity(self):
        initializer = self.find_method("init")
        return initializer.arity() if initializer is not None else 0

    def call(self, interpreter, arguments):
        instance = Instance(self)

        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)

        return instance

    def __str__(self):
        return self.name


class Instance:
    """An object created by calling a Class. Fields shadow methods on read; writes always go to fields."""

    def __init__(self, klass):
        self.klass = klass
        self.fields = {}

    def get(self, name):
        """name is the property Token."""
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise RuntimeFault(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name, value):
        self.fields[name.lexeme] = value

    def __str__(self):
        return f"{self.klass.name} instance"


class Module:
    """Flat namespace of functions declared by an inline import statement."""

    def __init__(self, name, members):
        self.name = name
        self.members = members

    def get(self, name):
        if name.lexeme in self.members:
            return self.members[name.lexeme]

        raise RuntimeFault(name, f"Undefined module function '{name.lexeme}'.")

    def __str__(self):
        return f"'{self.name}' module"
