"""Type-based dispatch for tree walkers.

A ``TypeDispatcher`` subclass declares one handler per node class with
``@dispatch(SomeClass, OtherClass)`` and a fallback with
``@defaultdispatch``. Calling the dispatcher instance with a node selects
the handler from the node's runtime type, searching the MRO once per type
and caching the answer.

The front-end uses this to map Python ``ast`` classes onto the closed set
of syntax kinds and statement handlers without long ``isinstance`` chains.
"""

__all__ = [
    "TypeDispatcher",
    "defaultdispatch",
    "dispatch",
    "TypeDispatchError",
    "TypeDispatchDeclarationError",
]

import inspect


class TypeDispatchError(Exception):
    """Raised when a dispatcher is called with a type it cannot handle."""
    pass


class TypeDispatchDeclarationError(Exception):
    """
    Raised while a dispatcher class is being defined if:
    - a type has more than one handler
    - no default handler is available
    - a non-type object is passed to ``@dispatch``
    """
    pass


def flattenTypesInto(l, result):
    for child in l:
        if isinstance(child, (list, tuple)):
            flattenTypesInto(child, result)
        else:
            if not isinstance(child, type):
                raise TypeDispatchDeclarationError(
                    "Expected a type, got %r instead." % child
                )
            result.append(child)


def dispatch(*types):
    """Mark a method as the handler for ``types``.

    Types may be given individually or as nested tuples/lists, so a
    module-level tuple such as ``LOOP_NODES`` can be reused directly.
    """
    def dispatchF(f):
        def dispatchWrap(*args, **kargs):
            return f(*args, **kargs)

        dispatchWrap.__original__ = f
        dispatchWrap.__dispatch__ = []
        flattenTypesInto(types, dispatchWrap.__dispatch__)
        return dispatchWrap

    return dispatchF


def defaultdispatch(f):
    """Mark a method as the fallback handler."""
    def defaultWrap(*args, **kargs):
        return f(*args, **kargs)

    defaultWrap.__original__ = f
    defaultWrap.__dispatch__ = (None,)
    return defaultWrap


def dispatch__call__(self, node, *args):
    t = type(node)
    table = self.__typeDispatchTable__

    func = table.get(t)

    if func is None:
        # Only happens once per concrete type, the result is cached below.
        for supercls in t.mro():
            func = table.get(supercls)
            if func is not None:
                break

        if func is None:
            func = table.get(None)

        table[t] = func

    return func(self, node, *args)


def exceptionDefault(self, node, *args):
    raise TypeDispatchError("%r cannot handle %r\n%r" % (type(self), type(node), node))


def inlineAncestor(t, lut):
    # Handlers declared by a subclass take precedence over inherited ones.
    if hasattr(t, "__typeDispatchTable__"):
        for k, v in t.__typeDispatchTable__.items():
            if k not in lut:
                lut[k] = v


class typedispatcher(type):
    """
    Metaclass that collects ``@dispatch``/``@defaultdispatch`` methods into
    ``__typeDispatchTable__`` (type -> unwrapped function), inheriting the
    tables of base classes.
    """
    def __new__(self, name, bases, d):
        lut = {}
        restore = {}

        for k, v in d.items():
            if hasattr(v, "__dispatch__") and hasattr(v, "__original__"):
                original = v.__original__

                for t in v.__dispatch__:
                    if t in lut:
                        raise TypeDispatchDeclarationError(
                            "%s has declared with multiple handlers for type %s"
                            % (name, t.__name__)
                        )
                    lut[t] = original

                restore[k] = original

        # Methods stay callable directly, without the wrapper.
        d.update(restore)

        for base in bases:
            for t in inspect.getmro(base):
                inlineAncestor(t, lut)

        if None not in lut:
            raise TypeDispatchDeclarationError("%s has no default dispatch" % (name,))

        d["__typeDispatchTable__"] = lut

        return type.__new__(self, name, bases, d)


class TypeDispatcher(object, metaclass=typedispatcher):
    """
    Base class for type-dispatched visitors.

    Example:
        >>> class Describe(TypeDispatcher):
        ...     @dispatch(int)
        ...     def visitInt(self, obj):
        ...         return "integer"
        ...     @defaultdispatch
        ...     def visitOther(self, obj):
        ...         return "other"
        >>> Describe()(42)
        'integer'
        >>> Describe()("42")
        'other'

    Subclasses that do not declare a ``@defaultdispatch`` inherit
    ``exceptionDefault``, which raises ``TypeDispatchError``.
    """
    __call__ = dispatch__call__
    exceptionDefault = defaultdispatch(exceptionDefault)
