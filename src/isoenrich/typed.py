"""Descriptors that validate attributes on assignment"""
import operator
from collections.abc import Iterable


class Descriptor:
    """Store a value in the instance ``__dict__`` under ``name``"""

    __slots__ = ("name", )

    def __init__(self, name):
        self.name = name

    def __get__(self, obj, objtype):
        if obj is None:
            return self
        return obj.__dict__[self.name]

    def __set__(self, obj, value):
        obj.__dict__[self.name] = value

    def _owner(self, obj):
        return "{}.{}".format(type(obj).__name__, self.name)


class TypedAttr(Descriptor):
    """Attribute restricted to instances of ``types``

    Booleans are rejected unless ``bool`` is one of ``types``, as
    they would otherwise pass for integers.
    """

    __slots__ = ("types", "allowNone")

    def __init__(self, name, types, allowNone=False):
        super().__init__(name)
        self.types = tuple(types) if isinstance(types, Iterable) else (types, )
        self.allowNone = bool(allowNone)

    def _isValid(self, value):
        if isinstance(value, bool) and bool not in self.types:
            return False
        return isinstance(value, self.types)

    def __set__(self, obj, value):
        if value is None:
            if not self.allowNone:
                raise TypeError("Cannot set {} to None".format(self._owner(obj)))
        elif not self._isValid(value):
            raise TypeError(
                "Cannot set {} to {}: expected {}".format(
                    self._owner(obj), value,
                    " or ".join(t.__name__ for t in self.types),
                )
            )
        super().__set__(obj, value)


class BoundedTyped(TypedAttr):
    """Typed attribute with inclusive or exclusive numeric bounds"""

    __slots__ = ("_limits", )

    def __init__(self, name, types, le=None, lt=None, ge=None, gt=None, allowNone=False):
        assert (le, lt, ge, gt) != (None, None, None, None), (name, le, lt, ge, gt)
        assert le is None or lt is None, (name, le, lt)
        assert ge is None or gt is None, (name, ge, gt)
        super().__init__(name, types, allowNone=allowNone)
        # (bound, comparison that must hold, symbol for messages)
        self._limits = tuple(
            (bound, check, symbol) for bound, check, symbol in (
                (gt, operator.gt, ">"),
                (ge, operator.ge, ">="),
                (lt, operator.lt, "<"),
                (le, operator.le, "<="),
            ) if bound is not None
        )

    def __set__(self, obj, value):
        if value is not None and self._isValid(value):
            for bound, check, symbol in self._limits:
                if not check(value, bound):
                    raise ValueError(
                        "{} must be {} {}, not {}".format(
                            self._owner(obj), symbol, bound, value
                        )
                    )
        super().__set__(obj, value)
