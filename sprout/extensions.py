"""
Sprout extensions: setup/teardown units ordered by their dependencies.

Overview
- Extension: name, dependencies (names of extensions that must finish setup
  first), setup(context) and an optional teardown(context). Both callables
  may be sync or async.
- toposort(extensions): Kahn's algorithm. Edges to names outside the given
  set are dropped (they are assumed to be satisfied elsewhere). Ties keep
  declaration order. A cycle raises ExtensionCycleError naming every
  extension that could not be ordered.

Example
    database = Extension("database", setup=connect, teardown=disconnect)
    cache = Extension("cache", setup=warm, dependencies=("database",))
    toposort([cache, database])  # -> [database, cache]
"""
from collections import deque
from collections.abc import Iterable

from .faults import ExtensionCycleError, PluginValidationError
from .utils import *


class Extension(metaclass=DeclarationType):
    """
    Immutable extension declaration (ExtensionConfig).
    """

    __introspectable__ = (
        "name",
        "setup",
        "teardown",
        "dependencies",
        "descr",
    )
    __displayable__ = (
        "name",
        "dependencies",
        "descr",
    )

    def __new__(cls, name, /, setup, teardown=None, *, dependencies=(), descr=Unset):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} 'name' cannot be empty")

        if not callable(setup):
            raise TypeError(f"{cls.__typename__} 'setup' must be callable")
        if teardown is not None and not callable(teardown):
            raise TypeError(f"{cls.__typename__} 'teardown' must be callable")

        if isinstance(dependencies, str) or not isinstance(dependencies, Iterable):
            raise TypeError(f"{cls.__typename__} 'dependencies' must be an iterable of names")
        dependencies = tuple(dict.fromkeys(dependencies))
        if not all(isinstance(dependency, str) and dependency for dependency in dependencies):
            raise TypeError(f"{cls.__typename__} 'dependencies' must contain only non-empty strings")

        if not isinstance(descr, str | Unset):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")

        self = super().__new__(cls)
        self._name = name
        self._setup = setup
        self._teardown = teardown
        self._dependencies = dependencies
        self._descr = coalesce(descr)
        return self


def extension(source=Unset, /, **metadata):
    """
    Decorator form: the decorated function becomes the setup.

        @extension(dependencies=("database",))
        async def cache(context): ...

    The extension is named after the function unless `name` is given.
    """
    @rename("extension")
    def wrapper(setup, /):
        if not callable(setup):
            raise TypeError("@extension() must be applied to a callable")
        options = dict(metadata)
        name = options.pop("name", Unset)
        if name is Unset:
            name = getattr(setup, "__name__", "").strip("_").replace("_", "-")
        return Extension(name, setup, **options)

    return wrapper(source) if source is not Unset else wrapper


def toposort(extensions, /):
    """
    Order extensions so that each runs after its present dependencies.

    Algorithm (Kahn)
    - in-degree of a node = number of its dependencies present in the set.
    - seed a FIFO queue with zero in-degree nodes in declaration order.
    - pop, emit, decrement dependents (visited in declaration order), and
      enqueue the ones that reach zero.

    Raises
    - PluginValidationError: two extensions share a name.
    - ExtensionCycleError: some nodes never reach zero in-degree; the error
      lists them in declaration order.
    """
    extensions = list(extensions)
    nodes = {}
    for extension in extensions:
        if extension.name in nodes:
            raise PluginValidationError(
                f'Duplicate extension name "{extension.name}". Each extension must have a unique name.',
                hint="rename one of the extensions",
            )
        nodes[extension.name] = extension

    degree = dict.fromkeys(nodes, 0)
    dependents = {name: [] for name in nodes}
    for extension in extensions:
        for dependency in extension.dependencies:
            if dependency in nodes:
                degree[extension.name] += 1
                dependents[dependency].append(extension.name)

    queue = deque(name for name, count in degree.items() if count == 0)
    order = []
    while queue:
        name = queue.popleft()
        order.append(nodes[name])
        for dependent in dependents[name]:
            degree[dependent] -= 1
            if degree[dependent] == 0:
                queue.append(dependent)

    if len(order) != len(extensions):
        raise ExtensionCycleError(extensions=[name for name, count in degree.items() if count > 0])

    return order


__all__ = (
    "Extension",
    "extension",
    "toposort",
)
