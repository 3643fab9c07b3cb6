"""
Provider discovery - scans packages for ``@service_provider`` classes and
registers them.

Discovery runs once at startup, before the first ``load``. It is the only
writer the registry normally sees.
"""

import enum
import importlib
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Set, Type

from .config import SpinelConfig, load_config
from .decorators import ProviderDeclaration, get_declaration
from .diagnostics import DiagnosticEventType
from .faults import DiscoveryFault
from .registry import ServiceRegistry, get_default_registry

logger = logging.getLogger("spinel.discovery")


class PackageScanner:
    """
    Scanner for discovering classes in Python packages.

    Features:
    - Recursive package scanning with depth control
    - Module exclusion by dotted-name segment
    - Only classes defined in the scanned module (re-exports are skipped)
    - Strict mode: submodule import errors raise instead of being logged
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self._scan_stats = {
            "modules_scanned": 0,
            "classes_found": 0,
            "errors_encountered": 0,
        }

    def get_stats(self) -> Dict[str, Any]:
        """Get scanning statistics."""
        return self._scan_stats.copy()

    def scan_package(
        self,
        package_name: str,
        predicate: Optional[Callable[[Type], bool]] = None,
        recursive: bool = False,
        max_depth: int = 3,
        exclude: Sequence[str] = (),
    ) -> List[Type]:
        """
        Scan a package for classes matching criteria.

        Args:
            package_name: Dotted python path (e.g. 'myapp.plugins')
            predicate: Optional custom filter function
            recursive: Whether to scan subpackages
            max_depth: Maximum recursion depth for subpackages
            exclude: Module name segments to skip (e.g. 'tests')

        Returns:
            List of discovered classes, in module walk order

        Raises:
            DiscoveryFault: If the package itself cannot be imported, or a
                submodule fails to import in strict mode
        """
        try:
            module = importlib.import_module(package_name)
        except Exception as e:
            raise DiscoveryFault(package_name, f"{type(e).__name__}: {e}") from e

        discovered: List[Type] = []
        self._scan_module(module, discovered, predicate)

        if recursive and hasattr(module, "__path__") and max_depth > 0:
            seen: Set[str] = {module.__name__}
            for submodule in self._walk_submodules(module, module.__name__, max_depth, exclude, seen):
                self._scan_module(submodule, discovered, predicate)

        self._scan_stats["classes_found"] += len(discovered)
        return discovered

    def _walk_submodules(
        self,
        package: ModuleType,
        root: str,
        max_depth: int,
        exclude: Sequence[str],
        seen: Set[str],
        depth: int = 1,
    ) -> Iterable[ModuleType]:
        # Excluded and too-deep packages are never imported.
        for _, name, is_pkg in pkgutil.iter_modules(package.__path__, package.__name__ + "."):
            if name in seen:
                continue
            seen.add(name)

            relative = name[len(root) + 1:].split(".")
            if exclude and any(part in exclude for part in relative):
                logger.debug("Skipping excluded module %s", name)
                continue

            submodule = self._import_submodule(name)
            if submodule is None:
                continue
            yield submodule

            if is_pkg and depth < max_depth and hasattr(submodule, "__path__"):
                yield from self._walk_submodules(submodule, root, max_depth, exclude, seen, depth + 1)

    def _import_submodule(self, name: str) -> Optional[ModuleType]:
        try:
            return importlib.import_module(name)
        except Exception as e:
            self._scan_stats["errors_encountered"] += 1
            if self.strict:
                raise DiscoveryFault(name, f"{type(e).__name__}: {e}") from e
            logger.warning("Failed to import %s during discovery: %s", name, e)
            return None

    def _scan_module(
        self,
        module: ModuleType,
        discovered: List[Type],
        predicate: Optional[Callable[[Type], bool]],
    ) -> None:
        self._scan_stats["modules_scanned"] += 1
        for _, obj in inspect.getmembers(module, inspect.isclass):
            if obj.__module__ != module.__name__:
                continue
            if predicate and not predicate(obj):
                continue
            discovered.append(obj)


def is_discoverable(cls: Type) -> bool:
    """
    Whether a declared class can be registered as a provider.

    Abstract classes, protocols, enums and private classes (leading
    underscore) are skipped even when decorated.
    """
    if get_declaration(cls) is None:
        return False
    if inspect.isabstract(cls):
        return False
    if getattr(cls, "_is_protocol", False):
        return False
    if issubclass(cls, enum.Enum):
        return False
    if cls.__name__.startswith("_"):
        return False
    return True


class ProviderDiscovery:
    """
    Finds declared providers and registers them.

    Example:
        discovery = ProviderDiscovery(config=SpinelConfig(packages=["myapp.plugins"]))
        discovery.discover()
    """

    def __init__(
        self,
        registry: Optional[ServiceRegistry] = None,
        scanner: Optional[PackageScanner] = None,
        config: Optional[SpinelConfig] = None,
    ):
        self.config = config or SpinelConfig()
        self.registry = registry if registry is not None else get_default_registry()
        self.scanner = scanner or PackageScanner(strict=self.config.strict)

    def collect(self, packages: Optional[Sequence[str]] = None) -> List[ProviderDeclaration]:
        """
        Find provider declarations without registering them.

        Returns:
            Declarations sorted by fully-qualified class name, each class once

        Raises:
            InvalidDescriptorFault: If any declaration is malformed; raised
                before anything is registered
        """
        packages = list(packages if packages is not None else self.config.packages)
        found: Dict[str, ProviderDeclaration] = {}

        for package in packages:
            classes = self.scanner.scan_package(
                package,
                predicate=is_discoverable,
                recursive=self.config.recursive,
                max_depth=self.config.max_depth,
                exclude=self.config.exclude,
            )
            for cls in classes:
                declaration = get_declaration(cls)
                found.setdefault(declaration.name, declaration)

        declarations = [found[name] for name in sorted(found)]
        for declaration in declarations:
            declaration.validate()
        return declarations

    def discover(self, packages: Optional[Sequence[str]] = None) -> List[ProviderDeclaration]:
        """
        Find provider declarations and register each one.

        Returns:
            The registered declarations
        """
        declarations = self.collect(packages)

        for declaration in declarations:
            logger.info(
                "%s --> singleton = %s",
                declaration.name, declaration.singleton,
            )
            for service, priority in zip(declaration.services, declaration.priorities):
                logger.info("    %s priority = %d", service.__qualname__, priority)
            declaration.register(self.registry)

        self.registry.diagnostics.emit(
            DiagnosticEventType.DISCOVERY,
            count=len(declarations),
            metadata={"packages": list(packages if packages is not None else self.config.packages)},
        )
        return declarations


def bootstrap(
    config: Optional[SpinelConfig] = None,
    registry: Optional[ServiceRegistry] = None,
    *,
    configure_logging: bool = False,
) -> List[ProviderDeclaration]:
    """
    Load configuration (when not given) and run discovery.

    Args:
        config: Discovery settings; loaded from files/environment if None
        registry: Target registry (defaults to the process-wide one)
        configure_logging: Call logging.basicConfig with config.log_level

    Returns:
        The registered declarations
    """
    config = config or load_config()

    if configure_logging:
        logging.basicConfig(
            level=getattr(logging, config.log_level.upper(), logging.WARNING),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    return ProviderDiscovery(registry=registry, config=config).discover()
